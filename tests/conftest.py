"""Pytest configuration and shared fixtures."""

import sys
import copy
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from theme_forge.config import Config, ForgeConfig  # noqa: E402
from theme_forge.theme_engine import ThemeConfig, compile_theme  # noqa: E402


BASE_THEME = {
    'meta': {'name': 'Test Theme', 'version': '1.2.0', 'description': 'Fixture theme'},
    'colors': {
        'primary': '#2563eb',
        'secondary': '#7c3aed',
        'surface': '#ffffff',
        'surfaceSecondary': '#f8fafc',
        'surfaceHover': '#f1f5f9',
        'text': '#0f172a',
        'textSecondary': '#475569',
        'textMuted': '#64748b',
        'border': '#767f8c',
        'borderStrong': '#94a3b8',
        'borderSubtle': '#f1f5f9',
        'success': '#15803d',
        'warning': '#b45309',
        'error': '#dc2626',
        'info': '#0369a1',
        'link': 'colors.primary',
    },
    'typography': {
        'fontFamily': 'Inter, sans-serif',
        'fontFamilyHeading': '"Playfair Display", serif',
        'baseSize': 16,
        'scale': 1.25,
    },
    'spacing': {'baseUnit': 4},
    'borders': {'thin': 1, 'default': 2, 'thick': 4, 'radiusSubtle': 6, 'radiusRelaxed': 12},
    'buttons': {
        'primary': {'background': 'colors.primary', 'text': '#ffffff', 'border': 'colors.primary'},
    },
    'cards': {
        'basic': {'background': 'colors.surface', 'border': 'colors.border', 'borderWidth': 'borders.thin'},
    },
}


@pytest.fixture
def theme_data():
    """A complete theme record; each test gets its own copy."""
    return copy.deepcopy(BASE_THEME)


@pytest.fixture
def theme(theme_data):
    return ThemeConfig.from_dict(theme_data)


@pytest.fixture
def compiled(theme_data):
    return compile_theme(theme_data)


@pytest.fixture
def dark_theme_data(theme_data):
    """The fixture theme with an explicit dark mode."""
    theme_data['darkMode'] = {
        'enabled': True,
        'colors': {
            'surface': '#0f172a',
            'surfaceSecondary': '#1e293b',
            'text': '#f8fafc',
            'primary': '#60a5fa',
        },
        'cards': {'basic': {'background': 'colors.surface'}},
    }
    return theme_data


@pytest.fixture
def forge_config(tmp_path):
    """An isolated configuration installed as the global one."""
    config = ForgeConfig(data_dir=str(tmp_path / "data"), output_dir=str(tmp_path / "out"))
    Config._instance = config
    yield config
    Config._instance = None


@pytest.fixture
def config_file(tmp_path, forge_config):
    """Config file pointing every directory into tmp_path."""
    path = tmp_path / "config.yaml"
    path.write_text(forge_config.to_yaml(), encoding='utf-8')
    return path
