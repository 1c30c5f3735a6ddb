"""Tests for the theme registry and the theme engine."""

import json

import pytest
import yaml

from theme_forge.theme_engine import ThemeEngine
from theme_forge.theme_engine.registry import (
    CircularInheritanceError,
    ThemeRegistry,
    load_theme_file,
)
from theme_forge.theme_engine.errors import ThemeValidationError
from theme_forge.theme_engine.schema import CompiledTheme, ThemeConfig, WCAGLevel

PRESETS = ['agency', 'corporate', 'dark', 'default', 'ecommerce', 'education', 'finance',
           'healthcare', 'minimal', 'pastel', 'startup', 'tech', 'vibrant']


@pytest.fixture
def registry(tmp_path):
    return ThemeRegistry(tmp_path / "themes")


def write_theme(directory, name, data):
    path = directory / f"{name}.yaml"
    path.write_text(yaml.safe_dump(data), encoding='utf-8')
    return path


class TestLoadThemeFile:
    """Test reading theme files."""

    def test_yaml_and_json(self, tmp_path, theme_data):
        yaml_path = write_theme(tmp_path, 'a', theme_data)
        json_path = tmp_path / 'b.json'
        json_path.write_text(json.dumps(theme_data), encoding='utf-8')
        assert load_theme_file(yaml_path) == theme_data
        assert load_theme_file(json_path) == theme_data

    def test_malformed(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("colors: [unclosed", encoding='utf-8')
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_theme_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / 'list.yaml'
        path.write_text("- a\n- b\n", encoding='utf-8')
        with pytest.raises(ValueError, match="does not contain a mapping"):
            load_theme_file(path)

    def test_missing(self, tmp_path):
        with pytest.raises(ValueError):
            load_theme_file(tmp_path / 'nope.yaml')


class TestRegistry:
    """Test preset discovery, inheritance and user themes."""

    def test_presets_listed(self, registry):
        themes = registry.list_available_themes()
        assert [t['name'] for t in themes] == PRESETS
        assert all(t['type'] == 'builtin' for t in themes)
        assert not any(t.get('error') for t in themes)

    @pytest.mark.parametrize("name", PRESETS)
    def test_presets_load_and_validate(self, registry, name):
        """Test every preset loads and has no validation errors."""
        theme = registry.load_theme(name)
        assert isinstance(theme, ThemeConfig)
        assert not any(issue.startswith('[error]') for issue in registry.validate_theme(name))

    def test_inheritance(self, registry):
        """Test a preset inherits from default and keeps its own identity."""
        corporate = registry.load_theme_data('corporate')
        default = registry.load_theme_data('default')
        assert 'extends' not in corporate
        assert corporate['meta']['name'] == 'Corporate'
        assert corporate['colors']['primary'] == '#1e40af'
        assert corporate['typography']['scale'] == 1.15
        assert corporate['typography']['fontFamilyMono'] == default['typography']['fontFamilyMono']
        assert corporate['colors']['link'] == 'colors.primary'
        assert corporate['meta']['description'].startswith('Conservative')

    def test_agency_dark_mode_merges_with_parent(self, registry):
        """Test a preset's dark overrides are layered onto the inherited dark section."""
        agency = registry.load_theme_data('agency')
        assert agency['darkMode']['colors']['primary'] == '#f472b6'
        assert agency['darkMode']['colors']['success'] == '#34d399'
        assert set(agency['cards']) >= {'basic', 'ghost', 'interactive', 'elevated'}

    def test_parent_identity_not_inherited(self, registry):
        registry.save_user_theme(ThemeConfig.from_dict({
            'meta': {'name': 'Child'}, 'colors': registry.load_theme_data('default')['colors'],
            'typography': {'fontFamily': 'serif'},
        }), 'child')
        path = registry.user_themes_dir / 'child.yaml'
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
        del data['meta']['name']
        data['extends'] = 'default'
        path.write_text(yaml.safe_dump(data), encoding='utf-8')
        registry.clear_cache()
        assert registry.load_theme_data('child')['meta']['name'] == 'Child'
        assert 'description' not in registry.load_theme_data('child')['meta']

    def test_circular_inheritance(self, registry):
        write_theme(registry.user_themes_dir, 'loop-a', {'extends': 'loop-b', 'meta': {'name': 'A'}})
        write_theme(registry.user_themes_dir, 'loop-b', {'extends': 'loop-a', 'meta': {'name': 'B'}})
        registry._scan_user_themes()
        with pytest.raises(CircularInheritanceError) as exc_info:
            registry.load_theme_data('loop-a')
        assert exc_info.value.chain == ['loop-a', 'loop-b', 'loop-a']

    def test_missing_parent(self, registry):
        write_theme(registry.user_themes_dir, 'orphan', {'extends': 'nowhere'})
        registry._scan_user_themes()
        with pytest.raises(FileNotFoundError):
            registry.load_theme_data('orphan')

    def test_data_is_copied(self, registry):
        data = registry.load_theme_data('default')
        data['colors']['primary'] = '#000000'
        assert registry.load_theme_data('default')['colors']['primary'] == '#2563eb'

    def test_save_and_delete_user_theme(self, registry, theme):
        path = registry.save_user_theme(theme)
        assert path.name == 'test-theme.yaml'
        assert registry.theme_exists('test-theme')
        assert registry.load_theme('test-theme') == theme
        assert 'test-theme' in [t['name'] for t in registry.list_available_themes()]

        with pytest.raises(FileExistsError):
            registry.save_user_theme(theme)
        registry.save_user_theme(theme, overwrite=True)

        assert registry.delete_user_theme('test-theme')
        assert not registry.theme_exists('test-theme')
        assert not registry.delete_user_theme('test-theme')

    def test_saved_file_is_plain_yaml(self, registry, theme):
        """Test defaulted enum fields are written as their string values."""
        path = registry.save_user_theme(theme)
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
        assert data['borders']['defaultStyle'] == 'solid'

    def test_user_theme_shadows_preset(self, registry, theme):
        registry.save_user_theme(theme, 'minimal')
        assert registry.load_theme('minimal').meta.name == 'Test Theme'
        assert [t['name'] for t in registry.list_available_themes()].count('minimal') == 1

    def test_presets_by_tag(self, registry):
        assert registry.get_presets_by_tag('Wellness') == ['healthcare', 'pastel']
        assert registry.get_presets_by_tag('nothing') == []

    def test_theme_info(self, registry):
        info = registry.get_theme_info('corporate')
        assert info['display_name'] == 'Corporate'
        assert info['extends'] == 'default'
        assert info['type'] == 'builtin'
        assert info['colors']['primary'] == '#1e40af'

    def test_theme_info_missing(self, registry):
        assert 'error' in registry.get_theme_info('nope')

    def test_broken_user_theme_listed_with_error(self, registry):
        (registry.user_themes_dir / 'broken.yaml').write_text("a: [", encoding='utf-8')
        registry._scan_user_themes()
        broken = next(t for t in registry.list_available_themes() if t['name'] == 'broken')
        assert broken['error']
        assert broken['type'] == 'user'

    def test_default_theme_name(self, registry):
        assert registry.get_default_theme_name() == 'default'


class TestEngine:
    """Test loading, compiling and writing through the engine."""

    @pytest.fixture
    def engine(self, forge_config):
        return ThemeEngine(forge_config)

    def test_uses_configured_themes_dir(self, engine, forge_config):
        assert str(engine.registry.user_themes_dir) == forge_config.themes_dir

    def test_load_by_name_and_path(self, engine, tmp_path, theme_data):
        assert engine.load_theme('default').meta.name == 'Default'
        path = write_theme(tmp_path, 'from-file', theme_data)
        assert engine.load_theme(str(path)).meta.name == 'Test Theme'

    def test_file_inheritance(self, engine, tmp_path):
        path = write_theme(tmp_path, 'brand', {'extends': 'default', 'colors': {'primary': '#ff0000'}})
        theme = engine.load_theme(str(path))
        assert theme.colors.primary == '#ff0000'
        assert theme.meta.name == 'Brand'

    def test_load_missing(self, engine):
        with pytest.raises(ValueError, match="Failed to load theme 'nope'"):
            engine.load_theme('nope')

    def test_load_is_cached(self, engine):
        assert engine.load_theme('default') is engine.load_theme('default')

    def test_variant_and_overrides(self, engine):
        theme = engine.load_theme('default', variant='high-contrast', overrides={'colors.primary': '#111111'})
        assert theme.colors.primary == '#111111'
        assert theme.meta.name == 'Default-high-contrast'

    def test_compile_cache(self, engine, theme_data):
        """Test equal content compiles once."""
        first = engine.compile(theme_data)
        assert isinstance(first, CompiledTheme)
        assert engine.compile(dict(theme_data)) is first
        assert engine.compile(ThemeConfig.from_dict(theme_data)) is not None
        engine.clear_cache()
        assert engine.compile(theme_data) is not first

    def test_strict_default_from_config(self, forge_config, theme_data):
        theme_data['colors']['link'] = 'colors.missing'
        forge_config.strict_resolution = True
        with pytest.raises(ThemeValidationError):
            ThemeEngine(forge_config).compile(theme_data)
        assert ThemeEngine(forge_config).compile(theme_data, strict=False)

    def test_generate_uses_scope(self, forge_config):
        forge_config.css_scope = '.brand'
        assert ThemeEngine(forge_config).generate('default', 'css').startswith('.brand {')

    def test_generate_all_and_write(self, engine, tmp_path):
        outputs = engine.generate_all('default', formats=['css', 'json'])
        written = engine.write_outputs(outputs, tmp_path / 'out')
        assert [p.name for p in written] == ['default-theme.css', 'default-theme.json']
        assert written[0].read_text(encoding='utf-8') == outputs[0].content

    def test_write_defaults_to_output_dir(self, engine, forge_config):
        written = engine.write_outputs(engine.generate_all('default', formats=['yaml']))
        assert written[0].parent == forge_config.get_output_path()

    def test_validate_raw_record(self, engine, theme_data):
        theme_data['colors']['primary'] = 'bogus'
        assert any(issue.is_error for issue in engine.validate(theme_data))
        assert not any(issue.is_error for issue in engine.validate('default'))

    def test_audit_level_from_config(self, forge_config, theme_data):
        forge_config.wcag_level = 'AAA'
        result = ThemeEngine(forge_config).audit(theme_data)
        assert WCAGLevel(result.level) == WCAGLevel.AAA

    def test_dark_mode(self, engine, theme_data):
        theme = engine.dark_mode(theme_data)
        assert theme.dark_mode_enabled
