"""Tests for configuration loading and saving."""

from pathlib import Path

import pytest

from theme_forge.config import Config, ForgeConfig, get_config, load_config, save_config


@pytest.fixture(autouse=True)
def reset_config():
    Config._instance = None
    yield
    Config._instance = None


class TestForgeConfig:
    """Test the configuration model."""

    def test_defaults(self):
        config = ForgeConfig(data_dir='/tmp/forge')
        assert config.themes_dir == str(Path('/tmp/forge') / 'themes')
        assert config.default_theme == 'default'
        assert config.default_formats == ['css', 'json']
        assert config.css_scope == ':root'
        assert config.max_workers == 1
        assert config.strict_resolution is False
        assert config.wcag_level == 'AA'
        assert config.dark_mode_intensity == 'moderate'
        assert config.log_level == 'WARNING'

    def test_user_paths_expanded(self):
        config = ForgeConfig()
        assert not config.data_dir.startswith('~')
        assert config.themes_dir.endswith('themes')

    def test_normalization(self):
        """Test enum-valued settings are normalized case-insensitively."""
        config = ForgeConfig(data_dir='/tmp/forge', wcag_level='aaa',
                             dark_mode_intensity='INTENSE', log_level='debug')
        assert config.wcag_level == 'AAA'
        assert config.dark_mode_intensity == 'intense'
        assert config.log_level == 'DEBUG'

    def test_invalid_values_fall_back(self):
        config = ForgeConfig(data_dir='/tmp/forge', wcag_level='AAAA', dark_mode_intensity='extreme')
        assert config.wcag_level == 'AA'
        assert config.dark_mode_intensity == 'moderate'

    @pytest.mark.parametrize("workers, expected", [(0, 1), (-3, 1), ('4', 4)])
    def test_max_workers_clamped(self, workers, expected):
        assert ForgeConfig(data_dir='/tmp/forge', max_workers=workers).max_workers == expected

    def test_yaml_round_trip(self, tmp_path):
        config = ForgeConfig(data_dir=str(tmp_path), default_formats=['scss'], strict_resolution=True)
        assert ForgeConfig.from_yaml(config.to_yaml()) == config

    def test_unknown_keys_ignored(self, caplog):
        config = ForgeConfig.from_yaml("css_scope: .app\ncolour: blue\n")
        assert config.css_scope == '.app'
        assert 'colour' in caplog.text

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError):
            ForgeConfig.from_yaml("- a\n- b\n")

    def test_paths(self, tmp_path):
        config = ForgeConfig(data_dir=str(tmp_path), output_dir=str(tmp_path / 'out'))
        assert config.get_config_path() == tmp_path / 'config.yaml'
        assert config.get_themes_path() == tmp_path / 'themes'
        assert config.get_output_path() == tmp_path / 'out'
        assert config.get_output_path('ocean') == tmp_path / 'out' / 'ocean'


class TestConfigManager:
    """Test loading, saving and reloading the global configuration."""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("default_theme: corporate\nmax_workers: 2\n", encoding='utf-8')
        config = load_config(path)
        assert config.default_theme == 'corporate'
        assert config.max_workers == 2
        assert get_config() is config

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / 'missing.yaml')
        assert config.default_theme == 'default'

    def test_broken_file_uses_defaults(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("default_theme: [", encoding='utf-8')
        assert load_config(path).default_theme == 'default'

    def test_load_returns_existing_instance(self, tmp_path):
        first = load_config(tmp_path / 'missing.yaml')
        assert load_config(tmp_path / 'other.yaml') is first

    def test_save_and_reload(self, tmp_path):
        """Test a saved configuration is picked up by reload."""
        path = tmp_path / 'nested' / 'config.yaml'
        config = ForgeConfig(data_dir=str(tmp_path), css_scope='.brand')
        save_config(config, path)
        assert path.exists()

        reloaded = Config.reload(path)
        assert reloaded.css_scope == '.brand'
        assert reloaded == config
