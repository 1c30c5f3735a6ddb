"""Tests for the command-line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from theme_forge.cli.main import main


@pytest.fixture
def run(config_file):
    """Invoke the CLI against the isolated configuration."""
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(main, ['--config', str(config_file), *args])
    return invoke


@pytest.fixture
def theme_file(tmp_path, theme_data):
    path = tmp_path / 'fixture.yaml'
    path.write_text(yaml.safe_dump(theme_data), encoding='utf-8')
    return path


class TestThemeCommands:
    """Test listing, inspecting, validating and auditing themes."""

    def test_list(self, run):
        result = run('list')
        assert result.exit_code == 0, result.output
        assert 'corporate' in result.output
        assert 'vibrant' in result.output

    def test_list_by_tag(self, run):
        result = run('list', '--tag', 'wellness')
        assert result.exit_code == 0
        assert 'pastel' in result.output
        assert 'corporate' not in result.output

    def test_info(self, run):
        result = run('info', 'default')
        assert result.exit_code == 0, result.output
        assert '#2563eb' in result.output

    def test_info_missing_theme(self, run):
        assert run('info', 'nope').exit_code == 1

    def test_validate_preset(self, run):
        result = run('validate', 'default')
        assert result.exit_code == 0, result.output

    def test_validate_file_with_errors(self, run, tmp_path, theme_data):
        theme_data['colors']['primary'] = 'notacolor'
        path = tmp_path / 'bad.yaml'
        path.write_text(yaml.safe_dump(theme_data), encoding='utf-8')
        result = run('validate', str(path))
        assert result.exit_code == 1
        assert 'error' in result.output

    def test_validate_missing_theme(self, run):
        result = run('validate', 'does-not-exist')
        assert result.exit_code == 1
        assert 'not found' in result.output

    def test_audit(self, run, theme_file):
        result = run('audit', str(theme_file))
        assert result.exit_code == 0, result.output
        assert 'PASSED' in result.output

    def test_audit_strict_failure(self, run, tmp_path, theme_data):
        theme_data['colors']['text'] = '#cccccc'
        path = tmp_path / 'weak.yaml'
        path.write_text(yaml.safe_dump(theme_data), encoding='utf-8')
        assert run('audit', str(path)).exit_code == 0
        result = run('audit', str(path), '--strict')
        assert result.exit_code == 1
        assert 'FAILED' in result.output

    def test_dark_mode_prints_theme(self, run, theme_file):
        result = run('dark-mode', str(theme_file))
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.stdout)
        assert data['darkMode']['enabled'] is True

    def test_dark_mode_to_file(self, run, theme_file, tmp_path):
        target = tmp_path / 'dark' / 'fixture-dark.yaml'
        result = run('dark-mode', str(theme_file), '--intensity', 'intense', '-o', str(target))
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(target.read_text(encoding='utf-8'))['darkMode']['colors']


class TestColorCommands:
    """Test the color utilities."""

    def test_contrast(self, run):
        result = run('contrast', '#000000', '#ffffff')
        assert result.exit_code == 0, result.output
        assert '21' in result.output

    def test_contrast_fix(self, run):
        result = run('contrast', '#999999', '#ffffff', '--fix')
        assert result.exit_code == 0, result.output
        assert 'Suggested foreground' in result.output

    def test_contrast_bad_color(self, run):
        assert run('contrast', 'nope', '#ffffff').exit_code == 1
        assert run('contrast', 'add', '#ffffff').exit_code == 1
        assert run('palette', 'bee').exit_code == 1

    def test_simulate(self, run):
        result = run('simulate', '#ff0000')
        assert result.exit_code == 0, result.output
        assert 'protanopia' in result.output

    def test_palette(self, run):
        result = run('palette', '#2563eb', '--steps', '5')
        assert result.exit_code == 0, result.output


class TestOutputCommands:
    """Test generation and import."""

    def test_formats(self, run):
        result = run('formats')
        assert result.exit_code == 0
        assert 'tailwind' in result.output

    def test_generate_to_directory(self, run, tmp_path):
        out_dir = tmp_path / 'generated'
        result = run('generate', 'default', '-o', str(out_dir), '-f', 'css', '-f', 'json')
        assert result.exit_code == 0, result.output
        assert (out_dir / 'default-theme.css').read_text(encoding='utf-8').startswith(':root {')
        assert json.loads((out_dir / 'default-theme.json').read_text(encoding='utf-8'))['meta']

    def test_generate_default_formats(self, run, forge_config):
        """Test configured formats and output directory are used."""
        result = run('generate', 'default')
        assert result.exit_code == 0, result.output
        written = sorted(p.name for p in forge_config.get_output_path('default').iterdir())
        assert written == ['default-theme.css', 'default-theme.json']

    def test_generate_stdout(self, run, theme_file):
        result = run('generate', str(theme_file), '-f', 'css', '--stdout')
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith(':root {')
        assert '--theme-color-primary: #2563eb;' in result.output

    def test_generate_strict(self, run, tmp_path, theme_data):
        theme_data['colors']['link'] = 'colors.missing'
        path = tmp_path / 'dangling.yaml'
        path.write_text(yaml.safe_dump(theme_data), encoding='utf-8')
        assert run('generate', str(path), '-f', 'css', '--stdout').exit_code == 0
        assert run('generate', str(path), '-f', 'css', '--stdout', '--strict').exit_code == 1

    def test_generate_missing_theme(self, run):
        result = run('generate', 'nope')
        assert result.exit_code == 1
        assert 'Error generating theme' in result.output

    def test_import_generated_css(self, run, tmp_path):
        """Test a generated stylesheet imports back as a theme."""
        out_dir = tmp_path / 'generated'
        run('generate', 'default', '-o', str(out_dir), '-f', 'css')
        target = tmp_path / 'imported.yaml'
        result = run('import', str(out_dir / 'default-theme.css'), '-o', str(target))
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(target.read_text(encoding='utf-8'))
        assert data['colors']['primary'] == '#2563eb'

    def test_import_and_save(self, run, tmp_path, theme_data):
        path = tmp_path / 'theme.json'
        path.write_text(json.dumps(theme_data), encoding='utf-8')
        assert run('import', str(path), '--save', 'mine').exit_code == 0
        assert run('import', str(path), '--save', 'mine').exit_code == 1
        assert run('import', str(path), '--save', 'mine', '--force').exit_code == 0
        assert 'mine' in run('list').output

    def test_import_tailwind_to_stdout(self, run, tmp_path):
        path = tmp_path / 'tailwind.config.js'
        path.write_text("module.exports = { theme: { colors: { primary: '#123456' } } };", encoding='utf-8')
        result = run('import', str(path))
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.stdout)
        assert data['colors']['primary'] == '#123456'
        assert data['borders']['defaultStyle'] == 'solid'

    def test_import_nothing(self, run, tmp_path):
        path = tmp_path / 'empty.css'
        path.write_text("body { color: red; }", encoding='utf-8')
        assert run('import', str(path)).exit_code == 1


class TestMain:
    """Test the group options."""

    def test_version(self, run):
        result = run('--version')
        assert result.exit_code == 0
        assert 'theme-forge' in result.output

    def test_broken_config_falls_back(self, tmp_path, forge_config):
        path = tmp_path / 'config.yaml'
        path.write_text("max_workers: [", encoding='utf-8')
        result = CliRunner().invoke(main, ['--config', str(path), 'formats'])
        assert result.exit_code == 0
