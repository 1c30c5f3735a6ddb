"""Tests for the theme importers."""

import json

import pytest

from theme_forge.generators import generate
from theme_forge.importers import (
    auto_import,
    detect_format,
    import_from_css,
    import_from_figma,
    import_from_json,
    import_from_tailwind,
    js_config_to_dict,
    parse_css_variables,
)
from theme_forge.importers.base import parse_number
from theme_forge.theme_engine import compile_theme


def regenerate(content, importer, format_id):
    result = importer(content)
    assert result.success, result.errors
    return generate(compile_theme(result.theme), format_id)


class TestRoundTrips:
    """Test that generated files import back to the same output."""

    def test_css(self, compiled):
        css = generate(compiled, 'css')
        assert regenerate(css, import_from_css, 'css') == css

    def test_css_with_dark_mode(self, dark_theme_data):
        css = generate(compile_theme(dark_theme_data), 'css')
        assert regenerate(css, import_from_css, 'css') == css

    def test_json(self, compiled):
        content = generate(compiled, 'json')
        assert regenerate(content, import_from_json, 'json') == content

    def test_json_with_custom_values(self, theme_data):
        """Test explicit sizes and spacing survive the trip."""
        theme_data['typography']['sizes'] = {'xl': 24}
        theme_data['spacing'] = {'baseUnit': 4, 'values': {3: 10}}
        content = generate(compile_theme(theme_data), 'json')
        assert regenerate(content, import_from_json, 'json') == content

    def test_figma(self, compiled):
        content = generate(compiled, 'figma')
        result = import_from_figma(content)
        assert result.success
        assert result.theme.meta.name == 'Test Theme'
        assert compile_theme(result.theme).colors['surfaceSecondary'] == '#f8fafc'
        assert generate(compile_theme(result.theme), 'figma') == content


class TestCSSImporter:
    """Test reading stylesheets."""

    def test_parse_variables(self):
        declarations = parse_css_variables("--a: 1px; /* note */ --b-c: #fff;")
        assert declarations == [('a', '1px'), ('b-c', '#fff')]

    def test_escapes_undone(self):
        assert parse_css_variables(r"--x: a\3b b;") == [('x', 'a;b')]

    def test_generic_names(self):
        """Test hand-written unprefixed variables are mapped onto roles."""
        css = """
        :root {
          --brand: #ff5500;
          --background: #fafafa;
          --foreground: #111111;
          --font-sans: Inter, sans-serif;
          --spacing-2: 8px;
          --radius: 6px;
        }
        """
        result = import_from_css(css)
        assert result.success
        theme = result.theme
        assert theme.colors.primary == '#ff5500'
        assert theme.colors.surface == '#fafafa'
        assert theme.colors.text == '#111111'
        assert theme.typography.font_family == 'Inter, sans-serif'
        assert theme.borders.radius_subtle == 6
        assert any('Filled missing colors' in w for w in result.warnings)

    def test_unknown_theme_property_warns(self):
        result = import_from_css(":root { --theme-color-primary: #123456; --theme-shadow-lg: none; }")
        assert result.success
        assert "Unrecognized custom property --theme-shadow-lg" in result.warnings

    def test_non_color_skipped(self):
        result = import_from_css(":root { --theme-color-primary: url(x); }")
        assert any('colors.primary' in w for w in result.warnings)
        assert result.theme.colors.primary != 'url(x)'

    @pytest.mark.parametrize("css", ["", "   ", "body { color: red; }"])
    def test_nothing_to_import(self, css):
        result = import_from_css(css)
        assert not result.success
        assert result.theme is None
        assert result.errors


class TestJSONImporter:
    """Test reading JSON themes."""

    def test_theme_record(self, theme_data):
        result = import_from_json(json.dumps(theme_data))
        assert result.success
        assert result.warnings == []
        assert result.theme.colors.link == 'colors.primary'

    def test_loose_identity_keys(self):
        result = import_from_json({'name': 'Loose', 'palette': {'primary': '#0000ff'}})
        assert result.theme.meta.name == 'Loose'
        assert result.theme.colors.primary == '#0000ff'

    def test_defaults_fill_only_required(self):
        """Test completion borrows required fields and nothing else."""
        result = import_from_json({'colors': {'primary': '#0000ff'}})
        assert result.success
        theme = result.theme
        assert theme.meta.name == 'Imported from JSON'
        assert theme.colors.surface
        assert theme.colors.success is None

    @pytest.mark.parametrize("content", ['{not json', '[1, 2]', '"text"'])
    def test_bad_input(self, content):
        result = import_from_json(content)
        assert not result.success
        assert result.errors


class TestTailwindImporter:
    """Test reading Tailwind configs."""

    CONFIG = """
    // tailwind.config.js
    /** @type {import('tailwindcss').Config} */
    module.exports = {
      darkMode: 'class',
      theme: {
        extend: {
          colors: {
            brand: { 500: '#6d28d9', 600: '#5b21b6' },
            gray: { 50: '#f9fafb', 100: '#f3f4f6', 200: '#e5e7eb', 300: '#d1d5db',
                    500: '#6b7280', 600: '#4b5563', 900: '#111827' },
            white: '#ffffff',
          },
          fontFamily: {
            sans: ['Inter var', 'sans-serif'],
          },
          fontSize: { base: ['18px', { lineHeight: '28px' }] },
          spacing: { '1': '0.25rem', '2': '0.5rem' },
          borderRadius: { lg: '12px', full: '9999px' },
          screens: { tablet: '700px' },
        },
      },
      plugins: [],
    };
    """

    def test_js_config_to_dict(self):
        data = js_config_to_dict(self.CONFIG)
        assert data['darkMode'] == 'class'
        assert data['theme']['extend']['colors']['brand']['500'] == '#6d28d9'
        assert data['plugins'] == []

    def test_js_config_rejects_code(self):
        with pytest.raises(ValueError):
            js_config_to_dict("module.exports = { plugins: [require('x')] }")
        with pytest.raises(ValueError):
            js_config_to_dict("no object here")

    def test_import(self):
        """Test palettes are mapped onto roles and sizes are converted."""
        result = import_from_tailwind(self.CONFIG)
        assert result.success
        theme = result.theme
        assert theme.colors.primary == '#6d28d9'
        assert theme.colors.surface == '#ffffff'
        assert theme.colors.text == '#111827'
        assert theme.colors.border == '#e5e7eb'
        assert theme.typography.font_family == '"Inter var", sans-serif'
        assert theme.typography.base_size == 18
        assert theme.spacing.base_unit == 4
        assert theme.borders.radius_relaxed == 12
        assert theme.borders.radius_pill == 9999
        assert theme.breakpoints == {'tablet': 700}
        assert any('dark mode' in w for w in result.warnings)

    def test_dict_input(self):
        result = import_from_tailwind({'theme': {'colors': {'primary': '#123456'}}})
        assert result.theme.colors.primary == '#123456'

    def test_generated_config_reads_back(self, compiled):
        result = import_from_tailwind(generate(compiled, 'tailwind'))
        assert result.success
        assert result.theme.colors.primary == '#2563eb'
        assert result.theme.colors.surface_secondary == '#f8fafc'

    def test_unreadable(self):
        result = import_from_tailwind("module.exports = require('./base')")
        assert not result.success


class TestFigmaImporter:
    """Test reading Figma variables and Tokens Studio sets."""

    def test_collections_with_modes(self):
        data = {
            'collections': [{
                'name': 'Brand',
                'modes': [{'name': 'Light', 'modeId': '1:0'}, {'name': 'Dark', 'modeId': '1:1'}],
                'variables': [
                    {'name': 'colors/primary', 'valuesByMode': {'1:0': {'r': 1, 'g': 0, 'b': 0, 'a': 1},
                                                               '1:1': '#ff8888'}},
                    {'name': 'colors/surface', 'valuesByMode': {'1:0': '#ffffff', '1:1': '#111111'}},
                    {'name': 'spacing/1', 'valuesByMode': {'1:0': 8}},
                    {'name': 'typography/font-family', 'valuesByMode': {'1:0': 'Roboto, sans-serif'}},
                    {'name': 'ungrouped', 'valuesByMode': {'1:0': 1}},
                ],
            }],
        }
        result = import_from_figma(data)
        assert result.success
        theme = result.theme
        assert theme.meta.name == 'Brand'
        assert theme.colors.primary == '#ff0000'
        assert theme.dark_mode.enabled
        assert theme.dark_mode.colors == {'primary': '#ff8888', 'surface': '#111111'}
        assert theme.spacing.base_unit == 8
        assert theme.typography.font_family == 'Roboto, sans-serif'
        assert "Skipped token 'ungrouped': no group" in result.warnings

    def test_tokens_studio(self):
        data = {
            'global': {
                'colors': {'primary': {'value': '#0ea5e9', 'type': 'color'}},
                'typography': {'font-family-body': {'value': 'Lato'}, 'font-size-base': {'value': '18px'}},
                'border': {'radius': {'subtle': {'value': '4px'}}},
            },
            'dark': {'colors': {'primary': {'value': '#38bdf8'}}},
        }
        result = import_from_figma(data)
        assert result.success
        assert result.theme.colors.primary == '#0ea5e9'
        assert result.theme.typography.font_family == 'Lato'
        assert result.theme.borders.radius_subtle == 4
        assert result.theme.dark_mode.colors == {'primary': '#38bdf8'}

    def test_empty_collections(self):
        result = import_from_figma({'collections': []})
        assert not result.success

    def test_neither_shape(self):
        result = import_from_figma({'something': 'else'})
        assert result.errors


class TestDetection:
    """Test format sniffing."""

    @pytest.mark.parametrize("content, expected", [
        (':root { --theme-color-primary: #000; }', 'css'),
        ('module.exports = { theme: {} }', 'tailwind'),
        ('export default { theme: {} }', 'tailwind'),
        ('{"collections": []}', 'figma'),
        ('{"global": {"colors": {}}}', 'figma'),
        ('{"theme": {"extend": {}}}', 'tailwind'),
        ('{"meta": {"name": "x"}, "colors": {}}', 'json'),
        ('{broken', 'json'),
        ({'collections': []}, 'figma'),
    ])
    def test_detect(self, content, expected):
        assert detect_format(content) == expected

    def test_auto_import_css(self, compiled):
        result = auto_import(generate(compiled, 'css'))
        assert result.success
        assert result.theme.meta.name == 'Test Theme'

    def test_auto_import_json(self, compiled):
        result = auto_import(generate(compiled, 'json'))
        assert result.theme.typography.base_size == 16


class TestParseNumber:
    """Test dimension parsing."""

    @pytest.mark.parametrize("value, expected", [
        (16, 16), (1.5, 1.5), ('16px', 16), ('1rem', 16), ('0.5rem', 8), (' 2 ', 2), ('1.5em', 24),
    ])
    def test_numbers(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", ['auto', '10%', None, True, [1]])
    def test_not_numbers(self, value):
        assert parse_number(value) is None
