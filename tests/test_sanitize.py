"""Tests for sanitizing untrusted theme input."""

import pytest

from theme_forge.theme_engine.sanitize import (
    escape_css_value,
    escape_for_display,
    escape_html_sensitive,
    escape_js_string,
    neutralize_payloads,
    remove_dangerous_chars,
    sanitize_font_family,
    sanitize_theme,
)


class TestStringHelpers:
    """Test the low-level string cleaners."""

    def test_remove_dangerous_chars(self):
        """Test control characters go while tab and newlines stay."""
        assert remove_dangerous_chars("a\x00b\x1fc\x7fd\te\nf") == "abcd\te\nf"

    def test_neutralize_nested_payloads(self):
        """Test removal repeats until nothing is left to remove."""
        assert neutralize_payloads("</sty</stylele>") == ">"
        assert neutralize_payloads("a/**/b") == "ab"
        assert "<!--" not in neutralize_payloads("<!<!---->--")

    def test_font_family(self):
        """Test quotes and commas survive in font stacks."""
        assert sanitize_font_family('"Fira Code", monospace') == '"Fira Code", monospace'
        assert sanitize_font_family('Inter; } body { color: red') == 'Inter  body  color: red'

    def test_escape_css_value(self):
        escaped = escape_css_value('red;} body{')
        assert ';' not in escaped
        assert '{' not in escaped
        assert '}' not in escaped

    def test_escape_css_keeps_font_stack(self):
        assert escape_css_value('"Inter", sans-serif') == '"Inter", sans-serif'

    def test_escape_js_string(self):
        """Test the literal is quoted and cannot close a script block."""
        escaped = escape_js_string('</script><script>alert(1)</script>')
        assert escaped.startswith('"')
        assert '<' not in escaped
        assert '\\u003c/script' in escaped

    def test_escape_html_sensitive(self):
        assert escape_html_sensitive('a<b>&c') == 'a\\u003cb\\u003e\\u0026c'

    def test_escape_for_display(self):
        assert escape_for_display('<a href="x">') == '&lt;a href=&quot;x&quot;&gt;'


class TestSanitizeTheme:
    """Test whole-theme sanitization."""

    def test_clean_theme_unchanged(self, theme_data):
        """Test a clean theme produces no flags."""
        result = sanitize_theme(theme_data)
        assert not result.changed
        assert result.data == theme_data

    def test_input_not_mutated(self, theme_data):
        theme_data['colors']['primary'] = 'url(evil)'
        sanitize_theme(theme_data)
        assert theme_data['colors']['primary'] == 'url(evil)'

    @pytest.mark.parametrize("payload", [
        'red;}</style><script>alert(1)</script>',
        'url(https://evil.example/x.png)',
        'javascript:alert(1)',
        'expression(alert(1))',
    ])
    def test_unsafe_colors_replaced(self, theme_data, payload):
        """Test unsafe color content is replaced with a default and flagged."""
        theme_data['colors']['text'] = payload
        theme_data['colors']['surface'] = payload
        result = sanitize_theme(theme_data)
        assert result.data['colors']['text'] == '#000000'
        assert result.data['colors']['surface'] == '#ffffff'
        assert {flag.field for flag in result.flags} == {'colors.text', 'colors.surface'}

    def test_dark_defaults_are_inverted(self, dark_theme_data):
        dark_theme_data['darkMode']['colors']['surface'] = 'url(x)'
        result = sanitize_theme(dark_theme_data)
        assert result.data['darkMode']['colors']['surface'] == '#000000'

    def test_variant_colors(self, theme_data):
        theme_data['buttons']['primary']['background'] = '};</style>'
        result = sanitize_theme(theme_data)
        assert result.data['buttons']['primary']['background'] == 'transparent'
        assert result.flags[0].field == 'buttons.primary.background'

    def test_references_kept(self, theme_data):
        result = sanitize_theme(theme_data)
        assert result.data['colors']['link'] == 'colors.primary'
        assert result.data['cards']['basic']['borderWidth'] == 'borders.thin'

    def test_font_stack_cleaned(self, theme_data):
        """Test font stacks lose declaration-breaking characters."""
        theme_data['typography']['fontFamily'] = 'Inter;}</style>'
        result = sanitize_theme(theme_data)
        assert result.data['typography']['fontFamily'] == 'Inter'
        assert result.flags[0].field == 'typography.fontFamily'

    def test_meta_strings_cleaned(self, theme_data):
        theme_data['meta']['name'] = '  Evil\x00 */ Theme</style>  '
        result = sanitize_theme(theme_data)
        name = result.data['meta']['name']
        assert name.startswith('Evil ')
        assert '\x00' not in name
        assert '*/' not in name
        assert '</style' not in name

    def test_long_strings_truncated(self, theme_data):
        theme_data['meta']['name'] = 'x' * 50
        result = sanitize_theme(theme_data, max_string_length=10)
        assert result.data['meta']['name'] == 'x' * 10

    def test_numeric_strings_converted(self, theme_data):
        """Test numbers written as strings become numbers."""
        theme_data['typography']['baseSize'] = '18'
        theme_data['typography']['scale'] = ' 1.2 '
        theme_data['spacing'] = {'baseUnit': '8', 'values': {'4': '20'}}
        result = sanitize_theme(theme_data)
        assert result.data['typography']['baseSize'] == 18
        assert result.data['typography']['scale'] == 1.2
        assert result.data['spacing']['baseUnit'] == 8
        assert result.data['spacing']['values'] == {4: 20}

    def test_non_finite_numbers_flagged(self, theme_data):
        theme_data['borders']['thin'] = float('inf')
        result = sanitize_theme(theme_data)
        assert result.data['borders']['thin'] is None
        assert result.changed

    def test_not_an_object(self):
        result = sanitize_theme("nope")
        assert result.data == {}
        assert result.changed

    def test_sanitized_theme_builds(self, theme_data):
        theme_data['colors']['primary'] = 'javascript:alert(1)'
        assert sanitize_theme(theme_data).theme.colors.primary == '#000000'

    def test_hostile_keys_cleaned(self, theme_data):
        """Test role, variant and breakpoint names lose markup and declaration syntax."""
        theme_data['colors']['brand</style><script>'] = '#ff0000'
        theme_data['buttons']['<script>ghost'] = {'background': '#000000'}
        theme_data['breakpoints'] = {'wide;}': 1200}
        result = sanitize_theme(theme_data)
        assert result.data['colors']['brandscript'] == '#ff0000'
        assert result.data['buttons']['scriptghost'] == {'background': '#000000'}
        assert result.data['breakpoints'] == {'wide': 1200}
        assert {'colors.brand</style><script>', 'breakpoints.wide;}'} <= {flag.field for flag in result.flags}

    def test_key_emptied_by_cleaning_is_dropped(self, theme_data):
        theme_data['colors']['</style>'] = '#ff0000'
        result = sanitize_theme(theme_data)
        assert '' not in result.data['colors']
        assert result.flags[0].replacement is None
