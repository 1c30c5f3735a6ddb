"""Tests for theme validation."""

import pytest

from theme_forge.theme_engine.errors import ThemeValidationError
from theme_forge.theme_engine.schema import Severity, ThemeConfig
from theme_forge.theme_engine.validation import (
    ensure_valid_theme,
    has_errors,
    is_theme_like,
    is_valid_color,
    is_valid_hex_color,
    is_valid_hsl_color,
    is_valid_rgb_color,
    validate_and_sanitize,
    validate_theme,
    validate_theme_schema,
)


def paths(issues):
    return {issue.path for issue in issues}


class TestColorSyntax:
    """Test color syntax predicates."""

    @pytest.mark.parametrize("value", ['#fff', '#ffff', '#ffffff', '#ffffff80'])
    def test_hex(self, value):
        assert is_valid_hex_color(value)

    @pytest.mark.parametrize("value", ['#ff', '#fffff', 'ffffff', '#gggggg'])
    def test_bad_hex(self, value):
        assert not is_valid_hex_color(value)

    def test_rgb_ranges(self):
        """Test rgb() channels are range checked."""
        assert is_valid_rgb_color('rgb(255, 0, 0)')
        assert is_valid_rgb_color('rgba(0, 0, 0, 0.5)')
        assert not is_valid_rgb_color('rgb(300, 0, 0)')

    def test_hsl_ranges(self):
        assert is_valid_hsl_color('hsl(210, 50%, 40%)')
        assert not is_valid_hsl_color('hsl(210, 150%, 40%)')

    def test_references_are_valid_colors(self):
        """Test token references pass the color check."""
        assert is_valid_color('colors.primary')
        assert is_valid_color('rebeccapurple')
        assert not is_valid_color('notacolor')


class TestSchema:
    """Test structural validation."""

    def test_valid_theme(self, theme_data):
        """Test the fixture validates without issues."""
        assert validate_theme(theme_data) == []

    def test_not_an_object(self):
        issues = validate_theme_schema(["not", "a", "theme"])
        assert len(issues) == 1
        assert issues[0].path == '$'

    @pytest.mark.parametrize("section", ['meta', 'colors', 'typography'])
    def test_missing_required_section(self, theme_data, section):
        """Test each required section is reported as an error."""
        del theme_data[section]
        issues = validate_theme(theme_data)
        missing = [i for i in issues if i.path == f'$.{section}']
        assert missing and missing[0].is_error

    @pytest.mark.parametrize("section", ['spacing', 'borders'])
    def test_missing_defaulted_section_warns(self, theme_data, section):
        """Test sections with defaults only produce warnings."""
        del theme_data[section]
        issues = validate_theme(theme_data)
        assert not has_errors(issues)
        assert f'$.{section}' in paths(issues)

    def test_missing_color_role(self, theme_data):
        del theme_data['colors']['textMuted']
        issues = validate_theme(theme_data)
        assert '$.colors.textMuted' in paths(issues)
        assert has_errors(issues)

    def test_bad_color(self, theme_data):
        """Test an unparseable color is an error carrying expected and received."""
        theme_data['colors']['primary'] = 'notacolor'
        issue = next(i for i in validate_theme(theme_data) if i.path == '$.colors.primary')
        assert issue.is_error
        assert issue.received == "'notacolor'"
        assert 'hex' in issue.expected
        assert issue.field == 'colors.primary'

    def test_wrong_types(self, theme_data):
        """Test type errors in meta and typography."""
        theme_data['meta']['tags'] = 'not-a-list'
        theme_data['typography']['baseSize'] = 'large'
        issues = validate_theme(theme_data)
        assert {'$.meta.tags', '$.typography.baseSize'} <= paths(issues)

    def test_non_positive_base_size(self, theme_data):
        theme_data['typography']['baseSize'] = 0
        assert '$.typography.baseSize' in paths(validate_theme(theme_data))

    def test_bad_border_style(self, theme_data):
        theme_data['borders']['defaultStyle'] = 'wavy'
        assert '$.borders.defaultStyle' in paths(validate_theme(theme_data))

    def test_unknown_variant_field_warns(self, theme_data):
        """Test unknown style fields are warnings rather than errors."""
        theme_data['buttons']['primary']['shadow'] = '#000000'
        issues = validate_theme(theme_data)
        assert not has_errors(issues)
        assert '$.buttons.primary.shadow' in paths(issues)

    def test_dark_mode_colors_checked(self, dark_theme_data):
        dark_theme_data['darkMode']['colors']['text'] = 'bogus'
        assert '$.darkMode.colors.text' in paths(validate_theme(dark_theme_data))

    def test_all_problems_reported_at_once(self, theme_data):
        """Test validation does not stop at the first error."""
        theme_data['colors']['primary'] = 'bogus'
        theme_data['colors']['text'] = 'bogus'
        del theme_data['meta']['name']
        errors = [i for i in validate_theme(theme_data) if i.is_error]
        assert len(errors) == 3

    def test_theme_config_input(self, theme):
        assert validate_theme(theme) == []

    def test_defaulted_border_style_serializes_as_text(self, theme_data):
        data = ThemeConfig.from_dict(theme_data).to_dict()
        assert data['borders']['defaultStyle'] == 'solid'
        assert type(data['borders']['defaultStyle']) is str


class TestSemanticChecks:
    """Test range warnings and reference checks."""

    def test_base_size_out_of_range(self, theme_data):
        """Test a base size outside 12-24 is a warning."""
        theme_data['typography']['baseSize'] = 30
        issues = validate_theme(theme_data)
        assert not has_errors(issues)
        warning = next(i for i in issues if i.path == '$.typography.baseSize')
        assert Severity(warning.severity) == Severity.WARNING
        assert '12-24' in warning.message

    def test_flat_scale_warns(self, theme_data):
        theme_data['typography']['scale'] = 1.0
        issues = validate_theme(theme_data)
        assert '$.typography.scale' in paths(issues)
        assert not has_errors(issues)

    def test_dangling_reference(self, theme_data):
        """Test a reference to a missing token is an error."""
        theme_data['colors']['link'] = 'colors.missing'
        issues = validate_theme(theme_data)
        assert has_errors(issues)
        assert '$.colors.link' in paths(issues)

    def test_cycle_is_error(self, theme_data):
        theme_data['colors']['link'] = 'colors.focus'
        theme_data['colors']['focus'] = 'colors.link'
        assert has_errors(validate_theme(theme_data))


    def test_references_checked_alongside_schema_errors(self, theme_data):
        """Test a dangling reference is reported even when a role is missing."""
        del theme_data['colors']['textMuted']
        theme_data['colors']['link'] = 'colors.nope'
        issues = validate_theme(theme_data)
        assert {'$.colors.textMuted', '$.colors.link'} <= paths(issues)

    def test_ranges_checked_alongside_schema_errors(self, theme_data):
        theme_data['colors']['primary'] = 'bogus'
        theme_data['typography']['baseSize'] = 30
        assert '$.typography.baseSize' in paths(validate_theme(theme_data))

    def test_malformed_dark_mode_does_not_break_references(self, theme_data):
        theme_data['darkMode'] = 'yes'
        theme_data['colors']['link'] = 'colors.nope'
        issues = validate_theme(theme_data)
        assert {'$.darkMode', '$.colors.link'} <= paths(issues)


class TestWarningDeduplication:
    """Test the caller-owned seen-warnings set."""

    def test_repeated_warnings_are_dropped(self, theme_data):
        del theme_data['spacing']
        seen = set()
        first = validate_theme(theme_data, seen_warnings=seen)
        second = validate_theme(theme_data, seen_warnings=seen)
        assert first
        assert second == []
        assert len(seen) == len(first)

    def test_errors_are_never_dropped(self, theme_data):
        """Test errors are reported on every run."""
        theme_data['colors']['primary'] = 'bogus'
        seen = set()
        validate_theme(theme_data, seen_warnings=seen)
        assert has_errors(validate_theme(theme_data, seen_warnings=seen))

    def test_no_state_without_set(self, theme_data):
        del theme_data['spacing']
        assert validate_theme(theme_data) == validate_theme(theme_data)


class TestEnsureValid:
    """Test the raising entry points."""

    def test_returns_theme(self, theme_data):
        theme = ensure_valid_theme(theme_data)
        assert isinstance(theme, ThemeConfig)
        assert theme.meta.name == 'Test Theme'

    def test_raises_with_issues(self, theme_data):
        """Test every error is attached to the exception."""
        theme_data['colors']['primary'] = 'bogus'
        theme_data['colors']['text'] = 'bogus'
        with pytest.raises(ThemeValidationError) as exc_info:
            ensure_valid_theme(theme_data)
        assert len(exc_info.value.issues) == 2

    def test_is_theme_like(self, theme_data):
        assert is_theme_like(theme_data)
        assert not is_theme_like({'colors': {}})


class TestValidateAndSanitize:
    """Test sanitizing untrusted input before validation."""

    def test_clean_theme(self, theme_data):
        theme, issues = validate_and_sanitize(theme_data)
        assert theme is not None
        assert issues == []

    def test_unsafe_color_becomes_warning(self, theme_data):
        """Test a payload in a color is replaced and reported as a warning."""
        theme_data['colors']['primary'] = 'red;}</style><script>'
        theme, issues = validate_and_sanitize(theme_data)
        assert theme is not None
        assert theme.colors.primary == '#000000'
        assert '$.colors.primary' in paths(issues)
        assert not has_errors(issues)

    def test_missing_section_returns_none(self, theme_data):
        del theme_data['typography']
        theme, issues = validate_and_sanitize(theme_data)
        assert theme is None
        assert has_errors(issues)
