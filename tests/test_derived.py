"""Tests for derived token values."""

from theme_forge.theme_engine.derived import (
    compute_derived_values,
    compute_font_sizes,
    compute_spacing,
)


class TestFontSizes:
    """Test the modular type scale."""

    def test_default_scale(self):
        """Test 16px with a 1.25 ratio."""
        sizes = compute_font_sizes({'baseSize': 16, 'scale': 1.25})
        assert sizes['xs'] == 10
        assert sizes['sm'] == 13
        assert sizes['base'] == 16
        assert sizes['lg'] == 20
        assert sizes['xl'] == 25
        assert sizes['2xl'] == 31
        assert sizes['6xl'] == 76
        assert list(sizes)[0] == 'xs'
        assert len(sizes) == 10

    def test_half_rounds_up(self):
        """Test x.5 rounds away from zero."""
        sizes = compute_font_sizes({'baseSize': 10, 'scale': 1.25})
        assert sizes['lg'] == 13  # 12.5

    def test_explicit_sizes_win(self):
        sizes = compute_font_sizes({'baseSize': 16, 'scale': 1.25, 'sizes': {'xl': 24.0, 'hero': 96}})
        assert sizes['xl'] == 24
        assert isinstance(sizes['xl'], int)
        assert sizes['hero'] == 96

    def test_missing_values_use_defaults(self):
        assert compute_font_sizes({})['base'] == 16


class TestSpacing:
    """Test the spacing map."""

    def test_base_unit_multiples(self):
        spacing = compute_spacing({'baseUnit': 4})
        assert list(spacing) == [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 12]
        assert spacing[1] == 4
        assert spacing[12] == 48
        assert spacing[0] == 0

    def test_scale_list(self):
        """Test an explicit scale list is used where it is long enough."""
        spacing = compute_spacing({'baseUnit': 4, 'scale': [0, 2, 6, 10]})
        assert spacing[1] == 2
        assert spacing[3] == 10
        assert spacing[4] == 16

    def test_explicit_values_win(self):
        """Test explicit values override both scale and base unit."""
        spacing = compute_spacing({'baseUnit': 4, 'values': {'2': 10, 16: 64}})
        assert spacing[2] == 10
        assert spacing[3] == 12
        assert spacing[16] == 64

    def test_float_units_are_cleaned(self):
        assert compute_spacing({'baseUnit': 2.0})[4] == 8
        assert isinstance(compute_spacing({'baseUnit': 2.0})[4], int)


class TestDerivedValues:
    """Test the combined derived record."""

    def test_from_record(self, theme_data):
        derived = compute_derived_values(theme_data)
        assert derived.font_sizes['base'] == 16
        assert derived.spacing[4] == 16
        assert derived.border_widths == {'thin': 1, 'default': 2, 'thick': 4}
        assert derived.radii == {'subtle': 6, 'relaxed': 12}

    def test_breakpoints_merge_defaults(self, theme_data):
        """Test custom breakpoints extend the defaults."""
        theme_data['breakpoints'] = {'md': 800, '3xl': 1920}
        breakpoints = compute_derived_values(theme_data).breakpoints
        assert breakpoints['md'] == 800
        assert breakpoints['3xl'] == 1920
        assert breakpoints['sm'] == 640

    def test_empty_record(self):
        derived = compute_derived_values({})
        assert derived.border_widths['default'] == 2
        assert derived.radii == {}
