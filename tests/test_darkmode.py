"""Tests for dark mode derivation."""

import pytest

from theme_forge.theme_engine.color import hex_to_hsl, is_dark
from theme_forge.theme_engine.contrast import calculate_contrast_ratio
from theme_forge.theme_engine.darkmode import (
    SURFACE_ROLES,
    TEXT_ROLES,
    DarkModeOptions,
    generate_dark_mode,
    generate_dark_mode_colors,
    get_suggested_dark_mode_options,
    preview_dark_mode,
    transform_color,
    validate_dark_mode,
)
from theme_forge.theme_engine.registry import ThemeRegistry
from theme_forge.theme_engine.schema import DarkModeIntensity


def assert_text_readable(dark):
    for text_role in TEXT_ROLES:
        if text_role not in dark:
            continue
        for surface_role in SURFACE_ROLES:
            if surface_role in dark:
                ratio = calculate_contrast_ratio(dark[text_role], dark[surface_role])
                assert ratio >= 4.5, f"{text_role} on {surface_role}: {ratio:.2f}"


class TestTransformColor:
    """Test per-role color transforms."""

    def test_surface_goes_dark(self):
        assert is_dark(transform_color('#ffffff', 'background'))

    def test_intensity_sets_lightness(self):
        """Test stronger intensity gives darker backgrounds."""
        subtle = transform_color('#ffffff', 'background', DarkModeOptions(intensity=DarkModeIntensity.SUBTLE))
        intense = transform_color('#ffffff', 'background', DarkModeOptions(intensity=DarkModeIntensity.INTENSE))
        assert hex_to_hsl(intense)[2] <= hex_to_hsl(subtle)[2]

    def test_dark_text_goes_light(self):
        assert not is_dark(transform_color('#0f172a', 'text'))

    def test_accent_keeps_hue(self):
        """Test brand colors keep their hue and get lighter."""
        h, _, l = hex_to_hsl(transform_color('#1e3a8a', 'accent'))
        assert abs(h - hex_to_hsl('#1e3a8a')[0]) <= 2
        assert l == pytest.approx(60, abs=1)

    def test_accent_applies_saturation_adjustment(self):
        muted = transform_color('#1e3a8a', 'accent', DarkModeOptions(saturation_adjustment=-20))
        vivid = transform_color('#1e3a8a', 'accent', DarkModeOptions(saturation_adjustment=0))
        assert hex_to_hsl(muted)[1] < hex_to_hsl(vivid)[1]

    def test_text_side_follows_luminance(self):
        """Test a bright yellow at 50% lightness is treated as a light color."""
        assert hex_to_hsl(transform_color('#ffff00', 'text'))[2] == pytest.approx(40, abs=1)

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            transform_color('#ffffff', 'shadow')


class TestGenerateDarkMode:
    """Test whole-palette derivation."""

    def test_text_contrast_on_fixture(self, theme):
        """Test every text role stays readable on every dark surface."""
        dark = generate_dark_mode_colors(theme)
        assert is_dark(dark['surface'])
        assert_text_readable(dark)

    @pytest.mark.parametrize("name", ['default', 'corporate', 'vibrant', 'pastel'])
    def test_text_contrast_on_presets(self, name, tmp_path):
        theme = ThemeRegistry(tmp_path).load_theme(name)
        assert_text_readable(generate_dark_mode_colors(theme))

    @pytest.mark.parametrize("intensity", list(DarkModeIntensity))
    def test_text_contrast_every_intensity(self, theme, intensity):
        assert_text_readable(generate_dark_mode_colors(theme, DarkModeOptions(intensity=intensity)))

    def test_ui_contrast(self, theme):
        """Test brand, status and border colors reach 3:1 on the dark surface."""
        dark = generate_dark_mode_colors(theme)
        for role in ('primary', 'secondary', 'success', 'error', 'warning', 'info', 'border'):
            assert calculate_contrast_ratio(dark[role], dark['surface']) >= 3.0

    def test_references_are_resolved(self, theme):
        """Test referencing roles get a literal dark value."""
        dark = generate_dark_mode_colors(theme)
        assert dark['link'].startswith('#')

    def test_without_contrast_repair(self, theme):
        options = DarkModeOptions(ensure_contrast=False)
        assert set(generate_dark_mode_colors(theme, options)) == set(generate_dark_mode_colors(theme))

    def test_generate_dark_mode_enables_section(self, theme):
        """Test the returned theme carries an enabled dark mode."""
        dark_theme = generate_dark_mode(theme)
        assert dark_theme.dark_mode_enabled
        assert dark_theme.colors.surface == '#ffffff'
        assert is_dark(dark_theme.dark_mode.colors['surface'])
        assert not theme.dark_mode_enabled

    def test_existing_dark_overrides_kept(self, dark_theme_data):
        """Test generated colors merge onto an existing dark section."""
        from theme_forge.theme_engine.schema import ThemeConfig
        dark_theme = generate_dark_mode(ThemeConfig.from_dict(dark_theme_data))
        assert 'basic' in dark_theme.dark_mode.cards

    def test_preview(self, theme):
        preview = preview_dark_mode(theme)
        light, dark = preview['surface']
        assert light == '#ffffff'
        assert is_dark(dark)


class TestOptionsAndChecks:
    """Test suggested options and palette checks."""

    def test_suggested_options(self, theme):
        options = get_suggested_dark_mode_options(theme)
        assert DarkModeIntensity(options.intensity) == DarkModeIntensity.INTENSE
        assert options.preserve_brand_colors

    def test_validate_generated_palette(self, theme):
        issues, _ = validate_dark_mode(generate_dark_mode_colors(theme))
        assert issues == []

    def test_validate_bad_palette(self):
        issues, warnings = validate_dark_mode({'surface': '#ffffff', 'text': '#eeeeee'})
        assert issues
        assert warnings

    def test_validate_warns_below_aaa(self):
        issues, warnings = validate_dark_mode({'surface': '#000000', 'text': '#777777'})
        assert issues == []
        assert any('AAA' in warning for warning in warnings)

    def test_validate_missing_surface(self):
        issues, _ = validate_dark_mode({'text': '#ffffff'})
        assert issues == ["Dark palette has no surface color"]
