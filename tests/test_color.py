"""Tests for color math."""

import pytest

from theme_forge.theme_engine.color import (
    adjust_hue,
    darken,
    generate_palette,
    get_color_info,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_rgb,
    lighten,
    mix,
    parse_color,
    relative_luminance,
    rgb_to_hex,
    rgb_to_hsl,
    round_half_up,
    to_hex,
)


class TestConversions:
    """Test hex, RGB and HSL conversions."""

    def test_hex_to_rgb_long_and_short(self):
        """Test six and three digit hex colors."""
        assert hex_to_rgb('#ff0000') == (255, 0, 0)
        assert hex_to_rgb('#f00') == (255, 0, 0)
        assert hex_to_rgb('00FF00') == (0, 255, 0)

    def test_hex_alpha_digits_ignored(self):
        assert hex_to_rgb('#f008') == (255, 0, 0)
        assert hex_to_rgb('#ff000080') == (255, 0, 0)

    def test_invalid_hex_degrades_to_black(self):
        """Test malformed hex input falls back to black instead of raising."""
        assert hex_to_rgb('#12') == (0, 0, 0)
        assert hex_to_rgb('not-a-color') == (0, 0, 0)

    def test_rgb_to_hex_clamps(self):
        """Test out-of-range channels are clamped."""
        assert rgb_to_hex(255, 0, 0) == '#ff0000'
        assert rgb_to_hex(300, -5, 127.5) == '#ff0080'

    def test_hsl_round_trip(self):
        """Test RGB -> HSL -> RGB for pure colors."""
        assert rgb_to_hsl(255, 0, 0) == (0, 100, 50)
        assert hsl_to_rgb(0, 100, 50) == (255, 0, 0)
        assert hsl_to_rgb(120, 100, 50) == (0, 255, 0)
        assert rgb_to_hsl(128, 128, 128) == (0, 0, 50)

    def test_round_half_up(self):
        """Test .5 rounds up like Math.round."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2


class TestParseColor:
    """Test parsing of color literals."""

    @pytest.mark.parametrize("literal", [
        '#ff0000',
        'rgb(255, 0, 0)',
        'rgba(255, 0, 0, 0.5)',
        'rgb(255 0 0 / 50%)',
        'rgb(100%, 0%, 0%)',
        'hsl(0, 100%, 50%)',
        'red',
        'RED',
    ])
    def test_red_in_every_syntax(self, literal):
        """Test every supported syntax parses to the same channels."""
        assert parse_color(literal) == (255, 0, 0)

    def test_keywords_and_garbage_are_black(self):
        """Test keywords and junk yield black."""
        assert parse_color('transparent') == (0, 0, 0)
        assert parse_color(None) == (0, 0, 0)
        assert parse_color('url(evil)') == (0, 0, 0)

    def test_bare_words_are_not_hex(self):
        """Test short bare hex strings that read as words are not colors."""
        assert parse_color('add') == (0, 0, 0)
        assert parse_color('bee') == (0, 0, 0)
        assert parse_color('cafe') == (0, 0, 0)
        assert parse_color('#add') == (170, 221, 221)
        assert parse_color('00ff00') == (0, 255, 0)

    def test_to_hex_normalizes(self):
        """Test normalization to lowercase #rrggbb."""
        assert to_hex('rgb(0, 128, 255)') == '#0080ff'
        assert to_hex('#ABC') == '#aabbcc'


class TestAdjustments:
    """Test lightness, hue and mixing helpers."""

    def test_lighten_and_darken(self):
        """Test lightness moves by percentage points and clamps."""
        assert lighten('#000000', 50) == '#808080'
        assert darken('#ffffff', 100) == '#000000'
        assert lighten('#ffffff', 20) == '#ffffff'

    def test_adjust_hue_rotates(self):
        """Test hue rotation wraps around 360 degrees."""
        assert adjust_hue('#ff0000', 120) == '#00ff00'
        assert adjust_hue('#ff0000', 360) == '#ff0000'

    def test_mix_endpoints_and_midpoint(self):
        """Test linear interpolation in RGB space."""
        assert mix('#000000', '#ffffff', 0) == '#000000'
        assert mix('#000000', '#ffffff', 1) == '#ffffff'
        assert mix('#000000', '#ffffff', 0.5) == '#808080'
        assert mix('#000000', '#ffffff', 5) == '#ffffff'

    def test_luminance_bounds(self):
        """Test luminance is 0 for black and 1 for white."""
        assert relative_luminance('#000000') == 0
        assert relative_luminance('#ffffff') == pytest.approx(1.0)


class TestPalette:
    """Test palette generation and color info."""

    def test_palette_runs_light_to_dark(self):
        """Test lightness decreases monotonically across the palette."""
        palette = generate_palette('#2563eb', 10)
        assert len(palette) == 10
        lightness = [hex_to_hsl(color)[2] for _, color in palette]
        assert lightness == sorted(lightness, reverse=True)
        shades = [shade for shade, _ in palette]
        assert shades == sorted(shades)

    def test_palette_edge_steps(self):
        """Test zero steps and a single step."""
        assert generate_palette('#2563eb', 0) == []
        assert len(generate_palette('#2563eb', 1)) == 1

    def test_color_info(self):
        """Test the color summary."""
        info = get_color_info('white')
        assert info['hex'] == '#ffffff'
        assert info['rgb'] == (255, 255, 255)
        assert info['is_light'] is True
        assert get_color_info('#000000')['is_light'] is False
