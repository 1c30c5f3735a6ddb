"""Color math for theme derivation.

This module provides conversions between hex, RGB and HSL plus the
lightness, saturation and hue adjustments used by the dark-mode generator,
the contrast fixer and theme variants. Every function that produces a color
returns canonical lowercase ``#rrggbb``. Malformed input degrades to black
instead of raising, since theme colors are user-authored.
"""

import logging
import math
import re
from typing import Tuple, List, Dict, Any, Union

from .named_colors import CSS_NAMED_COLORS

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
HSL = Tuple[int, int, int]

FALLBACK_RGB: RGB = (0, 0, 0)

# Luminance at which black and white text have equal contrast
LIGHTNESS_THRESHOLD = 0.179

_NUM = r'[-+]?(?:\d+\.?\d*|\.\d+)'
_SEP = r'\s*(?:,\s*|\s+)'
_ALPHA = rf'(?:\s*(?:,|/)\s*{_NUM}%?)?'

HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')
BARE_HEX_PATTERN = re.compile(r'^[0-9a-fA-F]{6}$')
RGB_PATTERN = re.compile(
    rf'^rgba?\(\s*({_NUM})(%?){_SEP}({_NUM})(%?){_SEP}({_NUM})(%?){_ALPHA}\s*\)$',
    re.IGNORECASE,
)
HSL_PATTERN = re.compile(
    rf'^hsla?\(\s*({_NUM})(?:deg)?{_SEP}({_NUM})%?{_SEP}({_NUM})%?{_ALPHA}\s*\)$',
    re.IGNORECASE,
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, like ``Math.round``."""
    return int(math.floor(value + 0.5))


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert hex color to RGB tuple.

    Args:
        hex_color: Hex color string (e.g., '#FF0000', 'FF0000' or '#f00')

    Returns:
        RGB tuple (r, g, b) with values 0-255, or black if the input is not
        a valid 3, 4, 6 or 8 digit hex color; alpha digits are ignored
    """
    match = HEX_PATTERN.match(hex_color.strip()) if isinstance(hex_color, str) else None
    if not match:
        logger.debug(f"Invalid hex color {hex_color!r}, using black")
        return FALLBACK_RGB

    digits = match.group(1)
    if len(digits) <= 4:
        digits = ''.join(ch * 2 for ch in digits[:3])

    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB values to hex color string.

    Args:
        r, g, b: RGB values 0-255; out-of-range values are clamped

    Returns:
        Hex color string with # prefix
    """
    channels = [round_half_up(clamp(c, 0, 255)) for c in (r, g, b)]
    return "#{:02x}{:02x}{:02x}".format(*channels)


def rgb_to_hsl(r: int, g: int, b: int) -> HSL:
    """Convert RGB to HSL with hue in degrees and S/L in percent (integers)."""
    rn, gn, bn = r / 255.0, g / 255.0, b / 255.0
    high = max(rn, gn, bn)
    low = min(rn, gn, bn)
    lightness = (high + low) / 2

    if high == low:
        return (0, 0, round_half_up(lightness * 100))

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2 - high - low)
    else:
        saturation = delta / (high + low)

    if high == rn:
        hue = (gn - bn) / delta + (6 if gn < bn else 0)
    elif high == gn:
        hue = (bn - rn) / delta + 2
    else:
        hue = (rn - gn) / delta + 4
    hue /= 6

    return (
        round_half_up(hue * 360) % 360,
        round_half_up(saturation * 100),
        round_half_up(lightness * 100),
    )


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """Convert HSL to RGB.

    Hue is normalized to [0, 360); saturation and lightness are clamped to
    [0, 100].
    """
    hn = (h % 360) / 360.0
    sn = clamp(s, 0, 100) / 100.0
    ln = clamp(l, 0, 100) / 100.0

    if sn == 0:
        value = round_half_up(ln * 255)
        return (value, value, value)

    q = ln * (1 + sn) if ln < 0.5 else ln + sn - ln * sn
    p = 2 * ln - q
    return (
        round_half_up(_hue_to_channel(p, q, hn + 1 / 3) * 255),
        round_half_up(_hue_to_channel(p, q, hn) * 255),
        round_half_up(_hue_to_channel(p, q, hn - 1 / 3) * 255),
    )


def _scale_channel(value: str, percent: str) -> float:
    number = float(value)
    if percent:
        number = number * 255 / 100
    return clamp(number, 0, 255)


def parse_color(value: Any) -> RGB:
    """Parse any supported color literal into an RGB tuple.

    Accepts hex (``#`` optional only for six digits), ``rgb()``/``rgba()`` in
    comma or space syntax, ``hsl()``/``hsla()`` and CSS named colors. Alpha is
    ignored. Anything else (including keywords like ``transparent``) yields black.
    """
    if not isinstance(value, str):
        return FALLBACK_RGB

    text = value.strip()
    if text.startswith('#'):
        return hex_to_rgb(text)

    rgb_match = RGB_PATTERN.match(text)
    if rgb_match:
        r, rp, g, gp, b, bp = rgb_match.groups()
        return (
            round_half_up(_scale_channel(r, rp)),
            round_half_up(_scale_channel(g, gp)),
            round_half_up(_scale_channel(b, bp)),
        )

    hsl_match = HSL_PATTERN.match(text)
    if hsl_match:
        h, s, l = (float(part) for part in hsl_match.groups())
        return hsl_to_rgb(h, s, l)

    named = CSS_NAMED_COLORS.get(text.lower())
    if named:
        return hex_to_rgb(named)

    # Bare hex: six digits only
    if BARE_HEX_PATTERN.match(text):
        return hex_to_rgb(text)
    return FALLBACK_RGB


def to_hex(color: str) -> str:
    """Normalize any supported color literal to ``#rrggbb``."""
    return rgb_to_hex(*parse_color(color))


def hex_to_hsl(color: str) -> HSL:
    return rgb_to_hsl(*parse_color(color))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def srgb_to_linear(channel: float) -> float:
    """Linearize an sRGB channel (0-255) with the WCAG transfer function."""
    normalized = channel / 255.0
    if normalized <= 0.03928:
        return normalized / 12.92
    return ((normalized + 0.055) / 1.055) ** 2.4


def linear_to_srgb(value: float) -> float:
    """Encode a linear channel (0-1) back to sRGB (0-255)."""
    value = clamp(value, 0.0, 1.0)
    if value <= 0.0031308:
        encoded = value * 12.92
    else:
        encoded = 1.055 * (value ** (1 / 2.4)) - 0.055
    return encoded * 255


def relative_luminance(color: Union[str, RGB]) -> float:
    """WCAG relative luminance (0.0-1.0) of a color string or RGB tuple."""
    r, g, b = parse_color(color) if isinstance(color, str) else color
    return (
        0.2126 * srgb_to_linear(r)
        + 0.7152 * srgb_to_linear(g)
        + 0.0722 * srgb_to_linear(b)
    )


def adjust_lightness(color: str, amount: float) -> str:
    """Shift HSL lightness by ``amount`` percentage points."""
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex(h, s, clamp(l + amount, 0, 100))


def adjust_saturation(color: str, amount: float) -> str:
    """Shift HSL saturation by ``amount`` percentage points."""
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex(h, clamp(s + amount, 0, 100), l)


def adjust_hue(color: str, degrees: float) -> str:
    """Rotate hue by ``degrees``."""
    h, s, l = hex_to_hsl(color)
    return hsl_to_hex((h + degrees) % 360, s, l)


def set_lightness(color: str, lightness: float) -> str:
    h, s, _ = hex_to_hsl(color)
    return hsl_to_hex(h, s, clamp(lightness, 0, 100))


def lighten(color: str, amount: float = 10) -> str:
    return adjust_lightness(color, amount)


def darken(color: str, amount: float = 10) -> str:
    return adjust_lightness(color, -amount)


def saturate(color: str, amount: float = 10) -> str:
    return adjust_saturation(color, amount)


def desaturate(color: str, amount: float = 10) -> str:
    return adjust_saturation(color, -amount)


def mix(color_a: str, color_b: str, ratio: float = 0.5) -> str:
    """Linearly interpolate two colors in RGB space.

    Args:
        color_a: Start color (returned at ratio 0)
        color_b: End color (returned at ratio 1)
        ratio: Interpolation amount, clamped to [0, 1]

    Returns:
        Mixed hex color
    """
    ratio = clamp(ratio, 0.0, 1.0)
    start = parse_color(color_a)
    end = parse_color(color_b)
    return rgb_to_hex(*(a + (b - a) * ratio for a, b in zip(start, end)))


def complementary(color: str) -> str:
    return adjust_hue(color, 180)


def grayscale(color: str) -> str:
    """Desaturate fully while keeping lightness."""
    h, _, l = hex_to_hsl(color)
    return hsl_to_hex(h, 0, l)


def invert(color: str) -> str:
    r, g, b = parse_color(color)
    return rgb_to_hex(255 - r, 255 - g, 255 - b)


def is_light(color: str) -> bool:
    """True when dark text reads better than light text on this color."""
    return relative_luminance(color) > LIGHTNESS_THRESHOLD


def is_dark(color: str) -> bool:
    return not is_light(color)


def generate_palette(color: str, steps: int = 10) -> List[Tuple[int, str]]:
    """Generate a lightness ramp from a base color.

    Lightness steps monotonically from 95% down to 5%; hue and saturation are
    taken from the base color.

    Args:
        color: Base color
        steps: Number of shades to produce

    Returns:
        List of (shade, hex) tuples ordered light to dark
    """
    if steps < 1:
        return []

    h, s, base_l = hex_to_hsl(color)
    palette = []
    for i in range(steps):
        shade = round_half_up((i + 1) * (100 / (steps + 1)) * 10)
        lightness = 95 - i * (90 / (steps - 1)) if steps > 1 else base_l
        palette.append((shade, hsl_to_hex(h, clamp(s, 0, 100), lightness)))
    return palette


def get_color_info(color: str) -> Dict[str, Any]:
    """Summarize a color in every representation this module knows."""
    rgb = parse_color(color)
    luminance = relative_luminance(rgb)
    return {
        'hex': rgb_to_hex(*rgb),
        'rgb': rgb,
        'hsl': rgb_to_hsl(*rgb),
        'luminance': round(luminance, 4),
        'is_light': luminance > LIGHTNESS_THRESHOLD,
    }
