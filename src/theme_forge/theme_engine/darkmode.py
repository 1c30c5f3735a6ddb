"""Dark palette derivation.

Derives a partial dark ``colors`` record from a light theme by moving each
color role into a lightness band appropriate for dark interfaces, then
re-checks every text/surface and UI/surface pair and nudges failing colors
with the contrast fixer before returning. The output is meant to be merged
under ``darkMode.colors``; it is never a full theme on its own.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .color import clamp, hex_to_hsl, hsl_to_hex, lighten, is_light
from .contrast import (
    calculate_contrast_ratio,
    suggest_contrast_fix,
    get_accessible_text_color,
)
from .resolver import resolve_lenient, is_token_reference
from .schema import DarkModeIntensity, ThemeConfig
from .utils import deep_merge_dict
from .validation import is_valid_color_literal

logger = logging.getLogger(__name__)

ROLE_LIGHTNESS: Dict[str, Dict[DarkModeIntensity, int]] = {
    'background': {
        DarkModeIntensity.SUBTLE: 10,
        DarkModeIntensity.MODERATE: 7,
        DarkModeIntensity.INTENSE: 5,
    },
    'surface': {
        DarkModeIntensity.SUBTLE: 15,
        DarkModeIntensity.MODERATE: 12,
        DarkModeIntensity.INTENSE: 8,
    },
    'border': {
        DarkModeIntensity.SUBTLE: 30,
        DarkModeIntensity.MODERATE: 25,
        DarkModeIntensity.INTENSE: 20,
    },
}

ROLE_SATURATION_SHIFT = {'background': -10, 'surface': -8, 'border': -10, 'text': -5}

SURFACE_ROLES = ('surface', 'surfaceSecondary', 'surfaceHover')
TEXT_ROLES = ('text', 'textSecondary', 'textMuted', 'textTertiary')
BRAND_ROLES = (
    'primary', 'primaryHover', 'primaryActive',
    'secondary', 'secondaryHover', 'secondaryActive',
    'accent', 'accentHover', 'accentActive',
    'link', 'linkHover', 'linkActive', 'focus',
)
UI_CONTRAST_ROLES = ('primary', 'secondary', 'accent', 'link', 'focus', 'border',
                     'success', 'warning', 'error', 'info')

# Role of each color when mapped into the dark palette
COLOR_ROLE_MAP: Dict[str, str] = {
    'surface': 'background',
    'surfaceSecondary': 'surface',
    'surfaceHover': 'surface',
    'textInverted': 'background',
    'border': 'border',
    'borderStrong': 'border',
    'borderSubtle': 'border',
    'neutral': 'text',
    'neutralHover': 'text',
    'neutralActive': 'text',
}
COLOR_ROLE_MAP.update({role: 'text' for role in TEXT_ROLES})

SEMANTIC_LIGHTEN = {'success': 10, 'error': 10, 'info': 10, 'warning': 5}


@dataclass
class DarkModeOptions:
    """Options for dark palette derivation."""
    intensity: DarkModeIntensity = DarkModeIntensity.MODERATE
    preserve_brand_colors: bool = True
    saturation_adjustment: float = -5
    ensure_contrast: bool = True
    min_text_contrast: float = 4.5
    min_ui_contrast: float = 3.0


def transform_color(color: str, role: str, options: Optional[DarkModeOptions] = None) -> str:
    """Move one color into the dark band for its role.

    Args:
        color: Light-theme color literal
        role: 'background', 'surface', 'text', 'border' or 'accent'
        options: Derivation options

    Returns:
        Dark-theme hex color
    """
    options = options or DarkModeOptions()
    intensity = DarkModeIntensity(options.intensity)
    h, s, l = hex_to_hsl(color)

    if role in ('background', 'surface', 'border'):
        l = ROLE_LIGHTNESS[role][intensity]
    elif role == 'text':
        if is_light(color):
            l = max(5, l - 10)
        else:
            l = min(95, 95 - (100 - l) * 0.2)
    elif role == 'accent':
        if l < 40:
            l = 60
        elif l > 70:
            l = 65
        s = max(50, s) + options.saturation_adjustment
        return hsl_to_hex(h, clamp(s, 0, 100), l)
    else:
        raise ValueError(f"Unknown dark mode role: {role}")

    s = s + ROLE_SATURATION_SHIFT[role] + options.saturation_adjustment
    return hsl_to_hex(h, clamp(s, 0, 100), clamp(l, 0, 100))


def _repair_against(color: str, backgrounds: List[str], target: float) -> str:
    """Adjust ``color`` until it meets ``target`` against every background."""
    if not backgrounds:
        return color

    for _ in range(len(backgrounds) + 1):
        worst = min(backgrounds, key=lambda bg: calculate_contrast_ratio(color, bg))
        if calculate_contrast_ratio(color, worst) >= target:
            return color
        color = suggest_contrast_fix(color, worst, target).fixed

    worst = min(backgrounds, key=lambda bg: calculate_contrast_ratio(color, bg))
    if calculate_contrast_ratio(color, worst) >= target:
        return color

    fallback = get_accessible_text_color(worst)
    logger.debug(f"Falling back to {fallback} against {worst}")
    return fallback


def _light_literals(theme: ThemeConfig) -> Dict[str, str]:
    """Light colors with references resolved; unusable values dropped."""
    literals = {}
    record = theme.to_dict()
    for role, value in record['colors'].items():
        resolved = resolve_lenient(value, record)
        if is_token_reference(resolved):
            logger.debug(f"Skipping unresolved color {role}={value}")
            continue
        if not is_valid_color_literal(resolved, allow_keywords=False):
            continue
        literals[role] = resolved
    return literals


def generate_dark_mode_colors(theme: ThemeConfig,
                              options: Optional[DarkModeOptions] = None) -> Dict[str, str]:
    """Derive a partial dark colors record from a light theme.

    Args:
        theme: Light theme
        options: Derivation options

    Returns:
        Mapping of color role to dark hex value
    """
    options = options or DarkModeOptions()
    light = _light_literals(theme)
    dark: Dict[str, str] = {}

    for role, color in light.items():
        if role in COLOR_ROLE_MAP:
            dark[role] = transform_color(color, COLOR_ROLE_MAP[role], options)
        elif role in BRAND_ROLES:
            if options.preserve_brand_colors:
                dark[role] = transform_color(color, 'accent', options)
            else:
                dark[role] = lighten(color, 10)
        elif role in SEMANTIC_LIGHTEN:
            dark[role] = lighten(color, SEMANTIC_LIGHTEN[role])

    if options.ensure_contrast:
        surfaces = [dark[role] for role in SURFACE_ROLES if role in dark]
        for role in TEXT_ROLES:
            if role in dark:
                dark[role] = _repair_against(dark[role], surfaces, options.min_text_contrast)
        if 'surface' in dark:
            for role in UI_CONTRAST_ROLES:
                if role in dark:
                    dark[role] = _repair_against(dark[role], [dark['surface']],
                                                 options.min_ui_contrast)

    logger.debug(f"Generated {len(dark)} dark colors for '{theme.meta.name}'")
    return dark


def generate_dark_mode(theme: ThemeConfig, options: Optional[DarkModeOptions] = None) -> ThemeConfig:
    """Return a copy of the theme with a generated, enabled ``darkMode`` section."""
    dark_colors = generate_dark_mode_colors(theme, options)
    data = theme.to_dict()
    data['darkMode'] = deep_merge_dict(data.get('darkMode') or {}, {
        'enabled': True,
        'colors': dark_colors,
    })
    return ThemeConfig.from_dict(data)


def preview_dark_mode(theme: ThemeConfig,
                      options: Optional[DarkModeOptions] = None) -> Dict[str, Tuple[str, str]]:
    """Role -> (light, dark) pairs for display."""
    light = _light_literals(theme)
    dark = generate_dark_mode_colors(theme, options)
    return {role: (light[role], dark[role]) for role in dark if role in light}


def get_suggested_dark_mode_options(theme: ThemeConfig) -> DarkModeOptions:
    """Pick options from the light theme's surface and brand colors."""
    light = _light_literals(theme)
    _, _, surface_l = hex_to_hsl(light.get('surface', '#ffffff'))
    if surface_l >= 97:
        intensity = DarkModeIntensity.INTENSE
    elif surface_l >= 90:
        intensity = DarkModeIntensity.MODERATE
    else:
        intensity = DarkModeIntensity.SUBTLE

    _, primary_s, _ = hex_to_hsl(light.get('primary', '#000000'))
    return DarkModeOptions(intensity=intensity, preserve_brand_colors=primary_s >= 40)


def validate_dark_mode(dark_colors: Dict[str, str]) -> Tuple[List[str], List[str]]:
    """Check a dark palette.

    Returns:
        Tuple of (issues, warnings)
    """
    issues: List[str] = []
    warnings: List[str] = []
    surface = dark_colors.get('surface')
    if not surface:
        return ["Dark palette has no surface color"], warnings

    if is_light(surface):
        warnings.append(f"Dark surface {surface} is light")

    text = dark_colors.get('text')
    if text:
        ratio = calculate_contrast_ratio(text, surface)
        if ratio < 4.5:
            issues.append(f"Text contrast {ratio:.2f}:1 is below 4.5:1")
        elif ratio < 7.0:
            warnings.append(f"Text contrast {ratio:.2f}:1 meets AA but not AAA")

    primary = dark_colors.get('primary')
    if primary:
        ratio = calculate_contrast_ratio(primary, surface)
        if ratio < 3.0:
            issues.append(f"Primary contrast {ratio:.2f}:1 is below 3:1")

    border = dark_colors.get('border')
    if border:
        ratio = calculate_contrast_ratio(border, surface)
        if ratio < 1.5:
            warnings.append(f"Border contrast {ratio:.2f}:1 is below 1.5:1")

    return issues, warnings
