"""WCAG contrast checking and repair.

Provides the relative-luminance and contrast-ratio formulas, WCAG level
classification, pairwise contrast matrices for theme audits, and two repair
strategies: a linear lightness walk (``suggest_contrast_fix``) and a binary
search for the smallest sufficient lightness change (``fix_contrast``).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple, Optional, Any

from .color import (
    clamp,
    hex_to_hsl,
    hsl_to_hex,
    is_light,
    parse_color,
    relative_luminance,
    to_hex,
)
from .schema import ContrastLevel, WCAGLevel, ThemeConfig

logger = logging.getLogger(__name__)

AA_NORMAL = 4.5
AA_LARGE = 3.0
AAA_NORMAL = 7.0
AAA_LARGE = 4.5

TEXT_ROLES = ('text', 'textSecondary', 'textMuted')
UI_ROLES = ('primary', 'border', 'success', 'warning', 'error', 'info')


@dataclass
class ContrastResult:
    """Classification of a foreground/background pair."""
    foreground: str
    background: str
    ratio: float
    aa: bool
    aa_large: bool
    aaa: bool
    aaa_large: bool
    level: ContrastLevel


@dataclass
class ContrastFix:
    """Outcome of a contrast repair attempt."""
    original: str
    fixed: str
    background: str
    target_ratio: float
    final_ratio: float
    success: bool
    steps: int = 0
    adjustment: float = 0.0
    role: Optional[str] = None


def calculate_luminance(r: int, g: int, b: int) -> float:
    """Calculate relative luminance of an RGB color.

    Uses the WCAG formula for luminance calculation.

    Args:
        r, g, b: RGB values 0-255

    Returns:
        Relative luminance 0.0-1.0
    """
    return relative_luminance((r, g, b))


def calculate_contrast_ratio(color1: str, color2: str) -> float:
    """Calculate WCAG contrast ratio between two colors.

    Args:
        color1, color2: Color literals (hex, rgb, hsl or named)

    Returns:
        Contrast ratio 1.0-21.0 (higher is more contrast)
    """
    lum1 = relative_luminance(parse_color(color1))
    lum2 = relative_luminance(parse_color(color2))

    lighter, darker = max(lum1, lum2), min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def classify_ratio(ratio: float) -> ContrastLevel:
    """Return the highest WCAG level met by a ratio."""
    if ratio >= AAA_NORMAL:
        return ContrastLevel.AAA
    if ratio >= AA_NORMAL:
        return ContrastLevel.AA
    if ratio >= AA_LARGE:
        return ContrastLevel.AA_LARGE
    return ContrastLevel.FAIL


def check_contrast(foreground: str, background: str) -> ContrastResult:
    """Check a color pair against the WCAG thresholds.

    Args:
        foreground: Text or UI color
        background: Background color

    Returns:
        ContrastResult with the ratio rounded to two decimals
    """
    ratio = calculate_contrast_ratio(foreground, background)
    return ContrastResult(
        foreground=foreground,
        background=background,
        ratio=round(ratio, 2),
        aa=ratio >= AA_NORMAL,
        aa_large=ratio >= AA_LARGE,
        aaa=ratio >= AAA_NORMAL,
        aaa_large=ratio >= AAA_LARGE,
        level=classify_ratio(ratio),
    )


def get_contrast_description(ratio: float) -> str:
    """Human-readable description of a contrast ratio."""
    if ratio >= 15:
        return "Excellent"
    if ratio >= AAA_NORMAL:
        return "Very good (AAA)"
    if ratio >= AA_NORMAL:
        return "Good (AA)"
    if ratio >= AA_LARGE:
        return "Fair (AA large text only)"
    return "Poor (fails WCAG)"


def required_ratio(level: str = 'AA', large_text: bool = False) -> float:
    if WCAGLevel(level) == WCAGLevel.AAA:
        return AAA_LARGE if large_text else AAA_NORMAL
    return AA_LARGE if large_text else AA_NORMAL


def meets_minimum_contrast(foreground: str, background: str,
                           level: str = 'AA', large_text: bool = False) -> bool:
    """Check if color combination meets WCAG contrast requirements.

    Args:
        foreground: Foreground color
        background: Background color
        level: 'AA' or 'AAA'
        large_text: Apply the large-text thresholds

    Returns:
        True if contrast meets requirements
    """
    return calculate_contrast_ratio(foreground, background) >= required_ratio(level, large_text)


def get_accessible_text_color(background: str) -> str:
    """Return black or white, whichever contrasts more with the background."""
    on_black = calculate_contrast_ratio('#000000', background)
    on_white = calculate_contrast_ratio('#ffffff', background)
    return '#000000' if on_black >= on_white else '#ffffff'


def check_multiple_contrasts(pairs: List[Tuple[str, str]]) -> List[ContrastResult]:
    return [check_contrast(fg, bg) for fg, bg in pairs]


def generate_contrast_matrix(colors: Dict[str, str]) -> Dict[str, Dict[str, float]]:
    """Compute the full pairwise contrast matrix for named colors.

    Args:
        colors: Mapping of names to color literals

    Returns:
        Nested mapping ``matrix[a][b]`` of ratios rounded to two decimals
    """
    matrix: Dict[str, Dict[str, float]] = {}
    for name_a, color_a in colors.items():
        matrix[name_a] = {}
        for name_b, color_b in colors.items():
            matrix[name_a][name_b] = round(calculate_contrast_ratio(color_a, color_b), 2)
    return matrix


def _lightness_direction(background: str) -> int:
    """-1 (darken the foreground) on light backgrounds, +1 on dark ones."""
    return -1 if is_light(background) else 1


def suggest_contrast_fix(foreground: str, background: str,
                         target_ratio: float = AA_NORMAL, step: float = 1) -> ContrastFix:
    """Walk foreground lightness until the target ratio is met.

    Lightness moves toward black on light backgrounds and toward white on
    dark ones, in ``step`` increments, and stops at the target or at the 0/100 bound.

    Args:
        foreground: Color to adjust
        background: Fixed background color
        target_ratio: Ratio to reach
        step: Lightness change per iteration, in percentage points

    Returns:
        ContrastFix describing the adjusted color and the number of steps
    """
    original = foreground
    current = to_hex(foreground)
    ratio = calculate_contrast_ratio(current, background)
    if ratio >= target_ratio:
        return ContrastFix(original, current, background, target_ratio,
                           round(ratio, 2), True)

    h, s, l = hex_to_hsl(current)
    direction = _lightness_direction(background)
    lightness = float(l)
    steps = 0
    bound = 100.0 if direction > 0 else 0.0

    while ratio < target_ratio and lightness != bound:
        lightness = clamp(lightness + direction * step, 0, 100)
        steps += 1
        current = hsl_to_hex(h, s, lightness)
        ratio = calculate_contrast_ratio(current, background)

    success = ratio >= target_ratio
    if not success:
        logger.debug(
            f"Could not reach {target_ratio}:1 for {original} on {background}; "
            f"best {ratio:.2f}:1"
        )
    return ContrastFix(
        original=original,
        fixed=current,
        background=background,
        target_ratio=target_ratio,
        final_ratio=round(ratio, 2),
        success=success,
        steps=steps,
        adjustment=round(lightness - l, 2),
    )


def fix_contrast(foreground: str, background: str,
                 target_ratio: float = AA_NORMAL, max_adjustment: float = 50) -> ContrastFix:
    """Binary-search the smallest lightness change that meets the target.

    Args:
        foreground: Color to adjust
        background: Fixed background color
        target_ratio: Ratio to reach
        max_adjustment: Largest allowed lightness change in percentage points

    Returns:
        ContrastFix; when the target is unreachable within ``max_adjustment``
        the furthest allowed color is returned with ``success=False``
    """
    current = to_hex(foreground)
    ratio = calculate_contrast_ratio(current, background)
    if ratio >= target_ratio:
        return ContrastFix(foreground, current, background, target_ratio,
                           round(ratio, 2), True)

    h, s, l = hex_to_hsl(current)
    direction = _lightness_direction(background)
    limit = clamp(l + direction * max_adjustment, 0, 100)
    furthest = hsl_to_hex(h, s, limit)
    furthest_ratio = calculate_contrast_ratio(furthest, background)

    if furthest_ratio < target_ratio:
        return ContrastFix(foreground, furthest, background, target_ratio,
                           round(furthest_ratio, 2), False,
                           adjustment=round(limit - l, 2))

    low, high = 0.0, abs(limit - l)
    best = furthest
    best_ratio = furthest_ratio
    steps = 0
    while high - low > 0.5:
        steps += 1
        mid = (low + high) / 2
        candidate = hsl_to_hex(h, s, l + direction * mid)
        candidate_ratio = calculate_contrast_ratio(candidate, background)
        if candidate_ratio >= target_ratio:
            high = mid
            best, best_ratio = candidate, candidate_ratio
        else:
            low = mid

    return ContrastFix(
        original=foreground,
        fixed=best,
        background=background,
        target_ratio=target_ratio,
        final_ratio=round(best_ratio, 2),
        success=True,
        steps=steps,
        adjustment=round(direction * high, 2),
    )


def _theme_contrast_targets(level: str) -> Tuple[float, float]:
    if WCAGLevel(level) == WCAGLevel.AAA:
        return AAA_NORMAL, AAA_LARGE
    return AA_NORMAL, AA_LARGE


def preview_contrast_fixes(theme: ThemeConfig, level: str = 'AA') -> List[ContrastFix]:
    """List the fixes ``fix_theme_contrast`` would apply, without applying them."""
    from .resolver import resolve_lenient

    text_target, ui_target = _theme_contrast_targets(level)
    record = theme.to_dict()
    colors = record['colors']
    surface = resolve_lenient(colors['surface'], record)

    fixes = []
    for roles, target in ((TEXT_ROLES, text_target), (UI_ROLES, ui_target)):
        for role in roles:
            value = colors.get(role)
            if not value:
                continue
            literal = resolve_lenient(value, record)
            if calculate_contrast_ratio(literal, surface) >= target:
                continue
            fix = fix_contrast(literal, surface, target, max_adjustment=100)
            fix.role = role
            fixes.append(fix)
    return fixes


def fix_theme_contrast(theme: ThemeConfig, level: str = 'AA') -> Tuple[ThemeConfig, List[ContrastFix]]:
    """Repair text and UI colors that fail contrast against ``surface``.

    Text roles target 4.5:1 (7:1 for AAA); UI roles target 3:1 (4.5:1 for AAA).

    Args:
        theme: Theme to repair
        level: 'AA' or 'AAA'

    Returns:
        Tuple of (new theme, fixes applied)
    """
    fixes = preview_contrast_fixes(theme, level)
    if not fixes:
        return theme, []

    data = theme.to_dict()
    for fix in fixes:
        data['colors'][fix.role] = fix.fixed
        logger.info(f"Adjusted {fix.role}: {fix.original} -> {fix.fixed} ({fix.final_ratio}:1)")

    return ThemeConfig.from_dict(data), fixes


def contrast_summary(result: ContrastResult) -> Dict[str, Any]:
    """Plain dictionary view of a ContrastResult for display and JSON output."""
    return {
        'ratio': result.ratio,
        'level': ContrastLevel(result.level).value,
        'AA': result.aa,
        'AA_large': result.aa_large,
        'AAA': result.aaa,
        'AAA_large': result.aaa_large,
        'description': get_contrast_description(result.ratio),
    }
