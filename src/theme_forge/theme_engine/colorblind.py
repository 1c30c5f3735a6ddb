"""Color vision deficiency simulation and palette safety checks.

Simulation applies a fixed 3x3 matrix per deficiency to the linear-RGB
representation of a color and re-encodes the result as sRGB hex. Safety
checks re-run the contrast formula on simulated semantic color pairs to find
pairs that collapse into each other under a deficiency.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .color import parse_color, rgb_to_hex, srgb_to_linear, linear_to_srgb
from .contrast import calculate_contrast_ratio
from .schema import ColorBlindnessType, ThemeConfig

logger = logging.getLogger(__name__)

Matrix = Tuple[Tuple[float, float, float], ...]

SIMULATION_MATRICES: Dict[ColorBlindnessType, Matrix] = {
    ColorBlindnessType.PROTANOPIA: (
        (0.567, 0.433, 0.0),
        (0.558, 0.442, 0.0),
        (0.0, 0.242, 0.758),
    ),
    ColorBlindnessType.DEUTERANOPIA: (
        (0.625, 0.375, 0.0),
        (0.7, 0.3, 0.0),
        (0.0, 0.3, 0.7),
    ),
    ColorBlindnessType.TRITANOPIA: (
        (0.95, 0.05, 0.0),
        (0.0, 0.433, 0.567),
        (0.0, 0.475, 0.525),
    ),
    ColorBlindnessType.PROTANOMALY: (
        (0.817, 0.183, 0.0),
        (0.333, 0.667, 0.0),
        (0.0, 0.125, 0.875),
    ),
    ColorBlindnessType.DEUTERANOMALY: (
        (0.8, 0.2, 0.0),
        (0.258, 0.742, 0.0),
        (0.0, 0.142, 0.858),
    ),
    ColorBlindnessType.TRITANOMALY: (
        (0.967, 0.033, 0.0),
        (0.0, 0.733, 0.267),
        (0.0, 0.183, 0.817),
    ),
    ColorBlindnessType.ACHROMATOPSIA: (
        (0.299, 0.587, 0.114),
        (0.299, 0.587, 0.114),
        (0.299, 0.587, 0.114),
    ),
}

# Share of the original color kept by the partial achromatomaly model
ACHROMATOMALY_COLOR_WEIGHT = 0.4

DEFAULT_CHECK_TYPES = (
    ColorBlindnessType.PROTANOPIA,
    ColorBlindnessType.DEUTERANOPIA,
    ColorBlindnessType.TRITANOPIA,
)

SEMANTIC_PAIRS = (
    ('primary', 'secondary'),
    ('success', 'error'),
    ('success', 'warning'),
    ('error', 'warning'),
)

# A pair is flagged when it drops below this ratio after simulation...
SIMULATED_RATIO_FLOOR = 1.5
# ...but was clearly distinguishable before it
ORIGINAL_RATIO_FLOOR = 2.0


@dataclass
class ColorBlindnessIssue:
    """A color pair that becomes hard to tell apart under a deficiency."""
    deficiency: ColorBlindnessType
    role_a: str
    role_b: str
    original_ratio: float
    simulated_ratio: float
    simulated_a: str
    simulated_b: str

    @property
    def message(self) -> str:
        return (
            f"{self.role_a} and {self.role_b} become hard to distinguish with "
            f"{ColorBlindnessType(self.deficiency).value} "
            f"({self.original_ratio}:1 -> {self.simulated_ratio}:1)"
        )


def _apply_matrix(matrix: Matrix, channels: Sequence[float]) -> List[float]:
    return [
        row[0] * channels[0] + row[1] * channels[1] + row[2] * channels[2]
        for row in matrix
    ]


def simulate_color_blindness(color: str, deficiency: ColorBlindnessType) -> str:
    """Simulate how a color appears with a color vision deficiency.

    Args:
        color: Color literal
        deficiency: Deficiency to simulate

    Returns:
        Simulated hex color
    """
    deficiency = ColorBlindnessType(deficiency)
    rgb = parse_color(color)
    linear = [srgb_to_linear(c) for c in rgb]

    if deficiency == ColorBlindnessType.ACHROMATOMALY:
        gray = _apply_matrix(SIMULATION_MATRICES[ColorBlindnessType.ACHROMATOPSIA], linear)
        weight = ACHROMATOMALY_COLOR_WEIGHT
        simulated = [weight * c + (1 - weight) * g for c, g in zip(linear, gray)]
    else:
        simulated = _apply_matrix(SIMULATION_MATRICES[deficiency], linear)

    return rgb_to_hex(*(linear_to_srgb(c) for c in simulated))


def get_all_simulations(color: str) -> Dict[str, str]:
    """Simulate a color under every supported deficiency."""
    return {
        deficiency.value: simulate_color_blindness(color, deficiency)
        for deficiency in ColorBlindnessType
    }


def validate_color_blindness_safety(
    colors: Dict[str, str],
    types: Sequence[ColorBlindnessType] = DEFAULT_CHECK_TYPES,
) -> List[ColorBlindnessIssue]:
    """Find semantic color pairs that collapse under simulated deficiencies.

    Args:
        colors: Literal-valued color roles (references must be resolved)
        types: Deficiencies to check

    Returns:
        List of issues, empty when the palette is safe
    """
    issues = []
    for deficiency in types:
        deficiency = ColorBlindnessType(deficiency)
        for role_a, role_b in SEMANTIC_PAIRS:
            color_a = colors.get(role_a)
            color_b = colors.get(role_b)
            if not color_a or not color_b:
                continue

            original_ratio = calculate_contrast_ratio(color_a, color_b)
            simulated_a = simulate_color_blindness(color_a, deficiency)
            simulated_b = simulate_color_blindness(color_b, deficiency)
            simulated_ratio = calculate_contrast_ratio(simulated_a, simulated_b)

            if simulated_ratio < SIMULATED_RATIO_FLOOR and original_ratio > ORIGINAL_RATIO_FLOOR:
                issues.append(ColorBlindnessIssue(
                    deficiency=deficiency,
                    role_a=role_a,
                    role_b=role_b,
                    original_ratio=round(original_ratio, 2),
                    simulated_ratio=round(simulated_ratio, 2),
                    simulated_a=simulated_a,
                    simulated_b=simulated_b,
                ))
    if issues:
        logger.debug(f"Found {len(issues)} color blindness issues")
    return issues


def is_color_blind_friendly(colors: Dict[str, str],
                            types: Sequence[ColorBlindnessType] = DEFAULT_CHECK_TYPES) -> bool:
    return not validate_color_blindness_safety(colors, types)


def get_color_blind_recommendations(colors: Dict[str, str]) -> List[str]:
    """Suggest palette changes for every unsafe pair."""
    issues = validate_color_blindness_safety(colors)
    if not issues:
        return ["Palette remains distinguishable for common color vision deficiencies"]

    recommendations = []
    seen = set()
    for issue in issues:
        key = (issue.role_a, issue.role_b)
        if key in seen:
            continue
        seen.add(key)
        recommendations.append(
            f"Differentiate {issue.role_a} and {issue.role_b} by lightness, "
            f"not hue alone; pair them with icons or text labels"
        )
    return recommendations


def simulate_theme_color_blindness(theme: ThemeConfig,
                                   deficiency: ColorBlindnessType,
                                   name: Optional[str] = None) -> ThemeConfig:
    """Return a copy of the theme with every literal color simulated.

    References and keywords are left untouched so the copy resolves the same way.
    """
    from .resolver import is_token_reference
    from .validation import is_valid_color_literal

    data = theme.to_dict()
    data['colors'] = {
        role: (
            simulate_color_blindness(value, deficiency)
            if not is_token_reference(value) and is_valid_color_literal(value, allow_keywords=False)
            else value
        )
        for role, value in data['colors'].items()
    }
    data['meta']['name'] = name or f"{theme.meta.name} ({ColorBlindnessType(deficiency).value})"
    return ThemeConfig.from_dict(data)
