"""Derived token values.

Font-size scale, spacing map, border widths, radii and breakpoints are
computed here once per compiled theme and handed to every generator, so all
output formats agree on rounding and on the exponent range.
"""

from typing import Any, Dict, Tuple

from .color import round_half_up
from .schema import DerivedValues, DEFAULT_BREAKPOINTS, Number

# Size name -> exponent applied to the type scale ratio
FONT_SIZE_STEPS: Tuple[Tuple[str, int], ...] = (
    ('xs', -2),
    ('sm', -1),
    ('base', 0),
    ('lg', 1),
    ('xl', 2),
    ('2xl', 3),
    ('3xl', 4),
    ('4xl', 5),
    ('5xl', 6),
    ('6xl', 7),
)

SPACING_INDICES: Tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 12)

RADIUS_KEYS = (
    ('subtle', 'radiusSubtle'),
    ('relaxed', 'radiusRelaxed'),
    ('pill', 'radiusPill'),
    ('liquid', 'radiusLiquid'),
)


def _clean_number(value: Number) -> Number:
    """Drop a redundant ``.0`` so 8.0 prints as 8 everywhere."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def compute_font_sizes(typography: Dict[str, Any]) -> Dict[str, Number]:
    """``round(baseSize * scale ** n)`` for n in -2..7, with explicit overrides."""
    base = typography.get('baseSize', 16)
    scale = typography.get('scale', 1.25)
    sizes: Dict[str, Number] = {
        name: round_half_up(base * scale ** exponent)
        for name, exponent in FONT_SIZE_STEPS
    }
    for name, value in (typography.get('sizes') or {}).items():
        sizes[name] = _clean_number(value)
    return sizes


def compute_spacing(spacing: Dict[str, Any]) -> Dict[int, Number]:
    """Spacing indices 0-10 and 12.

    Explicit ``values`` win; otherwise ``scale[i]`` when the scale is long
    enough; otherwise ``baseUnit * i``. Extra explicit indices are kept.
    """
    base_unit = spacing.get('baseUnit', 4)
    scale = spacing.get('scale') or []
    explicit = {int(k): v for k, v in (spacing.get('values') or {}).items()}

    result: Dict[int, Number] = {}
    for index in SPACING_INDICES:
        if index in explicit:
            value = explicit[index]
        elif index == 0:
            value = 0
        elif index < len(scale):
            value = scale[index]
        else:
            value = base_unit * index
        result[index] = _clean_number(value)

    for index in sorted(set(explicit) - set(result)):
        result[index] = _clean_number(explicit[index])
    return result


def compute_derived_values(record: Dict[str, Any]) -> DerivedValues:
    """Compute every derived quantity from a resolved interchange record.

    Args:
        record: Literal-valued theme dictionary

    Returns:
        DerivedValues shared by all generators
    """
    borders = record.get('borders') or {}
    radii = {
        name: _clean_number(borders[key])
        for name, key in RADIUS_KEYS
        if borders.get(key) is not None
    }
    breakpoints = dict(DEFAULT_BREAKPOINTS)
    breakpoints.update({k: _clean_number(v) for k, v in (record.get('breakpoints') or {}).items()})

    return DerivedValues(
        font_sizes=compute_font_sizes(record.get('typography') or {}),
        spacing=compute_spacing(record.get('spacing') or {}),
        border_widths={
            'thin': _clean_number(borders.get('thin', 1)),
            'default': _clean_number(borders.get('default', 2)),
            'thick': _clean_number(borders.get('thick', 4)),
        },
        radii=radii,
        breakpoints=breakpoints,
    )
