"""Shared pieces for the theme importers.

Importers are best effort: unknown or unparseable fields are skipped with a
warning, and the partial record is completed from the default preset before
it is validated into a ThemeConfig.
"""

import copy
import logging
import re
from functools import lru_cache
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..theme_engine.derived import RADIUS_KEYS, compute_font_sizes, compute_spacing
from ..theme_engine.errors import ThemeForgeError
from ..theme_engine.resolver import is_token_reference
from ..theme_engine.registry import DEFAULT_THEME_NAME, ThemeRegistry
from ..theme_engine.schema import REQUIRED_COLOR_ROLES, ThemeConfig
from ..theme_engine.validation import is_valid_color_literal

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r'^\s*(-?\d+(?:\.\d+)?)\s*(px|rem|em)?\s*$', re.IGNORECASE)
REM_PX = 16

# Used only when the default preset itself cannot be loaded
FALLBACK_THEME: Dict[str, Any] = {
    'meta': {'name': 'Imported Theme', 'version': '1.0.0'},
    'colors': {
        'primary': '#3b82f6',
        'surface': '#ffffff',
        'surfaceSecondary': '#f5f5f5',
        'surfaceHover': '#e5e5e5',
        'text': '#171717',
        'textSecondary': '#525252',
        'textMuted': '#737373',
        'border': '#e5e5e5',
        'borderStrong': '#d4d4d4',
        'borderSubtle': '#f5f5f5',
    },
    'typography': {'fontFamily': 'system-ui, -apple-system, sans-serif'},
}


@dataclass
class ImportResult:
    """Outcome of an import; ``theme`` is None when nothing usable was found"""
    theme: Optional[ThemeConfig] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.theme is not None and not self.errors


def parse_number(value: Any) -> Optional[float]:
    """``"16px"`` -> 16, ``"1rem"`` -> 16, ``"1.5"`` -> 1.5; None when unparseable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return clean_number(value)
    if not isinstance(value, str):
        return None
    match = _NUMBER.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if (match.group(2) or '').lower() in ('rem', 'em'):
        number *= REM_PX
    return clean_number(number)


def clean_number(value: float) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def is_color(value: Any) -> bool:
    return isinstance(value, str) and is_valid_color_literal(value.strip())


@lru_cache(maxsize=1)
def _default_record() -> Dict[str, Any]:
    try:
        return ThemeRegistry().load_theme_data(DEFAULT_THEME_NAME)
    except (ValueError, OSError, ThemeForgeError) as e:
        logger.warning(f"Could not load default preset, using built-in fallback: {e}")
        return FALLBACK_THEME


def default_theme_data() -> Dict[str, Any]:
    """The default preset's merged record."""
    return copy.deepcopy(_default_record())


def complete_theme(partial: Dict[str, Any], result: ImportResult, source: str) -> ImportResult:
    """Fill required fields from the default preset and validate.

    Only what a theme cannot exist without is borrowed (identity, required
    color roles and the body font), so a re-imported theme does not gain
    fields its source never had.
    """
    defaults = default_theme_data()
    record = dict(partial)

    meta = dict(record.get('meta') or {})
    meta.setdefault('name', f"Imported from {source}")
    meta.setdefault('version', '1.0.0')
    record['meta'] = meta

    colors = dict(record.get('colors') or {})
    default_colors = defaults.get('colors') or FALLBACK_THEME['colors']
    missing = [role for role in REQUIRED_COLOR_ROLES if role not in colors]
    for role in missing:
        colors[role] = default_colors.get(role, FALLBACK_THEME['colors'][role])
    if missing:
        result.warnings.append(f"Filled missing colors from the default theme: {', '.join(missing)}")
    record['colors'] = colors

    typography = dict(record.get('typography') or {})
    if not typography.get('fontFamily'):
        typography['fontFamily'] = (defaults.get('typography') or {}).get(
            'fontFamily', FALLBACK_THEME['typography']['fontFamily'])
        result.warnings.append("No font family found; using the default theme's")
    record['typography'] = typography

    try:
        result.theme = ThemeConfig.from_dict(record)
    except ValueError as e:
        result.errors.append(f"Imported {source} data is not a valid theme: {e}")
        logger.debug(f"Rejected imported record: {record}")
    return result


def clean_colors(colors: Dict[str, Any], result: ImportResult, section: str = "colors") -> Dict[str, str]:
    """Keep color literals and token references, dropping anything else with a warning."""
    kept: Dict[str, str] = {}
    for role, value in colors.items():
        if is_color(value) or is_token_reference(value):
            kept[role] = value.strip()
        else:
            result.warnings.append(f"Skipped {section}.{role}: '{value}' is not a color")
    return kept


def explicit_font_sizes(sizes: Dict[str, Any], typography: Dict[str, Any]) -> Dict[str, Any]:
    """Sizes that the base size and scale would not reproduce on their own."""
    computed = compute_font_sizes(typography)
    return {name: value for name, value in sizes.items() if computed.get(name) != value}


def explicit_spacing(values: Dict[int, Any], spacing: Dict[str, Any]) -> Dict[int, Any]:
    """Spacing entries that the base unit (and scale) would not reproduce."""
    computed = compute_spacing(spacing)
    return {index: value for index, value in sorted(values.items()) if computed.get(index) != value}


def radius_key(name: str) -> Optional[str]:
    """``subtle`` -> ``radiusSubtle``"""
    return dict(RADIUS_KEYS).get(name)
