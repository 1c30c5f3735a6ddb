"""Import themes from a Tailwind CSS configuration.

Accepts an already parsed config dictionary or the text of a
``tailwind.config.js``. JavaScript text is converted to JSON on a best-effort
basis (comments stripped, keys quoted, single quotes and trailing commas
fixed); configs that compute values with function calls cannot be read.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

from ..theme_engine.utils import kebab_to_camel
from .base import (
    ImportResult,
    clean_colors,
    complete_theme,
    explicit_font_sizes,
    explicit_spacing,
    is_color,
    parse_number,
    radius_key,
)

logger = logging.getLogger(__name__)

_TOKEN = re.compile(
    r'/\*.*?\*/|//[^\n]*|"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'|`[^`]*`', re.DOTALL
)
_BARE_KEY = re.compile(r'([{,]\s*)([A-Za-z_$][\w$-]*|\d+)\s*:')
_TRAILING_COMMA = re.compile(r',(\s*[}\]])')
_PLACEHOLDER = re.compile(r'\x00(\d+)\x00')

# Preferred source palettes for each role, first match wins
ROLE_CANDIDATES = {
    'primary': ('primary', 'brand', 'blue', 'indigo'),
    'secondary': ('secondary', 'purple', 'violet'),
    'accent': ('accent', 'pink'),
    'surface': ('surface', 'background', 'white'),
    'text': ('text', 'foreground'),
    'success': ('success', 'green', 'emerald'),
    'warning': ('warning', 'amber', 'yellow'),
    'error': ('error', 'danger', 'red'),
    'info': ('info', 'sky', 'cyan'),
}

# Role -> shade taken from a neutral palette (gray/neutral/slate)
NEUTRAL_SHADES = {
    'surfaceSecondary': '50',
    'surfaceHover': '100',
    'borderSubtle': '100',
    'border': '200',
    'borderStrong': '300',
    'textMuted': '500',
    'textSecondary': '600',
    'text': '900',
}
NEUTRAL_PALETTES = ('neutral', 'gray', 'slate', 'zinc', 'stone')

RADIUS_ALIASES = {'DEFAULT': 'radiusSubtle', 'md': 'radiusSubtle', 'lg': 'radiusRelaxed',
                  'full': 'radiusPill'}
WIDTH_KEYS = {'thin': 'thin', 'DEFAULT': 'default', 'thick': 'thick'}


def js_config_to_dict(text: str) -> Dict[str, Any]:
    """Convert the object literal of a JS config file to a dictionary.

    Raises:
        ValueError: No object literal found, or it is not plain data
    """
    strings: List[str] = []

    def stash(match):
        literal = match.group(0)
        if literal.startswith(('/*', '//')):
            return ' '
        if literal[0] in "'`":
            literal = json.dumps(literal[1:-1].replace("\\'", "'"))
        strings.append(literal)
        return f"\x00{len(strings) - 1}\x00"

    body = _TOKEN.sub(stash, text)

    start, end = body.find('{'), body.rfind('}')
    if start < 0 or end <= start:
        raise ValueError("No object literal found")
    body = body[start:end + 1]
    body = _BARE_KEY.sub(lambda m: f'{m.group(1)}"{m.group(2)}":', body)
    body = _TRAILING_COMMA.sub(r'\1', body)
    body = _PLACEHOLDER.sub(lambda m: strings[int(m.group(1))], body)

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValueError(f"Config is not plain data: {e}")
    if not isinstance(data, dict):
        raise ValueError("Config is not an object")
    return data


def _theme_section(config: Dict[str, Any]) -> Dict[str, Any]:
    """``theme`` merged with ``theme.extend`` (extend wins)."""
    theme = config.get('theme') if isinstance(config.get('theme'), dict) else {}
    merged = {k: v for k, v in theme.items() if k != 'extend'}
    extend = theme.get('extend') if isinstance(theme.get('extend'), dict) else {}
    for key, value in extend.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _palette_color(value: Any, shade: str = '500') -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for key in (shade, 'DEFAULT', '500'):
            if isinstance(value.get(key), str):
                return value[key]
    return None


def _colors(palette: Dict[str, Any], result: ImportResult) -> Dict[str, str]:
    colors: Dict[str, str] = {}
    for name, value in palette.items():
        color = _palette_color(value)
        if color is not None and is_color(color):
            colors[kebab_to_camel(name)] = color
        elif color is not None:
            result.warnings.append(f"Skipped color '{name}': '{color}' is not a color")

    for role, candidates in ROLE_CANDIDATES.items():
        if role in colors:
            continue
        for candidate in candidates:
            color = _palette_color(palette.get(candidate))
            if color and is_color(color):
                colors[role] = color
                break

    neutral = next((palette[name] for name in NEUTRAL_PALETTES if isinstance(palette.get(name), dict)), None)
    if neutral:
        for role, shade in NEUTRAL_SHADES.items():
            if role not in colors and isinstance(neutral.get(shade), str):
                colors[role] = neutral[shade]
    return clean_colors(colors, result)


def _font_stack(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        names = [name for name in value if isinstance(name, str)]
        return ", ".join(f'"{name}"' if ' ' in name and not name.startswith(('"', "'")) else name
                         for name in names) or None
    return None


def _font_size(value: Any) -> Optional[Any]:
    if isinstance(value, list) and value:
        value = value[0]
    return parse_number(value)


def _numbers(section: Any) -> Dict[str, Any]:
    if not isinstance(section, dict):
        return {}
    parsed = {str(k): parse_number(v) for k, v in section.items()}
    return {k: v for k, v in parsed.items() if v is not None}


def import_from_tailwind(source: Union[str, Dict[str, Any]]) -> ImportResult:
    """Import a theme from a Tailwind config dictionary or config file text.

    Returns:
        ImportResult; never raises
    """
    result = ImportResult()
    if isinstance(source, str):
        try:
            config = js_config_to_dict(source)
        except ValueError as e:
            result.errors.append(f"Could not read Tailwind config: {e}")
            return result
    else:
        config = source
    if not isinstance(config, dict):
        result.errors.append("Tailwind config must be an object")
        return result

    theme = _theme_section(config)
    record: Dict[str, Any] = {}

    palette = theme.get('colors')
    record['colors'] = _colors(palette, result) if isinstance(palette, dict) else {}

    typography: Dict[str, Any] = {}
    families = theme.get('fontFamily') if isinstance(theme.get('fontFamily'), dict) else {}
    for source_key, key in (('sans', 'fontFamily'), ('heading', 'fontFamilyHeading'),
                            ('display', 'fontFamilyHeading'), ('mono', 'fontFamilyMono')):
        stack = _font_stack(families.get(source_key))
        if stack and key not in typography:
            typography[key] = stack
    font_sizes = theme.get('fontSize') if isinstance(theme.get('fontSize'), dict) else {}
    sizes = {k: v for k, v in ((str(k), _font_size(v)) for k, v in font_sizes.items()) if v is not None}
    if 'base' in sizes:
        typography['baseSize'] = sizes['base']
    explicit = explicit_font_sizes(sizes, typography)
    if explicit:
        typography['sizes'] = explicit
    weights = _numbers(theme.get('fontWeight'))
    if weights:
        typography['weights'] = weights
    line_heights = _numbers(theme.get('lineHeight'))
    if line_heights:
        typography['lineHeights'] = line_heights
    if typography:
        record['typography'] = typography

    spacing_values = {int(k): v for k, v in _numbers(theme.get('spacing')).items() if k.isdigit()}
    if spacing_values:
        spacing: Dict[str, Any] = {'baseUnit': spacing_values.get(1) or 4}
        values = explicit_spacing(spacing_values, spacing)
        if values:
            spacing['values'] = values
        record['spacing'] = spacing

    borders: Dict[str, Any] = {}
    for name, value in _numbers(theme.get('borderWidth')).items():
        if name in WIDTH_KEYS:
            borders[WIDTH_KEYS[name]] = value
    radii = _numbers(theme.get('borderRadius'))
    for name, value in radii.items():
        key = radius_key(name)
        if key:
            borders[key] = value
    for name, key in RADIUS_ALIASES.items():
        if name in radii and key not in borders:
            borders[key] = radii[name]
    if borders:
        record['borders'] = borders

    breakpoints = _numbers(theme.get('screens'))
    if breakpoints:
        record['breakpoints'] = breakpoints

    if config.get('darkMode'):
        result.warnings.append("Tailwind dark mode strategy found; dark colors are not part of a Tailwind config")

    return complete_theme(record, result, "Tailwind")
