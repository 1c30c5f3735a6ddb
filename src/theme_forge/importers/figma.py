"""Import themes from Figma variable collections and Tokens Studio files."""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from ..theme_engine.color import rgb_to_hex
from ..theme_engine.utils import kebab_to_camel
from .base import (
    ImportResult,
    clean_colors,
    complete_theme,
    explicit_font_sizes,
    explicit_spacing,
    parse_number,
    radius_key,
)

logger = logging.getLogger(__name__)

BORDER_WIDTH_KEYS = {'thin': 'thin', 'default': 'default', 'thick': 'thick'}
TYPOGRAPHY_STRINGS = {
    'font-family': 'fontFamily',
    'font-family-heading': 'fontFamilyHeading',
    'font-family-mono': 'fontFamilyMono',
}
TYPOGRAPHY_NUMBERS = {'base-size': 'baseSize', 'scale': 'scale'}


def figma_color(value: Any) -> Optional[str]:
    """Hex text as is; Figma API ``{r, g, b, a}`` channels (0-1) as hex."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and all(isinstance(value.get(c), (int, float)) for c in 'rgb'):
        return rgb_to_hex(*(value[c] * 255 for c in 'rgb'))
    return None


class _TokenCollector:
    """Accumulates ``group/name`` tokens into theme record sections."""

    def __init__(self, result: ImportResult):
        self.result = result
        self.colors: Dict[str, str] = {}
        self.dark_colors: Dict[str, str] = {}
        self.spacing: Dict[int, Any] = {}
        self.typography: Dict[str, Any] = {}
        self.sizes: Dict[str, Any] = {}
        self.borders: Dict[str, Any] = {}

    def add(self, name: str, value: Any, dark_value: Any = None) -> None:
        group, _, key = name.partition('/')
        if not key:
            self.result.warnings.append(f"Skipped token '{name}': no group")
            return

        if group in ('colors', 'color'):
            role = kebab_to_camel(key)
            light, dark = figma_color(value), figma_color(dark_value)
            if light is not None:
                self.colors[role] = light
            if dark is not None and dark != light:
                self.dark_colors[role] = dark
        elif group == 'typography' and key in TYPOGRAPHY_STRINGS:
            if isinstance(value, str) and value.strip():
                self.typography[TYPOGRAPHY_STRINGS[key]] = value
        else:
            target = self._numeric_target(group, key)
            if target is None:
                logger.debug(f"Ignoring token {name}")
                return
            number = parse_number(value)
            if number is None:
                self.result.warnings.append(f"Skipped token '{name}': '{value}' is not a number")
                return
            section, field_name = target
            section[field_name] = number

    def _numeric_target(self, group: str, key: str) -> Optional[Tuple[Dict[Any, Any], Any]]:
        """The section and key a numeric token is stored under."""
        if group == 'spacing' and key.isdigit():
            return self.spacing, int(key)
        if group == 'radius' and radius_key(key):
            return self.borders, radius_key(key)
        if group == 'border-width' and key in BORDER_WIDTH_KEYS:
            return self.borders, BORDER_WIDTH_KEYS[key]
        if group == 'typography' and key in TYPOGRAPHY_NUMBERS:
            return self.typography, TYPOGRAPHY_NUMBERS[key]
        if group == 'font-size':
            return self.sizes, key
        return None

    def record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {'colors': clean_colors(self.colors, self.result)}
        typography = dict(self.typography)
        sizes = explicit_font_sizes(self.sizes, typography)
        if sizes:
            typography['sizes'] = sizes
        if typography:
            record['typography'] = typography
        if self.spacing:
            spacing: Dict[str, Any] = {'baseUnit': self.spacing.get(1) or 4}
            values = explicit_spacing(self.spacing, spacing)
            if values:
                spacing['values'] = values
            record['spacing'] = spacing
        if self.borders:
            record['borders'] = self.borders
        dark_colors = clean_colors(self.dark_colors, self.result, "darkMode.colors")
        if dark_colors:
            record['darkMode'] = {'enabled': True, 'colors': dark_colors}
        return record


def _modes(collection: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """(light mode id, dark mode id); the first mode counts as light."""
    modes = [m for m in collection.get('modes') or [] if isinstance(m, dict) and 'modeId' in m]
    if not modes:
        return None, None
    light = str(modes[0]['modeId'])
    dark = next((str(m['modeId']) for m in modes[1:] if str(m.get('name', '')).lower() == 'dark'), None)
    return light, dark


def _import_collections(data: Dict[str, Any], result: ImportResult) -> Dict[str, Any]:
    collections = [c for c in data.get('collections') or [] if isinstance(c, dict)]
    if not collections:
        result.errors.append("No variable collections found")
        return {}

    collector = _TokenCollector(result)
    for collection in collections:
        light_id, dark_id = _modes(collection)
        for variable in collection.get('variables') or []:
            if not isinstance(variable, dict) or not isinstance(variable.get('name'), str):
                continue
            values = variable.get('valuesByMode') or {}
            if light_id is None and values:
                light_id = next(iter(values))
            value = values.get(light_id)
            if value is None:
                result.warnings.append(f"Variable '{variable['name']}' has no value in the light mode")
                continue
            collector.add(variable['name'], value, values.get(dark_id) if dark_id else None)

    record = collector.record()
    name = collections[0].get('name')
    if isinstance(name, str) and name.strip():
        record['meta'] = {'name': name}
    return record


def _token_values(group: Any) -> List[Tuple[str, Any]]:
    if not isinstance(group, dict):
        return []
    return [(key, token.get('value')) for key, token in group.items()
            if isinstance(token, dict) and 'value' in token]


def _import_tokens_studio(data: Dict[str, Any], result: ImportResult) -> Dict[str, Any]:
    """Tokens Studio sets: ``global`` for light values, ``dark`` for overrides."""
    global_set = data.get('global') if isinstance(data.get('global'), dict) else {}
    collector = _TokenCollector(result)
    for key, value in _token_values(global_set.get('colors')):
        collector.add(f"colors/{key}", value)
    for key, value in _token_values(global_set.get('spacing')):
        collector.add(f"spacing/{key}", value)
    border = global_set.get('border') if isinstance(global_set.get('border'), dict) else {}
    for key, value in _token_values(border.get('radius')):
        collector.add(f"radius/{key}", value)
    for key, value in _token_values(border.get('width')):
        collector.add(f"border-width/{key}", value)
    for key, value in _token_values(global_set.get('typography')):
        if key.startswith('font-size-'):
            collector.add(f"font-size/{key[len('font-size-'):]}", value)
        elif key == 'font-family-body':
            collector.add("typography/font-family", value)
        else:
            collector.add(f"typography/{key}", value)

    dark_set = data.get('dark') if isinstance(data.get('dark'), dict) else {}
    for key, value in _token_values(dark_set.get('colors')):
        role = kebab_to_camel(key)
        if isinstance(value, str) and collector.colors.get(role) != value:
            collector.dark_colors[role] = value
    return collector.record()


def import_from_figma(source: Union[str, Dict[str, Any]]) -> ImportResult:
    """Import a theme from Figma variables (``collections``) or Tokens Studio JSON.

    Returns:
        ImportResult; never raises
    """
    result = ImportResult()
    if isinstance(source, str):
        try:
            data = json.loads(source)
        except json.JSONDecodeError as e:
            result.errors.append(f"Invalid JSON: {e}")
            return result
    else:
        data = source
    if not isinstance(data, dict):
        result.errors.append("Figma tokens must be an object")
        return result

    if 'collections' in data:
        record = _import_collections(data, result)
    elif 'global' in data:
        record = _import_tokens_studio(data, result)
    else:
        result.errors.append("Neither Figma collections nor Tokens Studio sets found")
        return result

    if result.errors:
        return result
    return complete_theme(record, result, "Figma")
