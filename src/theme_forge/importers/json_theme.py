"""Import themes from JSON.

Two shapes are understood: the theme record itself (as in theme files and
the YAML output) and the document written by the JSON generator, whose
typography, spacing and borders sections carry computed tables.
"""

import json
import logging
from typing import Any, Dict, Union

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

PASSTHROUGH_SECTIONS = ('buttons', 'cards', 'darkMode')


def is_generated_document(data: Dict[str, Any]) -> bool:
    """True for the JSON generator's shape."""
    typography = data.get('typography')
    borders = data.get('borders')
    return (
        (isinstance(typography, dict) and isinstance(typography.get('fontSize'), dict))
        or (isinstance(borders, dict) and isinstance(borders.get('width'), dict))
    )


def _numbers(values: Any) -> Dict[str, Any]:
    if not isinstance(values, dict):
        return {}
    parsed = {str(k): parse_number(v) for k, v in values.items()}
    return {k: v for k, v in parsed.items() if v is not None}


def _typography_from_document(section: Dict[str, Any]) -> Dict[str, Any]:
    typography: Dict[str, Any] = {}
    for key in ('fontFamily', 'fontFamilyHeading', 'fontFamilyMono'):
        if isinstance(section.get(key), str) and section[key].strip():
            typography[key] = section[key]
    for key in ('baseSize', 'scale'):
        number = parse_number(section.get(key))
        if number is not None:
            typography[key] = number
    sizes = explicit_font_sizes(_numbers(section.get('fontSize')), typography)
    if sizes:
        typography['sizes'] = sizes
    weights = _numbers(section.get('fontWeight'))
    if weights:
        typography['weights'] = weights
    line_heights = _numbers(section.get('lineHeight'))
    if line_heights:
        typography['lineHeights'] = line_heights
    return typography


def _spacing_from_document(section: Dict[str, Any]) -> Dict[str, Any]:
    spacing: Dict[str, Any] = {}
    base_unit = parse_number(section.get('baseUnit'))
    if base_unit is not None:
        spacing['baseUnit'] = base_unit
    if isinstance(section.get('scale'), list):
        scale = [parse_number(v) for v in section['scale']]
        if all(v is not None for v in scale):
            spacing['scale'] = scale
    values = {int(k): v for k, v in _numbers(section.get('values')).items() if k.isdigit()}
    explicit = explicit_spacing(values, spacing)
    if explicit:
        spacing['values'] = explicit
    return spacing


def _borders_from_document(section: Dict[str, Any]) -> Dict[str, Any]:
    borders: Dict[str, Any] = {}
    widths = _numbers(section.get('width'))
    for key in ('thin', 'default', 'thick'):
        if key in widths:
            borders[key] = widths[key]
    for name, value in _numbers(section.get('radius')).items():
        key = radius_key(name)
        if key:
            borders[key] = value
    if isinstance(section.get('style'), str):
        borders['defaultStyle'] = section['style']
    return borders


def _record_from_document(data: Dict[str, Any]) -> Dict[str, Any]:
    record: Dict[str, Any] = {}
    if isinstance(data.get('meta'), dict):
        record['meta'] = data['meta']
    if isinstance(data.get('typography'), dict):
        record['typography'] = _typography_from_document(data['typography'])
    if isinstance(data.get('spacing'), dict):
        record['spacing'] = _spacing_from_document(data['spacing'])
    if isinstance(data.get('borders'), dict):
        record['borders'] = _borders_from_document(data['borders'])
    breakpoints = _numbers(data.get('breakpoints'))
    if breakpoints:
        record['breakpoints'] = breakpoints
    return record


def _record_from_theme(data: Dict[str, Any]) -> Dict[str, Any]:
    """A theme record, with a few loose top-level identity keys accepted."""
    record = {k: v for k, v in data.items() if k not in ('colors', 'palette')}
    if 'meta' not in record:
        meta = {key: data[key] for key in ('name', 'version', 'description', 'author')
                if isinstance(data.get(key), str)}
        if meta:
            record['meta'] = meta
        for key in meta:
            record.pop(key, None)
    return record


def import_from_json(source: Union[str, Dict[str, Any]]) -> ImportResult:
    """Import a theme from JSON text or an already parsed dictionary.

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
        result.errors.append("JSON theme must be an object")
        return result

    if is_generated_document(data):
        record = _record_from_document(data)
        logger.debug("Importing JSON generator document")
    else:
        record = _record_from_theme(data)

    colors = data.get('colors') if isinstance(data.get('colors'), dict) else data.get('palette')
    record['colors'] = clean_colors(colors, result) if isinstance(colors, dict) else {}

    for section in PASSTHROUGH_SECTIONS:
        if isinstance(data.get(section), dict):
            record[section] = data[section]

    return complete_theme(record, result, "JSON")
