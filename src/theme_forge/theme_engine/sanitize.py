"""Sanitization of theme input from untrusted sources.

Theme files can be written by anyone, and their strings end up inside CSS,
JavaScript, JSON and HTML documentation. ``sanitize_theme`` cleans a theme
record before generation: strings are trimmed and truncated, control
characters are removed, numeric strings become numbers, and color fields
carrying anything that could break out of a declaration are replaced with a
safe default and flagged. Role, variant and breakpoint names lose the same
syntax. The destination escapers (``escape_css_value``, ``escape_js_string``)
are applied again by the generators at output time.
"""

import copy
import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .schema import ThemeConfig, BorderStyle

logger = logging.getLogger(__name__)

MAX_STRING_LENGTH = 1000

# Anything in a color value that could end a declaration or start a new one
UNSAFE_COLOR_CONTENT = ('url(', 'expression(', 'javascript:', ';', '{', '}', '<', '>')

_PAYLOAD_PATTERN = re.compile(r'\*/|/\*|</script|</style|<!--|-->', re.IGNORECASE)
_FONT_UNSAFE_PATTERN = re.compile(r'[;{}<>]')
_CSS_ESCAPE_PATTERN = re.compile(r'[\\;{}<>]')

_DISPLAY_ENTITIES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#x27;',
    '/': '&#x2F;',
}

_JS_SENSITIVE = {
    '<': '\\u003c',
    '>': '\\u003e',
    '&': '\\u0026',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
}

NUMERIC_GROUPS = {
    'typography': ('baseSize', 'scale'),
    'borders': ('thin', 'default', 'thick', 'width', 'radiusSubtle', 'radiusRelaxed',
                'radiusPill', 'radiusLiquid'),
    'spacing': ('baseUnit', 'unit'),
}


@dataclass
class SanitizeFlag:
    """A value the sanitizer changed or could not repair."""
    field: str
    original: Any
    replacement: Any
    reason: str

    @property
    def message(self) -> str:
        return f"{self.reason}; replaced with {self.replacement!r}"


@dataclass
class SanitizeResult:
    """Cleaned interchange dictionary plus everything that was flagged."""
    data: Dict[str, Any]
    flags: List[SanitizeFlag] = field(default_factory=list)

    @property
    def theme(self) -> ThemeConfig:
        """The cleaned record as a ThemeConfig (raises ValueError if incomplete)."""
        return ThemeConfig.from_dict(self.data)

    @property
    def changed(self) -> bool:
        return bool(self.flags)


def remove_dangerous_chars(value: str) -> str:
    """Strip control characters 0-31 and 127, keeping tab, LF and CR."""
    return ''.join(
        char for char in value
        if char in '\t\n\r' or (32 <= ord(char) and ord(char) != 127)
    )


def neutralize_payloads(value: str) -> str:
    """Remove comment and closing-tag sequences, repeating until none are left."""
    previous = None
    while previous != value:
        previous = value
        value = _PAYLOAD_PATTERN.sub('', value)
    return value


def escape_for_display(value: str) -> str:
    """HTML-entity escape ``& < > " ' /``."""
    return ''.join(_DISPLAY_ENTITIES.get(char, char) for char in value)


def escape_html_sensitive(text: str) -> str:
    """Escape characters that could close a ``<script>`` block in JS/JSON text."""
    return ''.join(_JS_SENSITIVE.get(char, char) for char in text)


def escape_js_string(value: str) -> str:
    """Quoted JavaScript string literal, safe to embed in HTML."""
    return escape_html_sensitive(json.dumps(value, ensure_ascii=False))


def escape_css_value(value: Any) -> str:
    """Make a value safe to place after ``property:`` in a CSS declaration.

    Quotes and commas survive so that font stacks stay intact.
    """
    text = neutralize_payloads(remove_dangerous_chars(str(value))).replace('\n', ' ')
    return _CSS_ESCAPE_PATTERN.sub(lambda m: f"\\{ord(m.group(0)):x} ", text)


def sanitize_font_family(value: str) -> str:
    """Keep quotes and commas; drop ``;{}<>`` and comment sequences."""
    cleaned = neutralize_payloads(remove_dangerous_chars(value))
    return _FONT_UNSAFE_PATTERN.sub('', cleaned).strip()


def _default_color(role: str, dark: bool = False) -> str:
    surface_like = role.startswith('surface') or role in ('background', 'textInverted')
    light_default = '#ffffff' if surface_like else '#000000'
    if dark:
        return '#000000' if light_default == '#ffffff' else '#ffffff'
    return light_default


class _Sanitizer:
    def __init__(self, max_string_length: int):
        self.max_string_length = max_string_length
        self.flags: List[SanitizeFlag] = []

    def flag(self, path: str, original: Any, replacement: Any, reason: str) -> None:
        self.flags.append(SanitizeFlag(path, original, replacement, reason))
        logger.warning(f"Sanitized {path}: {reason}")

    def text(self, value: str, limit: Optional[int] = None) -> str:
        limit = limit or self.max_string_length
        cleaned = remove_dangerous_chars(value.strip())
        if len(cleaned) > limit:
            cleaned = cleaned[:limit]
        return cleaned

    def keys(self, node: Any, path: str = "") -> Any:
        """Strip markup and declaration syntax from mapping keys; keys left empty are dropped."""
        if isinstance(node, list):
            return [self.keys(item, f"{path}.{i}") for i, item in enumerate(node)]
        if not isinstance(node, dict):
            return node

        cleaned = {}
        for key, value in node.items():
            key_path = f"{path}.{key}" if path else str(key)
            name = key
            if isinstance(key, str):
                name = _FONT_UNSAFE_PATTERN.sub('', neutralize_payloads(remove_dangerous_chars(key))).strip()
                if name != key:
                    if not name or name in node or name in cleaned:
                        self.flag(key_path, key, None, "Key contains unsafe content")
                        continue
                    self.flag(key_path, key, name, "Unsafe characters removed from key")
            cleaned[name] = self.keys(value, f"{path}.{name}" if path else str(name))
        return cleaned

    def number(self, path: str, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                self.flag(path, value, None, "Number is not finite")
                return None
            return value
        if isinstance(value, str):
            try:
                parsed = float(value.strip())
            except ValueError:
                return value
            if not math.isfinite(parsed):
                self.flag(path, value, None, "Number is not finite")
                return None
            return int(parsed) if parsed.is_integer() else parsed
        return value

    def color(self, path: str, value: Any, default: str) -> str:
        from .resolver import is_token_reference
        from .validation import is_valid_color_literal

        if not isinstance(value, str):
            self.flag(path, value, default, "Color is not a string")
            return default

        cleaned = self.text(value)
        lowered = cleaned.lower()
        if any(marker in lowered for marker in UNSAFE_COLOR_CONTENT):
            self.flag(path, value, default, "Color contains unsafe content")
            return default
        if not (is_valid_color_literal(cleaned) or is_token_reference(cleaned)):
            self.flag(path, value, default, "Color is neither a literal nor a token reference")
            return default
        return cleaned

    def colors(self, path: str, colors: Dict[str, Any], dark: bool = False) -> Dict[str, Any]:
        return {
            role: self.color(f"{path}.{role}", value, _default_color(role, dark))
            for role, value in colors.items()
            if value is not None
        }

    def variants(self, path: str, variants: Dict[str, Any]) -> Dict[str, Any]:
        from .resolver import is_token_reference

        cleaned: Dict[str, Any] = {}
        for name, style in variants.items():
            if not isinstance(style, dict):
                cleaned[name] = style
                continue
            style_path = f"{path}.{name}"
            result = {}
            for key, value in style.items():
                if value is None:
                    continue
                key_path = f"{style_path}.{key}"
                if key == 'borderStyle':
                    if value not in [s.value for s in BorderStyle]:
                        self.flag(key_path, value, 'solid', "Unknown border style")
                        value = 'solid'
                    result[key] = value
                elif key == 'borderWidth':
                    if isinstance(value, str) and is_token_reference(value.strip()):
                        result[key] = value.strip()
                    else:
                        result[key] = self.number(key_path, value)
                else:
                    result[key] = self.color(key_path, value, 'transparent')
            cleaned[name] = result
        return cleaned

    def meta(self, meta: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = {}
        for key, value in meta.items():
            if isinstance(value, str):
                limit = self.max_string_length * 5 if key == 'description' else None
                cleaned[key] = neutralize_payloads(self.text(value, limit))
            elif key == 'tags' and isinstance(value, list):
                cleaned[key] = [neutralize_payloads(self.text(tag)) for tag in value
                                if isinstance(tag, str)]
            else:
                cleaned[key] = value
        return cleaned

    def typography(self, typography: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = dict(typography)
        for key in ('fontFamily', 'fontFamilyHeading', 'fontFamilyMono'):
            value = cleaned.get(key)
            if isinstance(value, str):
                family = sanitize_font_family(self.text(value))
                if family != value.strip():
                    self.flag(f"typography.{key}", value, family, "Unsafe characters removed from font stack")
                cleaned[key] = family
        for key in ('baseSize', 'scale', 'fontSize'):
            if key in cleaned:
                cleaned[key] = self.number(f"typography.{key}", cleaned[key])
        for group in ('sizes', 'weights', 'lineHeights'):
            values = cleaned.get(group)
            if isinstance(values, dict):
                cleaned[group] = {k: self.number(f"typography.{group}.{k}", v)
                                  for k, v in values.items()}
        return cleaned

    def spacing(self, spacing: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = dict(spacing)
        for key in NUMERIC_GROUPS['spacing']:
            if key in cleaned:
                cleaned[key] = self.number(f"spacing.{key}", cleaned[key])
        if isinstance(cleaned.get('scale'), list):
            cleaned['scale'] = [self.number(f"spacing.scale.{i}", v)
                                for i, v in enumerate(cleaned['scale'])]
        if isinstance(cleaned.get('values'), dict):
            values = {}
            for index, value in cleaned['values'].items():
                key = int(index) if str(index).isdigit() else index
                values[key] = self.number(f"spacing.values.{index}", value)
            cleaned['values'] = values
        return cleaned

    def borders(self, borders: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = dict(borders)
        for key in NUMERIC_GROUPS['borders']:
            if key in cleaned:
                cleaned[key] = self.number(f"borders.{key}", cleaned[key])
        for key in ('defaultStyle', 'style'):
            if isinstance(cleaned.get(key), str):
                cleaned[key] = self.text(cleaned[key]).lower()
        return cleaned

    def breakpoints(self, breakpoints: Dict[str, Any]) -> Dict[str, Any]:
        return {key: self.number(f"breakpoints.{key}", value) for key, value in breakpoints.items()}

    def dark_mode(self, dark_mode: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = dict(dark_mode)
        if isinstance(cleaned.get('colors'), dict):
            cleaned['colors'] = self.colors("darkMode.colors", cleaned['colors'], dark=True)
        for section in ('buttons', 'cards'):
            if isinstance(cleaned.get(section), dict):
                cleaned[section] = self.variants(f"darkMode.{section}", cleaned[section])
        return cleaned


def sanitize_theme(theme: Union[ThemeConfig, Dict[str, Any]],
                   max_string_length: int = MAX_STRING_LENGTH) -> SanitizeResult:
    """Clean a theme record for safe generation.

    Args:
        theme: ThemeConfig or raw interchange dictionary
        max_string_length: Strings are truncated to this length (meta
            descriptions get five times as much)

    Returns:
        SanitizeResult with the cleaned dictionary and the flags raised;
        never raises
    """
    if isinstance(theme, ThemeConfig):
        record = theme.to_dict()
    elif isinstance(theme, dict):
        record = copy.deepcopy(theme)
    else:
        return SanitizeResult(data={}, flags=[
            SanitizeFlag("$", theme, {}, "Theme is not an object")
        ])

    sanitizer = _Sanitizer(max_string_length)
    record = sanitizer.keys(record)
    handlers = {
        'meta': sanitizer.meta,
        'colors': lambda colors: sanitizer.colors("colors", colors),
        'typography': sanitizer.typography,
        'spacing': sanitizer.spacing,
        'borders': sanitizer.borders,
        'breakpoints': sanitizer.breakpoints,
        'buttons': lambda variants: sanitizer.variants("buttons", variants),
        'cards': lambda variants: sanitizer.variants("cards", variants),
        'darkMode': sanitizer.dark_mode,
    }

    cleaned: Dict[str, Any] = {}
    for key, value in record.items():
        handler = handlers.get(key)
        if handler is not None and isinstance(value, dict):
            cleaned[key] = handler(value)
        else:
            cleaned[key] = value

    if sanitizer.flags:
        logger.info(f"Sanitizer changed {len(sanitizer.flags)} value(s)")
    return SanitizeResult(data=cleaned, flags=sanitizer.flags)
