"""Import themes from CSS custom properties.

Reads the variable names the CSS generator writes (``--theme-color-*``,
``--theme-spacing-N`` ...) and, failing those, common unprefixed names such
as ``--primary`` or ``--font-family``.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..generators.base import BUTTON_CSS_SUFFIXES, CARD_CSS_SUFFIXES, GENERATOR_NAME
from ..theme_engine.schema import BorderStyle
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

THEME_PREFIX = "theme-"

_COMMENT = re.compile(r'/\*.*?\*/', re.DOTALL)
_DECLARATION = re.compile(r'--([\w-]+)\s*:\s*([^;]+);')
_ESCAPE = re.compile(r'\\([0-9a-fA-F]{1,6}) ?')
_HEADER = re.compile(
    r'/\*\s*(?P<name>.+?)\s+(?P<version>\S+),\s*generated by ' + re.escape(GENERATOR_NAME) + r'\s*\*/'
)
_DARK_SELECTOR = re.compile(r'''\[data-theme=["']?dark["']?\]|(^|[\s,])\.dark\b''')

# Unprefixed names commonly used for the same roles
COLOR_ALIASES = {
    'brand': 'primary',
    'background': 'surface',
    'bg': 'surface',
    'foreground': 'text',
    'danger': 'error',
}
BORDER_WIDTHS = {'border-thin': 'thin', 'border-width': 'default', 'border-thick': 'thick'}

Declarations = List[Tuple[str, str]]


def css_blocks(css_text: str) -> List[Tuple[str, str]]:
    """Innermost-first (selector, body) pairs of every rule block."""
    blocks: List[Tuple[str, str]] = []
    stack: List[Tuple[str, int]] = []
    start = 0
    for index, char in enumerate(css_text):
        if char == '{':
            stack.append((css_text[start:index], index + 1))
            start = index + 1
        elif char == '}':
            if stack:
                selector, body_start = stack.pop()
                blocks.append((_COMMENT.sub('', selector).strip(), css_text[body_start:index]))
            start = index + 1
    return blocks


def parse_css_variables(body: str) -> Declarations:
    """``--name: value;`` pairs in source order, with CSS escapes undone."""
    declarations = []
    for name, value in _DECLARATION.findall(_COMMENT.sub('', body)):
        value = _ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), value.strip())
        declarations.append((name, value))
    return declarations


def _is_dark_selector(selector: str) -> bool:
    return ':not(' not in selector and _DARK_SELECTOR.search(selector) is not None


def _split_blocks(css_text: str) -> Tuple[Optional[str], Optional[str]]:
    """Bodies of the first :root block and the first dark-mode block."""
    light = dark = None
    for selector, body in css_blocks(css_text):
        if selector.startswith('@'):
            continue
        if _is_dark_selector(selector):
            if dark is None:
                dark = body
        elif light is None and selector == ':root':
            light = body
    if light is None:
        # No :root; take the first plain rule that declares custom properties
        for selector, body in css_blocks(css_text):
            if not selector.startswith('@') and not _is_dark_selector(selector) \
                    and ':not(' not in selector and _DECLARATION.search(body):
                light = body
                break
    return light, dark


def _match_component(name: str, kind: str,
                     suffixes: Tuple[Tuple[str, str], ...]) -> Optional[Tuple[str, str]]:
    """``button-primary-bg-hover`` -> (``primary``, ``backgroundHover``)."""
    prefix = f"{kind}-"
    if not name.startswith(prefix):
        return None
    rest = name[len(prefix):]
    for key, suffix in sorted(suffixes, key=lambda item: -len(item[1])):
        if rest.endswith(f"-{suffix}"):
            variant = rest[:-len(suffix) - 1]
            if variant:
                return kebab_to_camel(variant), key
    return None


class _CSSMapper:
    """Maps custom properties back onto a theme record."""

    def __init__(self, result: ImportResult):
        self.result = result
        self.colors: Dict[str, str] = {}
        self.spacing: Dict[int, Any] = {}
        self.fonts: Dict[str, str] = {}
        self.sizes: Dict[str, Any] = {}
        self.weights: Dict[str, Any] = {}
        self.line_heights: Dict[str, Any] = {}
        self.borders: Dict[str, Any] = {}
        self.breakpoints: Dict[str, Any] = {}
        self.buttons: Dict[str, Dict[str, Any]] = {}
        self.cards: Dict[str, Dict[str, Any]] = {}

    def add(self, name: str, value: str) -> None:
        if name.startswith(THEME_PREFIX):
            if not self._theme_property(name[len(THEME_PREFIX):], value):
                self.result.warnings.append(f"Unrecognized custom property --{name}")
        else:
            self._generic_property(name, value)

    def _number(self, name: str, value: str) -> Optional[Any]:
        number = parse_number(value)
        if number is None:
            self.result.warnings.append(f"Skipped --{name}: '{value}' is not a number")
        return number

    def _theme_property(self, name: str, value: str) -> bool:
        if name.startswith('color-'):
            self.colors[kebab_to_camel(name[len('color-'):])] = value
        elif name.startswith('spacing-') and name[len('spacing-'):].isdigit():
            number = self._number(name, value)
            if number is not None:
                self.spacing[int(name[len('spacing-'):])] = number
        elif name in ('font-family', 'font-family-heading', 'font-family-mono'):
            self.fonts[name] = value
        elif name.startswith('font-size-'):
            number = self._number(name, value)
            if number is not None:
                self.sizes[name[len('font-size-'):]] = number
        elif name.startswith('font-weight-'):
            number = self._number(name, value)
            if number is not None:
                self.weights[name[len('font-weight-'):]] = number
        elif name.startswith('line-height-'):
            number = self._number(name, value)
            if number is not None:
                self.line_heights[kebab_to_camel(name[len('line-height-'):])] = number
        elif name in BORDER_WIDTHS:
            number = self._number(name, value)
            if number is not None:
                self.borders[BORDER_WIDTHS[name]] = number
        elif name == 'border-style':
            if value in {style.value for style in BorderStyle}:
                self.borders['defaultStyle'] = value
            else:
                self.result.warnings.append(f"Skipped --theme-border-style: unknown style '{value}'")
        elif name.startswith('radius-') and radius_key(name[len('radius-'):]):
            number = self._number(name, value)
            if number is not None:
                self.borders[radius_key(name[len('radius-'):])] = number
        elif name.startswith('breakpoint-'):
            number = self._number(name, value)
            if number is not None:
                self.breakpoints[name[len('breakpoint-'):]] = number
        else:
            return self._component_property(name, value)
        return True

    def _component_property(self, name: str, value: str) -> bool:
        for kind, suffixes, target in (('button', BUTTON_CSS_SUFFIXES, self.buttons),
                                       ('card', CARD_CSS_SUFFIXES, self.cards)):
            match = _match_component(name, kind, suffixes)
            if match:
                variant, key = match
                if key == 'borderWidth':
                    number = parse_number(value)
                    target.setdefault(variant, {})[key] = value if number is None else number
                else:
                    target.setdefault(variant, {})[key] = value
                return True
        return False

    def _generic_property(self, name: str, value: str) -> None:
        """Unprefixed variables from hand-written stylesheets."""
        bare = name[len('color-'):] if name.startswith('color-') else name
        if is_color(value) and not name.startswith(('font', 'spacing', 'space', 'radius')):
            role = kebab_to_camel(COLOR_ALIASES.get(bare, bare))
            self.colors.setdefault(role, value)
        elif name in ('font-family', 'font-sans', 'font-family-base'):
            self.fonts.setdefault('font-family', value)
        elif name in ('font-heading', 'font-family-heading'):
            self.fonts.setdefault('font-family-heading', value)
        elif name in ('font-mono', 'font-family-mono'):
            self.fonts.setdefault('font-family-mono', value)
        elif re.match(r'^(spacing|space)-\d+$', name):
            number = parse_number(value)
            if number is not None:
                self.spacing.setdefault(int(name.rsplit('-', 1)[1]), number)
        elif name in ('radius', 'border-radius'):
            number = parse_number(value)
            if number is not None:
                self.borders.setdefault('radiusSubtle', number)
        else:
            logger.debug(f"Ignoring custom property --{name}")

    def typography(self) -> Dict[str, Any]:
        typography: Dict[str, Any] = {}
        if 'font-family' in self.fonts:
            typography['fontFamily'] = self.fonts['font-family']
        if 'font-family-heading' in self.fonts:
            typography['fontFamilyHeading'] = self.fonts['font-family-heading']
        if 'font-family-mono' in self.fonts:
            typography['fontFamilyMono'] = self.fonts['font-family-mono']
        if 'base' in self.sizes:
            typography['baseSize'] = self.sizes['base']
        sizes = explicit_font_sizes(self.sizes, typography)
        if sizes:
            typography['sizes'] = sizes
        if self.weights:
            typography['weights'] = self.weights
        if self.line_heights:
            typography['lineHeights'] = self.line_heights
        return typography

    def spacing_record(self) -> Dict[str, Any]:
        if not self.spacing:
            return {}
        base_unit = self.spacing.get(1) or 4
        record: Dict[str, Any] = {'baseUnit': base_unit}
        values = explicit_spacing(self.spacing, record)
        if values:
            record['values'] = values
        return record


def import_from_css(css_text: str) -> ImportResult:
    """Import a theme from a stylesheet of custom properties.

    Args:
        css_text: Stylesheet text

    Returns:
        ImportResult; never raises
    """
    result = ImportResult()
    if not isinstance(css_text, str) or not css_text.strip():
        result.errors.append("No CSS content to import")
        return result

    light_body, dark_body = _split_blocks(css_text)
    if light_body is None:
        result.errors.append("No :root block with custom properties found")
        return result

    mapper = _CSSMapper(result)
    for name, value in parse_css_variables(light_body):
        mapper.add(name, value)

    record: Dict[str, Any] = {}
    header = _HEADER.search(light_body)
    if header:
        record['meta'] = {'name': header.group('name'), 'version': header.group('version')}
    record['colors'] = clean_colors(mapper.colors, result)

    typography = mapper.typography()
    if typography:
        record['typography'] = typography
    spacing = mapper.spacing_record()
    if spacing:
        record['spacing'] = spacing
    if mapper.borders:
        record['borders'] = mapper.borders
    if mapper.breakpoints:
        record['breakpoints'] = mapper.breakpoints
    if mapper.buttons:
        record['buttons'] = mapper.buttons
    if mapper.cards:
        record['cards'] = mapper.cards

    if dark_body is not None:
        dark_mapper = _CSSMapper(result)
        for name, value in parse_css_variables(dark_body):
            dark_mapper.add(name, value)
        dark: Dict[str, Any] = {'enabled': True}
        dark_colors = clean_colors(dark_mapper.colors, result, "darkMode.colors")
        if dark_colors:
            dark['colors'] = dark_colors
        if dark_mapper.buttons:
            dark['buttons'] = dark_mapper.buttons
        if dark_mapper.cards:
            dark['cards'] = dark_mapper.cards
        record['darkMode'] = dark

    logger.debug(f"CSS import found {len(record['colors'])} colors, {len(mapper.spacing)} spacing values")
    return complete_theme(record, result, "CSS")
