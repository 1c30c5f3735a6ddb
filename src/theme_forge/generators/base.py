"""Shared building blocks for the output generators.

Every generator receives a CompiledTheme whose values are already sanitized
and resolved; the helpers here only shape and escape them for a destination
syntax. Numbers are formatted in exactly one place so that a value reads the
same in every format.
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..theme_engine.sanitize import escape_css_value, escape_html_sensitive, escape_js_string, neutralize_payloads
from ..theme_engine.schema import CompiledTheme, Number
from ..theme_engine.utils import camel_to_kebab, slugify

GENERATOR_NAME = "theme-forge"

_JS_IDENTIFIER = re.compile(r'^[A-Za-z_$][\w$]*$')
_COMMENT_UNSAFE = re.compile(r'[<>\r\n]')

BUTTON_CSS_SUFFIXES = (
    ('background', 'bg'),
    ('text', 'text'),
    ('border', 'border'),
    ('backgroundHover', 'bg-hover'),
    ('textHover', 'text-hover'),
    ('borderHover', 'border-hover'),
    ('backgroundActive', 'bg-active'),
    ('textActive', 'text-active'),
    ('borderActive', 'border-active'),
)

CARD_CSS_SUFFIXES = (
    ('background', 'bg'),
    ('border', 'border'),
    ('backgroundHover', 'bg-hover'),
    ('borderHover', 'border-hover'),
    ('borderStyle', 'border-style'),
    ('borderWidth', 'border-width'),
)


def format_number(value: Any) -> str:
    """8.0 -> '8', 1.375 -> '1.375'."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def px(value: Any) -> str:
    """Append ``px`` to numbers; strings already carrying a unit pass through."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{format_number(value)}px"
    return str(value)


def plain_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def css_name(key: Any) -> str:
    """Custom-property name segment for a record key (``surfaceHover`` -> ``surface-hover``)."""
    return slugify(camel_to_kebab(str(key)))


def comment_text(value: Any) -> str:
    """Text that is safe inside a block or line comment."""
    return _COMMENT_UNSAFE.sub(' ', neutralize_payloads(str(value)))


def css_value(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return escape_css_value(value)


def to_json(data: Any) -> str:
    """Pretty JSON with ``<``, ``>`` and ``&`` escaped inside strings."""
    return escape_html_sensitive(json.dumps(data, indent=2, ensure_ascii=False))


def js_key(key: Any) -> str:
    text = str(key)
    if _JS_IDENTIFIER.match(text) or text.isdigit():
        return text
    return escape_js_string(text)


def to_js(value: Any, indent: int = 0, step: int = 2) -> str:
    """Render a value as a JavaScript/TypeScript literal."""
    pad = ' ' * (indent + step)
    if isinstance(value, dict):
        if not value:
            return '{}'
        items = [f"{pad}{js_key(k)}: {to_js(v, indent + step, step)}," for k, v in value.items()]
        return '{\n' + '\n'.join(items) + '\n' + ' ' * indent + '}'
    if isinstance(value, (list, tuple)):
        if not value:
            return '[]'
        items = [f"{pad}{to_js(v, indent + step, step)}," for v in value]
        return '[\n' + '\n'.join(items) + '\n' + ' ' * indent + ']'
    if value is None:
        return 'null'
    if isinstance(value, (bool, int, float)):
        return format_number(value)
    return escape_js_string(str(value))


def header_lines(compiled: CompiledTheme, title: str = "Theme Tokens") -> List[str]:
    meta = compiled.meta
    return [
        f"{comment_text(meta.get('name', 'Theme'))} - {title}",
        f"Generated by {GENERATOR_NAME}",
        f"Version: {comment_text(meta.get('version', '1.0.0'))}",
    ]


def block_comment(compiled: CompiledTheme, title: str = "Theme Tokens") -> str:
    """``/** ... */`` header used by CSS, SCSS, Less and the JS family."""
    body = '\n'.join(f" * {line}" for line in header_lines(compiled, title))
    return f"/**\n{body}\n */"


def line_comment(compiled: CompiledTheme, prefix: str = "//", title: str = "Theme Tokens") -> str:
    return '\n'.join(f"{prefix} {line}" for line in header_lines(compiled, title))


def color_items(colors: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Literal color entries in record order."""
    return [(role, str(value)) for role, value in colors.items() if value is not None]


def font_stacks(compiled: CompiledTheme) -> Dict[str, str]:
    typography = compiled.typography
    stacks = {
        'body': typography['fontFamily'],
        'heading': typography.get('fontFamilyHeading') or typography['fontFamily'],
    }
    if typography.get('fontFamilyMono'):
        stacks['mono'] = typography['fontFamilyMono']
    return stacks


def first_font(stack: str) -> str:
    """The first family name of a font stack, unquoted."""
    return stack.split(',')[0].strip().strip('\'"')


def weights(compiled: CompiledTheme) -> Dict[str, Number]:
    return dict(compiled.typography.get('weights') or {})


def line_heights(compiled: CompiledTheme) -> Dict[str, Number]:
    return dict(compiled.typography.get('lineHeights') or {})


def border_style(compiled: CompiledTheme) -> str:
    return compiled.borders.get('defaultStyle', 'solid')


def spacing_map(compiled: CompiledTheme, unit: Callable[[Any], Any] = plain_number) -> Dict[str, Any]:
    return {str(index): unit(value) for index, value in compiled.derived.spacing.items()}


def font_size_map(compiled: CompiledTheme, unit: Callable[[Any], Any] = plain_number) -> Dict[str, Any]:
    return {name: unit(value) for name, value in compiled.derived.font_sizes.items()}


def token_tree(compiled: CompiledTheme, unit: Callable[[Any], Any] = plain_number,
               include_components: bool = True) -> Dict[str, Any]:
    """Nested token dictionary shared by the JS, YAML and framework generators.

    Args:
        compiled: Compiled theme
        unit: Applied to every dimension (spacing, sizes, widths, radii,
            breakpoints); ``px`` gives ``"16px"``, the default keeps numbers
        include_components: Include buttons, cards and dark-mode overrides

    Returns:
        Dictionary keyed the same way in every consumer
    """
    derived = compiled.derived
    tree: Dict[str, Any] = {
        'colors': dict(color_items(compiled.colors)),
        'fonts': font_stacks(compiled),
        'fontSizes': font_size_map(compiled, unit),
        'fontWeights': weights(compiled),
        'lineHeights': line_heights(compiled),
        'spacing': spacing_map(compiled, unit),
        'borderWidths': {k: unit(v) for k, v in derived.border_widths.items()},
        'radii': {k: unit(v) for k, v in derived.radii.items()},
        'borderStyle': border_style(compiled),
        'breakpoints': {k: unit(v) for k, v in derived.breakpoints.items()},
    }

    if include_components:
        if compiled.buttons:
            tree['buttons'] = component_tree(compiled.buttons, unit)
        if compiled.cards:
            tree['cards'] = component_tree(compiled.cards, unit)
        dark = dark_tree(compiled, unit)
        if dark:
            tree['dark'] = dark
    return tree


def component_tree(variants: Dict[str, Dict[str, Any]],
                   unit: Callable[[Any], Any] = plain_number) -> Dict[str, Dict[str, Any]]:
    return {
        name: {
            key: unit(value) if key == 'borderWidth' else value
            for key, value in (style or {}).items() if value is not None
        }
        for name, style in variants.items()
    }


def dark_tree(compiled: CompiledTheme, unit: Callable[[Any], Any] = plain_number) -> Optional[Dict[str, Any]]:
    """Dark-mode overrides, or None when dark mode is disabled."""
    if not compiled.dark_mode_enabled:
        return None
    dark: Dict[str, Any] = {'colors': dict(color_items(compiled.dark_colors))}
    if compiled.dark_buttons:
        dark['buttons'] = component_tree(compiled.dark_buttons, unit)
    if compiled.dark_cards:
        dark['cards'] = component_tree(compiled.dark_cards, unit)
    return dark


def css_variables(compiled: CompiledTheme) -> List[Tuple[str, str]]:
    """Every light-mode ``--theme-*`` custom property as (name, value), in emit order."""
    derived = compiled.derived
    variables: List[Tuple[str, str]] = []

    variables += [(f"--theme-color-{css_name(role)}", css_value(value))
                  for role, value in color_items(compiled.colors)]
    variables += [(f"--theme-spacing-{index}", px(value))
                  for index, value in derived.spacing.items()]

    stacks = font_stacks(compiled)
    variables.append(("--theme-font-family", css_value(stacks['body'])))
    variables.append(("--theme-font-family-heading", css_value(stacks['heading'])))
    if 'mono' in stacks:
        variables.append(("--theme-font-family-mono", css_value(stacks['mono'])))
    variables += [(f"--theme-font-size-{css_name(k)}", px(v)) for k, v in derived.font_sizes.items()]
    variables += [(f"--theme-font-weight-{css_name(k)}", css_value(v)) for k, v in weights(compiled).items()]
    variables += [(f"--theme-line-height-{css_name(k)}", css_value(v))
                  for k, v in line_heights(compiled).items()]

    widths = derived.border_widths
    variables += [
        ("--theme-border-thin", px(widths['thin'])),
        ("--theme-border-width", px(widths['default'])),
        ("--theme-border-thick", px(widths['thick'])),
    ]
    variables += [(f"--theme-radius-{name}", px(value)) for name, value in derived.radii.items()]
    variables.append(("--theme-border-style", css_value(border_style(compiled))))
    variables += [(f"--theme-breakpoint-{css_name(k)}", px(v)) for k, v in derived.breakpoints.items()]

    variables += component_variables('button', compiled.buttons, BUTTON_CSS_SUFFIXES)
    variables += component_variables('card', compiled.cards, CARD_CSS_SUFFIXES)
    return variables


def dark_css_variables(compiled: CompiledTheme) -> List[Tuple[str, str]]:
    variables = [(f"--theme-color-{css_name(role)}", css_value(value))
                 for role, value in color_items(compiled.dark_colors)]
    variables += component_variables('button', compiled.dark_buttons, BUTTON_CSS_SUFFIXES)
    variables += component_variables('card', compiled.dark_cards, CARD_CSS_SUFFIXES)
    return variables


def component_variables(kind: str, variants: Dict[str, Dict[str, Any]],
                        suffixes: Tuple[Tuple[str, str], ...]) -> List[Tuple[str, str]]:
    variables = []
    for variant, style in (variants or {}).items():
        for key, suffix in suffixes:
            value = (style or {}).get(key)
            if value is None:
                continue
            if key == 'borderWidth' and isinstance(value, (int, float)):
                rendered = px(value)
            else:
                rendered = css_value(value)
            variables.append((f"--theme-{kind}-{css_name(variant)}-{suffix}", rendered))
    return variables
