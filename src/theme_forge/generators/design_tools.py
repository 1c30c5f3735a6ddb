"""Design-tool token formats.

Figma variables, Tokens Studio, Style Dictionary, Sketch palettes, Adobe XD,
Canva brand kits, Zeplin/Penpot and the W3C Design Tokens draft. All of them
are JSON documents.
"""

from typing import Any, Dict, List

from ..theme_engine.color import parse_color, to_hex
from ..theme_engine.schema import CompiledTheme
from ..theme_engine.utils import camel_to_kebab
from .base import (
    GENERATOR_NAME,
    color_items,
    css_name,
    first_font,
    font_stacks,
    line_heights,
    plain_number,
    px,
    to_json,
    weights,
)

LIGHT_MODE_ID = "1"
DARK_MODE_ID = "2"

COLOR_DESCRIPTIONS = {
    'primary': "Primary brand color",
    'primaryHover': "Primary color hover state",
    'primaryActive': "Primary color active state",
    'secondary': "Secondary brand color",
    'surface': "Main surface/background color",
    'surfaceSecondary': "Secondary surface color",
    'surfaceHover': "Surface hover state",
    'text': "Primary text color",
    'textSecondary': "Secondary text color",
    'textMuted': "Muted text color",
    'border': "Border color",
    'borderStrong': "Strong border color",
    'borderSubtle': "Subtle border color",
    'success': "Success state color",
    'warning': "Warning state color",
    'error': "Error state color",
    'info': "Informational state color",
}


def _display_name(role: str) -> str:
    """surfaceSecondary -> Surface Secondary"""
    return camel_to_kebab(role).replace('-', ' ').title()


def _colors(compiled: CompiledTheme) -> Dict[str, str]:
    return dict(color_items(compiled.colors))


def _spacing(compiled: CompiledTheme) -> Dict[str, Any]:
    return {str(k): plain_number(v) for k, v in compiled.derived.spacing.items()}


def _font_sizes(compiled: CompiledTheme) -> Dict[str, Any]:
    return {k: plain_number(v) for k, v in compiled.derived.font_sizes.items()}


# Figma

def figma_document(compiled: CompiledTheme) -> Dict[str, Any]:
    """Figma Variables collection with a Light mode and, when enabled, a Dark mode."""
    dark = compiled.dark_mode_enabled
    derived = compiled.derived
    modes = [{'name': "Light", 'modeId': LIGHT_MODE_ID}]
    if dark:
        modes.append({'name': "Dark", 'modeId': DARK_MODE_ID})

    variables: List[Dict[str, Any]] = []

    def add(name: str, var_type: str, light: Any, dark_value: Any = None) -> None:
        values = {LIGHT_MODE_ID: light}
        if dark:
            values[DARK_MODE_ID] = light if dark_value is None else dark_value
        variables.append({'name': name, 'type': var_type, 'valuesByMode': values})

    for role, value in color_items(compiled.colors):
        add(f"colors/{css_name(role)}", "COLOR", value, compiled.dark_colors.get(role))
    # Dark-only roles still need a light value
    for role, value in color_items(compiled.dark_colors):
        if role not in compiled.colors:
            add(f"colors/{css_name(role)}", "COLOR", value, value)

    for index, value in derived.spacing.items():
        add(f"spacing/{index}", "FLOAT", plain_number(value))
    for name, value in derived.radii.items():
        add(f"radius/{name}", "FLOAT", plain_number(value))
    for name, value in derived.border_widths.items():
        add(f"border-width/{name}", "FLOAT", plain_number(value))

    stacks = font_stacks(compiled)
    typography = compiled.typography
    add("typography/font-family", "STRING", stacks['body'])
    add("typography/font-family-heading", "STRING", stacks['heading'])
    if 'mono' in stacks:
        add("typography/font-family-mono", "STRING", stacks['mono'])
    add("typography/base-size", "FLOAT", plain_number(typography.get('baseSize', 16)))
    add("typography/scale", "FLOAT", plain_number(typography.get('scale', 1.25)))
    for name, value in derived.font_sizes.items():
        add(f"font-size/{name}", "FLOAT", plain_number(value))

    collection = {'name': compiled.meta.get('name', 'Theme'), 'modes': modes, 'variables': variables}
    return {'collections': [collection]}


def generate_figma(compiled: CompiledTheme, **options) -> str:
    return to_json(figma_document(compiled)) + "\n"


# Tokens Studio

def generate_tokens_studio(compiled: CompiledTheme, **options) -> str:
    derived = compiled.derived
    stacks = font_stacks(compiled)
    typography: Dict[str, Any] = {
        f"font-family-{key}": {'value': stack, 'type': "fontFamilies"} for key, stack in stacks.items()
    }
    typography.update({
        f"font-size-{k}": {'value': v, 'type': "fontSizes"} for k, v in _font_sizes(compiled).items()
    })
    typography.update({
        f"font-weight-{k}": {'value': v, 'type': "fontWeights"} for k, v in weights(compiled).items()
    })
    typography.update({
        f"line-height-{k}": {'value': v, 'type': "lineHeights"} for k, v in line_heights(compiled).items()
    })

    tokens: Dict[str, Any] = {
        'global': {
            'colors': {css_name(k): {'value': v, 'type': "color"} for k, v in _colors(compiled).items()},
            'spacing': {k: {'value': v, 'type': "spacing"} for k, v in _spacing(compiled).items()},
            'typography': typography,
            'border': {
                'width': {k: {'value': plain_number(v), 'type': "borderWidth"}
                          for k, v in derived.border_widths.items()},
                'radius': {k: {'value': plain_number(v), 'type': "borderRadius"}
                           for k, v in derived.radii.items()},
            },
        },
    }
    if compiled.dark_mode_enabled and compiled.dark_colors:
        tokens['dark'] = {
            'colors': {css_name(k): {'value': v, 'type': "color"}
                       for k, v in color_items(compiled.dark_colors)},
        }
        tokens['$themes'] = [
            {'name': "light", 'selectedTokenSets': {'global': "enabled"}},
            {'name': "dark", 'selectedTokenSets': {'global': "source", 'dark': "enabled"}},
        ]
    return to_json(tokens) + "\n"


# Style Dictionary

def generate_style_dictionary(compiled: CompiledTheme, **options) -> str:
    derived = compiled.derived
    stacks = font_stacks(compiled)

    def values(mapping: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        return {str(k): {'value': v} for k, v in mapping.items()}

    tokens = {
        'color': values({css_name(k): v for k, v in _colors(compiled).items()}),
        'spacing': values(_spacing(compiled)),
        'font': {
            'family': values({'base' if k == 'body' else k: v for k, v in stacks.items()}),
            'size': values(_font_sizes(compiled)),
            'weight': values(weights(compiled)),
            'lineHeight': values(line_heights(compiled)),
        },
        'border': {
            'width': values({k: plain_number(v) for k, v in derived.border_widths.items()}),
            'radius': values({k: plain_number(v) for k, v in derived.radii.items()}),
            'style': {'value': compiled.borders.get('defaultStyle', 'solid')},
        },
        'breakpoint': values({k: plain_number(v) for k, v in derived.breakpoints.items()}),
    }
    if compiled.dark_mode_enabled and compiled.dark_colors:
        tokens['color-dark'] = values({css_name(k): v for k, v in color_items(compiled.dark_colors)})
    return to_json(tokens) + "\n"


# Sketch

def generate_sketch(compiled: CompiledTheme, **options) -> str:
    palette = {
        'compatibilityVersion': 1,
        'colors': [{'name': _display_name(role), 'value': value}
                   for role, value in _colors(compiled).items()],
    }
    if compiled.dark_mode_enabled and compiled.dark_colors:
        palette['colors'] += [{'name': f"Dark {_display_name(role)}", 'value': value}
                              for role, value in color_items(compiled.dark_colors)]
    return to_json(palette) + "\n"


# Adobe XD

def _xd_color(role: str, value: str) -> Dict[str, Any]:
    r, g, b = parse_color(value)
    name = _display_name(role)
    return {'name': name, 'value': {'r': r, 'g': g, 'b': b, 'a': 1},
            'hex': to_hex(value), 'swatchName': name, 'mode': "RGB"}


def generate_adobe_xd(compiled: CompiledTheme, **options) -> str:
    typography = compiled.typography
    base_size = typography.get('baseSize', 16)
    sizes = compiled.derived.font_sizes
    stacks = font_stacks(compiled)
    heading_size = sizes.get('xl', base_size)
    heights = line_heights(compiled)

    tokens = {
        'version': "1.0",
        'name': compiled.meta.get('name', 'Theme'),
        'colors': [_xd_color(role, value) for role, value in _colors(compiled).items()],
        'characterStyles': [
            {
                'name': "Body",
                'fontFamily': first_font(stacks['body']),
                'fontSize': plain_number(base_size),
                'fontWeight': weights(compiled).get('regular', 400),
                'lineHeight': plain_number(round(heights.get('normal', 1.5) * base_size, 2)),
            },
            {
                'name': "Heading",
                'fontFamily': first_font(stacks['heading']),
                'fontSize': plain_number(heading_size),
                'fontWeight': weights(compiled).get('bold', 700),
                'lineHeight': plain_number(round(heights.get('tight', 1.2) * heading_size, 2)),
            },
        ],
        'spacing': [{'name': f"Spacing {k}", 'value': v} for k, v in _spacing(compiled).items()],
    }
    return to_json(tokens) + "\n"


# Canva

CANVA_ROLES = (
    ('primary', 'primary'),
    ('secondary', 'secondary'),
    ('accent', 'accent'),
    ('surface', 'background'),
    ('text', 'text'),
    ('success', 'success'),
    ('warning', 'warning'),
    ('error', 'error'),
    ('info', 'info'),
)


def generate_canva(compiled: CompiledTheme, **options) -> str:
    colors = _colors(compiled)
    stacks = font_stacks(compiled)
    brand_kit = {
        'name': compiled.meta.get('name', 'Theme'),
        'version': compiled.meta.get('version', '1.0.0'),
        'colors': [
            {'name': _display_name(role), 'hex': colors[role], 'role': kit_role}
            for role, kit_role in CANVA_ROLES if role in colors
        ],
        'fonts': [
            {'name': first_font(stacks['body']), 'role': "body"},
            {'name': first_font(stacks['heading']), 'role': "heading"},
        ],
    }
    return to_json(brand_kit) + "\n"


# Zeplin / Penpot

def generate_zeplin(compiled: CompiledTheme, **options) -> str:
    derived = compiled.derived
    stacks = font_stacks(compiled)
    tokens = {
        '_meta': {
            'name': compiled.meta.get('name', 'Theme'),
            'version': compiled.meta.get('version', '1.0.0'),
            'generator': GENERATOR_NAME,
        },
        'colors': {css_name(k): v for k, v in _colors(compiled).items()},
        'spacing': _spacing(compiled),
        'typography': {
            'fontFamilies': stacks,
            'fontSizes': _font_sizes(compiled),
            'fontWeights': weights(compiled),
            'lineHeights': line_heights(compiled),
        },
        'borders': {
            'widths': {k: plain_number(v) for k, v in derived.border_widths.items()},
            'radii': {k: plain_number(v) for k, v in derived.radii.items()},
        },
    }
    return to_json(tokens) + "\n"


# W3C Design Tokens

def _w3c(value: Any, token_type: str, description: str) -> Dict[str, Any]:
    return {'$value': value, '$type': token_type, '$description': description}


def w3c_document(compiled: CompiledTheme) -> Dict[str, Any]:
    derived = compiled.derived
    stacks = font_stacks(compiled)
    typography: Dict[str, Any] = {
        'font-family' if key == 'body' else f"font-family-{key}": _w3c(stack, "fontFamily", f"{key.title()} font family")
        for key, stack in stacks.items()
    }
    typography.update({
        f"font-size-{k}": _w3c(px(v), "dimension", f"Font size {k}")
        for k, v in derived.font_sizes.items()
    })
    typography.update({
        f"font-weight-{k}": _w3c(v, "fontWeight", f"{k.title()} font weight")
        for k, v in weights(compiled).items()
    })
    typography.update({
        f"line-height-{k}": _w3c(v, "number", f"{k.title()} line height")
        for k, v in line_heights(compiled).items()
    })

    document: Dict[str, Any] = {
        'color': {
            css_name(role): _w3c(value, "color", COLOR_DESCRIPTIONS.get(role, f"{_display_name(role)} color"))
            for role, value in color_items(compiled.colors)
        },
        'spacing': {
            str(k): _w3c(px(v), "dimension", f"Spacing value {k}") for k, v in derived.spacing.items()
        },
        'typography': typography,
        'border': {
            'width': {k: _w3c(px(v), "dimension", f"{k.title()} border width")
                      for k, v in derived.border_widths.items()},
            'radius': {k: _w3c(px(v), "dimension", f"{k.title()} border radius")
                       for k, v in derived.radii.items()},
        },
        'breakpoint': {
            k: _w3c(px(v), "dimension", f"Breakpoint {k}") for k, v in derived.breakpoints.items()
        },
    }
    if compiled.dark_mode_enabled and compiled.dark_colors:
        document['color-dark'] = {
            css_name(role): _w3c(value, "color", f"{_display_name(role)} color (dark mode)")
            for role, value in color_items(compiled.dark_colors)
        }
    return document


def generate_w3c(compiled: CompiledTheme, **options) -> str:
    return to_json(w3c_document(compiled)) + "\n"
