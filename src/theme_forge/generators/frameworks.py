"""Framework generators: Vue, Svelte, Angular Material, React Native, Flutter and Chakra UI."""

import json
from typing import Any, Dict, List, Tuple

from ..theme_engine.color import generate_palette, is_light, to_hex
from ..theme_engine.schema import CompiledTheme
from ..theme_engine.utils import to_identifier
from .base import (
    block_comment,
    color_items,
    css_name,
    css_value,
    css_variables,
    dark_css_variables,
    first_font,
    font_stacks,
    format_number,
    line_comment,
    line_heights,
    plain_number,
    px,
    to_js,
    token_tree,
    weights,
)

# Conventional shade keys for 10-step palettes
MATERIAL_SHADES = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900)


def shade_palette(color: str) -> Dict[int, str]:
    """Ten-step ramp keyed 50..900."""
    return {shade: value for shade, (_, value) in zip(MATERIAL_SHADES, generate_palette(color, 10))}


def _dark_palette(compiled: CompiledTheme) -> Dict[str, str]:
    palette = dict(color_items(compiled.colors))
    palette.update(color_items(compiled.dark_colors))
    return palette


def generate_vue(compiled: CompiledTheme, **options) -> str:
    """Vue 3 plugin that provides the theme and sets the custom properties."""
    variables = dict(css_variables(compiled))
    dark = dict(dark_css_variables(compiled)) if compiled.dark_mode_enabled else {}
    return (
        f"{block_comment(compiled, 'Vue Theme Plugin')}\n\n"
        "import { reactive } from 'vue';\n\n"
        f"export const theme = {to_js(token_tree(compiled, unit=px))};\n\n"
        f"export const cssVariables = {to_js(variables)};\n\n"
        f"export const darkCssVariables = {to_js(dark)};\n\n"
        "export const ThemeSymbol = Symbol('theme');\n\n"
        "function applyVariables(values, target = document.documentElement) {\n"
        "  for (const [name, value] of Object.entries(values)) {\n"
        "    target.style.setProperty(name, value);\n"
        "  }\n"
        "}\n\n"
        "export default {\n"
        "  install(app, options = {}) {\n"
        "    app.provide(ThemeSymbol, reactive(theme));\n"
        "    app.config.globalProperties.$theme = theme;\n"
        "    if (typeof document !== 'undefined' && options.applyVariables !== false) {\n"
        "      applyVariables(options.dark ? { ...cssVariables, ...darkCssVariables } : cssVariables);\n"
        "    }\n"
        "  },\n"
        "};\n"
    )


def generate_svelte(compiled: CompiledTheme, **options) -> str:
    """Svelte store plus an inline ``style`` string of custom properties."""
    style = "; ".join(f"{name}: {value}" for name, value in css_variables(compiled))
    parts = [
        block_comment(compiled, "Svelte Theme Store"),
        "",
        "import { writable } from 'svelte/store';",
        "",
        f"export const theme = {to_js(token_tree(compiled, unit=px))};",
        "",
        f"export const cssVariables = {to_js(style)};",
    ]
    if compiled.dark_mode_enabled:
        dark_style = "; ".join(f"{name}: {value}" for name, value in dark_css_variables(compiled))
        parts += ["", f"export const darkCssVariables = {to_js(dark_style)};"]
    parts += ["", "export const themeStore = writable(theme);", "", "export default theme;"]
    return "\n".join(parts) + "\n"


def _scss_palette(name: str, color: str) -> List[str]:
    palette = shade_palette(color)
    lines = [f"${name}: ("]
    lines += [f"  {shade}: {value}," for shade, value in palette.items()]
    lines.append("  contrast: (")
    for shade, value in palette.items():
        lines.append(f"    {shade}: {'#000000' if is_light(value) else '#ffffff'},")
    lines += ["  ),", ");"]
    return lines


def generate_angular(compiled: CompiledTheme, **options) -> str:
    """Angular Material (M2 API) theme built from primary, accent and warn palettes."""
    colors = compiled.colors
    accent = colors.get('secondary') or colors.get('accent') or colors['primary']
    warn = colors.get('error') or '#dc2626'
    stacks = font_stacks(compiled)

    lines = [line_comment(compiled, title="Angular Material Theme"), "",
             "@use '@angular/material' as mat;", ""]
    lines += _scss_palette("theme-primary-palette", colors['primary'])
    lines.append("")
    lines += _scss_palette("theme-accent-palette", accent)
    lines.append("")
    lines += _scss_palette("theme-warn-palette", warn)
    lines += [
        "",
        "$theme-primary: mat.m2-define-palette($theme-primary-palette, 500);",
        "$theme-accent: mat.m2-define-palette($theme-accent-palette, 500);",
        "$theme-warn: mat.m2-define-palette($theme-warn-palette, 500);",
        "",
        "$theme-typography: mat.m2-define-typography-config(",
        f"  $font-family: {css_value(stacks['body'])},",
        ");",
        "",
        "$app-theme: mat.m2-define-light-theme((",
        "  color: (primary: $theme-primary, accent: $theme-accent, warn: $theme-warn),",
        "  typography: $theme-typography,",
        "  density: 0,",
        "));",
        "",
        "@include mat.core();",
        "@include mat.all-component-themes($app-theme);",
        "",
        ":root {",
    ]
    lines += [f"  {name}: {value};" for name, value in css_variables(compiled)]
    lines.append("}")

    if compiled.dark_mode_enabled:
        lines += [
            "",
            "$app-dark-theme: mat.m2-define-dark-theme((",
            "  color: (primary: $theme-primary, accent: $theme-accent, warn: $theme-warn),",
            "));",
            "",
            '[data-theme="dark"], .dark {',
            "  @include mat.all-component-colors($app-dark-theme);",
        ]
        lines += [f"  {name}: {value};" for name, value in dark_css_variables(compiled)]
        lines.append("}")
    return "\n".join(lines) + "\n"


def _native_typography(compiled: CompiledTheme) -> Dict[str, Any]:
    base_size = compiled.typography.get('baseSize', 16)
    return {
        'fontFamily': {key: first_font(stack) for key, stack in font_stacks(compiled).items()},
        'fontSize': {k: plain_number(v) for k, v in compiled.derived.font_sizes.items()},
        'fontWeight': {k: format_number(v) for k, v in weights(compiled).items()},
        # React Native line heights are absolute
        'lineHeight': {k: plain_number(round(v * base_size, 2)) for k, v in line_heights(compiled).items()},
    }


def generate_react_native(compiled: CompiledTheme, **options) -> str:
    derived = compiled.derived
    parts = [
        block_comment(compiled, "React Native Theme"),
        "",
        f"export const colors = {to_js(dict(color_items(compiled.colors)))};",
        "",
    ]
    if compiled.dark_mode_enabled:
        parts += [f"export const darkColors = {to_js(_dark_palette(compiled))};", ""]
    parts += [
        f"export const spacing = {to_js({str(k): plain_number(v) for k, v in derived.spacing.items()})};",
        "",
        f"export const typography = {to_js(_native_typography(compiled))};",
        "",
        "export const borders = " + to_js({
            'width': {k: plain_number(v) for k, v in derived.border_widths.items()},
            'radius': {k: plain_number(v) for k, v in derived.radii.items()},
            'style': compiled.borders.get('defaultStyle', 'solid'),
        }) + ";",
        "",
        "export const theme = { colors, spacing, typography, borders };",
        "",
        "export type Theme = typeof theme;",
        "",
        "export default theme;",
    ]
    return "\n".join(parts) + "\n"


def dart_string(value: str) -> str:
    """Double-quoted Dart literal; ``$`` would start an interpolation."""
    return json.dumps(value, ensure_ascii=False).replace('$', '\\$')


def dart_color(value: str) -> str:
    return f"Color(0xFF{to_hex(value)[1:].upper()})"


def _dart_member(prefix: str, key: Any) -> str:
    text = str(key)
    return to_identifier(prefix + text[:1].upper() + text[1:])


def _dart_class(name: str, members: List[Tuple[str, str, str]]) -> List[str]:
    lines = [f"class {name} {{", f"  {name}._();", ""]
    lines += [f"  static const {dart_type} {member} = {value};" for dart_type, member, value in members]
    lines.append("}")
    return lines


def _dart_color_members(colors: Dict[str, str]) -> List[Tuple[str, str, str]]:
    return [('Color', to_identifier(role), dart_color(value)) for role, value in colors.items()]


def _dart_scheme(colors_class: str, brightness: str, colors: Dict[str, str]) -> List[str]:
    scheme = [
        f"      colorScheme: ColorScheme.fromSeed(",
        f"        seedColor: {colors_class}.primary,",
        f"        brightness: Brightness.{brightness},",
        f"        primary: {colors_class}.primary,",
        f"        surface: {colors_class}.surface,",
        f"        onSurface: {colors_class}.text,",
        f"        outline: {colors_class}.border,",
    ]
    if 'secondary' in colors:
        scheme.append(f"        secondary: {colors_class}.secondary,")
    if 'error' in colors:
        scheme.append(f"        error: {colors_class}.error,")
    scheme.append("      ),")
    return scheme


def generate_flutter(compiled: CompiledTheme, **options) -> str:
    """Dart constants plus light (and dark) ThemeData."""
    derived = compiled.derived
    stacks = font_stacks(compiled)
    colors = dict(color_items(compiled.colors))

    lines = [line_comment(compiled, title="Flutter Theme"), "",
             "import 'package:flutter/material.dart';", ""]
    lines += _dart_class("AppColors", _dart_color_members(colors))
    if compiled.dark_mode_enabled:
        lines.append("")
        lines += _dart_class("AppDarkColors", _dart_color_members(_dark_palette(compiled)))
    lines.append("")
    lines += _dart_class("AppSpacing", [
        ('double', f"space{index}", format_number(float(value)))
        for index, value in derived.spacing.items()
    ])
    lines.append("")
    lines += _dart_class("AppFontSizes", [
        ('double', _dart_member('size', name), format_number(float(value)))
        for name, value in derived.font_sizes.items()
    ])
    lines.append("")
    lines += _dart_class("AppRadii", [
        ('double', to_identifier(name), format_number(float(value)))
        for name, value in derived.radii.items()
    ])
    lines.append("")
    lines += _dart_class("AppFonts", [
        ('String', to_identifier(key), dart_string(first_font(stack)))
        for key, stack in stacks.items()
    ])

    lines += ["", "class AppTheme {", "  AppTheme._();", "",
              "  static ThemeData get light => ThemeData(",
              "      useMaterial3: true,",
              "      fontFamily: AppFonts.body,",
              "      scaffoldBackgroundColor: AppColors.surface,"]
    lines += _dart_scheme("AppColors", "light", colors)
    lines.append("    );")
    if compiled.dark_mode_enabled:
        lines += ["", "  static ThemeData get dark => ThemeData(",
                  "      useMaterial3: true,",
                  "      fontFamily: AppFonts.body,",
                  "      scaffoldBackgroundColor: AppDarkColors.surface,"]
        lines += _dart_scheme("AppDarkColors", "dark", _dark_palette(compiled))
        lines.append("    );")
    lines.append("}")
    return "\n".join(lines) + "\n"


def generate_chakra(compiled: CompiledTheme, **options) -> str:
    """Chakra UI ``extendTheme`` call with a brand palette and semantic tokens."""
    derived = compiled.derived
    colors: Dict[str, Any] = {'brand': shade_palette(compiled.colors['primary'])}
    colors.update({css_name(role): value for role, value in color_items(compiled.colors)})

    overrides: Dict[str, Any] = {
        'config': {'initialColorMode': 'light', 'useSystemColorMode': compiled.dark_mode_enabled},
        'colors': colors,
        'fonts': font_stacks(compiled),
        'fontSizes': {k: px(v) for k, v in derived.font_sizes.items()},
        'fontWeights': weights(compiled),
        'lineHeights': line_heights(compiled),
        'space': {str(k): px(v) for k, v in derived.spacing.items()},
        'radii': {k: px(v) for k, v in derived.radii.items()},
        'breakpoints': {k: px(v) for k, v in derived.breakpoints.items()},
    }
    if compiled.dark_mode_enabled and compiled.dark_colors:
        light = compiled.colors
        overrides['semanticTokens'] = {'colors': {
            css_name(role): {'default': light.get(role, value), '_dark': value}
            for role, value in color_items(compiled.dark_colors)
        }}

    return (
        f"{block_comment(compiled, 'Chakra UI Theme')}\n\n"
        "import { extendTheme } from '@chakra-ui/react';\n\n"
        f"export const theme = extendTheme({to_js(overrides)});\n\n"
        "export default theme;\n"
    )
