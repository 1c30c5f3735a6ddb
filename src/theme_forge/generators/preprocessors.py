"""CSS preprocessor and utility-framework generators: SCSS, Less, Tailwind, UnoCSS, PostCSS."""

from typing import Any, Dict, List

from ..theme_engine.schema import CompiledTheme
from .base import (
    block_comment,
    color_items,
    css_name,
    css_variables,
    dark_css_variables,
    font_size_map,
    font_stacks,
    format_number,
    line_comment,
    line_heights,
    px,
    spacing_map,
    to_js,
    weights,
)


def _scss_map(name: str, values: Dict[str, Any]) -> str:
    entries = ",\n".join(f"  '{css_name(key)}': {value}" for key, value in values.items())
    return f"${name}: (\n{entries}\n);"


def generate_scss(compiled: CompiledTheme, **options) -> str:
    """SCSS variables, lookup maps and a breakpoint mixin."""
    derived = compiled.derived
    lines = [line_comment(compiled), ""]
    lines += [f"${name[2:]}: {value};" for name, value in css_variables(compiled)]

    if compiled.dark_mode_enabled:
        lines += ["", "// Dark mode"]
        lines += [f"$theme-dark-{name[len('--theme-'):]}: {value};"
                  for name, value in dark_css_variables(compiled)]

    lines += [
        "",
        _scss_map("theme-colors", {role: f"$theme-color-{css_name(role)}"
                                   for role, _ in color_items(compiled.colors)}),
        "",
        _scss_map("theme-spacing", {k: px(v) for k, v in derived.spacing.items()}),
        "",
        _scss_map("theme-font-sizes", {k: px(v) for k, v in derived.font_sizes.items()}),
        "",
        _scss_map("theme-breakpoints", {k: px(v) for k, v in derived.breakpoints.items()}),
        "",
        "@mixin theme-breakpoint($name) {",
        "  @media (min-width: map-get($theme-breakpoints, $name)) {",
        "    @content;",
        "  }",
        "}",
    ]
    return "\n".join(lines) + "\n"


def generate_less(compiled: CompiledTheme, **options) -> str:
    """Less variables plus a breakpoint guard mixin."""
    lines = [line_comment(compiled), ""]
    lines += [f"@{name[2:]}: {value};" for name, value in css_variables(compiled)]

    if compiled.dark_mode_enabled:
        lines += ["", "// Dark mode"]
        lines += [f"@theme-dark-{name[len('--theme-'):]}: {value};"
                  for name, value in dark_css_variables(compiled)]

    lines += [
        "",
        ".theme-breakpoint(@name; @rules) {",
        "  @media (min-width: @@name) {",
        "    @rules();",
        "  }",
        "}",
    ]
    return "\n".join(lines) + "\n"


def _font_list(stack: str) -> List[str]:
    return [part.strip().strip('\'"') for part in stack.split(',') if part.strip()]


def tailwind_theme(compiled: CompiledTheme) -> Dict[str, Any]:
    """The ``theme.extend`` section of a Tailwind config."""
    derived = compiled.derived
    stacks = font_stacks(compiled)
    font_family = {'sans': _font_list(stacks['body']), 'heading': _font_list(stacks['heading'])}
    if 'mono' in stacks:
        font_family['mono'] = _font_list(stacks['mono'])

    widths = derived.border_widths
    return {
        'colors': {css_name(role): value for role, value in color_items(compiled.colors)},
        'spacing': spacing_map(compiled, px),
        'fontFamily': font_family,
        'fontSize': font_size_map(compiled, px),
        'fontWeight': {k: format_number(v) for k, v in weights(compiled).items()},
        'lineHeight': {k: format_number(v) for k, v in line_heights(compiled).items()},
        'borderWidth': {'thin': px(widths['thin']), 'DEFAULT': px(widths['default']),
                        'thick': px(widths['thick'])},
        'borderRadius': {k: px(v) for k, v in derived.radii.items()},
        'screens': {k: px(v) for k, v in derived.breakpoints.items()},
    }


def generate_tailwind(compiled: CompiledTheme, **options) -> str:
    config: Dict[str, Any] = {}
    if compiled.dark_mode_enabled:
        config['darkMode'] = ['class', '[data-theme="dark"]']
    config['theme'] = {'extend': tailwind_theme(compiled)}
    return (
        f"{block_comment(compiled, 'Tailwind Theme')}\n\n"
        "/** @type {import('tailwindcss').Config} */\n"
        f"module.exports = {to_js(config)};\n"
    )


def generate_unocss(compiled: CompiledTheme, **options) -> str:
    derived = compiled.derived
    stacks = font_stacks(compiled)
    theme = {
        'colors': {css_name(role): value for role, value in color_items(compiled.colors)},
        'spacing': spacing_map(compiled, px),
        'fontFamily': {'sans': stacks['body'], 'heading': stacks['heading'],
                       **({'mono': stacks['mono']} if 'mono' in stacks else {})},
        'fontSize': font_size_map(compiled, px),
        'borderRadius': {k: px(v) for k, v in derived.radii.items()},
        'breakpoints': {k: px(v) for k, v in derived.breakpoints.items()},
    }
    return (
        f"{block_comment(compiled, 'UnoCSS Theme')}\n\n"
        "import { defineConfig, presetUno } from 'unocss';\n\n"
        "export default defineConfig({\n"
        "  presets: [presetUno()],\n"
        f"  theme: {to_js(theme, indent=2)},\n"
        "});\n"
    )


def generate_postcss(compiled: CompiledTheme, css_scope: str = ":root", **options) -> str:
    """A PostCSS plugin that prepends the theme's custom properties."""
    variables = dict(css_variables(compiled))
    dark = dict(dark_css_variables(compiled)) if compiled.dark_mode_enabled else {}
    return (
        f"{block_comment(compiled, 'PostCSS Plugin')}\n\n"
        f"const variables = {to_js(variables)};\n\n"
        f"const darkVariables = {to_js(dark)};\n\n"
        "function declare(Rule, Declaration, selector, values) {\n"
        "  const rule = new Rule({ selector });\n"
        "  for (const [prop, value] of Object.entries(values)) {\n"
        "    rule.append(new Declaration({ prop, value }));\n"
        "  }\n"
        "  return rule;\n"
        "}\n\n"
        "module.exports = (opts = {}) => {\n"
        f"  const selector = opts.selector || {to_js(css_scope)};\n"
        "  return {\n"
        "    postcssPlugin: 'postcss-theme-forge',\n"
        "    Once(root, { Rule, Declaration }) {\n"
        "      if (Object.keys(darkVariables).length > 0) {\n"
        "        root.prepend(declare(Rule, Declaration, '[data-theme=\"dark\"]', darkVariables));\n"
        "      }\n"
        "      root.prepend(declare(Rule, Declaration, selector, variables));\n"
        "    },\n"
        "  };\n"
        "};\n\n"
        "module.exports.postcss = true;\n"
        "module.exports.variables = variables;\n"
    )
