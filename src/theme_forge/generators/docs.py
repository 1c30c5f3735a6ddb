"""Documentation tooling: Storybook and Docusaurus themes."""

from typing import Dict

from ..theme_engine.color import adjust_lightness
from ..theme_engine.schema import CompiledTheme
from .base import (
    block_comment,
    color_items,
    css_value,
    font_stacks,
    format_number,
    plain_number,
    to_js,
)

# Docusaurus primary shade name -> lightness delta
DOCUSAURUS_SHADES = (
    ('dark', -5),
    ('darker', -8),
    ('darkest', -15),
    ('light', 5),
    ('lighter', 8),
    ('lightest', 15),
)


def _storybook_theme(colors: Dict[str, str], compiled: CompiledTheme, base: str) -> Dict[str, object]:
    stacks = font_stacks(compiled)
    radius = plain_number(compiled.derived.radii.get('subtle', 8))
    return {
        'base': base,
        'brandTitle': compiled.meta.get('name', 'Theme'),
        'colorPrimary': colors['primary'],
        'colorSecondary': colors.get('secondary') or colors['primary'],
        'appBg': colors['surfaceSecondary'],
        'appContentBg': colors['surface'],
        'appBorderColor': colors['border'],
        'appBorderRadius': radius,
        'fontBase': stacks['body'],
        'fontCode': stacks.get('mono', 'monospace'),
        'textColor': colors['text'],
        'textInverseColor': colors.get('textInverted') or colors['surface'],
        'textMutedColor': colors['textMuted'],
        'barTextColor': colors['textSecondary'],
        'barSelectedColor': colors['primary'],
        'barBg': colors['surface'],
        'inputBg': colors['surface'],
        'inputBorder': colors['border'],
        'inputTextColor': colors['text'],
        'inputBorderRadius': radius,
    }


def generate_storybook(compiled: CompiledTheme, **options) -> str:
    light = dict(color_items(compiled.colors))
    parts = [
        block_comment(compiled, "Storybook Theme"),
        "",
        "import { create } from '@storybook/theming/create';",
        "",
        f"export const lightTheme = create({to_js(_storybook_theme(light, compiled, 'light'))});",
    ]
    if compiled.dark_mode_enabled:
        dark = dict(light)
        dark.update(color_items(compiled.dark_colors))
        parts += ["", f"export const darkTheme = create({to_js(_storybook_theme(dark, compiled, 'dark'))});"]
    parts += ["", "export default lightTheme;"]
    return "\n".join(parts) + "\n"


def _infima_properties(colors: Dict[str, str], compiled: CompiledTheme) -> Dict[str, str]:
    primary = colors['primary']
    stacks = font_stacks(compiled)
    properties: Dict[str, str] = {"--ifm-color-primary": primary}
    for shade, delta in DOCUSAURUS_SHADES:
        properties[f"--ifm-color-primary-{shade}"] = adjust_lightness(primary, delta)
    properties.update({
        '--ifm-background-color': colors['surface'],
        '--ifm-background-surface-color': colors['surfaceSecondary'],
        '--ifm-font-color-base': colors['text'],
        '--ifm-font-color-secondary': colors['textSecondary'],
        '--ifm-color-emphasis-300': colors['border'],
        '--ifm-font-family-base': stacks['body'],
        '--ifm-heading-font-family': stacks['heading'],
        '--ifm-global-radius': f"{plain_number(compiled.derived.radii.get('subtle', 8))}px",
    })
    if 'mono' in stacks:
        properties['--ifm-font-family-monospace'] = stacks['mono']
    for role in ('success', 'warning', 'info'):
        if role in colors:
            properties[f"--ifm-color-{role}"] = colors[role]
    if 'error' in colors:
        properties['--ifm-color-danger'] = colors['error']
    return properties


def _css_rule(selector: str, properties: Dict[str, str]) -> str:
    body = "\n".join(f"  {name}: {css_value(value)};" for name, value in properties.items())
    return f"{selector} {{\n{body}\n}}"


def generate_docusaurus(compiled: CompiledTheme, **options) -> str:
    """Infima custom properties wrapped in a module exporting the stylesheet text."""
    light = dict(color_items(compiled.colors))
    rules = [_css_rule(":root", _infima_properties(light, compiled))]
    if compiled.dark_mode_enabled:
        dark = dict(light)
        dark.update(color_items(compiled.dark_colors))
        rules.append(_css_rule("[data-theme='dark']", _infima_properties(dark, compiled)))
    stylesheet = "\n\n".join(rules)
    return (
        f"{block_comment(compiled, 'Docusaurus Theme')}\n\n"
        f"const customCss = {to_js(stylesheet)};\n\n"
        "module.exports = {\n"
        "  customCss,\n"
        f"  colorMode: {{ respectPrefersColorScheme: {format_number(compiled.dark_mode_enabled)} }},\n"
        "};\n"
    )
