"""CSS-in-JS generators: Emotion, styled-components, vanilla-extract and Panda CSS."""

from typing import Any, Dict

from ..theme_engine.schema import CompiledTheme
from .base import (
    block_comment,
    color_items,
    format_number,
    px,
    to_js,
    token_tree,
)


def _stringify(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _stringify(v) for k, v in value.items()}
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return value


def _dark_palette(compiled: CompiledTheme) -> Dict[str, str]:
    """Full colors record with dark overrides applied."""
    palette = dict(color_items(compiled.colors))
    palette.update(color_items(compiled.dark_colors))
    return palette


def _typed_theme_module(compiled: CompiledTheme, title: str, module: str, interface: str) -> str:
    tree = token_tree(compiled, unit=px, include_components=True)
    tree.pop('dark', None)
    parts = [
        block_comment(compiled, title),
        "",
        f"import '{module}';",
        "",
        f"export const theme = {to_js(tree)};",
        "",
    ]
    if compiled.dark_mode_enabled:
        parts += [
            "export const darkTheme = {",
            "  ...theme,",
            f"  colors: {to_js(_dark_palette(compiled), indent=2)},",
            "};",
            "",
        ]
    parts += [
        "export type AppTheme = typeof theme;",
        "",
        f"declare module '{module}' {{",
        f"  export interface {interface} extends AppTheme {{}}",
        "}",
        "",
        "export default theme;",
    ]
    return "\n".join(parts) + "\n"


def generate_emotion(compiled: CompiledTheme, **options) -> str:
    return _typed_theme_module(compiled, "Emotion Theme", "@emotion/react", "Theme")


def generate_styled_components(compiled: CompiledTheme, **options) -> str:
    return _typed_theme_module(compiled, "styled-components Theme", "styled-components", "DefaultTheme")


def generate_vanilla_extract(compiled: CompiledTheme, css_scope: str = ":root", **options) -> str:
    """Global theme contract; vanilla-extract requires every leaf to be a string."""
    tree = _stringify(token_tree(compiled, unit=px, include_components=False))
    parts = [
        block_comment(compiled, "vanilla-extract Theme"),
        "",
        "import { createGlobalTheme } from '@vanilla-extract/css';",
        "",
        f"export const vars = createGlobalTheme({to_js(css_scope)}, {to_js(tree)});",
    ]
    if compiled.dark_mode_enabled:
        parts += [
            "",
            "createGlobalTheme('[data-theme=\"dark\"]', vars.colors, "
            f"{to_js(_dark_palette(compiled))});",
        ]
    return "\n".join(parts) + "\n"


def _panda_tokens(values: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {key: {'value': value} for key, value in values.items()}


def generate_panda(compiled: CompiledTheme, **options) -> str:
    tree = token_tree(compiled, unit=px, include_components=False)
    tokens = {
        'colors': _panda_tokens(tree['colors']),
        'spacing': _panda_tokens(tree['spacing']),
        'fonts': _panda_tokens(tree['fonts']),
        'fontSizes': _panda_tokens(tree['fontSizes']),
        'fontWeights': _panda_tokens(tree['fontWeights']),
        'lineHeights': _panda_tokens(tree['lineHeights']),
        'borderWidths': _panda_tokens(tree['borderWidths']),
        'radii': _panda_tokens(tree['radii']),
    }
    extend: Dict[str, Any] = {'tokens': tokens, 'breakpoints': tree['breakpoints']}

    if compiled.dark_mode_enabled and compiled.dark_colors:
        extend['semanticTokens'] = {
            'colors': {'theme': {
                role: {'value': {'base': f"{{colors.{role}}}", '_dark': value}}
                for role, value in color_items(compiled.dark_colors)
            }}
        }

    config = {
        'conditions': {'dark': '[data-theme="dark"] &, .dark &'},
        'theme': {'extend': extend},
    }
    return (
        f"{block_comment(compiled, 'Panda CSS Preset')}\n\n"
        "import { defineConfig } from '@pandacss/dev';\n\n"
        f"export default defineConfig({to_js(config)});\n"
    )
