"""Universal formats: JSON, YAML, JavaScript and TypeScript."""

from typing import Any, Dict

import yaml

from ..theme_engine.schema import CompiledTheme
from .base import (
    block_comment,
    color_items,
    font_size_map,
    line_comment,
    line_heights,
    plain_number,
    spacing_map,
    to_js,
    to_json,
    token_tree,
    weights,
)


def json_document(compiled: CompiledTheme) -> Dict[str, Any]:
    """The JSON generator's document, also read back by the JSON importer."""
    resolved = compiled.resolved
    typography = compiled.typography
    spacing = resolved.get('spacing') or {}
    derived = compiled.derived

    spacing_doc: Dict[str, Any] = {'baseUnit': plain_number(spacing.get('baseUnit', 4))}
    if spacing.get('scale'):
        spacing_doc['scale'] = [plain_number(v) for v in spacing['scale']]
    spacing_doc['values'] = spacing_map(compiled)

    typography_doc: Dict[str, Any] = {
        'fontFamily': typography['fontFamily'],
        'fontFamilyHeading': typography.get('fontFamilyHeading') or typography['fontFamily'],
    }
    if typography.get('fontFamilyMono'):
        typography_doc['fontFamilyMono'] = typography['fontFamilyMono']
    typography_doc.update({
        'baseSize': plain_number(typography.get('baseSize', 16)),
        'scale': plain_number(typography.get('scale', 1.25)),
        'fontSize': font_size_map(compiled),
        'fontWeight': weights(compiled),
        'lineHeight': line_heights(compiled),
    })

    document: Dict[str, Any] = {
        'meta': dict(compiled.meta),
        'colors': dict(color_items(compiled.colors)),
        'spacing': spacing_doc,
        'typography': typography_doc,
        'borders': {
            'width': dict(derived.border_widths),
            'radius': dict(derived.radii),
            'style': compiled.borders.get('defaultStyle', 'solid'),
        },
        'breakpoints': dict(derived.breakpoints),
    }
    for section in ('buttons', 'cards', 'darkMode'):
        if resolved.get(section):
            document[section] = resolved[section]
    return document


def generate_json(compiled: CompiledTheme, **options) -> str:
    return to_json(json_document(compiled)) + "\n"


def generate_yaml(compiled: CompiledTheme, **options) -> str:
    """Resolved theme record as YAML; loadable again as a theme file."""
    body = yaml.safe_dump(compiled.resolved, default_flow_style=False,
                          sort_keys=False, allow_unicode=True)
    return line_comment(compiled, prefix="#") + "\n\n" + body


def generate_javascript(compiled: CompiledTheme, **options) -> str:
    tree = token_tree(compiled)
    return (
        f"{block_comment(compiled)}\n\n"
        f"export const theme = {to_js(tree)};\n\n"
        f"export const colors = theme.colors;\n"
        f"export const spacing = theme.spacing;\n"
        f"export const fontSizes = theme.fontSizes;\n\n"
        f"export default theme;\n"
    )


def generate_typescript(compiled: CompiledTheme, **options) -> str:
    tree = token_tree(compiled)
    return (
        f"{block_comment(compiled)}\n\n"
        f"export const theme = {to_js(tree)} as const;\n\n"
        f"export type Theme = typeof theme;\n"
        f"export type ColorToken = keyof Theme['colors'];\n"
        f"export type SpacingToken = keyof Theme['spacing'];\n"
        f"export type FontSizeToken = keyof Theme['fontSizes'];\n\n"
        f"export default theme;\n"
    )
