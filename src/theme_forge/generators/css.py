"""CSS custom properties generator."""

from typing import List, Tuple

from ..theme_engine.schema import CompiledTheme
from .base import GENERATOR_NAME, comment_text, css_variables, dark_css_variables

DEFAULT_SCOPE = ":root"

# Custom-property prefix -> section comment, in emit order
SECTIONS = (
    ("--theme-color-", "Colors"),
    ("--theme-spacing-", "Spacing"),
    ("--theme-font-", "Typography"),
    ("--theme-line-height-", None),
    ("--theme-border-", "Borders"),
    ("--theme-radius-", None),
    ("--theme-breakpoint-", "Breakpoints"),
    ("--theme-button-", "Buttons"),
    ("--theme-card-", "Cards"),
)


def _declarations(variables: List[Tuple[str, str]], indent: str = "  ",
                  with_sections: bool = True) -> List[str]:
    lines = []
    current = None
    for name, value in variables:
        if with_sections:
            section = next((title for prefix, title in SECTIONS if name.startswith(prefix)), None)
            if section and section != current:
                if current is not None:
                    lines.append("")
                lines.append(f"{indent}/* === {section} === */")
                current = section
        lines.append(f"{indent}{name}: {value};")
    return lines


def dark_selectors(scope: str = DEFAULT_SCOPE) -> Tuple[str, str]:
    """(explicit dark selector list, prefers-color-scheme selector)."""
    if scope == DEFAULT_SCOPE:
        explicit = '[data-theme="dark"], .dark'
    else:
        explicit = f'{scope}[data-theme="dark"], {scope} .dark'
    return explicit, f'{scope}:not([data-theme="light"])'


def generate_css(compiled: CompiledTheme, css_scope: str = DEFAULT_SCOPE, **options) -> str:
    """Generate CSS custom properties.

    Args:
        compiled: Compiled theme
        css_scope: Selector the variables are declared on

    Returns:
        Stylesheet text starting with the scope block
    """
    meta = compiled.meta
    lines = [
        f"{css_scope} {{",
        f"  /* {comment_text(meta.get('name', 'Theme'))} {comment_text(meta.get('version', ''))}, "
        f"generated by {GENERATOR_NAME} */",
    ]
    lines += _declarations(css_variables(compiled))
    lines.append("}")

    if compiled.dark_mode_enabled:
        dark = dark_css_variables(compiled)
        explicit, media_scope = dark_selectors(css_scope)
        lines += ["", "/* === Dark Mode === */", f"{explicit} {{"]
        lines += _declarations(dark, with_sections=False)
        lines += ["}", "", "@media (prefers-color-scheme: dark) {", f"  {media_scope} {{"]
        lines += _declarations(dark, indent="    ", with_sections=False)
        lines += ["  }", "}"]

    return "\n".join(lines) + "\n"
