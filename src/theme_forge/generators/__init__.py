"""theme-forge output generators.

Each generator turns a CompiledTheme into the text of one output format.
The registry below fixes the format ids, labels, output file names and MIME
types; ``generate`` and ``generate_all_formats`` are the entry points.
"""

import logging
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from ..theme_engine.compiler import compile_theme
from ..theme_engine.schema import CompiledTheme, ThemeConfig
from .core import generate_javascript, generate_json, generate_typescript, generate_yaml
from .css import generate_css
from .css_in_js import generate_emotion, generate_panda, generate_styled_components, generate_vanilla_extract
from .design_tools import (
    generate_adobe_xd,
    generate_canva,
    generate_figma,
    generate_sketch,
    generate_style_dictionary,
    generate_tokens_studio,
    generate_w3c,
    generate_zeplin,
)
from .docs import generate_docusaurus, generate_storybook
from .frameworks import (
    generate_angular,
    generate_chakra,
    generate_flutter,
    generate_react_native,
    generate_svelte,
    generate_vue,
)
from .preprocessors import generate_less, generate_postcss, generate_scss, generate_tailwind, generate_unocss

logger = logging.getLogger(__name__)

ThemeInput = Union[CompiledTheme, ThemeConfig, Dict[str, Any]]


@dataclass(frozen=True)
class GeneratorSpec:
    """One registered output format"""
    format_id: str
    label: str
    family: str
    filename: str
    mime_type: str
    generate: Callable[..., str]

    def output_filename(self, slug: str) -> str:
        return self.filename.format(slug=slug)


@dataclass
class GeneratorOutput:
    """Generated text for one format"""
    format: str
    label: str
    content: str
    filename: str
    mime_type: str


def _spec(format_id, label, family, filename, mime_type, generate) -> GeneratorSpec:
    return GeneratorSpec(format_id, label, family, filename, mime_type, generate)


GENERATORS: "OrderedDict[str, GeneratorSpec]" = OrderedDict((spec.format_id, spec) for spec in (
    # Core
    _spec("css", "CSS Variables", "core", "{slug}-theme.css", "text/css", generate_css),
    _spec("javascript", "JavaScript", "core", "{slug}-theme.js", "text/javascript", generate_javascript),
    _spec("typescript", "TypeScript", "core", "{slug}-theme.config.ts", "text/typescript", generate_typescript),
    _spec("json", "JSON", "core", "{slug}-theme.json", "application/json", generate_json),
    _spec("yaml", "YAML", "core", "{slug}-theme.yaml", "text/yaml", generate_yaml),
    # Preprocessors and utility frameworks
    _spec("scss", "SCSS", "preprocessor", "{slug}-theme.scss", "text/x-scss", generate_scss),
    _spec("less", "Less", "preprocessor", "{slug}-theme.less", "text/x-less", generate_less),
    _spec("tailwind", "Tailwind CSS", "preprocessor", "tailwind.config.js", "text/javascript", generate_tailwind),
    _spec("unocss", "UnoCSS", "preprocessor", "uno.config.ts", "text/typescript", generate_unocss),
    _spec("postcss", "PostCSS Plugin", "preprocessor", "postcss-theme-forge.js", "text/javascript",
          generate_postcss),
    # CSS-in-JS
    _spec("emotion", "Emotion", "css-in-js", "theme.emotion.ts", "text/typescript", generate_emotion),
    _spec("styled-components", "styled-components", "css-in-js", "theme.styled.ts", "text/typescript",
          generate_styled_components),
    _spec("vanilla-extract", "vanilla-extract", "css-in-js", "theme.css.ts", "text/typescript",
          generate_vanilla_extract),
    _spec("panda", "Panda CSS", "css-in-js", "panda.config.ts", "text/typescript", generate_panda),
    # Frameworks
    _spec("vue", "Vue", "framework", "theme.vue.js", "text/javascript", generate_vue),
    _spec("svelte", "Svelte", "framework", "theme.svelte.js", "text/javascript", generate_svelte),
    _spec("angular", "Angular Material", "framework", "theme.angular.scss", "text/x-scss", generate_angular),
    _spec("react-native", "React Native", "framework", "theme.native.ts", "text/typescript",
          generate_react_native),
    _spec("flutter", "Flutter", "framework", "app_theme.dart", "text/x-dart", generate_flutter),
    _spec("chakra", "Chakra UI", "framework", "theme.chakra.ts", "text/typescript", generate_chakra),
    # Design tools
    _spec("figma", "Figma Variables", "design-tool", "{slug}-figma.json", "application/json", generate_figma),
    _spec("tokens-studio", "Tokens Studio", "design-tool", "tokens-studio.json", "application/json",
          generate_tokens_studio),
    _spec("style-dictionary", "Style Dictionary", "design-tool", "tokens.json", "application/json",
          generate_style_dictionary),
    _spec("sketch", "Sketch Palette", "design-tool", "{slug}-sketch-palette.json", "application/json",
          generate_sketch),
    _spec("adobe-xd", "Adobe XD", "design-tool", "{slug}-adobe-xd.json", "application/json", generate_adobe_xd),
    _spec("canva", "Canva Brand Kit", "design-tool", "{slug}-canva-brand.json", "application/json",
          generate_canva),
    _spec("zeplin", "Zeplin / Penpot", "design-tool", "{slug}-zeplin.json", "application/json", generate_zeplin),
    _spec("w3c", "W3C Design Tokens", "design-tool", "design-tokens.json", "application/json", generate_w3c),
    # Documentation
    _spec("storybook", "Storybook", "docs", "storybook-theme.ts", "text/typescript", generate_storybook),
    _spec("docusaurus", "Docusaurus", "docs", "docusaurus-theme.js", "text/javascript", generate_docusaurus),
))


def _compiled(theme: ThemeInput, strict: bool = False) -> CompiledTheme:
    if isinstance(theme, CompiledTheme):
        return theme
    return compile_theme(theme, strict=strict)


def get_generator(format_id: str) -> GeneratorSpec:
    """Look up a registered format.

    Raises:
        ValueError: The format id is not registered
    """
    spec = GENERATORS.get(format_id)
    if spec is None:
        raise ValueError(
            f"Unknown format '{format_id}'. Available formats: {', '.join(GENERATORS)}"
        )
    return spec


def list_formats(family: Optional[str] = None) -> List[GeneratorSpec]:
    """Registered formats in registry order, optionally filtered by family."""
    return [spec for spec in GENERATORS.values() if family is None or spec.family == family]


def _run(spec: GeneratorSpec, compiled: CompiledTheme, options: Dict[str, Any]) -> GeneratorOutput:
    content = spec.generate(compiled, **options)
    logger.debug(f"Generated {spec.format_id} for '{compiled.meta.get('name')}' ({len(content)} chars)")
    return GeneratorOutput(
        format=spec.format_id,
        label=spec.label,
        content=content,
        filename=spec.output_filename(compiled.slug),
        mime_type=spec.mime_type,
    )


def generate(theme: ThemeInput, format_id: str, strict: bool = False, **options) -> str:
    """Generate one format.

    Args:
        theme: CompiledTheme, ThemeConfig or interchange dictionary
        format_id: Registered format id
        strict: Compile with strict reference resolution
        **options: Generator options such as ``css_scope``

    Returns:
        Generated text

    Raises:
        ValueError: Unknown format id
    """
    spec = get_generator(format_id)
    return spec.generate(_compiled(theme, strict), **options)


def generate_all_formats(theme: ThemeInput, formats: Optional[List[str]] = None,
                         max_workers: Optional[int] = None, strict: bool = False,
                         **options) -> List[GeneratorOutput]:
    """Generate several formats from one compiled theme.

    The theme is compiled once and shared; generators are independent, so with
    ``max_workers`` > 1 they run on a thread pool. Output order always follows
    ``formats`` (or registry order).

    Raises:
        ValueError: Any requested format id is unknown
    """
    specs = [get_generator(format_id) for format_id in (formats or list(GENERATORS))]
    compiled = _compiled(theme, strict)

    if max_workers and max_workers > 1 and len(specs) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(specs))) as executor:
            futures = [executor.submit(_run, spec, compiled, options) for spec in specs]
            outputs = [future.result() for future in futures]
    else:
        outputs = [_run(spec, compiled, options) for spec in specs]

    logger.info(f"Generated {len(outputs)} formats for '{compiled.meta.get('name')}'")
    return outputs


__all__ = [
    "GENERATORS",
    "GeneratorSpec",
    "GeneratorOutput",
    "generate",
    "generate_all_formats",
    "get_generator",
    "list_formats",
]
