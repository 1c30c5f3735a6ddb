"""Compile a theme into the form the generators consume.

Compilation sanitizes the theme, resolves every token reference once and
computes the derived values once, so no generator re-derives anything.
"""

import logging
from typing import Any, Dict, Optional, Union

from .derived import compute_derived_values
from .errors import ThemeValidationError
from .resolver import resolve_theme
from .sanitize import sanitize_theme
from .schema import CompiledTheme, ThemeConfig

logger = logging.getLogger(__name__)


def compile_theme(theme: Union[ThemeConfig, Dict[str, Any]], strict: bool = False,
                  max_string_length: Optional[int] = None) -> CompiledTheme:
    """Sanitize, resolve and derive.

    Args:
        theme: ThemeConfig or interchange dictionary
        strict: Raise on unresolvable references instead of passing them through
        max_string_length: Override the sanitizer's string length limit

    Returns:
        CompiledTheme ready for any generator

    Raises:
        ThemeValidationError: The sanitized record is not a valid theme, or
            ``strict`` is set and a reference does not resolve
    """
    if max_string_length is None:
        sanitized = sanitize_theme(theme)
    else:
        sanitized = sanitize_theme(theme, max_string_length)

    try:
        clean = sanitized.theme
    except ValueError as e:
        raise ThemeValidationError(f"Theme is not valid after sanitization: {e}") from e

    resolution = resolve_theme(clean, strict=strict)
    resolved = resolution.resolved
    dark = resolved.get('darkMode') or {}

    compiled = CompiledTheme(
        theme=clean,
        resolved=resolved,
        dark_colors=dark.get('colors') or {},
        dark_buttons=dark.get('buttons') or {},
        dark_cards=dark.get('cards') or {},
        derived=compute_derived_values(resolved),
    )
    logger.debug(
        f"Compiled theme '{clean.meta.name}' "
        f"({len(sanitized.flags)} sanitized, {len(resolution.errors)} unresolved)"
    )
    return compiled
