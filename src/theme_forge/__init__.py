"""theme-forge - resolve design tokens and generate themes for many output formats."""

__version__ = "0.1.0"
__author__ = "theme-forge Team"

from .theme_engine import (
    ThemeEngine,
    ThemeConfig,
    CompiledTheme,
    compile_theme,
)
from .generators import generate, generate_all_formats, list_formats
from .importers import auto_import

__all__ = [
    "ThemeEngine",
    "ThemeConfig",
    "CompiledTheme",
    "compile_theme",
    "generate",
    "generate_all_formats",
    "list_formats",
    "auto_import",
    "__version__",
]
