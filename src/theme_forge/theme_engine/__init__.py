"""theme-forge Theme Engine Package.

This package provides the token engine behind theme-forge: the theme schema,
color math, WCAG contrast checking, color-blindness simulation, dark-mode
derivation, token reference resolution, theme composition, validation,
sanitization, accessibility audits and the preset registry.
"""

from .engine import ThemeEngine
from .registry import ThemeRegistry, CircularInheritanceError
from .compiler import compile_theme
from .schema import (
    # Core models
    ThemeConfig,
    ThemeMeta,
    ThemeColors,
    Typography,
    Spacing,
    Borders,
    ButtonStyle,
    CardStyle,
    DarkModeConfig,
    CompiledTheme,
    DerivedValues,

    # Enums
    BorderStyle,
    WCAGLevel,
    ContrastLevel,
    DarkModeIntensity,
    ColorBlindnessType,
    Severity,
)
from .errors import (
    ThemeForgeError,
    TokenResolutionError,
    UnresolvedTokenError,
    TokenCycleError,
    ThemeValidationError,
)
from .color import (
    hex_to_rgb,
    rgb_to_hex,
    rgb_to_hsl,
    hsl_to_rgb,
    parse_color,
    relative_luminance,
    adjust_lightness,
    lighten,
    darken,
    mix,
    generate_palette,
    get_color_info,
)
from .contrast import (
    ContrastResult,
    calculate_contrast_ratio,
    check_contrast,
    meets_minimum_contrast,
    fix_contrast,
    fix_theme_contrast,
)
from .colorblind import (
    ColorBlindnessIssue,
    simulate_color_blindness,
    get_all_simulations,
    validate_color_blindness_safety,
    is_color_blind_friendly,
)
from .darkmode import DarkModeOptions, generate_dark_mode, generate_dark_mode_colors
from .resolver import ResolutionResult, resolve_token, resolve_theme, is_token_reference
from .composition import (
    deep_merge,
    merge_themes,
    merge_all_themes,
    extend_theme,
    override_theme,
    compose_themes,
    create_theme_variant,
)
from .validation import ValidationIssue, validate_theme, is_valid_color, ensure_valid_theme
from .sanitize import SanitizeResult, sanitize_theme
from .audit import AuditResult, audit_theme_accessibility, get_accessibility_score

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "ThemeEngine",
    "ThemeRegistry",
    "CircularInheritanceError",
    "compile_theme",

    # Schema models
    "ThemeConfig",
    "ThemeMeta",
    "ThemeColors",
    "Typography",
    "Spacing",
    "Borders",
    "ButtonStyle",
    "CardStyle",
    "DarkModeConfig",
    "CompiledTheme",
    "DerivedValues",

    # Enums
    "BorderStyle",
    "WCAGLevel",
    "ContrastLevel",
    "DarkModeIntensity",
    "ColorBlindnessType",
    "Severity",

    # Errors
    "ThemeForgeError",
    "TokenResolutionError",
    "UnresolvedTokenError",
    "TokenCycleError",
    "ThemeValidationError",

    # Color math
    "hex_to_rgb",
    "rgb_to_hex",
    "rgb_to_hsl",
    "hsl_to_rgb",
    "parse_color",
    "relative_luminance",
    "adjust_lightness",
    "lighten",
    "darken",
    "mix",
    "generate_palette",
    "get_color_info",

    # Accessibility
    "ContrastResult",
    "calculate_contrast_ratio",
    "check_contrast",
    "meets_minimum_contrast",
    "fix_contrast",
    "fix_theme_contrast",
    "ColorBlindnessIssue",
    "simulate_color_blindness",
    "get_all_simulations",
    "validate_color_blindness_safety",
    "is_color_blind_friendly",
    "AuditResult",
    "audit_theme_accessibility",
    "get_accessibility_score",

    # Dark mode, resolution, composition
    "DarkModeOptions",
    "generate_dark_mode",
    "generate_dark_mode_colors",
    "ResolutionResult",
    "resolve_token",
    "resolve_theme",
    "is_token_reference",
    "deep_merge",
    "merge_themes",
    "merge_all_themes",
    "extend_theme",
    "override_theme",
    "compose_themes",
    "create_theme_variant",

    # Validation
    "ValidationIssue",
    "validate_theme",
    "is_valid_color",
    "ensure_valid_theme",
    "SanitizeResult",
    "sanitize_theme",
]
