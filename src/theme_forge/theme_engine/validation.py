"""Theme validation.

Validation reports every problem in one pass as a list of field-scoped
``ValidationIssue`` records instead of raising on the first failure, so a
caller (CLI, build step) can decide whether to proceed, warn or fail.

``validate_theme_schema`` checks structure, types, ranges and color syntax on
a raw dictionary. ``validate_theme`` adds the semantic range warnings and
strict token-reference checks. Warning de-duplication across calls uses a
set owned by the caller; this module keeps no state between runs.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from .color import RGB_PATTERN, HSL_PATTERN
from .errors import ThemeValidationError
from .named_colors import CSS_NAMED_COLORS, CSS_COLOR_KEYWORDS
from .schema import (
    ThemeConfig,
    Severity,
    BorderStyle,
    REQUIRED_COLOR_ROLES,
    BUTTON_STYLE_KEYS,
    CARD_STYLE_KEYS,
)

logger = logging.getLogger(__name__)

HEX_COLOR_PATTERN = re.compile(
    r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$'
)

COLOR_EXPECTATION = "hex, rgb(), hsl(), named color or token reference"

REQUIRED_SECTIONS = ('meta', 'colors', 'typography')
DEFAULTED_SECTIONS = ('spacing', 'borders')

# Recommended ranges; values outside produce warnings, not errors
RECOMMENDED_RANGES = (
    ('typography.baseSize', 12, 24),
    ('typography.scale', 1.1, 1.5),
    ('spacing.baseUnit', 2, 8),
    ('borders.default', 1, 8),
)


@dataclass
class ValidationIssue:
    """A single validation finding."""
    path: str
    message: str
    severity: Severity = Severity.ERROR
    expected: Optional[str] = None
    received: Optional[str] = None

    @property
    def field(self) -> str:
        return self.path[2:] if self.path.startswith('$.') else self.path.lstrip('$')

    @property
    def is_error(self) -> bool:
        return Severity(self.severity) == Severity.ERROR

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, str):
        return repr(value) if len(value) <= 60 else repr(value[:57] + "...")
    return type(value).__name__


def is_valid_hex_color(value: Any) -> bool:
    return isinstance(value, str) and HEX_COLOR_PATTERN.match(value.strip()) is not None


def is_valid_rgb_color(value: Any) -> bool:
    """Check rgb()/rgba() syntax and channel ranges."""
    if not isinstance(value, str):
        return False
    match = RGB_PATTERN.match(value.strip())
    if not match:
        return False
    r, rp, g, gp, b, bp = match.groups()
    for number, percent in ((r, rp), (g, gp), (b, bp)):
        limit = 100 if percent else 255
        if not 0 <= float(number) <= limit:
            return False
    return True


def is_valid_hsl_color(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    match = HSL_PATTERN.match(value.strip())
    if not match:
        return False
    _, s, l = (float(part) for part in match.groups())
    return 0 <= s <= 100 and 0 <= l <= 100


def is_valid_named_color(value: Any, allow_keywords: bool = True) -> bool:
    if not isinstance(value, str):
        return False
    lowered = value.strip().lower()
    if lowered in CSS_NAMED_COLORS:
        return True
    return allow_keywords and lowered in CSS_COLOR_KEYWORDS


def is_valid_color_literal(value: Any, allow_keywords: bool = True) -> bool:
    """True for hex, rgb(), hsl() and named colors (and keywords if allowed)."""
    return (
        is_valid_hex_color(value)
        or is_valid_rgb_color(value)
        or is_valid_hsl_color(value)
        or is_valid_named_color(value, allow_keywords)
    )


def is_valid_color(value: Any) -> bool:
    """True for any color literal or syntactically valid token reference."""
    from .resolver import is_token_reference
    return is_valid_color_literal(value) or is_token_reference(value)


def is_theme_like(data: Any) -> bool:
    """Cheap structural check used by importers to detect raw theme records."""
    return (
        isinstance(data, dict)
        and all(isinstance(data.get(section), dict) for section in REQUIRED_SECTIONS)
    )


class _SchemaChecker:
    """Accumulates issues while walking a raw theme dictionary."""

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def error(self, path: str, message: str, expected: Optional[str] = None,
              received: Any = None) -> None:
        self.issues.append(ValidationIssue(
            path, message, Severity.ERROR, expected,
            _describe(received) if expected else None,
        ))

    def warning(self, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(path, message, Severity.WARNING))

    def section(self, data: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
        value = data.get(name)
        if value is None:
            return None
        if not isinstance(value, dict):
            self.error(f"$.{name}", f"'{name}' must be an object", "object", value)
            return None
        return value

    def string(self, data: Dict[str, Any], path: str, key: str, required: bool = False) -> None:
        value = data.get(key)
        if value is None:
            if required:
                self.error(f"{path}.{key}", f"'{key}' is required", "string", value)
            return
        if not isinstance(value, str) or not value.strip():
            self.error(f"{path}.{key}", f"'{key}' must be a non-empty string", "string", value)

    def number(self, data: Dict[str, Any], path: str, key: str, minimum: Optional[float] = None,
               exclusive: bool = False, required: bool = False) -> None:
        value = data.get(key)
        if value is None:
            if required:
                self.error(f"{path}.{key}", f"'{key}' is required", "number", value)
            return
        if not _is_number(value):
            self.error(f"{path}.{key}", f"'{key}' must be a number", "number", value)
            return
        if minimum is not None:
            too_small = value <= minimum if exclusive else value < minimum
            if too_small:
                bound = f"> {minimum}" if exclusive else f">= {minimum}"
                self.error(f"{path}.{key}", f"'{key}' must be {bound}", f"number {bound}", value)

    def color(self, path: str, value: Any) -> None:
        if not isinstance(value, str) or not value.strip():
            self.error(path, "Color must be a non-empty string", COLOR_EXPECTATION, value)
        elif not is_valid_color(value):
            self.error(path, f"Invalid color value {_describe(value)}", COLOR_EXPECTATION, value)

    def check_meta(self, meta: Dict[str, Any]) -> None:
        self.string(meta, "$.meta", "name", required=True)
        self.string(meta, "$.meta", "version")
        tags = meta.get('tags')
        if tags is not None and (not isinstance(tags, list)
                                 or not all(isinstance(t, str) for t in tags)):
            self.error("$.meta.tags", "'tags' must be a list of strings", "string[]", tags)

    def check_colors(self, colors: Dict[str, Any], path: str = "$.colors",
                     require_roles: bool = True) -> None:
        if require_roles:
            for role in REQUIRED_COLOR_ROLES:
                if role not in colors:
                    self.error(f"{path}.{role}", f"Required color '{role}' is missing",
                               COLOR_EXPECTATION, None)
        for role, value in colors.items():
            self.color(f"{path}.{role}", value)

    def check_typography(self, typography: Dict[str, Any]) -> None:
        path = "$.typography"
        self.string(typography, path, "fontFamily", required=True)
        self.string(typography, path, "fontFamilyHeading")
        self.string(typography, path, "fontFamilyMono")
        self.number(typography, path, "baseSize", minimum=0, exclusive=True)
        self.number(typography, path, "scale", minimum=0, exclusive=True)
        scale = typography.get('scale')
        if _is_number(scale) and 0 < scale <= 1:
            self.warning(f"{path}.scale",
                         f"Type scale {scale} is not greater than 1; sizes will not increase")

        for group in ('sizes', 'weights', 'lineHeights'):
            values = typography.get(group)
            if values is None:
                continue
            if not isinstance(values, dict):
                self.error(f"{path}.{group}", f"'{group}' must be an object", "object", values)
                continue
            for key in values:
                self.number(values, f"{path}.{group}", key, minimum=0, exclusive=True)

    def check_spacing(self, spacing: Dict[str, Any]) -> None:
        path = "$.spacing"
        self.number(spacing, path, "baseUnit", minimum=0, exclusive=True)
        scale = spacing.get('scale')
        if scale is not None:
            if not isinstance(scale, list) or not all(_is_number(v) and v >= 0 for v in scale):
                self.error(f"{path}.scale", "'scale' must be a list of non-negative numbers",
                           "number[]", scale)
        values = spacing.get('values')
        if values is not None:
            if not isinstance(values, dict):
                self.error(f"{path}.values", "'values' must be an object", "object", values)
            else:
                for key in values:
                    if not str(key).isdigit():
                        self.error(f"{path}.values.{key}", "Spacing index must be an integer",
                                   "integer key", key)
                    self.number(values, f"{path}.values", key, minimum=0)

    def check_borders(self, borders: Dict[str, Any]) -> None:
        path = "$.borders"
        for key in ('thin', 'default', 'thick', 'radiusSubtle', 'radiusRelaxed',
                    'radiusPill', 'radiusLiquid'):
            self.number(borders, path, key, minimum=0)
        style = borders.get('defaultStyle')
        allowed = [s.value for s in BorderStyle]
        if style is not None and style not in allowed:
            self.error(f"{path}.defaultStyle", f"Unknown border style {_describe(style)}",
                       " | ".join(allowed), style)

    def check_breakpoints(self, breakpoints: Dict[str, Any]) -> None:
        for key in breakpoints:
            self.number(breakpoints, "$.breakpoints", key, minimum=0)

    def check_variants(self, variants: Any, path: str, allowed_keys: Tuple[str, ...]) -> None:
        if not isinstance(variants, dict):
            self.error(path, "Variant styles must be an object", "object", variants)
            return
        for name, style in variants.items():
            style_path = f"{path}.{name}"
            if not isinstance(style, dict):
                self.error(style_path, "Variant style must be an object", "object", style)
                continue
            for key, value in style.items():
                if key not in allowed_keys:
                    self.warning(f"{style_path}.{key}", f"Unknown style field '{key}' is ignored")
                elif key == 'borderStyle':
                    if value not in [s.value for s in BorderStyle]:
                        self.error(f"{style_path}.{key}", f"Unknown border style {_describe(value)}",
                                   "solid | dashed | dotted", value)
                elif key == 'borderWidth':
                    if not _is_number(value):
                        self.color_or_reference_number(f"{style_path}.{key}", value)
                else:
                    self.color(f"{style_path}.{key}", value)

    def color_or_reference_number(self, path: str, value: Any) -> None:
        from .resolver import is_token_reference
        if not is_token_reference(value):
            self.error(path, "Border width must be a number or token reference",
                       "number or token reference", value)

    def check_dark_mode(self, dark_mode: Dict[str, Any]) -> None:
        enabled = dark_mode.get('enabled')
        if enabled is not None and not isinstance(enabled, bool):
            self.error("$.darkMode.enabled", "'enabled' must be a boolean", "boolean", enabled)
        colors = dark_mode.get('colors')
        if colors is not None:
            if isinstance(colors, dict):
                self.check_colors(colors, "$.darkMode.colors", require_roles=False)
            else:
                self.error("$.darkMode.colors", "'colors' must be an object", "object", colors)
        if dark_mode.get('buttons') is not None:
            self.check_variants(dark_mode['buttons'], "$.darkMode.buttons", BUTTON_STYLE_KEYS)
        if dark_mode.get('cards') is not None:
            self.check_variants(dark_mode['cards'], "$.darkMode.cards", CARD_STYLE_KEYS)


def validate_theme_schema(data: Any) -> List[ValidationIssue]:
    """Check structure, types, ranges and color syntax of a raw theme record.

    Args:
        data: Theme in interchange dictionary form

    Returns:
        List of issues (empty if valid); never raises
    """
    checker = _SchemaChecker()
    if not isinstance(data, dict):
        checker.error("$", "Theme must be an object", "object", data)
        return checker.issues

    for name in REQUIRED_SECTIONS:
        if name not in data:
            checker.error(f"$.{name}", f"Required section '{name}' is missing", "object", None)
    for name in DEFAULTED_SECTIONS:
        if name not in data:
            checker.warning(f"$.{name}", f"Section '{name}' is missing; defaults will be used")

    checks = (
        ('meta', checker.check_meta),
        ('colors', checker.check_colors),
        ('typography', checker.check_typography),
        ('spacing', checker.check_spacing),
        ('borders', checker.check_borders),
        ('breakpoints', checker.check_breakpoints),
        ('darkMode', checker.check_dark_mode),
    )
    for name, check in checks:
        section = checker.section(data, name)
        if section is not None:
            check(section)

    if data.get('buttons') is not None:
        checker.check_variants(data['buttons'], "$.buttons", BUTTON_STYLE_KEYS)
    if data.get('cards') is not None:
        checker.check_variants(data['cards'], "$.cards", CARD_STYLE_KEYS)

    return checker.issues


def _range_warnings(record: Dict[str, Any]) -> List[ValidationIssue]:
    from .utils import get_path

    warnings = []
    for path, low, high in RECOMMENDED_RANGES:
        found, value = get_path(record, path)
        if found and _is_number(value) and not low <= value <= high:
            warnings.append(ValidationIssue(
                f"$.{path}",
                f"{path.split('.')[-1]} {value} is outside the recommended range {low}-{high}",
                Severity.WARNING,
            ))
    return warnings


def _reference_errors(record: Dict[str, Any]) -> List[ValidationIssue]:
    from .resolver import resolve_theme

    if not isinstance(record.get('darkMode') or {}, dict):
        record = {key: value for key, value in record.items() if key != 'darkMode'}
    result = resolve_theme(record)
    return [
        ValidationIssue(
            f"$.{issue.field}",
            issue.message,
            Severity.ERROR,
            expected="resolvable token reference",
            received=repr(issue.reference),
        )
        for issue in result.errors
    ]


def _dedupe_warnings(issues: List[ValidationIssue],
                     seen_warnings: Optional[Set[str]]) -> List[ValidationIssue]:
    if seen_warnings is None:
        return issues
    kept = []
    for issue in issues:
        if not issue.is_error:
            key = str(issue)
            if key in seen_warnings:
                continue
            seen_warnings.add(key)
        kept.append(issue)
    return kept


def validate_theme(theme: Union[ThemeConfig, Dict[str, Any]],
                   seen_warnings: Optional[Set[str]] = None) -> List[ValidationIssue]:
    """Validate a theme fully: schema, recommended ranges and references.

    Args:
        theme: ThemeConfig or interchange dictionary
        seen_warnings: Optional caller-owned set; warnings already in it are
            dropped and new ones are added, so repeated runs stay quiet

    Returns:
        List of issues (empty if valid)
    """
    record = theme.to_dict() if isinstance(theme, ThemeConfig) else theme
    issues = validate_theme_schema(record)

    if isinstance(record, dict):
        reported = {issue.path for issue in issues}
        issues.extend(i for i in _range_warnings(record) if i.path not in reported)
        issues.extend(i for i in _reference_errors(record) if i.path not in reported)

    errors = sum(1 for i in issues if i.is_error)
    logger.debug(f"Validation found {errors} errors and {len(issues) - errors} warnings")
    return _dedupe_warnings(issues, seen_warnings)


def has_errors(issues: List[ValidationIssue]) -> bool:
    return any(issue.is_error for issue in issues)


def ensure_valid_theme(theme: Union[ThemeConfig, Dict[str, Any]]) -> ThemeConfig:
    """Return a ThemeConfig or raise ThemeValidationError with every error found."""
    issues = validate_theme(theme)
    errors = [issue for issue in issues if issue.is_error]
    if errors:
        raise ThemeValidationError(f"Theme has {len(errors)} validation error(s)", errors)
    if isinstance(theme, ThemeConfig):
        return theme
    try:
        return ThemeConfig.from_dict(theme)
    except ValueError as e:
        raise ThemeValidationError(f"Invalid theme: {e}") from e


def validate_and_sanitize(data: Union[ThemeConfig, Dict[str, Any]],
                          seen_warnings: Optional[Set[str]] = None
                          ) -> Tuple[Optional[ThemeConfig], List[ValidationIssue]]:
    """Sanitize a theme from an untrusted source, then validate it.

    Sanitization flags are reported as warnings alongside validation issues.

    Returns:
        Tuple of (theme or None if it has errors, issues)
    """
    from .sanitize import sanitize_theme

    result = sanitize_theme(data)
    issues = [
        ValidationIssue(f"$.{flag.field}", flag.message, Severity.WARNING,
                        received=_describe(flag.original))
        for flag in result.flags
    ]
    issues.extend(validate_theme(result.data))
    issues = _dedupe_warnings(issues, seen_warnings)

    if has_errors(issues):
        return None, issues
    try:
        return ThemeConfig.from_dict(result.data), issues
    except ValueError as e:
        issues.append(ValidationIssue("$", f"Theme could not be built: {e}"))
        return None, issues
