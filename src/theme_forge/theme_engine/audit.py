"""Accessibility audit.

Runs the WCAG contrast checks a theme should pass (text and UI colors
against ``surface``) plus a base font-size check, and turns the findings into
scores, reports and recommendations.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .color import round_half_up
from .colorblind import validate_color_blindness_safety
from .contrast import calculate_contrast_ratio, required_ratio
from .resolver import is_token_reference, resolve_theme
from .schema import ThemeConfig, Severity, WCAGLevel

logger = logging.getLogger(__name__)

MIN_BASE_FONT_SIZE = 14

AA_TEXT_CRITERION = "1.4.3 Contrast (Minimum)"
AAA_TEXT_CRITERION = "1.4.6 Contrast (Enhanced)"
NON_TEXT_CRITERION = "1.4.11 Non-text Contrast"


@dataclass(frozen=True)
class _Check:
    role: str
    kind: str  # "text" or "ui"
    severity: Severity
    aaa_severity: Severity
    label: str
    recommendation: str
    optional: bool = False


CONTRAST_CHECKS = (
    _Check('text', 'text', Severity.ERROR, Severity.ERROR, "Text",
           "Increase contrast between text and surface"),
    _Check('textSecondary', 'text', Severity.WARNING, Severity.ERROR, "Secondary text",
           "Darken secondary text color or lighten surface"),
    _Check('textMuted', 'text', Severity.WARNING, Severity.WARNING, "Muted text",
           "Consider darkening muted text for better accessibility"),
    _Check('primary', 'ui', Severity.ERROR, Severity.ERROR, "Primary color",
           "Adjust primary color lightness to meet minimum UI contrast"),
    _Check('border', 'ui', Severity.WARNING, Severity.WARNING, "Border",
           "Increase border visibility for better UI element definition"),
    _Check('success', 'ui', Severity.WARNING, Severity.WARNING, "Success color",
           "Ensure success indicators are clearly visible", optional=True),
    _Check('error', 'ui', Severity.ERROR, Severity.ERROR, "Error color",
           "Error indicators must be clearly visible", optional=True),
    _Check('warning', 'ui', Severity.WARNING, Severity.WARNING, "Warning color",
           "Warning indicators should be clearly visible", optional=True),
)


@dataclass
class AuditIssue:
    """A single accessibility finding."""
    category: str
    severity: Severity
    message: str
    field: str
    current_value: Any = None
    recommendation: Optional[str] = None
    wcag_criterion: Optional[str] = None


@dataclass
class AuditResult:
    """Outcome of an accessibility audit."""
    level: WCAGLevel
    issues: List[AuditIssue] = field(default_factory=list)
    total_checks: int = 0
    passed_checks: int = 0

    @property
    def errors(self) -> List[AuditIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[AuditIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def pass_rate(self) -> int:
        if not self.total_checks:
            return 100
        return round_half_up(self.passed_checks / self.total_checks * 100)

    @property
    def summary(self) -> Dict[str, int]:
        return {
            'total_checks': self.total_checks,
            'passed_checks': self.passed_checks,
            'failed_checks': self.total_checks - self.passed_checks,
            'errors': len(self.errors),
            'warnings': len(self.warnings),
        }


ThemeLike = Union[ThemeConfig, Dict[str, Any]]


def _resolved_colors(theme: ThemeLike) -> Dict[str, Any]:
    return resolve_theme(theme).resolved.get('colors', {})


def audit_theme_accessibility(theme: ThemeLike, level: str = 'AA') -> AuditResult:
    """Audit a theme against WCAG contrast and readability checks.

    Args:
        theme: Theme to audit
        level: 'AA' or 'AAA'

    Returns:
        AuditResult with issues, pass rate and summary
    """
    level = WCAGLevel(level)
    record = theme.to_dict() if isinstance(theme, ThemeConfig) else theme
    colors = _resolved_colors(record)
    surface = colors.get('surface')
    result = AuditResult(level=level)

    for check in CONTRAST_CHECKS:
        value = colors.get(check.role)
        if value is None and check.optional:
            continue
        result.total_checks += 1

        unresolved = any(v is None or is_token_reference(v) for v in (value, surface))
        if unresolved:
            result.issues.append(AuditIssue(
                category="structure",
                severity=Severity.ERROR,
                message=f"{check.label} could not be resolved to a color",
                field=f"colors.{check.role}",
                current_value=value,
                recommendation="Fix the token reference so it points at a color",
            ))
            continue

        ratio = calculate_contrast_ratio(value, surface)
        target = required_ratio(level, large_text=check.kind == 'ui')
        if ratio >= target:
            result.passed_checks += 1
            continue

        if check.kind == 'text':
            criterion = AAA_TEXT_CRITERION if level == WCAGLevel.AAA else AA_TEXT_CRITERION
        else:
            criterion = NON_TEXT_CRITERION
        severity = check.aaa_severity if level == WCAGLevel.AAA else check.severity
        result.issues.append(AuditIssue(
            category="contrast",
            severity=severity,
            message=f"{check.label} contrast is {ratio:.2f}:1 (need {target:g}:1)",
            field=f"colors.{check.role} / colors.surface",
            current_value=round(ratio, 2),
            recommendation=f"{check.recommendation} (at least {target:g}:1)",
            wcag_criterion=criterion,
        ))

    base_size = (record.get('typography') or {}).get('baseSize', 16)
    result.total_checks += 1
    if isinstance(base_size, (int, float)) and base_size < MIN_BASE_FONT_SIZE:
        result.issues.append(AuditIssue(
            category="structure",
            severity=Severity.WARNING,
            message=f"Base font size is {base_size}px (recommended: 14-16px)",
            field="typography.baseSize",
            current_value=base_size,
            recommendation="Increase base font size for better readability",
            wcag_criterion="1.4.12 Text Spacing",
        ))
    else:
        result.passed_checks += 1

    logger.debug(
        f"Audit {level.value}: {result.passed_checks}/{result.total_checks} checks passed"
    )
    return result


def get_accessibility_score(theme: ThemeLike) -> int:
    """AA pass rate plus up to 20 bonus points for AAA, capped at 100."""
    aa = audit_theme_accessibility(theme, 'AA')
    aaa = audit_theme_accessibility(theme, 'AAA')
    score = min(100, aa.pass_rate + (aaa.pass_rate / 100) * 20)
    return round_half_up(score)


def is_accessible(colors: Dict[str, str]) -> bool:
    """Quick check: text >= 4.5:1 and primary >= 3:1 on surface."""
    surface = colors['surface']
    return (calculate_contrast_ratio(colors['text'], surface) >= 4.5
            and calculate_contrast_ratio(colors['primary'], surface) >= 3.0)


def get_accessibility_recommendations(theme: ThemeLike, level: str = 'AA') -> List[str]:
    """Actionable recommendation lines, most severe first."""
    audit = audit_theme_accessibility(theme, level)
    recommendations: List[str] = []

    if audit.errors:
        recommendations.append(f"Fix {len(audit.errors)} critical accessibility errors")
        for issue in audit.errors[:3]:
            if issue.recommendation:
                recommendations.append(f"  - {issue.recommendation}")
    elif audit.warnings:
        recommendations.append(
            f"Address {len(audit.warnings)} accessibility warnings for enhanced compliance"
        )

    if audit.passed and WCAGLevel(level) == WCAGLevel.AA:
        if not audit_theme_accessibility(theme, 'AAA').passed:
            recommendations.append("Consider improving to WCAG AAA standards for enhanced accessibility")

    return recommendations


def generate_accessibility_report(theme: ThemeLike) -> Dict[str, Any]:
    """Full report: score, grouped checks and color-blindness findings."""
    record = theme.to_dict() if isinstance(theme, ThemeConfig) else theme
    audit = audit_theme_accessibility(record, 'AA')
    score = get_accessibility_score(record)

    def section(predicate) -> List[Dict[str, Any]]:
        return [
            {
                'field': issue.field,
                'status': 'fail' if issue.severity == Severity.ERROR else 'warning',
                'message': issue.message,
                'recommendation': issue.recommendation,
            }
            for issue in audit.issues if predicate(issue)
        ]

    colors = {k: v for k, v in _resolved_colors(record).items() if not is_token_reference(v)}
    color_blindness = [issue.message for issue in validate_color_blindness_safety(colors)]

    if audit.passed:
        headline = f"Theme meets WCAG AA standards (score: {score}/100)"
    else:
        headline = f"Theme has {len(audit.errors)} critical accessibility issues"

    return {
        'theme': record.get('meta', {}).get('name'),
        'score': score,
        'level': audit.level.value,
        'passed': audit.passed,
        'pass_rate': audit.pass_rate,
        'summary': headline,
        'checks': audit.summary,
        'text_contrast': section(lambda i: i.category == 'contrast' and 'text' in i.field),
        'ui_contrast': section(lambda i: i.category == 'contrast' and 'text' not in i.field),
        'structure': section(lambda i: i.category == 'structure'),
        'color_blindness': color_blindness,
        'recommendations': get_accessibility_recommendations(record),
    }


def batch_audit(themes: List[ThemeConfig], level: str = 'AA') -> List[Dict[str, Any]]:
    return [
        {'theme': theme.meta.name, 'result': audit_theme_accessibility(theme, level)}
        for theme in themes
    ]


def compare_accessibility(themes: List[ThemeConfig]) -> Dict[str, Any]:
    """Score several themes and name the best and worst.

    Raises:
        ValueError: No themes given
    """
    if not themes:
        raise ValueError("Must provide at least one theme to compare")

    scores = [(theme.meta.name, get_accessibility_score(theme)) for theme in themes]
    values = [score for _, score in scores]
    return {
        'themes': [name for name, _ in scores],
        'scores': values,
        'best': max(scores, key=lambda item: item[1])[0],
        'worst': min(scores, key=lambda item: item[1])[0],
        'average': round_half_up(sum(values) / len(values)),
    }
