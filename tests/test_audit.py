"""Tests for the accessibility audit."""

import pytest

from theme_forge.theme_engine.audit import (
    audit_theme_accessibility,
    batch_audit,
    compare_accessibility,
    generate_accessibility_report,
    get_accessibility_recommendations,
    get_accessibility_score,
    is_accessible,
)
from theme_forge.theme_engine.schema import Severity, ThemeConfig, WCAGLevel


class TestAudit:
    """Test the WCAG audit checks."""

    def test_fixture_passes_aa(self, theme_data):
        """Test the fixture passes every AA check."""
        result = audit_theme_accessibility(theme_data, 'AA')
        assert result.passed
        assert result.issues == []
        assert result.total_checks == 9
        assert result.pass_rate == 100

    def test_theme_config_input(self, theme):
        assert audit_theme_accessibility(theme).passed

    def test_low_contrast_text_is_error(self, theme_data):
        theme_data['colors']['text'] = '#cccccc'
        result = audit_theme_accessibility(theme_data)
        assert not result.passed
        issue = result.errors[0]
        assert issue.field == 'colors.text / colors.surface'
        assert issue.category == 'contrast'
        assert issue.wcag_criterion == '1.4.3 Contrast (Minimum)'

    def test_muted_text_is_warning(self, theme_data):
        """Test weak muted text only warns."""
        theme_data['colors']['textMuted'] = '#aaaaaa'
        result = audit_theme_accessibility(theme_data)
        assert result.passed
        assert [i.field for i in result.warnings] == ['colors.textMuted / colors.surface']

    def test_aaa_is_stricter(self, theme_data):
        """Test AAA reports what AA accepts."""
        result = audit_theme_accessibility(theme_data, 'AAA')
        assert WCAGLevel(result.level) == WCAGLevel.AAA
        assert result.issues
        assert result.pass_rate < 100

    def test_small_base_size_warns(self, theme_data):
        theme_data['typography']['baseSize'] = 12
        result = audit_theme_accessibility(theme_data)
        warning = result.warnings[0]
        assert warning.field == 'typography.baseSize'
        assert warning.category == 'structure'
        assert result.passed

    def test_optional_roles_skipped(self, theme_data):
        """Test missing status colors are not counted."""
        for role in ('success', 'error', 'warning'):
            del theme_data['colors'][role]
        assert audit_theme_accessibility(theme_data).total_checks == 6

    def test_unresolved_reference_is_error(self, theme_data):
        theme_data['colors']['text'] = 'colors.missing'
        result = audit_theme_accessibility(theme_data)
        assert result.errors[0].category == 'structure'

    def test_references_are_followed(self, theme_data):
        """Test a referencing role is audited by its target color."""
        theme_data['colors']['text'] = 'colors.surface'
        result = audit_theme_accessibility(theme_data)
        assert not result.passed

    def test_invalid_level(self, theme_data):
        with pytest.raises(ValueError):
            audit_theme_accessibility(theme_data, 'AAAA')

    def test_summary(self, theme_data):
        theme_data['colors']['text'] = '#cccccc'
        summary = audit_theme_accessibility(theme_data).summary
        assert summary['errors'] == 1
        assert summary['failed_checks'] == 1
        assert summary['total_checks'] == 9


class TestScoresAndReports:
    """Test scores, reports and comparisons."""

    def test_score(self, theme_data):
        assert get_accessibility_score(theme_data) == 100

    def test_score_drops_with_errors(self, theme_data):
        theme_data['colors']['text'] = '#cccccc'
        theme_data['colors']['primary'] = '#dbeafe'
        assert get_accessibility_score(theme_data) < 100

    def test_is_accessible(self):
        assert is_accessible({'surface': '#ffffff', 'text': '#000000', 'primary': '#2563eb'})
        assert not is_accessible({'surface': '#ffffff', 'text': '#eeeeee', 'primary': '#2563eb'})

    def test_recommendations(self, theme_data):
        """Test a passing AA theme is nudged towards AAA."""
        theme_data['colors']['textSecondary'] = '#64748b'
        recommendations = get_accessibility_recommendations(theme_data)
        assert any('AAA' in line for line in recommendations)

    def test_recommendations_for_errors(self, theme_data):
        theme_data['colors']['text'] = '#cccccc'
        recommendations = get_accessibility_recommendations(theme_data)
        assert recommendations[0] == "Fix 1 critical accessibility errors"

    def test_report(self, theme_data):
        report = generate_accessibility_report(theme_data)
        assert report['theme'] == 'Test Theme'
        assert report['passed']
        assert report['level'] == 'AA'
        assert report['score'] == 100
        assert isinstance(report['color_blindness'], list)

    def test_report_groups_issues(self, theme_data):
        theme_data['colors']['text'] = '#cccccc'
        theme_data['colors']['primary'] = '#dbeafe'
        report = generate_accessibility_report(theme_data)
        assert [item['field'] for item in report['text_contrast']] == ['colors.text / colors.surface']
        assert [item['field'] for item in report['ui_contrast']] == ['colors.primary / colors.surface']

    def test_batch_and_compare(self, theme_data):
        good = ThemeConfig.from_dict(theme_data)
        theme_data['meta']['name'] = 'Weak'
        theme_data['colors']['text'] = '#cccccc'
        weak = ThemeConfig.from_dict(theme_data)

        results = batch_audit([good, weak])
        assert [r['result'].passed for r in results] == [True, False]

        comparison = compare_accessibility([good, weak])
        assert comparison['best'] == 'Test Theme'
        assert comparison['worst'] == 'Weak'

    def test_compare_requires_themes(self):
        with pytest.raises(ValueError):
            compare_accessibility([])

    def test_issue_severity_values(self, theme_data):
        theme_data['colors']['text'] = '#cccccc'
        issue = audit_theme_accessibility(theme_data).errors[0]
        assert Severity(issue.severity) == Severity.ERROR
