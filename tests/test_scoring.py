"""Tests for severity scoring and grouping.

Following the testing philosophy:
- Client-perspective behavior verification
- Given-When-Then structure
- Minimal mocking (only external APIs)
"""

import pytest
from hypothesis import given, strategies as st

from review_severity.models import Category, Issue, Severity
from review_severity.pipeline.scoring import (
    group_by_category,
    issue_weight,
    score,
    severity_color,
)


def make_issue(severity: str, category: str = "bug", **overrides) -> Issue:
    data = {"severity": severity, "category": category, "title": f"{severity} {category}"}
    data.update(overrides)
    return Issue.from_dict(data)


severities = st.sampled_from([s.value for s in Severity])
issue_lists = st.lists(severities.map(make_issue), min_size=1, max_size=30)


class TestScore:
    """Tests for the overall severity score."""

    def test_mixed_severity_example(self):
        """Given weights [10, 5, 5], should blend mean and max to 8."""
        # Given
        issues = [make_issue("critical"), make_issue("medium"), make_issue("medium")]

        # When
        result = score(issues)

        # Then - 6.667 * 0.6 + 10 * 0.4 = 8.0
        assert result == 8

    def test_empty_list_scores_zero(self):
        """Given no issues, should return 0 without applying the formula."""
        assert score([]) == 0

    def test_single_info_issue_scores_one(self):
        assert score([make_issue("info")]) == 1

    def test_all_critical_scores_ten(self):
        assert score([make_issue("critical")] * 4) == 10

    def test_rounds_half_up(self):
        """Given a combined value of exactly 2.5, should round up to 3."""
        issue = make_issue("low", severity_score=2.5)

        assert score([issue]) == 3

    @pytest.mark.parametrize("explicit, expected", [(50, 10), (-4, 1), (0, 1)])
    def test_explicit_scores_are_clamped_in_aggregate(self, explicit, expected):
        """Given out-of-range explicit scores, the aggregate should clamp."""
        assert score([make_issue("medium", severity_score=explicit)]) == expected

    def test_accepts_persisted_dict_records(self):
        """Given dict records, should weigh them by score then severity then 5."""
        # Given - weights 8 and 5: 6.5 * 0.6 + 8 * 0.4 = 7.1
        records = [{"severity": "high"}, {"severity": "bogus"}]

        # Then
        assert score(records) == 7

    def test_dict_record_explicit_score_wins(self):
        records = [{"severity": "info", "severity_score": 9}]

        assert score(records) == 9


class TestIssueWeight:
    """Tests for per-issue weights."""

    def test_table_weight(self):
        assert issue_weight(make_issue("high")) == 8

    def test_unknown_record_defaults_to_five(self):
        assert issue_weight({}) == 5
        assert issue_weight(None) == 5

    def test_string_score_is_ignored(self):
        assert issue_weight({"severity": "low", "severity_score": "9"}) == 3


class TestScoreProperties:
    """Property tests for the scorer."""

    @given(issue_lists)
    def test_bounds(self, issues):
        """For any non-empty list, the score should be within [1, 10]."""
        assert 1 <= score(issues) <= 10

    @given(issue_lists)
    def test_appending_critical_never_decreases(self, issues):
        """Appending a critical issue should never lower the score."""
        before = score(issues)
        after = score(issues + [make_issue("critical")])

        assert after >= before


class TestGroupByCategory:
    """Tests for category grouping."""

    def test_all_categories_present_in_order(self):
        """Given issues in two categories, should still return all five keys."""
        # Given
        issues = [
            make_issue("high", "security"),
            make_issue("low", "style"),
            make_issue("critical", "security"),
        ]

        # When
        grouped = group_by_category(issues)

        # Then
        assert list(grouped) == list(Category)
        assert len(grouped[Category.SECURITY]) == 2
        assert len(grouped[Category.STYLE]) == 1
        assert grouped[Category.PERFORMANCE] == []
        assert grouped[Category.BUG] == []
        assert grouped[Category.MAINTAINABILITY] == []

    def test_empty_input(self):
        grouped = group_by_category([])

        assert all(v == [] for v in grouped.values())
        assert len(grouped) == 5


class TestSeverityColor:
    """Tests for UI colors."""

    @pytest.mark.parametrize("severity, color", [
        ("critical", "red"),
        ("high", "orange"),
        (Severity.MEDIUM, "yellow"),
        ("low", "blue"),
        ("info", "gray"),
        ("bogus", "gray"),
        (None, "gray"),
    ])
    def test_colors(self, severity, color):
        assert severity_color(severity) == color
