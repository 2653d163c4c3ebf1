"""Metrics calculation utilities for review triage."""

from dataclasses import dataclass, field
from typing import Dict, List

from ..models import Category, ReviewOutcome, Severity


@dataclass
class ReviewMetrics:
    """Aggregate statistics over a batch of reviews."""

    # Basic counts
    total_reviews: int = 0
    scored_reviews: int = 0
    total_issues: int = 0

    # Severity score stats (over reviews with at least one issue)
    avg_severity: float = 0.0
    max_severity: int = 0

    # Breakdowns, keyed by enum value in display order
    severity_counts: Dict[str, int] = field(
        default_factory=lambda: {s.value: 0 for s in Severity}
    )
    category_counts: Dict[str, int] = field(
        default_factory=lambda: {c.value: 0 for c in Category}
    )

    @property
    def issues_per_review(self) -> float:
        if self.total_reviews == 0:
            return 0.0
        return self.total_issues / self.total_reviews


def calculate_metrics(outcomes: List[ReviewOutcome]) -> ReviewMetrics:
    """
    Calculate metrics from a batch of review outcomes.

    Reviews with no issues (score 0) count toward totals but not toward
    the severity average.

    Args:
        outcomes: Completed review outcomes

    Returns:
        ReviewMetrics with calculated statistics
    """
    metrics = ReviewMetrics(total_reviews=len(outcomes))

    scores = [o.severity_score for o in outcomes if o.severity_score > 0]
    metrics.scored_reviews = len(scores)
    if scores:
        metrics.avg_severity = sum(scores) / len(scores)
        metrics.max_severity = max(scores)

    for outcome in outcomes:
        metrics.total_issues += outcome.issues_count
        for issue in outcome.issues:
            metrics.severity_counts[issue.severity.value] += 1
            metrics.category_counts[issue.category.value] += 1

    return metrics


def format_metrics_report(metrics: ReviewMetrics) -> str:
    """
    Format metrics as a human-readable report.

    Args:
        metrics: ReviewMetrics object

    Returns:
        Formatted report string
    """
    lines = [
        "## Review Metrics",
        "",
        "### Summary",
        f"- Reviews: {metrics.total_reviews}",
        f"- Reviews with issues: {metrics.scored_reviews}",
        f"- Total issues: {metrics.total_issues}",
        f"- Issues per review: {metrics.issues_per_review:.1f}",
        "",
        "### Severity Score",
        f"- Average: {metrics.avg_severity:.1f}",
        f"- Highest: {metrics.max_severity}",
        "",
        "### Issues by Severity",
    ]
    for name, count in metrics.severity_counts.items():
        lines.append(f"- {name.capitalize()}: {count}")

    lines.append("")
    lines.append("### Issues by Category")
    for name, count in metrics.category_counts.items():
        lines.append(f"- {name.capitalize()}: {count}")

    return "\n".join(lines)
