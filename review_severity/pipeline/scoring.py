"""Severity scoring - reduce an issue list to one urgency score."""

import math
from typing import Any, Dict, List, Mapping, Sequence, Union

from ..models import Category, Issue, Severity, SEVERITY_WEIGHTS
from ..models.issue import explicit_score


DEFAULT_WEIGHT = 5
AVERAGE_SHARE = 0.6
MAX_SHARE = 0.4
MIN_SCORE = 1
MAX_SCORE = 10

SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "orange",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
    Severity.INFO: "gray",
}

IssueLike = Union[Issue, Mapping[str, Any]]


def issue_weight(issue: IssueLike) -> Union[int, float]:
    """
    Weight of a single issue.

    Uses the issue's numeric severity_score when present, then the weight
    table entry for its severity, then DEFAULT_WEIGHT. Accepts Issue objects
    as well as persisted dict records.
    """
    if isinstance(issue, Issue):
        score, severity = issue.severity_score, issue.severity
    elif isinstance(issue, Mapping):
        score, severity = issue.get("severity_score"), issue.get("severity")
    else:
        return DEFAULT_WEIGHT

    score = explicit_score(score)
    if score is not None:
        return score

    if not isinstance(severity, Severity):
        try:
            severity = Severity(severity)
        except ValueError:
            return DEFAULT_WEIGHT
    return SEVERITY_WEIGHTS[severity]


def score(issues: Sequence[IssueLike]) -> int:
    """
    Overall severity score for one review.

    Blends mean and max weight (60/40), rounds half-up and clamps into
    [1, 10]. An empty list scores 0.

    Args:
        issues: Normalized issues (or their dict records)

    Returns:
        Integer score in [0, 10]
    """
    if not issues:
        return 0

    weights = [issue_weight(issue) for issue in issues]
    average = sum(weights) / len(weights)
    combined = average * AVERAGE_SHARE + max(weights) * MAX_SHARE

    clamped = min(MAX_SCORE, max(MIN_SCORE, combined))
    return int(math.floor(clamped + 0.5))


def group_by_category(issues: Sequence[Issue]) -> Dict[Category, List[Issue]]:
    """Bucket issues by category; every category is present, in display order."""
    grouped: Dict[Category, List[Issue]] = {category: [] for category in Category}
    for issue in issues:
        grouped[Category.normalize(issue.category)].append(issue)
    return grouped


def severity_color(severity: Any) -> str:
    """UI color name for a severity label; unknown labels are gray."""
    if not isinstance(severity, Severity):
        try:
            severity = Severity(severity)
        except ValueError:
            return "gray"
    return SEVERITY_COLORS[severity]
