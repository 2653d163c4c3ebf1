"""Data models for review issues."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


TITLE_MAX_LENGTH = 255


class Severity(Enum):
    """Issue severity levels."""
    CRITICAL = "critical"   # Security, data loss
    HIGH = "high"           # Crashes, serious bugs
    MEDIUM = "medium"       # Code quality, performance
    LOW = "low"             # Style, documentation
    INFO = "info"           # Suggestions

    @property
    def weight(self) -> int:
        """Fixed per-issue weight for this severity."""
        return SEVERITY_WEIGHTS[self]

    def at_least(self, minimum: Any) -> bool:
        """True if this severity is as urgent as `minimum` or more."""
        order = list(Severity)
        return order.index(self) <= order.index(Severity.normalize(minimum))

    @classmethod
    def normalize(cls, value: Any) -> "Severity":
        """
        Map any external severity label onto the closed set.

        Matching is a case-insensitive substring search over keyword
        families; the first family that matches wins. Missing or
        unrecognised labels become MEDIUM.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.MEDIUM

        lower = str(value).lower()
        for severity, keywords in _SEVERITY_KEYWORDS:
            if any(keyword in lower for keyword in keywords):
                return severity

        return cls.MEDIUM


class Category(Enum):
    """Issue categories, in display order."""
    SECURITY = "security"
    PERFORMANCE = "performance"
    BUG = "bug"
    STYLE = "style"
    MAINTAINABILITY = "maintainability"

    @classmethod
    def normalize(cls, value: Any) -> "Category":
        """
        Map any external category label onto the closed set.

        Unrecognised or missing labels become MAINTAINABILITY.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.MAINTAINABILITY

        lower = str(value).lower()
        for category, keywords in _CATEGORY_KEYWORDS:
            if any(keyword in lower for keyword in keywords):
                return category

        return cls.MAINTAINABILITY


SEVERITY_WEIGHTS: Dict[Severity, int] = {
    Severity.CRITICAL: 10,
    Severity.HIGH: 8,
    Severity.MEDIUM: 5,
    Severity.LOW: 3,
    Severity.INFO: 1,
}

_SEVERITY_KEYWORDS = (
    (Severity.CRITICAL, ("critical", "blocker")),
    (Severity.HIGH, ("high", "major")),
    (Severity.MEDIUM, ("medium", "moderate")),
    (Severity.LOW, ("low", "minor")),
    (Severity.INFO, ("info", "trivial", "suggestion")),
)

_CATEGORY_KEYWORDS = (
    (Category.SECURITY, ("security", "vuln")),
    (Category.PERFORMANCE, ("perform", "speed", "optim")),
    (Category.BUG, ("bug", "error", "defect")),
    (Category.STYLE, ("style", "format", "naming")),
)


def explicit_score(value: Any) -> Optional[Union[int, float]]:
    """Return value if it is a usable numeric score, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        if not math.isfinite(float(value)):
            return None
    except OverflowError:
        return None
    return value


def coerce_line_number(value: Any) -> Optional[int]:
    """Best-effort conversion of a line reference to an int."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class Issue:
    """A single normalized finding from a code review."""
    category: Category
    severity: Severity
    severity_score: Union[int, float]
    title: str
    description: str = ""
    line_number: Optional[int] = None
    suggestion: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Issue":
        """
        Build a normalized issue from a structured (JSON) record.

        Accepts `lineNumber`/`line` for `line_number` and
        `fix`/`recommendation` for `suggestion`. An explicit numeric
        `severity_score` is kept as-is; otherwise the weight table is used.

        Args:
            data: Issue-like mapping as produced by the model
            index: Zero-based position, used for the fallback title

        Returns:
            Normalized Issue
        """
        severity = Severity.normalize(data.get("severity"))
        score = explicit_score(data.get("severity_score"))

        line_number = None
        for key in ("line_number", "lineNumber", "line"):
            if data.get(key):
                line_number = coerce_line_number(data[key])
                break

        suggestion = (
            data.get("suggestion")
            or data.get("fix")
            or data.get("recommendation")
            or ""
        )

        return cls(
            category=Category.normalize(data.get("category")),
            severity=severity,
            severity_score=score if score is not None else severity.weight,
            title=str(data.get("title") or f"Issue {index + 1}")[:TITLE_MAX_LENGTH],
            description=str(data.get("description") or ""),
            line_number=line_number,
            suggestion=str(suggestion),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation used for storage."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "severity_score": self.severity_score,
            "title": self.title,
            "description": self.description,
            "line_number": self.line_number,
            "suggestion": self.suggestion,
        }
