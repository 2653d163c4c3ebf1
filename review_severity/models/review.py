"""Data models for completed reviews."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .issue import Issue


@dataclass
class ChangedFile:
    """One file touched by a pull request."""
    filename: str
    patch: Optional[str] = None


@dataclass
class ReviewOutcome:
    """Result of analysing one LLM review response."""
    raw_text: str
    issues: List[Issue] = field(default_factory=list)
    severity_score: int = 0

    @property
    def issues_count(self) -> int:
        return len(self.issues)

    def to_record(self) -> Dict[str, Any]:
        """Fields persisted on the parent review record."""
        return {
            "review_result": self.raw_text,
            "severity_score": self.severity_score,
            "issues_count": self.issues_count,
            "issues_data": json.dumps([issue.to_dict() for issue in self.issues]),
            "status": "completed",
        }
