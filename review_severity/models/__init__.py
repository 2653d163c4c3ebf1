"""Data models for code review triage."""

from .issue import Severity, Category, Issue, SEVERITY_WEIGHTS, TITLE_MAX_LENGTH
from .review import ChangedFile, ReviewOutcome

__all__ = [
    "Severity",
    "Category",
    "Issue",
    "SEVERITY_WEIGHTS",
    "TITLE_MAX_LENGTH",
    "ChangedFile",
    "ReviewOutcome",
]
