"""Issue extraction - turn raw LLM review text into normalized issues."""

import json
import re
from enum import Enum
from typing import Any, List, Optional

from ..models import Category, Issue, Severity, TITLE_MAX_LENGTH
from ..utils import get_logger


FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)\s*```")
LIST_ITEM_RE = re.compile(r"^(?:\d+\.|\*|-)\s*(.+)", re.ASCII)
SEVERITY_MARKER_RES = (
    re.compile(r"\*\*(critical|high|medium|low|info)\*\*", re.IGNORECASE | re.ASCII),
    re.compile(r"\[(critical|high|medium|low|info)\]", re.IGNORECASE | re.ASCII),
)
LINE_NUMBER_RES = (
    re.compile(r"line\s*(\d+)", re.IGNORECASE | re.ASCII),
    re.compile(r"L(\d+)", re.ASCII),
)
SUGGESTION_WORDS = ("suggestion", "fix", "recommend")

# Heuristic keyword lists, checked in order; first match wins.
SEVERITY_GUESSES = (
    (Severity.CRITICAL, ("security", "injection", "xss", "vulnerability", "password", "auth")),
    (Severity.HIGH, ("crash", "memory leak", "null pointer", "unhandled", "race condition")),
    (Severity.MEDIUM, ("performance", "inefficient", "deprecated")),
    (Severity.LOW, ("naming", "style", "formatting", "comment", "documentation")),
)
CATEGORY_GUESSES = (
    (Category.SECURITY, ("security", "injection", "xss", "csrf", "auth", "password")),
    (Category.PERFORMANCE, ("performance", "slow", "optimize", "memory", "complexity")),
    (Category.BUG, ("bug", "error", "null", "undefined", "crash")),
    (Category.STYLE, ("naming", "style", "format", "indent", "spacing")),
)


def guess_severity(text: str) -> Severity:
    """Guess severity from free text. Defaults to MEDIUM."""
    lower = text.lower()
    for severity, keywords in SEVERITY_GUESSES:
        if any(keyword in lower for keyword in keywords):
            return severity
    return Severity.MEDIUM


def guess_category(text: str) -> Category:
    """Guess category from free text. Defaults to MAINTAINABILITY."""
    lower = text.lower()
    for category, keywords in CATEGORY_GUESSES:
        if any(keyword in lower for keyword in keywords):
            return category
    return Category.MAINTAINABILITY


def extract_line_number(text: str) -> Optional[int]:
    """Find a `line 42` or `L42` reference in text."""
    for pattern in LINE_NUMBER_RES:
        match = pattern.search(text)
        if match:
            try:
                return int(match.group(1))
            except ValueError:
                # Digit run longer than int() accepts
                return None
    return None


def find_severity_marker(line: str) -> Optional[Severity]:
    """Return the severity named by a `**high**` or `[high]` marker, if any."""
    for pattern in SEVERITY_MARKER_RES:
        match = pattern.search(line)
        if match:
            return Severity(match.group(1).lower())
    return None


def normalize_issues(parsed: Any) -> List[Issue]:
    """
    Normalize a decoded JSON value into issues.

    Accepts either a list of issue objects or an object carrying an
    `issues` list. Any other shape yields no issues. Entries that are not
    objects still count as issues, built entirely from defaults.
    """
    if isinstance(parsed, dict) and isinstance(parsed.get("issues"), list):
        parsed = parsed["issues"]
    if not isinstance(parsed, list):
        return []

    return [
        Issue.from_dict(item if isinstance(item, dict) else {}, index)
        for index, item in enumerate(parsed)
    ]


class ScanState(Enum):
    """States of the text scanner."""
    IDLE = "idle"                   # No issue open yet
    ACCUMULATING = "accumulating"   # Collecting lines for the open issue


class _IssueDraft:
    """Mutable accumulator for one issue while the scanner reads lines."""

    def __init__(self, line: str, title: str):
        self.title = title[:TITLE_MAX_LENGTH]
        self.severity = find_severity_marker(line) or guess_severity(title)
        self.category = guess_category(title)
        self.line_number = extract_line_number(title)
        self.description: List[str] = []
        self.suggestion: List[str] = []

    def add(self, fragment: str):
        lower = fragment.lower()
        if any(word in lower for word in SUGGESTION_WORDS):
            self.suggestion.append(fragment)
        else:
            self.description.append(fragment)

    def build(self) -> Issue:
        return Issue(
            category=self.category,
            severity=self.severity,
            severity_score=self.severity.weight,
            title=self.title,
            description=" ".join(self.description),
            line_number=self.line_number,
            suggestion=" ".join(self.suggestion),
        )


class TextIssueScanner:
    """
    Line-driven state machine for prose review output.

    A list-item line (`1.`, `*` or `-`) opens a new issue and closes the
    previous one. Other non-blank lines are continuation lines; they are
    attached to the open issue, or ignored while IDLE.
    """

    def __init__(self):
        self.state = ScanState.IDLE
        self._draft: Optional[_IssueDraft] = None
        self._issues: List[Issue] = []

    def feed(self, line: str):
        """Consume one line of input."""
        trimmed = line.strip()
        match = LIST_ITEM_RE.match(trimmed)

        if match:
            self._close()
            self._draft = _IssueDraft(trimmed, match.group(1))
            self.state = ScanState.ACCUMULATING
        elif self.state is ScanState.ACCUMULATING and trimmed:
            self._draft.add(trimmed)

    def finish(self) -> List[Issue]:
        """Close any open issue and return everything collected."""
        self._close()
        return list(self._issues)

    def _close(self):
        if self._draft is not None:
            self._issues.append(self._draft.build())
            self._draft = None
        self.state = ScanState.IDLE


def extract_issues_from_text(text: str) -> List[Issue]:
    """Heuristic extraction from numbered or bulleted prose."""
    scanner = TextIssueScanner()
    for line in text.split("\n"):
        scanner.feed(line)
    return scanner.finish()


class IssueExtractor:
    """
    Parses LLM review responses into normalized issues.

    Strategy, in order:
    1. A ```json fenced block in the response
    2. The whole response as JSON
    3. Numbered/bulleted prose

    Never raises. Invalid JSON falls through to the prose scanner.
    """

    def __init__(self):
        self.logger = get_logger()

    def parse(self, raw_text: Optional[str]) -> List[Issue]:
        """
        Extract issues from raw review text.

        Args:
            raw_text: Complete text response from the model

        Returns:
            List of normalized Issue objects (possibly empty)
        """
        if not raw_text:
            return []

        fenced = FENCED_JSON_RE.search(raw_text)
        candidate = fenced.group(1) if fenced else raw_text

        try:
            parsed = json.loads(candidate)
        except (ValueError, RecursionError):
            self.logger.debug("Review text is not JSON, falling back to text extraction")
            return extract_issues_from_text(raw_text)

        return normalize_issues(parsed)


_default_extractor = IssueExtractor()


def parse_issues(raw_text: Optional[str]) -> List[Issue]:
    """Parse raw review text with the shared extractor."""
    return _default_extractor.parse(raw_text)
