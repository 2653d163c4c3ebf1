"""Review pipeline: extraction, scoring and the model-facing review flows."""

from .extract import IssueExtractor, TextIssueScanner, parse_issues, extract_issues_from_text
from .scoring import score, issue_weight, group_by_category, severity_color
from .structured_review import (
    ReviewError,
    request_review,
    analyze_response,
    review_code,
    review_code_sync,
)
from .pr_review import (
    detect_language,
    primary_language,
    build_review_snippet,
    review_pull_request,
    review_pull_request_sync,
)
from .webhook import (
    generate_webhook_secret,
    verify_github_signature,
    summarize_push_event,
    handle_pull_request_event,
    process_event,
    receive_delivery,
)

__all__ = [
    "IssueExtractor",
    "TextIssueScanner",
    "parse_issues",
    "extract_issues_from_text",
    "score",
    "issue_weight",
    "group_by_category",
    "severity_color",
    "ReviewError",
    "request_review",
    "analyze_response",
    "review_code",
    "review_code_sync",
    "detect_language",
    "primary_language",
    "build_review_snippet",
    "review_pull_request",
    "review_pull_request_sync",
    "generate_webhook_secret",
    "verify_github_signature",
    "summarize_push_event",
    "handle_pull_request_event",
    "process_event",
    "receive_delivery",
]
