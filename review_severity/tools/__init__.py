"""Tools for review triage."""

from .github_tool import GitHubTool, format_review_summary

__all__ = [
    "GitHubTool",
    "format_review_summary",
]
