"""GitHub API wrapper for pull request reviews."""

import os
from typing import Dict, List, Optional

from github import Github, GithubException
from github.PullRequest import PullRequest

from ..models import ChangedFile, Issue, ReviewOutcome, Severity
from ..utils import get_logger


def format_review_summary(outcome: ReviewOutcome, min_severity: str = "info") -> str:
    """
    Format a review outcome as a markdown PR comment.

    Issues are grouped by severity, most urgent first. Issues below
    `min_severity` are counted but not listed.

    Args:
        outcome: Parsed and scored review
        min_severity: Least urgent severity to list

    Returns:
        Markdown comment body
    """
    body_parts = ["## AI Code Review Summary\n"]

    if not outcome.issues:
        body_parts.append("No significant issues found. The code looks good.\n")
    else:
        body_parts.append(
            f"Found **{outcome.issues_count}** issues. "
            f"Severity score: **{outcome.severity_score}/10**\n"
        )

        by_severity: Dict[Severity, List[Issue]] = {}
        for issue in outcome.issues:
            by_severity.setdefault(issue.severity, []).append(issue)

        for severity in Severity:
            if severity not in by_severity or not severity.at_least(min_severity):
                continue
            issues = by_severity[severity]
            body_parts.append(f"\n### {severity.value.upper()} ({len(issues)})\n")
            for issue in issues:
                location = f" (line {issue.line_number})" if issue.line_number else ""
                body_parts.append(f"- **[{issue.category.value}]** {issue.title}{location}")
                if issue.suggestion:
                    body_parts.append(f"  - Suggestion: {issue.suggestion[:200]}")

        hidden = [i for i in outcome.issues if not i.severity.at_least(min_severity)]
        if hidden:
            body_parts.append(f"\n_{len(hidden)} issues below {min_severity} not shown._")

    body_parts.append("\n\n---\n*Reviewed by AI Code Review*")

    return "\n".join(body_parts)


class GitHubTool:
    """
    GitHub API wrapper for PR review operations.

    Handles:
    - Fetching changed files and their patches
    - Posting the review summary comment
    """

    def __init__(self, repo: str, pr_number: int, token: Optional[str] = None):
        """
        Initialize GitHub tool.

        Args:
            repo: Repository in format "owner/repo"
            pr_number: Pull request number
            token: GitHub token (defaults to GITHUB_TOKEN env var)
        """
        self.token = token or os.environ.get("GITHUB_TOKEN")
        if not self.token:
            raise ValueError("GitHub token required. Set GITHUB_TOKEN env var or pass token parameter.")

        self.gh = Github(self.token)
        self.repo = self.gh.get_repo(repo)
        self.pr_number = pr_number
        self.logger = get_logger()
        self._pr: Optional[PullRequest] = None

    @property
    def pr(self) -> PullRequest:
        """Get the pull request object (cached)."""
        if self._pr is None:
            self._pr = self.repo.get_pull(self.pr_number)
        return self._pr

    def get_changed_files(self) -> List[ChangedFile]:
        """Get files changed in this PR, with their patches."""
        return [
            ChangedFile(filename=f.filename, patch=f.patch)
            for f in self.pr.get_files()
        ]

    def post_review_summary(self, outcome: ReviewOutcome, min_severity: str = "info") -> bool:
        """
        Post the review summary as a PR comment.

        Returns:
            True if the comment was posted
        """
        try:
            self.pr.create_issue_comment(format_review_summary(outcome, min_severity))
            return True
        except GithubException as e:
            self.logger.warning(f"Failed to post review summary on PR #{self.pr_number}: {e}")
            return False
