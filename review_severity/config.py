"""Configuration for review triage."""

from dataclasses import dataclass
from typing import Optional
import os


DEFAULT_MODEL = "claude-3-5-haiku-latest"


@dataclass
class ReviewConfig:
    """Configuration for structured reviews."""

    # GitHub settings
    repo: str = ""
    pr_number: int = 0
    github_token: Optional[str] = None

    # Model settings
    model: str = DEFAULT_MODEL
    max_turns: int = 1

    # Review behavior
    auto_review: bool = True     # Review pull_request webhook events
    post_summary: bool = False   # Post summary comment on the PR
    min_severity: str = "info"   # critical, high, medium, low, info

    # Webhook settings
    webhook_secret: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ReviewConfig":
        """Create config from environment variables."""
        return cls(
            repo=os.environ.get("GITHUB_REPOSITORY", ""),
            pr_number=int(os.environ.get("PR_NUMBER", "0")),
            github_token=os.environ.get("GITHUB_TOKEN"),
            model=os.environ.get("REVIEW_MODEL", DEFAULT_MODEL),
            auto_review=os.environ.get("AUTO_REVIEW", "true").lower() == "true",
            post_summary=os.environ.get("POST_SUMMARY", "false").lower() == "true",
            min_severity=os.environ.get("MIN_SEVERITY", "info"),
            webhook_secret=os.environ.get("WEBHOOK_SECRET"),
        )


# Default configuration
DEFAULT_CONFIG = ReviewConfig()
