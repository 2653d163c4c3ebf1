"""Pull request review - review every patch in a PR as one snippet."""

import asyncio
from typing import List, Optional

from ..config import ReviewConfig
from ..models import ChangedFile, ReviewOutcome
from ..tools import GitHubTool
from ..utils import get_logger
from .structured_review import review_code


DEFAULT_LANGUAGE = "javascript"

EXTENSION_LANGUAGES = {
    "js": "javascript", "jsx": "javascript",
    "ts": "typescript", "tsx": "typescript",
    "py": "python",
    "java": "java",
    "go": "go",
    "rs": "rust",
    "rb": "ruby",
    "php": "php",
    "cpp": "c++",
    "c": "c",
    "cs": "c#",
    "swift": "swift",
    "kt": "kotlin",
    "sql": "sql",
}


def detect_language(filename: str) -> str:
    """Language for a filename; unknown extensions are returned as-is."""
    extension = filename.rsplit(".", 1)[-1]
    return EXTENSION_LANGUAGES.get(extension, extension)


def primary_language(files: List[ChangedFile]) -> str:
    """Language of the first changed file."""
    if not files:
        return DEFAULT_LANGUAGE
    return detect_language(files[0].filename) or DEFAULT_LANGUAGE


def build_review_snippet(files: List[ChangedFile]) -> str:
    """Concatenate file patches into one reviewable snippet."""
    return "\n\n".join(
        f"// File: {f.filename}\n{f.patch}"
        for f in files
        if f.patch
    )


async def review_pull_request(
    config: ReviewConfig,
    github: Optional[GitHubTool] = None
) -> ReviewOutcome:
    """
    Review a pull request and optionally post the summary.

    Args:
        config: Review configuration (repo, pr_number, token, model)
        github: Pre-built GitHub tool (created from config when omitted)

    Returns:
        ReviewOutcome for the PR's combined patches
    """
    logger = get_logger()

    if github is None:
        github = GitHubTool(
            repo=config.repo,
            pr_number=config.pr_number,
            token=config.github_token
        )

    logger.info(f"Fetching changed files for {config.repo} PR #{config.pr_number}...")
    files = github.get_changed_files()
    snippet = build_review_snippet(files)

    if not snippet.strip():
        logger.info("No patches to review in PR")
        return ReviewOutcome(raw_text="")

    language = primary_language(files)
    logger.info(f"Reviewing {len(files)} changed files as {language}...")
    outcome = await review_code(snippet, language, config)

    if config.post_summary:
        logger.info("Posting review summary...")
        github.post_review_summary(outcome, config.min_severity)

    return outcome


# Synchronous wrapper for non-async contexts
def review_pull_request_sync(
    config: ReviewConfig,
    github: Optional[GitHubTool] = None
) -> ReviewOutcome:
    """Synchronous wrapper for review_pull_request."""
    return asyncio.run(review_pull_request(config, github))
