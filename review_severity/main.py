#!/usr/bin/env python3
"""
Review Severity - Main Entry Point

Parses AI code review output into normalized issues and scores how urgent
the review is.

Usage:
    python -m review_severity.main score response.md
    python -m review_severity.main review --file app.py --language python
    python -m review_severity.main pr --repo owner/repo --pr-number 123
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .config import ReviewConfig
from .models import ReviewOutcome
from .pipeline import analyze_response, group_by_category, review_code, review_pull_request
from .pipeline.pr_review import detect_language
from .utils import setup_logging, get_logger


def format_outcome(outcome: ReviewOutcome) -> str:
    """Human-readable listing of an outcome, grouped by category."""
    lines = [
        f"Severity score: {outcome.severity_score}/10",
        f"Issues: {outcome.issues_count}",
    ]

    for category, issues in group_by_category(outcome.issues).items():
        if not issues:
            continue
        lines.append("")
        lines.append(f"[{category.value}]")
        for issue in issues:
            location = f" (line {issue.line_number})" if issue.line_number else ""
            lines.append(f"  {issue.severity.value.upper():<8} {issue.title}{location}")
            if issue.suggestion:
                lines.append(f"           -> {issue.suggestion}")

    return "\n".join(lines)


def print_outcome(outcome: ReviewOutcome, as_json: bool):
    if as_json:
        print(json.dumps({
            "severity_score": outcome.severity_score,
            "issues_count": outcome.issues_count,
            "issues": [issue.to_dict() for issue in outcome.issues],
        }, indent=2))
    else:
        print(format_outcome(outcome))


def cmd_score(args):
    """Handle 'score' subcommand."""
    setup_logging(level=logging.DEBUG if args.debug else logging.WARNING)
    logger = get_logger()

    try:
        if args.input == "-":
            raw_text = sys.stdin.read()
        else:
            raw_text = Path(args.input).read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        logger.exception(f"Could not read {args.input}: {e}")
        sys.exit(1)

    print_outcome(analyze_response(raw_text), args.json)
    sys.exit(0)


def cmd_review(args):
    """Handle 'review' subcommand."""
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO)
    logger = get_logger()

    config = ReviewConfig.from_env()
    if args.model:
        config.model = args.model

    path = Path(args.file)
    language = args.language or detect_language(path.name)

    try:
        code = path.read_text(encoding="utf-8")
        outcome = asyncio.run(review_code(code, language, config))
    except Exception as e:
        logger.exception(f"Review failed: {e}")
        sys.exit(1)

    print_outcome(outcome, args.json)
    sys.exit(0)


def cmd_pr(args):
    """Handle 'pr' subcommand."""
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO)
    logger = get_logger()

    # Build config
    config = ReviewConfig.from_env()

    if args.repo:
        config.repo = args.repo
    if args.pr_number:
        config.pr_number = args.pr_number
    if args.model:
        config.model = args.model

    config.post_summary = args.post_summary or config.post_summary
    config.min_severity = args.min_severity

    # Validate
    if not config.repo:
        logger.error("Repository required. Use --repo or set GITHUB_REPOSITORY env var")
        sys.exit(1)
    if not config.pr_number:
        logger.error("PR number required. Use --pr-number or set PR_NUMBER env var")
        sys.exit(1)

    # Run
    try:
        outcome = asyncio.run(review_pull_request(config))
    except Exception as e:
        logger.exception(f"PR review failed: {e}")
        sys.exit(1)

    print_outcome(outcome, args.json)
    sys.exit(0)


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the outcome as JSON"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Normalize and score AI code review findings"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # score command
    score_parser = subparsers.add_parser(
        "score",
        help="Parse a saved model response and score it"
    )
    score_parser.add_argument(
        "input",
        help="File holding the raw model response ('-' for stdin)"
    )
    _add_common_arguments(score_parser)

    # review command
    review_parser = subparsers.add_parser("review", help="Run a structured review of a file")
    review_parser.add_argument(
        "--file",
        type=str,
        required=True,
        help="Source file to review"
    )
    review_parser.add_argument(
        "--language",
        type=str,
        help="Language name (default: detected from the file extension)"
    )
    review_parser.add_argument(
        "--model",
        type=str,
        help="Model to use (default: REVIEW_MODEL env var)"
    )
    _add_common_arguments(review_parser)

    # pr command
    pr_parser = subparsers.add_parser("pr", help="Review a GitHub pull request")
    pr_parser.add_argument(
        "--repo",
        type=str,
        help="Repository in format owner/repo"
    )
    pr_parser.add_argument(
        "--pr-number",
        type=int,
        help="Pull request number"
    )
    pr_parser.add_argument(
        "--model",
        type=str,
        help="Model to use (default: REVIEW_MODEL env var)"
    )
    pr_parser.add_argument(
        "--post-summary",
        action="store_true",
        help="Post the review summary as a PR comment"
    )
    pr_parser.add_argument(
        "--min-severity",
        type=str,
        default="info",
        choices=["critical", "high", "medium", "low", "info"],
        help="Least urgent severity listed in the summary (default: info)"
    )
    _add_common_arguments(pr_parser)

    args = parser.parse_args()

    # Route to subcommand
    if args.command == "score":
        cmd_score(args)
    elif args.command == "review":
        cmd_review(args)
    elif args.command == "pr":
        cmd_pr(args)
    else:
        # No subcommand - show help
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
