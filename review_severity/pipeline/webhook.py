"""GitHub webhook handling - signature checks and event-triggered reviews."""

import hashlib
import hmac
import json
import secrets
from typing import Any, Dict, Iterable, List, Optional, Union

from claude_agent_sdk import ClaudeSDKError

from ..config import ReviewConfig, DEFAULT_CONFIG
from ..utils import get_logger
from .pr_review import DEFAULT_LANGUAGE
from .structured_review import ReviewError, review_code


REVIEWABLE_PR_ACTIONS = ("opened", "synchronize", "reopened")
DEFAULT_EVENTS = ("push", "pull_request")
SIGNATURE_PREFIX = "sha256="


def generate_webhook_secret() -> str:
    """Generate a new random webhook secret (64 hex chars)."""
    return secrets.token_hex(32)


def verify_github_signature(
    payload: Union[bytes, str],
    signature: Optional[str],
    secret: Optional[str]
) -> bool:
    """
    Check an `X-Hub-Signature-256` header against the raw request body.

    Args:
        payload: Raw request body
        signature: Header value, e.g. "sha256=..."
        secret: Shared webhook secret

    Returns:
        True only if the signature matches
    """
    if not signature or not secret:
        return False

    if isinstance(payload, str):
        payload = payload.encode("utf-8")

    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(signature.encode("utf-8"), (SIGNATURE_PREFIX + digest).encode("utf-8"))


def summarize_push_event(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Describe the files changed across all commits of a push."""
    commits = payload.get("commits") or []
    repository = (payload.get("repository") or {}).get("full_name")
    branch = (payload.get("ref") or "").replace("refs/heads/", "")

    changed_files: List[str] = []
    for commit in commits:
        changed_files.extend(commit.get("added") or [])
        changed_files.extend(commit.get("modified") or [])

    if not changed_files:
        return {"skipped": True, "reason": "No file changes"}

    snippet = "\n\n".join(
        f"// Commit: {c.get('message', '')}\n"
        f"// Files: {', '.join((c.get('added') or []) + (c.get('modified') or []))}"
        for c in commits
    )

    return {
        "title": f"Push to {branch} in {repository}",
        "repository": repository,
        "branch": branch,
        "commits": len(commits),
        "files_changed": len(changed_files),
        "snippet": snippet,
    }


def pull_request_event_snippet(payload: Dict[str, Any]) -> str:
    """Placeholder snippet describing a PR from its webhook payload."""
    pr = payload["pull_request"]
    return (
        f"// Pull Request: {pr.get('title', '')}\n"
        f"// {pr['head']['ref']} -> {pr['base']['ref']}\n"
        f"// {pr.get('html_url', '')}"
    )


async def handle_pull_request_event(
    payload: Dict[str, Any],
    config: ReviewConfig = DEFAULT_CONFIG,
    auto_review: bool = True
) -> Dict[str, Any]:
    """
    Handle a `pull_request` webhook event.

    Only opened, synchronize and reopened actions are reviewed. A failed
    model call is logged and the event result is returned without an
    outcome, so the webhook delivery itself still succeeds.

    Returns:
        Result dict; includes "outcome" (ReviewOutcome or None) unless skipped
    """
    logger = get_logger()

    action = payload.get("action")
    if action not in REVIEWABLE_PR_ACTIONS:
        return {"skipped": True, "reason": f"PR action {action} ignored"}

    pr = payload["pull_request"]
    repository = (payload.get("repository") or {}).get("full_name")
    result: Dict[str, Any] = {
        "pr_number": pr["number"],
        "title": f"PR #{pr['number']}: {pr.get('title', '')}",
        "repository": repository,
        "outcome": None,
    }

    if not auto_review:
        return result

    try:
        result["outcome"] = await review_code(
            pull_request_event_snippet(payload),
            DEFAULT_LANGUAGE,
            config
        )
    except (ReviewError, ClaudeSDKError) as e:
        logger.error(f"Auto-review failed for {repository} PR #{pr['number']}: {e}")

    return result


async def process_event(
    event: str,
    payload: Dict[str, Any],
    config: ReviewConfig = DEFAULT_CONFIG,
    enabled_events: Iterable[str] = DEFAULT_EVENTS
) -> Dict[str, Any]:
    """
    Dispatch a verified webhook event.

    Args:
        event: Value of the `X-GitHub-Event` header
        payload: Decoded JSON body
        config: Review configuration (auto_review toggles PR reviews)
        enabled_events: Events this webhook is subscribed to

    Returns:
        Result dict for the event
    """
    if event not in enabled_events and event != "ping":
        return {"skipped": True, "reason": f"Event {event} not enabled"}

    if event == "push":
        return summarize_push_event(payload)
    if event == "pull_request":
        return await handle_pull_request_event(payload, config, config.auto_review)
    if event == "ping":
        return {"success": True, "message": "Pong!"}

    return {"skipped": True, "reason": f"Event {event} not supported"}


async def receive_delivery(
    event: str,
    body: Union[bytes, str],
    signature: Optional[str],
    config: ReviewConfig = DEFAULT_CONFIG,
    enabled_events: Iterable[str] = DEFAULT_EVENTS
) -> Dict[str, Any]:
    """
    Verify and dispatch one raw webhook delivery.

    The body is checked against `config.webhook_secret` before it is
    decoded. Deliveries with a bad signature or without a configured
    secret are rejected without being processed.

    Args:
        event: Value of the `X-GitHub-Event` header
        body: Raw request body
        signature: Value of the `X-Hub-Signature-256` header
        config: Review configuration holding the webhook secret
        enabled_events: Events this webhook is subscribed to

    Returns:
        Result dict for the event, or {"success": False, "error": ...}
    """
    logger = get_logger()

    if not verify_github_signature(body, signature, config.webhook_secret):
        logger.warning(f"Rejected {event} delivery: invalid signature")
        return {"success": False, "error": "Invalid signature"}

    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.warning(f"Rejected {event} delivery: {e}")
        return {"success": False, "error": "Invalid JSON payload"}
    if not isinstance(payload, dict):
        logger.warning(f"Rejected {event} delivery: payload is not an object")
        return {"success": False, "error": "Invalid JSON payload"}

    return await process_event(event, payload, config, enabled_events)
