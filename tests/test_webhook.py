"""Tests for webhook signature checks and event handling.

Following the testing philosophy:
- Client-perspective behavior verification
- Given-When-Then structure
- Minimal mocking (only external APIs)
"""

import asyncio
import hashlib
import hmac
import json

import pytest

from review_severity.config import ReviewConfig
from review_severity.models import ReviewOutcome
from review_severity.pipeline import webhook
from review_severity.pipeline.structured_review import ReviewError
from review_severity.pipeline.webhook import (
    generate_webhook_secret,
    handle_pull_request_event,
    process_event,
    receive_delivery,
    summarize_push_event,
    verify_github_signature,
)


def sign(body: bytes, secret: str) -> str:
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def pr_payload(action: str = "opened") -> dict:
    return {
        "action": action,
        "repository": {"full_name": "acme/api"},
        "pull_request": {
            "number": 42,
            "title": "Add login",
            "html_url": "https://github.com/acme/api/pull/42",
            "head": {"ref": "feature/login"},
            "base": {"ref": "main"},
        },
    }


class TestSignatures:
    """Tests for webhook secrets and signatures."""

    def test_secret_is_64_hex_chars(self):
        secret = generate_webhook_secret()

        assert len(secret) == 64
        int(secret, 16)
        assert secret != generate_webhook_secret()

    def test_valid_signature(self):
        """Given a correctly signed body, should accept it."""
        body = b'{"zen": "Keep it simple."}'

        assert verify_github_signature(body, sign(body, "s3cret"), "s3cret")
        assert verify_github_signature(body.decode(), sign(body, "s3cret"), "s3cret")

    @pytest.mark.parametrize("signature", [None, "", "sha256=deadbeef", "garbage"])
    def test_invalid_signature(self, signature):
        """Given a missing or wrong signature, should reject it."""
        assert not verify_github_signature(b"{}", signature, "s3cret")

    def test_wrong_secret(self):
        body = b"{}"

        assert not verify_github_signature(body, sign(body, "other"), "s3cret")


class TestPushEvent:
    """Tests for push event summaries."""

    def test_collects_changed_files(self):
        """Given commits with added and modified files, should count them all."""
        # Given
        payload = {
            "ref": "refs/heads/main",
            "repository": {"full_name": "acme/api"},
            "commits": [
                {"message": "Add auth", "added": ["auth.py"], "modified": ["app.py"]},
                {"message": "Fix typo", "added": [], "modified": ["README.md"]},
            ],
        }

        # When
        result = summarize_push_event(payload)

        # Then
        assert result["title"] == "Push to main in acme/api"
        assert result["files_changed"] == 3
        assert result["commits"] == 2
        assert "// Commit: Add auth\n// Files: auth.py, app.py" in result["snippet"]

    def test_no_changes_is_skipped(self):
        result = summarize_push_event({"commits": [{"message": "empty"}]})

        assert result == {"skipped": True, "reason": "No file changes"}


class TestPullRequestEvent:
    """Tests for pull_request event handling."""

    def test_ignored_action(self):
        """Given a closed PR, should skip it."""
        result = asyncio.run(handle_pull_request_event(pr_payload("closed")))

        assert result == {"skipped": True, "reason": "PR action closed ignored"}

    def test_reviews_opened_pr(self, monkeypatch):
        """Given an opened PR, should review its snippet."""
        # Given
        outcome = ReviewOutcome(raw_text="[]")
        seen = []

        async def fake_review(code, language, config):
            seen.append(code)
            return outcome

        monkeypatch.setattr(webhook, "review_code", fake_review)

        # When
        result = asyncio.run(handle_pull_request_event(pr_payload("synchronize")))

        # Then
        assert result["pr_number"] == 42
        assert result["title"] == "PR #42: Add login"
        assert result["outcome"] is outcome
        assert "// feature/login -> main" in seen[0]

    def test_auto_review_disabled(self, monkeypatch):
        async def fail_review(code, language, config):
            raise AssertionError("should not review")

        monkeypatch.setattr(webhook, "review_code", fail_review)

        result = asyncio.run(handle_pull_request_event(pr_payload(), auto_review=False))

        assert result["outcome"] is None

    def test_review_failure_is_logged_not_raised(self, monkeypatch):
        """Given a failing model call, should still return the event result."""
        async def failing_review(code, language, config):
            raise ReviewError("model unavailable")

        monkeypatch.setattr(webhook, "review_code", failing_review)

        result = asyncio.run(handle_pull_request_event(pr_payload("reopened")))

        assert result["pr_number"] == 42
        assert result["outcome"] is None


class TestProcessEvent:
    """Tests for event dispatch."""

    def test_ping(self):
        result = asyncio.run(process_event("ping", {}))

        assert result == {"success": True, "message": "Pong!"}

    def test_event_not_enabled(self):
        result = asyncio.run(process_event("issues", {}, enabled_events=["push"]))

        assert result["skipped"] is True
        assert "not enabled" in result["reason"]

    def test_unsupported_event(self):
        result = asyncio.run(process_event("release", {}, enabled_events=["release"]))

        assert result["reason"] == "Event release not supported"

    def test_pull_request_respects_config_auto_review(self):
        config = ReviewConfig(auto_review=False)

        result = asyncio.run(process_event("pull_request", pr_payload(), config))

        assert result["outcome"] is None


class TestReceiveDelivery:
    """Tests for verifying raw deliveries against the configured secret."""

    def test_signed_delivery_is_dispatched(self):
        """Given a body signed with the configured secret, should process it."""
        # Given
        config = ReviewConfig(webhook_secret="s3cret")
        body = json.dumps({"zen": "Keep it simple."}).encode()

        # When
        result = asyncio.run(receive_delivery("ping", body, sign(body, "s3cret"), config))

        # Then
        assert result == {"success": True, "message": "Pong!"}

    def test_bad_signature_is_rejected(self, monkeypatch):
        """Given a body signed with another secret, should not dispatch it."""
        # Given
        async def fail_review(code, language, config):
            raise AssertionError("should not review")

        monkeypatch.setattr(webhook, "review_code", fail_review)
        config = ReviewConfig(webhook_secret="s3cret")
        body = json.dumps(pr_payload()).encode()

        # When
        result = asyncio.run(receive_delivery("pull_request", body, sign(body, "other"), config))

        # Then
        assert result == {"success": False, "error": "Invalid signature"}

    def test_missing_secret_rejects_everything(self):
        """Given no configured secret, should reject even a signed body."""
        body = b"{}"

        result = asyncio.run(receive_delivery("ping", body, sign(body, ""), ReviewConfig()))

        assert result["error"] == "Invalid signature"

    @pytest.mark.parametrize("body", [b"{not json", b"[1, 2]"])
    def test_malformed_body_is_rejected(self, body):
        config = ReviewConfig(webhook_secret="s3cret")

        result = asyncio.run(receive_delivery("push", body, sign(body, "s3cret"), config))

        assert result == {"success": False, "error": "Invalid JSON payload"}

    def test_secret_is_read_from_environment(self, monkeypatch):
        """Given WEBHOOK_SECRET in the environment, should verify with it."""
        # Given
        monkeypatch.setenv("WEBHOOK_SECRET", "from-env")
        config = ReviewConfig.from_env()
        body = json.dumps({"ref": "refs/heads/main", "commits": []}).encode()

        # When
        result = asyncio.run(receive_delivery("push", body, sign(body, "from-env"), config))

        # Then
        assert result == {"skipped": True, "reason": "No file changes"}
