"""Structured review - ask the model for JSON findings, then parse and score them."""

import asyncio
from typing import List, Optional

from claude_agent_sdk import (
    ClaudeSDKClient,
    ClaudeAgentOptions,
    AssistantMessage,
    TextBlock,
    ResultMessage,
)

from ..config import ReviewConfig, DEFAULT_CONFIG
from ..models import ReviewOutcome
from ..utils import get_logger
from .extract import parse_issues
from .scoring import score


SYSTEM_PROMPT = """You are an expert code reviewer. Analyze code for bugs, security
vulnerabilities, performance problems and maintainability issues. Be specific
and actionable, and always answer in the requested JSON format."""


STRUCTURED_REVIEW_PROMPT = """
Review the following {language} code:

```{language}
{code}
```

## Output Format
Respond with a single fenced JSON block of this shape:

```json
{{
  "summary": "one paragraph overview of the code",
  "issues": [
    {{
      "category": "security | performance | bug | style | maintainability",
      "severity": "critical | high | medium | low | info",
      "title": "short summary of the issue",
      "description": "what is wrong and why it matters",
      "line_number": 12,
      "suggestion": "how to fix it"
    }}
  ]
}}
```

## Severity Guidelines
- **critical**: Security vulnerabilities, data loss risks
- **high**: Crashes, bugs that affect functionality
- **medium**: Performance problems, code quality issues
- **low**: Style issues, naming, documentation
- **info**: Minor suggestions

Use `null` for line_number when the issue is not tied to one line.
Return an empty issues list if the code has no problems.
"""


class ReviewError(Exception):
    """Raised when the model call fails or returns nothing usable."""


async def request_review(
    code: str,
    language: str,
    config: ReviewConfig = DEFAULT_CONFIG
) -> str:
    """
    Run one structured review call against the model.

    Args:
        code: Source code (or concatenated patches) to review
        language: Language name used in the prompt
        config: Review configuration (model, turn limit)

    Returns:
        Raw assistant text

    Raises:
        ReviewError: If the agent reports an error or produces no text
    """
    logger = get_logger()

    options = ClaudeAgentOptions(
        system_prompt=SYSTEM_PROMPT,
        model=config.model,
        allowed_tools=[],
        max_turns=config.max_turns,
    )

    parts: List[str] = []
    error: Optional[str] = None

    async with ClaudeSDKClient(options=options) as client:
        await client.query(STRUCTURED_REVIEW_PROMPT.format(
            language=language or "text",
            code=code,
        ))

        async for message in client.receive_response():
            if isinstance(message, AssistantMessage):
                for block in message.content:
                    if isinstance(block, TextBlock):
                        parts.append(block.text)

            elif isinstance(message, ResultMessage):
                logger.info(f"Review call completed in {message.duration_ms}ms")
                if message.is_error:
                    error = message.result or "model returned an error result"

    if error:
        raise ReviewError(error)

    text = "\n".join(parts).strip()
    if not text:
        raise ReviewError("Model returned an empty review")
    return text


def analyze_response(raw_text: str) -> ReviewOutcome:
    """Parse and score one raw review response."""
    issues = parse_issues(raw_text)
    return ReviewOutcome(
        raw_text=raw_text,
        issues=issues,
        severity_score=score(issues),
    )


async def review_code(
    code: str,
    language: str,
    config: ReviewConfig = DEFAULT_CONFIG
) -> ReviewOutcome:
    """
    Review a snippet and return its normalized issues and severity score.

    Args:
        code: Source code to review
        language: Language of the snippet
        config: Review configuration

    Returns:
        ReviewOutcome ready to be persisted
    """
    logger = get_logger()

    logger.info(f"Requesting structured review ({language}, {len(code)} chars)")
    raw_text = await request_review(code, language, config)

    outcome = analyze_response(raw_text)
    logger.info(
        f"Review parsed: {outcome.issues_count} issues, "
        f"severity score {outcome.severity_score}"
    )
    return outcome


# Synchronous wrapper for non-async contexts
def review_code_sync(
    code: str,
    language: str,
    config: ReviewConfig = DEFAULT_CONFIG
) -> ReviewOutcome:
    """Synchronous wrapper for review_code."""
    return asyncio.run(review_code(code, language, config))
