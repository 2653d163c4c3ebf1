"""Logging utilities."""

import logging
import sys
from typing import Optional

LOGGER_NAME = "review_severity"
DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"

# Chatty client libraries, kept at WARNING unless debugging
NOISY_LOGGERS = ("github", "urllib3", "httpx")


def setup_logging(
    level: int = logging.INFO,
    format_str: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging for review triage.

    Args:
        level: Logging level (default: INFO)
        format_str: Custom format string

    Returns:
        The package logger
    """
    logging.basicConfig(
        level=level,
        format=format_str or DEFAULT_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger under the package namespace."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
