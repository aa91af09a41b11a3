"""Logging configuration for mailsift.

This module provides structlog configuration and utility functions
for sanitizing log output taken from untrusted messages.
"""

import logging
import re
import sys
from typing import Any

import structlog


def sanitize_for_log(text: str | bytes, max_length: int = 100) -> str:
    """Remove control characters and limit length for safe logging.

    Args:
        text: The text to sanitize. Bytes are decoded as UTF-8 with
            replacement characters.
        max_length: Maximum length of returned string.

    Returns:
        Sanitized text safe for logging.
    """
    if not text:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    # ANSI codes first, their ESC byte is itself a control char
    text = re.sub(r"\x1b\[[0-9;]*m", "", text)
    text = re.sub(r"[\x00-\x1f\x7f]", "", text)
    return text[:max_length]


def configure_logging(json_format: bool = False, debug: bool = False) -> None:
    """Configure structlog for the mailsift CLI.

    Log lines go to stderr so that stdout carries only command output,
    e.g. the JSON document of ``mailsift show --json``. The CLI passes
    ``MAILSIFT_LOG_FORMAT`` and ``MAILSIFT_DEBUG`` unless overridden by
    ``--json-logs`` and ``--debug``.

    Args:
        json_format: If True, output JSON logs.
        debug: If True, enable DEBUG level logging.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
