"""Logging setup that keeps stdout clean for the report.

The reporter's stdout is its product: the markdown is usually piped straight
into a chat message or captured by a scheduled CI step. Any log line that
lands on stdout ends up in that message. So every logger here, both
structlog's and the standard library's (httpx logs each request through
it), writes to stderr unless a different stream is passed in.

Rendering follows the ENVIRONMENT variable:
- development: colourised key=value lines for a person at a terminal
- production: one JSON object per line, for log shipping from the CI job

Events emitted by the reporter (fetch_started, fetch_complete, fetch_failed,
report_rendered, startup_failed, ...) carry the pipeline and branch as
fields, so a failed pipeline is easy to pick out of a JSON log.

Usage:
    from release_reporter.logging_config import setup_logging, get_logger

    setup_logging(environment="production")
    logger = get_logger(__name__)
    logger.warning("fetch_failed", pipeline="serve-api", branch="main")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

import structlog


def _renderer(environment: str) -> Any:
    if environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(
    environment: str | None = None,
    log_level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and stdlib logging to write off stdout.

    Args:
        environment: "development" or "production". Reads from
                     ENVIRONMENT env var if not provided.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Reads from LOG_LEVEL env var if not provided.
        stream: Where log lines go. Defaults to stderr.
    """
    env = environment or os.environ.get("ENVIRONMENT", "development")
    level = getattr(logging, (log_level or os.environ.get("LOG_LEVEL", "INFO")).upper())
    out = stream or sys.stderr

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(env),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=out, level=level)


def get_logger(name: str) -> Any:
    """Get a structured logger instance (typically for ``__name__``)."""
    return structlog.get_logger(name)
