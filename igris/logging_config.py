"""Structured logging configuration using structlog.

Calendar code logs snake_case events with key-value context, e.g.:

- ``signed_in`` / ``signed_out`` / ``sign_in_failed``
- ``google_token_refreshed`` / ``google_token_refresh_failed``
- ``events_fetched`` (count, calendar_id) / ``fetch_events_failed``
- ``event_added`` (summary, event_id) / ``add_event_failed``
- ``calendar_state_fetch_failed`` / ``calendar_state_cleared``

Production renders one JSON object per line so these can be shipped as-is;
every other environment gets the colored console renderer. Output goes to
stderr, keeping stdout for CLI tables.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from igris.config import get_settings


def _renderer(env: str) -> Any:
    if env == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging() -> None:
    """Configure structured logging for the entire application."""
    settings = get_settings()
    log_level = getattr(logging, settings.igris_log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(settings.igris_env),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a named structured logger."""
    return structlog.get_logger(name)
