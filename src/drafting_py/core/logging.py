"""Structured logging configuration for drafting-py.

Provides structlog setup and a context manager that tags every log line of a
drafting session with its session ID.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TextIO

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator


def configure_logging(
    *,
    debug: bool = False,
    json_logs: bool = False,
    stream: TextIO | None = None,
    cache_loggers: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        debug: Enable debug level logging.
        json_logs: Output logs as JSON (for production).
        stream: Where log lines go, stdout if omitted.
        cache_loggers: Cache each logger on first use. Disable when the
            output stream is swapped between calls, as in CLI test runs.
    """
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        # Production: JSON output
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        # Development: colored console output
        processors.extend(
            [
                structlog.processors.ExceptionPrettyPrinter(),
                structlog.dev.ConsoleRenderer(colors=True),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=cache_loggers,
    )


@contextmanager
def bound_session(session_id: str, **context: Any) -> Iterator[None]:
    """Bind a session ID (and any extra context) to all log lines in the block.

    Args:
        session_id: ID of the drafting session.
        **context: Additional key/value pairs to bind.
    """
    tokens = structlog.contextvars.bind_contextvars(session_id=session_id, **context)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)
