"""Logging configuration."""

import logging
import sys
import uuid

import structlog

from teamhub.settings import Settings

REQUEST_ID_HEADER = "X-Request-ID"


def setup_logging(settings: Settings) -> None:
    """Configure structured logging.

    Every event carries the context bound with ``bind_request_context``, so
    service logs can be traced back to the request and the acting user.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]

    if settings.log_format == "json":
        processors = [
            *shared_processors,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level)
        ),
        context_class=dict,
        # Resolves sys.stdout when each logger is created
        logger_factory=structlog.PrintLoggerFactory(),
        # Outside production the output stream may be swapped (reloader, CLI runners)
        cache_logger_on_first_use=settings.env == "production",
    )

    # Also configure standard logging for third-party libraries
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )


def bind_request_context(request_id: str | None, method: str, path: str, user_id: str | None) -> str:
    """Start a fresh logging context for one request.

    Returns:
        The request id, generated when the client did not send one
    """
    request_id = request_id or uuid.uuid4().hex

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=method,
        path=path,
        user_id=user_id,
    )
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)
