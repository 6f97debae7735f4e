"""Structured logging configuration with structlog.

Supports both production (JSON) and development (console) output modes.

Log Entry Format (production):
    {
        "timestamp": "2026-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "admission_evaluated",
        "session_id": "uuid",
        ...additional context
    }

Usage:
    # At application startup
    from agent_passage.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")  # JSON output
    configure_structlog(environment="development")  # Console output

    # Then use structlog normally
    import structlog
    log = structlog.get_logger()
    log.info("event_name", key="value")
"""

import logging
import os
import sys
from typing import cast

import structlog
from structlog.typing import Processor

from agent_passage.infrastructure.observability.session import session_id_processor

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level(level_name: str | None = None) -> int:
    """Resolve a log level name, falling back to LOG_LEVEL then INFO.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    if level_name is None:
        level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    return getattr(logging, level_name.upper(), logging.INFO)


def configure_structlog(
    environment: str = "production",
    log_level: str | None = None,
    cache_logger_on_first_use: bool = True,
) -> None:
    """Configure structlog for the application.

    Should be called once at startup, before the first log call.

    Args:
        environment: 'production' for JSON output, 'development' for console.
        log_level: Level name; defaults to the LOG_LEVEL environment variable.
        cache_logger_on_first_use: Cache bound loggers. Disable when the
            output stream can be swapped between runs (CLI, tests).
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, session_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level(log_level)),
        context_class=dict,
        # stderr keeps stdout free for command output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=cache_logger_on_first_use,
    )


def get_logger_for_service(
    service_name: str, component: str = "passage"
) -> structlog.BoundLogger:
    """Get a logger with service name and component already bound.

    Args:
        service_name: The name of the service (typically class name).
        component: The component type (default: "passage").
    """
    return structlog.get_logger().bind(
        service=service_name,
        component=component,
    )
