"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from agent_passage.config.passage_config import PassageConfig
from agent_passage.infrastructure.observability import (
    configure_structlog as _configure_structlog,
)


def configure_structlog(
    config: PassageConfig, *, cache_logger_on_first_use: bool = True
) -> None:
    """Configure structlog for the configured environment and level."""
    _configure_structlog(
        environment=config.environment,
        log_level=config.log_level,
        cache_logger_on_first_use=cache_logger_on_first_use,
    )


__all__ = ["configure_structlog"]
