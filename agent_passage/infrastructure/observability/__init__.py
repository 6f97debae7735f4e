"""Observability: structured logging and session correlation."""

from agent_passage.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)
from agent_passage.infrastructure.observability.session import (
    generate_session_id,
    get_session_id,
    session_id_processor,
    session_scope,
)

__all__ = [
    "configure_structlog",
    "generate_session_id",
    "get_logger_for_service",
    "get_session_id",
    "session_id_processor",
    "session_scope",
]
