"""Session ID context for log correlation.

Every PassageService operation runs inside session_scope(), so each log
entry emitted while handling a request carries the session it belongs to.

Usage:
    with session_scope(session_id):
        log.info("admission_evaluated", ...)   # session_id added by processor

    # In structlog configuration
    processors = [..., session_id_processor, ...]
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Default is empty string to avoid None type issues
_session_id: ContextVar[str] = ContextVar("session_id", default="")


def generate_session_id() -> str:
    """Generate a new session ID (UUID4)."""
    return str(uuid4())


def get_session_id() -> str:
    """Get the current session ID, or empty string outside a session."""
    return _session_id.get()


@contextmanager
def session_scope(session_id: str) -> Iterator[str]:
    """Bind a session ID for the duration of a block.

    The previous value is restored on exit, including on error.
    """
    token = _session_id.set(session_id)
    try:
        yield session_id
    finally:
        _session_id.reset(token)


def session_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor to add session_id to every log entry.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with session_id added when one is bound.
    """
    session_id = get_session_id()
    if session_id:
        event_dict["session_id"] = session_id
    return event_dict
