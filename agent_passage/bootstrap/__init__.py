"""Bootstrap wiring: builds services from configuration."""

from agent_passage.bootstrap.logging import configure_structlog
from agent_passage.bootstrap.passage import build_passage_service

__all__ = ["build_passage_service", "configure_structlog"]
