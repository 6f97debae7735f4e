"""Application services for Agent Passage."""

from agent_passage.application.services.marker_signing import MarkerSigningService
from agent_passage.application.services.passage_service import PassageService
from agent_passage.application.services.session_identity import SessionIdentityCache
from agent_passage.application.services.time_authority_service import (
    TimeAuthorityService,
)

__all__ = [
    "MarkerSigningService",
    "PassageService",
    "SessionIdentityCache",
    "TimeAuthorityService",
]
