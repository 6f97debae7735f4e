"""Bootstrap wiring for the passage service.

Builds one PassageService per session with the production adapters:
Ed25519 signer, wall-clock time authority and the configured server
policy.
"""

from __future__ import annotations

from agent_passage.application.ports.signer import SignerProtocol
from agent_passage.application.ports.time_authority import TimeAuthorityProtocol
from agent_passage.application.services.marker_signing import MarkerSigningService
from agent_passage.application.services.passage_service import PassageService
from agent_passage.application.services.session_identity import SessionIdentityCache
from agent_passage.application.services.time_authority_service import (
    TimeAuthorityService,
)
from agent_passage.config.passage_config import PassageConfig
from agent_passage.infrastructure.adapters.security import Ed25519Signer


def build_passage_service(
    config: PassageConfig,
    *,
    signer: SignerProtocol | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
    session_id: str | None = None,
) -> PassageService:
    """Create a PassageService for a new session.

    Args:
        config: Deployment configuration (server policy).
        signer: Signature collaborator (default: Ed25519Signer).
        time_authority: Clock (default: TimeAuthorityService).
        session_id: Session identifier for logs (default: generated).
    """
    return PassageService(
        MarkerSigningService(signer or Ed25519Signer()),
        time_authority or TimeAuthorityService(),
        session=SessionIdentityCache(session_id),
        server_policy=config.server_policy,
    )
