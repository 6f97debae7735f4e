"""Application ports (interfaces implemented by infrastructure adapters)."""

from agent_passage.application.ports.signer import SignerProtocol
from agent_passage.application.ports.time_authority import TimeAuthorityProtocol

__all__ = ["SignerProtocol", "TimeAuthorityProtocol"]
