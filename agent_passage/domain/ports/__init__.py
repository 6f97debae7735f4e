"""Ports the domain services depend on."""

from agent_passage.domain.ports.marker_verifier import MarkerVerifierProtocol

__all__ = ["MarkerVerifierProtocol"]
