"""Stub implementations for development and testing."""

from agent_passage.infrastructure.stubs.signature_verifier_stub import (
    SignatureVerifierStub,
)

__all__ = ["SignatureVerifierStub"]
