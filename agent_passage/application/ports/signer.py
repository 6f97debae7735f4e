"""Signer port: the signature collaborator.

Defines the abstract interface for identity generation, signing and
signature checking. The algorithm (Ed25519) and the DID key encoding are
owned by the adapter; the application layer only moves bytes and DIDs.

Infrastructure adapters must implement this protocol.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from agent_passage.domain.models.identity import Identity


class SignerProtocol(ABC):
    """Abstract protocol for signature operations.

    Security Requirements:
    - Private key material never leaves the Identity / adapter boundary
    - verify_signature returns False on any malformed input, never raises
    """

    @abstractmethod
    def generate_identity(self) -> Identity:
        """Generate a fresh keypair and its DID.

        Returns:
            New Identity whose DID encodes its public key.
        """
        ...

    @abstractmethod
    def sign(self, payload: bytes, identity: Identity) -> bytes:
        """Sign payload bytes with an identity's private key.

        Args:
            payload: Canonical bytes to sign.
            identity: Identity holding the private key.

        Returns:
            Raw signature bytes.

        Raises:
            SignatureError: If the identity cannot sign.
        """
        ...

    @abstractmethod
    def verify_signature(
        self, payload: bytes, signature: bytes, verification_method: str
    ) -> bool:
        """Check a signature against the key encoded in a DID.

        Args:
            payload: The bytes that were signed.
            signature: Raw signature bytes.
            verification_method: Signer DID.

        Returns:
            True if the signature is valid for payload under the DID's key.
        """
        ...

    def get_algorithm(self) -> str:
        """Get the signature algorithm name."""
        return "Ed25519"
