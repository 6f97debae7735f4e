"""Ed25519 signer adapter backed by the cryptography package.

Implements SignerProtocol. Identities are generated in memory and never
written anywhere; the private key object stays inside the Identity.
"""

from __future__ import annotations

import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from agent_passage.application.ports.signer import SignerProtocol
from agent_passage.domain.errors import SignatureError
from agent_passage.domain.models.identity import Identity
from agent_passage.infrastructure.adapters.security.did_key import (
    decode_did_key,
    encode_did_key,
)

logger = structlog.get_logger()


def _raw_public_key(private_key: Ed25519PrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=Encoding.Raw, format=PublicFormat.Raw
    )


class Ed25519Signer(SignerProtocol):
    """Ed25519 signature collaborator.

    Example:
        >>> signer = Ed25519Signer()
        >>> identity = signer.generate_identity()
        >>> sig = signer.sign(b"payload", identity)
        >>> signer.verify_signature(b"payload", sig, identity.did)
        True
    """

    def generate_identity(self) -> Identity:
        """Generate a new Ed25519 keypair and its did:key."""
        private_key = Ed25519PrivateKey.generate()
        public_key = _raw_public_key(private_key)
        identity = Identity(
            did=encode_did_key(public_key),
            public_key=public_key,
            private_key=private_key,
        )
        logger.debug("identity_generated", did=identity.did)
        return identity

    def sign(self, payload: bytes, identity: Identity) -> bytes:
        """Sign payload with the identity's private key.

        Raises:
            SignatureError: If the identity holds no Ed25519 private key,
                or the private key does not match the identity's DID.
        """
        private_key = identity.private_key
        if not isinstance(private_key, Ed25519PrivateKey):
            raise SignatureError(
                "Identity has no Ed25519 private key", verification_method=identity.did
            )
        if _raw_public_key(private_key) != identity.public_key:
            raise SignatureError(
                "Private key does not match identity public key",
                verification_method=identity.did,
            )
        return private_key.sign(payload)

    def verify_signature(
        self, payload: bytes, signature: bytes, verification_method: str
    ) -> bool:
        """Verify an Ed25519 signature against the key encoded in a DID.

        Returns:
            True if valid. False for a bad signature, a malformed DID or
            a malformed key; never raises for those.
        """
        try:
            public_key = Ed25519PublicKey.from_public_bytes(
                decode_did_key(verification_method)
            )
            public_key.verify(signature, payload)
        except (InvalidSignature, ValueError):
            return False
        return True
