"""Signing identity model.

An identity is a DID plus the Ed25519 keypair it encodes. Identities live
only as long as the session that created them; they are never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DID_KEY_PREFIX: str = "did:key:z"


@dataclass(frozen=True)
class Identity:
    """DID-derived signing identity.

    The DID is a deterministic encoding of public_key; one never changes
    without the other. The private key is an opaque key object owned by
    the signer adapter and is kept out of repr() and equality.

    Attributes:
        did: "did:key:z..." identifier derived from public_key.
        public_key: Raw 32-byte Ed25519 public key.
        private_key: Opaque private key handle (adapter-specific).
    """

    did: str
    public_key: bytes
    private_key: Any = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.did.startswith(DID_KEY_PREFIX):
            raise ValueError(f"Identity DID must start with {DID_KEY_PREFIX!r}")
        if len(self.public_key) != 32:
            raise ValueError(
                f"Ed25519 public key must be 32 bytes, got {len(self.public_key)}"
            )
