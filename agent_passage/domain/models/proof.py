"""Marker proof model.

A proof binds a marker's canonical payload to the signer's DID. The
public key is recovered from the DID itself, so a signed marker can be
verified without any registry lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# Proof suite used for every marker signature
PROOF_TYPE: str = "Ed25519Signature2020"


@dataclass(frozen=True)
class MarkerProof:
    """Detached Ed25519 signature over a marker.

    Attributes:
        created: When the signature was produced (UTC).
        verification_method: DID of the signing key.
        proof_value: Base64-encoded 64-byte Ed25519 signature.
        type: Proof suite identifier.
    """

    created: datetime
    verification_method: str
    proof_value: str
    type: str = PROOF_TYPE
