"""Cryptographic adapters (Ed25519 signer, did:key encoding)."""

from agent_passage.infrastructure.adapters.security.did_key import (
    decode_did_key,
    encode_did_key,
)
from agent_passage.infrastructure.adapters.security.ed25519_signer import Ed25519Signer

__all__ = ["Ed25519Signer", "decode_did_key", "encode_did_key"]
