"""Unit tests for the Ed25519Signer adapter."""

from __future__ import annotations

from dataclasses import replace

import pytest

from agent_passage.domain.errors import SignatureError
from agent_passage.infrastructure.adapters.security import Ed25519Signer, decode_did_key


class TestEd25519Signer:
    """Tests for identity generation, signing and verification."""

    def test_generated_did_encodes_public_key(self, signer: Ed25519Signer) -> None:
        identity = signer.generate_identity()

        assert decode_did_key(identity.did) == identity.public_key

    def test_identities_are_unique(self, signer: Ed25519Signer) -> None:
        assert signer.generate_identity().did != signer.generate_identity().did

    def test_sign_and_verify(self, signer: Ed25519Signer) -> None:
        identity = signer.generate_identity()

        signature = signer.sign(b"payload", identity)

        assert len(signature) == 64
        assert signer.verify_signature(b"payload", signature, identity.did) is True

    def test_other_payload_fails(self, signer: Ed25519Signer) -> None:
        identity = signer.generate_identity()
        signature = signer.sign(b"payload", identity)

        assert signer.verify_signature(b"payl0ad", signature, identity.did) is False

    def test_truncated_signature_fails(self, signer: Ed25519Signer) -> None:
        identity = signer.generate_identity()
        signature = signer.sign(b"payload", identity)

        assert signer.verify_signature(b"payload", signature[:-1], identity.did) is False

    def test_malformed_did_fails_without_raising(self, signer: Ed25519Signer) -> None:
        assert signer.verify_signature(b"payload", b"\x00" * 64, "did:key:zNOPE") is False

    def test_sign_without_private_key(self, signer: Ed25519Signer) -> None:
        identity = replace(signer.generate_identity(), private_key=None)

        with pytest.raises(SignatureError, match="no Ed25519 private key"):
            signer.sign(b"payload", identity)

    def test_sign_with_mismatched_key(self, signer: Ed25519Signer) -> None:
        a = signer.generate_identity()
        b = signer.generate_identity()
        mixed = replace(a, private_key=b.private_key)

        with pytest.raises(SignatureError, match="does not match") as exc_info:
            signer.sign(b"payload", mixed)

        assert exc_info.value.verification_method == a.did

    def test_algorithm(self, signer: Ed25519Signer) -> None:
        assert signer.get_algorithm() == "Ed25519"
