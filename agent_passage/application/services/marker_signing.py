"""Marker signing service.

All marker signing and verification goes through this service so that:
1. The signed bytes are always the canonical payload from the codec
2. The proof names the signer DID (markers are self-verifying)
3. Verification re-derives the payload from the fields, so a changed
   field always breaks the proof

The service also implements MarkerVerifierProtocol for the domain
services.
"""

from __future__ import annotations

import base64
import binascii
from datetime import datetime
from typing import TypeVar

import structlog

from agent_passage.application.ports.signer import SignerProtocol
from agent_passage.application.services import marker_codec
from agent_passage.application.services.marker_codec import Marker
from agent_passage.domain.models.arrival_marker import ArrivalMarker
from agent_passage.domain.models.exit_marker import ExitMarker
from agent_passage.domain.models.identity import Identity
from agent_passage.domain.models.proof import PROOF_TYPE, MarkerProof
from agent_passage.domain.models.verification import VerificationResult

logger = structlog.get_logger()

M = TypeVar("M", ExitMarker, ArrivalMarker)


def signature_to_base64(signature: bytes) -> str:
    return base64.b64encode(signature).decode("ascii")


def signature_from_base64(signature_b64: str) -> bytes:
    """Decode a base64 proof value.

    Raises:
        ValueError: If input is not valid base64.
    """
    try:
        return base64.b64decode(signature_b64, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 signature: {e}") from e


class MarkerSigningService:
    """Signs markers and verifies their proofs.

    Attributes:
        _signer: Signature collaborator.
    """

    def __init__(self, signer: SignerProtocol) -> None:
        self._signer = signer

    @property
    def signer(self) -> SignerProtocol:
        return self._signer

    def sign(self, marker: M, identity: Identity, created: datetime) -> M:
        """Attach a proof to an unsigned marker.

        Args:
            marker: Unsigned EXIT or ARRIVAL marker.
            identity: Signing identity.
            created: Signing instant recorded in the proof.

        Returns:
            Signed copy of the marker.

        Raises:
            ValueError: If the marker is already signed.
            SignatureError: If the signer cannot sign with this identity.
        """
        if marker.is_signed:
            raise ValueError(f"Marker {marker.id} is already signed")

        signature = self._signer.sign(marker_codec.signable_payload(marker), identity)
        proof = MarkerProof(
            created=created,
            verification_method=identity.did,
            proof_value=signature_to_base64(signature),
        )
        logger.debug("marker_signed", marker_id=marker.id, signer=identity.did)
        return marker.with_proof(proof)

    def sign_exit_marker(
        self, marker: ExitMarker, identity: Identity, created: datetime
    ) -> ExitMarker:
        return self.sign(marker, identity, created)

    def sign_arrival_marker(
        self, marker: ArrivalMarker, identity: Identity, created: datetime
    ) -> ArrivalMarker:
        return self.sign(marker, identity, created)

    def verify(self, marker: Marker) -> VerificationResult:
        """Verify a marker's proof against its content.

        Checks, accumulating failures:
        - a proof is present and uses the Ed25519 proof suite
        - the id matches the content-derived id
        - the signature verifies under the key encoded in the proof's DID

        Returns:
            VerificationResult, never raises for a bad marker.
        """
        proof = marker.proof
        if proof is None:
            return VerificationResult.failed("marker is unsigned")
        if proof.type != PROOF_TYPE:
            return VerificationResult.failed(f"unsupported proof type: {proof.type}")

        errors: list[str] = []
        if marker_codec.content_id(marker) != marker.id:
            errors.append("id does not match marker content")

        try:
            signature = signature_from_base64(proof.proof_value)
        except ValueError:
            errors.append("proof value is not valid base64")
        else:
            if not self._signer.verify_signature(
                marker_codec.signable_payload(marker),
                signature,
                proof.verification_method,
            ):
                errors.append("signature does not verify")

        if errors:
            logger.info(
                "marker_verification_failed",
                marker_id=marker.id,
                verification_method=proof.verification_method,
                errors=errors,
            )
            return VerificationResult(valid=False, errors=tuple(errors))
        return VerificationResult.ok()
