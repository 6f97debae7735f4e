"""Passage operation DTOs.

Application-layer results for the PassageService operations. Each has a
to_dict() producing the structured payload a request/response boundary
returns (camelCase keys, markers in interchange form).
"""

from dataclasses import dataclass, field
from typing import Any

from agent_passage.domain.models.transfer import ContinuityResult

IDENTITY_STORED_MESSAGE = (
    "Identity generated and stored server-side for this session. "
    "Use create_exit_marker or quick_exit to sign markers. "
    "Private key material is not exposed."
)


@dataclass(frozen=True)
class IdentityDTO:
    """Public view of a session identity (DID only)."""

    did: str
    message: str = IDENTITY_STORED_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        return {"did": self.did, "message": self.message}


@dataclass(frozen=True)
class ExitMarkerIssuedDTO:
    """A freshly created and signed EXIT marker.

    Attributes:
        marker: Marker in interchange form.
        signer_did: DID that signed the marker.
        verified: Result of verifying the new marker, when checked.
    """

    marker: dict[str, Any]
    signer_did: str
    verified: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"marker": self.marker, "signerDid": self.signer_did}
        if self.verified is not None:
            data["verified"] = self.verified
        return data


@dataclass(frozen=True)
class MarkerVerificationDTO:
    """Outcome of verifying a submitted EXIT marker.

    error is set (and the other marker fields are None) when the input
    could not be decoded at all.
    """

    valid: bool
    id: str | None = None
    subject: str | None = None
    exit_type: str | None = None
    timestamp: str | None = None
    errors: tuple[str, ...] = ()
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"valid": False, "error": self.error}
        return {
            "valid": self.valid,
            "subject": self.subject,
            "exitType": self.exit_type,
            "timestamp": self.timestamp,
            "id": self.id,
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class AdmissionEvaluationDTO:
    """Admission decision without an arrival (evaluate_admission)."""

    admitted: bool
    reasons: tuple[str, ...]
    policy: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "admitted": self.admitted,
            "reasons": list(self.reasons),
            "policy": self.policy,
        }


@dataclass(frozen=True)
class AdmissionDecisionDTO:
    """Admission decision with the minted arrival (verify_and_admit).

    arrival_marker and continuity are None when not admitted.
    """

    admitted: bool
    policy: str
    exit_marker_id: str
    reasons: tuple[str, ...] = ()
    arrival_marker: dict[str, Any] | None = None
    continuity: ContinuityResult | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.admitted:
            return {
                "admitted": False,
                "reasons": list(self.reasons),
                "policy": self.policy,
                "exitMarkerId": self.exit_marker_id,
            }
        return {
            "admitted": True,
            "policy": self.policy,
            "arrivalMarker": self.arrival_marker,
            "exitMarkerId": self.exit_marker_id,
            "continuity": self.continuity.to_dict() if self.continuity else None,
        }


@dataclass(frozen=True)
class PolicyListingDTO:
    """Preset policies and their configuration."""

    policies: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"policies": self.policies}
