"""Marker interchange models.

Pydantic models describing the JSON interchange shape of EXIT and ARRIVAL
markers. They are used only to validate incoming documents; the codec maps
them onto the frozen domain dataclasses.

Shape rules:
- camelCase keys on the wire
- unknown keys are rejected (extra="forbid")
- timestamps must carry a timezone
- identifiers must be non-empty
"""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from agent_passage.domain.models.exit_marker import SPEC_VERSION, ExitType


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        frozen=True,
    )


class MarkerProofWire(_WireModel):
    """Proof block shared by both marker kinds."""

    type: str = Field(min_length=1, description="Proof suite identifier")
    created: AwareDatetime = Field(description="Signing instant")
    verification_method: str = Field(min_length=1, description="Signer DID")
    proof_value: str = Field(min_length=1, description="Base64 signature")


class LineageWire(_WireModel):
    predecessor: str | None = None
    lineage_chain: list[str] = Field(default_factory=list)
    continuity_proof: str | None = None


class StateSnapshotWire(_WireModel):
    state_hash: str = Field(min_length=1, description="Digest of agent state")
    state_location: str | None = None
    obligations: list[str] = Field(default_factory=list)

    @field_validator("state_hash")
    @classmethod
    def validate_state_hash(cls, v: str) -> str:
        """Reject a digest that is only whitespace."""
        if not v.strip():
            raise ValueError("stateHash cannot be blank")
        return v


class ExitMarkerWire(_WireModel):
    """EXIT marker as exchanged between platforms."""

    id: str = Field(min_length=1)
    spec_version: str = Field(default=SPEC_VERSION, min_length=1)
    subject: str = Field(min_length=1, description="Departing agent identifier")
    origin: str = Field(min_length=1, description="Platform being left")
    exit_type: ExitType
    timestamp: AwareDatetime
    reason: str | None = None
    lineage: LineageWire | None = None
    state_snapshot: StateSnapshotWire | None = None
    proof: MarkerProofWire | None = None


class ArrivalMarkerWire(_WireModel):
    """ARRIVAL marker as exchanged between platforms."""

    id: str = Field(min_length=1)
    spec_version: str = Field(default=SPEC_VERSION, min_length=1)
    exit_marker_id: str = Field(min_length=1, description="Referenced EXIT marker id")
    subject: str = Field(min_length=1)
    destination: str = Field(min_length=1, description="Receiving platform")
    timestamp: AwareDatetime
    proof: MarkerProofWire | None = None
