"""EXIT marker domain model.

An EXIT marker records an agent's departure from a platform. It is built
unsigned, signed exactly once, and afterwards treated as an opaque,
append-only artifact: the dataclass is frozen and the signed payload is
re-derived from the fields, so any field change invalidates the proof.

Modules:
    lineage: where the departing agent came from (predecessors).
    stateSnapshot: a digest of the agent state at departure.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from agent_passage.domain.models.proof import MarkerProof

SPEC_VERSION: str = "1.0"

# Wire names of optional marker modules
MODULE_LINEAGE: str = "lineage"
MODULE_STATE_SNAPSHOT: str = "stateSnapshot"
KNOWN_MODULES: frozenset[str] = frozenset({MODULE_LINEAGE, MODULE_STATE_SNAPSHOT})


class ExitType(str, Enum):
    """Closed set of departure kinds.

    The wire value equals the member name.
    """

    VOLUNTARY = "Voluntary"
    FORCED = "Forced"
    EMERGENCY = "Emergency"
    KEY_COMPROMISE = "KeyCompromise"


@dataclass(frozen=True)
class LineageModule:
    """History pointer for the departing agent.

    Attributes:
        predecessor: Identifier the subject was derived from, if any.
        lineage_chain: Ordered prior identifiers, oldest first.
        continuity_proof: Optional reference proving the chain.
    """

    predecessor: str | None = None
    lineage_chain: tuple[str, ...] = ()
    continuity_proof: str | None = None


@dataclass(frozen=True)
class StateSnapshotModule:
    """Agent state captured at departure.

    Attributes:
        state_hash: Hex digest of the serialized agent state.
        state_location: Where the state can be fetched, if published.
        obligations: Outstanding obligations the agent leaves behind.
    """

    state_hash: str
    state_location: str | None = None
    obligations: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.state_hash.strip():
            raise ValueError("state_hash must be non-empty")


@dataclass(frozen=True)
class ExitMarker:
    """Signed (or not yet signed) departure record.

    Use create_exit_marker() from the marker factory rather than building
    one directly; it derives the content id.

    Attributes:
        id: Content-derived identifier ("urn:exit:<sha256>").
        subject: Identifier of the departing agent.
        origin: Platform or system being left.
        exit_type: Kind of departure.
        timestamp: When the marker was created (UTC).
        reason: Optional free-text reason.
        lineage: Optional lineage module.
        state_snapshot: Optional state snapshot module.
        proof: Signature, None while unsigned.
        spec_version: Marker format version.
    """

    id: str
    subject: str
    origin: str
    exit_type: ExitType
    timestamp: datetime
    reason: str | None = None
    lineage: LineageModule | None = None
    state_snapshot: StateSnapshotModule | None = None
    proof: MarkerProof | None = None
    spec_version: str = SPEC_VERSION

    @property
    def is_signed(self) -> bool:
        """True once a proof is attached."""
        return self.proof is not None

    def has_module(self, name: str) -> bool:
        """Check whether an optional module is present.

        Args:
            name: Module wire name ("lineage" or "stateSnapshot").

        Returns:
            True if the module is attached to this marker.

        Raises:
            ValueError: If name is not a known module.
        """
        if name == MODULE_LINEAGE:
            return self.lineage is not None
        if name == MODULE_STATE_SNAPSHOT:
            return self.state_snapshot is not None
        raise ValueError(f"Unknown marker module: {name!r}")

    def with_proof(self, proof: MarkerProof) -> ExitMarker:
        """Return a signed copy of this marker.

        Raises:
            ValueError: If the marker is already signed.
        """
        if self.is_signed:
            raise ValueError(f"EXIT marker {self.id} is already signed")
        return replace(self, proof=proof)
