"""ARRIVAL marker domain model.

An ARRIVAL marker records that a receiving platform admitted an agent. It
references the EXIT marker by id only; it does not own or embed it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from agent_passage.domain.models.exit_marker import SPEC_VERSION
from agent_passage.domain.models.proof import MarkerProof


@dataclass(frozen=True)
class ArrivalMarker:
    """Signed admission record.

    Attributes:
        id: Content-derived identifier ("urn:arrival:<sha256>").
        exit_marker_id: Id of the EXIT marker this arrival follows.
        subject: Departing agent identifier, copied from the EXIT marker.
        destination: Receiving platform identifier.
        timestamp: Admission instant (UTC).
        proof: Receiving platform's signature, None while unsigned.
        spec_version: Marker format version.
    """

    id: str
    exit_marker_id: str
    subject: str
    destination: str
    timestamp: datetime
    proof: MarkerProof | None = None
    spec_version: str = SPEC_VERSION

    @property
    def is_signed(self) -> bool:
        return self.proof is not None

    def with_proof(self, proof: MarkerProof) -> ArrivalMarker:
        """Return a signed copy of this marker.

        Raises:
            ValueError: If the marker is already signed.
        """
        if self.is_signed:
            raise ValueError(f"ARRIVAL marker {self.id} is already signed")
        return replace(self, proof=proof)
