"""Marker verifier port.

Defines how the admission engine and the transfer verifier check a
marker's proof without knowing anything about keys, DIDs or the
signature algorithm.

Developer Golden Rules:
1. NEVER RAISE ON A BAD SIGNATURE - return VerificationResult(valid=False)
2. SELF-CONTAINED - the marker carries everything needed to verify it
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Union

if TYPE_CHECKING:
    from agent_passage.domain.models.arrival_marker import ArrivalMarker
    from agent_passage.domain.models.exit_marker import ExitMarker
    from agent_passage.domain.models.verification import VerificationResult


class MarkerVerifierProtocol(Protocol):
    """Protocol for verifying a signed marker."""

    def verify(self, marker: Union[ExitMarker, ArrivalMarker]) -> VerificationResult:
        """Verify a marker's proof against its own content.

        Args:
            marker: EXIT or ARRIVAL marker.

        Returns:
            VerificationResult; errors explain any failure (missing
            proof, unknown key encoding, bad signature, id mismatch).
        """
        ...
