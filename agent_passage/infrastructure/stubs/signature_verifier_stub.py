"""Marker verifier stub implementation.

Provides a stub implementation of MarkerVerifierProtocol for development
and testing, so policy and continuity logic can be exercised without
real keys.

The stub can be configured to accept every marker or reject every marker,
and records which markers it was asked about.
"""

from __future__ import annotations

from typing import Union

from agent_passage.domain.models.arrival_marker import ArrivalMarker
from agent_passage.domain.models.exit_marker import ExitMarker
from agent_passage.domain.models.verification import VerificationResult
from agent_passage.domain.ports.marker_verifier import MarkerVerifierProtocol

STUB_REJECTION: str = "rejected by stub verifier"


class SignatureVerifierStub(MarkerVerifierProtocol):
    """Stub implementation of MarkerVerifierProtocol.

    This stub provides configurable verification behavior:
    - accept_all=True: Accept all markers (for testing)
    - accept_all=False: Reject all markers (for testing error paths)
    - reject_ids: Reject only these marker ids

    Attributes:
        verified_ids: Ids passed to verify(), in call order.
    """

    def __init__(
        self, accept_all: bool = True, reject_ids: frozenset[str] = frozenset()
    ) -> None:
        """Initialize the stub.

        Args:
            accept_all: If True, markers are accepted unless listed in
                reject_ids. If False, all markers are rejected.
            reject_ids: Marker ids to reject even when accept_all is True.
        """
        self._accept_all = accept_all
        self._reject_ids = reject_ids
        self.verified_ids: list[str] = []

    def verify(self, marker: Union[ExitMarker, ArrivalMarker]) -> VerificationResult:
        """Verify a marker (stub).

        Returns:
            A valid result if accepted, otherwise a failure naming the stub.
        """
        self.verified_ids.append(marker.id)
        if self._accept_all and marker.id not in self._reject_ids:
            return VerificationResult.ok()
        return VerificationResult.failed(STUB_REJECTION)
