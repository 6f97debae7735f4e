"""Transfer continuity verifier.

Confirms that an ARRIVAL marker and an EXIT marker form one valid,
ordered, causally linked transfer.

Two kinds of checks, reported separately:
- Authenticity: each marker's proof verifies (errors only)
- Continuity: the arrival references this exit and does not predate it
  (errors and continuity.errors)

verified is True only when both kinds pass.
"""

from __future__ import annotations

import structlog

from agent_passage.domain.models.arrival_marker import ArrivalMarker
from agent_passage.domain.models.exit_marker import ExitMarker
from agent_passage.domain.models.transfer import ContinuityResult, TransferRecord
from agent_passage.domain.ports.marker_verifier import MarkerVerifierProtocol

logger = structlog.get_logger()

ERROR_REFERENCE_MISMATCH: str = "arrival does not reference this exit"
ERROR_ORDERING: str = "arrival precedes departure"


def check_continuity(
    exit_marker: ExitMarker, arrival_marker: ArrivalMarker
) -> ContinuityResult:
    """Check reference integrity and ordering only.

    No signature is verified here, so callers that have already verified
    the EXIT marker can reuse that result.
    """
    errors: list[str] = []
    if arrival_marker.exit_marker_id != exit_marker.id:
        errors.append(ERROR_REFERENCE_MISMATCH)
    if arrival_marker.timestamp < exit_marker.timestamp:
        errors.append(ERROR_ORDERING)
    return ContinuityResult(valid=not errors, errors=tuple(errors))


class TransferVerifier:
    """Verifies EXIT -> ARRIVAL transfers."""

    def __init__(self, verifier: MarkerVerifierProtocol) -> None:
        self._verifier = verifier

    def verify_transfer(
        self, exit_marker: ExitMarker, arrival_marker: ArrivalMarker
    ) -> TransferRecord:
        """Verify both markers and the link between them.

        Args:
            exit_marker: The departure marker.
            arrival_marker: The admission marker claiming to follow it.

        Returns:
            TransferRecord; errors lists signature failures first, then
            continuity failures.
        """
        errors: list[str] = []

        exit_check = self._verifier.verify(exit_marker)
        if not exit_check.valid:
            errors.append(
                "exit marker signature invalid: " + "; ".join(exit_check.errors)
            )

        arrival_check = self._verifier.verify(arrival_marker)
        if not arrival_check.valid:
            errors.append(
                "arrival marker signature invalid: " + "; ".join(arrival_check.errors)
            )

        continuity = check_continuity(exit_marker, arrival_marker)
        errors.extend(continuity.errors)

        record = TransferRecord(
            verified=not errors,
            transfer_time=arrival_marker.timestamp - exit_marker.timestamp,
            errors=tuple(errors),
            continuity=continuity,
        )
        logger.info(
            "transfer_verified",
            exit_marker_id=exit_marker.id,
            arrival_marker_id=arrival_marker.id,
            verified=record.verified,
            continuity_valid=continuity.valid,
            errors=list(record.errors),
        )
        return record
