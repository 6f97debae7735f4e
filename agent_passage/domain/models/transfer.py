"""Transfer record models.

Continuity (does this ARRIVAL causally follow this EXIT?) is reported
separately from authenticity (do both signatures verify?): two authentic
markers can still fail to form one coherent transfer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass(frozen=True)
class ContinuityResult:
    """Reference and ordering checks between an EXIT and an ARRIVAL."""

    valid: bool
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


@dataclass(frozen=True)
class TransferRecord:
    """Outcome of transfer verification.

    Attributes:
        verified: Both signatures verify and continuity holds.
        transfer_time: Arrival timestamp minus departure timestamp.
            Negative when the arrival predates the departure.
        errors: Signature errors followed by continuity errors.
        continuity: Continuity-only sub-result.
    """

    verified: bool
    transfer_time: timedelta
    errors: tuple[str, ...]
    continuity: ContinuityResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "verified": self.verified,
            "transferTime": self.transfer_time.total_seconds(),
            "errors": list(self.errors),
            "continuity": self.continuity.to_dict(),
        }
