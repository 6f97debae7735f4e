"""Marker verification result model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of verifying one marker's proof.

    Attributes:
        valid: True if the proof verifies against the marker payload.
        errors: Why verification failed, empty when valid.
    """

    valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def ok(cls) -> VerificationResult:
        return cls(valid=True)

    @classmethod
    def failed(cls, *errors: str) -> VerificationResult:
        return cls(valid=False, errors=errors)
