"""Marker decoding errors.

Raised by the marker codec when interchange input cannot be turned into a
marker: invalid JSON, missing or malshaped fields, or an exit type outside
the closed enum. Decoding checks shape only; whether the id matches the
content is a verification concern.
"""

from __future__ import annotations

from typing import Any

from agent_passage.domain.exceptions import PassageError


class DecodeError(PassageError):
    """Raised when marker input is malformed.

    Decode failures are surfaced immediately; a malformed marker is never
    defaulted into a partially populated one.

    Attributes:
        marker_kind: "exit" or "arrival".
        field_errors: Per-field validation messages, when available.
    """

    def __init__(
        self,
        message: str = "Malformed marker",
        *,
        marker_kind: str = "",
        field_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize with decode failure details.

        Args:
            message: Error description.
            marker_kind: Which marker kind was being decoded.
            field_errors: Structured field errors (location + message).
        """
        if marker_kind:
            message = f"{marker_kind} marker: {message}"
        super().__init__(message)
        self.marker_kind = marker_kind
        self.field_errors = field_errors or []
