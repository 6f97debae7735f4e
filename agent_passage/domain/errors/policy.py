"""Admission policy lookup errors."""

from __future__ import annotations

from agent_passage.domain.exceptions import PassageError


class UnknownPolicyError(PassageError):
    """Raised when a policy name is not one of the presets.

    An unrecognized name is never treated as "no restriction". Callers
    and deployment configuration alike get this error instead of a
    silently substituted default.

    Attributes:
        policy_name: The name that failed to resolve.
        known: The preset names that would have been accepted.
    """

    def __init__(self, policy_name: str, known: tuple[str, ...] = ()) -> None:
        """Initialize with the unresolved name.

        Args:
            policy_name: The requested policy name.
            known: Accepted preset names, for the error message.
        """
        message = f"Unknown admission policy: {policy_name!r}"
        if known:
            message = f"{message} (expected one of: {', '.join(known)})"
        super().__init__(message)
        self.policy_name = policy_name
        self.known = known
