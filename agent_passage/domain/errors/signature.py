"""Signature collaborator errors.

Verification failures on a marker are reported as data
(VerificationResult); SignatureError is raised only when a signing
operation cannot be carried out at all.
"""

from __future__ import annotations

from agent_passage.domain.exceptions import PassageError


class SignatureError(PassageError):
    """Raised when signing or key handling fails.

    Attributes:
        verification_method: DID of the key involved, if known.
    """

    def __init__(
        self, message: str = "Signature operation failed", verification_method: str = ""
    ) -> None:
        """Initialize with signature failure details.

        Args:
            message: Error description.
            verification_method: DID of the key involved.
        """
        if verification_method:
            message = f"{message} [{verification_method}]"
        super().__init__(message)
        self.verification_method = verification_method
