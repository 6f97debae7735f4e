"""Session identity cache.

Holds at most one signing identity per session so markers signed within
one session share a DID and keys are not regenerated on every call.

The slot is guarded by a lock: "check absent, then assign" is a single
step even if a transport handles one session's requests concurrently.
Nothing is persisted; clear() drops the identity when the session ends.
"""

from __future__ import annotations

import threading

import structlog

from agent_passage.application.ports.signer import SignerProtocol
from agent_passage.domain.models.identity import Identity
from agent_passage.infrastructure.observability.session import generate_session_id

logger = structlog.get_logger()


class SessionIdentityCache:
    """One identity slot, owned by one session.

    Attributes:
        session_id: Identifier of the owning session (for logs).
    """

    def __init__(self, session_id: str | None = None) -> None:
        self.session_id = session_id or generate_session_id()
        self._identity: Identity | None = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Identity | None:
        return self._identity

    @property
    def did(self) -> str | None:
        """DID of the cached identity, if any."""
        identity = self._identity
        return identity.did if identity is not None else None

    def get_or_create(self, signer: SignerProtocol) -> Identity:
        """Return the session identity, generating it on first use.

        Args:
            signer: Signature collaborator used to generate the identity.

        Returns:
            The session's identity (same object on every later call).
        """
        with self._lock:
            if self._identity is None:
                self._identity = signer.generate_identity()
                logger.info(
                    "session_identity_created",
                    session=self.session_id,
                    did=self._identity.did,
                )
            return self._identity

    def replace(self, identity: Identity) -> None:
        """Make identity the session identity, discarding any previous one."""
        with self._lock:
            previous = self._identity
            self._identity = identity
        logger.info(
            "session_identity_replaced",
            session=self.session_id,
            did=identity.did,
            previous_did=previous.did if previous is not None else None,
        )

    def clear(self) -> None:
        """Drop the identity; called when the session ends."""
        with self._lock:
            had_identity = self._identity is not None
            self._identity = None
        if had_identity:
            logger.info("session_identity_cleared", session=self.session_id)
