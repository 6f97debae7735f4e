"""Passage service: the operations exposed to a request/response boundary.

One PassageService instance serves one session. It owns that session's
identity slot and enforces the deployment's server policy on every
admission operation.

Operations:
- generate_identity: new session identity, DID returned
- quick_exit: fresh identity, create + sign + verify an EXIT marker
- create_exit_marker: create + sign with the session identity
- verify_exit_marker: decode + verify a submitted EXIT marker
- evaluate_admission: policy decision only
- verify_and_admit: policy decision, then a signed ARRIVAL marker
- verify_transfer: authenticity + continuity of an EXIT/ARRIVAL pair
- list_admission_policies: the preset table

verify_and_admit evaluates once at a single instant: the EXIT marker is
verified at most once (by the policy engine) and the arrival timestamp is
that same instant. Continuity of the new pair is computed without a
second signature pass.
"""

from __future__ import annotations

from agent_passage.application.dtos.passage import (
    AdmissionDecisionDTO,
    AdmissionEvaluationDTO,
    ExitMarkerIssuedDTO,
    IdentityDTO,
    MarkerVerificationDTO,
    PolicyListingDTO,
)
from agent_passage.application.ports.time_authority import TimeAuthorityProtocol
from agent_passage.application.services import marker_codec
from agent_passage.application.services.marker_codec import MarkerInput
from agent_passage.application.services.marker_factory import (
    create_arrival_marker,
    create_exit_marker,
)
from agent_passage.application.services.marker_signing import MarkerSigningService
from agent_passage.application.services.session_identity import SessionIdentityCache
from agent_passage.domain.errors import DecodeError
from agent_passage.domain.models.admission import AdmissionPolicy
from agent_passage.domain.models.exit_marker import (
    ExitType,
    LineageModule,
    StateSnapshotModule,
)
from agent_passage.domain.models.transfer import TransferRecord
from agent_passage.domain.services.admission_policy_engine import AdmissionPolicyEngine
from agent_passage.domain.services.policy_resolution import (
    PRESETS,
    ServerPolicy,
    resolve_policy,
)
from agent_passage.domain.services.transfer_verifier import (
    TransferVerifier,
    check_continuity,
)
from agent_passage.infrastructure.observability.logging import get_logger_for_service
from agent_passage.infrastructure.observability.session import session_scope


class PassageService:
    """Per-session passage operations.

    Attributes:
        _signing: Marker signing/verification.
        _time: Clock for marker and admission timestamps.
        _session: This session's identity slot.
        _server_policy: Deployment-configured policy, overrides callers.
    """

    def __init__(
        self,
        signing: MarkerSigningService,
        time_authority: TimeAuthorityProtocol,
        *,
        session: SessionIdentityCache | None = None,
        server_policy: ServerPolicy | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            signing: Marker signing service (wraps the signer).
            time_authority: Clock.
            session: Identity slot; a fresh one is created if omitted.
            server_policy: Deployment policy or preset name. Validated
                here so a misconfigured deployment fails at startup.

        Raises:
            UnknownPolicyError: If server_policy names no preset.
        """
        self._signing = signing
        self._time = time_authority
        self._session = session or SessionIdentityCache()
        self._server_policy: AdmissionPolicy | None = (
            resolve_policy(server_policy) if server_policy is not None else None
        )
        self._engine = AdmissionPolicyEngine(signing)
        self._transfer_verifier = TransferVerifier(signing)
        self._log = get_logger_for_service(self.__class__.__name__)

    @property
    def session(self) -> SessionIdentityCache:
        return self._session

    @property
    def server_policy(self) -> AdmissionPolicy | None:
        return self._server_policy

    # =========================================================================
    # EXIT operations
    # =========================================================================

    def generate_identity(self) -> IdentityDTO:
        """Generate a new identity and store it for this session."""
        with session_scope(self._session.session_id):
            identity = self._signing.signer.generate_identity()
            self._session.replace(identity)
            return IdentityDTO(did=identity.did)

    def quick_exit(
        self,
        origin: str,
        exit_type: ExitType = ExitType.VOLUNTARY,
        reason: str | None = None,
    ) -> ExitMarkerIssuedDTO:
        """One-shot departure with a fresh identity.

        The new identity becomes the session identity and is the marker
        subject; origin records the platform being left.
        """
        with session_scope(self._session.session_id):
            identity = self._signing.signer.generate_identity()
            self._session.replace(identity)

            now = self._time.now()
            marker = create_exit_marker(
                subject=identity.did,
                origin=origin,
                exit_type=exit_type,
                timestamp=now,
                reason=reason,
            )
            signed = self._signing.sign_exit_marker(marker, identity, created=now)
            verification = self._signing.verify(signed)

            self._log.info(
                "exit_marker_issued",
                marker_id=signed.id,
                exit_type=signed.exit_type.value,
                signer=identity.did,
                verified=verification.valid,
            )
            return ExitMarkerIssuedDTO(
                marker=marker_codec.to_dict(signed),
                signer_did=identity.did,
                verified=verification.valid,
            )

    def create_exit_marker(
        self,
        origin: str,
        exit_type: ExitType = ExitType.VOLUNTARY,
        reason: str | None = None,
        lineage: LineageModule | None = None,
        state_snapshot: StateSnapshotModule | None = None,
    ) -> ExitMarkerIssuedDTO:
        """Create and sign a departure marker with the session identity.

        The identity is generated on first use. origin is both the subject
        and the origin of the marker.
        """
        with session_scope(self._session.session_id):
            identity = self._session.get_or_create(self._signing.signer)

            now = self._time.now()
            marker = create_exit_marker(
                subject=origin,
                origin=origin,
                exit_type=exit_type,
                timestamp=now,
                reason=reason,
                lineage=lineage,
                state_snapshot=state_snapshot,
            )
            signed = self._signing.sign_exit_marker(marker, identity, created=now)

            self._log.info(
                "exit_marker_issued",
                marker_id=signed.id,
                exit_type=signed.exit_type.value,
                signer=identity.did,
            )
            return ExitMarkerIssuedDTO(
                marker=marker_codec.to_dict(signed), signer_did=identity.did
            )

    def verify_exit_marker(self, marker_json: MarkerInput) -> MarkerVerificationDTO:
        """Verify a submitted EXIT marker.

        Undecodable input yields valid=False with the decode error
        message instead of raising DecodeError.
        """
        with session_scope(self._session.session_id):
            try:
                marker = marker_codec.decode_exit(marker_json)
            except DecodeError as e:
                self._log.warning("exit_marker_undecodable", error=str(e))
                return MarkerVerificationDTO(valid=False, error=str(e))

            verification = self._signing.verify(marker)
            return MarkerVerificationDTO(
                valid=verification.valid,
                id=marker.id,
                subject=marker.subject,
                exit_type=marker.exit_type.value,
                timestamp=marker_codec.format_timestamp(marker.timestamp),
                errors=verification.errors,
            )

    # =========================================================================
    # ENTRY operations
    # =========================================================================

    def evaluate_admission(
        self, marker_json: MarkerInput, policy: str | None = None
    ) -> AdmissionEvaluationDTO:
        """Check a marker against the governing policy, no arrival minted.

        Args:
            marker_json: EXIT marker (JSON text or parsed object).
            policy: Caller-requested preset name; ignored when a server
                policy is configured.

        Raises:
            DecodeError: If the marker is malformed.
            UnknownPolicyError: If the requested name is not a preset.
        """
        with session_scope(self._session.session_id):
            effective = resolve_policy(self._server_policy, policy)
            exit_marker = marker_codec.decode_exit(marker_json)
            result = self._engine.evaluate(exit_marker, effective, now=self._time.now())
            return AdmissionEvaluationDTO(
                admitted=result.admitted,
                reasons=result.reasons,
                policy=effective.name,
            )

    def verify_and_admit(
        self,
        marker_json: MarkerInput,
        destination: str,
        policy: str | None = None,
    ) -> AdmissionDecisionDTO:
        """Evaluate admission and, if admitted, mint a signed ARRIVAL.

        The session identity signs the arrival on behalf of the receiving
        platform.

        Raises:
            DecodeError: If the marker is malformed.
            UnknownPolicyError: If the requested name is not a preset.
        """
        with session_scope(self._session.session_id):
            effective = resolve_policy(self._server_policy, policy)
            exit_marker = marker_codec.decode_exit(marker_json)

            now = self._time.now()
            admission = self._engine.evaluate(exit_marker, effective, now=now)
            if not admission.admitted:
                return AdmissionDecisionDTO(
                    admitted=False,
                    policy=effective.name,
                    exit_marker_id=exit_marker.id,
                    reasons=admission.reasons,
                )

            identity = self._session.get_or_create(self._signing.signer)
            arrival = create_arrival_marker(
                exit_marker, destination=destination, timestamp=now
            )
            arrival = self._signing.sign_arrival_marker(arrival, identity, created=now)
            continuity = check_continuity(exit_marker, arrival)

            self._log.info(
                "arrival_marker_issued",
                arrival_marker_id=arrival.id,
                exit_marker_id=exit_marker.id,
                destination=destination,
                policy=effective.name,
                continuity_valid=continuity.valid,
            )
            return AdmissionDecisionDTO(
                admitted=True,
                policy=effective.name,
                exit_marker_id=exit_marker.id,
                arrival_marker=marker_codec.to_dict(arrival),
                continuity=continuity,
            )

    def verify_transfer(
        self, exit_marker_json: MarkerInput, arrival_marker_json: MarkerInput
    ) -> TransferRecord:
        """Verify a complete EXIT -> ARRIVAL transfer.

        Raises:
            DecodeError: If either marker is malformed.
        """
        with session_scope(self._session.session_id):
            exit_marker = marker_codec.decode_exit(exit_marker_json)
            arrival_marker = marker_codec.decode_arrival(arrival_marker_json)
            return self._transfer_verifier.verify_transfer(exit_marker, arrival_marker)

    def list_admission_policies(self) -> PolicyListingDTO:
        """List the preset policies and their configuration."""
        return PolicyListingDTO(
            policies={name.value: policy.to_dict() for name, policy in PRESETS.items()}
        )

    def end_session(self) -> None:
        """Drop the session identity."""
        with session_scope(self._session.session_id):
            self._session.clear()
