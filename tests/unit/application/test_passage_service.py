"""Unit tests for PassageService.

Exercises the full operation set with real Ed25519 keys and a frozen
clock: issuing markers, verifying them, admission under caller and server
policies, and transfer verification.
"""

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from agent_passage.application.dtos.passage import IDENTITY_STORED_MESSAGE
from agent_passage.application.services import marker_codec
from agent_passage.application.services.marker_signing import MarkerSigningService
from agent_passage.application.services.passage_service import PassageService
from agent_passage.application.services.session_identity import SessionIdentityCache
from agent_passage.domain.errors import DecodeError, UnknownPolicyError
from agent_passage.domain.models.exit_marker import (
    ExitType,
    LineageModule,
    StateSnapshotModule,
)
from agent_passage.domain.services.policy_resolution import PolicyName
from agent_passage.domain.services.transfer_verifier import ERROR_REFERENCE_MISMATCH
from tests.helpers import DEFAULT_TEST_TIME, FakeTimeAuthority


def _strict_ready_marker(service: PassageService) -> str:
    issued = service.create_exit_marker(
        "did:example:agent",
        lineage=LineageModule(predecessor="did:example:agent-v1"),
        state_snapshot=StateSnapshotModule(state_hash="ab" * 32),
    )
    return json.dumps(issued.marker)


class TestGenerateIdentity:
    """Tests for generate_identity()."""

    def test_returns_did_only(self, passage_service: PassageService) -> None:
        result = passage_service.generate_identity()

        assert result.did.startswith("did:key:z")
        assert result.to_dict() == {"did": result.did, "message": IDENTITY_STORED_MESSAGE}

    def test_becomes_session_identity(self, passage_service: PassageService) -> None:
        result = passage_service.generate_identity()

        assert passage_service.session.did == result.did

    def test_replaces_previous_identity(self, passage_service: PassageService) -> None:
        first = passage_service.generate_identity()
        second = passage_service.generate_identity()

        assert first.did != second.did
        assert passage_service.session.did == second.did


class TestQuickExit:
    """Tests for quick_exit()."""

    def test_signed_and_verified(self, passage_service: PassageService) -> None:
        result = passage_service.quick_exit(
            "did:example:platform", exit_type=ExitType.EMERGENCY, reason="fire"
        )

        assert result.verified is True
        assert result.marker["subject"] == result.signer_did
        assert result.marker["origin"] == "did:example:platform"
        assert result.marker["exitType"] == "Emergency"
        assert result.marker["reason"] == "fire"
        assert result.marker["proof"]["verificationMethod"] == result.signer_did

    def test_uses_fresh_identity(self, passage_service: PassageService) -> None:
        existing = passage_service.generate_identity()

        result = passage_service.quick_exit("did:example:platform")

        assert result.signer_did != existing.did
        assert passage_service.session.did == result.signer_did

    def test_timestamp_from_time_authority(self, passage_service: PassageService) -> None:
        result = passage_service.quick_exit("did:example:platform")

        assert result.marker["timestamp"] == marker_codec.format_timestamp(DEFAULT_TEST_TIME)


class TestCreateExitMarker:
    """Tests for create_exit_marker()."""

    def test_reuses_session_identity(self, passage_service: PassageService) -> None:
        first = passage_service.create_exit_marker("did:example:agent")
        second = passage_service.create_exit_marker("did:example:agent", reason="again")

        assert first.signer_did == second.signer_did
        assert first.verified is None

    def test_origin_is_subject_and_origin(self, passage_service: PassageService) -> None:
        result = passage_service.create_exit_marker("did:example:agent")

        assert result.marker["subject"] == "did:example:agent"
        assert result.marker["origin"] == "did:example:agent"

    def test_modules_included(self, passage_service: PassageService) -> None:
        marker = json.loads(_strict_ready_marker(passage_service))

        assert marker["lineage"]["predecessor"] == "did:example:agent-v1"
        assert marker["stateSnapshot"]["stateHash"] == "ab" * 32

    def test_to_dict(self, passage_service: PassageService) -> None:
        result = passage_service.create_exit_marker("did:example:agent")

        assert set(result.to_dict()) == {"marker", "signerDid"}


class TestVerifyExitMarker:
    """Tests for verify_exit_marker()."""

    def test_valid_marker(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")

        result = passage_service.verify_exit_marker(json.dumps(issued.marker))

        assert result.valid is True
        assert result.to_dict() == {
            "valid": True,
            "subject": issued.signer_did,
            "exitType": "Voluntary",
            "timestamp": issued.marker["timestamp"],
            "id": issued.marker["id"],
            "errors": [],
        }

    def test_tampered_marker(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")
        tampered = dict(issued.marker, origin="did:example:elsewhere")

        result = passage_service.verify_exit_marker(tampered)

        assert result.valid is False
        assert "signature does not verify" in result.errors

    def test_malformed_input_reported_not_raised(
        self, passage_service: PassageService
    ) -> None:
        result = passage_service.verify_exit_marker("{broken")

        assert result.valid is False
        assert result.is_error is True
        assert set(result.to_dict()) == {"valid", "error"}

    def test_blank_state_hash_reported_not_raised(
        self, passage_service: PassageService
    ) -> None:
        issued = passage_service.quick_exit("did:example:platform")
        malformed = dict(issued.marker, stateSnapshot={"stateHash": "   "})

        result = passage_service.verify_exit_marker(malformed)

        assert result.valid is False
        assert result.is_error is True


class TestEvaluateAdmission:
    """Tests for evaluate_admission()."""

    def test_default_policy_is_open_door(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")

        result = passage_service.evaluate_admission(json.dumps(issued.marker))

        assert result.admitted is True
        assert result.policy == "OPEN_DOOR"

    def test_strict_admits_fresh_marker_with_modules(
        self, passage_service: PassageService
    ) -> None:
        result = passage_service.evaluate_admission(
            _strict_ready_marker(passage_service), "STRICT"
        )

        assert result.to_dict() == {"admitted": True, "reasons": [], "policy": "STRICT"}

    def test_strict_rejects_48h_old_marker(
        self, passage_service: PassageService, fake_time_authority: FakeTimeAuthority
    ) -> None:
        marker_json = _strict_ready_marker(passage_service)
        fake_time_authority.advance(delta=timedelta(hours=48))

        result = passage_service.evaluate_admission(marker_json, "STRICT")

        assert result.admitted is False
        assert result.reasons == ("marker expired",)

    def test_emergency_exit(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit(
            "did:example:platform", exit_type=ExitType.EMERGENCY
        )
        marker_json = json.dumps(issued.marker)

        emergency = passage_service.evaluate_admission(marker_json, "EMERGENCY_ONLY")
        strict = passage_service.evaluate_admission(marker_json, "STRICT")

        assert emergency.admitted is True
        assert strict.admitted is False
        assert "exit type not permitted" in strict.reasons

    def test_unknown_policy_raises(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")

        with pytest.raises(UnknownPolicyError):
            passage_service.evaluate_admission(json.dumps(issued.marker), "LAX")

    def test_malformed_marker_raises(self, passage_service: PassageService) -> None:
        with pytest.raises(DecodeError):
            passage_service.evaluate_admission('{"exitType": "Voluntary"}')

    def test_blank_state_hash_raises_decode_error(
        self, passage_service: PassageService
    ) -> None:
        issued = passage_service.quick_exit("did:example:platform")
        malformed = dict(issued.marker, stateSnapshot={"stateHash": " "})

        with pytest.raises(DecodeError, match="stateHash"):
            passage_service.evaluate_admission(malformed)


class TestServerPolicy:
    """A configured server policy overrides the caller."""

    @pytest.fixture
    def emergency_only_service(
        self,
        signing_service: MarkerSigningService,
        fake_time_authority: FakeTimeAuthority,
    ) -> PassageService:
        return PassageService(
            signing_service, fake_time_authority, server_policy=PolicyName.EMERGENCY_ONLY
        )

    def test_caller_cannot_weaken_policy(self, emergency_only_service: PassageService) -> None:
        issued = emergency_only_service.quick_exit("did:example:platform")

        result = emergency_only_service.evaluate_admission(
            json.dumps(issued.marker), "OPEN_DOOR"
        )

        assert result.policy == "EMERGENCY_ONLY"
        assert result.admitted is False

    def test_invalid_caller_name_ignored(self, emergency_only_service: PassageService) -> None:
        issued = emergency_only_service.quick_exit(
            "did:example:platform", exit_type=ExitType.EMERGENCY
        )

        result = emergency_only_service.evaluate_admission(
            json.dumps(issued.marker), "NOT_A_POLICY"
        )

        assert result.admitted is True

    def test_unknown_server_policy_fails_construction(
        self,
        signing_service: MarkerSigningService,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        with pytest.raises(UnknownPolicyError):
            PassageService(signing_service, fake_time_authority, server_policy="LAX")

    def test_server_policy_exposed(self, emergency_only_service: PassageService) -> None:
        assert emergency_only_service.server_policy is not None
        assert emergency_only_service.server_policy.name == "EMERGENCY_ONLY"


class TestVerifyAndAdmit:
    """Tests for verify_and_admit()."""

    def test_admitted_mints_signed_arrival(
        self, passage_service: PassageService, fake_time_authority: FakeTimeAuthority
    ) -> None:
        issued = passage_service.quick_exit("did:example:platform")
        fake_time_authority.advance(seconds=90)

        decision = passage_service.verify_and_admit(
            json.dumps(issued.marker), "did:example:new-home"
        )

        assert decision.admitted is True
        assert decision.exit_marker_id == issued.marker["id"]
        assert decision.continuity is not None and decision.continuity.valid
        arrival = decision.arrival_marker
        assert arrival is not None
        assert arrival["exitMarkerId"] == issued.marker["id"]
        assert arrival["subject"] == issued.marker["subject"]
        assert arrival["destination"] == "did:example:new-home"
        assert arrival["timestamp"] == marker_codec.format_timestamp(
            DEFAULT_TEST_TIME + timedelta(seconds=90)
        )
        assert arrival["proof"]["verificationMethod"] == passage_service.session.did

    def test_rejected_has_no_arrival(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")

        decision = passage_service.verify_and_admit(
            json.dumps(issued.marker), "did:example:new-home", "EMERGENCY_ONLY"
        )

        assert decision.admitted is False
        assert decision.arrival_marker is None
        assert decision.to_dict() == {
            "admitted": False,
            "reasons": ["exit type not permitted"],
            "policy": "EMERGENCY_ONLY",
            "exitMarkerId": issued.marker["id"],
        }

    def test_minted_pair_verifies_as_transfer(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")
        decision = passage_service.verify_and_admit(
            json.dumps(issued.marker), "did:example:new-home"
        )
        assert decision.arrival_marker is not None

        record = passage_service.verify_transfer(issued.marker, decision.arrival_marker)

        assert record.verified is True
        assert record.transfer_time == timedelta(0)

    def test_destination_required(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")

        with pytest.raises(ValueError, match="destination"):
            passage_service.verify_and_admit(json.dumps(issued.marker), " ")


class TestVerifyTransfer:
    """Tests for verify_transfer()."""

    def test_arrival_for_other_exit(self, passage_service: PassageService) -> None:
        first = passage_service.quick_exit("did:example:platform")
        second = passage_service.quick_exit("did:example:platform", reason="second")
        decision = passage_service.verify_and_admit(
            json.dumps(first.marker), "did:example:new-home"
        )
        assert decision.arrival_marker is not None

        record = passage_service.verify_transfer(second.marker, decision.arrival_marker)

        assert record.verified is False
        assert record.continuity.errors == (ERROR_REFERENCE_MISMATCH,)

    def test_wrong_kinds_raise(self, passage_service: PassageService) -> None:
        issued = passage_service.quick_exit("did:example:platform")

        with pytest.raises(DecodeError):
            passage_service.verify_transfer(issued.marker, issued.marker)


class TestPoliciesAndSession:
    """Tests for list_admission_policies() and end_session()."""

    def test_lists_presets(self, passage_service: PassageService) -> None:
        listing = passage_service.list_admission_policies().to_dict()

        assert list(listing["policies"]) == ["OPEN_DOOR", "STRICT", "EMERGENCY_ONLY"]
        assert listing["policies"]["STRICT"]["maxAgeSeconds"] == 86400

    def test_end_session_clears_identity(self, passage_service: PassageService) -> None:
        passage_service.generate_identity()

        passage_service.end_session()

        assert passage_service.session.current is None

    def test_shared_session_cache(
        self,
        signing_service: MarkerSigningService,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        session = SessionIdentityCache("session-42")
        service = PassageService(signing_service, fake_time_authority, session=session)

        result = service.generate_identity()

        assert session.did == result.did
