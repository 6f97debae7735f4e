"""Unit tests for admission policy resolution.

Precedence: server policy, then caller name, then OPEN_DOOR. Unknown
names raise instead of defaulting.
"""

from __future__ import annotations

import pytest

from agent_passage.domain.errors import UnknownPolicyError
from agent_passage.domain.models.admission import (
    EMERGENCY_ONLY,
    OPEN_DOOR,
    STRICT,
    AdmissionPolicy,
)
from agent_passage.domain.services.policy_resolution import (
    PRESET_NAMES,
    PRESETS,
    PolicyName,
    lookup_policy,
    resolve_policy,
)


class TestLookupPolicy:
    """Tests for lookup_policy()."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("OPEN_DOOR", OPEN_DOOR), ("STRICT", STRICT), ("EMERGENCY_ONLY", EMERGENCY_ONLY)],
    )
    def test_preset_names_resolve(self, name: str, expected: AdmissionPolicy) -> None:
        assert lookup_policy(name) is expected

    def test_enum_member_resolves(self) -> None:
        assert lookup_policy(PolicyName.STRICT) is STRICT

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(UnknownPolicyError) as exc_info:
            lookup_policy("LAX")

        assert exc_info.value.policy_name == "LAX"
        assert exc_info.value.known == PRESET_NAMES
        assert "LAX" in str(exc_info.value)

    def test_lookup_is_case_sensitive(self) -> None:
        with pytest.raises(UnknownPolicyError):
            lookup_policy("strict")

    def test_preset_table_is_closed(self) -> None:
        assert set(PRESETS) == set(PolicyName)
        assert PRESET_NAMES == ("OPEN_DOOR", "STRICT", "EMERGENCY_ONLY")


class TestResolvePolicy:
    """Tests for resolve_policy() precedence."""

    def test_default_is_open_door(self) -> None:
        """No server policy and no caller name never means "no policy"."""
        assert resolve_policy() is OPEN_DOOR

    def test_caller_name_used_without_server_policy(self) -> None:
        assert resolve_policy(None, "STRICT") is STRICT

    def test_server_policy_overrides_caller(self) -> None:
        assert resolve_policy("EMERGENCY_ONLY", "OPEN_DOOR") is EMERGENCY_ONLY

    def test_server_policy_object_used_as_is(self) -> None:
        custom = AdmissionPolicy(name="CUSTOM", max_age_seconds=60)

        assert resolve_policy(custom, "OPEN_DOOR") is custom

    def test_caller_name_not_validated_under_server_policy(self) -> None:
        """The caller cannot influence resolution, not even by failing it."""
        assert resolve_policy(PolicyName.STRICT, "NOT_A_POLICY") is STRICT

    def test_unknown_caller_name_raises(self) -> None:
        with pytest.raises(UnknownPolicyError):
            resolve_policy(None, "NOT_A_POLICY")

    def test_unknown_server_name_raises(self) -> None:
        with pytest.raises(UnknownPolicyError):
            resolve_policy("NOT_A_POLICY")

    def test_custom_default(self) -> None:
        assert resolve_policy(default=STRICT) is STRICT
