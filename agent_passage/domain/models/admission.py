"""Admission policy and admission result models.

Policies are immutable value objects. The three presets below are the
closed set of policies that can be selected by name; see
agent_passage.domain.services.policy_resolution for name lookup.

Presets:
    OPEN_DOOR: only the departure signature must verify.
    STRICT: Voluntary exits only, younger than 24h, with both the
        lineage and stateSnapshot modules present.
    EMERGENCY_ONLY: Emergency exits only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from agent_passage.domain.models.exit_marker import (
    KNOWN_MODULES,
    MODULE_LINEAGE,
    MODULE_STATE_SNAPSHOT,
    ExitType,
)

# Age bound used by STRICT (24 hours)
STRICT_MAX_AGE_SECONDS: int = 24 * 60 * 60


@dataclass(frozen=True)
class AdmissionPolicy:
    """Named admission rule set.

    Attributes:
        name: Policy name (preset name for presets).
        require_verified_departure: The EXIT marker signature must verify.
        allowed_exit_types: Permitted exit types; empty means all.
        max_age_seconds: Upper bound on marker age, None for no bound.
        required_modules: Module wire names that must be present.
        description: Human-readable summary.
    """

    name: str
    require_verified_departure: bool = True
    allowed_exit_types: frozenset[ExitType] = frozenset()
    max_age_seconds: int | None = None
    required_modules: frozenset[str] = frozenset()
    description: str = ""

    def __post_init__(self) -> None:
        """Validate policy options.

        Raises:
            ValueError: If a required module is unknown or the age bound
                is not positive.
        """
        unknown = set(self.required_modules) - KNOWN_MODULES
        if unknown:
            raise ValueError(
                f"Policy {self.name!r} requires unknown modules: {sorted(unknown)}"
            )
        if self.max_age_seconds is not None and self.max_age_seconds <= 0:
            raise ValueError(
                f"max_age_seconds must be positive, got {self.max_age_seconds}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialize configuration for listing (wire names, sorted sets)."""
        config: dict[str, Any] = {
            "description": self.description,
            "requireVerifiedDeparture": self.require_verified_departure,
            "allowedExitTypes": sorted(t.value for t in self.allowed_exit_types),
            "requiredModules": sorted(self.required_modules),
        }
        if self.max_age_seconds is not None:
            config["maxAgeSeconds"] = self.max_age_seconds
        return config


@dataclass(frozen=True)
class AdmissionResult:
    """Admission decision.

    reasons is empty exactly when admitted is True; otherwise it lists
    every failed check in evaluation order.
    """

    admitted: bool
    reasons: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.admitted == bool(self.reasons):
            raise ValueError(
                "AdmissionResult inconsistent: admitted must be True iff reasons is empty"
            )

    @classmethod
    def from_reasons(cls, reasons: list[str] | tuple[str, ...]) -> AdmissionResult:
        return cls(admitted=not reasons, reasons=tuple(reasons))

    def to_dict(self) -> dict[str, Any]:
        return {"admitted": self.admitted, "reasons": list(self.reasons)}


OPEN_DOOR = AdmissionPolicy(
    name="OPEN_DOOR",
    require_verified_departure=True,
    description="Accept everything with a valid signature",
)

STRICT = AdmissionPolicy(
    name="STRICT",
    require_verified_departure=True,
    allowed_exit_types=frozenset({ExitType.VOLUNTARY}),
    max_age_seconds=STRICT_MAX_AGE_SECONDS,
    required_modules=frozenset({MODULE_LINEAGE, MODULE_STATE_SNAPSHOT}),
    description="Voluntary only, <24h old, requires lineage + stateSnapshot modules",
)

EMERGENCY_ONLY = AdmissionPolicy(
    name="EMERGENCY_ONLY",
    require_verified_departure=True,
    allowed_exit_types=frozenset({ExitType.EMERGENCY}),
    description="Accept only emergency exits",
)
