"""Admission policy engine.

Evaluates one EXIT marker against one admission policy and returns an
AdmissionResult listing every failed check.

Evaluation order (fixed, failures accumulate, no short-circuit):
1. Signature, if the policy requires a verified departure
2. Exit type, if the policy restricts exit types
3. Age, if the policy bounds marker age
4. Required modules, in sorted module-name order

The engine reads no clock: `now` is an argument, so one admission
request can use a single instant end to end.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from agent_passage.domain.models.admission import AdmissionPolicy, AdmissionResult
from agent_passage.domain.models.exit_marker import ExitMarker, ExitType
from agent_passage.domain.ports.marker_verifier import MarkerVerifierProtocol

logger = structlog.get_logger()

REASON_SIGNATURE_INVALID: str = "signature invalid"
REASON_EXIT_TYPE: str = "exit type not permitted"
REASON_EXPIRED: str = "marker expired"
REASON_MISSING_MODULE: str = "missing required module: {name}"


def exit_type_permitted(exit_type: ExitType, policy: AdmissionPolicy) -> bool:
    """Check an exit type against a policy's allowed set.

    An empty allowed set permits every exit type.
    """
    if not policy.allowed_exit_types:
        return True
    return ExitType(exit_type) in policy.allowed_exit_types


def marker_age_seconds(marker: ExitMarker, now: datetime) -> float:
    return (now - marker.timestamp).total_seconds()


class AdmissionPolicyEngine:
    """Evaluates EXIT markers against admission policies.

    Not being admitted is an expected outcome and is returned as data;
    evaluate() does not raise for a failing marker.

    Example:
        >>> engine = AdmissionPolicyEngine(verifier)
        >>> result = engine.evaluate(marker, STRICT, now=now)
        >>> result.admitted, result.reasons
        (False, ('marker expired',))
    """

    def __init__(self, verifier: MarkerVerifierProtocol) -> None:
        """Initialize the engine.

        Args:
            verifier: Checks marker proofs when a policy requires it.
        """
        self._verifier = verifier

    def evaluate(
        self, exit_marker: ExitMarker, policy: AdmissionPolicy, *, now: datetime
    ) -> AdmissionResult:
        """Evaluate an EXIT marker under a policy.

        Args:
            exit_marker: The departing agent's marker.
            policy: The admission policy to apply.
            now: Evaluation instant (timezone-aware).

        Returns:
            AdmissionResult with every failed check in evaluation order.
        """
        reasons: list[str] = []

        if policy.require_verified_departure:
            verification = self._verifier.verify(exit_marker)
            if not verification.valid:
                reasons.append(REASON_SIGNATURE_INVALID)

        if not exit_type_permitted(exit_marker.exit_type, policy):
            reasons.append(REASON_EXIT_TYPE)

        if (
            policy.max_age_seconds is not None
            and marker_age_seconds(exit_marker, now) > policy.max_age_seconds
        ):
            reasons.append(REASON_EXPIRED)

        for name in sorted(policy.required_modules):
            if not exit_marker.has_module(name):
                reasons.append(REASON_MISSING_MODULE.format(name=name))

        result = AdmissionResult.from_reasons(reasons)
        logger.info(
            "admission_evaluated",
            policy=policy.name,
            marker_id=exit_marker.id,
            exit_type=exit_marker.exit_type.value,
            admitted=result.admitted,
            reasons=list(result.reasons),
        )
        return result
