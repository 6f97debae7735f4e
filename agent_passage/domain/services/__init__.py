"""Domain services for Agent Passage."""

from agent_passage.domain.services.admission_policy_engine import AdmissionPolicyEngine
from agent_passage.domain.services.policy_resolution import (
    PRESETS,
    PolicyName,
    lookup_policy,
    resolve_policy,
)
from agent_passage.domain.services.transfer_verifier import (
    TransferVerifier,
    check_continuity,
)

__all__ = [
    "AdmissionPolicyEngine",
    "PRESETS",
    "PolicyName",
    "TransferVerifier",
    "check_continuity",
    "lookup_policy",
    "resolve_policy",
]
