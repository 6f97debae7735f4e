"""Admission policy resolution.

Decides which policy governs an admission request. Precedence is fixed:

1. A deployment-configured server policy, if set, is used unconditionally.
   The caller-supplied name is ignored (not even validated).
2. Otherwise a caller-supplied preset name is looked up.
3. Otherwise OPEN_DOOR.

A request-time actor can therefore never select a weaker policy than the
one the deployment configured, and "no policy" never means "no checks".
Unknown names raise UnknownPolicyError instead of defaulting.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

import structlog

from agent_passage.domain.errors import UnknownPolicyError
from agent_passage.domain.models.admission import (
    EMERGENCY_ONLY,
    OPEN_DOOR,
    STRICT,
    AdmissionPolicy,
)

logger = structlog.get_logger()


class PolicyName(str, Enum):
    """Closed set of externally selectable policy names."""

    OPEN_DOOR = "OPEN_DOOR"
    STRICT = "STRICT"
    EMERGENCY_ONLY = "EMERGENCY_ONLY"


PRESETS: dict[PolicyName, AdmissionPolicy] = {
    PolicyName.OPEN_DOOR: OPEN_DOOR,
    PolicyName.STRICT: STRICT,
    PolicyName.EMERGENCY_ONLY: EMERGENCY_ONLY,
}

PRESET_NAMES: tuple[str, ...] = tuple(name.value for name in PolicyName)

ServerPolicy = Union[AdmissionPolicy, PolicyName, str]


def lookup_policy(name: Union[PolicyName, str]) -> AdmissionPolicy:
    """Look up a preset policy by name (case-sensitive).

    Raises:
        UnknownPolicyError: If name is not a preset name.
    """
    try:
        policy_name = PolicyName(name)
    except ValueError:
        raise UnknownPolicyError(str(name), known=PRESET_NAMES) from None
    return PRESETS[policy_name]


def resolve_policy(
    server_policy: ServerPolicy | None = None,
    caller_policy_name: str | None = None,
    default: AdmissionPolicy = OPEN_DOOR,
) -> AdmissionPolicy:
    """Resolve the policy governing an admission request.

    Args:
        server_policy: Deployment-configured policy or preset name.
        caller_policy_name: Preset name supplied with the request.
        default: Policy when neither is given (OPEN_DOOR).

    Returns:
        The governing AdmissionPolicy.

    Raises:
        UnknownPolicyError: If the name that wins precedence is unknown.
    """
    if server_policy is not None:
        if isinstance(server_policy, AdmissionPolicy):
            policy = server_policy
        else:
            policy = lookup_policy(server_policy)
        if caller_policy_name is not None and caller_policy_name != policy.name:
            logger.warning(
                "caller_policy_ignored",
                requested=caller_policy_name,
                enforced=policy.name,
            )
        source = "server"
    elif caller_policy_name is not None:
        policy = lookup_policy(caller_policy_name)
        source = "caller"
    else:
        policy = default
        source = "default"

    logger.debug("policy_resolved", policy=policy.name, source=source)
    return policy
