"""Passage deployment configuration.

Deployment-time settings, read from environment variables. This is the
only place a stricter-than-default admission policy can come from.

Environment Variables:
- PASSAGE_SERVER_POLICY: Preset enforced for every admission
  (OPEN_DOOR | STRICT | EMERGENCY_ONLY). Unset = callers may choose,
  default OPEN_DOOR. An unknown name fails loading.
- PASSAGE_ENVIRONMENT: "production" (JSON logs) or "development"
  (console logs). Default: production.
- LOG_LEVEL: Log level name. Default: INFO.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from agent_passage.domain.errors import UnknownPolicyError
from agent_passage.domain.services.policy_resolution import PRESET_NAMES, PolicyName

SERVER_POLICY_ENV = "PASSAGE_SERVER_POLICY"
ENVIRONMENT_ENV = "PASSAGE_ENVIRONMENT"
LOG_LEVEL_ENV = "LOG_LEVEL"

VALID_ENVIRONMENTS: frozenset[str] = frozenset({"production", "development"})


@dataclass(frozen=True)
class PassageConfig:
    """Configuration for a passage deployment.

    Attributes:
        server_policy: Enforced preset, or None to let callers choose.
        environment: Logging environment ("production" or "development").
        log_level: Log level name.
    """

    server_policy: PolicyName | None = None
    environment: str = "production"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(VALID_ENVIRONMENTS)}, "
                f"got {self.environment!r}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"log_level is not a logging level: {self.log_level!r}")

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> PassageConfig:
        """Create config from environment variables with defaults.

        Args:
            environ: Mapping to read instead of os.environ (tests).

        Returns:
            PassageConfig with values from the environment or defaults.

        Raises:
            UnknownPolicyError: If PASSAGE_SERVER_POLICY is set to a name
                that is not a preset. A misspelled policy never degrades
                to "callers choose".
        """
        env = os.environ if environ is None else environ

        server_policy: PolicyName | None = None
        raw_policy = env.get(SERVER_POLICY_ENV, "").strip()
        if raw_policy:
            try:
                server_policy = PolicyName(raw_policy)
            except ValueError:
                raise UnknownPolicyError(raw_policy, known=PRESET_NAMES) from None

        return cls(
            server_policy=server_policy,
            environment=env.get(ENVIRONMENT_ENV, "production").strip().lower(),
            log_level=env.get(LOG_LEVEL_ENV, "INFO").strip().upper(),
        )


# Development config: console logs, callers choose the policy
DEVELOPMENT_PASSAGE_CONFIG = PassageConfig(environment="development", log_level="DEBUG")
