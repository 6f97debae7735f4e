"""Domain errors for Agent Passage.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from PassageError.
"""

from agent_passage.domain.errors.decode import DecodeError
from agent_passage.domain.errors.policy import UnknownPolicyError
from agent_passage.domain.errors.signature import SignatureError

__all__: list[str] = ["DecodeError", "UnknownPolicyError", "SignatureError"]
