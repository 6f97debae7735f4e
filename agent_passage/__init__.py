"""
Agent Passage - verifiable departure and arrival markers for migrating agents

An agent leaving a platform signs an EXIT marker. A receiving platform
evaluates that marker against an admission policy, and on admission mints
a signed ARRIVAL marker that references the EXIT marker it follows.

Guarantees:
- Markers are self-verifying (signer DID embedded in the proof)
- Admission decisions list every failed check, never just the first
- A deployment-configured policy can never be weakened by a caller
- Continuity (reference + ordering) is reported apart from authenticity
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
