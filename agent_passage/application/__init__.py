"""Application layer for Agent Passage.

Orchestrates the domain services: codec, signing, session identity and
the passage operations exposed to a request/response boundary.
"""
