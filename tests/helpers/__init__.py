"""Test helpers for Agent Passage tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests

Usage:
    from tests.helpers import FakeTimeAuthority
"""

from tests.helpers.fake_time_authority import DEFAULT_TEST_TIME, FakeTimeAuthority

__all__ = ["DEFAULT_TEST_TIME", "FakeTimeAuthority"]
