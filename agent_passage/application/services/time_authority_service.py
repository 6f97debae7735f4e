"""Time Authority Service - the production clock.

Returns timezone-aware UTC timestamps. Tests substitute
FakeTimeAuthority from tests/helpers.
"""

from datetime import datetime, timezone

from agent_passage.application.ports.time_authority import TimeAuthorityProtocol


class TimeAuthorityService(TimeAuthorityProtocol):
    """Wall-clock time authority (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
