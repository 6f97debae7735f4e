"""Time Authority Protocol - interface for consistent timestamp provisioning.

Services that need "now" inject a TimeAuthorityProtocol implementation
instead of calling datetime.now() directly. Domain services go one step
further and take now as an explicit argument.

Benefits:
1. **Consistency**: One admission request uses one instant throughout
2. **Testability**: Tests inject FakeTimeAuthority for deterministic behavior
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority."""

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC).

        Returns:
            Current datetime with timezone information.
        """
        ...
