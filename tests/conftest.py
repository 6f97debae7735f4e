"""
Pytest configuration and shared fixtures for Agent Passage tests.

Testing Standards:
- Unit tests go in tests/unit/, mirroring the package layers
- Time-dependent tests use FakeTimeAuthority, never the wall clock
- Real Ed25519 keys are cheap; signing tests use Ed25519Signer directly
"""

from collections.abc import Iterator

import pytest
import structlog

from agent_passage.application.services.marker_signing import MarkerSigningService
from agent_passage.application.services.passage_service import PassageService
from agent_passage.domain.models.identity import Identity
from agent_passage.infrastructure.adapters.security import Ed25519Signer
from tests.helpers import FakeTimeAuthority


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Restore structlog defaults so one test's configuration never leaks."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Time authority frozen at 2026-01-01T00:00:00Z."""
    return FakeTimeAuthority()


@pytest.fixture
def signer() -> Ed25519Signer:
    return Ed25519Signer()


@pytest.fixture
def identity(signer: Ed25519Signer) -> Identity:
    return signer.generate_identity()


@pytest.fixture
def signing_service(signer: Ed25519Signer) -> MarkerSigningService:
    return MarkerSigningService(signer)


@pytest.fixture
def passage_service(
    signing_service: MarkerSigningService, fake_time_authority: FakeTimeAuthority
) -> PassageService:
    """PassageService with no server policy (callers choose)."""
    return PassageService(signing_service, fake_time_authority)


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from agent_passage import __version__

    return __version__
