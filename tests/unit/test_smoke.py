"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. Project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys


class TestPythonVersion:
    """Verify Python version requirements."""

    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestCoreDependencies:
    """Verify core dependencies."""

    def test_pydantic_v2(self) -> None:
        """Pydantic v2 must be installed (marker interchange models)."""
        import pydantic

        major_version = int(pydantic.VERSION.split(".")[0])
        assert major_version >= 2, f"Pydantic v2 required, got {pydantic.VERSION}"

    def test_cryptography_ed25519(self) -> None:
        """cryptography must provide Ed25519 for marker proofs."""
        from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

        assert Ed25519PrivateKey.generate() is not None

    def test_structlog_import(self) -> None:
        import structlog

        assert structlog is not None

    def test_cli_dependencies(self) -> None:
        """typer, rich and python-dotenv back the CLI."""
        import dotenv
        import rich
        import typer

        assert typer is not None
        assert rich is not None
        assert dotenv is not None


class TestTestingFramework:
    """Verify testing dependencies."""

    def test_hypothesis_import(self) -> None:
        """hypothesis must be importable."""
        from hypothesis import given, strategies

        assert given is not None
        assert strategies is not None


class TestProjectVersion:
    """Verify project metadata is accessible."""

    def test_version_accessible(self) -> None:
        """Project version must be accessible from the package."""
        from agent_passage import __version__

        assert __version__ is not None
        assert isinstance(__version__, str)
        assert len(__version__) > 0
