"""CLI for Agent Passage.

One process is one session: an identity generated by one command lives
only for that invocation.

Commands:
    generate-identity  Generate a signing identity (DID only is shown)
    quick-exit         Create and sign an EXIT marker with a fresh identity
    create-exit        Create and sign an EXIT marker with optional modules
    verify-exit        Verify a signed EXIT marker
    evaluate           Evaluate an EXIT marker against an admission policy
    admit              Evaluate and, if admitted, mint a signed ARRIVAL marker
    verify-transfer    Verify an EXIT/ARRIVAL pair (signatures + continuity)
    policies           List admission policy presets

Exit codes:
    0  success (verified / admitted)
    1  negative result (not verified / not admitted)
    2  malformed input or unknown policy
"""

import json
import sys
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from agent_passage import __version__
from agent_passage.application.services.passage_service import PassageService
from agent_passage.bootstrap import build_passage_service, configure_structlog
from agent_passage.config.passage_config import PassageConfig
from agent_passage.domain.errors import DecodeError, UnknownPolicyError
from agent_passage.domain.models.exit_marker import (
    ExitType,
    LineageModule,
    StateSnapshotModule,
)

EXIT_NEGATIVE = 1
EXIT_INPUT_ERROR = 2


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


app = typer.Typer(
    name="agent-passage",
    help="Verifiable departure and arrival markers for migrating agents",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"agent-passage version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Agent Passage.

    Sign EXIT markers, evaluate admission, mint ARRIVAL markers and
    verify transfers. PASSAGE_SERVER_POLICY (environment or .env) pins
    the admission policy; --policy is ignored when it is set.
    """
    load_dotenv()
    try:
        config = PassageConfig.from_environment()
    except (UnknownPolicyError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}", style="bold")
        raise typer.Exit(code=EXIT_INPUT_ERROR)

    # Short-lived process: loggers are not cached past this invocation
    configure_structlog(config, cache_logger_on_first_use=False)
    ctx.obj = build_passage_service(config)


def _service(ctx: typer.Context) -> PassageService:
    return ctx.obj


def _read_input(source: str) -> str:
    """Read marker JSON from a file path, or stdin for "-"."""
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except FileNotFoundError:
        console.print(f"[red]Error:[/red] File not found: {source}", style="bold")
        raise typer.Exit(code=EXIT_INPUT_ERROR)


def _fail_input(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(error))}", style="bold")
    raise typer.Exit(code=EXIT_INPUT_ERROR)


def _print_json(data: dict[str, Any]) -> None:
    console.print_json(json.dumps(data))


FORMAT_OPTION = typer.Option(
    OutputFormat.json,
    "--format",
    "-o",
    help="Output format: text or json",
)
POLICY_OPTION = typer.Option(
    None,
    "--policy",
    "-p",
    help="Admission policy preset (OPEN_DOOR, STRICT, EMERGENCY_ONLY). "
    "Ignored if PASSAGE_SERVER_POLICY is set.",
)


@app.command()
def generate_identity(ctx: typer.Context) -> None:
    """Generate an Ed25519 did:key identity for this session."""
    _print_json(_service(ctx).generate_identity().to_dict())


@app.command()
def quick_exit(
    ctx: typer.Context,
    origin: str = typer.Argument(..., help="Platform or system being left"),
    exit_type: ExitType = typer.Option(
        ExitType.VOLUNTARY, "--exit-type", "-e", help="Type of exit"
    ),
    reason: Optional[str] = typer.Option(None, "--reason", "-r", help="Reason for departure"),
) -> None:
    """One-shot create and sign a departure marker with a fresh identity.

    Example:
        agent-passage quick-exit did:example:platform --exit-type Emergency
    """
    issued = _service(ctx).quick_exit(origin, exit_type=exit_type, reason=reason)
    _print_json(issued.to_dict())
    if not issued.verified:
        raise typer.Exit(code=EXIT_NEGATIVE)


@app.command()
def create_exit(
    ctx: typer.Context,
    origin: str = typer.Argument(..., help="Departing agent identifier"),
    exit_type: ExitType = typer.Option(
        ExitType.VOLUNTARY, "--exit-type", "-e", help="Type of exit"
    ),
    reason: Optional[str] = typer.Option(None, "--reason", "-r", help="Reason for departure"),
    predecessor: Optional[str] = typer.Option(
        None, "--predecessor", help="Attach a lineage module with this predecessor"
    ),
    state_hash: Optional[str] = typer.Option(
        None, "--state-hash", help="Attach a state snapshot module with this digest"
    ),
    state_location: Optional[str] = typer.Option(
        None, "--state-location", help="Where the state snapshot can be fetched"
    ),
) -> None:
    """Create and sign a departure marker with the session identity.

    Example:
        agent-passage create-exit did:example:agent --predecessor did:example:v1 \\
            --state-hash 9f86d08...
    """
    lineage = LineageModule(predecessor=predecessor) if predecessor else None
    snapshot = None
    if state_hash is not None:
        try:
            snapshot = StateSnapshotModule(
                state_hash=state_hash, state_location=state_location
            )
        except ValueError as e:
            _fail_input(e)
    elif state_location:
        _fail_input(ValueError("--state-location requires --state-hash"))

    issued = _service(ctx).create_exit_marker(
        origin,
        exit_type=exit_type,
        reason=reason,
        lineage=lineage,
        state_snapshot=snapshot,
    )
    _print_json(issued.to_dict())


@app.command()
def verify_exit(
    ctx: typer.Context,
    marker: str = typer.Argument(..., help="EXIT marker JSON file, or - for stdin"),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Verify a signed EXIT marker."""
    result = _service(ctx).verify_exit_marker(_read_input(marker))

    if output_format == OutputFormat.json:
        _print_json(result.to_dict())
    elif result.valid:
        console.print(f"[green]VALID[/green] - {result.id} ({result.exit_type})")
    else:
        detail = result.error or "; ".join(result.errors)
        console.print(f"[red]INVALID[/red] - {escape(detail)}")

    if result.is_error:
        raise typer.Exit(code=EXIT_INPUT_ERROR)
    if not result.valid:
        raise typer.Exit(code=EXIT_NEGATIVE)


@app.command()
def evaluate(
    ctx: typer.Context,
    marker: str = typer.Argument(..., help="EXIT marker JSON file, or - for stdin"),
    policy: Optional[str] = POLICY_OPTION,
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Check whether an EXIT marker meets an admission policy."""
    try:
        result = _service(ctx).evaluate_admission(_read_input(marker), policy)
    except (DecodeError, UnknownPolicyError) as e:
        _fail_input(e)

    if output_format == OutputFormat.json:
        _print_json(result.to_dict())
    elif result.admitted:
        console.print(f"[green]ADMITTED[/green] under {result.policy}")
    else:
        console.print(f"[red]NOT ADMITTED[/red] under {result.policy}")
        for reason in result.reasons:
            console.print(f"  - {escape(reason)}")

    if not result.admitted:
        raise typer.Exit(code=EXIT_NEGATIVE)


@app.command()
def admit(
    ctx: typer.Context,
    marker: str = typer.Argument(..., help="EXIT marker JSON file, or - for stdin"),
    destination: str = typer.Option(
        ..., "--destination", "-d", help="Receiving platform identifier"
    ),
    policy: Optional[str] = POLICY_OPTION,
) -> None:
    """Evaluate admission and mint a signed ARRIVAL marker."""
    try:
        decision = _service(ctx).verify_and_admit(_read_input(marker), destination, policy)
    except (DecodeError, UnknownPolicyError) as e:
        _fail_input(e)

    _print_json(decision.to_dict())
    if not decision.admitted:
        raise typer.Exit(code=EXIT_NEGATIVE)


@app.command()
def verify_transfer(
    ctx: typer.Context,
    exit_marker: str = typer.Argument(..., help="EXIT marker JSON file"),
    arrival_marker: str = typer.Argument(..., help="ARRIVAL marker JSON file"),
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Verify a complete EXIT -> ARRIVAL transfer."""
    try:
        record = _service(ctx).verify_transfer(
            _read_input(exit_marker), _read_input(arrival_marker)
        )
    except DecodeError as e:
        _fail_input(e)

    if output_format == OutputFormat.json:
        _print_json(record.to_dict())
    elif record.verified:
        console.print(
            f"[green]VERIFIED[/green] - transfer took "
            f"{record.transfer_time.total_seconds():.3f}s"
        )
    else:
        console.print("[red]NOT VERIFIED[/red]")
        for error in record.errors:
            console.print(f"  - {escape(error)}")

    if not record.verified:
        raise typer.Exit(code=EXIT_NEGATIVE)


@app.command()
def policies(
    ctx: typer.Context,
    output_format: OutputFormat = FORMAT_OPTION,
) -> None:
    """List admission policy presets and their configurations."""
    listing = _service(ctx).list_admission_policies()

    if output_format == OutputFormat.json:
        _print_json(listing.to_dict())
        return

    table = Table()
    table.add_column("Policy", style="bold", no_wrap=True)
    table.add_column("Signature")
    table.add_column("Exit types")
    table.add_column("Max age (s)", justify="right")
    table.add_column("Required modules")
    for name, config in listing.policies.items():
        table.add_row(
            name,
            "required" if config["requireVerifiedDeparture"] else "-",
            ", ".join(config["allowedExitTypes"]) or "any",
            str(config.get("maxAgeSeconds", "-")),
            ", ".join(config["requiredModules"]) or "-",
        )
    console.print(table)


if __name__ == "__main__":
    app()
