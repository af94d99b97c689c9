"""CLI interface for claimcalc using Click.

Wraps the core engine for bulk recalculation, audits, and ARPS reports
from JSON exports of the portal's claim collections.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click
import orjson
from pydantic import ValidationError

from claimcalc.core import IncentiveEngine, summarize_validation_error
from claimcalc.models import EmrProject, IncentiveClaim

logger = logging.getLogger(__name__)


def _get_engine(config: str | None) -> IncentiveEngine:
    """Create an IncentiveEngine from an optional config path.

    Args:
        config: Path to a claimcalc YAML file, or None for defaults.

    Returns:
        Initialized IncentiveEngine instance.
    """
    try:
        return IncentiveEngine(config)
    except FileNotFoundError:
        click.echo(f"Error: Config file not found: {config}", err=True)
        sys.exit(1)


def _read_json(path: str) -> Any:
    """Read and parse a JSON file, exiting with an error if malformed."""
    try:
        return orjson.loads(Path(path).read_bytes())
    except orjson.JSONDecodeError as exc:
        click.echo(f"Error: {path} is not valid JSON: {exc}", err=True)
        sys.exit(1)


def _read_list(path: str) -> list[Any]:
    data = _read_json(path)
    if not isinstance(data, list):
        click.echo(f"Error: {path} must contain a JSON array", err=True)
        sys.exit(1)
    return data


def _emit(data: Any, output: str | None) -> None:
    """Write JSON to a file or stdout."""
    text = orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()
    if output:
        with open(output, "w") as f:
            f.write(text)
        click.echo(f"JSON written to {output}")
    else:
        click.echo(text)


def _parse_claims(payloads: list[Any]) -> list[IncentiveClaim]:
    """Validate every claim in a list, exiting on the first invalid one."""
    claims = []
    for index, payload in enumerate(payloads):
        try:
            claims.append(IncentiveClaim.model_validate(payload))
        except ValidationError as exc:
            message = summarize_validation_error(exc)
            click.echo(f"Error: claim #{index} is invalid: {message}", err=True)
            sys.exit(1)
    return claims


@click.group()
@click.option(
    "-c",
    "--config",
    default=None,
    help="Path to a claimcalc YAML policy file.",
    type=click.Path(),
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """claimcalc -- Research incentive and ARPS calculation."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("claim_file", type=click.Path(exists=True))
@click.option("--faculty", default=None, help="Override the claimant's faculty.")
@click.option(
    "--designation", default=None, help="Override the claimant's designation."
)
@click.pass_context
def calculate(
    ctx: click.Context,
    claim_file: str,
    faculty: str | None,
    designation: str | None,
) -> None:
    """Calculate the incentive for a single claim."""
    engine = _get_engine(ctx.obj["config"])
    payload = _read_json(claim_file)
    result = engine.calculate_raw(payload, faculty=faculty, designation=designation)
    _emit(result.model_dump(mode="json", by_alias=True, exclude_none=True), None)
    if not result.success:
        sys.exit(1)


@main.command()
@click.argument("claims_file", type=click.Path(exists=True))
@click.option("-o", "--output", default=None, help="Output file path.")
@click.pass_context
def batch(ctx: click.Context, claims_file: str, output: str | None) -> None:
    """Assess every claim in a JSON array independently."""
    engine = _get_engine(ctx.obj["config"])
    assessments, errors = engine.assess_payloads(_read_list(claims_file))
    _emit(
        {
            "assessments": [
                a.model_dump(mode="json", by_alias=True) for a in assessments
            ],
            "errors": errors,
        },
        output,
    )
    if errors:
        click.echo(f"{len(errors)} claim(s) could not be parsed.", err=True)


@main.command()
@click.argument("claims_file", type=click.Path(exists=True))
@click.option("--user", "user_id", required=True, help="uid of the user.")
@click.option(
    "--year",
    required=True,
    type=int,
    help="Year in which the June-May evaluation year starts.",
)
@click.option(
    "--emr",
    "emr_file",
    default=None,
    type=click.Path(exists=True),
    help="JSON array of EMR projects.",
)
@click.option("-o", "--output", default=None, help="Output file path.")
@click.pass_context
def arps(
    ctx: click.Context,
    claims_file: str,
    user_id: str,
    year: int,
    emr_file: str | None,
    output: str | None,
) -> None:
    """Compute the Annual Research Performance Score for a user."""
    engine = _get_engine(ctx.obj["config"])
    claims = _parse_claims(_read_list(claims_file))
    projects: list[EmrProject] = []
    if emr_file:
        try:
            projects = [
                EmrProject.model_validate(p) for p in _read_list(emr_file)
            ]
        except ValidationError as exc:
            click.echo(
                f"Error: invalid EMR project: {summarize_validation_error(exc)}",
                err=True,
            )
            sys.exit(1)

    result = engine.arps(user_id, year, claims, projects)
    if output:
        _emit(result.model_dump(mode="json", by_alias=True), output)
        return

    click.echo(f"ARPS {year}-{year + 1} for {user_id}")
    click.echo(f"  Window: {result.window_start} to {result.window_end}")
    for label, category in (
        ("Publications", result.publications),
        ("Patents", result.patents),
        ("EMR", result.emr),
    ):
        click.echo(
            f"  {label}: raw {category.raw:.2f}, weighted "
            f"{category.weighted:.2f}, final {category.final:.2f}"
        )
    click.echo(f"  Total: {result.total_arps:.2f}")
    click.echo(f"  Grade: {result.grade}")


@main.command("audit-pools")
@click.argument("claims_file", type=click.Path(exists=True))
@click.option(
    "--all", "show_all", is_flag=True, help="Show every paper, not only overruns."
)
@click.pass_context
def audit_pools(ctx: click.Context, claims_file: str, show_all: bool) -> None:
    """Report papers whose co-author shares exceed the incentive pool."""
    engine = _get_engine(ctx.obj["config"])
    claims = _parse_claims(_read_list(claims_file))
    entries = engine.audit_paper_pools(claims)
    if not show_all:
        entries = [e for e in entries if e.exceeds_pool]

    if not entries:
        click.echo("No over-allocated papers found.")
        return

    for entry in entries:
        flag = " OVER" if entry.exceeds_pool else ""
        click.echo(
            f"  {entry.paper_key}: claimed {entry.claimed_total} of "
            f"{entry.pool} across {len(entry.claim_ids)} claim(s){flag}"
        )


@main.command()
@click.option("-o", "--output", default=None, help="Output file path.")
@click.pass_context
def policy(ctx: click.Context, output: str | None) -> None:
    """Show the policy tables in effect."""
    engine = _get_engine(ctx.obj["config"])
    _emit(engine.policy_tables(), output)


@main.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Port number.")
@click.option("--reload", "auto_reload", is_flag=True, help="Auto-reload on changes.")
@click.pass_context
def serve(
    ctx: click.Context,
    host: str,
    port: int,
    auto_reload: bool,
) -> None:
    """Start the REST API server (requires claimcalc[api])."""
    try:
        import uvicorn
    except ImportError:
        click.echo(
            "REST API dependencies not installed. Run: pip install claimcalc[api]",
            err=True,
        )
        sys.exit(1)

    from claimcalc.api.app import create_app

    app = create_app(ctx.obj["config"])
    uvicorn.run(app, host=host, port=port, reload=auto_reload)
