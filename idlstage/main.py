"""
idlstage — CLI entrypoint.

Usage:
    python -m idlstage.main --help
    python -m idlstage.main generate --phase compile
    python -m idlstage.main config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from idlstage import __version__
from idlstage.core.observability.logging_config import LogSettings, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="idlstage")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to idlstage.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """idlstage — stage Thrift IDL files and run the Scrooge generator."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(LogSettings.from_options(debug=debug, verbose=verbose, quiet=quiet))


@cli.command()
@click.option(
    "--phase",
    default="compile",
    show_default=True,
    help="Build phase: compile or test-compile.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Use the mock generator (no real execution).")
@click.pass_context
def generate(ctx: click.Context, phase: str, as_json: bool, mock: bool) -> None:
    """Stage thrift files and regenerate sources when stale."""
    from idlstage.core.use_cases.generate import STATUS_GENERATED, run_generation

    result = run_generation(
        config_path=ctx.obj.get("config_path"),
        phase=phase,
        mock_mode=mock,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    sources = result.sources
    if ctx.obj.get("quiet") or sources is None:
        return

    click.secho(f"\n🧵 Phase: {result.phase}", fg="cyan", bold=True)
    click.echo(
        f"   Thrift files: {sources.total} "
        f"(local {sources.local}, staged {sources.extracted}, referenced {sources.referenced})"
    )

    if result.status == STATUS_GENERATED:
        click.secho("   ✅ Sources generated", fg="green")
    else:
        click.secho(f"   ⏭  {result.status}", fg="yellow")

    for root in result.compile_roots:
        click.echo(f"   📂 {root}")

    click.echo()


@cli.group()
def config() -> None:
    """Build configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate idlstage.yml configuration."""
    from idlstage.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid and result.config is not None:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Project: {result.config.project.artifact_id}")
        click.echo(f"   Dependency includes: {len(result.config.dependency_includes)}")
        click.echo(f"   Phases: {', '.join(result.config.phase_names())}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
