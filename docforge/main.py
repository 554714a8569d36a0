"""
docforge — CLI entrypoint.

Usage:
    docforge --help
    docforge create my-docs --source ./docs --template astro
    docforge update [DIRECTORY] [--dry-run] [--force]
    docforge status [DIRECTORY]
    docforge eject Header [DIRECTORY] [--full]
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from docforge import __version__
from docforge.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="docforge")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """docforge — scaffold and safely update documentation sites."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet, env=os.environ),
        log_file=os.environ.get("DOCFORGE_LOG_FILE"),
        log_file_level=os.environ.get("DOCFORGE_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.argument(
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    required=False,
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, directory: Path, as_json: bool) -> None:
    """Show how a site's files compare to the current templates."""
    from docforge.core.use_cases.status import get_site_status

    result = get_site_status(directory)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        color = "yellow" if result.adoptable else "red"
        click.secho(f"{'🔎' if result.adoptable else '❌'} {result.error}", fg=color)
        sys.exit(1)

    manifest = result.manifest
    report = result.report
    assert manifest is not None and report is not None  # guaranteed after error check above

    if not ctx.obj.get("quiet", False):
        click.secho(f"\n📋 {manifest.project_name}", fg="cyan", bold=True)
        click.echo(f"   Template: {manifest.template.value}   Theme: {manifest.theme}")
        click.echo(f"   Default page: {manifest.default_page}")
        click.echo()

    version_color = "yellow" if result.outdated else "green"
    click.echo("   Site version: ", nl=False)
    click.secho(f"{manifest.tool_version} (docforge {result.tool_version})", fg=version_color)

    status_colors = {
        "already_current": "green",
        "unchanged": "cyan",
        "missing": "cyan",
        "new": "cyan",
        "modified": "yellow",
    }
    click.echo()
    click.secho(f"   Files: {len(report.classifications)}", fg="white", bold=True)
    for c in report.classifications:
        if c.status.value == "already_current" and not ctx.obj.get("verbose", False):
            continue
        click.echo("     • ", nl=False)
        click.secho(f"{c.status.value:<16}", fg=status_colors.get(c.status.value, "white"), nl=False)
        click.echo(f" {c.path}")

    for path, error in report.errors.items():
        click.secho(f"     ✗ {path}: {error}", fg="red")
    for path in report.removed:
        click.echo(f"     🗑️  {path} (no longer generated)")

    click.echo()
    if report.up_to_date and not result.outdated:
        click.secho("   ✅ Up to date", fg="green")
    else:
        counts = ", ".join(f"{k}={v}" for k, v in report.counts.items() if v)
        click.secho(f"   Run 'docforge update' to sync ({counts})", fg="yellow")
    click.echo()


# ── Register sub-commands ───────────────────────────────────────

from docforge.ui.cli.site import create, eject, update  # noqa: E402

cli.add_command(create)
cli.add_command(update)
cli.add_command(eject)


if __name__ == "__main__":
    cli()
