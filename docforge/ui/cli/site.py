"""
CLI commands for creating, updating and customizing docs sites.

Thin wrappers over the ``create``, ``update`` and ``eject`` use cases
in ``docforge.core.use_cases``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from docforge.core.models.manifest import TemplateVariant
from docforge.core.models.theme import VALID_THEMES


def _echo_list(icon: str, label: str, paths: list[str], color: str, detail: dict[str, str] | None = None) -> None:
    if not paths:
        return
    click.secho(f"   {icon} {label} ({len(paths)}):", fg=color)
    for path in paths:
        suffix = f"  → {detail[path]}" if detail and path in detail else ""
        click.echo(f"       {path}{suffix}")


# ── create ──────────────────────────────────────────────────────


@click.command()
@click.argument("project_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--source", "-s",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Markdown docs directory (default: ./docs).",
)
@click.option("--name", "-n", default=None, help="Project name (default: directory name).")
@click.option(
    "--template", "-t",
    type=click.Choice([v.value for v in TemplateVariant]),
    default=None,
    help="Site template (default: nextjs).",
)
@click.option("--theme", default=None, help=f"Color theme ({', '.join(VALID_THEMES)}).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def create(
    ctx: click.Context,
    project_dir: Path,
    source: Path | None,
    name: str | None,
    template: str | None,
    theme: str | None,
    as_json: bool,
) -> None:
    """Create a new docs site in PROJECT_DIR from markdown files."""
    from docforge.core.use_cases.create import run_create

    result = run_create(project_dir, source=source, name=name, template=template, theme=theme)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    from docforge.core.services.templates import get_provider

    scaffold = result.scaffold
    assert scaffold is not None  # guaranteed after error check above
    manifest = scaffold.manifest
    provider = get_provider(manifest.template)

    if result.theme_fallback:
        click.secho(f"⚠️  Unknown theme '{result.theme_fallback}' — using {manifest.theme}", fg="yellow")
    if result.used_sample:
        click.secho(f"⚠️  No markdown found in {result.source_dir} — added a sample page", fg="yellow")

    click.secho(f"\n✅ Created {manifest.project_name}", fg="green", bold=True)
    click.echo(f"   Template: {provider.label}")
    click.echo(f"   Theme:    {manifest.theme}")
    click.echo(f"   Files:    {len(scaffold.files)} generated, {len(scaffold.docs)} docs")

    if not ctx.obj.get("quiet", False):
        click.echo()
        click.secho("   Next steps:", fg="white", bold=True)
        click.echo(f"     cd {project_dir}")
        click.echo("     npm install")
        click.echo(f"     npm run dev   # {provider.dev_url}")
    click.echo()


# ── update ──────────────────────────────────────────────────────


@click.command()
@click.argument(
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    required=False,
)
@click.option("--dry-run", is_flag=True, help="Show what would change without writing.")
@click.option("--force", "-f", is_flag=True, help="Overwrite modified files (backed up first).")
@click.option("--refresh-nav", is_flag=True, help="Regenerate docs.json from docs/*.md.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(
    ctx: click.Context,
    directory: Path,
    dry_run: bool,
    force: bool,
    refresh_nav: bool,
    as_json: bool,
) -> None:
    """Update a site's docforge-owned files to the current templates."""
    from docforge.core.use_cases.update import run_update

    result = run_update(directory, dry_run=dry_run, force=force, refresh_nav=refresh_nav)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.adoption:
        adoption = result.adoption
        info = adoption.to_dict()
        click.secho(f"\n🔎 Adopted existing {info['template']} site", fg="cyan", bold=True)
        click.echo(f"   Project:      {info['project_name']}")
        click.echo(f"   Theme:        {info['theme']}")
        click.echo(f"   Default page: {info['default_page']}")
        click.echo(f"   Tracked:      {len(adoption.tracked)} files")
        _echo_list("⚠️ ", "Unreadable", adoption.unreadable, "yellow")
        if dry_run:
            click.secho("\n   Dry run — manifest not written.", fg="yellow")
        else:
            click.echo("\n   Review the values above, then run 'docforge update' again to apply templates.")
        click.echo()
        return

    if result.git_dirty and not dry_run:
        click.secho("💡 Uncommitted changes detected — consider committing before updating.", fg="yellow")

    sync = result.sync
    assert sync is not None  # guaranteed for a managed site
    header = "Update plan" if dry_run else "Update"
    version_note = (
        f"{sync.from_version} → {sync.to_version}"
        if sync.from_version != sync.to_version
        else sync.to_version
    )
    click.secho(f"\n🔄 {header} ({version_note})", fg="cyan", bold=True)

    if sync.nothing_to_do:
        click.secho("   ✅ Already up to date", fg="green")
    else:
        verb = "Would write" if dry_run else "Updated"
        _echo_list("✓", verb, sync.updated, "green")
        forced_verb = "Would overwrite (backup first)" if dry_run else "Overwritten"
        _echo_list("⚠️ ", forced_verb, sync.forced, "yellow", sync.backups)
        _echo_list("✋", "Modified — skipped", sync.skipped, "yellow")
        if sync.skipped:
            click.echo("       Re-run with --force to overwrite (a backup is kept).")
        _echo_list("🗑️ ", "No longer generated — left in place", sync.removed, "white")
        _echo_list("✗", "Failed", list(sync.failed), "red", sync.failed)

    if ctx.obj.get("verbose", False):
        _echo_list("·", "Already current", sync.current, "white")

    if result.nav:
        backup = f" (previous saved to {result.nav.backup})" if result.nav.backup else ""
        click.echo(f"   docs.json: {result.nav.status}{backup}")
    elif refresh_nav and dry_run:
        click.echo("   docs.json: not refreshed during a dry run")

    click.echo()
    if not result.ok:
        sys.exit(1)


# ── eject ───────────────────────────────────────────────────────


@click.command()
@click.argument("name")
@click.argument(
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    required=False,
)
@click.option("--full", is_flag=True, help="Blank implementation instead of wrapping the default.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def eject(name: str, directory: Path, full: bool, as_json: bool) -> None:
    """Scaffold a site-owned override for default component NAME (Next.js only)."""
    from docforge.core.use_cases.eject import run_eject

    result = run_eject(name, directory, full=full)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    component = result.component
    assert component is not None  # guaranteed after error check above
    click.secho(f"\n✅ Created {result.override}", fg="green", bold=True)
    if result.wired:
        click.echo("   Wired into src/lib/site-config.tsx")
    else:
        click.secho("   ⚠️  Could not update src/lib/site-config.tsx — wire the override by hand", fg="yellow")

    click.echo()
    click.echo(f"   Component: {component.name}")
    click.echo(f"   Mode:      {'Full eject' if full else 'Wrap (composable)'}")
    click.secho(f"   Tier:      {component.tier}", fg="green" if component.tier == "safe" else "yellow")
    click.echo(f"   Props:     {component.props_type}")
    click.echo(f"   About:     {component.description}")
    click.echo()
    if full:
        click.echo("   You have full control; template updates to this component will not apply.")
    else:
        click.echo("   The default is imported and composed; template updates still flow through.")
    click.echo()
