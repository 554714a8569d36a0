"""
Update use case — bring a site in line with the current templates.

Phases:
    1. Load the manifest; if absent, adopt the site (and stop there).
    2. Classify every tool-owned file of the site's template.
    3. Apply the classification (writes, forced backups, manifest).
    4. Optionally regenerate docs.json navigation.

A mutating run holds the advisory site lock from the manifest read
through the last write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from docforge.core.config.loader import ConfigError, EngineConfig, load_engine_config
from docforge.core.persistence.manifest_file import (
    ManifestWriteError,
    read_manifest,
    write_manifest,
)
from docforge.core.persistence.site_lock import SiteLockedError, site_lock
from docforge.core.services.adoption import AdoptionResult, adopt_site
from docforge.core.services.classifier import ClassificationReport, classify_site
from docforge.core.services.git_ops import is_git_dirty
from docforge.core.services.scaffold import NavRefreshResult, refresh_navigation
from docforge.core.services.sync_executor import SyncExecutor, SyncResult
from docforge.core.services.templates import (
    UnknownTemplateError,
    VariantMismatchError,
    get_provider,
)

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    """Result of one ``docforge update`` run."""

    directory: Path | None = None
    error: str | None = None

    adoption: AdoptionResult | None = None
    report: ClassificationReport | None = None
    sync: SyncResult | None = None
    nav: NavRefreshResult | None = None
    git_dirty: bool = False

    @property
    def adopted(self) -> bool:
        return self.adoption is not None

    @property
    def ok(self) -> bool:
        return self.error is None and (self.sync is None or self.sync.ok)

    def to_dict(self) -> dict:
        result: dict = {"directory": str(self.directory) if self.directory else None}
        if self.error:
            result["error"] = self.error
            return result

        result["git_dirty"] = self.git_dirty
        if self.adoption:
            result["adopted"] = self.adoption.to_dict()
        if self.report:
            result["classification"] = self.report.to_dict()
        if self.sync:
            result["sync"] = self.sync.to_dict()
        if self.nav:
            result["navigation"] = {"status": self.nav.status, "backup": self.nav.backup}
        return result


def run_update(
    directory: Path | None = None,
    *,
    dry_run: bool = False,
    force: bool = False,
    refresh_nav: bool = False,
    config: EngineConfig | None = None,
) -> UpdateResult:
    """Sync a site with the current templates.

    Args:
        directory: Site root (default: cwd).
        dry_run: Classify and report only; nothing is written.
        force: Overwrite user-modified files after backing them up.
        refresh_nav: Regenerate docs.json from docs/*.md.
        config: Engine config (default: resolved from the site directory).

    Returns:
        UpdateResult; ``error`` is set for recoverable stop conditions.
    """
    target = (directory or Path.cwd()).resolve()
    result = UpdateResult(directory=target)

    if not target.is_dir():
        result.error = f"Directory not found: {target}"
        return result

    try:
        config = config or load_engine_config(target)
    except ConfigError as e:
        result.error = str(e)
        return result

    if dry_run:
        _sync_site(target, config, result, dry_run=True, force=force, refresh_nav=False)
        return result

    try:
        with site_lock(target, config.lock_filename):
            _sync_site(target, config, result, dry_run=False, force=force, refresh_nav=refresh_nav)
    except SiteLockedError as e:
        result.error = str(e)
    except OSError as e:
        result.error = f"Cannot lock {target}: {e}"
    return result


def _sync_site(
    target: Path,
    config: EngineConfig,
    result: UpdateResult,
    *,
    dry_run: bool,
    force: bool,
    refresh_nav: bool,
) -> None:
    """Phases 1-4; the caller holds the site lock unless ``dry_run``."""
    # ── Phase 1: manifest or adoption ───────────────────────────
    manifest = read_manifest(target, config.manifest_filename)

    if manifest is None:
        adoption = adopt_site(target, config)
        if adoption is None:
            result.error = (
                f"Not a docforge site (no {config.manifest_filename} found). "
                "Run 'docforge create <project-dir>' first."
            )
            return

        result.adoption = adoption
        if not dry_run:
            try:
                write_manifest(target, adoption.manifest, config.manifest_filename)
            except ManifestWriteError as e:
                result.error = str(e)
        return

    result.git_dirty = is_git_dirty(target)

    # ── Phase 2: classify ───────────────────────────────────────
    try:
        provider = get_provider(manifest.template)
        report = classify_site(target, manifest, provider)
    except (UnknownTemplateError, VariantMismatchError) as e:
        result.error = str(e)
        return
    result.report = report

    executor = SyncExecutor(config)

    if dry_run:
        result.sync = executor.apply(target, manifest, report, force=force, dry_run=True)
        return

    # ── Phase 3 + 4: apply ──────────────────────────────────────
    try:
        result.sync = executor.apply(target, manifest, report, force=force)
        if refresh_nav:
            result.nav = refresh_navigation(
                target, manifest.project_name, executor.backup_root(target),
            )
    except ManifestWriteError as e:
        logger.error("Manifest not saved: %s", e)
        result.error = f"{e} — file hashes from this run were not recorded; re-run update."
    except OSError as e:
        # Only the navigation refresh can get here; file writes report per path.
        result.error = f"Navigation refresh failed: {e}"
