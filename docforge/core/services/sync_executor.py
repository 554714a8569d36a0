"""
Sync executor — apply a classification report to a site.

Write rules:
    unchanged / missing / new   written
    already_current             not written, manifest record refreshed
    modified                    skipped; with force: backed up, then written

A forced overwrite only happens after the backup copy under
``<backup_dirname>/<relative path>`` is written and fsynced. If the
backup fails, or the file changed since it was classified, that file
is left alone and reported as failed.

Per-file failures never abort the batch. The manifest write at the end
does: it raises ``ManifestWriteError`` so the caller can report that
the run's hashes were not recorded.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from docforge.core.config.loader import EngineConfig
from docforge.core.models.manifest import Manifest
from docforge.core.persistence.manifest_file import write_manifest
from docforge.core.services.classifier import (
    SAFE_TO_WRITE,
    Classification,
    ClassificationReport,
    FileStatus,
)
from docforge.core.services.hashing import hash_content

logger = logging.getLogger(__name__)


class BackupError(Exception):
    """Raised when a pre-overwrite backup cannot be made."""


@dataclass
class SyncResult:
    """Outcome of one sync run (or the plan, for a dry run)."""

    dry_run: bool = False
    force: bool = False
    from_version: str = ""
    to_version: str = ""

    updated: list[str] = field(default_factory=list)   # unchanged / missing / new
    forced: list[str] = field(default_factory=list)    # modified, overwritten
    current: list[str] = field(default_factory=list)   # already current
    skipped: list[str] = field(default_factory=list)   # modified, left alone
    removed: list[str] = field(default_factory=list)   # no longer templated
    backups: dict[str, str] = field(default_factory=dict)  # path → backup path
    failed: dict[str, str] = field(default_factory=dict)   # path → error

    manifest: Manifest | None = None
    manifest_saved: bool = False

    @property
    def written(self) -> list[str]:
        return self.updated + self.forced

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def nothing_to_do(self) -> bool:
        return not (self.written or self.skipped or self.removed or self.failed)

    def to_dict(self) -> dict:
        return {
            "dry_run": self.dry_run,
            "force": self.force,
            "from_version": self.from_version,
            "to_version": self.to_version,
            "updated": list(self.updated),
            "forced": list(self.forced),
            "current": list(self.current),
            "skipped": list(self.skipped),
            "removed": list(self.removed),
            "backups": dict(self.backups),
            "failed": dict(self.failed),
            "manifest_saved": self.manifest_saved,
        }


def write_synced(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` and fsync before returning."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as fh:
        fh.write(data)
        fh.flush()
        os.fsync(fh.fileno())


class SyncExecutor:
    """Applies classifications for one run with an injected config."""

    def __init__(self, config: EngineConfig):
        self.config = config

    def backup_root(self, directory: Path) -> Path:
        return directory / self.config.backup_dirname

    # ── Public API ──────────────────────────────────────────────

    def apply(
        self,
        directory: Path,
        manifest: Manifest,
        report: ClassificationReport,
        *,
        force: bool = False,
        dry_run: bool = False,
    ) -> SyncResult:
        """Write what the report allows and persist the updated manifest.

        Args:
            directory: Site root.
            manifest: Manifest the report was classified against (not mutated).
            report: Output of ``classify_site``.
            force: Overwrite ``modified`` files after backing them up.
            dry_run: Plan only; nothing on disk changes, manifest included.

        Raises:
            ManifestWriteError: If the updated manifest cannot be persisted.
        """
        result = SyncResult(
            dry_run=dry_run,
            force=force,
            from_version=manifest.tool_version,
            to_version=self.config.tool_version,
            removed=list(report.removed),
            failed=dict(report.errors),
        )

        safe = report.with_status(*SAFE_TO_WRITE)
        modified = report.with_status(FileStatus.MODIFIED)
        current = report.with_status(FileStatus.ALREADY_CURRENT)

        result.current = [c.path for c in current]
        if not force:
            result.skipped = [c.path for c in modified]

        for path in result.removed:
            logger.info("%s is no longer generated — left in place", path)

        if dry_run:
            result.updated = [c.path for c in safe]
            if force:
                result.forced = [c.path for c in modified]
            result.manifest = manifest
            return result

        updated_manifest = manifest.model_copy(deep=True)
        version = self.config.tool_version

        for c in safe:
            if self._write(directory, c, result):
                result.updated.append(c.path)
                updated_manifest.record_tool_file(c.path, c.generated_hash, version)

        if force:
            for c in modified:
                if self._force_write(directory, c, result):
                    result.forced.append(c.path)
                    updated_manifest.record_tool_file(c.path, c.generated_hash, version)

        for c in current:
            updated_manifest.record_tool_file(c.path, c.generated_hash, version)

        if result.written or updated_manifest.files != manifest.files or manifest.tool_version != version:
            updated_manifest.touch(version)
            write_manifest(directory, updated_manifest, self.config.manifest_filename)
            result.manifest_saved = True
            result.manifest = updated_manifest
        else:
            logger.debug("Manifest already accurate — not rewritten")
            result.manifest = manifest

        logger.info(
            "Sync of %s: %d written, %d current, %d skipped, %d failed",
            directory, len(result.written), len(result.current),
            len(result.skipped), len(result.failed),
        )
        return result

    # ── Internals ───────────────────────────────────────────────

    def _write(self, directory: Path, c: Classification, result: SyncResult) -> bool:
        try:
            write_synced(directory / c.path, c.generated_content.encode("utf-8"))
        except OSError as e:
            logger.error("Failed to write %s: %s", c.path, e)
            result.failed[c.path] = str(e)
            return False
        logger.debug("Wrote %s (%s)", c.path, c.status.value)
        return True

    def _force_write(self, directory: Path, c: Classification, result: SyncResult) -> bool:
        try:
            backup = self.backup(directory, c)
        except (OSError, BackupError) as e:
            logger.error("Not overwriting %s — backup failed: %s", c.path, e)
            result.failed[c.path] = f"backup failed: {e}"
            return False

        result.backups[c.path] = str(backup.relative_to(directory))
        return self._write(directory, c, result)

    def backup(self, directory: Path, c: Classification) -> Path:
        """Copy the current disk content of ``c.path`` into the backup tree.

        Raises:
            BackupError: If the file changed since it was classified.
            OSError: If the file cannot be read or the backup written.
        """
        content = (directory / c.path).read_bytes()
        if hash_content(content) != c.disk_hash:
            raise BackupError(f"{c.path} changed on disk since it was classified")

        target = self.backup_root(directory) / c.path
        write_synced(target, content)
        logger.info("Backed up %s → %s", c.path, target)
        return target
