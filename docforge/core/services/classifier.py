"""
Classifier — three-way comparison of generated, on-disk and recorded content.

For every tool-owned path of the site's template:

    disk absent                                   → missing
    hash(disk) == hash(generated)                 → already_current
    no manifest record                            → new
    record hash present and == hash(disk)         → unchanged
    anything else                                 → modified

"Disk differs from generated" alone never means the user edited the
file: disk may just be stale relative to a template update. Only the
manifest's recorded hash separates stale-but-ours (``unchanged``) from
hand-edited (``modified``).

Classification is read-only and idempotent; rerunning it after a
partially applied sync reclassifies from whatever is on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from docforge.core.models.manifest import ManagedFileRecord, Manifest
from docforge.core.services.hashing import hash_content
from docforge.core.services.templates.base import TemplateProvider

logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    """Per-file reconciliation decision."""

    UNCHANGED = "unchanged"              # disk == last write → safe to overwrite
    MODIFIED = "modified"                # user edited it
    MISSING = "missing"                  # gone from disk
    NEW = "new"                          # template path the manifest never saw
    ALREADY_CURRENT = "already_current"  # disk == new content


# Statuses that are written without --force
SAFE_TO_WRITE = frozenset({FileStatus.UNCHANGED, FileStatus.MISSING, FileStatus.NEW})


@dataclass
class Classification:
    """Decision for one tool-owned path (never persisted)."""

    path: str
    status: FileStatus
    generated_content: str
    disk_hash: str | None = None
    manifest_hash: str | None = None

    @property
    def generated_hash(self) -> str:
        return hash_content(self.generated_content)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "status": self.status.value,
            "disk_hash": self.disk_hash,
            "manifest_hash": self.manifest_hash,
            "generated_hash": self.generated_hash,
        }


@dataclass
class ClassificationReport:
    """Everything a sync run needs to decide what to write."""

    classifications: list[Classification] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)  # path → read error

    def with_status(self, *statuses: FileStatus) -> list[Classification]:
        return [c for c in self.classifications if c.status in statuses]

    def get(self, path: str) -> Classification | None:
        for c in self.classifications:
            if c.path == path:
                return c
        return None

    @property
    def counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in FileStatus}
        for c in self.classifications:
            counts[c.status.value] += 1
        return counts

    @property
    def up_to_date(self) -> bool:
        """True when there is nothing to write, skip, report or retry."""
        return (
            all(c.status is FileStatus.ALREADY_CURRENT for c in self.classifications)
            and not self.removed
            and not self.errors
        )

    def to_dict(self) -> dict:
        return {
            "files": [c.to_dict() for c in self.classifications],
            "counts": self.counts,
            "removed": list(self.removed),
            "errors": dict(self.errors),
        }


def classify_file(
    path: str,
    generated_content: str,
    disk_content: bytes | None,
    record: ManagedFileRecord | None,
) -> Classification:
    """Pure decision for a single path."""
    if disk_content is None:
        return Classification(path=path, status=FileStatus.MISSING, generated_content=generated_content)

    disk_hash = hash_content(disk_content)

    if disk_hash == hash_content(generated_content):
        return Classification(
            path=path,
            status=FileStatus.ALREADY_CURRENT,
            generated_content=generated_content,
            disk_hash=disk_hash,
        )

    if record is None:
        return Classification(
            path=path,
            status=FileStatus.NEW,
            generated_content=generated_content,
            disk_hash=disk_hash,
        )

    # Consumer records never carry a hash, so they always land on MODIFIED.
    manifest_hash = record.content_hash
    status = (
        FileStatus.UNCHANGED
        if manifest_hash and manifest_hash == disk_hash
        else FileStatus.MODIFIED
    )
    return Classification(
        path=path,
        status=status,
        generated_content=generated_content,
        disk_hash=disk_hash,
        manifest_hash=manifest_hash,
    )


def find_removed(manifest: Manifest, provider: TemplateProvider) -> list[str]:
    """Tool-owned manifest paths the current templates no longer produce."""
    owned = set(provider.owned_files)
    return sorted(p for p in manifest.tool_owned_paths() if p not in owned)


def read_disk(path: Path) -> bytes | None:
    """Raw bytes of ``path``; None if it does not exist.

    Raises:
        OSError: For any other read failure (permissions, directory, ...).
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None


def classify_site(
    directory: Path,
    manifest: Manifest,
    provider: TemplateProvider,
) -> ClassificationReport:
    """Classify every tool-owned path of the site in ``directory``.

    Raises:
        VariantMismatchError: If ``provider`` is not the manifest's template.
    """
    provider.check_variant(manifest.template)
    args = manifest.template_args()
    report = ClassificationReport()

    for path in provider.owned_files:
        generated = provider.render(path, args)
        try:
            disk = read_disk(directory / path)
        except OSError as e:
            logger.warning("Cannot read %s: %s", path, e)
            report.errors[path] = str(e)
            continue

        classification = classify_file(path, generated, disk, manifest.record_for(path))
        logger.debug("%s → %s", path, classification.status.value)
        report.classifications.append(classification)

    report.removed = find_removed(manifest, provider)

    logger.info(
        "Classified %d files in %s: %s",
        len(report.classifications),
        directory,
        ", ".join(f"{k}={v}" for k, v in report.counts.items() if v),
    )
    return report
