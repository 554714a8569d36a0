"""
Manifest persistence — read/write ``.docforge-manifest.json``.

Reads never fail: a missing, unreadable or malformed manifest comes
back as ``None`` and the caller falls through to adoption. Writes are
atomic (temp file in the same directory, fsync, rename) and any
failure is raised, because a sync without a persisted manifest leaves
the next run with untrustworthy hashes.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from docforge.core.config.loader import DEFAULT_MANIFEST_FILENAME
from docforge.core.models.manifest import Manifest

logger = logging.getLogger(__name__)


class ManifestWriteError(Exception):
    """Raised when the manifest could not be persisted."""


def manifest_path(directory: Path, filename: str = DEFAULT_MANIFEST_FILENAME) -> Path:
    """Get the manifest path for a site directory."""
    return directory / filename


def read_manifest(
    directory: Path,
    filename: str = DEFAULT_MANIFEST_FILENAME,
) -> Manifest | None:
    """Load the manifest of a site.

    Returns:
        The manifest, or None if it is absent or cannot be parsed.
    """
    path = manifest_path(directory, filename)
    if not path.is_file():
        logger.info("No manifest at %s", path)
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read manifest %s: %s — treating as absent", path, e)
        return None
    except json.JSONDecodeError as e:
        logger.warning("Corrupt manifest %s: %s — treating as absent", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Manifest %s is not a JSON object — treating as absent", path)
        return None

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid manifest %s: %s — treating as absent", path, e)
        return None

    logger.debug(
        "Loaded manifest from %s (%d files, updatedAt=%s)",
        path, len(manifest.files), manifest.updated_at,
    )
    return manifest


def write_manifest(
    directory: Path,
    manifest: Manifest,
    filename: str = DEFAULT_MANIFEST_FILENAME,
) -> Path:
    """Persist a manifest, fully replacing the previous file.

    Timestamps are left alone; callers bump ``updated_at`` via
    ``Manifest.touch()`` when the manifest actually changed.

    Raises:
        ManifestWriteError: If the manifest could not be written.
    """
    path = manifest_path(directory, filename)
    content = manifest.to_json()

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=directory,
            prefix=".docforge-manifest_",
            suffix=".tmp",
        )
    except OSError as e:
        logger.error("Failed to save manifest to %s: %s", path, e)
        raise ManifestWriteError(f"Cannot write manifest {path}: {e}") from e

    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        tmp.replace(path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save manifest to %s: %s", path, e)
        raise ManifestWriteError(f"Cannot write manifest {path}: {e}") from e

    logger.debug("Manifest saved to %s", path)
    return path
