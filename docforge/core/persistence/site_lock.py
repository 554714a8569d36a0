"""
Advisory site lock — keeps two mutating runs off the same directory.

The lock is a file created with O_EXCL in the site root and removed
when the run ends. A process killed mid-run leaves the file behind;
it must then be deleted by hand.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from docforge.core.config.loader import DEFAULT_LOCK_FILENAME

logger = logging.getLogger(__name__)


class SiteLockedError(Exception):
    """Raised when another run already holds the site lock."""


@contextmanager
def site_lock(directory: Path, filename: str = DEFAULT_LOCK_FILENAME) -> Iterator[Path]:
    """Hold the advisory lock for ``directory`` for the duration of the block."""
    path = directory / filename
    try:
        fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    except FileExistsError as e:
        owner = _lock_owner(path)
        raise SiteLockedError(
            f"{path} exists — another docforge run{owner} is updating this site. "
            "If no run is active, delete the lock file and retry."
        ) from e

    try:
        os.write(fd, f"{os.getpid()}\n".encode("ascii"))
    finally:
        os.close(fd)

    logger.debug("Acquired site lock %s", path)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Released site lock %s", path)


def _lock_owner(path: Path) -> str:
    try:
        pid = path.read_text(encoding="ascii", errors="replace").strip()
    except OSError:
        return ""
    return f" (pid {pid})" if pid else ""
