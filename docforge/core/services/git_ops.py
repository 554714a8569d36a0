"""
Git helpers — advisory checks only; docforge never commits or stages.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def run_git(*args: str, cwd: Path, timeout: int = 10) -> subprocess.CompletedProcess:
    """Run a git command and capture its output."""
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def is_git_dirty(directory: Path) -> bool:
    """True when ``directory`` is inside a git work tree with uncommitted changes.

    Not a repository, or git not installed, counts as clean.
    """
    try:
        r = run_git("status", "--porcelain", cwd=directory)
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug("git unavailable in %s: %s", directory, e)
        return False

    if r.returncode != 0:
        return False
    return bool(r.stdout.strip())
