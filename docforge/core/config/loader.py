"""
Engine configuration — the explicit settings injected into every run.

The tool version, manifest filename, backup directory and lock filename
are resolved once per invocation and handed to the sync executor and
the manifest store. Nothing reads them from module globals.

Sources, in precedence order:
    DOCFORGE_* env vars  >  docforge.yml (searched upward)  >  defaults
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from docforge import __version__

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "docforge.yml"

# Defaults for the well-known site paths
DEFAULT_MANIFEST_FILENAME = ".docforge-manifest.json"
DEFAULT_BACKUP_DIRNAME = ".docforge-backup"
DEFAULT_LOCK_FILENAME = ".docforge.lock"

_ENV_KEYS = {
    "DOCFORGE_TOOL_VERSION": "tool_version",
    "DOCFORGE_MANIFEST_FILENAME": "manifest_filename",
    "DOCFORGE_BACKUP_DIRNAME": "backup_dirname",
    "DOCFORGE_LOCK_FILENAME": "lock_filename",
}


class ConfigError(Exception):
    """Raised when the docforge configuration is invalid."""


class EngineConfig(BaseModel):
    """Per-run engine settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tool_version: str
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME
    backup_dirname: str = DEFAULT_BACKUP_DIRNAME
    lock_filename: str = DEFAULT_LOCK_FILENAME

    @field_validator("manifest_filename", "backup_dirname", "lock_filename")
    @classmethod
    def _plain_name(cls, value: str) -> str:
        if not value or value in (".", "..") or "/" in value or "\\" in value:
            raise ValueError(f"must be a plain file name, got {value!r}")
        return value


def resolve_tool_version() -> str:
    """Version of the installed distribution, or the package constant."""
    try:
        return version("docforge")
    except PackageNotFoundError:
        return __version__


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for docforge.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to docforge.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_config_file(path: Path) -> dict:
    logger.debug("Loading engine config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "docforge" key or be flat
    if "docforge" in data:
        nested = data["docforge"] or {}
        if not isinstance(nested, dict):
            raise ConfigError(f"Expected a mapping under 'docforge' in {path}")
        return dict(nested)
    return data


def load_engine_config(
    site_dir: Path | None = None,
    *,
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> EngineConfig:
    """Resolve the engine configuration for one run.

    Args:
        site_dir: Directory to search upward from for docforge.yml.
        path: Explicit config file path (skips the search).
        env: Environment mapping (default: ``os.environ``).

    Raises:
        ConfigError: If the config file exists but is invalid.
    """
    env = os.environ if env is None else env

    if path is None:
        path = find_config_file(site_dir)

    data: dict = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data = _read_config_file(path)

    for env_key, field in _ENV_KEYS.items():
        if env.get(env_key):
            data[field] = env[env_key]

    data.setdefault("tool_version", resolve_tool_version())

    try:
        config = EngineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid docforge configuration: {e}") from e

    logger.debug("Engine config: %s", config.model_dump())
    return config
