"""
Eject use case — scaffold a consumer-owned override for a default component.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from docforge.core.config.loader import ConfigError, EngineConfig, load_engine_config
from docforge.core.models.manifest import TemplateVariant
from docforge.core.persistence.manifest_file import (
    ManifestWriteError,
    read_manifest,
    write_manifest,
)
from docforge.core.persistence.site_lock import SiteLockedError, site_lock
from docforge.core.services.eject import (
    EjectError,
    get_component,
    override_path,
    render_override,
    wire_override,
)
from docforge.core.services.sync_executor import write_synced
from docforge.core.services.templates.nextjs import SITE_CONFIG, EjectableComponent

logger = logging.getLogger(__name__)


@dataclass
class EjectResult:
    """Result of ``docforge eject``."""

    component: EjectableComponent | None = None
    full: bool = False
    override: str | None = None   # path written, relative to the site
    wired: bool = False           # site config now points at the override
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        assert self.component is not None
        return {
            "component": self.component.name,
            "mode": "full" if self.full else "wrap",
            "tier": self.component.tier,
            "props_type": self.component.props_type,
            "override": self.override,
            "wired": self.wired,
        }


def run_eject(
    name: str,
    directory: Path | None = None,
    *,
    full: bool = False,
    config: EngineConfig | None = None,
) -> EjectResult:
    """Write ``src/components/overrides/<name>.tsx`` and wire it in.

    Args:
        name: Component to eject (``Header``, ``Sidebar``, ...).
        directory: Site root (default: cwd).
        full: Write a blank implementation instead of a wrapper.
        config: Engine config (default: resolved from the site directory).
    """
    target = (directory or Path.cwd()).resolve()
    result = EjectResult(full=full)

    try:
        result.component = get_component(name)
    except EjectError as e:
        result.error = str(e)
        return result

    if not target.is_dir():
        result.error = f"Directory not found: {target}"
        return result

    try:
        config = config or load_engine_config(target)
    except ConfigError as e:
        result.error = str(e)
        return result

    try:
        with site_lock(target, config.lock_filename):
            _eject(target, config, result)
    except SiteLockedError as e:
        result.error = str(e)
    except ManifestWriteError as e:
        result.error = f"{e} — the override was written but is not tracked."
    except OSError as e:
        result.error = f"Cannot eject {name}: {e}"
    return result


def _eject(target: Path, config: EngineConfig, result: EjectResult) -> None:
    manifest = read_manifest(target, config.manifest_filename)
    if manifest is None:
        result.error = (
            f"Not a docforge site (no {config.manifest_filename} found). "
            "Run 'docforge create <project-dir>' first."
        )
        return
    if manifest.template is not TemplateVariant.NEXTJS:
        result.error = "Component ejection is only supported for Next.js sites."
        return

    component = result.component
    assert component is not None
    rel = override_path(component.name)
    path = target / rel
    if path.exists():
        result.error = f"Override already exists: {rel}. Edit it directly or delete it to re-eject."
        return

    write_synced(path, render_override(component, full=result.full).encode("utf-8"))
    result.override = rel
    logger.info("Ejected %s → %s", component.name, rel)

    config_path = target / SITE_CONFIG
    try:
        existing = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("%s not found — wire the %s override by hand", SITE_CONFIG, component.name)
        existing = None
    except UnicodeDecodeError as e:
        logger.warning("Cannot read %s: %s — wire the override by hand", SITE_CONFIG, e)
        existing = None

    if existing is not None:
        patched = wire_override(existing, component.name)
        if patched is None:
            logger.warning("No default %s entry in %s — wire the override by hand", component.name, SITE_CONFIG)
        else:
            if patched != existing:
                write_synced(config_path, patched.encode("utf-8"))
            result.wired = True

    manifest.record_consumer_file(rel)
    manifest.touch()
    write_manifest(target, manifest, config.manifest_filename)
