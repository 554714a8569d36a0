"""
Status use case — read-only view of how a site compares to the templates.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from docforge.core.config.loader import ConfigError, EngineConfig, load_engine_config
from docforge.core.models.manifest import Manifest
from docforge.core.persistence.manifest_file import read_manifest
from docforge.core.services.classifier import ClassificationReport, classify_site
from docforge.core.services.templates import (
    UnknownTemplateError,
    VariantMismatchError,
    detect_variant,
    get_provider,
)


@dataclass
class StatusResult:
    """Site status summary."""

    directory: Path | None = None
    manifest: Manifest | None = None
    report: ClassificationReport | None = None
    tool_version: str = ""
    adoptable: bool = False
    detected_template: str | None = None
    error: str | None = None

    @property
    def outdated(self) -> bool:
        return (
            self.manifest is not None
            and self.manifest.tool_version != self.tool_version
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {"directory": str(self.directory) if self.directory else None}
        if self.error:
            result["error"] = self.error
            if self.adoptable:
                result["adoptable"] = True
                result["detected_template"] = self.detected_template
            return result

        assert self.manifest is not None
        result["site"] = {
            "template": self.manifest.template.value,
            "theme": self.manifest.theme,
            "project_name": self.manifest.project_name,
            "default_page": self.manifest.default_page,
            "site_version": self.manifest.tool_version,
            "tool_version": self.tool_version,
            "updated_at": self.manifest.updated_at,
        }
        if self.report:
            result["classification"] = self.report.to_dict()
            result["up_to_date"] = self.report.up_to_date and not self.outdated
        return result


def get_site_status(
    directory: Path | None = None,
    config: EngineConfig | None = None,
) -> StatusResult:
    """Classify a site without touching it.

    A directory with no manifest is reported as an error; ``adoptable``
    tells whether ``docforge update`` would adopt it.
    """
    target = (directory or Path.cwd()).resolve()
    result = StatusResult(directory=target)

    if not target.is_dir():
        result.error = f"Directory not found: {target}"
        return result

    try:
        config = config or load_engine_config(target)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.tool_version = config.tool_version

    manifest = read_manifest(target, config.manifest_filename)
    if manifest is None:
        variant = detect_variant(target)
        if variant is not None:
            result.adoptable = True
            result.detected_template = variant.value
            result.error = (
                f"No {config.manifest_filename} — looks like a {variant.value} "
                "docforge site; 'docforge update' will adopt it."
            )
        else:
            result.error = f"Not a docforge site (no {config.manifest_filename} found)."
        return result

    result.manifest = manifest
    try:
        result.report = classify_site(target, manifest, get_provider(manifest.template))
    except (UnknownTemplateError, VariantMismatchError) as e:
        result.error = str(e)

    return result
