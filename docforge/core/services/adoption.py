"""
Adoption — synthesize a manifest for a docforge site that lost (or never had) one.

When a directory has no readable manifest but carries the marker files
of a known template, the current disk content is trusted as docforge's
own prior output: every tool-owned file present gets its disk hash
recorded as the baseline. Template arguments are recovered by the
provider's pattern matching and fall back to defaults when a file was
edited beyond recognition.

Adoption only produces the manifest. Applying templates is left to the
next ``docforge update`` so the inferred values can be reviewed first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from docforge.core.config.loader import EngineConfig
from docforge.core.models.manifest import Manifest
from docforge.core.services.classifier import read_disk
from docforge.core.services.hashing import hash_content
from docforge.core.services.templates import detect_variant, get_provider

logger = logging.getLogger(__name__)


@dataclass
class AdoptionResult:
    """A synthesized manifest plus what went into it."""

    manifest: Manifest
    tracked: list[str]      # tool-owned files hashed from disk
    unreadable: list[str]   # tool-owned files present but unreadable

    def to_dict(self) -> dict:
        return {
            "template": self.manifest.template.value,
            "theme": self.manifest.theme,
            "project_name": self.manifest.project_name,
            "default_page": self.manifest.default_page,
            "tracked": list(self.tracked),
            "unreadable": list(self.unreadable),
        }


def is_adoptable(directory: Path) -> bool:
    return detect_variant(directory) is not None


def adopt_site(directory: Path, config: EngineConfig) -> AdoptionResult | None:
    """Build a baseline manifest from disk, or None if the layout is unknown."""
    variant = detect_variant(directory)
    if variant is None:
        logger.info("%s does not match any known template layout", directory)
        return None

    provider = get_provider(variant)
    args = provider.infer_args(directory)
    logger.info(
        "Adopting %s site (theme=%s, project=%s, default page=%s)",
        variant.value, args.theme, args.project_name, args.default_page,
    )

    manifest = Manifest(
        tool_version=config.tool_version,
        template=variant,
        theme=args.theme,
        project_name=args.project_name,
        default_page=args.default_page,
        files={},
    )

    tracked: list[str] = []
    unreadable: list[str] = []
    for path in provider.owned_files:
        try:
            content = read_disk(directory / path)
        except OSError as e:
            logger.warning("Cannot read %s during adoption: %s", path, e)
            unreadable.append(path)
            continue
        if content is None:
            continue
        manifest.record_tool_file(path, hash_content(content), config.tool_version)
        tracked.append(path)

    for path in provider.consumer_files:
        manifest.record_consumer_file(path)

    return AdoptionResult(manifest=manifest, tracked=tracked, unreadable=unreadable)
