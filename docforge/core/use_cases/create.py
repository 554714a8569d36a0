"""
Create use case — scaffold a new docs site from a markdown directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from docforge.core.config.loader import ConfigError, EngineConfig, load_engine_config
from docforge.core.models.template import TemplateArgs
from docforge.core.models.theme import VALID_THEMES
from docforge.core.services.scaffold import (
    ScaffoldError,
    ScaffoldResult,
    create_site,
    load_markdown_docs,
    sample_docs,
)
from docforge.core.services.templates import (
    DEFAULT_VARIANT,
    UnknownTemplateError,
    get_provider,
)

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "docs"


@dataclass
class CreateResult:
    """Result of ``docforge create``."""

    scaffold: ScaffoldResult | None = None
    source_dir: Path | None = None
    used_sample: bool = False
    theme_fallback: str | None = None   # theme name that was not recognised
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        result: dict = {
            "source_dir": str(self.source_dir) if self.source_dir else None,
            "used_sample": self.used_sample,
        }
        if self.theme_fallback:
            result["theme_fallback"] = self.theme_fallback
        if self.scaffold:
            result.update(self.scaffold.to_dict())
        return result


def run_create(
    project_dir: Path,
    *,
    source: Path | None = None,
    name: str | None = None,
    template: str | None = None,
    theme: str | None = None,
    cwd: Path | None = None,
    config: EngineConfig | None = None,
) -> CreateResult:
    """Create a new site in ``project_dir``.

    Args:
        project_dir: Target directory; must not exist yet.
        source: Markdown directory (default: ``./docs``).
        name: Project name (default: the target directory's name).
        template: ``astro`` or ``nextjs`` (default: nextjs).
        theme: Theme name; unknown names fall back to ``neutral``.
        cwd: Base for relative paths (default: process cwd).
        config: Engine config (default: resolved from ``cwd``).
    """
    base = cwd or Path.cwd()
    target = (base / project_dir).resolve()
    source_dir = (base / (source or Path(DEFAULT_SOURCE))).resolve()
    result = CreateResult(source_dir=source_dir)

    try:
        provider = get_provider(template or DEFAULT_VARIANT)
    except UnknownTemplateError as e:
        result.error = str(e)
        return result

    try:
        config = config or load_engine_config(base)
    except ConfigError as e:
        result.error = str(e)
        return result

    if theme and theme.strip().lower() not in VALID_THEMES:
        logger.warning("Unknown theme %r — using the default", theme)
        result.theme_fallback = theme

    project_name = name or target.name
    docs = load_markdown_docs(source_dir)
    if not docs:
        docs = sample_docs(project_name)
        result.used_sample = True

    args = TemplateArgs(project_name=project_name, theme=theme, default_page=docs[0].id)

    try:
        result.scaffold = create_site(
            target, provider=provider, args=args, docs=docs, config=config,
        )
    except ScaffoldError as e:
        result.error = str(e)

    return result
