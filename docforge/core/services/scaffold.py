"""
Scaffold — create a new docs site from markdown sources.

Reads ``*.md`` files with optional YAML frontmatter (``title``,
``description``, ``order``), derives the sidebar navigation, writes every
template file of the chosen variant, copies the markdown into ``docs/``
and records the initial manifest.

Navigation grouping by ``order``:
    ≤ 10      Getting Started
    11 – 50   Features
    > 50      Reference
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from docforge.core.config.loader import EngineConfig
from docforge.core.models.manifest import FileOwner, Manifest
from docforge.core.models.template import TemplateArgs
from docforge.core.persistence.manifest_file import ManifestWriteError, write_manifest
from docforge.core.services.hashing import hash_content
from docforge.core.services.sync_executor import write_synced
from docforge.core.services.templates.base import TemplateProvider

logger = logging.getLogger(__name__)

DOCS_DIR = "docs"
DOCS_JSON = "docs.json"
DEFAULT_ORDER = 999

_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

_NAV_BANDS = (
    ("Getting Started", lambda order: order <= 10),
    ("Features", lambda order: 10 < order <= 50),
    ("Reference", lambda order: order > 50),
)


class ScaffoldError(Exception):
    """Raised when a site cannot be created."""


@dataclass
class DocPage:
    """One markdown page of the site."""

    id: str
    title: str
    raw_content: str
    description: str | None = None
    order: int = DEFAULT_ORDER


@dataclass
class ScaffoldResult:
    """Files produced by ``create_site``."""

    target_dir: Path
    manifest: Manifest
    files: list[str] = field(default_factory=list)
    docs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "target_dir": str(self.target_dir),
            "template": self.manifest.template.value,
            "theme": self.manifest.theme,
            "project_name": self.manifest.project_name,
            "default_page": self.manifest.default_page,
            "files": list(self.files),
            "docs": list(self.docs),
        }


@dataclass
class NavRefreshResult:
    """Outcome of regenerating ``docs.json``."""

    status: str              # "created" | "updated" | "unchanged" | "no-docs"
    backup: str | None = None


# ── Markdown sources ────────────────────────────────────────────


def parse_frontmatter(text: str) -> tuple[dict, str]:
    """Split YAML frontmatter from the markdown body.

    Invalid or non-mapping frontmatter is ignored (logged), never fatal.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid frontmatter: %s", e)
        return {}, text

    if not isinstance(data, dict):
        return {}, text[match.end():]
    return data, text[match.end():]


def _order_of(value: object) -> int:
    if isinstance(value, bool):
        return DEFAULT_ORDER
    try:
        order = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_ORDER
    return order or DEFAULT_ORDER


def load_doc(path: Path) -> DocPage:
    raw = path.read_text(encoding="utf-8")
    meta, _body = parse_frontmatter(raw)
    doc_id = path.stem
    title = meta.get("title")
    description = meta.get("description")
    return DocPage(
        id=doc_id,
        title=str(title) if title else doc_id[:1].upper() + doc_id[1:],
        description=str(description) if description else None,
        raw_content=raw,
        order=_order_of(meta.get("order")),
    )


def load_markdown_docs(source_dir: Path) -> list[DocPage]:
    """Load every ``*.md`` in ``source_dir`` (not recursive), sorted by order.

    Files that cannot be read as UTF-8 are skipped with a warning.
    """
    if not source_dir.is_dir():
        logger.info("No docs directory at %s", source_dir)
        return []

    docs = []
    for path in sorted(source_dir.glob("*.md")):
        if not path.is_file():
            continue
        try:
            docs.append(load_doc(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable markdown %s: %s", path, e)
    docs.sort(key=lambda d: d.order)
    logger.debug("Loaded %d docs from %s", len(docs), source_dir)
    return docs


def sample_docs(project_name: str) -> list[DocPage]:
    """Placeholder page used when the source directory has no markdown."""
    body = (
        f"# Welcome to {project_name}\n\n"
        "This is your documentation site. Add markdown files to your docs "
        "directory to get started.\n"
    )
    raw = (
        "---\n"
        "title: Overview\n"
        "description: Welcome to the documentation\n"
        "order: 1\n"
        "---\n\n"
        f"{body}"
    )
    return [
        DocPage(
            id="overview",
            title="Overview",
            description="Welcome to the documentation",
            raw_content=raw,
            order=1,
        )
    ]


# ── Navigation ──────────────────────────────────────────────────


def _nav_item(doc: DocPage) -> dict:
    item = {"id": doc.id, "title": doc.title}
    if doc.description:
        item["description"] = doc.description
    return item


def _group_id(title: str) -> str:
    return re.sub(r"\s+", "-", title.strip().lower())


def build_navigation(docs: list[DocPage]) -> list[dict]:
    """Group pages into sidebar sections by their ``order`` band."""
    groups = []
    for title, in_band in _NAV_BANDS:
        items = [_nav_item(d) for d in docs if in_band(d.order)]
        if items:
            groups.append({"id": _group_id(title), "title": title, "items": items})

    if not groups and docs:
        groups.append({
            "id": "documentation",
            "title": "Documentation",
            "items": [_nav_item(d) for d in docs],
        })
    return groups


def render_docs_json(project_name: str, navigation: list[dict]) -> str:
    return json.dumps({"name": project_name, "groups": navigation}, indent=2, ensure_ascii=False) + "\n"


def refresh_navigation(site_dir: Path, project_name: str, backup_root: Path) -> NavRefreshResult:
    """Regenerate ``docs.json`` from the site's own ``docs/*.md``.

    ``docs.json`` is consumer-owned, so this only runs on explicit request
    and backs up a differing file before replacing it.
    """
    docs = load_markdown_docs(site_dir / DOCS_DIR)
    if not docs:
        return NavRefreshResult(status="no-docs")

    content = render_docs_json(project_name, build_navigation(docs)).encode("utf-8")
    target = site_dir / DOCS_JSON

    try:
        existing = target.read_bytes()
    except FileNotFoundError:
        existing = None

    if existing == content:
        return NavRefreshResult(status="unchanged")

    backup = None
    if existing is not None:
        backup_path = backup_root / DOCS_JSON
        write_synced(backup_path, existing)
        backup = str(backup_path.relative_to(site_dir))

    write_synced(target, content)
    logger.info("Regenerated %s (%d pages)", target, len(docs))
    return NavRefreshResult(status="created" if existing is None else "updated", backup=backup)


# ── Site creation ───────────────────────────────────────────────


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def create_site(
    target_dir: Path,
    *,
    provider: TemplateProvider,
    args: TemplateArgs,
    docs: list[DocPage],
    config: EngineConfig,
) -> ScaffoldResult:
    """Write a complete new site and its manifest.

    Raises:
        ScaffoldError: If ``target_dir`` already exists or cannot be written.
    """
    if target_dir.exists():
        raise ScaffoldError(f"Directory already exists: {target_dir}")

    manifest = Manifest(
        tool_version=config.tool_version,
        template=provider.variant,
        theme=args.theme,
        project_name=args.project_name,
        default_page=args.default_page,
        files={},
    )
    result = ScaffoldResult(target_dir=target_dir, manifest=manifest)

    try:
        target_dir.mkdir(parents=True)

        for generated in provider.scaffold_files(args):
            data = generated.content.encode("utf-8")
            _write_file(target_dir / generated.path, data)
            result.files.append(generated.path)
            if generated.owner == FileOwner.TOOL.value:
                manifest.record_tool_file(generated.path, hash_content(data), config.tool_version)

        navigation = build_navigation(docs)
        _write_file(
            target_dir / DOCS_JSON,
            render_docs_json(args.project_name, navigation).encode("utf-8"),
        )
        result.files.append(DOCS_JSON)

        for doc in docs:
            rel = f"{DOCS_DIR}/{doc.id}.md"
            _write_file(target_dir / rel, doc.raw_content.encode("utf-8"))
            result.docs.append(rel)

        for path in provider.consumer_files:
            manifest.record_consumer_file(path)

        write_manifest(target_dir, manifest, config.manifest_filename)
    except (OSError, ManifestWriteError) as e:
        raise ScaffoldError(f"Cannot create site in {target_dir}: {e}") from e

    logger.info("Created %s site in %s (%d files)", provider.variant.value, target_dir, len(result.files))
    return result
