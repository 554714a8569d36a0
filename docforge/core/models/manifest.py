"""
Manifest model — the persisted record of what docforge last wrote.

One manifest lives at the root of every scaffolded site. It is the
baseline for three-way classification during ``docforge update``:
the recorded hash tells "stale but tool-authored" apart from
"hand-edited by the user".

The JSON wire format uses camelCase keys (``toolVersion``,
``projectName``, ...) and must stay backward compatible: unknown
keys are ignored and missing optional keys default. A manifest
without its template, project name, default page or file table
fails validation and is read as absent.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from docforge.core.models.template import TemplateArgs


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class FileOwner(str, Enum):
    """Who owns a file after scaffold time."""

    TOOL = "tool"          # regenerated on every sync
    CONSUMER = "consumer"  # written once, never touched again


class TemplateVariant(str, Enum):
    """Template family that produced a site."""

    ASTRO = "astro"
    NEXTJS = "nextjs"


class ManagedFileRecord(BaseModel):
    """One tracked file path in the manifest.

    Consumer-owned records never carry a hash: the engine must not
    use one for auto-overwrite decisions, so it is dropped on load.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    owner: FileOwner = FileOwner.TOOL
    content_hash: str | None = Field(default=None, alias="hash")
    tool_version: str | None = Field(default=None, alias="version")

    @model_validator(mode="after")
    def _consumer_has_no_hash(self) -> ManagedFileRecord:
        if self.owner is FileOwner.CONSUMER:
            self.content_hash = None
            self.tool_version = None
        return self

    @classmethod
    def tool(cls, content_hash: str | None, tool_version: str | None) -> ManagedFileRecord:
        return cls(owner=FileOwner.TOOL, content_hash=content_hash, tool_version=tool_version)

    @classmethod
    def consumer(cls) -> ManagedFileRecord:
        return cls(owner=FileOwner.CONSUMER)

    @property
    def is_tool_owned(self) -> bool:
        return self.owner is FileOwner.TOOL


class Manifest(BaseModel):
    """Root manifest model — serialized to ``.docforge-manifest.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # ── Provenance ───────────────────────────────────────────────
    tool_version: str = Field(default="0.0.0", alias="toolVersion")
    created_at: str = Field(default_factory=_now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=_now_iso, alias="updatedAt")

    # ── Template family + arguments ──────────────────────────────
    template: TemplateVariant
    theme: str = "neutral"
    project_name: str = Field(alias="projectName")
    default_page: str = Field(alias="defaultPage")

    # ── Tracked files ────────────────────────────────────────────
    files: dict[str, ManagedFileRecord]

    @field_serializer("files")
    def _sorted_files(self, files: dict[str, ManagedFileRecord]) -> dict[str, Any]:
        # Sorted by path.
        return {
            path: files[path].model_dump(mode="json", by_alias=True, exclude_none=True)
            for path in sorted(files)
        }

    def touch(self, tool_version: str | None = None) -> None:
        """Bump ``updated_at`` (and optionally the recorded tool version)."""
        self.updated_at = _now_iso()
        if tool_version is not None:
            self.tool_version = tool_version

    def template_args(self) -> TemplateArgs:
        """Template arguments to re-supply to the provider on every sync."""
        return TemplateArgs(
            project_name=self.project_name,
            theme=self.theme,
            default_page=self.default_page,
        )

    def record_for(self, path: str) -> ManagedFileRecord | None:
        return self.files.get(path)

    def record_tool_file(self, path: str, content_hash: str, tool_version: str) -> None:
        """Record (or refresh) the hash the tool wrote for ``path``."""
        self.files[path] = ManagedFileRecord.tool(content_hash, tool_version)

    def record_consumer_file(self, path: str) -> None:
        self.files[path] = ManagedFileRecord.consumer()

    def tool_owned_paths(self) -> list[str]:
        return [p for p, rec in self.files.items() if rec.is_tool_owned]

    def to_json(self) -> str:
        """Stable, pretty-printed, newline-terminated JSON document."""
        import json

        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
