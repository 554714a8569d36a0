"""
Template models — arguments fed to a template provider and the files it produces.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from docforge.core.models.theme import DEFAULT_THEME, resolve_theme


class TemplateArgs(BaseModel):
    """The closed set of arguments every template function receives.

    Unknown fields are rejected so that a typo in a caller never silently
    renders a different site.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_name: str
    theme: str = DEFAULT_THEME
    default_page: str = "overview"

    @field_validator("theme", mode="before")
    @classmethod
    def _known_theme(cls, value: str | None) -> str:
        return resolve_theme(value)

    @field_validator("project_name", "default_page")
    @classmethod
    def _strip(cls, value: str) -> str:
        # Adoption reads these back stripped.
        return value.strip()


class GeneratedFile(BaseModel):
    """A file produced at scaffold time.

    Attributes:
        path:    Relative path from the site root (POSIX separators).
        content: Full file content.
        owner:   ``tool`` or ``consumer`` (see ``FileOwner``).
        reason:  Why this file was generated.
    """

    path: str
    content: str
    owner: str = "tool"
    reason: str = ""
