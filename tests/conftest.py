"""
Shared test fixtures and configuration.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from docforge.core.config.loader import EngineConfig
from docforge.core.models.manifest import Manifest, TemplateVariant
from docforge.core.models.template import TemplateArgs
from docforge.core.services.hashing import hash_content
from docforge.core.services.templates.base import TemplateProvider, static_template


class FakeTemplate(TemplateProvider):
    """A provider with a fixed, argument-independent set of files."""

    variant = TemplateVariant.ASTRO
    consumer_files = ("docs.json",)

    def __init__(self, files: dict[str, str]):
        self.owned_files = tuple(files)
        self.marker_files = tuple(files)[:1]
        self.templates = {path: static_template(content) for path, content in files.items()}

    def infer_args(self, directory: Path) -> TemplateArgs:
        return TemplateArgs(project_name="docs")


@pytest.fixture
def engine_config() -> EngineConfig:
    """Engine config pinned to a known tool version."""
    return EngineConfig(tool_version="1.0.0")


@pytest.fixture
def make_provider() -> Callable[[dict[str, str]], FakeTemplate]:
    """Factory for providers that generate exactly the given files."""
    return FakeTemplate


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Return an empty site directory."""
    site = tmp_path / "site"
    site.mkdir()
    return site


def write_site_file(site: Path, path: str, content: str) -> None:
    target = site / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")


@pytest.fixture
def write_file() -> Callable[[Path, str, str], None]:
    """Write a file relative to a site root, creating parents."""
    return write_site_file


@pytest.fixture
def manifest_with() -> Callable[..., Manifest]:
    """Build a manifest recording the given path → content pairs as tool-written."""

    def _build(files: dict[str, str], tool_version: str = "1.0.0") -> Manifest:
        manifest = Manifest(
            tool_version=tool_version,
            template=TemplateVariant.ASTRO,
            project_name="docs",
            default_page="overview",
            files={},
        )
        for path, content in files.items():
            manifest.record_tool_file(path, hash_content(content), tool_version)
        return manifest

    return _build
