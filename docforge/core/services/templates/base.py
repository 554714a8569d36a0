"""
Template provider base — the interface every site variant implements.

A provider is the only component that knows what a generated site
looks like. The reconciliation engine treats it as a pure function
``(path, TemplateArgs) -> str`` plus a few fixed path lists:

    owned_files      Regenerated on every sync (tool-owned), in order.
    consumer_files   Written once at scaffold time, never again.
    marker_files     All present → the directory looks like this variant.

Providers are selected once from ``Manifest.template`` through the
registry in ``docforge.core.services.templates``; nothing downstream
branches on the variant name.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path

from docforge.core.models.manifest import FileOwner, TemplateVariant
from docforge.core.models.template import GeneratedFile, TemplateArgs

logger = logging.getLogger(__name__)

TemplateFn = Callable[[TemplateArgs], str]

# Fallbacks when adoption cannot infer a value
DEFAULT_PROJECT_NAME = "docs"
DEFAULT_PAGE = "overview"


class UnknownTemplateError(Exception):
    """Raised when a provider is asked for a path it does not generate."""


class VariantMismatchError(Exception):
    """Raised when a provider is used against a site of another variant."""


class TemplateProvider(ABC):
    """One template family (Astro, Next.js, ...)."""

    variant: TemplateVariant
    label: str = ""
    dev_url: str = ""

    owned_files: tuple[str, ...] = ()
    consumer_files: tuple[str, ...] = ()
    marker_files: tuple[str, ...] = ()

    # path → template function
    templates: Mapping[str, TemplateFn] = {}
    consumer_templates: Mapping[str, TemplateFn] = {}

    # ── Rendering ───────────────────────────────────────────────

    def render(self, path: str, args: TemplateArgs) -> str:
        """Full desired content of a tool-owned file."""
        fn = self.templates.get(path)
        if fn is None:
            raise UnknownTemplateError(f"{self.variant.value} template has no file {path!r}")
        return fn(args)

    def render_consumer(self, path: str, args: TemplateArgs) -> str:
        """Scaffold-time content of a consumer-owned file."""
        fn = self.consumer_templates.get(path)
        if fn is None:
            raise UnknownTemplateError(
                f"{self.variant.value} template has no consumer file {path!r}"
            )
        return fn(args)

    def scaffold_files(self, args: TemplateArgs) -> list[GeneratedFile]:
        """Every file written by ``docforge create`` (except docs content)."""
        files = [
            GeneratedFile(
                path=path,
                content=self.render(path, args),
                owner=FileOwner.TOOL.value,
                reason="regenerated by docforge update",
            )
            for path in self.owned_files
        ]
        files.extend(
            GeneratedFile(
                path=path,
                content=self.render_consumer(path, args),
                owner=FileOwner.CONSUMER.value,
                reason="written once, yours to edit",
            )
            for path in self.consumer_files
            if path in self.consumer_templates
        )
        return files

    # ── Detection + adoption ────────────────────────────────────

    def matches(self, directory: Path) -> bool:
        """True when every marker path of this variant exists in ``directory``."""
        return bool(self.marker_files) and all(
            (directory / marker).is_file() for marker in self.marker_files
        )

    def check_variant(self, variant: TemplateVariant) -> None:
        """Reject use against a site produced by a different template family."""
        if variant is not self.variant:
            raise VariantMismatchError(
                f"Site was generated with the {variant.value!r} template; "
                f"the {self.variant.value!r} templates cannot update it."
            )

    @abstractmethod
    def infer_args(self, directory: Path) -> TemplateArgs:
        """Best-effort recovery of the template arguments from disk content."""


# ── Helpers for inference ───────────────────────────────────────


def read_text_or_none(path: Path) -> str | None:
    """Read a UTF-8 file; None when absent or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def search_group(pattern: re.Pattern[str], text: str | None) -> str | None:
    """First capture group of ``pattern`` in ``text``, if any."""
    if not text:
        return None
    match = pattern.search(text)
    if match is None:
        return None
    value = match.group(1).strip()
    return value or None


def static_template(text: str) -> TemplateFn:
    """Template function for a file that does not depend on its arguments."""
    return lambda _args: text
