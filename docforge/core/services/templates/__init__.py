"""
Template providers — one per site variant.

    from docforge.core.services.templates import get_provider, detect_variant

``get_provider`` is the single dispatch point from a ``TemplateVariant``
to its provider. ``detect_variant`` is used by adoption when a site has
no manifest.
"""

from __future__ import annotations

from pathlib import Path

from docforge.core.models.manifest import TemplateVariant
from docforge.core.services.templates.astro import AstroTemplate
from docforge.core.services.templates.base import (
    TemplateProvider,
    UnknownTemplateError,
    VariantMismatchError,
)
from docforge.core.services.templates.nextjs import NextjsTemplate

_PROVIDERS: dict[TemplateVariant, TemplateProvider] = {
    TemplateVariant.NEXTJS: NextjsTemplate(),
    TemplateVariant.ASTRO: AstroTemplate(),
}

DEFAULT_VARIANT = TemplateVariant.NEXTJS


def get_provider(variant: TemplateVariant | str) -> TemplateProvider:
    """Look up the provider for a template variant.

    Raises:
        UnknownTemplateError: If the variant is not known.
    """
    try:
        key = TemplateVariant(variant)
    except ValueError as e:
        valid = ", ".join(v.value for v in TemplateVariant)
        raise UnknownTemplateError(f"Unknown template {variant!r} (expected one of: {valid})") from e
    return _PROVIDERS[key]


def list_providers() -> list[TemplateProvider]:
    return list(_PROVIDERS.values())


def detect_variant(directory: Path) -> TemplateVariant | None:
    """Which variant's marker files are present in ``directory``.

    Checked in registry order, so Next.js wins when both match.
    """
    for variant, provider in _PROVIDERS.items():
        if provider.matches(directory):
            return variant
    return None


__all__ = [
    "DEFAULT_VARIANT",
    "TemplateProvider",
    "UnknownTemplateError",
    "VariantMismatchError",
    "detect_variant",
    "get_provider",
    "list_providers",
]
