"""
Domain models — Pydantic types for docforge.

All models are re-exported here for convenient access:

    from docforge.core.models import Manifest, ManagedFileRecord, TemplateArgs
"""

from docforge.core.models.manifest import (
    FileOwner,
    ManagedFileRecord,
    Manifest,
    TemplateVariant,
)
from docforge.core.models.template import GeneratedFile, TemplateArgs
from docforge.core.models.theme import (
    DEFAULT_THEME,
    THEMES,
    VALID_THEMES,
    Theme,
    resolve_theme,
)

__all__ = [
    # manifest.py
    "FileOwner",
    "ManagedFileRecord",
    "Manifest",
    "TemplateVariant",
    # template.py
    "GeneratedFile",
    "TemplateArgs",
    # theme.py
    "DEFAULT_THEME",
    "THEMES",
    "Theme",
    "VALID_THEMES",
    "resolve_theme",
]
