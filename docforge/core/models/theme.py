"""
Color themes — the closed set of themes a site can be scaffolded with.

Each theme contributes an accent color pair to the generated stylesheet.
The accent literal is also what adoption pattern-matches to recover
the theme of an unmanaged site, so accents must be unique per theme.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Theme(BaseModel):
    """A named accent palette."""

    model_config = ConfigDict(frozen=True)

    name: str
    accent: str        # light mode
    accent_dark: str   # dark mode
    label: str = ""


DEFAULT_THEME = "neutral"

THEMES: dict[str, Theme] = {
    t.name: t
    for t in (
        Theme(name="neutral", accent="#171717", accent_dark="#e5e5e5", label="Neutral"),
        Theme(name="ocean", accent="#3b82f6", accent_dark="#60a5fa", label="Ocean"),
        Theme(name="emerald", accent="#10b981", accent_dark="#34d399", label="Emerald"),
        Theme(name="purple", accent="#8b5cf6", accent_dark="#a78bfa", label="Purple"),
        Theme(name="dusk", accent="#d97706", accent_dark="#fbbf24", label="Dusk"),
        Theme(name="rose", accent="#f43f5e", accent_dark="#fb7185", label="Rose"),
        Theme(name="github", accent="#0969da", accent_dark="#58a6ff", label="GitHub"),
        Theme(name="warm", accent="#ea580c", accent_dark="#fb923c", label="Warm"),
    )
}

VALID_THEMES: tuple[str, ...] = tuple(THEMES)


def resolve_theme(name: str | None) -> str:
    """Normalize a theme name; unknown or empty names fall back to the default."""
    if not name:
        return DEFAULT_THEME
    key = name.strip().lower()
    return key if key in THEMES else DEFAULT_THEME


def get_theme(name: str | None) -> Theme:
    return THEMES[resolve_theme(name)]


def theme_for_accent(color: str) -> str | None:
    """Reverse lookup: which theme uses this accent literal (either mode)?"""
    needle = color.strip().lower()
    for theme in THEMES.values():
        if needle in (theme.accent, theme.accent_dark):
            return theme.name
    return None
