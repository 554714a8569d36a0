"""
Tests for data models — manifest, themes, template arguments.
"""

import json

import pytest
from pydantic import ValidationError

from docforge.core.models.manifest import (
    FileOwner,
    ManagedFileRecord,
    Manifest,
    TemplateVariant,
)
from docforge.core.models.template import TemplateArgs
from docforge.core.models.theme import (
    DEFAULT_THEME,
    THEMES,
    get_theme,
    resolve_theme,
    theme_for_accent,
)


class TestManagedFileRecord:
    def test_tool_record(self):
        rec = ManagedFileRecord.tool("abc", "1.0.0")
        assert rec.is_tool_owned
        assert rec.content_hash == "abc"
        assert rec.tool_version == "1.0.0"

    def test_consumer_record_drops_hash(self):
        """A consumer record never carries a hash, even if one is on disk."""
        rec = ManagedFileRecord.model_validate(
            {"owner": "consumer", "hash": "abc", "version": "1.0.0"}
        )
        assert rec.owner is FileOwner.CONSUMER
        assert rec.content_hash is None
        assert rec.tool_version is None

    def test_defaults_to_tool(self):
        rec = ManagedFileRecord.model_validate({"hash": "abc"})
        assert rec.owner is FileOwner.TOOL


def _manifest(**overrides) -> Manifest:
    fields = {
        "template": TemplateVariant.ASTRO,
        "project_name": "docs",
        "default_page": "overview",
        "files": {},
    }
    fields.update(overrides)
    return Manifest(**fields)


class TestManifest:
    def test_defaults(self):
        m = _manifest()
        assert m.theme == "neutral"
        assert m.tool_version == "0.0.0"
        assert m.files == {}

    def test_camel_case_wire_format(self):
        m = _manifest(tool_version="1.2.0", template=TemplateVariant.NEXTJS, project_name="Acme")
        m.record_tool_file("b.css", "h2", "1.2.0")
        m.record_consumer_file("docs.json")
        data = json.loads(m.to_json())

        assert data["toolVersion"] == "1.2.0"
        assert data["template"] == "nextjs"
        assert data["projectName"] == "Acme"
        assert data["defaultPage"] == "overview"
        assert "createdAt" in data and "updatedAt" in data
        assert data["files"]["b.css"] == {"owner": "tool", "hash": "h2", "version": "1.2.0"}
        assert data["files"]["docs.json"] == {"owner": "consumer"}

    def test_files_serialized_sorted(self):
        m = _manifest()
        for path in ("z.css", "a.css", "m/x.ts"):
            m.record_tool_file(path, "h", "1.0.0")
        data = json.loads(m.to_json())
        assert list(data["files"]) == ["a.css", "m/x.ts", "z.css"]

    def test_json_ends_with_newline(self):
        assert _manifest().to_json().endswith("}\n")

    def test_roundtrip(self):
        m = _manifest(tool_version="2.0.0", theme="ocean", default_page="intro")
        m.record_tool_file("a.css", "h1", "2.0.0")
        m.record_consumer_file("package.json")

        loaded = Manifest.model_validate(json.loads(m.to_json()))
        assert loaded == m

    def test_unknown_keys_ignored(self):
        data = {
            "toolVersion": "1.0.0",
            "template": "astro",
            "projectName": "Acme",
            "defaultPage": "intro",
            "futureField": {"x": 1},
            "files": {},
        }
        m = Manifest.model_validate(data)
        assert m.tool_version == "1.0.0"

    def test_missing_optional_keys_default(self):
        m = Manifest.model_validate(
            {"template": "nextjs", "projectName": "Acme", "defaultPage": "intro", "files": {}}
        )
        assert m.theme == "neutral"
        assert m.tool_version == "0.0.0"

    def test_empty_document_rejected(self):
        with pytest.raises(ValidationError):
            Manifest.model_validate({})

    @pytest.mark.parametrize("key", ["template", "projectName", "defaultPage", "files"])
    def test_required_keys(self, key: str):
        data = json.loads(_manifest().to_json())
        del data[key]
        with pytest.raises(ValidationError):
            Manifest.model_validate(data)

    def test_touch_bumps_version(self):
        m = _manifest(tool_version="1.0.0", updated_at="2000-01-01T00:00:00+00:00")
        m.touch("1.1.0")
        assert m.tool_version == "1.1.0"
        assert m.updated_at != "2000-01-01T00:00:00+00:00"

    def test_tool_owned_paths(self):
        m = _manifest()
        m.record_tool_file("a.css", "h", "1.0.0")
        m.record_consumer_file("docs.json")
        assert m.tool_owned_paths() == ["a.css"]

    def test_template_args(self):
        m = _manifest(theme="rose", project_name="Acme", default_page="start")
        args = m.template_args()
        assert args == TemplateArgs(project_name="Acme", theme="rose", default_page="start")


class TestThemes:
    def test_resolve_known(self):
        assert resolve_theme("ocean") == "ocean"
        assert resolve_theme(" Ocean ") == "ocean"

    def test_resolve_unknown_falls_back(self):
        assert resolve_theme("neon") == DEFAULT_THEME
        assert resolve_theme(None) == DEFAULT_THEME
        assert resolve_theme("") == DEFAULT_THEME

    def test_accents_are_unique(self):
        accents = [t.accent for t in THEMES.values()] + [t.accent_dark for t in THEMES.values()]
        assert len(accents) == len(set(accents))

    def test_reverse_lookup(self):
        for name, theme in THEMES.items():
            assert theme_for_accent(theme.accent) == name
            assert theme_for_accent(theme.accent.upper()) == name
        assert theme_for_accent("#123456") is None

    def test_get_theme(self):
        assert get_theme("github").accent == "#0969da"
        assert get_theme("nope").name == DEFAULT_THEME


class TestTemplateArgs:
    def test_unknown_theme_resolved(self):
        assert TemplateArgs(project_name="x", theme="neon").theme == "neutral"

    def test_frozen(self):
        args = TemplateArgs(project_name="x")
        with pytest.raises(ValidationError):
            args.project_name = "y"

    def test_closed_set(self):
        with pytest.raises(ValidationError):
            TemplateArgs(project_name="x", accent="#fff")

    def test_name_and_page_stripped(self):
        args = TemplateArgs(project_name=" Padded Docs ", default_page=" intro\n")
        assert args.project_name == "Padded Docs"
        assert args.default_page == "intro"
