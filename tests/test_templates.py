"""
Tests for template providers — rendering, registry, detection, inference.
"""

import json
from pathlib import Path

import pytest

from docforge.core.models.manifest import TemplateVariant
from docforge.core.models.template import TemplateArgs
from docforge.core.services.templates import (
    DEFAULT_VARIANT,
    UnknownTemplateError,
    VariantMismatchError,
    detect_variant,
    get_provider,
    list_providers,
)
from docforge.core.services.templates.astro import AstroTemplate
from docforge.core.services.templates.nextjs import NextjsTemplate


def _write_scaffold(site: Path, variant: TemplateVariant, args: TemplateArgs) -> None:
    for generated in get_provider(variant).scaffold_files(args):
        target = site / generated.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generated.content, encoding="utf-8")


class TestRegistry:
    def test_get_provider(self):
        assert isinstance(get_provider(TemplateVariant.ASTRO), AstroTemplate)
        assert isinstance(get_provider("nextjs"), NextjsTemplate)

    def test_unknown_variant(self):
        with pytest.raises(UnknownTemplateError, match="vite"):
            get_provider("vite")

    def test_default_is_nextjs(self):
        assert DEFAULT_VARIANT is TemplateVariant.NEXTJS

    def test_every_variant_registered(self):
        assert {p.variant for p in list_providers()} == set(TemplateVariant)


@pytest.mark.parametrize("variant", list(TemplateVariant))
class TestProviderContract:
    """Properties every provider must hold."""

    def test_every_owned_file_renders(self, variant: TemplateVariant):
        provider = get_provider(variant)
        args = TemplateArgs(project_name="Acme")
        for path in provider.owned_files:
            assert provider.render(path, args)

    def test_render_is_deterministic(self, variant: TemplateVariant):
        provider = get_provider(variant)
        args = TemplateArgs(project_name="Acme", theme="ocean")
        for path in provider.owned_files:
            assert provider.render(path, args) == provider.render(path, args)

    def test_owned_and_consumer_disjoint(self, variant: TemplateVariant):
        provider = get_provider(variant)
        assert not set(provider.owned_files) & set(provider.consumer_files)
        assert len(set(provider.owned_files)) == len(provider.owned_files)

    def test_render_unknown_path(self, variant: TemplateVariant):
        with pytest.raises(UnknownTemplateError):
            get_provider(variant).render("nope.txt", TemplateArgs(project_name="x"))

    def test_markers_are_scaffolded(self, variant: TemplateVariant):
        provider = get_provider(variant)
        scaffolded = {f.path for f in provider.scaffold_files(TemplateArgs(project_name="x"))}
        assert set(provider.marker_files) <= scaffolded

    def test_check_variant(self, variant: TemplateVariant):
        provider = get_provider(variant)
        provider.check_variant(variant)
        other = next(v for v in TemplateVariant if v is not variant)
        with pytest.raises(VariantMismatchError):
            provider.check_variant(other)

    def test_theme_changes_output(self, variant: TemplateVariant):
        provider = get_provider(variant)
        a = [provider.render(p, TemplateArgs(project_name="x", theme="ocean")) for p in provider.owned_files]
        b = [provider.render(p, TemplateArgs(project_name="x", theme="rose")) for p in provider.owned_files]
        assert a != b

    @pytest.mark.parametrize(
        "args",
        [
            TemplateArgs(project_name="Acme Docs", theme="emerald", default_page="getting-started"),
            TemplateArgs(project_name="Tom & Jerry's <Docs>", theme="dusk", default_page="intro"),
            TemplateArgs(project_name='Say "hi"', theme="github", default_page="a-b_c"),
            TemplateArgs(project_name="Ünïcødé", theme="neutral"),
        ],
    )
    def test_infer_recovers_args(self, variant: TemplateVariant, args: TemplateArgs, tmp_path: Path):
        """What was rendered can be read back from disk."""
        _write_scaffold(tmp_path, variant, args)
        assert get_provider(variant).infer_args(tmp_path) == args

    def test_infer_defaults_on_empty_dir(self, variant: TemplateVariant, tmp_path: Path):
        assert get_provider(variant).infer_args(tmp_path) == TemplateArgs(
            project_name="docs", theme="neutral", default_page="overview"
        )


class TestAstroTemplate:
    def test_tokens_carry_accent(self):
        css = AstroTemplate().render("src/styles/tokens.css", TemplateArgs(project_name="x", theme="ocean"))
        assert "--color-accent: #3b82f6;" in css
        assert "#60a5fa" in css

    def test_title_is_escaped(self):
        layout = AstroTemplate().render(
            "src/layouts/BaseLayout.astro", TemplateArgs(project_name="A & B")
        )
        assert "A &amp; B" in layout

    def test_consumer_package_json(self):
        pkg = json.loads(AstroTemplate().render_consumer("package.json", TemplateArgs(project_name="acme")))
        assert pkg["name"] == "acme"
        assert "astro" in pkg["dependencies"]

    def test_edited_accent_falls_back(self, tmp_path: Path):
        _write_scaffold(tmp_path, TemplateVariant.ASTRO, TemplateArgs(project_name="x", theme="rose"))
        tokens = tmp_path / "src/styles/tokens.css"
        tokens.write_text(tokens.read_text().replace("#f43f5e", "#abcdef"))
        assert AstroTemplate().infer_args(tmp_path).theme == "neutral"


class TestNextjsTemplate:
    def test_site_config_is_consumer_owned(self):
        provider = NextjsTemplate()
        assert "src/lib/site-config.tsx" in provider.consumer_files
        assert "src/lib/site-config.tsx" not in provider.owned_files

    def test_site_name_literal(self):
        layout = NextjsTemplate().render("src/app/layout.tsx", TemplateArgs(project_name='My "Docs"'))
        assert 'const SITE_NAME = "My \\"Docs\\""' in layout

    def test_redirect_to_default_page(self):
        page = NextjsTemplate().render("src/app/page.tsx", TemplateArgs(project_name="x", default_page="intro"))
        assert 'redirect("/docs/intro")' in page


class TestDetectVariant:
    def test_empty(self, tmp_path: Path):
        assert detect_variant(tmp_path) is None

    @pytest.mark.parametrize("variant", list(TemplateVariant))
    def test_detects_scaffolded(self, variant: TemplateVariant, tmp_path: Path):
        _write_scaffold(tmp_path, variant, TemplateArgs(project_name="x"))
        assert detect_variant(tmp_path) is variant

    def test_partial_markers_not_enough(self, tmp_path: Path):
        (tmp_path / "astro.config.mjs").write_text("export default {}\n")
        assert detect_variant(tmp_path) is None

    def test_nextjs_wins_when_both_match(self, tmp_path: Path):
        _write_scaffold(tmp_path, TemplateVariant.ASTRO, TemplateArgs(project_name="x"))
        _write_scaffold(tmp_path, TemplateVariant.NEXTJS, TemplateArgs(project_name="x"))
        assert detect_variant(tmp_path) is TemplateVariant.NEXTJS
