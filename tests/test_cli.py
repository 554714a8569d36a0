"""
Tests for CLI commands — create, update, status, and global options.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from docforge import __version__
from docforge.main import cli

ENV = {"DOCFORGE_TOOL_VERSION": "1.0.0"}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _create(runner: CliRunner, *args: str) -> Path:
    result = runner.invoke(cli, ["create", "site", *args], env=ENV)
    assert result.exit_code == 0, result.output
    return Path("site")


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "docforge" in result.output
        for command in ("create", "update", "status", "eject"):
            assert command in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestCreateCommand:
    def test_create(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["create", "site", "--template", "astro", "--theme", "emerald"], env=ENV)
            assert result.exit_code == 0, result.output
            assert "Created site" in result.output
            assert "npm run dev" in result.output
            assert Path("site/.docforge-manifest.json").is_file()

    def test_create_json(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("docs").mkdir()
            Path("docs/intro.md").write_text("---\ntitle: Intro\norder: 1\n---\n")
            result = runner.invoke(cli, ["create", "site", "--name", "Acme", "--json"], env=ENV)
            assert result.exit_code == 0, result.output
            data = json.loads(result.output)
            assert data["project_name"] == "Acme"
            assert data["template"] == "nextjs"
            assert data["docs"] == ["docs/intro.md"]

    def test_create_existing_fails(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("site").mkdir()
            result = runner.invoke(cli, ["create", "site"], env=ENV)
            assert result.exit_code == 1
            assert "already exists" in result.output

    def test_create_rejects_unknown_template(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["create", "site", "--template", "vite"], env=ENV)
            assert result.exit_code == 2

    def test_unknown_theme_warns(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["create", "site", "--theme", "neon"], env=ENV)
            assert result.exit_code == 0
            assert "Unknown theme 'neon'" in result.output


class TestUpdateCommand:
    def test_up_to_date(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner)
            result = runner.invoke(cli, ["update", str(site)], env=ENV)
            assert result.exit_code == 0, result.output
            assert "Already up to date" in result.output

    def test_missing_directory(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["update", "nope"], env=ENV)
            assert result.exit_code == 1
            assert "Directory not found" in result.output

    def test_not_a_site(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("plain").mkdir()
            result = runner.invoke(cli, ["update", "plain"], env=ENV)
            assert result.exit_code == 1
            assert "Not a docforge site" in result.output

    def test_modified_skipped_then_forced(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner, "--template", "astro")
            (site / "src/styles/base.css").write_text("/* mine */\n")

            result = runner.invoke(cli, ["update", str(site)], env=ENV)
            assert result.exit_code == 0
            assert "Modified — skipped" in result.output
            assert "--force" in result.output

            result = runner.invoke(cli, ["update", str(site), "--force"], env=ENV)
            assert result.exit_code == 0
            assert "Overwritten" in result.output
            assert ".docforge-backup/src/styles/base.css" in result.output

    def test_dry_run_json(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner)
            (site / "src/lib/docs.ts").unlink()

            result = runner.invoke(cli, ["update", str(site), "--dry-run", "--json"], env=ENV)
            assert result.exit_code == 0, result.output
            data = json.loads(result.output)
            assert data["sync"]["dry_run"] is True
            assert data["sync"]["updated"] == ["src/lib/docs.ts"]
            assert not (site / "src/lib/docs.ts").exists()

    def test_adoption(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner, "--template", "astro", "--name", "Acme")
            (site / ".docforge-manifest.json").unlink()

            result = runner.invoke(cli, ["update", str(site)], env=ENV)
            assert result.exit_code == 0, result.output
            assert "Adopted existing astro site" in result.output
            assert "Acme" in result.output
            assert (site / ".docforge-manifest.json").is_file()

    def test_lock_contention(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner)
            (site / ".docforge.lock").write_text("999\n")
            result = runner.invoke(cli, ["update", str(site)], env=ENV)
            assert result.exit_code == 1
            assert "delete the lock file" in result.output

    def test_write_failure_exits_nonzero(self, runner: CliRunner, tmp_path: Path, monkeypatch):
        from docforge.core.services import sync_executor

        def fail(path: Path, data: bytes) -> None:
            raise OSError("read-only file system")

        monkeypatch.setattr(sync_executor, "write_synced", fail)
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner)
            (site / "src/lib/docs.ts").unlink()
            result = runner.invoke(cli, ["update", str(site)], env=ENV)
            assert result.exit_code == 1
            assert "read-only file system" in result.output


class TestEjectCommand:
    def test_eject(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner)
            result = runner.invoke(cli, ["eject", "Sidebar", str(site)], env=ENV)
            assert result.exit_code == 0, result.output
            assert "Created src/components/overrides/Sidebar.tsx" in result.output
            assert "Wrap (composable)" in result.output
            assert (site / "src/components/overrides/Sidebar.tsx").is_file()

    def test_eject_astro_fails(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner, "--template", "astro")
            result = runner.invoke(cli, ["eject", "Header", str(site), "--json"], env=ENV)
            assert result.exit_code == 1
            assert "only supported for Next.js" in json.loads(result.output)["error"]


class TestStatusCommand:
    def test_status(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner, "--name", "Acme")
            result = runner.invoke(cli, ["status", str(site)], env=ENV)
            assert result.exit_code == 0, result.output
            assert "Acme" in result.output
            assert "Up to date" in result.output

    def test_status_shows_modified(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner)
            (site / "src/app/globals.css").write_text("/* mine */\n")
            result = runner.invoke(cli, ["status", str(site)], env=ENV)
            assert result.exit_code == 0
            assert "modified" in result.output
            assert "src/app/globals.css" in result.output
            assert "docforge update" in result.output

    def test_status_json(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            site = _create(runner)
            result = runner.invoke(cli, ["status", str(site), "--json"], env=ENV)
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["site"]["template"] == "nextjs"
            assert data["up_to_date"] is True

    def test_status_not_a_site(self, runner: CliRunner, tmp_path: Path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(cli, ["status"], env=ENV)
            assert result.exit_code == 1
            assert "Not a docforge site" in result.output
