"""
Tests for engine configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from docforge import __version__
from docforge.core.config.loader import (
    DEFAULT_BACKUP_DIRNAME,
    DEFAULT_LOCK_FILENAME,
    DEFAULT_MANIFEST_FILENAME,
    ConfigError,
    EngineConfig,
    find_config_file,
    load_engine_config,
    resolve_tool_version,
)


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig(tool_version="1.0.0")
        assert config.manifest_filename == DEFAULT_MANIFEST_FILENAME
        assert config.backup_dirname == DEFAULT_BACKUP_DIRNAME
        assert config.lock_filename == DEFAULT_LOCK_FILENAME

    @pytest.mark.parametrize("bad", ["", ".", "..", "a/b", "a\\b"])
    def test_rejects_paths(self, bad: str):
        with pytest.raises(ValidationError):
            EngineConfig(tool_version="1.0.0", backup_dirname=bad)

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            EngineConfig(tool_version="1.0.0", colour="blue")


class TestLoadEngineConfig:
    def test_no_file_no_env(self, tmp_path: Path):
        config = load_engine_config(tmp_path, env={})
        assert config.tool_version == resolve_tool_version()
        assert config.manifest_filename == DEFAULT_MANIFEST_FILENAME

    def test_yaml_file(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("backup_dirname: .backups\ntool_version: 9.9.9\n")
        config = load_engine_config(tmp_path, env={})
        assert config.backup_dirname == ".backups"
        assert config.tool_version == "9.9.9"

    def test_yaml_nested_under_docforge_key(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("docforge:\n  lock_filename: my.lock\n")
        config = load_engine_config(tmp_path, env={})
        assert config.lock_filename == "my.lock"

    def test_found_in_parent(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("manifest_filename: m.json\n")
        site = tmp_path / "a" / "b"
        site.mkdir(parents=True)
        assert find_config_file(site) == (tmp_path / "docforge.yml").resolve()
        assert load_engine_config(site, env={}).manifest_filename == "m.json"

    def test_env_overrides_file(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("tool_version: 1.0.0\n")
        env = {"DOCFORGE_TOOL_VERSION": "2.0.0", "DOCFORGE_BACKUP_DIRNAME": ".bk"}
        config = load_engine_config(tmp_path, env=env)
        assert config.tool_version == "2.0.0"
        assert config.backup_dirname == ".bk"

    def test_empty_file(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("")
        assert load_engine_config(tmp_path, env={}).lock_filename == DEFAULT_LOCK_FILENAME

    def test_invalid_yaml(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("key: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_engine_config(tmp_path, env={})

    def test_non_mapping(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_engine_config(tmp_path, env={})

    def test_invalid_value(self, tmp_path: Path):
        (tmp_path / "docforge.yml").write_text("manifest_filename: ../escape.json\n")
        with pytest.raises(ConfigError, match="Invalid docforge configuration"):
            load_engine_config(tmp_path, env={})

    def test_explicit_missing_path(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_engine_config(path=tmp_path / "nope.yml", env={})


class TestToolVersion:
    def test_falls_back_to_package_version(self, monkeypatch: pytest.MonkeyPatch):
        from docforge.core.config import loader

        def not_installed(name):
            raise loader.PackageNotFoundError(name)

        monkeypatch.setattr(loader, "version", not_installed)
        assert resolve_tool_version() == __version__
