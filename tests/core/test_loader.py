# tests/core/test_loader.py
from __future__ import annotations

from pathlib import Path

import pytest

from version_prune.core.exceptions import ConfigurationError
from version_prune.core.loader import load_yaml_files, substitute_env_vars


class TestSubstituteEnvVars:
    def test_substitute_simple_var(self, monkeypatch):
        monkeypatch.setenv("TEST_TABLE", "SiteTree")
        assert substitute_env_vars("${TEST_TABLE}") == "SiteTree"

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert substitute_env_vars("${MISSING_VAR:-Page}") == "Page"

    def test_env_wins_over_default(self, monkeypatch):
        monkeypatch.setenv("TEST_TABLE", "from_env")
        assert substitute_env_vars("${TEST_TABLE:-Page}") == "from_env"

    def test_missing_var_no_default_raises(self, monkeypatch):
        monkeypatch.delenv("MISSING_VAR", raising=False)
        with pytest.raises(ConfigurationError, match="not set"):
            substitute_env_vars("${MISSING_VAR}")

    def test_nested(self, monkeypatch):
        monkeypatch.setenv("SUB", "Page")
        result = substitute_env_vars({"subtype_tables": ["${SUB}", "Other"], "n": 1})
        assert result == {"subtype_tables": ["Page", "Other"], "n": 1}

    def test_non_string_passthrough(self):
        assert substitute_env_vars(42) == 42
        assert substitute_env_vars(True) is True
        assert substitute_env_vars(None) is None


class TestLoadYamlFiles:
    def test_load_multiple_files_sorted(self, tmp_path: Path):
        (tmp_path / "02_second.yaml").write_text("order: 2\n", encoding="utf-8")
        (tmp_path / "01_first.yaml").write_text("order: 1\n", encoding="utf-8")

        result = load_yaml_files([str(tmp_path / "*.yaml")])

        assert result == [{"order": 1}, {"order": 2}]

    def test_no_matches_returns_empty(self, tmp_path: Path):
        assert load_yaml_files([str(tmp_path / "nothing*.yaml")]) == []

    def test_empty_file_is_empty_mapping(self, tmp_path: Path):
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")
        assert load_yaml_files([str(tmp_path / "empty.yaml")]) == [{}]

    def test_invalid_yaml_raises(self, tmp_path: Path):
        (tmp_path / "bad.yaml").write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_yaml_files([str(tmp_path / "bad.yaml")])

    def test_non_mapping_raises(self, tmp_path: Path):
        (tmp_path / "list.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_files([str(tmp_path / "list.yaml")])
