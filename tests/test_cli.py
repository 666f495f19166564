# tests/test_cli.py
from __future__ import annotations

from pathlib import Path

import pytest

from version_prune.cli import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, main
from version_prune.core.config import Settings

from conftest import BASE_TABLE, BASE_VERSIONS, CHILD_TABLE, CHILD_VERSIONS


@pytest.fixture
def catalog_path(tmp_path: Path) -> str:
    path = tmp_path / "catalog.yaml"
    path.write_text(
        f"record_types:\n  - base_table: {BASE_TABLE}\n    subtype_tables: [{CHILD_TABLE}]\n",
        encoding="utf-8",
    )
    return str(path)


def _run(args: list[str], async_url: str, catalog_path: str) -> int:
    return main(
        [*args, "--catalog", catalog_path, "--database-url", async_url],
        cfg=Settings(),
    )


def test_missing_run_is_configuration_error(store, async_url, catalog_path, capsys):
    before = store.snapshot(BASE_VERSIONS, CHILD_VERSIONS)

    assert _run([], async_url, catalog_path) == EXIT_CONFIG

    assert "'yes', 'dry', or 'fast'" in capsys.readouterr().err
    assert store.snapshot(BASE_VERSIONS, CHILD_VERSIONS) == before


def test_invalid_run_value(store, async_url, catalog_path, capsys):
    assert _run(["--run", "please"], async_url, catalog_path) == EXIT_CONFIG
    assert "please" in capsys.readouterr().err


def test_invalid_keep(store, async_url, catalog_path, capsys):
    assert _run(["--run", "yes", "--keep", "lots"], async_url, catalog_path) == EXIT_CONFIG
    assert store.versions(10) == [1, 2, 3]


def test_dry_run(store, async_url, catalog_path, capsys):
    before = store.snapshot(BASE_VERSIONS, CHILD_VERSIONS)

    assert _run(["--run", "dry", "--keep", "2"], async_url, catalog_path) == EXIT_OK

    out = capsys.readouterr().out
    assert f"(dry): Cleared 1 old versions (before last 2) from table {BASE_VERSIONS}" in out
    assert "Flush complete!" in out
    assert store.snapshot(BASE_VERSIONS, CHILD_VERSIONS) == before


def test_execute(store, async_url, catalog_path, capsys):
    assert _run(["--run", "yes", "--keep", "2"], async_url, catalog_path) == EXIT_OK

    assert store.versions(10) == [2, 3]
    assert store.count_versions(111) == 0
    assert store.versions(10, CHILD_VERSIONS) == [2, 3]
    assert f"Beginning flush for {BASE_TABLE}" in capsys.readouterr().out


def test_fast_skips_trimming(store, async_url, catalog_path):
    assert _run(["--run", "fast", "--keep", "1"], async_url, catalog_path) == EXIT_OK

    assert store.versions(10) == [1, 2, 3]
    assert store.count_versions(111) == 0
    assert store.count_versions(112, CHILD_VERSIONS) == 0


def test_store_failure_exit_code(store, async_url, tmp_path: Path, capsys):
    path = tmp_path / "broken.yaml"
    path.write_text(
        f"record_types:\n  - base_table: CART_Missing\n  - base_table: {BASE_TABLE}\n",
        encoding="utf-8",
    )

    assert _run(["--run", "yes", "--keep", "2"], async_url, str(path)) == EXIT_FAILED

    captured = capsys.readouterr()
    assert "CART_Missing" in captured.err
    # The healthy type still ran
    assert store.versions(10) == [2, 3]


def test_malformed_database_url(store, catalog_path, capsys):
    before = store.snapshot(BASE_VERSIONS, CHILD_VERSIONS)

    assert _run(["--run", "yes"], "not a database url", catalog_path) == EXIT_CONFIG

    assert "Invalid database URL" in capsys.readouterr().err
    assert store.snapshot(BASE_VERSIONS, CHILD_VERSIONS) == before
