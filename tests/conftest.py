# tests/conftest.py
"""
Shared fixtures: a small versioned store on a temporary SQLite file.

Fixture shape (``CART_`` tables, one base type with one subtype):

* live ``CART_BaseRecord``: records 10 and 20
* ``CART_BaseRecord_Versions``: 10 -> v1..v3, 20 -> v1, 111 -> v1
  (111 has no live row, i.e. it was archived)
* ``CART_ChildRecord_Versions``: 10 -> v1..v4 (v4 has no base version),
  20 -> v1, 111 -> v1 (matched in base), 112 -> v1 (no base version)
"""
from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from version_prune.contracts.record_type import RecordType
from version_prune.core.db import build_engine

BASE_TABLE = "CART_BaseRecord"
CHILD_TABLE = "CART_ChildRecord"
BASE_VERSIONS = f"{BASE_TABLE}_Versions"
CHILD_VERSIONS = f"{CHILD_TABLE}_Versions"

LIVE_ROWS = {
    BASE_TABLE: [(10, "Page A"), (20, "Page B")],
    CHILD_TABLE: [(10, "Child A"), (20, "Child B")],
}

VERSION_ROWS = {
    BASE_VERSIONS: [(10, 1), (10, 2), (10, 3), (20, 1), (111, 1)],
    CHILD_VERSIONS: [(10, 1), (10, 2), (10, 3), (10, 4), (20, 1), (111, 1), (112, 1)],
}


def create_versioned_tables(engine: Engine, *tables: str) -> None:
    with engine.begin() as conn:
        for table in tables:
            conn.execute(
                text(f'CREATE TABLE "{table}" ("ID" INTEGER PRIMARY KEY, "Title" VARCHAR(255))')
            )
            conn.execute(
                text(
                    f'CREATE TABLE "{table}_Versions" ('
                    '"ID" INTEGER PRIMARY KEY AUTOINCREMENT, '
                    '"RecordID" INTEGER NOT NULL, '
                    '"Version" INTEGER NOT NULL, '
                    '"Title" VARCHAR(255), '
                    'UNIQUE ("RecordID", "Version"))'
                )
            )


def insert_live(engine: Engine, table: str, rows) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(f'INSERT INTO "{table}" ("ID", "Title") VALUES (:id, :title)'),
            [{"id": i, "title": t} for i, t in rows],
        )


def insert_versions(engine: Engine, table: str, rows) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                f'INSERT INTO "{table}" ("RecordID", "Version", "Title") '
                "VALUES (:record_id, :version, :title)"
            ),
            [
                {"record_id": r, "version": v, "title": f"r{r} v{v}"}
                for r, v in rows
            ],
        )


class StoreProbe:
    """Synchronous read access to the store for assertions."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def count_versions(self, record_id: int, table: str = BASE_VERSIONS) -> int:
        with self.engine.connect() as conn:
            return conn.execute(
                text(f'SELECT COUNT(*) FROM "{table}" WHERE "RecordID" = :r'),
                {"r": record_id},
            ).scalar_one()

    def versions(self, record_id: int, table: str = BASE_VERSIONS) -> list[int]:
        with self.engine.connect() as conn:
            return list(
                conn.execute(
                    text(
                        f'SELECT "Version" FROM "{table}" '
                        'WHERE "RecordID" = :r ORDER BY "Version"'
                    ),
                    {"r": record_id},
                ).scalars()
            )

    def row_count(self, table: str) -> int:
        with self.engine.connect() as conn:
            return conn.execute(text(f'SELECT COUNT(*) FROM "{table}"')).scalar_one()

    def snapshot(self, *tables: str) -> dict[str, list[tuple]]:
        out: dict[str, list[tuple]] = {}
        with self.engine.connect() as conn:
            for table in tables:
                rows = conn.execute(text(f'SELECT * FROM "{table}" ORDER BY "ID"'))
                out[table] = [tuple(r) for r in rows]
        return out


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "store.db"


@pytest.fixture
def sync_engine(db_path: Path):
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest.fixture
def store(sync_engine: Engine) -> StoreProbe:
    """Seeded fixture store."""
    create_versioned_tables(sync_engine, BASE_TABLE, CHILD_TABLE)
    for table, rows in LIVE_ROWS.items():
        insert_live(sync_engine, table, rows)
    for table, rows in VERSION_ROWS.items():
        insert_versions(sync_engine, table, rows)
    return StoreProbe(sync_engine)


@pytest.fixture
def record_type() -> RecordType:
    return RecordType.of(BASE_TABLE, CHILD_TABLE)


@pytest.fixture
def async_url(db_path: Path) -> str:
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture
async def engine(store: StoreProbe, async_url: str):
    """Async engine on the seeded store."""
    engine = build_engine(async_url)
    yield engine
    await engine.dispose()
