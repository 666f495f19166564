# tests/core/prune/test_archived_sweeper.py
from __future__ import annotations

import pytest

from version_prune.contracts.run import RunMode
from version_prune.core.gate import DryRunGate
from version_prune.core.prune.archived import ArchivedVersionSweeper
from version_prune.core.query.executor import QueryExecutor
from version_prune.core.sinks import BufferSink

from conftest import BASE_TABLE, BASE_VERSIONS, CHILD_VERSIONS


def _sweeper(engine):
    sink = BufferSink()
    return ArchivedVersionSweeper(DryRunGate(QueryExecutor(engine)), sink), sink


class TestArchivedVersionSweeper:
    @pytest.mark.asyncio
    async def test_removes_versions_of_deleted_records(self, engine, store, record_type):
        assert store.count_versions(111) == 1

        sweeper, sink = _sweeper(engine)
        count = await sweeper.sweep_archived(record_type, RunMode.EXECUTE)

        assert count == 1
        assert store.count_versions(111) == 0
        assert sink.lines == [f"Cleared 1 rows from {BASE_VERSIONS} for deleted records"]

    @pytest.mark.asyncio
    async def test_live_records_keep_their_history(self, engine, store, record_type):
        sweeper, _ = _sweeper(engine)
        await sweeper.sweep_archived(record_type, RunMode.EXECUTE)

        assert store.versions(10) == [1, 2, 3]
        assert store.versions(20) == [1]

    @pytest.mark.asyncio
    async def test_live_and_subtype_tables_untouched(self, engine, store, record_type):
        before = store.snapshot(BASE_TABLE, CHILD_VERSIONS)

        sweeper, _ = _sweeper(engine)
        await sweeper.sweep_archived(record_type, RunMode.EXECUTE)

        assert store.snapshot(BASE_TABLE, CHILD_VERSIONS) == before

    @pytest.mark.asyncio
    async def test_dry_run(self, engine, store, record_type):
        before = store.snapshot(BASE_VERSIONS)

        sweeper, sink = _sweeper(engine)
        count = await sweeper.sweep_archived(record_type, RunMode.DRY_RUN)

        assert count == 1
        assert store.snapshot(BASE_VERSIONS) == before
        assert sink.lines == [
            f"(dry): Cleared 1 rows from {BASE_VERSIONS} for deleted records"
        ]

    @pytest.mark.asyncio
    async def test_idempotent(self, engine, store, record_type):
        sweeper, sink = _sweeper(engine)
        assert await sweeper.sweep_archived(record_type, RunMode.EXECUTE) == 1
        assert await sweeper.sweep_archived(record_type, RunMode.EXECUTE) == 0
        # Nothing is reported for a zero-row sweep
        assert len(sink.lines) == 1
