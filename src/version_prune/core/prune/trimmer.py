# version_prune/core/prune/trimmer.py
"""
Per-record version trimming.

Keeps the ``keep`` most recent versions of every live record and removes
the rest. Live records are walked in bounded batches (``ID`` modulo the
batch count) so large tables never load all IDs at once; batching has no
effect on which rows are removed.
"""
from __future__ import annotations

import logging
from typing import AsyncIterator

from version_prune.contracts.record_type import RecordType
from version_prune.contracts.run import (
    DEFAULT_KEEP_VERSIONS,
    RunMode,
    RunSettings,
    normalize_keep,
)
from version_prune.contracts.sink import ProgressSink
from version_prune.core.gate import DryRunGate
from version_prune.core.query.executor import QueryExecutor

logger = logging.getLogger(__name__)


class OldVersionTrimmer:
    def __init__(
        self,
        gate: DryRunGate,
        sink: ProgressSink,
        *,
        settings: RunSettings | None = None,
        default_keep: int = DEFAULT_KEEP_VERSIONS,
    ) -> None:
        self.gate = gate
        self.sink = sink
        self.settings = settings or RunSettings()
        self.default_keep = default_keep

    @property
    def executor(self) -> QueryExecutor:
        return self.gate.executor

    async def trim(self, record_type: RecordType, keep: int, mode: RunMode) -> int:
        """Remove all but the ``keep`` newest versions of each live record.

        Returns:
            Rows deleted, or rows that would be deleted in dry-run mode.
        """
        keep = normalize_keep(keep, self.default_keep)
        shapes = self.executor.shapes
        versions_table = self.settings.schema.versions_table(record_type.base_table)

        cleared = 0
        async for record_id in self.live_record_ids(record_type):
            threshold = await self.executor.scalar(
                shapes.version_threshold(versions_table, record_id, keep),
                table=versions_table,
            )
            # Record has no more than `keep` versions
            if threshold is None:
                continue

            cleared += await self.gate.apply(
                shapes.versions_at_or_below(versions_table, record_id, threshold),
                mode,
            )

        if cleared:
            self.sink.message(
                f"{mode.prefix}Cleared {cleared} old versions "
                f"(before last {keep}) from table {versions_table}"
            )
        return cleared

    async def live_record_ids(self, record_type: RecordType) -> AsyncIterator[int]:
        """Yield every live record ID, one bounded batch at a time."""
        table = record_type.base_table
        shapes = self.executor.shapes

        total = int(await self.executor.scalar(shapes.live_count(table), table=table) or 0)
        batches = total // self.settings.batch_size + 1
        logger.debug("Scanning %d live record(s) of '%s' in %d batch(es)", total, table, batches)

        for batch in range(batches):
            ids = await self.executor.column(
                shapes.live_id_batch(table, batches, batch), table=table
            )
            for record_id in ids:
                yield record_id
