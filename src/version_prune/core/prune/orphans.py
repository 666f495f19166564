# version_prune/core/prune/orphans.py
"""
Orphaned subtype version sweeping.

Class-table inheritance writes one version row per table in the hierarchy
for every version event. Once the base version row for a
``(RecordID, Version)`` pair is gone, the matching subtype rows are
orphans. Each subtype version table is compared with the base version
table only, never with other subtype tables.
"""
from __future__ import annotations

import logging

from version_prune.contracts.record_type import RecordType
from version_prune.contracts.run import RunMode, RunSettings
from version_prune.contracts.sink import ProgressSink
from version_prune.core.gate import DryRunGate

logger = logging.getLogger(__name__)


class OrphanedSubtypeSweeper:
    def __init__(
        self,
        gate: DryRunGate,
        sink: ProgressSink,
        *,
        settings: RunSettings | None = None,
    ) -> None:
        self.gate = gate
        self.sink = sink
        self.settings = settings or RunSettings()

    async def sweep_orphans(self, record_type: RecordType, mode: RunMode) -> int:
        """Sweep every subtype version table of ``record_type``.

        Returns:
            Rows affected across all subtype tables.
        """
        schema = self.settings.schema
        base_versions = schema.versions_table(record_type.base_table)
        keys = [
            (schema.record_id_column, schema.record_id_column),
            (schema.version_column, schema.version_column),
        ]

        total = 0
        for subtype_table in record_type.subtype_tables:
            if subtype_table == record_type.base_table:
                continue
            versions_table = schema.versions_table(subtype_table)

            match = self.gate.executor.shapes.anti_join(
                versions_table, base_versions, keys=keys
            )
            count = await self.gate.apply(match, mode)
            logger.debug("Orphan sweep of '%s' matched %d row(s)", versions_table, count)

            if count:
                self.sink.message(f"{mode.prefix}Cleared {count} rows from {versions_table}")
            total += count

        return total
