# version_prune/core/prune/archived.py
from __future__ import annotations

from version_prune.contracts.record_type import RecordType
from version_prune.contracts.run import RunMode, RunSettings
from version_prune.contracts.sink import ProgressSink
from version_prune.core.gate import DryRunGate


class ArchivedVersionSweeper:
    """Removes the version history of records no longer in the live table.

    This makes archived records unrecoverable. The live table itself is
    never touched; only ``{base}_Versions`` rows are removed.
    """

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

    async def sweep_archived(self, record_type: RecordType, mode: RunMode) -> int:
        schema = self.settings.schema
        base_table = record_type.base_table
        versions_table = schema.versions_table(base_table)

        match = self.gate.executor.shapes.anti_join(
            versions_table,
            base_table,
            keys=[(schema.record_id_column, schema.id_column)],
        )
        count = await self.gate.apply(match, mode)

        if count:
            self.sink.message(
                f"{mode.prefix}Cleared {count} rows from {versions_table} for deleted records"
            )
        return count
