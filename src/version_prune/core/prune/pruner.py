# version_prune/core/prune/pruner.py
"""
Retention pruner: runs the prune operations over every record type.

Per record type the order is fixed: trim old versions, sweep archived
records, sweep orphaned subtype versions. Each step removes rows the
next step would otherwise have to scan.
"""
from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncEngine

from version_prune.contracts.record_type import RecordType
from version_prune.contracts.run import (
    DEFAULT_KEEP_VERSIONS,
    RetentionPolicy,
    RunMode,
    RunReport,
    RunSettings,
    TypeOutcome,
)
from version_prune.contracts.sink import ProgressSink
from version_prune.core.exceptions import PruneRunError, StoreError
from version_prune.core.gate import DryRunGate
from version_prune.core.prune.archived import ArchivedVersionSweeper
from version_prune.core.prune.orphans import OrphanedSubtypeSweeper
from version_prune.core.prune.trimmer import OldVersionTrimmer
from version_prune.core.query.executor import QueryExecutor

logger = logging.getLogger(__name__)


class RetentionPruner:
    """Orchestrates trimming and sweeping for a sequence of record types."""

    def __init__(
        self,
        executor: QueryExecutor,
        sink: ProgressSink,
        *,
        settings: RunSettings | None = None,
        default_keep: int = DEFAULT_KEEP_VERSIONS,
    ) -> None:
        self.settings = settings or RunSettings()
        self.sink = sink
        self.gate = DryRunGate(executor)

        self.trimmer = OldVersionTrimmer(
            self.gate, sink, settings=self.settings, default_keep=default_keep
        )
        self.archived = ArchivedVersionSweeper(self.gate, sink, settings=self.settings)
        self.orphans = OrphanedSubtypeSweeper(self.gate, sink, settings=self.settings)

    @classmethod
    def from_engine(
        cls,
        engine: AsyncEngine,
        sink: ProgressSink,
        *,
        settings: RunSettings | None = None,
        default_keep: int = DEFAULT_KEEP_VERSIONS,
    ) -> RetentionPruner:
        settings = settings or RunSettings()
        return cls(
            QueryExecutor(engine, settings.schema),
            sink,
            settings=settings,
            default_keep=default_keep,
        )

    async def run(
        self,
        types: Iterable[RecordType],
        policy: RetentionPolicy,
        mode: RunMode,
        fast: bool = False,
    ) -> RunReport:
        """Prune every record type in catalog order.

        Types that are not hierarchy roots are skipped; their tables are
        covered by the root type's subtype tables.

        A store failure aborts the current type only; the remaining types
        still run unless ``stop_on_error`` is set. Failures are collected
        and raised together once all types have been processed.

        Raises:
            PruneRunError: If any record type failed.
            StoreError: On the first failure, when ``stop_on_error`` is set.
        """
        keep = policy.effective_keep
        report = RunReport(mode=mode, fast=fast, keep_versions=keep)
        logger.info(
            "Starting prune run (mode=%s, fast=%s, keep=%d)", mode.value, fast, keep
        )

        for record_type in types:
            # Subtype tables are flushed through their hierarchy root
            if not record_type.hierarchy_root:
                logger.info("Skipping non-root record type '%s'", record_type.name)
                continue

            outcome = TypeOutcome(name=record_type.name)
            report.outcomes.append(outcome)
            try:
                await self.flush(record_type, keep, mode, fast=fast, outcome=outcome)
            except StoreError as exc:
                exc.record_type = record_type.name
                outcome.error = str(exc)
                outcome.failed_table = exc.table
                logger.error(
                    "Flush of '%s' failed on table '%s'", record_type.name, exc.table
                )
                self.sink.message(
                    f"Failed flushing {record_type.name} on {exc.table}: {exc}"
                )
                if self.settings.stop_on_error:
                    raise

        logger.info(
            "Prune run finished: %d type(s), %d row(s), %d failure(s)",
            len(report.outcomes),
            report.total,
            len(report.failures),
        )

        if report.failures:
            self.sink.message(f"Flush finished with {len(report.failures)} failed type(s)")
            raise PruneRunError(report)

        self.sink.message("Flush complete!")
        return report

    async def flush(
        self,
        record_type: RecordType,
        keep: int,
        mode: RunMode,
        *,
        fast: bool = False,
        outcome: TypeOutcome | None = None,
    ) -> TypeOutcome:
        """Run all prune steps for one record type."""
        outcome = outcome or TypeOutcome(name=record_type.name)
        self.sink.message(f"Beginning flush for {record_type.name}")

        # Per-record trimming can be slow on large tables
        if not fast:
            outcome.trimmed = await self.trimmer.trim(record_type, keep, mode)

        outcome.archived = await self.archived.sweep_archived(record_type, mode)
        outcome.orphaned = await self.orphans.sweep_orphans(record_type, mode)

        self.sink.message(f"Done flushing {record_type.name}")
        return outcome
