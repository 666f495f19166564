# version_prune/core/exceptions.py
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from version_prune.contracts.run import RunReport


class PruneError(Exception):
    pass


class ConfigurationError(PruneError):
    """Invalid invocation or catalog configuration. Raised before any store access."""


class StoreError(PruneError):
    """A query against the store failed."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        record_type: str | None = None,
    ) -> None:
        self.table = table
        self.record_type = record_type
        super().__init__(message)

    def __str__(self) -> str:
        where = []
        if self.record_type:
            where.append(f"type '{self.record_type}'")
        if self.table:
            where.append(f"table '{self.table}'")
        base = super().__str__()
        return f"{base} ({', '.join(where)})" if where else base


class PruneRunError(PruneError):
    """One or more record types failed during a run."""

    def __init__(self, report: RunReport) -> None:
        self.report = report
        names = ", ".join(o.name for o in report.failures)
        super().__init__(f"{len(report.failures)} record type(s) failed: {names}")
