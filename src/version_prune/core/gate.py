# version_prune/core/gate.py
from __future__ import annotations

from version_prune.contracts.run import RunMode
from version_prune.core.query.executor import QueryExecutor
from version_prune.core.query.shapes import MatchQuery


class DryRunGate:
    """Counts matching rows in dry-run mode, deletes them otherwise.

    Both paths render the same :class:`MatchQuery`, so a dry run reports
    exactly the rows an execute run would remove.
    """

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    async def apply(self, match: MatchQuery, mode: RunMode) -> int:
        if mode.is_dry:
            return await self.executor.count(match)
        return await self.executor.delete(match)
