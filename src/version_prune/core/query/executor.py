# version_prune/core/query/executor.py
"""
Query execution against the store.

Each statement runs in its own transaction, so every delete is an atomic
unit on its own and an interrupted run leaves the store consistent.
Driver errors are logged and re-raised as :class:`StoreError` naming the
table involved.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from version_prune.contracts.record_type import VersionSchema
from version_prune.core.exceptions import StoreError
from version_prune.core.query.shapes import MatchQuery, QueryShapes
from version_prune.core.query.template import QueryRenderer, RenderedQuery

logger = logging.getLogger(__name__)


def _preview(sql: str) -> str:
    flat = " ".join(sql.split())
    return (flat[:120] + "...") if len(flat) > 120 else flat


class QueryExecutor:
    """Runs rendered queries on an async engine and returns scalars or counts."""

    def __init__(self, engine: AsyncEngine, schema: VersionSchema | None = None) -> None:
        self.engine = engine
        self.shapes = QueryShapes(
            QueryRenderer(engine.dialect), schema or VersionSchema()
        )

    async def scalar(self, query: RenderedQuery, *, table: str) -> Any:
        """First column of the first row, or ``None`` when there are no rows."""
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text(query.sql), query.params)
                return result.scalar()
        except SQLAlchemyError as exc:
            logger.exception("Query failed on '%s': %s", table, _preview(query.sql))
            raise StoreError(f"Query failed: {exc}", table=table) from exc

    async def column(self, query: RenderedQuery, *, table: str) -> list[Any]:
        """First column of every row."""
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text(query.sql), query.params)
                return list(result.scalars())
        except SQLAlchemyError as exc:
            logger.exception("Query failed on '%s': %s", table, _preview(query.sql))
            raise StoreError(f"Query failed: {exc}", table=table) from exc

    async def count(self, match: MatchQuery) -> int:
        query = self.shapes.count(match)
        value = await self.scalar(query, table=match.table)
        return int(value or 0)

    async def delete(self, match: MatchQuery) -> int:
        """Delete matching rows and return the affected row count."""
        query = self.shapes.delete(match)
        logger.debug("Deleting from '%s': %s", match.table, _preview(query.sql))
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text(query.sql), query.params)
                return max(result.rowcount or 0, 0)
        except SQLAlchemyError as exc:
            logger.exception(
                "Delete failed on '%s': %s", match.table, _preview(query.sql)
            )
            raise StoreError(f"Delete failed: {exc}", table=match.table) from exc
