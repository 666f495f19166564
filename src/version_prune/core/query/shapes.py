# version_prune/core/query/shapes.py
"""
Reusable query shapes for version pruning.

Every prune step is expressed as a :class:`MatchQuery`: a table plus a
predicate selecting the rows to remove. The same match can be rendered as
a ``COUNT(*)`` (dry run) or a ``DELETE`` (execute), so both modes always
target exactly the same rows.

Two predicate shapes cover all three prune steps:

* anti-join: rows of a table with no partner row in an anchor table,
  matched on one or more key column pairs;
* rank threshold: the version number at a given descending rank for one
  record, used to cut off everything at or below it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from version_prune.contracts.record_type import VersionSchema
from version_prune.core.query.template import QueryRenderer, RenderedQuery

COUNT_MATCHING = "SELECT COUNT(*) FROM {{ table | ident }} WHERE {{ predicate }}"

DELETE_MATCHING = "DELETE FROM {{ table | ident }} WHERE {{ predicate }}"

ANTI_JOIN = """
NOT EXISTS (
    SELECT 1 FROM {{ anchor | ident }} AS {{ alias | ident }}
    WHERE {% for left, right in keys %}{{ alias | ident }}.{{ right | ident }} = {{ table | ident }}.{{ left | ident }}{% if not loop.last %} AND {% endif %}{% endfor %}

)
"""

AT_OR_BELOW_VERSION = (
    "{{ record | ident }} = :record_id AND {{ version | ident }} <= :threshold"
)

RANK_THRESHOLD = """
SELECT {{ version | ident }} FROM {{ table | ident }}
WHERE {{ record | ident }} = :record_id
ORDER BY {{ version | ident }} DESC
LIMIT 1 OFFSET :rank_offset
"""

LIVE_COUNT = "SELECT COUNT(*) FROM {{ table | ident }}"

LIVE_ID_BATCH = """
SELECT {{ id | ident }} FROM {{ table | ident }}
WHERE ABS({{ id | ident }}) % :batches = :batch
ORDER BY {{ id | ident }}
"""

ANCHOR_ALIAS = "anchor_row"


@dataclass(frozen=True)
class MatchQuery:
    """Rows of ``table`` matching an already-rendered ``predicate``."""

    table: str
    predicate: str
    params: dict[str, Any] = field(default_factory=dict)


class QueryShapes:
    """Builds the prune queries for one dialect and naming schema."""

    def __init__(self, renderer: QueryRenderer, schema: VersionSchema) -> None:
        self.renderer = renderer
        self.schema = schema

    # -- match rendering -------------------------------------------------------

    def count(self, match: MatchQuery) -> RenderedQuery:
        return self.renderer.render(
            COUNT_MATCHING,
            table=match.table,
            predicate=match.predicate,
            params=match.params,
        )

    def delete(self, match: MatchQuery) -> RenderedQuery:
        return self.renderer.render(
            DELETE_MATCHING,
            table=match.table,
            predicate=match.predicate,
            params=match.params,
        )

    # -- predicates ------------------------------------------------------------

    def anti_join(
        self,
        table: str,
        anchor: str,
        keys: Sequence[tuple[str, str]],
    ) -> MatchQuery:
        """Rows of ``table`` with no row in ``anchor`` where every
        ``table.left = anchor.right`` pair in ``keys`` holds."""
        if not keys:
            raise ValueError("anti_join requires at least one key pair")
        predicate = self.renderer.render(
            ANTI_JOIN,
            table=table,
            anchor=anchor,
            alias=ANCHOR_ALIAS,
            keys=list(keys),
        )
        return MatchQuery(table=table, predicate=predicate.sql)

    def versions_at_or_below(
        self, versions_table: str, record_id: int, threshold: int
    ) -> MatchQuery:
        predicate = self.renderer.render(
            AT_OR_BELOW_VERSION,
            record=self.schema.record_id_column,
            version=self.schema.version_column,
            params={"record_id": record_id, "threshold": threshold},
        )
        return MatchQuery(
            table=versions_table,
            predicate=predicate.sql,
            params=predicate.params,
        )

    # -- selects ---------------------------------------------------------------

    def version_threshold(
        self, versions_table: str, record_id: int, keep: int
    ) -> RenderedQuery:
        """Version at descending rank ``keep + 1``; empty when there is none."""
        return self.renderer.render(
            RANK_THRESHOLD,
            table=versions_table,
            record=self.schema.record_id_column,
            version=self.schema.version_column,
            params={"record_id": record_id, "rank_offset": keep},
        )

    def live_count(self, table: str) -> RenderedQuery:
        return self.renderer.render(LIVE_COUNT, table=table)

    def live_id_batch(self, table: str, batches: int, batch: int) -> RenderedQuery:
        return self.renderer.render(
            LIVE_ID_BATCH,
            table=table,
            id=self.schema.id_column,
            params={"batches": batches, "batch": batch},
        )
