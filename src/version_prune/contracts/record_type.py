# version_prune/contracts/record_type.py
"""
Record type contracts.

A record type is a versioned entity backed by a live table and a version
table. Class hierarchies store one additional table (and version table)
per subtype; the pruner only needs the table names, never the classes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


def _check_identifier(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} must be a non-empty string, got {value!r}")
    # ':' would be read as a bind parameter marker by the query layer
    if "\x00" in value or ":" in value:
        raise ValueError(f"{what} must not contain NUL or ':' characters: {value!r}")
    return value


@dataclass(frozen=True)
class VersionSchema:
    """Naming convention shared by every version table in the store.

    Attributes:
        versions_suffix: Appended to a table name to get its version table.
        id_column: Primary key of a live table.
        record_id_column: Column in a version table pointing at the live ``ID``.
        version_column: Monotonic version number per record.
    """

    versions_suffix: str = "_Versions"
    id_column: str = "ID"
    record_id_column: str = "RecordID"
    version_column: str = "Version"

    def __post_init__(self) -> None:
        _check_identifier(self.versions_suffix, "versions_suffix")
        _check_identifier(self.id_column, "id_column")
        _check_identifier(self.record_id_column, "record_id_column")
        _check_identifier(self.version_column, "version_column")

    def versions_table(self, table: str) -> str:
        return f"{table}{self.versions_suffix}"


@dataclass(frozen=True)
class RecordType:
    """Descriptor for a single versioned record type.

    Attributes:
        base_table: Live table holding the current record rows.
        subtype_tables: Tables of subclasses sharing the base record ID.
            Order is preserved, duplicates and ``base_table`` are dropped.
        hierarchy_root: True when the type has no versioned supertype.
        name: Display name; defaults to ``base_table``.
    """

    base_table: str
    subtype_tables: tuple[str, ...] = ()
    hierarchy_root: bool = True
    name: str = ""

    def __post_init__(self) -> None:
        _check_identifier(self.base_table, "base_table")
        if isinstance(self.subtype_tables, str):
            raise ValueError(
                f"subtype_tables for '{self.base_table}' must be a list of table names"
            )

        tables: list[str] = []
        for table in self.subtype_tables:
            _check_identifier(table, f"subtype table of '{self.base_table}'")
            if table != self.base_table and table not in tables:
                tables.append(table)
        object.__setattr__(self, "subtype_tables", tuple(tables))

        if not self.name:
            object.__setattr__(self, "name", self.base_table)

    @classmethod
    def of(cls, base_table: str, *subtype_tables: str, **kwargs) -> RecordType:
        return cls(base_table=base_table, subtype_tables=tuple(subtype_tables), **kwargs)

    def tables(self) -> Iterable[str]:
        """Base table followed by every subtype table."""
        yield self.base_table
        yield from self.subtype_tables
