# version_prune/core/catalog.py
"""
Record type catalogs.

Versioned types are declared in code (:class:`StaticCatalog`) or in YAML
for deployments that should not need a code change to add a type.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from version_prune.contracts.record_type import RecordType
from version_prune.core.exceptions import ConfigurationError
from version_prune.core.loader import load_yaml_files, substitute_env_vars

logger = logging.getLogger(__name__)


class StaticCatalog:
    """Fixed, ordered list of record types."""

    def __init__(self, record_types: Iterable[RecordType] = ()) -> None:
        self._types: list[RecordType] = []
        for record_type in record_types:
            self.register(record_type)

    def register(self, record_type: RecordType) -> None:
        if any(t.name == record_type.name for t in self._types):
            raise ValueError(f"Record type '{record_type.name}' is already registered")
        self._types.append(record_type)

    def record_types(self) -> list[RecordType]:
        return list(self._types)

    def names(self) -> list[str]:
        return [t.name for t in self._types]

    def __iter__(self) -> Iterator[RecordType]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _parse_flag(raw: dict[str, Any], key: str, default: bool) -> bool:
    """Read a boolean key; env-substituted values arrive as strings."""
    value = raw.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigurationError(
        f"Record type '{raw.get('name') or raw.get('base_table', '?')}': "
        f"{key} must be a boolean, got {value!r}"
    )


def _record_type_from_raw(raw: dict[str, Any]) -> RecordType:
    subtypes = raw.get("subtype_tables") or []
    if not isinstance(subtypes, list):
        raise ConfigurationError(
            f"Record type '{raw.get('name')}': subtype_tables must be a list"
        )
    try:
        return RecordType(
            name=raw.get("name") or raw["base_table"],
            base_table=raw["base_table"],
            subtype_tables=tuple(subtypes),
            hierarchy_root=_parse_flag(raw, "hierarchy_root", True),
        )
    except KeyError as exc:
        raise ConfigurationError(
            f"Record type '{raw.get('name', '?')}' is missing required key {exc}"
        ) from exc
    except ValueError as exc:
        raise ConfigurationError(f"Invalid record type '{raw.get('name', '?')}': {exc}") from exc


def load_catalog_config(patterns: Iterable[str]) -> StaticCatalog:
    """Load record types from YAML.

    Expected structure::

        record_types:
          - name: SiteTree
            base_table: SiteTree
            subtype_tables: [Page, RedirectorPage]
            hierarchy_root: true
            enabled: true

    Entries are keyed by ``name`` (falling back to ``base_table``); later
    files override earlier ones. Disabled entries are skipped.
    """
    yamls = load_yaml_files(patterns)
    types_map: dict[str, dict[str, Any]] = {}

    for data in yamls:
        entries = data.get("record_types", [])
        if not isinstance(entries, list):
            raise ConfigurationError("'record_types' must be a list")
        for entry in entries:
            if not isinstance(entry, dict):
                raise ConfigurationError(f"Invalid record type entry: {entry!r}")
            raw = substitute_env_vars(entry)
            key = raw.get("name") or raw.get("base_table")
            if not key:
                raise ConfigurationError(f"Record type entry needs a name or base_table: {entry!r}")
            types_map[key] = raw

    catalog = StaticCatalog()
    for key, raw in types_map.items():
        if not _parse_flag(raw, "enabled", True):
            logger.info("Skipping disabled record type '%s'", key)
            continue
        catalog.register(_record_type_from_raw(raw))

    logger.info("Loaded %d record type(s): %s", len(catalog), catalog.names())
    return catalog
