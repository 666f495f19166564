# version_prune/contracts/catalog.py
"""
Type catalog protocol.

The pruner never discovers versioned types on its own. A catalog hands it
an ordered sequence of :class:`RecordType` descriptors and the pruner
processes them in that order.
"""
from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from version_prune.contracts.record_type import RecordType


@runtime_checkable
class TypeCatalog(Protocol):
    """Source of versioned record types for a run."""

    def record_types(self) -> Iterable[RecordType]: ...
