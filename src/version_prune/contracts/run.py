# version_prune/contracts/run.py
"""
Run-scoped values: modes, retention policy, settings and the run report.

These are passed explicitly through every prune operation; there is no
shared mutable task state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from version_prune.contracts.record_type import VersionSchema

DEFAULT_KEEP_VERSIONS = 5
DEFAULT_BATCH_SIZE = 100


class RunMode(str, Enum):
    EXECUTE = "execute"
    DRY_RUN = "dry_run"

    @property
    def is_dry(self) -> bool:
        return self is RunMode.DRY_RUN

    @property
    def prefix(self) -> str:
        """Prefix for progress messages."""
        return "(dry): " if self.is_dry else ""


class InvocationMode(str, Enum):
    """Operator-facing ``run`` argument."""

    YES = "yes"
    DRY = "dry"
    FAST = "fast"

    @property
    def run_mode(self) -> RunMode:
        return RunMode.DRY_RUN if self is InvocationMode.DRY else RunMode.EXECUTE

    @property
    def fast(self) -> bool:
        """Skip the per-record trimming scan and only sweep."""
        return self is InvocationMode.FAST


@dataclass(frozen=True)
class RetentionPolicy:
    """How many of the most recent versions to keep per live record."""

    keep_versions: int = DEFAULT_KEEP_VERSIONS
    default_keep_versions: int = DEFAULT_KEEP_VERSIONS

    def __post_init__(self) -> None:
        if self.default_keep_versions <= 0:
            raise ValueError(
                f"default_keep_versions must be positive, got {self.default_keep_versions}"
            )

    @property
    def effective_keep(self) -> int:
        return normalize_keep(self.keep_versions, self.default_keep_versions)


def normalize_keep(keep: int | None, default: int = DEFAULT_KEEP_VERSIONS) -> int:
    """Zero, negative or missing retention falls back to ``default``."""
    if keep is None or keep <= 0:
        return default
    return keep


@dataclass(frozen=True)
class RunSettings:
    """Plain per-run settings shared by the prune operations."""

    batch_size: int = DEFAULT_BATCH_SIZE
    schema: VersionSchema = field(default_factory=VersionSchema)
    stop_on_error: bool = False

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")


@dataclass
class TypeOutcome:
    """Rows affected (or that would be affected) for one record type."""

    name: str
    trimmed: int = 0
    archived: int = 0
    orphaned: int = 0
    error: str | None = None
    failed_table: str | None = None

    @property
    def total(self) -> int:
        return self.trimmed + self.archived + self.orphaned

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "trimmed": self.trimmed,
            "archived": self.archived,
            "orphaned": self.orphaned,
            "total": self.total,
            "error": self.error,
            "failed_table": self.failed_table,
        }


@dataclass
class RunReport:
    mode: RunMode
    fast: bool
    keep_versions: int
    outcomes: list[TypeOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(o.total for o in self.outcomes)

    @property
    def failures(self) -> list[TypeOutcome]:
        return [o for o in self.outcomes if o.failed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "fast": self.fast,
            "keep_versions": self.keep_versions,
            "total": self.total,
            "types": [o.to_dict() for o in self.outcomes],
        }
