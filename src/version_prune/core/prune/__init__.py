"""Prune operations and the orchestrating pruner."""
from version_prune.core.prune.archived import ArchivedVersionSweeper
from version_prune.core.prune.orphans import OrphanedSubtypeSweeper
from version_prune.core.prune.pruner import RetentionPruner
from version_prune.core.prune.trimmer import OldVersionTrimmer

__all__ = [
    "ArchivedVersionSweeper",
    "OldVersionTrimmer",
    "OrphanedSubtypeSweeper",
    "RetentionPruner",
]
