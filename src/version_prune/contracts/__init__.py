"""Public contracts for the version pruner."""
from version_prune.contracts.record_type import RecordType, VersionSchema
from version_prune.contracts.catalog import TypeCatalog
from version_prune.contracts.sink import ProgressSink
from version_prune.contracts.run import (
    InvocationMode,
    RetentionPolicy,
    RunMode,
    RunReport,
    RunSettings,
    TypeOutcome,
)

__all__ = [
    "RecordType", "VersionSchema",
    "TypeCatalog",
    "ProgressSink",
    "InvocationMode", "RetentionPolicy", "RunMode", "RunReport", "RunSettings", "TypeOutcome",
]
