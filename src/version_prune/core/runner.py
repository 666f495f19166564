# version_prune/core/runner.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from version_prune.contracts.catalog import TypeCatalog
from version_prune.contracts.run import RunReport, RunSettings
from version_prune.contracts.sink import ProgressSink
from version_prune.core.invocation import Invocation
from version_prune.core.prune.pruner import RetentionPruner

logger = logging.getLogger(__name__)


async def run_prune(
    *,
    invocation: Invocation,
    engine: AsyncEngine,
    catalog: TypeCatalog,
    sink: ProgressSink,
    settings: RunSettings,
) -> RunReport:
    """Run one pruning pass over every record type in ``catalog``."""
    types = list(catalog.record_types())
    if not types:
        logger.warning("Catalog is empty, nothing to prune")

    pruner = RetentionPruner.from_engine(
        engine,
        sink,
        settings=settings,
        default_keep=invocation.policy.default_keep_versions,
    )
    return await pruner.run(
        types,
        invocation.policy,
        invocation.run_mode,
        fast=invocation.fast,
    )
