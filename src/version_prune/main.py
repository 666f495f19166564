# version_prune/main.py
"""
Application factory for the HTTP task surface.

The engine and record type catalog are created once per process and
kept on ``app.state``; tests may inject their own.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from version_prune import __version__
from version_prune.api.discovery import router as discovery_router
from version_prune.api.tasks import router as tasks_router
from version_prune.contracts.catalog import TypeCatalog
from version_prune.core.catalog import load_catalog_config
from version_prune.core.config import Settings, settings as default_settings
from version_prune.core.db import build_engine
from version_prune.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_engine = getattr(app.state, "engine", None) is None
    if owns_engine:
        cfg: Settings = app.state.settings
        app.state.engine = build_engine(
            cfg.database_url,
            pool_size=cfg.database_pool_size,
            max_overflow=cfg.database_max_overflow,
        )

    yield

    if owns_engine:
        logger.info("Disposing database engine")
        await app.state.engine.dispose()
        app.state.engine = None


def create_app(
    *,
    cfg: Settings | None = None,
    engine: AsyncEngine | None = None,
    catalog: TypeCatalog | None = None,
) -> FastAPI:
    """Build the FastAPI application exposing the prune task."""
    cfg = cfg or default_settings
    configure_logging(cfg.log_level, json=cfg.log_json)
    logger.info("Creating version-prune application (env=%s)", cfg.app_env)

    if catalog is None:
        try:
            catalog = load_catalog_config(cfg.catalog_config_paths)
        except Exception:
            logger.exception("Failed to load record type catalog")
            raise
    if not list(catalog.record_types()):
        logger.warning("No record types configured, prune runs will be no-ops")

    app = FastAPI(
        title="Version Prune",
        version=__version__,
        description="Retention pruning for versioned record stores",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.catalog = catalog
    app.state.engine = engine

    app.include_router(discovery_router)
    app.include_router(tasks_router)

    return app
