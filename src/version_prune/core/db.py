# version_prune/core/db.py
from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from version_prune.core.exceptions import ConfigurationError


def build_engine(
    database_url: str,
    *,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    echo: bool = False,
) -> AsyncEngine:
    """Create an async engine, e.g. for ``postgresql+asyncpg://...``.

    SQLite pools do not accept sizing arguments, so they are only passed
    for server databases.

    Raises:
        ConfigurationError: If the URL is malformed or names an unknown driver.
    """
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": echo}
    try:
        if make_url(database_url).get_backend_name() != "sqlite":
            if pool_size is not None:
                kwargs["pool_size"] = pool_size
            if max_overflow is not None:
                kwargs["max_overflow"] = max_overflow
        return create_async_engine(database_url, **kwargs)
    except ArgumentError as exc:
        raise ConfigurationError(f"Invalid database URL: {exc}") from exc
