# version_prune/cli.py
"""
Command line entry point.

    version-prune --run dry --keep 10
    version-prune --run yes
    version-prune --run fast

``--run yes`` acknowledges that pruned versions, including the whole
history of deleted records, cannot be recovered.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import Sequence

from version_prune.core.catalog import load_catalog_config
from version_prune.core.config import Settings, settings as default_settings
from version_prune.core.db import build_engine
from version_prune.core.exceptions import ConfigurationError, PruneRunError, StoreError
from version_prune.core.invocation import Invocation, parse_invocation
from version_prune.core.logging import configure_logging
from version_prune.core.runner import run_prune
from version_prune.core.sinks import StreamSink

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2

DESCRIPTION = """\
Prunes the backlog of version history to a fixed number per record, as well
as any versions of archived or orphaned records. Deleted records become
unrecoverable. Run with --run yes to acknowledge this (after taking a backup),
--run dry to only count, or --run fast to skip per-record trimming.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="version-prune", description=DESCRIPTION)
    parser.add_argument("--run", help="yes, dry or fast")
    parser.add_argument(
        "--keep",
        help="Number of versions to keep per record (default: KEEP_VERSIONS setting, 5)",
    )
    parser.add_argument(
        "--catalog",
        action="append",
        dest="catalog_paths",
        metavar="GLOB",
        help="Catalog YAML file or glob pattern (repeatable)",
    )
    parser.add_argument("--database-url", help="Async SQLAlchemy database URL")
    parser.add_argument("--log-level", help="Log level (default from settings)")
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        default=None,
        help="Abort the run on the first failing record type",
    )
    return parser


async def _execute(invocation: Invocation, args: argparse.Namespace, cfg: Settings) -> int:
    catalog = load_catalog_config(args.catalog_paths or cfg.catalog_config_paths)

    run_settings = cfg.run_settings()
    if args.stop_on_error:
        run_settings = replace(run_settings, stop_on_error=True)

    engine = build_engine(
        args.database_url or cfg.database_url,
        pool_size=cfg.database_pool_size,
        max_overflow=cfg.database_max_overflow,
    )
    try:
        await run_prune(
            invocation=invocation,
            engine=engine,
            catalog=catalog,
            sink=StreamSink(),
            settings=run_settings,
        )
    finally:
        await engine.dispose()
    return EXIT_OK


def main(argv: Sequence[str] | None = None, *, cfg: Settings | None = None) -> int:
    cfg = cfg or default_settings
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or cfg.log_level, json=cfg.log_json)

    try:
        invocation = parse_invocation(args.run, args.keep, default_keep=cfg.keep_versions)
        return asyncio.run(_execute(invocation, args, cfg))
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except PruneRunError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except StoreError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILED


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
