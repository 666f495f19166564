# version_prune/api/tasks.py
"""
HTTP task endpoint.

``POST /tasks/prune?run=dry&keep=10`` runs one pruning pass and returns
its progress lines and per-type counts. ``run=yes`` acknowledges that
deleted records become unrecoverable.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from version_prune.api.schemas import PruneResponse, TypeResult
from version_prune.contracts.run import RunReport
from version_prune.core.exceptions import ConfigurationError, PruneRunError, StoreError
from version_prune.core.invocation import parse_invocation
from version_prune.core.runner import run_prune
from version_prune.core.sinks import BufferSink, LoggingSink, TeeSink

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _response(report: RunReport, messages: list[str], status: str) -> PruneResponse:
    return PruneResponse(
        status=status,
        mode=report.mode.value,
        fast=report.fast,
        keep_versions=report.keep_versions,
        total=report.total,
        messages=messages,
        types=[TypeResult(**o.to_dict()) for o in report.outcomes],
    )


@router.post("/prune", response_model=PruneResponse)
async def prune(
    request: Request,
    run: str | None = Query(default=None, description="yes, dry or fast"),
    keep: str | None = Query(default=None, description="Versions to keep per record"),
):
    state = request.app.state
    cfg = state.settings

    try:
        invocation = parse_invocation(run, keep, default_keep=cfg.keep_versions)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    buffer = BufferSink()
    try:
        report = await run_prune(
            invocation=invocation,
            engine=state.engine,
            catalog=state.catalog,
            sink=TeeSink(buffer, LoggingSink(logger)),
            settings=cfg.run_settings(),
        )
    except PruneRunError as exc:
        body = _response(exc.report, buffer.lines, status="failed")
        return JSONResponse(status_code=500, content=body.model_dump())
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    return _response(report, buffer.lines, status="ok")
