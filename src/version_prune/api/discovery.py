# version_prune/api/discovery.py
"""
Root-level discovery and health endpoints.
"""
from __future__ import annotations

from fastapi import APIRouter, Request

from version_prune.api.schemas import RecordTypeInfo

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict:
    catalog = getattr(request.app.state, "catalog", None)
    return {
        "status": "healthy",
        "record_types": len(list(catalog.record_types())) if catalog else 0,
    }


@router.get("/record-types")
async def list_record_types(request: Request) -> list[RecordTypeInfo]:
    """List the versioned record types a prune run would process."""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        return []
    return [
        RecordTypeInfo(
            name=t.name,
            base_table=t.base_table,
            subtype_tables=list(t.subtype_tables),
            hierarchy_root=t.hierarchy_root,
        )
        for t in catalog.record_types()
    ]
