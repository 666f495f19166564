# version_prune/api/schemas.py
from __future__ import annotations

from pydantic import BaseModel, Field


class TypeResult(BaseModel):
    name: str
    trimmed: int = 0
    archived: int = 0
    orphaned: int = 0
    total: int = 0
    error: str | None = None
    failed_table: str | None = None


class PruneResponse(BaseModel):
    """Result of a prune task run."""

    status: str = "ok"
    mode: str
    fast: bool
    keep_versions: int
    total: int = 0
    messages: list[str] = Field(default_factory=list)
    types: list[TypeResult] = Field(default_factory=list)


class RecordTypeInfo(BaseModel):
    name: str
    base_table: str
    subtype_tables: list[str] = Field(default_factory=list)
    hierarchy_root: bool = True
