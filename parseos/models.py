from __future__ import annotations

from typing import Any, List, Optional
from pydantic import BaseModel, Field


class Table(BaseModel):
    headers: List[Any]
    rows: List[List[Any]]


class DualTableRequest(BaseModel):
    retenciones: Table
    percepciones: Table


class TransformResponse(BaseModel):
    result: str


class ErrorResponse(BaseModel):
    error: str


class MissingColumnsResponse(BaseModel):
    error: str
    missingColumns: List[str] = Field(default_factory=list)
    hint: Optional[str] = None


class HealthResponse(BaseModel):
    ok: bool = True
