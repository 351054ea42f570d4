"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from carsql.data.schemas import ResultSet
from carsql.reports.common import sanitize_for_json


class HealthResponse(BaseModel):
    status: str
    loaded: bool
    rows: int
    tables: list[str]
    views: list[str]
    indexes: list[str]


class IndexInfo(BaseModel):
    name: str
    columns: list[str]
    unique: bool


class CatalogResponse(BaseModel):
    tables: list[str]
    views: list[str]
    indexes: dict[str, list[IndexInfo]]


class QueryRequest(BaseModel):
    sql: str
    params: Optional[dict[str, Any]] = None


class ResultResponse(BaseModel):
    columns: list[str]
    rows: list[dict[str, Any]]
    row_count: int

    @classmethod
    def from_result(cls, result: ResultSet) -> "ResultResponse":
        return cls(
            columns=result.columns,
            rows=sanitize_for_json(result.records()),
            row_count=len(result),
        )
