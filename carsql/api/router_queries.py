"""
Analytical query endpoints: grouped averages, subqueries, view reads, filters, ad-hoc reads.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from carsql.data.store import CarStore
from carsql.data.schemas import StatementKind, classify
from carsql.api.dependencies import get_store
from carsql.api.response_models import QueryRequest, ResultResponse
from carsql.errors import QueryError, SchemaError
from carsql.queries import analysis

router = APIRouter(prefix="/api", tags=["queries"])


def _respond(fn, *args, **kwargs) -> ResultResponse:
    try:
        result = fn(*args, **kwargs)
    except SchemaError as exc:
        raise HTTPException(400, f"Schema error: {exc}")
    except QueryError as exc:
        raise HTTPException(400, str(exc))
    return ResultResponse.from_result(result)


@router.get("/averages", response_model=ResultResponse)
def averages(
    by: list[str] = Query(["make"], description="Grouping column(s)"),
    limit: Optional[int] = Query(None, ge=1),
    store: CarStore = Depends(get_store),
):
    return _respond(analysis.average_price_by, store, *by, limit=limit)


@router.get("/above-average", response_model=ResultResponse)
def above_average(
    limit: Optional[int] = Query(None, ge=1),
    store: CarStore = Depends(get_store),
):
    return _respond(analysis.above_average_sales, store, limit=limit)


@router.get("/max-per-make", response_model=ResultResponse)
def max_per_make(store: CarStore = Depends(get_store)):
    return _respond(analysis.max_price_per_make, store)


@router.get("/summary", response_model=ResultResponse)
def summary(
    make: Optional[str] = Query(None),
    store: CarStore = Depends(get_store),
):
    return _respond(analysis.make_year_summary, store, make)


@router.get("/sales", response_model=ResultResponse)
def sales(
    make: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    state: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None),
    max_price: Optional[float] = Query(None),
    limit: Optional[int] = Query(100, ge=1, le=10_000),
    store: CarStore = Depends(get_store),
):
    return _respond(
        analysis.filter_sales, store,
        make=make, year=year, state=state,
        min_price=min_price, max_price=max_price, limit=limit,
    )


@router.post("/query", response_model=ResultResponse)
def run_query(req: QueryRequest, store: CarStore = Depends(get_store)):
    """Run one read-only statement. Schema statements are refused."""
    if classify(req.sql) != StatementKind.READ:
        raise HTTPException(400, "Only read queries (SELECT/WITH) are accepted")
    return _respond(store.query, req.sql, req.params)
