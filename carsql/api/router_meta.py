"""
Meta endpoints: health, catalog.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from carsql.data.store import CarStore
from carsql.api.dependencies import get_store_or_empty
from carsql.api.response_models import CatalogResponse, HealthResponse, IndexInfo

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: CarStore = Depends(get_store_or_empty)):
    tables = store.tables()
    return HealthResponse(
        status="ok",
        loaded=store.is_loaded,
        rows=store.row_count(),
        tables=tables,
        views=store.views(),
        indexes=[ix["name"] for t in tables for ix in store.indexes(t)],
    )


@router.get("/catalog", response_model=CatalogResponse)
def catalog(store: CarStore = Depends(get_store_or_empty)):
    tables = store.tables()
    return CatalogResponse(
        tables=tables,
        views=store.views(),
        indexes={t: [IndexInfo(**ix) for ix in store.indexes(t)] for t in tables},
    )
