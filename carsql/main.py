"""
Car Prices SQL — FastAPI app factory with startup catalog opening.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carsql.data.store import CarStore
from carsql.api.dependencies import set_store
from carsql.api.router_meta import router as meta_router
from carsql.api.router_queries import router as queries_router
from carsql.queries import analysis


def open_store(store: CarStore) -> CarStore:
    """Make sure the derived table, view and indexes exist for a loaded catalog."""
    if store.is_loaded:
        analysis.create_car_specs(store)
        analysis.create_make_year_view(store)
        analysis.create_indexes(store)
        print(f"\nCar Prices SQL ready — {store.row_count():,} rows in {store.db_path}\n")
    else:
        print(f"\nCar Prices SQL ready — no data in {store.db_path}. Run `carsql load` first.\n")
    return store


def create_app(store: CarStore | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the catalog at startup."""
        from carsql.config import DB_PATH
        print(f"  DB_PATH = {DB_PATH}")
        s = store or CarStore(DB_PATH)
        set_store(open_store(s))
        yield
        set_store(None)
        s.close()

    app = FastAPI(
        title="Car Prices SQL API",
        description="Used-car sales analysis over an embedded SQLite catalog",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(queries_router)
    return app


app = create_app()
