"""
FastAPI dependencies — CarStore singleton.
"""
from __future__ import annotations

from fastapi import HTTPException

from carsql.data.store import CarStore

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: CarStore | None = None


def set_store(store: CarStore | None) -> None:
    global _store
    _store = store


def get_store() -> CarStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return _store


def get_store_or_empty() -> CarStore:
    """Return the store even if the base table is missing (health endpoint)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store
