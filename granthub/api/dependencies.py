"""
FastAPI dependencies — GrantStore singleton, filter parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from granthub.data.store import GrantStore
from granthub.data.schemas import GrantFilter

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: GrantStore | None = None


def set_store(store: GrantStore) -> None:
    global _store
    _store = store


def get_store_or_empty() -> GrantStore:
    """Return the store even if it has no data (for health/reload endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


def get_store() -> GrantStore:
    store = get_store_or_empty()
    if not store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    if store.error:
        raise HTTPException(502, store.error)
    return store


# ---------------------------------------------------------------------------
# Filter parsing from query params
# ---------------------------------------------------------------------------

def parse_filter(
    year: list[str] = Query(default=[], description="Year label (repeatable)"),
    source: list[str] = Query(default=[], description="Source file (repeatable)"),
    search: Optional[str] = Query(None, description="Case-insensitive substring search"),
) -> GrantFilter | None:
    """Parse filter query parameters; None when nothing is selected."""
    grant_filter = GrantFilter.build(years=year, sources=source, search=search)
    return grant_filter if grant_filter.is_active else None
