"""
Meta endpoints: health, years, sources, reload.
"""
from __future__ import annotations

import threading

from fastapi import APIRouter, Depends

from granthub.data.store import GrantStore
from granthub.api.dependencies import get_store, get_store_or_empty
from granthub.api.response_models import HealthResponse, YearsResponse, SourcesResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: GrantStore = Depends(get_store_or_empty)):
    metrics = store.baseline.metrics
    return HealthResponse(
        status="error" if store.error else ("ok" if store.is_loaded else "loading"),
        records=store.row_count(),
        schools=metrics.total_schools,
        sources=metrics.total_sources,
        error=store.error,
    )


@router.get("/years", response_model=YearsResponse)
def list_years(store: GrantStore = Depends(get_store)):
    return YearsResponse(years=store.years())


@router.get("/sources", response_model=SourcesResponse)
def list_sources(store: GrantStore = Depends(get_store)):
    return SourcesResponse(sources=store.sources())


@router.post("/reload")
def reload_data(store: GrantStore = Depends(get_store_or_empty)):
    """Re-fetch the CSV and rebuild every view.

    Returns immediately, reload happens in background. If several reloads
    overlap, only the most recently started one is kept.
    """
    def _do_reload():
        store.load()
        print(f"  Reload complete — {store.row_count():,} records")

    threading.Thread(target=_do_reload, daemon=True).start()
    return {
        "status": "reloading",
        "message": "Data reload started in background. Check /api/health for updated record counts.",
    }
