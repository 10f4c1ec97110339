"""
Dashboard endpoints — summary metrics, aggregations, grant records, map locations.

Every endpoint accepts the same filter query params (year, source, search).
Without them the precomputed baseline is served.
"""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from granthub.data.store import GrantStore
from granthub.data.schemas import GrantFilter
from granthub.api.dependencies import get_store, parse_filter
from granthub.api.response_models import (
    AggregationsResponse,
    LocationsResponse,
    MetricsResponse,
    RecordsResponse,
)

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/metrics", response_model=MetricsResponse)
def metrics(
    store: GrantStore = Depends(get_store),
    grant_filter: GrantFilter | None = Depends(parse_filter),
):
    """Portfolio totals for the current selection."""
    view = store.view(grant_filter)
    return MetricsResponse(filtered=view.filtered, **view.metrics.to_dict())


@router.get("/aggregations", response_model=AggregationsResponse)
def aggregations(
    store: GrantStore = Depends(get_store),
    grant_filter: GrantFilter | None = Depends(parse_filter),
):
    """Funding by year and source, purpose and school leaderboards."""
    view = store.view(grant_filter)
    return AggregationsResponse(filtered=view.filtered, **view.aggregations.to_dict())


@router.get("/records", response_model=RecordsResponse)
def records(
    store: GrantStore = Depends(get_store),
    grant_filter: GrantFilter | None = Depends(parse_filter),
    limit: int = Query(500, ge=1, le=10000),
    offset: int = Query(0, ge=0),
):
    """Normalized grant records in source order."""
    view = store.view(grant_filter)
    page = view.records[offset:offset + limit]
    return RecordsResponse(
        filtered=view.filtered,
        count=len(view.records),
        records=[r.to_dict() for r in page],
    )


@router.get("/locations", response_model=LocationsResponse)
def locations(
    store: GrantStore = Depends(get_store),
    grant_filter: GrantFilter | None = Depends(parse_filter),
):
    """Geocoded grants grouped by location, largest funding first."""
    view = store.view(grant_filter)
    return LocationsResponse(
        filtered=view.filtered,
        locations=[asdict(loc) for loc in store.locations(grant_filter)],
    )
