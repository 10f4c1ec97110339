"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    records: int
    schools: int
    sources: int
    error: Optional[str] = None


class YearsResponse(BaseModel):
    years: list[str]


class SourcesResponse(BaseModel):
    sources: list[str]


class MetricsResponse(BaseModel):
    filtered: bool
    total_grants: int
    total_awarded: float
    total_requested: float
    total_schools: int
    total_sources: int
    average_grant: float
    request_to_award_ratio: Optional[float] = None


class YearAmountModel(BaseModel):
    year: str
    total_amount: float


class SourceAmountModel(BaseModel):
    source: str
    total_amount: float
    grants: int


class PurposeStatModel(BaseModel):
    purpose: str
    count: int
    amount: float


class SchoolStatModel(BaseModel):
    school: str
    count: int
    amount: float


class AggregationsResponse(BaseModel):
    filtered: bool
    amount_by_year: list[YearAmountModel]
    amount_by_source: list[SourceAmountModel]
    top_purposes: list[PurposeStatModel]
    top_schools: list[SchoolStatModel]


class RecordsResponse(BaseModel):
    filtered: bool
    count: int
    records: list[dict[str, Any]]


class LocationModel(BaseModel):
    id: str
    latitude: float
    longitude: float
    total_amount: float
    grant_count: int
    schools: list[str]
    sources: list[str]


class LocationsResponse(BaseModel):
    filtered: bool
    locations: list[LocationModel]
