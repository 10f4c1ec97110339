"""
Grant record, metric, aggregation and filter schemas.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class OtherField:
    """A non-canonical column carried through from the source row."""
    key: str
    value: str


@dataclass(frozen=True)
class GrantRecord:
    """One normalized grant row."""
    id: str
    source_file: str
    school: str
    grant_id: str
    title: str
    date_of_letter: str
    date_range: str
    date_of_application: str
    year_label: str
    year_value: Optional[int]
    amount: Optional[float]
    amount_raw: str
    amount_requested: Optional[float]
    amount_requested_raw: str
    full_grant_amount_disbursed: Optional[float]
    full_grant_amount_disbursed_raw: str
    purpose: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    important_fields: dict[str, str] = field(default_factory=dict)
    other_fields: tuple[OtherField, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GrantMetrics:
    """Portfolio-wide totals for a set of records."""
    total_grants: int
    total_awarded: float
    total_requested: float
    total_schools: int
    total_sources: int
    average_grant: float
    request_to_award_ratio: Optional[float]  # None when nothing was requested

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class YearAmount:
    year: str
    total_amount: float


@dataclass(frozen=True)
class SourceAmount:
    source: str
    total_amount: float
    grants: int


@dataclass(frozen=True)
class PurposeStat:
    purpose: str
    count: int
    amount: float


@dataclass(frozen=True)
class SchoolStat:
    school: str
    count: int
    amount: float


@dataclass(frozen=True)
class LocationStat:
    """Grants sharing a (rounded) coordinate, for the map view."""
    id: str
    latitude: float
    longitude: float
    total_amount: float
    grant_count: int
    schools: list[str]
    sources: list[str]


@dataclass(frozen=True)
class Aggregations:
    amount_by_year: list[YearAmount]
    amount_by_source: list[SourceAmount]  # top N by amount
    top_purposes: list[PurposeStat]
    top_schools: list[SchoolStat]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GrantFilter:
    """User-selected years, sources and a free-text search term."""
    years: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()
    search: str = ""

    @classmethod
    def build(cls, years=None, sources=None, search: str | None = None) -> "GrantFilter":
        return cls(
            years=tuple(years or ()),
            sources=tuple(sources or ()),
            search=search or "",
        )

    @property
    def is_active(self) -> bool:
        return bool(self.years) or bool(self.sources) or bool(self.search.strip())

    @property
    def key(self) -> tuple:
        """Order-insensitive cache key."""
        return (
            tuple(sorted(set(self.years))),
            tuple(sorted(set(self.sources))),
            self.search.strip().lower(),
        )

    @property
    def label(self) -> str:
        """Human-readable summary of the active filter."""
        if not self.is_active:
            return "All Grants"
        parts = []
        if self.years:
            parts.append("Years: " + ", ".join(self.years))
        if self.sources:
            parts.append("Sources: " + ", ".join(self.sources))
        if self.search.strip():
            parts.append(f'Search: "{self.search.strip()}"')
        return "  |  ".join(parts)


@dataclass(frozen=True)
class PortfolioView:
    """Records plus the metrics/aggregations computed over them."""
    records: list[GrantRecord]
    metrics: GrantMetrics
    aggregations: Aggregations
    filtered: bool = False
