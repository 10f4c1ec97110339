"""
Portfolio groupings — funding by year, by source dossier, by purpose, by school,
and by map location.
"""
from __future__ import annotations

from typing import Sequence

from granthub.config import TOP_SOURCES_LIMIT, UNSPECIFIED
from granthub.analytics.common import year_label_key
from granthub.data.schemas import (
    Aggregations,
    GrantRecord,
    LocationStat,
    PurposeStat,
    SchoolStat,
    SourceAmount,
    YearAmount,
)


# ---------------------------------------------------------------------------
# Bucket keys
# ---------------------------------------------------------------------------

def _year_key(record: GrantRecord) -> str:
    if record.year_value is not None:
        return str(record.year_value)
    return record.year_label or UNSPECIFIED


def _bucket(buckets: dict, key: str) -> dict:
    if key not in buckets:
        buckets[key] = {"amount": 0.0, "count": 0}
    return buckets[key]


# ---------------------------------------------------------------------------
# Aggregations
# ---------------------------------------------------------------------------

def compute_aggregations(
    records: Sequence[GrantRecord],
    top_sources: int = TOP_SOURCES_LIMIT,
) -> Aggregations:
    """Group records four ways.

    "Unspecified" buckets never reach the output. Amounts accumulate only
    for records that have one; counts include every record in the bucket.
    Ties beyond the documented sort keys keep first-seen order.
    """
    by_year: dict[str, dict] = {}
    by_source: dict[str, dict] = {}
    by_purpose: dict[str, dict] = {}
    by_school: dict[str, dict] = {}

    for record in records:
        groups = [
            (by_year, _year_key(record)),
            (by_source, record.source_file or UNSPECIFIED),
            (by_purpose, record.purpose or UNSPECIFIED),
            (by_school, record.school or UNSPECIFIED),
        ]
        for buckets, key in groups:
            if key == UNSPECIFIED:
                continue
            data = _bucket(buckets, key)
            data["count"] += 1
            if record.amount is not None:
                data["amount"] += record.amount

    amount_by_year = [
        YearAmount(year=year, total_amount=data["amount"])
        for year, data in sorted(by_year.items(), key=lambda item: year_label_key(item[0]))
    ]

    amount_by_source = sorted(
        (SourceAmount(source=s, total_amount=d["amount"], grants=d["count"]) for s, d in by_source.items()),
        key=lambda x: x.total_amount,
        reverse=True,
    )[:top_sources]

    top_purposes = sorted(
        (PurposeStat(purpose=p, count=d["count"], amount=d["amount"]) for p, d in by_purpose.items()),
        key=lambda x: (x.count, x.amount),
        reverse=True,
    )

    top_schools = sorted(
        (SchoolStat(school=s, count=d["count"], amount=d["amount"]) for s, d in by_school.items()),
        key=lambda x: (x.amount, x.count),
        reverse=True,
    )

    return Aggregations(
        amount_by_year=amount_by_year,
        amount_by_source=amount_by_source,
        top_purposes=top_purposes,
        top_schools=top_schools,
    )


# ---------------------------------------------------------------------------
# Locations (map view)
# ---------------------------------------------------------------------------

def compute_locations(records: Sequence[GrantRecord]) -> list[LocationStat]:
    """Group geocoded records by coordinate rounded to 5 decimals."""
    grouped: dict[str, dict] = {}
    for record in records:
        if record.latitude is None or record.longitude is None:
            continue
        key = f"{record.latitude:.5f}|{record.longitude:.5f}"
        entry = grouped.setdefault(key, {
            "latitude": record.latitude,
            "longitude": record.longitude,
            "total_amount": 0.0,
            "grant_count": 0,
            "schools": {},
            "sources": {},
        })
        entry["grant_count"] += 1
        if record.amount is not None:
            entry["total_amount"] += record.amount
        if record.school and record.school != UNSPECIFIED:
            entry["schools"][record.school] = None
        if record.source_file and record.source_file != UNSPECIFIED:
            entry["sources"][record.source_file] = None

    locations = [
        LocationStat(
            id=key,
            latitude=v["latitude"],
            longitude=v["longitude"],
            total_amount=v["total_amount"],
            grant_count=v["grant_count"],
            schools=list(v["schools"]),
            sources=list(v["sources"]),
        )
        for key, v in grouped.items()
    ]
    return sorted(locations, key=lambda x: (x.total_amount, x.grant_count), reverse=True)
