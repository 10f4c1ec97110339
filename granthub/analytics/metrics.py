"""
Portfolio metrics — totals, distinct counts, average award, request-to-award ratio.
"""
from __future__ import annotations

from typing import Sequence

from granthub.analytics.common import safe_divide
from granthub.data.schemas import GrantMetrics, GrantRecord


def compute_metrics(records: Sequence[GrantRecord]) -> GrantMetrics:
    """Single pass over the records.

    Missing amounts contribute 0 but the record still counts as a grant, so
    the average is over all grants. The ratio is over the requested total
    and is None when nothing was requested.
    """
    total_grants = len(records)
    total_awarded = 0.0
    total_requested = 0.0
    schools: set[str] = set()
    sources: set[str] = set()

    for record in records:
        if record.amount is not None:
            total_awarded += record.amount
        if record.amount_requested is not None:
            total_requested += record.amount_requested
        if record.school:
            schools.add(record.school)
        if record.source_file:
            sources.add(record.source_file)

    return GrantMetrics(
        total_grants=total_grants,
        total_awarded=total_awarded,
        total_requested=total_requested,
        total_schools=len(schools),
        total_sources=len(sources),
        average_grant=safe_divide(total_awarded, total_grants),
        request_to_award_ratio=(total_awarded / total_requested) if total_requested > 0 else None,
    )
