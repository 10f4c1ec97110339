"""
Record filtering by year, source dossier and free-text search, plus the
option lists the filter controls are built from.
"""
from __future__ import annotations

from typing import Sequence

from granthub.config import UNSPECIFIED
from granthub.analytics.common import year_option_key
from granthub.data.schemas import GrantRecord


def has_active_filters(selected_years: Sequence[str], selected_sources: Sequence[str], search_term: str | None) -> bool:
    return bool(selected_years) or bool(selected_sources) or bool((search_term or "").strip())


def search_haystack(record: GrantRecord) -> str:
    """Text a search term is matched against (built fresh on every call)."""
    parts = [
        record.school,
        record.title,
        record.purpose,
        record.grant_id,
        record.source_file,
        record.date_range,
        record.date_of_application,
        record.date_of_letter,
    ]
    parts.extend(f"{f.key} {f.value}" for f in record.other_fields)
    return " ".join(parts)


def matches(
    record: GrantRecord,
    selected_years: Sequence[str],
    selected_sources: Sequence[str],
    term: str,
) -> bool:
    """Whether one record passes; ``term`` must already be trimmed and lower-cased."""
    if selected_years and (record.year_label.strip() or UNSPECIFIED) not in selected_years:
        return False
    if selected_sources and (record.source_file.strip() or UNSPECIFIED) not in selected_sources:
        return False
    if term and term not in search_haystack(record).lower():
        return False
    return True


def filter_records(
    records: Sequence[GrantRecord],
    selected_years: Sequence[str] = (),
    selected_sources: Sequence[str] = (),
    search_term: str | None = "",
) -> Sequence[GrantRecord]:
    """Records passing every active clause.

    With no active clause the input sequence itself is returned, so callers
    can detect "unfiltered" with an identity check and reuse baseline results.
    """
    if not has_active_filters(selected_years, selected_sources, search_term):
        return records
    term = (search_term or "").strip().lower()
    years = set(selected_years)
    sources = set(selected_sources)
    return [r for r in records if matches(r, years, sources, term)]


# ---------------------------------------------------------------------------
# Filter options
# ---------------------------------------------------------------------------

def year_options(records: Sequence[GrantRecord]) -> list[str]:
    """Distinct year labels, newest first; non-numeric labels last."""
    years = {r.year_label.strip() for r in records if r.year_label and r.year_label.strip()}
    return sorted(years, key=year_option_key)


def source_options(records: Sequence[GrantRecord]) -> list[str]:
    """Distinct source dossiers, alphabetical."""
    return sorted({r.source_file.strip() for r in records if r.source_file and r.source_file.strip()})
