"""
Row normalization: raw CSV rows -> GrantRecord, plus batch construction.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from granthub.config import (
    IMPORTANT_FIELDS, IMPORTANT_FIELD_SET,
    SOURCE_FILE, SCHOOL, GRANT_ID, TITLE, DATE_OF_LETTER, DATE_RANGE, DATE_OF_APPLICATION,
    YEAR, AMOUNT, AMOUNT_REQUESTED, FULL_AMOUNT_DISBURSED, PURPOSE,
    LATITUDE, LONGITUDE,
    UNSPECIFIED, UNTITLED_PROJECT, RECORD_ID_PREFIX,
)
from granthub.data.format import (
    extract_year, parse_coordinate, parse_currency, parse_int_prefix, safe_string,
)
from granthub.data.schemas import GrantRecord, OtherField


RawRow = Mapping[str, Optional[str]]


class GrantDataError(Exception):
    """The upstream CSV could not be read; carries the user-facing message."""


# ---------------------------------------------------------------------------
# Field extraction
# ---------------------------------------------------------------------------

def extract_important_fields(row: RawRow) -> dict[str, str]:
    """All twelve canonical columns, trimmed ("" when absent)."""
    return {name: safe_string(row.get(name)) for name in IMPORTANT_FIELDS}


def extract_other_fields(row: RawRow) -> tuple[OtherField, ...]:
    """Non-canonical columns with a non-empty value, in source column order."""
    return tuple(
        OtherField(key=key, value=safe_string(value))
        for key, value in row.items()
        if key not in IMPORTANT_FIELD_SET and safe_string(value)
    )


def resolve_year(important: Mapping[str, str]) -> tuple[str, Optional[int]]:
    """Return (year_label, year_value).

    An explicit Year wins for both. A Year that does not parse as an integer
    still becomes the label, while the value falls back to the letter date
    (or the grant date range when the letter date is blank).
    """
    year_text = important[YEAR]
    year_value = parse_int_prefix(year_text) if year_text else None
    if year_value is None:
        year_value = extract_year(important[DATE_OF_LETTER] or important[DATE_RANGE])

    if year_text:
        label = year_text
    elif year_value is not None:
        label = str(year_value)
    else:
        label = UNSPECIFIED
    return label, year_value


# ---------------------------------------------------------------------------
# Record normalisation
# ---------------------------------------------------------------------------

def normalize_record(row: RawRow, index: int) -> GrantRecord:
    """Build a GrantRecord from one raw row. Never raises."""
    important = extract_important_fields(row)
    year_label, year_value = resolve_year(important)

    return GrantRecord(
        id=f"{important[GRANT_ID] or RECORD_ID_PREFIX}-{index}",
        source_file=important[SOURCE_FILE] or UNSPECIFIED,
        school=important[SCHOOL] or UNSPECIFIED,
        grant_id=important[GRANT_ID] or UNSPECIFIED,
        title=important[TITLE] or UNTITLED_PROJECT,
        date_of_letter=important[DATE_OF_LETTER],
        date_range=important[DATE_RANGE],
        date_of_application=important[DATE_OF_APPLICATION],
        year_label=year_label,
        year_value=year_value,
        amount=parse_currency(important[AMOUNT]),
        amount_raw=important[AMOUNT],
        amount_requested=parse_currency(important[AMOUNT_REQUESTED]),
        amount_requested_raw=important[AMOUNT_REQUESTED],
        full_grant_amount_disbursed=parse_currency(important[FULL_AMOUNT_DISBURSED]),
        full_grant_amount_disbursed_raw=important[FULL_AMOUNT_DISBURSED],
        purpose=important[PURPOSE] or UNSPECIFIED,
        latitude=parse_coordinate(row.get(LATITUDE)),
        longitude=parse_coordinate(row.get(LONGITUDE)),
        important_fields=important,
        other_fields=extract_other_fields(row),
        raw=dict(row),
    )


def normalize_batch(rows: Iterable[RawRow]) -> list[GrantRecord]:
    """Normalize every row, dropping rows without a school.

    The index used for ids is the row's position in ``rows``, so dropped rows
    still consume an index. The school check runs on the trimmed source
    value, before the "Unspecified" fallback.
    """
    records = []
    for index, row in enumerate(rows):
        record = normalize_record(row, index)
        if not record.important_fields[SCHOOL]:
            continue
        records.append(record)
    return records


def build_batch(rows: Iterable[RawRow], errors: Iterable[str] = ()) -> list[GrantRecord]:
    """Normalize a fetched batch, refusing to do so if the fetch reported errors."""
    errors = [str(e) for e in errors]
    if errors:
        raise GrantDataError("\n".join(errors))
    return normalize_batch(rows)
