"""
Grant Portfolio Report — KPI summary, funding by year/source, purposes, schools, grant table.
"""
from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

import pandas as pd

from granthub.data.format import format_date
from granthub.data.schemas import GrantFilter, GrantRecord
from granthub.data.store import GrantStore
from granthub.excel.writer import ExcelWriter


GRANT_COLUMNS = [
    ("source_file", "text", "Source file"),
    ("school", "text", "School / Partner"),
    ("grant_id", "text", "Grant ID"),
    ("title", "wrap", "Title of project"),
    ("year_label", "text", "Year"),
    ("date_of_letter", "text", "Date of letter"),
    ("date_of_application", "text", "Date of application"),
    ("date_range", "text", "Grant period"),
    ("amount", "currency", "Amount approved"),
    ("amount_requested", "currency", "Amount requested"),
    ("purpose", "wrap", "Purpose of grant"),
    ("other_fields", "wrap", "Other fields"),
]


def records_frame(records: list[GrantRecord]) -> pd.DataFrame:
    """Grant table for display: largest awards first, then school A-Z.

    Dates are rendered for display and other fields collapsed into one
    "key: value; ..." cell.
    """
    columns = [key for key, _, _ in GRANT_COLUMNS]
    if not records:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([
        {
            "source_file": r.source_file,
            "school": r.school,
            "grant_id": r.grant_id,
            "title": r.title,
            "year_label": r.year_label,
            "date_of_letter": format_date(r.date_of_letter),
            "date_of_application": format_date(r.date_of_application),
            "date_range": format_date(r.date_range),
            "amount": r.amount,
            "amount_requested": r.amount_requested,
            "purpose": r.purpose,
            "other_fields": "; ".join(f"{f.key}: {f.value}" for f in r.other_fields),
        }
        for r in records
    ])
    df["_sort_amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0)
    df = df.sort_values(["_sort_amount", "school"], ascending=[False, True], kind="mergesort")
    return df[columns].reset_index(drop=True)


def generate_json(store: GrantStore, grant_filter: GrantFilter | None = None) -> dict:
    view = store.view(grant_filter)
    return {
        "filter": grant_filter.label if grant_filter else GrantFilter().label,
        "filtered": view.filtered,
        "metrics": view.metrics.to_dict(),
        "aggregations": view.aggregations.to_dict(),
        "locations": [asdict(loc) for loc in store.locations(grant_filter)],
        "record_count": len(view.records),
    }


def generate_excel(
    store: GrantStore,
    output_path: str | Path,
    grant_filter: GrantFilter | None = None,
) -> Path:
    data = generate_json(store, grant_filter)
    view = store.view(grant_filter)
    m = data["metrics"]
    agg = data["aggregations"]
    ew = ExcelWriter()

    # Summary
    ws = ew.add_sheet("Summary")
    ew.write_title(ws, "GRANTS PORTFOLIO", f"Portfolio Insight Report  |  {data['filter']}")
    row = ew.write_section(ws, 4, "PORTFOLIO AT A GLANCE")
    row = ew.write_kpi_row(ws, row, [
        (m["total_awarded"], "Total Awarded", "currency"),
        (m["total_requested"], "Funding Requested", "currency"),
        (m["total_grants"], "Grant Records", "number"),
        (m["total_schools"], "Schools & Partners", "number"),
    ])
    ratio = m["request_to_award_ratio"]
    row = ew.write_kpi_row(ws, row, [
        (m["total_sources"], "Source Files", "number"),
        (m["average_grant"], "Average Grant", "currency"),
        (ratio * 100 if ratio is not None else "—", "Awarded / Requested", "percent" if ratio is not None else "text"),
    ])

    # Funding by year
    ws = ew.add_sheet("By Year")
    ew.write_table(ws, 1, [
        ("year", "text", "Year"),
        ("total_amount", "currency", "Total Approved"),
    ], agg["amount_by_year"], show_total=True)

    # Funding by source (top N)
    ws = ew.add_sheet("By Source")
    ew.write_table(ws, 1, [
        ("source", "text", "Source File"),
        ("grants", "number", "Grants"),
        ("total_amount", "currency", "Total Approved"),
    ], agg["amount_by_source"], highlight_fn=lambda i, r: "gold" if i < 3 else None)

    # Purposes
    ws = ew.add_sheet("Purposes")
    ew.write_table(ws, 1, [
        ("purpose", "wrap", "Purpose"),
        ("count", "number", "Grants"),
        ("amount", "currency", "Total Approved"),
    ], agg["top_purposes"], highlight_fn=lambda i, r: "gold" if i < 5 else None)

    # Schools
    ws = ew.add_sheet("Schools")
    ew.write_table(ws, 1, [
        ("school", "text", "School / Partner"),
        ("count", "number", "Grants"),
        ("amount", "currency", "Total Approved"),
    ], agg["top_schools"], highlight_fn=lambda i, r: "gold" if i < 10 else None)

    # Grant table
    ws = ew.add_sheet("Grants")
    ew.write_table(ws, 1, GRANT_COLUMNS, records_frame(view.records))

    return ew.save(output_path)
