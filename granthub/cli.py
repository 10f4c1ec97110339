#!/usr/bin/env python3
"""
Grant Portfolio Hub CLI — Portfolio summaries, Excel reports, and API server.

USAGE:
  python -m granthub.cli summary                                 # Whole portfolio
  python -m granthub.cli summary --year 2021 --year 2022         # Selected years
  python -m granthub.cli summary --source "Dossier A.pdf" --search robotics
  python -m granthub.cli summary --data ./grants.csv             # Local CSV instead of the sheet

  python -m granthub.cli report                                  # Excel report
  python -m granthub.cli report --output ./Portfolio.xlsx --year 2021

  python -m granthub.cli serve                                   # Start API server
  python -m granthub.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

from granthub.config import DATA_SOURCE, REPORTS_FOLDER
from granthub.data.format import format_currency, format_number, format_ratio
from granthub.data.schemas import GrantFilter
from granthub.data.store import GrantStore


def _build_filter(args) -> GrantFilter:
    """Build a GrantFilter from CLI args."""
    return GrantFilter.build(
        years=getattr(args, "year", None),
        sources=getattr(args, "source", None),
        search=getattr(args, "search", None),
    )


def _load_store(args) -> GrantStore:
    store = GrantStore(args.data).load()
    if store.error:
        print(f"\n  ERROR: {store.error}\n")
        sys.exit(1)
    return store


def cmd_summary(args):
    """Print portfolio metrics and groupings."""
    print("\n" + "=" * 70)
    print("  GRANT PORTFOLIO HUB — SUMMARY")
    print("=" * 70)

    store = _load_store(args)
    grant_filter = _build_filter(args)
    view = store.view(grant_filter)
    m = view.metrics
    agg = view.aggregations

    print(f"\n  Selection: {grant_filter.label}")
    print(f"\n  Total awarded:      {format_currency(m.total_awarded):>16}")
    print(f"  Funding requested:  {format_currency(m.total_requested):>16}")
    print(f"  Grant records:      {format_number(m.total_grants):>16}")
    print(f"  Schools & partners: {format_number(m.total_schools):>16}")
    print(f"  Source files:       {format_number(m.total_sources):>16}")
    print(f"  Average grant:      {format_currency(m.average_grant):>16}")
    print(f"  Awarded/requested:  {format_ratio(m.request_to_award_ratio):>16}")

    if agg.amount_by_year:
        print("\n  FUNDING BY YEAR")
        for y in agg.amount_by_year:
            print(f"    {y.year:<20}{format_currency(y.total_amount):>16}")

    if agg.amount_by_source:
        print(f"\n  TOP SOURCES ({len(agg.amount_by_source)})")
        for i, s in enumerate(agg.amount_by_source, 1):
            print(f"    {i:<4}{s.source[:40]:<42}{s.grants:>5}  {format_currency(s.total_amount):>14}")

    if agg.top_purposes:
        print("\n  TOP PURPOSES")
        for i, p in enumerate(agg.top_purposes[:args.top], 1):
            print(f"    {i:<4}{p.purpose[:40]:<42}{p.count:>5}  {format_currency(p.amount):>14}")

    if agg.top_schools:
        print("\n  TOP SCHOOLS")
        for i, s in enumerate(agg.top_schools[:args.top], 1):
            print(f"    {i:<4}{s.school[:40]:<42}{s.count:>5}  {format_currency(s.amount):>14}")

    print("=" * 70 + "\n")


def cmd_report(args):
    """Generate the Excel portfolio report."""
    from granthub.reports.portfolio_report import generate_excel

    print("\n" + "=" * 70)
    print("  GRANT PORTFOLIO HUB — EXCEL REPORT")
    print("=" * 70)
    print(f"  Started: {datetime.now():%Y-%m-%d %H:%M:%S}")

    store = _load_store(args)
    grant_filter = _build_filter(args)

    if args.output:
        out = Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out = REPORTS_FOLDER / f"Grant_Portfolio_{timestamp}.xlsx"

    path = generate_excel(store, out, grant_filter)
    print(f"\n  Selection: {grant_filter.label}")
    print(f"  Report saved to: {path}")
    print("=" * 70 + "\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    if args.data != DATA_SOURCE:
        os.environ["GRANTHUB_DATA_SOURCE"] = str(args.data)
    print(f"\nStarting Grant Portfolio Hub API on port {args.port}...")
    uvicorn.run("granthub.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--year", action="append", help="Year label to include (repeatable)")
    p.add_argument("--source", action="append", help="Source file to include (repeatable)")
    p.add_argument("--search", help="Case-insensitive text search")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Grant Portfolio Hub — grant portfolio normalization and insight",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data", default=DATA_SOURCE, help="CSV path or URL (default: GRANTHUB_DATA_SOURCE)")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # summary subcommand
    summary_parser = subparsers.add_parser("summary", help="Print portfolio summary")
    _add_filter_args(summary_parser)
    summary_parser.add_argument("--top", type=int, default=10, help="Rows per leaderboard (default 10)")
    summary_parser.set_defaults(func=cmd_summary)

    # report subcommand
    report_parser = subparsers.add_parser("report", help="Generate Excel portfolio report")
    _add_filter_args(report_parser)
    report_parser.add_argument("--output", help="Output .xlsx path")
    report_parser.set_defaults(func=cmd_report)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
