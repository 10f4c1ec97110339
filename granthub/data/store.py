"""
GrantStore — In-memory grant batch with baseline and filtered portfolio views.

Loaded at startup, refreshed on demand, queried on every request. Every
refresh recomputes the batch from scratch; nothing is persisted.
"""
from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Optional

from granthub.config import DATA_SOURCE
from granthub.analytics.aggregations import compute_aggregations, compute_locations
from granthub.analytics.filters import filter_records, source_options, year_options
from granthub.analytics.metrics import compute_metrics
from granthub.data.loader import fetch_rows
from granthub.data.normalize import GrantDataError, build_batch
from granthub.data.schemas import GrantFilter, GrantRecord, LocationStat, PortfolioView

# Filtered views kept per batch; least recently used are evicted first
MAX_CACHED_VIEWS = 128


class GrantStore:
    """Current grant batch plus memoized filtered views."""

    def __init__(self, source=DATA_SOURCE) -> None:
        self.source = source
        self.records: list[GrantRecord] = []
        self.error: Optional[str] = None
        self._baseline: PortfolioView = self._make_view(self.records, filtered=False)
        self._views: OrderedDict[tuple, PortfolioView] = OrderedDict()
        self._lock = threading.Lock()
        self._generation = 0
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def begin_refresh(self) -> int:
        """Start a refresh; returns the token its completion must present."""
        with self._lock:
            self._generation += 1
            return self._generation

    def complete_refresh(self, token: int, rows, errors=()) -> bool:
        """Install a fetched batch unless a newer refresh has started since.

        Returns False when the completion was superseded and discarded.
        """
        try:
            records = build_batch(rows, errors)
            error = None
        except GrantDataError as exc:
            records, error = [], str(exc)

        with self._lock:
            if token != self._generation:
                print(f"  Discarding stale refresh #{token} (latest is #{self._generation})")
                return False
            self.records = records
            self.error = error
            self._baseline = self._make_view(records, filtered=False)
            self._views = OrderedDict()
            self._loaded = True

        if error:
            print(f"  Grant data unavailable: {error}")
        else:
            print(f"  {len(records):,} grant records ready")
        return True

    def load(self, source=None) -> "GrantStore":
        """Fetch the CSV and rebuild everything."""
        token = self.begin_refresh()
        rows, errors = fetch_rows(source if source is not None else self.source)
        self.complete_refresh(token, rows, errors)
        return self

    def load_rows(self, rows, errors=()) -> "GrantStore":
        """Rebuild from rows that were already fetched."""
        self.complete_refresh(self.begin_refresh(), rows, errors)
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @staticmethod
    def _make_view(records, filtered: bool) -> PortfolioView:
        return PortfolioView(
            records=records,
            metrics=compute_metrics(records),
            aggregations=compute_aggregations(records),
            filtered=filtered,
        )

    @property
    def baseline(self) -> PortfolioView:
        return self._baseline

    def view(self, grant_filter: GrantFilter | None = None) -> PortfolioView:
        """Portfolio view for a filter; the baseline when no filter is active."""
        baseline = self._baseline
        if grant_filter is None or not grant_filter.is_active:
            return baseline

        key = grant_filter.key
        with self._lock:
            cached = self._views.get(key)
            if cached is not None and baseline is self._baseline:
                self._views.move_to_end(key)
                return cached

        subset = filter_records(baseline.records, grant_filter.years, grant_filter.sources, grant_filter.search)
        view = self._make_view(subset, filtered=True)
        with self._lock:
            # Only cache against the batch the view was computed from
            if baseline is self._baseline:
                self._views[key] = view
                while len(self._views) > MAX_CACHED_VIEWS:
                    self._views.popitem(last=False)
        return view

    def locations(self, grant_filter: GrantFilter | None = None) -> list[LocationStat]:
        return compute_locations(self.view(grant_filter).records)

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def years(self) -> list[str]:
        return year_options(self.records)

    def sources(self) -> list[str]:
        return source_options(self.records)

    def row_count(self) -> int:
        return len(self.records)
