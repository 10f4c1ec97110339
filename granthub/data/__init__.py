"""Grant data loading, normalization, and in-memory store."""
from .loader import fetch_rows
from .store import GrantStore
from .schemas import GrantFilter, GrantRecord, GrantMetrics, Aggregations
from .normalize import normalize_record, normalize_batch, build_batch, GrantDataError
