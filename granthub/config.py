"""
Grant Portfolio Hub — Configuration: data source, schema keys, fallback constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Data source, override with GRANTHUB_DATA_SOURCE env var (path or URL)
# ---------------------------------------------------------------------------
DEFAULT_DATA_URL = (
    "https://docs.google.com/spreadsheets/d/e/2PACX-1vSNjJoTuW3uSqBFYHZ2KpKXduY4NDE7f6E2ZG9Ix-0yHV49P4S-3WEvJRABVVw_og1CZP3xxkjZkyDD"
    "/pub?gid=722552634&single=true&output=csv"
)
DATA_SOURCE = os.environ.get("GRANTHUB_DATA_SOURCE", DEFAULT_DATA_URL)

_reports_dir = Path(os.environ.get("GRANTHUB_REPORTS_DIR", str(Path.home() / "Desktop" / "Grant Reports")))
REPORTS_FOLDER = _reports_dir

# ---------------------------------------------------------------------------
# Canonical columns as they appear in the dossier exports.
# Keys are matched exactly: "Date of Letter " keeps its trailing space.
# ---------------------------------------------------------------------------
SOURCE_FILE = "Source_File"
SCHOOL = "School"
GRANT_ID = "Grant ID"
TITLE = "Title of Project"
DATE_OF_LETTER = "Date of Letter "
DATE_RANGE = "Date range of grant"
DATE_OF_APPLICATION = "Date of application"
YEAR = "Year"
AMOUNT = "Amount"
AMOUNT_REQUESTED = "Amount Requested"
FULL_AMOUNT_DISBURSED = "Full grant amount disbursed"
PURPOSE = "Purpose of Grant"

IMPORTANT_FIELDS = (
    SOURCE_FILE,
    SCHOOL,
    GRANT_ID,
    TITLE,
    DATE_OF_LETTER,
    DATE_RANGE,
    DATE_OF_APPLICATION,
    YEAR,
    AMOUNT,
    AMOUNT_REQUESTED,
    FULL_AMOUNT_DISBURSED,
    PURPOSE,
)
IMPORTANT_FIELD_SET = frozenset(IMPORTANT_FIELDS)

# Consumed by the map view, not part of the canonical schema
LATITUDE = "Latitude"
LONGITUDE = "Longitude"

# ---------------------------------------------------------------------------
# Fallbacks and display placeholders
# ---------------------------------------------------------------------------
UNSPECIFIED = "Unspecified"
UNTITLED_PROJECT = "Untitled Project"
RECORD_ID_PREFIX = "record"
EMPTY_PLACEHOLDER = "—"

# ---------------------------------------------------------------------------
# Aggregation limits
# ---------------------------------------------------------------------------
TOP_SOURCES_LIMIT = 12
