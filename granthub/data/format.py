"""
Field coercion helpers: currency strings, ambiguous years, free-text dates.

Every function here is total. Malformed input degrades to None (or, for
display helpers, to the original text / an em-dash) instead of raising.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Optional

from dateutil import parser as dateparser

from granthub.config import EMPTY_PLACEHOLDER


_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)", re.ASCII)
# Longer digit runs cannot be a year
_MAX_INT_DIGITS = 18
_FOUR_DIGIT_YEAR_RE = re.compile(r"(?:19|20)\d{2}", re.ASCII)
_DATE_TOKEN_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{2,4})", re.ASCII)

# Two defaults that differ in year: a parse that lands on both years took the
# year from its defaults, not from the text.
_PARSE_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 1, 1))


# ---------------------------------------------------------------------------
# Strings & numbers
# ---------------------------------------------------------------------------

def safe_string(value) -> str:
    """Trim a raw cell value; None and empty values become ""."""
    if not value:
        return ""
    return str(value).strip()


def parse_currency(value: str | None) -> Optional[float]:
    """Parse a free-text currency amount.

    Everything except digits, "." and "-" is dropped first, so "$12,345.67"
    becomes 12345.67 and "N/A" becomes None. Leftovers that are not a valid
    number ("1.2.3", "--5") also give None.
    """
    if not value:
        return None
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_int_prefix(value: str | None) -> Optional[int]:
    """Leading integer of a string ("2019/20" -> 2019), or None."""
    if not value:
        return None
    m = _INT_PREFIX_RE.match(str(value))
    if not m:
        return None
    digits = m.group(1)
    if len(digits.lstrip("+-")) > _MAX_INT_DIGITS:
        return None
    return int(digits)


def parse_coordinate(value: str | None) -> Optional[float]:
    """Finite float or None."""
    if not value:
        return None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


# ---------------------------------------------------------------------------
# Years & dates
# ---------------------------------------------------------------------------

def coerce_year(raw_year: str) -> Optional[int]:
    """Expand a 2-digit year (70-99 -> 19xx, else 20xx); 3 digits are invalid."""
    if not raw_year or not raw_year.isdigit():
        return None
    numeric = int(raw_year)
    if len(raw_year) == 2:
        return 1900 + numeric if numeric >= 70 else 2000 + numeric
    if len(raw_year) == 3:
        return None
    return numeric


def try_create_date(month: int, day: int, year: int) -> Optional[dt.date]:
    """Build a calendar date, or None for impossible ones (month 13, Feb 30)."""
    try:
        return dt.date(year, month, day)
    except (ValueError, OverflowError):
        return None


def _date_from_token(month_str: str, day_str: str, year_str: str) -> Optional[dt.date]:
    year = coerce_year(year_str)
    if not year:
        return None
    return try_create_date(int(month_str), int(day_str), year)


def _parse_free_text_year(text: str) -> Optional[int]:
    years = set()
    for default in _PARSE_DEFAULTS:
        try:
            parsed = dateparser.parse(text, default=default)
        except (ValueError, OverflowError, TypeError):
            return None
        years.add(parsed.year)
    if len(years) != 1:
        return None
    return years.pop()


def extract_year(value: str | None) -> Optional[int]:
    """Find the calendar year mentioned in a free-text date field.

    Order of preference:
      1. an explicit 19xx / 20xx token ("2021 grant cycle" -> 2021)
      2. the first M/D/YY or M/D/YYYY token that is a real date
      3. a generic date parse of the whole text
    """
    text = safe_string(value)
    if not text:
        return None

    m = _FOUR_DIGIT_YEAR_RE.search(text)
    if m:
        return int(m.group(0))

    m = _DATE_TOKEN_RE.search(text)
    if m:
        date = _date_from_token(*m.groups())
        if date:
            return date.year

    return _parse_free_text_year(text)


def _format_date_token(match: re.Match) -> str:
    date = _date_from_token(*match.groups())
    if date is None:
        return match.group(0)
    return f"{date:%b} {date.day}, {date.year}"


def format_date(value: str | None) -> str:
    """Rewrite each valid M/D/YY[YY] token as "Mar 15, 2020".

    Invalid tokens and the text around them are kept verbatim, so a range
    like "1/5/2019 - 6/30/2020" formats both ends.
    """
    text = safe_string(value)
    if not text:
        return EMPTY_PLACEHOLDER
    return _DATE_TOKEN_RE.sub(_format_date_token, text) or EMPTY_PLACEHOLDER


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def format_currency(value: float | None, decimals: int = 0) -> str:
    """US-dollar display: 12345.67 -> "$12,346"."""
    if value is None or math.isnan(value):
        return EMPTY_PLACEHOLDER
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_number(value: float | None) -> str:
    if value is None or math.isnan(value):
        return EMPTY_PLACEHOLDER
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def format_ratio(value: float | None) -> str:
    """Request-to-award ratio as a percentage, "—" when undefined."""
    if value is None:
        return EMPTY_PLACEHOLDER
    return f"{value * 100:.1f}%"
