import datetime as dt

import pytest

from granthub.data.format import (
    coerce_year,
    extract_year,
    format_currency,
    format_date,
    format_number,
    format_ratio,
    parse_coordinate,
    parse_currency,
    parse_int_prefix,
    safe_string,
    try_create_date,
)


@pytest.mark.parametrize("raw, expected", [
    ("$12,345.67", 12345.67),
    ("12000", 12000.0),
    ("USD 1,500 approx.", 1500.0),
    ("-250", -250.0),
    ("", None),
    (None, None),
    ("N/A", None),
    ("1.2.3", None),
    ("--5", None),
])
def test_parse_currency(raw, expected):
    assert parse_currency(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("05", 2005),
    ("99", 1999),
    ("70", 1970),
    ("69", 2069),
    ("005", None),
    ("2024", 2024),
])
def test_coerce_year(raw, expected):
    assert coerce_year(raw) == expected


def test_try_create_date_rejects_impossible_dates():
    assert try_create_date(2, 29, 2020) == dt.date(2020, 2, 29)
    assert try_create_date(2, 30, 2020) is None
    assert try_create_date(13, 1, 2020) is None
    assert try_create_date(4, 31, 2021) is None


def test_format_date_single_token():
    assert format_date("3/15/2020") == "Mar 15, 2020"
    assert format_date("1/5/20") == "Jan 5, 2020"


def test_format_date_keeps_invalid_tokens():
    assert format_date("13/40/2020") == "13/40/2020"
    assert format_date("3/15/205") == "3/15/205"


def test_format_date_range_and_surrounding_text():
    assert format_date("1/5/19 - 6/30/20") == "Jan 5, 2019 - Jun 30, 2020"
    assert format_date(" Sent 3/15/2020 by mail ") == "Sent Mar 15, 2020 by mail"
    assert format_date("2/30/2020 to 3/1/2020") == "2/30/2020 to Mar 1, 2020"
    assert format_date("Spring semester") == "Spring semester"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_format_date_blank_is_placeholder(raw):
    assert format_date(raw) == "—"


@pytest.mark.parametrize("raw, expected", [
    ("Letter dated 5/1/2019", 2019),
    ("2021 grant cycle, letter 5/1/19", 2021),
    ("5/1/19", 2019),
    ("Received 12/31/99", 1999),
    ("5 Mar 99", 1999),
    ("March 2018", 2018),
    ("", None),
    (None, None),
    ("N/A", None),
    ("TBD", None),
    ("Pending", None),
])
def test_extract_year(raw, expected):
    assert extract_year(raw) == expected


def test_extract_year_ignores_text_without_a_year():
    # A bare day number would otherwise pick up the parser's default year
    assert extract_year("15") is None


def test_parse_int_prefix():
    assert parse_int_prefix("2019") == 2019
    assert parse_int_prefix(" 2019/20") == 2019
    assert parse_int_prefix("FY2019") is None
    assert parse_int_prefix("") is None
    assert parse_int_prefix("1" * 5000) is None


def test_parse_coordinate():
    assert parse_coordinate("40.7128") == 40.7128
    assert parse_coordinate(" -74.006 ") == -74.006
    assert parse_coordinate("inf") is None
    assert parse_coordinate("nan") is None
    assert parse_coordinate("north") is None
    assert parse_coordinate(None) is None


def test_safe_string():
    assert safe_string("  x ") == "x"
    assert safe_string(None) == ""
    assert safe_string("") == ""


def test_display_formatters():
    assert format_currency(12345.67) == "$12,346"
    assert format_currency(-50) == "-$50"
    assert format_currency(None) == "—"
    assert format_number(1234) == "1,234"
    assert format_number(None) == "—"
    assert format_ratio(0.5) == "50.0%"
    assert format_ratio(None) == "—"
