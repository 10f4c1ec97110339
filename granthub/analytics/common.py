"""
Safe math and grouping helpers shared by the analytics modules.
"""
from __future__ import annotations

from functools import cmp_to_key

from granthub.data.format import parse_int_prefix


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero."""
    if not denominator:
        return default
    return numerator / denominator


def compare_year_labels(a: str, b: str) -> int:
    """Numeric years ascending, non-numeric labels after them, then lexicographic."""
    a_year = parse_int_prefix(a)
    b_year = parse_int_prefix(b)
    if a_year is None and b_year is None:
        return (a > b) - (a < b)
    if a_year is None:
        return 1
    if b_year is None:
        return -1
    return a_year - b_year


year_label_key = cmp_to_key(compare_year_labels)


def compare_year_labels_desc(a: str, b: str) -> int:
    """Numeric years newest first; non-numeric labels still last, A-Z."""
    a_year = parse_int_prefix(a)
    b_year = parse_int_prefix(b)
    if a_year is None or b_year is None:
        return compare_year_labels(a, b)
    return b_year - a_year


year_option_key = cmp_to_key(compare_year_labels_desc)
