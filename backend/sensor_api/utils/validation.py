"""
Input Validation Utilities
===========================

Parsing helpers for query parameters.

Author: Sensor Readings API Team
"""

import re
from datetime import date
from typing import Optional


DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100

# PostgreSQL LIMIT/OFFSET are bigint
MAX_BIGINT = 2 ** 63 - 1

LEADING_DIGITS = re.compile(r"\s*\+?([0-9]+)")


def parse_positive_int(value: Optional[str], default: int) -> int:
    """
    Best-effort parse of a positive integer query parameter.

    Reads the leading digits, like JavaScript's parseInt: "10abc" is 10,
    "2.5" is 2, "1_000" is 1. Anything that doesn't give a whole number
    between 1 and the bigint maximum (missing, empty, "abc", "0", "-3",
    "99999999999999999999") gives back the default instead of an error.

    Args:
        value: Raw query string value (or None if absent)
        default: Value to use when parsing fails

    Returns:
        The parsed integer, or default
    """
    if value is None:
        return default
    match = LEADING_DIGITS.match(value)
    if not match:
        return default
    number = int(match.group(1))
    return number if 1 <= number <= MAX_BIGINT else default


def pagination_window(page: Optional[str], limit: Optional[str]) -> tuple[int, int]:
    """
    Turn raw page/limit query values into a (limit, offset) pair.

    Args:
        page: Raw page number (1-based), default 1
        limit: Raw page size, default 100

    Returns:
        (limit, offset) where offset = (page - 1) * limit. A page so far
        out that the offset won't fit in a bigint falls back to page 1.
    """
    page_number = parse_positive_int(page, DEFAULT_PAGE)
    page_size = parse_positive_int(limit, DEFAULT_LIMIT)
    offset = (page_number - 1) * page_size
    if offset > MAX_BIGINT:
        offset = (DEFAULT_PAGE - 1) * page_size
    return page_size, offset


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional YYYY-MM-DD date.

    Args:
        value: Date string; None or blank means "no date"

    Returns:
        The date, or None if no date was given

    Raises:
        ValueError: If a value was given but isn't a valid date
    """
    if value is None or not value.strip():
        return None
    return date.fromisoformat(value.strip())
