"""
Utility modules for the sensor readings API.
"""

from sensor_api.utils.validation import (
    DEFAULT_PAGE,
    DEFAULT_LIMIT,
    parse_positive_int,
    pagination_window,
    parse_optional_date,
)

__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_LIMIT",
    "parse_positive_int",
    "pagination_window",
    "parse_optional_date",
]
