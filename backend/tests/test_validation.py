from datetime import date

import pytest

from sensor_api.utils import pagination_window, parse_optional_date, parse_positive_int
from sensor_api.utils.validation import MAX_BIGINT


@pytest.mark.parametrize("raw, expected", [
    (None, 7),
    ("", 7),
    ("abc", 7),
    ("0", 7),
    ("-1", 7),
    ("1", 1),
    (" 42 ", 42),
    ("+5", 5),
    # leading digits win, the rest is ignored
    ("2.5", 2),
    ("10abc", 10),
    ("1_000", 1),
])
def test_parse_positive_int(raw, expected):
    assert parse_positive_int(raw, 7) == expected


@pytest.mark.parametrize("raw", [str(10 ** 19), str(MAX_BIGINT + 1)])
def test_parse_positive_int_beyond_bigint_uses_default(raw):
    assert parse_positive_int(raw, 7) == 7


def test_parse_positive_int_accepts_bigint_max():
    assert parse_positive_int(str(MAX_BIGINT), 7) == MAX_BIGINT


def test_pagination_defaults():
    assert pagination_window(None, None) == (100, 0)


@pytest.mark.parametrize("page, limit", [(1, 1), (1, 10), (2, 10), (5, 33)])
def test_offset_formula(page, limit):
    assert pagination_window(str(page), str(limit)) == (limit, (page - 1) * limit)


def test_offset_past_bigint_falls_back_to_first_page():
    page_size, offset = pagination_window(str(2 ** 40), str(2 ** 40))
    assert page_size == 2 ** 40
    assert offset == 0


def test_parse_optional_date():
    assert parse_optional_date(None) is None
    assert parse_optional_date("") is None
    assert parse_optional_date("  ") is None
    assert parse_optional_date("2024-01-01") == date(2024, 1, 1)
    with pytest.raises(ValueError):
        parse_optional_date("2024-13-45")
