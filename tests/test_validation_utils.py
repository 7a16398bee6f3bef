from datetime import date, datetime
from decimal import Decimal

import pytest

from utils.time_utils import format_date, to_date, to_datetime
from utils.validation_utils import (
    format_money,
    match_category,
    normalize_phone_number,
    parse_amount,
    validate_phone_number,
)


@pytest.mark.parametrize("raw, expected", [
    ("15551230000", "+15551230000"),
    ("+15551230000", "+15551230000"),
    ("whatsapp:+15551230000", "+15551230000"),
    (" 1 555 123-0000 ", "+15551230000"),
])
def test_normalize_phone_number(raw, expected):
    assert normalize_phone_number(raw) == expected
    assert validate_phone_number(normalize_phone_number(raw))


@pytest.mark.parametrize("value, expected", [
    (250, Decimal("250")),
    ("12.50", Decimal("12.50")),
    ("1,200", Decimal("1200")),
    (0, None),
    (-3, None),
    ("abc", None),
    (True, None),
    (None, None),
    ("NaN", None),
])
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


def test_format_money_drops_trailing_zeros():
    assert format_money("USD", Decimal("250.00")) == "USD 250"
    assert format_money("INR", Decimal("12.50")) == "INR 12.5"


def test_match_category_is_case_insensitive_and_closed():
    assert match_category("emi") == "EMI"
    assert match_category(" food ") == "Food"
    assert match_category("Groceries") is None


def test_date_helpers():
    assert to_date("2024-05-01T10:00:00Z") == date(2024, 5, 1)
    assert to_date(datetime(2024, 5, 1, 9)) == date(2024, 5, 1)
    assert to_datetime(date(2024, 5, 1)) == datetime(2024, 5, 1)
    assert format_date(date(2024, 5, 1)) == "2024-05-01"
