"""Tests for validation utilities."""
from datetime import timedelta
from decimal import Decimal

import pytest

from hostd_pin.utils.validation import (
    parse_decimal,
    parse_duration,
    validate_currency_code,
    validate_threshold,
)
from hostd_pin.utils.errors import ValidationError


def test_validate_currency_code_normalizes():
    """Test currency codes are lowercased."""
    assert validate_currency_code("USD") == "usd"
    assert validate_currency_code(" eur ") == "eur"


def test_validate_currency_code_invalid():
    with pytest.raises(ValidationError):
        validate_currency_code("")
    with pytest.raises(ValidationError):
        validate_currency_code("u$d")
    with pytest.raises(ValidationError):
        validate_currency_code(5)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("5m", timedelta(minutes=5)),
        ("48h", timedelta(hours=48)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("90s", timedelta(seconds=90)),
        ("1.5h", timedelta(minutes=90)),
        ("500ms", timedelta(milliseconds=500)),
        ("300", timedelta(minutes=5)),
        (300, timedelta(minutes=5)),
        (timedelta(hours=1), timedelta(hours=1)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "5 minutes", "m5", "5x", "-5m", 0, -1, True, None])
def test_parse_duration_invalid(value):
    with pytest.raises(ValidationError):
        parse_duration(value)


def test_parse_decimal_avoids_float_noise():
    assert parse_decimal(0.1, "price") == Decimal("0.1")


def test_parse_decimal_invalid():
    with pytest.raises(ValidationError):
        parse_decimal("abc", "price")
    with pytest.raises(ValidationError):
        parse_decimal(-1, "price")
    with pytest.raises(ValidationError):
        parse_decimal("Infinity", "price")


def test_validate_threshold_range():
    assert validate_threshold(0) == Decimal("0")
    assert validate_threshold("0.25") == Decimal("0.25")
    with pytest.raises(ValidationError):
        validate_threshold(1.5)
