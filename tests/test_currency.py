"""
Tests for Currency Units and Money

Covers display formatting, the truncating float constructor and the
unit-mixing guards.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from decimal import Decimal

from core.currency import (
    CurrencyMismatchError,
    EUR,
    Money,
    OtherCurrency,
    USD,
    parse_currency_code,
    unit_for_code,
)


@pytest.mark.parametrize("unit, raw, expected", [
    (EUR, 12345, "€ 123.45"),
    (USD, 10000, "$ 100.00"),
    (EUR, 5, "€ 0.05"),
    (EUR, 0, "€ 0.00"),
    (USD, -105, "$ -1.05"),
])
def test_display(unit, raw, expected):
    assert Money.from_raw_amount(raw, unit).display() == expected
    assert str(Money.from_raw_amount(raw, unit)) == expected


def test_from_float_amount():
    assert Money.from_amount(123.45, EUR).display() == "€ 123.45"
    assert Money.from_amount(100.00, USD).display() == "$ 100.00"


def test_from_int_amount_is_exact():
    amount = Money.from_amount(100, USD)
    assert amount.raw_amount == 10000
    assert amount.display() == "$ 100.00"


def test_from_float_truncates_toward_zero():
    """0.29 * 100 is 28.999999999999996 in floating point; cents are truncated, not rounded."""
    assert Money.from_amount(0.29, EUR).raw_amount == 28
    assert Money.from_amount(-0.29, EUR).raw_amount == -28
    assert Money.from_amount(1.999, EUR).raw_amount == 199


def test_bool_is_not_an_amount():
    with pytest.raises(TypeError):
        Money.from_amount(True, EUR)


def test_raw_amount_must_be_integer():
    with pytest.raises(TypeError):
        Money(12.5, EUR)


def test_same_unit_arithmetic():
    a = Money.from_amount(10, EUR)
    b = Money.from_amount(2.5, EUR)

    assert (a + b).raw_amount == 1250
    assert (a - b).raw_amount == 750
    assert (-a).raw_amount == -1000
    assert b < a
    assert a >= b
    assert a == Money.from_raw_amount(1000, EUR)


def test_mixing_units_raises():
    eur = Money.from_amount(10, EUR)
    usd = Money.from_amount(10, USD)

    with pytest.raises(CurrencyMismatchError):
        eur + usd
    with pytest.raises(CurrencyMismatchError):
        eur - usd
    with pytest.raises(CurrencyMismatchError):
        eur < usd


def test_different_units_are_never_equal():
    assert Money.from_amount(10, EUR) != Money.from_amount(10, USD)


def test_to_decimal():
    assert Money.from_raw_amount(12345, EUR).to_decimal() == Decimal("123.45")
    assert str(Money.from_raw_amount(8000, EUR).to_decimal()) == "80.00"
    assert str(Money.from_raw_amount(-7, USD).to_decimal()) == "-0.07"


def test_parse_display():
    assert Money.parse_display("€ 123.45", EUR) == Money.from_raw_amount(12345, EUR)
    assert Money.parse_display("$ -1.05", USD).raw_amount == -105

    with pytest.raises(ValueError):
        Money.parse_display("$ 1.00", EUR)
    with pytest.raises(ValueError):
        Money.parse_display("€ 1.005", EUR)


def test_currency_units_are_tags():
    with pytest.raises(TypeError):
        EUR()
    assert EUR.scale == 100
    assert USD.scale == 100


class TestCurrencyCodes:
    def test_known_codes(self):
        assert parse_currency_code("USD") is USD
        assert parse_currency_code("EUR") is EUR

    def test_unknown_code_is_kept(self):
        currency = parse_currency_code("GBP")
        assert currency == OtherCurrency("GBP")
        assert currency.code == "GBP"
        assert str(currency) == "GBP"

    def test_match_is_exact(self):
        assert parse_currency_code("usd") == OtherCurrency("usd")

    def test_unit_for_code_is_strict(self):
        assert unit_for_code("usd") is USD
        with pytest.raises(ValueError, match="Unsupported currency"):
            unit_for_code("GBP")
