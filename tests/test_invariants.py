"""
Property-Based Tests - The Hypothesis

Uses hypothesis library for property-based testing to verify money invariants.

Invariants:
1. Displayed amounts re-parse to the exact minor-unit count
2. Converting with a rate and then its inverse lands within one minor unit
3. Float construction never rounds up: it truncates toward zero
4. Conversion output has one row per input row, in input order

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import pytest
from hypothesis import given, strategies as st, settings
from datetime import date, timedelta
from decimal import Decimal

from core.currency import EUR, Money, USD
from core.exchange_rate import ExchangeRate
from core.transaction import Transaction
from modules.conversion.daily_rates import DailyExchangeRates
from modules.conversion.pipeline import convert_transactions


# Minor-unit amounts well inside the range floats represent exactly
raw_amount_strategy = st.integers(min_value=-10**12, max_value=10**12)

unit_strategy = st.sampled_from([EUR, USD])

# Rates below ~0.5 lose more than a minor unit on the way back by construction
rate_strategy = st.floats(min_value=0.6, max_value=100.0, allow_nan=False, allow_infinity=False)

date_strategy = st.dates(
    min_value=date(2020, 1, 1),
    max_value=date(2024, 12, 31)
)


@given(raw=raw_amount_strategy, unit=unit_strategy)
@settings(max_examples=200)
def test_invariant_display_round_trip(raw, unit):
    """
    Invariant 1: display() is lossless

    Parsing the displayed decimal back through the unit's scale gives the
    exact integer that was stored.
    """
    money = Money.from_raw_amount(raw, unit)
    text = money.display()

    assert Money.parse_display(text, unit).raw_amount == raw

    major = Decimal(text.split(" ", 1)[1])
    assert major * unit.scale == raw


@given(raw=st.integers(min_value=-10**9, max_value=10**9), rate=rate_strategy)
@settings(max_examples=200)
def test_invariant_inverse_rate_round_trip(raw, rate):
    """
    Invariant 2: rate.invert().convert(rate.convert(m)) == m within ±1 minor unit
    """
    exchange_rate = ExchangeRate.new(rate, EUR, USD)
    original = Money.from_raw_amount(raw, USD)

    back = exchange_rate.invert().convert(exchange_rate.convert(original))

    assert back.unit is USD
    assert abs(back.raw_amount - raw) <= 1


@given(amount=st.floats(min_value=-1e9, max_value=1e9, allow_nan=False, allow_infinity=False))
@settings(max_examples=200)
def test_invariant_float_construction_truncates(amount):
    """
    Invariant 3: |stored cents| never exceeds |amount * 100|
    """
    money = Money.from_amount(amount, EUR)
    scaled = amount * EUR.scale

    assert abs(money.raw_amount) <= abs(scaled)
    assert abs(scaled - money.raw_amount) < 1


@given(
    days=st.lists(date_strategy, min_size=0, max_size=30),
    rate_days=st.sets(date_strategy, max_size=30),
)
@settings(max_examples=50, deadline=None)
def test_invariant_one_output_row_per_input(days, rate_days):
    """
    Invariant 4: the pipeline never drops, adds or reorders rows

    Rows fail exactly when their date has no rate.
    """
    rates = DailyExchangeRates(
        {day: ExchangeRate.new(0.9, EUR, USD) for day in rate_days},
        EUR,
        USD,
    )
    transactions = [
        Transaction(day, Money.from_raw_amount(i * 100, USD))
        for i, day in enumerate(days)
    ]

    rows = convert_transactions(transactions, rates)

    assert len(rows) == len(transactions)
    assert [row.date for row in rows] == days
    assert [row.from_amount for row in rows] == [t.amount for t in transactions]
    assert [row.succeeded for row in rows] == [day in rate_days for day in days]


def test_invariant_missing_dates_are_not_filled():
    """A rate on the previous day is never used for the next one."""
    day = date(2024, 1, 1)
    rates = DailyExchangeRates({day: ExchangeRate.new(0.9, EUR, USD)}, EUR, USD)

    rows = convert_transactions(
        [Transaction(day + timedelta(days=1), Money.from_amount(1, USD))], rates
    )

    assert not rows[0].succeeded


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
