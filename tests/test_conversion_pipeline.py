"""
Tests for the Transaction Conversion Pipeline

Verifies that every input row produces exactly one output row, in input
order, and that missing rates are reported per row instead of failing the
batch.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import pytest
from datetime import date

import pandas as pd

from core.currency import EUR, Money, USD
from core.exchange_rate import ExchangeRate
from core.transaction import Transaction
from lib.report_writer import conversion_rows_to_frame, write_conversion_rows
from modules.conversion.daily_rates import DailyExchangeRates, MissingExchangeRateError
from modules.conversion.pipeline import (
    ConversionSummary,
    OutputRow,
    convert_transaction,
    convert_transactions,
)

D1 = date(2021, 1, 1)
D2 = date(2021, 1, 2)
D3 = date(2021, 1, 3)


@pytest.fixture
def rates():
    return DailyExchangeRates(
        {D1: ExchangeRate.new(0.8, EUR, USD), D2: ExchangeRate.new(0.9, EUR, USD)},
        EUR,
        USD,
    )


@pytest.fixture
def transactions():
    return [Transaction(day, Money.from_amount(100, USD)) for day in (D1, D2, D3)]


def test_one_row_per_transaction_in_order(rates, transactions):
    rows = convert_transactions(transactions, rates)

    assert len(rows) == 3
    assert [row.date for row in rows] == [D1, D2, D3]
    assert [row.from_amount for row in rows] == [Money.from_amount(100, USD)] * 3


def test_successful_rows(rates, transactions):
    rows = convert_transactions(transactions, rates)

    assert rows[0].succeeded
    assert rows[0].to_amount.display() == "€ 80.00"
    assert rows[0].exchange_rate == ExchangeRate.new(0.8, EUR, USD)
    assert rows[0].error is None

    assert rows[1].succeeded
    assert rows[1].to_amount.display() == "€ 90.00"
    assert rows[1].exchange_rate == ExchangeRate.new(0.9, EUR, USD)


def test_missing_rate_is_reported_on_the_row(rates, transactions):
    rows = convert_transactions(transactions, rates)

    assert not rows[2].succeeded
    assert rows[2].to_amount is None
    assert rows[2].exchange_rate is None
    assert isinstance(rows[2].error, MissingExchangeRateError)


def test_failures_do_not_stop_later_rows(rates):
    transactions = [
        Transaction(D3, Money.from_amount(1, USD)),
        Transaction(D1, Money.from_amount(1, USD)),
        Transaction(D3, Money.from_amount(2, USD)),
        Transaction(D2, Money.from_amount(2, USD)),
    ]

    rows = convert_transactions(transactions, rates)

    assert [row.succeeded for row in rows] == [False, True, False, True]
    assert [row.to_amount.raw_amount for row in rows if row.succeeded] == [80, 180]


def test_summary(rates, transactions):
    summary = ConversionSummary()
    convert_transactions(transactions, rates, summary)

    assert summary.total == 3
    assert summary.converted == 2
    assert summary.failed == 1
    assert summary.failed_dates == [D3]
    assert str(summary) == "2/3 transactions converted, 1 failed"


def test_empty_input(rates):
    assert convert_transactions([], rates) == []


def test_output_row_checks_dates():
    source = Transaction(D1, Money.from_amount(1, USD))
    moved = Transaction(D2, Money.from_amount(1, EUR))

    with pytest.raises(AssertionError):
        OutputRow.from_transactions(source, ExchangeRate.new(1.0, EUR, USD), moved)


def test_convert_transaction(rates):
    row = convert_transaction(Transaction(D2, Money.from_amount(10.5, USD)), rates)
    assert row.to_amount == Money.from_raw_amount(945, EUR)


class TestConversionWriter:
    def test_frame(self, rates, transactions):
        df = conversion_rows_to_frame(convert_transactions(transactions, rates))

        assert list(df.columns) == ["date", "from_amount", "exchange_rate", "to_amount", "error"]
        assert df["date"].tolist() == ["2021-01-01", "2021-01-02", "2021-01-03"]
        assert [str(v) for v in df["from_amount"]] == ["100.00", "100.00", "100.00"]
        assert [str(v) for v in df["to_amount"][:2]] == ["80.00", "90.00"]
        assert df["error"].iloc[2] == "Missing exchange rate"

    def test_write_csv(self, rates, transactions, tmp_path):
        output = tmp_path / "converted.csv"
        write_conversion_rows(convert_transactions(transactions, rates), output)

        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "date,from_amount,exchange_rate,to_amount,error"
        assert lines[1] == "2021-01-01,100.00,0.8,80.00,"
        assert lines[2] == "2021-01-02,100.00,0.9,90.00,"
        assert lines[3] == "2021-01-03,100.00,,,Missing exchange rate"

        df = pd.read_csv(output)
        assert len(df) == 3
