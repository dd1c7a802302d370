"""
Transaction Conversion Pipeline

Converts a batch of source-currency transactions against a DailyExchangeRates
table. Every input row yields exactly one OutputRow, in input order; a row
whose date has no rate carries the ConversionError instead of aborting the
batch.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Generic, Iterable, List, Optional, TypeVar

from core.currency import CurrencyUnit, Money
from core.exchange_rate import ExchangeRate
from core.transaction import Transaction
from modules.conversion.daily_rates import ConversionError, DailyExchangeRates
from utils.logging_config import setup_logger

logger = setup_logger(__name__)

N = TypeVar("N", bound=CurrencyUnit)
D = TypeVar("D", bound=CurrencyUnit)


@dataclass(frozen=True)
class OutputRow(Generic[N, D]):
    """
    Result of converting one transaction.

    Exactly one of to_amount / error is set.
    """

    date: date
    from_amount: Money[D]
    exchange_rate: Optional[ExchangeRate[N, D]]
    to_amount: Optional[Money[N]] = None
    error: Optional[ConversionError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def from_transactions(
        cls,
        from_transaction: Transaction[D],
        rate: Optional[ExchangeRate[N, D]],
        to_transaction: Optional[Transaction[N]] = None,
        error: Optional[ConversionError] = None,
    ) -> "OutputRow[N, D]":
        if to_transaction is not None:
            assert to_transaction.date == from_transaction.date, (
                f"Converted transaction moved from {from_transaction.date} to {to_transaction.date}"
            )

        return cls(
            date=from_transaction.date,
            from_amount=from_transaction.amount,
            exchange_rate=rate,
            to_amount=to_transaction.amount if to_transaction is not None else None,
            error=error,
        )


@dataclass
class ConversionSummary:
    """Row counts for one conversion run."""

    total: int = 0
    converted: int = 0
    failed: int = 0
    failed_dates: List[date] = field(default_factory=list)

    def record(self, row: OutputRow) -> None:
        self.total += 1
        if row.succeeded:
            self.converted += 1
        else:
            self.failed += 1
            self.failed_dates.append(row.date)

    def __str__(self) -> str:
        return f"{self.converted}/{self.total} transactions converted, {self.failed} failed"


def convert_transaction(
    transaction: Transaction[D],
    rates: DailyExchangeRates[N, D],
) -> OutputRow[N, D]:
    """Convert a single transaction into its output row."""
    rate = rates.day_rate(transaction.date)
    try:
        converted = rates.convert(transaction)
    except ConversionError as e:
        logger.warning(f"Cannot convert {transaction}: {e}")
        return OutputRow.from_transactions(transaction, rate, error=e)

    return OutputRow.from_transactions(transaction, rate, converted)


def convert_transactions(
    transactions: Iterable[Transaction[D]],
    rates: DailyExchangeRates[N, D],
    summary: Optional[ConversionSummary] = None,
) -> List[OutputRow[N, D]]:
    """
    Convert every transaction against the rate table.

    Args:
        transactions: Source-currency transactions, in the order to report them
        rates: Rate table for the (target, source) pair
        summary: Optional summary to fill with row counts

    Returns:
        One OutputRow per transaction, in input order
    """
    rows = []
    for transaction in transactions:
        row = convert_transaction(transaction, rates)
        if summary is not None:
            summary.record(row)
        rows.append(row)

    return rows
