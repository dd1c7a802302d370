"""
Daily Exchange Rates

Date-indexed rate table for one fixed currency pair. Lookups are exact:
a date without a published rate is a MissingExchangeRateError for that
transaction, never an estimate from neighbouring days.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from datetime import date
from types import MappingProxyType
from typing import Generic, Iterator, List, Mapping, Optional, Type, TypeVar

from core.currency import CurrencyMismatchError, CurrencyUnit
from core.exchange_rate import ExchangeRate
from core.transaction import Transaction

N = TypeVar("N", bound=CurrencyUnit)
D = TypeVar("D", bound=CurrencyUnit)


class ConversionError(Exception):
    """A single transaction could not be converted. Recoverable per row."""
    pass


class MissingExchangeRateError(ConversionError):
    """No rate was published for the transaction's date."""

    def __init__(self, missing_date: Optional[date] = None):
        self.date = missing_date
        super().__init__("Missing exchange rate")


class DailyExchangeRates(Generic[N, D]):
    """
    Read-only mapping of calendar dates to ExchangeRate[N, D].

    Built once (usually by CSVParser.parse_rates) and never mutated.
    """

    def __init__(
        self,
        rates: Mapping[date, ExchangeRate[N, D]],
        numerator: Type[N],
        denominator: Type[D],
    ):
        for day, rate in rates.items():
            if rate.numerator is not numerator or rate.denominator is not denominator:
                raise CurrencyMismatchError(
                    f"Rate for {day} is {rate.numerator.code}/{rate.denominator.code}, "
                    f"expected {numerator.code}/{denominator.code}"
                )
        self.numerator = numerator
        self.denominator = denominator
        self._rates = MappingProxyType(dict(rates))

    def day_rate(self, day: date) -> Optional[ExchangeRate[N, D]]:
        return self._rates.get(day)

    def convert(self, transaction: Transaction[D]) -> Transaction[N]:
        """
        Convert one transaction at its own day's rate.

        Raises:
            MissingExchangeRateError: No rate for transaction.date.
            CurrencyMismatchError: The transaction is not in the denominator unit.
        """
        rate = self.day_rate(transaction.date)
        if rate is None:
            raise MissingExchangeRateError(transaction.date)

        return Transaction(transaction.date, rate.convert(transaction.amount))

    def dates(self) -> List[date]:
        return sorted(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __contains__(self, day: object) -> bool:
        return day in self._rates

    def __iter__(self) -> Iterator[date]:
        return iter(self.dates())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DailyExchangeRates):
            return NotImplemented
        return (
            self.numerator is other.numerator
            and self.denominator is other.denominator
            and dict(self._rates) == dict(other._rates)
        )

    def __repr__(self) -> str:
        return (
            f"DailyExchangeRates({self.numerator.code}/{self.denominator.code}, "
            f"{len(self)} days)"
        )
