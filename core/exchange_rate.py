"""
Exchange Rates

An ExchangeRate converts Money of its denominator unit into Money of its
numerator unit. ExchangeRate(EUR, USD) reads as "EUR per USD": it turns
dollars into euros and refuses anything else.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Generic, Type, TypeVar

from core.currency import CurrencyMismatchError, CurrencyUnit, Money

N = TypeVar("N", bound=CurrencyUnit)
D = TypeVar("D", bound=CurrencyUnit)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    # Decimal(float) is exact, so ties are detected without float noise
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ExchangeRate(Generic[N, D]):
    """
    Multiplier between two currency units.

    The stored factor works on minor units: a human rate r (major per major)
    is kept as r * N.scale / D.scale so that convert() can multiply raw
    amounts directly.
    """

    factor: float
    numerator: Type[N]
    denominator: Type[D]

    @classmethod
    def new(cls, rate: float, numerator: Type[N], denominator: Type[D]) -> "ExchangeRate[N, D]":
        return cls(rate * numerator.scale / denominator.scale, numerator, denominator)

    @property
    def rate(self) -> float:
        """The human (major-unit) rate this factor was built from."""
        return self.factor * self.denominator.scale / self.numerator.scale

    def invert(self) -> "ExchangeRate[D, N]":
        """
        Reciprocal rate with the units swapped.

        Because convert() rounds to whole minor units, converting forth and
        back with a rate and its inverse can be off by one minor unit.
        """
        return ExchangeRate(1.0 / self.factor, self.denominator, self.numerator)

    def convert(self, amount: Money[D]) -> Money[N]:
        if amount.unit is not self.denominator:
            raise CurrencyMismatchError(
                f"{self} cannot convert an amount in {amount.unit.code}"
            )
        return Money.from_raw_amount(
            round_half_away_from_zero(amount.raw_amount * self.factor),
            self.numerator,
        )

    def __str__(self) -> str:
        return f"{self.numerator.code}/{self.denominator.code} {self.rate}"
