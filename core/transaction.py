"""
Dated Money Transactions

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from dataclasses import dataclass
from datetime import date
from typing import Generic, Type, TypeVar

from core.currency import CurrencyUnit, Money

U = TypeVar("U", bound=CurrencyUnit)


@dataclass(frozen=True)
class Transaction(Generic[U]):
    """A single booking: the date it happened and the amount in one currency."""

    date: date
    amount: Money[U]

    @property
    def unit(self) -> Type[U]:
        return self.amount.unit

    def __str__(self) -> str:
        return f"{self.date.isoformat()}: {self.amount}"
