"""
Broker Trade Records

One row of an Interactive Brokers trade export, as consumed by the sale
reconciler. Records are validated once on parse and immutable afterwards.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from enum import Enum
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator


class RecordKindError(ValueError):
    """Raised when a record kind cannot be normalized."""
    pass


class RecordKind(str, Enum):
    """Row types found in the trades section of a broker export."""

    ORDER = "Order"
    TRADE = "Trade"
    CLOSED_LOT = "ClosedLot"

    @classmethod
    def normalize(cls, value: str) -> 'RecordKind':
        """Normalize a record kind from the export's DataDiscriminator column.

        Raises:
            RecordKindError: If the kind is not one of Order, Trade, ClosedLot.
        """
        kind_map = {
            "ORDER": cls.ORDER,
            "TRADE": cls.TRADE,
            "CLOSEDLOT": cls.CLOSED_LOT,
        }

        clean_value = value.strip().upper().replace(" ", "").replace("_", "")
        result = kind_map.get(clean_value)

        if result is None:
            raise RecordKindError(f"Unknown record kind: '{value}'")

        return result


def parse_broker_date(value: str) -> date:
    """
    Parse the date part of a combined date-time cell.

    '2023-01-04, 10:15:00' -> date(2023, 1, 4). Only the text before the
    first comma is used and it must be YYYY-MM-DD.
    """
    date_part = value.split(',')[0].strip()
    if not date_part:
        raise ValueError("Missing date")
    return datetime.strptime(date_part, '%Y-%m-%d').date()


class TradeRecord(BaseModel):
    """
    A single broker export row.

    Proceeds are only reported on trade rows; closed lot rows leave them
    empty. Buys carry negative proceeds.
    """

    model_config = ConfigDict(frozen=True)

    kind: RecordKind
    currency: str
    symbol: str
    date: date
    quantity: float
    t_price: float
    proceeds: Optional[float] = None
    basis: float

    @field_validator('kind', mode='before')
    @classmethod
    def parse_kind(cls, v):
        if isinstance(v, str) and not isinstance(v, RecordKind):
            return RecordKind.normalize(v)
        return v

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        if isinstance(v, str):
            return parse_broker_date(v)
        if isinstance(v, datetime):
            return v.date()
        return v

    @field_validator('quantity', 't_price', 'basis', 'proceeds', mode='before')
    @classmethod
    def parse_number(cls, v):
        """Accept '1,000.50' style cells; an empty cell means no value."""
        if isinstance(v, str):
            v = v.replace(',', '').strip()
            if not v:
                return None
        return v

    @property
    def is_trade(self) -> bool:
        return self.kind == RecordKind.TRADE

    @property
    def is_closed_lot(self) -> bool:
        return self.kind == RecordKind.CLOSED_LOT
