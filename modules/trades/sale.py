"""
Sale Reconciliation

Groups a broker's flat trade export into sales. The export lists each sale
as one Trade row followed by the ClosedLot rows that were sold off to fill
it:

    Trade      TST  2023-01-04  qty 3  basis 30  proceeds 33
    ClosedLot  TST  2023-01-01  qty 1  basis 10
    ClosedLot  TST  2023-01-02  qty 2  basis 20
    Trade      ...

Each Trade starts a new segment. A segment becomes a Sale once its lots
match the trade (same symbol and currency, not closed after the trade) and
add up to the trade's quantity and basis. Any failure aborts the whole
reconciliation.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple, Type, Union

from core.currency import CurrencyUnit, OtherCurrency, parse_currency_code
from modules.trades.models import RecordKind, TradeRecord
from utils.logging_config import setup_logger

logger = setup_logger(__name__)


class SaleReconciliationError(Exception):
    """Base class for failures that abort a reconciliation."""
    pass


class NoSalesError(SaleReconciliationError):
    def __init__(self):
        super().__init__("No sales found")


class UnmatchedClosedLotError(SaleReconciliationError):
    def __init__(self, detail: str = ""):
        message = "Unmatched closed lot"
        super().__init__(f"{message}: {detail}" if detail else message)


class LotClosedAfterTradeError(SaleReconciliationError):
    def __init__(self, detail: str = ""):
        message = "Lot closed after trade"
        super().__init__(f"{message}: {detail}" if detail else message)


class LotSumMismatchError(SaleReconciliationError):
    def __init__(self, detail: str = ""):
        message = "Sum of closed lots does not match trade"
        super().__init__(f"{message}: {detail}" if detail else message)


class TradeMissingProceedsError(SaleReconciliationError):
    def __init__(self, detail: str = ""):
        message = "Trade missing proceeds"
        super().__init__(f"{message}: {detail}" if detail else message)


SaleCurrency = Union[Type[CurrencyUnit], OtherCurrency]


@dataclass(frozen=True)
class ClosedLot:
    """The part of an earlier purchase that was sold in a Sale."""

    date: date
    quantity: float
    t_price: float
    basis: float

    @classmethod
    def from_record(cls, record: TradeRecord, trade: TradeRecord) -> 'ClosedLot':
        """Validate a closed lot row against the trade it belongs to."""
        if record.symbol != trade.symbol or record.currency != trade.currency:
            raise UnmatchedClosedLotError(
                f"lot {record.symbol}/{record.currency} on {record.date} "
                f"does not belong to trade {trade.symbol}/{trade.currency} on {trade.date}"
            )
        if record.date > trade.date:
            raise LotClosedAfterTradeError(
                f"{record.symbol} lot dated {record.date} is later than its trade on {trade.date}"
            )

        return cls(
            date=record.date,
            quantity=record.quantity,
            t_price=record.t_price,
            basis=record.basis,
        )


def _sums_match(total: float, expected: float, tolerance: Optional[float]) -> bool:
    if tolerance is None:
        return total == expected
    return math.isclose(total, expected, rel_tol=0.0, abs_tol=tolerance)


@dataclass(frozen=True)
class Sale:
    """A reconciled sale and the lots that funded it, in export order."""

    currency: SaleCurrency
    symbol: str
    date: date
    t_price: float
    proceeds: float
    closed_lots: Tuple[ClosedLot, ...]

    @property
    def quantity(self) -> float:
        return sum(lot.quantity for lot in self.closed_lots)

    @property
    def basis(self) -> float:
        return sum(lot.basis for lot in self.closed_lots)

    @classmethod
    def from_segment(
        cls,
        segment: Sequence[TradeRecord],
        lot_sum_tolerance: Optional[float] = None,
    ) -> 'Sale':
        """
        Build a Sale from one Trade record and its ClosedLot records.

        Lot sums are compared with exact float equality unless
        lot_sum_tolerance is given.

        Raises:
            UnmatchedClosedLotError: A lot's symbol or currency differs from the trade's.
            LotClosedAfterTradeError: A lot is dated after the trade.
            LotSumMismatchError: Lot quantities or bases do not add up to the trade's.
            TradeMissingProceedsError: The trade row has no proceeds.
        """
        trade = segment[0]
        closed_lots = tuple(ClosedLot.from_record(record, trade) for record in segment[1:])

        lot_basis = sum(lot.basis for lot in closed_lots)
        lot_quantity = sum(lot.quantity for lot in closed_lots)
        if not (
            _sums_match(lot_basis, trade.basis, lot_sum_tolerance)
            and _sums_match(lot_quantity, trade.quantity, lot_sum_tolerance)
        ):
            raise LotSumMismatchError(
                f"{trade.symbol} on {trade.date}: lots quantity {lot_quantity} / basis {lot_basis}, "
                f"trade quantity {trade.quantity} / basis {trade.basis}"
            )

        if trade.proceeds is None:
            raise TradeMissingProceedsError(f"{trade.symbol} on {trade.date}")

        return cls(
            currency=parse_currency_code(trade.currency),
            symbol=trade.symbol,
            date=trade.date,
            t_price=trade.t_price,
            proceeds=trade.proceeds,
            closed_lots=closed_lots,
        )


def filter_sale_records(records: Iterable[TradeRecord]) -> List[TradeRecord]:
    """
    Keep the rows that describe sales.

    Order rows are dropped, as are rows with negative proceeds (purchases).
    Closed lot rows carry no proceeds and are always kept.
    """
    return [
        record for record in records
        if record.kind in (RecordKind.TRADE, RecordKind.CLOSED_LOT)
        and (record.proceeds is None or record.proceeds >= 0.0)
    ]


def sale_segments(records: Sequence[TradeRecord]) -> List[Sequence[TradeRecord]]:
    """
    Split filtered records into one segment per Trade row.

    Raises:
        NoSalesError: There is no Trade row at all.
        UnmatchedClosedLotError: The first row is a ClosedLot with no Trade before it.
    """
    trade_indices = [i for i, record in enumerate(records) if record.is_trade]

    if not trade_indices:
        raise NoSalesError()
    if trade_indices[0] != 0:
        first = records[0]
        raise UnmatchedClosedLotError(
            f"{first.symbol} lot on {first.date} has no preceding trade"
        )

    boundaries = trade_indices[1:] + [len(records)]
    return [records[start:end] for start, end in zip(trade_indices, boundaries)]


def reconcile_sales(
    records: Iterable[TradeRecord],
    lot_sum_tolerance: Optional[float] = None,
) -> List[Sale]:
    """
    Turn a broker trade export into sales.

    Args:
        records: Parsed export rows in file order
        lot_sum_tolerance: Absolute tolerance for lot sums; None means exact

    Returns:
        Sales in the order their Trade rows appear

    Raises:
        SaleReconciliationError: On the first segment that fails; no partial
            result is returned.
    """
    sale_records = filter_sale_records(records)
    segments = sale_segments(sale_records)

    sales = [Sale.from_segment(segment, lot_sum_tolerance) for segment in segments]

    logger.info(
        f"Reconciled {len(sales)} sales from {sum(len(s.closed_lots) for s in sales)} closed lots"
    )
    return sales
