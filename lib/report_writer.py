"""
Report Writers

Serializes conversion rows and reconciled sales to CSV. Money is written as
its two-decimal major-unit value (123.45), not the symbol string, so the
files load cleanly into spreadsheets.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from pathlib import Path
from typing import Iterable, List, Union
import pandas as pd

from lib.parsers.csv_parser import FeedIOError
from modules.conversion.pipeline import OutputRow
from modules.trades.sale import Sale
from utils.logging_config import setup_logger

logger = setup_logger(__name__)

CONVERSION_COLUMNS = ["date", "from_amount", "exchange_rate", "to_amount", "error"]

SALES_COLUMNS = [
    "symbol", "currency", "sale_date", "sale_price", "proceeds",
    "lot_date", "lot_quantity", "lot_price", "lot_basis",
]


def conversion_rows_to_frame(rows: Iterable[OutputRow]) -> pd.DataFrame:
    """One line per output row, in order. Failed rows have an empty to_amount."""
    records = [
        {
            "date": row.date.isoformat(),
            "from_amount": row.from_amount.to_decimal(),
            "exchange_rate": row.exchange_rate.rate if row.exchange_rate is not None else None,
            "to_amount": row.to_amount.to_decimal() if row.to_amount is not None else None,
            "error": str(row.error) if row.error is not None else None,
        }
        for row in rows
    ]
    return pd.DataFrame(records, columns=CONVERSION_COLUMNS)


def sales_to_frame(sales: Iterable[Sale]) -> pd.DataFrame:
    """One line per closed lot, repeating the sale fields."""
    records = []
    for sale in sales:
        for lot in sale.closed_lots:
            records.append({
                "symbol": sale.symbol,
                "currency": sale.currency.code,
                "sale_date": sale.date.isoformat(),
                "sale_price": sale.t_price,
                "proceeds": sale.proceeds,
                "lot_date": lot.date.isoformat(),
                "lot_quantity": lot.quantity,
                "lot_price": lot.t_price,
                "lot_basis": lot.basis,
            })
    return pd.DataFrame(records, columns=SALES_COLUMNS)


def _write_frame(df: pd.DataFrame, output_path: Union[str, Path], name: str) -> None:
    try:
        df.to_csv(output_path, index=False)
    except OSError as e:
        raise FeedIOError(f"Cannot write {name} to {output_path}: {e}") from e
    logger.info(f"Wrote {len(df)} {name} rows to {output_path}")


def write_conversion_rows(rows: List[OutputRow], output_path: Union[str, Path]) -> None:
    _write_frame(conversion_rows_to_frame(rows), output_path, "conversion")


def write_sales(sales: List[Sale], output_path: Union[str, Path]) -> None:
    _write_frame(sales_to_frame(sales), output_path, "sales")
