# -----------------------------------------------------------------------------
# (c) 2026 Andreas Wagner. All Rights Reserved.
#
# This code is part of the FX Ledger project.
# Unauthorized usage or distribution is not permitted.
# -----------------------------------------------------------------------------

from pathlib import Path
from typing import List, Optional, Type, Union

from core.currency import CurrencyUnit
from lib.parsers.csv_parser import CSVParser, FeedIOError
from lib.parsers.ibkr_trades_parser import IbkrTradesParser
from lib.report_writer import write_conversion_rows, write_sales
from modules.conversion.daily_rates import DailyExchangeRates
from modules.conversion.pipeline import ConversionSummary, convert_transactions
from modules.trades.sale import Sale, reconcile_sales
from utils.config import SLOW_OPERATION_MS
from utils.logging_config import setup_logger, get_perf_logger

logger = setup_logger(__name__)

PathLike = Union[str, Path]


def read_feed(path: PathLike) -> str:
    """Read a feed file as text. I/O failures are fatal for the run."""
    try:
        return Path(path).read_text(encoding='utf-8-sig')
    except (OSError, UnicodeDecodeError) as e:
        raise FeedIOError(f"Cannot read {path}: {e}") from e


def load_exchange_rates(
    rates_path: PathLike,
    numerator: Type[CurrencyUnit],
    denominator: Type[CurrencyUnit],
) -> DailyExchangeRates:
    """Load a rate table holding numerator-per-denominator daily rates."""
    with get_perf_logger(logger, f"load rates {rates_path}", SLOW_OPERATION_MS):
        return CSVParser().parse_rates(read_feed(rates_path), numerator, denominator)


def run_conversion(
    input_path: PathLike,
    output_path: PathLike,
    rates_path: PathLike,
    source_unit: Type[CurrencyUnit],
    target_unit: Type[CurrencyUnit],
) -> ConversionSummary:
    """
    Convert a transaction file into the target currency.

    Feeds are fully read and parsed before anything is written, so a
    malformed row aborts the run without leaving a partial output file.
    Rows without a rate are written with their error and do not fail the run.

    Raises:
        FeedError: A feed is unreadable or malformed, or the output cannot be written.
    """
    logger.info(
        f"Converting {source_unit.code} transactions from {input_path} to {target_unit.code}"
    )
    with get_perf_logger(logger, "conversion run", SLOW_OPERATION_MS):
        rates = load_exchange_rates(rates_path, target_unit, source_unit)
        transactions = CSVParser().parse_transactions(read_feed(input_path), source_unit)

        summary = ConversionSummary()
        rows = convert_transactions(transactions, rates, summary)
        write_conversion_rows(rows, output_path)

    if summary.failed:
        logger.warning(
            f"No rate for {summary.failed} transaction(s) on: "
            + ", ".join(sorted({d.isoformat() for d in summary.failed_dates}))
        )
    logger.info(str(summary))
    return summary


def run_reconciliation(
    trades_path: PathLike,
    output_path: Optional[PathLike] = None,
    lot_sum_tolerance: Optional[float] = None,
) -> List[Sale]:
    """
    Reconcile a broker trade export into sales, optionally writing them out.

    Raises:
        FeedError: The export is unreadable or malformed.
        SaleReconciliationError: The rows do not reconcile.
    """
    with get_perf_logger(logger, "reconciliation run", SLOW_OPERATION_MS):
        records = IbkrTradesParser().parse(read_feed(trades_path))
        sales = reconcile_sales(records, lot_sum_tolerance)

        if output_path is not None:
            write_sales(sales, output_path)

    return sales
