"""
FX Ledger - Command Line Tool

Converts dated transactions into another currency using daily historical
exchange rates, and reconciles broker trade exports into sales with their
closed lots.

Usage:
    fx-ledger convert-transactions -i txns.csv -o out.csv -e usd_per_eur.csv
    fx-ledger convert-transactions -i txns.csv -o out.csv -e eur_per_usd.csv \\
        --from-currency USD --to-currency EUR
    fx-ledger reconcile-trades -i trades.csv -o sales.csv

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import argparse
import sys
from typing import List, Optional

from core.currency import unit_for_code
from lib.parsers.csv_parser import FeedError
from lib.pipeline import run_conversion, run_reconciliation
from modules.trades.sale import SaleReconciliationError
from utils.config import DEFAULT_SOURCE_CURRENCY, DEFAULT_TARGET_CURRENCY, LOT_SUM_TOLERANCE
from utils.logging_config import setup_logger

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fx-ledger",
        description="Currency conversion and broker trade reconciliation",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.required = True

    convert_parser = subparsers.add_parser(
        "convert-transactions", help="Convert transactions to a different currency"
    )
    convert_parser.add_argument("-i", "--input", required=True,
                                help="Transactions CSV (date,amount)")
    convert_parser.add_argument("-o", "--output", required=True,
                                help="Output CSV")
    convert_parser.add_argument("-e", "--exchange-rates", required=True,
                                help="Daily rates CSV (date,rate) as target per source")
    convert_parser.add_argument("--from-currency", default=DEFAULT_SOURCE_CURRENCY,
                                help=f"Source currency (default {DEFAULT_SOURCE_CURRENCY})")
    convert_parser.add_argument("--to-currency", default=DEFAULT_TARGET_CURRENCY,
                                help=f"Target currency (default {DEFAULT_TARGET_CURRENCY})")

    reconcile_parser = subparsers.add_parser(
        "reconcile-trades", help="Group broker trades and closed lots into sales"
    )
    reconcile_parser.add_argument("-i", "--input", required=True,
                                  help="Broker trade export CSV")
    reconcile_parser.add_argument("-o", "--output", required=True,
                                  help="Sales CSV, one row per closed lot")
    reconcile_parser.add_argument("--lot-tolerance", type=float, default=LOT_SUM_TOLERANCE,
                                  help="Absolute tolerance for lot sums (default: exact match)")

    return parser


def convert_command(args: argparse.Namespace) -> int:
    try:
        source_unit = unit_for_code(args.from_currency)
        target_unit = unit_for_code(args.to_currency)
    except ValueError as e:
        logger.error(str(e))
        return 1

    if source_unit is target_unit:
        logger.error(f"Source and target currency are both {source_unit.code}")
        return 1

    try:
        run_conversion(args.input, args.output, args.exchange_rates, source_unit, target_unit)
    except FeedError as e:
        logger.error(f"Conversion aborted: {e}")
        return 1

    return 0


def reconcile_command(args: argparse.Namespace) -> int:
    try:
        sales = run_reconciliation(args.input, args.output, args.lot_tolerance)
    except (FeedError, SaleReconciliationError) as e:
        logger.error(f"Reconciliation aborted: {e}")
        return 1

    for sale in sales:
        logger.info(
            f"{sale.date} {sale.symbol} ({sale.currency.code}): proceeds {sale.proceeds}, "
            f"{len(sale.closed_lots)} lot(s)"
        )
    return 0


COMMANDS = {
    "convert-transactions": convert_command,
    "reconcile-trades": reconcile_command,
}


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv if argv is not None else sys.argv[1:])
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
