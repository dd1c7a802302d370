"""
Runtime Configuration

Defaults for the conversion and reconciliation commands. Values that can
be overridden are read from the environment once, at import.

Environment:
    LOG_LEVEL                  DEBUG | INFO | WARNING | ERROR (default INFO)
    FX_LEDGER_LOG_FILE         optional log file path
    FX_LEDGER_LOT_TOLERANCE    absolute tolerance for lot-sum checks
                               (unset = exact equality)

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import os
from typing import Optional


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("FX_LEDGER_LOG_FILE") or None

# The rate table holds "target per source" rates, e.g. USD per EUR
DEFAULT_SOURCE_CURRENCY = "EUR"
DEFAULT_TARGET_CURRENCY = "USD"

LOT_SUM_TOLERANCE = _optional_float("FX_LEDGER_LOT_TOLERANCE")

# Operations slower than this are logged as SLOW
SLOW_OPERATION_MS = 1000

# Rate and transaction feed headers
RATE_FEED_COLUMNS = ("date", "rate")
TRANSACTION_FEED_COLUMNS = ("date", "amount")

# Broker trade export columns (Interactive Brokers "Trades" section)
IBKR_TRADE_COLUMNS = {
    "kind": "DataDiscriminator",
    "currency": "Currency",
    "symbol": "Symbol",
    "date": "Date/Time",
    "quantity": "Quantity",
    "t_price": "T. Price",
    "proceeds": "Proceeds",
    "basis": "Basis",
}
