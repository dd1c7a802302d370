"""
Logging Configuration

Every module gets its logger from setup_logger(__name__). Output is one
structured line per event on stderr (stdout stays free for the CLI), plus
an optional log file:

    [2026-01-02 10:15:00.123] [WARNING ] [pipeline:convert_transaction:57] No rate for 2021-01-03

Levels and the log file come from utils.config (LOG_LEVEL, FX_LEDGER_LOG_FILE).

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from utils import config


class StructuredFormatter(logging.Formatter):
    """
    Format: [TIMESTAMP] [LEVEL] [MODULE:FUNCTION:LINE] MESSAGE

    Tracebacks follow on the next lines when the record carries exc_info.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        location = f"{record.module}:{record.funcName}:{record.lineno}"

        line = f"[{timestamp}] [{record.levelname:8s}] [{location}] {record.getMessage()}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class PerformanceLogger:
    """
    Times a block and logs its duration.

    Durations above threshold_ms are logged as SLOW warnings, everything
    else at DEBUG. The measured duration stays available as duration_ms.
    Exceptions from the block always propagate.
    """

    def __init__(self, logger: logging.Logger, operation: str, threshold_ms: float):
        self.logger = logger
        self.operation = operation
        self.threshold_ms = threshold_ms
        self.duration_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self._started) * 1000

        if exc_type is not None:
            self.logger.debug(f"{self.operation} aborted after {self.duration_ms:.1f}ms")
        elif self.duration_ms > self.threshold_ms:
            self.logger.warning(f"SLOW: {self.operation} took {self.duration_ms:.1f}ms")
        else:
            self.logger.debug(f"{self.operation} took {self.duration_ms:.1f}ms")
        return False


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter())
    return handler


def setup_logger(
    name: str,
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure and return the logger for a module.

    Args:
        name: Logger name (usually __name__)
        level: DEBUG, INFO, WARNING or ERROR. Defaults to config.LOG_LEVEL
        log_file: Extra file output. Defaults to config.LOG_FILE

    Calling it again for the same name returns the existing logger without
    adding handlers.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_level = getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO)
    logger.setLevel(log_level)
    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), log_level))

    log_file = log_file or config.LOG_FILE
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(log_file, encoding='utf-8'), log_level))

    logger.propagate = False
    return logger


def get_perf_logger(
    logger: logging.Logger,
    operation: str,
    threshold_ms: float = config.SLOW_OPERATION_MS
) -> PerformanceLogger:
    """
    Usage:
        with get_perf_logger(logger, "load rates"):
            rates = CSVParser().parse_rates(content, USD, EUR)
    """
    return PerformanceLogger(logger, operation, threshold_ms)


def log_dataframe_info(logger: logging.Logger, df, name: str) -> None:
    """Log the size of a parsed feed (INFO) and its columns (DEBUG)."""
    if df.empty:
        logger.info(f"{name}: no data rows")
    else:
        logger.info(f"{name}: {len(df)} rows")
    logger.debug(f"{name} columns: {', '.join(map(str, df.columns))}")
