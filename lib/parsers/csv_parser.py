"""CSV parser for rate and transaction feeds."""

import csv
import math
from datetime import date
from io import StringIO
from typing import Dict, List, Sequence, Type
import pandas as pd

from core.currency import CurrencyUnit, Money
from core.exchange_rate import ExchangeRate
from core.transaction import Transaction
from modules.conversion.daily_rates import DailyExchangeRates
from utils.config import RATE_FEED_COLUMNS, TRANSACTION_FEED_COLUMNS
from utils.logging_config import setup_logger, log_dataframe_info

logger = setup_logger(__name__)


class FeedError(Exception):
    """A feed could not be read or written. Fatal for the whole run."""
    pass


class FeedParseError(FeedError, ValueError):
    """A feed row is malformed."""
    pass


class FeedIOError(FeedError, OSError):
    """A feed file could not be opened, read or written."""
    pass


def read_feed_frame(content: str, required: Sequence[str], feed_name: str) -> pd.DataFrame:
    """
    Load CSV content into a string-typed DataFrame with stripped cells.

    Raises:
        FeedParseError: Content is empty, unreadable or lacks a required column.
    """
    if not content.strip():
        raise FeedParseError(f"{feed_name} is empty")

    delimiter = detect_delimiter(content)
    try:
        df = pd.read_csv(
            StringIO(content),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise FeedParseError(f"{feed_name} is not valid CSV: {e}") from e

    df.columns = [str(col).strip() for col in df.columns]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise FeedParseError(f"{feed_name} is missing column(s): {', '.join(missing)}")

    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    log_dataframe_info(logger, df, feed_name)
    return df


def detect_delimiter(content: str) -> str:
    """Detect CSV delimiter from the header line."""
    first_line = content.lstrip().split('\n')[0]

    semicolon_count = first_line.count(';')
    comma_count = first_line.count(',')

    if semicolon_count > comma_count:
        return ';'

    sniffer = csv.Sniffer()
    try:
        dialect = sniffer.sniff(first_line, delimiters=";,|\t")
        return dialect.delimiter
    except csv.Error:
        return ','


class CSVParser:
    """
    Parser for the flat feeds the conversion run consumes.

    Rate feed:          date,rate      (ISO date, rate as target per source)
    Transaction feed:   date,amount    (ISO date, amount in source currency)
    """

    def parse_rates(
        self,
        content: str,
        numerator: Type[CurrencyUnit],
        denominator: Type[CurrencyUnit],
    ) -> DailyExchangeRates:
        """
        Build the rate table for (numerator per denominator).

        Raises:
            FeedParseError: Any row is malformed, or a date appears twice.
        """
        date_col, rate_col = RATE_FEED_COLUMNS
        df = read_feed_frame(content, RATE_FEED_COLUMNS, "Rate feed")

        rates: Dict[date, ExchangeRate] = {}
        for row_number, (raw_date, raw_rate) in enumerate(
            zip(df[date_col], df[rate_col]), start=1
        ):
            day = self._parse_date(raw_date, row_number, "Rate feed")
            rate = self._parse_float(raw_rate, row_number, "Rate feed", rate_col)

            if day in rates:
                raise FeedParseError(f"Rate feed row {row_number}: duplicate date {day.isoformat()}")
            rates[day] = ExchangeRate.new(rate, numerator, denominator)

        logger.info(
            f"Loaded {len(rates)} daily {numerator.code}/{denominator.code} rates"
        )
        return DailyExchangeRates(rates, numerator, denominator)

    def parse_transactions(self, content: str, unit: Type[CurrencyUnit]) -> List[Transaction]:
        """
        Parse source-currency transactions in file order.

        Raises:
            FeedParseError: Any row is malformed.
        """
        date_col, amount_col = TRANSACTION_FEED_COLUMNS
        df = read_feed_frame(content, TRANSACTION_FEED_COLUMNS, "Transaction feed")

        transactions = []
        for row_number, (raw_date, raw_amount) in enumerate(
            zip(df[date_col], df[amount_col]), start=1
        ):
            day = self._parse_date(raw_date, row_number, "Transaction feed")
            amount = self._parse_float(raw_amount, row_number, "Transaction feed", amount_col)
            transactions.append(Transaction(day, Money.from_amount(amount, unit)))

        logger.info(f"Loaded {len(transactions)} {unit.code} transactions")
        return transactions

    @staticmethod
    def _parse_date(value: str, row_number: int, feed_name: str) -> date:
        try:
            return date.fromisoformat(value)
        except (TypeError, ValueError):
            raise FeedParseError(f"{feed_name} row {row_number}: invalid date '{value}'")

    @staticmethod
    def _parse_float(value: str, row_number: int, feed_name: str, column: str) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise FeedParseError(f"{feed_name} row {row_number}: invalid {column} '{value}'")
        if not math.isfinite(number):
            raise FeedParseError(f"{feed_name} row {row_number}: invalid {column} '{value}'")
        return number
