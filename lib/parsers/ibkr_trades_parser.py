"""Parser for Interactive Brokers trade exports (Trades section with closed lots)."""

from typing import List
import pandas as pd
from pydantic import ValidationError

from lib.parsers.csv_parser import FeedParseError, read_feed_frame
from modules.trades.models import TradeRecord
from utils.config import IBKR_TRADE_COLUMNS
from utils.logging_config import setup_logger

logger = setup_logger(__name__)


class IbkrTradesParser:
    """
    Parser for Interactive Brokers trade exports with closed lot detail.

    Expects one header row with the columns listed in IBKR_TRADE_COLUMNS.
    Unlike the portfolio importers this parser does not skip bad rows: the
    reconciler needs every Trade and ClosedLot row, so a single malformed
    row fails the whole file.
    """

    def parse(self, file_content: str) -> List[TradeRecord]:
        df = read_feed_frame(file_content, list(IBKR_TRADE_COLUMNS.values()), "Trade export")

        records = []
        for row_number, row in enumerate(df.to_dict(orient='records'), start=1):
            fields = {field: row[column] for field, column in IBKR_TRADE_COLUMNS.items()}
            try:
                records.append(TradeRecord(**fields))
            except ValidationError as e:
                problems = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
                )
                raise FeedParseError(f"Trade export row {row_number}: {problems}") from e

        kinds = pd.Series([r.kind.value for r in records], dtype=object).value_counts().to_dict()
        logger.info(f"Parsed {len(records)} trade export rows {kinds}")
        return records
