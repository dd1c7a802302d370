"""Feed parsers."""

__all__ = ['csv_parser', 'ibkr_trades_parser']
