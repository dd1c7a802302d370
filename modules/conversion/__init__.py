"""
Conversion Module

Per-row, fault-tolerant conversion of dated transactions against a daily
rate table.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['daily_rates', 'pipeline']
