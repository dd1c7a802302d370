"""
Trades Module

Broker trade records and their reconciliation into sales.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['models', 'sale']
