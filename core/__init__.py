"""
Core Kernel Module

Unit-safe money types shared by every tool.

Components:
- currency: currency units and Money (integer minor units)
- exchange_rate: unit-tagged exchange rates
- transaction: dated Money

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['currency', 'exchange_rate', 'transaction']
