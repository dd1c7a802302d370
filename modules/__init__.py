"""
Modules Package

Business logic layer.

Modules:
- conversion: daily rate tables and the transaction conversion pipeline
- trades: broker trade records and sale reconciliation

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['conversion', 'trades']
