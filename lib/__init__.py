"""
I/O Library

Feed parsers, report writers and run orchestration around the core modules.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['parsers', 'report_writer', 'pipeline']
