"""
Scan Data Preprocessing Module

Reads scans from the puzzle text format and validates them.
"""

from .loader import ScanLoader, parse_scans

__all__ = [
    "ScanLoader",
    "parse_scans",
]
