"""
Reconstruction Module

Merges resolved scans into a single beacon map and reports scanner positions.
"""

from .aggregate import (
    LocalizationResult,
    aggregate,
    global_beacons,
    scanner_positions,
    max_manhattan_distance,
)

__all__ = [
    "LocalizationResult",
    "aggregate",
    "global_beacons",
    "scanner_positions",
    "max_manhattan_distance",
]
