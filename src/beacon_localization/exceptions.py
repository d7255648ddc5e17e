"""
Exception types raised by the beacon localization pipeline.
"""

from __future__ import annotations

from typing import Iterable, Tuple


class BeaconLocalizationError(Exception):
    """Base class for domain errors."""


class UnalignableScanError(BeaconLocalizationError, RuntimeError):
    """
    Raised when the scan graph stops making progress with scans left unresolved.

    Every remaining (resolved, unresolved) pair has been tried without reaching
    the overlap threshold, so no complete answer exists for this input.
    """

    def __init__(self, unresolved: Iterable[int], resolved: Iterable[int] = ()):
        self.unresolved: Tuple[int, ...] = tuple(sorted(unresolved))
        self.resolved: Tuple[int, ...] = tuple(sorted(resolved))
        super().__init__(
            f"Could not align {len(self.unresolved)} scan(s) to the reference frame: "
            f"{list(self.unresolved)} (resolved: {len(self.resolved)})"
        )


class MalformedInputError(BeaconLocalizationError, ValueError):
    """Raised by the scan loader for input it cannot parse."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
