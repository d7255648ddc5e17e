"""
Pipeline Module

End-to-end workflow from parsed scans to the merged beacon map.
"""

from .localization import localize_scans

__all__ = [
    "localize_scans",
]
