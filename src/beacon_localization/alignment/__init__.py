"""
Scan Alignment Module

This module places overlapping scans in a common frame:
- Pairwise-distance fingerprints to skip pairs that cannot overlap
- Orientation search with translation voting for pairwise alignment
- Scan graph growth from a reference scan with transform composition
"""

from .aligner import MIN_OVERLAP, Alignment, ScanAligner, align_pair
from .fingerprint import Fingerprint, FingerprintIndex, pairwise_squared_distances
from .scan_graph import GraphStatus, ScanGraph

__all__ = [
    "MIN_OVERLAP",
    "Alignment",
    "ScanAligner",
    "align_pair",
    "Fingerprint",
    "FingerprintIndex",
    "pairwise_squared_distances",
    "GraphStatus",
    "ScanGraph",
]
