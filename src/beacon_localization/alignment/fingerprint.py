"""
Pairwise-Distance Fingerprints

Squared distances between beacons do not change under rotation or
translation, so two scans that share k beacons must share at least
k*(k-1)/2 pairwise distances. Comparing these multisets is much cheaper than
a full alignment search and rules out most scan pairs up front.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, TYPE_CHECKING

import numpy as np

from ..geometry.scan import Scan
from ..utils.logging import setup_logger
from .aligner import MIN_OVERLAP

if TYPE_CHECKING:
    from ..acceleration.parallel_executor import PairParallelExecutor

logger = setup_logger(__name__)


def pairwise_squared_distances(points: np.ndarray) -> np.ndarray:
    """
    Squared Euclidean distance for every unordered pair of points.

    Args:
        points: Nx3 integer array

    Returns:
        1D int64 array of length N*(N-1)/2
    """
    pts = np.asarray(points, dtype=np.int64)
    n = len(pts)
    if n < 2:
        return np.empty(0, dtype=np.int64)
    diff = pts[:, None, :] - pts[None, :, :]
    dsq = np.einsum("ijk,ijk->ij", diff, diff)
    iu = np.triu_indices(n, k=1)
    return dsq[iu]


@dataclass(frozen=True, eq=False)
class Fingerprint:
    """Multiset of squared pairwise distances, stored as sorted values plus counts."""

    scan_id: int
    values: np.ndarray
    counts: np.ndarray

    @classmethod
    def from_scan(cls, scan: Scan) -> "Fingerprint":
        values, counts = np.unique(pairwise_squared_distances(scan.points), return_counts=True)
        return cls(scan.scan_id, values, counts)

    @property
    def size(self) -> int:
        return int(self.counts.sum())

    def overlap(self, other: "Fingerprint") -> int:
        """Size of the multiset intersection with another fingerprint."""
        _, ia, ib = np.intersect1d(self.values, other.values, assume_unique=True, return_indices=True)
        if len(ia) == 0:
            return 0
        return int(np.minimum(self.counts[ia], other.counts[ib]).sum())


def fingerprint_scan(scan: Scan) -> Fingerprint:
    """Module-level worker for process pools."""
    return Fingerprint.from_scan(scan)


class FingerprintIndex:
    """
    Fingerprints for a set of scans, computed once per scan.

    A pair of scans is a candidate overlap only if their fingerprints share at
    least C(min_overlap, 2) distances. The test never rejects a pair that
    could actually be aligned.
    """

    def __init__(self, min_overlap: int = MIN_OVERLAP):
        self.min_overlap = min_overlap
        self.required_shared = min_overlap * (min_overlap - 1) // 2
        self._fingerprints: Dict[int, Fingerprint] = {}

    def __len__(self) -> int:
        return len(self._fingerprints)

    def __contains__(self, scan_id: int) -> bool:
        return scan_id in self._fingerprints

    def add(self, scan: Scan) -> Fingerprint:
        fp = self._fingerprints.get(scan.scan_id)
        if fp is None:
            fp = Fingerprint.from_scan(scan)
            self._fingerprints[scan.scan_id] = fp
        return fp

    def build(
        self,
        scans: Iterable[Scan],
        executor: Optional["PairParallelExecutor"] = None,
    ) -> "FingerprintIndex":
        """
        Fingerprint every scan not already indexed.

        Args:
            scans: Scans to index
            executor: Optional worker pool; scans are independent

        Returns:
            self, for chaining
        """
        pending = [s for s in scans if s.scan_id not in self._fingerprints]
        if not pending:
            return self
        if executor is None:
            for scan in pending:
                self.add(scan)
        else:
            for fp in executor.map_tasks(pending, fingerprint_scan):
                self._fingerprints[fp.scan_id] = fp
        logger.debug(f"Fingerprinted {len(pending)} scans ({len(self)} indexed)")
        return self

    def fingerprint(self, scan_id: int) -> Fingerprint:
        try:
            return self._fingerprints[scan_id]
        except KeyError:
            raise KeyError(f"Scan {scan_id} has not been fingerprinted") from None

    def overlap(self, a_id: int, b_id: int) -> int:
        return self.fingerprint(a_id).overlap(self.fingerprint(b_id))

    def is_candidate(self, a_id: int, b_id: int) -> bool:
        return self.overlap(a_id, b_id) >= self.required_shared
