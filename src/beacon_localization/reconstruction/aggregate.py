"""
Result aggregation in the global frame.

Once every scan has a scan-to-global transform, the beacon map is the union of
all transformed scans (exact integer equality merges duplicates) and each
scanner sits at its transform's translation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence

import numpy as np

from ..geometry.scan import Point3D, Scan
from ..geometry.transform import Transform


@dataclass(frozen=True, eq=False)
class LocalizationResult:
    """Beacon map and scanner positions in the reference scan's frame.

    Attributes:
        beacons: Unique beacons, sorted lexicographically (M x 3)
        scanner_positions: Scanner origin per scan id
        max_manhattan_distance: Largest Manhattan distance between two scanners
        transforms: Scan-to-global transform per scan id
    """

    beacons: np.ndarray
    scanner_positions: Dict[int, Point3D]
    max_manhattan_distance: int
    transforms: Dict[int, Transform] = field(default_factory=dict, repr=False)

    @property
    def beacon_count(self) -> int:
        return int(len(self.beacons))


def global_beacons(scans: Sequence[Scan], transforms: Mapping[int, Transform]) -> np.ndarray:
    """
    Transform every scan into the global frame and deduplicate.

    Raises:
        KeyError: If a scan has no transform
    """
    chunks = []
    for scan in scans:
        if scan.scan_id not in transforms:
            raise KeyError(f"Scan {scan.scan_id} has no resolved transform")
        chunks.append(transforms[scan.scan_id].apply(scan.points))
    if not chunks:
        return np.empty((0, 3), dtype=np.int64)
    return np.unique(np.concatenate(chunks, axis=0), axis=0)


def scanner_positions(transforms: Mapping[int, Transform]) -> Dict[int, Point3D]:
    return {scan_id: transforms[scan_id].position for scan_id in sorted(transforms)}


def max_manhattan_distance(positions: Sequence[Point3D]) -> int:
    """Largest L1 distance over all pairs; 0 for fewer than two positions."""
    if len(positions) < 2:
        return 0
    P = np.asarray(positions, dtype=np.int64)
    return int(np.abs(P[:, None, :] - P[None, :, :]).sum(axis=2).max())


def aggregate(scans: Sequence[Scan], transforms: Mapping[int, Transform]) -> LocalizationResult:
    positions = scanner_positions({s.scan_id: transforms[s.scan_id] for s in scans})
    return LocalizationResult(
        beacons=global_beacons(scans, transforms),
        scanner_positions=positions,
        max_manhattan_distance=max_manhattan_distance(list(positions.values())),
        transforms={s.scan_id: transforms[s.scan_id] for s in scans},
    )
