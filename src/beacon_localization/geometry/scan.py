"""
Scan data model.

A scan is the list of beacon positions one scanner reports, in that scanner's
own coordinate frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

import numpy as np

Point3D = Tuple[int, int, int]


@dataclass(frozen=True, eq=False)
class Scan:
    scan_id: int
    points: np.ndarray

    def __post_init__(self) -> None:
        pts = np.array(self.points, dtype=np.int64)
        if pts.size == 0:
            pts = pts.reshape(0, 3)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError(f"Scan {self.scan_id}: expected Nx3 array, got shape {pts.shape}")
        if len(pts) > 1 and len(np.unique(pts, axis=0)) != len(pts):
            raise ValueError(f"Scan {self.scan_id}: beacon coordinates must be distinct")
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)

    def __len__(self) -> int:
        return len(self.points)

    def beacon_set(self) -> FrozenSet[Point3D]:
        return frozenset(tuple(int(v) for v in row) for row in self.points)

    def __repr__(self) -> str:
        return f"Scan(scan_id={self.scan_id}, n_points={len(self)})"
