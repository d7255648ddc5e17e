"""
Shared fixtures: the five-scanner puzzle example and synthetic scan layouts
built from known scan-to-global transforms.
"""

from pathlib import Path

import numpy as np
import pytest

from beacon_localization.geometry import Scan, Transform
from beacon_localization.preprocessing import parse_scans

DATA_DIR = Path(__file__).parent / "data"

EXAMPLE_POSITIONS = {
    0: (0, 0, 0),
    1: (68, -1246, -43),
    2: (1105, -1205, 1229),
    3: (-92, -2380, -20),
    4: (-20, -1133, 1061),
}


def distinct_points(rng: np.random.Generator, n: int, span: int = 1000) -> np.ndarray:
    pts = set()
    while len(pts) < n:
        pts.add(tuple(int(v) for v in rng.integers(-span, span + 1, size=3)))
    return np.array(sorted(pts), dtype=np.int64)


def scans_from_layout(global_points: np.ndarray, visible, transforms):
    """
    Build local-frame scans.

    Args:
        global_points: Mx3 beacons in the global frame
        visible: Per scan, the indices of global_points it observes
        transforms: Per scan, its scan-to-global Transform
    """
    scans = []
    for scan_id, (idx, t) in enumerate(zip(visible, transforms)):
        scans.append(Scan(scan_id, t.inverse().apply(global_points[list(idx)])))
    return scans


@pytest.fixture
def example_text() -> str:
    return (DATA_DIR / "example_scans.txt").read_text(encoding="utf-8")


@pytest.fixture
def example_scans(example_text):
    return parse_scans(example_text)


@pytest.fixture
def chain_layout():
    """
    Three scans A-B-C: A and B share 12 beacons, B and C share 12, A and C none.
    """
    rng = np.random.default_rng(2021)
    points = distinct_points(rng, 40)
    visible = [range(0, 15), range(3, 27), range(15, 40)]
    transforms = [
        Transform.identity(),
        Transform.from_rotation_index(5, (1000, -20, 300)),
        Transform.from_rotation_index(19, (2100, 150, -700)),
    ]
    return points, scans_from_layout(points, visible, transforms), transforms
