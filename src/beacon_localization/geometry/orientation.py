"""
Discrete Scanner Orientations

A scanner can face along any of the six axis directions and, for each facing,
be rotated to any of four "up" directions. These are the 24 right-angle
rotations of 3D space. Each rotation is a signed permutation matrix with
determinant +1 (mirror images are excluded).

The table is generated once at import and exposed as a read-only integer array
so the alignment inner loop can index it directly.
"""

from __future__ import annotations

from itertools import permutations, product
from typing import Dict, Tuple

import numpy as np


def _generate_rotations() -> np.ndarray:
    mats = []
    for perm in permutations(range(3)):
        for signs in product((1, -1), repeat=3):
            m = np.zeros((3, 3), dtype=np.int64)
            for row, (col, sign) in enumerate(zip(perm, signs)):
                m[row, col] = sign
            # Keep right-handed frames only
            if round(np.linalg.det(m)) == 1:
                mats.append(m)
    table = np.stack(mats)
    table.setflags(write=False)
    return table


ROTATIONS: np.ndarray = _generate_rotations()
N_ROTATIONS: int = len(ROTATIONS)

_INDEX: Dict[Tuple[int, ...], int] = {
    tuple(int(v) for v in m.ravel()): i for i, m in enumerate(ROTATIONS)
}

IDENTITY_INDEX: int = _INDEX[tuple(np.eye(3, dtype=np.int64).ravel())]


def rotation_index(matrix: np.ndarray) -> int:
    """
    Return the position of a rotation matrix in ``ROTATIONS``.

    Raises:
        ValueError: If the matrix is not one of the 24 axis-aligned rotations.
    """
    m = np.asarray(matrix)
    if m.shape != (3, 3):
        raise ValueError(f"Expected 3x3 rotation matrix, got shape {m.shape}")
    key = tuple(int(v) for v in np.rint(m).astype(np.int64).ravel())
    try:
        return _INDEX[key]
    except KeyError:
        raise ValueError(f"Not an axis-aligned rotation: {m.tolist()}") from None


def compose_rotations(outer: int, inner: int) -> int:
    """Index of the rotation that applies ``inner`` first, then ``outer``."""
    return rotation_index(ROTATIONS[outer] @ ROTATIONS[inner])


def inverse_rotation(index: int) -> int:
    # Orthogonal matrices invert by transposition
    return rotation_index(ROTATIONS[index].T)


def rotate_points(points: np.ndarray, index: int) -> np.ndarray:
    """
    Apply rotation ``index`` to an (N, 3) integer array.

    Args:
        points: Nx3 array
        index: Position in ``ROTATIONS``

    Returns:
        Rotated Nx3 int64 array
    """
    pts = np.asarray(points, dtype=np.int64)
    if pts.size == 0:
        return pts.reshape(0, 3)
    return pts @ ROTATIONS[index].T
