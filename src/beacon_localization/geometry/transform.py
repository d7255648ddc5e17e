"""
Rigid Transforms Between Scanner Frames

A transform maps points from one scanner's local frame into another frame:

    target = R @ local + t

where R is one of the 24 axis-aligned rotations and t is an integer
translation. Because every component is an integer, applying, composing and
inverting transforms is exact and round-trips bit-for-bit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .orientation import IDENTITY_INDEX, ROTATIONS, rotation_index


def _frozen_int_array(values, shape: Tuple[int, ...], name: str) -> np.ndarray:
    arr = np.array(values, dtype=np.int64)
    if arr.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Transform:
    """Rotation plus translation between two scanner frames.

    Attributes:
        rotation: 3x3 signed permutation matrix (determinant +1)
        translation: Offset added after rotating. It is also where the source
            frame's origin lands in the target frame.

    Example:
        >>> t = Transform.from_rotation_index(IDENTITY_INDEX, (5, 6, -4))
        >>> t.apply_point((1, 1, 1))  # -> (6, 7, -3)
    """

    rotation: np.ndarray
    translation: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", _frozen_int_array(self.rotation, (3, 3), "rotation"))
        object.__setattr__(self, "translation", _frozen_int_array(self.translation, (3,), "translation"))
        # Validates membership in the rotation table
        rotation_index(self.rotation)

    @classmethod
    def identity(cls) -> "Transform":
        return cls(ROTATIONS[IDENTITY_INDEX], (0, 0, 0))

    @classmethod
    def from_rotation_index(cls, index: int, translation=(0, 0, 0)) -> "Transform":
        return cls(ROTATIONS[index], translation)

    @property
    def rotation_index(self) -> int:
        return rotation_index(self.rotation)

    @property
    def position(self) -> Tuple[int, int, int]:
        """Source frame origin expressed in the target frame."""
        x, y, z = (int(v) for v in self.translation)
        return (x, y, z)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """
        Map an (N, 3) array of points into the target frame.

        Args:
            points: Nx3 integer array in the source frame

        Returns:
            Nx3 int64 array in the target frame
        """
        pts = np.asarray(points, dtype=np.int64)
        if pts.size == 0:
            return pts.reshape(0, 3)
        return pts @ self.rotation.T + self.translation

    def apply_point(self, point) -> Tuple[int, int, int]:
        x, y, z = (int(v) for v in self.rotation @ np.asarray(point, dtype=np.int64) + self.translation)
        return (x, y, z)

    def compose(self, inner: "Transform") -> "Transform":
        """
        Return the single transform equivalent to applying ``inner`` and then ``self``.

        rotation = R_self @ R_inner
        translation = R_self @ t_inner + t_self
        """
        return Transform(
            self.rotation @ inner.rotation,
            self.rotation @ inner.translation + self.translation,
        )

    def inverse(self) -> "Transform":
        r_inv = self.rotation.T
        return Transform(r_inv, -(r_inv @ self.translation))

    def as_matrix(self) -> np.ndarray:
        """4x4 homogeneous matrix (rotation in the upper-left block, translation in the last column)."""
        T = np.eye(4, dtype=np.int64)
        T[:3, :3] = self.rotation
        T[:3, 3] = self.translation
        return T

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(
            np.array_equal(self.rotation, other.rotation)
            and np.array_equal(self.translation, other.translation)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Transform(rotation={self.rotation.tolist()}, translation={self.position})"
