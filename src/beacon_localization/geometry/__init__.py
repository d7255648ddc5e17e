"""
Geometry Module

Integer geometry shared by the alignment pipeline:
- The 24 axis-aligned scanner orientations
- Rigid transforms between scanner frames
- The scan data model
"""

from .orientation import (
    ROTATIONS,
    N_ROTATIONS,
    IDENTITY_INDEX,
    rotation_index,
    compose_rotations,
    inverse_rotation,
    rotate_points,
)
from .transform import Transform
from .scan import Scan, Point3D

__all__ = [
    "ROTATIONS",
    "N_ROTATIONS",
    "IDENTITY_INDEX",
    "rotation_index",
    "compose_rotations",
    "inverse_rotation",
    "rotate_points",
    "Transform",
    "Scan",
    "Point3D",
]
