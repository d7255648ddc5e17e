"""
Beacon Localization Package

A Python package for reconstructing a beacon map from overlapping 3D scans.
Each scanner reports beacons in its own frame, with an unknown position and
one of 24 axis-aligned orientations. Scans that share at least 12 beacons are
aligned pairwise by orientation search and translation voting, and the
pairwise transforms are chained into the frame of scanner 0.
"""

__version__ = "0.1.0"

from .exceptions import BeaconLocalizationError, UnalignableScanError, MalformedInputError
from .geometry import *
from .alignment import *
from .reconstruction import *
from .pipeline import *
from .preprocessing import *

__all__ = [
    "geometry",
    "alignment",
    "reconstruction",
    "pipeline",
    "preprocessing",
    "utils",
    "acceleration",
    "BeaconLocalizationError",
    "UnalignableScanError",
    "MalformedInputError",
]
