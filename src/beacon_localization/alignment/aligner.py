"""
Pairwise Scan Alignment

Finds the rotation and translation that place a candidate scan in a reference
scan's frame, using translation voting:

1. Rotate the candidate by each of the 24 orientations
2. For every (reference point, rotated candidate point) pair, the offset
   between them is a candidate scanner position
3. With the correct rotation, every shared beacon votes for the same offset;
   wrong rotations spread their votes out

An offset with at least ``min_overlap`` votes confirms the alignment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..geometry.orientation import N_ROTATIONS, ROTATIONS
from ..geometry.scan import Scan
from ..geometry.transform import Transform
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

# Puzzle-defined number of shared beacons that proves two scans overlap
MIN_OVERLAP = 12


@dataclass(frozen=True, eq=False)
class Alignment:
    """
    Confirmed alignment edge between two scans.

    ``transform`` maps points from the candidate scan's frame into the
    reference scan's frame. ``correspondences`` holds (reference index,
    candidate index) pairs that land on the same beacon.
    """

    reference_id: int
    candidate_id: int
    transform: Transform
    correspondences: Tuple[Tuple[int, int], ...]

    @property
    def votes(self) -> int:
        return len(self.correspondences)

    def inverse(self) -> "Alignment":
        return Alignment(
            reference_id=self.candidate_id,
            candidate_id=self.reference_id,
            transform=self.transform.inverse(),
            correspondences=tuple(sorted((b, a) for a, b in self.correspondences)),
        )


class ScanAligner:
    """
    Brute-force orientation search with translation voting.

    Cost is O(24 * |A| * |B|) per attempted pair; callers prune pairs with
    fingerprints first.
    """

    def __init__(self, min_overlap: int = MIN_OVERLAP):
        """
        Args:
            min_overlap: Shared beacons needed to confirm a match.
        """
        if min_overlap < 1:
            raise ValueError(f"min_overlap must be positive, got {min_overlap}")
        self.min_overlap = min_overlap

    def align(self, reference: Scan, candidate: Scan) -> Optional[Alignment]:
        """
        Search for the transform mapping ``candidate`` into ``reference``'s frame.

        Args:
            reference: Scan whose frame is the target
            candidate: Scan in its own local frame

        Returns:
            Alignment, or None when no orientation reaches the overlap threshold
        """
        if len(reference) < self.min_overlap or len(candidate) < self.min_overlap:
            logger.debug(
                "Scans %d/%d have too few beacons (%d, %d) to reach %d shared; skipping.",
                reference.scan_id,
                candidate.scan_id,
                len(reference),
                len(candidate),
                self.min_overlap,
            )
            return None

        ref_pts = reference.points
        for r_idx in range(N_ROTATIONS):
            rotated = candidate.points @ ROTATIONS[r_idx].T
            offsets = (ref_pts[:, None, :] - rotated[None, :, :]).reshape(-1, 3)
            # Lexicographically sorted, so ties resolve deterministically
            uniq, counts = np.unique(offsets, axis=0, return_counts=True)
            hits = np.flatnonzero(counts >= self.min_overlap)
            if len(hits) == 0:
                continue
            if len(hits) > 1:
                logger.warning(
                    "Scans %d/%d: %d translations reach the threshold under rotation %d; "
                    "taking the one with most votes.",
                    reference.scan_id,
                    candidate.scan_id,
                    len(hits),
                    r_idx,
                )
            best = hits[np.argmax(counts[hits])]
            translation = uniq[best]

            matched = np.all(offsets == translation, axis=1).reshape(len(ref_pts), len(rotated))
            ia, ib = np.nonzero(matched)
            correspondences = tuple((int(a), int(b)) for a, b in zip(ia, ib))

            transform = Transform.from_rotation_index(r_idx, translation)
            logger.debug(
                "Scan %d aligned to scan %d: rotation %d, position %s, %d shared beacons.",
                candidate.scan_id,
                reference.scan_id,
                r_idx,
                transform.position,
                len(correspondences),
            )
            return Alignment(reference.scan_id, candidate.scan_id, transform, correspondences)

        logger.debug(
            "No overlap between scans %d and %d.",
            reference.scan_id,
            candidate.scan_id,
        )
        return None


def align_pair(pair: Tuple[Scan, Scan], min_overlap: int = MIN_OVERLAP) -> Optional[Alignment]:
    """Module-level worker for process pools."""
    reference, candidate = pair
    return ScanAligner(min_overlap=min_overlap).align(reference, candidate)
