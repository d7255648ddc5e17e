"""
Tests for pairwise scan alignment by orientation search and translation voting.
"""

import numpy as np
import pytest

from beacon_localization.alignment import MIN_OVERLAP, ScanAligner, align_pair
from beacon_localization.geometry import IDENTITY_INDEX, Scan, Transform
from beacon_localization.reconstruction import aggregate

from conftest import distinct_points


def _two_scan_scenario(rotation: int, n_shared: int = 12):
    rng = np.random.default_rng(rotation)
    pts = distinct_points(rng, n_shared + 2)
    shared, extra_a, extra_b = pts[:n_shared], pts[n_shared:n_shared + 1], pts[n_shared + 1:]
    true_t = Transform.from_rotation_index(rotation, (5, 6, -4))
    a = Scan(0, np.vstack([shared, extra_a]))
    b_points = true_t.inverse().apply(np.vstack([shared, extra_b]))
    # Shuffle so correspondences are not index-aligned
    b = Scan(1, b_points[rng.permutation(len(b_points))])
    return a, b, true_t


class TestScanAligner:
    """Test suite for ScanAligner."""

    @pytest.mark.parametrize("rotation", [1, 9, 14, 23])
    def test_recovers_known_rotation_and_translation(self, rotation):
        assert rotation != IDENTITY_INDEX
        a, b, true_t = _two_scan_scenario(rotation)

        alignment = ScanAligner().align(a, b)

        assert alignment is not None
        assert alignment.transform == true_t
        assert alignment.transform.position == (5, 6, -4)
        assert alignment.votes == 12
        assert (alignment.reference_id, alignment.candidate_id) == (0, 1)

    def test_correspondences_map_exactly(self):
        a, b, _ = _two_scan_scenario(11)
        alignment = ScanAligner().align(a, b)
        ia = [p for p, _ in alignment.correspondences]
        ib = [q for _, q in alignment.correspondences]
        assert len(set(ia)) == len(ia) == 12
        np.testing.assert_array_equal(alignment.transform.apply(b.points[ib]), a.points[ia])

    def test_two_scan_beacon_count(self):
        a, b, _ = _two_scan_scenario(6)
        alignment = ScanAligner().align(a, b)
        result = aggregate([a, b], {0: Transform.identity(), 1: alignment.transform})
        assert result.beacon_count == len(a) + len(b) - 12
        assert result.scanner_positions[1] == (5, 6, -4)

    def test_eleven_shared_is_not_a_match(self):
        a, b, _ = _two_scan_scenario(4, n_shared=11)
        assert ScanAligner().align(a, b) is None

    def test_too_few_points_short_circuits(self):
        a, b, _ = _two_scan_scenario(4)
        tiny = Scan(2, b.points[:MIN_OVERLAP - 1])
        assert ScanAligner().align(a, tiny) is None
        assert ScanAligner().align(tiny, a) is None

    def test_inverse_alignment(self):
        a, b, true_t = _two_scan_scenario(20)
        alignment = ScanAligner().align(a, b)
        back = alignment.inverse()
        assert (back.reference_id, back.candidate_id) == (1, 0)
        assert back.transform == true_t.inverse()
        ib = [q for q, _ in back.correspondences]
        ia = [p for _, p in back.correspondences]
        np.testing.assert_array_equal(back.transform.apply(a.points[ia]), b.points[ib])

    def test_custom_threshold(self):
        a, b, true_t = _two_scan_scenario(2, n_shared=6)
        assert ScanAligner(min_overlap=6).align(a, b).transform == true_t
        with pytest.raises(ValueError):
            ScanAligner(min_overlap=0)

    def test_puzzle_example_scanner_1(self, example_scans):
        alignment = ScanAligner().align(example_scans[0], example_scans[1])
        assert alignment is not None
        assert alignment.transform.position == (68, -1246, -43)
        assert alignment.votes >= 12
        matched = {tuple(example_scans[0].points[i]) for i, _ in alignment.correspondences}
        assert (-618, -824, -621) in matched
        assert (459, -707, 401) in matched

    def test_worker_function(self, example_scans):
        alignment = align_pair((example_scans[0], example_scans[1]), min_overlap=12)
        assert alignment.transform.position == (68, -1246, -43)

    def test_repeated_beacon_cannot_pad_the_vote(self):
        """11 shared beacons plus a repeated one never reach 12 distinct correspondences."""
        rng = np.random.default_rng(7)
        pts = distinct_points(rng, 13)
        shared = pts[:11]
        a = Scan(0, np.vstack([shared, pts[11:12]]))
        true_t = Transform.from_rotation_index(7, (5, 6, -4))
        padded = true_t.inverse().apply(np.vstack([shared, shared[:1], pts[12:]]))
        with pytest.raises(ValueError, match="distinct"):
            Scan(1, padded)
        b = Scan(1, np.unique(padded, axis=0))
        assert ScanAligner().align(a, b) is None

    def test_alignment_is_hashable(self):
        a, b, _ = _two_scan_scenario(3)
        alignment = ScanAligner().align(a, b)
        assert {alignment: "edge"}[alignment] == "edge"
