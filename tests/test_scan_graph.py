"""
Tests for scan graph assembly and transform composition.
"""

import numpy as np
import pytest

from beacon_localization.acceleration import PairParallelExecutor
from beacon_localization.alignment import FingerprintIndex, GraphStatus, ScanGraph
from beacon_localization.exceptions import UnalignableScanError
from beacon_localization.geometry import Scan, Transform
from beacon_localization.reconstruction import aggregate

from conftest import EXAMPLE_POSITIONS, distinct_points, scans_from_layout


class TestScanGraph:
    """Test suite for ScanGraph."""

    def test_puzzle_example_positions(self, example_scans):
        graph = ScanGraph(example_scans, fingerprints=FingerprintIndex().build(example_scans))
        transforms = graph.resolve()

        assert graph.status is GraphStatus.SOLVED
        assert {i: t.position for i, t in transforms.items()} == EXAMPLE_POSITIONS
        assert len(graph.edges) == 4

    def test_chain_resolved_through_middle_scan(self, chain_layout):
        _, scans, true_transforms = chain_layout
        graph = ScanGraph(scans, fingerprints=FingerprintIndex().build(scans))
        transforms = graph.resolve()

        for i, t in enumerate(true_transforms):
            assert transforms[i] == t
        assert graph.path_to_reference(2) == [2, 1, 0]
        assert graph.neighbours(1) == [0, 2]

        # C's position is B's transform applied to C's position in B's frame
        edge_bc = next(e for e in graph.edges if e.candidate_id == 2)
        assert edge_bc.reference_id == 1
        assert transforms[2].position == transforms[1].apply_point(edge_bc.transform.position)

    def test_chain_without_fingerprints(self, chain_layout):
        _, scans, true_transforms = chain_layout
        graph = ScanGraph(scans)
        transforms = graph.resolve()
        assert transforms[2] == true_transforms[2]
        assert graph.pruned == 0

    def test_eleven_shared_beacons_stays_stuck(self):
        rng = np.random.default_rng(5)
        points = distinct_points(rng, 30)
        scans = scans_from_layout(
            points,
            [range(0, 15), range(4, 30)],
            [Transform.identity(), Transform.from_rotation_index(8, (50, 60, 70))],
        )
        graph = ScanGraph(scans, fingerprints=FingerprintIndex().build(scans))
        with pytest.raises(UnalignableScanError) as exc_info:
            graph.resolve()

        assert exc_info.value.unresolved == (1,)
        assert exc_info.value.resolved == (0,)
        assert graph.status is GraphStatus.STUCK
        assert 1 not in graph.transforms

    def test_traversal_order_does_not_change_result(self, example_scans):
        results = []
        for traversal in ("breadth_first", "depth_first"):
            graph = ScanGraph(example_scans, traversal=traversal)
            results.append(aggregate(example_scans, graph.resolve()))

        np.testing.assert_array_equal(results[0].beacons, results[1].beacons)
        assert results[0].scanner_positions == results[1].scanner_positions

    def test_parallel_matches_sequential(self, example_scans):
        sequential = ScanGraph(example_scans).resolve()
        parallel = ScanGraph(example_scans, executor=PairParallelExecutor(n_workers=2)).resolve()
        assert dict(sequential) == dict(parallel)

    def test_resolved_transforms_are_not_replaced(self, example_scans):
        graph = ScanGraph(example_scans)
        first = dict(graph.resolve())
        again = graph.resolve()
        for i, t in first.items():
            assert again[i] is t

    def test_transforms_view_is_read_only(self, example_scans):
        graph = ScanGraph(example_scans)
        with pytest.raises(TypeError):
            graph.transforms[3] = Transform.identity()

    def test_single_scan_is_solved(self):
        scan = Scan(0, [[1, 2, 3]])
        graph = ScanGraph([scan])
        assert dict(graph.resolve()) == {0: Transform.identity()}
        assert graph.attempts == 0

    def test_invalid_construction(self, example_scans):
        with pytest.raises(ValueError):
            ScanGraph([example_scans[0], example_scans[0]])
        with pytest.raises(ValueError):
            ScanGraph(example_scans, reference_id=9)
        with pytest.raises(ValueError):
            ScanGraph(example_scans, traversal="random")

    def test_path_to_unresolved_scan(self, example_scans):
        graph = ScanGraph(example_scans)
        with pytest.raises(KeyError):
            graph.path_to_reference(4)
