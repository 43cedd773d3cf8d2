"""
End-to-end tests for scanner alignment and result aggregation.
"""

import numpy as np
import pytest

from beacon_scanner.alignment import (
    AlignmentResult,
    DisconnectedScannerError,
    ScannerAligner,
    count_unique_beacons,
    max_scanner_separation,
)
from beacon_scanner.alignment.aggregation import (
    manhattan_distance,
    max_scanner_separation_from_poses,
    merge_beacons,
)
from beacon_scanner.alignment.transform_solver import RigidTransform
from beacon_scanner.geometry.rotations import ROTATIONS
from beacon_scanner.utils.config import AppConfig


def test_manhattan_distance():
    assert manhattan_distance((1105, -1205, 1229), (-92, -2380, -20)) == 3621


def test_merge_beacons_deduplicates():
    s0 = np.array([[0, 0, 0], [1, 2, 3]])
    s1 = np.array([[-1, -2, -3], [5, 5, 5]])
    poses = [RigidTransform.identity(), RigidTransform(ROTATIONS[0], [2, 4, 6])]
    merged = merge_beacons([s0, s1], poses)
    assert merged.tolist() == [[0, 0, 0], [1, 2, 3], [7, 9, 11]]


def test_merge_beacons_length_mismatch():
    with pytest.raises(ValueError):
        merge_beacons([np.zeros((1, 3))], [])


def test_separation_of_single_scanner_is_zero():
    assert max_scanner_separation_from_poses([RigidTransform.identity()]) == 0


def test_count_unique_beacons_example(example_scanners):
    assert count_unique_beacons(example_scanners) == 79


def test_max_scanner_separation_example(example_scanners):
    assert max_scanner_separation(example_scanners) == 3621


def test_accepts_plain_point_lists(example_scanners):
    as_lists = [[tuple(p) for p in s.tolist()] for s in example_scanners]
    assert count_unique_beacons(as_lists) == 79


class TestScannerAligner:

    def test_align_example(self, example_scanners):
        result = ScannerAligner().align(example_scanners)

        assert isinstance(result, AlignmentResult)
        assert result.n_beacons == 79
        assert result.max_scanner_separation == 3621
        assert result.candidates == [(0, 1), (1, 3), (1, 4), (2, 4)]
        assert result.scanner_positions.tolist()[1] == [68, -1246, -43]
        # Beacons seen by scanners 0 and 1 in the root frame
        beacons = {tuple(b) for b in result.beacons.tolist()}
        assert (-618, -824, -621) in beacons
        assert (459, -707, 401) in beacons

    def test_answers_independent_of_root(self, example_scanners):
        result = ScannerAligner(root=3).align(example_scanners)
        assert result.n_beacons == 79
        assert result.max_scanner_separation == 3621
        assert result.poses[3] == RigidTransform.identity()

    def test_disconnected_scanner_is_fatal(self, example_scanners):
        scanners = list(example_scanners) + [np.zeros((0, 3), dtype=np.int64), np.array([[1, 2, 3]])]
        with pytest.raises(DisconnectedScannerError) as excinfo:
            ScannerAligner().align(scanners)
        assert excinfo.value.unreachable == [5, 6]

    def test_single_scanner(self):
        result = ScannerAligner().align([np.array([[1, 2, 3], [1, 2, 3], [4, 5, 6]])])
        assert result.n_beacons == 2
        assert result.max_scanner_separation == 0

    def test_rejects_empty_input(self):
        with pytest.raises(ValueError):
            ScannerAligner().align([])

    def test_rejects_wrong_arity(self):
        with pytest.raises(ValueError):
            ScannerAligner().align([np.array([[1, 2], [3, 4]])])

    def test_rejects_tiny_min_overlap(self):
        with pytest.raises(ValueError):
            ScannerAligner(min_overlap=1)

    def test_from_config(self):
        cfg = AppConfig()
        cfg.alignment.min_overlap = 10
        cfg.alignment.root_scanner = 2
        cfg.parallel.enabled = True
        cfg.parallel.n_workers = 3
        aligner = ScannerAligner.from_config(cfg)
        assert aligner.min_overlap == 10
        assert aligner.root == 2
        assert aligner.parallel is True
        assert aligner.n_workers == 3

    def test_parallel_matches_sequential(self, example_scanners):
        result = ScannerAligner(parallel=True, n_workers=2).align(example_scanners)
        assert result.n_beacons == 79
        assert result.max_scanner_separation == 3621
