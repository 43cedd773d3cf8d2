"""
Tests for distance fingerprints and the overlap candidate filter.
"""

from collections import Counter

import numpy as np
import pytest

from beacon_scanner.alignment.candidates import (
    find_overlap_candidates,
    required_shared_distances,
    shared_distance_count,
)
from beacon_scanner.alignment.fingerprint import (
    fingerprint,
    pairwise_squared_distances,
    point_signatures,
    shared_signature_count,
    squared_distance,
)
from beacon_scanner.geometry.rotations import ROTATIONS, apply_rotation


def _random_points(n: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(-1000, 1001, size=(n, 3))


def test_squared_distance_exact():
    assert squared_distance((0, 0, 0), (1, 2, 2)) == 9
    assert squared_distance((-5, 3, 1), (-5, 3, 1)) == 0


def test_pairwise_matrix_is_symmetric():
    pts = _random_points(8, seed=0)
    d = pairwise_squared_distances(pts)
    assert d.shape == (8, 8)
    assert np.array_equal(d, d.T)
    assert (np.diag(d) == 0).all()
    assert d[1, 4] == squared_distance(pts[1], pts[4])


def test_fingerprint_contains_every_pair():
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 3, 0], [0, 0, 10]])
    assert fingerprint(pts) == frozenset({1, 9, 100, 10, 101, 109})


@pytest.mark.parametrize("n", [0, 1])
def test_fingerprint_empty_for_fewer_than_two_points(n):
    pts = np.zeros((n, 3), dtype=np.int64)
    assert fingerprint(pts) == frozenset()


def test_fingerprint_invariant_under_rotation_and_translation():
    pts = _random_points(20, seed=1)
    fp = fingerprint(pts)
    t = np.array([123, -456, 789])
    for r in ROTATIONS:
        moved = apply_rotation(r, pts) + t
        assert fingerprint(moved) == fp


def test_point_signatures_exclude_self_distance():
    pts = np.array([[0, 0, 0], [1, 0, 0], [0, 2, 0]])
    sigs = point_signatures(pts)
    assert sigs[0] == Counter({1: 1, 4: 1})
    assert sigs[1] == Counter({1: 1, 5: 1})
    assert sigs[2] == Counter({4: 1, 5: 1})


def test_point_signatures_count_repeated_distances():
    # Centre of a square: four neighbours at the same distance
    pts = np.array([[0, 0, 0], [1, 0, 0], [-1, 0, 0], [0, 1, 0], [0, -1, 0]])
    sigs = point_signatures(pts)
    assert sigs[0] == Counter({1: 4})
    assert sum(sigs[1].values()) == 4


def test_shared_signature_count_is_multiset_intersection():
    a = Counter({2: 4, 6: 2, 8: 1})
    b = Counter({2: 3, 6: 5, 9: 1})
    assert shared_signature_count(a, b) == 5


def test_required_shared_distances():
    assert required_shared_distances(12) == 66
    assert required_shared_distances(2) == 1


def test_shared_distance_count():
    assert shared_distance_count(frozenset({1, 2, 3}), frozenset({2, 3, 4})) == 2


class TestOverlapCandidates:
    """Candidate filter on the canonical five-scanner report."""

    def test_reports_exactly_known_overlaps(self, example_scanners):
        fps = [fingerprint(s) for s in example_scanners]
        assert find_overlap_candidates(fps) == [(0, 1), (1, 3), (1, 4), (2, 4)]

    def test_empty_and_singleton_scanners_never_candidates(self, example_scanners):
        scanners = list(example_scanners) + [np.zeros((0, 3), dtype=np.int64), np.array([[1, 2, 3]])]
        fps = [fingerprint(s) for s in scanners]
        candidates = find_overlap_candidates(fps)
        assert all(5 not in pair and 6 not in pair for pair in candidates)

    def test_shared_subset_detected(self):
        shared = _random_points(12, seed=2)
        a = np.vstack([shared, _random_points(10, seed=3)])
        b = np.vstack([apply_rotation(ROTATIONS[7], shared) + 50, _random_points(10, seed=4)])
        c = _random_points(22, seed=5)
        fps = [fingerprint(a), fingerprint(b), fingerprint(c)]
        assert find_overlap_candidates(fps) == [(0, 1)]

    def test_no_scanners(self):
        assert find_overlap_candidates([]) == []
