"""
Pairwise Distance Fingerprints

The fingerprint of a point list is the set of squared Euclidean distances
between every unordered pair of its points. It does not change under any of
the table rotations or any translation, so two scanners that observe the same
beacons share the corresponding part of their fingerprints regardless of how
their local frames are oriented.
"""

from __future__ import annotations

from collections import Counter
from typing import FrozenSet, List

import numpy as np


def squared_distance(p1, p2) -> int:
    d = np.asarray(p1, dtype=np.int64) - np.asarray(p2, dtype=np.int64)
    return int(d @ d)


def pairwise_squared_distances(points) -> np.ndarray:
    """
    Squared distances between all points of a list.

    Args:
        points: (N, 3) integer point list

    Returns:
        (N, N) int64 matrix with zeros on the diagonal
    """
    pts = np.asarray(points, dtype=np.int64).reshape(-1, 3)
    diff = pts[:, None, :] - pts[None, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def fingerprint(points) -> FrozenSet[int]:
    """
    Set of squared distances over all unordered point pairs.

    Lists with fewer than two points have an empty fingerprint.
    """
    dists = pairwise_squared_distances(points)
    n = len(dists)
    if n < 2:
        return frozenset()
    iu = np.triu_indices(n, k=1)
    return frozenset(dists[iu].tolist())


def point_signatures(points) -> List[Counter]:
    """
    Per-point fingerprints: for every point, the multiset of squared
    distances to each other point of the same list.

    Repeated distances are counted, so the same beacon seen by two scanners
    that share k beacons has at least k - 1 distances in common between its
    two signatures, however regular the beacon layout is.
    """
    dists = pairwise_squared_distances(points)
    signatures = []
    for i, row in enumerate(dists):
        signatures.append(Counter(np.delete(row, i).tolist()))
    return signatures


def shared_signature_count(sig_a: Counter, sig_b: Counter) -> int:
    """Size of the multiset intersection of two point signatures."""
    return sum((sig_a & sig_b).values())
