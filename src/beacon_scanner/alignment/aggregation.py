"""
Result aggregation: global beacon map and scanner separation.
"""

from __future__ import annotations

from itertools import combinations
from typing import Sequence

import numpy as np

from .transform_solver import RigidTransform


def merge_beacons(scanners: Sequence[np.ndarray], poses: Sequence[RigidTransform]) -> np.ndarray:
    """
    Transform every scanner's points into the root frame and deduplicate.

    Args:
        scanners: Per-scanner (N, 3) point lists in local frames
        poses: Pose of each scanner, indexed like `scanners`

    Returns:
        (M, 3) int64 array of unique beacons, sorted lexicographically
    """
    if len(scanners) != len(poses):
        raise ValueError(f"Got {len(scanners)} scanners but {len(poses)} poses")

    placed = [pose.apply(np.asarray(points, dtype=np.int64).reshape(-1, 3)) for points, pose in zip(scanners, poses)]
    if not placed:
        return np.empty((0, 3), dtype=np.int64)
    return np.unique(np.vstack(placed), axis=0)


def manhattan_distance(p1, p2) -> int:
    return int(np.abs(np.asarray(p1, dtype=np.int64) - np.asarray(p2, dtype=np.int64)).sum())


def max_scanner_separation_from_poses(poses: Sequence[RigidTransform]) -> int:
    """Largest Manhattan distance between any two scanner positions (0 for fewer than two)."""
    return max(
        (manhattan_distance(a.translation, b.translation) for a, b in combinations(poses, 2)),
        default=0,
    )
