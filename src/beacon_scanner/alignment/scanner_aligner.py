"""
Scanner Alignment Pipeline

Runs the full flow from raw per-scanner point lists to the global beacon map:
fingerprints -> overlap candidates -> pairwise transforms -> transform graph
-> poses -> merged beacons and scanner separation.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import numpy as np

from ..acceleration.parallel_executor import PairParallelExecutor
from ..utils.logging import setup_logger
from .aggregation import max_scanner_separation_from_poses, merge_beacons
from .candidates import find_overlap_candidates
from .fingerprint import fingerprint
from .pose_graph import TransformGraph, build_transform_graph, compose_poses
from .transform_solver import RigidTransform

if TYPE_CHECKING:
    from ..utils.config import AppConfig

logger = setup_logger(__name__)


@dataclass
class AlignmentResult:
    """
    Output of a scanner alignment run.

    Attributes:
        poses: Pose of each scanner in the root frame, indexed by scanner id
        beacons: (M, 3) unique beacons in the root frame
        candidates: Scanner pairs that passed the fingerprint filter
        graph: Transform graph built from the solved candidate pairs
    """

    poses: List[RigidTransform]
    beacons: np.ndarray
    candidates: List[Tuple[int, int]]
    graph: TransformGraph

    @property
    def n_beacons(self) -> int:
        return len(self.beacons)

    @property
    def scanner_positions(self) -> np.ndarray:
        """(N, 3) scanner positions in the root frame."""
        if not self.poses:
            return np.empty((0, 3), dtype=np.int64)
        return np.vstack([pose.translation for pose in self.poses])

    @property
    def max_scanner_separation(self) -> int:
        return max_scanner_separation_from_poses(self.poses)


def normalize_scanners(scanners: Sequence) -> List[np.ndarray]:
    """
    Convert scanner point lists into (N, 3) int64 arrays.

    Raises:
        ValueError: If a point list does not consist of 3-component points
    """
    normalized = []
    for idx, points in enumerate(scanners):
        arr = np.asarray(points, dtype=np.int64)
        if arr.size == 0:
            arr = arr.reshape(0, 3)
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError(f"Scanner {idx}: expected (N, 3) points, got shape {arr.shape}")
        normalized.append(arr)
    return normalized


class ScannerAligner:
    """
    Aligns scanners with arbitrary orientations into one global frame.

    Scanners are related through pairs that share at least `min_overlap`
    beacons; each scanner's pose is composed along the overlap graph from the
    root scanner.
    """

    def __init__(
        self,
        min_overlap: int = 12,
        root: int = 0,
        parallel: bool = False,
        n_workers: Optional[int] = None,
    ):
        """
        Args:
            min_overlap: Coincident beacons required to relate two scanners
            root: Scanner whose frame becomes the global frame
            parallel: If True, distribute pair work across processes
            n_workers: Worker processes when parallel (None = cpu_count - 1)
        """
        if min_overlap < 2:
            raise ValueError(f"min_overlap must be at least 2, got {min_overlap}")
        self.min_overlap = min_overlap
        self.root = root
        self.parallel = parallel
        self.n_workers = n_workers

    @classmethod
    def from_config(cls, cfg: "AppConfig") -> "ScannerAligner":
        return cls(
            min_overlap=cfg.alignment.min_overlap,
            root=cfg.alignment.root_scanner,
            parallel=cfg.parallel.enabled,
            n_workers=cfg.parallel.n_workers,
        )

    def align(self, scanners: Sequence) -> AlignmentResult:
        """
        Align all scanners into the root scanner's frame.

        Args:
            scanners: Per-scanner point lists (array-likes of shape (N, 3))

        Returns:
            AlignmentResult

        Raises:
            ValueError: If no scanners are given or points are malformed
            DisconnectedScannerError: If some scanner shares no overlap path
                with the root scanner
        """
        if len(scanners) == 0:
            raise ValueError("No scanners to align")

        points = normalize_scanners(scanners)
        logger.info(
            f"Aligning {len(points)} scanners ({sum(len(p) for p in points)} reported beacons), "
            f"min_overlap={self.min_overlap}, root={self.root}"
        )
        start = time.time()

        executor = PairParallelExecutor(n_workers=self.n_workers) if self.parallel else None

        fingerprints = [fingerprint(p) for p in points]
        candidates = find_overlap_candidates(fingerprints, min_overlap=self.min_overlap, executor=executor)
        graph = build_transform_graph(points, candidates, min_overlap=self.min_overlap, executor=executor)
        poses = compose_poses(graph, root=self.root)
        beacons = merge_beacons(points, poses)

        logger.info(f"Alignment complete: {len(beacons)} unique beacons in {time.time() - start:.2f}s")
        return AlignmentResult(poses=poses, beacons=beacons, candidates=candidates, graph=graph)


def count_unique_beacons(scanners: Sequence, min_overlap: int = 12) -> int:
    """Number of distinct beacons once all scanners are aligned."""
    return ScannerAligner(min_overlap=min_overlap).align(scanners).n_beacons


def max_scanner_separation(scanners: Sequence, min_overlap: int = 12) -> int:
    """Largest Manhattan distance between any two aligned scanner positions."""
    return ScannerAligner(min_overlap=min_overlap).align(scanners).max_scanner_separation
