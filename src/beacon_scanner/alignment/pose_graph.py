"""
Transform Graph and Pose Composition

Scanner-to-scanner transforms form an undirected graph over scanner ids.
Walking the graph breadth-first from a root scanner and composing transforms
along the way yields every scanner's pose in the root frame.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..utils.logging import setup_logger
from .transform_solver import RigidTransform, solve_transform

if TYPE_CHECKING:
    from ..acceleration.parallel_executor import PairParallelExecutor

logger = setup_logger(__name__)


class DisconnectedScannerError(ValueError):
    """Raised when some scanners cannot be reached from the root scanner."""

    def __init__(self, unreachable: Sequence[int], root: int = 0):
        self.unreachable = sorted(unreachable)
        self.root = root
        super().__init__(
            f"{len(self.unreachable)} scanner(s) not connected to root scanner {root}: "
            f"{self.unreachable}"
        )


class TransformGraph:
    """
    Undirected graph of relative transforms.

    An edge i -> j holds the transform mapping scanner j's frame into
    scanner i's frame; the reverse direction holds its inverse.
    """

    def __init__(self, n_scanners: int):
        if n_scanners < 0:
            raise ValueError(f"n_scanners must be non-negative, got {n_scanners}")
        self.n_scanners = n_scanners
        self._adjacency: List[Dict[int, RigidTransform]] = [dict() for _ in range(n_scanners)]

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self.n_scanners:
            raise ValueError(f"Scanner index {i} out of range [0, {self.n_scanners})")

    def add_edge(self, i: int, j: int, transform: RigidTransform) -> None:
        """Store `transform` (frame j -> frame i) and its inverse (frame i -> frame j)."""
        self._check_index(i)
        self._check_index(j)
        if i == j:
            raise ValueError(f"Self-loop on scanner {i}")
        self._adjacency[i][j] = transform
        self._adjacency[j][i] = transform.inverse()

    def neighbors(self, i: int) -> Dict[int, RigidTransform]:
        self._check_index(i)
        return self._adjacency[i]

    def has_edge(self, i: int, j: int) -> bool:
        return j in self.neighbors(i)

    @property
    def edges(self) -> List[Tuple[int, int]]:
        return [(i, j) for i, adj in enumerate(self._adjacency) for j in adj if i < j]

    @property
    def n_edges(self) -> int:
        return len(self.edges)


def _solve_pair(pair: Tuple[int, int], scanners: Sequence[np.ndarray], min_overlap: int) -> Optional[RigidTransform]:
    i, j = pair
    return solve_transform(scanners[i], scanners[j], min_overlap=min_overlap)


def build_transform_graph(
    scanners: Sequence[np.ndarray],
    candidates: Sequence[Tuple[int, int]],
    min_overlap: int = 12,
    executor: Optional["PairParallelExecutor"] = None,
) -> TransformGraph:
    """
    Solve every candidate pair and collect the successful transforms.

    All solves complete before the graph is returned. Candidate pairs with no
    exact alignment are logged and left without an edge.

    Args:
        scanners: Per-scanner (N, 3) point lists
        candidates: (i, j) pairs from the overlap candidate filter
        min_overlap: Coincident points required to accept a transform
        executor: Optional parallel executor for the per-pair solves

    Returns:
        TransformGraph over all scanners
    """
    pairs = list(candidates)
    if executor is None:
        transforms = [_solve_pair(pair, scanners, min_overlap) for pair in pairs]
    else:
        transforms = executor.map_pairs(
            pairs,
            worker_fn=_solve_pair,
            worker_kwargs={"scanners": list(scanners), "min_overlap": min_overlap},
        )

    graph = TransformGraph(len(scanners))
    for (i, j), transform in zip(pairs, transforms):
        if transform is None:
            logger.warning(f"No exact alignment for candidate pair ({i}, {j}); skipping")
            continue
        logger.debug(f"Aligned scanner {j} to scanner {i}: {transform}")
        graph.add_edge(i, j, transform)

    logger.info(f"Transform graph: {graph.n_scanners} scanners, {graph.n_edges} edges")
    return graph


def compose_poses(graph: TransformGraph, root: int = 0) -> List[RigidTransform]:
    """
    Compute every scanner's pose in the root frame.

    The pose table is filled breadth-first; each entry is written once, when
    the scanner is first reached, and later paths to it are ignored.

    Args:
        graph: Transform graph
        root: Scanner whose frame becomes the global frame

    Returns:
        List of poses indexed by scanner id; the root pose is the identity

    Raises:
        ValueError: If root is out of range
        DisconnectedScannerError: If any scanner is unreachable from root
    """
    n = graph.n_scanners
    if not 0 <= root < n:
        raise ValueError(f"Root scanner {root} out of range [0, {n})")

    poses: List[Optional[RigidTransform]] = [None] * n
    poses[root] = RigidTransform.identity()
    queue = deque([root])
    while queue:
        i = queue.popleft()
        for j, edge in graph.neighbors(i).items():
            if poses[j] is not None:
                continue
            poses[j] = poses[i].compose(edge)
            queue.append(j)

    unreachable = [i for i, pose in enumerate(poses) if pose is None]
    if unreachable:
        logger.error(f"Scanners unreachable from root {root}: {unreachable}")
        raise DisconnectedScannerError(unreachable, root=root)

    return poses
