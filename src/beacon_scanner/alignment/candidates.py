"""
Overlap Candidate Filter

Prunes the scanner-pair search space using fingerprint intersections before
any geometric matching is attempted. Two scanners sharing k beacons share at
least C(k, 2) pairwise distances; pairs below that count cannot overlap.
"""

from __future__ import annotations

from itertools import combinations
from typing import TYPE_CHECKING, FrozenSet, List, Optional, Sequence, Tuple

from ..utils.logging import setup_logger

if TYPE_CHECKING:
    from ..acceleration.parallel_executor import PairParallelExecutor

logger = setup_logger(__name__)

ScannerPair = Tuple[int, int]


def required_shared_distances(min_overlap: int) -> int:
    """Number of pairwise distances shared by min_overlap common points."""
    return min_overlap * (min_overlap - 1) // 2


def shared_distance_count(fp_a: FrozenSet[int], fp_b: FrozenSet[int]) -> int:
    return len(fp_a & fp_b)


def _count_pair(pair: ScannerPair, fingerprints: Sequence[FrozenSet[int]]) -> int:
    i, j = pair
    return shared_distance_count(fingerprints[i], fingerprints[j])


def find_overlap_candidates(
    fingerprints: Sequence[FrozenSet[int]],
    min_overlap: int = 12,
    executor: Optional["PairParallelExecutor"] = None,
) -> List[ScannerPair]:
    """
    Find scanner pairs whose fingerprints share enough distances to overlap.

    Args:
        fingerprints: One fingerprint per scanner, indexed by scanner id
        min_overlap: Number of common beacons required for an overlap
        executor: Optional parallel executor for the pairwise counts

    Returns:
        Sorted list of (i, j) pairs with i < j
    """
    threshold = required_shared_distances(min_overlap)
    pairs = list(combinations(range(len(fingerprints)), 2))
    if not pairs:
        return []

    if executor is None:
        counts = [_count_pair(pair, fingerprints) for pair in pairs]
    else:
        counts = executor.map_pairs(
            pairs,
            worker_fn=_count_pair,
            worker_kwargs={"fingerprints": list(fingerprints)},
        )

    candidates = []
    for pair, count in zip(pairs, counts):
        if count >= threshold:
            logger.debug(f"Scanners {pair[0]} and {pair[1]} share {count} distances")
            candidates.append(pair)

    logger.info(
        f"Overlap candidates: {len(candidates)} of {len(pairs)} scanner pairs "
        f"(threshold {threshold} shared distances)"
    )
    return candidates
