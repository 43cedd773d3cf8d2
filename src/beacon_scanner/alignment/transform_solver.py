"""
Exact Rigid Transform Solver

Finds the rotation (one of the 24 table rotations) and integer translation
that map one scanner's local frame onto another's, accepting a hypothesis
only when at least `min_overlap` points coincide exactly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from ..geometry.rotations import (
    IDENTITY,
    ROTATIONS,
    apply_rotation,
    compose_rotations,
    invert_rotation,
    point_set,
)
from ..utils.logging import setup_logger
from .fingerprint import point_signatures, shared_signature_count

logger = setup_logger(__name__)


@dataclass(frozen=True, eq=False)
class RigidTransform:
    """
    Rotation followed by translation: p -> rotation @ p + translation.

    Attributes:
        rotation: 3x3 int64 matrix from the rotation table
        translation: (3,) int64 vector
    """

    rotation: np.ndarray = field(default_factory=lambda: IDENTITY.copy())
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.int64))

    def __post_init__(self):
        rotation = np.asarray(self.rotation, dtype=np.int64)
        translation = np.asarray(self.translation, dtype=np.int64)
        if rotation.shape != (3, 3):
            raise ValueError(f"Rotation must be 3x3, got {rotation.shape}")
        if translation.shape != (3,):
            raise ValueError(f"Translation must have shape (3,), got {translation.shape}")
        object.__setattr__(self, "rotation", rotation)
        object.__setattr__(self, "translation", translation)

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls()

    def apply(self, points) -> np.ndarray:
        return apply_rotation(self.rotation, points) + self.translation

    def compose(self, other: "RigidTransform") -> "RigidTransform":
        """Transform equivalent to applying `other` first, then `self`."""
        return RigidTransform(
            rotation=compose_rotations(self.rotation, other.rotation),
            translation=apply_rotation(self.rotation, other.translation) + self.translation,
        )

    def inverse(self) -> "RigidTransform":
        r_inv = invert_rotation(self.rotation)
        return RigidTransform(rotation=r_inv, translation=-apply_rotation(r_inv, self.translation))

    def as_matrix(self) -> np.ndarray:
        """4x4 homogeneous integer matrix."""
        T = np.eye(4, dtype=np.int64)
        T[:3, :3] = self.rotation
        T[:3, 3] = self.translation
        return T

    def __eq__(self, other) -> bool:
        if not isinstance(other, RigidTransform):
            return NotImplemented
        return bool(
            np.array_equal(self.rotation, other.rotation)
            and np.array_equal(self.translation, other.translation)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"RigidTransform(rotation={self.rotation.tolist()}, "
            f"translation={self.translation.tolist()})"
        )


def count_coincident(points_a, points_b) -> int:
    """Number of points present in both lists (exact equality)."""
    return len(point_set(points_a) & point_set(points_b))


def _anchor_pairs(points_a: np.ndarray, points_b: np.ndarray, min_shared: int) -> List[Tuple[int, int]]:
    """Index pairs (ia, ib) whose distance signatures could belong to the same beacon."""
    sig_a = point_signatures(points_a)
    sig_b = point_signatures(points_b)
    anchors = []
    for ia, sa in enumerate(sig_a):
        for ib, sb in enumerate(sig_b):
            if shared_signature_count(sa, sb) >= min_shared:
                anchors.append((ia, ib))
    return anchors


def solve_transform(points_a, points_b, min_overlap: int = 12) -> Optional[RigidTransform]:
    """
    Find the transform mapping scanner B's frame into scanner A's frame.

    For each table rotation and each anchor correspondence (a, b), the
    translation a - R b is hypothesised and B is transformed in full; the
    first hypothesis that makes at least `min_overlap` points coincide with A
    is accepted. The greedy accept relies on the true alignment between two
    genuinely overlapping scanners being unique.

    Args:
        points_a: (N, 3) points of the reference scanner
        points_b: (M, 3) points of the scanner to align
        min_overlap: Number of exactly coincident points required

    Returns:
        RigidTransform with transform.apply(points_b) in A's frame, or None
        when no hypothesis reaches the threshold
    """
    A = np.asarray(points_a, dtype=np.int64).reshape(-1, 3)
    B = np.asarray(points_b, dtype=np.int64).reshape(-1, 3)
    if len(A) < min_overlap or len(B) < min_overlap:
        logger.debug(
            f"solve_transform: too few points for an overlap of {min_overlap} "
            f"(a={len(A)}, b={len(B)})"
        )
        return None

    anchors = _anchor_pairs(A, B, max(0, min_overlap - 1))
    if not anchors:
        logger.debug("solve_transform: no anchor correspondences")
        return None

    targets = point_set(A)
    for rotation in ROTATIONS:
        rotated = apply_rotation(rotation, B)
        for ia, ib in anchors:
            translation = A[ia] - rotated[ib]
            matched = len(point_set(rotated + translation) & targets)
            if matched >= min_overlap:
                logger.debug(
                    f"solve_transform: {matched} coincident points with "
                    f"translation {translation.tolist()}"
                )
                return RigidTransform(rotation=rotation, translation=translation)

    return None
