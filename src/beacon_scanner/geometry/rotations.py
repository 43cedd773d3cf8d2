"""
Integer Geometry Primitives

Points are int64 numpy vectors of shape (3,) and point lists are int64 arrays
of shape (N, 3). All arithmetic is exact integer arithmetic, so equality and
hashing of points are exact. Rotations are 3x3 int64 matrices taken from the
fixed table of the 24 axis-aligned rotations of 3D space (the rotation group
of the cube).
"""

from __future__ import annotations

from typing import Dict, Set, Tuple

import numpy as np

Point = Tuple[int, int, int]


def _as_int_array(points) -> np.ndarray:
    return np.asarray(points, dtype=np.int64)


# ------------------------ Point arithmetic ------------------------
def add_points(p1, p2) -> np.ndarray:
    return _as_int_array(p1) + _as_int_array(p2)


def sub_points(p1, p2) -> np.ndarray:
    return _as_int_array(p1) - _as_int_array(p2)


def negate_point(p) -> np.ndarray:
    return -_as_int_array(p)


def apply_rotation(rotation: np.ndarray, points) -> np.ndarray:
    """
    Rotate a single point or a list of points.

    Component i of a rotated point is sum_j rotation[i][j] * p[j].

    Args:
        rotation: 3x3 integer matrix
        points: (3,) point or (N, 3) point list

    Returns:
        Rotated point(s) with the same shape as the input
    """
    pts = _as_int_array(points)
    return pts @ np.asarray(rotation, dtype=np.int64).T


def as_point(p) -> Point:
    """Hashable tuple view of a single point."""
    x, y, z = (int(v) for v in p)
    return (x, y, z)


def point_set(points) -> Set[Point]:
    pts = _as_int_array(points).reshape(-1, 3)
    return {(x, y, z) for x, y, z in pts.tolist()}


# ------------------------ Rotation table ------------------------
# Grouped by the direction the local z axis is mapped from; four turns each.
ROTATIONS: np.ndarray = np.array(
    [
        # +z
        [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
        [[0, 1, 0], [-1, 0, 0], [0, 0, 1]],
        [[-1, 0, 0], [0, -1, 0], [0, 0, 1]],
        [[0, -1, 0], [1, 0, 0], [0, 0, 1]],
        # -z
        [[1, 0, 0], [0, -1, 0], [0, 0, -1]],
        [[0, 1, 0], [1, 0, 0], [0, 0, -1]],
        [[-1, 0, 0], [0, 1, 0], [0, 0, -1]],
        [[0, -1, 0], [-1, 0, 0], [0, 0, -1]],
        # +y
        [[1, 0, 0], [0, 0, -1], [0, 1, 0]],
        [[0, 0, 1], [1, 0, 0], [0, 1, 0]],
        [[-1, 0, 0], [0, 0, 1], [0, 1, 0]],
        [[0, 0, -1], [-1, 0, 0], [0, 1, 0]],
        # -y
        [[1, 0, 0], [0, 0, 1], [0, -1, 0]],
        [[0, 0, 1], [-1, 0, 0], [0, -1, 0]],
        [[-1, 0, 0], [0, 0, -1], [0, -1, 0]],
        [[0, 0, -1], [1, 0, 0], [0, -1, 0]],
        # +x
        [[0, -1, 0], [0, 0, -1], [1, 0, 0]],
        [[0, 0, -1], [0, 1, 0], [1, 0, 0]],
        [[0, 1, 0], [0, 0, 1], [1, 0, 0]],
        [[0, 0, 1], [0, -1, 0], [1, 0, 0]],
        # -x
        [[0, 1, 0], [0, 0, -1], [-1, 0, 0]],
        [[0, 0, 1], [0, 1, 0], [-1, 0, 0]],
        [[0, -1, 0], [0, 0, 1], [-1, 0, 0]],
        [[0, 0, -1], [0, -1, 0], [-1, 0, 0]],
    ],
    dtype=np.int64,
)
ROTATIONS.setflags(write=False)

IDENTITY: np.ndarray = ROTATIONS[0]


def _key(rotation: np.ndarray) -> Tuple[int, ...]:
    return tuple(int(v) for v in np.asarray(rotation).reshape(-1))


_ROTATION_INDEX: Dict[Tuple[int, ...], int] = {_key(r): i for i, r in enumerate(ROTATIONS)}


def rotation_index(rotation: np.ndarray) -> int:
    """
    Position of a rotation in ROTATIONS.

    Raises:
        KeyError: If the matrix is not one of the 24 table rotations
    """
    return _ROTATION_INDEX[_key(rotation)]


def compose_rotations(r1: np.ndarray, r2: np.ndarray) -> np.ndarray:
    """Rotation equivalent to applying r2 first, then r1 (matrix product r1 @ r2)."""
    return np.asarray(r1, dtype=np.int64) @ np.asarray(r2, dtype=np.int64)


def invert_rotation(rotation: np.ndarray) -> np.ndarray:
    # Orthogonal matrix: the transpose is the inverse
    return np.ascontiguousarray(np.asarray(rotation, dtype=np.int64).T)


def validate_rotation_table(table: np.ndarray) -> None:
    """
    Check the structural properties of a rotation table.

    The table must hold exactly 24 distinct signed permutation matrices with
    determinant +1 that are closed under composition and that move the
    generic point (1, 2, 3) to 24 distinct places.

    Raises:
        AssertionError: On any violated property
    """
    table = np.asarray(table, dtype=np.int64)
    if table.shape != (24, 3, 3):
        raise AssertionError(f"rotation table must have shape (24, 3, 3), got {table.shape}")

    for i, r in enumerate(table):
        if not np.isin(r, (-1, 0, 1)).all():
            raise AssertionError(f"rotation {i} has entries outside {{-1, 0, 1}}")
        if not (np.count_nonzero(r, axis=0) == 1).all() or not (np.count_nonzero(r, axis=1) == 1).all():
            raise AssertionError(f"rotation {i} is not a signed permutation matrix")
        if round(np.linalg.det(r)) != 1:
            raise AssertionError(f"rotation {i} has determinant != +1")

    keys = {_key(r): i for i, r in enumerate(table)}
    if len(keys) != 24:
        raise AssertionError("rotation table contains duplicate matrices")

    images = point_set(table @ np.array([1, 2, 3], dtype=np.int64))
    if len(images) != 24:
        raise AssertionError("rotations are not distinct on the point (1, 2, 3)")

    for a in range(24):
        for b in range(24):
            if _key(table[a] @ table[b]) not in keys:
                raise AssertionError(f"rotation closure violated for ({a}, {b})")


validate_rotation_table(ROTATIONS)
