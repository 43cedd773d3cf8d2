"""
Geometry Module

Exact integer point arithmetic and the fixed table of the 24 axis-aligned
3D rotations.
"""

from .rotations import (
    Point,
    ROTATIONS,
    IDENTITY,
    add_points,
    sub_points,
    negate_point,
    apply_rotation,
    as_point,
    point_set,
    compose_rotations,
    invert_rotation,
    rotation_index,
    validate_rotation_table,
)

__all__ = [
    "Point",
    "ROTATIONS",
    "IDENTITY",
    "add_points",
    "sub_points",
    "negate_point",
    "apply_rotation",
    "as_point",
    "point_set",
    "compose_rotations",
    "invert_rotation",
    "rotation_index",
    "validate_rotation_table",
]
