"""
Scanner Alignment Module

Fingerprint-based overlap detection, exact rigid transform solving, pose
composition over the transform graph, and aggregation of the aligned beacons.
"""

from .fingerprint import (
    fingerprint,
    point_signatures,
    shared_signature_count,
    pairwise_squared_distances,
)
from .candidates import find_overlap_candidates, required_shared_distances
from .transform_solver import RigidTransform, solve_transform, count_coincident
from .pose_graph import (
    TransformGraph,
    DisconnectedScannerError,
    build_transform_graph,
    compose_poses,
)
from .aggregation import merge_beacons, max_scanner_separation_from_poses
from .scanner_aligner import (
    ScannerAligner,
    AlignmentResult,
    count_unique_beacons,
    max_scanner_separation,
)

__all__ = [
    "fingerprint",
    "point_signatures",
    "shared_signature_count",
    "pairwise_squared_distances",
    "find_overlap_candidates",
    "required_shared_distances",
    "RigidTransform",
    "solve_transform",
    "count_coincident",
    "TransformGraph",
    "DisconnectedScannerError",
    "build_transform_graph",
    "compose_poses",
    "merge_beacons",
    "max_scanner_separation_from_poses",
    "ScannerAligner",
    "AlignmentResult",
    "count_unique_beacons",
    "max_scanner_separation",
]
