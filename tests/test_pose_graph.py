"""
Tests for the transform graph and pose composition.
"""

import numpy as np
import pytest

from beacon_scanner.alignment.pose_graph import (
    DisconnectedScannerError,
    TransformGraph,
    build_transform_graph,
    compose_poses,
)
from beacon_scanner.alignment.transform_solver import RigidTransform
from beacon_scanner.geometry.rotations import IDENTITY, ROTATIONS

T01 = RigidTransform(ROTATIONS[6], [68, -1246, -43])
T12 = RigidTransform(ROTATIONS[15], [160, -1134, -23])
T23 = RigidTransform(ROTATIONS[21], [-5, 7, 900])


def _chain_graph() -> TransformGraph:
    graph = TransformGraph(4)
    graph.add_edge(0, 1, T01)
    graph.add_edge(1, 2, T12)
    graph.add_edge(3, 2, T23.inverse())
    return graph


def test_add_edge_stores_inverse():
    graph = _chain_graph()
    assert graph.neighbors(0)[1] == T01
    assert graph.neighbors(1)[0] == T01.inverse()
    assert graph.has_edge(2, 3)
    assert graph.edges == [(0, 1), (1, 2), (2, 3)]
    assert graph.n_edges == 3


def test_add_edge_rejects_bad_indices():
    graph = TransformGraph(2)
    with pytest.raises(ValueError):
        graph.add_edge(0, 2, T01)
    with pytest.raises(ValueError):
        graph.add_edge(1, 1, T01)


def test_root_pose_is_identity():
    poses = compose_poses(_chain_graph(), root=0)
    assert np.array_equal(poses[0].rotation, IDENTITY)
    assert poses[0].translation.tolist() == [0, 0, 0]


def test_poses_compose_along_path():
    poses = compose_poses(_chain_graph(), root=0)
    assert poses[1] == T01
    assert poses[2] == T01.compose(T12)
    assert poses[3] == T01.compose(T12).compose(T23)
    # Translation rule: R_i t_ij + t_i
    expected = T01.rotation @ T12.translation + T01.translation
    assert poses[2].translation.tolist() == expected.tolist()


def test_poses_from_another_root():
    poses = compose_poses(_chain_graph(), root=2)
    assert poses[2] == RigidTransform.identity()
    assert poses[1] == T12.inverse()
    assert poses[0] == T12.inverse().compose(T01.inverse())


def test_consistent_cycle_tolerated():
    graph = _chain_graph()
    graph.add_edge(0, 2, T01.compose(T12))
    poses = compose_poses(graph, root=0)
    assert poses[2] == T01.compose(T12)
    assert len(poses) == 4


def test_disconnected_graph_raises():
    graph = TransformGraph(4)
    graph.add_edge(0, 1, T01)
    with pytest.raises(DisconnectedScannerError) as excinfo:
        compose_poses(graph, root=0)
    assert excinfo.value.unreachable == [2, 3]
    assert isinstance(excinfo.value, ValueError)


def test_root_out_of_range():
    with pytest.raises(ValueError):
        compose_poses(TransformGraph(2), root=2)


def test_build_graph_skips_unsolvable_candidates(example_scanners):
    graph = build_transform_graph(example_scanners, [(0, 1), (0, 2)])
    assert graph.edges == [(0, 1)]
    assert graph.neighbors(0)[1].translation.tolist() == [68, -1246, -43]


def test_build_graph_on_example(example_scanners):
    graph = build_transform_graph(example_scanners, [(0, 1), (1, 3), (1, 4), (2, 4)])
    assert graph.n_edges == 4
    poses = compose_poses(graph)
    assert [p.translation.tolist() for p in poses] == [
        [0, 0, 0],
        [68, -1246, -43],
        [1105, -1205, 1229],
        [-92, -2380, -20],
        [-20, -1133, 1061],
    ]
