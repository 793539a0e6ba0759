import numpy as np

from surface_navigator.mapping.inflation_filter import filter_inflated_ground
from surface_navigator.mapping.occupancy_map import VoxelOccupancyMap
from surface_navigator.mapping.spatial_index import SpatialIndex
from surface_navigator.mapping.surface_cache import build_surface_snapshot

GROUND = np.array([
    [0.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [2.0, 0.0, 0.0],
])
OBSTACLE = SpatialIndex(np.array([[3.0, 0.0, 0.0]]))


def test_point_at_radius_is_kept():
    filtered = filter_inflated_ground(GROUND, OBSTACLE, robot_radius=1.0)

    assert len(filtered) == 3


def test_point_inside_radius_is_removed():
    filtered = filter_inflated_ground(GROUND, OBSTACLE, robot_radius=1.5)

    assert sorted(filtered[:, 0].tolist()) == [0.0, 1.0]


def test_no_obstacles_keeps_everything():
    filtered = filter_inflated_ground(GROUND, SpatialIndex(np.empty((0, 3))), robot_radius=10.0)

    assert np.array_equal(filtered, GROUND)


def test_snapshot_indexes_filtered_ground():
    occ_map = VoxelOccupancyMap(0.1)
    occ_map.mark_box((0, 0, 1), (9, 0, 4), occupied=False)
    occ_map.mark_box((0, 0, 0), (9, 0, 0), occupied=True)
    occ_map.mark_box((9, 0, 1), (9, 0, 4), occupied=True)   # post at the end of the strip

    snapshot = build_surface_snapshot(
        occ_map,
        robot_height=0.3,
        robot_radius=0.25,
        max_superable_height=0.2,
    )

    assert len(snapshot.obstacle_points) == 5
    # ground voxels 0..8, of which 7 and 8 lie within 0.25 m of the post
    assert len(snapshot.ground_points) == 7
    assert len(snapshot.ground_index) == 7
    assert snapshot.ground_points[:, 0].max() < 0.7
    assert not snapshot.is_empty
