import numpy as np

from surface_navigator.mapping.occupancy_map import VoxelOccupancyMap
from surface_navigator.mapping.surface_classifier import (
    classify_surface,
    clearance_voxels,
    is_ground,
    is_obstacle,
    occupied_run_length,
)

RES = 0.1
ROBOT_HEIGHT = 0.3          # 3 voxels of clearance
MAX_SUPERABLE = 0.2         # 2 voxels


def column_map(occupied_levels, free_levels=()):
    occ_map = VoxelOccupancyMap(RES)
    for k in free_levels:
        occ_map.set_free((0, 0, k))
    for k in occupied_levels:
        occ_map.set_occupied((0, 0, k))
    return occ_map


def test_clearance_voxels_is_ceil_of_height():
    assert clearance_voxels(0.3, 0.1) == 3
    assert clearance_voxels(0.5, 0.1) == 5
    assert clearance_voxels(0.25, 0.1) == 3


def test_voxel_with_free_column_is_ground():
    occ_map = column_map([0], free_levels=[1, 2, 3])

    assert is_ground(occ_map, (0, 0, 0), ROBOT_HEIGHT)


def test_any_occupied_voxel_in_column_blocks_ground():
    occ_map = column_map([0, 2], free_levels=[1, 3])

    assert not is_ground(occ_map, (0, 0, 0), ROBOT_HEIGHT)


def test_unknown_column_depends_on_flag():
    occ_map = column_map([0], free_levels=[1, 2])   # level 3 unknown

    assert not is_ground(occ_map, (0, 0, 0), ROBOT_HEIGHT)
    assert is_ground(occ_map, (0, 0, 0), ROBOT_HEIGHT, treat_unknown_as_free=True)


def test_free_voxel_is_never_ground():
    occ_map = column_map([], free_levels=[0, 1, 2, 3])

    assert not is_ground(occ_map, (0, 0, 0), ROBOT_HEIGHT, treat_unknown_as_free=True)


def test_occupied_run_counts_up_and_down():
    occ_map = column_map([0, 1, 2, 3], free_levels=[4])

    assert occupied_run_length(occ_map, (0, 0, 0)) == 4
    assert occupied_run_length(occ_map, (0, 0, 2)) == 4


def test_stack_taller_than_superable_height_is_obstacle():
    # Unknown above the stack, so its top is not ground either
    occ_map = column_map([0, 1, 2])

    ground, obstacles = classify_surface(occ_map, ROBOT_HEIGHT, MAX_SUPERABLE)

    assert len(ground) == 0
    assert len(obstacles) == 3


def test_stack_at_superable_height_is_not_obstacle():
    occ_map = column_map([0, 1])

    assert not is_obstacle(occ_map, (0, 0, 0), MAX_SUPERABLE)
    assert not is_obstacle(occ_map, (0, 0, 1), MAX_SUPERABLE)

    ground, obstacles = classify_surface(occ_map, ROBOT_HEIGHT, MAX_SUPERABLE)
    assert len(ground) == 0
    assert len(obstacles) == 0


def test_low_bump_under_overhang_is_neither():
    occ_map = column_map([0, 2], free_levels=[1])

    ground, obstacles = classify_surface(occ_map, ROBOT_HEIGHT, MAX_SUPERABLE)

    assert len(ground) == 0
    assert len(obstacles) == 0


def test_step_on_floor():
    occ_map = VoxelOccupancyMap(RES)
    occ_map.mark_box((0, 0, 1), (4, 0, 5), occupied=False)
    occ_map.mark_box((0, 0, 0), (4, 0, 0), occupied=True)
    occ_map.mark_box((4, 0, 1), (4, 0, 3), occupied=True)   # wall 0.4 m tall incl. floor

    ground, obstacles = classify_surface(occ_map, ROBOT_HEIGHT, MAX_SUPERABLE)

    assert np.allclose(np.sort(ground[:, 0]), [0.05, 0.15, 0.25, 0.35])
    # the wall top has only 0.2 m of known free space above it
    assert len(obstacles) == 4
    assert np.allclose(np.sort(obstacles[:, 2]), [0.05, 0.15, 0.25, 0.35])


def test_ground_and_obstacles_are_disjoint():
    rng = np.random.default_rng(7)
    occ_map = VoxelOccupancyMap(RES)
    for key in np.argwhere(rng.random((8, 8, 8)) < 0.5):
        occ_map.set_occupied(tuple(int(v) for v in key))
    occupied = set(occ_map.occupied_keys())
    for key in np.argwhere(rng.random((8, 8, 8)) < 0.3):
        key = tuple(int(v) for v in key)
        if key not in occupied:
            occ_map.set_free(key)

    for flag in (False, True):
        ground, obstacles = classify_surface(occ_map, ROBOT_HEIGHT, MAX_SUPERABLE, flag)
        ground_set = {tuple(np.round(p, 6)) for p in ground}
        obstacle_set = {tuple(np.round(p, 6)) for p in obstacles}
        assert ground_set.isdisjoint(obstacle_set)
        assert len(ground_set) + len(obstacle_set) <= len(list(occ_map.occupied_keys()))
