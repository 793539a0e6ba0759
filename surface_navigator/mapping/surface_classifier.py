import math
from typing import Tuple

import numpy as np

from surface_navigator.mapping.occupancy_map import OccupancyMap, OccupancyState, VoxelKey

# Float slack when comparing voxel counts against metric heights
HEIGHT_EPS = 1e-9

#--------------------------------------------------------------------------------
def clearance_voxels(robot_height: float, resolution: float) -> int:
    """Number of voxels above a ground voxel that must be clear: ceil(h / res)."""
    return int(math.ceil(robot_height / resolution - HEIGHT_EPS))

#--------------------------------------------------------------------------------
def is_ground(
        occ_map: OccupancyMap,
        key: VoxelKey,
        robot_height: float,
        treat_unknown_as_free: bool = False
) -> bool:
    """An occupied voxel with a non-occupied column of robot height above it."""
    if occ_map.state(key) != OccupancyState.OCCUPIED:
        return False

    i, j, k = key
    for step in range(1, clearance_voxels(robot_height, occ_map.resolution) + 1):
        state = occ_map.state((i, j, k + step))
        if state == OccupancyState.OCCUPIED:
            return False
        if state == OccupancyState.UNKNOWN and not treat_unknown_as_free:
            return False
    return True

#--------------------------------------------------------------------------------
def occupied_run_length(occ_map: OccupancyMap, key: VoxelKey) -> int:
    """Voxels in the contiguous vertical occupied run through key (key included)."""
    i, j, k = key
    count = 1

    # look up...
    step = 1
    while occ_map.state((i, j, k + step)) == OccupancyState.OCCUPIED:
        count += 1
        step += 1

    # look down...
    step = 1
    while occ_map.state((i, j, k - step)) == OccupancyState.OCCUPIED:
        count += 1
        step += 1

    return count

#--------------------------------------------------------------------------------
def is_obstacle(occ_map: OccupancyMap, key: VoxelKey, max_superable_height: float) -> bool:
    """Vertical occupied extent through key is taller than the robot can climb."""
    height = occupied_run_length(occ_map, key) * occ_map.resolution
    return height > max_superable_height + HEIGHT_EPS

#--------------------------------------------------------------------------------
def classify_surface(
        occ_map: OccupancyMap,
        robot_height: float,
        max_superable_height: float,
        treat_unknown_as_free: bool = False
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split the occupied voxels of a map into ground and obstacle points.

    A voxel that qualifies as ground is never tested as obstacle, so the two
    sets are disjoint. Voxels that are neither (low bumps with something
    above them) are dropped.

    Args:
        occ_map: occupancy map with occupied space expanded to full resolution
        robot_height: clearance required above ground voxels (m)
        max_superable_height: tallest occupied run the robot climbs over (m)
        treat_unknown_as_free: count unknown voxels as clearance
    Returns:
        ground_points, obstacle_points: (N, 3) and (M, 3) voxel centres
    """
    ground, obstacles = [], []

    for key in occ_map.occupied_keys():
        if is_ground(occ_map, key, robot_height, treat_unknown_as_free):
            ground.append(occ_map.key_to_coord(key))
        elif is_obstacle(occ_map, key, max_superable_height):
            obstacles.append(occ_map.key_to_coord(key))

    return _as_cloud(ground), _as_cloud(obstacles)

#--------------------------------------------------------------------------------
def _as_cloud(points: list) -> np.ndarray:
    if not points:
        return np.empty((0, 3), dtype=float)
    return np.vstack(points).astype(float)
