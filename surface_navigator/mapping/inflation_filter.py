
import numpy as np

from surface_navigator.mapping.spatial_index import SpatialIndex


def filter_inflated_ground(
        ground_points: np.ndarray,
        obstacle_index: SpatialIndex,
        robot_radius: float
) -> np.ndarray:
    """
    Removes ground points lying within the robot footprint of any obstacle.

    Args:
        ground_points: (N, 3) ground voxel centres
        obstacle_index: spatial index over the obstacle points
        robot_radius: inflation radius in meters
    Returns:
        filtered ground points: points at distance >= robot_radius from every
        obstacle point. Order is not guaranteed.
    """
    ground_points = np.asarray(ground_points, dtype=float).reshape(-1, 3)
    if len(ground_points) == 0 or len(obstacle_index) == 0:
        return ground_points.copy()

    # Distance to closest obstacle for every ground point
    clearance = obstacle_index.nearest_distances(ground_points)

    keep_mask = clearance >= robot_radius
    return ground_points[keep_mask]
