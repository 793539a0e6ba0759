from dataclasses import dataclass

import numpy as np

from surface_navigator.mapping.inflation_filter import filter_inflated_ground
from surface_navigator.mapping.occupancy_map import OccupancyMap
from surface_navigator.mapping.spatial_index import SpatialIndex
from surface_navigator.mapping.surface_classifier import classify_surface


# These objects hold the traversable surface derived from one map update.
# A new map produces a new snapshot; snapshots are never mutated.

@dataclass(frozen=True)
class SurfaceSnapshot:
    ground_points: np.ndarray       # (N, 3), inflated region already removed
    obstacle_points: np.ndarray     # (M, 3)
    ground_index: SpatialIndex
    obstacle_index: SpatialIndex
    resolution: float

    @property
    def is_empty(self) -> bool:
        return len(self.ground_points) == 0

#--------------------------------------------------------------------------------
def build_surface_snapshot(
        occ_map: OccupancyMap,
        robot_height: float,
        robot_radius: float,
        max_superable_height: float,
        treat_unknown_as_free: bool = False
) -> SurfaceSnapshot:
    """Classify the map, index obstacles, inflate, then index the remaining ground."""
    ground, obstacles = classify_surface(
        occ_map,
        robot_height=robot_height,
        max_superable_height=max_superable_height,
        treat_unknown_as_free=treat_unknown_as_free,
    )

    # Obstacle index must exist before inflation, which queries it
    obstacle_index = SpatialIndex(obstacles)
    ground = filter_inflated_ground(ground, obstacle_index, robot_radius)

    return SurfaceSnapshot(
        ground_points=ground,
        obstacle_points=obstacles,
        ground_index=SpatialIndex(ground),
        obstacle_index=obstacle_index,
        resolution=float(occ_map.resolution),
    )
