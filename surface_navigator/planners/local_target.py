from typing import Optional

import numpy as np

from surface_navigator.mapping.surface_cache import SurfaceSnapshot
from surface_navigator.planners.distance_field import DistanceField


def select_local_target(
        surface: SurfaceSnapshot,
        field: DistanceField,
        position,
        lookahead_radius: float
) -> Optional[int]:
    """
    Pick the ground point closest to the goal within the lookahead radius.

    Args:
        surface: current surface snapshot
        field: distance field solved on that snapshot
        position: robot position (x, y, z)
        lookahead_radius: search radius around the robot (m)
    Returns:
        index into surface.ground_points, or None if no ground point is in range.
        Ties keep the first candidate found.
    """
    candidates = surface.ground_index.within(position, lookahead_radius)
    if not candidates:
        return None

    values = field.normalized[candidates]
    return int(candidates[int(np.argmin(values))])
