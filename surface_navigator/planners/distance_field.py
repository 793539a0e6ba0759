from collections import deque
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from surface_navigator.config.map_configs import DEFAULT_NORMALIZATION_EPS, DEFAULT_PROPAGATION_FACTOR
from surface_navigator.mapping.surface_cache import SurfaceSnapshot


@dataclass(frozen=True)
class DistanceField:
    raw: np.ndarray          # hop count to goal per ground point, inf if unreachable
    normalized: np.ndarray   # raw rescaled to [0, 1), unreachable = 1.0
    goal_index: int          # ground point the wavefront started from

    @property
    def reachable_mask(self) -> np.ndarray:
        return np.isfinite(self.raw)

#--------------------------------------------------------------------------------
def propagation_radius(resolution: float, factor: float = DEFAULT_PROPAGATION_FACTOR) -> float:
    return factor * resolution

#--------------------------------------------------------------------------------
def wavefront(neighbourhoods: List[List[int]], seed: int) -> np.ndarray:
    """
    Breadth-first hop count from seed over a neighbour graph.

    Args:
        neighbourhoods: neighbourhoods[i] lists the nodes adjacent to node i
        seed: start node, labelled 0
    Returns:
        distances: float array, inf for nodes never reached
    """
    distances = np.full(len(neighbourhoods), np.inf)
    distances[seed] = 0.0

    queue = deque([seed])
    while queue:
        i = queue.popleft()
        for j in neighbourhoods[i]:
            # already labelled
            if np.isfinite(distances[j]):
                continue
            distances[j] = distances[i] + 1.0
            queue.append(j)

    return distances

#--------------------------------------------------------------------------------
def normalize_distances(raw: np.ndarray, eps: float = DEFAULT_NORMALIZATION_EPS) -> np.ndarray:
    """(d - dmin) / (dmax - dmin + eps) on finite values, 1.0 elsewhere."""
    normalized = np.ones(len(raw), dtype=float)
    finite = np.isfinite(raw)
    if not finite.any():
        return normalized

    d_min = raw[finite].min()
    d_max = raw[finite].max()
    normalized[finite] = (raw[finite] - d_min) / (d_max - d_min + eps)
    return normalized

#--------------------------------------------------------------------------------
def solve_distance_field(
        surface: SurfaceSnapshot,
        goal_position,
        propagation_factor: float = DEFAULT_PROPAGATION_FACTOR,
        eps: float = DEFAULT_NORMALIZATION_EPS
) -> Optional[DistanceField]:
    """
    Hop distance from every ground point to the ground point nearest the goal.

    Ground points are graph nodes joined when closer than
    propagation_factor * resolution; the field is recomputed from scratch on
    every call.

    Args:
        surface: current surface snapshot
        goal_position: (x, y, z) goal, normally already projected on the ground
    Returns:
        DistanceField, or None when there is no ground point to seed from
    """
    nearest = surface.ground_index.nearest(goal_position)
    if nearest is None:
        return None
    goal_index, _ = nearest

    radius = propagation_radius(surface.resolution, propagation_factor)
    raw = wavefront(surface.ground_index.neighbourhoods(radius), goal_index)

    return DistanceField(
        raw=raw,
        normalized=normalize_distances(raw, eps),
        goal_index=goal_index,
    )

#--------------------------------------------------------------------------------
def extract_path(
        surface: SurfaceSnapshot,
        field: DistanceField,
        start_position,
        propagation_factor: float = DEFAULT_PROPAGATION_FACTOR
) -> List[np.ndarray]:
    """
    Descend the field from the ground point nearest start_position.

    Each step moves to the neighbour with the lowest hop count, which is
    always exactly one less, so the walk ends at the goal point.
    Returns an empty list when the start point is unreachable.
    """
    nearest = surface.ground_index.nearest(start_position)
    if nearest is None:
        return []
    current, _ = nearest
    if not np.isfinite(field.raw[current]):
        return []

    radius = propagation_radius(surface.resolution, propagation_factor)
    path = [surface.ground_points[current]]
    while field.raw[current] > 0.0:
        neighbours = surface.ground_index.within(surface.ground_points[current], radius)
        current = min(neighbours, key=lambda j: field.raw[j])
        path.append(surface.ground_points[current])

    return path
