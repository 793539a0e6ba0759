from typing import List, Optional, Tuple

import numpy as np
from scipy.spatial import cKDTree


class SpatialIndex:
    """
    Nearest-neighbour and radius queries over a fixed (N, 3) point set.
    Safe to build over an empty set: every query then returns nothing.
    """

    def __init__(self, points: np.ndarray):
        self._points = np.asarray(points, dtype=float).reshape(-1, 3)
        self._tree = cKDTree(self._points) if len(self._points) > 0 else None

    #--------------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._points)

    #--------------------------------------------------------------------------------
    @property
    def points(self) -> np.ndarray:
        return self._points

    #--------------------------------------------------------------------------------
    def nearest(self, point) -> Optional[Tuple[int, float]]:
        """Returns (index, distance) of the closest point, or None if empty."""
        if self._tree is None:
            return None
        distance, index = self._tree.query(np.asarray(point, dtype=float), k=1)
        return int(index), float(distance)

    #--------------------------------------------------------------------------------
    def nearest_distances(self, points: np.ndarray) -> np.ndarray:
        """Distance from each query point to its closest indexed point (inf if empty)."""
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        if self._tree is None:
            return np.full(len(points), np.inf)
        distances, _ = self._tree.query(points, k=1)
        return np.asarray(distances, dtype=float)

    #--------------------------------------------------------------------------------
    def within(self, point, radius: float) -> List[int]:
        """Indices of indexed points at distance <= radius, in index order."""
        if self._tree is None:
            return []
        return sorted(self._tree.query_ball_point(np.asarray(point, dtype=float), r=radius))

    #--------------------------------------------------------------------------------
    def neighbourhoods(self, radius: float) -> List[List[int]]:
        """within() for every indexed point at once."""
        if self._tree is None:
            return []
        return [sorted(n) for n in self._tree.query_ball_point(self._points, r=radius)]
