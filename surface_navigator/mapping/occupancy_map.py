from enum import Enum
from typing import Dict, Iterable, Iterator, Protocol, Tuple

import numpy as np

VoxelKey = Tuple[int, int, int]


class OccupancyState(int, Enum):
    UNKNOWN = -1
    FREE = 0
    OCCUPIED = 1


class OccupancyMap(Protocol):
    """
    Read-only view of a 3-D voxel map as consumed by the surface classifier.
    Occupied space must be reported at full resolution: coarse occupied
    regions are expected to be expanded into leaves before classification.
    """
    resolution: float

    def state(self, key: VoxelKey) -> OccupancyState: ...

    def occupied_keys(self) -> Iterable[VoxelKey]: ...

    def key_to_coord(self, key: VoxelKey) -> np.ndarray: ...


class VoxelOccupancyMap:
    """
    Sparse tri-state voxel map. Voxels never written are UNKNOWN.
    Voxel (i, j, k) spans [i*res, (i+1)*res) along x, and so on.
    """

    def __init__(self, resolution: float):
        if resolution <= 0.0:
            raise ValueError(f"map resolution must be positive, got {resolution}")
        self.resolution = float(resolution)
        self._cells: Dict[VoxelKey, bool] = {}  # True = occupied, False = free

    #--------------------------------------------------------------------------------
    @classmethod
    def from_points(cls, points, resolution: float, occupied: bool = True) -> "VoxelOccupancyMap":
        """Build a map marking the voxel containing each point."""
        occ_map = cls(resolution)
        for point in np.atleast_2d(np.asarray(points, dtype=float)):
            occ_map._cells[occ_map.coord_to_key(point)] = occupied
        return occ_map

    #--------------------------------------------------------------------------------
    def coord_to_key(self, point) -> VoxelKey:
        i, j, k = np.floor(np.asarray(point, dtype=float) / self.resolution).astype(int)
        return (int(i), int(j), int(k))

    #--------------------------------------------------------------------------------
    def key_to_coord(self, key: VoxelKey) -> np.ndarray:
        return (np.asarray(key, dtype=float) + 0.5) * self.resolution

    #--------------------------------------------------------------------------------
    def state(self, key: VoxelKey) -> OccupancyState:
        cell = self._cells.get(tuple(key))
        if cell is None:
            return OccupancyState.UNKNOWN
        return OccupancyState.OCCUPIED if cell else OccupancyState.FREE

    #--------------------------------------------------------------------------------
    def set_occupied(self, key: VoxelKey):
        self._cells[tuple(key)] = True

    #--------------------------------------------------------------------------------
    def set_free(self, key: VoxelKey):
        self._cells[tuple(key)] = False

    #--------------------------------------------------------------------------------
    def set_unknown(self, key: VoxelKey):
        self._cells.pop(tuple(key), None)

    #--------------------------------------------------------------------------------
    def mark_box(self, min_key: VoxelKey, max_key: VoxelKey, occupied: bool = True):
        """
        Mark every voxel in the inclusive key box. A coarse occupied block is
        stored as individual full-resolution leaves.
        """
        (i0, j0, k0), (i1, j1, k1) = min_key, max_key
        for i in range(i0, i1 + 1):
            for j in range(j0, j1 + 1):
                for k in range(k0, k1 + 1):
                    self._cells[(i, j, k)] = occupied

    #--------------------------------------------------------------------------------
    def occupied_keys(self) -> Iterator[VoxelKey]:
        return (key for key, occupied in self._cells.items() if occupied)

    #--------------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._cells)
