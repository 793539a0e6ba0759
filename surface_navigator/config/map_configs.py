# surface_navigator/config/map_configs.py

from dataclasses import dataclass

# Neighbour radius in voxels: reaches all 26-connected neighbours (sqrt(3) ~ 1.73)
# while tolerating float jitter on voxel centres.
DEFAULT_PROPAGATION_FACTOR = 1.8
DEFAULT_NORMALIZATION_EPS = 0.01

@dataclass(frozen=True)
class SurfacePolicy:
    treat_unknown_as_free: bool = False         # unknown voxels count as clearance above ground
    propagation_factor: float = DEFAULT_PROPAGATION_FACTOR   # propagation radius = factor * resolution
    normalization_eps: float = DEFAULT_NORMALIZATION_EPS     # keeps the field normalization finite
