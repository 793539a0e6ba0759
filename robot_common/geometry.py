
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

# Squared quaternion norm under which a goal orientation is considered "unset"
MIN_QUATERNION_NORM_SQ = 1e-5

IDENTITY_QUATERNION = (0.0, 0.0, 0.0, 1.0)
ZERO_QUATERNION = (0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Pose3D:
    """Position (x, y, z) and orientation quaternion (x, y, z, w)."""
    position: tuple
    orientation: tuple = IDENTITY_QUATERNION

    @classmethod
    def from_xyz_yaw(cls, x: float, y: float, z: float = 0.0, yaw: float = 0.0) -> "Pose3D":
        return cls(
            position=(float(x), float(y), float(z)),
            orientation=yaw_to_quaternion(yaw),
        )

    def as_array(self) -> np.ndarray:
        return np.asarray(self.position, dtype=float)

    @property
    def yaw(self) -> float:
        return quaternion_to_yaw(self.orientation)

#--------------------------------------------------------------------------------
def quaternion_to_yaw(q: Sequence[float]) -> float:
    """
    Convert a quaternion into yaw angle (in radians).
    Args:
        q: quaternion as (x, y, z, w)
    Returns:
        yaw angle in radians
    """
    # Convert quaternion to yaw (rotation about Z)
    x, y, z, w = q
    siny_cosp = 2.0 * (w * z + x * y)
    cosy_cosp = 1.0 - 2.0 * (y * y + z * z)
    return math.atan2(siny_cosp, cosy_cosp)

#--------------------------------------------------------------------------------
def yaw_to_quaternion(yaw: float) -> tuple:
    half = 0.5 * yaw
    return (0.0, 0.0, math.sin(half), math.cos(half))

#--------------------------------------------------------------------------------
def quaternion_norm_sq(q: Optional[Sequence[float]]) -> float:
    if q is None:
        return 0.0
    return float(sum(c * c for c in q))

#--------------------------------------------------------------------------------
def quaternion_yaw_error(desired: Optional[Sequence[float]], current: Sequence[float]) -> float:
    """
    Yaw component of the quaternion orientation error between a desired and a
    current orientation, both as (x, y, z, w).

        e_o = eta_e * eps_d - eta_d * eps_e - eps_d x eps_e

    Returns 0 when the desired orientation is unset (near-zero norm), so
    position-only goals never block on orientation.
    """
    if quaternion_norm_sq(desired) < MIN_QUATERNION_NORM_SQ:
        return 0.0

    eps_d = np.asarray(desired[:3], dtype=float)
    eta_d = float(desired[3])
    eps_e = np.asarray(current[:3], dtype=float)
    eta_e = float(current[3])

    e_o = eta_e * eps_d - eta_d * eps_e - np.cross(eps_d, eps_e)
    return float(e_o[2])

#--------------------------------------------------------------------------------
def world_to_body(point: Sequence[float], pose: Pose3D) -> np.ndarray:
    """
    Express a world-frame point in the body frame of `pose`
    (x forward, y left, z up).
    """
    offset = np.asarray(point, dtype=float) - pose.as_array()
    rotation = Rotation.from_quat(pose.orientation)
    return rotation.inv().apply(offset)

#--------------------------------------------------------------------------------
def transform_2d(tx, ty, theta, x, y):
    # Rotation
    # [x']   [cosθ  -sinθ tx]   [x]
    # [y'] = [sinθ   cosθ ty] * [y]
    # [z']   [ 0      0    1]   [1]

    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    # Apply rotation + translation
    item_x = tx + cos_t * x - sin_t * y
    item_y = ty + sin_t * x + cos_t * y

    return item_x, item_y

#--------------------------------------------------------------------------------
def euclidean(a, b):
    """Euclidean distance between two points of any (matching) dimension."""
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))

#--------------------------------------------------------------------------------
def wrap_to_pi(angle: float) -> float:
    return math.atan2(math.sin(angle), math.cos(angle))
