import math

import numpy as np

from robot_common.geometry import (
    ZERO_QUATERNION,
    Pose3D,
    euclidean,
    quaternion_to_yaw,
    quaternion_yaw_error,
    world_to_body,
    yaw_to_quaternion,
)


def test_yaw_round_trip():
    for yaw in (-2.5, -0.3, 0.0, 1.2, 3.0):
        assert math.isclose(quaternion_to_yaw(yaw_to_quaternion(yaw)), yaw, abs_tol=1e-12)


def test_yaw_error_zero_for_position_only_goal():
    current = yaw_to_quaternion(1.0)
    assert quaternion_yaw_error(ZERO_QUATERNION, current) == 0.0
    assert quaternion_yaw_error(None, current) == 0.0
    assert quaternion_yaw_error((0.0, 0.0, 0.001, 0.001), current) == 0.0


def test_yaw_error_sign_follows_desired_rotation():
    current = yaw_to_quaternion(0.0)

    ahead = quaternion_yaw_error(yaw_to_quaternion(0.2), current)
    behind = quaternion_yaw_error(yaw_to_quaternion(-0.2), current)

    assert math.isclose(ahead, math.sin(0.1), rel_tol=1e-9)
    assert math.isclose(behind, -math.sin(0.1), rel_tol=1e-9)
    assert quaternion_yaw_error(current, current) == 0.0


def test_world_to_body_rotates_and_translates():
    pose = Pose3D.from_xyz_yaw(1.0, 1.0, 0.0, math.pi / 2)

    ahead = world_to_body((1.0, 2.0, 0.0), pose)
    left = world_to_body((0.0, 1.0, 0.0), pose)

    assert np.allclose(ahead, [1.0, 0.0, 0.0], atol=1e-9)
    assert np.allclose(left, [0.0, 1.0, 0.0], atol=1e-9)


def test_euclidean_is_three_dimensional():
    assert math.isclose(euclidean((0, 0, 0), (1, 2, 2)), 3.0)
