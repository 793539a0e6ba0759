import math
from dataclasses import dataclass


@dataclass(frozen=True)
class VelocityCommand:
    linear_x: float = 0.0    # m/s, forward
    angular_z: float = 0.0   # rad/s, counter-clockwise

    @property
    def is_zero(self) -> bool:
        return self.linear_x == 0.0 and self.angular_z == 0.0


STOP = VelocityCommand()

#--------------------------------------------------------------------------------
def arc_twist(x: float, y: float, linear_gain: float, angular_gain: float) -> VelocityCommand:
    """
    Velocity command driving along the circular arc through the robot origin
    and a target point given in the robot frame (x forward, y left).

    Targets behind the robot or more than 45 degrees off the heading
    (|y| > x) turn in place instead.
    """
    # turn in place
    if x < 0.0 or abs(y) > x:
        return VelocityCommand(
            linear_x=0.0,
            angular_z=(1.0 if y > 0.0 else -1.0) * angular_gain
        )

    # zero curvature
    if y == 0.0:
        return VelocityCommand(linear_x=linear_gain * x, angular_z=0.0)

    # make arc
    center_y = (x * x + y * y) / (2.0 * y)
    theta = abs(math.atan2(x, abs(center_y) - abs(y)))
    arc_length = abs(center_y * theta)

    return VelocityCommand(
        linear_x=linear_gain * arc_length,
        angular_z=angular_gain * math.copysign(1.0, y) * theta
    )
