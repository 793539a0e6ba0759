from dataclasses import dataclass
from enum import Enum

class ControllerState(int, Enum):
    REGULATING_POSITION = 0
    REGULATING_ORIENTATION = 1
    GOAL_REACHED = 2

class PlannerError(str, Enum):
    GOAL_PROJECTION = 'goal_projection'     # no ground point to project the goal onto
    GOAL_UNREACHABLE = 'goal_unreachable'   # distance field could not be seeded
    NO_LOCAL_TARGET = 'no_local_target'     # no ground point within lookahead of the robot
    POSE_UNAVAILABLE = 'pose_unavailable'   # robot pose lookup failed


@dataclass(frozen=True)
class ControllerPolicy:
    goal_reached_threshold: float = 0.2     # position error (m) to leave REGULATING_POSITION
    controller_frequency: float = 2.0       # Hz
    local_target_radius: float = 0.4        # lookahead radius (m)
    linear_gain: float = 0.5
    angular_gain: float = 1.0
    orientation_tolerance: float = 0.02     # rad

    def __post_init__(self):
        if self.controller_frequency <= 0.0:
            raise ValueError(f"controller frequency must be positive, got {self.controller_frequency}")
        if self.local_target_radius <= 0.0:
            raise ValueError(f"local target radius must be positive, got {self.local_target_radius}")
        if self.goal_reached_threshold < 0.0:
            raise ValueError("goal reached threshold must be non-negative")

    @property
    def period_s(self) -> float:
        return 1.0 / self.controller_frequency
