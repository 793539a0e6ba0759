# robot_common/robot_model.py
from dataclasses import dataclass

@dataclass(frozen=True)
class RobotModel:
    height_m: float = 0.5                  # clearance needed above a ground voxel
    radius_m: float = 0.5                  # footprint radius
    max_superable_height_m: float = 0.2    # tallest step the robot climbs over
    safety_margin_m: float = 0.0

    def __post_init__(self):
        if self.height_m <= 0.0:
            raise ValueError(f"robot height must be positive, got {self.height_m}")
        if self.radius_m < 0.0 or self.safety_margin_m < 0.0:
            raise ValueError("robot radius and safety margin must be non-negative")

    @property
    def inflation_radius_m(self) -> float:
        return self.radius_m + self.safety_margin_m
