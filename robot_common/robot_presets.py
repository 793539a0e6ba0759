""" Presets for robot configurations.  """

from robot_common.robot_model import RobotModel

# Default tracked-robot preset
DEFAULT_MODEL = RobotModel(
    height_m=0.5,
    radius_m=0.5,
    max_superable_height_m=0.2,
    safety_margin_m=0.0
)
