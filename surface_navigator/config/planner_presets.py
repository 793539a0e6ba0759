""" Presets and parameter loading for the planner. """

import dataclasses
import logging
from typing import Mapping, Tuple

from robot_common.robot_model import RobotModel
from robot_common.robot_presets import DEFAULT_MODEL
from surface_navigator.config.map_configs import SurfacePolicy
from surface_navigator.config.nav_configs import ControllerPolicy

logger = logging.getLogger(__name__)

DEFAULT_SURFACE_POLICY = SurfacePolicy()
DEFAULT_CONTROLLER_POLICY = ControllerPolicy()

# Node parameter name -> (section, dataclass field)
PARAMETER_FIELDS = {
    'robot_height': ('robot', 'height_m'),
    'robot_radius': ('robot', 'radius_m'),
    'max_superable_height': ('robot', 'max_superable_height_m'),
    'treat_unknown_as_free': ('surface', 'treat_unknown_as_free'),
    'goal_reached_threshold': ('controller', 'goal_reached_threshold'),
    'controller_frequency': ('controller', 'controller_frequency'),
    'local_target_radius': ('controller', 'local_target_radius'),
    'twist_linear_gain': ('controller', 'linear_gain'),
    'twist_angular_gain': ('controller', 'angular_gain'),
}

#--------------------------------------------------------------------------------
def load_planner_config(
        params: Mapping[str, object],
        robot_model: RobotModel = DEFAULT_MODEL,
        surface_policy: SurfacePolicy = DEFAULT_SURFACE_POLICY,
        controller_policy: ControllerPolicy = DEFAULT_CONTROLLER_POLICY,
) -> Tuple[RobotModel, SurfacePolicy, ControllerPolicy]:
    """
    Overlay a flat parameter mapping (node parameter names) onto the presets.

    Args:
        params: e.g. {'robot_height': 0.4, 'twist_linear_gain': 0.3}
    Returns:
        (robot_model, surface_policy, controller_policy)
    """
    overrides = {'robot': {}, 'surface': {}, 'controller': {}}
    for name, value in params.items():
        if name not in PARAMETER_FIELDS:
            logger.warning(f"ignoring unknown planner parameter '{name}'")
            continue
        section, field_name = PARAMETER_FIELDS[name]
        overrides[section][field_name] = bool(value) if field_name == 'treat_unknown_as_free' else float(value)

    return (
        dataclasses.replace(robot_model, **overrides['robot']),
        dataclasses.replace(surface_policy, **overrides['surface']),
        dataclasses.replace(controller_policy, **overrides['controller']),
    )
