import pytest

from robot_common.robot_model import RobotModel
from surface_navigator.config.nav_configs import ControllerPolicy
from surface_navigator.config.planner_presets import load_planner_config


def test_defaults_follow_node_parameters():
    robot, surface, controller = load_planner_config({})

    assert robot.height_m == 0.5
    assert robot.radius_m == 0.5
    assert robot.max_superable_height_m == 0.2
    assert surface.treat_unknown_as_free is False
    assert surface.propagation_factor == 1.8
    assert controller.goal_reached_threshold == 0.2
    assert controller.controller_frequency == 2.0
    assert controller.local_target_radius == 0.4
    assert controller.linear_gain == 0.5
    assert controller.angular_gain == 1.0


def test_overrides_by_parameter_name():
    robot, surface, controller = load_planner_config({
        'robot_height': 0.4,
        'treat_unknown_as_free': True,
        'twist_linear_gain': 0.3,
        'controller_frequency': 10,
        'not_a_parameter': 1.0,
    })

    assert robot.height_m == 0.4
    assert surface.treat_unknown_as_free is True
    assert controller.linear_gain == 0.3
    assert controller.period_s == pytest.approx(0.1)


def test_invalid_values_are_rejected():
    with pytest.raises(ValueError):
        RobotModel(height_m=0.0)
    with pytest.raises(ValueError):
        ControllerPolicy(controller_frequency=0.0)
    with pytest.raises(ValueError):
        load_planner_config({'local_target_radius': -1.0})
