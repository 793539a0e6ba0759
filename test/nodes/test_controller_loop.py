from robot_common.geometry import Pose3D
from robot_common.robot_model import RobotModel
from surface_navigator.config.nav_configs import ControllerState, PlannerError
from surface_navigator.nodes.controller_loop import ControllerLoop
from surface_navigator.octomap_planner import OctomapPathPlanner
from surface_navigator.tools.sim_demo import build_demo_map

FLOOR_Z = 0.05


def make_planner():
    planner = OctomapPathPlanner(robot_model=RobotModel(height_m=0.5, radius_m=0.2, max_superable_height_m=0.2))
    planner.update_map(build_demo_map(1.0, 0.1))
    planner.set_goal((0.55, 0.55, FLOOR_Z))
    return planner


def test_failed_pose_lookup_only_skips_that_tick():
    planner = make_planner()
    poses = iter([None, Pose3D.from_xyz_yaw(0.55, 0.55, FLOOR_Z)])
    sent = []

    def pose_source():
        pose = next(poses)
        if pose is None:
            raise LookupError('transform not available')
        return pose

    sleeps = []
    loop = ControllerLoop(planner, pose_source, sent.append, sleep=sleeps.append)
    results = loop.run(max_ticks=5)

    assert [r.error for r in results] == [PlannerError.POSE_UNAVAILABLE, None]
    assert results[-1].state == ControllerState.GOAL_REACHED
    assert all(cmd.is_zero for cmd in sent)
    assert sleeps == [planner.controller_period_s]
    assert ControllerLoop.count_errors(results, PlannerError.POSE_UNAVAILABLE) == 1


def test_max_ticks_bounds_the_loop():
    planner = make_planner()
    sent = []

    loop = ControllerLoop(planner, lambda: None, sent.append, sleep=lambda _: None)
    results = loop.run(max_ticks=3)

    assert len(results) == 3
    assert len(sent) == 3
    assert planner.is_active


def test_idle_planner_does_not_tick():
    planner = OctomapPathPlanner()
    sent = []

    results = ControllerLoop(planner, lambda: None, sent.append).run()

    assert results == []
    assert sent == []
