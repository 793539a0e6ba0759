# For testing the planner end to end without a robot: a flat voxel plane,
# optionally split by a wall, and a unicycle that integrates the commands.

import argparse
import logging
import math
from typing import List

from robot_common.geometry import Pose3D, transform_2d, wrap_to_pi
from robot_common.robot_model import RobotModel
from surface_navigator.config.nav_configs import ControllerPolicy
from surface_navigator.config.planner_presets import DEFAULT_SURFACE_POLICY
from surface_navigator.controllers.arc_follow import VelocityCommand
from surface_navigator.mapping.occupancy_map import VoxelOccupancyMap
from surface_navigator.nodes.controller_loop import ControllerLoop
from surface_navigator.octomap_planner import OctomapPathPlanner, TickResult


def build_demo_map(
        size_m: float = 5.0,
        resolution: float = 0.1,
        clearance_m: float = 0.5,
        wall: bool = False
) -> VoxelOccupancyMap:
    """
    Single-voxel-thick floor at k=0 with free space above it.
    The optional wall runs along x at mid-height of the map and leaves a
    gap of one third of the map width at the far end.
    """
    n = int(round(size_m / resolution))
    clearance = int(math.ceil(clearance_m / resolution)) + 1

    occ_map = VoxelOccupancyMap(resolution)
    occ_map.mark_box((0, 0, 1), (n - 1, n - 1, clearance), occupied=False)
    occ_map.mark_box((0, 0, 0), (n - 1, n - 1, 0), occupied=True)

    if wall:
        mid = n // 2
        occ_map.mark_box((0, mid, 1), (2 * n // 3, mid, clearance), occupied=True)

    return occ_map


class UnicycleSim:
    """Planar unicycle moving on the floor plane at height z."""

    def __init__(self, pose: Pose3D):
        self.pose = pose
        self.commands: List[VelocityCommand] = []

    def get_pose(self) -> Pose3D:
        return self.pose

    def apply(self, cmd: VelocityCommand):
        self.commands.append(cmd)

    def advance(self, dt: float):
        if not self.commands:
            return
        cmd = self.commands[-1]
        x, y, z = self.pose.position
        yaw = self.pose.yaw

        # Exact arc integration in the body frame, then rotate into the world
        dtheta = cmd.angular_z * dt
        if abs(cmd.angular_z) < 1e-9:
            dx_body, dy_body = cmd.linear_x * dt, 0.0
        else:
            turn_radius = cmd.linear_x / cmd.angular_z
            dx_body = turn_radius * math.sin(dtheta)
            dy_body = turn_radius * (1.0 - math.cos(dtheta))

        new_x, new_y = transform_2d(x, y, yaw, dx_body, dy_body)
        self.pose = Pose3D.from_xyz_yaw(new_x, new_y, z, wrap_to_pi(yaw + dtheta))


def run_demo(
        size_m: float = 5.0,
        resolution: float = 0.1,
        wall: bool = False,
        max_ticks: int = 500,
        planner: OctomapPathPlanner = None,
) -> List[TickResult]:
    """Drive from the (size, size) corner to the origin corner."""
    if planner is None:
        planner = OctomapPathPlanner(
            robot_model=RobotModel(height_m=0.5, radius_m=0.2, max_superable_height_m=0.2),
            surface_policy=DEFAULT_SURFACE_POLICY,
            controller_policy=ControllerPolicy(controller_frequency=2.0),
        )
    planner.update_map(build_demo_map(size_m, resolution, wall=wall))

    floor_z = 0.5 * resolution
    near, far = 0.5 * resolution, size_m - 0.5 * resolution
    error = planner.set_goal((near, near, floor_z))
    if error is not None:
        raise RuntimeError(f"demo goal rejected: {error.value}")

    # Start facing the goal
    sim = UnicycleSim(Pose3D.from_xyz_yaw(far, far, floor_z, math.atan2(near - far, near - far)))
    dt = planner.controller_period_s

    def sink(cmd: VelocityCommand):
        sim.apply(cmd)
        sim.advance(dt)

    loop = ControllerLoop(planner, sim.get_pose, sink, sleep=lambda _: None)
    return loop.run(max_ticks=max_ticks)


def main(args=None):
    parser = argparse.ArgumentParser(description="Drive a simulated robot across a voxel plane.")
    parser.add_argument('--size', type=float, default=5.0, help="plane edge length (m)")
    parser.add_argument('--resolution', type=float, default=0.1, help="voxel edge length (m)")
    parser.add_argument('--wall', action='store_true', help="add a wall with a gap")
    parser.add_argument('--max-ticks', type=int, default=500)
    parser.add_argument('--show', action='store_true', help="show the distance field when done")
    opts = parser.parse_args(args)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    planner = OctomapPathPlanner(
        robot_model=RobotModel(height_m=0.5, radius_m=0.2, max_superable_height_m=0.2),
    )
    results = run_demo(opts.size, opts.resolution, opts.wall, opts.max_ticks, planner=planner)

    last = results[-1]
    print(f"ticks: {len(results)}, final state: {last.state.name}, "
          f"position error: {planner.position_error:.3f} m")

    if opts.show:
        from surface_navigator.mapping.field_viz import FieldVisualizerCV

        viz = FieldVisualizerCV()
        viz.update(planner.surface, planner.field)
        far = opts.size - 0.5 * opts.resolution
        viz.show(
            path=planner.path_to_goal((far, far, 0.5 * opts.resolution)),
            goal=planner.goal.position,
            target=planner.local_target,
        )


if __name__ == '__main__':
    main()
