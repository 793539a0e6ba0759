import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from robot_common.geometry import (
    MIN_QUATERNION_NORM_SQ,
    ZERO_QUATERNION,
    Pose3D,
    euclidean,
    quaternion_norm_sq,
    quaternion_yaw_error,
    world_to_body,
)
from robot_common.logging import LogEvent, log_debug, log_info, log_warn
from robot_common.robot_model import RobotModel
from robot_common.robot_presets import DEFAULT_MODEL
from surface_navigator.config.map_configs import SurfacePolicy
from surface_navigator.config.nav_configs import ControllerPolicy, ControllerState, PlannerError
from surface_navigator.config.planner_presets import DEFAULT_CONTROLLER_POLICY, DEFAULT_SURFACE_POLICY
from surface_navigator.controllers.arc_follow import STOP, VelocityCommand
from surface_navigator.controllers.motion_controller import MotionController
from surface_navigator.mapping.occupancy_map import OccupancyMap
from surface_navigator.mapping.surface_cache import SurfaceSnapshot, build_surface_snapshot
from surface_navigator.planners.distance_field import DistanceField, extract_path, solve_distance_field
from surface_navigator.planners.local_target import select_local_target


@dataclass(frozen=True)
class NavigationGoal:
    requested_position: tuple    # as received
    position: tuple              # projected onto the ground surface
    orientation: tuple           # (x, y, z, w); all zeros = position only

    @property
    def has_orientation(self) -> bool:
        return quaternion_norm_sq(self.orientation) >= MIN_QUATERNION_NORM_SQ


@dataclass(frozen=True)
class TickResult:
    command: VelocityCommand
    state: ControllerState
    error: Optional[PlannerError] = None
    position_error: Optional[float] = None
    orientation_error: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class OctomapPathPlanner:
    """
    Local planner over a 3-D occupancy map.

    Map updates rebuild the ground/obstacle surface, goal requests project the
    goal onto it; either one re-solves the distance field. tick() turns the
    current pose into a velocity command. Calls must be serialized by the host.
    """

    def __init__(
        self,
        robot_model: RobotModel = DEFAULT_MODEL,
        surface_policy: SurfacePolicy = DEFAULT_SURFACE_POLICY,
        controller_policy: ControllerPolicy = DEFAULT_CONTROLLER_POLICY,
        logger=None,
    ):
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._last_log_event: Optional[LogEvent] = None

        self._robot_model = robot_model
        self._surface_policy = surface_policy
        self._controller_policy = controller_policy

        self._surface: Optional[SurfaceSnapshot] = None
        self._field: Optional[DistanceField] = None
        self._goal: Optional[NavigationGoal] = None
        self._requested_goal: Optional[tuple] = None  # (position, orientation)
        self._goal_pending = False  # requested but not yet projected

        self._position_error: Optional[float] = None
        self._orientation_error: Optional[float] = None
        self._local_target: Optional[np.ndarray] = None

        self._controller = MotionController(
            reached_threshold=controller_policy.goal_reached_threshold,
            linear_gain=controller_policy.linear_gain,
            angular_gain=controller_policy.angular_gain,
            orientation_tolerance=controller_policy.orientation_tolerance,
        )

    #----------------------------------------------------------------------------------
    def update_map(self, occ_map: OccupancyMap):
        """Replace the surface with one derived from occ_map; re-solve if a goal is set."""
        self._surface = build_surface_snapshot(
            occ_map,
            robot_height=self._robot_model.height_m,
            robot_radius=self._robot_model.inflation_radius_m,
            max_superable_height=self._robot_model.max_superable_height_m,
            treat_unknown_as_free=self._surface_policy.treat_unknown_as_free,
        )
        self._field = None
        self._last_log_event = log_info(
            self._logger,
            f'surface rebuilt: {len(self._surface.ground_points)} ground, '
            f'{len(self._surface.obstacle_points)} obstacle points',
            self.update_map.__qualname__,
            self._last_log_event
        )

        if self._requested_goal is None:
            return

        position, orientation = self._requested_goal
        goal = self._project_goal(position, orientation)
        if goal is None:
            self._last_log_event = log_warn(
                self._logger,
                'goal can no longer be projected onto the ground surface',
                self.update_map.__qualname__,
                self._last_log_event
            )
            return
        self._goal = goal
        if not self._solve_field():
            return

        if self._goal_pending:
            self._goal_pending = False
            self._last_log_event = log_info(
                self._logger,
                f'pending goal projected to {goal.position}, starting controller',
                self.update_map.__qualname__,
                self._last_log_event
            )
            self._controller.start()

    #----------------------------------------------------------------------------------
    def set_goal(self, position: Sequence[float], orientation: Optional[Sequence[float]] = None) -> Optional[PlannerError]:
        """
        Replace the goal and (re)start the controller.

        Args:
            position: (x, y, z) in the map frame
            orientation: optional (x, y, z, w); omitted = position-only goal
        Returns:
            None on success, otherwise the PlannerError that prevented the start
        """
        position = tuple(float(c) for c in position)
        orientation = ZERO_QUATERNION if orientation is None else tuple(float(c) for c in orientation)

        self._requested_goal = (position, orientation)
        self._goal_pending = False
        self._local_target = None
        self._controller.stop()

        goal = self._project_goal(position, orientation)
        if goal is None:
            # Kept pending: the controller starts once a map update can project it
            self._goal_pending = True
            self._goal = None
            self._field = None
            self._last_log_event = log_warn(
                self._logger,
                f'failed to project goal {position} onto the ground surface',
                self.set_goal.__qualname__,
                self._last_log_event
            )
            return PlannerError.GOAL_PROJECTION

        self._goal = goal
        if not self._solve_field():
            return PlannerError.GOAL_UNREACHABLE

        self._last_log_event = log_info(
            self._logger,
            f'goal set to {goal.position}' + (f', {goal.orientation}' if goal.has_orientation else ''),
            self.set_goal.__qualname__,
            self._last_log_event
        )
        self._controller.start()
        return None

    #----------------------------------------------------------------------------------
    def tick(self, pose: Optional[Pose3D]) -> TickResult:
        """
        One controller step. Failed steps emit a zero command and leave the
        controller running for the next tick.
        """
        if not self._controller.is_active():
            return TickResult(command=STOP, state=self._controller.state)

        if pose is None:
            return self._failed_tick(PlannerError.POSE_UNAVAILABLE, 'robot pose unavailable')

        if self._field is None:
            return self._failed_tick(PlannerError.GOAL_UNREACHABLE, 'no distance field for the current goal')

        self._position_error = euclidean(pose.position, self._goal.position)
        self._orientation_error = quaternion_yaw_error(self._goal.orientation, pose.orientation)

        previous_state = self._controller.state
        command = self._controller.tick(
            self._position_error,
            self._orientation_error,
            lambda: self._local_target_in_body(pose)
        )
        state = self._controller.state

        if state != previous_state:
            self._last_log_event = log_info(
                self._logger,
                f'{previous_state.name} -> {state.name}',
                self.tick.__qualname__,
                self._last_log_event
            )

        if command is None:
            return self._failed_tick(PlannerError.NO_LOCAL_TARGET, 'no ground point within lookahead radius')

        self._last_log_event = log_debug(
            self._logger,
            f'ep={self._position_error:.3f}, eo={self._orientation_error:.3f}, status={state.name}',
            self.tick.__qualname__,
            self._last_log_event
        )
        return TickResult(
            command=command,
            state=state,
            position_error=self._position_error,
            orientation_error=self._orientation_error,
        )

    #----------------------------------------------------------------------------------
    # Diagnostics
    #----------------------------------------------------------------------------------
    @property
    def state(self) -> ControllerState:
        return self._controller.state

    @property
    def is_active(self) -> bool:
        return self._controller.is_active()

    @property
    def controller_period_s(self) -> float:
        return self._controller_policy.period_s

    @property
    def goal(self) -> Optional[NavigationGoal]:
        return self._goal

    @property
    def surface(self) -> Optional[SurfaceSnapshot]:
        return self._surface

    @property
    def field(self) -> Optional[DistanceField]:
        return self._field

    @property
    def position_error(self) -> Optional[float]:
        return self._position_error

    @property
    def orientation_error(self) -> Optional[float]:
        return self._orientation_error

    @property
    def local_target(self) -> Optional[np.ndarray]:
        """Last selected local target, map frame."""
        return self._local_target

    #----------------------------------------------------------------------------------
    def ground_cloud(self) -> np.ndarray:
        """(N, 4) ground points with the normalized distance in the last column."""
        if self._surface is None:
            return np.empty((0, 4))
        points = self._surface.ground_points
        if self._field is None:
            values = np.full(len(points), np.inf)
        else:
            values = self._field.normalized
        return np.column_stack([points, values])

    #----------------------------------------------------------------------------------
    def obstacle_cloud(self) -> np.ndarray:
        if self._surface is None:
            return np.empty((0, 3))
        return self._surface.obstacle_points

    #----------------------------------------------------------------------------------
    def path_to_goal(self, position: Sequence[float]) -> List[np.ndarray]:
        """Ground points descending the field from position to the goal."""
        if self._surface is None or self._field is None:
            return []
        return extract_path(
            self._surface,
            self._field,
            position,
            self._surface_policy.propagation_factor
        )

    #----------------------------------------------------------------------------------
    def _project_goal(self, position: tuple, orientation: tuple) -> Optional[NavigationGoal]:
        if self._surface is None:
            return None
        nearest = self._surface.ground_index.nearest(position)
        if nearest is None:
            return None
        index, _ = nearest
        return NavigationGoal(
            requested_position=position,
            position=tuple(float(c) for c in self._surface.ground_points[index]),
            orientation=orientation,
        )

    #----------------------------------------------------------------------------------
    def _solve_field(self) -> bool:
        self._field = solve_distance_field(
            self._surface,
            self._goal.position,
            self._surface_policy.propagation_factor,
            self._surface_policy.normalization_eps,
        )
        if self._field is None:
            self._last_log_event = log_warn(
                self._logger,
                'unable to seed the distance field: ground surface is empty',
                self._solve_field.__qualname__,
                self._last_log_event
            )
            return False

        unreachable = int(np.count_nonzero(~self._field.reachable_mask))
        self._last_log_event = log_info(
            self._logger,
            f'distance field solved over {len(self._field.raw)} points ({unreachable} unreachable)',
            self._solve_field.__qualname__,
            self._last_log_event
        )
        return True

    #----------------------------------------------------------------------------------
    def _local_target_in_body(self, pose: Pose3D) -> Optional[np.ndarray]:
        index = select_local_target(
            self._surface,
            self._field,
            pose.position,
            self._controller_policy.local_target_radius
        )
        if index is None:
            return None
        self._local_target = self._surface.ground_points[index]
        return world_to_body(self._local_target, pose)

    #----------------------------------------------------------------------------------
    def _failed_tick(self, error: PlannerError, message: str) -> TickResult:
        self._last_log_event = log_warn(
            self._logger,
            f'{error.value}: {message}',
            self.tick.__qualname__,
            self._last_log_event
        )
        return TickResult(
            command=STOP,
            state=self._controller.state,
            error=error,
            position_error=self._position_error,
            orientation_error=self._orientation_error,
        )
