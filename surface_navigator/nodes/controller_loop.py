import logging
import time
from typing import Callable, List, Optional

from robot_common.geometry import Pose3D
from robot_common.logging import LogEvent, log_error, log_info
from surface_navigator.config.nav_configs import ControllerState, PlannerError
from surface_navigator.controllers.arc_follow import VelocityCommand
from surface_navigator.octomap_planner import OctomapPathPlanner, TickResult

# Pose lookup. May return None or raise when the pose is not available.
PoseSource = Callable[[], Optional[Pose3D]]
# Receives every emitted command, zero commands included
CommandSink = Callable[[VelocityCommand], None]


class ControllerLoop:
    """
    Fixed-rate driver for OctomapPathPlanner.tick().

    Each iteration pulls the pose, ticks the planner and publishes the
    command. The loop ends when the goal is reached, the planner goes idle,
    or max_ticks iterations have run.
    """

    def __init__(
        self,
        planner: OctomapPathPlanner,
        pose_source: PoseSource,
        command_sink: CommandSink,
        sleep: Callable[[float], None] = time.sleep,
        logger=None,
    ):
        self._planner = planner
        self._pose_source = pose_source
        self._command_sink = command_sink
        self._sleep = sleep
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._last_log_event: Optional[LogEvent] = None

    #----------------------------------------------------------------------------------
    def step(self) -> TickResult:
        """Single loop iteration."""
        try:
            pose = self._pose_source()
        except Exception as e:
            # A failed lookup only costs this tick
            self._last_log_event = log_error(
                self._logger,
                e,
                self.step.__qualname__,
                'Error looking up robot pose',
                self._last_log_event
            )
            pose = None

        result = self._planner.tick(pose)
        self._command_sink(result.command)
        return result

    #----------------------------------------------------------------------------------
    def run(self, max_ticks: Optional[int] = None) -> List[TickResult]:
        """
        Tick at the planner's controller frequency until it stops.

        Returns:
            the TickResult of every iteration, in order
        """
        delay_s = self._planner.controller_period_s
        results: List[TickResult] = []

        while self._planner.is_active:
            if max_ticks is not None and len(results) >= max_ticks:
                break

            results.append(self.step())

            if results[-1].state == ControllerState.GOAL_REACHED:
                self._last_log_event = log_info(
                    self._logger,
                    'goal reached! stopping controller loop',
                    self.run.__qualname__,
                    self._last_log_event
                )
                break

            self._sleep(delay_s)

        return results

    #----------------------------------------------------------------------------------
    @staticmethod
    def count_errors(results: List[TickResult], error: PlannerError) -> int:
        return sum(1 for r in results if r.error == error)
