from typing import Callable, Optional, Sequence

from surface_navigator.config.nav_configs import ControllerState
from surface_navigator.controllers.arc_follow import STOP, VelocityCommand, arc_twist

# Returns the local target in the robot frame, or None if there is none
TargetProvider = Callable[[], Optional[Sequence[float]]]


class MotionController:
    """
    Goal tracking state machine:

        REGULATING_POSITION -> REGULATING_ORIENTATION -> GOAL_REACHED

    Position regulation ends once the position error drops to
    reached_threshold and only resumes if it grows past
    2 * reached_threshold. GOAL_REACHED is terminal until start() is called
    for a new goal.
    """

    def __init__(
        self,
        reached_threshold: float = 0.2,
        linear_gain: float = 0.5,
        angular_gain: float = 1.0,
        orientation_tolerance: float = 0.02,
    ):
        self.reached_threshold = reached_threshold
        self.linear_gain = linear_gain
        self.angular_gain = angular_gain
        self.orientation_tolerance = orientation_tolerance

        self._state = ControllerState.REGULATING_POSITION
        self._active = False

    #--------------------------------------------------------------------------------
    def start(self):
        self._state = ControllerState.REGULATING_POSITION
        self._active = True

    #--------------------------------------------------------------------------------
    def stop(self):
        self._active = False

    #--------------------------------------------------------------------------------
    def is_active(self) -> bool:
        return self._active

    #--------------------------------------------------------------------------------
    @property
    def state(self) -> ControllerState:
        return self._state

    #--------------------------------------------------------------------------------
    def has_reached_goal(self) -> bool:
        return self._state == ControllerState.GOAL_REACHED

    #--------------------------------------------------------------------------------
    def next_state(self, position_error: float, orientation_error: float) -> ControllerState:
        """Transition guard evaluation, without side effects."""
        if self._state == ControllerState.GOAL_REACHED:
            return ControllerState.GOAL_REACHED

        if self._state == ControllerState.REGULATING_POSITION:
            exit_threshold = self.reached_threshold
        else:
            exit_threshold = 2.0 * self.reached_threshold

        if position_error > exit_threshold:
            return ControllerState.REGULATING_POSITION
        if abs(orientation_error) > self.orientation_tolerance:
            return ControllerState.REGULATING_ORIENTATION
        return ControllerState.GOAL_REACHED

    #--------------------------------------------------------------------------------
    def tick(
        self,
        position_error: float,
        orientation_error: float,
        target_provider: TargetProvider
    ) -> Optional[VelocityCommand]:
        """
        Returns:
          VelocityCommand for this step, or None if inactive or if position
          regulation has no local target to steer towards.
        """
        if not self._active:
            return None

        self._state = self.next_state(position_error, orientation_error)

        if self._state == ControllerState.REGULATING_POSITION:
            target = target_provider()
            if target is None:
                return None
            return arc_twist(target[0], target[1], self.linear_gain, self.angular_gain)

        if self._state == ControllerState.REGULATING_ORIENTATION:
            return VelocityCommand(linear_x=0.0, angular_z=self.angular_gain * orientation_error)

        # Goal reached: stop ticking
        self._active = False
        return STOP
