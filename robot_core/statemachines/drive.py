"""
Drive state machine.

Chooses the driving frame for the teleop command. Two states hold a
heading: AIM points the robot at the target using the aim planner, and
ALIGN_INTAKING leads with the back intake along the direction of travel.
The velocity itself is shaped and sent by TeleopDrive.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..interfaces import AimPlanner, Drivebase
from ..shaping import normalize_degrees
from ..statemachine import StateMachine
from ..types import DriveDecision


logger = logging.getLogger(__name__)


class DriveState(Enum):
    OPEN_LOOP_TELEOP = "open_loop_teleop"
    CLOSED_LOOP_TELEOP = "closed_loop_teleop"
    ROBOT_CENTRIC = "robot_centric"
    LOCK_IN = "lock_in"
    AIM = "aim"
    ALIGN_INTAKING = "align_intaking"


@dataclass(frozen=True)
class DriveSetpoint:
    field_relative: bool
    open_loop: bool
    lock_in: bool = False


SETPOINTS = {
    DriveState.OPEN_LOOP_TELEOP: DriveSetpoint(field_relative=True, open_loop=True),
    DriveState.CLOSED_LOOP_TELEOP: DriveSetpoint(field_relative=True, open_loop=False),
    DriveState.ROBOT_CENTRIC: DriveSetpoint(field_relative=False, open_loop=True),
    DriveState.LOCK_IN: DriveSetpoint(field_relative=True, open_loop=True, lock_in=True),
    DriveState.AIM: DriveSetpoint(field_relative=True, open_loop=False),
    DriveState.ALIGN_INTAKING: DriveSetpoint(field_relative=True, open_loop=True),
}

DYNAMIC_STATES = frozenset({DriveState.AIM, DriveState.ALIGN_INTAKING})


class DriveStatemachine(StateMachine[DriveState]):
    """
    Produces one DriveDecision per tick.

    A heading state with no heading available holds the last heading it
    produced (none after a state change) and reports transitioning().
    """

    def __init__(
        self,
        drivebase: Drivebase,
        aim_planner: AimPlanner,
        heading_tolerance: float = 3.0,
        min_align_speed: float = 0.3,
    ) -> None:
        """
        Args:
            drivebase: Read for pose and speeds only
            aim_planner: Source of the AIM heading
            heading_tolerance: Degrees of heading error counted as aligned
            min_align_speed: Travel speed (m/s) below which intake alignment has no direction
        """
        super().__init__("drive", DriveState.OPEN_LOOP_TELEOP)
        self.drivebase = drivebase
        self.aim_planner = aim_planner
        self.heading_tolerance = heading_tolerance
        self.min_align_speed = min_align_speed

        self._decision = DriveDecision()
        self._heading: Optional[float] = None
        self._heading_state: Optional[DriveState] = None
        self._target_valid = True

    def get_decision(self) -> DriveDecision:
        """Frame decision computed by the last update()"""
        return self._decision

    def is_dynamic(self) -> bool:
        return self._state in DYNAMIC_STATES

    def is_aimed(self) -> bool:
        """True once the robot points at the target"""
        return self._state == DriveState.AIM and not self.transitioning()

    def aligned_to_shoot(self) -> bool:
        """
        True unless the robot is still turning toward the target.

        Outside AIM the driver points the robot, so nothing is gated.
        """
        if self._state != DriveState.AIM:
            return True
        return not self.transitioning()

    def _travel_heading(self) -> Optional[float]:
        speeds = self.drivebase.get_chassis_speeds()
        pose = self.drivebase.get_pose()
        if speeds is None or pose is None or speeds.linear_speed < self.min_align_speed:
            return None

        # Rotate robot-relative velocity into the field frame
        heading = math.radians(pose.heading)
        field_vx = speeds.vx * math.cos(heading) - speeds.vy * math.sin(heading)
        field_vy = speeds.vx * math.sin(heading) + speeds.vy * math.cos(heading)

        # Back intake leads
        return normalize_degrees(math.degrees(math.atan2(field_vy, field_vx)) + 180.0)

    def _apply(self, state: DriveState) -> None:
        setpoint = SETPOINTS[state]
        heading = None

        if state in DYNAMIC_STATES:
            if state != self._heading_state:
                self._heading = None
                self._heading_state = state

            if state == DriveState.AIM:
                target = self.aim_planner.get_target_heading()
                if target is None and self._target_valid:
                    logger.warning("drive: no aim heading, holding last heading")
            else:
                target = self._travel_heading()

            if target is None:
                self._target_valid = False
            else:
                self._heading = normalize_degrees(target)
                self._target_valid = True
            heading = self._heading
        else:
            self._heading_state = None
            self._target_valid = True

        self._decision = DriveDecision(
            field_relative=setpoint.field_relative,
            open_loop=setpoint.open_loop,
            lock_in=setpoint.lock_in,
            heading=heading,
        )

    def transitioning(self) -> bool:
        if self._state not in DYNAMIC_STATES:
            return False
        if not self._target_valid or self._heading is None:
            return True

        pose = self.drivebase.get_pose()
        if pose is None:
            return True
        return abs(normalize_degrees(pose.heading - self._heading)) > self.heading_tolerance
