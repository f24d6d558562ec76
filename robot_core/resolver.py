"""
InputResolver - turns operator input and robot feedback into one desired state.

Priority, highest first:
1. Direct overrides (force aim / intake front / intake back / handoff / amp)
2. Stow
3. Intaking, with automatic front/back selection from chassis velocity
4. Place, whose meaning depends on the active mode
5. Mode automation (field zones, climb sub-modes)
6. REST

Mode memory is updated before any of these, and the climb sub-mode resets
whenever the robot is not in climb mode. Overrides and stow that do not
intake clear the intaking mode, so back-intake heading alignment never
outlives the intake request. The resolver holds no hardware
references: everything it reads comes in through the snapshot and the
feedback, so a given input sequence always resolves the same way.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .statemachines import DriveState
from .types import (
    ClimbMode,
    IntakingMode,
    InputSnapshot,
    Pose2d,
    ResolverConfig,
    RobotFeedback,
    TeleopMode,
    TeleopState,
)


logger = logging.getLogger(__name__)


CLIMB_STATES = {
    ClimbMode.ALIGN: TeleopState.ALIGN_CLIMB,
    ClimbMode.EXTEND: TeleopState.CLIMB_EXTEND,
    ClimbMode.RETRACT: TeleopState.CLIMB_RETRACT,
    ClimbMode.BALANCE: TeleopState.CLIMB_BALANCE,
}


@dataclass(frozen=True)
class Resolution:
    """Everything the resolver decided this tick"""
    teleop_state: TeleopState
    drive_state: DriveState
    mode: TeleopMode


class InputResolver:
    """
    Resolves a TeleopState and a DriveState every tick.

    Keeps the mode memory (TeleopMode, IntakingMode, ClimbMode) between
    ticks; everything else is recomputed.
    """

    def __init__(self, config: Optional[ResolverConfig] = None) -> None:
        """
        Args:
            config: Field zones and thresholds (default: ResolverConfig())
        """
        self.config = config or ResolverConfig()
        self.reset()

    def reset(self) -> None:
        """Return to startup mode memory"""
        self.mode = TeleopMode.SPEAKER
        self.intaking_mode = IntakingMode.NONE
        self.climb_mode = ClimbMode.ALIGN
        self.aiming = False

    def resolve(self, snapshot: InputSnapshot, feedback: RobotFeedback) -> Resolution:
        """
        Resolve this tick's desired states.

        Args:
            snapshot: Operator inputs for this tick
            feedback: Pose, chassis speeds and note state for this tick

        Returns:
            Resolution with the teleop state, drive state and active mode
        """
        teleop_state = self._wanted_teleop_state(snapshot, feedback)
        drive_state = self._wanted_drive_state(snapshot)
        return Resolution(teleop_state, drive_state, self.mode)

    def _update_mode(self, snapshot: InputSnapshot) -> None:
        mode = self.mode
        if snapshot.wants_amp_mode:
            mode = TeleopMode.AMP
        if snapshot.wants_climb_mode:
            mode = TeleopMode.CLIMB
        if snapshot.wants_speaker_mode:
            mode = TeleopMode.SPEAKER

        if mode != self.mode:
            logger.info(f"Mode: {self.mode.name} -> {mode.name}")
            self.mode = mode

        # Stale climb progress must not survive leaving climb mode
        if self.mode != TeleopMode.CLIMB:
            self.climb_mode = ClimbMode.ALIGN

    def _wanted_teleop_state(self, snapshot: InputSnapshot, feedback: RobotFeedback) -> TeleopState:
        self._update_mode(snapshot)
        self.aiming = False

        # Direct overrides
        if snapshot.force_aim:
            self.intaking_mode = IntakingMode.NONE
            return TeleopState.AUTO_AIM
        if snapshot.force_intake_front:
            self.intaking_mode = IntakingMode.FRONT
            return TeleopState.INTAKE_FRONT
        if snapshot.force_intake_back:
            self.intaking_mode = IntakingMode.BACK
            return TeleopState.INTAKE_BACK
        if snapshot.force_handoff:
            self.intaking_mode = IntakingMode.NONE
            return TeleopState.HANDOFF
        if snapshot.force_amp:
            self.intaking_mode = IntakingMode.NONE
            return TeleopState.ALIGN_AMP

        if snapshot.wants_stow:
            self.intaking_mode = IntakingMode.NONE
            return TeleopState.STOW

        self.intaking_mode = self._wanted_intaking_mode(snapshot, feedback)
        if self.intaking_mode == IntakingMode.FRONT:
            return TeleopState.INTAKE_FRONT
        if self.intaking_mode == IntakingMode.BACK:
            return TeleopState.INTAKE_BACK

        if snapshot.wants_place:
            if self.mode == TeleopMode.AMP:
                return TeleopState.PLACE_AMP
            if self.mode == TeleopMode.CLIMB and self.climb_mode == ClimbMode.RETRACT:
                return TeleopState.PLACE_TRAP
            if self.mode == TeleopMode.SPEAKER:
                return TeleopState.SHOOT

        pose = self._blue_alliance_pose(snapshot, feedback)

        if self.mode == TeleopMode.AMP:
            if self._in_amp_align_zone(pose):
                return TeleopState.ALIGN_AMP
            if feedback.shooter_has_note and self._in_handoff_zone(pose):
                return TeleopState.HANDOFF
            return TeleopState.REST

        if self.mode == TeleopMode.CLIMB:
            self.climb_mode = self._wanted_climb_mode(snapshot)
            return CLIMB_STATES[self.climb_mode]

        self.aiming = self._in_aim_zone(pose)
        if snapshot.wants_shoot:
            return TeleopState.SHOOT
        if self.aiming:
            return TeleopState.AUTO_AIM
        return TeleopState.REST

    def _wanted_drive_state(self, snapshot: InputSnapshot) -> DriveState:
        auto_heading = not snapshot.disable_auto_heading

        if auto_heading and (snapshot.force_aim or self.aiming):
            return DriveState.AIM
        if auto_heading and self.intaking_mode == IntakingMode.BACK:
            return DriveState.ALIGN_INTAKING
        if snapshot.robot_centric or not snapshot.field_relative:
            return DriveState.ROBOT_CENTRIC
        if snapshot.lock_in:
            return DriveState.LOCK_IN
        if snapshot.open_loop:
            return DriveState.OPEN_LOOP_TELEOP
        return DriveState.CLOSED_LOOP_TELEOP

    def _wanted_intaking_mode(self, snapshot: InputSnapshot, feedback: RobotFeedback) -> IntakingMode:
        if not snapshot.wants_intake:
            return IntakingMode.NONE

        mode = self.intaking_mode
        if mode == IntakingMode.NONE:
            mode = IntakingMode.BACK

        # Intake on whichever side the robot is driving toward
        if feedback.speeds is not None:
            threshold = self.config.intake_transition_velocity
            if feedback.speeds.vx < -threshold:
                return IntakingMode.BACK
            if feedback.speeds.vx > threshold:
                return IntakingMode.FRONT
        return mode

    def _wanted_climb_mode(self, snapshot: InputSnapshot) -> ClimbMode:
        if not snapshot.wants_align:
            return ClimbMode.ALIGN
        if snapshot.wants_balance:
            return ClimbMode.BALANCE
        if snapshot.wants_climb_extend:
            return ClimbMode.EXTEND
        if snapshot.wants_climb_retract:
            return ClimbMode.RETRACT
        return self.climb_mode

    def _blue_alliance_pose(self, snapshot: InputSnapshot, feedback: RobotFeedback) -> Optional[Pose2d]:
        """Pose mirrored to blue-alliance coordinates"""
        pose = feedback.pose
        if pose is None or not snapshot.red_alliance:
            return pose
        return Pose2d(self.config.field_length - pose.x, pose.y, 180.0 - pose.heading)

    def _in_aim_zone(self, pose: Optional[Pose2d]) -> bool:
        return pose is not None and pose.x < self.config.auto_aim_x

    def _in_handoff_zone(self, pose: Optional[Pose2d]) -> bool:
        return pose is not None and pose.x < self.config.amp_handoff_x

    def _in_amp_align_zone(self, pose: Optional[Pose2d]) -> bool:
        return (
            pose is not None
            and pose.x < self.config.amp_align_x
            and pose.y < self.config.amp_align_y
        )
