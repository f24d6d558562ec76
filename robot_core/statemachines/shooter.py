"""
Shooter state machine - flywheel and trigger.

The note switches drive the automatic edges: a note arriving at either
switch forces INDEX, and an empty INDEX request spins down. Indexing
centres the note between the two switches with the trigger roller.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..interfaces import AimPlanner, ShooterIO
from ..statemachine import StateMachine


logger = logging.getLogger(__name__)


class ShooterState(Enum):
    RAMP_DOWN = "ramp_down"
    COAST = "coast"
    INTAKE = "intake"
    INDEX = "index"
    HANDOFF = "handoff"            # Feed the note to the diverter
    AIM_LAYUP = "aim_layup"
    AIM_PROTECTED = "aim_protected"
    AUTO_AIM = "auto_aim"
    SHOOT = "shoot"


class FlywheelMode(Enum):
    VELOCITY = "velocity"
    BRAKE = "brake"
    COAST = "coast"


@dataclass(frozen=True)
class ShooterSetpoint:
    flywheel_velocity: float       # rotations per second
    trigger_percent: float


@dataclass(frozen=True)
class ShooterCommand:
    """What was last sent to the shooter hardware"""
    flywheel_mode: FlywheelMode
    flywheel_velocity: float = 0.0
    trigger_percent: float = 0.0


SETPOINTS = {
    ShooterState.RAMP_DOWN: ShooterSetpoint(0.0, 0.0),
    ShooterState.COAST: ShooterSetpoint(0.0, 0.0),
    ShooterState.INTAKE: ShooterSetpoint(-10.0, 1.0),
    ShooterState.INDEX: ShooterSetpoint(0.0, 0.2),
    ShooterState.HANDOFF: ShooterSetpoint(20.0, 1.0),
    ShooterState.AIM_LAYUP: ShooterSetpoint(40.0, 0.0),
    ShooterState.AIM_PROTECTED: ShooterSetpoint(200.0, 0.0),
    ShooterState.AUTO_AIM: ShooterSetpoint(0.0, 0.0),
    ShooterState.SHOOT: ShooterSetpoint(0.0, 1.0),
}

DYNAMIC_STATES = frozenset({ShooterState.AUTO_AIM, ShooterState.SHOOT})

AIMING_STATES = frozenset({
    ShooterState.AUTO_AIM,
    ShooterState.AIM_LAYUP,
    ShooterState.AIM_PROTECTED,
})


class ShooterStatemachine(StateMachine[ShooterState]):
    """
    Flywheel + trigger state machine.

    Edges forced by the note switches take precedence over the request
    only while the switch condition holds:
    - RAMP_DOWN requested, either switch tripped -> INDEX
    - INTAKE requested, flywheel switch tripped -> INDEX
    - INDEX requested, no switch tripped -> RAMP_DOWN
    - SHOOT requested while not aligned -> last aiming state

    With auto_fire enabled an aiming state advances to SHOOT once aligned
    and at speed.
    """

    def __init__(
        self,
        io: ShooterIO,
        aim_planner: AimPlanner,
        aligned_to_shoot: Callable[[], bool],
        tolerance: float = 8.0,
        auto_fire: bool = False,
    ) -> None:
        """
        Args:
            io: Shooter hardware
            aim_planner: Source of the AUTO_AIM flywheel velocity
            aligned_to_shoot: True when the robot is pointed at the target
            tolerance: Flywheel velocity tolerance (rotations per second)
            auto_fire: Advance from aiming to SHOOT automatically
        """
        super().__init__("shooter", ShooterState.RAMP_DOWN)
        self.io = io
        self.aim_planner = aim_planner
        self.aligned_to_shoot = aligned_to_shoot
        self.tolerance = tolerance
        self.auto_fire = auto_fire

        self.last_aiming_state = ShooterState.AUTO_AIM
        self._has_note = False
        self._stale = False
        self._target_valid = True
        self._last_command = ShooterCommand(FlywheelMode.BRAKE)

    def has_note(self) -> bool:
        return self._has_note

    def is_dynamic(self) -> bool:
        if self._state == ShooterState.SHOOT:
            return self.last_aiming_state == ShooterState.AUTO_AIM
        return self._state in DYNAMIC_STATES

    @property
    def last_command(self) -> ShooterCommand:
        return self._last_command

    def _resolve_state(self, requested: ShooterState) -> ShooterState:
        flywheel_switch = self.io.flywheel_switch_tripped()
        trigger_switch = self.io.trigger_switch_tripped()

        if flywheel_switch is None or trigger_switch is None:
            if not self._stale:
                logger.warning("shooter: note switches stale, holding last command")
            self._stale = True
            return self._state
        self._stale = False

        if flywheel_switch or trigger_switch:
            self._has_note = True
        if self.io.shot_detected():
            self._has_note = False

        state = requested
        if requested == ShooterState.RAMP_DOWN and (flywheel_switch or trigger_switch):
            state = ShooterState.INDEX
        elif requested == ShooterState.INTAKE and flywheel_switch:
            state = ShooterState.INDEX
        elif requested == ShooterState.INDEX and not (flywheel_switch or trigger_switch):
            state = ShooterState.RAMP_DOWN
        elif requested == ShooterState.SHOOT and not self.aligned_to_shoot():
            state = self.last_aiming_state

        if (
            self.auto_fire
            and state in AIMING_STATES
            and self.aligned_to_shoot()
            and self._flywheel_at_target(self._aim_velocity(state))
        ):
            self.last_aiming_state = state
            state = ShooterState.SHOOT

        if state in AIMING_STATES:
            self.last_aiming_state = state
        return state

    def _aim_velocity(self, aiming_state: ShooterState) -> Optional[float]:
        if aiming_state == ShooterState.AUTO_AIM:
            return self.aim_planner.get_target_flywheel_velocity()
        return SETPOINTS[aiming_state].flywheel_velocity

    def _command_for(self, state: ShooterState) -> Optional[ShooterCommand]:
        """Build the command for a state, or None if its target is unavailable"""
        setpoint = SETPOINTS[state]

        if state == ShooterState.AUTO_AIM:
            velocity = self._aim_velocity(state)
            if velocity is None:
                return None
            return ShooterCommand(FlywheelMode.VELOCITY, velocity, 0.0)

        if state == ShooterState.SHOOT:
            velocity = self._aim_velocity(self.last_aiming_state)
            if velocity is None:
                return None
            return ShooterCommand(FlywheelMode.VELOCITY, velocity, setpoint.trigger_percent)

        if state == ShooterState.INDEX:
            # Caller guarantees fresh switch readings here
            flywheel_switch = self.io.flywheel_switch_tripped()
            trigger_switch = self.io.trigger_switch_tripped()
            if flywheel_switch and not trigger_switch:
                trigger = -setpoint.trigger_percent
            elif trigger_switch and not flywheel_switch:
                trigger = setpoint.trigger_percent
            else:
                trigger = 0.0
            return ShooterCommand(FlywheelMode.BRAKE, 0.0, trigger)

        if state == ShooterState.COAST:
            return ShooterCommand(FlywheelMode.COAST, 0.0, 0.0)

        if state == ShooterState.RAMP_DOWN:
            return ShooterCommand(FlywheelMode.BRAKE, 0.0, 0.0)

        return ShooterCommand(FlywheelMode.VELOCITY, setpoint.flywheel_velocity, setpoint.trigger_percent)

    def _apply(self, state: ShooterState) -> None:
        if self._stale:
            self._send(self._last_command)
            return

        command = self._command_for(state)
        if command is None:
            if self._target_valid:
                logger.warning(f"shooter: no flywheel target for {state.name}, holding last command")
            self._target_valid = False
            command = self._last_command
        else:
            self._target_valid = True

        self._send(command)

    def _send(self, command: ShooterCommand) -> None:
        if command.flywheel_mode == FlywheelMode.VELOCITY:
            self.io.set_flywheel_velocity(command.flywheel_velocity)
        elif command.flywheel_mode == FlywheelMode.BRAKE:
            self.io.brake_flywheel()
        else:
            self.io.coast_flywheel()
        self.io.set_trigger_percent(command.trigger_percent)
        self._last_command = command

    def _flywheel_at_target(self, target: Optional[float]) -> bool:
        if target is None:
            return False
        velocity = self.io.get_flywheel_velocity()
        if velocity is None:
            return False
        return abs(velocity - target) <= self.tolerance

    def transitioning(self) -> bool:
        if self._stale or not self._target_valid:
            return True

        command = self._last_command
        if command.flywheel_mode == FlywheelMode.COAST:
            return False
        if command.flywheel_mode == FlywheelMode.BRAKE:
            return not self._flywheel_at_target(0.0)
        return not self._flywheel_at_target(command.flywheel_velocity)
