"""
RobotState - one desired state per mechanism.

TELEOP_STATES maps each TeleopState to the mechanism states that realize
it. The drive state is chosen separately by the resolver.
"""

from dataclasses import dataclass, fields
from typing import Dict, Tuple

from .statemachines import (
    ClimberState,
    DiverterState,
    DriveState,
    IntakeState,
    PivotState,
    ShooterState,
)
from .types import TeleopState


@dataclass(frozen=True)
class RobotState:
    shooter: ShooterState = ShooterState.RAMP_DOWN
    front_intake: IntakeState = IntakeState.RETRACT
    back_intake: IntakeState = IntakeState.RETRACT
    pivot: PivotState = PivotState.REST
    diverter: DiverterState = DiverterState.RETRACT
    climber: ClimberState = ClimberState.STOW
    drive: DriveState = DriveState.OPEN_LOOP_TELEOP

    @classmethod
    def mechanisms(cls) -> Tuple[str, ...]:
        """Field names, in the order mechanisms are updated"""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def for_teleop(cls, teleop_state: TeleopState, drive: DriveState) -> "RobotState":
        """
        Build the robot state for a resolved teleop state.

        Args:
            teleop_state: Output of the input resolver
            drive: Drive state chosen by the input resolver

        Returns:
            RobotState with every mechanism filled in
        """
        shooter, front, back, pivot, diverter, climber = TELEOP_STATES[teleop_state]
        return cls(shooter, front, back, pivot, diverter, climber, drive)

    def __str__(self) -> str:
        return " ".join(f"{name}={getattr(self, name).name}" for name in self.mechanisms())


_R = IntakeState.RETRACT
_I = IntakeState.INTAKE

# shooter, front_intake, back_intake, pivot, diverter, climber
TELEOP_STATES: Dict[TeleopState, tuple] = {
    TeleopState.REST: (
        ShooterState.COAST, _R, _R, PivotState.REST, DiverterState.RETRACT, ClimberState.STOW),
    TeleopState.STOW: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.REST, DiverterState.RETRACT, ClimberState.STOW),
    TeleopState.INTAKE_FRONT: (
        ShooterState.INTAKE, _I, _R, PivotState.INTAKE, DiverterState.RETRACT, ClimberState.STOW),
    TeleopState.INTAKE_BACK: (
        ShooterState.INTAKE, _R, _I, PivotState.INTAKE, DiverterState.RETRACT, ClimberState.STOW),
    TeleopState.AUTO_AIM: (
        ShooterState.AUTO_AIM, _R, _R, PivotState.AUTO_AIM, DiverterState.RETRACT, ClimberState.STOW),
    TeleopState.SHOOT: (
        ShooterState.SHOOT, _R, _R, PivotState.AUTO_AIM, DiverterState.RETRACT, ClimberState.STOW),
    TeleopState.HANDOFF: (
        ShooterState.HANDOFF, _R, _R, PivotState.HANDOFF, DiverterState.HANDOFF, ClimberState.STOW),
    TeleopState.ALIGN_AMP: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.AMP, DiverterState.AMP, ClimberState.STOW),
    TeleopState.PLACE_AMP: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.AMP, DiverterState.PLACE_AMP, ClimberState.STOW),
    TeleopState.ALIGN_CLIMB: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.CLIMB, DiverterState.RETRACT, ClimberState.STOW),
    TeleopState.CLIMB_EXTEND: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.CLIMB, DiverterState.RETRACT, ClimberState.EXTEND),
    TeleopState.CLIMB_RETRACT: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.CLIMB, DiverterState.TRAP, ClimberState.RETRACT),
    TeleopState.CLIMB_BALANCE: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.CLIMB, DiverterState.TRAP, ClimberState.BALANCE),
    TeleopState.PLACE_TRAP: (
        ShooterState.RAMP_DOWN, _R, _R, PivotState.CLIMB, DiverterState.PLACE_TRAP, ClimberState.RETRACT),
}
