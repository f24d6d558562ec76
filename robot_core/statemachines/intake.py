"""Intake state machine - deploy arm plus roller. Used for both intakes."""

from enum import Enum

from ..interfaces import DeployRollerIO
from ..statemachine import PositionSetpoint, PositionStatemachine


class IntakeState(Enum):
    RETRACT = "retract"
    INTAKE = "intake"


class IntakeStatemachine(PositionStatemachine[IntakeState]):
    """Deploy angle in degrees, roller in percent output"""

    SETPOINTS = {
        IntakeState.RETRACT: PositionSetpoint(0.0, roller=0.0),
        IntakeState.INTAKE: PositionSetpoint(120.0, roller=1.0),
    }

    def __init__(self, name: str, io: DeployRollerIO, tolerance: float = 3.0) -> None:
        super().__init__(name, io, IntakeState.RETRACT, tolerance)

    def _apply_roller(self, state: IntakeState) -> None:
        self.io.set_roller_percent(self.SETPOINTS[state].roller)
