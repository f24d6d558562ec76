"""Climber state machine - hook height in meters."""

from enum import Enum

from ..interfaces import PositionIO
from ..statemachine import PositionSetpoint, PositionStatemachine


class ClimberState(Enum):
    STOW = "stow"
    EXTEND = "extend"
    RETRACT = "retract"       # Hooks pulled in, robot hanging
    BALANCE = "balance"


class ClimberStatemachine(PositionStatemachine[ClimberState]):
    SETPOINTS = {
        ClimberState.STOW: PositionSetpoint(0.0),
        ClimberState.EXTEND: PositionSetpoint(0.55),
        ClimberState.RETRACT: PositionSetpoint(0.08),
        ClimberState.BALANCE: PositionSetpoint(0.12),
    }

    def __init__(self, io: PositionIO, tolerance: float = 0.01) -> None:
        super().__init__("climber", io, ClimberState.STOW, tolerance)
