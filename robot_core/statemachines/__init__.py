"""Mechanism state machines, one per physical mechanism."""

from .climber import ClimberState, ClimberStatemachine
from .diverter import DiverterState, DiverterStatemachine
from .drive import DriveState, DriveStatemachine
from .intake import IntakeState, IntakeStatemachine
from .pivot import PivotState, PivotStatemachine
from .shooter import ShooterState, ShooterStatemachine

__all__ = [
    "ClimberState",
    "ClimberStatemachine",
    "DiverterState",
    "DiverterStatemachine",
    "DriveState",
    "DriveStatemachine",
    "IntakeState",
    "IntakeStatemachine",
    "PivotState",
    "PivotStatemachine",
    "ShooterState",
    "ShooterStatemachine",
]
