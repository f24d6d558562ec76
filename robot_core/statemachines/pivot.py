"""
Pivot state machine.

Fixed angles for every state except AUTO_AIM, whose angle is pulled from
the aim planner at output time, every tick.
"""

from enum import Enum
from typing import Optional

from ..interfaces import AimPlanner, PositionIO
from ..statemachine import PositionSetpoint, PositionStatemachine


class PivotState(Enum):
    REST = "rest"
    INTAKE = "intake"
    HANDOFF = "handoff"
    AIM_LAYUP = "aim_layup"
    AIM_PROTECTED = "aim_protected"
    AUTO_AIM = "auto_aim"
    AMP = "amp"
    CLIMB = "climb"


class PivotStatemachine(PositionStatemachine[PivotState]):
    """Pivot angle in degrees above the frame"""

    SETPOINTS = {
        PivotState.REST: PositionSetpoint(10.0),
        PivotState.INTAKE: PositionSetpoint(0.0),
        PivotState.HANDOFF: PositionSetpoint(35.0),
        PivotState.AIM_LAYUP: PositionSetpoint(55.0),
        PivotState.AIM_PROTECTED: PositionSetpoint(30.0),
        PivotState.AMP: PositionSetpoint(95.0),
        PivotState.CLIMB: PositionSetpoint(80.0),
    }
    DYNAMIC_STATES = frozenset({PivotState.AUTO_AIM})

    def __init__(self, io: PositionIO, aim_planner: AimPlanner, tolerance: float = 2.0) -> None:
        super().__init__("pivot", io, PivotState.REST, tolerance)
        self.aim_planner = aim_planner

    def _dynamic_target(self, state: PivotState) -> Optional[float]:
        return self.aim_planner.get_target_pivot_angle()
