"""
Diverter state machine - carries a note from the shooter to the amp or trap.

A HANDOFF request turns into HOLD as soon as the note sensor sees the
note, so the roller stops with the note captured.
"""

import logging
from enum import Enum

from ..interfaces import DiverterIO
from ..statemachine import PositionSetpoint, PositionStatemachine


logger = logging.getLogger(__name__)


class DiverterState(Enum):
    RETRACT = "retract"
    HANDOFF = "handoff"
    HOLD = "hold"
    AMP = "amp"
    PLACE_AMP = "place_amp"
    TRAP = "trap"
    PLACE_TRAP = "place_trap"


class DiverterStatemachine(PositionStatemachine[DiverterState]):
    """Extension in meters, roller in percent output"""

    SETPOINTS = {
        DiverterState.RETRACT: PositionSetpoint(0.0, roller=0.0),
        DiverterState.HANDOFF: PositionSetpoint(0.1, roller=0.6),
        DiverterState.HOLD: PositionSetpoint(0.1, roller=0.0),
        DiverterState.AMP: PositionSetpoint(0.35, roller=0.0),
        DiverterState.PLACE_AMP: PositionSetpoint(0.35, roller=-1.0),
        DiverterState.TRAP: PositionSetpoint(0.45, roller=0.0),
        DiverterState.PLACE_TRAP: PositionSetpoint(0.45, roller=-1.0),
    }

    def __init__(self, io: DiverterIO, tolerance: float = 0.01) -> None:
        super().__init__("diverter", io, DiverterState.RETRACT, tolerance)
        self._note_stale = False

    def has_note(self) -> bool:
        return bool(self.io.note_detected())

    def _resolve_state(self, requested: DiverterState) -> DiverterState:
        note = self.io.note_detected()
        if note is None:
            if not self._note_stale:
                logger.warning("diverter: note sensor stale, holding current state")
            self._note_stale = True
            return self._state
        self._note_stale = False

        if requested == DiverterState.HANDOFF and note:
            return DiverterState.HOLD
        return requested

    def _apply_roller(self, state: DiverterState) -> None:
        self.io.set_roller_percent(self.SETPOINTS[state].roller)

    def transitioning(self) -> bool:
        return self._note_stale or super().transitioning()
