"""
Interlocks - mechanical safety rules between mechanisms.

An interlock blocks a mechanism's requested state based on another
mechanism's current state and whether that mechanism is still moving.
When it blocks, the coordinator forwards the interlock's fallback state
instead and re-checks the real request next tick.
"""

from dataclasses import dataclass
from typing import Any, Callable, List

from .statemachine import StateMachine
from .statemachines import (
    ClimberState,
    DiverterState,
    IntakeState,
    PivotState,
    ShooterState,
)


@dataclass(frozen=True)
class Interlock:
    """
    A safety rule for one mechanism against another.

    blocks(target, other_state, other_transitioning) returns True when
    forwarding target would be unsafe. fallback(machine) gives the safe
    interim state for the blocked mechanism.
    """
    name: str
    mechanism: str
    other: str
    blocks: Callable[[Any, Any, bool], bool]
    fallback: Callable[[StateMachine], Any]


def hold(machine: StateMachine) -> Any:
    """Fallback that keeps the mechanism where it is"""
    return machine.get_state()


def _requires_stowed(stowed: Any) -> Callable[[Any, Any, bool], bool]:
    def blocks(target: Any, other_state: Any, other_transitioning: bool) -> bool:
        return other_state != stowed or other_transitioning
    return blocks


def _intake_blocks(target: IntakeState, pivot_state: PivotState, pivot_transitioning: bool) -> bool:
    if target == IntakeState.RETRACT:
        return False
    return pivot_state != PivotState.INTAKE or pivot_transitioning


# Pivot position each deployed diverter state needs
DIVERTER_PIVOT_STATES = {
    DiverterState.HANDOFF: PivotState.HANDOFF,
    DiverterState.HOLD: PivotState.HANDOFF,
    DiverterState.AMP: PivotState.AMP,
    DiverterState.PLACE_AMP: PivotState.AMP,
    DiverterState.TRAP: PivotState.CLIMB,
    DiverterState.PLACE_TRAP: PivotState.CLIMB,
}


def _diverter_blocks(target: DiverterState, pivot_state: PivotState, pivot_transitioning: bool) -> bool:
    if target == DiverterState.RETRACT:
        return False
    return pivot_state != DIVERTER_PIVOT_STATES[target] or pivot_transitioning


def _climber_blocks(target: ClimberState, pivot_state: PivotState, pivot_transitioning: bool) -> bool:
    if target == ClimberState.STOW:
        return False
    return pivot_state != PivotState.CLIMB or pivot_transitioning


def _shoot_blocks(target: ShooterState, pivot_state: PivotState, pivot_transitioning: bool) -> bool:
    return target == ShooterState.SHOOT and pivot_transitioning


def _handoff_blocks(target: ShooterState, diverter_state: DiverterState, diverter_transitioning: bool) -> bool:
    if target != ShooterState.HANDOFF:
        return False
    return diverter_state != DiverterState.HANDOFF or diverter_transitioning


def default_interlocks() -> List[Interlock]:
    """
    Interlocks for the robot's mechanism layout.

    The pivot only moves while everything that shares its swept volume is
    stowed and settled; those mechanisms only deploy once the pivot has
    settled where they need it.
    """
    return [
        Interlock("pivot_vs_diverter", "pivot", "diverter",
                  _requires_stowed(DiverterState.RETRACT), hold),
        Interlock("pivot_vs_front_intake", "pivot", "front_intake",
                  _requires_stowed(IntakeState.RETRACT), hold),
        Interlock("pivot_vs_back_intake", "pivot", "back_intake",
                  _requires_stowed(IntakeState.RETRACT), hold),
        Interlock("pivot_vs_climber", "pivot", "climber",
                  _requires_stowed(ClimberState.STOW), hold),
        Interlock("front_intake_vs_pivot", "front_intake", "pivot",
                  _intake_blocks, lambda machine: IntakeState.RETRACT),
        Interlock("back_intake_vs_pivot", "back_intake", "pivot",
                  _intake_blocks, lambda machine: IntakeState.RETRACT),
        Interlock("diverter_vs_pivot", "diverter", "pivot",
                  _diverter_blocks, lambda machine: DiverterState.RETRACT),
        Interlock("climber_vs_pivot", "climber", "pivot",
                  _climber_blocks, hold),
        Interlock("shoot_vs_pivot", "shooter", "pivot",
                  _shoot_blocks, lambda machine: machine.last_aiming_state),
        Interlock("handoff_vs_diverter", "shooter", "diverter",
                  _handoff_blocks, lambda machine: ShooterState.RAMP_DOWN),
    ]
