"""
StateMachine - the contract every mechanism controller implements.

A state machine holds a requested state and a current state. Requests are
never rejected here; safety rejection happens one layer up, in the
RobotCoordinator. update() resolves sensor-forced transitions first and
then drives the actuators from whichever state is active afterwards.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, FrozenSet, Generic, Mapping, Optional, TypeVar

from .interfaces import PositionIO


logger = logging.getLogger(__name__)

S = TypeVar("S")
E = TypeVar("E", bound=Enum)


def _label(state: object) -> str:
    return getattr(state, "name", str(state))


class StateMachine(ABC, Generic[S]):
    """
    Base class for every state machine in the robot.

    Subclasses implement _apply() and transitioning(), and may override
    _resolve_state() to add sensor-driven edges.
    """

    def __init__(self, name: str, initial: S) -> None:
        """
        Args:
            name: Name used in logs
            initial: State the machine starts in (and is requested)
        """
        self.name = name
        self._requested: S = initial
        self._state: S = initial

    def request_state(self, state: S) -> None:
        """
        Request a state for the mechanism to attain.

        Any state is accepted and replaces the previous request.

        Args:
            state: Target state
        """
        if state != self._requested:
            logger.debug(f"{self.name}: requested {_label(state)}")
        self._requested = state

    def update(self) -> None:
        """Advance one tick. Must be called exactly once per tick."""
        new_state = self._resolve_state(self._requested)
        if new_state != self._state:
            logger.info(f"{self.name}: {_label(self._state)} -> {_label(new_state)}")
        self._state = new_state
        self._apply(new_state)

    def get_state(self) -> S:
        """Current state, after sensor-forced transitions"""
        return self._state

    def get_requested_state(self) -> S:
        return self._requested

    def is_dynamic(self) -> bool:
        """True if the current state's setpoint comes from a planner"""
        return False

    def _resolve_state(self, requested: S) -> S:
        """
        Apply sensor-driven edges on top of the request.

        Args:
            requested: Last requested state

        Returns:
            State to act on this tick
        """
        return requested

    @abstractmethod
    def _apply(self, state: S) -> None:
        """Command the actuators for the given state"""

    @abstractmethod
    def transitioning(self) -> bool:
        """True while the mechanism has not reached its target"""


@dataclass(frozen=True)
class PositionSetpoint:
    """Fixed setpoint of a position mechanism state"""
    position: float
    roller: Optional[float] = None    # Roller percent, for mechanisms that carry one


class PositionStatemachine(StateMachine[E]):
    """
    State machine for a closed-loop position mechanism.

    States map to PositionSetpoint records through SETPOINTS. States listed
    in DYNAMIC_STATES take their position from _dynamic_target() each tick.
    When no target is available the last commanded position is held and
    the mechanism reports transitioning().
    """

    SETPOINTS: ClassVar[Mapping] = {}
    DYNAMIC_STATES: ClassVar[FrozenSet] = frozenset()

    def __init__(self, name: str, io: PositionIO, initial: E, tolerance: float) -> None:
        super().__init__(name, initial)
        self.io = io
        self.tolerance = tolerance
        self._target: float = self.SETPOINTS[initial].position
        self._target_valid = True
        self._stale = False

    def is_dynamic(self) -> bool:
        return self._state in self.DYNAMIC_STATES

    @property
    def target(self) -> float:
        """Last commanded position"""
        return self._target

    def _dynamic_target(self, state: E) -> Optional[float]:
        """Target of a dynamic state, fetched fresh from a planner"""
        return None

    def _apply(self, state: E) -> None:
        if state in self.DYNAMIC_STATES:
            target = self._dynamic_target(state)
        else:
            target = self.SETPOINTS[state].position

        if target is None:
            if self._target_valid:
                logger.warning(f"{self.name}: no target for {state.name}, holding {self._target:.3f}")
            self._target_valid = False
        else:
            self._target = target
            self._target_valid = True

        self.io.set_position(self._target)
        self._apply_roller(state)

    def _apply_roller(self, state: E) -> None:
        """Hook for mechanisms that carry a roller"""

    def transitioning(self) -> bool:
        if not self._target_valid:
            return True

        position = self.io.get_position()
        if position is None:
            if not self._stale:
                logger.warning(f"{self.name}: position sensor stale")
            self._stale = True
            return True
        self._stale = False

        return abs(position - self._target) > self.tolerance
