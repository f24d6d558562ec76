"""
RobotCoordinator - composes the mechanism state machines under interlocks.

Each tick the coordinator takes the requested RobotState, checks every
interlock against the other mechanisms' current state as of the start of
the tick, substitutes fallback states for blocked mechanisms and forwards
the result. A blocked request is retried every tick, so it is delivered
unchanged as soon as the interlock clears.

This is safety-critical code.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from .interlocks import Interlock, default_interlocks
from .robot_state import RobotState
from .statemachine import StateMachine


logger = logging.getLogger(__name__)


class RobotCoordinator(StateMachine[RobotState]):
    """
    Robot-level state machine.

    get_state() is derived from the mechanisms' current states, including
    sensor-forced ones. get_forwarded_state() is what was sent to them
    last tick, with interlock substitutions applied.
    """

    def __init__(
        self,
        mechanisms: Mapping[str, StateMachine],
        interlocks: Optional[Sequence[Interlock]] = None,
    ) -> None:
        """
        Args:
            mechanisms: State machine per RobotState field name
            interlocks: Safety rules (default: default_interlocks())
        """
        missing = set(RobotState.mechanisms()) - set(mechanisms)
        if missing:
            raise ValueError(f"Missing mechanisms: {sorted(missing)}")

        self._mechanisms: Dict[str, StateMachine] = {
            name: mechanisms[name] for name in RobotState.mechanisms()
        }
        self._interlocks: List[Interlock] = list(
            default_interlocks() if interlocks is None else interlocks
        )
        for interlock in self._interlocks:
            if interlock.mechanism not in self._mechanisms or interlock.other not in self._mechanisms:
                raise ValueError(f"Interlock {interlock.name} refers to an unknown mechanism")

        self._blocked: Dict[str, str] = {}
        super().__init__("robot", self._current_state())

    def mechanism(self, name: str) -> StateMachine:
        return self._mechanisms[name]

    def get_state(self) -> RobotState:
        return self._current_state()

    def get_forwarded_state(self) -> RobotState:
        return self._state

    def blocked(self) -> Dict[str, str]:
        """Blocked mechanisms and the interlock blocking each"""
        return dict(self._blocked)

    def _current_state(self) -> RobotState:
        return RobotState(**{
            name: machine.get_state() for name, machine in self._mechanisms.items()
        })

    def _find_blocker(self, name: str, target: object) -> Optional[Interlock]:
        machine = self._mechanisms[name]
        for interlock in self._interlocks:
            if interlock.mechanism != name:
                continue
            other = self._mechanisms[interlock.other]
            if not interlock.blocks(target, other.get_state(), other.transitioning()):
                continue
            if interlock.fallback(machine) != target:
                return interlock
        return None

    def _resolve_state(self, requested: RobotState) -> RobotState:
        forwarded = {}

        for name in self._mechanisms:
            target = getattr(requested, name)
            blocker = self._find_blocker(name, target)

            if blocker is None:
                if name in self._blocked:
                    logger.info(f"{name}: {self._blocked[name]} cleared, forwarding {target.name}")
                    del self._blocked[name]
                forwarded[name] = target
                continue

            fallback = blocker.fallback(self._mechanisms[name])
            if self._blocked.get(name) != blocker.name:
                logger.info(f"{name}: {target.name} blocked by {blocker.name}, holding {fallback.name}")
            self._blocked[name] = blocker.name
            forwarded[name] = fallback

        return RobotState(**forwarded)

    def _apply(self, state: RobotState) -> None:
        for name, machine in self._mechanisms.items():
            machine.request_state(getattr(state, name))
        for machine in self._mechanisms.values():
            machine.update()

    def transitioning(self) -> bool:
        if self._blocked:
            return True
        return any(machine.transitioning() for machine in self._mechanisms.values())

    def is_dynamic(self) -> bool:
        return any(machine.is_dynamic() for machine in self._mechanisms.values())
