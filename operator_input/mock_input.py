"""
Mock (test) input provider.

Provides scripted InputSnapshots for running the robot loop without a gamepad.
"""

import logging
from typing import Dict, Callable, List, Optional

from robot_core.types import InputSnapshot


logger = logging.getLogger(__name__)


class MockInput:
    """
    Mock input provider for testing.

    Returns the scripted snapshots in order, then keeps repeating the last
    one. A None entry in the script simulates a missed input read.
    """

    def __init__(self, snapshots: Optional[List[Optional[InputSnapshot]]] = None) -> None:
        """
        Initialize mock input.

        Args:
            snapshots: Snapshots to return in sequence.
                       If None, returns the neutral snapshot.
        """
        self._snapshots = snapshots or []
        self._index = 0
        self._running = False
        self._default_snapshot = InputSnapshot.neutral()

    async def start(self) -> None:
        """Start the input provider"""
        logger.info(f"[MOCK INPUT] Started - Script mode ({len(self._snapshots)} snapshots)")
        self._running = True
        self._index = 0

    async def stop(self) -> None:
        """Stop the input provider"""
        logger.info("[MOCK INPUT] Stopped")
        self._running = False

    async def read_snapshot(self) -> Optional[InputSnapshot]:
        """Return next scripted snapshot"""
        if not self._running:
            return None

        if not self._snapshots:
            return self._default_snapshot

        if self._index >= len(self._snapshots):
            return self._snapshots[-1]

        snapshot = self._snapshots[self._index]
        self._index += 1
        return snapshot

    @property
    def exhausted(self) -> bool:
        """True once every scripted snapshot has been returned"""
        return self._index >= len(self._snapshots)

    def reset(self) -> None:
        """Reset to beginning of script"""
        self._index = 0

    def load_script(self, script_name: str) -> None:
        """
        Load a predefined test script.

        Args:
            script_name: Name of script to load from TestScripts
        """
        script_map: Dict[str, Callable[[], List[Optional[InputSnapshot]]]] = {
            "drive": TestScripts.drive_and_reverse,
            "intake_then_shoot": TestScripts.intake_then_shoot,
            "amp_cycle": TestScripts.amp_cycle,
            "climb": TestScripts.climb_sequence,
            "input_dropout": TestScripts.input_dropout,
        }

        if script_name in script_map:
            self._snapshots = script_map[script_name]()
            logger.info(f"Loaded script '{script_name}' with {len(self._snapshots)} snapshots")
        else:
            logger.warning(f"Unknown script '{script_name}'")


def _hold(ticks: int, **inputs) -> List[Optional[InputSnapshot]]:
    return [InputSnapshot(**inputs) for _ in range(ticks)]


class TestScripts:
    """Pre-defined test scripts, at 100 snapshots per second"""

    __test__ = False    # Not a pytest test class

    @staticmethod
    def script_names() -> List[str]:
        return ["drive", "intake_then_shoot", "amp_cycle", "climb", "input_dropout"]

    @staticmethod
    def drive_and_reverse() -> List[Optional[InputSnapshot]]:
        """Drive forward, reverse hard, then stop with wheels locked"""
        return (
            _hold(10)
            + _hold(50, translation=0.8)
            + _hold(50, translation=-0.8)
            + _hold(20, translation=0.5, strafe=0.5, rotation=0.3)
            + _hold(20, lock_in=True)
        )

    @staticmethod
    def intake_then_shoot() -> List[Optional[InputSnapshot]]:
        """Intake from the back, stow, then shoot from the speaker"""
        return (
            _hold(10)
            + _hold(80, wants_intake=True, translation=-0.4)
            + _hold(20, wants_stow=True)
            + _hold(100, force_aim=True)
            + _hold(50, wants_shoot=True)
            + _hold(20)
        )

    @staticmethod
    def amp_cycle() -> List[Optional[InputSnapshot]]:
        """Switch to amp mode, align, place, then back to speaker mode"""
        return (
            _hold(1, wants_amp_mode=True)
            + _hold(100, force_amp=True)
            + _hold(50, wants_place=True)
            + _hold(50)
            + _hold(1, wants_speaker_mode=True)
            + _hold(20)
        )

    @staticmethod
    def climb_sequence() -> List[Optional[InputSnapshot]]:
        """Climb mode: align, extend, retract, place trap, balance, leave"""
        return (
            _hold(1, wants_climb_mode=True)
            + _hold(100)
            + _hold(100, wants_align=True, wants_climb_extend=True)
            + _hold(100, wants_align=True, wants_climb_retract=True)
            + _hold(50, wants_align=True, wants_place=True)
            + _hold(50, wants_align=True, wants_balance=True)
            + _hold(1, wants_speaker_mode=True)
            + _hold(100)
        )

    @staticmethod
    def input_dropout() -> List[Optional[InputSnapshot]]:
        """Drive, lose input for a full second, then recover"""
        return (
            _hold(30, translation=0.6)
            + [None] * 100
            + _hold(30)
        )
