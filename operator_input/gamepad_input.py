"""
Gamepad Input Provider

Reads driver and operator controllers through pygame.
Button numbers follow the common XInput layout; override them with
button_map if a controller reports a different order.
"""

import logging
import math
from typing import Dict, Optional, Tuple

import pygame

from robot_core.types import InputSnapshot


logger = logging.getLogger(__name__)


# Driver controller (joystick 0)
DRIVER_AXES = {
    "strafe": 0,       # Left stick X
    "translation": 1,  # Left stick Y
    "rotation": 2,     # Right stick X
}

DRIVER_BUTTONS = {
    "force_intake_front": 0,   # A
    "force_intake_back": 1,    # B
    "disable_auto_heading": 2, # X
    "robot_centric": 4,        # LB
    "lock_in": 5,              # RB
    "zero_odometry": 7,        # Start
}

# Operator controller (joystick 1)
OPERATOR_BUTTONS = {
    "wants_intake": 0,         # A
    "wants_shoot": 1,          # B
    "wants_stow": 2,           # X
    "wants_place": 3,          # Y
    "wants_align": 4,          # LB
    "wants_climb_extend": 5,   # RB
    "wants_climb_retract": 6,  # Back
    "wants_balance": 7,        # Start
    "force_aim": 8,            # Left stick press
    "force_handoff": 9,        # Right stick press
}

# Operator D-pad selects the mode
OPERATOR_HAT_MODES = {
    (0, 1): "wants_speaker_mode",
    (-1, 0): "wants_amp_mode",
    (0, -1): "wants_climb_mode",
}


def hat_to_heading(hat: Tuple[int, int]) -> Optional[float]:
    """
    Convert a D-pad position to a field heading in degrees.

    Up is 0, left is +90 (counter-clockwise positive). Returns None when
    the D-pad is released.
    """
    x, y = hat
    if x == 0 and y == 0:
        return None
    # Clockwise POV angle from up, negated for a CCW heading
    return -math.degrees(math.atan2(x, y))


def _clamp_axis(value: float) -> float:
    return max(-1.0, min(1.0, value))


class GamepadInput:
    """
    Game controller input provider.

    Joystick 0 drives; joystick 1, when present, is the operator. With a
    single controller only driving and the driver overrides are available.
    """

    def __init__(
        self,
        red_alliance: bool = False,
        button_map: Optional[Dict[str, int]] = None,
    ) -> None:
        """
        Initialize gamepad input.

        Args:
            red_alliance: Alliance colour reported in every snapshot
            button_map: Overrides for operator button numbers
        """
        self._red_alliance = red_alliance
        self._operator_buttons = dict(OPERATOR_BUTTONS)
        if button_map:
            self._operator_buttons.update(button_map)

        self._driver: Optional[pygame.joystick.Joystick] = None
        self._operator: Optional[pygame.joystick.Joystick] = None
        self._running = False

    async def start(self) -> None:
        """Initialize pygame and connect to the controllers"""
        if self._running:
            return

        logger.info("Initializing gamepad input...")

        pygame.init()
        pygame.joystick.init()

        joystick_count = pygame.joystick.get_count()
        logger.info(f"Found {joystick_count} game controller(s)")

        if joystick_count == 0:
            raise RuntimeError("No game controllers found")

        self._driver = pygame.joystick.Joystick(0)
        self._driver.init()
        logger.info(f"Driver: {self._driver.get_name()}")

        if joystick_count > 1:
            self._operator = pygame.joystick.Joystick(1)
            self._operator.init()
            logger.info(f"Operator: {self._operator.get_name()}")
        else:
            logger.warning("No operator controller, mechanism requests disabled")

        self._running = True

    async def stop(self) -> None:
        """Disconnect from the controllers"""
        logger.info("Stopping gamepad input")
        self._running = False

        for joystick in (self._driver, self._operator):
            if joystick:
                joystick.quit()
        self._driver = None
        self._operator = None

        pygame.joystick.quit()
        pygame.quit()

    async def read_snapshot(self) -> Optional[InputSnapshot]:
        """Read both controllers into one snapshot"""
        if not self._running or not self._driver:
            return None

        # Process pygame events (required to update joystick state)
        pygame.event.pump()

        inputs = self._read_driver(self._driver)
        if self._operator:
            inputs.update(self._read_operator(self._operator))

        return InputSnapshot(red_alliance=self._red_alliance, **inputs)

    def _read_driver(self, joystick: "pygame.joystick.Joystick") -> dict:
        # Sticks report up/left as negative; the robot wants forward/left positive
        inputs = {
            name: _clamp_axis(-joystick.get_axis(axis))
            for name, axis in DRIVER_AXES.items()
            if axis < joystick.get_numaxes()
        }
        for name, button in DRIVER_BUTTONS.items():
            if button < joystick.get_numbuttons():
                inputs[name] = bool(joystick.get_button(button))

        if joystick.get_numhats() > 0:
            heading = hat_to_heading(joystick.get_hat(0))
            if heading is not None:
                inputs["heading"] = heading
                inputs["use_heading"] = True
        return inputs

    def _read_operator(self, joystick: "pygame.joystick.Joystick") -> dict:
        inputs = {}
        for name, button in self._operator_buttons.items():
            if button < joystick.get_numbuttons():
                inputs[name] = bool(joystick.get_button(button))

        if joystick.get_numhats() > 0:
            mode = OPERATOR_HAT_MODES.get(joystick.get_hat(0))
            if mode:
                inputs[mode] = True
        return inputs
