"""
TeleopDrive - shapes driver sticks into one drivebase request per tick.

Pipeline:
1. Deadband with slope correction on the linear magnitude and on rotation
2. Response curve
3. Slew-rate limiting of linear speed, linear direction and rotation
4. Multipliers to m/s and rad/s
5. Frame selection: wheel-lock, heading-locked, field-centric, robot-centric

This is safety-critical code.
"""

import logging
import math
from typing import Tuple

from .interfaces import Drivebase
from .shaping import SlewRateLimiter, apply_deadband, normalize_degrees, power_curve
from .types import DriveConfig, DriveDecision, DriveFrame, DriveRequest, InputSnapshot


logger = logging.getLogger(__name__)


class TeleopDrive:
    """
    Converts an InputSnapshot and a DriveDecision into a DriveRequest.

    The limiters are stepped exactly once per execute() with the loop
    period, so the output depends only on the input sequence.
    """

    def __init__(self, drivebase: Drivebase, config: DriveConfig, period: float) -> None:
        """
        Args:
            drivebase: Receives the request and odometry resets
            config: Shaping parameters
            period: Control loop period in seconds
        """
        self.drivebase = drivebase
        self.config = config
        self.period = period

        self.speed_limiter = SlewRateLimiter(config.linear_speed_rate, period)
        self.angle_limiter = SlewRateLimiter(config.linear_angle_rate, period)
        self.angular_limiter = SlewRateLimiter(config.angular_rate, period)

        self._last_request = DriveRequest.stop()

    @property
    def last_request(self) -> DriveRequest:
        return self._last_request

    def reset(self) -> None:
        """Zero all limiters (call after a failsafe or mode change)"""
        self.speed_limiter.reset(0.0)
        self.angle_limiter.reset(0.0)
        self.angular_limiter.reset(0.0)

    def execute(self, snapshot: InputSnapshot, decision: DriveDecision) -> DriveRequest:
        """
        Run one tick of the drive command.

        Args:
            snapshot: Operator input for this tick
            decision: Frame flags from the drive state machine

        Returns:
            The DriveRequest sent to the drivebase
        """
        if snapshot.zero_odometry:
            logger.info("Zeroing odometry")
            self.drivebase.reset_odometry()

        vx, vy = self._shape_linear(snapshot.translation, snapshot.strafe)
        omega = self._shape_angular(snapshot.rotation)

        vx *= self.config.linear_multiplier
        vy *= self.config.linear_multiplier
        omega *= self.config.angular_multiplier

        request = self._select_frame(snapshot, decision, vx, vy, omega)
        self.drivebase.drive(request)
        self._last_request = request
        return request

    def _shape_linear(self, translation: float, strafe: float) -> Tuple[float, float]:
        magnitude = min(math.hypot(translation, strafe), 1.0)
        raw_angle = math.atan2(strafe, translation)

        raw_speed = apply_deadband(magnitude, self.config.linear_deadband)
        if raw_speed == 0.0:
            self.speed_limiter.reset(0.0)
        raw_speed = power_curve(raw_speed, self.config.linear_curve)

        speed = self.speed_limiter.calculate(raw_speed)
        angle = self.angle_limiter.calculate(raw_angle)

        # Snap the direction after a stop-and-reverse instead of sweeping through it
        if abs(angle - raw_angle) > self.config.angle_reset_threshold:
            self.angle_limiter.reset(raw_angle)
            angle = raw_angle

        return speed * math.cos(angle), speed * math.sin(angle)

    def _shape_angular(self, rotation: float) -> float:
        omega = apply_deadband(rotation, self.config.angular_deadband)
        omega = power_curve(omega, self.config.angular_curve)
        return self.angular_limiter.calculate(omega)

    def _select_frame(
        self,
        snapshot: InputSnapshot,
        decision: DriveDecision,
        vx: float,
        vy: float,
        omega: float,
    ) -> DriveRequest:
        if decision.lock_in and vx == 0.0 and vy == 0.0 and omega == 0.0:
            return DriveRequest(DriveFrame.WHEEL_LOCK, open_loop=decision.open_loop)

        heading = decision.heading
        if heading is None and snapshot.use_heading:
            heading = snapshot.heading
        if heading is not None:
            return DriveRequest(
                DriveFrame.HEADING_LOCKED,
                vx,
                vy,
                0.0,
                heading=normalize_degrees(heading),
                open_loop=decision.open_loop,
            )

        field_relative = decision.field_relative and snapshot.field_relative
        frame = DriveFrame.FIELD_CENTRIC if field_relative else DriveFrame.ROBOT_CENTRIC
        return DriveRequest(frame, vx, vy, omega, open_loop=decision.open_loop)
