"""
Input shaping primitives for teleop driving.

Deadband, response curve and rate limiting, kept free of any state other
than the rate limiter's last value so they can be tested in isolation.
"""

import math


def apply_deadband(value: float, deadband: float) -> float:
    """
    Apply a deadband that keeps the full output range.

    Input below the deadband returns 0. Input above it is rescaled so the
    edge of the deadband maps to 0 and 1.0 stays 1.0, which removes drift
    without losing fine control.

    Args:
        value: Input value (-1.0 to 1.0)
        deadband: Deadband width, in [0, 1)

    Returns:
        Deadbanded value
    """
    if abs(value) < deadband:
        return 0.0
    return (value - math.copysign(deadband, value)) / (1.0 - deadband)


def power_curve(value: float, exponent: float) -> float:
    """
    Sign-preserving power curve.

    Exponent > 1.0 makes the response more gradual at low inputs,
    giving finer control at slow speeds. 1.0 is the identity.
    """
    if value == 0.0:
        return 0.0
    return math.copysign(math.pow(abs(value), exponent), value)


def normalize_degrees(angle: float) -> float:
    """Wrap an angle in degrees to [-180, 180]"""
    return math.remainder(angle, 360.0)


class SlewRateLimiter:
    """
    Limits the rate of change of a signal.

    The limiter is stepped once per tick with a fixed period, so its
    output depends only on the sequence of inputs.
    """

    def __init__(self, rate: float, period: float, initial: float = 0.0) -> None:
        """
        Args:
            rate: Max change per second (units/sec)
            period: Tick period in seconds
            initial: Starting output
        """
        if rate <= 0.0:
            raise ValueError(f"rate must be positive, got {rate}")
        if period <= 0.0:
            raise ValueError(f"period must be positive, got {period}")
        self.rate = rate
        self.period = period
        self._value = initial

    @property
    def value(self) -> float:
        return self._value

    def calculate(self, target: float) -> float:
        """
        Move toward the target by at most rate * period.

        Args:
            target: Desired value

        Returns:
            Limited value (may not reach target yet)
        """
        max_change = self.rate * self.period
        delta = target - self._value

        if abs(delta) <= max_change:
            self._value = target
        else:
            self._value += math.copysign(max_change, delta)
        return self._value

    def reset(self, value: float) -> None:
        """Jump straight to a value"""
        self._value = value
