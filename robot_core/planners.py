"""
Aim planners - firing solutions for the AUTO_AIM states.

InterpolatingAimPlanner looks the solution up from a distance table
measured on the practice field. It reads the pose fresh on every call,
so whatever the drivebase reports this tick is what the mechanisms aim at.
"""

import bisect
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .interfaces import Drivebase
from .shaping import normalize_degrees


@dataclass(frozen=True)
class AimPoint:
    """One row of the shot table"""
    distance: float              # meters to the target
    flywheel_velocity: float     # rotations per second
    pivot_angle: float           # degrees


DEFAULT_SHOT_TABLE: Tuple[AimPoint, ...] = (
    AimPoint(1.3, 40.0, 55.0),
    AimPoint(2.0, 60.0, 45.0),
    AimPoint(3.0, 80.0, 36.0),
    AimPoint(4.0, 95.0, 30.0),
    AimPoint(5.0, 110.0, 26.0),
    AimPoint(6.0, 125.0, 23.0),
)

# Speaker opening, blue alliance field coordinates (meters)
DEFAULT_TARGET = (0.0, 5.55)


class InterpolatingAimPlanner:
    """
    AimPlanner backed by a linear-interpolated shot table.

    Distances outside the table clamp to its end rows. With no pose every
    getter returns None, which makes the aiming mechanisms hold.
    """

    def __init__(
        self,
        drivebase: Drivebase,
        table: Sequence[AimPoint] = DEFAULT_SHOT_TABLE,
        target: Tuple[float, float] = DEFAULT_TARGET,
    ) -> None:
        """
        Args:
            drivebase: Pose source
            table: Shot table rows, any order
            target: Target position in field coordinates (meters)
        """
        if not table:
            raise ValueError("Shot table must have at least one row")
        self.drivebase = drivebase
        self.table = sorted(table, key=lambda point: point.distance)
        self.target = target
        self._distances = [point.distance for point in self.table]

    def distance_to_target(self) -> Optional[float]:
        pose = self.drivebase.get_pose()
        if pose is None:
            return None
        return math.hypot(self.target[0] - pose.x, self.target[1] - pose.y)

    def get_target_flywheel_velocity(self) -> Optional[float]:
        distance = self.distance_to_target()
        if distance is None:
            return None
        return self._interpolate(distance, "flywheel_velocity")

    def get_target_pivot_angle(self) -> Optional[float]:
        distance = self.distance_to_target()
        if distance is None:
            return None
        return self._interpolate(distance, "pivot_angle")

    def get_target_heading(self) -> Optional[float]:
        """Field heading (degrees) that points the robot at the target"""
        pose = self.drivebase.get_pose()
        if pose is None:
            return None
        return normalize_degrees(math.degrees(
            math.atan2(self.target[1] - pose.y, self.target[0] - pose.x)
        ))

    def _interpolate(self, distance: float, column: str) -> float:
        index = bisect.bisect_left(self._distances, distance)
        if index == 0:
            return getattr(self.table[0], column)
        if index >= len(self.table):
            return getattr(self.table[-1], column)

        below = self.table[index - 1]
        above = self.table[index]
        span = above.distance - below.distance
        fraction = (distance - below.distance) / span if span > 0 else 0.0
        low = getattr(below, column)
        high = getattr(above, column)
        return low + (high - low) * fraction
