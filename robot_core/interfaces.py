"""
Core interfaces (protocols) for pluggable components.

These define the contracts the hardware layer, the planners and the input
providers must follow. Sensor reads return None when the value is stale
or unavailable; the state machines never invent a value in that case.
"""

from typing import Protocol, Optional
from .types import ChassisSpeeds, DriveRequest, InputSnapshot, Pose2d


class AimPlanner(Protocol):
    """
    Aim solution shared by the shooter, pivot and drive state machines.

    Planners are polled, never pushed to. Each getter returns None when no
    solution is available (e.g. pose unknown).
    """

    def get_target_flywheel_velocity(self) -> Optional[float]:
        """Flywheel velocity in rotations per second"""
        ...

    def get_target_pivot_angle(self) -> Optional[float]:
        """Pivot angle in degrees"""
        ...

    def get_target_heading(self) -> Optional[float]:
        """Field-relative robot heading in degrees"""
        ...


class ShooterIO(Protocol):
    """Flywheel, trigger roller and the two note switches"""

    def flywheel_switch_tripped(self) -> Optional[bool]:
        ...

    def trigger_switch_tripped(self) -> Optional[bool]:
        ...

    def shot_detected(self) -> bool:
        ...

    def get_flywheel_velocity(self) -> Optional[float]:
        ...

    def set_flywheel_velocity(self, velocity: float) -> None:
        ...

    def brake_flywheel(self) -> None:
        ...

    def coast_flywheel(self) -> None:
        ...

    def set_trigger_percent(self, percent: float) -> None:
        ...


class PositionIO(Protocol):
    """A closed-loop position actuator with a position sensor"""

    def get_position(self) -> Optional[float]:
        ...

    def set_position(self, position: float) -> None:
        ...


class DeployRollerIO(PositionIO, Protocol):
    """A deploying mechanism carrying a roller (intakes)"""

    def set_roller_percent(self, percent: float) -> None:
        ...


class DiverterIO(DeployRollerIO, Protocol):
    """Diverter deploy + roller, with a note sensor"""

    def note_detected(self) -> Optional[bool]:
        ...


class Drivebase(Protocol):
    """
    Interface to the swerve drivebase.

    Kinematics and odometry live behind this interface.
    """

    def drive(self, request: DriveRequest) -> None:
        """
        Apply a chassis request for this tick.

        Args:
            request: Frame, velocities and flags to track
        """
        ...

    def reset_odometry(self) -> None:
        """Zero the odometry (pose and gyro)"""
        ...

    def get_pose(self) -> Optional[Pose2d]:
        """
        Current pose estimate.

        Returns:
            Pose, or None while odometry is not valid
        """
        ...

    def get_chassis_speeds(self) -> Optional[ChassisSpeeds]:
        """Measured robot-relative chassis speeds, or None if unavailable"""
        ...


class InputProvider(Protocol):
    """
    Interface for operator input sources (gamepad, scripted, etc.).

    All input providers must implement these methods to be usable
    by the RobotLoop.
    """

    async def start(self) -> None:
        """
        Initialize and start the input provider.

        Called once when the loop starts.
        May open devices, create connections, etc.
        """
        ...

    async def stop(self) -> None:
        """
        Stop and cleanup the input provider.

        Must close devices, release resources, etc.
        """
        ...

    async def read_snapshot(self) -> Optional[InputSnapshot]:
        """
        Read the current operator inputs.

        This must be non-blocking and return immediately.
        Returns None if no input is available or the device is not ready.

        Returns:
            InputSnapshot with current stick and button values, or None
        """
        ...
