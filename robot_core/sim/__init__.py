"""
Simulated hardware - for running the control core without a robot.

Every mechanism moves a fixed step toward its commanded target each time
it is commanded, so one control tick is one simulation step. Sensors can
be forced stale to exercise the hold paths.
"""

import logging
from typing import List, Optional

from ..robot import RobotIO
from ..types import ChassisSpeeds, DriveFrame, DriveRequest, Pose2d


logger = logging.getLogger(__name__)


def _approach(current: float, target: float, step: float) -> float:
    if abs(target - current) <= step:
        return target
    return current + step if target > current else current - step


class SimPositionIO:
    """
    Closed-loop position mechanism.

    Moves at most `step` units toward the target per set_position() call.
    """

    def __init__(self, name: str, step: float, position: float = 0.0) -> None:
        """
        Args:
            name: Mechanism name for logging
            step: Max travel per command (units/tick)
            position: Starting position
        """
        self.name = name
        self.step = step
        self.position = position
        self.target: Optional[float] = None
        self.stale = False
        self.command_count = 0

    def get_position(self) -> Optional[float]:
        if self.stale:
            return None
        return self.position

    def set_position(self, position: float) -> None:
        self.target = position
        self.command_count += 1
        self.position = _approach(self.position, position, self.step)


class SimDeployRollerIO(SimPositionIO):
    """Position mechanism with a roller (intakes)"""

    def __init__(self, name: str, step: float, position: float = 0.0) -> None:
        super().__init__(name, step, position)
        self.roller_percent = 0.0

    def set_roller_percent(self, percent: float) -> None:
        self.roller_percent = percent


class SimDiverterIO(SimDeployRollerIO):
    """Diverter with a note sensor"""

    def __init__(self, step: float = 0.05, position: float = 0.0) -> None:
        super().__init__("diverter", step, position)
        self.note = False
        self.note_stale = False

    def note_detected(self) -> Optional[bool]:
        if self.note_stale:
            return None
        return self.note


class SimShooterIO:
    """
    Flywheel and trigger.

    The flywheel approaches its commanded velocity by `accel` rotations
    per second each command. Braking spins it down at the same rate;
    coasting spins it down at a quarter of that. Switches and shot
    detection are set by the test or the scenario.
    """

    def __init__(self, accel: float = 20.0) -> None:
        self.accel = accel
        self.velocity = 0.0
        self.flywheel_target: Optional[float] = None
        self.braking = True
        self.trigger_percent = 0.0

        self.flywheel_switch = False
        self.trigger_switch = False
        self.shot = False
        self.stale = False

    def flywheel_switch_tripped(self) -> Optional[bool]:
        if self.stale:
            return None
        return self.flywheel_switch

    def trigger_switch_tripped(self) -> Optional[bool]:
        if self.stale:
            return None
        return self.trigger_switch

    def shot_detected(self) -> bool:
        """Report a shot once, then clear it"""
        shot, self.shot = self.shot, False
        return shot

    def get_flywheel_velocity(self) -> Optional[float]:
        if self.stale:
            return None
        return self.velocity

    def set_flywheel_velocity(self, velocity: float) -> None:
        self.flywheel_target = velocity
        self.braking = False
        self.velocity = _approach(self.velocity, velocity, self.accel)

    def brake_flywheel(self) -> None:
        self.flywheel_target = None
        self.braking = True
        self.velocity = _approach(self.velocity, 0.0, self.accel)

    def coast_flywheel(self) -> None:
        self.flywheel_target = None
        self.braking = False
        self.velocity = _approach(self.velocity, 0.0, self.accel / 4)

    def set_trigger_percent(self, percent: float) -> None:
        self.trigger_percent = percent

    def load_note(self) -> None:
        """Place a note against the flywheel switch"""
        self.flywheel_switch = True

    def fire(self) -> None:
        """Note leaves the shooter"""
        self.flywheel_switch = False
        self.trigger_switch = False
        self.shot = True


class SimDrivebase:
    """
    Records drive requests instead of moving wheels.

    Pose and speeds are set directly by the test or scenario; set them to
    None to simulate invalid odometry.
    """

    def __init__(self, pose: Optional[Pose2d] = None, speeds: Optional[ChassisSpeeds] = None) -> None:
        self.pose = pose
        self.speeds = speeds
        self.requests: List[DriveRequest] = []
        self.odometry_resets = 0
        self._max_history = 1000

    def drive(self, request: DriveRequest) -> None:
        self.requests.append(request)
        if len(self.requests) > self._max_history:
            del self.requests[0]

        if request.frame != DriveFrame.WHEEL_LOCK and not request.is_stop:
            logger.debug(
                f"[SIM] drive {request.frame.value}: vx={request.vx:.2f} vy={request.vy:.2f} "
                f"omega={request.omega:.2f} heading={request.heading}"
            )

    def reset_odometry(self) -> None:
        logger.info("[SIM] Odometry reset")
        self.odometry_resets += 1
        if self.pose is not None:
            self.pose = Pose2d(0.0, 0.0, 0.0)

    def get_pose(self) -> Optional[Pose2d]:
        return self.pose

    def get_chassis_speeds(self) -> Optional[ChassisSpeeds]:
        return self.speeds

    @property
    def last_request(self) -> Optional[DriveRequest]:
        return self.requests[-1] if self.requests else None


def create_sim_io(pose: Optional[Pose2d] = None) -> RobotIO:
    """
    Build simulated hardware with every mechanism at its stowed position.

    Args:
        pose: Starting pose (None = odometry not valid)

    Returns:
        RobotIO whose devices are the Sim* classes above
    """
    return RobotIO(
        shooter=SimShooterIO(),
        front_intake=SimDeployRollerIO("front_intake", step=30.0),
        back_intake=SimDeployRollerIO("back_intake", step=30.0),
        pivot=SimPositionIO("pivot", step=10.0, position=10.0),
        diverter=SimDiverterIO(),
        climber=SimPositionIO("climber", step=0.1),
        drivebase=SimDrivebase(pose, ChassisSpeeds()),
    )
