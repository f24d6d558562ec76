"""
Core data types for the robot control core.

Everything that flows between the input layer, the resolver, the
coordinator and the drive command lives here, fully typed.
Mechanism state enums live next to their state machines, together with
their setpoint tables.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import math
import time


class TeleopMode(Enum):
    """Operator macro-mode, selects what the 'place' button and automation do"""
    SPEAKER = "speaker"
    AMP = "amp"
    CLIMB = "climb"


class IntakingMode(Enum):
    """Which intake is in use"""
    FRONT = "front"
    BACK = "back"
    NONE = "none"


class ClimbMode(Enum):
    """Climb sub-mode, only meaningful while in TeleopMode.CLIMB"""
    ALIGN = "align"
    EXTEND = "extend"
    RETRACT = "retract"
    BALANCE = "balance"


class TeleopState(Enum):
    """Robot-level desired state produced by the input resolver"""
    REST = "rest"
    STOW = "stow"
    INTAKE_FRONT = "intake_front"
    INTAKE_BACK = "intake_back"
    AUTO_AIM = "auto_aim"
    SHOOT = "shoot"
    HANDOFF = "handoff"
    ALIGN_AMP = "align_amp"
    PLACE_AMP = "place_amp"
    PLACE_TRAP = "place_trap"
    ALIGN_CLIMB = "align_climb"
    CLIMB_EXTEND = "climb_extend"
    CLIMB_RETRACT = "climb_retract"
    CLIMB_BALANCE = "climb_balance"


class DriveFrame(Enum):
    """Reference frame of a drivebase request"""
    FIELD_CENTRIC = "field_centric"
    ROBOT_CENTRIC = "robot_centric"
    HEADING_LOCKED = "heading_locked"
    WHEEL_LOCK = "wheel_lock"


@dataclass(frozen=True)
class Pose2d:
    """Robot pose on the field (meters, degrees CCW)"""
    x: float
    y: float
    heading: float = 0.0


@dataclass(frozen=True)
class ChassisSpeeds:
    """Robot-relative chassis velocity (m/s, rad/s)"""
    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0

    @property
    def linear_speed(self) -> float:
        return math.hypot(self.vx, self.vy)


@dataclass
class InputSnapshot:
    """
    Every operator input, captured once at the top of a tick.

    Produced by InputProvider implementations and handed by value to the
    resolver and the drive command, so decision logic never performs I/O.
    Axes follow the robot convention: translation forward-positive,
    strafe left-positive, rotation counter-clockwise-positive.
    """
    # Driver axes: -1.0 to 1.0
    translation: float = 0.0
    strafe: float = 0.0
    rotation: float = 0.0

    # Driver drive flags
    heading: float = 0.0              # POV heading in degrees
    use_heading: bool = False         # POV pressed
    field_relative: bool = True
    robot_centric: bool = False
    open_loop: bool = True
    lock_in: bool = False
    zero_odometry: bool = False

    # Mode select
    wants_speaker_mode: bool = False
    wants_amp_mode: bool = False
    wants_climb_mode: bool = False

    # Operator requests
    wants_intake: bool = False
    wants_shoot: bool = False
    wants_stow: bool = False
    wants_place: bool = False         # Meaning depends on the active mode
    wants_align: bool = False
    wants_balance: bool = False
    wants_climb_extend: bool = False
    wants_climb_retract: bool = False

    # Overrides
    force_aim: bool = False
    force_intake_front: bool = False
    force_intake_back: bool = False
    force_handoff: bool = False
    force_amp: bool = False
    disable_auto_heading: bool = False

    red_alliance: bool = False
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate ranges"""
        assert -1.0 <= self.translation <= 1.0, f"translation out of range: {self.translation}"
        assert -1.0 <= self.strafe <= 1.0, f"strafe out of range: {self.strafe}"
        assert -1.0 <= self.rotation <= 1.0, f"rotation out of range: {self.rotation}"

    @property
    def is_neutral(self) -> bool:
        """Check if the driver sticks are centered"""
        return abs(self.translation) < 0.01 and abs(self.strafe) < 0.01 and abs(self.rotation) < 0.01

    @classmethod
    def neutral(cls) -> "InputSnapshot":
        """Snapshot with every control released"""
        return cls()


@dataclass(frozen=True)
class RobotFeedback:
    """
    Sensed robot state the resolver needs, sampled once per tick.

    pose and speeds are None while odometry is not valid.
    """
    pose: Optional[Pose2d] = None
    speeds: Optional[ChassisSpeeds] = None
    shooter_has_note: bool = False


@dataclass(frozen=True)
class DriveDecision:
    """
    Frame flags chosen by the drive state machine for this tick.

    heading is the target heading in degrees when the drive state holds one.
    """
    field_relative: bool = True
    open_loop: bool = True
    lock_in: bool = False
    heading: Optional[float] = None


@dataclass(frozen=True)
class DriveRequest:
    """
    One chassis velocity request for the drivebase.

    Output of TeleopDrive, valid for a single tick.
    """
    frame: DriveFrame
    vx: float = 0.0                   # m/s
    vy: float = 0.0                   # m/s
    omega: float = 0.0                # rad/s
    heading: Optional[float] = None   # degrees, HEADING_LOCKED only
    open_loop: bool = True

    @property
    def is_stop(self) -> bool:
        """Check if this request commands no motion"""
        return self.vx == 0.0 and self.vy == 0.0 and self.omega == 0.0

    @classmethod
    def stop(cls) -> "DriveRequest":
        """Create a zero-velocity robot-centric request"""
        return cls(frame=DriveFrame.ROBOT_CENTRIC)


@dataclass
class DriveConfig:
    """Configuration for the teleop drive shaping pipeline"""
    linear_deadband: float = 0.1          # Stick magnitude ignored below this
    angular_deadband: float = 0.13
    linear_curve: float = 2.0             # Response exponent (1.0 = linear)
    angular_curve: float = 2.0
    linear_multiplier: float = 7.0        # Full stick -> m/s
    angular_multiplier: float = 7.0       # Full stick -> rad/s
    linear_speed_rate: float = 5.0        # Max change per second of shaped speed
    linear_angle_rate: float = 2.0        # Max change per second of direction (rad)
    angular_rate: float = 3.0             # Max change per second of shaped rotation
    angle_reset_threshold: float = math.pi / 2  # Direction lag that forces a reset

    def __post_init__(self) -> None:
        for name in ("linear_deadband", "angular_deadband"):
            value = getattr(self, name)
            if not 0.0 <= value < 1.0:
                raise ValueError(f"{name} must be in [0, 1), got {value}")
        for name in ("linear_speed_rate", "linear_angle_rate", "angular_rate"):
            value = getattr(self, name)
            if value <= 0.0:
                raise ValueError(f"{name} must be positive, got {value}")


@dataclass
class ResolverConfig:
    """Field geometry used by the input resolver's automation (meters)"""
    auto_aim_x: float = 5.0               # Distance from the blue wall to start aiming
    amp_handoff_x: float = 5.0            # Distance from the blue wall to start handoff
    amp_align_x: float = 3.0
    amp_align_y: float = 3.0
    intake_transition_velocity: float = 0.5   # m/s before switching intakes
    field_length: float = 16.54


@dataclass
class MechanismConfig:
    """Tolerances and behaviour flags for the mechanism state machines"""
    flywheel_tolerance: float = 8.0       # rotations per second
    pivot_tolerance: float = 2.0          # degrees
    intake_tolerance: float = 3.0         # degrees
    diverter_tolerance: float = 0.01      # meters
    climber_tolerance: float = 0.01       # meters
    heading_tolerance: float = 3.0        # degrees
    min_align_speed: float = 0.3          # m/s of travel before intake alignment engages
    auto_fire: bool = False               # Fire automatically once aimed and at speed


@dataclass
class LoopConfig:
    """Configuration for the control loop"""
    period: float = 0.01                  # Tick period (100Hz)
    input_timeout: float = 0.5            # Max time without input before neutral

    def __post_init__(self) -> None:
        if self.period <= 0.0:
            raise ValueError(f"period must be positive, got {self.period}")
