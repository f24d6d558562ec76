"""
Robot Core - Typed, testable decision-and-motion layer for a multi-mechanism robot.

This package turns operator intent and sensed robot state into mechanism commands:
- Types: Input snapshots, drive requests, configuration
- Interfaces: Protocols for hardware, planners and input providers
- State machines: One per mechanism, plus the interlocked robot coordinator
- Resolver: Operator input and field automation to one desired robot state
- TeleopDrive: Joystick shaping into safe chassis velocity requests
- RobotLoop: Fixed-period control loop with input watchdog and failsafe
"""

from .types import (
    InputSnapshot,
    RobotFeedback,
    DriveDecision,
    DriveRequest,
    DriveFrame,
    Pose2d,
    ChassisSpeeds,
    TeleopMode,
    TeleopState,
    DriveConfig,
    ResolverConfig,
    MechanismConfig,
    LoopConfig,
)
from .interfaces import (
    AimPlanner,
    Drivebase,
    InputProvider,
)
from .coordinator import RobotCoordinator
from .resolver import InputResolver
from .robot_state import RobotState
from .teleop_drive import TeleopDrive
from .robot import RobotIO, RobotLoop, build_robot

__all__ = [
    "InputSnapshot",
    "RobotFeedback",
    "DriveDecision",
    "DriveRequest",
    "DriveFrame",
    "Pose2d",
    "ChassisSpeeds",
    "TeleopMode",
    "TeleopState",
    "DriveConfig",
    "ResolverConfig",
    "MechanismConfig",
    "LoopConfig",
    "AimPlanner",
    "Drivebase",
    "InputProvider",
    "RobotCoordinator",
    "InputResolver",
    "RobotState",
    "TeleopDrive",
    "RobotIO",
    "RobotLoop",
    "build_robot",
]
