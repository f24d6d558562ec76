"""
RobotLoop - the fixed-period control loop.

Each tick:
1. Read an InputSnapshot (input watchdog applied)
2. Sample feedback (pose, chassis speeds, note state)
3. Resolve the teleop and drive states
4. Forward the robot state through the coordinator's interlocks
5. Run the teleop drive command with the drive state machine's decision

Nothing inside a tick blocks. When a tick raises, the failsafe sends a stop
request to the drivebase and REST to every mechanism through the
coordinator instead of running a neutral tick.

This is safety-critical code.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .coordinator import RobotCoordinator
from .interfaces import (
    AimPlanner,
    DeployRollerIO,
    Drivebase,
    DiverterIO,
    InputProvider,
    PositionIO,
    ShooterIO,
)
from .interlocks import default_interlocks
from .planners import InterpolatingAimPlanner
from .resolver import InputResolver, Resolution
from .robot_state import RobotState
from .statemachines import (
    ClimberStatemachine,
    DiverterStatemachine,
    DriveState,
    DriveStatemachine,
    IntakeStatemachine,
    PivotStatemachine,
    ShooterStatemachine,
)
from .teleop_drive import TeleopDrive
from .types import (
    DriveConfig,
    DriveRequest,
    InputSnapshot,
    LoopConfig,
    MechanismConfig,
    ResolverConfig,
    RobotFeedback,
    TeleopState,
)


logger = logging.getLogger(__name__)


@dataclass
class RobotIO:
    """Hardware handles for every mechanism"""
    shooter: ShooterIO
    front_intake: DeployRollerIO
    back_intake: DeployRollerIO
    pivot: PositionIO
    diverter: DiverterIO
    climber: PositionIO
    drivebase: Drivebase


class RobotLoop:
    """
    Drives the resolver, coordinator and teleop drive once per period.

    step() runs one tick synchronously and is what tests call. run() is
    the asyncio loop around it, with the input watchdog and failsafe.
    """

    def __init__(
        self,
        input_provider: InputProvider,
        resolver: InputResolver,
        coordinator: RobotCoordinator,
        teleop_drive: TeleopDrive,
        drivebase: Drivebase,
        config: LoopConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the loop.

        Args:
            input_provider: Source of InputSnapshots
            resolver: Input resolver
            coordinator: Robot-level state machine
            teleop_drive: Drive command
            drivebase: Feedback source
            config: Period and input timeout
            clock: Time source for the input watchdog
        """
        self.input = input_provider
        self.resolver = resolver
        self.coordinator = coordinator
        self.teleop_drive = teleop_drive
        self.drivebase = drivebase
        self.config = config
        self._clock = clock

        self._running = False
        self._ticks = 0
        self._teleop_state = TeleopState.REST
        self._last_resolution: Optional[Resolution] = None

        # Input watchdog
        self._last_snapshot: Optional[InputSnapshot] = None
        self._last_input_time: Optional[float] = None
        self._input_timed_out = False

        self._state_callbacks: List[Callable[[TeleopState, TeleopState], Any]] = []

    def add_state_callback(self, callback: Callable[[TeleopState, TeleopState], Any]) -> None:
        """
        Register callback for teleop state changes.

        Callback signature: callback(old_state, new_state)

        Args:
            callback: Function to call on state change
        """
        self._state_callbacks.append(callback)

    @property
    def teleop_state(self) -> TeleopState:
        return self._teleop_state

    @property
    def last_resolution(self) -> Optional[Resolution]:
        return self._last_resolution

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def input_timed_out(self) -> bool:
        return self._input_timed_out

    def feedback(self) -> RobotFeedback:
        """Sample everything the resolver reads from the robot"""
        shooter = self.coordinator.mechanism("shooter")
        return RobotFeedback(
            pose=self.drivebase.get_pose(),
            speeds=self.drivebase.get_chassis_speeds(),
            shooter_has_note=shooter.has_note(),
        )

    def step(self, snapshot: InputSnapshot) -> DriveRequest:
        """
        Run one control tick.

        Args:
            snapshot: Operator input for this tick

        Returns:
            The DriveRequest sent to the drivebase
        """
        resolution = self.resolver.resolve(snapshot, self.feedback())
        self._last_resolution = resolution
        self._set_teleop_state(resolution.teleop_state)

        self.coordinator.request_state(
            RobotState.for_teleop(resolution.teleop_state, resolution.drive_state)
        )
        self.coordinator.update()

        drive = self.coordinator.mechanism("drive")
        request = self.teleop_drive.execute(snapshot, drive.get_decision())
        self._ticks += 1
        return request

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """
        Main control loop - runs until stopped.

        Args:
            max_ticks: Stop after this many ticks (None = until stop())
        """
        logger.info("Robot loop starting")
        self._running = True

        try:
            await self.input.start()

            while self._running:
                try:
                    await self._update()
                except Exception as e:
                    logger.error(f"Error in control tick: {e}", exc_info=True)
                    self._failsafe()

                if max_ticks is not None and self._ticks >= max_ticks:
                    break
                await asyncio.sleep(self.config.period)

        finally:
            logger.info("Robot loop stopping")
            await self._cleanup()

    def stop(self) -> None:
        """Stop the loop (call from outside async context)"""
        self._running = False

    async def _update(self) -> None:
        """Single iteration of the control loop"""
        snapshot = await self.input.read_snapshot()
        self.step(self._watchdog(snapshot))

    def _watchdog(self, snapshot: Optional[InputSnapshot]) -> InputSnapshot:
        """Reuse the last snapshot briefly, then fall back to neutral input"""
        now = self._clock()

        if snapshot is not None:
            if self._input_timed_out:
                logger.info("Input restored")
            self._input_timed_out = False
            self._last_snapshot = snapshot
            self._last_input_time = now
            return snapshot

        if (
            self._last_snapshot is not None
            and self._last_input_time is not None
            and now - self._last_input_time <= self.config.input_timeout
        ):
            return self._last_snapshot

        # Nothing received yet, so there is nothing to time out
        if self._last_input_time is None:
            return InputSnapshot.neutral()

        if not self._input_timed_out:
            logger.error("Input watchdog timeout, using neutral input")
            self._input_timed_out = True
        return InputSnapshot.neutral()

    def _failsafe(self) -> None:
        """Stop the drivebase and send every mechanism to REST after an error"""
        logger.critical("Entering FAILSAFE: stop and REST")
        self.teleop_drive.reset()
        self.drivebase.drive(DriveRequest.stop())
        self._ticks += 1

        try:
            self._set_teleop_state(TeleopState.REST)
            self.coordinator.request_state(
                RobotState.for_teleop(TeleopState.REST, DriveState.OPEN_LOOP_TELEOP)
            )
            self.coordinator.update()
        except Exception as e:
            logger.error(f"Error sending REST in failsafe: {e}", exc_info=True)

    def _set_teleop_state(self, new_state: TeleopState) -> None:
        if new_state == self._teleop_state:
            return

        old_state = self._teleop_state
        logger.info(f"Teleop state: {old_state.value} -> {new_state.value}")
        self._teleop_state = new_state

        for callback in self._state_callbacks:
            try:
                callback(old_state, new_state)
            except Exception as e:
                logger.error(f"Error in state callback: {e}", exc_info=True)

    async def _cleanup(self) -> None:
        """Cleanup on shutdown"""
        try:
            self.drivebase.drive(DriveRequest.stop())
            await self.input.stop()
        except Exception as e:
            logger.error(f"Error during cleanup: {e}", exc_info=True)


def build_robot(
    io: RobotIO,
    input_provider: InputProvider,
    aim_planner: Optional[AimPlanner] = None,
    mechanism_config: Optional[MechanismConfig] = None,
    drive_config: Optional[DriveConfig] = None,
    resolver_config: Optional[ResolverConfig] = None,
    loop_config: Optional[LoopConfig] = None,
) -> RobotLoop:
    """
    Wire the state machines, coordinator and loop around a set of hardware.

    Args:
        io: Hardware handles
        input_provider: Source of operator input
        aim_planner: Firing solutions (default: InterpolatingAimPlanner on the drivebase)
        mechanism_config: Tolerances and auto fire
        drive_config: Teleop shaping
        resolver_config: Field zones
        loop_config: Period and input timeout

    Returns:
        A RobotLoop ready to run()
    """
    mechanism_config = mechanism_config or MechanismConfig()
    drive_config = drive_config or DriveConfig()
    loop_config = loop_config or LoopConfig()
    aim_planner = aim_planner or InterpolatingAimPlanner(io.drivebase)

    drive = DriveStatemachine(
        io.drivebase,
        aim_planner,
        heading_tolerance=mechanism_config.heading_tolerance,
        min_align_speed=mechanism_config.min_align_speed,
    )
    mechanisms = {
        "shooter": ShooterStatemachine(
            io.shooter,
            aim_planner,
            aligned_to_shoot=drive.aligned_to_shoot,
            tolerance=mechanism_config.flywheel_tolerance,
            auto_fire=mechanism_config.auto_fire,
        ),
        "front_intake": IntakeStatemachine(
            "front_intake", io.front_intake, tolerance=mechanism_config.intake_tolerance),
        "back_intake": IntakeStatemachine(
            "back_intake", io.back_intake, tolerance=mechanism_config.intake_tolerance),
        "pivot": PivotStatemachine(
            io.pivot, aim_planner, tolerance=mechanism_config.pivot_tolerance),
        "diverter": DiverterStatemachine(
            io.diverter, tolerance=mechanism_config.diverter_tolerance),
        "climber": ClimberStatemachine(
            io.climber, tolerance=mechanism_config.climber_tolerance),
        "drive": drive,
    }
    coordinator = RobotCoordinator(mechanisms, default_interlocks())

    return RobotLoop(
        input_provider=input_provider,
        resolver=InputResolver(resolver_config),
        coordinator=coordinator,
        teleop_drive=TeleopDrive(io.drivebase, drive_config, loop_config.period),
        drivebase=io.drivebase,
        config=loop_config,
    )
