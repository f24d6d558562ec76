#!/usr/bin/env python3
"""
Robot Core Launcher - run the control loop on simulated hardware

Usage:
    python launch.py                          # Scripted demo (intake_then_shoot)
    python launch.py --script amp_cycle       # Another scripted demo
    python launch.py --gamepad                # Drive the simulation with gamepads
    python launch.py --list-scripts           # Show available scripts
"""

import sys
import argparse
import asyncio
import logging

from operator_input import MockInput, TestScripts
from robot_config import RobotConfig
from robot_core import Pose2d, RobotLoop, TeleopState, build_robot
from robot_core.sim import create_sim_io


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )


def create_loop(config: RobotConfig, input_provider, start_pose: Pose2d):
    """Build a RobotLoop on simulated hardware"""
    io = create_sim_io(start_pose)
    loop = build_robot(
        io,
        input_provider,
        mechanism_config=config.mechanism_config(),
        drive_config=config.drive_config(),
        resolver_config=config.resolver_config(),
        loop_config=config.loop_config(),
    )

    # A note shows up at the flywheel switch shortly after intaking starts
    def feed_note(old_state: TeleopState, new_state: TeleopState) -> None:
        if new_state in (TeleopState.INTAKE_FRONT, TeleopState.INTAKE_BACK):
            io.shooter.load_note()
            logger.info("[SIM] Note loaded")

    loop.add_state_callback(feed_note)
    return io, loop


def print_summary(io, loop: RobotLoop) -> None:
    """Print where the robot ended up"""
    print("\nRun complete:")
    print(f"  Ticks:         {loop.ticks}")
    print(f"  Teleop state:  {loop.teleop_state.name}")
    print(f"  Mode:          {loop.resolver.mode.name}")
    print(f"  Mechanisms:    {loop.coordinator.get_state()}")
    blocked = loop.coordinator.blocked()
    if blocked:
        print(f"  Blocked:       {blocked}")
    print(f"  Last request:  {io.drivebase.last_request}")


def launch_script(config: RobotConfig, script: str, ticks: int) -> None:
    """Run a scripted demo"""
    print(f"Running script '{script}' on simulated hardware...")

    input_provider = MockInput()
    input_provider.load_script(script)
    io, loop = create_loop(config, input_provider, Pose2d(2.0, 5.5, 180.0))

    asyncio.run(loop.run(max_ticks=ticks))
    print_summary(io, loop)


def launch_gamepad(config: RobotConfig) -> None:
    """Drive the simulation with gamepads"""
    print("Starting gamepad control mode...")
    print("Driver: left stick drives, right stick turns. Ctrl+C to stop")

    from operator_input.gamepad_input import GamepadInput

    input_provider = GamepadInput(red_alliance=config.red_alliance)
    io, loop = create_loop(config, input_provider, Pose2d(8.0, 4.0, 0.0))

    try:
        asyncio.run(loop.run())
    except KeyboardInterrupt:
        print("\nShutting down...")
    print_summary(io, loop)


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Robot Core - decision and motion control loop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python launch.py                        Run the intake_then_shoot script
  python launch.py --script climb         Run the climb script
  python launch.py --gamepad              Drive with gamepads (requires pygame)
        """
    )

    parser.add_argument(
        "--gamepad",
        action="store_true",
        help="Use gamepad control (requires pygame)"
    )
    parser.add_argument(
        "--script",
        default="intake_then_shoot",
        choices=TestScripts.script_names(),
        help="Scripted input to run"
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=500,
        help="Ticks to run in script mode"
    )
    parser.add_argument(
        "--list-scripts",
        action="store_true",
        help="List scripted inputs and exit"
    )
    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: ROBOT_LOG_LEVEL or INFO)"
    )

    args = parser.parse_args()

    if args.list_scripts:
        for name in TestScripts.script_names():
            print(name)
        return

    config = RobotConfig(args.env_file)
    setup_logging(args.log_level or config.log_level)

    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            print(f"Config error: {error}")
        sys.exit(1)

    if args.gamepad:
        launch_gamepad(config)
    else:
        launch_script(config, args.script, args.ticks)


if __name__ == "__main__":
    main()
