#!/usr/bin/env python3
"""
Robot Environment Configuration Helper

Loads .env overrides for the control core and builds the config
dataclasses from them. Unset variables keep the dataclass defaults.
"""

import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from dotenv import load_dotenv

from robot_core.types import DriveConfig, LoopConfig, MechanismConfig, ResolverConfig


PREFIX = "ROBOT_"

T = TypeVar("T")


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


class RobotConfig:
    """Configuration manager for the robot control core"""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            env_file: Path to .env file (default: .env in current directory)
        """
        self._loaded = False

        env_path = Path(".env") if env_file is None else Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            self._loaded = True

    @staticmethod
    def env_name(section: str, name: str) -> str:
        """Environment variable for one config field, e.g. ROBOT_DRIVE_LINEAR_DEADBAND"""
        return f"{PREFIX}{section.upper()}_{name.upper()}"

    @property
    def red_alliance(self) -> bool:
        """Alliance colour (default: blue)"""
        return _parse_bool(os.getenv(f"{PREFIX}RED_ALLIANCE", "false"))

    @property
    def log_level(self) -> str:
        """Default log level for the launcher (default: INFO)"""
        return os.getenv(f"{PREFIX}LOG_LEVEL", "INFO")

    def drive_config(self) -> DriveConfig:
        return self._build(DriveConfig, "drive")

    def resolver_config(self) -> ResolverConfig:
        return self._build(ResolverConfig, "resolver")

    def mechanism_config(self) -> MechanismConfig:
        return self._build(MechanismConfig, "mechanism")

    def loop_config(self) -> LoopConfig:
        return self._build(LoopConfig, "loop")

    def overrides(self, cls: Type[Any], section: str) -> Dict[str, Any]:
        """
        Read the environment overrides for one config dataclass.

        Args:
            cls: Config dataclass
            section: Section name used in the variable names

        Returns:
            Field name -> parsed value, for the variables that are set

        Raises:
            ValueError: If a variable cannot be parsed
        """
        values: Dict[str, Any] = {}
        for f in fields(cls):
            name = self.env_name(section, f.name)
            raw = os.getenv(name)
            if raw is None:
                continue

            default = getattr(cls(), f.name)
            try:
                if isinstance(default, bool):
                    values[f.name] = _parse_bool(raw)
                else:
                    values[f.name] = float(raw)
            except ValueError as e:
                raise ValueError(f"{name}: {e}") from e
        return values

    def _build(self, cls: Type[T], section: str) -> T:
        return cls(**self.overrides(cls, section))

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate configuration

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        builders = [
            ("drive", self.drive_config),
            ("resolver", self.resolver_config),
            ("mechanism", self.mechanism_config),
            ("loop", self.loop_config),
        ]
        for section, build in builders:
            try:
                build()
            except ValueError as e:
                errors.append(f"{section}: {e}")

        try:
            self.red_alliance
        except ValueError as e:
            errors.append(f"{PREFIX}RED_ALLIANCE: {e}")

        if errors:
            return False, errors

        loop = self.loop_config()
        if loop.input_timeout < loop.period:
            errors.append("loop: input_timeout must be at least one period")

        resolver = self.resolver_config()
        for name in ("auto_aim_x", "amp_handoff_x", "amp_align_x"):
            if not 0.0 <= getattr(resolver, name) <= resolver.field_length:
                errors.append(f"resolver: {name} must be on the field (0 to {resolver.field_length})")

        return len(errors) == 0, errors

    def print_status(self):
        """Print configuration status"""
        print("Robot Configuration Status:")
        print(f"  .env loaded: {'Yes' if self._loaded else 'No'}")

        is_valid, errors = self.validate()
        if is_valid:
            print(f"  Alliance:    {'red' if self.red_alliance else 'blue'}")
            for section, config in [
                ("drive", self.drive_config()),
                ("resolver", self.resolver_config()),
                ("mechanism", self.mechanism_config()),
                ("loop", self.loop_config()),
            ]:
                overridden = self.overrides(type(config), section)
                print(f"  [{section}]")
                for f in fields(config):
                    marker = " (env)" if f.name in overridden else ""
                    print(f"    {f.name:28} {getattr(config, f.name)}{marker}")
            print("\n  Status: Configuration is valid")
        else:
            print("\n  Status: Configuration has errors:")
            for error in errors:
                print(f"    - {error}")


# Global config instance
_config = None

def get_config(reload: bool = False) -> RobotConfig:
    """
    Get the global configuration instance

    Args:
        reload: Force reload of .env file

    Returns:
        RobotConfig instance
    """
    global _config
    if _config is None or reload:
        _config = RobotConfig()
    return _config


def main():
    """Command-line utility to check configuration"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Robot Configuration Utility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Check current configuration:
    python robot_config.py

  Validate configuration:
    python robot_config.py --validate

  Use custom .env file:
    python robot_config.py --env-file /path/to/.env
        """
    )

    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument("--validate", action="store_true",
                       help="Validate configuration and exit with error if invalid")

    args = parser.parse_args()

    config = RobotConfig(args.env_file)
    config.print_status()

    if args.validate:
        is_valid, errors = config.validate()
        if not is_valid:
            print("\nValidation failed!")
            import sys
            sys.exit(1)
        else:
            print("\nValidation passed!")


if __name__ == "__main__":
    main()
