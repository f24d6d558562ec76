"""Tests for RobotConfig environment overrides and validation"""

import os

import pytest

import robot_config
from robot_config import RobotConfig, get_config
from robot_core.types import DriveConfig, LoopConfig, MechanismConfig, ResolverConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test without ROBOT_* variables and away from any real .env"""
    for name in list(os.environ):
        if name.startswith("ROBOT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight into os.environ
    for name in list(os.environ):
        if name.startswith("ROBOT_"):
            del os.environ[name]


def test_defaults():
    config = RobotConfig()
    assert config.drive_config() == DriveConfig()
    assert config.resolver_config() == ResolverConfig()
    assert config.mechanism_config() == MechanismConfig()
    assert config.loop_config() == LoopConfig()
    assert config.red_alliance is False
    assert config.log_level == "INFO"
    assert config.validate() == (True, [])


def test_env_name():
    assert RobotConfig.env_name("drive", "linear_deadband") == "ROBOT_DRIVE_LINEAR_DEADBAND"


def test_float_override(monkeypatch):
    monkeypatch.setenv("ROBOT_DRIVE_LINEAR_DEADBAND", "0.2")
    config = RobotConfig()
    assert config.drive_config().linear_deadband == 0.2
    assert config.overrides(DriveConfig, "drive") == {"linear_deadband": 0.2}


@pytest.mark.parametrize("raw,expected", [
    ("yes", True),
    ("TRUE", True),
    ("0", False),
    ("off", False),
])
def test_bool_override(monkeypatch, raw, expected):
    monkeypatch.setenv("ROBOT_MECHANISM_AUTO_FIRE", raw)
    assert RobotConfig().mechanism_config().auto_fire is expected


def test_red_alliance(monkeypatch):
    monkeypatch.setenv("ROBOT_RED_ALLIANCE", "true")
    assert RobotConfig().red_alliance is True


def test_env_file(tmp_path):
    env_file = tmp_path / "robot.env"
    env_file.write_text("ROBOT_LOOP_PERIOD=0.02\nROBOT_LOG_LEVEL=DEBUG\n")

    config = RobotConfig(str(env_file))
    assert config.loop_config().period == 0.02
    assert config.log_level == "DEBUG"


def test_missing_env_file_ignored(tmp_path):
    config = RobotConfig(str(tmp_path / "missing.env"))
    assert config.loop_config() == LoopConfig()


def test_unparseable_value_named(monkeypatch):
    monkeypatch.setenv("ROBOT_DRIVE_LINEAR_CURVE", "steep")
    config = RobotConfig()

    with pytest.raises(ValueError, match="ROBOT_DRIVE_LINEAR_CURVE"):
        config.drive_config()

    is_valid, errors = config.validate()
    assert is_valid is False
    assert any("ROBOT_DRIVE_LINEAR_CURVE" in error for error in errors)


@pytest.mark.parametrize("name,value", [
    ("ROBOT_DRIVE_LINEAR_DEADBAND", "1.5"),
    ("ROBOT_LOOP_PERIOD", "0"),
    ("ROBOT_LOOP_INPUT_TIMEOUT", "0.001"),
    ("ROBOT_RESOLVER_AUTO_AIM_X", "20"),
    ("ROBOT_RED_ALLIANCE", "maybe"),
])
def test_validate_rejects(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    is_valid, errors = RobotConfig().validate()
    assert is_valid is False
    assert errors


def test_print_status(monkeypatch, capsys):
    monkeypatch.setenv("ROBOT_LOOP_PERIOD", "0.02")
    RobotConfig().print_status()

    out = capsys.readouterr().out
    assert "Configuration is valid" in out
    assert "(env)" in out


def test_get_config_reload(monkeypatch):
    monkeypatch.setattr(robot_config, "_config", None)
    first = get_config()
    assert get_config() is first
    assert get_config(reload=True) is not first
