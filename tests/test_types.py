"""Tests for core types"""

import math

import pytest

from robot_core.types import (
    ChassisSpeeds,
    DriveConfig,
    DriveFrame,
    DriveRequest,
    InputSnapshot,
    LoopConfig,
    Pose2d,
)


def test_snapshot_defaults():
    """Test a default snapshot has every control released"""
    snapshot = InputSnapshot()
    assert snapshot.translation == 0.0
    assert snapshot.field_relative is True
    assert snapshot.open_loop is True
    assert snapshot.wants_intake is False
    assert snapshot.force_aim is False
    assert snapshot.timestamp > 0


def test_snapshot_validation():
    """Test snapshot validates axis ranges"""
    with pytest.raises(AssertionError):
        InputSnapshot(translation=1.5)

    with pytest.raises(AssertionError):
        InputSnapshot(strafe=-1.01)

    with pytest.raises(AssertionError):
        InputSnapshot(rotation=2.0)


def test_snapshot_is_neutral():
    """Test neutral detection"""
    assert InputSnapshot.neutral().is_neutral is True
    assert InputSnapshot(translation=0.005, strafe=-0.005).is_neutral is True
    assert InputSnapshot(rotation=0.5).is_neutral is False


def test_drive_request_stop():
    """Test stop request creation"""
    request = DriveRequest.stop()
    assert request.is_stop is True
    assert request.frame == DriveFrame.ROBOT_CENTRIC
    assert request.heading is None


def test_drive_request_not_stop():
    request = DriveRequest(DriveFrame.FIELD_CENTRIC, vx=1.0)
    assert request.is_stop is False


def test_chassis_speeds_linear_speed():
    assert ChassisSpeeds(3.0, 4.0, 1.0).linear_speed == pytest.approx(5.0)


def test_pose_default_heading():
    assert Pose2d(1.0, 2.0).heading == 0.0


def test_drive_config_defaults():
    """Test default drive shaping values"""
    config = DriveConfig()
    assert config.linear_deadband == 0.1
    assert config.angular_deadband == 0.13
    assert config.angle_reset_threshold == pytest.approx(math.pi / 2)


@pytest.mark.parametrize("field, value", [
    ("linear_deadband", 1.0),
    ("linear_deadband", -0.1),
    ("angular_deadband", 1.5),
    ("linear_speed_rate", 0.0),
    ("angular_rate", -1.0),
])
def test_drive_config_rejects_invalid(field, value):
    """Test invalid shaping parameters raise ValueError"""
    with pytest.raises(ValueError):
        DriveConfig(**{field: value})


def test_loop_config_rejects_non_positive_period():
    with pytest.raises(ValueError):
        LoopConfig(period=0.0)
