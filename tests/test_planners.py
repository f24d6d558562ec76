"""Tests for InterpolatingAimPlanner"""

import math

import pytest

from robot_core.planners import AimPoint, DEFAULT_TARGET, InterpolatingAimPlanner
from robot_core.sim import SimDrivebase
from robot_core.types import Pose2d


def planner_at(pose, **kwargs):
    return InterpolatingAimPlanner(SimDrivebase(pose), **kwargs)


def test_exact_table_row():
    planner = planner_at(Pose2d(3.0, DEFAULT_TARGET[1], 0.0))
    assert planner.distance_to_target() == pytest.approx(3.0)
    assert planner.get_target_flywheel_velocity() == pytest.approx(80.0)
    assert planner.get_target_pivot_angle() == pytest.approx(36.0)


def test_interpolates_between_rows():
    planner = planner_at(Pose2d(2.5, DEFAULT_TARGET[1], 0.0))
    assert planner.get_target_flywheel_velocity() == pytest.approx(70.0)
    assert planner.get_target_pivot_angle() == pytest.approx(40.5)


@pytest.mark.parametrize("x,velocity,angle", [
    (0.5, 40.0, 55.0),
    (9.0, 125.0, 23.0),
])
def test_clamps_outside_table(x, velocity, angle):
    planner = planner_at(Pose2d(x, DEFAULT_TARGET[1], 0.0))
    assert planner.get_target_flywheel_velocity() == pytest.approx(velocity)
    assert planner.get_target_pivot_angle() == pytest.approx(angle)


def test_heading_points_at_target():
    planner = planner_at(Pose2d(3.0, DEFAULT_TARGET[1] - 3.0, 0.0))
    assert planner.get_target_heading() == pytest.approx(135.0)
    assert planner.distance_to_target() == pytest.approx(math.hypot(3.0, 3.0))


def test_no_pose_no_solution():
    planner = planner_at(None)
    assert planner.distance_to_target() is None
    assert planner.get_target_flywheel_velocity() is None
    assert planner.get_target_pivot_angle() is None
    assert planner.get_target_heading() is None


def test_reads_pose_every_call():
    drivebase = SimDrivebase(Pose2d(3.0, DEFAULT_TARGET[1], 0.0))
    planner = InterpolatingAimPlanner(drivebase)
    assert planner.get_target_flywheel_velocity() == pytest.approx(80.0)

    drivebase.pose = Pose2d(4.0, DEFAULT_TARGET[1], 0.0)
    assert planner.get_target_flywheel_velocity() == pytest.approx(95.0)


def test_custom_table_sorted():
    table = [AimPoint(4.0, 100.0, 20.0), AimPoint(2.0, 50.0, 40.0)]
    planner = planner_at(Pose2d(3.0, 0.0, 0.0), table=table, target=(0.0, 0.0))
    assert planner.get_target_flywheel_velocity() == pytest.approx(75.0)
    assert planner.get_target_pivot_angle() == pytest.approx(30.0)


def test_empty_table_rejected():
    with pytest.raises(ValueError):
        planner_at(Pose2d(0.0, 0.0), table=[])
