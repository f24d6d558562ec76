"""Shared fixtures: simulated hardware and a controllable aim planner"""

from typing import Optional

import pytest

from operator_input import MockInput
from robot_core import LoopConfig, Pose2d, build_robot
from robot_core.sim import create_sim_io


class StubAimPlanner:
    """AimPlanner whose answers are set by the test"""

    def __init__(
        self,
        flywheel_velocity: Optional[float] = 40.0,
        pivot_angle: Optional[float] = 30.0,
        heading: Optional[float] = 0.0,
    ) -> None:
        self.flywheel_velocity = flywheel_velocity
        self.pivot_angle = pivot_angle
        self.heading = heading

    def get_target_flywheel_velocity(self) -> Optional[float]:
        return self.flywheel_velocity

    def get_target_pivot_angle(self) -> Optional[float]:
        return self.pivot_angle

    def get_target_heading(self) -> Optional[float]:
        return self.heading


@pytest.fixture
def planner():
    return StubAimPlanner()


@pytest.fixture
def sim_io():
    """Simulated hardware, robot at midfield facing the blue wall"""
    return create_sim_io(Pose2d(8.0, 4.0, 180.0))


@pytest.fixture
def robot(sim_io, planner):
    """RobotLoop on simulated hardware, driven through step()"""
    return build_robot(
        sim_io,
        MockInput(),
        aim_planner=planner,
        loop_config=LoopConfig(period=0.02),
    )


def run_ticks(robot, snapshot, ticks: int):
    """Step the robot with the same snapshot several times"""
    request = None
    for _ in range(ticks):
        request = robot.step(snapshot)
    return request
