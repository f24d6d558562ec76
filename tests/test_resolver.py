"""Tests for the InputResolver priority chain, mode memory and field zones"""

import pytest

from robot_core import ChassisSpeeds, InputResolver, InputSnapshot, Pose2d, RobotFeedback
from robot_core.statemachines import DriveState
from robot_core.types import ClimbMode, IntakingMode, ResolverConfig, TeleopMode, TeleopState


MIDFIELD = Pose2d(8.0, 4.0, 0.0)
NEAR_SPEAKER = Pose2d(2.0, 5.5, 0.0)
NEAR_AMP = Pose2d(2.0, 1.0, 0.0)


def feedback(pose=MIDFIELD, vx=0.0, has_note=False) -> RobotFeedback:
    return RobotFeedback(pose=pose, speeds=ChassisSpeeds(vx=vx), shooter_has_note=has_note)


@pytest.fixture
def resolver():
    return InputResolver()


def test_defaults(resolver):
    assert resolver.mode == TeleopMode.SPEAKER
    assert resolver.intaking_mode == IntakingMode.NONE
    assert resolver.climb_mode == ClimbMode.ALIGN

    result = resolver.resolve(InputSnapshot(), feedback())
    assert result.teleop_state == TeleopState.REST
    assert result.drive_state == DriveState.OPEN_LOOP_TELEOP
    assert result.mode == TeleopMode.SPEAKER


@pytest.mark.parametrize("inputs,expected", [
    ({"force_aim": True, "force_intake_front": True, "wants_stow": True}, TeleopState.AUTO_AIM),
    ({"force_intake_front": True, "force_intake_back": True}, TeleopState.INTAKE_FRONT),
    ({"force_intake_back": True, "force_handoff": True}, TeleopState.INTAKE_BACK),
    ({"force_handoff": True, "force_amp": True}, TeleopState.HANDOFF),
    ({"force_amp": True, "wants_stow": True}, TeleopState.ALIGN_AMP),
    ({"wants_stow": True, "wants_intake": True}, TeleopState.STOW),
    ({"wants_intake": True, "wants_place": True}, TeleopState.INTAKE_BACK),
    ({"wants_place": True}, TeleopState.SHOOT),
    ({"wants_shoot": True}, TeleopState.SHOOT),
])
def test_priority_order(resolver, inputs, expected):
    """Test the highest priority request wins"""
    result = resolver.resolve(InputSnapshot(**inputs), feedback())
    assert result.teleop_state == expected


def test_mode_memory_persists(resolver):
    resolver.resolve(InputSnapshot(wants_amp_mode=True), feedback())
    result = resolver.resolve(InputSnapshot(), feedback())
    assert result.mode == TeleopMode.AMP


def test_mode_later_request_wins(resolver):
    """Test speaker beats climb beats amp when pressed together"""
    result = resolver.resolve(InputSnapshot(wants_amp_mode=True, wants_climb_mode=True), feedback())
    assert result.mode == TeleopMode.CLIMB

    result = resolver.resolve(
        InputSnapshot(wants_amp_mode=True, wants_climb_mode=True, wants_speaker_mode=True),
        feedback(),
    )
    assert result.mode == TeleopMode.SPEAKER


def test_mode_change_logged(resolver, caplog):
    with caplog.at_level("INFO", logger="robot_core.resolver"):
        resolver.resolve(InputSnapshot(wants_climb_mode=True), feedback())
        resolver.resolve(InputSnapshot(wants_climb_mode=True), feedback())
    messages = [r.message for r in caplog.records if r.name == "robot_core.resolver"]
    assert messages == ["Mode: SPEAKER -> CLIMB"]


def test_place_depends_on_mode(resolver):
    place = InputSnapshot(wants_place=True)

    resolver.resolve(InputSnapshot(wants_amp_mode=True), feedback())
    assert resolver.resolve(place, feedback()).teleop_state == TeleopState.PLACE_AMP

    resolver.resolve(InputSnapshot(wants_speaker_mode=True), feedback())
    assert resolver.resolve(place, feedback()).teleop_state == TeleopState.SHOOT


def test_place_trap_only_after_retract(resolver):
    resolver.resolve(InputSnapshot(wants_climb_mode=True), feedback())

    # Place while aligning falls through to the climb sub-mode
    result = resolver.resolve(InputSnapshot(wants_place=True, wants_align=True), feedback())
    assert result.teleop_state == TeleopState.ALIGN_CLIMB

    resolver.resolve(InputSnapshot(wants_align=True, wants_climb_retract=True), feedback())
    result = resolver.resolve(InputSnapshot(wants_place=True, wants_align=True), feedback())
    assert result.teleop_state == TeleopState.PLACE_TRAP


def test_climb_sub_modes(resolver):
    resolver.resolve(InputSnapshot(wants_climb_mode=True), feedback())

    steps = [
        ({"wants_align": True}, TeleopState.ALIGN_CLIMB),
        ({"wants_align": True, "wants_climb_extend": True}, TeleopState.CLIMB_EXTEND),
        ({"wants_align": True}, TeleopState.CLIMB_EXTEND),
        ({"wants_align": True, "wants_climb_retract": True}, TeleopState.CLIMB_RETRACT),
        ({"wants_align": True, "wants_balance": True, "wants_climb_extend": True}, TeleopState.CLIMB_BALANCE),
        ({}, TeleopState.ALIGN_CLIMB),
    ]
    for inputs, expected in steps:
        result = resolver.resolve(InputSnapshot(**inputs), feedback())
        assert result.teleop_state == expected, inputs


def test_climb_sub_mode_resets_outside_climb(resolver):
    """Test climb progress is dropped when another mode is selected"""
    resolver.resolve(InputSnapshot(wants_climb_mode=True), feedback())
    resolver.resolve(InputSnapshot(wants_align=True, wants_climb_retract=True), feedback())
    assert resolver.climb_mode == ClimbMode.RETRACT

    resolver.resolve(InputSnapshot(wants_speaker_mode=True), feedback())
    assert resolver.climb_mode == ClimbMode.ALIGN

    resolver.resolve(InputSnapshot(wants_climb_mode=True), feedback())
    result = resolver.resolve(InputSnapshot(wants_align=True), feedback())
    assert result.teleop_state == TeleopState.ALIGN_CLIMB


@pytest.mark.parametrize("vx,expected", [
    (0.0, TeleopState.INTAKE_BACK),
    (-1.0, TeleopState.INTAKE_BACK),
    (1.0, TeleopState.INTAKE_FRONT),
    (0.4, TeleopState.INTAKE_BACK),
])
def test_intake_side_from_velocity(resolver, vx, expected):
    result = resolver.resolve(InputSnapshot(wants_intake=True), feedback(vx=vx))
    assert result.teleop_state == expected


def test_intake_side_held_inside_threshold(resolver):
    """Test the intake side only switches past the transition velocity"""
    intake = InputSnapshot(wants_intake=True)
    resolver.resolve(intake, feedback(vx=1.0))

    result = resolver.resolve(intake, feedback(vx=-0.3))
    assert result.teleop_state == TeleopState.INTAKE_FRONT

    result = resolver.resolve(intake, feedback(vx=-0.6))
    assert result.teleop_state == TeleopState.INTAKE_BACK


def test_intake_without_speeds(resolver):
    result = resolver.resolve(InputSnapshot(wants_intake=True), RobotFeedback(pose=MIDFIELD))
    assert result.teleop_state == TeleopState.INTAKE_BACK


def test_intaking_mode_clears_on_release(resolver):
    resolver.resolve(InputSnapshot(wants_intake=True), feedback(vx=1.0))
    resolver.resolve(InputSnapshot(), feedback())
    assert resolver.intaking_mode == IntakingMode.NONE


def test_aim_zone(resolver):
    assert resolver.resolve(InputSnapshot(), feedback(NEAR_SPEAKER)).teleop_state == TeleopState.AUTO_AIM
    assert resolver.resolve(InputSnapshot(), feedback(MIDFIELD)).teleop_state == TeleopState.REST


def test_no_automation_without_pose(resolver):
    result = resolver.resolve(InputSnapshot(), RobotFeedback())
    assert result.teleop_state == TeleopState.REST
    assert result.drive_state == DriveState.OPEN_LOOP_TELEOP


def test_red_alliance_flip(resolver):
    """Test red alliance zones are mirrored across the field"""
    red_near_speaker = Pose2d(16.54 - 2.0, 5.5, 180.0)
    result = resolver.resolve(InputSnapshot(red_alliance=True), feedback(red_near_speaker))
    assert result.teleop_state == TeleopState.AUTO_AIM

    result = resolver.resolve(InputSnapshot(red_alliance=True), feedback(NEAR_SPEAKER))
    assert result.teleop_state == TeleopState.REST


def test_amp_mode_automation(resolver):
    resolver.resolve(InputSnapshot(wants_amp_mode=True), feedback())
    idle = InputSnapshot()

    assert resolver.resolve(idle, feedback(NEAR_AMP)).teleop_state == TeleopState.ALIGN_AMP
    assert resolver.resolve(idle, feedback(NEAR_SPEAKER, has_note=True)).teleop_state == TeleopState.HANDOFF
    assert resolver.resolve(idle, feedback(NEAR_SPEAKER)).teleop_state == TeleopState.REST
    assert resolver.resolve(idle, feedback(MIDFIELD, has_note=True)).teleop_state == TeleopState.REST


def test_custom_zones():
    resolver = InputResolver(ResolverConfig(auto_aim_x=10.0))
    result = resolver.resolve(InputSnapshot(), feedback(MIDFIELD))
    assert result.teleop_state == TeleopState.AUTO_AIM


@pytest.mark.parametrize("inputs,pose,expected", [
    ({"force_aim": True}, MIDFIELD, DriveState.AIM),
    ({}, NEAR_SPEAKER, DriveState.AIM),
    ({"disable_auto_heading": True}, NEAR_SPEAKER, DriveState.OPEN_LOOP_TELEOP),
    ({"force_intake_back": True}, MIDFIELD, DriveState.ALIGN_INTAKING),
    ({"force_intake_back": True, "disable_auto_heading": True}, MIDFIELD, DriveState.OPEN_LOOP_TELEOP),
    ({"force_intake_front": True}, MIDFIELD, DriveState.OPEN_LOOP_TELEOP),
    ({"robot_centric": True, "lock_in": True}, MIDFIELD, DriveState.ROBOT_CENTRIC),
    ({"lock_in": True}, MIDFIELD, DriveState.LOCK_IN),
    ({"open_loop": False}, MIDFIELD, DriveState.CLOSED_LOOP_TELEOP),
    ({"field_relative": False}, MIDFIELD, DriveState.ROBOT_CENTRIC),
    ({"field_relative": False, "force_aim": True}, MIDFIELD, DriveState.AIM),
])
def test_drive_state_selection(resolver, inputs, pose, expected):
    result = resolver.resolve(InputSnapshot(**inputs), feedback(pose))
    assert result.drive_state == expected


def test_aiming_only_when_automation_runs(resolver):
    """Test the aim heading is not held while stowing in the aim zone"""
    result = resolver.resolve(InputSnapshot(wants_stow=True), feedback(NEAR_SPEAKER))
    assert result.teleop_state == TeleopState.STOW
    assert result.drive_state == DriveState.OPEN_LOOP_TELEOP


def test_reset(resolver):
    resolver.resolve(InputSnapshot(wants_climb_mode=True), feedback())
    resolver.reset()
    assert resolver.mode == TeleopMode.SPEAKER


def test_deterministic():
    """Test the same input sequence resolves the same way"""
    sequence = [
        (InputSnapshot(wants_intake=True), feedback(vx=1.0)),
        (InputSnapshot(wants_amp_mode=True), feedback(NEAR_SPEAKER, has_note=True)),
        (InputSnapshot(wants_place=True), feedback(NEAR_AMP)),
        (InputSnapshot(wants_climb_mode=True, wants_align=True), feedback()),
        (InputSnapshot(wants_align=True, wants_climb_extend=True), feedback()),
        (InputSnapshot(wants_speaker_mode=True), feedback(NEAR_SPEAKER)),
    ]

    def run():
        resolver = InputResolver()
        return [resolver.resolve(snapshot, fb) for snapshot, fb in sequence]

    assert run() == run()


def test_stow_after_intake_drops_intake_alignment(resolver):
    """Test stowing after a back intake stops aligning the heading to travel"""
    resolver.resolve(InputSnapshot(wants_intake=True), feedback(vx=-1.0))
    assert resolver.intaking_mode == IntakingMode.BACK

    result = resolver.resolve(InputSnapshot(wants_stow=True), feedback(vx=-1.0))
    assert result.teleop_state == TeleopState.STOW
    assert result.drive_state != DriveState.ALIGN_INTAKING
    assert resolver.intaking_mode == IntakingMode.NONE


@pytest.mark.parametrize("override,expected", [
    ("force_handoff", TeleopState.HANDOFF),
    ("force_amp", TeleopState.ALIGN_AMP),
    ("force_aim", TeleopState.AUTO_AIM),
])
def test_override_after_back_intake_drops_intake_alignment(resolver, override, expected):
    resolver.resolve(InputSnapshot(force_intake_back=True), feedback())

    result = resolver.resolve(InputSnapshot(**{override: True}), feedback())
    assert result.teleop_state == expected
    assert result.drive_state != DriveState.ALIGN_INTAKING
    assert resolver.intaking_mode == IntakingMode.NONE
