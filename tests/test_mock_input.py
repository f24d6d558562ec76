"""Tests for the scripted input provider and gamepad helpers"""

import asyncio

import pytest

from operator_input import MockInput, TestScripts
from operator_input.gamepad_input import hat_to_heading
from robot_core.types import InputSnapshot


def read_all(provider: MockInput, count: int):
    async def read():
        await provider.start()
        snapshots = [await provider.read_snapshot() for _ in range(count)]
        await provider.stop()
        return snapshots

    return asyncio.run(read())


def test_not_running_returns_none():
    provider = MockInput([InputSnapshot(translation=0.5)])
    assert asyncio.run(provider.read_snapshot()) is None


def test_empty_script_is_neutral():
    snapshots = read_all(MockInput(), 3)
    assert all(snapshot.is_neutral for snapshot in snapshots)


def test_script_order_then_repeat_last():
    first = InputSnapshot(translation=0.5)
    second = InputSnapshot(strafe=-0.5)
    provider = MockInput([first, None, second])

    assert read_all(provider, 5) == [first, None, second, second, second]
    assert provider.exhausted is True


def test_reset():
    first = InputSnapshot(translation=0.5)
    provider = MockInput([first, InputSnapshot()])
    read_all(provider, 2)

    provider.reset()
    assert provider.exhausted is False


@pytest.mark.parametrize("name", TestScripts.script_names())
def test_load_script(name):
    provider = MockInput()
    provider.load_script(name)
    assert provider.exhausted is False
    assert read_all(provider, 1)[0] is not None


def test_unknown_script_keeps_current():
    first = InputSnapshot(translation=0.5)
    provider = MockInput([first])
    provider.load_script("no_such_script")
    assert read_all(provider, 1) == [first]


def test_input_dropout_has_gap():
    script = TestScripts.input_dropout()
    assert script.count(None) == 100
    assert script[0] is not None
    assert script[-1] is not None


@pytest.mark.parametrize("hat,expected", [
    ((0, 0), None),
    ((0, 1), 0.0),
    ((-1, 0), 90.0),
    ((1, 0), -90.0),
    ((0, -1), -180.0),
])
def test_hat_to_heading(hat, expected):
    heading = hat_to_heading(hat)
    if expected is None:
        assert heading is None
    else:
        assert heading == pytest.approx(expected)
