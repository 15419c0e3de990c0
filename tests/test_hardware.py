"""Tests for the sensor buffer hardware implementation."""

import pytest

from mecanum_control.hardware import SensorBuffer, SensorReadError
from mecanum_control.pose import WheelPowers


def test_reads_fail_until_first_update():
    buffer = SensorBuffer()
    with pytest.raises(SensorReadError):
        buffer.read_heading()
    with pytest.raises(SensorReadError):
        buffer.read_wheel_positions()


def test_returns_latest_readings():
    buffer = SensorBuffer()
    buffer.update_heading(0.25)
    buffer.update_wheel_positions([1, 2, 3, 4])
    buffer.update_wheel_positions([10, 20, 30, 40])

    assert buffer.read_heading() == 0.25
    assert buffer.read_wheel_positions() == (10.0, 20.0, 30.0, 40.0)


def test_rejects_wrong_number_of_wheels():
    with pytest.raises(ValueError, match="4 wheel positions"):
        SensorBuffer().update_wheel_positions([1, 2, 3])


def test_holds_latest_wheel_powers():
    buffer = SensorBuffer()
    assert buffer.latest_wheel_powers() == WheelPowers()

    powers = WheelPowers(0.1, 0.2, 0.3, 0.4)
    buffer.set_wheel_powers(powers)
    assert buffer.latest_wheel_powers() is powers
