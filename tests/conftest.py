"""Shared fixtures for mecanum_control tests."""

import threading

import pytest

from mecanum_control.hardware import HardwareInterface, SensorReadError
from mecanum_control.pose import Pose, WheelPowers


class FakeHardware(HardwareInterface):
    """Scriptable hardware: tests set heading/encoders and can force read faults."""

    def __init__(self):
        self._lock = threading.Lock()
        self.heading = 0.0
        self.positions = (0.0, 0.0, 0.0, 0.0)
        self.fail_with = None
        self.powers = []

    def move(self, fl, fr, bl, br):
        with self._lock:
            a, b, c, d = self.positions
            self.positions = (a + fl, b + fr, c + bl, d + br)

    def read_heading(self):
        if self.fail_with is not None:
            raise self.fail_with
        return self.heading

    def read_wheel_positions(self):
        if self.fail_with is not None:
            raise self.fail_with
        with self._lock:
            return self.positions

    def set_wheel_powers(self, powers: WheelPowers):
        self.powers.append(powers)


class FixedPoseSource:
    """Pose source whose pose is set directly by the test."""

    def __init__(self, pose=None):
        self.pose = pose if pose is not None else Pose()

    def get_pose(self):
        return self.pose


@pytest.fixture
def hardware():
    return FakeHardware()


@pytest.fixture
def pose_source():
    return FixedPoseSource()


@pytest.fixture
def sensor_fault():
    return SensorReadError("imu timeout")
