"""Tests for the simulator client message handling (no network)."""

import csv
import json
import math

import pytest

from mecanum_control.client import RobotController, motion_to_command
from mecanum_control.config import DRIVE_GAIN, TURN_GAIN
from mecanum_control.data_collector import DataCollector
from mecanum_control.pose import MotionTarget, RelativeMotion, WheelPowers


@pytest.fixture
def controller(tmp_path):
    collector = DataCollector(run_dir=str(tmp_path / "run_test"))
    return RobotController("ws://localhost:8765", max_speed=0.7, data_collector=collector)


def sensors_message(heading=0.0, encoders=(0, 0, 0, 0)):
    return json.dumps(
        {
            "message_type": "sensors",
            "sensors": [
                {"name": "imu", "data": [heading]},
                {"name": "encoders", "data": list(encoders)},
            ],
        }
    )


def test_rejects_invalid_uri(tmp_path):
    with pytest.raises(ValueError, match="Invalid WebSocket URI"):
        RobotController("http://localhost", data_collector=DataCollector(run_dir=str(tmp_path)))


def test_motion_to_command_applies_gains():
    forward, strafe, turn = motion_to_command(RelativeMotion(600.0, -300.0, 0.5))
    assert forward == pytest.approx(600.0 * DRIVE_GAIN)
    assert strafe == pytest.approx(-300.0 * DRIVE_GAIN)
    assert turn == pytest.approx(0.5 * TURN_GAIN)


def test_destination_message_sets_planner_target(controller):
    controller.handle_message(json.dumps({"message_type": "destination", "data": [600, 300, 90]}))

    destination = controller.path_planner.get_destination()
    assert (destination.x, destination.y) == (600.0, 300.0)
    assert destination.heading == pytest.approx(math.pi / 2)


def test_sensor_message_fills_buffer_and_returns_powers(controller):
    controller.path_planner.set_destination(MotionTarget(600.0, 0.0, 0.0))

    powers = controller.handle_message(sensors_message(heading=0.1, encoders=(1, 2, 3, 4)))

    assert controller.hardware.read_heading() == 0.1
    assert controller.hardware.read_wheel_positions() == (1.0, 2.0, 3.0, 4.0)
    # 600 mm ahead at full drive gain saturates at the cap on all wheels
    assert powers.as_tuple() == pytest.approx((0.7, 0.7, 0.7, 0.7))
    assert controller.hardware.latest_wheel_powers() == powers


def test_sensor_message_without_destination_sends_zero(controller):
    powers = controller.handle_message(sensors_message())
    assert powers == WheelPowers()


def test_sensor_message_without_known_sensors_is_ignored(controller):
    message = json.dumps({"message_type": "sensors", "sensors": [{"name": "lidar", "data": [1]}]})
    assert controller.handle_message(message) is None


def test_session_end_stops_controller(controller):
    controller.handle_message(b'{"message_type": "session_end"}')
    assert controller.should_stop


@pytest.mark.parametrize(
    "message",
    [
        "not json",
        json.dumps({"message_type": "sensors", "sensors": "bad"}),
        json.dumps({"message_type": "destination", "data": [1]}),
        json.dumps({"message_type": "sensors", "sensors": [{"name": "encoders", "data": [1, 2]}]}),
    ],
)
def test_bad_messages_are_logged_and_ignored(controller, message):
    assert controller.handle_message(message) is None
    assert not controller.should_stop


def test_control_cycle_is_logged(controller):
    with controller:
        controller.path_planner.set_destination(MotionTarget(600.0, 0.0, 0.0))
        controller.handle_message(sensors_message())
        controller.handle_message(sensors_message())

    with open(controller.data_collector.wheel_output_path, newline="") as f:
        rows = list(csv.reader(f))
    assert len(rows) == 3
    assert float(rows[1][1]) == pytest.approx(0.7)
