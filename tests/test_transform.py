"""Tests for field/robot frame transforms and heading delta policies."""

import math

import pytest

from mecanum_control.pose import normalize_angle
from mecanum_control.transform import (
    field_to_robot,
    heading_delta,
    legacy_heading_delta,
    robot_to_field,
    shortest_heading_delta,
)

HEADINGS = [-math.pi + 1e-9, -2.0, -math.pi / 2, -0.3, 0.0, 0.7, math.pi / 2, 2.5, math.pi]
DELTAS = [(0.0, 0.0), (600.0, 0.0), (0.0, -450.0), (123.4, 567.8), (-300.0, -40.0)]


@pytest.mark.parametrize("theta", HEADINGS)
@pytest.mark.parametrize("dx,dy", DELTAS)
def test_field_to_robot_preserves_norm(theta, dx, dy):
    forward, strafe = field_to_robot(dx, dy, theta)
    assert forward**2 + strafe**2 == pytest.approx(dx**2 + dy**2, abs=1e-6)


@pytest.mark.parametrize("theta", HEADINGS)
def test_robot_to_field_inverts_field_to_robot(theta):
    forward, strafe = field_to_robot(250.0, -80.0, theta)
    dx, dy = robot_to_field(forward, strafe, theta)
    assert dx == pytest.approx(250.0)
    assert dy == pytest.approx(-80.0)


def test_field_to_robot_at_zero_heading_is_identity():
    assert field_to_robot(600.0, 300.0, 0.0) == (600.0, 300.0)


def test_field_to_robot_quarter_turn():
    forward, strafe = field_to_robot(100.0, 600.0, math.pi / 2)
    assert forward == pytest.approx(600.0)
    assert strafe == pytest.approx(-100.0)


def test_heading_delta_zero_when_on_target():
    assert legacy_heading_delta(1.2, 1.2) == 0.0
    assert shortest_heading_delta(1.2, 1.2) == 0.0


def test_heading_delta_quarter_turn_is_negated():
    assert legacy_heading_delta(math.pi / 2, 0.0) == pytest.approx(-math.pi / 2)
    assert legacy_heading_delta(0.0, math.pi / 2) == pytest.approx(math.pi / 2)


def test_legacy_no_wrap_inside_half_turn():
    # raw = 3pi/4 is not above pi, so it is only negated
    assert legacy_heading_delta(3 * math.pi / 4, 0.0) == pytest.approx(-3 * math.pi / 4)


def test_legacy_positive_branch_reflects():
    # raw = 3pi/2 -> 2pi - 3pi/2 = pi/2 -> -pi/2
    assert legacy_heading_delta(3 * math.pi / 4, -3 * math.pi / 4) == pytest.approx(-math.pi / 2)


def test_legacy_negative_branch_wraps():
    # raw = -3pi/2 -> 2pi - 3pi/2 = pi/2 -> -pi/2
    assert legacy_heading_delta(-3 * math.pi / 4, 3 * math.pi / 4) == pytest.approx(-math.pi / 2)


def test_legacy_half_turn_is_not_wrapped():
    # raw == pi takes neither branch, so the result is -pi
    assert legacy_heading_delta(math.pi, 0.0) == -math.pi
    assert shortest_heading_delta(math.pi, 0.0) == -math.pi


def test_legacy_branches_are_asymmetric():
    # Positive wrap disagrees with the shortest path, negative wrap agrees
    assert legacy_heading_delta(3 * math.pi / 4, -3 * math.pi / 4) == pytest.approx(
        -shortest_heading_delta(3 * math.pi / 4, -3 * math.pi / 4)
    )
    assert legacy_heading_delta(-3 * math.pi / 4, 3 * math.pi / 4) == pytest.approx(
        shortest_heading_delta(-3 * math.pi / 4, 3 * math.pi / 4)
    )


def test_shortest_heading_delta_takes_short_way():
    assert shortest_heading_delta(3 * math.pi / 4, -3 * math.pi / 4) == pytest.approx(math.pi / 2)


@pytest.mark.parametrize("target", [-3.0, -1.0, 0.0, 1.5, 3.1])
@pytest.mark.parametrize("current", [-3.1, -0.5, 0.0, 2.0, math.pi])
def test_shortest_heading_delta_in_range(target, current):
    delta = shortest_heading_delta(target, current)
    assert -math.pi <= delta < math.pi + 1e-12


def test_heading_delta_dispatches_by_policy():
    assert heading_delta(3 * math.pi / 4, -3 * math.pi / 4) == pytest.approx(-math.pi / 2)
    assert heading_delta(3 * math.pi / 4, -3 * math.pi / 4, "shortest") == pytest.approx(math.pi / 2)


def test_heading_delta_rejects_unknown_policy():
    with pytest.raises(ValueError, match="Unknown heading policy"):
        heading_delta(0.0, 0.0, "fastest")


def test_normalize_angle_maps_minus_pi_to_pi():
    assert normalize_angle(-math.pi) == math.pi
    assert normalize_angle(math.pi) == math.pi


@pytest.mark.parametrize("angle", [-10.0, -4.0, -math.pi / 3, 0.0, 2.0, 4.0, 7.5, 20.0])
def test_normalize_angle_range_and_equivalence(angle):
    wrapped = normalize_angle(angle)
    assert -math.pi < wrapped <= math.pi
    assert math.sin(wrapped) == pytest.approx(math.sin(angle), abs=1e-9)
    assert math.cos(wrapped) == pytest.approx(math.cos(angle), abs=1e-9)
