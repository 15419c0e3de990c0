"""Field-frame / robot-frame coordinate transforms.

Pure, stateless math shared by the pose tracker (robot -> field, for
odometry) and the path planner (field -> robot, for motion commands).

Sign conventions:
    - Field frame: fixed to the playing field, heading measured from the
      field +x axis towards the field +y axis.
    - Robot frame: forward along the robot's heading; strafe points along
      field +y when the heading is zero, matching the strafe input of the
      drive mixer.
"""

import math
from typing import Tuple

from .pose import TWO_PI, normalize_angle


def field_to_robot(dx: float, dy: float, heading: float) -> Tuple[float, float]:
    """Rotate a field-relative displacement into the robot frame.

    This is a rotation by -heading:
        forward =  dx * cos(heading) + dy * sin(heading)
        strafe  =  dy * cos(heading) - dx * sin(heading)

    Args:
        dx: Field x displacement (mm)
        dy: Field y displacement (mm)
        heading: Current robot heading (rad)

    Returns:
        Tuple of (forward, strafe) in the robot frame (mm)
    """
    cos_h = math.cos(heading)
    sin_h = math.sin(heading)
    forward = dx * cos_h + dy * sin_h
    strafe = dy * cos_h - dx * sin_h
    return forward, strafe


def robot_to_field(forward: float, strafe: float, heading: float) -> Tuple[float, float]:
    """Rotate a robot-frame displacement into the field frame.

    Inverse of field_to_robot (rotation by +heading).

    Args:
        forward: Displacement along the robot's forward axis (mm)
        strafe: Displacement along the robot's lateral axis (mm)
        heading: Robot heading during the displacement (rad)

    Returns:
        Tuple of (dx, dy) in the field frame (mm)
    """
    cos_h = math.cos(heading)
    sin_h = math.sin(heading)
    dx = forward * cos_h - strafe * sin_h
    dy = forward * sin_h + strafe * cos_h
    return dx, dy


def legacy_heading_delta(target_heading: float, current_heading: float) -> float:
    """Heading delta with the wrap rule used by existing autonomous routines.

    raw = target - current
    raw > pi   -> 2*pi - raw
    raw < -pi  -> 2*pi - |raw|
    result     -> -raw

    The positive branch reflects instead of subtracting 2*pi, so for
    raw in (pi, 2*pi) the turn comes out with the opposite sign to the
    shortest-path turn. The negative branch matches the shortest path.
    raw == pi is not wrapped, so the result is -pi, just outside the
    (-pi, pi] range used everywhere else.

    Args:
        target_heading: Destination heading (rad)
        current_heading: Current robot heading (rad)

    Returns:
        Turn required (rad), negated to match the drivetrain turn sign
    """
    raw = target_heading - current_heading
    if raw > math.pi:
        raw = TWO_PI - raw
    elif raw < -math.pi:
        raw = TWO_PI - abs(raw)
    return -raw


def shortest_heading_delta(target_heading: float, current_heading: float) -> float:
    """Heading delta along the shortest angular path, drivetrain sign convention.

    Returns:
        -normalize(target - current), so the magnitude never exceeds pi
    """
    return -normalize_angle(target_heading - current_heading)


HEADING_DELTA_POLICIES = {
    "legacy": legacy_heading_delta,
    "shortest": shortest_heading_delta,
}


def heading_delta(target_heading: float, current_heading: float, policy: str = "legacy") -> float:
    """Compute the turn needed to reach target_heading from current_heading.

    Args:
        target_heading: Destination heading (rad)
        current_heading: Current robot heading (rad)
        policy: "legacy" (default) or "shortest"

    Returns:
        Turn required (rad)

    Raises:
        ValueError: If policy is not a known heading-delta policy.
    """
    try:
        delta_fn = HEADING_DELTA_POLICIES[policy]
    except KeyError:
        raise ValueError(
            f"Unknown heading policy: {policy!r}. Must be one of {sorted(HEADING_DELTA_POLICIES)}"
        ) from None
    return delta_fn(target_heading, current_heading)
