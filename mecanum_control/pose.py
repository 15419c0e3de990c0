"""Pose and motion value types.

All types are immutable. Owners publish a new instance on every update
instead of mutating fields, so a reader holding a reference always sees
x, y and heading from the same update cycle.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

TWO_PI = 2.0 * math.pi


def normalize_angle(angle: float) -> float:
    """Wrap an angle into the half-open range (-pi, pi].

    Args:
        angle: Angle in radians (any magnitude)

    Returns:
        Equivalent angle in (-pi, pi]. Both -pi and pi map to pi.
    """
    return math.pi - ((math.pi - angle) % TWO_PI)


@dataclass(frozen=True)
class Pose:
    """Robot pose in the field frame.

    Attributes:
        x: Field x-coordinate (mm)
        y: Field y-coordinate (mm)
        heading: Heading (rad), normalized to (-pi, pi]
    """

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "heading", normalize_angle(self.heading))


@dataclass(frozen=True)
class MotionTarget:
    """Field-absolute destination pose for the path planner.

    Attributes:
        x: Field x-coordinate (mm)
        y: Field y-coordinate (mm)
        heading: Target heading (rad)
    """

    x: float
    y: float
    heading: float = 0.0

    @classmethod
    def with_degrees(cls, x: float, y: float, heading_degrees: float = 0.0) -> "MotionTarget":
        """Create a target from a heading given in degrees."""
        return cls(x, y, math.radians(heading_degrees))


@dataclass(frozen=True)
class RelativeMotion:
    """Motion needed to reach the destination, in the robot (body) frame.

    Attributes:
        forward: Distance along the robot's forward axis (mm)
        strafe: Distance along the robot's lateral axis (mm)
        heading_delta: Turn required (rad), sign per the drivetrain convention
    """

    forward: float = 0.0
    strafe: float = 0.0
    heading_delta: float = 0.0


@dataclass(frozen=True)
class WheelPowers:
    """Normalized power for each of the four mecanum wheels."""

    front_left: float = 0.0
    front_right: float = 0.0
    back_left: float = 0.0
    back_right: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.front_left, self.front_right, self.back_left, self.back_right)

    def __iter__(self) -> Iterator[float]:
        return iter(self.as_tuple())
