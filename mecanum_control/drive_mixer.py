"""
Mecanum drivetrain mixing.

This module converts a robot-frame motion vector (forward, strafe, turn) into
the four wheel powers of a mecanum drivetrain.
"""

from typing import Optional

import numpy as np

from .hardware import HardwareInterface
from .pose import WheelPowers

# Wheel order: front left, front right, back left, back right.
# Columns: forward, strafe, turn.
MIXING_MATRIX = np.array(
    [
        [1.0, 1.0, 1.0],
        [1.0, -1.0, -1.0],
        [1.0, -1.0, 1.0],
        [1.0, 1.0, -1.0],
    ]
)


def mix(forward: float, strafe: float, turn: float, max_speed: float = 1.0) -> WheelPowers:
    """
    Compute wheel powers from a robot-frame motion vector.

    For a mecanum drivetrain, the wheel powers are:
        fl = forward + strafe + turn
        fr = forward - strafe - turn
        bl = forward - strafe + turn
        br = forward + strafe - turn

    If the largest magnitude exceeds max_speed, all four are scaled by
    max_speed / max so the ratios between wheels are preserved.

    Args:
        forward: Forward power
        strafe: Strafe power
        turn: Turn power
        max_speed: Power cap in (0, 1]

    Returns:
        WheelPowers with every value in [-max_speed, max_speed]
    """
    speeds = MIXING_MATRIX @ np.array([forward, strafe, turn], dtype=float)

    # Scale down to the cap, keeping wheel ratios
    largest = float(np.max(np.abs(speeds)))
    if largest > max_speed:
        speeds = speeds * (max_speed / largest)

    return WheelPowers(*(float(s) for s in speeds))


class DriveMixer:
    """Mixes motion vectors into wheel powers with a fixed power cap."""

    def __init__(self, max_speed: Optional[float] = None):
        """Initialize the mixer.

        Args:
            max_speed: Wheel power cap in (0, 1]. If None, uses config.MAX_SPEED.

        Raises:
            ValueError: If max_speed is outside (0, 1].
        """
        if max_speed is None:
            from mecanum_control.config import MAX_SPEED

            max_speed = MAX_SPEED

        if not 0.0 < max_speed <= 1.0:
            raise ValueError(f"max_speed must be in (0, 1], got {max_speed}")

        self.max_speed = max_speed

    def mix(self, forward: float, strafe: float, turn: float) -> WheelPowers:
        return mix(forward, strafe, turn, self.max_speed)

    def drive(self, hardware: HardwareInterface, forward: float, strafe: float, turn: float) -> WheelPowers:
        """Mix and apply the powers to the drivetrain.

        Returns:
            The WheelPowers sent to the hardware
        """
        powers = self.mix(forward, strafe, turn)
        hardware.set_wheel_powers(powers)
        return powers

    def stop(self, hardware: HardwareInterface) -> None:
        """Send zero power to all four wheels."""
        hardware.set_wheel_powers(WheelPowers())
