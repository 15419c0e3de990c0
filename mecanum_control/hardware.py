"""Hardware access interface.

Components never touch motor or IMU drivers directly; they receive an object
implementing HardwareInterface. The on-robot driver layer and the simulator
bridge (client.py) each provide one.
"""

import threading
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from .pose import WheelPowers

WheelPositions = Tuple[float, float, float, float]


class SensorReadError(Exception):
    """Raised when a sensor reading is unavailable or invalid for this cycle."""


class HardwareInterface(ABC):
    """Sensor inputs and wheel outputs used by the control core."""

    @abstractmethod
    def read_heading(self) -> float:
        """Absolute orientation sensor heading (rad).

        Raises:
            SensorReadError: If no valid reading is available.
        """

    @abstractmethod
    def read_wheel_positions(self) -> WheelPositions:
        """Cumulative encoder positions (ticks) as (fl, fr, bl, br).

        Raises:
            SensorReadError: If no valid reading is available.
        """

    @abstractmethod
    def set_wheel_powers(self, powers: WheelPowers) -> None:
        """Apply normalized wheel powers."""


class SensorBuffer(HardwareInterface):
    """Hardware backed by readings pushed from an external source.

    The simulator bridge pushes each sensor message in with update_heading() /
    update_wheel_positions(); the pose tracker thread reads the latest values.
    Wheel powers written by the control loop are held until the bridge
    reads them back with latest_wheel_powers().
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._heading: Optional[float] = None
        self._wheel_positions: Optional[WheelPositions] = None
        self._wheel_powers = WheelPowers()

    def update_heading(self, heading: float) -> None:
        with self._lock:
            self._heading = float(heading)

    def update_wheel_positions(self, positions: Sequence[float]) -> None:
        """Store the latest encoder positions.

        Raises:
            ValueError: If positions does not hold exactly four values.
        """
        if len(positions) != 4:
            raise ValueError(f"Expected 4 wheel positions, got {len(positions)}")
        fl, fr, bl, br = (float(p) for p in positions)
        with self._lock:
            self._wheel_positions = (fl, fr, bl, br)

    def read_heading(self) -> float:
        with self._lock:
            heading = self._heading
        if heading is None:
            raise SensorReadError("No heading reading received yet")
        return heading

    def read_wheel_positions(self) -> WheelPositions:
        with self._lock:
            positions = self._wheel_positions
        if positions is None:
            raise SensorReadError("No wheel encoder reading received yet")
        return positions

    def set_wheel_powers(self, powers: WheelPowers) -> None:
        with self._lock:
            self._wheel_powers = powers

    def latest_wheel_powers(self) -> WheelPowers:
        with self._lock:
            return self._wheel_powers
