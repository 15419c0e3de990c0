"""Pose tracking module for field localization.

This module maintains the robot's field pose by fusing two sensor sources
every cycle:
- Absolute heading from the orientation sensor (IMU)
- Wheel encoder deltas, converted to a body-frame displacement with mecanum
  forward kinematics and rotated into the field frame

The tracker is the single writer of the pose. Each update publishes a new
immutable Pose under a lock, so readers on other threads never see x, y and
heading from different cycles.
"""

import logging
import threading
from typing import Dict, Optional

from .hardware import HardwareInterface, SensorReadError, WheelPositions
from .loop import PeriodicLoop
from .pose import Pose, normalize_angle
from .transform import robot_to_field


class PoseTracker(PeriodicLoop):
    """Continuously-updating field pose estimator for a mecanum drivetrain.

    Pose state:
        - x, y: Position (mm) in the field frame
        - heading: Heading (rad) relative to the last heading reset

    Sensors:
        - Orientation sensor: absolute heading, read every cycle
        - Drive encoders: cumulative ticks for (fl, fr, bl, br)

    A failed sensor read is a no-op for that cycle: the last pose is kept and
    the read is retried on the next tick.
    """

    def __init__(
        self,
        hardware: HardwareInterface,
        distance_per_tick: Optional[float] = None,
        rate_hz: Optional[float] = None,
        config=None,
    ):
        """Initialize the pose tracker.

        Args:
            hardware: Sensor access for heading and wheel encoder positions.
            distance_per_tick: Wheel travel per encoder tick (mm).
                If None, uses config.DISTANCE_PER_TICK_MM.
            rate_hz: Background update rate (Hz).
                If None, uses config.POSE_TRACKER_RATE_HZ.
            config: Configuration module or object. If None, uses
                mecanum_control.config.
        """
        if config is None:
            from mecanum_control import config as cfg
        else:
            cfg = config

        super().__init__(rate_hz if rate_hz is not None else cfg.POSE_TRACKER_RATE_HZ)

        self.hardware = hardware
        self.distance_per_tick = (
            distance_per_tick if distance_per_tick is not None else cfg.DISTANCE_PER_TICK_MM
        )

        self._lock = threading.Lock()
        self._pose = Pose()

        # Raw sensor heading that maps to pose heading 0
        self._heading_offset = 0.0
        self._last_raw_heading: Optional[float] = None
        # Heading requested before the first sensor read, applied at baseline
        self._pending_heading: Optional[float] = None
        self._last_positions: Optional[WheelPositions] = None

        # Diagnostics
        self.update_count = 0
        self.read_failures = 0

    def get_pose(self) -> Pose:
        """Get the latest pose snapshot (all fields from one update)."""
        with self._lock:
            return self._pose

    def set_start_position(self, x: float, y: float, heading: float = 0.0) -> None:
        """Seed the pose at the start of a session.

        The heading reference is re-zeroed so the current sensor heading
        reads as `heading` from now on.

        Args:
            x: Starting field x-coordinate (mm)
            y: Starting field y-coordinate (mm)
            heading: Starting heading (rad)
        """
        with self._lock:
            self._rezero_heading(heading)
            self._pose = Pose(x, y, heading)
        logging.info(f"Pose set to ({x:.1f}, {y:.1f}, {heading:.3f} rad)")

    def reset_heading(self) -> None:
        """Zero the heading reference at the current sensor heading.

        x and y are kept; subsequent heading reads are relative to the
        orientation the robot has right now.
        """
        with self._lock:
            self._rezero_heading(0.0)
            self._pose = Pose(self._pose.x, self._pose.y, 0.0)
        logging.info("Heading reference reset")

    def _rezero_heading(self, heading: float) -> None:
        # Caller must hold self._lock
        if self._last_raw_heading is None:
            self._pending_heading = heading
        else:
            self._heading_offset = self._last_raw_heading - heading
            self._pending_heading = None

    def step(self) -> None:
        """One background tick. Never raises."""
        try:
            self.update()
        except SensorReadError as e:
            self.read_failures += 1
            logging.debug(f"Sensor read skipped: {e}")
        except Exception as e:
            self.read_failures += 1
            logging.error(f"Unexpected error updating pose: {e}", exc_info=True)

    def update(self) -> None:
        """Read sensors once and integrate the encoder delta into the pose.

        The first successful read only establishes the encoder baseline.

        Raises:
            SensorReadError: If the hardware has no valid reading this cycle.
        """
        raw_heading = self.hardware.read_heading()
        positions = self.hardware.read_wheel_positions()

        with self._lock:
            previous = self._pose
            if self._pending_heading is not None:
                self._heading_offset = raw_heading - self._pending_heading
                self._pending_heading = None
            new_heading = normalize_angle(raw_heading - self._heading_offset)

            if self._last_positions is None:
                self._last_positions = positions
                self._last_raw_heading = raw_heading
                self._pose = Pose(previous.x, previous.y, new_heading)
                return

            # Encoder deltas in field units
            d_fl, d_fr, d_bl, d_br = (
                (now - before) * self.distance_per_tick
                for now, before in zip(positions, self._last_positions)
            )

            # Mecanum forward kinematics (inverse of the drive mixer)
            forward = (d_fl + d_fr + d_bl + d_br) / 4.0
            strafe = (d_fl - d_fr - d_bl + d_br) / 4.0

            # Rotate using the mid-cycle heading
            heading_change = normalize_angle(new_heading - previous.heading)
            mid_heading = previous.heading + heading_change / 2.0
            dx, dy = robot_to_field(forward, strafe, mid_heading)

            self._pose = Pose(previous.x + dx, previous.y + dy, new_heading)
            self._last_positions = positions
            self._last_raw_heading = raw_heading
            self.update_count += 1

    def get_diagnostics(self) -> Dict[str, float]:
        """Get tracker diagnostic information.

        Returns:
            Dictionary containing:
                - update_count: Successful integration cycles
                - read_failures: Cycles skipped due to sensor faults
                - heading_offset: Raw sensor heading mapped to heading 0 (rad)
        """
        with self._lock:
            return {
                "update_count": self.update_count,
                "read_failures": self.read_failures,
                "heading_offset": self._heading_offset,
            }
