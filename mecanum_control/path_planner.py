"""Field-relative path planner.

Holds a field-absolute destination and keeps the robot-relative motion
needed to reach it fresh against the live pose:
- A background loop recomputes at a fixed rate for cached readers
- get_relative_motion() and get_destination() recompute on every call, so a
  caller always gets an answer against the latest pose

Destination writes and the read-modify-derive recompute share one lock, so a
recompute never mixes coordinates from two different destinations.
"""

import logging
import threading
from typing import Optional, Protocol

from .loop import PeriodicLoop
from .pose import MotionTarget, Pose, RelativeMotion
from .transform import field_to_robot, heading_delta


class PoseSource(Protocol):
    def get_pose(self) -> Optional[Pose]: ...


class PathPlanner(PeriodicLoop):
    """Converts a field destination into robot-relative motion.

    Output (RelativeMotion):
        - forward, strafe: Remaining translation in the robot frame (mm)
        - heading_delta: Remaining turn (rad), drivetrain sign convention

    If the pose source or the destination is unset, the recompute is skipped
    and the previous motion (initially all zeros) is kept.
    """

    def __init__(
        self,
        pose_source: Optional[PoseSource],
        destination: Optional[MotionTarget] = None,
        heading_policy: Optional[str] = None,
        rate_hz: Optional[float] = None,
        config=None,
    ):
        """Initialize the path planner.

        Args:
            pose_source: Object with get_pose(), typically a PoseTracker.
            destination: Initial destination, or None to start idle.
            heading_policy: "legacy" or "shortest" heading-delta wrap rule.
                If None, uses config.HEADING_POLICY.
            rate_hz: Background recompute rate (Hz).
                If None, uses config.PATH_PLANNER_RATE_HZ.
            config: Configuration module or object. If None, uses
                mecanum_control.config.

        Raises:
            ValueError: If heading_policy is not a known policy.
        """
        if config is None:
            from mecanum_control import config as cfg
        else:
            cfg = config

        super().__init__(rate_hz if rate_hz is not None else cfg.PATH_PLANNER_RATE_HZ)

        policy = heading_policy if heading_policy is not None else cfg.HEADING_POLICY
        if policy not in cfg.HEADING_POLICIES:
            raise ValueError(
                f"Unknown heading policy: {policy!r}. Must be one of {list(cfg.HEADING_POLICIES)}"
            )
        self.heading_policy = policy

        self.pose_source = pose_source
        self._lock = threading.Lock()
        self._destination = destination
        self._motion = RelativeMotion()

        # Diagnostics
        self.update_failures = 0

    def set_destination(self, destination: Optional[MotionTarget]) -> None:
        """Replace the destination atomically and recompute.

        Args:
            destination: New field-absolute destination. None clears it; the
                last computed motion is then kept.
        """
        with self._lock:
            self._destination = destination
            self._recompute()
        if destination is not None:
            logging.debug(
                f"Destination set to ({destination.x:.1f}, {destination.y:.1f}, "
                f"{destination.heading:.3f} rad)"
            )

    def drive_to(self, x: float, y: float, heading_degrees: float = 0.0) -> None:
        """Set the destination from field coordinates and a heading in degrees."""
        self.set_destination(MotionTarget.with_degrees(x, y, heading_degrees))

    def get_destination(self) -> Optional[MotionTarget]:
        """Recompute against the latest pose, then return the destination."""
        with self._lock:
            self._recompute()
            return self._destination

    def get_relative_motion(self) -> RelativeMotion:
        """Recompute against the latest pose and destination, then return it.

        The recompute happens on every call; it is not a read of the value
        cached by the background loop.
        """
        with self._lock:
            self._recompute()
            return self._motion

    def update(self) -> None:
        with self._lock:
            self._recompute()

    def step(self) -> None:
        """One background tick. Never raises; the last motion is kept on error."""
        try:
            self.update()
        except Exception as e:
            self.update_failures += 1
            logging.error(f"Unexpected error updating relative motion: {e}", exc_info=True)

    def _recompute(self) -> None:
        # Caller must hold self._lock
        if self.pose_source is None or self._destination is None:
            return
        pose = self.pose_source.get_pose()
        if pose is None:
            return

        destination = self._destination
        forward, strafe = field_to_robot(
            destination.x - pose.x, destination.y - pose.y, pose.heading
        )
        turn = heading_delta(destination.heading, pose.heading, self.heading_policy)
        self._motion = RelativeMotion(forward, strafe, turn)
