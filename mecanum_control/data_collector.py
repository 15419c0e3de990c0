"""Data collection and CSV logging for drive sessions.

This module provides CSV data logging for:
- Pose estimates (field position and heading from the pose tracker)
- Relative motion (planner output and the destination it was computed against)
- Wheel powers (mixer output sent to the drivetrain)
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from .config import TERM_BLUE, TERM_RESET
from .pose import MotionTarget, Pose, RelativeMotion, WheelPowers

POSE_HEADERS = ["timestamp", "x", "y", "heading"]
MOTION_HEADERS = [
    "timestamp",
    "forward",
    "strafe",
    "heading_delta",
    "dest_x",
    "dest_y",
    "dest_heading",
]
WHEEL_HEADERS = ["timestamp", "front_left", "front_right", "back_left", "back_right"]


class DataCollector:
    """Manages CSV file creation and logging for a drive session.

    Attributes:
        run_dir: Directory path for this run's output files.
        pose_csv_file: File handle for pose estimates CSV.
        motion_csv_file: File handle for relative motion CSV.
        wheel_csv_file: File handle for wheel powers CSV.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the data collector.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates timestamped
                directory. Can also be set via RUN_DIR environment variable.

        Raises:
            ValueError: If output_dir is not a valid directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.pose_csv_file: Optional[TextIO] = None
        self.pose_csv_writer: Any = None
        self.motion_csv_file: Optional[TextIO] = None
        self.motion_csv_writer: Any = None
        self.wheel_csv_file: Optional[TextIO] = None
        self.wheel_csv_writer: Any = None

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / "results" / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.pose_output_path: Path = self.run_dir / "pose_data.csv"
        self.motion_output_path: Path = self.run_dir / "motion_data.csv"
        self.wheel_output_path: Path = self.run_dir / "wheel_data.csv"

    def setup(self) -> None:
        """Initialize CSV files with headers.

        Must be called before writing data.
        """
        self.pose_csv_file = open(self.pose_output_path, "w", newline="")
        self.pose_csv_writer = csv.writer(self.pose_csv_file)
        self.pose_csv_writer.writerow(POSE_HEADERS)
        self.pose_csv_file.flush()

        self.motion_csv_file = open(self.motion_output_path, "w", newline="")
        self.motion_csv_writer = csv.writer(self.motion_csv_file)
        self.motion_csv_writer.writerow(MOTION_HEADERS)
        self.motion_csv_file.flush()

        self.wheel_csv_file = open(self.wheel_output_path, "w", newline="")
        self.wheel_csv_writer = csv.writer(self.wheel_csv_file)
        self.wheel_csv_writer.writerow(WHEEL_HEADERS)
        self.wheel_csv_file.flush()

        logging.info(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}{TERM_RESET}")

    def log_pose(self, timestamp: float, pose: Pose) -> None:
        """Log a pose estimate to CSV.

        Args:
            timestamp: Current time (seconds).
            pose: Pose snapshot from the tracker.
        """
        self.pose_csv_writer.writerow([timestamp, pose.x, pose.y, pose.heading])
        if self.pose_csv_file:
            self.pose_csv_file.flush()

    def log_motion(
        self, timestamp: float, motion: RelativeMotion, destination: Optional[MotionTarget]
    ) -> None:
        """Log planner output to CSV.

        Args:
            timestamp: Current time (seconds).
            motion: Relative motion from the planner.
            destination: Destination the motion was computed against, or None.
        """
        if destination is not None:
            dest = [destination.x, destination.y, destination.heading]
        else:
            dest = ["", "", ""]
        self.motion_csv_writer.writerow(
            [timestamp, motion.forward, motion.strafe, motion.heading_delta, *dest]
        )
        if self.motion_csv_file:
            self.motion_csv_file.flush()

    def log_wheel_powers(self, timestamp: float, powers: WheelPowers) -> None:
        """Log wheel powers to CSV.

        Args:
            timestamp: Current time (seconds).
            powers: Powers sent to the drivetrain.
        """
        self.wheel_csv_writer.writerow([timestamp, *powers.as_tuple()])
        if self.wheel_csv_file:
            self.wheel_csv_file.flush()

    def cleanup(self) -> None:
        """Close all CSV files and log final output location."""
        if self.pose_csv_file:
            self.pose_csv_file.close()
        if self.motion_csv_file:
            self.motion_csv_file.close()
        if self.wheel_csv_file:
            self.wheel_csv_file.close()

        logging.info(f"{TERM_BLUE}✓ Saved session data to {self.run_dir}{TERM_RESET}")

    def __enter__(self) -> "DataCollector":
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
