"""Mecanum Control - Field Localization and Path Correction for Holonomic Robots

Localization and drive-to-pose control for a four-wheel mecanum robot, built to
run alongside a driver or autonomous control loop at loop rate.

## Architecture Overview

Data flows through four layers:

### Layer 1: Pose Tracking (pose_tracker.py)
Maintains the field pose from the orientation sensor and wheel encoders.
- Heading: absolute IMU reading relative to a resettable zero
- Translation: mecanum forward kinematics on encoder deltas, rotated into the field frame
- Runs on its own background thread; failed reads skip the cycle
- Output: Pose (x, y, heading)

### Layer 2: Path Planning (path_planner.py)
Holds a field-absolute destination and keeps the robot-relative motion to reach it fresh.
- Background recompute plus recompute-on-read
- Destination replaced atomically under the same lock as the recompute
- Output: RelativeMotion (forward, strafe, heading_delta)

### Layer 3: Frame Transforms (transform.py)
Pure math shared by layers 1 and 2.
- Field <-> robot rotations
- Heading delta with "legacy" or "shortest" wrap policy

### Layer 4: Drive Mixing (drive_mixer.py)
Converts (forward, strafe, turn) into four wheel powers.
- Mecanum mixing equations
- Ratio-preserving scaling to a max-speed cap

## Modules

### Core Control Modules
- `config.py` - Centralized configuration parameters with documentation
- `pose.py` - Pose, MotionTarget, RelativeMotion, WheelPowers value types
- `hardware.py` - Injected hardware interface and sensor buffer
- `loop.py` - Rate-limited background loop with stop/resume
- `pose_tracker.py` - Field pose estimation
- `path_planner.py` - Destination to relative motion
- `transform.py` - Frame transforms and heading delta
- `drive_mixer.py` - Mecanum wheel mixing

### Communication & Data
- `client.py` - WebSocket simulator bridge and drive session
- `data_collector.py` - CSV data logging for pose, motion and wheel powers
- `plot_results.py` - Session plots and CLI

## Quick Start

```python
from mecanum_control import DriveMixer, PathPlanner, PoseTracker

tracker = PoseTracker(hardware)
planner = PathPlanner(tracker)
tracker.start()
planner.start()

planner.drive_to(600.0, 600.0, 90.0)
motion = planner.get_relative_motion()
```

Or run a simulator session from the command line:
```bash
python -m mecanum_control --target 600 600 90
```
"""

__version__ = "0.1.0"

from .drive_mixer import DriveMixer
from .hardware import HardwareInterface, SensorBuffer, SensorReadError
from .path_planner import PathPlanner
from .pose import MotionTarget, Pose, RelativeMotion, WheelPowers
from .pose_tracker import PoseTracker

__all__ = [
    "PoseTracker",
    "PathPlanner",
    "DriveMixer",
    "HardwareInterface",
    "SensorBuffer",
    "SensorReadError",
    "Pose",
    "MotionTarget",
    "RelativeMotion",
    "WheelPowers",
]
