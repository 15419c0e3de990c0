"""Configuration parameters for the mecanum control system.

This module centralizes all configuration parameters including:
- Drivetrain geometry and encoder conversion
- Background loop rates
- Drive output limits and heading-delta policy
- Simulator WebSocket connection parameters
- Terminal and plot colors

All parameters are documented with their purpose and valid ranges.
"""

import math

# ============================================================================
# Drivetrain Parameters
# ============================================================================

ENCODER_TICKS_PER_REV = 537.6
"""Encoder ticks per output shaft revolution of a drive motor.
Fixed by the motor gearbox (19.2:1 planetary, 28 ticks/rev at the motor)."""

WHEEL_DIAMETER_MM = 96.0
"""Mecanum wheel diameter (millimeters)."""

DISTANCE_PER_TICK_MM = math.pi * WHEEL_DIAMETER_MM / ENCODER_TICKS_PER_REV
"""Wheel surface travel per encoder tick (millimeters).

All field coordinates (pose, destinations) are expressed in millimeters, so
this converts raw encoder deltas straight into field units."""


# ============================================================================
# Background Loop Parameters
# ============================================================================

POSE_TRACKER_RATE_HZ = 200.0
"""Update rate of the pose tracker background loop (Hz).

Must be faster than the control loop so the planner always sees a pose at
most one control cycle old. Typical encoder/IMU reads take ~2 ms."""

PATH_PLANNER_RATE_HZ = 200.0
"""Recompute rate of the path planner background loop (Hz).

Readers that need the answer right now call get_relative_motion(), which
recomputes synchronously, so this only bounds the staleness of cached reads."""

LOOP_JOIN_TIMEOUT_SECONDS = 1.0
"""How long stop(join=True) waits for a background loop thread to exit."""


# ============================================================================
# Drive Output Parameters
# ============================================================================

MAX_SPEED = 0.7
"""Default wheel power cap (range: (0, 1]).

The mixer rescales all four wheel powers so the largest magnitude equals this
value whenever it would otherwise be exceeded."""

HEADING_POLICY = "legacy"
"""Heading-delta wrap policy: "legacy" or "shortest".

- legacy: raw > pi -> 2*pi - raw, raw < -pi -> 2*pi - |raw|, then negated.
  The two branches are not mirror images; kept as default for compatibility
  with existing autonomous routines.
- shortest: negated shortest signed angular distance."""

HEADING_POLICIES = ("legacy", "shortest")
"""Accepted values for HEADING_POLICY."""

DRIVE_GAIN = 1.0 / 600.0
"""Proportional gain from forward/strafe distance (mm) to drive power.

600 mm of remaining travel maps to full drive power before the mixer cap."""

TURN_GAIN = 0.8
"""Proportional gain from heading delta (rad) to turn power."""


# ============================================================================
# Terminal Colors
# ============================================================================

TERM_ORANGE = "\033[38;2;247;72;35m"
"""Terminal color code for warnings and highlights (RGB: 247, 72, 35)."""

TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for status lines (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""


# ============================================================================
# Plot Colors
# ============================================================================

PLOT_ORANGE = "#f74823"
"""Primary plot color - actual trajectory, measured values."""

PLOT_BLUE = "#2374f7"
"""Secondary plot color - destinations, reference values."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides and grids."""

PLOT_YELLOW_ORANGE = "#ffa726"
"""Accent color for start/end markers."""


# ============================================================================
# Simulator WebSocket Configuration
# ============================================================================

WS_URI = "ws://localhost:8765"
"""WebSocket URI of the field simulator."""

WS_RETRY_DELAY_SECONDS = 1
"""Initial retry delay for failed WebSocket connections (seconds)."""

WS_MAX_RETRY_DELAY_SECONDS = 30
"""Maximum retry delay with exponential backoff (seconds)."""

WS_TIMEOUT_SECONDS = 5.0
"""Timeout for WebSocket message reception (seconds)."""
