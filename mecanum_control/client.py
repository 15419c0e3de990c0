"""
WebSocket Client for Field Simulator Drive Sessions

This module connects the control core to a field simulator over WebSocket.
Sensor messages (orientation heading, wheel encoder positions) are pushed into
a SensorBuffer that the pose tracker reads on its own thread; each sensor
message also triggers one control cycle that reads a fresh relative motion
from the path planner, mixes it into wheel powers and sends them back.
"""

import asyncio
import json
import logging
import signal
import time
from typing import Any, Dict, Optional, Tuple, Union

import websockets

from mecanum_control.config import (
    DRIVE_GAIN,
    TERM_BLUE,
    TERM_ORANGE,
    TERM_RESET,
    TURN_GAIN,
    WS_MAX_RETRY_DELAY_SECONDS,
    WS_RETRY_DELAY_SECONDS,
    WS_TIMEOUT_SECONDS,
    WS_URI,
)
from mecanum_control.data_collector import DataCollector
from mecanum_control.drive_mixer import DriveMixer
from mecanum_control.hardware import SensorBuffer
from mecanum_control.path_planner import PathPlanner
from mecanum_control.pose import MotionTarget, RelativeMotion, WheelPowers
from mecanum_control.pose_tracker import PoseTracker


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    Shows INFO messages without timestamps while preserving full context for
    WARNING, ERROR, and DEBUG messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        else:
            return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        handler = logging.StreamHandler()
        formatter = CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)


def motion_to_command(
    motion: RelativeMotion, drive_gain: float = DRIVE_GAIN, turn_gain: float = TURN_GAIN
) -> Tuple[float, float, float]:
    """Scale a relative motion into a (forward, strafe, turn) power vector.

    heading_delta already carries the drivetrain's turn sign, so it is used
    directly as the turn input to the mixer.

    Args:
        motion: Remaining motion from the path planner
        drive_gain: Power per mm of remaining translation
        turn_gain: Power per radian of remaining turn

    Returns:
        Tuple of (forward, strafe, turn) before mixing
    """
    return (
        motion.forward * drive_gain,
        motion.strafe * drive_gain,
        motion.heading_delta * turn_gain,
    )


class RobotController:
    """Drive session against the field simulator.

    Attributes:
        uri: WebSocket URI to connect to.
        hardware: Sensor buffer fed from simulator messages.
        pose_tracker: Background pose estimator.
        path_planner: Background relative-motion planner.
        mixer: Wheel power mixer.
        data_collector: Handles CSV file logging.
        should_stop: Flag indicating whether to stop the control loop.
    """

    def __init__(
        self,
        uri: str,
        destination: Optional[MotionTarget] = None,
        output_dir: str = ".",
        max_speed: Optional[float] = None,
        heading_policy: Optional[str] = None,
        data_collector: Optional[DataCollector] = None,
    ) -> None:
        """Initialize the robot controller.

        Args:
            uri: WebSocket URI to connect to (must start with ws:// or wss://).
            destination: Initial destination, or None to wait for one from the simulator.
            output_dir: Base directory for output files (default: current directory).
            max_speed: Wheel power cap in (0, 1]. If None, uses config.MAX_SPEED.
            heading_policy: "legacy" or "shortest". If None, uses config.HEADING_POLICY.
            data_collector: Optional pre-built collector (created from output_dir if None).

        Raises:
            ValueError: If URI format is invalid.
        """
        if not uri or not uri.startswith(("ws://", "wss://")):
            raise ValueError(f"Invalid WebSocket URI: {uri}. Must start with 'ws://' or 'wss://'")

        self.uri: str = uri
        self.should_stop: bool = False

        self.hardware = SensorBuffer()
        self.pose_tracker = PoseTracker(self.hardware)
        self.path_planner = PathPlanner(
            self.pose_tracker, destination=destination, heading_policy=heading_policy
        )
        self.mixer = DriveMixer(max_speed)
        self.data_collector = data_collector or DataCollector(output_dir=output_dir)

        logging.info(
            f"{TERM_BLUE}Max speed {self.mixer.max_speed:.2f}, "
            f"heading policy '{self.path_planner.heading_policy}'{TERM_RESET}"
        )

    def process_sensor_message(self, data: Dict[str, Any]) -> Optional[WheelPowers]:
        """Push sensor readings into the buffer and run one control cycle.

        Args:
            data: Parsed JSON message containing sensor data.

        Returns:
            Wheel powers to send, or None if the message held no usable sensors.
        """
        sensors = data.get("sensors", [])
        if not isinstance(sensors, list):
            logging.warning(f"Invalid sensors data type: expected list, got {type(sensors)}")
            return None

        received = False
        for sensor in sensors:
            sensor_name = sensor.get("name")
            sensor_data = sensor.get("data", [])

            if sensor_name == "imu" and len(sensor_data) >= 1:
                self.hardware.update_heading(sensor_data[0])
                received = True
            elif sensor_name == "encoders":
                self.hardware.update_wheel_positions(sensor_data)
                received = True

        if not received:
            return None

        return self.control_step()

    def process_destination_message(self, data: Dict[str, Any]) -> None:
        """Replace the planner destination from a [x, y, heading_deg] payload."""
        values = data.get("data", [])
        if len(values) < 2:
            raise ValueError(f"Destination needs at least x and y, got {values}")
        x, y = float(values[0]), float(values[1])
        heading_degrees = float(values[2]) if len(values) >= 3 else 0.0
        self.path_planner.drive_to(x, y, heading_degrees)
        logging.info(f"{TERM_BLUE}→ Destination ({x:.1f}, {y:.1f}, {heading_degrees:.1f}°){TERM_RESET}")

    def control_step(self) -> WheelPowers:
        """Read a fresh relative motion, mix it and hand it to the drivetrain."""
        now = time.time()
        pose = self.pose_tracker.get_pose()
        motion = self.path_planner.get_relative_motion()
        forward, strafe, turn = motion_to_command(motion)
        powers = self.mixer.drive(self.hardware, forward, strafe, turn)

        if self.data_collector.pose_csv_writer is not None:
            self.data_collector.log_pose(now, pose)
            self.data_collector.log_motion(now, motion, self.path_planner.get_destination())
            self.data_collector.log_wheel_powers(now, powers)

        return powers

    def handle_message(self, message: Union[str, bytes]) -> Optional[WheelPowers]:
        """Parse incoming message and route to appropriate handler.

        Args:
            message: Raw JSON message string or bytes from WebSocket.

        Returns:
            Wheel powers to send back, if the message triggered a control cycle.
        """
        try:
            if isinstance(message, bytes):
                message = message.decode("utf-8")
            data = json.loads(message)

            message_type = data.get("message_type")

            if message_type == "sensors":
                return self.process_sensor_message(data)
            elif message_type == "destination":
                self.process_destination_message(data)
            elif message_type == "session_end":
                logging.info(f"{TERM_BLUE}✓ Session ended by simulator{TERM_RESET}")
                self.should_stop = True
            else:
                logging.debug(f"Received unknown message: {json.dumps(data)}")

        except json.JSONDecodeError as e:
            logging.error(f"Error parsing JSON: {e}")
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logging.error(f"Error processing message data: {e}")
        except Exception as e:
            logging.error(f"Unexpected error processing message: {e}", exc_info=True)

        return None

    async def send_wheel_powers(self, websocket: Any, powers: WheelPowers) -> None:
        """Send wheel powers to the simulator."""
        command = {
            "front_left": powers.front_left,
            "front_right": powers.front_right,
            "back_left": powers.back_left,
            "back_right": powers.back_right,
        }
        await websocket.send(json.dumps(command))

    async def run_control_loop(self) -> None:
        """Connect to WebSocket and run the control loop.

        Maintains a connection to the simulator with automatic retry logic and
        exponential backoff. Continues running until should_stop is set.
        """
        retry_delay = WS_RETRY_DELAY_SECONDS

        self.pose_tracker.start()
        self.path_planner.start()

        try:
            while not self.should_stop:
                try:
                    async with websockets.connect(self.uri) as websocket:
                        logging.info(f"{TERM_BLUE}✓ Connected to simulator{TERM_RESET}")
                        retry_delay = WS_RETRY_DELAY_SECONDS

                        while not self.should_stop:
                            try:
                                message = await asyncio.wait_for(
                                    websocket.recv(), timeout=WS_TIMEOUT_SECONDS
                                )
                            except asyncio.TimeoutError:
                                continue
                            except websockets.exceptions.ConnectionClosed:
                                logging.warning("Connection closed by simulator")
                                break

                            powers = self.handle_message(message)
                            if powers is not None:
                                await self.send_wheel_powers(websocket, powers)

                        if self.should_stop:
                            await self.send_wheel_powers(websocket, WheelPowers())

                except Exception as e:
                    if self.should_stop:
                        break
                    logging.error(f"Connection error: {e}")
                    logging.info(f"{TERM_ORANGE}Retrying in {retry_delay} seconds...{TERM_RESET}")
                    await asyncio.sleep(retry_delay)
                    retry_delay = min(retry_delay * 2, WS_MAX_RETRY_DELAY_SECONDS)
        finally:
            self.path_planner.stop(join=True)
            self.pose_tracker.stop(join=True)
            self.mixer.stop(self.hardware)
            logging.info(f"Pose tracker diagnostics: {self.pose_tracker.get_diagnostics()}")

    def stop(self) -> None:
        """Signal the controller to stop."""
        self.should_stop = True

    def __enter__(self) -> "RobotController":
        self.data_collector.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.data_collector.cleanup()


async def main(
    uri: str = WS_URI,
    destination: Optional[MotionTarget] = None,
    max_speed: Optional[float] = None,
    heading_policy: Optional[str] = None,
) -> None:
    """Main entry point for the simulator client.

    Creates a RobotController, sets up signal handlers for graceful shutdown,
    and runs the control loop.

    Args:
        uri: Simulator WebSocket URI.
        destination: Initial destination.
        max_speed: Wheel power cap in (0, 1].
        heading_policy: "legacy" or "shortest".
    """
    with RobotController(
        uri, destination=destination, max_speed=max_speed, heading_policy=heading_policy
    ) as controller:
        loop = asyncio.get_running_loop()

        def signal_handler() -> None:
            """Handle shutdown signals (SIGINT, SIGTERM)."""
            logging.info("\nShutdown signal received...")
            controller.stop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, signal_handler)

        await controller.run_control_loop()
