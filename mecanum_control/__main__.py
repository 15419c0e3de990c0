"""
Main entry point when running the mecanum_control module with python -m.
"""

import argparse
import asyncio
import logging
import sys

from .client import main, setup_logging
from .config import HEADING_POLICIES, WS_URI
from .pose import MotionTarget

if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Drive a mecanum robot to a field destination in the simulator"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    parser.add_argument("--uri", default=WS_URI, help=f"Simulator WebSocket URI (default: {WS_URI})")
    parser.add_argument(
        "--target",
        nargs=3,
        type=float,
        metavar=("X", "Y", "DEG"),
        default=None,
        help="Initial destination in field mm and heading degrees",
    )
    parser.add_argument(
        "--max-speed", type=float, default=None, help="Wheel power cap in (0, 1]"
    )
    parser.add_argument(
        "--heading-policy",
        choices=HEADING_POLICIES,
        default=None,
        help="Heading-delta wrap rule",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    destination = MotionTarget.with_degrees(*args.target) if args.target else None

    try:
        asyncio.run(
            main(
                uri=args.uri,
                destination=destination,
                max_speed=args.max_speed,
                heading_policy=args.heading_policy,
            )
        )
    except KeyboardInterrupt:
        logging.info("\nExiting...")
        sys.exit(0)
