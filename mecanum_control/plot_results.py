"""
Plot logged drive sessions.

Loads the pose, motion and wheel-power CSV files written by DataCollector for
one run and draws the field trajectory against the destinations, the
remaining relative motion over time and the four wheel powers.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .config import PLOT_BLUE, PLOT_ORANGE, PLOT_TAUPE, PLOT_YELLOW_ORANGE, TERM_BLUE, TERM_RESET

WHEEL_COLUMNS = ["front_left", "front_right", "back_left", "back_right"]


def load_csv_to_dict(csv_path: Path) -> Dict[str, np.ndarray]:
    """Load CSV file into dictionary of numpy arrays.

    Non-numeric or empty values become NaN.

    Args:
        csv_path: Path to CSV file.

    Returns:
        Dictionary mapping column names to numpy arrays.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        data: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                try:
                    data[key].append(float(value))
                except (ValueError, TypeError):
                    data[key].append(np.nan)

    return {key: np.array(values) for key, values in data.items()}


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Raises:
        FileNotFoundError: If no run directories are found.
    """
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        raise FileNotFoundError(f"No run directories found in {results_dir}")

    return run_dirs[-1]


def list_available_runs(results_dir: Path) -> None:
    if not results_dir.exists():
        logging.error(f"Results directory not found: {results_dir}")
        return

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        logging.info(f"No run directories found in {results_dir}")
        return

    logging.info("Available runs:")
    for i, run_dir in enumerate(run_dirs, 1):
        logging.info(f"  {i}. {run_dir.name}")


def plot_run_summary(run_dir: Path, save_plots: bool = False, show_plots: bool = True) -> Figure:
    """Plot trajectory, relative motion and wheel powers for one run.

    Args:
        run_dir: Run directory containing pose_data.csv, motion_data.csv and
            wheel_data.csv.
        save_plots: If True, save the figure as session_summary.png in run_dir.
        show_plots: If True, display the figure interactively.

    Returns:
        Matplotlib figure object.

    Raises:
        FileNotFoundError: If any of the CSV files is missing.
    """
    pose = load_csv_to_dict(run_dir / "pose_data.csv")
    motion = load_csv_to_dict(run_dir / "motion_data.csv")
    wheels = load_csv_to_dict(run_dir / "wheel_data.csv")

    fig, (ax_field, ax_motion, ax_wheels) = plt.subplots(1, 3, figsize=(18, 6))

    # Field trajectory with start/end and every distinct destination
    ax_field.plot(pose["x"], pose["y"], color=PLOT_ORANGE, linewidth=2, label="Pose")
    if len(pose["x"]) > 0:
        ax_field.scatter(pose["x"][0], pose["y"][0], color=PLOT_YELLOW_ORANGE, marker="o", s=80, label="Start", zorder=3)
        ax_field.scatter(pose["x"][-1], pose["y"][-1], color=PLOT_YELLOW_ORANGE, marker="s", s=80, label="End", zorder=3)

    dest_mask = ~(np.isnan(motion["dest_x"]) | np.isnan(motion["dest_y"]))
    if np.any(dest_mask):
        destinations = np.unique(
            np.column_stack([motion["dest_x"][dest_mask], motion["dest_y"][dest_mask]]), axis=0
        )
        ax_field.scatter(destinations[:, 0], destinations[:, 1], color=PLOT_BLUE, marker="x", s=120, label="Destination", zorder=3)

    ax_field.set_title("Field Trajectory", fontweight="bold")
    ax_field.set_xlabel("X (mm)")
    ax_field.set_ylabel("Y (mm)")
    ax_field.set_aspect("equal", adjustable="datalim")
    ax_field.grid(True, color=PLOT_TAUPE, alpha=0.3)
    ax_field.legend()

    # Remaining motion over time
    t_motion = motion["timestamp"] - motion["timestamp"][0] if len(motion["timestamp"]) else motion["timestamp"]
    ax_motion.plot(t_motion, motion["forward"], color=PLOT_ORANGE, label="Forward (mm)")
    ax_motion.plot(t_motion, motion["strafe"], color=PLOT_BLUE, label="Strafe (mm)")
    ax_turn = ax_motion.twinx()
    ax_turn.plot(t_motion, np.degrees(motion["heading_delta"]), color=PLOT_TAUPE, linestyle="--", label="Turn (deg)")
    ax_turn.set_ylabel("Turn (deg)")
    ax_motion.set_title("Remaining Motion", fontweight="bold")
    ax_motion.set_xlabel("Time (s)")
    ax_motion.set_ylabel("Distance (mm)")
    ax_motion.grid(True, color=PLOT_TAUPE, alpha=0.3)
    ax_motion.legend(loc="upper right")

    # Wheel powers
    t_wheels = wheels["timestamp"] - wheels["timestamp"][0] if len(wheels["timestamp"]) else wheels["timestamp"]
    for column in WHEEL_COLUMNS:
        ax_wheels.plot(t_wheels, wheels[column], label=column.replace("_", " ").title())
    ax_wheels.set_title("Wheel Powers", fontweight="bold")
    ax_wheels.set_xlabel("Time (s)")
    ax_wheels.set_ylabel("Power")
    ax_wheels.set_ylim(-1.05, 1.05)
    ax_wheels.grid(True, color=PLOT_TAUPE, alpha=0.3)
    ax_wheels.legend()

    fig.tight_layout()

    if save_plots:
        fig.savefig(run_dir / "session_summary.png", dpi=150, bbox_inches="tight")

    if show_plots:
        plt.show()

    return fig


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Visualize logged drive sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m mecanum_control.plot_results

  # Plot a specific run by name and save the figure
  python -m mecanum_control.plot_results --run run_20261018_101500 --save

  # List all available runs
  python -m mecanum_control.plot_results --list
        """,
    )
    parser.add_argument(
        "--run",
        type=str,
        default=None,
        help="Name of the run directory to plot. If not specified, plots the most recent run.",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default="results",
        help="Path to the results directory (default: results)",
    )
    parser.add_argument(
        "--save", action="store_true", help="Save plots as PNG files in the run directory"
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plots interactively (useful with --save)",
    )
    parser.add_argument("--list", action="store_true", help="List all available runs and exit")

    args = parser.parse_args(argv)

    results_dir = Path(args.results_dir)

    if args.list:
        list_available_runs(results_dir)
        return

    if args.run:
        run_dir = results_dir / args.run
        if not run_dir.exists():
            logging.error(f"Error: Run directory not found: {run_dir}")
            list_available_runs(results_dir)
            sys.exit(1)
    else:
        try:
            run_dir = find_latest_run(results_dir)
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir.name}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            sys.exit(1)

    try:
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)

        if args.save:
            logging.info(f"{TERM_BLUE}✓ Saved plots to {run_dir}{TERM_RESET}")
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        logging.info(f"Make sure {run_dir} contains pose_data.csv, motion_data.csv and wheel_data.csv")
        sys.exit(1)


if __name__ == "__main__":
    main()
