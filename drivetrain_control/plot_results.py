#!/usr/bin/env python3
"""
Visualize swerve module simulation runs.

Loads module_data.csv from a run directory and plots measured vs. commanded
heading, steering output, and drive output over time.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .config import PLOT_BLUE, PLOT_ORANGE, PLOT_TAUPE, RESULTS_DIR, TERM_BLUE, TERM_RESET


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Args:
        results_dir: Path to the results directory.

    Returns:
        Path to the most recent run directory.

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
    """List all available run directories.

    Args:
        results_dir: Path to the results directory.
    """
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


def load_module_data(run_dir: Path) -> Dict[str, np.ndarray]:
    """Load module_data.csv into column arrays.

    Args:
        run_dir: Run directory containing module_data.csv.

    Returns:
        Dictionary mapping column name to a float array.

    Raises:
        FileNotFoundError: If module_data.csv does not exist.
    """
    path = run_dir / "module_data.csv"
    if not path.exists():
        raise FileNotFoundError(f"Module data not found: {path}")

    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        rows = list(reader)
        columns = reader.fieldnames or []

    return {name: np.array([float(row[name]) for row in rows]) for name in columns}


def plot_module_run(
    run_dir: Path, save_plots: bool = False, show_plots: bool = True
) -> Optional[Figure]:
    """Plot heading tracking and actuator outputs for one run.

    Args:
        run_dir: Run directory containing module_data.csv.
        save_plots: Save the figure as module_run.png in run_dir.
        show_plots: Display the figure interactively.

    Returns:
        The figure, or None if it was shown and closed.
    """
    data = load_module_data(Path(run_dir))
    t = data["timestamp"]

    fig, (ax_heading, ax_rotation, ax_drive) = plt.subplots(3, 1, sharex=True, figsize=(10, 8))

    ax_heading.plot(t, data["commanded_heading"], color=PLOT_BLUE, linestyle="--", label="Commanded")
    ax_heading.plot(t, data["measured_heading"], color=PLOT_ORANGE, label="Measured")
    ax_heading.set_ylabel("Heading (deg)")
    ax_heading.legend(loc="best")

    ax_rotation.plot(t, data["rotation_output"], color=PLOT_ORANGE)
    ax_rotation.axhline(0.0, color=PLOT_TAUPE, linewidth=0.8)
    ax_rotation.set_ylabel("Steering output")
    ax_rotation.set_ylim(-1.1, 1.1)

    ax_drive.plot(t, data["optimized_speed"], color=PLOT_BLUE, linestyle="--", label="Optimized speed")
    ax_drive.plot(t, data["measured_speed"], color=PLOT_ORANGE, label="Measured speed")
    ax_drive.set_ylabel("Speed (m/s)")
    ax_drive.set_xlabel("Time (s)")
    ax_drive.legend(loc="best")

    for ax in (ax_heading, ax_rotation, ax_drive):
        ax.grid(True, color=PLOT_TAUPE, alpha=0.3)

    fig.suptitle(f"Swerve module run: {Path(run_dir).name}")
    fig.tight_layout()

    if save_plots:
        fig.savefig(Path(run_dir) / "module_run.png", dpi=150)

    if show_plots:
        plt.show()
        plt.close(fig)
        return None
    return fig


def main() -> None:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Visualize swerve module simulation runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m drivetrain_control.plot_results

  # Plot a specific run by name
  python -m drivetrain_control.plot_results --run run_20261018_184704

  # Save the figure without showing it
  python -m drivetrain_control.plot_results --save --no-show
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
        default=RESULTS_DIR,
        help=f"Path to the results directory (default: {RESULTS_DIR})",
    )
    parser.add_argument("--save", action="store_true", help="Save the plot in the run directory")
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plots interactively (useful with --save)",
    )
    parser.add_argument("--list", action="store_true", help="List all available runs and exit")

    args = parser.parse_args()
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
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            sys.exit(1)

    try:
        plot_module_run(run_dir, save_plots=args.save, show_plots=not args.no_show)
        if args.save:
            logging.info(f"{TERM_BLUE}✓ Saved plot to {run_dir / 'module_run.png'}{TERM_RESET}")
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
