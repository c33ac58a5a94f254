"""Command-line interface for the drivetrain control system.

Subcommands:
- swerve: simulate one swerve module holding a desired state
- tank: compute differential drive wheel speeds
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import config
from .config import TERM_BLUE, TERM_RESET
from .data_collector import DataCollector
from .model import DifferentialKinematics, desaturate_wheel_speeds
from .simulation import run_swerve_simulation
from .state import ModuleState


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    This formatter provides clean console output by showing INFO messages without
    timestamps while preserving full context for WARNING, ERROR, and DEBUG messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record based on its level.

        Args:
            record: The log record to format.

        Returns:
            Formatted log message string.
        """
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
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        # main() may run more than once per process; install the handler once
        if any(isinstance(h.formatter, CustomFormatter) for h in logger.handlers):
            return
        handler = logging.StreamHandler()
        formatter = CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with swerve and tank subcommands."""
    parser = argparse.ArgumentParser(
        prog="drivetrain_control",
        description="Swerve module and differential drive command generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Simulate a module turning to 135 degrees at 2 m/s, open loop
  python -m drivetrain_control swerve --speed 2 --heading 135

  # Same in closed loop, saving run data and plotting it
  python -m drivetrain_control swerve --speed 2 --heading 135 --closed-loop --record --plot

  # Tank drive wheel speeds from linear and angular velocity
  python -m drivetrain_control tank --velocity 2 --omega 1

  # Tank drive wheel speeds from linear velocity and curvature
  python -m drivetrain_control tank --velocity 2 --curvature 0.5
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    swerve = subparsers.add_parser("swerve", help="Simulate one swerve module")
    swerve.add_argument("--speed", type=float, default=2.0, help="Desired speed (m/s)")
    swerve.add_argument("--heading", type=float, default=90.0, help="Desired heading (degrees)")
    swerve.add_argument(
        "--initial-heading", type=float, default=0.0, help="Module heading at start (degrees)"
    )
    swerve.add_argument("--duration", type=float, default=2.0, help="Simulated time (seconds)")
    swerve.add_argument(
        "--module", type=int, default=0, choices=range(len(config.MODULES)), help="Module number"
    )
    swerve.add_argument(
        "--closed-loop", action="store_true", help="Drive with velocity setpoints + feedforward"
    )
    swerve.add_argument("--record", action="store_true", help="Save run data to CSV")
    swerve.add_argument(
        "--output-dir", type=str, default=".", help="Base directory for run data (default: .)"
    )
    swerve.add_argument(
        "--plot", action="store_true", help="Plot the run after it finishes (implies --record)"
    )

    tank = subparsers.add_parser("tank", help="Compute differential drive wheel speeds")
    tank.add_argument("--velocity", type=float, required=True, help="Linear velocity (m/s)")
    turn = tank.add_mutually_exclusive_group(required=True)
    turn.add_argument("--omega", type=float, help="Angular velocity (rad/s)")
    turn.add_argument("--curvature", type=float, help="Path curvature (1/m)")
    tank.add_argument(
        "--track-width",
        type=float,
        default=config.TRACK_WIDTH,
        help=f"Track width (m, default: {config.TRACK_WIDTH})",
    )
    tank.add_argument(
        "--max-speed",
        type=float,
        default=None,
        help="Scale wheel speeds uniformly so neither exceeds this (m/s)",
    )
    return parser


def run_swerve(args: argparse.Namespace) -> None:
    """Run the swerve subcommand."""
    desired = ModuleState(speed=args.speed, heading=args.heading)
    record = args.record or args.plot

    if record:
        with DataCollector(output_dir=args.output_dir) as collector:
            run_swerve_simulation(
                desired,
                duration=args.duration,
                open_loop=not args.closed_loop,
                initial_heading=args.initial_heading,
                module_number=args.module,
                collector=collector,
            )
        if args.plot:
            from .plot_results import plot_module_run

            plot_module_run(collector.run_dir, save_plots=True, show_plots=True)
    else:
        run_swerve_simulation(
            desired,
            duration=args.duration,
            open_loop=not args.closed_loop,
            initial_heading=args.initial_heading,
            module_number=args.module,
        )


def run_tank(args: argparse.Namespace) -> None:
    """Run the tank subcommand."""
    kinematics = DifferentialKinematics(args.track_width)
    if args.curvature is not None:
        speeds = kinematics.to_wheel_speeds_curvature(args.velocity, args.curvature)
    else:
        speeds = kinematics.to_wheel_speeds(args.velocity, args.omega)

    if args.max_speed is not None:
        speeds = desaturate_wheel_speeds(speeds, args.max_speed)

    logging.info(f"{TERM_BLUE}v_left={speeds.left:.3f} m/s  v_right={speeds.right:.3f} m/s{TERM_RESET}")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the command-line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        if args.command == "swerve":
            run_swerve(args)
        else:
            run_tank(args)
    except (FileNotFoundError, ValueError) as e:
        logging.error(f"Error: {e}")
        sys.exit(1)
