"""Data collection and CSV logging for swerve module simulation runs.

This module provides CSV data logging for:
- Desired and optimized module states
- Measured and commanded headings
- Steering PID terms and outputs
- Drive outputs and measured wheel speed
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from .config import RESULTS_DIR, TERM_BLUE, TERM_RESET

MODULE_COLUMNS = [
    "timestamp",
    "desired_speed",
    "desired_heading",
    "optimized_speed",
    "optimized_heading",
    "measured_heading",
    "commanded_heading",
    "heading_error",
    "pid_p_term",
    "pid_i_term",
    "pid_d_term",
    "rotation_output",
    "drive_output",
    "feedforward_volts",
    "measured_speed",
]


class DataCollector:
    """Manages CSV file creation and logging for module control data.

    Attributes:
        run_dir: Directory path for this run's output files.
        module_csv_file: File handle for module data CSV.
        module_output_path: Path of the per-tick module data CSV.
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

        self.module_csv_file: Optional[TextIO] = None
        self.module_csv_writer: Any = None

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # Create timestamped directory: results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / RESULTS_DIR / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.module_output_path: Path = self.run_dir / "module_data.csv"

    def setup(self) -> None:
        """Initialize the CSV file with headers.

        Must be called before writing data.
        """
        self.module_csv_file = open(self.module_output_path, "w", newline="")
        self.module_csv_writer = csv.writer(self.module_csv_file)
        self.module_csv_writer.writerow(MODULE_COLUMNS)
        self.module_csv_file.flush()

        logging.info(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}{TERM_RESET}")

    def log_module(
        self, timestamp: float, diagnostics: Dict[str, float], measured_speed: float
    ) -> None:
        """Log one control period of module data.

        Args:
            timestamp: Simulation time (seconds).
            diagnostics: Output of SwerveModule.get_diagnostics().
            measured_speed: Wheel velocity after the period (m/s).
        """
        if self.module_csv_writer is None:
            return
        row = [timestamp] + [diagnostics.get(name, 0.0) for name in MODULE_COLUMNS[1:-1]]
        row.append(measured_speed)
        self.module_csv_writer.writerow(row)

    def cleanup(self) -> None:
        """Close the CSV file and log final output location."""
        if self.module_csv_file:
            self.module_csv_file.close()

        logging.info(f"{TERM_BLUE}✓ Saved run data to {self.run_dir}{TERM_RESET}")

    def __enter__(self) -> "DataCollector":
        """Context manager entry point.

        Returns:
            Self reference for use in with statement.
        """
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit point - ensures cleanup is called."""
        self.cleanup()
