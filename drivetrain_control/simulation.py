"""Closed-loop simulation of a swerve module on simulated hardware.

Plays the role of the robot's periodic scheduler: once per control period it
commands the module, then advances the simulated hardware by one period.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from . import config
from .data_collector import DataCollector
from .sim import SimulatedSwerveHardware
from .state import ModuleConstants, ModuleState
from .swerve_module import SwerveModule

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Time series recorded during a simulation run.

    Attributes:
        time: Simulation time of each control period (seconds).
        diagnostics: Per-period SwerveModule diagnostics, keyed by name.
        measured_speed: Wheel velocity after each period (m/s).
    """

    time: np.ndarray
    diagnostics: Dict[str, np.ndarray] = field(default_factory=dict)
    measured_speed: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @property
    def final_heading(self) -> float:
        """Heading measured at the start of the last control period."""
        return float(self.diagnostics["measured_heading"][-1])


def build_simulated_module(
    module_number: int = 0,
    constants: Optional[ModuleConstants] = None,
    initial_heading: float = 0.0,
) -> Tuple[SwerveModule, SimulatedSwerveHardware]:
    """Wire a SwerveModule to simulated hardware using the configured constants.

    Args:
        module_number: Index of the module.
        constants: Module constants. Default: config.MODULES[module_number].
        initial_heading: Offset-corrected heading at start (degrees).

    Returns:
        Tuple of (module, hardware).
    """
    if constants is None:
        constants = config.MODULES[module_number]

    hardware = SimulatedSwerveHardware(
        max_speed=config.MAX_SPEED,
        max_rotation_rate=config.MAX_ROTATION_RATE,
        initial_heading=initial_heading - constants.heading_offset,
        inverted=config.ANGLE_INVERT,
    )
    module = SwerveModule(
        module_number=module_number,
        constants=constants,
        heading_sensor=hardware.heading_sensor,
        rotation_actuator=hardware.rotation_motor,
        drive_actuator=hardware.drive_motor,
        angle_gains=config.angle_gains(),
        drive_gains=config.drive_feedforward_gains(),
        max_speed=config.MAX_SPEED,
        velocity_sensor=hardware.velocity_sensor,
        deadband_fraction=config.DEADBAND_FRACTION,
        distance_sensor=hardware.distance_sensor,
    )
    return module, hardware


def run_swerve_simulation(
    desired: ModuleState,
    duration: float,
    open_loop: bool = True,
    initial_heading: float = 0.0,
    module_number: int = 0,
    period: float = config.CONTROL_PERIOD,
    collector: Optional[DataCollector] = None,
) -> SimulationResult:
    """Hold a desired module state for a fixed duration and record the response.

    Args:
        desired: Module state commanded every period.
        duration: Simulated time (seconds).
        open_loop: Drive mode passed to set_desired_state.
        initial_heading: Offset-corrected heading at start (degrees).
        module_number: Index into config.MODULES.
        period: Control period (seconds).
        collector: Optional DataCollector (already set up) for CSV logging.

    Returns:
        SimulationResult with one sample per control period.

    Raises:
        ValueError: If duration or period is not positive, or duration is
            shorter than one period.
    """
    if duration <= 0.0 or period <= 0.0:
        raise ValueError(f"duration and period must be positive, got {duration}, {period}")

    steps = int(round(duration / period))
    if steps == 0:
        raise ValueError(f"duration {duration} is shorter than one control period {period}")

    module, hardware = build_simulated_module(module_number, initial_heading=initial_heading)
    module.reset_controller()

    time = np.arange(steps) * period
    rows: List[Dict[str, float]] = []
    speeds = np.zeros(steps)

    logger.info(
        f"Simulating module {module_number}: speed={desired.speed:.2f} m/s, "
        f"heading={desired.heading:.1f} deg, {'open' if open_loop else 'closed'} loop, "
        f"{steps} periods"
    )

    for i, t in enumerate(time):
        module.set_desired_state(desired, open_loop)
        hardware.step(period)

        diagnostics = module.get_diagnostics()
        rows.append(diagnostics)
        speeds[i] = hardware.velocity_sensor.read()

        if collector is not None:
            collector.log_module(float(t), diagnostics, speeds[i])

    series = {name: np.array([row[name] for row in rows]) for name in rows[0]} if rows else {}
    result = SimulationResult(time=time, diagnostics=series, measured_speed=speeds)

    if rows:
        logger.info(
            f"Final heading {result.final_heading:.1f} deg, "
            f"final speed {speeds[-1]:.2f} m/s"
        )
    return result
