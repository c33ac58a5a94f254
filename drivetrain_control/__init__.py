"""Drivetrain Control - Actuator Commands for Swerve and Differential Drives

Converts an instantaneous chassis motion request into per-actuator commands.
The outer robot loop calls into this package once per control period (~20 ms);
nothing here blocks, threads, or plans trajectories.

## Architecture Overview

### Swerve modules (swerve_module.py)
Each module turns a desired (speed, heading) into one steering command and one
drive command per period.
- Angle optimization: never steer more than 90°, reverse the wheel instead
- Speed dead-band: hold the last heading when the wheel is nearly stopped
- Steering: PID on heading error, clamped to [-1, 1] percent output
- Drive: open-loop percent output, or a velocity setpoint plus feedforward volts

### Differential drive (model.py)
Stateless inverse kinematics from (v, omega) or (v, curvature) to left/right
wheel speeds, with forward kinematics and optional uniform desaturation.

## Modules

### Core Control Modules
- `angles.py` - Heading normalization to (-180°, 180°] and angle optimization
- `pid.py` - PID feedback controller with integral zone and bias
- `feedforward.py` - Linear ks/kv/ka motor feedforward
- `swerve_module.py` - Per-module steering and drive command generation
- `model.py` - Differential drive kinematics
- `state.py` - Value types and configuration structs
- `config.py` - Centralized tuning constants with documentation

### Hardware
- `hardware.py` - Sensor/actuator protocols and the finite-reading check
- `sim.py` - Simulated encoders and motors for tests and offline runs

### Simulation & Data
- `simulation.py` - Periodic simulation loop for one module
- `data_collector.py` - CSV logging of per-period module data
- `plot_results.py` - Plots of recorded runs
- `cli.py` - Command-line interface (`python -m drivetrain_control`)

## Quick Start

```python
from drivetrain_control import DifferentialKinematics, ModuleState
from drivetrain_control.simulation import run_swerve_simulation

DifferentialKinematics(0.6).to_wheel_speeds(2.0, 1.0)  # left=1.7, right=2.3
run_swerve_simulation(ModuleState(speed=2.0, heading=135.0), duration=2.0)
```
"""

__version__ = "0.1.0"

# Export key classes for convenience
from .angles import normalize_degrees, optimize
from .feedforward import SimpleMotorFeedforward
from .hardware import NonFiniteCommandError, NonFiniteReadingError
from .model import DifferentialKinematics, desaturate_wheel_speeds
from .pid import PIDController
from .state import (
    ControllerGains,
    FeedforwardGains,
    ModuleConstants,
    ModulePosition,
    ModuleState,
    WheelSpeedPair,
)
from .swerve_module import SwerveModule

__all__ = [
    "normalize_degrees",
    "optimize",
    "PIDController",
    "SimpleMotorFeedforward",
    "SwerveModule",
    "DifferentialKinematics",
    "desaturate_wheel_speeds",
    "ModuleState",
    "ModulePosition",
    "WheelSpeedPair",
    "ModuleConstants",
    "ControllerGains",
    "FeedforwardGains",
    "NonFiniteReadingError",
    "NonFiniteCommandError",
]
