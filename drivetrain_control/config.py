"""Configuration parameters for the drivetrain control system.

This module centralizes all configuration parameters including:
- Physical drivetrain parameters
- Swerve module angle controller gains
- Drive motor feedforward constants
- Per-module hardware constants
- Simulation and visualization settings

All parameters are documented with their purpose, valid ranges, and tuning rationale.
Components never read this module implicitly; values are passed in at construction.
"""

from .state import ControllerGains, FeedforwardGains, ModuleConstants

# ============================================================================
# Physical Drivetrain Parameters
# ============================================================================

TRACK_WIDTH = 0.6
"""Distance between left and right wheel contact patches (meters).
Fixed by robot hardware design. Used by differential kinematics."""

MAX_SPEED = 4.5
"""Maximum module drive speed (m/s).

Used to normalize open-loop percent output and to size the heading dead-band.
Matches the free speed of the drive gearing under load."""

MAX_ROTATION_RATE = 720.0
"""Maximum module steering rate at full rotation output (degrees/second).
Only used by the simulated hardware."""


# ============================================================================
# Swerve Angle Controller (PID on heading error)
# ============================================================================

ANGLE_KP = 0.01
"""Proportional gain on heading error (percent output per degree).

Error is computed as (measured - target), so a positive output drives the
heading down when the angle motor is inverted.

Tuning rationale:
- 0.01 saturates the output at 100 degrees of error
- Larger values chatter around the setpoint at low speed
"""

ANGLE_KI = 0.0
"""Integral gain on heading error. Disabled: steering friction is low enough
that proportional control settles without steady-state error."""

ANGLE_KD = 0.0005
"""Derivative gain on heading error change per control period.

Tuning rationale:
- Small damping term to stop overshoot on 90 degree flips
"""

ANGLE_IZONE = 0.0
"""Integral zone (degrees). Integral only accumulates while |error| is inside
this band. 0.0 disables the zone."""

ANGLE_BIAS = 0.0
"""Constant output bias added to the angle controller output."""

ANGLE_INVERT = True
"""Whether the angle motor turns the module clockwise for positive output."""


# ============================================================================
# Drive Motor Feedforward (Closed Loop)
# ============================================================================

DRIVE_KS = 0.18
"""Static friction voltage (volts). Applied in the direction of motion."""

DRIVE_KV = 2.3
"""Velocity gain (volts per m/s).

Tuning rationale:
- 12 V / 2.3 = ~5.2 m/s theoretical free speed
"""

DRIVE_KA = 0.27
"""Acceleration gain (volts per m/s²). Only applied when the caller supplies
a nonzero acceleration alongside the velocity setpoint."""


# ============================================================================
# Control Loop Parameters
# ============================================================================

CONTROL_PERIOD = 0.02
"""Control loop period (seconds). The outer scheduler calls each module once
per period (50 Hz)."""

DEADBAND_FRACTION = 0.01
"""Speed dead-band as a fraction of MAX_SPEED (range: [0, 1)).

Below |speed| <= DEADBAND_FRACTION * MAX_SPEED the module holds its last
commanded heading instead of steering toward the new one.

Tuning rationale:
- 1% suppresses wheel jitter from joystick noise near center
- Larger values make slow creeping moves lag in heading
"""


# ============================================================================
# Per-Module Hardware Constants
# ============================================================================

FRONT_LEFT = ModuleConstants(heading_offset=-41.3, drive_motor_id=1, angle_motor_id=2, encoder_id=9)
FRONT_RIGHT = ModuleConstants(heading_offset=127.6, drive_motor_id=3, angle_motor_id=4, encoder_id=10)
BACK_LEFT = ModuleConstants(heading_offset=-163.2, drive_motor_id=5, angle_motor_id=6, encoder_id=11)
BACK_RIGHT = ModuleConstants(heading_offset=12.9, drive_motor_id=7, angle_motor_id=8, encoder_id=12)

MODULES = (FRONT_LEFT, FRONT_RIGHT, BACK_LEFT, BACK_RIGHT)
"""Module constants indexed by module number."""


def angle_gains() -> ControllerGains:
    """Build the swerve angle controller gains from the constants above."""
    return ControllerGains(
        kp=ANGLE_KP, ki=ANGLE_KI, kd=ANGLE_KD, izone=ANGLE_IZONE, bias=ANGLE_BIAS
    )


def drive_feedforward_gains() -> FeedforwardGains:
    """Build the drive motor feedforward gains from the constants above."""
    return FeedforwardGains(ks=DRIVE_KS, kv=DRIVE_KV, ka=DRIVE_KA)


# ============================================================================
# Visualization Colors
# ============================================================================

PLOT_ORANGE = "#f74823"
"""Primary color - measured values."""

PLOT_BLUE = "#2374f7"
"""Secondary color - commanded values."""

PLOT_TAUPE = "#686a5f"
"""Neutral color for guides and grids."""

# Terminal color codes (ANSI escape sequences)
TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""


# ============================================================================
# Run Output
# ============================================================================

RESULTS_DIR = "results"
"""Base directory (relative to the output directory) for run data."""
