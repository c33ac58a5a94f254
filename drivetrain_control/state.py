"""Value types and configuration structs shared across the drivetrain.

All types are frozen dataclasses: a new instance is produced on every
computation instead of mutating an existing one.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModuleState:
    """Desired or measured state of one swerve module.

    Attributes:
        speed: Signed wheel speed (m/s). Negative drives the wheel backwards.
        heading: Steering angle (degrees).
    """

    speed: float = 0.0
    heading: float = 0.0


@dataclass(frozen=True)
class ModulePosition:
    """Odometry sample of one swerve module.

    Attributes:
        distance: Distance driven by the wheel (m).
        heading: Steering angle (degrees).
    """

    distance: float = 0.0
    heading: float = 0.0


@dataclass(frozen=True)
class WheelSpeedPair:
    """Left and right wheel speeds of a differential drive (m/s)."""

    left: float
    right: float


@dataclass(frozen=True)
class ModuleConstants:
    """Per-module hardware constants.

    Attributes:
        heading_offset: Angle added to the raw encoder reading so that
            0 degrees points the wheel straight ahead (degrees).
        drive_motor_id: CAN id of the drive motor controller.
        angle_motor_id: CAN id of the angle motor controller.
        encoder_id: CAN id of the absolute heading encoder.
    """

    heading_offset: float = 0.0
    drive_motor_id: int = 0
    angle_motor_id: int = 0
    encoder_id: int = 0


@dataclass(frozen=True)
class ControllerGains:
    """PID gains.

    Attributes:
        kp: Proportional gain.
        ki: Integral gain.
        kd: Derivative gain (per control period, not per second).
        izone: Integral zone. When positive, the integral is cleared whenever
            |error| exceeds it. 0.0 disables the zone.
        bias: Constant added to every output.
    """

    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    izone: float = 0.0
    bias: float = 0.0


@dataclass(frozen=True)
class FeedforwardGains:
    """Linear motor feedforward constants.

    Attributes:
        ks: Static friction voltage (V).
        kv: Velocity gain (V per m/s).
        ka: Acceleration gain (V per m/s²).
    """

    ks: float = 0.0
    kv: float = 0.0
    ka: float = 0.0
