"""Swerve module controller.

This module turns one swerve module's desired state into a steering command
and a drive command every control period:
- Angle optimization keeps steering moves within 90 degrees
- A speed dead-band holds the last heading when the wheel is nearly stopped
- A PID loop on heading error drives the steering motor
- The drive motor runs open loop (percent output) or closed loop (velocity
  setpoint with a feedforward voltage)
"""

import logging
import math
from typing import Dict, Optional

from .angles import normalize_degrees, optimize
from .feedforward import SimpleMotorFeedforward
from .hardware import (
    DistanceSensor,
    DriveActuator,
    HeadingSensor,
    NonFiniteCommandError,
    RotationActuator,
    VelocitySensor,
    read_finite,
)
from .pid import PIDController
from .state import (
    ControllerGains,
    FeedforwardGains,
    ModuleConstants,
    ModulePosition,
    ModuleState,
)

logger = logging.getLogger(__name__)


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to [low, high]. NaN is returned unchanged."""
    if math.isnan(value):
        return value
    return max(low, min(high, value))


class SwerveModule:
    """Controller for a single swerve module.

    Hardware is injected, never constructed here. The steering PID memory and
    the last commanded heading are private to the instance and only change
    through set_desired_state and reset_controller.

    Attributes:
        module_number: Index of the module on the robot.
        constants: Hardware constants (heading offset, CAN ids).
        max_speed: Maximum drive speed (m/s).
        deadband_fraction: Fraction of max_speed below which the heading is held.
    """

    def __init__(
        self,
        module_number: int,
        constants: ModuleConstants,
        heading_sensor: HeadingSensor,
        rotation_actuator: RotationActuator,
        drive_actuator: DriveActuator,
        angle_gains: ControllerGains,
        drive_gains: FeedforwardGains,
        max_speed: float,
        velocity_sensor: Optional[VelocitySensor] = None,
        deadband_fraction: float = 0.01,
        distance_sensor: Optional[DistanceSensor] = None,
    ):
        """Initialize the module and latch its current heading.

        Args:
            module_number: Index of the module on the robot.
            constants: Hardware constants for this module.
            heading_sensor: Absolute heading encoder (raw degrees).
            rotation_actuator: Steering motor.
            drive_actuator: Drive motor.
            angle_gains: Gains for the steering PID (error in degrees).
            drive_gains: Feedforward constants for closed-loop drive.
            max_speed: Maximum drive speed (m/s). Must be positive.
            velocity_sensor: Optional drive wheel velocity source, used by
                get_state. Default: None (reported speed is 0.0).
            deadband_fraction: Speed dead-band as a fraction of max_speed.
                Range [0, 1). Default: 0.01.
            distance_sensor: Optional drive wheel distance source, used by
                get_position. Default: None (reported distance is 0.0).

        Raises:
            ValueError: If max_speed or deadband_fraction is out of range.
        """
        if max_speed <= 0.0:
            raise ValueError(f"max_speed must be positive, got {max_speed}")
        if not 0.0 <= deadband_fraction < 1.0:
            raise ValueError(f"deadband_fraction must be in [0, 1), got {deadband_fraction}")

        self.module_number = module_number
        self.constants = constants
        self.max_speed = max_speed
        self.deadband_fraction = deadband_fraction

        self._heading_sensor = heading_sensor
        self._velocity_sensor = velocity_sensor
        self._distance_sensor = distance_sensor
        self._rotation_actuator = rotation_actuator
        self._drive_actuator = drive_actuator

        self._rotor_pid = PIDController(angle_gains)
        self._feedforward = SimpleMotorFeedforward(drive_gains)

        self._last_heading: float = self.get_heading()
        self._diagnostics: Dict[str, float] = {}

        logger.debug(
            f"Module {module_number}: offset={constants.heading_offset:.1f} deg, "
            f"initial heading={self._last_heading:.1f} deg"
        )

    def get_heading(self) -> float:
        """Read the offset-corrected module heading.

        Returns:
            Heading in (-180, 180] degrees.

        Raises:
            NonFiniteReadingError: If the encoder returns NaN or infinity.
        """
        raw = read_finite(self._heading_sensor, f"module {self.module_number} heading sensor")
        return normalize_degrees(raw + self.constants.heading_offset)

    def get_state(self) -> ModuleState:
        """Read the measured module state (speed and heading)."""
        speed = 0.0
        if self._velocity_sensor is not None:
            speed = read_finite(
                self._velocity_sensor, f"module {self.module_number} velocity sensor"
            )
        return ModuleState(speed=speed, heading=self.get_heading())

    def get_position(self) -> ModulePosition:
        """Read the module odometry sample (distance driven and heading)."""
        distance = 0.0
        if self._distance_sensor is not None:
            distance = read_finite(
                self._distance_sensor, f"module {self.module_number} distance sensor"
            )
        return ModulePosition(distance=distance, heading=self.get_heading())

    def set_desired_state(
        self, desired: ModuleState, open_loop: bool, acceleration: float = 0.0
    ) -> None:
        """Command the module toward a desired state for one control period.

        Issues exactly one steering command followed by exactly one drive
        command, then returns without waiting for the motion to complete.

        Args:
            desired: Requested speed (m/s) and heading (degrees).
            open_loop: If True, drive with percent output. Otherwise send a
                velocity setpoint with a feedforward voltage.
            acceleration: Acceleration (m/s²) passed to the drive feedforward
                in closed loop. Default: 0.0.

        Raises:
            NonFiniteCommandError: If the desired speed, heading or acceleration
                is NaN or infinite. Nothing is commanded in that case.
            NonFiniteReadingError: If the heading encoder returns NaN or infinity.
        """
        for name, value in (
            ("speed", desired.speed),
            ("heading", desired.heading),
            ("acceleration", acceleration),
        ):
            if not math.isfinite(value):
                logger.error(f"Module {self.module_number}: non-finite desired {name}: {value}")
                raise NonFiniteCommandError(
                    f"module {self.module_number} desired {name} is not finite: {value}"
                )

        current_heading = self.get_heading()
        optimized = optimize(desired, current_heading)

        # Hold the last heading near zero speed to stop the wheel jittering
        if abs(optimized.speed) <= self.max_speed * self.deadband_fraction:
            heading = self._last_heading
        else:
            heading = optimized.heading

        error = normalize_degrees(current_heading - heading)
        raw_rotation = self._rotor_pid.calculate(error)
        rotation_output = clamp(raw_rotation, -1.0, 1.0)
        if rotation_output != raw_rotation:
            logger.debug(
                f"Module {self.module_number}: rotation output {raw_rotation:.3f} clamped"
            )
        self._rotation_actuator.set_percent_output(rotation_output)
        self._last_heading = heading

        feedforward_volts = 0.0
        if open_loop:
            drive_output = clamp(optimized.speed / self.max_speed, -1.0, 1.0)
            self._drive_actuator.set_percent_output(drive_output)
        else:
            drive_output = optimized.speed
            feedforward_volts = self._feedforward.calculate(optimized.speed, acceleration)
            self._drive_actuator.set_velocity_setpoint(drive_output, feedforward_volts)

        pid_terms = self._rotor_pid.get_diagnostics()
        self._diagnostics = {
            "desired_speed": desired.speed,
            "desired_heading": desired.heading,
            "optimized_speed": optimized.speed,
            "optimized_heading": optimized.heading,
            "measured_heading": current_heading,
            "commanded_heading": heading,
            "heading_error": error,
            "pid_p_term": pid_terms["p_term"],
            "pid_i_term": pid_terms["i_term"],
            "pid_d_term": pid_terms["d_term"],
            "rotation_output": rotation_output,
            "drive_output": drive_output,
            "feedforward_volts": feedforward_volts,
            "open_loop": float(open_loop),
        }

    def reset_controller(self) -> None:
        """Clear steering PID memory.

        Call after the steering motor was disabled so the first command after
        re-enabling does not carry a stale integral.
        """
        self._rotor_pid.reset()

    def get_diagnostics(self) -> Dict[str, float]:
        """Get the values computed on the most recent set_desired_state call.

        Returns:
            Copy of the diagnostic values (empty before the first call).
        """
        return dict(self._diagnostics)
