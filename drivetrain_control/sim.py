"""Simulated swerve module hardware.

Stand-ins for the vendor encoder and motor controller drivers. They satisfy
the protocols in hardware.py and integrate commands into a simple
first-order module model, so controllers can be exercised without a robot.
"""

from typing import List, Optional, Tuple

import numpy as np

from .angles import normalize_degrees


class SimulatedEncoder:
    """Sensor that returns whatever value was last written to it."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def read(self) -> float:
        return self.value


class SimulatedMotor:
    """Motor controller that records every command it receives.

    Attributes:
        mode: "percent" or "velocity" for the most recent command, None before any.
        output: Most recent percent output or velocity setpoint.
        feedforward_volts: Feedforward voltage sent with the most recent
            velocity setpoint.
        history: Every (mode, value, feedforward_volts) command in order.
    """

    def __init__(self) -> None:
        self.mode: Optional[str] = None
        self.output: float = 0.0
        self.feedforward_volts: float = 0.0
        self.history: List[Tuple[str, float, float]] = []

    def set_percent_output(self, value: float) -> None:
        self.mode = "percent"
        self.output = value
        self.feedforward_volts = 0.0
        self.history.append((self.mode, value, 0.0))

    def set_velocity_setpoint(self, value: float, feedforward_volts: float) -> None:
        self.mode = "velocity"
        self.output = value
        self.feedforward_volts = feedforward_volts
        self.history.append((self.mode, value, feedforward_volts))


class SimulatedSwerveHardware:
    """Kinematic model of one swerve module's steering and drive.

    Steering rate is proportional to the rotation output. Wheel velocity
    follows the drive command with a first-order lag.

    Attributes:
        heading_sensor: Raw absolute encoder (degrees, before offset).
        velocity_sensor: Drive wheel velocity (m/s).
        distance_sensor: Distance driven by the wheel (m).
        rotation_motor: Steering motor.
        drive_motor: Drive motor.
    """

    def __init__(
        self,
        max_speed: float,
        max_rotation_rate: float,
        initial_heading: float = 0.0,
        inverted: bool = True,
        drive_time_constant: float = 0.1,
    ):
        """Initialize the simulated module.

        Args:
            max_speed: Wheel speed reached at full percent output (m/s).
            max_rotation_rate: Steering rate at full rotation output (deg/s).
            initial_heading: Raw encoder heading at start (degrees).
            inverted: If True, positive rotation output decreases the heading.
            drive_time_constant: Drive velocity response time constant (s).
        """
        self.max_speed = max_speed
        self.max_rotation_rate = max_rotation_rate
        self.inverted = inverted
        self.drive_time_constant = drive_time_constant

        self.heading_sensor = SimulatedEncoder(normalize_degrees(initial_heading))
        self.velocity_sensor = SimulatedEncoder(0.0)
        self.distance_sensor = SimulatedEncoder(0.0)
        self.rotation_motor = SimulatedMotor()
        self.drive_motor = SimulatedMotor()

    def step(self, dt: float) -> None:
        """Advance the model by dt seconds using the latest commands."""
        rotation = float(np.clip(self.rotation_motor.output, -1.0, 1.0))
        direction = -1.0 if self.inverted else 1.0
        heading = self.heading_sensor.value + direction * rotation * self.max_rotation_rate * dt
        self.heading_sensor.value = normalize_degrees(heading)

        if self.drive_motor.mode == "percent":
            target = float(np.clip(self.drive_motor.output, -1.0, 1.0)) * self.max_speed
        elif self.drive_motor.mode == "velocity":
            target = float(np.clip(self.drive_motor.output, -self.max_speed, self.max_speed))
        else:
            target = 0.0

        alpha = 1.0 - np.exp(-dt / self.drive_time_constant)
        velocity = self.velocity_sensor.value
        self.velocity_sensor.value = float(velocity + alpha * (target - velocity))

        # Trapezoidal integration of wheel velocity
        self.distance_sensor.value += 0.5 * (velocity + self.velocity_sensor.value) * dt
