"""Sensor and actuator interfaces consumed by the drivetrain controllers.

Vendor device drivers (motor controllers, absolute encoders) live outside this
package. They are adapted to the protocols below and injected into the
controllers, which lets simulated hardware stand in for real devices.
"""

import logging
import math
from typing import Protocol, Union

logger = logging.getLogger(__name__)


class NonFiniteReadingError(ValueError):
    """Raised when a sensor returns NaN or infinity."""


class NonFiniteCommandError(ValueError):
    """Raised when a caller requests a NaN or infinite setpoint."""


class HeadingSensor(Protocol):
    """Absolute module heading source."""

    def read(self) -> float:
        """Return the raw heading in degrees."""
        ...


class VelocitySensor(Protocol):
    """Drive wheel velocity source."""

    def read(self) -> float:
        """Return the wheel velocity in m/s."""
        ...


class DistanceSensor(Protocol):
    """Drive wheel distance source (integrated drive encoder)."""

    def read(self) -> float:
        """Return the distance travelled by the wheel in meters."""
        ...


class RotationActuator(Protocol):
    """Steering motor."""

    def set_percent_output(self, value: float) -> None:
        """Command a normalized output in [-1, 1]."""
        ...


class DriveActuator(Protocol):
    """Drive motor with an onboard velocity loop."""

    def set_percent_output(self, value: float) -> None:
        """Command a normalized output in [-1, 1]."""
        ...

    def set_velocity_setpoint(self, value: float, feedforward_volts: float) -> None:
        """Command a velocity (m/s) tracked by the motor controller firmware,
        with an additional feedforward voltage."""
        ...


def read_finite(
    sensor: Union[HeadingSensor, VelocitySensor, DistanceSensor], name: str
) -> float:
    """Read a sensor and reject non-finite values.

    NaN reaching a PID integrator corrupts every later output, so readings
    are checked once at the boundary.

    Args:
        sensor: Sensor to read.
        name: Human-readable sensor name for the error message.

    Returns:
        The reading as a float.

    Raises:
        NonFiniteReadingError: If the reading is NaN or infinite.
    """
    value = float(sensor.read())
    if not math.isfinite(value):
        logger.error(f"{name} returned a non-finite reading: {value}")
        raise NonFiniteReadingError(f"{name} returned a non-finite reading: {value}")
    return value
