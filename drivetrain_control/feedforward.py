"""Linear motor feedforward model for closed-loop drive control."""

from .state import FeedforwardGains


def _sign(value: float) -> float:
    if value > 0.0:
        return 1.0
    if value < 0.0:
        return -1.0
    return 0.0


class SimpleMotorFeedforward:
    """Predicts the voltage needed to hold a velocity and acceleration.

    Model:
        volts = ks * sign(v) + kv * v + ka * a
    """

    def __init__(self, gains: FeedforwardGains):
        self.gains = gains

    def calculate(self, velocity: float, acceleration: float = 0.0) -> float:
        """Compute the feedforward voltage.

        Args:
            velocity: Velocity setpoint (m/s).
            acceleration: Acceleration setpoint (m/s²). Default: 0.0, which
                treats the setpoint as instantaneous.

        Returns:
            Feedforward voltage (V).
        """
        return (
            self.gains.ks * _sign(velocity)
            + self.gains.kv * velocity
            + self.gains.ka * acceleration
        )
