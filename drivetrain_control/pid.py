"""Single-input PID feedback controller.

This module provides the generic feedback loop used to steer swerve modules.
The controller runs once per control period, so the integral and derivative
terms are expressed per call rather than per second.
"""

from typing import Dict, Optional

from .state import ControllerGains


class PIDController:
    """PID feedback controller with integral zone and output bias.

    Control law:
        output = kp * e + ki * sum(e) + kd * (e - e_prev) + bias

    The output is not clamped. Callers clamp it to their actuator's range so
    the same controller can serve different output scales.

    Attributes:
        gains: Controller gains (immutable).
        integral_limit: Optional anti-windup bound on the accumulated error.
    """

    def __init__(self, gains: ControllerGains, integral_limit: Optional[float] = None):
        """Initialize the controller.

        Args:
            gains: Proportional, integral and derivative gains plus integral
                zone and output bias.
            integral_limit: Clamp the integral accumulator at ±integral_limit.
                Default: None (no anti-windup).
        """
        self.gains = gains
        self.integral_limit = integral_limit

        # Integral state (accumulated error)
        self._integral: float = 0.0

        # Previous error for derivative computation
        self._prev_error: float = 0.0

        # Last computed terms, kept for diagnostics only
        self._last_error: float = 0.0
        self._last_p: float = 0.0
        self._last_i: float = 0.0
        self._last_d: float = 0.0
        self._last_output: float = 0.0

    def calculate(self, error: float) -> float:
        """Compute the controller output for one control period.

        Args:
            error: Current error (measured - target, in the caller's units).

        Returns:
            Unclamped controller output.
        """
        gains = self.gains

        # Accumulate integral only inside the integral zone
        if gains.izone > 0.0 and abs(error) > gains.izone:
            self._integral = 0.0
        else:
            self._integral += error
            if self.integral_limit is not None:
                self._integral = max(
                    -self.integral_limit, min(self.integral_limit, self._integral)
                )

        derivative = error - self._prev_error
        self._prev_error = error

        p_term = gains.kp * error
        i_term = gains.ki * self._integral
        d_term = gains.kd * derivative
        output = p_term + i_term + d_term + gains.bias

        self._last_error = error
        self._last_p = p_term
        self._last_i = i_term
        self._last_d = d_term
        self._last_output = output

        return output

    def reset(self) -> None:
        """Reset integral and derivative states to zero.

        Call this when resuming closed-loop control after a discontinuity,
        such as the actuator having been disabled, so a stale integral does
        not produce an output spike.
        """
        self._integral = 0.0
        self._prev_error = 0.0

    def get_diagnostics(self) -> Dict[str, float]:
        """Get the terms of the most recent calculation for logging.

        Returns:
            Dictionary with the error, each term, the integral and the output.
        """
        return {
            "error": self._last_error,
            "p_term": self._last_p,
            "i_term": self._last_i,
            "d_term": self._last_d,
            "integral": self._integral,
            "output": self._last_output,
        }
