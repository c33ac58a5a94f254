"""
Differential drive kinematic model.

This module provides the inverse kinematics for a differential (tank) drive,
converting desired linear and angular velocities, or linear velocity and
curvature, into individual wheel velocities.
"""

from typing import Tuple

from .state import WheelSpeedPair


class DifferentialKinematics:
    """Inverse and forward kinematics for a differential drive.

    For a differential drive robot, the relationship between the robot's
    linear velocity (v), angular velocity (omega), and the individual
    wheel velocities is:
        v_left = v - (L/2) * omega
        v_right = v + (L/2) * omega

    where L is the track width. Nothing here is clamped; callers limit the
    results to their actuators downstream.
    """

    def __init__(self, track_width: float):
        """Initialize the model.

        Args:
            track_width: Distance between left and right wheel contact
                patches (meters). Must be positive.

        Raises:
            ValueError: If track_width is not positive.
        """
        if track_width <= 0.0:
            raise ValueError(f"track_width must be positive, got {track_width}")
        self.track_width = track_width

    def to_left_wheel_speed(self, linear_velocity: float, angular_velocity: float) -> float:
        """Left wheel speed (m/s) for a linear (m/s) and angular (rad/s) velocity."""
        return linear_velocity - self.track_width / 2.0 * angular_velocity

    def to_right_wheel_speed(self, linear_velocity: float, angular_velocity: float) -> float:
        """Right wheel speed (m/s) for a linear (m/s) and angular (rad/s) velocity."""
        return linear_velocity + self.track_width / 2.0 * angular_velocity

    def to_left_wheel_speed_curvature(self, linear_velocity: float, curvature: float) -> float:
        """Left wheel speed (m/s) for a linear velocity (m/s) and curvature (1/m)."""
        return linear_velocity * (2.0 - curvature * self.track_width) / 2.0

    def to_right_wheel_speed_curvature(self, linear_velocity: float, curvature: float) -> float:
        """Right wheel speed (m/s) for a linear velocity (m/s) and curvature (1/m)."""
        return linear_velocity * (2.0 + curvature * self.track_width) / 2.0

    def to_wheel_speeds(self, linear_velocity: float, angular_velocity: float) -> WheelSpeedPair:
        """
        Compute wheel velocities from desired linear and angular velocities.

        Args:
            linear_velocity: Desired linear velocity of the robot center (m/s)
            angular_velocity: Desired angular velocity of the robot (rad/s)
                Positive omega results in counter-clockwise rotation

        Returns:
            WheelSpeedPair with left and right wheel velocities in m/s

        Example:
            >>> DifferentialKinematics(0.6).to_wheel_speeds(2.0, 1.0)
            WheelSpeedPair(left=1.7, right=2.3)
        """
        return WheelSpeedPair(
            left=self.to_left_wheel_speed(linear_velocity, angular_velocity),
            right=self.to_right_wheel_speed(linear_velocity, angular_velocity),
        )

    def to_wheel_speeds_curvature(self, linear_velocity: float, curvature: float) -> WheelSpeedPair:
        """
        Compute wheel velocities from a linear velocity and path curvature.

        Curvature is omega / v. This form suits driver inputs where the stick
        sets how tightly to turn rather than how fast.

        Args:
            linear_velocity: Desired linear velocity of the robot center (m/s)
            curvature: Desired path curvature (1/m), positive turns left

        Returns:
            WheelSpeedPair with left and right wheel velocities in m/s
        """
        return WheelSpeedPair(
            left=self.to_left_wheel_speed_curvature(linear_velocity, curvature),
            right=self.to_right_wheel_speed_curvature(linear_velocity, curvature),
        )

    def to_chassis_speeds(self, wheel_speeds: WheelSpeedPair) -> Tuple[float, float]:
        """Forward kinematics: recover (linear, angular) velocity from wheel speeds."""
        linear_velocity = (wheel_speeds.left + wheel_speeds.right) / 2.0
        angular_velocity = (wheel_speeds.right - wheel_speeds.left) / self.track_width
        return linear_velocity, angular_velocity


def desaturate_wheel_speeds(wheel_speeds: WheelSpeedPair, max_speed: float) -> WheelSpeedPair:
    """Scale both wheels uniformly so neither exceeds max_speed.

    Unlike clamping each side independently, uniform scaling preserves the
    ratio between the wheels and therefore the path curvature.

    Args:
        wheel_speeds: Unlimited wheel speeds (m/s).
        max_speed: Largest allowed wheel speed magnitude (m/s).

    Returns:
        Scaled wheel speeds, or the input unchanged if already within limits
        or if max_speed is not positive.
    """
    peak = max(abs(wheel_speeds.left), abs(wheel_speeds.right))
    if max_speed <= 0.0 or peak <= max_speed:
        return wheel_speeds
    scale = max_speed / peak
    return WheelSpeedPair(left=wheel_speeds.left * scale, right=wheel_speeds.right * scale)
