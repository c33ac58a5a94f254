"""Heading normalization and swerve module angle optimization."""

from .state import ModuleState


def normalize_degrees(angle: float) -> float:
    """Wrap an angle to the range (-180, 180] degrees.

    NaN propagates unchanged and infinities become NaN; callers are expected
    to check sensor readings before they reach this function.

    Args:
        angle: Angle in degrees.

    Returns:
        Equivalent angle in (-180, 180].

    Example:
        >>> normalize_degrees(270.0)
        -90.0
        >>> normalize_degrees(-180.0)
        180.0
    """
    if -180.0 < angle <= 180.0:
        return float(angle)
    wrapped = angle % 360.0
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def optimize(desired: ModuleState, current_heading: float) -> ModuleState:
    """Minimize steering movement for a swerve module.

    If reaching the desired heading takes more than 90 degrees of rotation,
    the wheel is pointed the opposite way and driven in reverse instead. Both
    states move the robot identically.

    Args:
        desired: Requested module state.
        current_heading: Measured module heading (degrees).

    Returns:
        A state whose heading is within 90 degrees of current_heading.
    """
    error = normalize_degrees(current_heading - desired.heading)
    if abs(error) > 90.0:
        return ModuleState(
            speed=-desired.speed, heading=normalize_degrees(desired.heading + 180.0)
        )
    return ModuleState(speed=desired.speed, heading=normalize_degrees(desired.heading))
