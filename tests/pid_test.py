"""
Tests for the PID feedback controller and motor feedforward.

Run with:
    pytest tests/pid_test.py -v
"""

import pytest

from drivetrain_control.feedforward import SimpleMotorFeedforward
from drivetrain_control.pid import PIDController
from drivetrain_control.state import ControllerGains, FeedforwardGains


# ============================================================================
# PIDController
# ============================================================================


class TestPIDController:
    def test_p_only_zero_error_gives_zero(self):
        pid = PIDController(ControllerGains(kp=0.8))
        for _ in range(5):
            assert pid.calculate(0.0) == 0.0

    def test_p_only_is_proportional(self):
        pid = PIDController(ControllerGains(kp=0.5))
        assert pid.calculate(4.0) == pytest.approx(2.0)
        assert pid.calculate(-2.0) == pytest.approx(-1.0)

    def test_integral_grows_with_constant_error(self):
        pid = PIDController(ControllerGains(kp=0.1, ki=0.05))
        outputs = [pid.calculate(2.0) for _ in range(20)]
        for previous, current in zip(outputs, outputs[1:]):
            assert abs(current) > abs(previous)

    def test_integral_accumulates_per_call(self):
        pid = PIDController(ControllerGains(ki=1.0))
        assert pid.calculate(1.0) == pytest.approx(1.0)
        assert pid.calculate(1.0) == pytest.approx(2.0)
        assert pid.calculate(-0.5) == pytest.approx(1.5)

    def test_derivative_uses_error_change(self):
        pid = PIDController(ControllerGains(kd=2.0))
        assert pid.calculate(1.0) == pytest.approx(2.0)
        assert pid.calculate(1.0) == pytest.approx(0.0)
        assert pid.calculate(4.0) == pytest.approx(6.0)

    def test_bias_is_added(self):
        pid = PIDController(ControllerGains(kp=1.0, bias=0.25))
        assert pid.calculate(0.0) == pytest.approx(0.25)
        assert pid.calculate(1.0) == pytest.approx(1.25)

    def test_output_is_not_clamped(self):
        pid = PIDController(ControllerGains(kp=10.0))
        assert pid.calculate(5.0) == pytest.approx(50.0)

    def test_izone_clears_integral_outside_zone(self):
        pid = PIDController(ControllerGains(ki=1.0, izone=5.0))
        pid.calculate(2.0)
        pid.calculate(2.0)
        # Outside the zone: integral cleared and not accumulated
        assert pid.calculate(10.0) == pytest.approx(0.0)
        assert pid.calculate(1.0) == pytest.approx(1.0)

    def test_zero_izone_disables_zone(self):
        pid = PIDController(ControllerGains(ki=1.0, izone=0.0))
        pid.calculate(100.0)
        assert pid.calculate(100.0) == pytest.approx(200.0)

    def test_integral_limit(self):
        pid = PIDController(ControllerGains(ki=1.0), integral_limit=3.0)
        for _ in range(10):
            output = pid.calculate(1.0)
        assert output == pytest.approx(3.0)

    def test_reset_clears_memory(self):
        pid = PIDController(ControllerGains(ki=1.0, kd=1.0))
        pid.calculate(3.0)
        pid.calculate(3.0)
        pid.reset()
        # Fresh controller behaviour: integral 1.0, derivative 1.0 - 0.0
        assert pid.calculate(1.0) == pytest.approx(2.0)

    def test_diagnostics(self):
        pid = PIDController(ControllerGains(kp=1.0, ki=0.5, kd=0.25, bias=0.1))
        output = pid.calculate(2.0)
        diagnostics = pid.get_diagnostics()
        assert diagnostics["error"] == 2.0
        assert diagnostics["p_term"] == pytest.approx(2.0)
        assert diagnostics["i_term"] == pytest.approx(1.0)
        assert diagnostics["d_term"] == pytest.approx(0.5)
        assert diagnostics["integral"] == pytest.approx(2.0)
        assert diagnostics["output"] == pytest.approx(output)
        assert output == pytest.approx(3.6)


# ============================================================================
# SimpleMotorFeedforward
# ============================================================================


class TestSimpleMotorFeedforward:
    def test_static_term_follows_direction(self):
        ff = SimpleMotorFeedforward(FeedforwardGains(ks=0.2, kv=2.0))
        assert ff.calculate(1.0) == pytest.approx(2.2)
        assert ff.calculate(-1.0) == pytest.approx(-2.2)

    def test_zero_velocity_has_no_static_term(self):
        ff = SimpleMotorFeedforward(FeedforwardGains(ks=0.2, kv=2.0))
        assert ff.calculate(0.0) == 0.0

    def test_acceleration_defaults_to_zero(self):
        ff = SimpleMotorFeedforward(FeedforwardGains(ks=0.1, kv=1.0, ka=0.5))
        assert ff.calculate(2.0) == pytest.approx(2.1)
        assert ff.calculate(2.0, acceleration=4.0) == pytest.approx(4.1)
