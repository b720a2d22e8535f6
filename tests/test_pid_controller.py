"""
Unit tests for the PID controller.
"""

import pytest

from fuelcell_control.config.models import PIDGains
from fuelcell_control.control import PIDController


@pytest.mark.unit
class TestPIDUpdate:
    """Output computation and state bookkeeping."""

    def test_first_update_at_time_zero_is_noop(self):
        pid = PIDController(1.0, 0.1, 0.01, setpoint=0.7)

        assert pid.update(0.5, 0.0) == 0.0
        assert pid.state.integral == 0.0
        assert pid.state.previous_error == 0.0
        assert pid.state.last_time == 0.0

    def test_single_step_output(self):
        pid = PIDController(1.0, 0.1, 0.01, setpoint=0.7)

        output = pid.update(1.0, 1.0)

        # P = 1.0, I = 0.1 * 1.0, D = 0.01 * (1.0 - 0.0) / 1.0
        assert output == pytest.approx(1.11)
        assert pid.state.integral == pytest.approx(1.0)
        assert pid.state.previous_error == 1.0
        assert pid.state.last_time == 1.0

    def test_non_increasing_time_is_ignored(self):
        pid = PIDController(1.0, 0.1, 0.01, setpoint=0.7)
        pid.update(1.0, 2.0)
        before = (pid.state.integral, pid.state.previous_error, pid.state.last_time)

        assert pid.update(5.0, 2.0) == 0.0
        assert pid.update(5.0, 1.0) == 0.0
        assert (pid.state.integral, pid.state.previous_error, pid.state.last_time) == before

    def test_integral_uses_elapsed_time(self):
        pid = PIDController(0.0, 1.0, 0.0, setpoint=0.0)
        pid.update(2.0, 0.5)
        output = pid.update(2.0, 2.0)

        assert pid.state.integral == pytest.approx(2.0 * 0.5 + 2.0 * 1.5)
        assert output == pytest.approx(4.0)

    def test_derivative_term(self):
        pid = PIDController(0.0, 0.0, 1.0, setpoint=0.0)
        pid.update(1.0, 1.0)
        output = pid.update(0.0, 3.0)

        assert output == pytest.approx(-0.5)

    def test_sustained_zero_error_gives_zero_output(self):
        pid = PIDController(2.0, 0.5, 0.1, setpoint=1.0)

        outputs = [pid.update(0.0, float(t)) for t in range(50)]

        assert all(o == 0.0 for o in outputs)
        assert pid.state.integral == 0.0

    def test_proportional_only_output_decays_with_error(self):
        pid = PIDController(1.0, 0.0, 0.0, setpoint=0.0)
        pid.update(1.0, 1.0)

        outputs = [pid.update(0.0, float(t)) for t in range(2, 10)]

        assert outputs[-1] == 0.0


@pytest.mark.unit
class TestPIDAntiWindup:
    """Opt-in integral clamp."""

    def test_integral_unbounded_by_default(self):
        pid = PIDController(0.0, 1.0, 0.0, setpoint=0.0)
        for t in range(1, 101):
            pid.update(1.0, float(t))

        assert pid.state.integral == pytest.approx(100.0)

    def test_integral_clamped_when_limit_set(self):
        pid = PIDController(1.0, 0.1, 0.01, setpoint=0.0, integral_limit=0.5)

        output = pid.update(1.0, 1.0)

        assert pid.state.integral == 0.5
        assert output == pytest.approx(1.0 + 0.05 + 0.01)

    def test_negative_integral_clamped(self):
        pid = PIDController(0.0, 1.0, 0.0, setpoint=0.0, integral_limit=2.0)
        for t in range(1, 10):
            pid.update(-1.0, float(t))

        assert pid.state.integral == -2.0


@pytest.mark.unit
class TestPIDConstruction:
    def test_from_gains(self):
        gains = PIDGains(kp=2.0, ki=0.3, kd=0.05)
        pid = PIDController.from_gains(gains, setpoint=70.0, name="temperature")

        assert (pid.kp, pid.ki, pid.kd) == (2.0, 0.3, 0.05)
        assert pid.setpoint == 70.0
        assert "temperature" in repr(pid)

    def test_compute_error_is_setpoint_minus_measured(self):
        pid = PIDController(1.0, 0.0, 0.0, setpoint=0.7)

        assert pid.compute_error(0.5) == pytest.approx(0.2)
        assert pid.compute_error(0.9) == pytest.approx(-0.2)

    def test_reset_clears_state(self):
        pid = PIDController(1.0, 0.1, 0.01, setpoint=0.7)
        pid.update(1.0, 1.0)
        pid.reset()

        assert pid.state.integral == 0.0
        assert pid.state.last_time == 0.0
        assert pid.update(1.0, 0.0) == 0.0
