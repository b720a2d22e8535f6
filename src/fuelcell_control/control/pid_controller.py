"""
PID Controller for Fuel Cell Stack Loops.

Stateful proportional-integral-derivative feedback used for the voltage
loop (fuel flow actuation) and the temperature loop (cooling actuation).

The integral is unbounded unless ``integral_limit`` is given. Existing
callers rely on the unclamped response shape, so anti-windup is opt-in.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fuelcell_control.config.models import PIDGains

logger = logging.getLogger(__name__)


@dataclass
class ControllerState:
    """
    Mutable controller memory.

    Attributes:
        previous_error: Error seen on the last accepted update
        integral: Accumulated error·dt
        last_time: Simulation time of the last accepted update
    """

    previous_error: float = 0.0
    integral: float = 0.0
    last_time: float = 0.0


class PIDController:
    """
    Discrete PID controller driven by absolute simulation time.

    ``update`` computes dt from the time of the previous accepted update,
    so the first call at t=0 is a no-op that returns 0.
    """

    def __init__(
        self,
        kp: float,
        ki: float,
        kd: float,
        setpoint: float,
        integral_limit: Optional[float] = None,
        name: str = "pid",
    ):
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.setpoint = setpoint
        self.integral_limit = integral_limit
        self.name = name
        self.state = ControllerState()

    @classmethod
    def from_gains(
        cls,
        gains: PIDGains,
        setpoint: float,
        integral_limit: Optional[float] = None,
        name: str = "pid",
    ) -> "PIDController":
        return cls(gains.kp, gains.ki, gains.kd, setpoint, integral_limit=integral_limit, name=name)

    def compute_error(self, measured: float) -> float:
        """Error convention: setpoint minus measurement."""
        return self.setpoint - measured

    def update(self, error: float, time: float) -> float:
        """
        Advance the controller to ``time`` with the given error.

        Args:
            error: Setpoint minus measured value
            time: Absolute simulation time in seconds

        Returns:
            Controller output, or 0.0 without touching state when
            ``time`` does not move past the last update
        """
        state = self.state
        dt = time - state.last_time
        if dt <= 0:
            return 0.0

        state.integral += error * dt
        if self.integral_limit is not None:
            limit = self.integral_limit
            if abs(state.integral) > limit:
                logger.debug(
                    f"{self.name}: integral {state.integral:.4g} clamped to ±{limit:.4g}"
                )
                state.integral = max(-limit, min(limit, state.integral))

        derivative = (error - state.previous_error) / dt
        output = self.kp * error + self.ki * state.integral + self.kd * derivative

        state.previous_error = error
        state.last_time = time
        return output

    def reset(self) -> None:
        self.state = ControllerState()

    def __repr__(self) -> str:
        return (
            f"PIDController(name={self.name!r}, kp={self.kp}, ki={self.ki}, "
            f"kd={self.kd}, setpoint={self.setpoint})"
        )
