"""
Exception Hierarchy for Fuel Cell Control System

- FuelCellControlException: base for every error raised by this package
- ConfigurationError: invalid static stack or control configuration (fatal, pre-loop)
- ParameterError: invalid simulation parameters (fatal, pre-loop)
- SimulationCancelled: cooperative cancellation requested by the caller

Out-of-range values inside the time loop are clamped and logged, never raised.
"""

from typing import Optional


class FuelCellControlException(Exception):
    """Base exception for the fuel cell control package."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(FuelCellControlException, ValueError):
    """Invalid static configuration (area, chemistry, setpoints, gains)."""


class ParameterError(FuelCellControlException, ValueError):
    """Invalid simulation parameters (duration, time step, initial conditions)."""


class SimulationCancelled(FuelCellControlException):
    """Raised when a cancellation checkpoint reports that the caller gave up."""

    def __init__(self, simulation_time: float, step: int):
        super().__init__(
            f"Simulation cancelled at t={simulation_time:.2f}s (step {step})",
            context={"simulation_time": simulation_time, "step": step},
        )
        self.simulation_time = simulation_time
        self.step = step

    def __reduce__(self):
        return (type(self), (self.simulation_time, self.step))


def is_recoverable(error: BaseException) -> bool:
    """
    Whether a batch run may continue after this error.

    Input errors are specific to one candidate, so a batch can skip it and
    carry on. Cancellation and anything unexpected stop the batch.
    """
    return isinstance(error, (ConfigurationError, ParameterError))
