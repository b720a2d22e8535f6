"""
Fuel cell stack closed-loop control simulation.
"""

from fuelcell_control.config import (
    ControlParameters,
    FuelCellConfiguration,
    FuelCellType,
    SimulationParameters,
    load_preset,
)
from fuelcell_control.core import (
    ConfigurationError,
    ControlSystemSimulationEngine,
    ParameterError,
    SimulationResult,
    simulate_control_system,
)

__version__ = "0.1.0"

__all__ = [
    "FuelCellType",
    "FuelCellConfiguration",
    "ControlParameters",
    "SimulationParameters",
    "load_preset",
    "ControlSystemSimulationEngine",
    "SimulationResult",
    "simulate_control_system",
    "ConfigurationError",
    "ParameterError",
]
