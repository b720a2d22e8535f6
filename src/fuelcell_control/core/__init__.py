"""
Core Module

Core simulation components.

Public API:
- DisturbanceGenerator: Load, temperature and pressure perturbations
- SystemDynamicsModel: One-step stack dynamics and polarization curve
- PerformanceAnalyzer: Run metrics (fitness signals)
- SimulationOrchestrator / simulate_control_system: Closed-loop time loop
- ControlSystemSimulationEngine: Configuration holder with preset runner
- BatchEvaluator: Parallel evaluation of candidate populations
"""

from fuelcell_control.core.batch import BatchEvaluator, BatchResult, Candidate
from fuelcell_control.core.disturbances import DisturbanceGenerator, Disturbances
from fuelcell_control.core.dynamics import SystemDynamicsModel, SystemState
from fuelcell_control.core.exceptions import (
    ConfigurationError,
    FuelCellControlException,
    ParameterError,
    SimulationCancelled,
)
from fuelcell_control.core.performance import PerformanceAnalyzer, PerformanceSummary
from fuelcell_control.core.simulation import (
    ControlSignals,
    ControlSystemSimulationEngine,
    SimulationOrchestrator,
    SimulationPhase,
    SimulationResult,
    simulate_control_system,
)

__all__ = [
    "DisturbanceGenerator",
    "Disturbances",
    "SystemDynamicsModel",
    "SystemState",
    "PerformanceAnalyzer",
    "PerformanceSummary",
    "SimulationOrchestrator",
    "SimulationPhase",
    "SimulationResult",
    "ControlSignals",
    "ControlSystemSimulationEngine",
    "simulate_control_system",
    "BatchEvaluator",
    "BatchResult",
    "Candidate",
    "FuelCellControlException",
    "ConfigurationError",
    "ParameterError",
    "SimulationCancelled",
]
