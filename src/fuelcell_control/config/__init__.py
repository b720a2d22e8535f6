"""
Configuration Package for Fuel Cell Control System

Validated, immutable run inputs plus the static chemistry tables.

Configuration modules:
- chemistry: Per-chemistry electrochemical constants and derating factors
- models: Pydantic models for stack configuration, control and simulation
- presets: Named simulation scenarios

Usage:
    from fuelcell_control.config import FuelCellConfiguration, load_preset

    config = FuelCellConfiguration(type="PEM", activeArea=100, ...)
    sim_params = load_preset("LOAD_FOLLOWING", seed=1)
"""

from .chemistry import CHEMISTRY_PROPERTIES, ChemistryProperties, FuelCellType, get_chemistry
from .models import (
    ControlParameters,
    DisturbanceEvent,
    DisturbanceSchedule,
    FuelCellConfiguration,
    InitialConditions,
    PIDGains,
    Setpoints,
    SimulationParameters,
)
from .presets import (
    SIMULATION_PRESETS,
    ConfigPreset,
    get_preset_description,
    list_presets,
    load_preset,
)

__all__ = [
    "FuelCellType",
    "ChemistryProperties",
    "CHEMISTRY_PROPERTIES",
    "get_chemistry",
    "FuelCellConfiguration",
    "ControlParameters",
    "Setpoints",
    "PIDGains",
    "SimulationParameters",
    "InitialConditions",
    "DisturbanceSchedule",
    "DisturbanceEvent",
    "ConfigPreset",  # Preset names
    "SIMULATION_PRESETS",  # Raw preset data
    "get_preset_description",  # Get preset description
    "list_presets",  # List all presets
    "load_preset",  # Load preset as SimulationParameters
]
