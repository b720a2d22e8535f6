"""
Chemistry Parameters for Fuel Cell Control System

Per-chemistry constants used by the polarization and efficiency models.

Configuration sections:
- Open circuit voltage baseline per cell
- Optimal operating temperature (reference for the temperature factor)
- Maximum achievable electrical efficiency

Supported chemistries:
- PEM: Proton Exchange Membrane
- SOFC: Solid Oxide Fuel Cell
- PAFC: Phosphoric Acid Fuel Cell
- MCFC: Molten Carbonate Fuel Cell
- AFC: Alkaline Fuel Cell
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

logger = logging.getLogger(__name__)


class FuelCellType(str, Enum):
    """Fuel cell chemistry identifiers."""

    PEM = "PEM"
    SOFC = "SOFC"
    PAFC = "PAFC"
    MCFC = "MCFC"
    AFC = "AFC"

    @classmethod
    def all(cls):
        return [member.value for member in cls]


@dataclass(frozen=True)
class ChemistryProperties:
    """
    Static electrochemical properties of one chemistry.

    Attributes:
        open_circuit_voltage: Baseline open circuit voltage in V
        optimal_temperature: Temperature of peak performance in °C
        max_efficiency: Upper bound on electrical efficiency in %
    """

    open_circuit_voltage: float
    optimal_temperature: float
    max_efficiency: float


# DEFAULT CHEMISTRY TABLE
# ============================================================================

CHEMISTRY_PROPERTIES: Dict[FuelCellType, ChemistryProperties] = {
    FuelCellType.PEM: ChemistryProperties(
        open_circuit_voltage=1.0, optimal_temperature=70.0, max_efficiency=60.0
    ),
    FuelCellType.SOFC: ChemistryProperties(
        open_circuit_voltage=1.1, optimal_temperature=850.0, max_efficiency=85.0
    ),
    FuelCellType.PAFC: ChemistryProperties(
        open_circuit_voltage=0.95, optimal_temperature=200.0, max_efficiency=55.0
    ),
    FuelCellType.MCFC: ChemistryProperties(
        open_circuit_voltage=1.05, optimal_temperature=650.0, max_efficiency=65.0
    ),
    FuelCellType.AFC: ChemistryProperties(
        open_circuit_voltage=1.15, optimal_temperature=80.0, max_efficiency=70.0
    ),
}

# Temperature factor floor and sensitivity
MIN_TEMPERATURE_FACTOR = 0.5
TEMPERATURE_SENSITIVITY = 0.3

# Air:fuel stoichiometry
OPTIMAL_AIR_FUEL_RATIO = 2.0
MIN_FLOW_FACTOR = 0.7
FLOW_SENSITIVITY = 0.2

# Efficiency degradation with current
MIN_CURRENT_FACTOR = 0.6
CURRENT_EFFICIENCY_SCALE = 1000.0
CURRENT_EFFICIENCY_SENSITIVITY = 0.2


def get_chemistry(chemistry: Union[FuelCellType, str]) -> ChemistryProperties:
    """
    Look up properties for a chemistry.

    Raises:
        KeyError: If the chemistry is unknown
    """
    try:
        return CHEMISTRY_PROPERTIES[FuelCellType(chemistry)]
    except ValueError as e:
        raise KeyError(f"Unknown fuel cell chemistry: {chemistry!r}") from e


def temperature_factor(temperature: float, chemistry: Union[FuelCellType, str]) -> float:
    """Performance factor from deviation to the chemistry optimum, floored at 0.5."""
    optimal = get_chemistry(chemistry).optimal_temperature
    deviation = abs(temperature - optimal)
    return max(MIN_TEMPERATURE_FACTOR, 1.0 - deviation / optimal * TEMPERATURE_SENSITIVITY)


def flow_factor(fuel_flow: float, air_flow: float) -> float:
    """Performance factor from the air:fuel ratio deviation to 2:1, floored at 0.7."""
    ratio = air_flow / fuel_flow
    deviation = abs(ratio - OPTIMAL_AIR_FUEL_RATIO) / OPTIMAL_AIR_FUEL_RATIO
    return max(MIN_FLOW_FACTOR, 1.0 - deviation * FLOW_SENSITIVITY)


def current_efficiency_factor(current: float) -> float:
    return max(
        MIN_CURRENT_FACTOR,
        1.0 - current / CURRENT_EFFICIENCY_SCALE * CURRENT_EFFICIENCY_SENSITIVITY,
    )
