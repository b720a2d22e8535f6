"""
System Dynamics Model for Fuel Cell Stacks

Advances the physical stack state by one fixed time step.

Physics modeling:
- First-order thermal relaxation toward the (disturbed) operating temperature
- Pressure follows the disturbed supply pressure without lag
- Simplified polarization curve: activation, ohmic and concentration losses
- Quasi-static current coupling: the prior current, scaled by the load
  factor, sets the current density that gates the voltage

The current update is not a causal ODE. Downstream fitness evaluation is
calibrated against this exact response, so it must stay as is.
"""

import logging
import math
from dataclasses import dataclass, replace

from fuelcell_control.config.chemistry import flow_factor, get_chemistry, temperature_factor
from fuelcell_control.config.models import FuelCellConfiguration, InitialConditions
from fuelcell_control.core.disturbances import Disturbances

logger = logging.getLogger(__name__)

THERMAL_TIME_CONSTANT = 60.0  # seconds
MIN_VOLTAGE = 0.1  # V

ACTIVATION_COEFF = 0.1
OHMIC_COEFF = 0.05
CONCENTRATION_COEFF = 0.02
CONCENTRATION_THRESHOLD = 500.0

INITIAL_EFFICIENCY = 50.0


@dataclass
class SystemState:
    """
    Instantaneous stack state.

    Attributes:
        voltage: Cell voltage in V
        current: Stack current in A
        power: Electrical power in W
        temperature: Stack temperature in °C
        pressure: Stack pressure in bar
        fuel_flow: Fuel flow actuator setting
        air_flow: Air flow actuator setting
        efficiency: Electrical efficiency in %
    """

    voltage: float
    current: float
    power: float
    temperature: float
    pressure: float
    fuel_flow: float
    air_flow: float
    efficiency: float

    @classmethod
    def initial(
        cls, conditions: InitialConditions, config: FuelCellConfiguration
    ) -> "SystemState":
        return cls(
            voltage=conditions.voltage,
            current=conditions.current,
            power=conditions.voltage * conditions.current,
            temperature=conditions.temperature,
            pressure=conditions.pressure,
            fuel_flow=config.fuel_flow_rate,
            air_flow=config.air_flow_rate,
            efficiency=INITIAL_EFFICIENCY,
        )

    def copy(self) -> "SystemState":
        return replace(self)


@dataclass(frozen=True)
class PolarizationBreakdown:
    """Intermediate terms of one polarization evaluation."""

    temperature_factor: float
    flow_factor: float
    load_factor: float
    open_circuit_voltage: float
    current_density: float
    activation_loss: float
    ohmic_loss: float
    concentration_loss: float

    @property
    def total_loss(self) -> float:
        return self.activation_loss + self.ohmic_loss + self.concentration_loss


def activation_loss(current_density: float) -> float:
    return ACTIVATION_COEFF * math.log(current_density + 1.0)


def ohmic_loss(current_density: float) -> float:
    return OHMIC_COEFF * current_density


def concentration_loss(current_density: float) -> float:
    if current_density > CONCENTRATION_THRESHOLD:
        return CONCENTRATION_COEFF * (current_density / CONCENTRATION_THRESHOLD) ** 2
    return 0.0


class SystemDynamicsModel:
    """
    Fixed-step stack dynamics for one configuration.

    Args:
        config: Validated stack configuration
    """

    def __init__(self, config: FuelCellConfiguration):
        self.config = config
        self.chemistry = get_chemistry(config.chemistry)

    def polarization(
        self,
        prior: SystemState,
        temperature: float,
        disturbances: Disturbances,
    ) -> PolarizationBreakdown:
        """
        Evaluate the polarization curve.

        ``temperature`` is the freshly relaxed temperature; flows and current
        come from the prior state. The flow factor is reported for
        diagnostics only and does not enter the voltage.
        """
        t_factor = temperature_factor(temperature, self.config.chemistry)
        f_factor = flow_factor(prior.fuel_flow, prior.air_flow)
        load_factor = 1.0 + disturbances.load

        ocv = self.chemistry.open_circuit_voltage * t_factor
        current_density = (prior.current / self.config.active_area) * load_factor
        if current_density < 0:
            logger.debug(
                f"Current density {current_density:.4g} clamped to 0 "
                f"(load factor {load_factor:.3f})"
            )
            current_density = 0.0

        return PolarizationBreakdown(
            temperature_factor=t_factor,
            flow_factor=f_factor,
            load_factor=load_factor,
            open_circuit_voltage=ocv,
            current_density=current_density,
            activation_loss=activation_loss(current_density),
            ohmic_loss=ohmic_loss(current_density),
            concentration_loss=concentration_loss(current_density),
        )

    def advance(
        self,
        state: SystemState,
        dt: float,
        disturbances: Disturbances,
    ) -> SystemState:
        """
        Advance the stack by ``dt`` seconds.

        Args:
            state: Prior state (not mutated)
            dt: Time step in seconds
            disturbances: Load, temperature and pressure perturbations

        Returns:
            New SystemState; power and efficiency are carried over and
            recomputed by the orchestrator after actuation
        """
        new_state = state.copy()

        target_temperature = self.config.operating_temperature + disturbances.temperature
        new_state.temperature += (
            (target_temperature - state.temperature) * dt / THERMAL_TIME_CONSTANT
        )

        new_state.pressure = self.config.operating_pressure + disturbances.pressure

        terms = self.polarization(state, new_state.temperature, disturbances)

        voltage = terms.open_circuit_voltage - terms.total_loss
        if voltage < MIN_VOLTAGE:
            logger.debug(f"Voltage {voltage:.4f} V clamped to floor {MIN_VOLTAGE} V")
            voltage = MIN_VOLTAGE
        new_state.voltage = voltage
        new_state.current = terms.current_density * self.config.active_area

        return new_state
