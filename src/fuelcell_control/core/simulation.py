"""
Closed-Loop Control Simulation for Fuel Cell Stacks

Fixed-step simulation coupling two PID loops with the stack dynamics.

Control loops:
- Voltage loop: cell voltage error drives the fuel flow actuator
- Temperature loop: temperature error drives the cooling actuator

Per step:
- Sample disturbances and advance the stack dynamics
- Update both controllers from setpoint errors
- Clamp actuators (fuel flow, fixed 2:1 air flow, cooling)
- Recompute power and efficiency and record the sample

Each run owns fresh state, controllers and random source, so independent
runs can execute in separate threads or processes without locking.
Inputs are validated once at entry; inside the loop out-of-range values
are clamped and logged at DEBUG, never raised.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

import numpy as np
import pandas as pd

from fuelcell_control.config.chemistry import current_efficiency_factor, temperature_factor
from fuelcell_control.config.models import (
    ControlParameters,
    FuelCellConfiguration,
    SimulationParameters,
)
from fuelcell_control.config.presets import load_preset
from fuelcell_control.control.pid_controller import PIDController
from fuelcell_control.core.disturbances import DisturbanceGenerator
from fuelcell_control.core.dynamics import SystemDynamicsModel, SystemState
from fuelcell_control.core.error_handling import coerce_model, with_error_context
from fuelcell_control.core.exceptions import (
    ConfigurationError,
    ParameterError,
    SimulationCancelled,
)
from fuelcell_control.core.performance import (
    PerformanceAnalyzer,
    PerformanceSummary,
    generate_recommendations,
)

logger = logging.getLogger(__name__)

# Actuator limits
MIN_FUEL_FLOW = 0.1
MAX_FUEL_FLOW = 50.0
FUEL_FLOW_GAIN = 0.1  # fuel flow change per unit of voltage-loop output
AIR_FUEL_RATIO = 2.0  # stoichiometric air:fuel
MIN_COOLING = 0.0
MAX_COOLING = 1000.0

MIN_EFFICIENCY = 0.0
MAX_EFFICIENCY = 100.0

DEFAULT_CANCEL_EVERY = 100

ConfigInput = Union[FuelCellConfiguration, Dict[str, Any]]
ControlInput = Union[ControlParameters, Dict[str, Any]]
SimInput = Union[SimulationParameters, Dict[str, Any]]


class SimulationPhase(str, Enum):
    RUNNING = "RUNNING"
    COMPLETE = "COMPLETE"


def _clamp(value: float, low: float, high: float, label: str) -> float:
    if value < low or value > high:
        clamped = min(max(value, low), high)
        logger.debug(f"{label} {value:.4g} clamped to {clamped:.4g}")
        return clamped
    return value


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class _ReadOnlySeries:
    """
    Keeps ndarray fields read-only, including after unpickling.

    Pickle does not carry the writeable flag, so results returned from a
    process pool are frozen again on arrival.
    """

    def __post_init__(self):
        for value in vars(self).values():
            if isinstance(value, np.ndarray):
                _frozen(value)

    def __setstate__(self, state):
        for name, value in state.items():
            object.__setattr__(self, name, value)
        self.__post_init__()


@dataclass(frozen=True, eq=False)
class ControlSignals(_ReadOnlySeries):
    """Actuator series recorded alongside the state series."""

    time: np.ndarray
    fuel_flow: np.ndarray
    air_flow: np.ndarray
    cooling_rate: np.ndarray

    def to_dict(self) -> Dict[str, list]:
        return {
            "time": self.time.tolist(),
            "fuelFlow": self.fuel_flow.tolist(),
            "airFlow": self.air_flow.tolist(),
            "coolingRate": self.cooling_rate.tolist(),
        }


@dataclass(frozen=True, eq=False)
class SimulationResult(_ReadOnlySeries):
    """
    Complete output of one run.

    All series share the same length, floor(duration / time_step), and are
    read-only.
    """

    time: np.ndarray
    voltage: np.ndarray
    current: np.ndarray
    power: np.ndarray
    temperature: np.ndarray
    pressure: np.ndarray
    efficiency: np.ndarray
    control_signals: ControlSignals
    performance: PerformanceSummary

    def __len__(self) -> int:
        return len(self.time)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready payload in the shape consumed by the charting layer."""
        return {
            "timeData": self.time.tolist(),
            "voltageData": self.voltage.tolist(),
            "currentData": self.current.tolist(),
            "powerData": self.power.tolist(),
            "temperatureData": self.temperature.tolist(),
            "pressureData": self.pressure.tolist(),
            "efficiencyData": self.efficiency.tolist(),
            "controlSignals": self.control_signals.to_dict(),
            "performance": self.performance.to_dict(),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """All series as columns, indexed by time."""
        signals = self.control_signals
        frame = pd.DataFrame(
            {
                "voltage": self.voltage,
                "current": self.current,
                "power": self.power,
                "temperature": self.temperature,
                "pressure": self.pressure,
                "efficiency": self.efficiency,
                "fuel_flow": signals.fuel_flow,
                "air_flow": signals.air_flow,
                "cooling_rate": signals.cooling_rate,
            },
            index=pd.Index(self.time, name="time"),
        )
        return frame


class SimulationOrchestrator:
    """
    Owns the time loop for a single run.

    Args:
        config: Stack configuration
        control: Setpoints and PID tuning
        sim_params: Duration, time step, initial conditions, disturbances
        rng: Random source for pressure noise (default: seeded from
            ``sim_params.seed``, or system entropy when unset)
        cancel_check: Optional callable polled every ``cancel_every`` steps;
            returning True aborts the run with SimulationCancelled
        cancel_every: Steps between cancellation checkpoints
    """

    def __init__(
        self,
        config: ConfigInput,
        control: ControlInput,
        sim_params: SimInput,
        rng: Optional[np.random.Generator] = None,
        cancel_check: Optional[Callable[[], bool]] = None,
        cancel_every: int = DEFAULT_CANCEL_EVERY,
    ):
        self.config = coerce_model(FuelCellConfiguration, config, ConfigurationError)
        self.control = coerce_model(ControlParameters, control, ConfigurationError)
        self.sim_params = coerce_model(SimulationParameters, sim_params, ParameterError)
        if cancel_every < 1:
            raise ParameterError(f"cancel_every must be >= 1, got {cancel_every}")

        self.cancel_check = cancel_check
        self.cancel_every = cancel_every

        if rng is None:
            rng = np.random.default_rng(self.sim_params.seed)
        self.disturbances = DisturbanceGenerator(self.sim_params.disturbances, rng=rng)
        self.dynamics = SystemDynamicsModel(self.config)

        self.temperature_setpoint = self.control.temperature_setpoint(self.config)
        self.voltage_controller = PIDController.from_gains(
            self.control.tuning,
            self.control.setpoints.voltage,
            integral_limit=self.control.integral_limit,
            name="voltage",
        )
        self.temperature_controller = PIDController.from_gains(
            self.control.temperature_gains(),
            self.temperature_setpoint,
            integral_limit=self.control.integral_limit,
            name="temperature",
        )
        self.analyzer = PerformanceAnalyzer(self.control.setpoints.voltage)

        self.state = SystemState.initial(self.sim_params.initial_conditions, self.config)
        self.phase = SimulationPhase.RUNNING
        self.result: Optional[SimulationResult] = None

    def _efficiency(self, state: SystemState) -> float:
        max_efficiency = self.dynamics.chemistry.max_efficiency
        efficiency = (
            max_efficiency
            * current_efficiency_factor(state.current)
            * temperature_factor(state.temperature, self.config.chemistry)
        )
        return _clamp(efficiency, MIN_EFFICIENCY, MAX_EFFICIENCY, "Efficiency")

    def run(self) -> SimulationResult:
        """Run the loop to completion and return the result."""
        if self.result is not None:
            return self.result

        dt = self.sim_params.time_step
        n_steps = self.sim_params.num_steps

        logger.info(
            f"Starting {self.config.chemistry.value} simulation: "
            f"{n_steps} steps of {dt}s"
        )

        time_data = np.arange(n_steps, dtype=np.float64) * dt
        voltage_data = np.empty(n_steps)
        current_data = np.empty(n_steps)
        power_data = np.empty(n_steps)
        temperature_data = np.empty(n_steps)
        pressure_data = np.empty(n_steps)
        efficiency_data = np.empty(n_steps)
        fuel_flow_data = np.empty(n_steps)
        air_flow_data = np.empty(n_steps)
        cooling_data = np.empty(n_steps)

        state = self.state
        for i in range(n_steps):
            t = i * dt

            if (
                self.cancel_check is not None
                and i
                and i % self.cancel_every == 0
                and self.cancel_check()
            ):
                logger.info(f"Simulation cancelled at t={t:.2f}s")
                raise SimulationCancelled(t, i)

            disturbances = self.disturbances.sample(t)
            state = self.dynamics.advance(state, dt, disturbances)

            voltage_error = self.voltage_controller.compute_error(state.voltage)
            temperature_error = self.temperature_controller.compute_error(state.temperature)
            fuel_flow_control = self.voltage_controller.update(voltage_error, t)
            cooling_control = self.temperature_controller.update(temperature_error, t)

            state.fuel_flow = _clamp(
                state.fuel_flow + fuel_flow_control * FUEL_FLOW_GAIN,
                MIN_FUEL_FLOW,
                MAX_FUEL_FLOW,
                "Fuel flow",
            )
            state.air_flow = state.fuel_flow * AIR_FUEL_RATIO
            cooling_rate = _clamp(cooling_control, MIN_COOLING, MAX_COOLING, "Cooling rate")

            state.power = state.voltage * state.current
            state.efficiency = self._efficiency(state)

            voltage_data[i] = state.voltage
            current_data[i] = state.current
            power_data[i] = state.power
            temperature_data[i] = state.temperature
            pressure_data[i] = state.pressure
            efficiency_data[i] = state.efficiency
            fuel_flow_data[i] = state.fuel_flow
            air_flow_data[i] = state.air_flow
            cooling_data[i] = cooling_rate

        self.state = state

        summary = self.analyzer.analyze(time_data, voltage_data, power_data, efficiency_data)
        recommendations = generate_recommendations(
            summary, self.config.chemistry, self.control, self.temperature_setpoint
        )
        summary = replace(summary, recommendations=tuple(recommendations))

        self.result = SimulationResult(
            time=time_data,
            voltage=voltage_data,
            current=current_data,
            power=power_data,
            temperature=temperature_data,
            pressure=pressure_data,
            efficiency=efficiency_data,
            control_signals=ControlSignals(
                time=time_data,
                fuel_flow=fuel_flow_data,
                air_flow=air_flow_data,
                cooling_rate=cooling_data,
            ),
            performance=summary,
        )
        self.phase = SimulationPhase.COMPLETE

        logger.info(
            f"Simulation complete: avg power {summary.average_power:.2f} W, "
            f"stability {summary.stability_index:.3f}, "
            f"response {summary.response_time:.2f}s"
        )
        return self.result


@with_error_context("Control system simulation")
def simulate_control_system(
    config: ConfigInput,
    control: ControlInput,
    sim_params: SimInput,
    rng: Optional[np.random.Generator] = None,
    cancel_check: Optional[Callable[[], bool]] = None,
    cancel_every: int = DEFAULT_CANCEL_EVERY,
) -> SimulationResult:
    """
    Run one closed-loop simulation.

    Raises:
        ConfigurationError: Invalid stack configuration or control parameters
        ParameterError: Invalid simulation parameters
        SimulationCancelled: ``cancel_check`` requested cancellation
    """
    orchestrator = SimulationOrchestrator(
        config,
        control,
        sim_params,
        rng=rng,
        cancel_check=cancel_check,
        cancel_every=cancel_every,
    )
    return orchestrator.run()


class ControlSystemSimulationEngine:
    """
    Holds a configuration and control tuning and runs simulations against it.

    Example:
        engine = ControlSystemSimulationEngine(config, control)
        result = engine.run_preset("LOAD_FOLLOWING", seed=7)
        fitness = result.performance.average_power
    """

    def __init__(self, config: ConfigInput, control: ControlInput):
        self._config = coerce_model(FuelCellConfiguration, config, ConfigurationError)
        self._control = coerce_model(ControlParameters, control, ConfigurationError)

    def simulate(
        self,
        sim_params: SimInput,
        rng: Optional[np.random.Generator] = None,
    ) -> SimulationResult:
        return simulate_control_system(self._config, self._control, sim_params, rng=rng)

    def run_preset(self, preset_name: str, seed: Optional[int] = None) -> SimulationResult:
        """
        Run a named preset.

        Raises:
            ParameterError: If the preset name is unknown
        """
        try:
            sim_params = load_preset(preset_name, seed=seed)
        except ValueError as e:
            raise ParameterError(str(e)) from e
        return self.simulate(sim_params)

    def update_configuration(self, **changes: Any) -> None:
        """Replace configuration fields (by field name); re-validated."""
        merged = {**self._config.model_dump(), **changes}
        self._config = coerce_model(FuelCellConfiguration, merged, ConfigurationError)

    def update_control_parameters(self, **changes: Any) -> None:
        merged = {**self._control.model_dump(), **changes}
        self._control = coerce_model(ControlParameters, merged, ConfigurationError)

    def get_configuration(self) -> FuelCellConfiguration:
        return self._config

    def get_control_parameters(self) -> ControlParameters:
        return self._control
