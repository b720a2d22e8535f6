"""
Shared fixtures for fuel cell control tests.
"""

import pytest

from fuelcell_control.config import (
    ControlParameters,
    FuelCellConfiguration,
    SimulationParameters,
)


@pytest.fixture
def pem_config() -> FuelCellConfiguration:
    return FuelCellConfiguration(
        chemistry="PEM",
        active_area=100.0,
        operating_temperature=70.0,
        operating_pressure=1.5,
        fuel_flow_rate=5.0,
        air_flow_rate=10.0,
    )


@pytest.fixture
def default_control() -> ControlParameters:
    return ControlParameters(
        setpoints={"voltage": 0.7, "temperature": 70.0},
        tuning={"kp": 1.0, "ki": 0.1, "kd": 0.01},
    )


@pytest.fixture
def short_run() -> SimulationParameters:
    return SimulationParameters(duration=20.0, time_step=1.0, seed=1)


@pytest.fixture
def reference_run() -> SimulationParameters:
    """300 s at 1 s from a cold stack with the default disturbance profile."""
    return SimulationParameters(
        duration=300.0,
        time_step=1.0,
        initial_conditions={"voltage": 0.3, "current": 0.1, "temperature": 25.0, "pressure": 1.0},
        seed=123,
    )
