"""
Pydantic Configuration Models for Fuel Cell Control System

Type-safe configuration models with validation, range checks,
and descriptive error messages.

All models are frozen once validated and accept both snake_case field
names and the camelCase keys used by the API layer (``activeArea``,
``timeStep``, ``initialConditions``...).
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from fuelcell_control.config.chemistry import FuelCellType


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary format."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create model from dictionary."""
        return cls.model_validate(data)


class FuelCellConfiguration(_FrozenModel):
    """Static stack configuration for a single run."""

    chemistry: FuelCellType = Field(
        ...,
        alias="type",
        description="Fuel cell chemistry (PEM, SOFC, PAFC, MCFC, AFC)",
    )
    active_area: float = Field(
        ...,
        gt=0,
        description="Active electrode area in cm^2 (must be positive)",
    )
    operating_temperature: float = Field(
        ...,
        ge=-50,
        le=1200,
        description="Nominal stack temperature in °C",
    )
    operating_pressure: float = Field(
        ...,
        gt=0,
        le=100,
        description="Nominal stack pressure in bar",
    )
    fuel_flow_rate: float = Field(
        ...,
        gt=0,
        description="Initial fuel flow rate",
    )
    air_flow_rate: float = Field(
        ...,
        gt=0,
        description="Initial air flow rate",
    )


class Setpoints(_FrozenModel):
    voltage: float = Field(0.7, gt=0, description="Cell voltage setpoint in V")
    temperature: Optional[float] = Field(
        None,
        description="Temperature setpoint in °C (defaults to operating temperature)",
    )


class PIDGains(_FrozenModel):
    """PID gains for one control loop."""

    kp: float = Field(1.0, ge=0, le=10, description="Proportional gain")
    ki: float = Field(0.1, ge=0, le=5, description="Integral gain")
    kd: float = Field(0.01, ge=0, le=2, description="Derivative gain")


class ControlParameters(_FrozenModel):
    """
    Setpoints and controller tuning.

    The voltage loop uses ``tuning``. The temperature loop uses
    ``temperature_tuning`` when given and shares ``tuning`` otherwise.
    """

    setpoints: Setpoints = Field(default_factory=Setpoints)
    tuning: PIDGains = Field(default_factory=PIDGains)
    temperature_tuning: Optional[PIDGains] = None
    integral_limit: Optional[float] = Field(
        None,
        gt=0,
        description="Optional symmetric clamp on the PID integral (anti-windup)",
    )

    def temperature_gains(self) -> PIDGains:
        return self.temperature_tuning or self.tuning

    def temperature_setpoint(self, config: FuelCellConfiguration) -> float:
        if self.setpoints.temperature is None:
            return config.operating_temperature
        return self.setpoints.temperature


class InitialConditions(_FrozenModel):
    voltage: float = Field(0.3, ge=0, description="Initial cell voltage in V")
    current: float = Field(0.1, ge=0, description="Initial stack current in A")
    temperature: float = Field(25.0, ge=-50, le=1200, description="Initial temperature in °C")
    pressure: float = Field(1.0, gt=0, description="Initial pressure in bar")


class DisturbanceEvent(_FrozenModel):
    time: float = Field(..., ge=0, description="Event time in seconds")
    value: float = Field(..., description="Load change, or temperature/pressure level from this time onward")


class DisturbanceSchedule(_FrozenModel):
    """
    Disturbance overrides.

    Load changes apply once at their event time; temperature and pressure
    event lists hold their latest value (piecewise constant). Channels left
    as None follow the default profile. ``enabled=False`` silences every
    channel, including pressure noise.
    """

    enabled: bool = True
    load_changes: Optional[List[DisturbanceEvent]] = None
    temperature_variations: Optional[List[DisturbanceEvent]] = None
    pressure_variations: Optional[List[DisturbanceEvent]] = None
    pressure_noise: float = Field(
        0.05,
        ge=0,
        le=10,
        description="Peak-to-peak amplitude of the pressure noise in bar",
    )

    @field_validator("load_changes", "temperature_variations", "pressure_variations")
    @classmethod
    def sort_events(
        cls, v: Optional[List[DisturbanceEvent]]
    ) -> Optional[List[DisturbanceEvent]]:
        """Keep event lists ordered by time."""
        if v is None:
            return v
        return sorted(v, key=lambda event: event.time)


class SimulationParameters(_FrozenModel):
    """Run settings with validation."""

    duration: float = Field(
        ...,
        gt=0,
        le=86400,
        description="Simulated duration in seconds",
    )
    time_step: float = Field(
        ...,
        gt=0,
        le=60,
        description="Fixed integration step in seconds",
    )
    initial_conditions: InitialConditions = Field(default_factory=InitialConditions)
    disturbances: Optional[DisturbanceSchedule] = None
    seed: Optional[int] = Field(
        None,
        ge=0,
        description="Seed for the pressure noise source (None = system entropy)",
    )

    @model_validator(mode="after")
    def validate_step_count(self) -> "SimulationParameters":
        """Ensure the run produces at least one sample."""
        if self.num_steps < 1:
            raise ValueError(
                f"duration ({self.duration}s) is shorter than one "
                f"time step ({self.time_step}s)"
            )
        return self

    @property
    def num_steps(self) -> int:
        return int(math.floor(self.duration / self.time_step))
