"""
Disturbance Generator

Time-indexed load, temperature and pressure perturbations.

Default profile:
- Load: +0.2 for 30 < t < 60, -0.1 for 120 < t < 150, 0 otherwise
- Temperature: 2·sin(0.01·t) °C
- Pressure: uniform noise of 0.05 bar peak-to-peak

Schedule overrides:
- Load changes are one-shot: an event's value is applied on the first
  sample at or after its time. The load factor multiplies the prior
  current every step, so a single application is a lasting step change.
- Temperature and pressure variations are held levels: the latest event
  value at or before t applies. Pressure noise stays on top.

The random source is an injected ``numpy.random.Generator`` so seeded runs
are reproducible. A generator serves one run and expects non-decreasing
sample times.
"""

import bisect
import logging
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from fuelcell_control.config.models import DisturbanceEvent, DisturbanceSchedule

logger = logging.getLogger(__name__)

# Default load steps: (start, end, value), open intervals
DEFAULT_LOAD_STEPS = ((30.0, 60.0, 0.2), (120.0, 150.0, -0.1))
DEFAULT_TEMPERATURE_AMPLITUDE = 2.0
DEFAULT_TEMPERATURE_FREQUENCY = 0.01


class Disturbances(NamedTuple):
    load: float
    temperature: float
    pressure: float


ZERO_DISTURBANCES = Disturbances(0.0, 0.0, 0.0)


class _HeldSchedule:
    """Piecewise-constant channel holding the latest event value."""

    def __init__(self, events: Sequence[DisturbanceEvent]):
        self.times: List[float] = [event.time for event in events]
        self.values: List[float] = [event.value for event in events]

    def __call__(self, time: float) -> float:
        idx = bisect.bisect_right(self.times, time) - 1
        if idx < 0:
            return 0.0
        return self.values[idx]


class _OneShotSchedule:
    """Channel that emits each event once, on the first sample at or after its time."""

    def __init__(self, events: Sequence[DisturbanceEvent]):
        self.events = list(events)
        self._cursor = 0

    def __call__(self, time: float) -> float:
        factor = 1.0
        while self._cursor < len(self.events) and self.events[self._cursor].time <= time:
            event = self.events[self._cursor]
            logger.debug(f"Load change {event.value:+.3f} applied at t={time:.2f}s")
            factor *= 1.0 + event.value
            self._cursor += 1
        return factor - 1.0


class DisturbanceGenerator:
    """
    Produces disturbances for a simulation time.

    Args:
        schedule: Optional overrides (None = default profile)
        rng: Random source for pressure noise (None = entropy-seeded generator)
    """

    def __init__(
        self,
        schedule: Optional[DisturbanceSchedule] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.schedule = schedule or DisturbanceSchedule()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.enabled = self.schedule.enabled
        self.pressure_noise = self.schedule.pressure_noise

        events = self.schedule.load_changes
        self._load = _OneShotSchedule(events) if events is not None else None
        self._temperature = self._held(self.schedule.temperature_variations)
        self._pressure = self._held(self.schedule.pressure_variations)

    @classmethod
    def seeded(
        cls, seed: Optional[int], schedule: Optional[DisturbanceSchedule] = None
    ) -> "DisturbanceGenerator":
        return cls(schedule=schedule, rng=np.random.default_rng(seed))

    @staticmethod
    def _held(events: Optional[List[DisturbanceEvent]]) -> Optional[_HeldSchedule]:
        if events is None:
            return None
        return _HeldSchedule(events)

    def load_step(self, time: float) -> float:
        if self._load is not None:
            return self._load(time)
        for start, end, value in DEFAULT_LOAD_STEPS:
            if start < time < end:
                return value
        return 0.0

    def temperature_drift(self, time: float) -> float:
        if self._temperature is not None:
            return self._temperature(time)
        return DEFAULT_TEMPERATURE_AMPLITUDE * float(np.sin(DEFAULT_TEMPERATURE_FREQUENCY * time))

    def pressure_noise_at(self, time: float) -> float:
        noise = self.pressure_noise * (self.rng.random() - 0.5)
        if self._pressure is not None:
            return self._pressure(time) + noise
        return noise

    def sample(self, time: float) -> Disturbances:
        """Disturbances at ``time``. Draws exactly one random number when enabled."""
        if not self.enabled:
            return ZERO_DISTURBANCES
        return Disturbances(
            load=self.load_step(time),
            temperature=self.temperature_drift(time),
            pressure=float(self.pressure_noise_at(time)),
        )
