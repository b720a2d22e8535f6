"""
Performance Analyzer

Derives aggregate metrics from a completed run. The four headline metrics
(average power, average efficiency, stability index, response time) are the
fitness signals read by external optimizers.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import numpy as np

from fuelcell_control.config.chemistry import FuelCellType
from fuelcell_control.config.models import ControlParameters

logger = logging.getLogger(__name__)

RESPONSE_BAND = 0.1  # fraction of setpoint
SETTLING_BAND = 0.02  # fraction of setpoint
MEAN_POWER_EPSILON = 1e-12

# Recommendation thresholds
LOW_STABILITY = 0.7
HIGH_KP = 1.0
LOW_POWER_RATIO = 0.8
SLOW_RESPONSE = 30.0  # seconds
SOFC_MIN_TEMPERATURE = 700.0  # °C


@dataclass(frozen=True)
class PerformanceSummary:
    """
    Metrics of one run.

    Attributes:
        average_power: Mean power in W
        average_efficiency: Mean efficiency in %
        stability_index: 1 - coefficient of variation of power
        response_time: First time voltage is within 10% of setpoint
        peak_power: Maximum power in W
        overshoot: Peak voltage excess over setpoint in %
        settling_time: Time after which voltage stays within 2% of setpoint
        recommendations: Tuning hints derived from the metrics
    """

    average_power: float
    average_efficiency: float
    stability_index: float
    response_time: float
    peak_power: float = 0.0
    overshoot: float = 0.0
    settling_time: float = 0.0
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averagePower": self.average_power,
            "averageEfficiency": self.average_efficiency,
            "stabilityIndex": self.stability_index,
            "responseTime": self.response_time,
            "peakPower": self.peak_power,
            "overshoot": self.overshoot,
            "settlingTime": self.settling_time,
            "recommendations": list(self.recommendations),
        }


def stability_index(power: np.ndarray) -> float:
    """1 - std/mean of power; 0.0 when the mean is numerically zero."""
    mean_power = float(np.mean(power))
    if abs(mean_power) < MEAN_POWER_EPSILON:
        logger.debug("Mean power is ~0, stability index undefined; reporting 0.0")
        return 0.0
    return 1.0 - float(np.std(power)) / mean_power


def response_time(voltage: np.ndarray, time: np.ndarray, setpoint: float) -> float:
    """
    Time of the first sample after t[0] within 10% of the setpoint.

    Falls back to the last sample time when the band is never reached.
    """
    tolerance = abs(setpoint) * RESPONSE_BAND
    within = np.abs(voltage[1:] - setpoint) <= tolerance
    hits = np.flatnonzero(within)
    if hits.size:
        return float(time[hits[0] + 1])
    return float(time[-1])


def settling_time(voltage: np.ndarray, time: np.ndarray, setpoint: float) -> float:
    tolerance = abs(setpoint) * SETTLING_BAND
    outside = np.flatnonzero(np.abs(voltage - setpoint) > tolerance)
    if outside.size == 0:
        return float(time[0])
    last = outside[-1]
    if last + 1 >= len(time):
        return float(time[-1])
    return float(time[last + 1])


def overshoot_percent(voltage: np.ndarray, setpoint: float) -> float:
    excess = float(np.max(voltage)) - setpoint
    if excess <= 0 or setpoint == 0:
        return 0.0
    return excess / abs(setpoint) * 100.0


class PerformanceAnalyzer:
    """
    Computes a PerformanceSummary from completed series.

    Args:
        voltage_setpoint: Voltage loop setpoint in V
    """

    def __init__(self, voltage_setpoint: float):
        self.voltage_setpoint = voltage_setpoint

    def analyze(
        self,
        time: np.ndarray,
        voltage: np.ndarray,
        power: np.ndarray,
        efficiency: np.ndarray,
    ) -> PerformanceSummary:
        if len(time) == 0:
            raise ValueError("Cannot analyze an empty run")

        average_power = float(np.mean(power))
        average_efficiency = float(np.mean(efficiency))

        return PerformanceSummary(
            average_power=round(average_power, 2),
            average_efficiency=round(average_efficiency, 2),
            stability_index=round(stability_index(power), 3),
            response_time=round(response_time(voltage, time, self.voltage_setpoint), 2),
            peak_power=round(float(np.max(power)), 2),
            overshoot=round(overshoot_percent(voltage, self.voltage_setpoint), 2),
            settling_time=round(settling_time(voltage, time, self.voltage_setpoint), 2),
        )


def generate_recommendations(
    summary: PerformanceSummary,
    chemistry: FuelCellType,
    control: ControlParameters,
    temperature_setpoint: float,
) -> List[str]:
    """Tuning hints from run metrics and configuration."""
    recommendations: List[str] = []

    if summary.stability_index < LOW_STABILITY:
        recommendations.append("Consider reducing controller gains to improve stability")
        if control.tuning.kp > HIGH_KP:
            recommendations.append("Voltage controller Kp may be too high")

    if summary.peak_power > 0 and summary.average_power / summary.peak_power < LOW_POWER_RATIO:
        recommendations.append("System performance below optimal - check setpoints")

    if summary.response_time > SLOW_RESPONSE:
        recommendations.append("Slow response time - consider increasing proportional gain")

    if FuelCellType(chemistry) is FuelCellType.SOFC and temperature_setpoint < SOFC_MIN_TEMPERATURE:
        recommendations.append("SOFC operating temperature may be too low")

    return recommendations
