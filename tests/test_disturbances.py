"""
Unit tests for the disturbance generator.
"""

import math

import numpy as np
import pytest

from fuelcell_control.config.models import DisturbanceSchedule
from fuelcell_control.core.disturbances import ZERO_DISTURBANCES, DisturbanceGenerator


def _events(*pairs):
    return [{"time": t, "value": v} for t, v in pairs]


@pytest.mark.unit
class TestDefaultProfile:
    @pytest.mark.parametrize(
        "t,expected",
        [
            (0.0, 0.0),
            (30.0, 0.0),
            (31.0, 0.2),
            (45.0, 0.2),
            (60.0, 0.0),
            (121.0, -0.1),
            (149.0, -0.1),
            (150.0, 0.0),
            (250.0, 0.0),
        ],
    )
    def test_load_steps(self, t, expected):
        gen = DisturbanceGenerator.seeded(0)

        assert gen.load_step(t) == expected

    def test_temperature_sinusoid(self):
        gen = DisturbanceGenerator.seeded(0)

        assert gen.temperature_drift(0.0) == 0.0
        assert gen.temperature_drift(50.0 * math.pi) == pytest.approx(2.0)
        assert gen.temperature_drift(150.0 * math.pi) == pytest.approx(-2.0)

    def test_pressure_noise_bounded(self):
        gen = DisturbanceGenerator.seeded(7)

        samples = [gen.sample(float(t)).pressure for t in range(500)]

        assert max(abs(p) for p in samples) <= 0.025
        assert len(set(samples)) > 1

    def test_seeded_generators_match(self):
        a = DisturbanceGenerator.seeded(42)
        b = DisturbanceGenerator.seeded(42)

        assert [a.sample(float(t)) for t in range(50)] == [b.sample(float(t)) for t in range(50)]

    def test_different_seeds_differ(self):
        a = DisturbanceGenerator.seeded(1)
        b = DisturbanceGenerator.seeded(2)

        assert [a.sample(float(t)).pressure for t in range(10)] != [
            b.sample(float(t)).pressure for t in range(10)
        ]


@pytest.mark.unit
class TestDisabledSchedule:
    def test_all_zero(self):
        gen = DisturbanceGenerator.seeded(0, DisturbanceSchedule(enabled=False))

        assert all(gen.sample(float(t)) == ZERO_DISTURBANCES for t in range(200))

    def test_draws_no_random_numbers(self):
        rng = np.random.default_rng(5)
        gen = DisturbanceGenerator(DisturbanceSchedule(enabled=False), rng=rng)
        for t in range(20):
            gen.sample(float(t))

        assert rng.random() == np.random.default_rng(5).random()


@pytest.mark.unit
class TestScheduleOverrides:
    def test_load_changes_fire_once(self):
        schedule = DisturbanceSchedule(load_changes=_events((100, 0.3), (200, -0.2)))
        gen = DisturbanceGenerator.seeded(0, schedule)

        loads = {t: gen.load_step(float(t)) for t in range(0, 300)}

        assert loads[99] == 0.0
        assert loads[100] == 0.3
        assert loads[101] == 0.0
        assert loads[200] == -0.2
        assert sum(1 for v in loads.values() if v != 0.0) == 2

    def test_load_change_fires_on_first_sample_after_event(self):
        schedule = DisturbanceSchedule(load_changes=_events((10.5, 0.5)))
        gen = DisturbanceGenerator.seeded(0, schedule)

        assert gen.load_step(10.0) == 0.0
        assert gen.load_step(12.0) == 0.5
        assert gen.load_step(14.0) == 0.0

    def test_coincident_load_changes_combine(self):
        schedule = DisturbanceSchedule(load_changes=_events((5, 0.5), (6, 1.0)))
        gen = DisturbanceGenerator.seeded(0, schedule)

        assert gen.load_step(10.0) == pytest.approx(1.5 * 2.0 - 1.0)

    def test_temperature_variations_hold_latest_value(self):
        schedule = DisturbanceSchedule(temperature_variations=_events((400, -15), (200, 10)))
        gen = DisturbanceGenerator.seeded(0, schedule)

        assert gen.temperature_drift(100.0) == 0.0
        assert gen.temperature_drift(200.0) == 10
        assert gen.temperature_drift(399.0) == 10
        assert gen.temperature_drift(1000.0) == -15

    def test_pressure_override_keeps_noise(self):
        schedule = DisturbanceSchedule(pressure_variations=_events((50, 0.5)))
        gen = DisturbanceGenerator.seeded(3, schedule)

        assert abs(gen.sample(10.0).pressure) <= 0.025
        assert abs(gen.sample(60.0).pressure - 0.5) <= 0.025

    def test_pressure_override_without_noise_is_exact(self):
        schedule = DisturbanceSchedule(
            pressure_variations=_events((50, 0.5), (150, -0.3)),
            pressure_noise=0.0,
        )
        gen = DisturbanceGenerator.seeded(3, schedule)

        assert gen.sample(100.0).pressure == 0.5
        assert gen.sample(200.0).pressure == -0.3

    def test_untouched_channels_keep_default_profile(self):
        schedule = DisturbanceSchedule(pressure_variations=_events((0, 0.1)))
        gen = DisturbanceGenerator.seeded(0, schedule)

        assert gen.load_step(45.0) == 0.2
        assert gen.temperature_drift(50.0 * math.pi) == pytest.approx(2.0)
