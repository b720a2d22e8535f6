import time

import numpy as np

from fuelcell_control.config import ControlParameters, FuelCellConfiguration, load_preset
from fuelcell_control.core.batch import BatchEvaluator, Candidate
from fuelcell_control.core.simulation import simulate_control_system


def simulation_perf():
    # Setup
    config = FuelCellConfiguration(
        chemistry="PEM",
        active_area=100.0,
        operating_temperature=70.0,
        operating_pressure=1.5,
        fuel_flow_rate=5.0,
        air_flow_rate=10.0,
    )
    control = ControlParameters()
    sim_params = load_preset("LOAD_FOLLOWING", seed=0)

    # Warm up
    print("Warming up...")
    simulate_control_system(config, control, sim_params)

    print(f"Timing single runs ({sim_params.num_steps} steps)...")
    times = []
    for i in range(20):
        t0 = time.perf_counter()
        simulate_control_system(config, control, sim_params)
        dt = time.perf_counter() - t0
        times.append(dt)
        print(f"Run {i}: {dt*1000:.3f} ms")

    avg = np.mean(times)
    print(f"Average Run Time: {avg*1000:.3f} ms")

    # Population of 64 tunings, as an optimizer generation would submit
    rng = np.random.default_rng(0)
    population = [
        Candidate(config, {"tuning": {"kp": kp, "ki": ki, "kd": kd}})
        for kp, ki, kd in rng.uniform([0.0, 0.0, 0.0], [5.0, 1.0, 0.5], size=(64, 3))
    ]
    for use_processes in (False, True):
        batch = BatchEvaluator(use_processes=use_processes).evaluate(population, sim_params)
        label = "processes" if use_processes else "threads"
        print(
            f"Batch ({label}): {batch.successful_count}/{len(population)} "
            f"in {batch.batch_duration_seconds:.3f} s"
        )


if __name__ == "__main__":
    simulation_perf()
