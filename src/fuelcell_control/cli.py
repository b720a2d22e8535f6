"""
Fuel Cell Control CLI
=====================

Developer entry point for running closed-loop simulations from a shell.
Provides commands for running presets or custom runs and listing presets.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fuelcell_control.config import (
    ConfigPreset,
    FuelCellType,
    get_preset_description,
    list_presets,
    load_preset,
)
from fuelcell_control.core.error_handling import error_context
from fuelcell_control.core.exceptions import FuelCellControlException
from fuelcell_control.core.simulation import SimulationResult, simulate_control_system
from fuelcell_control.utils.logging_config import setup_logging

app = typer.Typer(
    help="Fuel Cell Control System - Closed-Loop PID Simulation CLI",
    add_completion=False,
)
console = Console()


def _summary_table(result: SimulationResult) -> Table:
    perf = result.performance
    table = Table(title="Performance Summary", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Samples", str(len(result)))
    table.add_row("Average power [W]", f"{perf.average_power:.2f}")
    table.add_row("Peak power [W]", f"{perf.peak_power:.2f}")
    table.add_row("Average efficiency [%]", f"{perf.average_efficiency:.2f}")
    table.add_row("Stability index", f"{perf.stability_index:.3f}")
    table.add_row("Response time [s]", f"{perf.response_time:.2f}")
    table.add_row("Settling time [s]", f"{perf.settling_time:.2f}")
    table.add_row("Voltage overshoot [%]", f"{perf.overshoot:.2f}")
    return table


@app.command()
def run(
    preset: Optional[str] = typer.Option(
        None,
        "--preset",
        "-p",
        help=f"Simulation preset: {', '.join(ConfigPreset.all())}",
    ),
    chemistry: FuelCellType = typer.Option(
        FuelCellType.PEM, "--chemistry", "-c", help="Fuel cell chemistry"
    ),
    active_area: float = typer.Option(100.0, "--area", help="Active area in cm^2"),
    temperature: float = typer.Option(70.0, "--temperature", help="Operating temperature in °C"),
    pressure: float = typer.Option(1.5, "--pressure", help="Operating pressure in bar"),
    duration: float = typer.Option(300.0, "--duration", "-d", help="Duration in seconds"),
    time_step: float = typer.Option(1.0, "--time-step", "-t", help="Time step in seconds"),
    kp: float = typer.Option(1.0, "--kp", help="Proportional gain"),
    ki: float = typer.Option(0.1, "--ki", help="Integral gain"),
    kd: float = typer.Option(0.01, "--kd", help="Derivative gain"),
    voltage_setpoint: float = typer.Option(0.7, "--voltage-setpoint", help="Voltage setpoint in V"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Seed for pressure noise"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result JSON here"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Run a closed-loop simulation and print its performance summary.
    """
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING)

    console.print(
        Panel.fit(
            "Fuel Cell Control Simulation",
            style="bold blue",
            subtitle=f"{chemistry.value} stack",
        )
    )

    config = {
        "type": chemistry.value,
        "active_area": active_area,
        "operating_temperature": temperature,
        "operating_pressure": pressure,
        "fuel_flow_rate": 5.0,
        "air_flow_rate": 10.0,
    }
    control = {
        "setpoints": {"voltage": voltage_setpoint, "temperature": temperature},
        "tuning": {"kp": kp, "ki": ki, "kd": kd},
    }

    try:
        if preset:
            sim_params = load_preset(preset, seed=seed)
            console.print(f"[green]Loaded preset: {preset}[/green]")
            console.print(f"[dim]{get_preset_description(preset)}[/dim]")
        else:
            sim_params = {"duration": duration, "time_step": time_step, "seed": seed}

        result = simulate_control_system(config, control, sim_params)
    except (ValueError, FuelCellControlException) as e:
        console.print(f"[bold red]Simulation failed:[/bold red] {e}")
        raise typer.Exit(code=1)

    console.print(_summary_table(result))
    for hint in result.performance.recommendations:
        console.print(f"[yellow]- {hint}[/yellow]")

    if output:
        with error_context(f"Writing {output}"):
            output.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        console.print(f"[green]Result written to {output}[/green]")


@app.command()
def presets():
    """
    List available simulation presets.
    """
    table = Table(title="Simulation Presets", show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Description")
    for name in list_presets():
        table.add_row(name, get_preset_description(name))
    console.print(table)


if __name__ == "__main__":
    app()
