"""
Control Module

Feedback controllers for the fuel cell stack loops.
"""

from fuelcell_control.control.pid_controller import ControllerState, PIDController

__all__ = [
    "ControllerState",
    "PIDController",
]
