"""Physics engine: bodies, integration, history and the simulation controller."""

from orbit_sim.physics.bodies import G_SI, Body, System
from orbit_sim.physics.forces import ForceCalculator
from orbit_sim.physics.history import HISTORY_CAPACITY, HistoryBuffer, HistorySlot
from orbit_sim.physics.controller import SimulationController, SimulationMode
from orbit_sim.physics.diagnostics import Diagnostics

__all__ = [
    "G_SI",
    "Body",
    "System",
    "ForceCalculator",
    "HISTORY_CAPACITY",
    "HistoryBuffer",
    "HistorySlot",
    "SimulationController",
    "SimulationMode",
    "Diagnostics",
]
