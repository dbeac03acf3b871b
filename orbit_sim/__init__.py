"""
Orbit Simulator - gravitational N-body simulation with rewindable history.

Features:
- Pairwise Newtonian gravity with a separation floor
- Multiple integrators (symplectic Euler, Euler, Verlet, RK4)
- Bounded history of 10,000 snapshots with review and resume
- System loader for JSON/YAML descriptions and prefab solar systems
- Headless CLI and interactive matplotlib viewer
"""

__version__ = "0.1.0"

from orbit_sim.errors import (
    InvalidBody,
    IndexOutOfRange,
    InvalidSpeed,
    InvalidTransition,
    LoadError,
    OrbitSimError,
)
from orbit_sim.physics.bodies import Body, System
from orbit_sim.physics.history import HistoryBuffer
from orbit_sim.physics.controller import SimulationController, SimulationMode
from orbit_sim.physics.integrators import get_integrator, list_integrators

__all__ = [
    "Body",
    "System",
    "HistoryBuffer",
    "SimulationController",
    "SimulationMode",
    "get_integrator",
    "list_integrators",
    "OrbitSimError",
    "InvalidBody",
    "IndexOutOfRange",
    "InvalidTransition",
    "InvalidSpeed",
    "LoadError",
]
