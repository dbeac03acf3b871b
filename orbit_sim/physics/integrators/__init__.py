"""Numerical integrators for orbit simulations."""

from orbit_sim.physics.integrators.base import Integrator
from orbit_sim.physics.integrators.euler import EulerIntegrator
from orbit_sim.physics.integrators.symplectic_euler import SymplecticEulerIntegrator
from orbit_sim.physics.integrators.verlet import VerletIntegrator
from orbit_sim.physics.integrators.rk4 import RK4Integrator
from orbit_sim.physics.integrators.factory import get_integrator, list_integrators

__all__ = [
    "Integrator",
    "EulerIntegrator",
    "SymplecticEulerIntegrator",
    "VerletIntegrator",
    "RK4Integrator",
    "get_integrator",
    "list_integrators",
]
