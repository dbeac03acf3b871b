"""Integrator factory for looking schemes up by name."""

from typing import Dict, List, Type

from orbit_sim.physics.integrators.base import Integrator
from orbit_sim.physics.integrators.euler import EulerIntegrator
from orbit_sim.physics.integrators.rk4 import RK4Integrator
from orbit_sim.physics.integrators.symplectic_euler import SymplecticEulerIntegrator
from orbit_sim.physics.integrators.verlet import VerletIntegrator

DEFAULT_INTEGRATOR = "symplectic_euler"

_INTEGRATORS: Dict[str, Type[Integrator]] = {
    "symplectic_euler": SymplecticEulerIntegrator,
    "euler": EulerIntegrator,
    "verlet": VerletIntegrator,
    "rk4": RK4Integrator,
}


def list_integrators() -> List[str]:
    """List the names accepted by :func:`get_integrator`."""
    return list(_INTEGRATORS)


def get_integrator(name: str = DEFAULT_INTEGRATOR, **kwargs) -> Integrator:
    """Get an integrator instance.

    Args:
        name: Integrator name ('symplectic_euler', 'euler', 'verlet', 'rk4')
        **kwargs: Passed to the integrator constructor (G, min_separation)

    Returns:
        Integrator instance

    Raises:
        ValueError: If the name is unknown
    """
    integrator_class = _INTEGRATORS.get(name.lower().replace("-", "_"))
    if integrator_class is None:
        raise ValueError(f"Unknown integrator '{name}'. Available: {list_integrators()}")
    return integrator_class(**kwargs)
