"""Abstract base class for numerical integrators."""

from abc import ABC, abstractmethod
from typing import Callable, Tuple

import numpy as np

from orbit_sim.physics.bodies import G_SI, System
from orbit_sim.physics.forces import DEFAULT_MIN_SEPARATION, ForceCalculator

AccelerationFn = Callable[[np.ndarray], np.ndarray]


class Integrator(ABC):
    """Abstract interface for numerical integrators.

    Subclasses implement :meth:`advance` on raw arrays; :meth:`step` wraps it
    to turn one System snapshot into the next. Integrators hold no state
    between steps, so the same input always gives the same output.
    """

    def __init__(self, G: float = G_SI, min_separation: float = DEFAULT_MIN_SEPARATION):
        """Initialize integrator.

        Args:
            G: Gravitational constant
            min_separation: Softening floor passed to the force calculator
        """
        self.force_calculator = ForceCalculator(G=G, min_separation=min_separation)

    @property
    def G(self) -> float:
        return self.force_calculator.G

    @property
    def min_separation(self) -> float:
        return self.force_calculator.min_separation

    @abstractmethod
    def advance(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        acceleration: AccelerationFn,
        dt: float,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Perform one integration step.

        Args:
            positions: Current positions (n, dim)
            velocities: Current velocities (n, dim)
            acceleration: Maps positions to accelerations (n, dim)
            dt: Time step (already scaled by the speed multiplier)

        Returns:
            Tuple of (new_positions, new_velocities)
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (e.g., 1 for Euler, 2 for Verlet, 4 for RK4)."""
        pass

    def step(self, system: System, dt: float) -> System:
        """Advance a snapshot by one step of ``dt * system.speed``.

        Immovable bodies keep their position and velocity but still attract
        everything else.

        Args:
            system: Snapshot to advance
            dt: Base time step

        Returns:
            New System snapshot
        """
        effective_dt = dt * system.speed
        masses = system.masses
        pinned = system.pinned

        def acceleration(positions: np.ndarray) -> np.ndarray:
            acc = self.force_calculator.compute_accelerations(positions, masses)
            if pinned.any():
                acc[pinned] = 0.0
            return acc

        new_positions, new_velocities = self.advance(
            system.positions, system.velocities, acceleration, effective_dt
        )
        if pinned.any():
            new_positions = np.where(pinned[:, np.newaxis], system.positions, new_positions)
            new_velocities = np.where(pinned[:, np.newaxis], system.velocities, new_velocities)
        return system.advanced(new_positions, new_velocities, effective_dt)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(G={self.G:g}, min_separation={self.min_separation:g})"
