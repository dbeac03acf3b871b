"""Diagnostics for orbit simulations."""

from typing import Tuple, Union

import numpy as np

from orbit_sim.physics.bodies import G_SI, System
from orbit_sim.physics.forces import DEFAULT_MIN_SEPARATION


class Diagnostics:
    """Compute conserved quantities consistent with the force law."""

    def __init__(self, G: float = G_SI, min_separation: float = DEFAULT_MIN_SEPARATION):
        """Initialize diagnostics.

        Args:
            G: Gravitational constant
            min_separation: Softening floor (must match the force calculation)
        """
        self.G = G
        self.min_separation = min_separation

    @classmethod
    def for_integrator(cls, integrator) -> "Diagnostics":
        return cls(G=integrator.G, min_separation=integrator.min_separation)

    def kinetic_energy(self, system: System) -> float:
        """K = 0.5 * sum(m_i * v_i^2)"""
        v_sq = np.sum(system.velocities ** 2, axis=1)
        return float(0.5 * np.sum(system.masses * v_sq))

    def potential_energy(self, system: System) -> float:
        """U = -G * sum_{i<j} m_i * m_j / max(r_ij, min_separation)

        Uses the same separation floor as the force calculation.
        """
        positions = system.positions
        masses = system.masses
        n = len(masses)
        if n < 2:
            return 0.0
        r_diff = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        distance = np.sqrt(np.sum(r_diff ** 2, axis=2))
        clamped = np.maximum(distance, self.min_separation)
        i_upper, j_upper = np.triu_indices(n, k=1)
        pair_terms = masses[i_upper] * masses[j_upper] / clamped[i_upper, j_upper]
        return float(-self.G * np.sum(pair_terms))

    def compute_energies(self, system: System) -> Tuple[float, float, float]:
        """Compute kinetic, potential, and total energy.

        Returns:
            Tuple of (kinetic_energy, potential_energy, total_energy)
        """
        K = self.kinetic_energy(system)
        U = self.potential_energy(system)
        return K, U, K + U

    def linear_momentum(self, system: System) -> np.ndarray:
        """P = sum(m_i * v_i)"""
        return np.sum(system.masses[:, np.newaxis] * system.velocities, axis=0)

    def angular_momentum(self, system: System) -> Union[float, np.ndarray]:
        """Angular momentum about the origin.

        Returns:
            Lz as a float for 2D systems, the full vector for 3D systems
        """
        r = system.positions
        p = system.masses[:, np.newaxis] * system.velocities
        if system.dimension == 2:
            return float(np.sum(r[:, 0] * p[:, 1] - r[:, 1] * p[:, 0]))
        return np.sum(np.cross(r, p), axis=0)

    def center_of_mass(self, system: System) -> Tuple[np.ndarray, np.ndarray]:
        """Return (COM position, COM velocity)."""
        total_mass = np.sum(system.masses)
        com = np.sum(system.masses[:, np.newaxis] * system.positions, axis=0) / total_mass
        com_v = np.sum(system.masses[:, np.newaxis] * system.velocities, axis=0) / total_mass
        return com, com_v

    def summary(self, system: System) -> dict:
        """All diagnostics for one snapshot, as plain floats."""
        K, U, E = self.compute_energies(system)
        L = self.angular_momentum(system)
        Lz = float(L) if np.ndim(L) == 0 else float(L[-1])
        return {
            "time": system.time,
            "K": K,
            "U": U,
            "E": E,
            "Lz": Lz,
            "P": float(np.linalg.norm(self.linear_momentum(system))),
        }
