"""Pairwise Newtonian gravity, vectorised over all body pairs.

The minimum separation is a softening floor: below it the force magnitude
stops growing as 1/r^2 and is evaluated at ``min_separation`` instead. This is
a numerical guard against infinite forces, not a physical law. Bodies at
exactly the same position exert no force on each other since the direction
between them is undefined.
"""

import numpy as np

from orbit_sim.physics.bodies import G_SI

DEFAULT_MIN_SEPARATION = 1e-3


class ForceCalculator:
    """Direct O(n^2) summation of pairwise gravitational forces."""

    def __init__(self, G: float = G_SI, min_separation: float = DEFAULT_MIN_SEPARATION):
        """Initialize force calculator.

        Args:
            G: Gravitational constant
            min_separation: Softening floor for pair distances (must be > 0)
        """
        if not np.isfinite(G) or G < 0:
            raise ValueError(f"G must be finite and non-negative, got {G}")
        if not np.isfinite(min_separation) or min_separation <= 0:
            raise ValueError(f"min_separation must be positive, got {min_separation}")
        self.G = float(G)
        self.min_separation = float(min_separation)

    def pair_geometry(self, positions: np.ndarray):
        """Return ``(r_diff, distance)`` for every ordered pair.

        ``r_diff[i, j]`` is the vector from body i to body j.
        """
        positions = np.asarray(positions, dtype=np.float64)
        r_diff = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        distance = np.sqrt(np.sum(r_diff ** 2, axis=2))
        return r_diff, distance

    def compute_forces(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        """Compute the net gravitational force on every body.

        Args:
            positions: (n, dim) array
            masses: (n,) array

        Returns:
            (n, dim) array of forces
        """
        masses = np.asarray(masses, dtype=np.float64)
        r_diff, distance = self.pair_geometry(positions)
        clamped = np.maximum(distance, self.min_separation)

        # |F| / |r| so that F = scale * r_diff; zero on the diagonal and for coincident bodies
        scale = np.zeros_like(distance)
        np.divide(
            self.G * np.outer(masses, masses),
            clamped ** 2 * distance,
            out=scale,
            where=distance > 0.0,
        )
        return np.sum(scale[:, :, np.newaxis] * r_diff, axis=1)

    def compute_accelerations(self, positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
        """Compute a = F / m for every body."""
        masses = np.asarray(masses, dtype=np.float64)
        return self.compute_forces(positions, masses) / masses[:, np.newaxis]
