"""Explicit Euler integrator (baseline, O(h) accuracy)."""

from orbit_sim.physics.integrators.base import Integrator


class EulerIntegrator(Integrator):
    """Explicit Euler method - simple first-order integrator.

    Positions move with the old velocity, so orbits spiral outward over time.
    Kept as a baseline for comparisons.
    """

    @property
    def name(self) -> str:
        return "euler"

    @property
    def order(self) -> int:
        return 1

    def advance(self, positions, velocities, acceleration, dt):
        """Euler step: r_new = r + v*dt, v_new = v + a(r)*dt."""
        accelerations = acceleration(positions)
        new_positions = positions + velocities * dt
        new_velocities = velocities + accelerations * dt
        return new_positions, new_velocities
