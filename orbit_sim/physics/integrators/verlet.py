"""Velocity Verlet integrator (better energy conservation, O(h²) accuracy)."""

from orbit_sim.physics.integrators.base import Integrator


class VerletIntegrator(Integrator):
    """Velocity Verlet integrator - second-order, symplectic.

    Canonical Velocity Verlet algorithm:
    1. x_new = x + v*dt + 0.5*a_old*dt^2
    2. (recompute forces to get a_new)
    3. v_new = v + 0.5*(a_old + a_new)*dt

    Two force evaluations per step.
    """

    @property
    def name(self) -> str:
        return "verlet"

    @property
    def order(self) -> int:
        return 2

    def advance(self, positions, velocities, acceleration, dt):
        a_old = acceleration(positions)
        new_positions = positions + velocities * dt + a_old * (0.5 * dt * dt)
        a_new = acceleration(new_positions)
        new_velocities = velocities + (a_old + a_new) * (0.5 * dt)
        return new_positions, new_velocities
