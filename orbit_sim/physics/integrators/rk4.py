"""Runge-Kutta 4th order integrator (high accuracy, O(h⁴))."""

from orbit_sim.physics.integrators.base import Integrator


class RK4Integrator(Integrator):
    """Runge-Kutta 4th order method - high accuracy integrator.

    Four force evaluations per step. Not symplectic, so energy still drifts
    slowly over very long runs.
    """

    @property
    def name(self) -> str:
        return "rk4"

    @property
    def order(self) -> int:
        return 4

    def advance(self, positions, velocities, acceleration, dt):
        """RK4 step for dr/dt = v, dv/dt = a(r).

        k1_r = v                 k1_v = a(r)
        k2_r = v + k1_v*dt/2     k2_v = a(r + k1_r*dt/2)
        k3_r = v + k2_v*dt/2     k3_v = a(r + k2_r*dt/2)
        k4_r = v + k3_v*dt       k4_v = a(r + k3_r*dt)

        r_new = r + (k1_r + 2*k2_r + 2*k3_r + k4_r)*dt/6
        v_new = v + (k1_v + 2*k2_v + 2*k3_v + k4_v)*dt/6
        """
        half = 0.5 * dt

        k1_r = velocities
        k1_v = acceleration(positions)

        k2_r = velocities + k1_v * half
        k2_v = acceleration(positions + k1_r * half)

        k3_r = velocities + k2_v * half
        k3_v = acceleration(positions + k2_r * half)

        k4_r = velocities + k3_v * dt
        k4_v = acceleration(positions + k3_r * dt)

        sixth = dt / 6.0
        new_positions = positions + (k1_r + 2.0 * k2_r + 2.0 * k3_r + k4_r) * sixth
        new_velocities = velocities + (k1_v + 2.0 * k2_v + 2.0 * k3_v + k4_v) * sixth
        return new_positions, new_velocities
