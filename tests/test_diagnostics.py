"""Tests for energy and momentum diagnostics."""

import numpy as np
import pytest

from orbit_sim.physics.bodies import Body, System
from orbit_sim.physics.diagnostics import Diagnostics
from orbit_sim.physics.integrators import SymplecticEulerIntegrator


def test_energies_of_circular_orbit(circular_orbit_system):
    """K = 1/2 m v^2, U = -G M m / r, E = K + U."""
    diagnostics = Diagnostics(G=1.0)
    K, U, E = diagnostics.compute_energies(circular_orbit_system)

    assert K == pytest.approx(50.0)
    assert U == pytest.approx(-100.0)
    assert E == pytest.approx(-50.0)


def test_potential_uses_separation_floor():
    system = System.from_bodies([
        Body("A", 1.0, (0.0, 0.0), (0.0, 0.0)),
        Body("B", 1.0, (1e-9, 0.0), (0.0, 0.0)),
    ])
    U = Diagnostics(G=1.0, min_separation=0.5).potential_energy(system)
    assert U == pytest.approx(-2.0)


def test_single_body_has_no_potential():
    system = System.from_bodies([Body("A", 1.0, (0.0, 0.0), (1.0, 0.0))])
    assert Diagnostics().potential_energy(system) == 0.0


def test_momentum_and_center_of_mass():
    system = System.from_bodies([
        Body("A", 1.0, (0.0, 0.0), (0.0, 1.0)),
        Body("B", 3.0, (4.0, 0.0), (0.0, -1.0)),
    ])
    diagnostics = Diagnostics(G=1.0)

    assert np.allclose(diagnostics.linear_momentum(system), [0.0, -2.0])
    # Lz = sum(x * p_y - y * p_x) = 0 + 4 * -3
    assert diagnostics.angular_momentum(system) == pytest.approx(-12.0)
    com, com_v = diagnostics.center_of_mass(system)
    assert np.allclose(com, [3.0, 0.0])
    assert np.allclose(com_v, [0.0, -0.5])


def test_angular_momentum_3d_is_a_vector():
    system = System.from_bodies([Body("A", 2.0, (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))])
    L = Diagnostics().angular_momentum(system)
    assert np.allclose(L, [0.0, 0.0, 2.0])


def test_momentum_conserved_by_integration(circular_orbit_system):
    integrator = SymplecticEulerIntegrator(G=1.0)
    diagnostics = Diagnostics.for_integrator(integrator)
    P0 = diagnostics.linear_momentum(circular_orbit_system)

    system = circular_orbit_system
    for _ in range(100):
        system = integrator.step(system, 0.01)

    assert np.allclose(diagnostics.linear_momentum(system), P0, atol=1e-9)


def test_summary(circular_orbit_system):
    row = Diagnostics(G=1.0).summary(circular_orbit_system)
    assert set(row) == {"time", "K", "U", "E", "Lz", "P"}
    assert row["time"] == 0.0
    assert row["Lz"] == pytest.approx(100.0)
    assert row["P"] == pytest.approx(10.0)
