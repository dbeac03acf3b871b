"""Shared fixtures."""

import matplotlib

# Tests never open windows
matplotlib.use("Agg")

import pytest

from orbit_sim.physics.bodies import Body, System


@pytest.fixture
def two_body_system():
    """Two unit masses one unit apart, at rest."""
    return System.from_bodies([
        Body("A", 1.0, (0.0, 0.0), (0.0, 0.0)),
        Body("B", 1.0, (1.0, 0.0), (0.0, 0.0)),
    ])


@pytest.fixture
def circular_orbit_system():
    """A heavy central mass with a light body on a circular orbit (G = 1)."""
    M, r = 1000.0, 10.0
    v_circ = (M / r) ** 0.5
    return System.from_bodies([
        Body("Star", M, (0.0, 0.0), (0.0, 0.0)),
        Body("Planet", 1.0, (r, 0.0), (0.0, v_circ)),
    ])
