"""Tests for the system builder, prefabs and JSON/YAML loading."""

import json
import math
from pathlib import Path

import numpy as np
import pytest

from orbit_sim.errors import LoadError
from orbit_sim.loader import (
    AsteroidBelt,
    Locus,
    MoonRing,
    Orbit,
    SystemBuilder,
    get_body,
    get_system,
    list_systems,
    load,
    load_file,
    load_system,
)
from orbit_sim.loader.builder import ASTEROID_MASS_AT_1, sphere_radius
from orbit_sim.physics.bodies import Body


def star(name="Star", mass=1000.0):
    return Body(name, mass, (0.0, 0.0), (0.0, 0.0))


def test_children_are_placed_relative_to_parent():
    planet = Orbit(star("Planet", 10.0), (100.0, 0.0), (0.0, 5.0))
    planet.add(Orbit(star("Moon", 1.0), (0.0, 2.0), (1.0, 0.0)))
    system = SystemBuilder(G=1.0).add(Orbit(star(), (10.0, 10.0), (1.0, 1.0)).add(planet)).construct()

    assert system.names == ("Star", "Planet", "Moon")
    assert system.body("Planet").position == (110.0, 10.0)
    assert system.body("Planet").velocity == (1.0, 6.0)
    assert system.body("Moon").position == (110.0, 12.0)
    assert system.body("Moon").velocity == (2.0, 6.0)


def test_locus_children_start_at_rest_relative_to_it():
    locus = Locus((5.0, 5.0)).add(Orbit(star("A"), (1.0, 0.0), (0.0, 2.0)))
    system = SystemBuilder().add(locus).construct()
    assert system.names == ("A",)
    assert system.body("A").position == (6.0, 5.0)
    assert system.body("A").velocity == (0.0, 2.0)


def test_locus_children_move_with_a_moving_parent():
    locus = Locus((1.0, 0.0)).add(Orbit(star("C", 1.0), (1.0, 0.0), (0.0, 0.0)))
    parent = Orbit(star("Planet", 10.0), (0.0, 0.0), (0.0, 50.0)).add(locus)
    system = SystemBuilder(G=1.0).add(parent).construct()

    assert system.names == ("Planet", "C")
    assert system.body("C").position == (2.0, 0.0)
    assert system.body("C").velocity == (0.0, 50.0)


def test_builder_is_single_use():
    builder = SystemBuilder().add(Orbit(star()))
    builder.construct()
    with pytest.raises(RuntimeError):
        builder.construct()
    with pytest.raises(RuntimeError):
        builder.add(Orbit(star("Other")))


def test_builder_wraps_invalid_systems():
    builder = SystemBuilder().add(Orbit(star())).add(Orbit(star()))
    with pytest.raises(LoadError):
        builder.construct()
    with pytest.raises(LoadError):
        SystemBuilder().construct()


def test_moon_ring_is_seeded_and_circular():
    def build(seed):
        root = Orbit(star()).add(MoonRing(8, 1.0, 2.0, 10.0, 20.0, seed=seed))
        return SystemBuilder(G=1.0).add(root).construct()

    first, again, other = build(3), build(3), build(4)
    assert first == again
    assert first != other
    assert first.n_bodies == 9

    for moon in first.bodies[1:]:
        r = math.hypot(*moon.position)
        speed = math.hypot(*moon.velocity)
        assert 10.0 <= r <= 20.0
        assert 1.0 <= moon.mass <= 2.0
        assert speed == pytest.approx(math.sqrt((1000.0 + moon.mass) / r))
        # Counter-clockwise: r x v points out of the plane
        assert moon.position[0] * moon.velocity[1] - moon.position[1] * moon.velocity[0] > 0


def test_clockwise_moons():
    root = Orbit(star()).add(MoonRing(4, 1.0, 1.0, 10.0, 10.0, clockwise=True))
    system = SystemBuilder(G=1.0).add(root).construct()
    for moon in system.bodies[1:]:
        assert moon.position[0] * moon.velocity[1] - moon.position[1] * moon.velocity[0] < 0


def test_asteroid_belt_uses_up_total_mass():
    total = 3.0 * ASTEROID_MASS_AT_1
    root = Orbit(star(mass=1e30)).add(AsteroidBelt(total, 1e11, 2e11, seed=1))
    system = SystemBuilder().add(root).construct()

    asteroids = system.bodies[1:]
    assert len(asteroids) >= 1
    assert sum(a.mass for a in asteroids) == pytest.approx(total)
    assert all(a.name[-1] in "CSM" for a in asteroids)


def test_asteroid_belt_max_bodies():
    root = Orbit(star(mass=1e30)).add(AsteroidBelt(1e30, 1e11, 2e11, max_bodies=12, seed=2))
    system = SystemBuilder().add(root).construct()
    assert system.n_bodies == 13


@pytest.mark.parametrize("kwargs", [
    {"count": -1, "min_mass": 1.0, "max_mass": 2.0, "min_orbit": 1.0, "max_orbit": 2.0},
    {"count": 1, "min_mass": 3.0, "max_mass": 2.0, "min_orbit": 1.0, "max_orbit": 2.0},
    {"count": 1, "min_mass": 1.0, "max_mass": 2.0, "min_orbit": 0.0, "max_orbit": 2.0},
])
def test_moon_ring_validation(kwargs):
    with pytest.raises(ValueError):
        MoonRing(**kwargs)


def test_sphere_radius():
    assert sphere_radius(4.0 / 3.0 * math.pi, 1.0) == pytest.approx(1.0)


def test_prefab_bodies():
    sun = get_body("Sol")
    assert sun.immovable
    assert get_body("Halley's Comet").name == "Halley's Comet"
    with pytest.raises(KeyError):
        get_body("Vulcan")


def test_prefab_systems():
    assert list_systems() == ["collision_fun", "ours"]

    ours = get_system("ours")
    assert ours.n_bodies == 13
    assert ours.body("Sol").immovable
    assert ours.body("Luna").position == pytest.approx((149_598_023_000.0, 384_399_000.0))

    collision = get_system("collision_fun")
    assert "Luna 10" in collision.names
    assert collision.n_bodies == 12

    with pytest.raises(KeyError):
        get_system("andromeda")


def test_load_json_description():
    text = json.dumps([
        {
            "body": "sol",
            "kinemat": {"pos": [0, 0], "vel": [0, 0]},
            "children": [
                {
                    "body": {"name": "Rock", "mass": 1e20, "radius": 1e5, "color": "#112233"},
                    "kinemat": {"pos": [1e9, 0], "vel": [0, 3000]},
                },
                {"count": 3, "min_mass": 1e15, "max_mass": 1e16, "min_orbit": 1e7, "max_orbit": 2e7},
            ],
        }
    ])

    system = load(text)

    assert system.n_bodies == 5
    assert system.body("Rock").color == 0x112233
    assert system.body("Rock").velocity == (0.0, 3000.0)
    assert system.time == 0.0


def test_load_yaml_description():
    text = """
- pos: [1.0e+9, 0.0]
  children:
    - body: {name: Alpha, mass: 2.0e+30, radius: 7.0e+8}
      kinemat: {pos: [0.0, 0.0], vel: [0.0, 0.0]}
      children:
        - total_mass: 1e21
          min_orbit: 1e11
          max_orbit: 2e11
          max_bodies: 5
          seed: 9
"""
    system = load(text, fmt="yaml")
    assert system.names[0] == "Alpha"
    assert system.body("Alpha").position == (1e9, 0.0)
    assert 1 <= system.n_bodies <= 6


def test_loading_is_reproducible():
    text = json.dumps([{
        "body": "earth",
        "kinemat": {"pos": [0, 0], "vel": [0, 0]},
        "children": [{"count": 5, "min_mass": 1e15, "max_mass": 1e16,
                      "min_orbit": 1e7, "max_orbit": 2e7, "seed": 11}],
    }])
    assert load(text) == load(text)


@pytest.mark.parametrize("text", [
    "not json",
    "[]",
    "{}",
    '[{"kinemat": {"pos": [0, 0], "vel": [0, 0]}}]',
    '[{"body": "sol"}]',
    '[{"body": "vulcan", "kinemat": {"pos": [0, 0], "vel": [0, 0]}}]',
    '[{"body": "sol", "kinemat": {"pos": [0], "vel": [0, 0]}}]',
    '[{"body": {"name": "X", "mass": -5}, "kinemat": {"pos": [0, 0], "vel": [0, 0]}}]',
    '[{"body": "sol", "kinemat": {"pos": [0, 0], "vel": [0, 0]}, "spin": 3}]',
    '[{"count": 2, "min_mass": 5, "max_mass": 1, "min_orbit": 1, "max_orbit": 2}]',
    '[{"pos": [0, 0, 0], "children": [{"body": "sol", "kinemat": {"pos": [0, 0], "vel": [0, 0]}}]}]',
])
def test_malformed_descriptions_raise_load_error(text):
    with pytest.raises(LoadError):
        load(text)


def test_unsupported_format():
    with pytest.raises(LoadError):
        load("[]", fmt="toml")


def test_load_file_and_load_system(tmp_path):
    path = tmp_path / "tiny.yaml"
    path.write_text("- body: earth\n  kinemat: {pos: [0, 0], vel: [0, 0]}\n")

    assert load_file(path).names == ("Earth",)
    assert load_system(str(path)).names == ("Earth",)
    assert load_system("ours").n_bodies == 13

    with pytest.raises(LoadError):
        load_system("nowhere")
    with pytest.raises(LoadError):
        load_system(str(tmp_path / "missing.json"))
    with pytest.raises(LoadError):
        load_file(tmp_path / "system.txt")


SYSTEMS_DIR = Path(__file__).resolve().parent.parent / "systems"


def test_bundled_system_files():
    inner = load_system(str(SYSTEMS_DIR / "inner.yaml"))
    assert inner.body("Sol").immovable
    assert "Luna" in inner.names

    binary = load_system(str(SYSTEMS_DIR / "binary.json"))
    assert binary.names == ("Castor", "Pollux", "Wanderer")
    assert np.allclose(binary.body("Wanderer").velocity, (0.0, 14900.0 + 66700.0))
