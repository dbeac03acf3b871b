"""Prefabricated bodies and solar systems.

Prefab bodies carry no kinematics (position and velocity are zero); place
them with :class:`orbit_sim.loader.builder.Orbit`.
"""

import math
from typing import Callable, Dict, List

from orbit_sim.physics.bodies import G_SI, Body, System
from orbit_sim.loader.builder import Orbit, SystemBuilder, renamed

_ORIGIN = (0.0, 0.0)


def _body(name, mass, radius, color, outline, immovable=False) -> Body:
    return Body(name=name, mass=mass, position=_ORIGIN, velocity=_ORIGIN,
                radius=radius, color=color, outline=outline, immovable=immovable)


# Real bodies (SI units)

def sol() -> Body:
    """Our Sun. Will not move."""
    return _body("Sol", 1.9884e30, 695_700_000.0, 0xFFDF22, 0xE87513, immovable=True)


def mercury() -> Body:
    return _body("Mercury", 3.3011e23, 1_439_700.0, 0xA79EA1, 0x737375)


def venus() -> Body:
    return _body("Venus", 4.8675e24, 6_051_800.0, 0xFCD172, 0xAF5A23)


def earth() -> Body:
    return _body("Earth", 5.97237e24, 6_371_000.0, 0x3669FF, 0x56FF2D)


def luna() -> Body:
    return _body("Luna", 7.342e22, 1_737_400.0, 0x3C3A38, 0xADACA9)


def mars() -> Body:
    return _body("Mars", 6.4171e23, 3_398_500.0, 0xFF5C26, 0xC9AF9E)


def moon(mass: float, radius: float, name: str = "Anonymous Moon") -> Body:
    """A generic moon."""
    return _body(name, mass, radius, 0xE8B374, 0x71401D)


def phobos() -> Body:
    return moon(1.08e16, 11_100.0, name="Phobos")


def deimos() -> Body:
    return moon(1.5e15, 6_300.0, name="Deimos")


def jupiter() -> Body:
    return _body("Jupiter", 1.8982e27, 69_911_000.0, 0x977569, 0x8B5B45)


def saturn() -> Body:
    return _body("Saturn", 5.6834e26, 58_232_000.0, 0xF5B92F, 0x8C8109)


def uranus() -> Body:
    return _body("Uranus", 8.6810e25, 25_362_000.0, 0x48FAFF, 0x62E4F9)


def neptune() -> Body:
    return _body("Neptune", 1.02413e26, 24_622_000.0, 0x6E8ADD, 0xC3DDFF)


def halleys_comet() -> Body:
    return _body("Halley's Comet", 2.2e14, 11_000.0, 0xDDDDFF, 0x80B09B)


# Fantasy bodies

def roshar() -> Body:
    """Roshar, from The Stormlight Archive."""
    return _body("Roshar", 3.387e24, 5_633_000.0, 0x015089, 0xC1D8E6)


BODIES: Dict[str, Callable[[], Body]] = {
    "sol": sol,
    "mercury": mercury,
    "venus": venus,
    "earth": earth,
    "luna": luna,
    "mars": mars,
    "phobos": phobos,
    "deimos": deimos,
    "jupiter": jupiter,
    "saturn": saturn,
    "uranus": uranus,
    "neptune": neptune,
    "halleys_comet": halleys_comet,
    "roshar": roshar,
}


def get_body(name: str) -> Body:
    """Look up a prefab body by name (case-insensitive).

    Raises:
        KeyError: If there is no such prefab
    """
    key = name.lower().replace(" ", "_").replace("'", "")
    if key not in BODIES:
        raise KeyError(f"Unknown prefab body '{name}'. Available: {sorted(BODIES)}")
    return BODIES[key]()


# Solar systems

def ours(G: float = G_SI) -> System:
    """The Sun, the planets, a few moons and Halley's Comet."""
    perihelion = 8.766108e10
    aphelion_axis = 2.668e12
    halley_speed = math.sqrt(G * sol().mass * (2.0 / perihelion - 1.0 / aphelion_axis))

    sun = Orbit(sol(), (0.0, 0.0), (0.0, 0.0))
    sun.add(Orbit(mercury(), (57_909_050_000.0, 0.0), (0.0, -47_362.0)))
    sun.add(Orbit(venus(), (-108_208_000_000.0, 0.0), (0.0, 35_020.0)))
    sun.add(
        Orbit(earth(), (149_598_023_000.0, 0.0), (0.0, -29_780.0))
        .add(Orbit(luna(), (0.0, 384_399_000.0), (1_022.0, 0.0)))
    )
    sun.add(
        Orbit(mars(), (227_939_000_000.0, 0.0), (0.0, -24_007.0))
        .add(Orbit(phobos(), (0.0, -9_377_000.0), (-2_140.0, 0.0)))
        .add(Orbit(deimos(), (0.0, 23_460_000.0), (1_350.0, 0.0)))
    )
    sun.add(Orbit(jupiter(), (7.786e11, 0.0), (0.0, -13_070.0)))
    sun.add(Orbit(saturn(), (-1.43353e12, 0.0), (0.0, 9_680.0)))
    sun.add(Orbit(uranus(), (0.0, -2.87246e12), (-6_800.0, 0.0)))
    sun.add(Orbit(neptune(), (0.0, 4.5e12), (5_430.0, 0.0)))
    # Starts at perihelion and flies the other way round
    sun.add(Orbit(halleys_comet(), (perihelion, 0.0), (0.0, halley_speed)))
    return SystemBuilder(G=G).add(sun).construct()


def collision_fun(G: float = G_SI) -> System:
    """Roshar at Earth's distance with ten moons lined up beside it."""
    planet = Orbit(roshar(), (149_598_023_000.0, 0.0), (0.0, -2_780.0))
    planet.add_bulk(
        Orbit(renamed(luna(), f"Luna {num}"), (30_000_000.0 * num, 0.0), (0.0, 30_000.0))
        for num in range(1, 11)
    )
    sun = Orbit(sol(), (0.0, 0.0), (0.0, 0.0)).add(planet)
    return SystemBuilder(G=G).add(sun).construct()


SYSTEMS: Dict[str, Callable[..., System]] = {
    "ours": ours,
    "collision_fun": collision_fun,
}


def list_systems() -> List[str]:
    return sorted(SYSTEMS)


def get_system(name: str, G: float = G_SI) -> System:
    """Build a prefab system by name.

    Raises:
        KeyError: If there is no such prefab
    """
    key = name.lower()
    if key not in SYSTEMS:
        raise KeyError(f"Unknown prefab system '{name}'. Available: {list_systems()}")
    return SYSTEMS[key](G=G)
