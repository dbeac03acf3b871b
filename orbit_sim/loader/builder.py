"""Build systems with nested orbits.

Entries form a tree. An :class:`Orbit` places a body relative to its parent's
position and velocity, a :class:`Locus` is a massless anchor point, and the
:class:`MoonRing` / :class:`AsteroidBelt` generators scatter seeded random
bodies on circular orbits around their parent.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

import numpy as np

from orbit_sim.errors import InvalidBody, LoadError
from orbit_sim.physics.bodies import G_SI, Body, System

MOON_DENSITY = 3344.0  # kg/m^3, our Moon
# Mass of an asteroid when the normal draw returns 1: half of Ceres
ASTEROID_MASS_AT_1 = 9.3835e20 / 2.0
# (share in percent, density kg/m^3, color, outline, suffix)
ASTEROID_KINDS = (
    (75, 1380.0, 0x4C1505, 0x8B7979, "C"),  # carbonaceous
    (17, 2710.0, 0x819284, 0xA8CDBD, "S"),  # silicate
    (8, 5320.0, 0xC9D2E4, 0x618CD6, "M"),  # metallic
)
_NAME_CHARS = "ABCDEFGHJKLMNPQRSTUVWXYZ1234567890"


@dataclass(frozen=True, eq=False)
class Relative:
    """Frame an entry is placed in: its parent's mass, position and velocity."""
    mass: float = 0.0
    position: Optional[np.ndarray] = None
    velocity: Optional[np.ndarray] = None

    def offset(self, position, velocity):
        """Return absolute (position, velocity) for vectors given relative to this frame."""
        position = np.asarray(position, dtype=np.float64)
        velocity = np.asarray(velocity, dtype=np.float64)
        if self.position is None:
            return position, velocity
        if position.shape != self.position.shape:
            raise InvalidBody(
                f"Child is {position.shape[0]}D but its parent is {self.position.shape[0]}D"
            )
        return self.position + position, self.velocity + velocity

    def planar(self, x: float, y: float, vx: float, vy: float):
        """Offset an in-plane (xy) vector pair, padding to the parent's dimension."""
        dim = 2 if self.position is None else self.position.shape[0]
        position = np.zeros(dim)
        velocity = np.zeros(dim)
        position[:2] = (x, y)
        velocity[:2] = (vx, vy)
        return self.offset(position, velocity)


def sphere_radius(mass: float, density: float) -> float:
    """Radius of a uniform sphere of the given mass and density."""
    return (mass / density * 3.0 / (4.0 * math.pi)) ** (1.0 / 3.0)


def circular_orbit(relative: Relative, mass: float, orbit: float, theta: float,
                   clockwise: bool, G: float):
    """Absolute (position, velocity) for a circular orbit of radius ``orbit`` at angle ``theta``."""
    speed = math.sqrt(G * (mass + relative.mass) / orbit)
    if clockwise:
        speed = -speed
    return relative.planar(
        math.cos(theta) * orbit,
        math.sin(theta) * orbit,
        -math.sin(theta) * speed,
        math.cos(theta) * speed,
    )


def _system_name(rng: np.random.Generator, prefix: str, low: int, high: int) -> str:
    length = int(rng.integers(low, high))
    return prefix + "".join(_NAME_CHARS[int(i)] for i in rng.integers(0, len(_NAME_CHARS), size=length))


class Entry(ABC):
    """An entry in a SystemBuilder: knows how to turn itself into bodies."""

    @abstractmethod
    def construct(self, relative: Relative, G: float) -> List[Body]:
        """Return absolute bodies for this entry and everything below it."""
        pass


class EntryWithChildren(Entry):
    """An entry that other entries can orbit."""

    def __init__(self):
        self.children: List[Entry] = []

    def add(self, child: Entry) -> "EntryWithChildren":
        """Add a child entry. Returns self so calls can be chained."""
        if not isinstance(child, Entry):
            raise TypeError(f"Expected Entry, got {type(child).__name__}")
        self.children.append(child)
        return self

    def add_bulk(self, children: Iterable[Entry]) -> "EntryWithChildren":
        for child in children:
            self.add(child)
        return self

    def _construct_children(self, relative: Relative, G: float) -> List[Body]:
        out: List[Body] = []
        for child in self.children:
            out.extend(child.construct(relative, G))
        return out


class Orbit(EntryWithChildren):
    """A body whose position and velocity are given relative to its parent."""

    def __init__(self, body: Body, position=None, velocity=None):
        """Initialize orbit entry.

        Args:
            body: The orbiting body
            position: Offset from the parent (default: the body's own position)
            velocity: Velocity relative to the parent (default: the body's own velocity)
        """
        super().__init__()
        if position is not None or velocity is not None:
            body = body.moved(
                body.position if position is None else position,
                body.velocity if velocity is None else velocity,
            )
        self.body = body

    def construct(self, relative: Relative, G: float) -> List[Body]:
        position, velocity = relative.offset(self.body.position, self.body.velocity)
        placed = self.body.moved(position.tolist(), velocity.tolist())
        frame = Relative(placed.mass, position, velocity)
        return [placed] + self._construct_children(frame, G)


class Locus(EntryWithChildren):
    """A massless point that children are positioned around."""

    def __init__(self, position):
        super().__init__()
        self.position = tuple(float(x) for x in position)

    def construct(self, relative: Relative, G: float) -> List[Body]:
        position, velocity = relative.offset(self.position, np.zeros(len(self.position)))
        # Massless: children orbit nothing but keep moving with the parent frame
        frame = Relative(0.0, position, velocity)
        return self._construct_children(frame, G)


class MoonRing(Entry):
    """A batch of moons on circular orbits around the parent."""

    def __init__(
        self,
        count: int,
        min_mass: float,
        max_mass: float,
        min_orbit: float,
        max_orbit: float,
        seed: int = 0,
        clockwise: bool = False,
    ):
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if not 0 < min_mass <= max_mass:
            raise ValueError(f"Need 0 < min_mass <= max_mass, got {min_mass}, {max_mass}")
        if not 0 < min_orbit <= max_orbit:
            raise ValueError(f"Need 0 < min_orbit <= max_orbit, got {min_orbit}, {max_orbit}")
        self.count = int(count)
        self.min_mass = float(min_mass)
        self.max_mass = float(max_mass)
        self.min_orbit = float(min_orbit)
        self.max_orbit = float(max_orbit)
        self.seed = int(seed)
        self.clockwise = bool(clockwise)

    def construct(self, relative: Relative, G: float) -> List[Body]:
        rng = np.random.default_rng(self.seed)
        system_name = _system_name(rng, "M", 3, 6)
        moons = []
        for num in range(self.count):
            mass = float(rng.uniform(self.min_mass, self.max_mass))
            theta = float(rng.uniform(0.0, 2.0 * math.pi))
            orbit = float(rng.uniform(self.min_orbit, self.max_orbit))
            position, velocity = circular_orbit(relative, mass, orbit, theta, self.clockwise, G)
            moons.append(Body(
                name=f"{system_name}-{num}",
                mass=mass,
                position=position.tolist(),
                velocity=velocity.tolist(),
                radius=sphere_radius(mass, MOON_DENSITY),
                color=0x5566BB,
                outline=0xEEDDEE,
            ))
        return moons


class AsteroidBelt(Entry):
    """Asteroids on circular orbits, generated until ``total_mass`` is used up.

    Masses are drawn from ``|N(0, standard_dev)| * ASTEROID_MASS_AT_1`` so the
    belt never outweighs what it was given.
    """

    def __init__(
        self,
        total_mass: float,
        min_orbit: float,
        max_orbit: float,
        standard_dev: float = 1.0,
        max_bodies: Optional[int] = None,
        seed: int = 0,
        clockwise: bool = False,
    ):
        if total_mass <= 0:
            raise ValueError(f"total_mass must be positive, got {total_mass}")
        if standard_dev <= 0:
            raise ValueError(f"standard_dev must be positive, got {standard_dev}")
        if not 0 < min_orbit <= max_orbit:
            raise ValueError(f"Need 0 < min_orbit <= max_orbit, got {min_orbit}, {max_orbit}")
        if max_bodies is not None and max_bodies < 0:
            raise ValueError(f"max_bodies must be non-negative, got {max_bodies}")
        self.total_mass = float(total_mass)
        self.min_orbit = float(min_orbit)
        self.max_orbit = float(max_orbit)
        self.standard_dev = float(standard_dev)
        self.max_bodies = max_bodies
        self.seed = int(seed)
        self.clockwise = bool(clockwise)

    def construct(self, relative: Relative, G: float) -> List[Body]:
        rng = np.random.default_rng(self.seed)
        system_name = _system_name(rng, "A", 4, 7)
        asteroids: List[Body] = []
        remaining = self.total_mass
        while remaining > 0.0 and (self.max_bodies is None or len(asteroids) < self.max_bodies):
            mass = min(abs(float(rng.normal(0.0, self.standard_dev))) * ASTEROID_MASS_AT_1, remaining)
            if mass <= 0.0:
                continue
            remaining -= mass

            roll = int(rng.integers(0, 100))
            for share, density, color, outline, suffix in ASTEROID_KINDS:
                if roll < share:
                    break
                roll -= share

            theta = float(rng.uniform(0.0, 2.0 * math.pi))
            orbit = float(rng.uniform(self.min_orbit, self.max_orbit))
            position, velocity = circular_orbit(relative, mass, orbit, theta, self.clockwise, G)
            asteroids.append(Body(
                name=f"{system_name}-{len(asteroids):04d}{suffix}",
                mass=mass,
                position=position.tolist(),
                velocity=velocity.tolist(),
                radius=sphere_radius(mass, density),
                color=color,
                outline=outline,
            ))
        return asteroids


class SystemBuilder:
    """Use this to construct a System from nested entries.

    Example:
        >>> builder = SystemBuilder()
        >>> builder.add(Orbit(sun).add(Orbit(earth).add(Orbit(moon))))
        >>> system = builder.construct()
    """

    def __init__(self, G: float = G_SI):
        self.G = G
        self.entries: List[Entry] = []
        self.used_up = False

    def add(self, entry: Entry) -> "SystemBuilder":
        """Add a root entry. Returns self so calls can be chained."""
        if self.used_up:
            raise RuntimeError("Tried to add an entry to a SystemBuilder after it was constructed")
        if not isinstance(entry, Entry):
            raise TypeError(f"Expected Entry, got {type(entry).__name__}")
        self.entries.append(entry)
        return self

    def construct_bodies(self) -> List[Body]:
        """Resolve every entry to absolute bodies, in depth-first order."""
        if self.used_up:
            raise RuntimeError("Tried to re-construct a SystemBuilder after it was constructed")
        self.used_up = True
        bodies: List[Body] = []
        for entry in self.entries:
            bodies.extend(entry.construct(Relative(), self.G))
        return bodies

    def construct(self, speed: float = 1.0) -> System:
        """Build the initial System.

        Raises:
            LoadError: If the entries do not produce a valid System
        """
        try:
            return System.from_bodies(self.construct_bodies(), speed=speed)
        except InvalidBody as e:
            raise LoadError(f"Invalid system: {e}") from e


def renamed(body: Body, name: str) -> Body:
    """Copy of ``body`` under a different name."""
    return replace(body, name=name)
