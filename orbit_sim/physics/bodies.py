"""Bodies and immutable system snapshots."""

import math
from dataclasses import dataclass, field, replace
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from orbit_sim.errors import InvalidBody

# Gravitational constant in SI units (m^3 kg^-1 s^-2)
G_SI = 6.674e-11


def _as_vector(value, label: str, name: str) -> Tuple[float, ...]:
    try:
        vector = tuple(float(component) for component in value)
    except (TypeError, ValueError):
        raise InvalidBody(f"Body '{name}': {label} must be a sequence of numbers, got {value!r}")
    if len(vector) not in (2, 3):
        raise InvalidBody(f"Body '{name}': {label} must be 2D or 3D, got {len(vector)} components")
    if not all(math.isfinite(component) for component in vector):
        raise InvalidBody(f"Body '{name}': {label} must be finite, got {vector}")
    return vector


@dataclass(frozen=True)
class Body:
    """A single orbiter: a star, planet, moon, comet or asteroid.

    Attributes:
        name: Identifier, unique within a System
        mass: Mass (> 0)
        position: Position vector (2D or 3D)
        velocity: Velocity vector, same dimension as position
        radius: Display radius (cosmetic only)
        color: Fill colour as 0xRRGGBB (cosmetic only)
        outline: Outline colour as 0xRRGGBB (cosmetic only)
        immovable: If True, the body attracts others but is never moved
    """
    name: str
    mass: float
    position: Tuple[float, ...]
    velocity: Tuple[float, ...]
    radius: float = 0.0
    color: int = 0xFFFFFF
    outline: int = 0xFFFFFF
    immovable: bool = False

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidBody(f"Body name must be a non-empty string, got {self.name!r}")
        try:
            mass = float(self.mass)
        except (TypeError, ValueError):
            raise InvalidBody(f"Body '{self.name}': mass must be a number, got {self.mass!r}")
        if not math.isfinite(mass) or mass <= 0.0:
            raise InvalidBody(f"Body '{self.name}': mass must be positive and finite, got {self.mass}")
        position = _as_vector(self.position, "position", self.name)
        velocity = _as_vector(self.velocity, "velocity", self.name)
        if len(position) != len(velocity):
            raise InvalidBody(
                f"Body '{self.name}': position is {len(position)}D but velocity is {len(velocity)}D"
            )
        try:
            radius = float(self.radius)
        except (TypeError, ValueError):
            raise InvalidBody(f"Body '{self.name}': radius must be a number, got {self.radius!r}")
        if not math.isfinite(radius) or radius < 0.0:
            raise InvalidBody(f"Body '{self.name}': radius must be non-negative, got {self.radius}")

        # Normalise to plain floats/tuples so snapshots never alias caller data
        object.__setattr__(self, "mass", mass)
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "velocity", velocity)
        object.__setattr__(self, "radius", radius)
        object.__setattr__(self, "color", int(self.color))
        object.__setattr__(self, "outline", int(self.outline))
        object.__setattr__(self, "immovable", bool(self.immovable))

    @property
    def dimension(self) -> int:
        return len(self.position)

    def moved(self, position, velocity) -> "Body":
        """Return a copy of this body with a new position and velocity."""
        return replace(self, position=tuple(position), velocity=tuple(velocity))


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.float64)
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class System:
    """Immutable snapshot of every body plus simulated time and speed.

    Static body attributes (name, mass, radius, colours) live in ``roster``;
    the kinematic state lives in private read-only arrays, so a snapshot costs
    two ``(n, dim)`` float arrays rather than ``n`` Body objects.

    Use :meth:`from_bodies` to build one from Body records.
    """
    roster: Tuple[Body, ...]
    positions: np.ndarray
    velocities: np.ndarray
    time: float = 0.0
    speed: float = 1.0
    masses: np.ndarray = field(init=False, repr=False)
    pinned: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        roster = tuple(self.roster)
        if not roster:
            raise InvalidBody("A system needs at least one body")
        for body in roster:
            if not isinstance(body, Body):
                raise InvalidBody(f"Expected Body, got {type(body).__name__}")
        dims = {body.dimension for body in roster}
        if len(dims) != 1:
            raise InvalidBody(f"All bodies must share one dimension, got {sorted(dims)}")
        names = [body.name for body in roster]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise InvalidBody(f"Body names must be unique, duplicated: {duplicates}")

        n = len(roster)
        dim = dims.pop()
        positions = _frozen(self.positions)
        velocities = _frozen(self.velocities)
        if positions.shape != (n, dim) or velocities.shape != (n, dim):
            raise InvalidBody(
                f"State arrays must have shape {(n, dim)}, got {positions.shape} and {velocities.shape}"
            )
        speed = float(self.speed)
        if not math.isfinite(speed) or speed < 0.0:
            raise ValueError(f"Speed multiplier must be finite and non-negative, got {self.speed}")

        object.__setattr__(self, "roster", roster)
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "velocities", velocities)
        object.__setattr__(self, "time", float(self.time))
        object.__setattr__(self, "speed", speed)
        object.__setattr__(self, "masses", _frozen([body.mass for body in roster]))
        pinned = np.array([body.immovable for body in roster], dtype=bool)
        pinned.flags.writeable = False
        object.__setattr__(self, "pinned", pinned)

    @classmethod
    def from_bodies(cls, bodies: Sequence[Body], time: float = 0.0, speed: float = 1.0) -> "System":
        """Build a snapshot from Body records (as produced by the loader)."""
        bodies = tuple(bodies)
        if not bodies:
            raise InvalidBody("A system needs at least one body")
        dims = {body.dimension for body in bodies}
        if len(dims) != 1:
            raise InvalidBody(f"All bodies must share one dimension, got {sorted(dims)}")
        return cls(
            roster=bodies,
            positions=[body.position for body in bodies],
            velocities=[body.velocity for body in bodies],
            time=time,
            speed=speed,
        )

    def advanced(self, positions, velocities, dt: float) -> "System":
        """Return the snapshot ``dt`` later with the given kinematic state."""
        return System(
            roster=self.roster,
            positions=positions,
            velocities=velocities,
            time=self.time + dt,
            speed=self.speed,
        )

    def with_speed(self, speed: float) -> "System":
        """Return this snapshot with a different speed multiplier."""
        if float(speed) == self.speed:
            return self
        return System(self.roster, self.positions, self.velocities, self.time, speed)

    @property
    def n_bodies(self) -> int:
        return len(self.roster)

    @property
    def dimension(self) -> int:
        return self.positions.shape[1]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(body.name for body in self.roster)

    @property
    def bodies(self) -> Tuple[Body, ...]:
        """Fresh Body value copies carrying this snapshot's positions and velocities."""
        return tuple(self[i] for i in range(self.n_bodies))

    def body(self, name: str) -> Body:
        """Look a body up by name."""
        for i, body in enumerate(self.roster):
            if body.name == name:
                return self[i]
        raise KeyError(name)

    def index_of(self, name: str) -> Optional[int]:
        for i, body in enumerate(self.roster):
            if body.name == name:
                return i
        return None

    def __len__(self) -> int:
        return self.n_bodies

    def __iter__(self) -> Iterator[Body]:
        return iter(self.bodies)

    def __getitem__(self, index: int) -> Body:
        return self.roster[index].moved(
            (float(x) for x in self.positions[index]),
            (float(v) for v in self.velocities[index]),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, System):
            return NotImplemented
        return (
            self.names == other.names
            and np.array_equal(self.masses, other.masses)
            and np.array_equal(self.positions, other.positions)
            and np.array_equal(self.velocities, other.velocities)
            and self.time == other.time
            and self.speed == other.speed
        )

    def __hash__(self):
        return hash((self.names, self.time, self.speed, self.positions.tobytes(), self.velocities.tobytes()))

    def __repr__(self) -> str:
        return f"System(n_bodies={self.n_bodies}, dim={self.dimension}, time={self.time:g}, speed={self.speed:g})"
