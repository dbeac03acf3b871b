"""Simulation controller: live state, history and review mode."""

import math
import warnings
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from orbit_sim.errors import InvalidSpeed, InvalidTransition
from orbit_sim.physics.bodies import G_SI, System
from orbit_sim.physics.forces import DEFAULT_MIN_SEPARATION
from orbit_sim.physics.history import HISTORY_CAPACITY, HistoryBuffer
from orbit_sim.physics.integrators.base import Integrator
from orbit_sim.physics.integrators.factory import DEFAULT_INTEGRATOR, get_integrator

DEFAULT_DT = 3600.0
DEFAULT_MIN_SPEED = 0.01
DEFAULT_MAX_SPEED = 1000.0


class SimulationMode(Enum):
    """What the controller is up to."""
    RUNNING = "running"
    REVIEWING = "reviewing"


class SimulationController:
    """Main simulation controller.

    Owns the live System and the history buffer, and is the only thing that
    advances or rewinds them. Every tick appends the new snapshot to history.
    In review mode ticking is refused, a cursor walks the retained snapshots,
    and :meth:`resume` branches from the chosen one, discarding everything
    newer.

    Commands that fail raise and leave the controller untouched.
    """

    def __init__(
        self,
        initial_system: System,
        dt: float = DEFAULT_DT,
        integrator: Union[Integrator, str, None] = None,
        capacity: int = HISTORY_CAPACITY,
        min_speed: float = DEFAULT_MIN_SPEED,
        max_speed: float = DEFAULT_MAX_SPEED,
        G: float = G_SI,
        min_separation: float = DEFAULT_MIN_SEPARATION,
        verbose: bool = False,
    ):
        """Initialize controller.

        Args:
            initial_system: Snapshot handed over by the loader; stored as index 0
            dt: Base time step, scaled by the speed multiplier every tick
            integrator: Integrator instance or name (default: symplectic Euler)
            capacity: Number of snapshots kept for review
            min_speed: Lower bound for the speed multiplier
            max_speed: Upper bound for the speed multiplier
            G: Gravitational constant (ignored when an Integrator instance is given)
            min_separation: Softening floor (ignored when an Integrator instance is given)
            verbose: Print status lines when entering and leaving review mode
        """
        if not isinstance(initial_system, System):
            raise TypeError(f"initial_system must be a System, got {type(initial_system).__name__}")
        if not math.isfinite(dt) or dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        if not (0.0 <= min_speed <= max_speed) or not math.isfinite(max_speed):
            raise ValueError(f"Invalid speed range [{min_speed}, {max_speed}]")

        if integrator is None:
            integrator = DEFAULT_INTEGRATOR
        if isinstance(integrator, str):
            integrator = get_integrator(integrator, G=G, min_separation=min_separation)
        self.integrator = integrator
        self.dt = float(dt)
        self.min_speed = float(min_speed)
        self.max_speed = float(max_speed)
        self.verbose = verbose

        self.history = HistoryBuffer(capacity)
        self._mode = SimulationMode.RUNNING
        self._cursor: Optional[int] = None
        self._speed = self._clamp_speed(initial_system.speed)
        self._live = initial_system.with_speed(self._speed)
        self.history.append(self._live)

        # Callbacks
        self.on_tick_callback: Optional[Callable[["SimulationController", System], None]] = None

    @classmethod
    def from_config(cls, system: System, config) -> "SimulationController":
        """Build a controller from a :class:`orbit_sim.utils.config.Config`."""
        return cls(
            system.with_speed(config.speed),
            dt=config.dt,
            integrator=config.integrator,
            capacity=config.history_capacity,
            min_speed=config.min_speed,
            max_speed=config.max_speed,
            G=config.G,
            min_separation=config.min_separation,
            verbose=config.verbose,
        )

    # Read-only views

    @property
    def mode(self) -> SimulationMode:
        return self._mode

    @property
    def is_running(self) -> bool:
        return self._mode is SimulationMode.RUNNING

    @property
    def is_reviewing(self) -> bool:
        return self._mode is SimulationMode.REVIEWING

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def live_system(self) -> System:
        """The snapshot the next tick will advance from."""
        return self._live

    @property
    def current_system(self) -> System:
        """The snapshot to display: live when running, the cursor's when reviewing."""
        if self.is_reviewing:
            return self.history.get(self._cursor)
        return self._live

    @property
    def current_index(self) -> int:
        if self.is_reviewing:
            return self._cursor
        return self.history.newest_index

    @property
    def review_cursor(self) -> Optional[int]:
        """Index being reviewed, or None while running."""
        return self._cursor

    @property
    def oldest_index(self) -> int:
        return self.history.oldest_index

    @property
    def newest_index(self) -> int:
        return self.history.newest_index

    @property
    def index_range(self) -> Tuple[int, int]:
        """Inclusive ``(oldest, newest)`` range valid for review navigation."""
        return self.history.oldest_index, self.history.newest_index

    @property
    def history_length(self) -> int:
        return len(self.history)

    # Commands

    def tick(self) -> System:
        """Advance the live System by one step and record it.

        Returns:
            The new snapshot

        Raises:
            InvalidTransition: If called while reviewing
        """
        if self.is_reviewing:
            raise InvalidTransition("Cannot tick while reviewing history; resume first")
        new_system = self.integrator.step(self._live, self.dt)
        self.history.append(new_system)
        self._live = new_system

        if self.on_tick_callback:
            self.on_tick_callback(self, new_system)
        return new_system

    def run(self, n_steps: int) -> System:
        """Run ``n_steps`` ticks and return the last snapshot.

        Args:
            n_steps: Number of ticks to run
        """
        if n_steps < 0:
            raise ValueError(f"n_steps must be non-negative, got {n_steps}")
        for _ in range(n_steps):
            self.tick()
        return self._live

    def enter_review(self) -> System:
        """Pause and start reviewing history at the newest snapshot.

        Raises:
            InvalidTransition: If already reviewing
        """
        if self.is_reviewing:
            raise InvalidTransition("Already reviewing history")
        if self.verbose:
            print(
                f"Backup size: {len(self.history)} using "
                f"{self.history.approximate_nbytes() // 1024}k bytes of ram"
            )
        self._cursor = self.history.newest_index
        self._mode = SimulationMode.REVIEWING
        return self.history.get(self._cursor)

    def set_review_cursor(self, index: int) -> System:
        """Point the review cursor at ``index`` and return that snapshot.

        Purely navigational: neither history nor the live System changes.

        Raises:
            InvalidTransition: If not reviewing
            IndexOutOfRange: If ``index`` is outside ``[oldest_index, newest_index]``
        """
        self._require_reviewing("move the review cursor")
        system = self.history.get(index)
        self._cursor = int(index)
        return system

    def move_review_cursor(self, delta: int) -> System:
        """Move the review cursor by ``delta`` (negative is older), clamped to the window."""
        self._require_reviewing("move the review cursor")
        target = min(max(self._cursor + int(delta), self.oldest_index), self.newest_index)
        return self.set_review_cursor(target)

    def resume(self, index: Optional[int] = None) -> System:
        """Branch from a past snapshot and go back to running.

        The snapshot at ``index`` (default: the review cursor) becomes the live
        System, carrying the current speed multiplier, and every newer snapshot
        is discarded for good.

        Raises:
            InvalidTransition: If not reviewing
            IndexOutOfRange: If ``index`` is outside the retained window
        """
        self._require_reviewing("resume")
        if index is None:
            index = self._cursor
        restored = self.history.get(index)
        removed = self.history.truncate_after(index)
        self._live = restored.with_speed(self._speed)
        self._cursor = None
        self._mode = SimulationMode.RUNNING
        if self.verbose:
            print(f"Resumed from backup #{index} (t={restored.time:g}), discarded {removed} newer backups")
        return self._live

    def set_speed(self, multiplier: float) -> float:
        """Change the speed multiplier, effective from the next tick.

        Out-of-range values are clamped with an :class:`InvalidSpeed` warning.

        Returns:
            The multiplier actually applied

        Raises:
            ValueError: If ``multiplier`` is not a finite number
        """
        speed = self._clamp_speed(multiplier)
        self._speed = speed
        self._live = self._live.with_speed(speed)
        return speed

    def _clamp_speed(self, multiplier: float) -> float:
        try:
            value = float(multiplier)
        except (TypeError, ValueError):
            raise ValueError(f"Speed multiplier must be a number, got {multiplier!r}")
        if not math.isfinite(value):
            raise ValueError(f"Speed multiplier must be finite, got {multiplier}")
        clamped = min(max(value, self.min_speed), self.max_speed)
        if clamped != value:
            warnings.warn(
                f"Speed multiplier {value:g} outside [{self.min_speed:g}, {self.max_speed:g}], "
                f"clamped to {clamped:g}",
                InvalidSpeed,
                stacklevel=3,
            )
        return clamped

    def _require_reviewing(self, action: str):
        if not self.is_reviewing:
            raise InvalidTransition(f"Cannot {action} while running; enter review first")

    def __repr__(self) -> str:
        return (
            f"SimulationController(mode={self._mode.value}, index={self.current_index}, "
            f"window=[{self.oldest_index}, {self.newest_index}], speed={self._speed:g})"
        )
