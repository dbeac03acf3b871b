"""Bounded, index-addressed history of system snapshots.

Every snapshot gets an absolute sequence index, starting at 0. The buffer keeps
at most ``capacity`` of them in a fixed ring: appending to a full buffer evicts
the oldest slot, and ``truncate_after`` drops the newest ones so the sequence
can continue down a different branch. Indices never get renumbered, so the
oldest retained index simply grows as slots are evicted.
"""

import operator
from dataclasses import dataclass
from typing import Iterator, List, Optional

from orbit_sim.errors import IndexOutOfRange
from orbit_sim.physics.bodies import System

HISTORY_CAPACITY = 10_000


def _as_index(index) -> int:
    if isinstance(index, bool):
        raise IndexOutOfRange(f"History index must be an integer, got {index!r}")
    try:
        return operator.index(index)
    except TypeError:
        raise IndexOutOfRange(f"History index must be an integer, got {index!r}")


@dataclass(frozen=True)
class HistorySlot:
    """A stored snapshot tagged with its sequence index."""
    index: int
    system: System


class HistoryBuffer:
    """Fixed-capacity ring buffer of :class:`HistorySlot`."""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        """Initialize history buffer.

        Args:
            capacity: Maximum number of retained snapshots (>= 1)
        """
        if int(capacity) < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self._capacity = int(capacity)
        self._slots: List[Optional[HistorySlot]] = [None] * self._capacity
        self._oldest = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def oldest_index(self) -> int:
        """Smallest retained index (``newest_index + 1`` when empty)."""
        return self._oldest

    @property
    def newest_index(self) -> int:
        """Largest retained index (``oldest_index - 1`` when empty)."""
        return self._oldest + self._count - 1

    @property
    def is_empty(self) -> bool:
        return self._count == 0

    @property
    def is_full(self) -> bool:
        return self._count == self._capacity

    def append(self, system: System) -> int:
        """Store a snapshot under the next sequence index.

        Evicts the oldest slot first if the buffer is full.

        Returns:
            The index assigned to the snapshot
        """
        index = self._oldest + self._count
        if self._count == self._capacity:
            self._oldest += 1
        else:
            self._count += 1
        self._slots[index % self._capacity] = HistorySlot(index, system)
        return index

    def slot(self, index: int) -> HistorySlot:
        """Return the slot stored under ``index``.

        Raises:
            IndexOutOfRange: If the index was evicted, truncated or never written
        """
        index = self._check_retained(index)
        return self._slots[index % self._capacity]

    def get(self, index: int) -> System:
        """Return the snapshot stored under ``index``."""
        return self.slot(index).system

    def truncate_after(self, index: int) -> int:
        """Discard every slot with an index greater than ``index``.

        ``index`` may be ``oldest_index - 1``, which empties the buffer.

        Returns:
            Number of slots removed

        Raises:
            IndexOutOfRange: If ``index`` lies before the retained window or past its end
        """
        index = _as_index(index)
        if index < self._oldest - 1 or index > self.newest_index:
            raise IndexOutOfRange(
                f"Cannot truncate after {index}: retained window is "
                f"[{self._oldest}, {self.newest_index}]"
            )
        removed = self.newest_index - index
        for dropped in range(index + 1, self.newest_index + 1):
            self._slots[dropped % self._capacity] = None
        self._count -= removed
        return removed

    def approximate_nbytes(self) -> int:
        """Rough memory held by the retained snapshots' state arrays."""
        return sum(
            slot.system.positions.nbytes + slot.system.velocities.nbytes
            for slot in self
        )

    def _check_retained(self, index: int) -> int:
        index = _as_index(index)
        if not self._oldest <= index <= self.newest_index:
            if self.is_empty:
                raise IndexOutOfRange(f"History index {index} requested from an empty buffer")
            raise IndexOutOfRange(
                f"History index {index} is outside the retained window "
                f"[{self._oldest}, {self.newest_index}]"
            )
        return index

    def __len__(self) -> int:
        return self._count

    def __contains__(self, index) -> bool:
        try:
            index = _as_index(index)
        except IndexOutOfRange:
            return False
        return self._oldest <= index <= self.newest_index

    def __iter__(self) -> Iterator[HistorySlot]:
        for index in range(self._oldest, self.newest_index + 1):
            yield self._slots[index % self._capacity]

    def __repr__(self) -> str:
        return (
            f"HistoryBuffer(capacity={self._capacity}, "
            f"oldest_index={self._oldest}, newest_index={self.newest_index})"
        )
