"""Tests for the bounded snapshot history."""

import numpy as np
import pytest

from orbit_sim.errors import IndexOutOfRange
from orbit_sim.physics.bodies import Body, System
from orbit_sim.physics.history import HISTORY_CAPACITY, HistoryBuffer, HistorySlot


def snapshot(t: float) -> System:
    return System.from_bodies([Body("A", 1.0, (t, 0.0), (0.0, 0.0))], time=t)


def filled(capacity: int, n: int) -> HistoryBuffer:
    buffer = HistoryBuffer(capacity)
    for i in range(n):
        buffer.append(snapshot(float(i)))
    return buffer


def test_empty_buffer():
    buffer = HistoryBuffer(5)
    assert len(buffer) == 0
    assert buffer.is_empty
    assert buffer.oldest_index == 0
    assert buffer.newest_index == -1
    assert list(buffer) == []
    with pytest.raises(IndexOutOfRange):
        buffer.get(0)


def test_default_capacity():
    assert HistoryBuffer().capacity == HISTORY_CAPACITY == 10_000


def test_invalid_capacity():
    with pytest.raises(ValueError):
        HistoryBuffer(0)


def test_append_assigns_contiguous_indices():
    buffer = HistoryBuffer(4)
    assert [buffer.append(snapshot(float(i))) for i in range(3)] == [0, 1, 2]
    assert buffer.get(1).time == 1.0
    assert buffer.slot(2) == HistorySlot(2, buffer.get(2))
    assert [slot.index for slot in buffer] == [0, 1, 2]


@pytest.mark.parametrize("k", [0, 1, 3, 7, 20])
def test_capacity_invariant(k):
    """After C+k appends exactly C slots remain and the oldest index is k."""
    capacity = 5
    buffer = filled(capacity, capacity + k)

    assert len(buffer) == min(capacity, capacity + k)
    assert buffer.oldest_index == max(0, k)
    assert buffer.newest_index == capacity + k - 1
    assert buffer.is_full
    assert [slot.index for slot in buffer] == list(range(k, capacity + k))
    for slot in buffer:
        assert slot.system.time == float(slot.index)


def test_evicted_indices_are_out_of_range():
    buffer = filled(3, 6)
    with pytest.raises(IndexOutOfRange):
        buffer.get(2)
    assert buffer.get(3).time == 3.0
    with pytest.raises(IndexOutOfRange):
        buffer.get(6)
    with pytest.raises(IndexOutOfRange):
        buffer.get(-1)


def test_index_out_of_range_is_an_index_error():
    with pytest.raises(IndexError):
        HistoryBuffer(2).get(0)


def test_full_capacity_of_ten_thousand():
    buffer = filled(HISTORY_CAPACITY, HISTORY_CAPACITY + 25)
    assert len(buffer) == HISTORY_CAPACITY
    assert buffer.oldest_index == 25
    assert buffer.newest_index == HISTORY_CAPACITY + 24


def test_truncate_after():
    """Everything newer than the index goes; appends continue from there."""
    buffer = filled(10, 8)

    removed = buffer.truncate_after(4)

    assert removed == 3
    assert buffer.newest_index == 4
    assert 5 not in buffer
    with pytest.raises(IndexOutOfRange):
        buffer.get(5)
    assert buffer.append(snapshot(100.0)) == 5
    assert buffer.get(5).time == 100.0


def test_truncate_after_newest_is_noop():
    buffer = filled(4, 3)
    assert buffer.truncate_after(2) == 0
    assert len(buffer) == 3


def test_truncate_after_wrapped_buffer():
    buffer = filled(4, 10)
    assert buffer.oldest_index == 6

    assert buffer.truncate_after(7) == 2
    assert [slot.index for slot in buffer] == [6, 7]

    for t in (20.0, 21.0, 22.0):
        buffer.append(snapshot(t))
    assert [slot.index for slot in buffer] == [7, 8, 9, 10]
    assert buffer.get(8).time == 20.0


def test_truncate_before_oldest_empties_buffer():
    buffer = filled(3, 5)
    assert buffer.truncate_after(1) == 3
    assert buffer.is_empty
    assert buffer.newest_index == buffer.oldest_index - 1
    assert buffer.append(snapshot(0.0)) == 2


@pytest.mark.parametrize("index", [-5, 0, 10])
def test_truncate_outside_window(index):
    buffer = filled(3, 5)
    with pytest.raises(IndexOutOfRange):
        buffer.truncate_after(index)
    assert len(buffer) == 3


def test_numpy_integers_are_accepted():
    buffer = filled(4, 3)
    assert buffer.get(np.int64(1)).time == 1.0
    assert np.int64(2) in buffer


def test_non_integer_indices_are_rejected():
    buffer = filled(4, 3)
    with pytest.raises(IndexOutOfRange):
        buffer.get(1.0)
    with pytest.raises(IndexOutOfRange):
        buffer.get(True)
    assert "1" not in buffer


def test_approximate_nbytes():
    buffer = filled(4, 3)
    assert buffer.approximate_nbytes() == 3 * 2 * 2 * 8
