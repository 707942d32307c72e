"""Tests for the node arena."""

import pytest
from pyitree.arena import NIL, Handle, NodeArena
from pyitree.interval import Interval, Entry


def make_entry(n: int) -> Entry:
    return Entry(Interval(n, n + 1), n)


class TestNodeArena:
    """Test NodeArena class."""

    def test_invalid_capacity(self):
        """Test that a non-positive capacity raises."""
        with pytest.raises(ValueError):
            NodeArena(0)

    def test_allocate_initializes_leaf(self):
        """Test freshly allocated slot is a detached leaf."""
        arena = NodeArena(4)
        i = arena.allocate(make_entry(1))
        assert i == 0
        assert arena.parent[i] == NIL
        assert arena.left[i] == NIL
        assert arena.right[i] == NIL
        assert arena.height[i] == 1
        assert arena.max_high[i] == 2
        assert len(arena) == 1

    def test_grows_when_full(self):
        """Test arena doubles its capacity."""
        arena = NodeArena(2)
        indices = [arena.allocate(make_entry(n)) for n in range(5)]
        assert indices == [0, 1, 2, 3, 4]
        assert arena.capacity == 8
        assert len(arena) == 5
        assert arena.entries[4].value == 4

    def test_reuses_lowest_free_slot(self):
        """Test released slots are reused lowest first."""
        arena = NodeArena(4)
        for n in range(4):
            arena.allocate(make_entry(n))
        arena.release(2)
        arena.release(1)
        assert arena.allocate(make_entry(9)) == 1
        assert arena.allocate(make_entry(10)) == 2

    def test_release_invalidates_handle(self):
        """Test handles go stale after release."""
        arena = NodeArena(4)
        i = arena.allocate(make_entry(1))
        h = arena.handle(i)
        assert arena.is_live(h)
        arena.release(i)
        assert not arena.is_live(h)
        with pytest.raises(KeyError):
            arena.resolve(h)

    def test_reused_slot_does_not_revive_handle(self):
        """Test a handle stays stale after its slot is reused."""
        arena = NodeArena(1)
        i = arena.allocate(make_entry(1))
        old = arena.handle(i)
        arena.release(i)
        j = arena.allocate(make_entry(2))
        assert j == i
        assert not arena.is_live(old)
        assert arena.is_live(arena.handle(j))

    def test_out_of_range_handle(self):
        """Test handles outside the arena are not live."""
        arena = NodeArena(2)
        assert not arena.is_live(Handle(10, 0))
        assert not arena.is_live(Handle(-1, 0))

    def test_resolve(self):
        """Test resolving a live handle."""
        arena = NodeArena(2)
        i = arena.allocate(make_entry(1))
        assert arena.resolve(arena.handle(i)) == i
