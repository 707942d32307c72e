"""Tests for interval keys and entries."""

import pytest
from pyitree.interval import Interval, Entry


class TestInterval:
    """Test Interval class."""

    def test_create_interval(self):
        """Test interval creation."""
        i = Interval(3, 7)
        assert i.low == 3
        assert i.high == 7

    def test_point_interval(self):
        """Test degenerate interval with equal endpoints."""
        i = Interval(5, 5)
        assert i.low == i.high == 5

    def test_inverted_interval_rejected(self):
        """Test that high < low raises."""
        with pytest.raises(ValueError):
            Interval(7, 3)

    def test_ordering_by_low_then_high(self):
        """Test lexicographic ordering."""
        assert Interval(1, 9) < Interval(2, 3)
        assert Interval(2, 3) < Interval(2, 4)
        assert Interval(2, 4) > Interval(2, 3)
        assert Interval(2, 3) <= Interval(2, 3)
        assert Interval(2, 3) >= Interval(2, 3)

    def test_equality_and_hash(self):
        """Test equal intervals hash alike."""
        assert Interval(1, 2) == Interval(1, 2)
        assert Interval(1, 2) != Interval(1, 3)
        assert len({Interval(1, 2), Interval(1, 2), Interval(0, 2)}) == 2

    def test_not_equal_to_tuple(self):
        """Test intervals do not compare equal to plain tuples."""
        assert Interval(1, 2) != (1, 2)

    def test_sorting(self):
        """Test sorting a list of intervals."""
        intervals = [Interval(5, 6), Interval(1, 8), Interval(1, 2), Interval(3, 3)]
        assert sorted(intervals) == [
            Interval(1, 2), Interval(1, 8), Interval(3, 3), Interval(5, 6)
        ]

    def test_unpacking(self):
        """Test unpacking into endpoints."""
        low, high = Interval(4, 10)
        assert (low, high) == (4, 10)

    def test_overlaps(self):
        """Test closed-interval overlap."""
        assert Interval(1, 5).overlaps(Interval(5, 9))
        assert Interval(3, 4).overlaps(Interval(1, 10))
        assert not Interval(1, 2).overlaps(Interval(3, 4))

    def test_contains(self):
        """Test point containment."""
        i = Interval(2, 4)
        assert i.contains(2)
        assert i.contains(4)
        assert not i.contains(5)

    def test_non_numeric_endpoints(self):
        """Test string endpoints."""
        assert Interval("a", "c") < Interval("b", "b")

    def test_repr(self):
        """Test repr."""
        assert repr(Interval(1, 2)) == "Interval(1, 2)"


class TestEntry:
    """Test Entry pair."""

    def test_fields(self):
        """Test key and value access."""
        e = Entry(Interval(1, 2), "payload")
        assert e.key == Interval(1, 2)
        assert e.value == "payload"

    def test_read_only(self):
        """Test entries cannot be modified."""
        e = Entry(Interval(1, 2), "payload")
        with pytest.raises(AttributeError):
            e.value = "other"
