"""
Interval keys and tree entries.

Intervals are closed ``[low, high]`` ranges over any totally ordered endpoint
type. They order lexicographically by ``(low, high)``, which is the order the
interval tree sorts its nodes by.
"""

from __future__ import annotations

from typing import Any, Generic, NamedTuple, TypeVar

T = TypeVar("T")


class Interval(Generic[T]):
    """Immutable closed interval used as a sort and search key."""

    __slots__ = ("_low", "_high")

    def __init__(self, low: T, high: T):
        """
        Initialize interval.

        Args:
            low: Lower endpoint
            high: Upper endpoint, must not be less than ``low``

        Raises:
            ValueError: If ``high < low``
        """
        if high < low:
            raise ValueError(f"Interval high {high!r} is less than low {low!r}")
        self._low = low
        self._high = high

    @property
    def low(self) -> T:
        return self._low

    @property
    def high(self) -> T:
        return self._high

    def _key(self) -> tuple[T, T]:
        return (self._low, self._high)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Interval[T]) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: Interval[T]) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: Interval[T]) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: Interval[T]) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Interval({self._low!r}, {self._high!r})"

    def __iter__(self):
        yield self._low
        yield self._high

    def overlaps(self, other: Interval[T]) -> bool:
        """
        Check whether two closed intervals share at least one point.

        Args:
            other: Interval to test against

        Returns:
            True if the intervals intersect
        """
        return self._low <= other._high and other._low <= self._high

    def contains(self, point: T) -> bool:
        """Check whether ``point`` lies within the interval."""
        return self._low <= point <= self._high


class Entry(NamedTuple):
    """Key/value pair stored at a tree node."""
    key: Interval
    value: Any
