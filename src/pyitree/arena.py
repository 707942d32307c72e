"""
Index-based node storage for the interval tree.

Nodes live in parallel arrays and refer to each other by slot index rather
than by object reference. A node is handed out to callers as a ``Handle``
carrying the slot index and the slot's generation; releasing a slot bumps its
generation, so handles to removed nodes can be detected as stale.
"""

from __future__ import annotations

from typing import Any, NamedTuple, Optional

import numpy as np
from sortedcontainers import SortedList

from .interval import Entry

NIL = -1


class Handle(NamedTuple):
    """Opaque reference to a tree node."""
    index: int
    generation: int


class NodeArena:
    """
    Growable pool of tree nodes.

    Link fields (parent, left, right), AVL heights and slot generations are
    stored in numpy arrays. Entries and subtree ``max_high`` values are kept
    in Python lists since endpoints may be any comparable type.
    """

    def __init__(self, capacity: int = 16):
        """
        Initialize arena.

        Args:
            capacity: Initial number of slots; the arena doubles when full

        Raises:
            ValueError: If capacity is less than 1
        """
        if capacity < 1:
            raise ValueError(f"Arena capacity must be positive, got {capacity}")
        self.parent = np.full(capacity, NIL, dtype=np.int64)
        self.left = np.full(capacity, NIL, dtype=np.int64)
        self.right = np.full(capacity, NIL, dtype=np.int64)
        self.height = np.zeros(capacity, dtype=np.int64)
        self.generation = np.zeros(capacity, dtype=np.int64)
        self.live = np.zeros(capacity, dtype=bool)
        self.entries: list[Optional[Entry]] = [None] * capacity
        self.max_high: list[Any] = [None] * capacity
        self._free = SortedList(range(capacity))
        self._count = 0

    @property
    def capacity(self) -> int:
        return len(self.entries)

    def __len__(self) -> int:
        return self._count

    def _grow(self) -> None:
        """Double the number of slots."""
        old = self.capacity
        new = old * 2

        def extend(arr: np.ndarray, fill) -> np.ndarray:
            out = np.full(new, fill, dtype=arr.dtype)
            out[:old] = arr
            return out

        self.parent = extend(self.parent, NIL)
        self.left = extend(self.left, NIL)
        self.right = extend(self.right, NIL)
        self.height = extend(self.height, 0)
        self.generation = extend(self.generation, 0)
        self.live = extend(self.live, False)
        self.entries.extend([None] * (new - old))
        self.max_high.extend([None] * (new - old))
        self._free.update(range(old, new))

    def allocate(self, entry: Entry) -> int:
        """
        Take the lowest free slot and initialize it as a detached leaf.

        Args:
            entry: Entry to store

        Returns:
            Slot index
        """
        if not self._free:
            self._grow()
        index = self._free.pop(0)
        self.parent[index] = NIL
        self.left[index] = NIL
        self.right[index] = NIL
        self.height[index] = 1
        self.live[index] = True
        self.entries[index] = entry
        self.max_high[index] = entry.key.high
        self._count += 1
        return index

    def release(self, index: int) -> None:
        """Return a slot to the free pool, invalidating outstanding handles."""
        self.live[index] = False
        self.generation[index] += 1
        self.entries[index] = None
        self.max_high[index] = None
        self._free.add(index)
        self._count -= 1

    def handle(self, index: int) -> Handle:
        return Handle(index, int(self.generation[index]))

    def is_live(self, handle: Handle) -> bool:
        """
        Check whether a handle still refers to the node it was issued for.

        Args:
            handle: Handle to check

        Returns:
            True if the slot is occupied and its generation matches
        """
        index, generation = handle
        if not 0 <= index < self.capacity:
            return False
        return bool(self.live[index]) and int(self.generation[index]) == generation

    def resolve(self, handle: Handle) -> int:
        """
        Map a handle to its slot index.

        Raises:
            KeyError: If the handle is stale
        """
        if not self.is_live(handle):
            raise KeyError(handle)
        return handle.index
