"""
AVL interval tree over an index arena.

Nodes are ordered by their interval key and augmented with the maximum upper
endpoint of their subtree, which prunes overlap queries. The tree also exposes
the parent-link traversal primitives consumed by ``Cursor``: successor,
predecessor, nearest-neighbor search and subtree extremes.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, TypeVar

from .arena import NIL, Handle, NodeArena
from .cursor import Cursor
from .interval import Entry, Interval

R = TypeVar("R")


def _entry_of(value: Any, key: Interval) -> Entry:
    return Entry(key, value)


class IntervalTree:
    """
    Balanced binary search tree keyed by intervals.

    Duplicate keys are allowed; a newly inserted duplicate sorts after the
    existing ones. Handles returned by ``insert`` stay valid until their own
    node is removed.
    """

    def __init__(self, capacity: int = 16):
        """
        Initialize an empty tree.

        Args:
            capacity: Initial arena size
        """
        self._arena = NodeArena(capacity)
        self._root = NIL

    # --- Arena accessors ---

    def _parent(self, i: int) -> int:
        return int(self._arena.parent[i])

    def _left(self, i: int) -> int:
        return int(self._arena.left[i])

    def _right(self, i: int) -> int:
        return int(self._arena.right[i])

    def _key(self, i: int) -> Interval:
        return self._arena.entries[i].key

    def _height(self, i: int) -> int:
        return int(self._arena.height[i]) if i != NIL else 0

    def _handle(self, i: int) -> Optional[Handle]:
        return self._arena.handle(i) if i != NIL else None

    # --- Balancing ---

    def _update(self, i: int) -> None:
        a = self._arena
        left, right = self._left(i), self._right(i)
        a.height[i] = 1 + max(self._height(left), self._height(right))

        m = a.entries[i].key.high
        if left != NIL:
            m = max(m, a.max_high[left])
        if right != NIL:
            m = max(m, a.max_high[right])
        a.max_high[i] = m

    def _replace_child(self, parent: int, old: int, new: int) -> None:
        a = self._arena
        if parent == NIL:
            self._root = new
        elif self._left(parent) == old:
            a.left[parent] = new
        else:
            a.right[parent] = new

    def _rotate_left(self, x: int) -> None:
        a = self._arena
        y = self._right(x)
        inner = self._left(y)
        a.right[x] = inner
        if inner != NIL:
            a.parent[inner] = x
        a.parent[y] = a.parent[x]
        self._replace_child(self._parent(x), x, y)
        a.left[y] = x
        a.parent[x] = y
        self._update(x)
        self._update(y)

    def _rotate_right(self, y: int) -> None:
        a = self._arena
        x = self._left(y)
        inner = self._right(x)
        a.left[y] = inner
        if inner != NIL:
            a.parent[inner] = y
        a.parent[x] = a.parent[y]
        self._replace_child(self._parent(y), y, x)
        a.right[x] = y
        a.parent[y] = x
        self._update(y)
        self._update(x)

    def _rebalance(self, i: int) -> None:
        """Restore heights, augmentation and AVL balance from ``i`` up to the root."""
        while i != NIL:
            self._update(i)
            left, right = self._left(i), self._right(i)
            balance = self._height(left) - self._height(right)
            if balance > 1:
                if self._height(self._left(left)) < self._height(self._right(left)):
                    self._rotate_left(left)
                self._rotate_right(i)
            elif balance < -1:
                if self._height(self._right(right)) < self._height(self._left(right)):
                    self._rotate_right(right)
                self._rotate_left(i)
            i = self._parent(i)

    def _transplant(self, u: int, v: int) -> None:
        """Put subtree ``v`` where ``u`` hangs from its parent."""
        parent = self._parent(u)
        self._replace_child(parent, u, v)
        if v != NIL:
            self._arena.parent[v] = parent

    # --- Public API ---

    @property
    def root(self) -> Optional[Handle]:
        """Handle of the root node, or None if the tree is empty."""
        return self._handle(self._root)

    def __len__(self) -> int:
        return len(self._arena)

    def __iter__(self) -> Iterator[Entry]:
        """Iterate over entries in ascending key order."""
        if self._root == NIL:
            return
        i = self._min_index(self._root)
        while i != NIL:
            yield self._arena.entries[i]
            i = self._successor_index(i)

    def insert(self, interval: Interval, value: Any = None) -> Handle:
        """
        Insert an entry.

        Args:
            interval: Key of the new entry
            value: Payload of the new entry

        Returns:
            Handle to the new node
        """
        a = self._arena
        x = a.allocate(Entry(interval, value))
        if self._root == NIL:
            self._root = x
            return a.handle(x)

        cur = self._root
        parent = NIL
        while cur != NIL:
            parent = cur
            if interval < self._key(cur):
                cur = self._left(cur)
            else:
                cur = self._right(cur)

        a.parent[x] = parent
        if interval < self._key(parent):
            a.left[parent] = x
        else:
            a.right[parent] = x

        self._rebalance(parent)
        return a.handle(x)

    def remove(self, handle: Handle) -> Entry:
        """
        Remove a node.

        Other nodes keep their slots, so their handles stay valid. The removed
        handle becomes stale.

        Args:
            handle: Node to remove

        Returns:
            The removed entry

        Raises:
            KeyError: If the handle is stale
        """
        a = self._arena
        z = a.resolve(handle)
        entry = a.entries[z]
        left, right = self._left(z), self._right(z)

        if left == NIL or right == NIL:
            start = self._parent(z)
            self._transplant(z, left if left != NIL else right)
        else:
            y = self._min_index(right)
            if self._parent(y) != z:
                start = self._parent(y)
                self._transplant(y, self._right(y))
                a.right[y] = right
                a.parent[right] = y
            else:
                start = y
            self._transplant(z, y)
            a.left[y] = left
            a.parent[left] = y

        a.release(z)
        self._rebalance(start)
        return entry

    def entry(self, handle: Handle) -> Entry:
        """
        Get the entry stored at a node.

        Raises:
            KeyError: If the handle is stale
        """
        return self._arena.entries[self._arena.resolve(handle)]

    def is_valid(self, handle: Handle) -> bool:
        """Check whether a handle still refers to a node in this tree."""
        return self._arena.is_live(handle)

    def cursor(
        self,
        interval: Optional[Interval] = None,
        map_fn: Optional[Callable[[Any, Interval], R]] = None,
    ) -> Cursor:
        """
        Create a cursor over this tree.

        Args:
            interval: Optional seek target for the first step
            map_fn: Output mapping ``(value, key) -> R``; defaults to
                returning the ``Entry``

        Returns:
            New cursor
        """
        return Cursor(self, interval, map_fn if map_fn is not None else _entry_of)

    # --- Traversal primitives ---

    def _min_index(self, i: int) -> int:
        while self._left(i) != NIL:
            i = self._left(i)
        return i

    def _max_index(self, i: int) -> int:
        while self._right(i) != NIL:
            i = self._right(i)
        return i

    def _successor_index(self, i: int) -> int:
        if self._right(i) != NIL:
            return self._min_index(self._right(i))
        p = self._parent(i)
        while p != NIL and i == self._right(p):
            i = p
            p = self._parent(p)
        return p

    def _predecessor_index(self, i: int) -> int:
        if self._left(i) != NIL:
            return self._max_index(self._left(i))
        p = self._parent(i)
        while p != NIL and i == self._left(p):
            i = p
            p = self._parent(p)
        return p

    def minimum_of(self, handle: Handle) -> Handle:
        """Leftmost node of the subtree rooted at ``handle``."""
        return self._arena.handle(self._min_index(self._arena.resolve(handle)))

    def maximum_of(self, handle: Handle) -> Handle:
        """Rightmost node of the subtree rooted at ``handle``."""
        return self._arena.handle(self._max_index(self._arena.resolve(handle)))

    def successor_of(self, handle: Handle) -> Optional[Handle]:
        """Next node in ascending key order, or None at the maximum."""
        return self._handle(self._successor_index(self._arena.resolve(handle)))

    def predecessor_of(self, handle: Handle) -> Optional[Handle]:
        """Previous node in ascending key order, or None at the minimum."""
        return self._handle(self._predecessor_index(self._arena.resolve(handle)))

    def nearest_at_or_after(self, root: Optional[Handle], key: Interval) -> Optional[Handle]:
        """
        Find the first node whose key is not less than ``key``.

        Among equal keys the earliest in traversal order wins.

        Args:
            root: Subtree to search, may be None
            key: Search target, need not be present

        Returns:
            Handle of the nearest node, or None if every key is smaller
        """
        if root is None:
            return None
        cur = self._arena.resolve(root)
        best = NIL
        while cur != NIL:
            if self._key(cur) >= key:
                best = cur
                cur = self._left(cur)
            else:
                cur = self._right(cur)
        return self._handle(best)

    def nearest_at_or_before(self, root: Optional[Handle], key: Interval) -> Optional[Handle]:
        """
        Find the last node whose key is not greater than ``key``.

        Among equal keys the latest in traversal order wins.
        """
        if root is None:
            return None
        cur = self._arena.resolve(root)
        best = NIL
        while cur != NIL:
            if self._key(cur) <= key:
                best = cur
                cur = self._right(cur)
            else:
                cur = self._left(cur)
        return self._handle(best)

    # --- Queries ---

    def find_overlapping(self, interval: Interval) -> list[Entry]:
        """
        Find entries whose key intersects ``interval``.

        Args:
            interval: Query range (closed)

        Returns:
            Matching entries in ascending key order
        """
        a = self._arena
        found: list[Entry] = []

        def _search(i: int) -> None:
            if i == NIL or a.max_high[i] < interval.low:
                return
            _search(self._left(i))
            key = self._key(i)
            if key.overlaps(interval):
                found.append(a.entries[i])
            if key.low <= interval.high:
                _search(self._right(i))

        _search(self._root)
        return found

    # --- Debug Tool ---

    def verify_integrity(self) -> None:
        """
        Check structural invariants.

        Raises:
            RuntimeError: On an AVL, ordering, parent link or max_high violation
        """
        a = self._arena
        if self._root != NIL and self._parent(self._root) != NIL:
            raise RuntimeError("Root has a parent")

        def _walk(i: int) -> tuple[int, int]:
            left, right = self._left(i), self._right(i)
            height, count = 1, 1
            expected_max = self._key(i).high
            for child in (left, right):
                if child == NIL:
                    continue
                if self._parent(child) != i:
                    raise RuntimeError(f"Parent link violation at {self._key(child)}")
                h, c = _walk(child)
                height = max(height, h + 1)
                count += c
                expected_max = max(expected_max, a.max_high[child])

            if abs(self._height(left) - self._height(right)) > 1:
                raise RuntimeError(f"AVL violation at {self._key(i)}")
            if self._height(i) != height:
                raise RuntimeError(f"Height violation at {self._key(i)}")
            if a.max_high[i] != expected_max:
                raise RuntimeError(f"max_high violation at {self._key(i)}")
            return height, count

        count = _walk(self._root)[1] if self._root != NIL else 0
        if count != len(self):
            raise RuntimeError(f"Tree reaches {count} nodes but arena holds {len(self)}")

        keys = [entry.key for entry in self]
        for earlier, later in zip(keys, keys[1:]):
            if later < earlier:
                raise RuntimeError(f"Order violation: {earlier} before {later}")
