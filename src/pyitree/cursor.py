"""
Stateful, bidirectional cursor over an interval tree.

The cursor remembers one node of the tree and steps to its successor or
predecessor on demand. It makes no guarantees if nodes are inserted or removed
while it is in use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar, Union
import warnings

from .arena import Handle
from .interval import Interval

if TYPE_CHECKING:
    from .tree import IntervalTree

R = TypeVar("R")


class StaleCursorWarning(UserWarning):
    """The cursor's node was removed from the tree while the cursor was live."""
    pass


class _Seek:
    """Not stepped yet; the first step searches from this key."""
    __slots__ = ("key",)

    def __init__(self, key: Interval):
        self.key = key


class _Start:
    """Not stepped yet; the first step starts from an end of the tree."""
    __slots__ = ()


class _Positioned:
    """Anchored at a node."""
    __slots__ = ("handle",)

    def __init__(self, handle: Handle):
        self.handle = handle


class _Exhausted:
    """
    No current node: the tree was empty or a step ran off the end.

    Steps from here restart at the matching end of the tree, so a traversal
    that runs past the last entry wraps around on the following call.
    """
    __slots__ = ()


_START = _Start()
_EXHAUSTED = _Exhausted()

_State = Union[_Seek, _Start, _Positioned, _Exhausted]


class Cursor(Generic[R]):
    """
    Bidirectional cursor over an ``IntervalTree``.

    ``next()`` moves toward larger keys and ``prev()`` toward smaller ones.
    Both return ``map_fn(value, key)`` for the node reached, or None when
    there is no such node.
    """

    def __init__(
        self,
        tree: IntervalTree,
        interval: Optional[Interval],
        map_fn: Callable[[Any, Interval], R],
    ):
        """
        Initialize cursor.

        Args:
            tree: Tree to traverse; not modified by the cursor
            interval: Seek target for the first step, or None to start from
                the lowest (``next``) or highest (``prev``) entry
            map_fn: Maps each reached node's ``(value, key)`` to the output
        """
        self._tree = tree
        self._map_fn = map_fn
        self._state: _State = _Seek(interval) if interval is not None else _START

    def next(self) -> Optional[R]:
        """
        Step to the next entry in ascending order.

        Returns:
            Mapped successor, or None if there is none
        """
        tree = self._tree
        state = self._current_state()
        if isinstance(state, _Positioned):
            handle = tree.successor_of(state.handle)
        elif isinstance(state, _Seek):
            handle = tree.nearest_at_or_after(tree.root, state.key)
        else:
            root = tree.root
            handle = tree.minimum_of(root) if root is not None else None
        return self._land(handle)

    def prev(self) -> Optional[R]:
        """
        Step to the previous entry in ascending order.

        Returns:
            Mapped predecessor, or None if there is none
        """
        tree = self._tree
        state = self._current_state()
        if isinstance(state, _Positioned):
            handle = tree.predecessor_of(state.handle)
        elif isinstance(state, _Seek):
            handle = tree.nearest_at_or_before(tree.root, state.key)
        else:
            root = tree.root
            handle = tree.maximum_of(root) if root is not None else None
        return self._land(handle)

    def is_valid(self) -> bool:
        """Check whether the cursor is anchored at a node still in the tree."""
        state = self._state
        return isinstance(state, _Positioned) and self._tree.is_valid(state.handle)

    def _current_state(self) -> _State:
        state = self._state
        if isinstance(state, _Positioned) and not self._tree.is_valid(state.handle):
            warnings.warn(
                "Cursor position was removed from the tree; "
                "restarting from the end of the tree.",
                StaleCursorWarning,
                stacklevel=3
            )
            return _EXHAUSTED
        return state

    def _land(self, handle: Optional[Handle]) -> Optional[R]:
        """Record the step result, consuming any seek target."""
        if handle is None:
            self._state = _EXHAUSTED
            return None
        self._state = _Positioned(handle)
        entry = self._tree.entry(handle)
        return self._map_fn(entry.value, entry.key)
