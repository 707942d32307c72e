"""
PyITree: interval tree with a bidirectional traversal cursor.

Python port of an interval tree cursor for walking intervals in sorted order,
optionally starting from a key that is not in the tree.
"""

__version__ = "0.1.0"

from .interval import Interval, Entry
from .arena import Handle, NodeArena
from .cursor import Cursor, StaleCursorWarning
from .tree import IntervalTree

__all__ = [
    "Interval",
    "Entry",
    "Handle",
    "NodeArena",
    "Cursor",
    "StaleCursorWarning",
    "IntervalTree",
]
