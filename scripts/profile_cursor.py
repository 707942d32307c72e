"""
Profiling script for PyITree cursor traversal.

Measures tree construction and cursor walks to check that stepping stays
proportional to the number of entries visited.
"""

import cProfile
import pstats
import io
from pstats import SortKey
import time
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
from pyitree import Interval, IntervalTree


def create_tree(n_entries, max_width=50):
    """Create a tree of n random intervals."""
    rng = np.random.default_rng(42)
    lows = rng.integers(0, n_entries * 10, size=n_entries)
    widths = rng.integers(0, max_width, size=n_entries)

    tree = IntervalTree(capacity=n_entries)
    for i, (low, width) in enumerate(zip(lows.tolist(), widths.tolist())):
        tree.insert(Interval(low, low + width), i)
    return tree


def walk_forward(tree):
    """Walk the whole tree with next()."""
    cursor = tree.cursor(map_fn=lambda value, key: value)
    count = 0
    while cursor.next() is not None:
        count += 1
    return count


def walk_backward(tree):
    """Walk the whole tree with prev()."""
    cursor = tree.cursor(map_fn=lambda value, key: value)
    count = 0
    while cursor.prev() is not None:
        count += 1
    return count


def seek_many(tree, n_seeks=1000):
    """Open many seeded cursors and take a few steps from each."""
    rng = np.random.default_rng(7)
    for low in rng.integers(0, len(tree) * 10, size=n_seeks).tolist():
        cursor = tree.cursor(Interval(low, low))
        for _ in range(5):
            cursor.next()


def benchmark_scenario(name, func):
    """Benchmark a scenario and print timing."""
    print(f"\n{'='*60}")
    print(f"Profiling: {name}")
    print('='*60)

    profiler = cProfile.Profile()

    start_time = time.time()
    profiler.enable()
    func()
    profiler.disable()
    elapsed = time.time() - start_time

    print(f"\nTotal time: {elapsed:.3f}s")

    s = io.StringIO()
    ps = pstats.Stats(profiler, stream=s).sort_stats(SortKey.CUMULATIVE)
    ps.print_stats(20)  # Top 20 functions

    print("\nTop 20 functions by cumulative time:")
    print(s.getvalue())

    return profiler


def main():
    """Run all profiling scenarios."""
    print("PyITree Cursor Profiling")
    print("=" * 60)

    small = create_tree(1_000)
    large = create_tree(50_000)

    scenarios = [
        ("Build (50000 entries)", lambda: create_tree(50_000)),
        ("Forward walk (1000 entries)", lambda: walk_forward(small)),
        ("Forward walk (50000 entries)", lambda: walk_forward(large)),
        ("Backward walk (50000 entries)", lambda: walk_backward(large)),
        ("Seeded cursors (1000 seeks)", lambda: seek_many(large)),
    ]

    for name, func in scenarios:
        benchmark_scenario(name, func)


if __name__ == "__main__":
    main()
