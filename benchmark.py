"""
Benchmark: structset path-copying vs the deepcopy-then-assign idiom.

The usual way to "update without mutating" in Python is

    new = copy.deepcopy(base)
    new["a"]["b"][0] = value

which costs time proportional to the WHOLE structure.  structset
copies only the containers on the path, so its cost is proportional
to depth × width of the touched levels.

The point is not only speed: the deepcopy result shares nothing with
the original, so consumers comparing references see every branch as
changed.
"""

import copy
import sys
import os
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from structset.core import update


# ═══════════════════════════════════════════════════════════════════
#  TEST DATA
# ═══════════════════════════════════════════════════════════════════

CONFIG = {
    "server": {"host": "0.0.0.0", "port": 443, "tls": True, "workers": 4},
    "database": {
        "host": "db.internal",
        "port": 5432,
        "replicas": [{"host": f"r{i}.internal", "lag_ms": 0} for i in range(8)],
    },
    "logging": {"level": "WARN", "outputs": ["stdout", "file"]},
    "features": {f"flag_{i}": bool(i % 2) for i in range(200)},
}


def make_tree(depth, width):
    """A mapping tree with `width` children per level."""
    if depth == 0:
        return 0
    return {f"k{i}": make_tree(depth - 1, width) for i in range(width)}


def deepcopy_set(base, path, value):
    new = copy.deepcopy(base)
    level = new
    for key in path[:-1]:
        level = level[key]
    level[path[-1]] = value
    return new


def _time(fn, repeat):
    start = time.perf_counter()
    for _ in range(repeat):
        fn()
    return (time.perf_counter() - start) / repeat


# ═══════════════════════════════════════════════════════════════════
#  BENCHMARKS
# ═══════════════════════════════════════════════════════════════════

def benchmark_config_update():
    print("=" * 70)
    print("  CONFIG UPDATE: database.replicas[3].lag_ms")
    print("=" * 70)

    path = ["database", "replicas", 3, "lag_ms"]
    t_set = _time(lambda: update(CONFIG, "database.replicas[3].lag_ms", 120), 2000)
    t_copy = _time(lambda: deepcopy_set(CONFIG, path, 120), 200)

    print(f"  structset.update     {t_set * 1e6:10.1f} µs")
    print(f"  deepcopy + assign    {t_copy * 1e6:10.1f} µs")
    print(f"  speedup              {t_copy / t_set:10.1f}×")

    new = update(CONFIG, path, 120)
    shared = sum(new[k] is CONFIG[k] for k in CONFIG)
    print(f"  top-level branches shared: {shared}/{len(CONFIG)}")
    print()


def benchmark_safe_noop():
    print("=" * 70)
    print("  SAFE NO-OP: value already present")
    print("=" * 70)

    t_safe = _time(lambda: update(CONFIG, "server.port", 443, safe=True), 5000)
    t_plain = _time(lambda: update(CONFIG, "server.port", 443), 5000)
    print(f"  safe=True (returns base)   {t_safe * 1e6:8.2f} µs")
    print(f"  safe=False (copies path)   {t_plain * 1e6:8.2f} µs")
    print()


def benchmark_scaling():
    print("=" * 70)
    print("  SCALING: tree width 8, one leaf updated")
    print("=" * 70)
    print(f"  {'depth':>5}  {'nodes':>8}  {'structset':>12}  {'deepcopy':>12}")

    for depth in range(2, 7):
        tree = make_tree(depth, 8)
        path = ["k0"] * depth
        nodes = sum(8 ** d for d in range(1, depth + 1))
        repeat_copy = max(1, 2000 // nodes)
        t_set = _time(lambda: update(tree, path, 1), 1000)
        t_copy = _time(lambda: deepcopy_set(tree, path, 1), repeat_copy)
        print(f"  {depth:>5}  {nodes:>8}  {t_set * 1e6:>10.1f}µs  {t_copy * 1e6:>10.1f}µs")
    print()


def benchmark_group():
    print("=" * 70)
    print("  GROUP: 200 feature flags in one call vs 200 calls")
    print("=" * 70)

    keys = list(CONFIG["features"])
    values = [True] * len(keys)

    def one_by_one():
        base = CONFIG
        for k in keys:
            base = update(base, ["features", k], True)
        return base

    t_group = _time(lambda: update(CONFIG, ["features", keys], values), 200)
    t_loop = _time(one_by_one, 20)
    print(f"  one grouped update   {t_group * 1e6:10.1f} µs")
    print(f"  200 single updates   {t_loop * 1e6:10.1f} µs")
    print()


def main():
    benchmark_config_update()
    benchmark_safe_noop()
    benchmark_scaling()
    benchmark_group()


if __name__ == "__main__":
    main()
