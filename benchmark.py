"""
Benchmark: structpath copy-on-write vs the usual ways of updating nested data.

This benchmark compares structpath against:
    1. copy.deepcopy + in-place write — the safe-but-slow default
    2. pydash.set_with on a deep copy — popular path-based helper
    3. glom.assign on a deep copy — declarative path access

The point is NOT only "we're faster" — the point is:
    structpath shares every untouched subtree, so unchanged parts of the
    new tree are the SAME objects as before (cheap equality, cheap memory).
"""

import copy
import os
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from structpath.ops import get, merge, set_at_path


# ═══════════════════════════════════════════════════════════════════
#  TEST DATA
# ═══════════════════════════════════════════════════════════════════

def make_config(services: int) -> dict:
    return {
        "server": {"host": "0.0.0.0", "port": 443, "tls": {"enabled": False}},
        "services": [
            {
                "name": f"svc-{i}",
                "replicas": 2,
                "env": {f"VAR_{j}": str(j) for j in range(20)},
                "ports": list(range(8000, 8010)),
            }
            for i in range(services)
        ],
    }


PATH = ["server", "tls", "enabled"]


def _try_import(name):
    """Safely attempt to import an optional dependency by name."""
    import importlib
    try:
        return importlib.import_module(name)
    except ImportError:
        return None


def _time(fn, repeat: int = 50) -> float:
    t0 = time.perf_counter()
    for _ in range(repeat):
        fn()
    return (time.perf_counter() - t0) / repeat


# ═══════════════════════════════════════════════════════════════════
#  BENCHMARKS
# ═══════════════════════════════════════════════════════════════════

def benchmark_single_write():
    """One leaf write on trees of growing size."""
    print("=" * 70)
    print("  §1  SINGLE WRITE — structpath vs deepcopy")
    print("=" * 70)
    print()

    for services in [10, 100, 1000]:
        config = make_config(services)

        def with_deepcopy():
            clone = copy.deepcopy(config)
            clone["server"]["tls"]["enabled"] = True
            return clone

        cow = _time(lambda: set_at_path(PATH, True, config))
        deep = _time(with_deepcopy, repeat=5)
        print(f"  {services:>5} services:  structpath {cow*1000:>9.4f}ms   "
              f"deepcopy {deep*1000:>9.3f}ms   ({deep / cow:>8.0f}x)")
    print()


def benchmark_sharing():
    """How much of the new tree is shared with the old one."""
    print("=" * 70)
    print("  §2  STRUCTURAL SHARING")
    print("=" * 70)
    print()

    config = make_config(100)
    new = set_at_path(PATH, True, config)

    shared = sum(1 for a, b in zip(config["services"], new["services"]) if a is b)
    print(f"  services shared by reference: {shared}/{len(config['services'])}")
    print(f"  new['services'] is old['services']: {new['services'] is config['services']}")
    print(f"  old value untouched:                {get(PATH, config) is False}")
    print()


def benchmark_vs_libraries():
    """Compare with pydash and glom (if available)."""
    print("=" * 70)
    print("  §3  COMPARISON WITH EXISTING TOOLS")
    print("=" * 70)
    print()

    config = make_config(100)
    pydash = _try_import("pydash")
    glom = _try_import("glom")

    cow = _time(lambda: set_at_path(PATH, True, config))
    print(f"  structpath:  {cow*1000:.4f}ms   (input untouched, siblings shared)")

    if pydash:
        t = _time(lambda: pydash.set_with(copy.deepcopy(config), "server.tls.enabled", True), repeat=5)
        print(f"  pydash:      {t*1000:.4f}ms   (mutates, so needs a deep copy first)")
    else:
        print(f"  pydash:      NOT INSTALLED (pip install pydash)")

    if glom:
        t = _time(lambda: glom.assign(copy.deepcopy(config), "server.tls.enabled", True), repeat=5)
        print(f"  glom:        {t*1000:.4f}ms   (mutates, so needs a deep copy first)")
    else:
        print(f"  glom:        NOT INSTALLED (pip install glom)")
    print()


def benchmark_merge():
    """Layered config merge."""
    print("=" * 70)
    print("  §4  DEEP MERGE")
    print("=" * 70)
    print()

    for services in [10, 100, 1000]:
        base = make_config(services)
        override = {"server": {"port": 8443, "tls": {"enabled": True}}, "services": []}
        t = _time(lambda: merge(base, override), repeat=10)
        print(f"  {services:>5} services:  {t*1000:>8.3f}ms")
    print()


def main():
    print()
    print("╔══════════════════════════════════════════════════════════════════════╗")
    print("║          COPY-ON-WRITE PATH UPDATES — BENCHMARK SUITE               ║")
    print("║          structpath v0.1.0                                          ║")
    print("╚══════════════════════════════════════════════════════════════════════╝")
    print()

    benchmark_single_write()
    benchmark_sharing()
    benchmark_vs_libraries()
    benchmark_merge()


if __name__ == "__main__":
    main()
