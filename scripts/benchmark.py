#!/usr/bin/env python3
"""
Benchmark Script for flushkv

Measures store mutation, lookup and serialization costs without disk I/O.
Flushes go to an in-memory sink.

Usage:
    python scripts/benchmark.py                    # Run all benchmarks
    python scripts/benchmark.py --operations 10000 # Custom operation count
    python scripts/benchmark.py --profile          # Enable cProfile
"""

import argparse
import time
import random
import string
import statistics
from typing import List, Callable, Dict, Any
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flushkv.cache.store import Iterate, KeyValueStore
from flushkv.protocol.parser import ContentsParser
from flushkv.scheduling.timer import Timer
from flushkv.sink.memory import MemorySink


class IdleTimer(Timer):
    """Armed timer that never fires, so mutations are always deferred."""

    def __init__(self, callback):
        self._enabled = False

    def enable_timer(self, delay: float) -> None:
        self._enabled = True

    def disable_timer(self) -> None:
        self._enabled = False

    def enabled(self) -> bool:
        return self._enabled


def random_string(length: int) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choices(string.ascii_letters + string.digits, k=length))


def measure_time(func: Callable, iterations: int = 1) -> Dict[str, float]:
    """Measure execution time statistics."""
    times = []

    for _ in range(iterations):
        start = time.perf_counter()
        func()
        elapsed = (time.perf_counter() - start) * 1000  # Convert to ms
        times.append(elapsed)

    return {
        "min_ms": min(times),
        "max_ms": max(times),
        "mean_ms": statistics.mean(times),
        "median_ms": statistics.median(times),
        "total_ms": sum(times),
    }


class Benchmark:
    """Collection of benchmarks for flushkv components."""

    def __init__(self, operations: int = 10000, key_size: int = 16, value_size: int = 64):
        self.operations = operations
        self.key_size = key_size
        self.value_size = value_size

        # Pre-generate test data
        self.keys = [random_string(key_size) for _ in range(operations)]
        self.values = [random_string(value_size) for _ in range(operations)]

    def _armed_store(self) -> KeyValueStore:
        return KeyValueStore(MemorySink(), flush_interval=60, timer_factory=IdleTimer)

    def _finish(self, stats: Dict[str, Any], operation: str, count: int) -> Dict[str, Any]:
        stats["ops_per_second"] = count / (stats["total_ms"] / 1000)
        stats["operation"] = operation
        stats["count"] = count
        return stats

    def benchmark_add_armed(self) -> Dict[str, Any]:
        """Benchmark add_or_update with flushing deferred to the timer."""
        store = self._armed_store()

        def run():
            for i in range(self.operations):
                store.add_or_update(self.keys[i], self.values[i])

        return self._finish(measure_time(run), "add_or_update (armed)", self.operations)

    def benchmark_add_disarmed(self) -> Dict[str, Any]:
        """Benchmark add_or_update flushing on every call."""
        # Each flush serializes the whole store, so keep the store small
        count = min(self.operations, 1000)
        store = KeyValueStore(MemorySink(), flush_interval=0, timer_factory=IdleTimer)

        def run():
            for i in range(count):
                store.add_or_update(self.keys[i], self.values[i])

        return self._finish(measure_time(run), "add_or_update (disarmed)", count)

    def benchmark_get(self) -> Dict[str, Any]:
        """Benchmark get hits."""
        store = self._armed_store()
        for i in range(self.operations):
            store.add_or_update(self.keys[i], self.values[i])

        def run():
            for i in range(self.operations):
                store.get(self.keys[i])

        return self._finish(measure_time(run), "get (hit)", self.operations)

    def benchmark_get_miss(self) -> Dict[str, Any]:
        """Benchmark get misses."""
        store = self._armed_store()
        miss_keys = [random_string(self.key_size) for _ in range(self.operations)]

        def run():
            for key in miss_keys:
                store.get(key)

        return self._finish(measure_time(run), "get (miss)", self.operations)

    def benchmark_iterate(self) -> Dict[str, Any]:
        """Benchmark a full iterate() pass, including the snapshot check."""
        store = self._armed_store()
        for i in range(self.operations):
            store.add_or_update(self.keys[i], self.values[i])

        def run():
            store.iterate(lambda key, value: Iterate.CONTINUE)

        return self._finish(measure_time(run, iterations=10), "iterate (entries)", self.operations * 10)

    def benchmark_format(self) -> Dict[str, Any]:
        """Benchmark serializing the whole store."""
        parser = ContentsParser()
        mapping = dict(zip(self.keys, self.values))

        def run():
            parser.format_contents(mapping)

        return self._finish(measure_time(run, iterations=10), "format_contents (entries)", self.operations * 10)

    def benchmark_parse(self) -> Dict[str, Any]:
        """Benchmark decoding the whole store."""
        parser = ContentsParser()
        data = parser.format_contents(dict(zip(self.keys, self.values)))

        def run():
            parser.parse_contents(data, {})

        return self._finish(measure_time(run, iterations=10), "parse_contents (entries)", self.operations * 10)

    def run_all(self) -> List[Dict[str, Any]]:
        """Run all benchmarks."""
        benchmarks = [
            ("add_or_update (armed)", self.benchmark_add_armed),
            ("add_or_update (disarmed)", self.benchmark_add_disarmed),
            ("get (hit)", self.benchmark_get),
            ("get (miss)", self.benchmark_get_miss),
            ("iterate", self.benchmark_iterate),
            ("format_contents", self.benchmark_format),
            ("parse_contents", self.benchmark_parse),
        ]

        results = []
        for name, func in benchmarks:
            print(f"Running: {name}...", end=" ", flush=True)
            result = func()
            print(f"{result['ops_per_second']:,.0f} ops/sec")
            results.append(result)

        return results


def print_results(results: List[Dict[str, Any]]):
    """Print benchmark results in a table."""
    print()
    print("=" * 74)
    print("                          BENCHMARK RESULTS")
    print("=" * 74)
    print(f"{'Operation':<34} {'Ops/sec':>12} {'Mean (ms)':>12} {'Total (ms)':>12}")
    print("-" * 74)

    for r in results:
        print(f"{r['operation']:<34} {r['ops_per_second']:>12,.0f} "
              f"{r['mean_ms']:>12.3f} {r['total_ms']:>12.1f}")

    print("=" * 74)


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark flushkv components",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--operations", "-n",
        type=int,
        default=10000,
        help="Number of operations per benchmark"
    )
    parser.add_argument(
        "--key-size",
        type=int,
        default=16,
        help="Size of keys"
    )
    parser.add_argument(
        "--value-size",
        type=int,
        default=64,
        help="Size of values"
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable cProfile profiling"
    )

    args = parser.parse_args()

    print(f"flushkv Benchmark")
    print(f"=================")
    print(f"Operations per test: {args.operations:,}")
    print(f"Key size: {args.key_size}")
    print(f"Value size: {args.value_size}")
    print()

    benchmark = Benchmark(
        operations=args.operations,
        key_size=args.key_size,
        value_size=args.value_size,
    )

    if args.profile:
        import cProfile
        import pstats

        profiler = cProfile.Profile()
        profiler.enable()
        results = benchmark.run_all()
        profiler.disable()

        print_results(results)

        print()
        print("Profiling Results (top 20):")
        print("-" * 74)
        stats = pstats.Stats(profiler)
        stats.sort_stats('cumulative')
        stats.print_stats(20)
    else:
        results = benchmark.run_all()
        print_results(results)


if __name__ == "__main__":
    main()
