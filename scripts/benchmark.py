#!/usr/bin/env python3
"""
Benchmark script for comparing nearest-agent strategies.

Places the same agents in every matcher, runs one query stream through
each, and reports time and candidates evaluated per query.
"""

import sys
import time
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from driver_matching.core.workload import random_placements, random_queries, apply_placements
from driver_matching.spatial.matchers import create_all
from driver_matching.spatial.strategy import MatcherStrategy


def benchmark(size: int, agent_count: int, num_queries: int = 2000, bucket_size: int = 32) -> list:
    """Run every strategy on a size x size grid with agent_count agents"""
    print(f"\nBenchmarking {agent_count:,} agents on {size}x{size}...")

    rng = np.random.default_rng(42)
    matchers = create_all(size, size, bucket_size)

    init_start = time.perf_counter()
    apply_placements(matchers.values(), random_placements(size, size, agent_count, rng))
    init_time = time.perf_counter() - init_start

    queries = random_queries(size, size, num_queries, rng)
    baseline = [matchers[MatcherStrategy.LINEAR].find_nearest(x, y) for x, y in queries]

    results = []
    for strategy, matcher in matchers.items():
        query_times = []
        candidates = 0
        mismatches = 0
        for (x, y), expected in zip(queries, baseline):
            start = time.perf_counter()
            found, stats = matcher.find_nearest_with_stats(x, y)
            query_times.append(time.perf_counter() - start)
            candidates += stats.candidates
            if found != expected:
                mismatches += 1

        avg_us = sum(query_times) / len(query_times) * 1e6
        print(f"  {strategy.value:>6}: {avg_us:.1f}us avg, {candidates / num_queries:.1f} candidates")

        results.append({
            'strategy': strategy.value,
            'grid_size': size,
            'agent_count': agent_count,
            'init_time_s': init_time,
            'avg_query_us': avg_us,
            'min_query_us': min(query_times) * 1e6,
            'max_query_us': max(query_times) * 1e6,
            'avg_candidates': candidates / num_queries,
            'mismatches': mismatches,
        })

    return results


def main():
    print("=" * 70)
    print("Nearest-Agent Matching Benchmark")
    print("=" * 70)

    # Test different densities
    results = []

    for size, count in [(500, 5000), (1000, 20000), (2000, 100000)]:
        results.extend(benchmark(size, count, num_queries=500))

    # Summary
    print("\n" + "=" * 70)
    print("BENCHMARK RESULTS")
    print("=" * 70)
    print(f"{'Strategy':>8} | {'Grid':>6} | {'Agents':>8} | {'Avg (us)':>10} | {'Cand.':>10} | {'Bad':>4}")
    print("-" * 70)

    for r in results:
        print(f"{r['strategy']:>8} | {r['grid_size']:>6} | {r['agent_count']:>8,} | "
              f"{r['avg_query_us']:>10.1f} | {r['avg_candidates']:>10.1f} | {r['mismatches']:>4}")

    print("\n" + "=" * 70)

    # Every strategy must agree with the linear scan
    for r in results:
        status = "✓" if r['mismatches'] == 0 else "✗"
        print(f"{r['strategy']} @ {r['agent_count']:,} agents: {r['mismatches']} mismatches {status}")


if __name__ == '__main__':
    main()
