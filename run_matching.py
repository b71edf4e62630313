#!/usr/bin/env python3
"""
Main entry point for running nearest-agent matching.

Usage:
    python run_matching.py                          # Run with defaults
    python run_matching.py --strategy ring          # Pick a strategy
    python run_matching.py --config my.yaml         # Use custom config
    python run_matching.py --verify                 # Compare against linear scan
    python run_matching.py --query 10 20            # Print nearest 5 to (10, 20)
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent))

from driver_matching.config import MatcherConfig, load_config
from driver_matching.core.events import EventLogger
from driver_matching.core.workload import random_placements, random_queries, apply_placements
from driver_matching.errors import MatchingError
from driver_matching.spatial.matchers import create_from_config, strategy_names
from driver_matching.spatial.strategy import MatcherStrategy


def main():
    parser = argparse.ArgumentParser(description='Nearest-agent matching on an integer grid')

    parser.add_argument('--config', type=str, default='config/defaults.yaml',
                        help='Path to config YAML file')
    parser.add_argument('--strategy', type=str, choices=strategy_names(), default=None,
                        help='Override matcher strategy')
    parser.add_argument('--width', type=int, default=None,
                        help='Override grid width')
    parser.add_argument('--height', type=int, default=None,
                        help='Override grid height')
    parser.add_argument('--bucket-size', type=int, default=None,
                        help='Override bucket size')
    parser.add_argument('--agents', type=int, default=None,
                        help='Override agent count')
    parser.add_argument('--queries', type=int, default=None,
                        help='Override query count')
    parser.add_argument('--seed', type=int, default=None,
                        help='Override random seed')
    parser.add_argument('--verify', action='store_true',
                        help='Check every result against the linear scan')
    parser.add_argument('--events', action='store_true',
                        help='Write mutation and query events to the event log')
    parser.add_argument('--query', type=int, nargs=2, metavar=('X', 'Y'), default=None,
                        help='Print the nearest agents to a single point')

    args = parser.parse_args()

    # Load config
    config_path = Path(args.config)
    if config_path.exists():
        config = load_config(str(config_path))
        print(f"Loaded config from {config_path}")
    else:
        config = MatcherConfig()
        print("Using default config")

    # Apply overrides
    if args.strategy:
        config.STRATEGY = args.strategy
    if args.width:
        config.GRID_WIDTH = args.width
    if args.height:
        config.GRID_HEIGHT = args.height
    if args.bucket_size:
        config.BUCKET_SIZE = args.bucket_size
    if args.agents is not None:
        config.AGENT_COUNT = args.agents
    if args.queries is not None:
        config.QUERY_COUNT = args.queries
    if args.seed is not None:
        config.SEED = args.seed
    if args.events:
        config.EVENT_LOG_ENABLED = True

    try:
        config.validate()
    except MatchingError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(2)

    event_logger = None
    if config.EVENT_LOG_ENABLED:
        event_logger = EventLogger(
            log_dir=config.EVENT_LOG_DIR,
            buffer_size=config.EVENT_BUFFER_SIZE,
            compress=config.EVENT_LOG_COMPRESS
        )

    print(f"\nInitializing matcher...")
    print(f"  Grid: {config.GRID_WIDTH}x{config.GRID_HEIGHT}")
    print(f"  Strategy: {config.STRATEGY}")
    if config.STRATEGY == MatcherStrategy.BUCKET.value:
        print(f"  Bucket size: {config.BUCKET_SIZE}")
    print(f"  Agents: {config.AGENT_COUNT:,}")
    print(f"  Seed: {config.SEED}")

    rng = np.random.default_rng(config.SEED)
    matcher = create_from_config(config, event_logger=event_logger)
    baseline = create_from_config(config, strategy=MatcherStrategy.LINEAR) if args.verify else None

    placements = random_placements(config.GRID_WIDTH, config.GRID_HEIGHT, config.AGENT_COUNT, rng)
    start = time.perf_counter()
    apply_placements([matcher], placements)
    print(f"  Placed {len(matcher):,} agents in {time.perf_counter() - start:.2f}s")
    if baseline is not None:
        apply_placements([baseline], placements)

    try:
        if args.query:
            qx, qy = args.query
            results, stats = matcher.find_nearest_with_stats(qx, qy)
            print(f"\nNearest agents to ({qx}, {qy}):")
            print(f"{'Rank':>5} | {'Id':>10} | {'X':>7} | {'Y':>7} | {'Dist2':>12}")
            print("-" * 52)
            for rank, r in enumerate(results, 1):
                print(f"{rank:>5} | {r.id:>10} | {r.x:>7} | {r.y:>7} | {r.dist2:>12}")
            print(f"\n  Candidates evaluated: {stats.candidates:,}")
            return

        queries = random_queries(config.GRID_WIDTH, config.GRID_HEIGHT, config.QUERY_COUNT, rng)
        print(f"\nRunning {len(queries):,} queries...")

        mismatches = 0
        candidates = 0
        elapsed = 0.0
        for qx, qy in queries:
            start = time.perf_counter()
            results, stats = matcher.find_nearest_with_stats(qx, qy)
            elapsed += time.perf_counter() - start
            candidates += stats.candidates

            if baseline is not None and results != baseline.find_nearest(qx, qy):
                mismatches += 1

        n = max(len(queries), 1)
        print(f"\n{'='*50}")
        print("Final Statistics:")
        print(f"  Queries: {len(queries):,}")
        print(f"  Avg query: {elapsed / n * 1e6:.1f}us")
        print(f"  Avg candidates: {candidates / n:.1f}")
        if baseline is not None:
            print(f"  Mismatches vs linear: {mismatches}")

    finally:
        if event_logger is not None:
            event_logger.close()
            print(f"  Events logged: {event_logger.get_stats()['total_events']:,}")

    if baseline is not None and mismatches:
        sys.exit(1)


if __name__ == '__main__':
    main()
