#!/usr/bin/env python3
"""Simulation profiler focused on the balance hot path.

Usage:
    python scripts/profile_simulation.py --ticks 500 --seed 42
    python scripts/profile_simulation.py --ticks 2000 --mimics 200 --workers 4
    python scripts/profile_simulation.py --ticks 500 --cprofile profile.prof

Reports:
    - Per-tick timing statistics (min, p50, p95, p99, max)
    - Mimic count over time
    - Biome lookups per mimic-tick (effect of the per-chunk biome cache)
    - Throughput (ticks/sec)
    - Optional: cProfile dump
"""

from __future__ import annotations

import argparse
import cProfile
import io
import os
import pstats
import statistics
import sys
import tempfile
import time

# Ensure project root is on path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from mimic.api.engine_manager import EngineManager
from mimic.config import SimulationConfig


def _run_simulation(cfg: SimulationConfig, num_ticks: int) -> dict:
    """Run ticks synchronously and collect timing data."""
    mgr = EngineManager(cfg)

    tick_times: list[float] = []
    mimic_counts: list[int] = []
    mimic_ticks = 0

    try:
        for _ in range(num_ticks):
            t_start = time.perf_counter()
            if not mgr.tick_now():
                break
            tick_times.append(time.perf_counter() - t_start)

            snapshot = mgr.get_snapshot()
            assert snapshot is not None
            mimic_counts.append(len(snapshot.mimics))
            mimic_ticks += len(snapshot.mimics)
    finally:
        mgr.stop()

    snapshot = mgr.get_snapshot()
    assert snapshot is not None
    return {
        "tick_times": tick_times,
        "mimic_counts": mimic_counts,
        "mimic_ticks": mimic_ticks,
        "biome_lookups": snapshot.biome_lookups,
        "final_tick": snapshot.tick,
    }


def _percentile(data: list[float], p: float) -> float:
    """Simple percentile calculation."""
    if not data:
        return 0.0
    sorted_data = sorted(data)
    k = (len(sorted_data) - 1) * (p / 100.0)
    f = int(k)
    c = f + 1
    if c >= len(sorted_data):
        return sorted_data[f]
    return sorted_data[f] + (k - f) * (sorted_data[c] - sorted_data[f])


def _print_report(data: dict, wall_time: float) -> None:
    tick_times = data["tick_times"]
    mimic_counts = data["mimic_counts"]
    num_ticks = len(tick_times)

    if num_ticks == 0:
        print("No ticks executed.")
        return

    print("\n" + "=" * 70)
    print("  MIMIC SIMULATION PERFORMANCE REPORT")
    print("=" * 70)

    print(f"\n  Ticks executed:    {num_ticks}")
    print(f"  Wall clock time:   {wall_time:.3f}s")
    print(f"  Throughput:        {num_ticks / wall_time:.1f} ticks/sec")
    print(f"  Avg tick time:     {statistics.mean(tick_times) * 1000:.2f}ms")

    print(f"\n  Mimic count (start):  {mimic_counts[0]}")
    print(f"  Mimic count (end):    {mimic_counts[-1]}")
    print(f"  Mimic count (peak):   {max(mimic_counts)}")

    mimic_ticks = max(1, data["mimic_ticks"])
    print(f"\n  Biome lookups:        {data['biome_lookups']}")
    print(f"  Lookups / mimic-tick: {data['biome_lookups'] / mimic_ticks:.4f}")

    print(f"\n  {'Metric':<16} {'Time (ms)':>10}")
    print(f"  {'-' * 16} {'-' * 10}")
    print(f"  {'Min':<16} {min(tick_times) * 1000:>10.3f}")
    print(f"  {'P50 (median)':<16} {_percentile(tick_times, 50) * 1000:>10.3f}")
    print(f"  {'P95':<16} {_percentile(tick_times, 95) * 1000:>10.3f}")
    print(f"  {'P99':<16} {_percentile(tick_times, 99) * 1000:>10.3f}")
    print(f"  {'Max':<16} {max(tick_times) * 1000:>10.3f}")

    print("\n  Top 5 slowest ticks:")
    indexed = sorted(enumerate(tick_times), key=lambda x: x[1], reverse=True)[:5]
    for tick_idx, t in indexed:
        print(f"    Tick {tick_idx:>5}: {t * 1000:.3f}ms  ({mimic_counts[tick_idx]} mimics)")

    print("\n" + "=" * 70)


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile the mimic simulation")
    parser.add_argument("--ticks", type=int, default=500, help="Number of ticks to run")
    parser.add_argument("--seed", type=int, default=42, help="World seed")
    parser.add_argument("--mimics", type=int, default=50, help="Initial mimic count")
    parser.add_argument("--workers", type=int, default=1, help="Worker threads (1 for consistent timing)")
    parser.add_argument("--balance-file", type=str, default=None, help="Balance document (temp defaults if omitted)")
    parser.add_argument("--cprofile", type=str, default=None, help="Save cProfile output to file")
    args = parser.parse_args()

    with tempfile.TemporaryDirectory() as tmp:
        cfg = SimulationConfig(
            world_seed=args.seed,
            max_ticks=args.ticks + 10,
            initial_mimic_count=args.mimics,
            spawner_max_mimics=max(args.mimics * 2, 60),
            num_workers=args.workers,
            balance_file=args.balance_file or os.path.join(tmp, "mimicmod.json"),
            log_level="WARNING",
        )

        print(f"Profiling: {args.ticks} ticks, seed={args.seed}, "
              f"mimics={args.mimics}, workers={args.workers}")

        profiler = None
        if args.cprofile:
            profiler = cProfile.Profile()
            profiler.enable()

        wall_start = time.perf_counter()
        data = _run_simulation(cfg, args.ticks)
        wall_time = time.perf_counter() - wall_start

        if profiler:
            profiler.disable()

    _print_report(data, wall_time)

    if profiler and args.cprofile:
        profiler.dump_stats(args.cprofile)
        print(f"\n  cProfile data saved to: {args.cprofile}")
        print(f"  View with: python -m pstats {args.cprofile}")

        print("\n  Top 20 functions by cumulative time:")
        stream = io.StringIO()
        ps = pstats.Stats(profiler, stream=stream)
        ps.sort_stats("cumulative")
        ps.print_stats(20)
        print(stream.getvalue())


if __name__ == "__main__":
    main()
