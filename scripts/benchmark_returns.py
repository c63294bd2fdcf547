#!/usr/bin/env python3
"""Time return generation and compound accumulation on a large series."""

from __future__ import annotations

import argparse
import os
import sys
import time
from typing import Callable

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from finsim import LeveragePolicy, TimeGrid, YearlyStats, accumulate, generate_returns


def _best_of(repeats: int, fn: Callable[[], object]) -> float:
    best = float("inf")
    for _ in range(repeats):
        started = time.perf_counter()
        fn()
        best = min(best, time.perf_counter() - started)
    return best


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark return generation and accumulation")
    parser.add_argument("--total-seconds", type=int, default=1_000_000, help="Simulated span (default 1000000)")
    parser.add_argument("--num-points", type=int, default=100_000, help="Points per series (default 100000)")
    parser.add_argument("--repeats", type=int, default=5, help="Timing repetitions; best is reported (default 5)")
    args = parser.parse_args()

    grid = TimeGrid.from_total_seconds(args.total_seconds, args.num_points)
    stats = YearlyStats(yearly_mean=1.0, yearly_stddev=1.5)
    policy = LeveragePolicy.compound()

    gen_time = _best_of(args.repeats, lambda: list(generate_returns(grid, stats)))
    series = list(generate_returns(grid, stats))
    acc_time = _best_of(args.repeats, lambda: accumulate(series, policy, start_value=100.0))

    print(f"generate_returns {args.num_points} data points: {gen_time * 1e3:.2f} ms")
    print(f"accumulate {args.num_points} data points:       {acc_time * 1e3:.2f} ms")


if __name__ == "__main__":
    main()
