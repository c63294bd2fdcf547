"""
Synthetic return simulator with optional leverage accumulation

Overview
--------
Draws a per-tick multiplicative return series from a log-normal model calibrated
from yearly geometric statistics, optionally folds it into a cumulative value
series under a leverage policy, and prints one value per line on stdout.

Model
-----
Let interval be the tick spacing in seconds and ticks_per_year = 31556952 / interval.

  tick_mu    = ln(yearly_mean) / ticks_per_year
  tick_sigma = sqrt(ln(yearly_stddev)^2 / ticks_per_year)
  r_t        ~ LogNormal(tick_mu, tick_sigma)

Accumulation (with --accumulate), starting from value_0 = start_value:
  compound:            value_t = value_{t-1} * r_t
  continuous leverage: value_t = value_{t-1} * r_t ** L
  pointwise leverage:  value_t = value_{t-1} * max(0, 1 + (r_t - 1) * L)
  initial leverage:    value_t = start_value * L * prod(r) - start_value * (L - 1)

Configuration
-------------
--seed falls back to the FINSIM_SEED environment variable and --log-level to
FINSIM_LOG_LEVEL. Logs go to stderr so stdout only carries numbers.

CLI
---
python simulate_returns.py (-t TOTAL_SECONDS | -i INTERVAL_SECONDS) -n NUM_POINTS \
  [--yearly-mean 1.0] [--yearly-stddev 1.5] [--seed SEED] \
  [-a] [--start-value 1.0] \
  [--continuous-leverage L | --pointwise-leverage L | --initial-leverage L] \
  [--save-csv out.csv] [--save-plot out.png] [--log-level WARNING]
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from finsim import (
    LeveragePolicy,
    ParameterError,
    TimeGrid,
    YearlyStats,
    accumulate,
    generate_returns,
    save_plot,
    series_frame,
    write_series,
)

logger = logging.getLogger("finsim.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate log-normal returns and optionally accumulate them under a leverage policy"
    )

    grid = parser.add_mutually_exclusive_group(required=True)
    grid.add_argument(
        "-t",
        "--total-seconds",
        type=int,
        default=None,
        help="Simulation time in seconds (from first data point to last)",
    )
    grid.add_argument(
        "-i",
        "--interval-seconds",
        type=int,
        default=None,
        help="Time between data points in seconds",
    )
    parser.add_argument(
        "-n",
        "--num-points",
        type=int,
        required=True,
        help="How many data points to generate (equally spaced in time)",
    )
    parser.add_argument("--yearly-mean", type=float, default=1.0, help="Yearly geometric mean return (default 1.0)")
    parser.add_argument(
        "--yearly-stddev",
        type=float,
        default=1.5,
        help="Yearly geometric standard deviation (default 1.5)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible results (default: env FINSIM_SEED, else OS entropy)",
    )

    parser.add_argument("-a", "--accumulate", action="store_true", help="Accumulate returns into a value series")
    parser.add_argument(
        "--start-value",
        type=float,
        default=1.0,
        help="Value to begin accumulating from at t=0 (default 1.0)",
    )
    leverage = parser.add_mutually_exclusive_group()
    leverage.add_argument(
        "--continuous-leverage",
        type=float,
        default=None,
        help="Leverage held constant over the series, releveraged continuously between points",
    )
    leverage.add_argument(
        "--pointwise-leverage",
        type=float,
        default=None,
        help="Leverage held constant over the series, releveraged discretely at every point",
    )
    leverage.add_argument(
        "--initial-leverage",
        type=float,
        default=None,
        help="Leverage at t=0, never releveraged",
    )

    parser.add_argument("--save-csv", default=None, help="If set, saves returns and values as CSV here")
    parser.add_argument("--save-plot", default=None, help="If set, saves a plot PNG of the values here")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("FINSIM_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for stderr diagnostics (default WARNING)",
    )
    return parser


def _resolve_seed(parser: argparse.ArgumentParser, seed: Optional[int]) -> Optional[int]:
    if seed is not None:
        return seed
    raw = os.environ.get("FINSIM_SEED")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        parser.error(f"FINSIM_SEED must be an integer, got {raw!r}")
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    seed = _resolve_seed(parser, args.seed)
    try:
        grid = TimeGrid.from_options(
            num_points=args.num_points,
            total_seconds=args.total_seconds,
            interval_seconds=args.interval_seconds,
        )
        stats = YearlyStats(yearly_mean=args.yearly_mean, yearly_stddev=args.yearly_stddev)
        policy = LeveragePolicy.from_options(
            args.accumulate,
            continuous_leverage=args.continuous_leverage,
            pointwise_leverage=args.pointwise_leverage,
            initial_leverage=args.initial_leverage,
        )
        returns = list(generate_returns(grid, stats, seed=seed))
        values = accumulate(returns, policy, start_value=args.start_value)
    except ParameterError as exc:
        parser.error(str(exc))

    logger.info(
        "Simulated %d points over %.6gs with %s policy",
        grid.num_points,
        grid.total_seconds,
        policy.kind.value,
    )

    write_series(values, sys.stdout)
    sys.stdout.flush()

    if args.save_csv or args.save_plot:
        frame = series_frame(returns, values, grid, policy)
        if args.save_csv:
            frame.to_csv(args.save_csv)
            logger.info("Saved CSV to %s", args.save_csv)
        if args.save_plot:
            save_plot(frame, args.save_plot)
            logger.info("Saved plot to %s", args.save_plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
