"""Log-normal per-tick return generation."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

import numpy as np

from .params import SamplingConfig, TimeGrid, YearlyStats, validate_seed

logger = logging.getLogger(__name__)

_BLOCK_SIZE = 4096


def sampling_config(grid: TimeGrid, stats: YearlyStats) -> SamplingConfig:
    """Per-tick log-normal parameters for ``grid`` and ``stats``."""

    return SamplingConfig.from_grid(grid, stats)


def _draw_returns(rng: np.random.Generator, config: SamplingConfig, num_points: int) -> Iterator[float]:
    remaining = num_points
    while remaining > 0:
        size = min(remaining, _BLOCK_SIZE)
        block = rng.lognormal(mean=config.tick_mu, sigma=config.tick_sigma, size=size)
        for value in block:
            yield float(value)
        remaining -= size


def generate_returns(
    grid: TimeGrid,
    stats: YearlyStats,
    seed: Optional[int] = None,
) -> Iterator[float]:
    """Lazily draw ``grid.num_points`` multiplicative per-tick returns.

    Parameters
    ----------
    grid:
        Tick spacing and count.
    stats:
        Geometric yearly mean and standard deviation. Both are log-transformed
        and scaled down to one tick: the mean linearly in time, the standard
        deviation with the square root of time.
    seed:
        Optional unsigned 64-bit seed. With a seed the sequence is
        bit-identical across runs; without one the generator is seeded from
        OS entropy.

    Returns
    -------
    Iterator[float]
        A one-shot iterator over positive returns (1.0 means no change).
        Re-invoke with the same seed to replay it.
    """

    seed = validate_seed(seed)
    config = sampling_config(grid, stats)
    rng = np.random.default_rng(seed)
    logger.debug(
        "Generating %d returns (interval=%.6gs, seeded=%s)",
        grid.num_points,
        grid.interval_seconds,
        seed is not None,
    )
    return _draw_returns(rng, config, grid.num_points)


__all__ = ["generate_returns", "sampling_config"]
