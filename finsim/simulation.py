"""Programmatic return-simulation helpers."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .leverage import LeveragePolicy, accumulate
from .params import TimeGrid, YearlyStats
from .returns import generate_returns


def simulate(
    grid: TimeGrid,
    stats: YearlyStats,
    policy: LeveragePolicy = LeveragePolicy.none(),
    *,
    start_value: float = 1.0,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Generate a return series and fold it under ``policy``."""

    return accumulate(generate_returns(grid, stats, seed=seed), policy, start_value=start_value)


__all__ = ["simulate"]
