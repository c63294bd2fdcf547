"""Synthetic log-normal return series and leverage accumulation."""

from .leverage import LeverageKind, LeveragePolicy, accumulate, tick_multiplier
from .output import save_plot, series_frame, write_series
from .params import (
    SECONDS_PER_YEAR,
    ParameterError,
    SamplingConfig,
    TimeGrid,
    YearlyStats,
)
from .returns import generate_returns, sampling_config
from .simulation import simulate

__all__ = [
    "SECONDS_PER_YEAR",
    "ParameterError",
    "SamplingConfig",
    "TimeGrid",
    "YearlyStats",
    "generate_returns",
    "sampling_config",
    "LeverageKind",
    "LeveragePolicy",
    "accumulate",
    "tick_multiplier",
    "save_plot",
    "series_frame",
    "write_series",
    "simulate",
]
