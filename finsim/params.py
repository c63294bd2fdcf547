"""Time-grid and yearly-statistics parameters for return generation."""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = 31556952.0
MAX_SEED = 2**64 - 1


class ParameterError(ValueError):
    """Raised when simulation parameters are missing, conflicting or out of range."""


def _require_positive_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ParameterError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ParameterError(f"{name} must be positive, got {value}")
    return int(value)


def _require_positive_finite(name: str, value: object) -> float:
    try:
        if isinstance(value, bool):
            raise TypeError
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ParameterError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number) or number <= 0.0:
        raise ParameterError(f"{name} must be positive and finite, got {number}")
    return number


@dataclass(frozen=True)
class TimeGrid:
    """Mapping of simulated time onto ``num_points`` equally spaced ticks.

    Use :meth:`from_total_seconds`, :meth:`from_interval_seconds` or
    :meth:`from_options` rather than the constructor; they derive the missing
    time field from the one supplied.
    """

    num_points: int
    interval_seconds: float
    total_seconds: float

    def __post_init__(self) -> None:
        _require_positive_int("num_points", self.num_points)
        _require_positive_finite("interval_seconds", self.interval_seconds)
        _require_positive_finite("total_seconds", self.total_seconds)

    @classmethod
    def from_total_seconds(cls, total_seconds: int, num_points: int) -> "TimeGrid":
        total = _require_positive_int("total_seconds", total_seconds)
        points = _require_positive_int("num_points", num_points)
        return cls(num_points=points, interval_seconds=total / points, total_seconds=float(total))

    @classmethod
    def from_interval_seconds(cls, interval_seconds: int, num_points: int) -> "TimeGrid":
        interval = _require_positive_int("interval_seconds", interval_seconds)
        points = _require_positive_int("num_points", num_points)
        return cls(num_points=points, interval_seconds=float(interval), total_seconds=float(interval * points))

    @classmethod
    def from_options(
        cls,
        *,
        num_points: int,
        total_seconds: Optional[int] = None,
        interval_seconds: Optional[int] = None,
    ) -> "TimeGrid":
        """Build a grid from exactly one of ``total_seconds``/``interval_seconds``."""

        if total_seconds is not None and interval_seconds is not None:
            raise ParameterError("total_seconds and interval_seconds are mutually exclusive")
        if total_seconds is not None:
            return cls.from_total_seconds(total_seconds, num_points)
        if interval_seconds is not None:
            return cls.from_interval_seconds(interval_seconds, num_points)
        raise ParameterError("One of total_seconds or interval_seconds is required")


@dataclass(frozen=True)
class YearlyStats:
    """Geometric (multiplicative) yearly mean and standard deviation.

    ``yearly_mean=1.0`` is a flat series; ``yearly_stddev=1.5`` means a one
    standard deviation year multiplies or divides value by 1.5.
    """

    yearly_mean: float = 1.0
    yearly_stddev: float = 1.5

    def __post_init__(self) -> None:
        object.__setattr__(self, "yearly_mean", _require_positive_finite("yearly_mean", self.yearly_mean))
        object.__setattr__(self, "yearly_stddev", _require_positive_finite("yearly_stddev", self.yearly_stddev))


@dataclass(frozen=True)
class SamplingConfig:
    """Per-tick log-normal parameters derived from a grid and yearly stats."""

    tick_mu: float
    tick_sigma: float
    ticks_per_year: float

    @classmethod
    def from_grid(cls, grid: TimeGrid, stats: YearlyStats) -> "SamplingConfig":
        ticks_per_year = SECONDS_PER_YEAR / grid.interval_seconds
        yearly_mu = math.log(stats.yearly_mean)
        yearly_sigma = math.log(stats.yearly_stddev)
        # drift scales with time, volatility with its square root
        tick_mu = yearly_mu / ticks_per_year
        tick_sigma = math.sqrt(yearly_sigma**2 / ticks_per_year)
        config = cls(tick_mu=tick_mu, tick_sigma=tick_sigma, ticks_per_year=ticks_per_year)
        logger.debug(
            "Sampling config: ticks_per_year=%.6g tick_mu=%.6g tick_sigma=%.6g",
            ticks_per_year,
            tick_mu,
            tick_sigma,
        )
        return config


def validate_seed(seed: Optional[int]) -> Optional[int]:
    """Return ``seed`` unchanged when it is ``None`` or an unsigned 64-bit int."""

    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise ParameterError(f"seed must be an integer, got {seed!r}")
    if seed < 0 or seed > MAX_SEED:
        raise ParameterError(f"seed must be in [0, 2**64), got {seed}")
    return seed


__all__ = [
    "MAX_SEED",
    "ParameterError",
    "SECONDS_PER_YEAR",
    "SamplingConfig",
    "TimeGrid",
    "YearlyStats",
    "validate_seed",
]
