"""Leverage-aware accumulation of per-tick returns."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

import numpy as np

from .params import ParameterError

logger = logging.getLogger(__name__)


class LeverageKind(str, Enum):
    NONE = "none"
    COMPOUND = "compound"
    CONTINUOUS = "continuous"
    POINTWISE = "pointwise"
    INITIAL = "initial"


_FACTOR_KINDS = (LeverageKind.CONTINUOUS, LeverageKind.POINTWISE, LeverageKind.INITIAL)


@dataclass(frozen=True)
class LeveragePolicy:
    """How a return series is folded into a value series.

    ``NONE`` passes returns through untouched and ``COMPOUND`` compounds them
    unleveraged. The other kinds carry a leverage ``factor``:

    - ``CONTINUOUS`` releverages continuously (each return raised to ``factor``).
    - ``POINTWISE`` releverages once per tick on the excess return, floored at 0.
    - ``INITIAL`` levers the starting notional once and never releverages.
    """

    kind: LeverageKind
    factor: Optional[float] = None

    def __post_init__(self) -> None:
        try:
            kind = LeverageKind(self.kind)
        except ValueError:
            raise ParameterError(f"Unknown leverage policy: {self.kind!r}") from None
        object.__setattr__(self, "kind", kind)
        if kind in _FACTOR_KINDS:
            if self.factor is None:
                raise ParameterError(f"{kind.value} leverage requires a factor")
            factor = float(self.factor)
            if not math.isfinite(factor):
                raise ParameterError(f"Leverage factor must be finite, got {factor}")
            object.__setattr__(self, "factor", factor)
        elif self.factor is not None:
            raise ParameterError(f"{kind.value} policy takes no leverage factor")

    @classmethod
    def none(cls) -> "LeveragePolicy":
        return cls(LeverageKind.NONE)

    @classmethod
    def compound(cls) -> "LeveragePolicy":
        return cls(LeverageKind.COMPOUND)

    @classmethod
    def continuous(cls, factor: float) -> "LeveragePolicy":
        return cls(LeverageKind.CONTINUOUS, factor)

    @classmethod
    def pointwise(cls, factor: float) -> "LeveragePolicy":
        return cls(LeverageKind.POINTWISE, factor)

    @classmethod
    def initial(cls, factor: float) -> "LeveragePolicy":
        return cls(LeverageKind.INITIAL, factor)

    @classmethod
    def from_options(
        cls,
        accumulate: bool,
        *,
        continuous_leverage: Optional[float] = None,
        pointwise_leverage: Optional[float] = None,
        initial_leverage: Optional[float] = None,
    ) -> "LeveragePolicy":
        """Select a policy from an accumulate toggle and optional leverage options.

        At most one leverage option may be set. Leverage only applies when
        accumulating; otherwise the returns pass through unchanged.
        """

        chosen = [
            (kind, value)
            for kind, value in (
                (LeverageKind.CONTINUOUS, continuous_leverage),
                (LeverageKind.POINTWISE, pointwise_leverage),
                (LeverageKind.INITIAL, initial_leverage),
            )
            if value is not None
        ]
        if len(chosen) > 1:
            joined = ", ".join(kind.value for kind, _ in chosen)
            raise ParameterError(f"Leverage options are mutually exclusive, got: {joined}")

        if not accumulate:
            if chosen:
                logger.warning("Ignoring %s leverage because accumulation is disabled", chosen[0][0].value)
            return cls.none()
        if not chosen:
            return cls.compound()
        kind, value = chosen[0]
        return cls(kind, value)


def tick_multiplier(r: float, policy: LeveragePolicy) -> float:
    """Multiplier applied to the running value for a single return ``r``."""

    kind = policy.kind
    if kind is LeverageKind.CONTINUOUS:
        with np.errstate(over="ignore", divide="ignore"):
            return float(np.power(r, policy.factor))
    if kind is LeverageKind.POINTWISE:
        return max(0.0, 1.0 + (r - 1.0) * policy.factor)
    if kind in (LeverageKind.COMPOUND, LeverageKind.INITIAL):
        return r
    raise ValueError(f"{kind.value} policy does not accumulate")


def accumulate(
    returns: Iterable[float],
    policy: LeveragePolicy = LeveragePolicy.compound(),
    start_value: float = 1.0,
) -> np.ndarray:
    """Fold ``returns`` into one value per tick under ``policy``.

    Every intermediate value is emitted, so the output has the same length as
    the input. With ``LeverageKind.NONE`` the returns come back unchanged.
    """

    rets = np.fromiter((float(r) for r in returns), dtype=float)
    if policy.kind is LeverageKind.NONE:
        return rets

    start = float(start_value)
    if not math.isfinite(start):
        raise ParameterError(f"start_value must be finite, got {start}")

    logger.debug("Accumulating %d returns with %s policy (factor=%s)", len(rets), policy.kind.value, policy.factor)

    out = np.empty_like(rets)
    if policy.kind is LeverageKind.INITIAL:
        acc = start * policy.factor
        offset = start * (policy.factor - 1.0)
    else:
        acc = start
        offset = 0.0

    for i in range(len(rets)):
        acc = acc * tick_multiplier(float(rets[i]), policy)
        out[i] = acc - offset
    return out


__all__ = ["LeverageKind", "LeveragePolicy", "accumulate", "tick_multiplier"]
