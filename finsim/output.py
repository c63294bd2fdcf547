"""Writing, tabulating and plotting simulated series."""

from __future__ import annotations

from typing import Iterable, Optional, TextIO

import numpy as np
import pandas as pd

from .leverage import LeveragePolicy
from .params import TimeGrid


def write_series(values: Iterable[float], sink: TextIO) -> int:
    """Write one value per line using the shortest round-trip repr.

    Returns the number of lines written.
    """

    count = 0
    for value in values:
        sink.write(f"{float(value)!r}\n")
        count += 1
    return count


def series_frame(
    returns: Iterable[float],
    values: Iterable[float],
    grid: TimeGrid,
    policy: LeveragePolicy,
) -> pd.DataFrame:
    """Tabulate returns next to their accumulated values, indexed by elapsed seconds."""

    rets = np.asarray(list(returns), dtype=float)
    vals = np.asarray(list(values), dtype=float)
    if rets.shape != vals.shape:
        raise ValueError("returns and values must have identical lengths")

    elapsed = grid.interval_seconds * np.arange(1, len(rets) + 1, dtype=float)
    frame = pd.DataFrame(
        {"return": rets, "value": vals},
        index=pd.Index(elapsed, name="elapsed_seconds"),
    )
    frame.attrs["policy"] = policy.kind.value
    frame.attrs["factor"] = policy.factor
    return frame


def save_plot(frame: pd.DataFrame, path: str, *, title: Optional[str] = None) -> None:
    """Plot the ``value`` column against elapsed time and save it to ``path``."""

    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(10, 5))
    values = frame["value"]
    if len(values) and bool((values > 0).all()):
        ax.semilogy(frame.index, values, color="#d62728", label="value")
        ax.set_ylabel("Value (log scale)")
    else:
        ax.plot(frame.index, values, color="#d62728", label="value")
        ax.set_ylabel("Value")

    policy = frame.attrs.get("policy", "none")
    factor = frame.attrs.get("factor")
    if title is None:
        title = f"Simulated series ({policy}" + (f", leverage {factor:g})" if factor is not None else ")")
    ax.set_title(title)
    ax.set_xlabel("Elapsed seconds")
    ax.grid(True, which="both", linestyle=":", alpha=0.4)
    ax.legend(loc="lower right")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


__all__ = ["save_plot", "series_frame", "write_series"]
