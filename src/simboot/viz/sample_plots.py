"""Diagnostic plots for sampler output and bootstrap replicate distributions.

Example usage:
    ```python
    from simboot.viz import plot_sample_density

    ax = plot_sample_density(samples, tri.density, tri.a, tri.b)
    ax.figure.savefig("triangular.png", dpi=300, bbox_inches="tight")
    ```
"""

from collections.abc import Callable

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from matplotlib.axes import Axes
from numpy.typing import NDArray
from scipy.integrate import quad

from ..bootstrap.engine import BootstrapEngine
from ..bootstrap.intervals import IntervalEstimate


def plot_sample_density(
    samples: NDArray,
    density: Callable[[float], float],
    a: float,
    b: float,
    bins: int = 40,
    ax: Axes | None = None,
    title: str | None = None,
) -> Axes:
    """Overlay a normalized histogram of samples with the target density.

    Args:
        samples: Draws from a sampler.
        density: Target density on [a, b]; normalized here by its integral.
        a: Lower support bound.
        b: Upper support bound.
        bins: Histogram bin count.
        ax: Matplotlib axes object. If None, creates new figure.
        title: Optional axes title.

    Returns:
        Matplotlib Axes object containing the plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 4))

    sns.histplot(
        x=np.asarray(samples, dtype=float),
        bins=np.linspace(a, b, bins + 1),
        stat="density",
        color="steelblue",
        alpha=0.5,
        label="Samples",
        ax=ax,
    )

    total, _ = quad(density, a, b)
    xs = np.linspace(a, b, 400)
    ys = np.array([density(x) for x in xs], dtype=float) / total
    ax.plot(xs, ys, "-", color="crimson", linewidth=1.5, label="Target density")

    ax.set_xlabel("x")
    ax.set_ylabel("Density")
    ax.legend(loc="best")
    if title is not None:
        ax.set_title(title)
    return ax


def plot_replicate_distribution(
    engine: BootstrapEngine,
    interval: IntervalEstimate | None = None,
    t_obs: float | None = None,
    bins: int = 40,
    ax: Axes | None = None,
) -> Axes:
    """Histogram of bootstrap replicates with optional interval and observed value.

    Args:
        engine: Bootstrap engine; resampled on demand.
        interval: Interval to shade.
        t_obs: Observed statistic to mark with a vertical line.
        bins: Histogram bin count.
        ax: Matplotlib axes object. If None, creates new figure.

    Returns:
        Matplotlib Axes object containing the plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 4))

    sns.histplot(x=engine.replicates, bins=bins, color="gray", alpha=0.6, ax=ax)

    if interval is not None:
        ax.axvspan(
            interval.lower,
            interval.upper,
            alpha=0.2,
            color="steelblue",
            label=f"{interval.confidence_level:.0%} {interval.method} interval",
        )
    if t_obs is not None:
        ax.axvline(t_obs, color="crimson", linestyle="--", linewidth=1.2, label="Observed")

    ax.set_xlabel("Bootstrap replicate T*")
    ax.set_ylabel("Count")
    ax.set_title(f"R = {engine.replicate_count}")
    if interval is not None or t_obs is not None:
        ax.legend(loc="best")
    return ax
