"""Diagnostics for checking sampler output and bootstrap interval coverage.

Key classes:
    GoodnessOfFit: Chi-square test of discrete samples against a pmf.
    HistogramComparison: Binned empirical density against a target density.
    CoverageResult: Interval coverage across repeated simulated datasets.

Key functions:
    ecdf_discrepancy: |ECDF - F| at chosen points.
    discrete_goodness_of_fit: Chi-square test with tail pooling.
    density_histogram_discrepancy: Histogram against a (possibly unnormalized) density.
    expected_proposals: Mean proposals per accepted rejection sample.
    run_interval_coverage: Monte Carlo coverage study for bootstrap intervals.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray
from scipy import stats
from scipy.integrate import quad
from tqdm import tqdm

from ..bootstrap.engine import BootstrapEngine
from ..errors import ConfigurationError
from ..rng import UniformSource

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class GoodnessOfFit:
    """Chi-square goodness-of-fit result.

    Attributes:
        statistic: Pearson chi-square statistic.
        p_value: Upper-tail p-value.
        dof: Degrees of freedom (pooled bins - 1).
        observed: Observed counts per pooled bin.
        expected: Expected counts per pooled bin.
    """

    statistic: float
    p_value: float
    dof: int
    observed: np.ndarray
    expected: np.ndarray


@dataclass
class HistogramComparison:
    """Empirical density histogram against the target's mean density per bin.

    Attributes:
        edges: Bin edges, length bins + 1.
        empirical: Normalized histogram heights.
        expected: Mean normalized target density over each bin.
        max_abs_error: Largest |empirical - expected|.
    """

    edges: np.ndarray
    empirical: np.ndarray
    expected: np.ndarray
    max_abs_error: float


@dataclass
class CoverageResult:
    """Coverage of bootstrap intervals across simulated datasets.

    Attributes:
        n_simulations: Number of simulated datasets.
        nominal: Nominal confidence level 1 - alpha.
        method: Interval method used.
        lower: Lower endpoint per simulation.
        upper: Upper endpoint per simulation.
        covered: Whether each interval contains the true value.
    """

    n_simulations: int
    nominal: float
    method: str
    lower: np.ndarray
    upper: np.ndarray
    covered: np.ndarray

    @property
    def coverage(self) -> float:
        return float(np.mean(self.covered))

    @property
    def coverage_se(self) -> float:
        """Monte Carlo standard error of the coverage estimate."""
        p = self.coverage
        return float(np.sqrt(p * (1 - p) / self.n_simulations))

    @property
    def mean_width(self) -> float:
        return float(np.mean(self.upper - self.lower))

    def to_frame(self) -> pd.DataFrame:
        """One row per simulation with endpoints, width and coverage."""
        return pd.DataFrame(
            {
                "lower": self.lower,
                "upper": self.upper,
                "width": self.upper - self.lower,
                "covered": self.covered,
            }
        )


# =============================================================================
# Sampler Diagnostics
# =============================================================================


def ecdf_discrepancy(
    samples: ArrayLike, cdf: Callable, points: ArrayLike
) -> NDArray[np.float64]:
    """|ECDF(x) - F(x)| at each of ``points``."""
    samples = np.sort(np.asarray(samples, dtype=float))
    points = np.asarray(points, dtype=float)
    ecdf = np.searchsorted(samples, points, side="right") / samples.size
    return np.abs(ecdf - np.asarray(cdf(points), dtype=float))


def _pool_bins(
    observed: np.ndarray, expected: np.ndarray, min_expected: float
) -> tuple[np.ndarray, np.ndarray]:
    """Merge adjacent bins left to right until each expects >= min_expected."""
    obs_pooled, exp_pooled = [], []
    obs_acc = exp_acc = 0.0
    for o, e in zip(observed, expected):
        obs_acc += o
        exp_acc += e
        if exp_acc >= min_expected:
            obs_pooled.append(obs_acc)
            exp_pooled.append(exp_acc)
            obs_acc = exp_acc = 0.0
    if exp_acc > 0 or obs_acc > 0:
        if exp_pooled:
            obs_pooled[-1] += obs_acc
            exp_pooled[-1] += exp_acc
        else:
            obs_pooled.append(obs_acc)
            exp_pooled.append(exp_acc)
    return np.array(obs_pooled), np.array(exp_pooled)


def discrete_goodness_of_fit(
    samples: ArrayLike,
    pmf: Callable,
    support: ArrayLike,
    min_expected: float = 5.0,
) -> GoodnessOfFit:
    """Chi-square test of integer samples against a probability mass function.

    Expected counts are renormalized over ``support`` and sparse tail bins
    are pooled so every bin expects at least ``min_expected`` draws.

    Raises:
        ConfigurationError: If any sample falls outside ``support``, or fewer
            than two bins remain after pooling.
    """
    samples = np.asarray(samples)
    support = np.asarray(support)
    if not np.all(np.isin(samples, support)):
        raise ConfigurationError("Samples contain values outside the given support")

    observed = np.array([np.count_nonzero(samples == k) for k in support], dtype=float)
    probs = np.asarray(pmf(support), dtype=float)
    expected = probs / probs.sum() * samples.size

    obs_pooled, exp_pooled = _pool_bins(observed, expected, min_expected)
    if obs_pooled.size < 2:
        raise ConfigurationError("Need at least 2 bins after pooling for a chi-square test")

    result = stats.chisquare(obs_pooled, exp_pooled)
    return GoodnessOfFit(
        statistic=float(result.statistic),
        p_value=float(result.pvalue),
        dof=obs_pooled.size - 1,
        observed=obs_pooled,
        expected=exp_pooled,
    )


def density_histogram_discrepancy(
    samples: ArrayLike,
    density: Callable[[float], float],
    a: float,
    b: float,
    bins: int = 20,
) -> HistogramComparison:
    """Compare a normalized histogram of ``samples`` on [a, b] with ``density``.

    The density need not be normalized; it is divided by its integral over
    [a, b].
    """
    samples = np.asarray(samples, dtype=float)
    edges = np.linspace(a, b, bins + 1)
    empirical, _ = np.histogram(samples, bins=edges, density=True)

    total, _ = quad(density, a, b)
    if not total > 0:
        raise ConfigurationError(f"Density integrates to {total} on [{a}, {b}]")
    widths = np.diff(edges)
    mass = np.array([quad(density, lo, hi)[0] for lo, hi in zip(edges[:-1], edges[1:])])
    expected = mass / total / widths

    return HistogramComparison(
        edges=edges,
        empirical=empirical,
        expected=expected,
        max_abs_error=float(np.max(np.abs(empirical - expected))),
    )


def expected_proposals(
    density: Callable[[float], float], a: float, b: float, max_density: float
) -> float:
    """(b - a) * max_density / ∫f, the mean proposals per accepted sample."""
    total, _ = quad(density, a, b)
    if not total > 0:
        raise ConfigurationError(f"Density integrates to {total} on [{a}, {b}]")
    return (b - a) * max_density / total


# =============================================================================
# Bootstrap Coverage
# =============================================================================


def run_interval_coverage(
    generator: Callable[[int, UniformSource], NDArray],
    statistic: Callable[[NDArray], float],
    true_value: float,
    n_obs: int,
    replicate_count: int = 999,
    alpha: float = 0.05,
    n_simulations: int = 200,
    method: Literal["percentile", "bca"] = "percentile",
    seed: int = 0,
    progress: bool = False,
) -> CoverageResult:
    """Estimate how often bootstrap intervals contain the true parameter.

    Simulation i draws its dataset from ``UniformSource(seed + 2i)`` and
    resamples it with ``seed + 2i + 1``, so every simulation is reproducible
    on its own.

    Args:
        generator: (n_obs, source) -> dataset of n_obs observations.
        statistic: Statistic to bootstrap.
        true_value: Population value of the statistic.
        n_obs: Observations per simulated dataset.
        replicate_count: Bootstrap replicates per dataset.
        alpha: Two-sided error rate.
        n_simulations: Number of simulated datasets.
        method: "percentile" or "bca".
        seed: Base seed.
        progress: Whether to show a tqdm progress bar.

    Returns:
        Per-simulation endpoints and coverage.

    Examples:
        >>> from simboot.datagen import make_exponential
        >>> from simboot.sampling import InverseCDFSampler
        >>> gen = lambda n, src: InverseCDFSampler(src).sample(n, make_exponential(1.0))
        >>> result = run_interval_coverage(gen, np.mean, 1.0, n_obs=30)  # doctest: +SKIP
        >>> 0.85 < result.coverage < 1.0  # doctest: +SKIP
        True
    """
    if method not in ("percentile", "bca"):
        raise ConfigurationError(f"Unknown interval method: {method}")
    if n_simulations < 1:
        raise ConfigurationError(f"n_simulations must be positive, got {n_simulations}")

    lower = np.empty(n_simulations)
    upper = np.empty(n_simulations)

    for i in tqdm(range(n_simulations), desc="Simulating", disable=not progress):
        data = generator(n_obs, UniformSource(seed + 2 * i))
        engine = BootstrapEngine(data, statistic, replicate_count, seed + 2 * i + 1)
        if method == "percentile":
            interval = engine.percentile_interval(alpha)
        else:
            interval = engine.bca_interval(alpha, engine.observed_statistic())
        lower[i], upper[i] = interval.lower, interval.upper

    return CoverageResult(
        n_simulations=n_simulations,
        nominal=1 - alpha,
        method=method,
        lower=lower,
        upper=upper,
        covered=(lower <= true_value) & (true_value <= upper),
    )
