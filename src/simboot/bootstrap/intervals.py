"""Interval estimates computed from a bootstrap replicate distribution.

Both interval methods read endpoints off the sorted replicates with the same
order-statistic rule: the value at 1-indexed rank ⌈(R+1)·level⌉, clamped to
[1, R]. The percentile interval uses levels α/2 and 1-α/2; BCa shifts those
levels by the bias correction z₀ and the acceleration a, so it collapses to
the percentile interval when z₀ = a = 0.
"""

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.stats import norm

from ..errors import ConfigurationError, DegenerateJackknifeError

# Guards ⌈(R+1)·level⌉ against levels that land a rounding error above an integer.
_RANK_EPS = 1e-9


@dataclass(frozen=True)
class IntervalEstimate:
    """Confidence interval derived from bootstrap replicates.

    Attributes:
        lower: Lower endpoint.
        upper: Upper endpoint.
        confidence_level: Nominal coverage, 1 - alpha.
        method: "percentile" or "bca".
    """

    lower: float
    upper: float
    confidence_level: float
    method: str = "percentile"

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def contains(self, value: float) -> bool:
        """Whether ``value`` lies in the closed interval."""
        return self.lower <= value <= self.upper


def validate_alpha(alpha: float) -> float:
    """Return alpha as a float, or raise ConfigurationError outside (0, 1)."""
    if isinstance(alpha, bool) or not isinstance(alpha, (int, float, np.floating)):
        raise ConfigurationError(f"alpha must be a number in (0, 1), got {alpha!r}")
    alpha = float(alpha)
    if not (math.isfinite(alpha) and 0.0 < alpha < 1.0):
        raise ConfigurationError(f"alpha must be in (0, 1), got {alpha}")
    return alpha


def order_statistic_rank(level: float, n_replicates: int) -> int:
    """1-indexed rank ⌈(R+1)·level⌉ clamped to [1, R]."""
    rank = math.ceil((n_replicates + 1) * level - _RANK_EPS)
    return min(max(rank, 1), n_replicates)


def replicate_at_level(sorted_replicates: NDArray, level: float) -> float:
    """Value of the sorted replicates at the order-statistic rank for ``level``."""
    rank = order_statistic_rank(level, len(sorted_replicates))
    return float(sorted_replicates[rank - 1])


def percentile_interval(replicates: ArrayLike, alpha: float = 0.05) -> IntervalEstimate:
    """Percentile interval from raw (unsorted) replicates.

    Args:
        replicates: Bootstrap statistic values T*_1..T*_R.
        alpha: Two-sided error rate.

    Returns:
        IntervalEstimate with ranks ⌈(R+1)α/2⌉ and ⌈(R+1)(1-α/2)⌉.
    """
    alpha = validate_alpha(alpha)
    sorted_reps = np.sort(np.asarray(replicates, dtype=float))
    if sorted_reps.size == 0:
        raise ConfigurationError("Need at least one replicate")

    return IntervalEstimate(
        lower=replicate_at_level(sorted_reps, alpha / 2),
        upper=replicate_at_level(sorted_reps, 1 - alpha / 2),
        confidence_level=1 - alpha,
        method="percentile",
    )


def bias_correction(replicates: ArrayLike, t_obs: float) -> float:
    """z₀ = Φ⁻¹(#{T* <= t_obs} / (R+1)).

    A zero count would give z₀ = -∞; it is floored at one half so the
    correction stays finite.
    """
    reps = np.asarray(replicates, dtype=float)
    count = max(float(np.count_nonzero(reps <= t_obs)), 0.5)
    return float(norm.ppf(count / (reps.size + 1)))


def acceleration(jackknife_values: ArrayLike) -> float:
    """Efron-Tibshirani acceleration from leave-one-out statistics.

    a = Σ(T̄ - T₋ⱼ)³ / (6 · [Σ(T̄ - T₋ⱼ)²]^1.5)

    Raises:
        DegenerateJackknifeError: If all jackknife values are identical.
    """
    values = np.asarray(jackknife_values, dtype=float)
    if values.ndim != 1 or values.size == 0:
        raise ConfigurationError("jackknife_values must be a non-empty 1-D sequence")

    # The mean of identical values need not round back to the value itself,
    # so degeneracy is tested on the spread rather than on the denominator.
    if np.ptp(values) == 0.0:
        raise DegenerateJackknifeError(
            "Acceleration is undefined: all jackknife values are identical"
        )

    d = values.mean() - values
    denominator = 6.0 * np.sum(d**2) ** 1.5
    return float(np.sum(d**3) / denominator)


def _adjusted_level(z0: float, a: float, z_alpha: float) -> float:
    shifted = z0 + z_alpha
    denominator = 1.0 - a * shifted
    if denominator <= 0.0:
        raise DegenerateJackknifeError(
            f"Acceleration a={a:.6g} is too large for BCa adjustment at z={z_alpha:.6g}"
        )
    return float(norm.cdf(z0 + shifted / denominator))


def bca_interval(
    replicates: ArrayLike,
    alpha: float,
    t_obs: float,
    jackknife_values: ArrayLike,
) -> IntervalEstimate:
    """Bias-corrected and accelerated interval.

    Args:
        replicates: Bootstrap statistic values T*_1..T*_R.
        alpha: Two-sided error rate.
        t_obs: Statistic on the original data.
        jackknife_values: Leave-one-out statistics T₋₁..T₋ₙ.

    Returns:
        IntervalEstimate with method "bca".

    Raises:
        DegenerateJackknifeError: If the acceleration is undefined or too
            large for the adjusted levels to exist.
    """
    alpha = validate_alpha(alpha)
    sorted_reps = np.sort(np.asarray(replicates, dtype=float))
    if sorted_reps.size == 0:
        raise ConfigurationError("Need at least one replicate")

    z0 = bias_correction(sorted_reps, t_obs)
    a = acceleration(jackknife_values)
    level_lo = _adjusted_level(z0, a, float(norm.ppf(alpha / 2)))
    level_hi = _adjusted_level(z0, a, float(norm.ppf(1 - alpha / 2)))

    # Endpoints use the percentile rank rule ⌈(R+1)·level⌉ rather than
    # round(R·level), so z₀ = a = 0 reproduces the percentile interval exactly.
    return IntervalEstimate(
        lower=replicate_at_level(sorted_reps, level_lo),
        upper=replicate_at_level(sorted_reps, level_hi),
        confidence_level=1 - alpha,
        method="bca",
    )
