"""
Inverse transform sampling.

X = F⁻¹(U) for U ~ Uniform(0, 1). Three routes, chosen by what the target
distribution provides:

1. Closed-form quantile: applied directly, O(1) per draw.
2. CDF only: bracket u, then bisect on x until |F(x) - u| < tolerance.
3. Integer CMF: scan upward from the first support point until F(x) >= u,
   or binary-search a precomputed CMF table with the same result.
"""

import logging
from collections.abc import Callable
from numbers import Integral
from typing import Literal

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_SAMPLING_CONFIG, SamplingConfig
from ..datagen.distributions import (
    ClosedFormDistribution,
    DiscreteDistribution,
    ImplicitCDFDistribution,
)
from ..errors import ConfigurationError, ConvergenceError
from ..rng import UniformSource

logger = logging.getLogger(__name__)


def _validate_sample_size(n) -> int:
    if isinstance(n, bool) or not isinstance(n, Integral) or n < 1:
        raise ConfigurationError(f"Sample size must be a positive integer, got {n!r}")
    return int(n)


# =============================================================================
# Single-Value Inversion
# =============================================================================


def invert_cdf(
    u: float,
    cdf: Callable[[float], float],
    bracket: tuple[float, float] | None = None,
    config: SamplingConfig = DEFAULT_SAMPLING_CONFIG,
) -> float:
    """Find x with |F(x) - u| < tolerance by bracketing and bisection.

    The bracket grows outward (doubling its width each step) until
    F(lo) <= u <= F(hi), then is halved until the tolerance is met.

    Args:
        u: Target probability in [0, 1).
        cdf: Non-decreasing CDF.
        bracket: Starting (lo, hi). Defaults to ``config.initial_bracket``.
        config: Tolerance and iteration limits.

    Returns:
        The located x.

    Raises:
        ConvergenceError: If no bracket is found within
            ``config.max_bracket_expansions`` doublings, or bisection does not
            reach the tolerance within ``config.max_iterations`` steps (for
            example at a jump in F).
    """
    lo, hi = bracket if bracket is not None else config.initial_bracket
    tol = config.tolerance

    expansions = 0
    while cdf(lo) > u:
        if expansions >= config.max_bracket_expansions:
            raise ConvergenceError(
                f"Could not bracket u={u}: F({lo}) is still above target after "
                f"{expansions} expansions"
            )
        lo -= hi - lo
        expansions += 1
    while cdf(hi) < u:
        if expansions >= config.max_bracket_expansions:
            raise ConvergenceError(
                f"Could not bracket u={u}: F({hi}) is still below target after "
                f"{expansions} expansions"
            )
        hi += hi - lo
        expansions += 1
    if expansions:
        logger.debug("Bracket for u=%.6g expanded %d times to [%g, %g]", u, expansions, lo, hi)

    if abs(cdf(lo) - u) < tol:
        return float(lo)
    if abs(cdf(hi) - u) < tol:
        return float(hi)

    for _ in range(config.max_iterations):
        mid = 0.5 * (lo + hi)
        f_mid = cdf(mid)
        if abs(f_mid - u) < tol:
            return float(mid)
        if f_mid < u:
            lo = mid
        else:
            hi = mid

    raise ConvergenceError(
        f"Bisection for u={u} did not reach tolerance {tol} within "
        f"{config.max_iterations} iterations (last bracket [{lo}, {hi}])"
    )


def scan_cmf(
    u: float, cmf: Callable[[int], float], max_x: int, support_min: int = 0
) -> int:
    """Return the smallest integer x >= support_min with F(x) >= u.

    Raises:
        ConvergenceError: If F stays below u up to ``max_x``, which means the
            CMF is malformed or its support was truncated.
    """
    x = support_min
    while cmf(x) < u:
        x += 1
        if x > max_x:
            raise ConvergenceError(
                f"CMF never reached u={u} within support [{support_min}, {max_x}]"
            )
    return x


def cmf_table(cmf: Callable[[int], float], max_x: int, support_min: int = 0) -> NDArray:
    """Tabulate F over [support_min, max_x] as a running maximum.

    The running maximum makes ``searchsorted`` find the first x with F(x) >= u,
    which is exactly where the upward scan stops, even for a non-monotone CMF.
    """
    values = np.array([cmf(x) for x in range(support_min, max_x + 1)], dtype=float)
    return np.maximum.accumulate(values)


# =============================================================================
# Sampler
# =============================================================================


class InverseCDFSampler:
    """Turn uniform draws into samples from a target distribution.

    Args:
        source: Uniform stream that supplies every u.
        config: Tolerance and iteration limits for numeric inversion.

    Examples:
        >>> from simboot.datagen import make_exponential
        >>> sampler = InverseCDFSampler(UniformSource(1))
        >>> draws = sampler.sample(5, make_exponential(rate=3.0))
        >>> draws.shape
        (5,)
    """

    def __init__(self, source: UniformSource, config: SamplingConfig | None = None):
        if not isinstance(source, UniformSource):
            raise ConfigurationError(
                f"source must be a UniformSource, got {type(source).__name__}"
            )
        self.source = source
        self.config = config if config is not None else DEFAULT_SAMPLING_CONFIG

    def sample(
        self,
        n: int,
        distribution: Callable[[float], float]
        | ClosedFormDistribution
        | ImplicitCDFDistribution
        | DiscreteDistribution,
        discrete_method: Literal["scan", "table"] = "scan",
    ) -> NDArray:
        """Draw ``n`` samples.

        Args:
            n: Number of samples, a positive integer.
            distribution: A bare inverse-CDF callable (applied to one uniform
                at a time) or one of the distribution variants.
            discrete_method: For discrete targets, "scan" walks the CMF upward
                per draw; "table" binary-searches a precomputed CMF table.
                Both return the same values.

        Returns:
            Array of length n. Integer dtype for discrete targets.

        Raises:
            ConfigurationError: If n is not a positive integer or the
                distribution type is not supported.
            ConvergenceError: If numeric inversion or the CMF scan fails.
        """
        n = _validate_sample_size(n)

        if isinstance(distribution, ClosedFormDistribution):
            return self._sample_closed_form(n, distribution)
        if isinstance(distribution, ImplicitCDFDistribution):
            return self._sample_implicit(n, distribution)
        if isinstance(distribution, DiscreteDistribution):
            return self._sample_discrete(n, distribution, discrete_method)
        if callable(distribution):
            return np.fromiter(
                (distribution(self.source.next()) for _ in range(n)),
                dtype=float,
                count=n,
            )
        raise ConfigurationError(
            f"Unsupported distribution type: {type(distribution).__name__}"
        )

    def _sample_closed_form(self, n: int, dist: ClosedFormDistribution) -> NDArray:
        u = self.source.next_n(n)
        if dist.vectorized:
            return np.asarray(dist.inverse_cdf(u), dtype=float).reshape(n)
        return np.fromiter((dist.inverse_cdf(ui) for ui in u), dtype=float, count=n)

    def _sample_implicit(self, n: int, dist: ImplicitCDFDistribution) -> NDArray:
        u = self.source.next_n(n)
        return np.fromiter(
            (invert_cdf(ui, dist.cdf, dist.bracket, self.config) for ui in u),
            dtype=float,
            count=n,
        )

    def _sample_discrete(
        self, n: int, dist: DiscreteDistribution, method: str
    ) -> NDArray[np.int64]:
        u = self.source.next_n(n)

        if method == "scan":
            return np.fromiter(
                (scan_cmf(ui, dist.cmf, dist.max_x, dist.support_min) for ui in u),
                dtype=np.int64,
                count=n,
            )
        if method == "table":
            table = cmf_table(dist.cmf, dist.max_x, dist.support_min)
            positions = np.searchsorted(table, u, side="left")
            if np.any(positions >= len(table)):
                bad = float(u[positions >= len(table)][0])
                raise ConvergenceError(
                    f"CMF never reached u={bad} within support "
                    f"[{dist.support_min}, {dist.max_x}]"
                )
            return (positions + dist.support_min).astype(np.int64)

        raise ConfigurationError(f"Unknown discrete method: {method}. Use 'scan' or 'table'.")
