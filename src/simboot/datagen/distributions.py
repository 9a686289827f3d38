"""
Target distributions for the samplers.

Each variant carries exactly the capability its sampler needs:

- ClosedFormDistribution: inverse_cdf(u), applied directly.
- ImplicitCDFDistribution: cdf(x) only, inverted numerically.
- DiscreteDistribution: cmf(x) over integers, inverted by an upward scan.
- BoundedDensity: density(x) on a finite support with a known maximum,
  sampled by rejection.

The ``make_*`` factories build the distributions used in the lecture examples.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from scipy import stats
from scipy.special import ndtr

from ..errors import ConfigurationError

# =============================================================================
# Distribution Variants
# =============================================================================


@dataclass(frozen=True)
class ClosedFormDistribution:
    """
    Continuous distribution with a closed-form inverse CDF.

    Parameters
    ----------
    inverse_cdf : Callable
        Quantile function u -> x for u in [0, 1).
    vectorized : bool
        Whether inverse_cdf accepts and returns numpy arrays.
    cdf : Optional[Callable]
        Forward CDF, used only by diagnostics.
    name : str
        Human-readable name.
    """

    inverse_cdf: Callable
    vectorized: bool = False
    cdf: Callable | None = None
    name: str = ""


@dataclass(frozen=True)
class ImplicitCDFDistribution:
    """
    Continuous distribution known only through its CDF.

    Parameters
    ----------
    cdf : Callable
        Non-decreasing function x -> F(x) in [0, 1].
    bracket : Optional[tuple[float, float]]
        Starting interval for the bracketing search. Falls back to the
        sampler config when omitted.
    name : str
        Human-readable name.
    """

    cdf: Callable[[float], float]
    bracket: tuple[float, float] | None = None
    name: str = ""


@dataclass(frozen=True)
class DiscreteDistribution:
    """
    Integer-valued distribution described by its cumulative mass function.

    Parameters
    ----------
    cmf : Callable
        x -> Pr(X <= x) for integer x >= support_min.
    max_x : int
        Largest x the scan may visit before giving up.
    support_min : int
        First integer of the support; the scan starts here.
    pmf : Optional[Callable]
        Probability mass function, used only by diagnostics.
    name : str
        Human-readable name.
    """

    cmf: Callable[[int], float]
    max_x: int
    support_min: int = 0
    pmf: Callable | None = None
    name: str = ""

    def __post_init__(self):
        if self.max_x < self.support_min:
            raise ConfigurationError(
                f"max_x ({self.max_x}) must be >= support_min ({self.support_min})"
            )


@dataclass(frozen=True)
class BoundedDensity:
    """
    Density with finite support [a, b] and a known upper bound.

    ``density_max`` must dominate the density on [a, b]. This is not checked;
    an underestimate biases rejection samples.

    Parameters
    ----------
    density : Callable
        x -> f(x). Need not be normalized.
    a, b : float
        Support bounds, a < b.
    density_max : float
        Envelope height, >= sup f on [a, b].
    cdf : Optional[Callable]
        Forward CDF of the normalized density, used only by diagnostics.
    name : str
        Human-readable name.
    """

    density: Callable[[float], float]
    a: float
    b: float
    density_max: float
    cdf: Callable | None = None
    name: str = ""

    def __post_init__(self):
        if not (math.isfinite(self.a) and math.isfinite(self.b) and self.a < self.b):
            raise ConfigurationError(
                f"Support must be finite with a < b, got [{self.a}, {self.b}]"
            )


# =============================================================================
# Closed-Form Inverses
# =============================================================================


def make_exponential(rate: float = 1.0) -> ClosedFormDistribution:
    """
    Exponential(λ) via its closed-form quantile.

    F(x) = 1 - exp(-λx)  =>  F⁻¹(u) = -log(1 - u) / λ

    Using 1 - u keeps u = 0 finite.
    """
    if not rate > 0:
        raise ConfigurationError(f"rate must be positive, got {rate}")

    def inverse_cdf(u):
        return -np.log1p(-np.asarray(u, dtype=float)) / rate

    def cdf(x):
        x = np.asarray(x, dtype=float)
        return np.where(x > 0, -np.expm1(-rate * x), 0.0)

    return ClosedFormDistribution(
        inverse_cdf=inverse_cdf,
        vectorized=True,
        cdf=cdf,
        name=f"Exponential(λ={rate})",
    )


def make_uniform(a: float = 0.0, b: float = 1.0) -> ClosedFormDistribution:
    """Uniform(a, b): F⁻¹(u) = a + (b - a)u."""
    if not a < b:
        raise ConfigurationError(f"Need a < b, got a={a}, b={b}")

    def inverse_cdf(u):
        return a + (b - a) * np.asarray(u, dtype=float)

    def cdf(x):
        return np.clip((np.asarray(x, dtype=float) - a) / (b - a), 0.0, 1.0)

    return ClosedFormDistribution(
        inverse_cdf=inverse_cdf, vectorized=True, cdf=cdf, name=f"Uniform({a}, {b})"
    )


# =============================================================================
# CDF Without Closed-Form Inverse
# =============================================================================


def make_normal(mu: float = 0.0, sigma: float = 1.0) -> ImplicitCDFDistribution:
    """
    Normal(μ, σ²) described by Φ only.

    Φ has no elementary inverse, so the sampler brackets and bisects. The
    starting bracket is μ ± σ.
    """
    if not sigma > 0:
        raise ConfigurationError(f"sigma must be positive, got {sigma}")

    def cdf(x):
        return float(ndtr((x - mu) / sigma))

    return ImplicitCDFDistribution(
        cdf=cdf, bracket=(mu - sigma, mu + sigma), name=f"Normal(μ={mu}, σ={sigma})"
    )


# =============================================================================
# Discrete Distributions
# =============================================================================


def make_binomial(n: int = 10, p: float = 0.25) -> DiscreteDistribution:
    """Binomial(n, p) with support {0, ..., n}."""
    if n < 0 or not 0.0 <= p <= 1.0:
        raise ConfigurationError(f"Invalid Binomial parameters n={n}, p={p}")
    dist = stats.binom(n, p)

    return DiscreteDistribution(
        cmf=lambda x: float(dist.cdf(x)),
        max_x=n,
        pmf=dist.pmf,
        name=f"Binomial(n={n}, p={p})",
    )


def make_poisson(lam: float = 1.0, max_x: int | None = None) -> DiscreteDistribution:
    """
    Poisson(λ).

    The support is unbounded, so the scan limit defaults to a point far
    enough in the tail that the CMF rounds to 1 in double precision.
    """
    if not lam > 0:
        raise ConfigurationError(f"lam must be positive, got {lam}")
    if max_x is None:
        max_x = int(math.ceil(lam + 40.0 * math.sqrt(lam) + 50))
    dist = stats.poisson(lam)

    return DiscreteDistribution(
        cmf=lambda x: float(dist.cdf(x)),
        max_x=max_x,
        pmf=dist.pmf,
        name=f"Poisson(λ={lam})",
    )


# =============================================================================
# Bounded Densities
# =============================================================================


def make_triangular(a: float = 0.0, b: float = 2.0) -> BoundedDensity:
    """
    Symmetric triangular density on [a, b], peak at the midpoint.

    f(x) = h * (1 - |x - m| / w),  m = (a + b) / 2,  w = (b - a) / 2,  h = 1 / w

    On [0, 2] this is f(x) = 1 - |x - 1| with maximum 1.
    """
    if not a < b:
        raise ConfigurationError(f"Need a < b, got a={a}, b={b}")
    mid = 0.5 * (a + b)
    half_width = 0.5 * (b - a)
    height = 1.0 / half_width

    def density(x):
        return np.clip(height * (1.0 - np.abs(x - mid) / half_width), 0.0, None)

    def cdf(x):
        z = np.clip((np.asarray(x, dtype=float) - a) / half_width, 0.0, 2.0)
        return np.where(z <= 1.0, 0.5 * z**2, 1.0 - 0.5 * (2.0 - z) ** 2)

    return BoundedDensity(
        density=density,
        a=a,
        b=b,
        density_max=height,
        cdf=cdf,
        name=f"Triangular({a}, {b})",
    )


def make_beta(alpha: float = 2.0, beta: float = 5.0) -> BoundedDensity:
    """
    Beta(α, β) on [0, 1] for α, β >= 1, where the density is bounded.

    The envelope height is the density at the mode (α - 1) / (α + β - 2).
    """
    if alpha < 1 or beta < 1:
        raise ConfigurationError(
            f"Beta density is unbounded unless alpha, beta >= 1; got ({alpha}, {beta})"
        )
    dist = stats.beta(alpha, beta)
    mode = 0.5 if alpha == beta == 1 else (alpha - 1) / (alpha + beta - 2)

    return BoundedDensity(
        density=dist.pdf,
        a=0.0,
        b=1.0,
        density_max=float(dist.pdf(mode)),
        cdf=dist.cdf,
        name=f"Beta({alpha}, {beta})",
    )
