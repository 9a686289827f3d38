"""Target distributions and factories for the lecture examples."""

from .distributions import (
    BoundedDensity,
    ClosedFormDistribution,
    DiscreteDistribution,
    ImplicitCDFDistribution,
    make_beta,
    make_binomial,
    make_exponential,
    make_normal,
    make_poisson,
    make_triangular,
    make_uniform,
)

__all__ = [
    "BoundedDensity",
    "ClosedFormDistribution",
    "DiscreteDistribution",
    "ImplicitCDFDistribution",
    "make_beta",
    "make_binomial",
    "make_exponential",
    "make_normal",
    "make_poisson",
    "make_triangular",
    "make_uniform",
]
