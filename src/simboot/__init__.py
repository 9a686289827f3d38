"""Monte Carlo Sampling and Bootstrap Toolkit.

This package provides a seeded uniform stream, inverse-transform and rejection
samplers built on it, and a bootstrap engine with bias, variance, percentile
and BCa interval estimates.
"""

import logging

from . import bootstrap, datagen, eval, rng, sampling, viz
from .bootstrap import BootstrapEngine, IntervalEstimate
from .config import BootstrapConfig, SamplingConfig
from .errors import (
    ConfigurationError,
    ConvergenceError,
    DegenerateJackknifeError,
    EnvelopeViolationWarning,
    InsufficientDataError,
    RejectionExhaustedError,
    SamplingTimeoutError,
    SimbootError,
)
from .rng import RandomStream, UniformSource
from .sampling import InverseCDFSampler, RejectionSampler

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BootstrapConfig",
    "BootstrapEngine",
    "ConfigurationError",
    "ConvergenceError",
    "DegenerateJackknifeError",
    "EnvelopeViolationWarning",
    "InsufficientDataError",
    "IntervalEstimate",
    "InverseCDFSampler",
    "RandomStream",
    "RejectionExhaustedError",
    "RejectionSampler",
    "SamplingConfig",
    "SamplingTimeoutError",
    "SimbootError",
    "UniformSource",
    "bootstrap",
    "datagen",
    "eval",
    "rng",
    "sampling",
    "viz",
]
