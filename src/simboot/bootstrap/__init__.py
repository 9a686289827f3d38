"""Bootstrap resampling, jackknife and interval estimates."""

from .engine import BootstrapEngine, EngineState, bootstrap
from .intervals import (
    IntervalEstimate,
    acceleration,
    bca_interval,
    bias_correction,
    percentile_interval,
)
from .jackknife import jackknife_values

__all__ = [
    "BootstrapEngine",
    "EngineState",
    "IntervalEstimate",
    "acceleration",
    "bca_interval",
    "bias_correction",
    "bootstrap",
    "jackknife_values",
    "percentile_interval",
]
