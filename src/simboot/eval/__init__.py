"""Evaluation utilities for sampler output and bootstrap interval coverage."""

from .diagnostics import (
    CoverageResult,
    GoodnessOfFit,
    HistogramComparison,
    density_histogram_discrepancy,
    discrete_goodness_of_fit,
    ecdf_discrepancy,
    expected_proposals,
    run_interval_coverage,
)

__all__ = [
    "CoverageResult",
    "GoodnessOfFit",
    "HistogramComparison",
    "density_histogram_discrepancy",
    "discrete_goodness_of_fit",
    "ecdf_discrepancy",
    "expected_proposals",
    "run_interval_coverage",
]
