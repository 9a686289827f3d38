"""
Unit tests for the eval diagnostics.

Critical behaviors tested:
1. ECDF discrepancy and chi-square goodness of fit on known inputs
2. Tail pooling keeps every bin's expected count above the threshold
3. Histogram comparison normalizes unnormalized densities
4. Coverage simulation is reproducible and near nominal
"""

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from simboot.datagen import make_exponential, make_triangular
from simboot.errors import ConfigurationError
from simboot.eval import (
    CoverageResult,
    density_histogram_discrepancy,
    discrete_goodness_of_fit,
    ecdf_discrepancy,
    expected_proposals,
    run_interval_coverage,
)
from simboot.sampling import InverseCDFSampler


def exponential_data(n, source):
    """Dataset generator for coverage runs: Exponential(1) draws."""
    return InverseCDFSampler(source).sample(n, make_exponential(1.0))


class TestEcdfDiscrepancy:
    def test_exact_points(self):
        samples = np.array([1.0, 2.0, 3.0, 4.0])
        errors = ecdf_discrepancy(samples, lambda x: np.full_like(x, 0.5), [2.0, 3.5])
        np.testing.assert_allclose(errors, [0.0, 0.25])


class TestDiscreteGoodnessOfFit:
    def test_perfect_counts_give_high_p_value(self):
        pmf = stats.binom(4, 0.5).pmf
        counts = (pmf(np.arange(5)) * 1600).round().astype(int)  # 100, 400, 600, 400, 100
        samples = np.repeat(np.arange(5), counts)

        result = discrete_goodness_of_fit(samples, pmf, np.arange(5))

        assert result.statistic == pytest.approx(0.0, abs=1e-9)
        assert result.p_value == pytest.approx(1.0)
        assert result.dof == 4

    def test_wrong_distribution_rejected(self):
        samples = np.repeat(np.arange(5), 200)  # uniform counts
        result = discrete_goodness_of_fit(samples, stats.binom(4, 0.5).pmf, np.arange(5))
        assert result.p_value < 1e-6

    def test_sparse_tails_are_pooled(self):
        pmf = stats.binom(10, 0.25).pmf
        samples = np.repeat(np.arange(11), (pmf(np.arange(11)) * 1000).round().astype(int))
        result = discrete_goodness_of_fit(samples, pmf, np.arange(11))

        assert np.all(result.expected >= 5.0)
        assert result.observed.sum() == samples.size
        assert result.expected.sum() == pytest.approx(samples.size)

    def test_samples_outside_support_rejected(self):
        with pytest.raises(ConfigurationError):
            discrete_goodness_of_fit(np.array([0, 1, 7]), stats.binom(2, 0.5).pmf, np.arange(3))


class TestDensityDiagnostics:
    def test_unnormalized_density(self):
        """Verify scaling the density does not change the expected heights."""
        tri = make_triangular(0.0, 2.0)
        samples = np.linspace(0.0, 2.0, 1001)[1:-1]
        first = density_histogram_discrepancy(samples, tri.density, 0.0, 2.0, bins=10)
        second = density_histogram_discrepancy(
            samples, lambda x: 7.0 * tri.density(x), 0.0, 2.0, bins=10
        )
        np.testing.assert_allclose(first.expected, second.expected)
        assert first.edges.shape == (11,)

    def test_expected_proposals_for_triangle(self):
        tri = make_triangular(0.0, 2.0)
        assert expected_proposals(tri.density, 0.0, 2.0, 1.0) == pytest.approx(2.0)

    def test_zero_density_rejected(self):
        with pytest.raises(ConfigurationError):
            expected_proposals(lambda x: 0.0, 0.0, 1.0, 1.0)


class TestIntervalCoverage:
    """Monte Carlo coverage of bootstrap intervals for an exponential mean."""

    def test_percentile_coverage_near_nominal(self):
        result = run_interval_coverage(
            exponential_data,
            np.mean,
            true_value=1.0,
            n_obs=30,
            replicate_count=199,
            n_simulations=40,
            seed=10,
        )

        assert isinstance(result, CoverageResult)
        assert result.n_simulations == 40
        assert result.nominal == pytest.approx(0.95)
        assert 0.7 <= result.coverage <= 1.0
        assert np.all(result.lower <= result.upper)
        assert result.mean_width > 0
        assert 0.0 <= result.coverage_se < 0.1

    def test_reproducible(self):
        kwargs = dict(true_value=1.0, n_obs=20, replicate_count=99, n_simulations=5, seed=3)
        first = run_interval_coverage(exponential_data, np.mean, **kwargs)
        second = run_interval_coverage(exponential_data, np.mean, **kwargs)
        np.testing.assert_array_equal(first.lower, second.lower)
        np.testing.assert_array_equal(first.upper, second.upper)

    def test_bca_method_and_frame(self):
        result = run_interval_coverage(
            exponential_data,
            np.mean,
            true_value=1.0,
            n_obs=25,
            replicate_count=199,
            n_simulations=8,
            method="bca",
            seed=4,
        )
        frame = result.to_frame()

        assert result.method == "bca"
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["lower", "upper", "width", "covered"]
        assert len(frame) == 8
        assert frame["covered"].mean() == pytest.approx(result.coverage)

    @pytest.mark.parametrize(
        "kwargs",
        [{"method": "studentized"}, {"n_simulations": 0}],
        ids=["unknown_method", "zero_simulations"],
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ConfigurationError):
            run_interval_coverage(exponential_data, np.mean, 1.0, n_obs=10, **kwargs)
