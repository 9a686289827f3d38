"""
Unit tests for the interval helpers.

Critical behaviors tested:
1. Order-statistic ranks ⌈(R+1)·level⌉ with clamping to [1, R]
2. BCa reduces to the percentile interval when z₀ = 0 and a = 0
3. Bias correction and acceleration match their closed forms
4. Degenerate jackknife input raises DegenerateJackknifeError
"""

import numpy as np
import pytest
from scipy.stats import norm

from simboot.bootstrap import (
    IntervalEstimate,
    acceleration,
    bca_interval,
    bias_correction,
    percentile_interval,
)
from simboot.bootstrap.intervals import order_statistic_rank
from simboot.errors import ConfigurationError, DegenerateJackknifeError


@pytest.fixture
def symmetric_replicates():
    """R = 999 normal quantiles, symmetric about 0 with median exactly 0."""
    levels = np.arange(1, 1000) / 1000
    return norm.ppf(levels)


@pytest.fixture
def symmetric_jackknife():
    """Jackknife values with zero third central moment."""
    return np.array([-1.0, -0.5, 0.0, 0.5, 1.0])


class TestOrderStatisticRank:
    """Rank rule shared by both interval methods."""

    @pytest.mark.parametrize(
        "level,R,expected",
        [
            (0.025, 999, 25),
            (0.975, 999, 975),
            (0.05, 99, 5),
            (0.95, 99, 95),
            (0.025, 100, 3),
            (0.0001, 9, 1),
            (0.9999, 9, 9),
        ],
        ids=["lo_999", "hi_999", "lo_99", "hi_99", "fractional", "clamp_low", "clamp_high"],
    )
    def test_rank(self, level, R, expected):
        assert order_statistic_rank(level, R) == expected

    def test_percentile_interval_from_raw_replicates(self):
        reps = np.arange(1.0, 1000.0)[::-1]  # 999 values, unsorted
        interval = percentile_interval(reps, 0.05)
        assert interval.lower == 25.0
        assert interval.upper == 975.0

    def test_single_replicate(self):
        interval = percentile_interval([4.2], 0.05)
        assert interval.lower == interval.upper == 4.2

    def test_empty_replicates_rejected(self):
        with pytest.raises(ConfigurationError):
            percentile_interval([], 0.05)


class TestBCaReduction:
    """With z₀ = 0 and a = 0, BCa is the percentile interval."""

    @pytest.mark.parametrize("alpha", [0.05, 0.1, 0.2])
    def test_bca_equals_percentile(self, symmetric_replicates, symmetric_jackknife, alpha):
        pct = percentile_interval(symmetric_replicates, alpha)
        bca = bca_interval(symmetric_replicates, alpha, 0.0, symmetric_jackknife)

        assert bias_correction(symmetric_replicates, 0.0) == 0.0
        assert acceleration(symmetric_jackknife) == 0.0
        assert bca.lower == pytest.approx(pct.lower, abs=1e-12)
        assert bca.upper == pytest.approx(pct.upper, abs=1e-12)
        assert bca.confidence_level == pct.confidence_level

    def test_positive_bias_correction_shifts_up(self, symmetric_replicates, symmetric_jackknife):
        pct = percentile_interval(symmetric_replicates, 0.1)
        bca = bca_interval(symmetric_replicates, 0.1, 0.3, symmetric_jackknife)
        assert bca.lower > pct.lower
        assert bca.upper > pct.upper


class TestComponents:
    """z₀ and a in isolation."""

    def test_bias_correction_formula(self):
        reps = np.arange(1.0, 100.0)  # R = 99
        # 30 replicates are <= 30.5
        assert bias_correction(reps, 30.5) == pytest.approx(norm.ppf(30 / 100))

    def test_bias_correction_finite_when_all_replicates_above(self):
        z0 = bias_correction(np.arange(10.0, 20.0), 0.0)
        assert np.isfinite(z0)
        assert z0 < 0

    def test_acceleration_formula(self):
        jk = np.array([1.0, 2.0, 4.0, 8.0])
        d = jk.mean() - jk
        expected = np.sum(d**3) / (6 * np.sum(d**2) ** 1.5)
        assert acceleration(jk) == pytest.approx(expected)

    def test_acceleration_sign_follows_skew(self):
        # A single low leave-one-out value means one large observation.
        assert acceleration([1.0, 1.0, 1.0, -3.0]) > 0

    def test_identical_jackknife_raises(self):
        with pytest.raises(DegenerateJackknifeError):
            acceleration([2.0, 2.0, 2.0])

    @pytest.mark.parametrize("value", [0.1, 0.3, 1e-7], ids=["tenth", "three_tenths", "tiny"])
    def test_identical_inexact_jackknife_raises(self, value):
        """Verify identical values raise even when their mean is off by rounding."""
        with pytest.raises(DegenerateJackknifeError):
            acceleration(np.full(10, value))

    def test_bca_identical_inexact_jackknife_raises(self, symmetric_replicates):
        with pytest.raises(DegenerateJackknifeError):
            bca_interval(symmetric_replicates, 0.05, 0.0, np.full(10, 0.3))

    def test_single_jackknife_value_raises(self):
        with pytest.raises(DegenerateJackknifeError):
            acceleration([2.0])

    def test_empty_jackknife_rejected(self):
        with pytest.raises(ConfigurationError):
            acceleration([])

    def test_extreme_acceleration_raises(self, symmetric_replicates):
        """Verify a·(z₀ + z) >= 1 leaves no valid adjusted level.

        t_obs above every replicate gives z₀ = Φ⁻¹(999/1000) ≈ 3.09; with
        alpha = 0.001 the upper z is 3.29, and a single outlier among 101
        jackknife values gives a ≈ 0.164.
        """
        jackknife = [0.0] * 100 + [-100.0]
        with pytest.raises(DegenerateJackknifeError):
            bca_interval(symmetric_replicates, 0.001, 100.0, jackknife)


class TestIntervalEstimate:
    """Immutable result object."""

    def test_width_and_contains(self):
        interval = IntervalEstimate(lower=1.0, upper=3.0, confidence_level=0.9)
        assert interval.width == 2.0
        assert interval.contains(1.0)
        assert interval.contains(3.0)
        assert not interval.contains(3.5)

    def test_frozen(self):
        interval = IntervalEstimate(lower=1.0, upper=3.0, confidence_level=0.9)
        with pytest.raises(AttributeError):
            interval.lower = 0.0
