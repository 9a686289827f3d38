"""
Unit tests for the rng module.

Critical behaviors tested:
1. Identical seeds produce identical sequences; reseed rewinds the stream
2. Every draw lies in [0, 1)
3. Invalid seeds fail with ConfigurationError
4. Index draws and spawned streams are deterministic and in range
"""

import math

import numpy as np
import pytest

from simboot.errors import ConfigurationError
from simboot.rng import RandomStream, UniformSource


@pytest.fixture
def source():
    """Fixed source for reproducible tests."""
    return UniformSource(42)


class TestReproducibility:
    """Same seed, same stream."""

    @pytest.mark.parametrize("seed", [0, 1, 42, 2**40], ids=["zero", "one", "42", "large"])
    @pytest.mark.parametrize("k", [1, 10, 1000])
    def test_same_seed_same_sequence(self, seed, k):
        """Verify two sources with one seed yield identical sequences."""
        first = UniformSource(seed).next_n(k)
        second = UniformSource(seed).next_n(k)
        np.testing.assert_array_equal(first, second)

    def test_reseed_rewinds_stream(self, source):
        """Verify reseed(s) restarts the sequence for s."""
        first = source.next_n(50)
        source.next_n(17)
        source.reseed(42)
        np.testing.assert_array_equal(first, source.next_n(50))

    def test_reseed_updates_seed(self, source):
        source.reseed(7)
        assert source.seed == 7
        np.testing.assert_array_equal(source.next_n(5), UniformSource(7).next_n(5))

    def test_scalar_draws_follow_batch_stream(self):
        """Verify k calls to next() match one next_n(k) call."""
        src = UniformSource(3)
        scalar = np.array([src.next() for _ in range(20)])
        np.testing.assert_array_equal(scalar, UniformSource(3).next_n(20))

    def test_different_seeds_differ(self):
        assert not np.array_equal(UniformSource(1).next_n(10), UniformSource(2).next_n(10))

    def test_integral_float_seed_matches_int(self):
        np.testing.assert_array_equal(
            UniformSource(3.0).next_n(10), UniformSource(3).next_n(10)
        )

    def test_numpy_integer_seed_accepted(self):
        assert UniformSource(np.int64(5)).seed == 5

    def test_random_stream_alias(self):
        assert RandomStream is UniformSource


class TestRange:
    """All draws lie in [0, 1)."""

    def test_batch_draws_in_unit_interval(self, source):
        draws = source.next_n(100_000)
        assert draws.shape == (100_000,)
        assert np.all(draws >= 0.0)
        assert np.all(draws < 1.0)

    def test_scalar_draw_is_float_in_unit_interval(self, source):
        for _ in range(1000):
            value = source.next()
            assert isinstance(value, float)
            assert 0.0 <= value < 1.0

    def test_zero_draws(self, source):
        assert source.next_n(0).shape == (0,)

    def test_uniform_scales_draws(self, source):
        draws = source.uniform(-3.0, 5.0, 10_000)
        assert np.all((draws >= -3.0) & (draws < 5.0))
        assert abs(draws.mean() - 1.0) < 0.1


class TestSeedValidation:
    """Invalid seeds fail at construction."""

    @pytest.mark.parametrize(
        "seed",
        [math.nan, math.inf, -math.inf, -1, 1.5, True, "seed", None],
        ids=["nan", "inf", "neg_inf", "negative", "fraction", "bool", "string", "none"],
    )
    def test_invalid_seed_raises(self, seed):
        with pytest.raises(ConfigurationError):
            UniformSource(seed)

    def test_invalid_reseed_raises(self, source):
        with pytest.raises(ConfigurationError):
            source.reseed(math.nan)

    @pytest.mark.parametrize("n", [-1, 2.5, "3"], ids=["negative", "float", "string"])
    def test_invalid_count_raises(self, source, n):
        with pytest.raises(ConfigurationError):
            source.next_n(n)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            UniformSource(-5)

    @pytest.mark.parametrize(
        "low,high", [(1.0, 1.0), (2.0, 1.0), (0.0, math.inf)], ids=["empty", "reversed", "inf"]
    )
    def test_invalid_uniform_bounds(self, source, low, high):
        with pytest.raises(ConfigurationError):
            source.uniform(low, high, 10)


class TestIndicesAndSpawn:
    """Index draws and per-worker streams."""

    def test_indices_in_range(self, source):
        idx = source.indices(7, 50_000)
        assert idx.min() >= 0
        assert idx.max() <= 6
        assert np.issubdtype(idx.dtype, np.integer)

    def test_indices_roughly_uniform(self, source):
        idx = source.indices(5, 100_000)
        counts = np.bincount(idx, minlength=5) / 100_000
        np.testing.assert_allclose(counts, 0.2, atol=0.01)

    def test_indices_are_floor_of_scaled_uniforms(self):
        idx = UniformSource(9).indices(10, 100)
        u = UniformSource(9).next_n(100)
        np.testing.assert_array_equal(idx, np.floor(u * 10).astype(int))

    def test_indices_from_empty_range_raises(self, source):
        with pytest.raises(ConfigurationError):
            source.indices(0, 5)

    def test_spawn_seeds_with_offset(self, source):
        child = source.spawn(3)
        assert child.seed == 45
        np.testing.assert_array_equal(child.next_n(10), UniformSource(45).next_n(10))

    def test_spawn_does_not_advance_parent(self, source):
        source.spawn(1).next_n(100)
        np.testing.assert_array_equal(source.next_n(10), UniformSource(42).next_n(10))
