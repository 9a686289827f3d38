"""
Seeded uniform random stream.

All randomness in simboot flows through an explicit ``UniformSource`` that the
caller creates and passes in. There is no module-level generator.
"""

import logging
import math
from numbers import Integral, Real

import numpy as np
from numpy.typing import NDArray

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def _validate_seed(seed) -> int:
    """Coerce a seed to a non-negative Python int or raise ConfigurationError."""
    if isinstance(seed, bool):
        raise ConfigurationError(f"Seed must be an integer, got bool {seed!r}")
    if isinstance(seed, Integral):
        value = int(seed)
    elif isinstance(seed, Real):
        seed = float(seed)
        if not math.isfinite(seed):
            raise ConfigurationError(f"Seed must be finite, got {seed}")
        if not seed.is_integer():
            raise ConfigurationError(f"Seed must be integral, got {seed}")
        value = int(seed)
    else:
        raise ConfigurationError(f"Seed must be an integer, got {type(seed).__name__}")

    if value < 0:
        raise ConfigurationError(f"Seed must be non-negative, got {value}")
    return value


def _validate_count(n, name: str = "n") -> int:
    if isinstance(n, bool) or not isinstance(n, Integral) or n < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {n!r}")
    return int(n)


class UniformSource:
    """Reproducible stream of U(0, 1) draws.

    Wraps a numpy ``Generator`` over ``PCG64``. Two sources created with the
    same seed produce the same sequence, and ``reseed`` rewinds a source to the
    start of the sequence for a seed.

    A source is not thread-safe. Parallel callers should each own a source
    obtained from ``spawn``.

    Args:
        seed: Non-negative integer seed. Integral floats are accepted;
            NaN, infinities, fractions and negative values are rejected.

    Examples:
        >>> src = UniformSource(7)
        >>> first = src.next_n(3)
        >>> src.reseed(7)
        >>> bool(np.array_equal(first, src.next_n(3)))
        True
    """

    def __init__(self, seed: int):
        self._seed = _validate_seed(seed)
        self._generator = np.random.Generator(np.random.PCG64(self._seed))

    def __repr__(self) -> str:
        return f"UniformSource(seed={self._seed})"

    @property
    def seed(self) -> int:
        """Seed the stream was last (re)initialized with."""
        return self._seed

    def reseed(self, seed: int) -> None:
        """Reset the stream to the start of the sequence for ``seed``."""
        self._seed = _validate_seed(seed)
        self._generator = np.random.Generator(np.random.PCG64(self._seed))

    def next(self) -> float:
        """Draw one value in [0, 1)."""
        return float(self._generator.random())

    def next_n(self, n: int) -> NDArray[np.float64]:
        """Draw ``n`` values in [0, 1), in stream order."""
        n = _validate_count(n)
        return self._generator.random(n)

    def uniform(self, low: float, high: float, size: int) -> NDArray[np.float64]:
        """Draw ``size`` values from U(low, high) by scaling ``next_n``."""
        if not (math.isfinite(low) and math.isfinite(high) and low < high):
            raise ConfigurationError(
                f"uniform bounds must be finite with low < high, got ({low}, {high})"
            )
        return low + (high - low) * self.next_n(size)

    def indices(self, n: int, size: int) -> NDArray[np.intp]:
        """Draw ``size`` indices uniformly from {0, ..., n-1} with replacement.

        Indices are floor(u * n) for uniform draws u, clamped to n - 1.
        """
        n = _validate_count(n)
        if n == 0:
            raise ConfigurationError("Cannot draw indices from an empty range")
        u = self.next_n(size)
        idx = np.floor(u * n).astype(np.intp)
        return np.minimum(idx, n - 1)

    def spawn(self, offset: int) -> "UniformSource":
        """Create an independent source seeded with ``seed + offset``.

        Used to give each parallel worker (or bootstrap replicate) its own
        deterministic stream.
        """
        offset = _validate_count(offset, "offset")
        return UniformSource(self._seed + offset)


# The data model calls the stream a RandomStream.
RandomStream = UniformSource
