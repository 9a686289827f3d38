"""
Rejection sampling from a bounded density with a uniform envelope.

Each proposal is a point (x, y) uniform over the box [a, b] x [0, max_density];
x is accepted when y < f(x). Accepted points are exact draws from f provided
max_density >= sup f on [a, b]. The expected number of proposals per accepted
sample is (b - a) * max_density / ∫f.

An envelope below the density is NOT an error: the sampler still returns
values, but regions where f exceeds the envelope are under-represented. The
sampler emits an ``EnvelopeViolationWarning`` when it sees such a point, and
the returned sample is unchanged.
"""

import logging
import math
import time
import warnings
from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_SAMPLING_CONFIG, SamplingConfig
from ..datagen.distributions import BoundedDensity
from ..errors import (
    ConfigurationError,
    EnvelopeViolationWarning,
    RejectionExhaustedError,
    SamplingTimeoutError,
)
from ..rng import UniformSource
from .inverse_cdf import _validate_sample_size

logger = logging.getLogger(__name__)


class RejectionSampler:
    """Accept/reject sampler over a uniform bounding box.

    Args:
        source: Uniform stream supplying both coordinates of each proposal.
        config: ``max_proposals`` caps consecutive rejections for one sample;
            ``proposal_batch`` sets how many proposals are drawn at once.

    Attributes:
        last_acceptance_rate: Accepted / proposed for the most recent call,
            or None before the first call.
    """

    def __init__(self, source: UniformSource, config: SamplingConfig | None = None):
        if not isinstance(source, UniformSource):
            raise ConfigurationError(
                f"source must be a UniformSource, got {type(source).__name__}"
            )
        self.source = source
        self.config = config if config is not None else DEFAULT_SAMPLING_CONFIG
        self.last_acceptance_rate: float | None = None

    def sample(
        self,
        n: int,
        density_fn: Callable[[float], float],
        a: float,
        b: float,
        max_density: float,
        vectorized: bool = False,
        timeout: float | None = None,
    ) -> NDArray[np.float64]:
        """Draw ``n`` samples from ``density_fn`` on [a, b].

        Args:
            n: Number of samples, a positive integer.
            density_fn: Target density (need not be normalized).
            a: Lower support bound.
            b: Upper support bound, b > a.
            max_density: Envelope height. Must dominate density_fn on [a, b];
                this is the caller's responsibility and is not verified.
            vectorized: Whether density_fn accepts numpy arrays.
            timeout: Optional wall-clock limit in seconds, checked before
                every proposal batch and, for scalar densities, before each
                density evaluation.

        Returns:
            Array of n accepted x values in [a, b), in acceptance order.

        Raises:
            ConfigurationError: On invalid n, bounds, or envelope height.
            RejectionExhaustedError: If ``config.max_proposals`` consecutive
                proposals are rejected.
            SamplingTimeoutError: If ``timeout`` elapses before n samples
                are accepted.
        """
        n = _validate_sample_size(n)
        if not (math.isfinite(a) and math.isfinite(b) and a < b):
            raise ConfigurationError(f"Support must be finite with a < b, got [{a}, {b}]")
        if not (math.isfinite(max_density) and max_density > 0):
            raise ConfigurationError(
                f"max_density must be finite and positive, got {max_density}"
            )
        if timeout is not None and not timeout > 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout}")

        batch = self.config.proposal_batch
        cap = self.config.max_proposals
        deadline = None if timeout is None else time.monotonic() + timeout

        out = np.empty(n, dtype=float)
        filled = 0
        proposals = 0
        since_accept = 0
        warned = False

        def timed_out() -> SamplingTimeoutError:
            return SamplingTimeoutError(
                f"Rejection sampling timed out after {timeout}s with "
                f"{filled}/{n} samples accepted"
            )

        while filled < n:
            if deadline is not None and time.monotonic() > deadline:
                raise timed_out()

            u = self.source.next_n(2 * batch).reshape(batch, 2)
            xs = a + (b - a) * u[:, 0]
            ys = max_density * u[:, 1]
            if vectorized:
                fx = np.asarray(density_fn(xs), dtype=float).reshape(batch)
            elif deadline is None:
                fx = np.fromiter((density_fn(x) for x in xs), dtype=float, count=batch)
            else:
                # Scalar densities may be slow; check the deadline per proposal.
                fx = np.empty(batch, dtype=float)
                for k, x in enumerate(xs):
                    if time.monotonic() > deadline:
                        raise timed_out()
                    fx[k] = density_fn(x)

            if not warned and np.any(fx > max_density):
                warnings.warn(
                    f"Density exceeds max_density={max_density} "
                    f"(observed {float(fx.max()):.6g}); the sample is biased",
                    EnvelopeViolationWarning,
                    stacklevel=2,
                )
                warned = True

            accepted = np.flatnonzero(ys < fx)[: n - filled]

            # Rejections preceding each accepted proposal, carrying over the
            # run from the previous batch.
            rejections = np.diff(np.concatenate(([-1], accepted))) - 1
            if accepted.size:
                rejections[0] += since_accept
            if accepted.size == 0 or filled + accepted.size < n:
                tail = batch - 1 - (accepted[-1] if accepted.size else -1)
                tail += 0 if accepted.size else since_accept
                run = np.concatenate((rejections, [tail]))
            else:
                run = rejections
            if run.size and run.max() >= cap:
                raise RejectionExhaustedError(
                    f"{cap} consecutive proposals rejected with {filled}/{n} samples "
                    f"accepted; check that max_density and [a, b] match the density"
                )

            out[filled : filled + accepted.size] = xs[accepted]
            filled += accepted.size
            if filled == n:
                proposals += int(accepted[-1]) + 1
            else:
                proposals += batch
                since_accept = int(run[-1])

        self.last_acceptance_rate = n / proposals
        logger.debug(
            "Rejection sampling accepted %d of %d proposals (rate %.4f)",
            n,
            proposals,
            self.last_acceptance_rate,
        )
        return out

    def sample_density(
        self,
        n: int,
        distribution: BoundedDensity,
        vectorized: bool = True,
        timeout: float | None = None,
    ) -> NDArray[np.float64]:
        """Draw ``n`` samples from a ``BoundedDensity`` using its envelope."""
        return self.sample(
            n,
            distribution.density,
            distribution.a,
            distribution.b,
            distribution.density_max,
            vectorized=vectorized,
            timeout=timeout,
        )
