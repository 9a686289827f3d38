"""
Bootstrap resampling engine.

The engine moves through three states:

    CONFIGURED  -> holds data, statistic, R and a UniformSource
    RESAMPLING  -> draws R resamples with replacement and evaluates the statistic
    AGGREGATED  -> exposes mean, variance, bias and interval estimates

Resampling runs on the first aggregated query (or an explicit ``resample()``
call) and happens once. Aggregated queries read a frozen replicate array, so
repeating a query returns the same result.

Malformed input fails at construction with ``ConfigurationError``. Numeric
degeneracies (R < 2 for a variance, identical jackknife values for BCa) fail
only in the query that needs them.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from numbers import Integral

import numpy as np
from numpy.typing import ArrayLike, NDArray
from tqdm import tqdm

from ..config import DEFAULT_BOOTSTRAP_CONFIG, BootstrapConfig
from ..errors import ConfigurationError, InsufficientDataError
from ..rng import UniformSource
from . import intervals
from .intervals import IntervalEstimate
from .jackknife import jackknife_values as _jackknife_values

logger = logging.getLogger(__name__)


class EngineState(Enum):
    CONFIGURED = "configured"
    RESAMPLING = "resampling"
    AGGREGATED = "aggregated"


class BootstrapEngine:
    """Nonparametric bootstrap of a scalar statistic.

    Args:
        data: Observations, taken along the first axis. Must be non-empty.
        statistic: Function mapping a resample (same layout as ``data``) to
            a float.
        replicate_count: Number of bootstrap replicates R >= 1.
        seed: Integer seed or an existing UniformSource.
        config: Execution options. With ``workers > 1`` or
            ``stream_per_replicate=True``, replicate i draws its indices from
            its own stream seeded with ``seed + i``, so results do not depend
            on the worker count.

    Raises:
        ConfigurationError: On empty data, R < 1, a non-callable statistic or
            an invalid seed.

    Examples:
        >>> engine = BootstrapEngine([1.0, 2.0, 4.0, 8.0], np.mean, 200, seed=3)
        >>> interval = engine.percentile_interval(0.1)
        >>> interval.lower <= interval.upper
        True
    """

    def __init__(
        self,
        data: ArrayLike,
        statistic: Callable[[NDArray], float],
        replicate_count: int,
        seed: int | UniformSource,
        config: BootstrapConfig | None = None,
    ):
        data = np.asarray(data)
        if data.ndim == 0 or data.shape[0] == 0:
            raise ConfigurationError("Bootstrap data must contain at least one observation")
        if not callable(statistic):
            raise ConfigurationError(
                f"statistic must be callable, got {type(statistic).__name__}"
            )
        if (
            isinstance(replicate_count, bool)
            or not isinstance(replicate_count, Integral)
            or replicate_count < 1
        ):
            raise ConfigurationError(
                f"replicate_count must be a positive integer, got {replicate_count!r}"
            )

        self.data = data
        self.statistic = statistic
        self.replicate_count = int(replicate_count)
        self.source = seed if isinstance(seed, UniformSource) else UniformSource(seed)
        self.config = config if config is not None else DEFAULT_BOOTSTRAP_CONFIG
        self.state = EngineState.CONFIGURED
        self._base_seed = self.source.seed
        self._replicates: NDArray[np.float64] | None = None

    def __repr__(self) -> str:
        return (
            f"BootstrapEngine(n={self.n_observations}, R={self.replicate_count}, "
            f"seed={self._base_seed}, state={self.state.value})"
        )

    @property
    def n_observations(self) -> int:
        return self.data.shape[0]

    # =========================================================================
    # Resampling
    # =========================================================================

    def _replicate(self, source: UniformSource) -> float:
        idx = source.indices(self.n_observations, self.n_observations)
        return float(self.statistic(self.data[idx]))

    def _replicate_partitioned(self, i: int) -> float:
        return self._replicate(self.source.spawn(i))

    def resample(self) -> "BootstrapEngine":
        """Draw all R replicates. A no-op once the engine is aggregated."""
        if self.state is EngineState.AGGREGATED:
            return self

        self.state = EngineState.RESAMPLING
        R = self.replicate_count
        progress = self.config.progress
        try:
            if self.config.partitioned:
                workers = self.config.workers or 1
                if workers > 1:
                    with ThreadPoolExecutor(max_workers=workers) as pool:
                        values = list(
                            tqdm(
                                pool.map(self._replicate_partitioned, range(R)),
                                total=R,
                                desc="Resampling",
                                disable=not progress,
                            )
                        )
                else:
                    values = [
                        self._replicate_partitioned(i)
                        for i in tqdm(range(R), desc="Resampling", disable=not progress)
                    ]
            else:
                values = [
                    self._replicate(self.source)
                    for _ in tqdm(range(R), desc="Resampling", disable=not progress)
                ]
        except Exception:
            self.state = EngineState.CONFIGURED
            raise

        replicates = np.asarray(values, dtype=float)
        replicates.setflags(write=False)
        self._replicates = replicates
        self.state = EngineState.AGGREGATED
        logger.debug(
            "Drew %d bootstrap replicates of %d observations (seed=%d)",
            R,
            self.n_observations,
            self._base_seed,
        )
        return self

    @property
    def replicates(self) -> NDArray[np.float64]:
        """Read-only array of T*_1..T*_R in insertion order."""
        self.resample()
        return self._replicates

    # =========================================================================
    # Aggregated Queries
    # =========================================================================

    def observed_statistic(self) -> float:
        """Statistic evaluated on the original data."""
        return float(self.statistic(self.data))

    def mean_estimate(self) -> float:
        """Arithmetic mean of the replicates."""
        return float(np.mean(self.replicates))

    def variance_estimate(self) -> float:
        """Sample variance of the replicates (divisor R - 1).

        Raises:
            InsufficientDataError: If R < 2.
        """
        if self.replicate_count < 2:
            raise InsufficientDataError(
                f"Variance needs at least 2 replicates, have {self.replicate_count}"
            )
        return float(np.var(self.replicates, ddof=1))

    def standard_error(self) -> float:
        """Bootstrap standard error, the square root of ``variance_estimate``."""
        return float(np.sqrt(self.variance_estimate()))

    def bias_estimate(self, original_stat_value: float) -> float:
        """mean_estimate() - original_stat_value."""
        return self.mean_estimate() - float(original_stat_value)

    def percentile_interval(self, alpha: float = 0.05) -> IntervalEstimate:
        """Percentile interval at confidence 1 - alpha."""
        return intervals.percentile_interval(self.replicates, alpha)

    def jackknife_values(self) -> NDArray[np.float64]:
        """Leave-one-out statistics on the original data."""
        return _jackknife_values(self.data, self.statistic)

    def bca_interval(
        self,
        alpha: float,
        original_stat_value: float,
        jackknife_values: ArrayLike | None = None,
    ) -> IntervalEstimate:
        """Bias-corrected and accelerated interval at confidence 1 - alpha.

        Args:
            alpha: Two-sided error rate.
            original_stat_value: Statistic on the original data.
            jackknife_values: Leave-one-out statistics. Computed from the
                engine's data when omitted.

        Raises:
            DegenerateJackknifeError: If all jackknife values are identical.
        """
        if jackknife_values is None:
            jackknife_values = self.jackknife_values()
        return intervals.bca_interval(
            self.replicates, alpha, original_stat_value, jackknife_values
        )

    def summary(self, t_obs: float | None = None, alpha: float = 0.05) -> dict:
        """Collect the aggregated estimates in one dict.

        ``t_obs`` defaults to the statistic on the original data. Variance,
        standard error and BCa entries are None when R < 2 or the jackknife
        is degenerate.
        """
        if t_obs is None:
            t_obs = self.observed_statistic()

        result = {
            "n_observations": self.n_observations,
            "replicate_count": self.replicate_count,
            "t_obs": float(t_obs),
            "mean": self.mean_estimate(),
            "bias": self.bias_estimate(t_obs),
            "variance": None,
            "standard_error": None,
            "percentile": self.percentile_interval(alpha),
            "bca": None,
        }
        if self.replicate_count >= 2:
            result["variance"] = self.variance_estimate()
            result["standard_error"] = self.standard_error()
        if self.n_observations >= 2:
            jk = self.jackknife_values()
            if np.ptp(jk) > 0:
                result["bca"] = self.bca_interval(alpha, t_obs, jk)
        return result


def bootstrap(
    data: ArrayLike,
    statistic: Callable[[NDArray], float],
    replicate_count: int = 999,
    seed: int | UniformSource = 0,
    config: BootstrapConfig | None = None,
) -> BootstrapEngine:
    """Build a BootstrapEngine and resample immediately."""
    return BootstrapEngine(data, statistic, replicate_count, seed, config).resample()
