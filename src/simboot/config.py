"""Tunable defaults for the samplers and the bootstrap engine."""

import math
from dataclasses import dataclass, replace

from .errors import ConfigurationError


@dataclass(frozen=True)
class SamplingConfig:
    """Numeric limits shared by the inverse-CDF and rejection samplers.

    Attributes:
        tolerance: Bisection stops once |F(x) - u| < tolerance.
        max_iterations: Bisection steps allowed per draw.
        max_bracket_expansions: Doublings allowed while bracketing u.
        initial_bracket: Starting (lo, hi) when a distribution has no hint.
        max_proposals: Consecutive rejections allowed for a single sample.
        proposal_batch: Uniform pairs drawn from the stream at a time.
    """

    tolerance: float = 1e-9
    max_iterations: int = 200
    max_bracket_expansions: int = 64
    initial_bracket: tuple[float, float] = (-1.0, 1.0)
    max_proposals: int = 1_000_000
    proposal_batch: int = 4096

    def __post_init__(self):
        if not (math.isfinite(self.tolerance) and self.tolerance > 0):
            raise ConfigurationError(f"tolerance must be positive, got {self.tolerance}")
        for name in (
            "max_iterations",
            "max_bracket_expansions",
            "max_proposals",
            "proposal_batch",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value}")
        lo, hi = self.initial_bracket
        if not (math.isfinite(lo) and math.isfinite(hi) and lo < hi):
            raise ConfigurationError(
                f"initial_bracket must be a finite increasing pair, got {self.initial_bracket}"
            )

    def replace(self, **changes) -> "SamplingConfig":
        return replace(self, **changes)


@dataclass(frozen=True)
class BootstrapConfig:
    """Execution options for bootstrap resampling.

    Attributes:
        workers: Thread count for resampling. None or 1 runs serially.
        stream_per_replicate: Give replicate i its own stream seeded with
            base_seed + i. Implied when workers > 1.
        progress: Show a tqdm progress bar while resampling.
    """

    workers: int | None = None
    stream_per_replicate: bool = False
    progress: bool = False

    def __post_init__(self):
        if self.workers is not None and (
            not isinstance(self.workers, int) or self.workers < 1
        ):
            raise ConfigurationError(
                f"workers must be a positive integer or None, got {self.workers}"
            )

    @property
    def partitioned(self) -> bool:
        """Whether each replicate draws from its own deterministically seeded stream."""
        return self.stream_per_replicate or (
            self.workers is not None and self.workers > 1
        )

    def replace(self, **changes) -> "BootstrapConfig":
        return replace(self, **changes)


DEFAULT_SAMPLING_CONFIG = SamplingConfig()
DEFAULT_BOOTSTRAP_CONFIG = BootstrapConfig()
