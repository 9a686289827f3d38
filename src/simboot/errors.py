"""Exception hierarchy and warning categories for simboot.

Every error is raised synchronously at the offending call. Errors subclass a
matching builtin so that callers catching ``ValueError`` or ``ArithmeticError``
keep working.
"""


class SimbootError(Exception):
    """Base class for all simboot errors."""


class ConfigurationError(SimbootError, ValueError):
    """Invalid construction or call parameters (non-positive n, R < 1, empty data)."""


class ConvergenceError(SimbootError, ArithmeticError):
    """Numeric CDF inversion or discrete CMF scan did not reach its target."""


class RejectionExhaustedError(SimbootError, RuntimeError):
    """Rejection sampler hit its proposal cap, usually a misconfigured envelope."""


class SamplingTimeoutError(RejectionExhaustedError):
    """Rejection sampler exceeded its cooperative timeout."""


class InsufficientDataError(SimbootError, ValueError):
    """Statistic requires more bootstrap replicates than are available."""


class DegenerateJackknifeError(SimbootError, ArithmeticError):
    """BCa acceleration is undefined because all jackknife values are identical."""


class EnvelopeViolationWarning(UserWarning):
    """The target density exceeded the rejection envelope; the sample is biased."""


__all__ = [
    "ConfigurationError",
    "ConvergenceError",
    "DegenerateJackknifeError",
    "EnvelopeViolationWarning",
    "InsufficientDataError",
    "RejectionExhaustedError",
    "SamplingTimeoutError",
    "SimbootError",
]
