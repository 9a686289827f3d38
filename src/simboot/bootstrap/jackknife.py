"""Leave-one-out (jackknife) statistics."""

from collections.abc import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..errors import ConfigurationError


def jackknife_values(
    data: ArrayLike, statistic: Callable[[NDArray], float]
) -> NDArray[np.float64]:
    """Compute T₋ⱼ = statistic(data without observation j) for every j.

    Observations are taken along the first axis, so paired data can be passed
    as an (n, k) array.
    """
    data = np.asarray(data)
    if data.ndim == 0 or data.shape[0] < 2:
        raise ConfigurationError("Jackknife needs at least 2 observations")

    return np.array(
        [float(statistic(np.delete(data, j, axis=0))) for j in range(data.shape[0])]
    )
