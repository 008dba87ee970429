"""Input checks shared by the smoothing engine and the benchmark methods."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from smoothing_lab.exceptions import InvalidParameterError, InvalidSeriesError


def as_observations(y: Sequence[float] | np.ndarray | pd.Series) -> np.ndarray:
    """Return observations as a finite 1-D float array."""
    try:
        values = np.asarray(y, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidSeriesError("Observations must be numeric") from exc

    if values.ndim != 1:
        raise InvalidSeriesError(f"Observations must be one-dimensional, got shape {values.shape}")
    if values.size == 0:
        raise InvalidSeriesError("Observations must not be empty")
    if not np.all(np.isfinite(values)):
        raise InvalidSeriesError("Observations must be finite (no NaN or inf)")
    return values


def check_count(name: str, value: object, minimum: int) -> int:
    """Validate an integer count such as a horizon, period or window."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(name, value, "must be an integer")
    if value < minimum:
        raise InvalidParameterError(name, value, f"must be at least {minimum}")
    return int(value)
