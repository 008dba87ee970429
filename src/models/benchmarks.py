"""Simple benchmark forecasts and moving averages.

The mean, naive, seasonal naive and drift methods are the yardsticks any
smoothing model should beat on a hold-out set. Moving averages estimate
the trend-cycle of a series and are computed with pandas rolling windows.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from smoothing_lab.exceptions import InsufficientDataError, InvalidParameterError

from .validation import as_observations, check_count

logger = logging.getLogger(__name__)


def mean_forecast(y: Sequence[float] | np.ndarray, horizon: int) -> np.ndarray:
    """Forecast every future value as the historical mean."""
    values = as_observations(y)
    horizon = check_count("horizon", horizon, 1)
    return np.full(horizon, values.mean())


def naive_forecast(y: Sequence[float] | np.ndarray, horizon: int) -> np.ndarray:
    """Forecast every future value as the last observation."""
    values = as_observations(y)
    horizon = check_count("horizon", horizon, 1)
    return np.full(horizon, values[-1])


def seasonal_naive_forecast(y: Sequence[float] | np.ndarray, horizon: int, period: int) -> np.ndarray:
    """Forecast each value as the last observation from the same season."""
    values = as_observations(y)
    horizon = check_count("horizon", horizon, 1)
    period = check_count("period", period, 1)
    if values.size < period:
        raise InsufficientDataError(values.size, period, "seasonal naive")

    last_cycle = values[-period:]
    return last_cycle[np.arange(horizon) % period]


def drift_forecast(y: Sequence[float] | np.ndarray, horizon: int) -> np.ndarray:
    """Extend the line joining the first and last observations."""
    values = as_observations(y)
    horizon = check_count("horizon", horizon, 1)
    if values.size < 2:
        raise InsufficientDataError(values.size, 2, "drift")

    slope = (values[-1] - values[0]) / (values.size - 1)
    return values[-1] + slope * np.arange(1, horizon + 1)


def benchmark_forecasts(
    y: Sequence[float] | np.ndarray,
    horizon: int,
    period: int | None = None,
) -> pd.DataFrame:
    """Forecasts from every benchmark method that the series supports.

    Returns:
        DataFrame indexed by horizon (1..h) with one column per method
    """
    values = as_observations(y)
    forecasts = {
        "mean": mean_forecast(values, horizon),
        "naive": naive_forecast(values, horizon),
    }
    if period is not None and period > 1 and values.size >= period:
        forecasts["seasonal_naive"] = seasonal_naive_forecast(values, horizon, period)
    if values.size >= 2:
        forecasts["drift"] = drift_forecast(values, horizon)

    logger.debug("Computed %d benchmark forecasts for horizon %d", len(forecasts), horizon)
    return pd.DataFrame(forecasts, index=pd.RangeIndex(1, horizon + 1, name="h"))


def moving_average(y: Sequence[float] | np.ndarray, order: int, centre: bool = True) -> pd.Series:
    """k-MA of the series; ``centre`` aligns each window on its middle point.

    Even-order centred averages are shifted half a step; use
    ``double_moving_average`` to symmetrise them.
    """
    values = as_observations(y)
    order = check_count("order", order, 1)
    if order > values.size:
        raise InsufficientDataError(values.size, order, f"{order}-MA")
    return pd.Series(values).rolling(window=order, center=centre).mean()


def double_moving_average(y: Sequence[float] | np.ndarray, order: int) -> pd.Series:
    """Centred 2×m-MA, the usual trend-cycle estimate for an even season length."""
    order = check_count("order", order, 2)
    if order % 2:
        raise InvalidParameterError("order", order, "2xm-MA needs an even order")

    first = moving_average(y, order, centre=False)
    # the trailing m-MA ends at t; averaging two of them centres on t - m/2
    second = first.rolling(window=2).mean()
    return second.shift(-(order // 2))


def trailing_moving_average(y: Sequence[float] | np.ndarray, window: int) -> pd.Series:
    """Mean of the previous ``window`` observations, usable as a forecast for t.

    The first value repeats the first observation since no history exists.
    """
    values = as_observations(y)
    window = check_count("window", window, 1)
    series = pd.Series(values)
    trailing = series.shift(1).rolling(window=window, min_periods=1).mean()
    trailing.iloc[0] = values[0]
    return trailing
