"""Exponential smoothing recurrences for level, trend and seasonal state.

This module implements simple exponential smoothing, Holt's linear trend
method (optionally damped) and additive or multiplicative Holt-Winters
seasonal smoothing as a single forward pass over an observation series.
Each variant initialises its state once, updates it once per observed
step and forecasts from the final state without ever updating it again.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal, Sequence

import numpy as np
import pandas as pd

from smoothing_lab.exceptions import (
    DegenerateDivisionError,
    InsufficientDataError,
    InvalidParameterError,
    NumericOverflowError,
)

from .state import SmoothingParameters, SmoothingState
from .validation import as_observations, check_count

logger = logging.getLogger(__name__)

SeasonalMode = Literal["additive", "multiplicative"]
ErrorType = Literal["additive", "multiplicative"]
TrendInit = Literal["zero", "difference"]

SEASONAL_MODES = ("additive", "multiplicative")


def _check_seasonal_mode(seasonal: str | None) -> SeasonalMode:
    if seasonal not in SEASONAL_MODES:
        raise InvalidParameterError("seasonal", seasonal, f"expected one of {SEASONAL_MODES}")
    return seasonal


def _check_positive(values: np.ndarray) -> None:
    if np.any(values <= 0):
        raise DegenerateDivisionError(
            "Multiplicative seasonality requires strictly positive observations"
        )


def _check_finite(step: int, *values: float | None) -> None:
    for value in values:
        if value is not None and not math.isfinite(value):
            raise NumericOverflowError(f"State update at step {step} produced a non-finite value")


def damping_sum(phi: float | None, horizon: int) -> np.ndarray:
    """Return ``phi + phi**2 + ... + phi**h`` for ``h = 1..horizon``.

    Uses the closed form ``phi * (1 - phi**h) / (1 - phi)``. An undamped
    trend (``phi`` of ``None`` or 1) simply returns ``h``.
    """
    horizon = check_count("horizon", horizon, 1)
    steps = np.arange(1, horizon + 1, dtype=float)
    if phi is None or phi == 1.0:
        return steps
    return phi * (1.0 - np.power(phi, steps)) / (1.0 - phi)


def initialize_level(y: Sequence[float] | np.ndarray) -> SmoothingState:
    """Level-only state for simple exponential smoothing: ``l_1 = y_1``."""
    values = as_observations(y)
    return SmoothingState(level=float(values[0]), step=1)


def initialize_trend(y: Sequence[float] | np.ndarray, trend_init: TrendInit = "zero") -> SmoothingState:
    """Level and trend state for Holt's method.

    ``trend_init="zero"`` sets ``b_1 = 0``; ``"difference"`` uses the first
    step change ``b_1 = y_2 - y_1``. Both set ``l_1 = y_1``.
    """
    values = as_observations(y)
    if values.size < 2:
        raise InsufficientDataError(values.size, 2, "Holt's linear trend")

    if trend_init == "zero":
        trend = 0.0
    elif trend_init == "difference":
        trend = float(values[1] - values[0])
    else:
        raise InvalidParameterError("trend_init", trend_init, "expected 'zero' or 'difference'")

    _check_finite(1, trend)
    return SmoothingState(level=float(values[0]), trend=trend, step=1)


def seasonal_level_and_indices(
    cycle: Sequence[float] | np.ndarray,
    seasonal: SeasonalMode = "additive",
) -> tuple[float, tuple[float, ...]]:
    """Initial level and seasonal indices from one full cycle.

    The level is the cycle mean; additive indices are deviations from it
    and multiplicative indices are ratios to it.
    """
    seasonal = _check_seasonal_mode(seasonal)
    values = as_observations(cycle)
    level = float(values.mean())

    if seasonal == "additive":
        indices = values - level
    else:
        _check_positive(values)
        indices = values / level

    return level, tuple(float(v) for v in indices)


def initialize_seasonal(
    y: Sequence[float] | np.ndarray,
    period: int,
    seasonal: SeasonalMode = "additive",
) -> SmoothingState:
    """Holt-Winters state at time ``m`` from the first two seasonal cycles."""
    period = check_count("period", period, 2)
    seasonal = _check_seasonal_mode(seasonal)
    values = as_observations(y)
    if values.size < 2 * period:
        raise InsufficientDataError(values.size, 2 * period, f"Holt-Winters with period {period}")

    level, indices = seasonal_level_and_indices(values[:period], seasonal)
    trend = (float(values[period : 2 * period].mean()) - level) / period

    return SmoothingState(level=level, trend=trend, season=indices, step=period)


def one_step_forecast(
    state: SmoothingState,
    params: SmoothingParameters,
    seasonal: SeasonalMode | None = None,
) -> float:
    """Forecast of the next observation from ``state``."""
    base = state.level
    if state.trend is not None:
        base += params.damping * state.trend
    if state.season is None:
        return base

    if _check_seasonal_mode(seasonal) == "multiplicative":
        return base * state.season[0]
    return base + state.season[0]


def update_state(
    state: SmoothingState,
    observation: float,
    params: SmoothingParameters,
    seasonal: SeasonalMode | None = None,
) -> SmoothingState:
    """Apply one observation to ``state`` and return the next state."""
    y = float(observation)
    alpha = params.alpha
    step = state.step + 1

    damped_trend = 0.0
    if state.trend is not None:
        params.require("beta")
        damped_trend = params.damping * state.trend
    anchor = state.level + damped_trend

    season = None
    if state.season is None:
        level = alpha * y + (1 - alpha) * anchor
    else:
        params.require("gamma")
        gamma = params.gamma
        prior = state.season[0]

        if _check_seasonal_mode(seasonal) == "multiplicative":
            if prior == 0:
                raise DegenerateDivisionError(f"Seasonal index from one period earlier is zero at step {step}")
            if anchor == 0:
                raise DegenerateDivisionError(f"Level plus trend is zero at step {step}")
            level = alpha * (y / prior) + (1 - alpha) * anchor
            index = gamma * (y / anchor) + (1 - gamma) * prior
        else:
            level = alpha * (y - prior) + (1 - alpha) * anchor
            index = gamma * (y - anchor) + (1 - gamma) * prior

        _check_finite(step, index)
        season = state.season[1:] + (index,)

    trend = None
    if state.trend is not None:
        beta = params.beta
        trend = beta * (level - state.level) + (1 - beta) * damped_trend

    _check_finite(step, level, trend)
    return SmoothingState(level=level, trend=trend, season=season, step=step)


def forecast_from_state(
    state: SmoothingState,
    horizon: int,
    params: SmoothingParameters,
    seasonal: SeasonalMode | None = None,
) -> np.ndarray:
    """Forecasts for ``h = 1..horizon`` from a frozen state."""
    horizon = check_count("horizon", horizon, 1)

    if state.trend is None:
        path = np.full(horizon, state.level, dtype=float)
    else:
        path = state.level + damping_sum(params.phi, horizon) * state.trend

    if state.season is not None:
        phases = np.arange(horizon) % len(state.season)
        indices = np.asarray(state.season, dtype=float)[phases]
        if _check_seasonal_mode(seasonal) == "multiplicative":
            path = path * indices
        else:
            path = path + indices

    if not np.all(np.isfinite(path)):
        raise NumericOverflowError("Forecast produced non-finite values")
    return path


@dataclass(slots=True)
class SmoothingFit:
    """Result of a single smoothing pass.

    Component arrays are aligned with ``observations``. Positions before
    the initial state are ``NaN`` and ``fitted`` is ``NaN`` throughout the
    initialisation window.
    """

    method: str
    observations: np.ndarray
    fitted: np.ndarray
    level: np.ndarray
    trend: np.ndarray | None
    season: np.ndarray | None
    params: SmoothingParameters
    initial_state: SmoothingState
    final_state: SmoothingState
    seasonal: SeasonalMode | None = None

    @property
    def n_obs(self) -> int:
        return int(self.observations.size)

    @property
    def period(self) -> int | None:
        return self.final_state.period

    @property
    def start(self) -> int:
        """Index of the first observation with a one-step fitted value."""
        return self.initial_state.step

    def forecast(self, horizon: int) -> np.ndarray:
        return forecast_from_state(self.final_state, horizon, self.params, self.seasonal)

    def residuals(self, error: ErrorType = "additive") -> np.ndarray:
        """One-step residuals ``y_t - yhat_t`` or their relative form."""
        errors = self.observations - self.fitted
        if error == "additive":
            return errors
        if error != "multiplicative":
            raise InvalidParameterError("error", error, "expected 'additive' or 'multiplicative'")

        window = self.fitted[self.start :]
        if np.any(window == 0):
            raise DegenerateDivisionError("Multiplicative residuals are undefined for a zero fitted value")
        return errors / self.fitted

    def components(self) -> pd.DataFrame:
        """Observations, state components, fitted values and residuals."""
        frame = pd.DataFrame({"y": self.observations, "level": self.level})
        if self.trend is not None:
            frame["trend"] = self.trend
        if self.season is not None:
            frame["season"] = self.season
        frame["fitted"] = self.fitted
        frame["residual"] = self.residuals()
        return frame


def run_recurrence(
    y: Sequence[float] | np.ndarray,
    initial_state: SmoothingState,
    params: SmoothingParameters,
    seasonal: SeasonalMode | None = None,
    method: str = "exponential_smoothing",
) -> SmoothingFit:
    """Run the smoothing recurrence forward from ``initial_state``.

    The initial state describes time ``initial_state.step``; every later
    observation is applied exactly once, in order.
    """
    values = as_observations(y)
    n_obs = values.size
    start = initial_state.step
    if start > n_obs:
        raise InsufficientDataError(n_obs, start, method)

    if initial_state.trend is not None:
        params.require("beta")
    if initial_state.season is not None:
        params.require("gamma")
        seasonal = _check_seasonal_mode(seasonal)
        if seasonal == "multiplicative":
            _check_positive(values)
        if initial_state.period > start:
            raise InsufficientDataError(start, initial_state.period, method)

    fitted = np.full(n_obs, np.nan)
    level = np.full(n_obs, np.nan)
    trend = np.full(n_obs, np.nan) if initial_state.trend is not None else None
    season = np.full(n_obs, np.nan) if initial_state.season is not None else None

    level[start - 1] = initial_state.level
    if trend is not None:
        trend[start - 1] = initial_state.trend
    if season is not None:
        season[start - initial_state.period : start] = initial_state.season

    state = initial_state
    for t in range(start, n_obs):
        fitted[t] = one_step_forecast(state, params, seasonal)
        state = update_state(state, values[t], params, seasonal)
        level[t] = state.level
        if trend is not None:
            trend[t] = state.trend
        if season is not None:
            season[t] = state.season[-1]

    logger.debug("Ran %s recurrence over %d observations from step %d", method, n_obs, start)

    return SmoothingFit(
        method=method,
        observations=values,
        fitted=fitted,
        level=level,
        trend=trend,
        season=season,
        params=params,
        initial_state=initial_state,
        final_state=state,
        seasonal=seasonal if initial_state.season is not None else None,
    )


def simple_exponential_smoothing(y: Sequence[float] | np.ndarray, alpha: float) -> SmoothingFit:
    """Simple exponential smoothing; forecasts are flat at the last level."""
    params = SmoothingParameters(alpha=alpha)
    values = as_observations(y)

    fit = run_recurrence(values, initialize_level(values), params, method="ses")
    logger.info(
        "Fitted SES (alpha=%.3f) on %d observations, final level %.4f",
        params.alpha,
        fit.n_obs,
        fit.final_state.level,
    )
    return fit


def holt_linear(
    y: Sequence[float] | np.ndarray,
    alpha: float,
    beta: float,
    phi: float | None = None,
    trend_init: TrendInit = "zero",
) -> SmoothingFit:
    """Holt's linear trend method, damped when ``phi`` is below 1."""
    params = SmoothingParameters(alpha=alpha, beta=beta, phi=phi)
    params.require("beta")
    values = as_observations(y)
    method = "damped" if params.damping < 1.0 else "holt"

    fit = run_recurrence(values, initialize_trend(values, trend_init), params, method=method)
    logger.info(
        "Fitted %s (alpha=%.3f, beta=%.3f, phi=%s) on %d observations, final level %.4f, trend %.4f",
        method,
        params.alpha,
        params.beta,
        params.phi,
        fit.n_obs,
        fit.final_state.level,
        fit.final_state.trend,
    )
    return fit


def holt_winters(
    y: Sequence[float] | np.ndarray,
    period: int,
    alpha: float,
    beta: float,
    gamma: float,
    seasonal: SeasonalMode = "additive",
    phi: float | None = None,
) -> SmoothingFit:
    """Holt-Winters seasonal smoothing with additive or multiplicative indices.

    Requires at least two full seasonal cycles to initialise. Multiplicative
    fits reject series with zero or negative observations.
    """
    params = SmoothingParameters(alpha=alpha, beta=beta, gamma=gamma, phi=phi)
    params.require("beta", "gamma")
    seasonal = _check_seasonal_mode(seasonal)
    values = as_observations(y)
    if seasonal == "multiplicative":
        _check_positive(values)
    method = f"holt_winters_{seasonal}"

    fit = run_recurrence(values, initialize_seasonal(values, period, seasonal), params, seasonal, method=method)
    logger.info(
        "Fitted %s (m=%d, alpha=%.3f, beta=%.3f, gamma=%.3f, phi=%s) on %d observations",
        method,
        period,
        params.alpha,
        params.beta,
        params.gamma,
        params.phi,
        fit.n_obs,
    )
    return fit
