"""Exponential smoothing engine, benchmark methods and model wrapper."""

from .benchmarks import (
    benchmark_forecasts,
    double_moving_average,
    drift_forecast,
    mean_forecast,
    moving_average,
    naive_forecast,
    seasonal_naive_forecast,
    trailing_moving_average,
)
from .exponential_smoothing import (
    SmoothingFit,
    damping_sum,
    forecast_from_state,
    holt_linear,
    holt_winters,
    initialize_level,
    initialize_seasonal,
    initialize_trend,
    one_step_forecast,
    run_recurrence,
    seasonal_level_and_indices,
    simple_exponential_smoothing,
    update_state,
)
from .smoothing_model import ExponentialSmoothingModel
from .state import SmoothingParameters, SmoothingState

__all__ = [
    "benchmark_forecasts",
    "double_moving_average",
    "drift_forecast",
    "mean_forecast",
    "moving_average",
    "naive_forecast",
    "seasonal_naive_forecast",
    "trailing_moving_average",
    "SmoothingFit",
    "damping_sum",
    "forecast_from_state",
    "holt_linear",
    "holt_winters",
    "initialize_level",
    "initialize_seasonal",
    "initialize_trend",
    "one_step_forecast",
    "run_recurrence",
    "seasonal_level_and_indices",
    "simple_exponential_smoothing",
    "update_state",
    "ExponentialSmoothingModel",
    "SmoothingParameters",
    "SmoothingState",
]
