"""Forecast accuracy measures for smoothing models.

This module provides functions to calculate standard forecasting metrics
including MAE, RMSE, MAPE, sMAPE, MASE, bias and R², plus comparison
against simple benchmark methods on a hold-out set.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from models.benchmarks import drift_forecast, mean_forecast, naive_forecast, seasonal_naive_forecast

logger = logging.getLogger(__name__)


def calculate_mae(y_true: pd.Series | np.ndarray, y_pred: pd.Series | np.ndarray) -> float:
    """Calculate Mean Absolute Error."""
    return float(mean_absolute_error(y_true, y_pred))


def calculate_rmse(y_true: pd.Series | np.ndarray, y_pred: pd.Series | np.ndarray) -> float:
    """Calculate Root Mean Squared Error."""
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def calculate_mape(y_true: pd.Series | np.ndarray, y_pred: pd.Series | np.ndarray) -> float:
    """Calculate Mean Absolute Percentage Error.

    MAPE = 100 * mean(|y_true - y_pred| / |y_true|)

    Returns NaN when any actual value is zero, since the measure is undefined.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    if np.any(y_true == 0):
        logger.warning("MAPE is undefined when actual values contain zeros")
        return float("nan")

    return float(100 * np.mean(np.abs((y_true - y_pred) / y_true)))


def calculate_smape(y_true: pd.Series | np.ndarray, y_pred: pd.Series | np.ndarray) -> float:
    """Calculate Symmetric Mean Absolute Percentage Error.

    sMAPE = 100 * mean(2 * |y_true - y_pred| / (|y_true| + |y_pred|))
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    numerator = np.abs(y_true - y_pred)
    denominator = (np.abs(y_true) + np.abs(y_pred)) / 2.0

    # Avoid division by zero
    denominator = np.where(denominator == 0, 1e-10, denominator)

    smape = 100 * np.mean(numerator / denominator)
    return float(smape)


def calculate_mase(
    y_true: pd.Series | np.ndarray,
    y_pred: pd.Series | np.ndarray,
    y_train: pd.Series | np.ndarray,
    seasonal_period: int = 1,
) -> float:
    """Calculate Mean Absolute Scaled Error.

    Errors are scaled by the in-sample MAE of the (seasonal) naive method
    on the training data, so values below 1 beat that benchmark.
    """
    y_train = np.asarray(y_train, dtype=float)
    if y_train.size <= seasonal_period:
        raise ValueError(
            f"MASE needs more than {seasonal_period} training observations, got {y_train.size}"
        )

    scale = np.mean(np.abs(y_train[seasonal_period:] - y_train[:-seasonal_period]))
    if scale == 0:
        logger.warning("MASE scale is zero (constant training series)")
        return float("nan")

    return calculate_mae(y_true, y_pred) / float(scale)


def calculate_bias(y_true: pd.Series | np.ndarray, y_pred: pd.Series | np.ndarray) -> float:
    """Calculate forecast bias (mean error).

    Positive bias = over-forecasting
    Negative bias = under-forecasting
    """
    return float(np.mean(np.asarray(y_pred, dtype=float) - np.asarray(y_true, dtype=float)))


def calculate_r2(y_true: pd.Series | np.ndarray, y_pred: pd.Series | np.ndarray) -> float:
    """Calculate R-squared (coefficient of determination)."""
    return float(r2_score(y_true, y_pred))


def calculate_metrics(
    y_true: pd.Series | np.ndarray,
    y_pred: pd.Series | np.ndarray,
    y_train: pd.Series | np.ndarray | None = None,
    seasonal_period: int = 1,
) -> dict[str, Any]:
    """Calculate all standard forecast metrics.

    Pairs where either value is NaN (e.g. the initialisation window of an
    in-sample fit) are dropped first.

    Args:
        y_true: Actual values
        y_pred: Predicted values
        y_train: Training series used to scale MASE (optional)
        seasonal_period: Lag of the naive method that scales MASE

    Returns:
        Dictionary containing all metrics
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: y_true {y_true.shape} vs y_pred {y_pred.shape}")

    mask = ~(np.isnan(y_true) | np.isnan(y_pred))
    y_true = y_true[mask]
    y_pred = y_pred[mask]
    if y_true.size == 0:
        raise ValueError("No overlapping non-missing values to score")

    metrics: dict[str, Any] = {
        "mae": calculate_mae(y_true, y_pred),
        "rmse": calculate_rmse(y_true, y_pred),
        "mape": calculate_mape(y_true, y_pred),
        "smape": calculate_smape(y_true, y_pred),
        "bias": calculate_bias(y_true, y_pred),
        "n_samples": int(y_true.size),
    }

    # R² is undefined for a single sample
    if y_true.size > 1:
        metrics["r2"] = calculate_r2(y_true, y_pred)

    if y_train is not None:
        metrics["mase"] = calculate_mase(y_true, y_pred, y_train, seasonal_period)

    logger.info(
        "Calculated metrics: MAE=%.3f, RMSE=%.3f, MAPE=%.2f%%, Bias=%.3f",
        metrics["mae"],
        metrics["rmse"],
        metrics["mape"],
        metrics["bias"],
    )
    if "mase" in metrics:
        logger.info("MASE: %.3f", metrics["mase"])

    return metrics


def calculate_baseline_metrics(
    y_train: pd.Series | np.ndarray,
    y_test: pd.Series | np.ndarray,
    seasonal_period: int | None = None,
) -> dict[str, dict[str, float]]:
    """Calculate benchmark metrics on a hold-out set.

    Baselines:
    - Mean: historical average of the training data
    - Naive: last training observation
    - Seasonal naive: last observed value from the same season
    - Drift: line through the first and last training observations

    Args:
        y_train: Training observations the benchmarks are fitted to
        y_test: Hold-out observations directly following the training data
        seasonal_period: Season length for the seasonal naive benchmark

    Returns:
        Dictionary with baseline metrics keyed by method name
    """
    y_train = np.asarray(y_train, dtype=float)
    y_test = np.asarray(y_test, dtype=float)
    horizon = len(y_test)

    baselines: dict[str, dict[str, float]] = {}

    if horizon == 0:
        logger.warning("No hold-out observations provided to baseline metrics")
        return baselines
    if len(y_train) == 0:
        raise ValueError("Training series must not be empty")

    forecasts = {
        "mean": mean_forecast(y_train, horizon),
        "naive": naive_forecast(y_train, horizon),
    }
    if seasonal_period and seasonal_period > 1 and len(y_train) >= seasonal_period:
        forecasts["seasonal_naive"] = seasonal_naive_forecast(y_train, horizon, seasonal_period)
    if len(y_train) >= 2:
        forecasts["drift"] = drift_forecast(y_train, horizon)

    mase_period = seasonal_period if seasonal_period and len(y_train) > seasonal_period else 1

    for name, y_pred in forecasts.items():
        scores = {
            "mae": calculate_mae(y_test, y_pred),
            "rmse": calculate_rmse(y_test, y_pred),
            "bias": calculate_bias(y_test, y_pred),
        }
        if len(y_train) > mase_period:
            scores["mase"] = calculate_mase(y_test, y_pred, y_train, mase_period)
        baselines[name] = scores

    logger.info("Calculated baseline metrics for %d baselines", len(baselines))

    return baselines


def compare_to_baselines(
    model_metrics: dict[str, float],
    baseline_metrics: dict[str, dict[str, float]],
) -> dict[str, Any]:
    """Compare model metrics against baselines.

    Args:
        model_metrics: Metrics from the smoothing model
        baseline_metrics: Metrics from the benchmark methods

    Returns:
        Dictionary with comparison results and improvement percentages
    """
    model_mae = model_metrics["mae"]

    comparison: dict[str, Any] = {
        "model_mae": model_mae,
        "baselines": {},
        "improvements": {},
        "best_baseline": None,
    }

    for baseline_name, baseline_vals in baseline_metrics.items():
        baseline_mae = baseline_vals["mae"]
        comparison["baselines"][baseline_name] = baseline_mae

        improvement_pct = ((baseline_mae - model_mae) / baseline_mae) * 100 if baseline_mae > 0 else 0.0
        comparison["improvements"][f"vs_{baseline_name}"] = {
            "mae_diff": model_mae - baseline_mae,
            "improvement_pct": improvement_pct,
            "is_better": model_mae < baseline_mae,
        }

    if comparison["baselines"]:
        comparison["best_baseline"] = min(comparison["baselines"], key=comparison["baselines"].get)

    logger.info("Comparison summary:")
    logger.info("  Model MAE: %.3f", model_mae)

    for baseline_name in baseline_metrics:
        key = f"vs_{baseline_name}"
        logger.info(
            "  %s: %.1f%% improvement",
            baseline_name,
            comparison["improvements"][key]["improvement_pct"],
        )

    return comparison
