"""Time series cross-validation for smoothing models.

Forecasts are evaluated on a rolling forecasting origin: each fold trains
on every observation up to the origin and scores the next ``horizon``.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from .metrics import calculate_mae, calculate_metrics, calculate_rmse
from models.smoothing_model import ExponentialSmoothingModel

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FoldSplit:
    """Represents a single expanding-window fold."""

    train_start: Any
    train_end: Any
    test_start: Any
    test_end: Any
    train_indices: range
    test_indices: range


@dataclass(slots=True)
class FoldResult:
    """Holds per-fold metrics and predictions."""

    fold_id: int
    split: FoldSplit
    metrics: dict[str, Any]
    forecast: pd.DataFrame


def generate_expanding_window_splits(
    df: pd.DataFrame,
    horizon: int,
    initial_train_size: int,
    max_folds: int | None = None,
    step: int | None = None,
) -> list[FoldSplit]:
    """Generate expanding-window splits for time series CV.

    The origin advances by ``step`` observations (default: ``horizon``, so
    test windows do not overlap); ``step=1`` gives classic one-step-at-a-time
    evaluation on a rolling origin.
    """

    n_obs = len(df)
    if initial_train_size >= n_obs:
        raise ValueError("initial_train_size must be smaller than dataset length")
    if horizon <= 0:
        raise ValueError("horizon must be positive")
    step = horizon if step is None else step
    if step <= 0:
        raise ValueError("step must be positive")

    labels = df["ds"] if "ds" in df.columns else pd.Series(range(n_obs))

    splits: list[FoldSplit] = []
    train_end_idx = initial_train_size
    fold_id = 0

    while train_end_idx + horizon <= n_obs:
        test_end_idx = train_end_idx + horizon
        train_range = range(0, train_end_idx)
        test_range = range(train_end_idx, test_end_idx)

        split = FoldSplit(
            train_start=labels.iloc[train_range.start],
            train_end=labels.iloc[train_range.stop - 1],
            test_start=labels.iloc[test_range.start],
            test_end=labels.iloc[test_range.stop - 1],
            train_indices=train_range,
            test_indices=test_range,
        )
        splits.append(split)
        logger.debug(
            "Generated fold %d: train(%s→%s) test(%s→%s)",
            fold_id,
            split.train_start,
            split.train_end,
            split.test_start,
            split.test_end,
        )

        fold_id += 1
        if max_folds and fold_id >= max_folds:
            break

        train_end_idx += step

    if not splits:
        raise ValueError("Unable to create any folds with provided configuration")

    logger.info("Generated %d expanding-window folds", len(splits))
    return splits


def run_smoothing_fold(
    df: pd.DataFrame,
    split: FoldSplit,
    model_config: dict[str, Any],
    fold_id: int = 0,
) -> FoldResult:
    """Fit one fold and score its hold-out forecasts."""

    train_df = df.iloc[split.train_indices].copy()
    test_df = df.iloc[split.test_indices].copy()

    model = ExponentialSmoothingModel(**model_config)
    model.fit(train_df)
    forecast = model.forecast_holdout(test_df)
    forecast["y"] = test_df["y"].to_numpy()

    period = model_config.get("seasonal_period") or 1
    y_train = train_df["y"].to_numpy(dtype=float)
    metrics = calculate_metrics(
        y_true=forecast["y"],
        y_pred=forecast["yhat"],
        y_train=y_train if len(y_train) > period else None,
        seasonal_period=period,
    )

    return FoldResult(
        fold_id=fold_id,
        split=split,
        metrics=metrics,
        forecast=forecast,
    )


def aggregate_fold_metrics(fold_results: Iterable[FoldResult]) -> dict[str, Any]:
    """Aggregate metrics across folds (simple average)."""

    metrics_list = [fold.metrics for fold in fold_results]
    if not metrics_list:
        raise ValueError("No fold metrics to aggregate")

    aggregated: dict[str, Any] = {}
    keys = metrics_list[0].keys()
    for key in keys:
        values = [metrics[key] for metrics in metrics_list if key in metrics]
        if values and isinstance(values[0], (int, float)):
            aggregated[key] = float(np.nanmean(values)) if key != "n_samples" else sum(values)

    aggregated["n_folds"] = len(metrics_list)
    return aggregated


def errors_by_horizon(fold_results: Iterable[FoldResult]) -> pd.DataFrame:
    """MAE and RMSE for each step ahead, pooled over forecast origins."""

    frames = [fold.forecast.assign(fold_id=fold.fold_id) for fold in fold_results]
    if not frames:
        raise ValueError("No fold forecasts to summarise")

    pooled = pd.concat(frames, ignore_index=True)
    rows = []
    for h, group in pooled.groupby("h"):
        rows.append(
            {
                "h": int(h),
                "mae": calculate_mae(group["y"], group["yhat"]),
                "rmse": calculate_rmse(group["y"], group["yhat"]),
                "n_origins": len(group),
            }
        )

    return pd.DataFrame(rows).set_index("h")


def cross_validate(
    df: pd.DataFrame,
    splits: Sequence[FoldSplit],
    model_config: dict[str, Any],
) -> list[FoldResult]:
    """Run every fold for a single model configuration."""

    return [run_smoothing_fold(df, split, model_config, fold_id=idx) for idx, split in enumerate(splits)]


def grid_search_smoothing(
    df: pd.DataFrame,
    splits: list[FoldSplit],
    param_grid: dict[str, Sequence[Any]],
    base_config: dict[str, Any] | None = None,
) -> tuple[dict[str, Any], list[FoldResult], list[dict[str, Any]]]:
    """Evaluate an explicit grid of smoothing configurations by mean CV MAE."""

    grid_keys = list(param_grid.keys())
    all_combinations = list(itertools.product(*(param_grid[key] for key in grid_keys)))
    logger.info("Evaluating %d parameter combinations", len(all_combinations))

    best_config: dict[str, Any] | None = None
    best_score: float | None = None
    best_fold_results: list[FoldResult] = []
    history: list[dict[str, Any]] = []

    for combo in all_combinations:
        config = dict(base_config or {})
        config.update(zip(grid_keys, combo))
        config.setdefault("method", "ses")

        fold_results = cross_validate(df, splits, config)
        aggregated = aggregate_fold_metrics(fold_results)
        score = aggregated["mae"]
        history.append({"config": config, "metrics": aggregated})

        logger.info(
            "Grid combo %s → MAE %.3f, RMSE %.3f, Bias %.3f",
            config,
            aggregated["mae"],
            aggregated["rmse"],
            aggregated["bias"],
        )

        if best_score is None or score < best_score:
            best_score = score
            best_config = config
            best_fold_results = fold_results

    if best_config is None:
        raise RuntimeError("Grid search failed to evaluate any configuration")

    logger.info("Best config: %s (MAE %.3f)", best_config, best_score)
    return best_config, best_fold_results, history
