from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from evaluation.cross_validation import (
    aggregate_fold_metrics,
    cross_validate,
    errors_by_horizon,
    generate_expanding_window_splits,
    grid_search_smoothing,
    run_smoothing_fold,
)


def _monthly_frame(values: np.ndarray) -> pd.DataFrame:
    dates = pd.date_range("2018-01-01", periods=len(values), freq="MS")
    return pd.DataFrame({"ds": dates, "y": values})


def test_expanding_window_splits_non_overlapping() -> None:
    df = _monthly_frame(np.arange(30.0))

    splits = generate_expanding_window_splits(df, horizon=3, initial_train_size=20)

    assert [s.train_indices.stop for s in splits] == [20, 23, 26]
    assert splits[0].test_indices == range(20, 23)
    assert splits[0].train_start == pd.Timestamp("2018-01-01")
    assert splits[0].test_start == pd.Timestamp("2019-09-01")


def test_expanding_window_splits_rolling_origin() -> None:
    df = _monthly_frame(np.arange(30.0))

    splits = generate_expanding_window_splits(df, horizon=3, initial_train_size=20, step=1)
    limited = generate_expanding_window_splits(df, horizon=3, initial_train_size=20, step=1, max_folds=2)

    assert len(splits) == 8
    assert splits[-1].test_indices == range(27, 30)
    assert len(limited) == 2


def test_expanding_window_splits_validation() -> None:
    df = _monthly_frame(np.arange(10.0))

    with pytest.raises(ValueError):
        generate_expanding_window_splits(df, horizon=3, initial_train_size=10)
    with pytest.raises(ValueError):
        generate_expanding_window_splits(df, horizon=0, initial_train_size=5)
    with pytest.raises(ValueError):
        generate_expanding_window_splits(df, horizon=6, initial_train_size=5)


def test_run_fold_scores_holdout() -> None:
    df = _monthly_frame(np.full(15, 7.0))
    split = generate_expanding_window_splits(df, horizon=3, initial_train_size=12)[0]

    result = run_smoothing_fold(df, split, {"method": "ses", "alpha": 0.5}, fold_id=4)

    assert result.fold_id == 4
    assert result.metrics["mae"] == pytest.approx(0.0)
    assert list(result.forecast.columns) == ["ds", "h", "yhat", "y"]


def test_errors_by_horizon_and_aggregation() -> None:
    df = _monthly_frame(np.arange(24.0))
    splits = generate_expanding_window_splits(df, horizon=2, initial_train_size=16, step=1)

    results = cross_validate(df, splits, {"method": "ses", "alpha": 0.5})
    by_h = errors_by_horizon(results)
    aggregated = aggregate_fold_metrics(results)

    assert list(by_h.index) == [1, 2]
    assert (by_h["n_origins"] == len(splits)).all()
    # SES lags a rising series, so two-step errors are larger than one-step errors
    assert by_h.loc[2, "mae"] > by_h.loc[1, "mae"]
    assert aggregated["n_folds"] == len(splits)


def test_grid_search_prefers_responsive_alpha_on_trend() -> None:
    df = _monthly_frame(np.arange(40.0))
    splits = generate_expanding_window_splits(df, horizon=4, initial_train_size=24)

    best, best_results, history = grid_search_smoothing(df, splits, {"alpha": [0.1, 0.9]}, {"method": "ses"})

    assert best["alpha"] == 0.9
    assert best["method"] == "ses"
    assert len(history) == 2
    assert len(best_results) == len(splits)
