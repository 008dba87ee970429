from __future__ import annotations

import numpy as np
import pytest

from evaluation.metrics import (
    calculate_baseline_metrics,
    calculate_mape,
    calculate_mase,
    calculate_metrics,
    compare_to_baselines,
)


def test_baseline_metrics_on_holdout() -> None:
    y_train = np.array([10, 12, 14, 16, 18, 20, 22])
    y_test = np.array([24, 26])

    baselines = calculate_baseline_metrics(y_train, y_test, seasonal_period=7)

    seasonal = baselines["seasonal_naive"]
    # Expected predictions: first two values of the last cycle (10, 12)
    expected_mae = (abs(24 - 10) + abs(26 - 12)) / 2
    assert np.isclose(seasonal["mae"], expected_mae)

    assert baselines["naive"]["mae"] == pytest.approx(3.0)
    assert baselines["drift"]["mae"] == pytest.approx(0.0)
    assert baselines["mean"]["bias"] < 0
    # training set too short for a seasonal scale, so MASE falls back to lag 1
    assert baselines["naive"]["mase"] == pytest.approx(1.5)


def test_baseline_metrics_empty_holdout() -> None:
    assert calculate_baseline_metrics([1.0, 2.0], [], seasonal_period=4) == {}


def test_calculate_metrics_drops_missing_pairs() -> None:
    y_true = np.array([np.nan, 10.0, 20.0, 30.0])
    y_pred = np.array([5.0, 12.0, np.nan, 27.0])

    metrics = calculate_metrics(y_true, y_pred)

    assert metrics["n_samples"] == 2
    assert metrics["mae"] == pytest.approx(2.5)
    assert metrics["rmse"] == pytest.approx(np.sqrt((4 + 9) / 2))
    assert metrics["bias"] == pytest.approx(-0.5)


def test_calculate_metrics_with_mase() -> None:
    metrics = calculate_metrics(
        y_true=[10.0, 12.0],
        y_pred=[11.0, 11.0],
        y_train=[1.0, 3.0, 5.0, 7.0],
    )

    # training naive MAE = 2, forecast MAE = 1
    assert metrics["mase"] == pytest.approx(0.5)
    assert "r2" in metrics


def test_mase_with_seasonal_scale() -> None:
    y_train = np.array([1.0, 5.0, 2.0, 6.0, 3.0, 7.0])
    # lag-2 differences are all 1
    assert calculate_mase([4.0], [6.0], y_train, seasonal_period=2) == pytest.approx(2.0)

    with pytest.raises(ValueError):
        calculate_mase([4.0], [6.0], y_train[:2], seasonal_period=2)


def test_mape_undefined_with_zero_actuals() -> None:
    assert np.isnan(calculate_mape([0.0, 1.0], [1.0, 1.0]))
    assert calculate_mape([10.0, 20.0], [11.0, 18.0]) == pytest.approx(10.0)


def test_compare_to_baselines_flags_improvement() -> None:
    comparison = compare_to_baselines(
        {"mae": 2.0},
        {"naive": {"mae": 4.0}, "mean": {"mae": 1.0}},
    )

    assert comparison["improvements"]["vs_naive"]["is_better"]
    assert comparison["improvements"]["vs_naive"]["improvement_pct"] == pytest.approx(50.0)
    assert not comparison["improvements"]["vs_mean"]["is_better"]
    assert comparison["best_baseline"] == "mean"
