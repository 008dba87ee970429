from __future__ import annotations

import numpy as np
import pytest

from evaluation.diagnostics import (
    default_ljung_box_lags,
    diagnose_residuals,
    ljung_box_test,
    model_degrees_of_freedom,
    residual_autocorrelation,
    residual_summary,
)
from models.exponential_smoothing import holt_winters, simple_exponential_smoothing


def _manual_ljung_box(x: np.ndarray, lags: int) -> float:
    n = x.size
    centred = x - x.mean()
    denom = np.sum(centred**2)
    q = 0.0
    for k in range(1, lags + 1):
        r_k = np.sum(centred[k:] * centred[:-k]) / denom
        q += r_k**2 / (n - k)
    return n * (n + 2) * q


def test_default_lags() -> None:
    assert default_ljung_box_lags(100) == 10
    assert default_ljung_box_lags(100, period=12) == 20
    assert default_ljung_box_lags(200, period=4) == 8
    assert default_ljung_box_lags(3) == 1


def test_ljung_box_statistic_matches_definition() -> None:
    x = np.random.default_rng(7).normal(size=60)

    result = ljung_box_test(x, lags=5)

    assert result["lb_stat"] == pytest.approx(_manual_ljung_box(x, 5))
    assert 0.0 <= result["lb_pvalue"] <= 1.0
    assert result["df"] == 5


def test_ljung_box_detects_autocorrelation() -> None:
    x = np.sin(np.arange(80) / 2.0)

    result = ljung_box_test(x, lags=10, model_df=1)

    assert result["lb_pvalue"] < 0.01
    assert result["df"] == 9


def test_ljung_box_rejects_too_many_lags() -> None:
    with pytest.raises(ValueError):
        ljung_box_test([0.1, -0.2, 0.3], lags=5)


def test_residual_summary_and_acf_skip_missing() -> None:
    residuals = np.array([np.nan, 1.0, -1.0, 1.0, -1.0])

    summary = residual_summary(residuals)
    acf = residual_autocorrelation(residuals, nlags=2)

    assert summary["n_residuals"] == 4
    assert summary["mean"] == pytest.approx(0.0)
    assert list(acf.index) == [1, 2]
    assert acf.iloc[0] < 0 < acf.iloc[1]


def test_diagnose_residuals_for_seasonal_fit() -> None:
    rng = np.random.default_rng(3)
    y = 50.0 + 0.5 * np.arange(48) + np.tile([4.0, -2.0, 1.0, -3.0], 12) + rng.normal(scale=0.5, size=48)
    fit = holt_winters(y, period=4, alpha=0.3, beta=0.1, gamma=0.2)

    report = diagnose_residuals(fit)

    assert report["method"] == "holt_winters_additive"
    assert report["summary"]["n_residuals"] == 44
    assert report["ljung_box"]["lags"] == 8
    assert report["ljung_box"]["df"] == 8 - model_degrees_of_freedom(fit)
    assert len(report["acf"]) == 8
    assert isinstance(report["white_noise"], bool)


def test_degrees_of_freedom_counts_parameters() -> None:
    fit = simple_exponential_smoothing(np.arange(1.0, 30.0), alpha=0.5)

    assert model_degrees_of_freedom(fit) == 1
