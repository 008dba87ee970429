from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from models.smoothing_model import ExponentialSmoothingModel
from smoothing_lab.exceptions import InvalidParameterError


def _monthly_frame(values: np.ndarray) -> pd.DataFrame:
    dates = pd.date_range("2020-01-01", periods=len(values), freq="MS")
    return pd.DataFrame({"ds": dates, "y": values})


def test_predict_continues_monthly_dates() -> None:
    df = _monthly_frame(100.0 + np.tile([5.0, -5.0, 10.0, -10.0], 6))
    model = ExponentialSmoothingModel(
        method="holt_winters_additive", alpha=0.3, beta=0.1, gamma=0.2, seasonal_period=4
    ).fit(df)

    forecast = model.predict(3)

    assert list(forecast.columns) == ["ds", "h", "yhat"]
    assert forecast["ds"].iloc[0] == pd.Timestamp("2022-01-01")
    np.testing.assert_allclose(forecast["yhat"], [105.0, 95.0, 110.0], atol=1e-9)


def test_predict_with_integer_index() -> None:
    df = pd.DataFrame({"ds": range(10), "y": np.linspace(1.0, 10.0, 10)})
    forecast = ExponentialSmoothingModel(method="holt", alpha=0.5, beta=0.2).fit(df).predict(2)

    assert list(forecast["ds"]) == [10, 11]


def test_damped_method_uses_phi() -> None:
    df = _monthly_frame(10.0 + 2.0 * np.arange(20))
    holt = ExponentialSmoothingModel(method="holt", alpha=0.5, beta=0.3).fit(df)
    damped = ExponentialSmoothingModel(method="damped", alpha=0.5, beta=0.3, phi=0.8).fit(df)

    assert damped.fit_result.method == "damped"
    assert damped.fit_result.params.phi == 0.8
    assert holt.fit_result.params.phi is None
    assert damped.predict(10)["yhat"].iloc[-1] < holt.predict(10)["yhat"].iloc[-1]


def test_forecast_holdout_aligns_with_test_dates() -> None:
    df = _monthly_frame(np.arange(1.0, 13.0))
    train, test = df.iloc[:9], df.iloc[9:]

    forecast = ExponentialSmoothingModel(method="ses", alpha=1.0).fit(train).forecast_holdout(test)

    assert list(forecast["ds"]) == list(test["ds"])
    np.testing.assert_allclose(forecast["yhat"], 9.0)


def test_get_components_includes_dates() -> None:
    df = _monthly_frame(np.arange(1.0, 9.0))
    components = ExponentialSmoothingModel(method="holt", alpha=0.5, beta=0.5).fit(df).get_components()

    assert list(components.columns) == ["ds", "y", "level", "trend", "fitted", "residual"]
    assert len(components) == len(df)


def test_model_usage_errors() -> None:
    with pytest.raises(ValueError):
        ExponentialSmoothingModel(method="arima")
    with pytest.raises(ValueError):
        ExponentialSmoothingModel(method="holt_winters_multiplicative")
    with pytest.raises(InvalidParameterError):
        ExponentialSmoothingModel(method="damped", phi=None)
    with pytest.raises(InvalidParameterError):
        ExponentialSmoothingModel(method="holt_winters_additive", seasonal_period=4, damped_trend=True, phi=None)
    with pytest.raises(RuntimeError):
        ExponentialSmoothingModel().predict(3)
    with pytest.raises(ValueError):
        ExponentialSmoothingModel().fit(pd.DataFrame({"y": [1.0, 2.0]}))
