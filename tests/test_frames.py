from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from data.frames import prepare_series_frame, series_values, split_train_test


def test_prepare_series_frame_sorts_and_drops_nulls() -> None:
    raw = pd.DataFrame(
        {
            "month": ["2021-03-01", "2021-01-01", "2021-02-01", "2021-04-01"],
            "sales": [30, 10, None, "n/a"],
        }
    )

    frame = prepare_series_frame(raw, date_column="month", value_column="sales")

    assert list(frame.columns) == ["ds", "y"]
    assert list(frame["ds"]) == [pd.Timestamp("2021-01-01"), pd.Timestamp("2021-03-01")]
    np.testing.assert_allclose(series_values(frame), [10.0, 30.0])


def test_prepare_series_frame_missing_column() -> None:
    with pytest.raises(ValueError):
        prepare_series_frame(pd.DataFrame({"date": []}), value_column="value")


def test_split_train_test_last_n() -> None:
    df = pd.DataFrame({"ds": pd.date_range("2020-01-01", periods=10, freq="D"), "y": range(10)})

    train, test = split_train_test(df, test_size=3)

    assert len(train) == 7
    assert list(test["y"]) == [7, 8, 9]


def test_split_train_test_by_date() -> None:
    df = pd.DataFrame({"ds": pd.date_range("2020-01-01", periods=10, freq="D"), "y": range(10)})

    train, test = split_train_test(df, split_method="date", split_date="2020-01-05")

    assert train["ds"].max() < pd.Timestamp("2020-01-05")
    assert len(test) == 6


def test_split_train_test_validation() -> None:
    df = pd.DataFrame({"ds": range(5), "y": range(5)})

    with pytest.raises(ValueError):
        split_train_test(df, test_size=5)
    with pytest.raises(ValueError):
        split_train_test(df, split_method="date")
    with pytest.raises(ValueError):
        split_train_test(df, split_method="random")
