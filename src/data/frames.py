"""Prepare observation frames for exponential smoothing.

This module turns an already-loaded table into the ``ds``/``y`` frame the
models expect and splits it into training and hold-out sets.
"""

from __future__ import annotations

import logging
from typing import Literal

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def prepare_series_frame(
    df: pd.DataFrame,
    date_column: str = "date",
    value_column: str = "value",
    parse_dates: bool = True,
) -> pd.DataFrame:
    """Transform a raw table into a ``ds``/``y`` frame in time order.

    Args:
        df: Table with a time column and a numeric value column
        date_column: Column holding the time axis
        value_column: Column to use as the observed series
        parse_dates: Convert the time column with ``pd.to_datetime``

    Returns:
        DataFrame with columns ds, y sorted by ds with nulls removed

    Raises:
        ValueError: If either column is missing
    """
    missing = {date_column, value_column} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    frame = pd.DataFrame()
    frame["ds"] = pd.to_datetime(df[date_column]) if parse_dates else df[date_column]
    frame["y"] = pd.to_numeric(df[value_column], errors="coerce")

    null_count = int(frame["y"].isna().sum())
    if null_count > 0:
        logger.warning(
            "Found %d null or non-numeric values in %s, filtering them out",
            null_count,
            value_column,
        )
        frame = frame[frame["y"].notna()]

    frame = frame.sort_values("ds").reset_index(drop=True)

    logger.info(
        "Prepared series frame: %d observations from %s to %s",
        len(frame),
        frame["ds"].min() if len(frame) else None,
        frame["ds"].max() if len(frame) else None,
    )

    return frame


def series_values(df: pd.DataFrame) -> np.ndarray:
    """Observed values of a ``ds``/``y`` frame as a float array."""
    return df["y"].to_numpy(dtype=float)


def split_train_test(
    df: pd.DataFrame,
    test_size: int = 12,
    split_method: Literal["last_n", "date"] = "last_n",
    split_date: str | None = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Split data into train and test sets.

    Args:
        df: ``ds``/``y`` DataFrame
        test_size: Number of final observations to reserve for testing
        split_method: How to split:
            - "last_n": Use last N observations as test set
            - "date": Split at a specific date
        split_date: Date to split at (YYYY-MM-DD) when split_method="date"

    Returns:
        Tuple of (train_df, test_df)

    Raises:
        ValueError: If split_method="date" but split_date not provided
    """
    df = df.sort_values("ds").reset_index(drop=True)

    if split_method == "last_n":
        if not 0 < test_size < len(df):
            raise ValueError(f"test_size must be between 1 and {len(df) - 1}, got {test_size}")

        train_df = df.iloc[:-test_size].copy()
        test_df = df.iloc[-test_size:].copy()

        logger.info(
            "Split using last %d observations: train=%d rows, test=%d rows",
            test_size,
            len(train_df),
            len(test_df),
        )

    elif split_method == "date":
        if split_date is None:
            raise ValueError("split_date must be provided when split_method='date'")

        split_dt = pd.to_datetime(split_date)
        train_df = df[df["ds"] < split_dt].copy()
        test_df = df[df["ds"] >= split_dt].copy()

        logger.info(
            "Split at date %s: train=%d rows, test=%d rows",
            split_date,
            len(train_df),
            len(test_df),
        )
    else:
        raise ValueError(f"Unknown split_method: {split_method}")

    return train_df, test_df
