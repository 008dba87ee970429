"""Frame-level wrapper around the exponential smoothing engine.

This module provides a high-level interface for fitting and forecasting
``ds``/``y`` DataFrames with any of the smoothing variants, keeping the
date axis attached to fitted components and forecasts.
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from smoothing_lab.exceptions import InvalidParameterError

from .exponential_smoothing import SmoothingFit, holt_linear, holt_winters, simple_exponential_smoothing

logger = logging.getLogger(__name__)

METHODS = ("ses", "holt", "damped", "holt_winters_additive", "holt_winters_multiplicative")


class ExponentialSmoothingModel:
    """Wrapper for exponential smoothing on ``ds``/``y`` frames.

    Attributes:
        config: Configuration dictionary for the model
        fit_result: The underlying ``SmoothingFit`` once fitted
        is_fitted: Whether the model has been fitted to data
    """

    def __init__(
        self,
        method: str = "ses",
        alpha: float = 0.3,
        beta: float | None = 0.1,
        gamma: float | None = 0.1,
        phi: float | None = 0.98,
        seasonal_period: int | None = None,
        trend_init: str = "zero",
        damped_trend: bool = False,
    ):
        """Initialize the model with configuration.

        Args:
            method: One of "ses", "holt", "damped", "holt_winters_additive",
                "holt_winters_multiplicative"
            alpha: Level smoothing parameter
            beta: Trend smoothing parameter (ignored by "ses")
            gamma: Seasonal smoothing parameter (Holt-Winters only)
            phi: Damping parameter, used when the trend is damped
            seasonal_period: Observations per seasonal cycle (Holt-Winters only)
            trend_init: Initial trend policy for Holt, "zero" or "difference"
            damped_trend: Damp the Holt-Winters trend with phi
        """
        if method not in METHODS:
            raise ValueError(f"Unknown method: {method} (expected one of {METHODS})")
        if method.startswith("holt_winters") and seasonal_period is None:
            raise ValueError("seasonal_period is required for Holt-Winters methods")
        if (damped_trend or method == "damped") and phi is None:
            raise InvalidParameterError("phi", None, "required by the damped method")

        self.config: dict[str, Any] = {
            "method": method,
            "alpha": alpha,
            "beta": beta,
            "gamma": gamma,
            "phi": phi,
            "seasonal_period": seasonal_period,
            "trend_init": trend_init,
            "damped_trend": damped_trend or method == "damped",
        }

        self.fit_result: SmoothingFit | None = None
        self.is_fitted = False
        self._train_df: pd.DataFrame | None = None

        logger.info("Initialized ExponentialSmoothingModel with config: %s", self.config)

    @property
    def method(self) -> str:
        return self.config["method"]

    def fit(self, train_df: pd.DataFrame) -> ExponentialSmoothingModel:
        """Fit the smoothing model to training data.

        Args:
            train_df: DataFrame with columns 'ds' and 'y', in time order

        Returns:
            Self for method chaining

        Raises:
            ValueError: If required columns are missing
        """
        required_cols = {"ds", "y"}
        if not required_cols.issubset(train_df.columns):
            missing = required_cols - set(train_df.columns)
            raise ValueError(f"Missing required columns: {missing}")

        logger.info("Fitting %s model on %d training samples", self.method, len(train_df))
        logger.debug("Training range: %s to %s", train_df["ds"].iloc[0], train_df["ds"].iloc[-1])

        cfg = self.config
        y = train_df["y"].to_numpy(dtype=float)

        if self.method == "ses":
            result = simple_exponential_smoothing(y, alpha=cfg["alpha"])
        elif self.method in ("holt", "damped"):
            result = holt_linear(
                y,
                alpha=cfg["alpha"],
                beta=cfg["beta"],
                phi=cfg["phi"] if cfg["damped_trend"] else None,
                trend_init=cfg["trend_init"],
            )
        else:
            result = holt_winters(
                y,
                period=cfg["seasonal_period"],
                alpha=cfg["alpha"],
                beta=cfg["beta"],
                gamma=cfg["gamma"],
                seasonal=self.method.removeprefix("holt_winters_"),
                phi=cfg["phi"] if cfg["damped_trend"] else None,
            )

        self.fit_result = result
        self._train_df = train_df[["ds", "y"]].reset_index(drop=True)
        self.is_fitted = True

        logger.info("Model fitting completed successfully")
        return self

    def _require_fitted(self) -> SmoothingFit:
        if not self.is_fitted or self.fit_result is None:
            raise RuntimeError("Model must be fitted before prediction")
        return self.fit_result

    def _future_dates(self, periods: int) -> pd.Series:
        """Continue the training date axis for ``periods`` steps."""
        ds = self._train_df["ds"]
        if pd.api.types.is_datetime64_any_dtype(ds) and len(ds) >= 3:
            freq = pd.infer_freq(pd.DatetimeIndex(ds))
            if freq is not None:
                future = pd.date_range(start=ds.iloc[-1], periods=periods + 1, freq=freq)[1:]
                return pd.Series(future)

        if pd.api.types.is_integer_dtype(ds):
            start = int(ds.iloc[-1]) + 1
        else:
            logger.warning("Could not infer a date frequency; using integer steps for future ds")
            start = len(ds)
        return pd.Series(range(start, start + periods))

    def predict(self, periods: int) -> pd.DataFrame:
        """Generate forecasts from the final fitted state.

        Args:
            periods: Number of steps to forecast

        Returns:
            DataFrame with columns ds, h, yhat

        Raises:
            RuntimeError: If model hasn't been fitted
        """
        result = self._require_fitted()

        logger.info("Generating %s forecast for %d periods", self.method, periods)
        yhat = result.forecast(periods)

        return pd.DataFrame(
            {
                "ds": self._future_dates(periods).to_numpy(),
                "h": range(1, periods + 1),
                "yhat": yhat,
            }
        )

    def forecast_holdout(self, test_df: pd.DataFrame) -> pd.DataFrame:
        """Forecast a held-out test set that directly follows the training data.

        Args:
            test_df: DataFrame with 'ds' (and optionally 'y') columns

        Returns:
            Forecast DataFrame aligned with test_df dates
        """
        result = self._require_fitted()

        logger.info("Forecasting holdout period: %d steps", len(test_df))
        forecast = pd.DataFrame(
            {
                "ds": test_df["ds"].to_numpy(),
                "h": range(1, len(test_df) + 1),
                "yhat": result.forecast(len(test_df)),
            }
        )
        return forecast

    def get_components(self) -> pd.DataFrame:
        """Extract fitted components (level, trend, season) with dates.

        Returns:
            DataFrame with ds, y, component columns, fitted values and residuals
        """
        result = self._require_fitted()
        components = result.components()
        components.insert(0, "ds", self._train_df["ds"].to_numpy())
        return components
