"""Residual diagnostics for fitted smoothing models.

Good one-step residuals are uncorrelated with zero mean. The Ljung-Box
portmanteau test from statsmodels checks the first autocorrelations
jointly; a small p-value means structure is left in the residuals.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd
from statsmodels.stats.diagnostic import acorr_ljungbox
from statsmodels.tsa.stattools import acf

from models.exponential_smoothing import SmoothingFit

logger = logging.getLogger(__name__)


def _clean(residuals: pd.Series | np.ndarray) -> np.ndarray:
    values = np.asarray(residuals, dtype=float)
    values = values[~np.isnan(values)]
    if values.size < 2:
        raise ValueError(f"Need at least 2 non-missing residuals, got {values.size}")
    return values


def default_ljung_box_lags(n_obs: int, period: int | None = None) -> int:
    """Lag count for the Ljung-Box test.

    Uses ``min(10, n/5)`` for non-seasonal data and ``min(2m, n/5)`` for
    seasonal data, never less than one.
    """
    cap = 2 * period if period and period > 1 else 10
    return max(1, min(cap, n_obs // 5))


def residual_summary(residuals: pd.Series | np.ndarray) -> dict[str, float]:
    """Mean, standard deviation and size of the residuals."""
    values = _clean(residuals)
    return {
        "mean": float(np.mean(values)),
        "std": float(np.std(values, ddof=1)),
        "n_residuals": int(values.size),
    }


def residual_autocorrelation(residuals: pd.Series | np.ndarray, nlags: int = 10) -> pd.Series:
    """Sample autocorrelations of the residuals for lags ``1..nlags``."""
    values = _clean(residuals)
    nlags = min(nlags, values.size - 1)
    correlations = acf(values, nlags=nlags, fft=False)
    return pd.Series(correlations[1:], index=pd.RangeIndex(1, nlags + 1, name="lag"), name="acf")


def ljung_box_test(
    residuals: pd.Series | np.ndarray,
    lags: int = 10,
    model_df: int = 0,
) -> dict[str, float]:
    """Ljung-Box test on the residuals up to ``lags``.

    Args:
        residuals: One-step residuals (NaNs are dropped)
        lags: Number of autocorrelations tested jointly
        model_df: Degrees of freedom consumed by the fitted parameters

    Returns:
        Dictionary with the Q statistic, p-value, lags and degrees of freedom
    """
    values = _clean(residuals)
    if lags >= values.size:
        raise ValueError(f"lags ({lags}) must be smaller than the number of residuals ({values.size})")

    result = acorr_ljungbox(values, lags=[lags], model_df=model_df, return_df=True)
    return {
        "lb_stat": float(result["lb_stat"].iloc[-1]),
        "lb_pvalue": float(result["lb_pvalue"].iloc[-1]),
        "lags": int(lags),
        "df": int(lags - model_df),
    }


def model_degrees_of_freedom(fit: SmoothingFit) -> int:
    """Number of smoothing parameters the fit used."""
    params = fit.params
    return sum(value is not None for value in (params.alpha, params.beta, params.gamma, params.phi))


def diagnose_residuals(
    fit: SmoothingFit,
    lags: int | None = None,
    significance: float = 0.05,
) -> dict[str, Any]:
    """Residual summary, autocorrelations and Ljung-Box test for a fit.

    The initialisation window carries no one-step residuals and is dropped.
    """
    residuals = fit.residuals()[fit.start :]
    if lags is None:
        lags = default_ljung_box_lags(residuals.size, fit.period)

    model_df = model_degrees_of_freedom(fit)
    if model_df >= lags:
        logger.warning(
            "Ljung-Box lags (%d) do not exceed model parameters (%d); testing without a df correction",
            lags,
            model_df,
        )
        model_df = 0

    summary = residual_summary(residuals)
    ljung_box = ljung_box_test(residuals, lags=lags, model_df=model_df)

    diagnostics = {
        "method": fit.method,
        "summary": summary,
        "acf": residual_autocorrelation(residuals, nlags=lags).to_dict(),
        "ljung_box": ljung_box,
        "white_noise": ljung_box["lb_pvalue"] > significance,
    }

    logger.info(
        "Residuals for %s: mean=%.4f, std=%.4f, Ljung-Box Q=%.3f (p=%.4f, lags=%d)",
        fit.method,
        summary["mean"],
        summary["std"],
        ljung_box["lb_stat"],
        ljung_box["lb_pvalue"],
        lags,
    )

    return diagnostics
