#!/usr/bin/env python3
"""Fit an exponential smoothing model and evaluate it on a hold-out set.

Steps:
- Read a prepared CSV and build the ds/y frame
- Split into train/test (last N observations for test)
- Fit the chosen smoothing method
- Score hold-out forecasts against the benchmark methods
- Check residual diagnostics (Ljung-Box)
- Optionally run rolling-origin cross-validation
- Save metrics JSON and forecast CSV with a run ID
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from data.frames import prepare_series_frame, split_train_test
from evaluation.cross_validation import (
    aggregate_fold_metrics,
    cross_validate,
    errors_by_horizon,
    generate_expanding_window_splits,
)
from evaluation.diagnostics import diagnose_residuals
from evaluation.metrics import calculate_baseline_metrics, calculate_metrics, compare_to_baselines
from models.smoothing_model import METHODS, ExponentialSmoothingModel
from smoothing_lab.config import configure_logging, ensure_directories, load_settings


logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description="Fit an exponential smoothing model and evaluate it on a hold-out set",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("input", type=Path, help="CSV file with a date column and a value column")
    parser.add_argument("--date-column", type=str, default="date", help="Name of the time column")
    parser.add_argument("--value-column", type=str, default="value", help="Name of the observed value column")

    parser.add_argument(
        "--method",
        type=str,
        choices=list(METHODS),
        default="ses",
        help="Smoothing method to fit",
    )
    parser.add_argument("--alpha", type=float, default=settings.alpha, help="Level smoothing parameter")
    parser.add_argument("--beta", type=float, default=settings.beta, help="Trend smoothing parameter")
    parser.add_argument("--gamma", type=float, default=settings.gamma, help="Seasonal smoothing parameter")
    parser.add_argument("--phi", type=float, default=settings.phi, help="Damping parameter")
    parser.add_argument(
        "--damped-trend",
        action="store_true",
        default=False,
        help="Damp the Holt-Winters trend with phi",
    )
    parser.add_argument(
        "--trend-init",
        type=str,
        choices=["zero", "difference"],
        default="zero",
        help="Initial trend policy for Holt's method",
    )
    parser.add_argument(
        "--seasonal-period",
        type=int,
        default=settings.seasonal_period,
        help="Observations per seasonal cycle",
    )
    parser.add_argument(
        "--test-size",
        type=int,
        default=settings.test_size,
        help="Number of final observations to reserve for testing",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=settings.forecast_horizon,
        help="Steps to forecast beyond the full series",
    )
    parser.add_argument(
        "--cv-initial",
        type=int,
        default=None,
        help="Initial training size for rolling-origin CV (skipped when omitted)",
    )
    parser.add_argument("--cv-step", type=int, default=1, help="Origin step between CV folds")
    parser.add_argument("--run-id", type=str, default=None, help="Custom run ID (default: timestamp)")

    return parser.parse_args()


def main() -> None:
    """Main execution function."""
    configure_logging()
    args = parse_args()

    settings = load_settings()
    ensure_directories(settings)

    run_id = args.run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
    logger.info("=" * 80)
    logger.info("Exponential smoothing run %s (%s)", run_id, args.method)
    logger.info("=" * 80)

    # --- Step 1: Prepare frame ---
    raw = pd.read_csv(args.input)
    series_df = prepare_series_frame(raw, date_column=args.date_column, value_column=args.value_column)

    # --- Step 2: Split ---
    train_df, test_df = split_train_test(series_df, test_size=args.test_size)

    model_config = {
        "method": args.method,
        "alpha": args.alpha,
        "beta": args.beta,
        "gamma": args.gamma,
        "phi": args.phi,
        "seasonal_period": args.seasonal_period if args.method.startswith("holt_winters") else None,
        "trend_init": args.trend_init,
        "damped_trend": args.damped_trend,
    }
    period = model_config["seasonal_period"] or 1

    # --- Step 3: Fit and forecast the hold-out ---
    model = ExponentialSmoothingModel(**model_config).fit(train_df)
    test_pred = model.forecast_holdout(test_df)
    test_pred["y"] = test_df["y"].to_numpy()

    # --- Step 4: Metrics and baselines ---
    y_train = train_df["y"].to_numpy(dtype=float)
    metrics = calculate_metrics(
        y_true=test_pred["y"],
        y_pred=test_pred["yhat"],
        y_train=y_train if len(y_train) > period else None,
        seasonal_period=period,
    )
    baseline_metrics = calculate_baseline_metrics(y_train, test_df["y"], seasonal_period=args.seasonal_period)
    comparison = compare_to_baselines(metrics, baseline_metrics)

    # --- Step 5: Residual diagnostics ---
    diagnostics = diagnose_residuals(model.fit_result)

    # --- Step 6: Optional cross-validation ---
    cv_summary = None
    if args.cv_initial is not None:
        splits = generate_expanding_window_splits(
            series_df,
            horizon=args.test_size,
            initial_train_size=args.cv_initial,
            step=args.cv_step,
        )
        fold_results = cross_validate(series_df, splits, model_config)
        cv_summary = {
            "aggregate": aggregate_fold_metrics(fold_results),
            "by_horizon": errors_by_horizon(fold_results).reset_index().to_dict(orient="records"),
        }

    # --- Step 7: Refit on the full series and forecast ahead ---
    full_model = ExponentialSmoothingModel(**model_config).fit(series_df)
    future = full_model.predict(args.horizon)

    # --- Step 8: Save artifacts ---
    metrics_file = settings.metrics_dir / f"smoothing_metrics_{run_id}.json"
    with open(metrics_file, "w") as f:
        json.dump(
            {
                "run_id": run_id,
                "timestamp": datetime.now().isoformat(),
                "config": model_config,
                "metrics": metrics,
                "baselines": baseline_metrics,
                "comparison": comparison,
                "diagnostics": diagnostics,
                "cross_validation": cv_summary,
            },
            f,
            indent=2,
            default=str,
        )
    logger.info("Metrics saved to %s", metrics_file)

    holdout_file = settings.forecasts_dir / f"smoothing_holdout_{run_id}.csv"
    test_pred.to_csv(holdout_file, index=False)
    forecast_file = settings.forecasts_dir / f"smoothing_forecast_{run_id}.csv"
    future.to_csv(forecast_file, index=False)
    logger.info("Forecasts saved to %s and %s", holdout_file, forecast_file)

    # --- Step 9: Summary ---
    logger.info("\nTest Set Performance:")
    logger.info("  MAE:   %.3f", metrics["mae"])
    logger.info("  RMSE:  %.3f", metrics["rmse"])
    logger.info("  MAPE:  %.2f%%", metrics["mape"])
    if "mase" in metrics:
        logger.info("  MASE:  %.3f", metrics["mase"])

    logger.info("\nComparison to Baselines:")
    for baseline_name, baseline_vals in baseline_metrics.items():
        improvement = comparison["improvements"][f"vs_{baseline_name}"]
        logger.info(
            "  %s: %.3f MAE (%.1f%% %s)",
            baseline_name,
            baseline_vals["mae"],
            abs(improvement["improvement_pct"]),
            "improvement" if improvement["is_better"] else "worse",
        )

    logger.info(
        "\nResiduals look like white noise: %s (Ljung-Box p=%.4f)",
        diagnostics["white_noise"],
        diagnostics["ljung_box"]["lb_pvalue"],
    )


if __name__ == "__main__":
    main()
