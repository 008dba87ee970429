"""Evaluation metrics, residual diagnostics and cross-validation utilities."""

from .metrics import calculate_metrics, calculate_baseline_metrics, compare_to_baselines
from .diagnostics import (
    diagnose_residuals,
    ljung_box_test,
    residual_autocorrelation,
    residual_summary,
)
from .cross_validation import (
    aggregate_fold_metrics,
    cross_validate,
    errors_by_horizon,
    generate_expanding_window_splits,
    grid_search_smoothing,
)

__all__ = [
    "calculate_metrics",
    "calculate_baseline_metrics",
    "compare_to_baselines",
    "diagnose_residuals",
    "ljung_box_test",
    "residual_autocorrelation",
    "residual_summary",
    "aggregate_fold_metrics",
    "cross_validate",
    "errors_by_horizon",
    "generate_expanding_window_splits",
    "grid_search_smoothing",
]
