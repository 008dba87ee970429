"""Frame preparation utilities for smoothing models."""

from .frames import prepare_series_frame, series_values, split_train_test

__all__ = ["prepare_series_frame", "series_values", "split_train_test"]
