"""Core package for exponential smoothing experiments."""

from .config import Settings, configure_logging, ensure_directories, load_settings
from .exceptions import (
    DegenerateDivisionError,
    InsufficientDataError,
    InvalidParameterError,
    InvalidSeriesError,
    NumericOverflowError,
    SmoothingError,
)

__all__ = [
    "Settings",
    "configure_logging",
    "ensure_directories",
    "load_settings",
    "DegenerateDivisionError",
    "InsufficientDataError",
    "InvalidParameterError",
    "InvalidSeriesError",
    "NumericOverflowError",
    "SmoothingError",
]
