"""Errors raised by the smoothing engine.

Every error also derives from the closest builtin so callers that only
know about ``ValueError`` or ``ArithmeticError`` keep working.
"""

from __future__ import annotations

from typing import Any


class SmoothingError(Exception):
    """Base exception for smoothing fits and forecasts."""


class InsufficientDataError(SmoothingError, ValueError):
    """Raised when a series is shorter than the initialisation window."""

    def __init__(self, available: int, required: int, method: str | None = None):
        self.available = available
        self.required = required
        self.method = method

        message = f"Insufficient data: {available} observations available, but {required} required"
        if method:
            message += f" for {method}"
        super().__init__(message)


class InvalidParameterError(SmoothingError, ValueError):
    """Raised when a smoothing or damping parameter is outside its range."""

    def __init__(self, name: str, value: Any, reason: str | None = None):
        self.name = name
        self.value = value

        message = f"Invalid value for {name}: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidSeriesError(SmoothingError, ValueError):
    """Raised when observations are empty, not one-dimensional or not finite."""


class DegenerateDivisionError(SmoothingError, ArithmeticError):
    """Raised when a multiplicative model would divide by zero."""


class NumericOverflowError(SmoothingError, OverflowError):
    """Raised when a state update produces a non-finite value."""
