"""Smoothing parameters and the level/trend/season state record.

Both records are frozen: a fit produces a new ``SmoothingState`` for every
observed step and never edits an existing one.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real

from smoothing_lab.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)

DAMPING_WARNING_THRESHOLD = 0.8


def _check_unit_interval(name: str, value: object, *, allow_zero: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or math.isnan(value):
        raise InvalidParameterError(name, value, "must be a real number")

    value = float(value)
    lower_ok = value >= 0.0 if allow_zero else value > 0.0
    if not lower_ok or value > 1.0:
        bounds = "[0, 1]" if allow_zero else "(0, 1]"
        raise InvalidParameterError(name, value, f"must lie in {bounds}")
    return value


@dataclass(frozen=True, slots=True)
class SmoothingParameters:
    """Smoothing weights for level (alpha), trend (beta) and season (gamma).

    ``phi`` is the damping parameter; ``None`` means an undamped trend.
    ``beta`` and ``gamma`` may be zero, which freezes the corresponding
    component at its initial value.
    """

    alpha: float
    beta: float | None = None
    gamma: float | None = None
    phi: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "alpha", _check_unit_interval("alpha", self.alpha, allow_zero=False))
        if self.beta is not None:
            object.__setattr__(self, "beta", _check_unit_interval("beta", self.beta, allow_zero=True))
        if self.gamma is not None:
            object.__setattr__(self, "gamma", _check_unit_interval("gamma", self.gamma, allow_zero=True))
        if self.phi is not None:
            object.__setattr__(self, "phi", _check_unit_interval("phi", self.phi, allow_zero=False))
            if self.phi < DAMPING_WARNING_THRESHOLD:
                logger.warning(
                    "Damping parameter phi=%.3f is below %.1f; long-horizon forecasts will flatten quickly",
                    self.phi,
                    DAMPING_WARNING_THRESHOLD,
                )

    def require(self, *names: str) -> None:
        """Raise when a parameter needed by a model variant is missing."""
        for name in names:
            if getattr(self, name) is None:
                raise InvalidParameterError(name, None, "required by this model")

    @property
    def damping(self) -> float:
        """Multiplier applied to the previous trend inside the updates."""
        return 1.0 if self.phi is None else self.phi


@dataclass(frozen=True, slots=True)
class SmoothingState:
    """Level, trend and seasonal indices after ``step`` observations.

    ``season`` holds the most recent ``m`` seasonal indices ordered from
    oldest to newest, so ``season[0]`` is the index from exactly one period
    before the next observation.
    """

    level: float
    trend: float | None = None
    season: tuple[float, ...] | None = None
    step: int = 1

    @property
    def period(self) -> int | None:
        return None if self.season is None else len(self.season)

    @property
    def has_trend(self) -> bool:
        return self.trend is not None

    @property
    def is_seasonal(self) -> bool:
        return self.season is not None
