"""Shared configuration utils for smoothing experiments.

The goal is to reuse consistent paths, logging, and default smoothing
parameters across notebooks and scripts.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable


PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"

ENV_ARTIFACTS_DIR = "SMOOTHING_ARTIFACTS_DIR"
ENV_SEASONAL_PERIOD = "SMOOTHING_SEASONAL_PERIOD"
ENV_FORECAST_HORIZON = "SMOOTHING_FORECAST_HORIZON"
ENV_LOG_LEVEL = "SMOOTHING_LOG_LEVEL"


def _env_path(name: str, default: Path) -> Path:
    """Return a `Path` from an environment variable when present."""

    override = os.getenv(name)
    return Path(override).expanduser() if override else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc


@dataclass(slots=True)
class Settings:
    """Runtime configuration for smoothing experiments."""

    artifacts_dir: Path = field(default_factory=lambda: _env_path(ENV_ARTIFACTS_DIR, DEFAULT_ARTIFACTS_DIR))
    metrics_dir: Path = field(init=False)
    forecasts_dir: Path = field(init=False)
    logs_dir: Path = field(default_factory=lambda: DEFAULT_LOG_DIR)
    forecast_horizon: int = field(default_factory=lambda: _env_int(ENV_FORECAST_HORIZON, 12))
    seasonal_period: int = field(default_factory=lambda: _env_int(ENV_SEASONAL_PERIOD, 12))
    test_size: int = 12
    alpha: float = 0.3
    beta: float = 0.1
    gamma: float = 0.1
    phi: float = 0.98

    def derived_paths(self) -> Iterable[Path]:
        return (self.artifacts_dir, self.metrics_dir, self.forecasts_dir, self.logs_dir)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metrics_dir", self.artifacts_dir / "metrics")
        object.__setattr__(self, "forecasts_dir", self.artifacts_dir / "forecasts")


def load_settings() -> Settings:
    """Load settings from environment overrides and defaults."""

    return Settings()


def ensure_directories(settings: Settings) -> None:
    """Ensure commonly used directories exist before writing artifacts."""

    for path in settings.derived_paths():
        path.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | int | None = None) -> None:
    """Initialise structured logging with an overridable level."""

    log_level = level or os.getenv(ENV_LOG_LEVEL, "INFO")
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.captureWarnings(True)
