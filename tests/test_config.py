from __future__ import annotations

from pathlib import Path

import pytest

from smoothing_lab.config import ensure_directories, load_settings


def test_settings_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SMOOTHING_ARTIFACTS_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("SMOOTHING_SEASONAL_PERIOD", "4")

    settings = load_settings()

    assert settings.seasonal_period == 4
    assert settings.metrics_dir == tmp_path / "out" / "metrics"
    assert settings.forecasts_dir == tmp_path / "out" / "forecasts"


def test_settings_reject_non_integer_period(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMOOTHING_SEASONAL_PERIOD", "monthly")

    with pytest.raises(ValueError, match="SMOOTHING_SEASONAL_PERIOD"):
        load_settings()


def test_ensure_directories(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SMOOTHING_ARTIFACTS_DIR", str(tmp_path / "artifacts"))
    settings = load_settings()
    settings.logs_dir = tmp_path / "logs"

    ensure_directories(settings)

    assert settings.metrics_dir.is_dir()
    assert settings.forecasts_dir.is_dir()
    assert settings.logs_dir.is_dir()
