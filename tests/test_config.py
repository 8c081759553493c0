"""Tests for settings and logging setup."""

from __future__ import annotations

import pytest

from app.core.config import Settings
from app.core.logging import configure_logging


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("WORKER_THREADS", "4")
    monkeypatch.setenv("LOG_JSON", "true")

    s = Settings()

    assert s.cors_origins == ["http://a.test", "http://b.test"]
    assert s.worker_threads == 4
    assert s.log_json is True


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WORKER_THREADS", raising=False)
    s = Settings(_env_file=None)
    assert s.worker_threads is None
    assert s.app_name == "order-lifecycle-tracker"


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        configure_logging("LOUD")


@pytest.mark.parametrize("level", ["debug", "INFO", "Warning"])
def test_configure_logging_accepts_level_names(level: str) -> None:
    """Level names are matched case-insensitively."""
    configure_logging(level)
