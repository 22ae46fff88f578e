# tests/test_config.py

from __future__ import annotations

import logging

import pytest

from taskboard.config import DEFAULT_TOKEN_EXPIRE_MINUTES, Settings
from taskboard.logging_setup import _ConsoleNoiseFilter


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATABASE_URL", "ACCESS_TOKEN_EXPIRE_MINUTES", "CORS_ORIGINS", "EXTERNAL_AUTH_SECRET", "COOKIE_SECURE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///./taskboard.db"
    assert settings.access_token_expire_minutes == DEFAULT_TOKEN_EXPIRE_MINUTES == 7 * 24 * 60
    assert settings.cors_origins == ("http://localhost:5173",)
    assert settings.external_auth_secret is None
    assert settings.cookie_secure is False


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/tasks")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, ,http://b.test")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("COOKIE_SECURE", "true")

    settings = Settings.from_env()

    assert settings.database_url == "postgresql://db/tasks"
    assert settings.access_token_expire_minutes == 15
    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert settings.log_level == "DEBUG"
    assert settings.cookie_secure is True


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_app_logs_and_quiets_libraries() -> None:
    noise = _ConsoleNoiseFilter()

    assert noise.filter(_record("taskboard.repository", logging.DEBUG))
    assert noise.filter(_record("uvicorn.error", logging.INFO))
    assert not noise.filter(_record("strawberry.execution", logging.INFO))
    assert noise.filter(_record("strawberry.execution", logging.ERROR))
