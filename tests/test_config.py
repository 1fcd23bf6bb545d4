"""Unit tests for src/core/config.py"""

import pytest

from src.core.config import DEFAULT_DATABASE_URL, Settings


def test_defaults_match_local_development(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATABASE_URL", "DB_POOL_MAX", "REDIS_URL", "REDIS_HOST", "REDIS_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env(load_dotenv_file=False)
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.pool_max_size == 20
    assert settings.pool_idle_timeout == 30
    assert settings.pool_connect_timeout == 2
    assert settings.checkout_timeout == 30
    assert settings.slow_query_ms == 100
    assert settings.cache_url == "redis://localhost:6379/0"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/chess")
    monkeypatch.setenv("DB_POOL_MAX", "5")
    monkeypatch.setenv("DB_CONNECT_TIMEOUT", "0.5")
    monkeypatch.setenv("REDIS_HOST", "cache")
    monkeypatch.setenv("REDIS_PORT", "6380")
    monkeypatch.delenv("REDIS_URL", raising=False)

    settings = Settings.from_env(load_dotenv_file=False)
    assert settings.database_url == "postgresql://u:p@db:5432/chess"
    assert settings.pool_max_size == 5
    assert settings.pool_connect_timeout == 0.5
    assert settings.cache_url == "redis://cache:6380/0"


def test_empty_redis_url_falls_back_to_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "")
    monkeypatch.delenv("REDIS_HOST", raising=False)
    monkeypatch.delenv("REDIS_PORT", raising=False)
    settings = Settings.from_env(load_dotenv_file=False)
    assert settings.redis_url is None
    assert settings.cache_url == "redis://localhost:6379/0"
