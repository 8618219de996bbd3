# tests/core/test_config.py

import logging

import pytest
from pydantic import ValidationError

from mescore.core.config import Settings


def test_defaults(monkeypatch):
    for key in ("DB_POOL_SIZE", "DB_MAX_OVERFLOW", "LOG_LEVEL", "DB_AUTO_CREATE"):
        monkeypatch.delenv(key, raising=False)
    settings = Settings(_env_file=None)
    assert settings.DB_POOL_SIZE == 50
    assert settings.DB_MAX_OVERFLOW == 20
    assert settings.LOG_LEVEL == "INFO"
    assert settings.DB_AUTO_CREATE is False
    assert settings.DATABASE_URL.get_secret_value().startswith("postgresql+asyncpg://")


def test_values_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("DB_POOL_SIZE", "10")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./mes.db")
    settings = Settings(_env_file=None)
    assert settings.DB_POOL_SIZE == 10
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.DATABASE_URL.get_secret_value() == "sqlite+aiosqlite:///./mes.db"


@pytest.mark.parametrize("pool_size", [0, -3])
def test_pool_size_must_be_positive(pool_size):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, DB_POOL_SIZE=pool_size)


def test_large_pool_size_only_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="mescore.core.config"):
        settings = Settings(_env_file=None, DB_POOL_SIZE=150)
    assert settings.DB_POOL_SIZE == 150
    assert "DB_POOL_SIZE=150" in caplog.text


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="CHATTY")
