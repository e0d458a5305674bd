"""Configuration - tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from ormtable.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("ORMTABLE_DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite://"
    assert settings.database_echo is False
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"


def test_env_prefix_overrides(monkeypatch):
    monkeypatch.setenv("ORMTABLE_DATABASE_URL", "postgresql://u:p@db/app")
    monkeypatch.setenv("ORMTABLE_LOG_LEVEL", " warning ")
    settings = Settings(_env_file=None)
    assert settings.database_url == "postgresql://u:p@db/app"
    assert settings.log_level == "WARNING"


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")


def test_unknown_log_format_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_format="xml")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
