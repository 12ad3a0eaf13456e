"""Tests for environment-driven settings."""
import pytest

from app.config import Settings, get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings()
    
    assert settings.default_event_timezone == "UTC"
    assert settings.time_format == "%I:%M %p"
    assert settings.sql_echo is False


def test_environment_overrides(monkeypatch, fresh_settings):
    monkeypatch.setenv("DEFAULT_EVENT_TIMEZONE", "Europe/London")
    monkeypatch.setenv("TIME_FORMAT", "%H:%M")
    monkeypatch.setenv("SQL_ECHO", "yes")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    
    settings = get_settings()
    
    assert settings.default_event_timezone == "Europe/London"
    assert settings.time_format == "%H:%M"
    assert settings.sql_echo is True
    assert settings.log_level == "DEBUG"
