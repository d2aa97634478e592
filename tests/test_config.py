"""Tests for Settings."""

import pytest
from pydantic import ValidationError

from app.config import DEFAULT_TEST_DATABASE_URL, Settings


def test_test_environment_uses_test_database(monkeypatch):
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("TEST_DATABASE_URL", raising=False)
    settings = Settings()
    assert settings.is_test
    assert settings.database_url == DEFAULT_TEST_DATABASE_URL


def test_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/chatline")
    settings = Settings()
    assert settings.database_url_obj.host == "db"


def test_event_defaults(monkeypatch):
    monkeypatch.setenv("ENV", "test")
    settings = Settings()
    assert settings.event_publish_timeout_seconds == 3.0
    assert settings.event_connect_timeout_seconds == 5.0
    assert settings.event_dispatch_workers == 1
    assert settings.redis_url == "redis://localhost:6379/0"


def test_production_refuses_default_jwt_secret(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError, match="JWT_SECRET"):
        Settings()


def test_production_with_secret(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("JWT_SECRET", "a-long-random-secret")
    assert Settings().is_production
