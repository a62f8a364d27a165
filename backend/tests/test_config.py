"""
QuoteBook Backend — Settings Tests
====================================

What:  Tests for environment-driven configuration and its validators.
"""

import pytest
from pydantic import ValidationError

from quotebook.config import Settings


class TestSettings:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "MEMORY")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("BACKEND_PORT", "9000")

        settings = Settings(_env_file=None)

        assert settings.store_backend == "memory"
        assert settings.log_level == "DEBUG"
        assert settings.backend_port == 9000

    def test_unknown_store_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "redis")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_cors_origins_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
        settings = Settings(_env_file=None)
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_uses_sqlite(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./quotes.db")
        assert Settings(_env_file=None).uses_sqlite is True

        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/quotes")
        assert Settings(_env_file=None).uses_sqlite is False
