# tests/test_config.py
import pytest

from rental_quotes.core.config import Settings

ENV_VARS = (
    "JWT_SECRET", "DATABASE_URL", "DB_ECHO", "CORS_ORIGINS", "LOG_LEVEL",
    "ENVIRONMENT", "QUOTATION_NUMBER_RETRIES", "ACCESS_TOKEN_EXPIRE_MINUTES", "DB_BUSY_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_jwt_secret_is_required():
    with pytest.raises(ValueError, match="JWT_SECRET"):
        Settings.from_env()


def test_defaults(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite+aiosqlite:///./rental_quotes.db"
    assert settings.is_sqlite
    assert settings.api_prefix == "/api/v1"
    assert settings.access_token_expire_minutes == 1440
    assert settings.quotation_number_retries == 5
    assert settings.db_busy_timeout == 30.0
    assert settings.cors_origins == ["*"]
    assert not settings.is_production


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/rentals")
    monkeypatch.setenv("DB_ECHO", "true")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("QUOTATION_NUMBER_RETRIES", "9")

    settings = Settings.from_env()

    assert not settings.is_sqlite
    assert settings.db_echo is True
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.log_level == "DEBUG"
    assert settings.is_production
    assert settings.quotation_number_retries == 9


def test_unsupported_driver_is_rejected(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("DATABASE_URL", "mysql://u:p@db/rentals")

    with pytest.raises(ValueError, match="Unsupported"):
        Settings.from_env()
