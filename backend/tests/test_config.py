"""Settings validation and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.logging_config import setup_logging

DB_URL = "postgresql+asyncpg://flippi:flippi@db:5432/flippi"


def test_defaults():
    settings = Settings(secret_key="k" * 48, DATABASE_URL=DB_URL)
    assert settings.access_token_expire_minutes == 15
    assert settings.refresh_token_ttl_days == 7
    assert settings.jwt_issuer == "thrifting-buddy"
    assert settings.jwt_audience == "thrifting-buddy-api"
    assert settings.rate_limit_auth == "5/15minutes"


@pytest.mark.parametrize("key", ["short", "change-me-in-production-" + "x" * 20, "my-Secret-" + "y" * 30])
def test_insecure_secret_key_is_rejected(key):
    with pytest.raises(ValidationError):
        Settings(secret_key=key, DATABASE_URL=DB_URL)


def test_setup_logging_writes_rotating_file(tmp_path):
    setup_logging(log_dir=str(tmp_path / "logs"), log_level="DEBUG")
    logging.getLogger("app.tests").info("hello from the tests")

    for handler in logging.getLogger("app").handlers:
        handler.flush()
    assert "hello from the tests" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")


def test_configuration_error_is_logged(monkeypatch, caplog):
    monkeypatch.setenv("SECRET_KEY", "too-short")
    # setup_logging may already have stopped "app" records from reaching the root logger
    monkeypatch.setattr(logging.getLogger("app"), "propagate", True)
    get_settings.cache_clear()
    try:
        with caplog.at_level(logging.ERROR, logger="app.config"):
            with pytest.raises(ValidationError):
                get_settings()
    finally:
        get_settings.cache_clear()

    assert "Configuration error" in caplog.text
