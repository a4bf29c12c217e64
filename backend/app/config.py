"""
Flippi Configuration Module
Loads settings from environment variables with sensible defaults.
"""

import logging
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Flippi"
    debug: bool = False

    # Authentication
    secret_key: str = Field(..., min_length=32)  # Required, no default
    access_token_expire_minutes: int = 15
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "thrifting-buddy"
    jwt_audience: str = "thrifting-buddy-api"
    refresh_token_ttl_days: int = 7
    max_sessions_per_user: int = 5
    bcrypt_rounds: int = 12

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"  # redis://redis:6379/2 when scaled out
    rate_limit_general: str = "100/15minutes"
    rate_limit_auth: str = "5/15minutes"  # Failed attempts only
    rate_limit_scan: str = "30/minute"
    rate_limit_account_creation: str = "3/hour"

    # Request bodies
    max_body_bytes: int = 50 * 1024 * 1024  # 50 MB

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")
    automation_database_url: str = "sqlite:///./data/automation.db"

    # Redis
    redis_url: str = "redis://redis:6379/0"
    celery_broker_url: str = "redis://redis:6379/0"
    celery_result_backend: str = "redis://redis:6379/1"
    token_cleanup_interval_seconds: float = 3600.0

    # Static legal pages (terms.html, privacy.html, mission.html)
    legal_pages_dir: str = "/app/legal"

    # Logging
    log_dir: str = "/var/log/flippi"
    log_level: str = "INFO"

    # API Settings
    api_prefix: str = "/api"

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate that the secret key is secure."""
        if not v or len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")

        # Check for common insecure values
        insecure_values = [
            "change-me-in-production",
            "secret",
            "password",
            "changeme",
            "default",
        ]
        if any(bad in v.lower() for bad in insecure_values):
            raise ValueError(
                "SECRET_KEY appears to be insecure. Generate a secure key with: "
                "python -c 'import secrets; print(secrets.token_hex(32))'"
            )

        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except Exception as e:
        logging.getLogger(__name__).error(f"Configuration error: {e}")
        raise


# Convenience alias
settings = get_settings()
