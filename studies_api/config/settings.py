"""Application settings and configuration."""

import logging
from datetime import timedelta

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application (hardcoded constants)
    app_name: str = "Indefinite Studies API"
    app_version: str = "0.1.0"

    # Environment-specific settings
    debug: bool = False
    environment: str  # development, staging, production, test

    # Database
    database_url: str
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600
    database_echo: bool = False
    database_create_schema: bool = True

    # Upper bound for the database work of a single request
    db_request_timeout_seconds: float = 5.0

    # Interval of the expired session sweep; 0 disables it
    session_cleanup_interval_seconds: float = 3600.0

    # API
    api_prefix: str = ""

    # Security
    secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_minutes: int = 60 * 24 * 7

    # Rate limiting (slowapi)
    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "staging", "production", "test"}
        env = str(v).lower()
        if env not in valid_envs:
            raise ValueError(f"Environment must be one of {valid_envs}, got {env}")
        return env

    @field_validator("access_token_expire_minutes", "refresh_token_expire_minutes")
    @classmethod
    def validate_positive_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Token lifetimes must be positive")
        return v

    @model_validator(mode="after")
    def validate_ttl_order(self) -> "Settings":
        """Access tokens must expire strictly before refresh tokens."""
        if self.access_token_expire_minutes >= self.refresh_token_expire_minutes:
            raise ValueError("access_token_expire_minutes must be lower than refresh_token_expire_minutes")
        return self

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.refresh_token_expire_minutes)


settings = Settings()  # type: ignore[call-arg]
