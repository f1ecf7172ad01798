"""
Application settings loaded from environment variables.

Uses Pydantic Settings for type-safe configuration with validation.
All settings can be overridden via CENDRE_* environment variables or .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Secret service configuration.

    Example:
        CENDRE_SECRET_BACKEND=redis
        CENDRE_REDIS_URL=redis://localhost:6379/0
        CENDRE_RATE_LIMIT_MAX_REQUESTS=60
    """

    model_config = SettingsConfigDict(
        env_prefix="CENDRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage backend
    secret_backend: Literal["auto", "memory", "redis"] = Field(
        default="auto",
        description="Secret store backend; 'auto' prefers Redis and falls back to memory",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis connection string (e.g. redis://localhost:6379/0)",
    )
    redis_key_prefix: str = Field(
        default="secret:",
        min_length=1,
        description="Namespace prepended to every secret id in Redis",
    )
    redis_connect_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="PING attempts when connecting to Redis at startup",
    )
    redis_connect_backoff_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Exponential backoff multiplier between startup PING attempts",
    )
    redis_socket_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Connect and socket timeout for Redis commands",
    )

    # Rate limiting
    rate_limit_max_requests: int = Field(
        default=60,
        ge=1,
        description="Requests allowed per client per window",
    )
    rate_limit_window_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Fixed rate-limit window length in seconds",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=True,
        description="Emit JSON log lines (disable for human-readable local output)",
    )

    # HTTP server
    host: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    port: int = Field(default=8080, ge=1, le=65535, description="Bind port for uvicorn")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.

    Returns:
        Settings instance with all configuration loaded.

    Example:
        >>> settings = get_settings()
        >>> print(settings.secret_backend)
        'auto'
    """
    return Settings()
