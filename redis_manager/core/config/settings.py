"""
Centralized Configuration Module using Pydantic Settings

Type-safe, environment-based configuration for the Redis connection, the
manager defaults, the lock provider and logging.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with reload_settings()
"""

from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from redis_manager.core.config.constants import (
    DEFAULT_LOCK_RETRY_COUNT,
    DEFAULT_LOCK_RETRY_DELAY_MS,
    DEFAULT_LOCK_TTL_MS,
    DEFAULT_MAX_RETRIES,
)


class RedisSettings(BaseSettings):
    """
    Redis connection configuration.

    Architectural Decision: Connection pooling for performance
    - Max connections bounded per process
    - Health checks on idle connections
    """

    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum total connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ManagerSettings(BaseSettings):
    """
    Defaults for a RedisManager built by the factory.

    MANAGER_DEFAULT_LOCK_TTL_MS is only consulted when locking is enabled.
    """

    MANAGER_NAMESPACE: str = Field(default="default", description="Key namespace")
    MANAGER_DEFAULT_EXPIRY_MS: int | None = Field(default=None, description="Entry expiry in ms")
    MANAGER_MAX_RETRIES: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, description="Retries after the first attempt")
    MANAGER_LOCKING_ENABLED: bool = Field(default=True, description="Serialize mutations with a distributed lock")
    MANAGER_DEFAULT_LOCK_TTL_MS: int = Field(default=DEFAULT_LOCK_TTL_MS, gt=0, description="Lock TTL in ms")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LockProviderSettings(BaseSettings):
    """
    Distributed lock acquisition tuning.

    Acquisition polls every LOCK_RETRY_DELAY_MS and gives up after
    LOCK_RETRY_COUNT attempts.
    """

    LOCK_RETRY_COUNT: int = Field(default=DEFAULT_LOCK_RETRY_COUNT, ge=0, description="Acquire attempts after the first")
    LOCK_RETRY_DELAY_MS: int = Field(default=DEFAULT_LOCK_RETRY_DELAY_MS, gt=0, description="Delay between acquire attempts")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)

    @property
    def blocking_timeout_s(self) -> float:
        """Total time a caller may wait for a lock, in seconds."""
        return (self.LOCK_RETRY_COUNT + 1) * self.LOCK_RETRY_DELAY_MS / 1000

    @property
    def sleep_s(self) -> float:
        return self.LOCK_RETRY_DELAY_MS / 1000


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from redis_manager.core.config import get_settings

        settings = get_settings()
        redis_host = settings.redis.REDIS_HOST
        namespace = settings.manager.MANAGER_NAMESPACE
    """

    # Redis settings
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum total connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    # Manager settings
    MANAGER_NAMESPACE: str = Field(default="default", description="Key namespace")
    MANAGER_DEFAULT_EXPIRY_MS: int | None = Field(default=None, description="Entry expiry in ms")
    MANAGER_MAX_RETRIES: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, description="Retries after the first attempt")
    MANAGER_LOCKING_ENABLED: bool = Field(default=True, description="Serialize mutations with a distributed lock")
    MANAGER_DEFAULT_LOCK_TTL_MS: int = Field(default=DEFAULT_LOCK_TTL_MS, gt=0, description="Lock TTL in ms")

    # Lock provider settings
    LOCK_RETRY_COUNT: int = Field(default=DEFAULT_LOCK_RETRY_COUNT, ge=0, description="Acquire attempts after the first")
    LOCK_RETRY_DELAY_MS: int = Field(default=DEFAULT_LOCK_RETRY_DELAY_MS, gt=0, description="Delay between acquire attempts")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def validate_expiry(self):
        """Reject non-positive entry expiry; unset means no expiry."""
        if self.MANAGER_DEFAULT_EXPIRY_MS is not None and self.MANAGER_DEFAULT_EXPIRY_MS <= 0:
            raise ValueError("MANAGER_DEFAULT_EXPIRY_MS must be positive when set")
        return self

    @property
    def redis(self) -> RedisSettings:
        """Get Redis settings."""
        return RedisSettings(
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_MAX_CONNECTIONS=self.REDIS_MAX_CONNECTIONS,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
            REDIS_HEALTH_CHECK_INTERVAL=self.REDIS_HEALTH_CHECK_INTERVAL,
        )

    @property
    def manager(self) -> ManagerSettings:
        """Get manager settings."""
        return ManagerSettings(
            MANAGER_NAMESPACE=self.MANAGER_NAMESPACE,
            MANAGER_DEFAULT_EXPIRY_MS=self.MANAGER_DEFAULT_EXPIRY_MS,
            MANAGER_MAX_RETRIES=self.MANAGER_MAX_RETRIES,
            MANAGER_LOCKING_ENABLED=self.MANAGER_LOCKING_ENABLED,
            MANAGER_DEFAULT_LOCK_TTL_MS=self.MANAGER_DEFAULT_LOCK_TTL_MS,
        )

    @property
    def lock(self) -> LockProviderSettings:
        """Get lock provider settings."""
        return LockProviderSettings(
            LOCK_RETRY_COUNT=self.LOCK_RETRY_COUNT,
            LOCK_RETRY_DELAY_MS=self.LOCK_RETRY_DELAY_MS,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
