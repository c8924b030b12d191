"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Settings covers process-wide wiring (region, endpoint, cache backend);
CacheOptions is the small option set the caching layer itself recognizes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Callable, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from s3ds.exceptions import ConfigurationError
from s3ds.types import utc_now

DEFAULT_TTL_SECONDS = 300


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional:
        DEFAULT_TTL_SECONDS: TTL used when the store reports no expiry
        AWS_REGION: Store region, also namespaces cache keys
        AWS_ENDPOINT_URL: Custom S3 endpoint (e.g. a local S3 emulator)
        CACHE_BACKEND: memory or sqlite
        CACHE_DIR: Directory for the SQLite cache file
        CACHE_MAX_ENTRIES: Capacity of the in-memory cache
        LOG_LEVEL: Logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DEFAULT_TTL_SECONDS: int = Field(
        default=DEFAULT_TTL_SECONDS,
        ge=0,
        description="TTL in seconds applied when the store reports no expiry",
    )

    # Store
    AWS_REGION: str = Field(default="", description="Object store region")
    AWS_ENDPOINT_URL: str | None = Field(
        default=None, description="Custom S3 endpoint URL"
    )

    # Cache backend
    CACHE_BACKEND: Literal["memory", "sqlite"] = Field(
        default="memory", description="Backing key-value cache"
    )
    CACHE_DIR: Path = Field(default=Path(".cache"), description="Cache directory")
    CACHE_MAX_ENTRIES: int = Field(
        default=10000, ge=1, description="Capacity of the in-memory cache"
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    @field_validator("AWS_ENDPOINT_URL")
    @classmethod
    def validate_endpoint_url(cls, v: str | None) -> str | None:
        """Treat an empty endpoint as unset and require a scheme otherwise."""
        if v is None or not v.strip():
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("AWS_ENDPOINT_URL must start with http:// or https://")
        return v

    @property
    def sqlite_cache_path(self) -> Path:
        """Path of the SQLite cache database."""
        return self.CACHE_DIR / "objects.db"

    def ensure_directories(self) -> None:
        """Create the cache directory if it doesn't exist."""
        self.CACHE_DIR.mkdir(parents=True, exist_ok=True)


@dataclass
class CacheOptions:
    """Options recognized by the caching layer.

    Attributes:
        default_ttl_seconds: TTL applied when the store reports no expiry.
        region: Included in every cache key to namespace entries by region.
        now: Clock used for TTL computation; override for deterministic tests.
    """

    default_ttl_seconds: int = DEFAULT_TTL_SECONDS
    region: str = ""
    now: Callable[[], datetime] = field(default=utc_now)

    def __post_init__(self) -> None:
        if self.default_ttl_seconds < 0:
            raise ConfigurationError(
                "default_ttl_seconds must be >= 0",
                context={"default_ttl_seconds": self.default_ttl_seconds},
            )
        if self.region is None:
            self.region = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> CacheOptions:
        """Build options from application settings."""
        return cls(
            default_ttl_seconds=settings.DEFAULT_TTL_SECONDS,
            region=settings.AWS_REGION,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
