"""
Tests for configuration module.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from s3ds.cache.kv_cache import InMemoryKVCache, SQLiteKVCache
from s3ds.config import CacheOptions, Settings, clear_settings_cache, get_settings
from s3ds.datasource import ObjectAccessLayer
from s3ds.exceptions import ConfigurationError


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str]) -> None:
        """Test that settings correctly loads from environment variables."""
        settings = get_settings()

        assert settings.DEFAULT_TTL_SECONDS == 120
        assert settings.AWS_REGION == "eu-west-1"
        assert settings.AWS_ENDPOINT_URL == "http://localhost:4566"
        assert settings.CACHE_BACKEND == "memory"
        assert settings.CACHE_MAX_ENTRIES == 50
        assert settings.LOG_LEVEL == "DEBUG"

    def test_defaults(self) -> None:
        """Test defaults with an empty environment."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.DEFAULT_TTL_SECONDS == 300
        assert settings.AWS_REGION == ""
        assert settings.AWS_ENDPOINT_URL is None
        assert settings.CACHE_BACKEND == "memory"
        assert settings.sqlite_cache_path == Path(".cache") / "objects.db"

    def test_negative_ttl_rejected(self) -> None:
        """Test that DEFAULT_TTL_SECONDS must be non-negative."""
        with patch.dict(os.environ, {"DEFAULT_TTL_SECONDS": "-1"}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_endpoint_requires_scheme(self) -> None:
        """Test endpoint URL validation."""
        with patch.dict(os.environ, {"AWS_ENDPOINT_URL": "localhost:4566"}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

        assert "http://" in str(exc_info.value)

    def test_empty_endpoint_is_unset(self) -> None:
        """Test that an empty endpoint env var means no custom endpoint."""
        with patch.dict(os.environ, {"AWS_ENDPOINT_URL": ""}, clear=True):
            assert Settings(_env_file=None).AWS_ENDPOINT_URL is None

    def test_settings_cached(self, mock_env_vars: dict[str, str]) -> None:
        """Test that get_settings returns a singleton until cleared."""
        first = get_settings()
        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first


class TestCacheOptions:
    """Tests for CacheOptions."""

    def test_defaults(self) -> None:
        """Test the layer's default options."""
        options = CacheOptions()

        assert options.default_ttl_seconds == 300
        assert options.region == ""
        assert isinstance(options.now(), datetime)

    def test_from_settings(self, mock_env_vars: dict[str, str]) -> None:
        """Test mapping settings onto options."""
        options = CacheOptions.from_settings(get_settings())

        assert options.default_ttl_seconds == 120
        assert options.region == "eu-west-1"

    def test_negative_ttl(self) -> None:
        """Test that a negative default TTL is a configuration error."""
        with pytest.raises(ConfigurationError):
            CacheOptions(default_ttl_seconds=-5)


class TestFromSettings:
    """Tests for wiring an access layer from settings."""

    @pytest.mark.asyncio
    async def test_memory_backend(self, mock_env_vars: dict[str, str]) -> None:
        """Test the default in-memory wiring."""
        with patch("boto3.client") as mock_client:
            source = await ObjectAccessLayer.from_settings()

        mock_client.assert_called_once_with(
            "s3", region_name="eu-west-1", endpoint_url="http://localhost:4566"
        )
        assert isinstance(source.cache.backend, InMemoryKVCache)
        assert source.cache.backend.max_entries == 50
        assert source.options.default_ttl_seconds == 120
        assert source.options.region == "eu-west-1"

    @pytest.mark.asyncio
    async def test_sqlite_backend(self, temp_dir: Path) -> None:
        """Test the SQLite wiring."""
        settings = Settings(
            _env_file=None,
            CACHE_BACKEND="sqlite",
            CACHE_DIR=temp_dir / "cache",
            AWS_REGION="",
        )
        client = MagicMock()
        client.meta.region_name = "us-west-2"
        with patch("boto3.client", return_value=client):
            source = await ObjectAccessLayer.from_settings(settings)

        try:
            assert isinstance(source.cache.backend, SQLiteKVCache)
            assert settings.sqlite_cache_path.parent.exists()
            assert source.options.region == "us-west-2"
        finally:
            await source.close()

        assert source.cache.backend._db is None

    @pytest.mark.asyncio
    async def test_log_level_applied(self) -> None:
        """Test that LOG_LEVEL configures the package logger."""
        settings = Settings(_env_file=None, LOG_LEVEL="DEBUG", AWS_REGION="")

        with patch("boto3.client"):
            await ObjectAccessLayer.from_settings(settings)

        assert logging.getLogger("s3ds").level == logging.DEBUG

    @pytest.mark.asyncio
    async def test_close_without_connection(self, mock_env_vars: dict[str, str]) -> None:
        """Test that closing an in-memory wiring is a no-op."""
        with patch("boto3.client"):
            source = await ObjectAccessLayer.from_settings()

        await source.close()

        assert isinstance(source.cache.backend, InMemoryKVCache)
