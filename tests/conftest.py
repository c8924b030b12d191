"""
Pytest configuration and fixtures for object cache tests.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from s3ds.cache.kv_cache import InMemoryKVCache
from s3ds.config import clear_settings_cache
from s3ds.datasource import ObjectAccessLayer
from s3ds.store.base import ObjectStore
from s3ds.types import ObjectIdentity


class FakeClock:
    """Manually advanced seconds clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def restore_package_logger() -> Generator[None, None, None]:
    """Undo logging setup done by a test."""
    package_logger = logging.getLogger("s3ds")
    level = package_logger.level
    handlers = list(package_logger.handlers)
    propagate = package_logger.propagate
    yield
    package_logger.setLevel(level)
    package_logger.handlers[:] = handlers
    package_logger.propagate = propagate


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def clock() -> FakeClock:
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time used by TTL tests."""
    return datetime(2018, 2, 2, 10, 0, 0)


@pytest.fixture
def identity() -> ObjectIdentity:
    """Identity used by most access layer tests."""
    return ObjectIdentity(bucket="bucket", key="test")


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "DEFAULT_TTL_SECONDS": "120",
        "AWS_REGION": "eu-west-1",
        "AWS_ENDPOINT_URL": "http://localhost:4566",
        "CACHE_BACKEND": "memory",
        "CACHE_DIR": ".test_cache",
        "CACHE_MAX_ENTRIES": "50",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars
    clear_settings_cache()


@pytest.fixture
def object_store() -> MagicMock:
    """Provide a mocked object store in region "mock"."""
    store = MagicMock(spec=ObjectStore)
    store.region = "mock"
    store.get_object = AsyncMock()
    store.put_object = AsyncMock(return_value=None)
    store.delete_object = AsyncMock(return_value=None)
    store.list_objects = AsyncMock()
    return store


@pytest.fixture
def kv_cache() -> InMemoryKVCache:
    """Provide an empty in-memory cache."""
    return InMemoryKVCache()


@pytest.fixture
def data_source(object_store: MagicMock, kv_cache: InMemoryKVCache) -> ObjectAccessLayer:
    """Provide an access layer over the mocked store and in-memory cache."""
    return ObjectAccessLayer(object_store, kv_cache)
