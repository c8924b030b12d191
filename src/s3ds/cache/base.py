"""
Base classes for key-value caches.

This module defines the contracts a backing cache must satisfy:
- KeyValueCache: get/set with TTL, no native delete assumed
- DeletableKeyValueCache: adds a native delete

TTL semantics shared by every backend:
- ttl_seconds=None: the entry never expires
- ttl_seconds<=0: the entry is never served again
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueCache(ABC):
    """Abstract interface for string key-value caches."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get a value from the cache, None on miss or expiry."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Set a value in the cache."""
        ...


class DeletableKeyValueCache(KeyValueCache):
    """Key-value cache with a native delete."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a value from the cache.

        Returns:
            True if an entry was removed.
        """
        ...
