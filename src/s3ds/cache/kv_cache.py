"""
Key-value cache implementations.

This module implements:
- InMemoryKVCache: dict-based cache for a single process and for tests
  - LRU eviction when the size limit is reached
  - TTL support, checked on read
  - Metrics tracking (hits, misses, writes, deletes, evictions, size)

- SQLiteKVCache: async SQLite-backed cache using aiosqlite
  - Absolute expiry stored per row
  - Index on expiry for fast cleanup
  - clear_expired() to purge stale rows
"""

from __future__ import annotations

import time
from collections import OrderedDict
from pathlib import Path
from typing import Any, Callable

import aiosqlite

from s3ds.cache.base import DeletableKeyValueCache
from s3ds.logging import get_logger

logger = get_logger(__name__)


class InMemoryKVCache(DeletableKeyValueCache):
    """In-process LRU cache with per-entry TTL."""

    def __init__(
        self,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            max_entries: Capacity; the least recently used entry is evicted past it.
            clock: Monotonic seconds source, injectable for tests.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self._clock = clock
        # key -> (value, expires_at or None)
        self._entries: OrderedDict[str, tuple[str, float | None]] = OrderedDict()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "writes": 0,
            "deletes": 0,
            "evictions": 0,
        }

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            self._stats["misses"] += 1
            return None

        self._entries.move_to_end(key)
        self._stats["hits"] += 1
        return value

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        self._stats["writes"] += 1

        if ttl_seconds is not None and ttl_seconds <= 0:
            self._entries.pop(key, None)
            return

        expires_at = None if ttl_seconds is None else self._clock() + ttl_seconds
        self._entries[key] = (value, expires_at)
        self._entries.move_to_end(key)

        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self._stats["evictions"] += 1
            logger.debug("Evicted cache entry", key=evicted)

    async def delete(self, key: str) -> bool:
        removed = self._entries.pop(key, None) is not None
        if removed:
            self._stats["deletes"] += 1
        return removed

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0.0
        return {
            **self._stats,
            "size": len(self._entries),
            "hit_rate_percent": round(hit_rate, 1),
        }

    def __len__(self) -> int:
        return len(self._entries)


class SQLiteKVCache(DeletableKeyValueCache):
    """Persistent cache stored in a single SQLite table.

    Survives process restarts, so entries cached by one run are served
    to the next until their TTL runs out.
    """

    def __init__(
        self,
        db_path: str | Path,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            db_path: SQLite database file.
            clock: Wall-clock seconds source, injectable for tests.
        """
        self.db_path = Path(db_path)
        self._clock = clock
        self._db: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create the schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row

        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS kv_cache (
                cache_key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                expires_at REAL
            )
        """)
        await self._db.execute(
            "CREATE INDEX IF NOT EXISTS idx_kv_cache_expires ON kv_cache(expires_at)"
        )
        await self._db.commit()
        logger.info("SQLite cache initialized", db_path=str(self.db_path))

    async def close(self) -> None:
        """Close the database connection."""
        if self._db:
            await self._db.close()
            self._db = None

    def _conn(self) -> aiosqlite.Connection:
        if not self._db:
            raise RuntimeError("SQLiteKVCache not initialized. Call init() first.")
        return self._db

    async def get(self, key: str) -> str | None:
        db = self._conn()
        async with db.execute(
            """
            SELECT value FROM kv_cache
            WHERE cache_key = ? AND (expires_at IS NULL OR expires_at > ?)
            """,
            (key, self._clock()),
        ) as cursor:
            row = await cursor.fetchone()
        return row["value"] if row else None

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        db = self._conn()

        if ttl_seconds is not None and ttl_seconds <= 0:
            await db.execute("DELETE FROM kv_cache WHERE cache_key = ?", (key,))
            await db.commit()
            return

        expires_at = None if ttl_seconds is None else self._clock() + ttl_seconds
        await db.execute(
            """
            INSERT INTO kv_cache (cache_key, value, expires_at) VALUES (?, ?, ?)
            ON CONFLICT(cache_key) DO UPDATE SET
                value = excluded.value,
                expires_at = excluded.expires_at
            """,
            (key, value, expires_at),
        )
        await db.commit()

    async def delete(self, key: str) -> bool:
        db = self._conn()
        cursor = await db.execute("DELETE FROM kv_cache WHERE cache_key = ?", (key,))
        await db.commit()
        return cursor.rowcount > 0

    async def clear_expired(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of rows removed.
        """
        db = self._conn()
        cursor = await db.execute(
            "DELETE FROM kv_cache WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (self._clock(),),
        )
        await db.commit()
        cleared = cursor.rowcount
        if cleared > 0:
            logger.info("Cleared expired cache entries", count=cleared)
        return cleared
