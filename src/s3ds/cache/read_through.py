"""
Read-through cache for remote objects.

Wraps a backing KeyValueCache, keying entries by object identity and timing
them from the object's expiry metadata.
"""

from __future__ import annotations

from datetime import datetime

from s3ds.cache.base import DeletableKeyValueCache, KeyValueCache
from s3ds.cache.keys import CacheKeyCodec
from s3ds.cache.ttl import resolve_ttl
from s3ds.config import CacheOptions
from s3ds.logging import get_logger
from s3ds.types import FetchedObject, ObjectIdentity

logger = get_logger(__name__)


class ReadThroughCache:
    """Identity-keyed view over a backing key-value cache."""

    def __init__(
        self,
        backend: KeyValueCache,
        options: CacheOptions | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            backend: Backing key-value cache.
            options: Default TTL, region and clock. Defaults apply when omitted.
        """
        self.backend = backend
        self.options = options or CacheOptions()
        self.codec = CacheKeyCodec(self.options.region)

    def cache_key(self, identity: ObjectIdentity) -> str:
        return self.codec.encode(identity)

    async def get(self, identity: ObjectIdentity) -> str | None:
        """Get the cached content for an identity, None on miss."""
        return await self.backend.get(self.cache_key(identity))

    async def put(
        self,
        identity: ObjectIdentity,
        body: bytes | str,
        expires: datetime | None = None,
    ) -> None:
        """Cache a body, with TTL derived from ``expires`` or the default.

        Args:
            identity: Object the body belongs to.
            body: Content; bytes are stored decoded as UTF-8.
            expires: Absolute expiry reported by the store.
        """
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")

        key = self.cache_key(identity)
        ttl = resolve_ttl(expires, self.options.now(), self.options.default_ttl_seconds)
        await self.backend.set(key, body, ttl_seconds=ttl)
        logger.debug("Cached object", cache_key=key, ttl_seconds=ttl)

    async def set_object(self, identity: ObjectIdentity, fetched: FetchedObject) -> None:
        """Cache a fetched object using its own expiry."""
        await self.put(identity, fetched.text or "", fetched.expires)

    async def invalidate(self, identity: ObjectIdentity) -> None:
        """Make the next get for this identity miss.

        Uses the backend's native delete when it has one; otherwise writes
        an empty value with TTL 0.
        """
        key = self.cache_key(identity)
        if isinstance(self.backend, DeletableKeyValueCache):
            await self.backend.delete(key)
        else:
            await self.backend.set(key, "", ttl_seconds=0)
        logger.debug("Invalidated cache entry", cache_key=key)
