"""
Object access layer.

Coordinates the remote object store and the read-through cache:
- fetch: read-through (cache first, store on miss, cache the result)
- store / remove: write to the store, then invalidate the cache entry
- list: passthrough, never cached
- fetch_json / store_json: JSON convenience wrappers

Every store failure surfaces as StoreOperationError. Cache failures are
not wrapped. There is no request coalescing: concurrent fetches that miss
on the same identity each contact the store, and the last cache write wins.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

import orjson

from s3ds.cache.base import KeyValueCache
from s3ds.cache.kv_cache import InMemoryKVCache, SQLiteKVCache
from s3ds.cache.read_through import ReadThroughCache
from s3ds.config import CacheOptions, Settings, get_settings
from s3ds.exceptions import (
    MISSING_OR_INVALID_BODY,
    SerializationError,
    StoreOperationError,
    describe_error,
)
from s3ds.logging import get_logger, log_context, setup_logging
from s3ds.store.base import ObjectStore
from s3ds.store.s3 import S3ObjectStore
from s3ds.types import BucketScope, ObjectIdentity, ObjectSummary, generate_id

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"

T = TypeVar("T")


class ObjectAccessLayer:
    """Cached access to a remote object store."""

    def __init__(
        self,
        store: ObjectStore,
        cache: KeyValueCache,
        options: CacheOptions | None = None,
    ) -> None:
        """Initialize the access layer.

        Args:
            store: Remote object store.
            cache: Backing key-value cache.
            options: Cache options. When omitted, defaults are used with the
                store's region.
        """
        self.object_store = store
        if options is None:
            options = CacheOptions(region=store.region or "")
        self.options = options
        self.cache = ReadThroughCache(cache, options)

    @classmethod
    async def from_settings(
        cls,
        settings: Settings | None = None,
        cache: KeyValueCache | None = None,
    ) -> ObjectAccessLayer:
        """Wire an S3-backed access layer from configuration.

        Args:
            settings: Settings to use; the cached singleton when omitted.
            cache: Backing cache; built from CACHE_BACKEND when omitted.
        """
        settings = settings or get_settings()
        setup_logging(log_level=settings.LOG_LEVEL)

        if cache is None:
            if settings.CACHE_BACKEND == "sqlite":
                settings.ensure_directories()
                sqlite_cache = SQLiteKVCache(settings.sqlite_cache_path)
                await sqlite_cache.init()
                cache = sqlite_cache
            else:
                cache = InMemoryKVCache(max_entries=settings.CACHE_MAX_ENTRIES)

        store = S3ObjectStore.from_settings(settings)
        options = CacheOptions.from_settings(settings)
        if not options.region:
            options.region = store.region
        return cls(store, cache, options)

    async def close(self) -> None:
        """Release the cache backend, if it holds a connection."""
        close = getattr(self.cache.backend, "close", None)
        if close is not None:
            await close()

    async def _call_store(
        self,
        operation: str,
        identity: ObjectIdentity | BucketScope,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        """Run a store call, wrapping any failure into StoreOperationError."""
        try:
            return await call()
        except Exception as e:
            message = describe_error(e)
            logger.warning(
                "Store operation failed",
                store_operation=operation,
                error=message,
                **identity.to_dict(),
            )
            raise StoreOperationError(message, e, identity, operation) from e

    async def fetch(self, identity: ObjectIdentity) -> str | None:
        """Get an object's content, from cache when possible.

        Args:
            identity: Object to read.

        Returns:
            The content as text, or None when the store returns no body.

        Raises:
            StoreOperationError: If the store get fails.
        """
        with log_context(request_id=generate_id("req"), operation="fetch"):
            cached = await self.cache.get(identity)
            if cached:
                logger.debug("Cache hit", bucket=identity.bucket, key=identity.key)
                return cached

            logger.debug("Cache miss", bucket=identity.bucket, key=identity.key)
            fetched = await self._call_store(
                "get_object", identity, lambda: self.object_store.get_object(identity)
            )
            if fetched.body is None:
                return None

            await self.cache.set_object(identity, fetched)
            return fetched.text

    async def remove(self, identity: ObjectIdentity) -> None:
        """Delete an object, then invalidate its cache entry.

        A failed delete leaves the cache untouched; a cached copy may be
        served until its TTL runs out.

        Raises:
            StoreOperationError: If the store delete fails.
        """
        with log_context(request_id=generate_id("req"), operation="remove"):
            await self._call_store(
                "delete_object", identity, lambda: self.object_store.delete_object(identity)
            )
            await self.cache.invalidate(identity)

    async def store(
        self,
        identity: ObjectIdentity,
        body: bytes | str,
        content_type: str | None = None,
    ) -> None:
        """Write an object, then invalidate (not repopulate) its cache entry.

        Raises:
            StoreOperationError: If the store put fails.
        """
        with log_context(request_id=generate_id("req"), operation="store"):
            await self._call_store(
                "put_object",
                identity,
                lambda: self.object_store.put_object(identity, body, content_type),
            )
            await self.cache.invalidate(identity)

    async def list(self, scope: BucketScope) -> list[ObjectSummary]:
        """List objects in a bucket scope. Never cached.

        Raises:
            StoreOperationError: If the store listing fails.
        """
        with log_context(request_id=generate_id("req"), operation="list"):
            return await self._call_store(
                "list_objects", scope, lambda: self.object_store.list_objects(scope)
            )

    async def fetch_json(self, identity: ObjectIdentity) -> Any:
        """Fetch an object and parse it as JSON.

        Raises:
            StoreOperationError: If the store get fails.
            SerializationError: If the body is missing or not valid JSON.
        """
        body = await self.fetch(identity)
        if body is None:
            raise SerializationError(MISSING_OR_INVALID_BODY, context=identity.to_dict())
        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise SerializationError(
                MISSING_OR_INVALID_BODY, context=identity.to_dict()
            ) from e

    async def store_json(self, value: Any, identity: ObjectIdentity) -> None:
        """Serialize a value to JSON and store it.

        Raises:
            SerializationError: If the value cannot be encoded as JSON.
            StoreOperationError: If the store put fails.
        """
        try:
            body = orjson.dumps(value)
        except orjson.JSONEncodeError as e:
            raise SerializationError(
                f"Unable to encode value as JSON: {e}", context=identity.to_dict()
            ) from e
        await self.store(identity, body, JSON_CONTENT_TYPE)
