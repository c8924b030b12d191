"""
Cache package for object content.

This package provides:
- Cache key derivation (keys.py) and TTL policy (ttl.py)
- Backing key-value caches (kv_cache.py): in-memory LRU and SQLite
- The identity-keyed read-through cache (read_through.py)
"""

from s3ds.cache.base import DeletableKeyValueCache, KeyValueCache
from s3ds.cache.keys import CacheKeyCodec, encode_cache_key
from s3ds.cache.kv_cache import InMemoryKVCache, SQLiteKVCache
from s3ds.cache.read_through import ReadThroughCache
from s3ds.cache.ttl import expires_to_ttl, resolve_ttl

__all__ = [
    "CacheKeyCodec",
    "DeletableKeyValueCache",
    "InMemoryKVCache",
    "KeyValueCache",
    "ReadThroughCache",
    "SQLiteKVCache",
    "encode_cache_key",
    "expires_to_ttl",
    "resolve_ttl",
]
