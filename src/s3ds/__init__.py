"""
s3ds: read-through, write-invalidate caching in front of a remote object store.
"""

from s3ds.cache import InMemoryKVCache, KeyValueCache, ReadThroughCache, SQLiteKVCache
from s3ds.config import CacheOptions, Settings, get_settings
from s3ds.datasource import ObjectAccessLayer
from s3ds.exceptions import (
    ConfigurationError,
    ObjectNotFoundError,
    S3DSError,
    SerializationError,
    StoreOperationError,
)
from s3ds.store import InMemoryObjectStore, ObjectStore, S3ObjectStore
from s3ds.types import BucketScope, FetchedObject, ObjectIdentity, ObjectSummary

__version__ = "0.1.0"

__all__ = [
    "BucketScope",
    "CacheOptions",
    "ConfigurationError",
    "FetchedObject",
    "InMemoryKVCache",
    "InMemoryObjectStore",
    "KeyValueCache",
    "ObjectAccessLayer",
    "ObjectIdentity",
    "ObjectNotFoundError",
    "ObjectStore",
    "ObjectSummary",
    "ReadThroughCache",
    "S3DSError",
    "S3ObjectStore",
    "SQLiteKVCache",
    "SerializationError",
    "Settings",
    "StoreOperationError",
    "get_settings",
]
