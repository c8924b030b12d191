"""
Core types for the object cache layer.

This module defines the data structures passed between the access layer,
the object store bindings and the cache:
- ObjectIdentity / BucketScope: what a call addresses
- FetchedObject / ObjectSummary: what the store returns
- Helper functions for ID generation and timestamps
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from uuid6 import uuid7


def generate_id(prefix: str = "") -> str:
    """Generate a time-ordered unique ID using UUID7.

    Args:
        prefix: Optional prefix for the ID (e.g., "req").

    Returns:
        A unique ID string, optionally prefixed.
    """
    uid = str(uuid7())
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ObjectIdentity:
    """Addresses exactly one remote object, optionally a specific version.

    Attributes:
        bucket: Bucket holding the object.
        key: Object key within the bucket.
        version: Optional version id.
        region: Optional region; falls back to the configured region.
    """

    bucket: str
    key: str
    version: str | None = None
    region: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to a dict for logging and error context."""
        return {
            "bucket": self.bucket,
            "key": self.key,
            "version": self.version,
            "region": self.region,
        }


@dataclass(frozen=True)
class BucketScope:
    """Selects the objects a listing covers."""

    bucket: str
    prefix: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to a dict for logging and error context."""
        return {"bucket": self.bucket, "prefix": self.prefix}


@dataclass(frozen=True)
class FetchedObject:
    """Result of a successful get against the object store."""

    body: bytes | str | None = None
    expires: datetime | None = None
    content_type: str | None = None
    etag: str | None = None
    version: str | None = None

    @property
    def text(self) -> str | None:
        """Body decoded as UTF-8 text, or None when there is no body."""
        if self.body is None:
            return None
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body


@dataclass(frozen=True)
class ObjectSummary:
    """One entry of a bucket listing."""

    key: str
    size: int | None = None
    last_modified: datetime | None = None
    etag: str | None = None
