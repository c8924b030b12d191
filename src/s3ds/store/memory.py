"""
In-process object store.

Useful for tests and local runs. Mirrors the S3 behaviors the access layer
depends on: missing keys fail with S3's message, put overwrites, delete of
a missing key succeeds, listing is sorted by key.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from s3ds.exceptions import ObjectNotFoundError
from s3ds.store.base import ObjectStore
from s3ds.types import BucketScope, FetchedObject, ObjectIdentity, ObjectSummary, utc_now

NO_SUCH_KEY = "The specified key does not exist."


@dataclass
class _StoredObject:
    body: bytes
    content_type: str | None
    last_modified: datetime
    expires: datetime | None = None


class InMemoryObjectStore(ObjectStore):
    """Dict-backed ObjectStore.

    Objects are keyed on bucket and key only. The identity's version and
    region are ignored, so a versioned delete removes the whole object.
    """

    def __init__(self, region: str = "") -> None:
        self._region = region
        self._objects: dict[tuple[str, str], _StoredObject] = {}

    @property
    def region(self) -> str:
        return self._region

    async def get_object(self, identity: ObjectIdentity) -> FetchedObject:
        stored = self._objects.get((identity.bucket, identity.key))
        if stored is None:
            raise ObjectNotFoundError(NO_SUCH_KEY)
        return FetchedObject(
            body=stored.body,
            expires=stored.expires,
            content_type=stored.content_type,
        )

    async def put_object(
        self,
        identity: ObjectIdentity,
        body: bytes | str,
        content_type: str | None = None,
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._objects[(identity.bucket, identity.key)] = _StoredObject(
            body=body,
            content_type=content_type,
            last_modified=utc_now(),
        )

    async def delete_object(self, identity: ObjectIdentity) -> None:
        self._objects.pop((identity.bucket, identity.key), None)

    async def list_objects(self, scope: BucketScope) -> list[ObjectSummary]:
        prefix = scope.prefix or ""
        return [
            ObjectSummary(key=key, size=len(obj.body), last_modified=obj.last_modified)
            for (bucket, key), obj in sorted(self._objects.items())
            if bucket == scope.bucket and key.startswith(prefix)
        ]

    def set_expires(self, identity: ObjectIdentity, expires: datetime | None) -> None:
        """Attach expiry metadata to a stored object."""
        stored = self._objects.get((identity.bucket, identity.key))
        if stored is None:
            raise ObjectNotFoundError(NO_SUCH_KEY)
        stored.expires = expires
