"""
Base class for remote object stores.

Any store binding (S3, an emulator, an in-process fake) implements
ObjectStore. Failures are implementation specific but must carry a
human-readable message; the access layer wraps them uniformly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from s3ds.types import BucketScope, FetchedObject, ObjectIdentity, ObjectSummary


class ObjectStore(ABC):
    """Abstract interface for remote object stores."""

    @property
    def region(self) -> str:
        """Region the store talks to, empty when unknown."""
        return ""

    @abstractmethod
    async def get_object(self, identity: ObjectIdentity) -> FetchedObject:
        """Fetch an object's body and expiry metadata."""
        ...

    @abstractmethod
    async def put_object(
        self,
        identity: ObjectIdentity,
        body: bytes | str,
        content_type: str | None = None,
    ) -> None:
        """Create or overwrite an object."""
        ...

    @abstractmethod
    async def delete_object(self, identity: ObjectIdentity) -> None:
        """Delete an object (or one version of it)."""
        ...

    @abstractmethod
    async def list_objects(self, scope: BucketScope) -> list[ObjectSummary]:
        """List the objects within a bucket scope."""
        ...
