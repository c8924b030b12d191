"""
S3 object store binding.

Uses boto3, which is not async-native: every call runs on a small thread
pool and is awaited from the event loop.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import boto3

from s3ds.logging import get_logger
from s3ds.store.base import ObjectStore
from s3ds.types import BucketScope, FetchedObject, ObjectIdentity, ObjectSummary

if TYPE_CHECKING:
    from s3ds.config import Settings

logger = get_logger(__name__)

T = TypeVar("T")

# Thread pool for boto3 (it's not async-native)
_executor = ThreadPoolExecutor(max_workers=8)


class S3ObjectStore(ObjectStore):
    """ObjectStore backed by a boto3 S3 client."""

    def __init__(
        self,
        client: Any | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            client: A boto3 S3 client. A default one is created when omitted.
            region: Region for the default client.
            endpoint_url: Custom endpoint for the default client.
        """
        if client is None:
            kwargs: dict[str, Any] = {}
            if region:
                kwargs["region_name"] = region
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)
        self.client = client
        self._region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> S3ObjectStore:
        """Create a store with a default client configured from settings."""
        return cls(
            region=settings.AWS_REGION or None,
            endpoint_url=settings.AWS_ENDPOINT_URL,
        )

    @property
    def region(self) -> str:
        if self._region:
            return self._region
        meta = getattr(self.client, "meta", None)
        region = getattr(meta, "region_name", None)
        return region if isinstance(region, str) else ""

    async def _run(self, fn: Callable[..., T], **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(_executor, lambda: fn(**kwargs))

    @staticmethod
    def _object_params(identity: ObjectIdentity) -> dict[str, str]:
        params = {"Bucket": identity.bucket, "Key": identity.key}
        if identity.version:
            params["VersionId"] = identity.version
        return params

    async def get_object(self, identity: ObjectIdentity) -> FetchedObject:
        params = self._object_params(identity)

        def _fetch() -> FetchedObject:
            output = self.client.get_object(**params)
            stream = output.get("Body")
            body = stream.read() if stream is not None else None
            return FetchedObject(
                body=body,
                expires=output.get("Expires"),
                content_type=output.get("ContentType"),
                etag=output.get("ETag"),
                version=output.get("VersionId"),
            )

        return await self._run(_fetch)

    async def put_object(
        self,
        identity: ObjectIdentity,
        body: bytes | str,
        content_type: str | None = None,
    ) -> None:
        params: dict[str, Any] = {"Bucket": identity.bucket, "Key": identity.key}
        params["Body"] = body.encode("utf-8") if isinstance(body, str) else body
        if content_type:
            params["ContentType"] = content_type

        await self._run(self.client.put_object, **params)
        logger.debug("Put object", bucket=identity.bucket, key=identity.key)

    async def delete_object(self, identity: ObjectIdentity) -> None:
        await self._run(self.client.delete_object, **self._object_params(identity))
        logger.debug("Deleted object", bucket=identity.bucket, key=identity.key)

    async def list_objects(self, scope: BucketScope) -> list[ObjectSummary]:
        params: dict[str, str] = {"Bucket": scope.bucket}
        if scope.prefix:
            params["Prefix"] = scope.prefix

        def _list() -> list[ObjectSummary]:
            paginator = self.client.get_paginator("list_objects_v2")
            summaries: list[ObjectSummary] = []
            for page in paginator.paginate(**params):
                for item in page.get("Contents", []):
                    summaries.append(
                        ObjectSummary(
                            key=item["Key"],
                            size=item.get("Size"),
                            last_modified=item.get("LastModified"),
                            etag=item.get("ETag"),
                        )
                    )
            return summaries

        return await self._run(_list)
