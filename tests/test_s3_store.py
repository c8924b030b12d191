"""
Tests for the boto3 S3 binding (mocked client).
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from s3ds.cache.kv_cache import InMemoryKVCache
from s3ds.config import Settings
from s3ds.datasource import ObjectAccessLayer
from s3ds.exceptions import StoreOperationError
from s3ds.store.s3 import S3ObjectStore
from s3ds.types import BucketScope, ObjectIdentity


@pytest.fixture
def s3_client() -> MagicMock:
    """Provide a mocked boto3 S3 client in eu-west-1."""
    client = MagicMock()
    client.meta.region_name = "eu-west-1"
    return client


class TestS3ObjectStore:
    """Tests for S3ObjectStore."""

    def test_creates_default_client(self) -> None:
        """Test that a boto3 client is created when none is injected."""
        with patch("boto3.client") as mock_client:
            store = S3ObjectStore(region="us-east-1", endpoint_url="http://localhost:4566")

            mock_client.assert_called_once_with(
                "s3", region_name="us-east-1", endpoint_url="http://localhost:4566"
            )
            assert store.client is mock_client.return_value
            assert store.region == "us-east-1"

    def test_from_settings(self) -> None:
        """Test building the default client from settings."""
        settings = Settings(_env_file=None, AWS_REGION="", AWS_ENDPOINT_URL=None)
        with patch("boto3.client") as mock_client:
            S3ObjectStore.from_settings(settings)

            mock_client.assert_called_once_with("s3")

    def test_region_from_client(self, s3_client: MagicMock) -> None:
        """Test that the injected client's region is reported."""
        assert S3ObjectStore(client=s3_client).region == "eu-west-1"

    @pytest.mark.asyncio
    async def test_get_object(self, s3_client: MagicMock) -> None:
        """Test translation of a get_object response."""
        expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
        body = MagicMock()
        body.read.return_value = b'{"a":1}'
        s3_client.get_object.return_value = {
            "Body": body,
            "Expires": expires,
            "ContentType": "application/json",
            "ETag": '"abc"',
            "VersionId": "v1",
        }
        store = S3ObjectStore(client=s3_client)

        fetched = await store.get_object(ObjectIdentity(bucket="b", key="k", version="v1"))

        s3_client.get_object.assert_called_once_with(Bucket="b", Key="k", VersionId="v1")
        assert fetched.body == b'{"a":1}'
        assert fetched.expires == expires
        assert fetched.content_type == "application/json"
        assert fetched.version == "v1"

    @pytest.mark.asyncio
    async def test_get_object_without_body(self, s3_client: MagicMock) -> None:
        """Test a response that carries no body stream."""
        s3_client.get_object.return_value = {}
        store = S3ObjectStore(client=s3_client)

        fetched = await store.get_object(ObjectIdentity(bucket="b", key="k"))

        assert fetched.body is None
        s3_client.get_object.assert_called_once_with(Bucket="b", Key="k")

    @pytest.mark.asyncio
    async def test_put_object(self, s3_client: MagicMock) -> None:
        """Test that text bodies are encoded and content type forwarded."""
        store = S3ObjectStore(client=s3_client)

        await store.put_object(ObjectIdentity(bucket="b", key="k"), "text", "text/plain")

        s3_client.put_object.assert_called_once_with(
            Bucket="b", Key="k", Body=b"text", ContentType="text/plain"
        )

    @pytest.mark.asyncio
    async def test_delete_object(self, s3_client: MagicMock) -> None:
        """Test delete of a specific version."""
        store = S3ObjectStore(client=s3_client)

        await store.delete_object(ObjectIdentity(bucket="b", key="k", version="v2"))

        s3_client.delete_object.assert_called_once_with(Bucket="b", Key="k", VersionId="v2")

    @pytest.mark.asyncio
    async def test_list_objects_paginates(self, s3_client: MagicMock) -> None:
        """Test that all pages are collected."""
        paginator = MagicMock()
        paginator.paginate.return_value = [
            {"Contents": [{"Key": "prefix/file1.txt", "Size": 3}]},
            {"Contents": [{"Key": "prefix/file2.txt", "Size": 5}]},
            {},
        ]
        s3_client.get_paginator.return_value = paginator
        store = S3ObjectStore(client=s3_client)

        summaries = await store.list_objects(BucketScope(bucket="b", prefix="prefix/"))

        s3_client.get_paginator.assert_called_once_with("list_objects_v2")
        paginator.paginate.assert_called_once_with(Bucket="b", Prefix="prefix/")
        assert [s.key for s in summaries] == ["prefix/file1.txt", "prefix/file2.txt"]
        assert summaries[1].size == 5

    @pytest.mark.asyncio
    async def test_client_error_message_surfaces(self, s3_client: MagicMock) -> None:
        """Test that S3's own error message becomes the wrapped message."""
        s3_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
            "GetObject",
        )
        data_source = ObjectAccessLayer(S3ObjectStore(client=s3_client), InMemoryKVCache())

        with pytest.raises(StoreOperationError) as exc_info:
            await data_source.fetch(ObjectIdentity(bucket="b", key="missing"))

        assert exc_info.value.message == "The specified key does not exist."
        assert isinstance(exc_info.value.cause, ClientError)
