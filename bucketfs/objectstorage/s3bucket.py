"""
Interact with S3-compatible object storage (e.g., AWS S3, MinIO, SeaweedFS, Cloudflare R2).

This is the only module that talks to the S3 client. Every botocore failure is converted into
a BackendError (or ObjectNotFound) so callers never need to know about botocore.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

import async_lru
from botocore.exceptions import BotoCoreError, ClientError
from types_aiobotocore_s3.client import S3Client
from types_aiobotocore_s3.type_defs import ListObjectsV2RequestTypeDef

from bucketfs.config import DEFAULT_PAGE_SIZE
from bucketfs.errors import BackendError, ObjectNotFound

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
NO_BUCKET_CODES = {"404", "NoSuchBucket"}


@dataclass
class PrefixListing:
    """One page of a prefix listing, with fully qualified keys"""

    prefixes: list[str] = field(default_factory=list)
    keys: list[str] = field(default_factory=list)
    marker: str | None = None


def error_code(e: ClientError) -> str | None:
    return e.response.get("Error", {}).get("Code")


@asynccontextmanager
async def backend_errors(action: str, key: str) -> AsyncIterator[None]:
    """Translate botocore exceptions raised inside this block into BackendError"""
    try:
        yield
    except ClientError as e:
        code = error_code(e)
        logging.debug(f"S3 {action} {key!r} failed with code {code}")
        if code in NOT_FOUND_CODES:
            raise ObjectNotFound(f"Object {key!r} not found", key=key, code=code) from e
        raise BackendError(f"S3 {action} {key!r} failed: {e}", key=key, code=code) from e
    except BotoCoreError as e:
        logging.debug(f"S3 {action} {key!r} failed: {e}")
        raise BackendError(f"S3 {action} {key!r} failed: {e}", key=key) from e


class S3Backend:
    """
    The five primitives bucketfs needs from an object store, on a single bucket.
    Keys are fully qualified: any base folder has already been added.
    """

    def __init__(self, client: S3Client, bucket: str):
        self.client = client
        self.bucket = bucket

    async def head_exists(self, key: str) -> bool:
        try:
            async with backend_errors("head", key):
                await self.client.head_object(Bucket=self.bucket, Key=key)
        except ObjectNotFound:
            return False
        return True

    async def list_by_prefix(
        self,
        prefix: str,
        delimiter: str | None = "/",
        marker: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> PrefixListing:
        params: ListObjectsV2RequestTypeDef = {
            "Bucket": self.bucket,
            "Prefix": prefix,
            "MaxKeys": page_size,
        }
        if delimiter:
            params["Delimiter"] = delimiter
        if marker:
            params["ContinuationToken"] = marker

        async with backend_errors("list", prefix):
            res = await self.client.list_objects_v2(**params)

        listing = PrefixListing()
        for common_prefix in res.get("CommonPrefixes", []):
            if "Prefix" in common_prefix:
                listing.prefixes.append(common_prefix["Prefix"])
        for content in res.get("Contents", []):
            if "Key" in content:
                listing.keys.append(content["Key"])
        if res.get("IsTruncated", False):
            listing.marker = res.get("NextContinuationToken")
        return listing

    async def put_object(self, key: str, body: bytes, content_type: str | None = None) -> None:
        params: dict[str, Any] = {"Bucket": self.bucket, "Key": key, "Body": body}
        if content_type:
            params["ContentType"] = content_type
        async with backend_errors("put", key):
            await self.client.put_object(**params)

    async def delete_object(self, key: str) -> None:
        async with backend_errors("delete", key):
            await self.client.delete_object(Bucket=self.bucket, Key=key)

    async def get_object(self, key: str) -> bytes:
        async with backend_errors("get", key):
            res = await self.client.get_object(Bucket=self.bucket, Key=key)
            async with res["Body"] as stream:
                return await stream.read()


async def ensure_bucket(client: S3Client, bucket: str) -> str:
    return await _create_or_get_bucket_name(client, bucket)


@async_lru.alru_cache(maxsize=1000)
async def _create_or_get_bucket_name(client: S3Client, bucket: str) -> str:
    try:
        async with backend_errors("head bucket", bucket):
            await client.head_bucket(Bucket=bucket)
    except BackendError as e:
        if e.code not in NO_BUCKET_CODES:
            raise
        logging.info(f"Creating bucket {bucket}")
        async with backend_errors("create bucket", bucket):
            await client.create_bucket(Bucket=bucket)
    return bucket
