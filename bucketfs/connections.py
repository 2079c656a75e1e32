import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncGenerator

from aiobotocore.config import AioConfig
from aiobotocore.session import get_session
from types_aiobotocore_s3.client import S3Client

from bucketfs.config import StoreConfig, get_settings
from bucketfs.objectstorage.s3bucket import S3Backend, ensure_bucket
from bucketfs.store import PathStore


class BucketfsConnections:
    s3_client: S3Client | None
    s3_context_stack: AsyncExitStack | None

    def __init__(self, s3_client: S3Client | None = None, s3_context_stack: AsyncExitStack | None = None):
        self.s3_client = s3_client
        self.s3_context_stack = s3_context_stack


CONNECTIONS = BucketfsConnections()


@asynccontextmanager
async def bucketfs_connections() -> AsyncGenerator[None, None]:
    """
    The main context manager to start and stop the S3 client.
    Use this once around everything that needs a store, e.g. within a CLI command
    """
    try:
        await _start_s3()
        yield
    finally:
        await _close_s3()


def s3() -> S3Client:
    """
    Use this function to access the s3 client.
    """
    if CONNECTIONS.s3_client is None:
        raise ConnectionError("S3 client not started")
    return CONNECTIONS.s3_client


def s3_configured() -> bool:
    return bool(get_settings().bucket)


def open_store(config: StoreConfig | None = None) -> PathStore:
    """
    Create a PathStore on the running S3 client, using the configured bucket and base folder
    unless another config is given.
    """
    config = config or StoreConfig.from_settings()
    return PathStore(S3Backend(s3(), config.bucket), config)


async def _start_s3() -> None:
    settings = get_settings()
    if not s3_configured():
        raise ValueError("bucket not specified")
    if (settings.s3_access_key is None) != (settings.s3_secret_key is None):
        raise ValueError("Specify both s3_access_key and s3_secret_key, or neither")

    logging.debug(f"Connecting with S3 at {settings.s3_host or 'AWS'}, bucket {settings.bucket}")
    session = get_session()
    client = session.create_client(
        service_name="s3",
        region_name=settings.s3_region,
        endpoint_url=settings.s3_host,
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        config=AioConfig(signature_version="s3v4"),
    )

    CONNECTIONS.s3_context_stack = AsyncExitStack()
    CONNECTIONS.s3_client = await CONNECTIONS.s3_context_stack.enter_async_context(client)

    if settings.create_bucket and settings.bucket:
        await ensure_bucket(CONNECTIONS.s3_client, settings.bucket)


async def _close_s3():
    if CONNECTIONS.s3_context_stack is not None:
        await CONNECTIONS.s3_context_stack.aclose()
        CONNECTIONS.s3_client = None
        CONNECTIONS.s3_context_stack = None
