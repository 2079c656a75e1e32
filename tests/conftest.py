import pytest

from bucketfs.config import StoreConfig
from bucketfs.objectstorage.s3bucket import S3Backend
from bucketfs.store import PathStore
from tests.tools import FakeS3Client

BUCKET = "test-bucket"
BASE_FOLDER = "tenant-1/"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def s3_client():
    return FakeS3Client(buckets=(BUCKET,))


@pytest.fixture()
def backend(s3_client):
    return S3Backend(s3_client, BUCKET)


@pytest.fixture()
def store(backend):
    return PathStore(backend, StoreConfig(bucket=BUCKET, base_folder=BASE_FOLDER))


@pytest.fixture()
def small_page_store(backend):
    """A store that lists 3 entries per page"""
    return PathStore(backend, StoreConfig(bucket=BUCKET, base_folder=BASE_FOLDER, page_size=3))
