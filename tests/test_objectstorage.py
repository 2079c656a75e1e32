import pytest

from bucketfs.errors import BackendError, ObjectNotFound
from bucketfs.objectstorage.s3bucket import PrefixListing, S3Backend, ensure_bucket
from tests.tools import FakeS3Client, client_error


@pytest.mark.anyio
async def test_put_get_delete(backend, s3_client):
    await backend.put_object("x/y.txt", b"bytes", content_type="text/plain")
    assert s3_client.buckets["test-bucket"]["x/y.txt"] == (b"bytes", "text/plain")
    assert await backend.head_exists("x/y.txt")
    assert await backend.get_object("x/y.txt") == b"bytes"
    await backend.delete_object("x/y.txt")
    assert not await backend.head_exists("x/y.txt")


@pytest.mark.anyio
async def test_list_by_prefix(backend):
    for key in ["p/", "p/a.txt", "p/b/", "p/b/c.txt", "q/d.txt"]:
        await backend.put_object(key, b"")
    assert await backend.list_by_prefix("p/") == PrefixListing(prefixes=["p/b/"], keys=["p/", "p/a.txt"])
    flat = await backend.list_by_prefix("p/", delimiter=None)
    assert flat.prefixes == []
    assert flat.keys == ["p/", "p/a.txt", "p/b/", "p/b/c.txt"]


@pytest.mark.anyio
async def test_list_by_prefix_marker(backend):
    for i in range(5):
        await backend.put_object(f"k{i}", b"")
    page = await backend.list_by_prefix("", page_size=2)
    assert page.keys == ["k0", "k1"]
    assert page.marker
    page = await backend.list_by_prefix("", page_size=2, marker=page.marker)
    assert page.keys == ["k2", "k3"]
    page = await backend.list_by_prefix("", page_size=2, marker=page.marker)
    assert page.keys == ["k4"]
    assert page.marker is None


@pytest.mark.anyio
async def test_errors(backend, s3_client):
    with pytest.raises(ObjectNotFound) as e:
        await backend.get_object("missing")
    assert e.value.key == "missing"
    assert e.value.code == "NoSuchKey"

    s3_client.offline = True
    for call in [
        backend.head_exists("x"),
        backend.get_object("x"),
        backend.put_object("x", b""),
        backend.delete_object("x"),
        backend.list_by_prefix(""),
    ]:
        with pytest.raises(BackendError) as e:
            await call
        assert not isinstance(e.value, ObjectNotFound)
        assert e.value.__cause__ is not None


@pytest.mark.anyio
async def test_head_access_denied(s3_client):
    async def forbidden(Bucket, Key):
        raise client_error("403", "HeadObject", "Forbidden")

    s3_client.head_object = forbidden
    with pytest.raises(BackendError) as e:
        await S3Backend(s3_client, "test-bucket").head_exists("x")
    assert e.value.code == "403"


@pytest.mark.anyio
async def test_missing_bucket():
    backend = S3Backend(FakeS3Client(buckets=()), "nope")
    with pytest.raises(BackendError) as e:
        await backend.put_object("x", b"")
    assert e.value.code == "NoSuchBucket"


@pytest.mark.anyio
async def test_ensure_bucket():
    client = FakeS3Client(buckets=("existing",))
    assert await ensure_bucket(client, "existing") == "existing"
    assert "CreateBucket" not in client.calls
    assert await ensure_bucket(client, "new-bucket") == "new-bucket"
    assert "new-bucket" in client.buckets
    client.calls.clear()
    # cached, so no more calls
    assert await ensure_bucket(client, "new-bucket") == "new-bucket"
    assert client.calls == []

    async def forbidden(Bucket):
        raise client_error("403", "HeadBucket", "Forbidden")

    client.head_bucket = forbidden
    with pytest.raises(BackendError) as e:
        await ensure_bucket(client, "not-mine")
    assert e.value.code == "403"
    assert "not-mine" not in client.buckets

    client = FakeS3Client(buckets=())
    client.offline = True
    with pytest.raises(BackendError) as e:
        await ensure_bucket(client, "unreachable")
    assert e.value.code is None
    assert "CreateBucket" not in client.calls
