"""bucketfs: a folder and file abstraction over S3-compatible object storage"""

from bucketfs.config import StoreConfig
from bucketfs.errors import BackendError, InvalidPath, ObjectNotFound
from bucketfs.objectstorage.s3bucket import S3Backend
from bucketfs.paths import name, parent
from bucketfs.store import Listing, PathStore

__all__ = [
    "BackendError",
    "InvalidPath",
    "Listing",
    "ObjectNotFound",
    "PathStore",
    "S3Backend",
    "StoreConfig",
    "name",
    "parent",
]
