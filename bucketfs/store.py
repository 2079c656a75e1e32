"""
A hierarchical file system on top of a flat object store.

Folders are keys ending in '/', the root is ''. Creating a folder writes an empty placeholder
object at the folder key, so that empty folders can be listed and deleted.
All paths given to and returned from a PathStore are relative to its base folder.
"""

import logging

from pydantic import BaseModel, Field

from bucketfs import paths
from bucketfs.config import StoreConfig
from bucketfs.errors import InvalidPath
from bucketfs.objectstorage.s3bucket import S3Backend


class Listing(BaseModel):
    """The child names of a folder, and a marker to get the next page (None if this was the last page)"""

    folders: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    marker: str | None = None


class PathStore:
    """
    Filesystem facade over an S3Backend.

    The store holds no state besides its (immutable) configuration, so a single instance
    can be used for any number of concurrent operations.
    Deleting a folder first checks that it is empty and then deletes it. This is not atomic:
    if another writer adds to the folder in between, the new object is left without a placeholder.
    Callers that need strict guarantees should coordinate writers themselves (e.g. a lock per folder).
    """

    def __init__(self, backend: S3Backend, config: StoreConfig):
        self.backend = backend
        self.config = config

    @property
    def base_folder(self) -> str:
        return self.config.base_folder

    def _key(self, path: str) -> str:
        return self.base_folder + paths.check_path(path)

    @staticmethod
    def parent(path: str) -> str:
        return paths.parent(path)

    @staticmethod
    def name(path: str) -> str:
        return paths.name(path)

    async def exists(self, path: str) -> bool:
        """
        Does an object exist at this path? A missing object is False, any other failure raises BackendError.
        Folders only exist if they have a placeholder (i.e. were created with create_folder). The root always exists.
        """
        if paths.check_path(path) == "":
            return True
        return await self.backend.head_exists(self._key(path))

    async def list(self, path: str = "", marker: str | None = None) -> Listing:
        """
        List the child folders and files of this folder, up to page_size entries.
        If the result has a marker, call list again with that marker to get the next page.
        """
        if not paths.is_folder(path):
            raise InvalidPath(f"Cannot list {path!r}: not a folder")
        prefix = self._key(path)
        page = await self.backend.list_by_prefix(
            prefix, delimiter=paths.DELIMITER, marker=marker, page_size=self.config.page_size
        )

        listing = Listing(marker=page.marker)
        for sub_prefix in page.prefixes:
            if sub_prefix == prefix:
                continue
            folder = sub_prefix[len(prefix) :].rstrip(paths.DELIMITER)
            if folder:
                listing.folders.append(folder)
        for key in page.keys:
            # the placeholder of the folder itself has an empty name
            file = key[len(prefix) :]
            if file:
                listing.files.append(file)
        logging.debug(
            f"Listed {path!r}: {len(listing.folders)} folders, {len(listing.files)} files, more={bool(listing.marker)}"
        )
        return listing

    async def create_file(
        self, parent: str, name: str, content_type: str | None = None, data: bytes | str = b""
    ) -> str:
        """Create a file in the parent folder, and return its path. An existing file is overwritten."""
        path = paths.child_path(parent, name)
        await self.backend.put_object(self._key(path), _encode(data), content_type=content_type)
        logging.debug(f"Created file {path!r}")
        return path

    async def create_folder(self, parent: str, name: str) -> str:
        """Create a folder (placeholder) in the parent folder, and return its path, ending in '/'"""
        path = paths.child_path(parent, name, folder=True)
        await self.backend.put_object(self._key(path), b"")
        logging.debug(f"Created folder {path!r}")
        return path

    async def delete(self, path: str) -> bool:
        """
        Delete the file or folder at the path.
        Folders are only deleted if they contain nothing but their own placeholder; otherwise
        nothing is deleted and False is returned.
        """
        if paths.check_path(path) == "":
            raise InvalidPath("Cannot delete the root folder")
        key = self._key(path)
        if paths.is_folder(path):
            page = await self.backend.list_by_prefix(key, delimiter=paths.DELIMITER, page_size=2)
            if page.prefixes or page.keys != [key]:
                logging.debug(f"Not deleting {path!r}: folder is not empty or has no placeholder")
                return False
        await self.backend.delete_object(key)
        logging.debug(f"Deleted {path!r}")
        return True

    async def load(self, path: str, binary: bool = False) -> str | bytes:
        """
        Return the contents of the file, as text (UTF-8) or, if binary is True, as bytes.
        Content that is not valid UTF-8 raises UnicodeDecodeError (a ValueError) unless binary is True.
        """
        if paths.is_folder(path):
            raise InvalidPath(f"Cannot load {path!r}: not a file")
        data = await self.backend.get_object(self._key(path))
        if binary:
            return data
        return data.decode("utf-8")

    async def save(self, path: str, data: bytes | str, content_type: str | None = None) -> None:
        """Write data to the file at the path, replacing any existing content"""
        if paths.is_folder(path):
            raise InvalidPath(f"Cannot save to {path!r}: not a file")
        await self.backend.put_object(self._key(path), _encode(data), content_type=content_type)


def _encode(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return data
