"""
Pure path helpers.

All folders end in the delimiter, except for the root, which is the empty string.
Files never end in the delimiter. Whether a path is a folder is decided by its syntax only.
"""

from bucketfs.errors import InvalidPath

DELIMITER = "/"


def is_folder(path: str) -> bool:
    return path == "" or path.endswith(DELIMITER)


def check_path(path: str) -> str:
    if not isinstance(path, str):
        raise InvalidPath(f"Path should be a string, not {type(path).__name__}")
    if path.startswith(DELIMITER):
        raise InvalidPath(f"Path {path!r} should be relative (no leading {DELIMITER!r})")
    if DELIMITER * 2 in path:
        raise InvalidPath(f"Path {path!r} contains an empty segment")
    return path


def parent(path: str) -> str:
    """
    Return the folder containing this path, ending in the delimiter (or the root, '').
    The parent of the root is undefined.
    """
    check_path(path)
    if path == "":
        raise InvalidPath("The root folder has no parent")
    if path.endswith(DELIMITER):
        return path[: path.rfind(DELIMITER, 0, len(path) - 1) + 1]
    return path[: path.rfind(DELIMITER) + 1]


def name(path: str) -> str:
    """
    Return the last segment of the path, without delimiters.
    The root has no name.
    """
    check_path(path)
    if path == "":
        raise InvalidPath("The root folder has no name")
    if path.endswith(DELIMITER):
        return path[path.rfind(DELIMITER, 0, len(path) - 1) + 1 : -1]
    return path[path.rfind(DELIMITER) + 1 :]


def folder_path(path: str) -> str:
    """Make sure a folder argument ends in the delimiter. The root stays the root."""
    check_path(path)
    if path == "" or path.endswith(DELIMITER):
        return path
    return path + DELIMITER


def child_path(parent_folder: str, child: str, folder: bool = False) -> str:
    """
    Join a parent folder and a single segment name.
    For folders the name may already carry its trailing delimiter.
    """
    segment = child[:-1] if folder and child.endswith(DELIMITER) else child
    if not segment:
        raise InvalidPath("Name cannot be empty")
    if DELIMITER in segment:
        raise InvalidPath(f"Name {child!r} cannot contain {DELIMITER!r}, create the parent folders one at a time")
    path = folder_path(parent_folder) + segment
    return path + DELIMITER if folder else path


def normalize_base_folder(base: str | None) -> str:
    """Strip leading delimiters and add the trailing one. An empty base folder is the bucket root."""
    base = (base or "").lstrip(DELIMITER)
    if base == "":
        return ""
    return check_path(folder_path(base))
