import pytest

from bucketfs.errors import InvalidPath
from bucketfs.paths import child_path, folder_path, is_folder, name, normalize_base_folder, parent

FOLDERS = ["a/", "a/b/", "a/b/c/", "with space/x-y/"]
FILES = ["f.txt", "a/f.txt", "a/b/c.tar.gz", "a/b/noextension"]


def test_parent_name_folders():
    for path in FOLDERS:
        assert parent(path) + name(path) + "/" == path
    assert parent("a/") == ""
    assert name("a/") == "a"
    assert parent("a/b/c/") == "a/b/"
    assert name("a/b/c/") == "c"


def test_parent_name_files():
    for path in FILES:
        assert parent(path) + name(path) == path
    assert parent("f.txt") == ""
    assert name("f.txt") == "f.txt"
    assert parent("a/b/c.tar.gz") == "a/b/"
    assert name("a/b/c.tar.gz") == "c.tar.gz"


def test_root_has_no_name_or_parent():
    with pytest.raises(InvalidPath):
        name("")
    with pytest.raises(InvalidPath):
        parent("")


def test_malformed_paths():
    for path in ["/a/", "/f.txt", "a//b", "//"]:
        with pytest.raises(InvalidPath):
            name(path)
        with pytest.raises(InvalidPath):
            parent(path)


def test_is_folder():
    assert is_folder("")
    assert is_folder("a/")
    assert not is_folder("a")
    assert not is_folder("a/b.txt")


def test_folder_path():
    assert folder_path("") == ""
    assert folder_path("a") == "a/"
    assert folder_path("a/") == "a/"


def test_child_path():
    assert child_path("", "f.txt") == "f.txt"
    assert child_path("a", "f.txt") == "a/f.txt"
    assert child_path("a/", "b", folder=True) == "a/b/"
    assert child_path("a/", "b/", folder=True) == "a/b/"
    for bad in ["", "x/y", "x/"]:
        with pytest.raises(InvalidPath):
            child_path("a/", bad)
    with pytest.raises(InvalidPath):
        child_path("a/", "/", folder=True)


def test_normalize_base_folder():
    assert normalize_base_folder(None) == ""
    assert normalize_base_folder("") == ""
    assert normalize_base_folder("/") == ""
    assert normalize_base_folder("tenant-1") == "tenant-1/"
    assert normalize_base_folder("/tenant-1/") == "tenant-1/"
    assert normalize_base_folder("a/b") == "a/b/"
