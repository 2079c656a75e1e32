"""
bucketfs command line interface: browse and edit a bucket as a file system
"""

import argparse
import asyncio
import inspect
import logging
import os
import sys
from pathlib import Path

from bucketfs.config import ENV_PREFIX, get_settings, settings_for_display
from bucketfs.connections import bucketfs_connections, open_store
from bucketfs.errors import BackendError, InvalidPath
from bucketfs.store import PathStore


async def list_folder(store: PathStore, path: str, marker: str | None = None, all_pages: bool = False) -> None:
    """Print one page of the folder, or all pages by following the markers"""
    while True:
        listing = await store.list(path, marker)
        for folder in sorted(listing.folders):
            print(f"{folder}/")
        for file in sorted(listing.files):
            print(file)
        marker = listing.marker
        if marker is None:
            break
        if not all_pages:
            print(f"(more entries, continue with --marker {marker})", file=sys.stderr)
            break


async def ls(args):
    async with bucketfs_connections():
        await list_folder(open_store(), args.path, marker=args.marker, all_pages=args.all)


async def exists(args):
    async with bucketfs_connections():
        found = await open_store().exists(args.path)
    print("yes" if found else "no")
    if not found:
        sys.exit(1)


async def mkdir(args):
    async with bucketfs_connections():
        print(await open_store().create_folder(args.parent, args.name))


async def touch(args):
    async with bucketfs_connections():
        print(await open_store().create_file(args.parent, args.name, content_type=args.content_type))


async def rm(args):
    async with bucketfs_connections():
        deleted = await open_store().delete(args.path)
    if not deleted:
        logging.error(f"Folder {args.path} is not empty (or has no placeholder), not deleting")
        sys.exit(1)


async def cat(args):
    async with bucketfs_connections():
        data = await open_store().load(args.path, binary=args.binary)
    if isinstance(data, bytes):
        sys.stdout.buffer.write(data)
    else:
        print(data, end="")


async def put(args):
    data = Path(args.file).read_bytes()
    async with bucketfs_connections():
        await open_store().save(args.path, data, content_type=args.content_type)
    logging.info(f"Saved {len(data)} bytes to {args.path}")


def show_config(_args):
    for key, value in settings_for_display().items():
        print(f"{key}={value}")


def create_env(args):
    if os.path.exists(".env"):
        print("*** File .env already exists, quitting ***")
        sys.exit(1)

    settings = get_settings()
    with open(".env", "w") as f:
        for fieldname, fieldinfo in type(settings).model_fields.items():
            if fieldname == "env_file":
                continue
            if doc := fieldinfo.description:
                f.write(f"# {doc}\n")
            value = getattr(args, fieldname, None) or getattr(settings, fieldname)
            if value is None or value == "":
                f.write(f"#{ENV_PREFIX}{fieldname}=\n\n")
            else:
                f.write(f"{ENV_PREFIX}{fieldname}={value}\n\n")
    os.chmod(".env", 0o600)
    print("*** Created .env file ***")


def main():
    parser = argparse.ArgumentParser(description=__doc__, prog="python -m bucketfs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="action", title="action", help="Action to perform:", required=True)
    p = subparsers.add_parser("ls", help="List the contents of a folder")
    p.add_argument("path", nargs="?", default="", help="Folder path, ending in '/' (default: the root)")
    p.add_argument("--marker", help="Continue a previous listing")
    p.add_argument("-a", "--all", action="store_true", help="Follow markers until the whole folder is listed")
    p.set_defaults(func=ls)

    p = subparsers.add_parser("exists", help="Check whether a file or folder exists")
    p.add_argument("path")
    p.set_defaults(func=exists)

    p = subparsers.add_parser("mkdir", help="Create a folder")
    p.add_argument("parent", help="Parent folder ('' for the root)")
    p.add_argument("name")
    p.set_defaults(func=mkdir)

    p = subparsers.add_parser("touch", help="Create an empty file")
    p.add_argument("parent", help="Parent folder ('' for the root)")
    p.add_argument("name")
    p.add_argument("-t", "--content-type", dest="content_type")
    p.set_defaults(func=touch)

    p = subparsers.add_parser("rm", help="Delete a file, or an empty folder")
    p.add_argument("path")
    p.set_defaults(func=rm)

    p = subparsers.add_parser("cat", help="Print the contents of a file")
    p.add_argument("path")
    p.add_argument("-b", "--binary", action="store_true", help="Write the raw bytes instead of UTF-8 text")
    p.set_defaults(func=cat)

    p = subparsers.add_parser("put", help="Upload a local file")
    p.add_argument("path", help="Destination file path")
    p.add_argument("file", help="Local file to upload")
    p.add_argument("-t", "--content-type", dest="content_type")
    p.set_defaults(func=put)

    p = subparsers.add_parser("config", help="Show the current settings")
    p.set_defaults(func=show_config)

    p = subparsers.add_parser("create-env", help="Create a .env file with the bucketfs settings")
    p.add_argument("-b", "--bucket", help="The bucket to use")
    p.add_argument("--base-folder", dest="base_folder", help="Folder in the bucket to use as root")
    p.set_defaults(func=create_env)

    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(format="[%(levelname)-7s:%(name)-15s] %(message)s", level=level)
    for name in ("botocore", "aiobotocore"):
        logging.getLogger(name).setLevel(logging.WARNING)

    try:
        if inspect.iscoroutinefunction(args.func):
            asyncio.run(args.func(args))
        else:
            args.func(args)
    except (InvalidPath, BackendError, ValueError) as e:
        logging.error(str(e))
        sys.exit(2)


if __name__ == "__main__":
    main()
