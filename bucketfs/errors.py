"""
Errors raised by bucketfs.

Note that two negative outcomes are not errors: a missing path is a False from `exists`,
and a folder that is not empty is a False from `delete`.
"""


class InvalidPath(ValueError):
    pass


class BackendError(Exception):
    """The object store failed. The original botocore exception is kept as __cause__"""

    def __init__(self, message: str, key: str | None = None, code: str | None = None):
        super().__init__(message)
        self.key = key
        self.code = code


class ObjectNotFound(BackendError):
    pass
