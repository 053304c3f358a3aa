"""Typed failures raised by the storage layer."""


class StorageError(Exception):
    """Base class for storage failures. `status_code` is the HTTP equivalent."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(StorageError):
    """Malformed or traversal-attempting path, or missing required input."""

    status_code = 400


class NotFound(StorageError):
    status_code = 404


class Unauthorized(StorageError):
    """Client key rejected by the key gate."""

    status_code = 401


class StorageFault(StorageError):
    """Unexpected I/O failure. The message never carries filesystem paths."""

    status_code = 500
