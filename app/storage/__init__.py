# Storage engine

from app.storage.base import ClientKeyGate, StorageBackend
from app.storage.errors import (
    InvalidArgument,
    NotFound,
    StorageError,
    StorageFault,
    Unauthorized,
)
from app.storage.local_storage import LocalStorage

__all__ = [
    "ClientKeyGate",
    "InvalidArgument",
    "LocalStorage",
    "NotFound",
    "StorageBackend",
    "StorageError",
    "StorageFault",
    "Unauthorized",
]
