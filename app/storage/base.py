"""Abstract storage backend."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Protocol

from app.schemas.storage import FileStatistics, StoredFileRecord


class ClientKeyGate(Protocol):
    """Anything that can tell whether an opaque client key is valid and active."""

    async def is_authorized(self, key: str) -> bool: ...


class StorageBackend(ABC):
    """Interface for per-client file storage."""

    @abstractmethod
    async def save(
        self,
        client_id: str,
        original_name: str,
        content: bytes,
        mime_type: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> StoredFileRecord:
        """
        Store content under a freshly generated name in the client's namespace,
        inside the owner subdirectory when one is given.
        The returned record is derived from the stored file alone, so it matches
        what `list` and `info` report later; `mime_type` is advisory.
        """
        ...

    @abstractmethod
    async def list(self, client_id: str) -> list[StoredFileRecord]:
        """All files of a client, flat and owner-scoped. Empty for unknown clients."""
        ...

    @abstractmethod
    async def fetch_path(self, client_id: str, reference: str) -> Path:
        """Physical path for `stored` or `owner/stored`."""
        ...

    @abstractmethod
    async def info(self, client_id: str, reference: str) -> StoredFileRecord:
        ...

    @abstractmethod
    async def delete(self, client_id: str, reference: str) -> None:
        ...

    @abstractmethod
    async def statistics(self, client_id: str) -> FileStatistics:
        ...
