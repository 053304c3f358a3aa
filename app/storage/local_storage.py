"""Local filesystem storage."""

import logging
import os
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import aiofiles
import aiofiles.os

from app.schemas.storage import FileStatistics, StoredFileRecord
from app.storage.base import ClientKeyGate, StorageBackend
from app.storage.errors import NotFound, StorageFault, Unauthorized
from app.storage.mime import category_for, detect_mime_type
from app.storage.naming import generate_stored_name, parse_original_name
from app.storage.paths import PathResolver
from app.storage.statistics import compute_statistics

logger = logging.getLogger(__name__)


def _url_path(*segments: str) -> str:
    return "/".join(quote(s, safe="") for s in segments)


class LocalStorage(StorageBackend):
    """
    Store files on local disk under root/<client>/[<owner>/]<stored name>.

    There is no metadata index: records are rebuilt from names and stat() on
    every read. Nothing is locked, so a list racing a delete may or may not
    include the deleted file.
    """

    def __init__(
        self,
        root: Path,
        static_prefix: str = "storage-data",
        download_prefix: str = "/storage/file",
        key_gate: Optional[ClientKeyGate] = None,
    ) -> None:
        self.resolver = PathResolver(root)
        self.root = self.resolver.root
        self.static_prefix = static_prefix.strip("/")
        self.download_prefix = download_prefix.rstrip("/")
        self.key_gate = key_gate

    def _record(self, client_id: str, path: Path) -> StoredFileRecord:
        """Rebuild a record from the stored name and stat(); nothing else is consulted."""
        stat = path.stat()
        relative = self.resolver.relative_path(client_id, path)
        owner = relative.split("/", 1)[0] if "/" in relative else None
        stored_name = path.name
        original_name = parse_original_name(stored_name)
        mime_type = detect_mime_type(original_name)
        rel_segments = relative.split("/")
        return StoredFileRecord(
            storedName=stored_name,
            originalName=original_name,
            size=stat.st_size,
            mimeType=mime_type,
            category=category_for(mime_type),
            owner=owner,
            relativePath=relative,
            uploadedAt=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            downloadUrl=f"{self.download_prefix}/{_url_path(*rel_segments)}",
            publicUrl=f"/{self.static_prefix}/{_url_path(client_id, *rel_segments)}",
        )

    async def save(
        self,
        client_id: str,
        original_name: str,
        content: bytes,
        mime_type: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> StoredFileRecord:
        if self.key_gate is not None and not await self.key_gate.is_authorized(client_id):
            raise Unauthorized("Invalid or revoked client key")
        directory = self.resolver.target_dir(client_id, owner)
        stored_name = generate_stored_name(original_name)
        path = directory / stored_name
        tmp_path = directory / f".upload-{secrets.token_hex(8)}.part"
        try:
            await aiofiles.os.makedirs(directory, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(content)
            await aiofiles.os.replace(tmp_path, path)
            record = self._record(client_id, path)
        except OSError as e:
            logger.exception("Failed to store %s for client namespace: %s", stored_name, e.strerror)
            if tmp_path.exists():
                tmp_path.unlink()
            raise StorageFault("Failed to store file") from e
        if mime_type and mime_type.split(";")[0].strip().lower() != record.mimeType:
            logger.debug(
                "Declared type %s for %s differs from %s",
                mime_type, record.relativePath, record.mimeType,
            )
        logger.info("Stored %s (%d bytes)", record.relativePath, record.size)
        return record

    def _scan(
        self, client_id: str, base: Path, directory: Path, depth: int
    ) -> list[StoredFileRecord]:
        records: list[StoredFileRecord] = []
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            if entry.name.startswith("."):
                continue
            path = Path(entry.path)
            try:
                if not path.resolve().is_relative_to(base):
                    # Symlink leaving the namespace; resolve() rejects it too
                    logger.warning("Skipping entry outside client namespace: %s", entry.name)
                    continue
                if entry.is_file():
                    records.append(self._record(client_id, path))
                elif entry.is_dir() and depth == 0:
                    records.extend(self._scan(client_id, base, path, depth + 1))
            except FileNotFoundError:
                # Deleted between scandir and stat
                continue
        return records

    async def list(self, client_id: str) -> list[StoredFileRecord]:
        base = self.resolver.client_dir(client_id)
        if not base.is_dir():
            return []
        try:
            return self._scan(client_id, base.resolve(), base, 0)
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.exception("Failed to list client namespace: %s", e.strerror)
            raise StorageFault("Failed to list files") from e

    async def fetch_path(self, client_id: str, reference: str) -> Path:
        return self.resolver.resolve(client_id, reference)

    async def info(self, client_id: str, reference: str) -> StoredFileRecord:
        path = self.resolver.resolve(client_id, reference)
        try:
            return self._record(client_id, path)
        except FileNotFoundError as e:
            raise NotFound("File not found") from e
        except OSError as e:
            logger.exception("Failed to stat %s: %s", reference, e.strerror)
            raise StorageFault("Failed to read file info") from e

    async def delete(self, client_id: str, reference: str) -> None:
        path = self.resolver.resolve(client_id, reference)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise NotFound("File not found") from e
        except OSError as e:
            logger.exception("Failed to delete %s: %s", reference, e.strerror)
            raise StorageFault("Failed to delete file") from e
        logger.info("Deleted %s", reference)

    async def statistics(self, client_id: str) -> FileStatistics:
        return compute_statistics(await self.list(client_id))
