"""Client key store: a JSON file listing every issued key."""

import asyncio
import json
import logging
import os
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter, ValidationError

from app.schemas.client_key import ClientKeyCreate, ClientKeyRecord, ClientKeyUpdate

logger = logging.getLogger(__name__)

KEY_BYTES = 32  # 64 hex chars

_records_adapter = TypeAdapter(list[ClientKeyRecord])


def generate_key() -> str:
    return secrets.token_hex(KEY_BYTES)


class ClientKeyStore:
    """
    CRUD over client keys plus the `is_authorized` check used by the storage layer.
    Read-modify-write cycles are serialized per store instance; the file is
    replaced atomically so readers never see a half-written list.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def _read_all(self) -> list[ClientKeyRecord]:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return []
        try:
            return _records_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error("Client key file %s is unreadable, treating as empty: %s", self.path, e)
            return []

    async def _write_all(self, records: list[ClientKeyRecord]) -> None:
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")
        payload = json.dumps([r.model_dump(mode="json") for r in records], indent=2)
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(payload)
        await aiofiles.os.replace(tmp_path, self.path)

    async def find_all(self) -> list[ClientKeyRecord]:
        return await self._read_all()

    async def find_one(self, key_id: int) -> Optional[ClientKeyRecord]:
        return next((r for r in await self._read_all() if r.id == key_id), None)

    async def create(self, body: ClientKeyCreate) -> ClientKeyRecord:
        async with self._lock:
            records = await self._read_all()
            now = datetime.now(timezone.utc)
            record = ClientKeyRecord(
                id=max((r.id for r in records), default=0) + 1,
                key=generate_key(),
                name=body.name,
                isActive=True,
                revokedAt=None,
                note=body.note,
                createdAt=now,
                updatedAt=now,
            )
            # Newest first
            records.insert(0, record)
            await self._write_all(records)
        logger.info("Created client key %d (%s)", record.id, record.name)
        return record

    async def _modify(self, key_id: int, changes: dict) -> Optional[ClientKeyRecord]:
        async with self._lock:
            records = await self._read_all()
            for idx, record in enumerate(records):
                if record.id == key_id:
                    changes["updatedAt"] = datetime.now(timezone.utc)
                    records[idx] = record.model_copy(update=changes)
                    await self._write_all(records)
                    return records[idx]
        return None

    async def update(self, key_id: int, body: ClientKeyUpdate) -> Optional[ClientKeyRecord]:
        changes = body.model_dump(exclude_unset=True)
        if "isActive" in changes:
            changes["revokedAt"] = None if changes["isActive"] else datetime.now(timezone.utc)
        return await self._modify(key_id, changes)

    async def revoke(self, key_id: int) -> Optional[ClientKeyRecord]:
        record = await self._modify(
            key_id, {"isActive": False, "revokedAt": datetime.now(timezone.utc)}
        )
        if record:
            logger.info("Revoked client key %d", key_id)
        return record

    async def rotate(self, key_id: int) -> Optional[ClientKeyRecord]:
        record = await self._modify(
            key_id, {"key": generate_key(), "isActive": True, "revokedAt": None}
        )
        if record:
            logger.info("Rotated client key %d", key_id)
        return record

    async def remove(self, key_id: int) -> bool:
        async with self._lock:
            records = await self._read_all()
            remaining = [r for r in records if r.id != key_id]
            if len(remaining) == len(records):
                return False
            await self._write_all(remaining)
        logger.info("Removed client key %d", key_id)
        return True

    async def is_authorized(self, key: str) -> bool:
        """True when `key` belongs to an active record."""
        if not key:
            return False
        candidate = key.encode("utf-8")
        records = await self._read_all()
        return any(
            r.isActive and secrets.compare_digest(r.key.encode("utf-8"), candidate)
            for r in records
        )
