"""Admin API for issuing, rotating and revoking client keys."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import require_admin
from app.core.dependencies import get_key_store
from app.schemas.client_key import ClientKeyCreate, ClientKeyRecord, ClientKeyUpdate
from app.services.client_keys import ClientKeyStore

router = APIRouter(
    prefix="/admin/client-keys",
    tags=["client-keys"],
    dependencies=[Depends(require_admin)],
)

KeyStore = Annotated[ClientKeyStore, Depends(get_key_store)]


def _or_404(record: ClientKeyRecord | None) -> ClientKeyRecord:
    if record is None:
        raise HTTPException(status_code=404, detail="Client key not found")
    return record


@router.get("", response_model=list[ClientKeyRecord])
async def list_keys(store: KeyStore) -> list[ClientKeyRecord]:
    """All keys, newest first."""
    return await store.find_all()


@router.post("", response_model=ClientKeyRecord, status_code=201)
async def create_key(body: ClientKeyCreate, store: KeyStore) -> ClientKeyRecord:
    return await store.create(body)


@router.get("/{key_id}", response_model=ClientKeyRecord)
async def get_key(key_id: int, store: KeyStore) -> ClientKeyRecord:
    return _or_404(await store.find_one(key_id))


@router.patch("/{key_id}", response_model=ClientKeyRecord)
async def update_key(key_id: int, body: ClientKeyUpdate, store: KeyStore) -> ClientKeyRecord:
    """Rename, annotate or (de)activate a key."""
    return _or_404(await store.update(key_id, body))


@router.post("/{key_id}/revoke", response_model=ClientKeyRecord)
async def revoke_key(key_id: int, store: KeyStore) -> ClientKeyRecord:
    return _or_404(await store.revoke(key_id))


@router.post("/{key_id}/rotate", response_model=ClientKeyRecord)
async def rotate_key(key_id: int, store: KeyStore) -> ClientKeyRecord:
    """Issue a fresh key value for the record and reactivate it."""
    return _or_404(await store.rotate(key_id))


@router.delete("/{key_id}", status_code=204)
async def delete_key(key_id: int, store: KeyStore) -> None:
    if not await store.remove(key_id):
        raise HTTPException(status_code=404, detail="Client key not found")
