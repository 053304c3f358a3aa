"""FastAPI dependencies exposing the per-app storage engine and key store."""

from fastapi import Request

from app.services.client_keys import ClientKeyStore
from app.storage.base import StorageBackend


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


def get_key_store(request: Request) -> ClientKeyStore:
    return request.app.state.key_store
