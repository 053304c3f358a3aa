"""Shared fixtures: a storage engine and an HTTP client over a temp directory."""

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.storage.local_storage import LocalStorage


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / "storage-data"


@pytest.fixture
def storage(storage_root):
    return LocalStorage(root=storage_root, static_prefix="storage-data")


@pytest.fixture
def app(tmp_path, storage_root):
    return create_app(
        storage_root=storage_root,
        static_prefix="storage-data",
        client_keys_file=tmp_path / "client-keys.json",
        client_header_key="x-client-key",
        max_upload_size=1024,
        admin_token="",
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def client_key(client):
    """An active key issued through the admin API."""
    resp = client.post("/admin/client-keys", json={"name": "acme"})
    assert resp.status_code == 201
    return resp.json()["key"]
