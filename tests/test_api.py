"""
HTTP tests for the storage and client key admin APIs
"""
import pytest
from fastapi.testclient import TestClient

from app.main import create_app


def _upload(
    client, key, name="report.pdf", content=b"%PDF-", content_type="application/pdf",
    owner=None, path="/storage/upload",
):
    data = {"owner": owner} if owner else None
    return client.post(
        path,
        headers={"x-client-key": key},
        files={"file": (name, content, content_type)},
        data=data,
    )


class TestClientResolution:

    def test_missing_key(self, client):
        resp = client.get("/storage/list")
        assert resp.status_code == 400
        assert "x-client-key" in resp.json()["detail"]

    def test_unknown_key(self, client):
        resp = client.get("/storage/list", headers={"x-client-key": "nope"})
        assert resp.status_code == 401

    def test_query_param(self, client, client_key):
        resp = client.get("/storage/list", params={"client": client_key})
        assert resp.status_code == 200
        assert resp.json() == []

    def test_revoked_key(self, client, client_key):
        key_id = client.get("/admin/client-keys").json()[0]["id"]
        client.post(f"/admin/client-keys/{key_id}/revoke")
        resp = client.get("/storage/list", headers={"x-client-key": client_key})
        assert resp.status_code == 401


class TestStorageApi:

    def test_upload_list_info_download_delete(self, client, client_key):
        headers = {"x-client-key": client_key}
        resp = _upload(client, client_key)
        assert resp.status_code == 201
        record = resp.json()
        assert record["originalName"] == "report.pdf"
        assert record["size"] == 5
        assert record["category"] == "PDF"
        stored = record["storedName"]

        listed = client.get("/storage/list", headers=headers).json()
        assert [r["storedName"] for r in listed] == [stored]

        info = client.get(f"/storage/file-info/{stored}", headers=headers).json()
        assert info["relativePath"] == stored
        assert info["size"] == 5

        download = client.get(f"/storage/file/{stored}", headers=headers)
        assert download.status_code == 200
        assert download.content == b"%PDF-"
        assert "report.pdf" in download.headers["content-disposition"]

        resp = client.delete(f"/storage/file/{stored}", headers=headers)
        assert resp.json() == {"success": True}
        assert client.get(f"/storage/file/{stored}", headers=headers).status_code == 404

    def test_upload_with_owner(self, client, client_key):
        headers = {"x-client-key": client_key}
        record = _upload(client, client_key, owner="u42", path="/storage/upload-form-data").json()
        assert record["relativePath"] == f"u42/{record['storedName']}"
        info = client.get(f"/storage/file-info/u42/{record['storedName']}", headers=headers).json()
        assert info["relativePath"] == f"u42/{record['storedName']}"
        by_name = client.get(f"/storage/file-info/{record['storedName']}", headers=headers).json()
        assert by_name["owner"] == "u42"

    def test_public_url_serves_file(self, client, client_key):
        record = _upload(client, client_key, owner="u42").json()
        resp = client.get(record["publicUrl"])
        assert resp.status_code == 200
        assert resp.content == b"%PDF-"

    def test_public_route_blocks_traversal(self, client):
        assert client.get("/storage-data/%2e%2e/client-keys.json").status_code in (403, 404)

    def test_missing_file(self, client, client_key):
        resp = client.get("/storage/file-info/nothing.txt", headers={"x-client-key": client_key})
        assert resp.status_code == 404
        assert resp.json() == {"detail": "File not found"}

    def test_backslash_reference_is_bad_request(self, client, client_key):
        resp = client.get(
            "/storage/file-info/u42/x%5C..%5Csecret", headers={"x-client-key": client_key}
        )
        assert resp.status_code == 400

    def test_too_deep_reference_is_bad_request(self, client, client_key):
        resp = client.get("/storage/file-info/a/b/c.txt", headers={"x-client-key": client_key})
        assert resp.status_code == 400

    def test_invalid_owner(self, client, client_key):
        resp = _upload(client, client_key, owner="..")
        assert resp.status_code == 400

    def test_dot_prefixed_owner_is_bad_request(self, client, client_key):
        headers = {"x-client-key": client_key}
        assert _upload(client, client_key, owner=".u42").status_code == 400
        assert client.get("/storage/list", headers=headers).json() == []

    def test_upload_record_matches_listing(self, client, client_key):
        headers = {"x-client-key": client_key}
        record = _upload(client, client_key, content_type="application/octet-stream").json()
        assert record["category"] == "PDF"
        assert client.get("/storage/list", headers=headers).json() == [record]

    def test_no_file(self, client, client_key):
        resp = client.post("/storage/upload", headers={"x-client-key": client_key})
        assert resp.status_code == 400

    def test_too_large(self, client, client_key):
        resp = _upload(client, client_key, content=b"x" * 2048)
        assert resp.status_code == 413

    def test_statistics(self, client, client_key):
        headers = {"x-client-key": client_key}
        assert client.get("/storage/statistics", headers=headers).json() == {
            "totalFiles": 0,
            "totalSize": 0,
            "fileTypes": {},
            "sizeBreakdown": {},
        }
        _upload(client, client_key)
        _upload(client, client_key, name="pic.png", content=b"png", content_type="image/png", owner="u1")
        stats = client.get("/storage/statistics", headers=headers).json()
        assert stats["totalFiles"] == 2
        assert stats["totalSize"] == 8
        assert stats["fileTypes"]["PDF"]["count"] == 1
        assert stats["fileTypes"]["Images"]["count"] == 1
        assert stats["sizeBreakdown"]["0-1MB"] == 2


class TestClientKeysApi:

    def test_crud(self, client):
        created = client.post("/admin/client-keys", json={"name": "acme", "note": "n"}).json()
        key_id = created["id"]
        assert client.get(f"/admin/client-keys/{key_id}").json()["key"] == created["key"]

        patched = client.patch(f"/admin/client-keys/{key_id}", json={"name": "acme2"}).json()
        assert patched["name"] == "acme2"

        rotated = client.post(f"/admin/client-keys/{key_id}/rotate").json()
        assert rotated["key"] != created["key"]

        assert client.delete(f"/admin/client-keys/{key_id}").status_code == 204
        assert client.get(f"/admin/client-keys/{key_id}").status_code == 404

    def test_unknown_id(self, client):
        assert client.post("/admin/client-keys/42/revoke").status_code == 404
        assert client.delete("/admin/client-keys/42").status_code == 404

    def test_validation(self, client):
        assert client.post("/admin/client-keys", json={}).status_code == 422

    def test_admin_token(self, tmp_path):
        app = create_app(
            storage_root=tmp_path / "root",
            client_keys_file=tmp_path / "keys.json",
            admin_token="s3cret",
        )
        with TestClient(app) as c:
            assert c.get("/admin/client-keys").status_code == 401
            resp = c.get("/admin/client-keys", headers={"Authorization": "Bearer s3cret"})
            assert resp.status_code == 200


class TestHealth:

    @pytest.mark.parametrize("path", ["/", "/health"])
    def test_ok(self, client, path):
        assert client.get(path).status_code == 200
