"""File endpoints: upload, listing, rename, move, delete, download."""
from starlette.datastructures import UploadFile

from tests.conftest import MB


async def upload(client, headers, name="report.pdf", content=b"%PDF-1.4", mime="application/pdf", folder_id=None):
    data = {"folderId": folder_id} if folder_id else {}
    return await client.post(
        "/api/files",
        files={"file": (name, content, mime)},
        data=data,
        headers=headers,
    )


class TestUpload:

    async def test_upload_returns_201(self, client, auth_headers):
        resp = await upload(client, auth_headers, content=b"x" * (2 * MB))

        assert resp.status_code == 201
        file = resp.json()["data"]["file"]
        assert file["original_name"] == "report.pdf"
        assert file["size"] == 2 * MB
        assert file["url"] == f"/api/files/{file['id']}/download"

    async def test_same_name_twice_returns_409(self, client, auth_headers):
        first = (await upload(client, auth_headers)).json()["data"]["file"]
        resp = await upload(client, auth_headers)

        assert resp.status_code == 409
        assert resp.json()["message"] == "A file with this name already exists in this location"

        listing = await client.get("/api/files", headers=auth_headers)
        assert [f["id"] for f in listing.json()["data"]["files"]] == [first["id"]]

    async def test_too_large_returns_413(self, client, auth_headers, blob_store, monkeypatch):
        reads = []
        read = UploadFile.read

        async def recording_read(self, *args, **kwargs):
            reads.append(self.filename)
            return await read(self, *args, **kwargs)

        monkeypatch.setattr(UploadFile, "read", recording_read)

        resp = await upload(client, auth_headers, content=b"x" * (5 * MB))

        assert resp.status_code == 413
        assert reads == []
        assert blob_store.upload_calls == []

    async def test_disallowed_type_returns_400(self, client, auth_headers):
        resp = await upload(client, auth_headers, name="run.sh", content=b"echo", mime="application/x-sh")
        assert resp.status_code == 400

    async def test_upload_into_folder(self, client, auth_headers):
        folder = (await client.post("/api/folders", json={"name": "Docs"}, headers=auth_headers)).json()["data"]["folder"]

        resp = await upload(client, auth_headers, folder_id=folder["id"])
        assert resp.status_code == 201
        assert resp.json()["data"]["file"]["folder_id"] == folder["id"]

        root = await client.get("/api/files", headers=auth_headers)
        inside = await client.get("/api/files", params={"folderId": folder["id"]}, headers=auth_headers)
        assert root.json()["data"]["files"] == []
        assert len(inside.json()["data"]["files"]) == 1


class TestManageFiles:

    async def test_rename(self, client, auth_headers):
        file = (await upload(client, auth_headers)).json()["data"]["file"]

        resp = await client.put(f"/api/files/{file['id']}", json={"originalName": "final.pdf"}, headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json()["data"]["file"]["original_name"] == "final.pdf"

    async def test_rename_to_empty_returns_400(self, client, auth_headers):
        file = (await upload(client, auth_headers)).json()["data"]["file"]

        resp = await client.put(f"/api/files/{file['id']}", json={"originalName": ""}, headers=auth_headers)
        assert resp.status_code == 400

        get_resp = await client.get(f"/api/files/{file['id']}", headers=auth_headers)
        assert get_resp.json()["data"]["file"]["original_name"] == "report.pdf"

    async def test_move(self, client, auth_headers):
        folder = (await client.post("/api/folders", json={"name": "Docs"}, headers=auth_headers)).json()["data"]["folder"]
        file = (await upload(client, auth_headers)).json()["data"]["file"]

        resp = await client.put(f"/api/files/{file['id']}/move", json={"folderId": folder["id"]}, headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json()["data"]["file"]["folder_id"] == folder["id"]

    async def test_delete(self, client, auth_headers):
        file = (await upload(client, auth_headers)).json()["data"]["file"]

        resp = await client.delete(f"/api/files/{file['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert (await client.get(f"/api/files/{file['id']}", headers=auth_headers)).status_code == 404

    async def test_unknown_id_returns_404(self, client, auth_headers):
        resp = await client.get("/api/files/not-an-id", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["message"] == "File not found"


class TestDownload:

    async def test_download_redirects_to_attachment_url(self, client, auth_headers):
        file = (await upload(client, auth_headers)).json()["data"]["file"]

        resp = await client.get(f"/api/files/{file['id']}/download", headers=auth_headers)

        assert resp.status_code == 307
        assert resp.headers["location"].endswith("disposition=attachment")

    async def test_preview_redirects_to_inline_url(self, client, auth_headers):
        file = (await upload(client, auth_headers)).json()["data"]["file"]

        resp = await client.get(f"/api/files/{file['id']}/preview", headers=auth_headers)

        assert resp.status_code == 307
        assert resp.headers["location"].endswith("disposition=inline")

    async def test_cookie_auth_works_for_download(self, client, auth_headers):
        # the login in auth_headers left the session cookie on the client
        file = (await upload(client, auth_headers)).json()["data"]["file"]

        resp = await client.get(f"/api/files/{file['id']}/download")
        assert resp.status_code == 307
