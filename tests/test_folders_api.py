"""Folder endpoints and the error envelope."""
from tests.conftest import register_and_login


async def create_folder(client, headers, name, parent_id=None):
    return await client.post("/api/folders", json={"name": name, "parentId": parent_id}, headers=headers)


class TestFolderCrud:

    async def test_create_and_get(self, client, auth_headers):
        resp = await create_folder(client, auth_headers, "Docs")
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        folder = body["data"]["folder"]
        assert folder["name"] == "Docs"
        assert folder["parent_id"] is None

        get_resp = await client.get(f"/api/folders/{folder['id']}", headers=auth_headers)
        assert get_resp.status_code == 200
        assert get_resp.json()["data"]["folder"]["children_count"] == 0

    async def test_duplicate_name_different_case_returns_409(self, client, auth_headers):
        await create_folder(client, auth_headers, "Docs")
        resp = await create_folder(client, auth_headers, "docs")

        assert resp.status_code == 409
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "A folder with this name already exists in this location"
        assert body["errors"][0]["code"] == "duplicate_name"

    async def test_invalid_name_returns_400(self, client, auth_headers):
        resp = await create_folder(client, auth_headers, "bad/name")
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "name"

    async def test_missing_parent_returns_404(self, client, auth_headers):
        resp = await create_folder(client, auth_headers, "Child", "64b7f0c2a1b2c3d4e5f60718")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Parent folder not found"

    async def test_list_with_counts_and_sorting(self, client, auth_headers):
        parent = (await create_folder(client, auth_headers, "file10")).json()["data"]["folder"]
        await create_folder(client, auth_headers, "file2")
        await create_folder(client, auth_headers, "inner", parent["id"])

        resp = await client.get("/api/folders", params={"sortBy": "name", "order": "asc"}, headers=auth_headers)

        assert resp.status_code == 200
        folders = resp.json()["data"]["folders"]
        assert [f["name"] for f in folders] == ["file2", "file10"]
        assert folders[1]["children_count"] == 1

        inner = await client.get("/api/folders", params={"parentId": parent["id"]}, headers=auth_headers)
        assert [f["name"] for f in inner.json()["data"]["folders"]] == ["inner"]

    async def test_bad_sort_key_returns_422(self, client, auth_headers):
        resp = await client.get("/api/folders", params={"sortBy": "colour"}, headers=auth_headers)
        assert resp.status_code == 422
        assert resp.json()["success"] is False

    async def test_rename(self, client, auth_headers):
        folder = (await create_folder(client, auth_headers, "Old")).json()["data"]["folder"]
        resp = await client.put(f"/api/folders/{folder['id']}", json={"name": "New"}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["folder"]["name"] == "New"

    async def test_move_into_descendant_returns_400(self, client, auth_headers):
        a = (await create_folder(client, auth_headers, "A")).json()["data"]["folder"]
        b = (await create_folder(client, auth_headers, "B", a["id"])).json()["data"]["folder"]

        resp = await client.put(f"/api/folders/{a['id']}/move", json={"parentId": b["id"]}, headers=auth_headers)
        assert resp.status_code == 400

        moved = await client.put(f"/api/folders/{b['id']}/move", json={"parentId": None}, headers=auth_headers)
        assert moved.status_code == 200
        assert moved.json()["data"]["folder"]["parent_id"] is None

    async def test_breadcrumbs(self, client, auth_headers):
        a = (await create_folder(client, auth_headers, "A")).json()["data"]["folder"]
        b = (await create_folder(client, auth_headers, "B", a["id"])).json()["data"]["folder"]

        resp = await client.get(f"/api/folders/{b['id']}/path", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json()["data"]["path"] == [
            {"id": None, "name": "My Drive"},
            {"id": a["id"], "name": "A"},
            {"id": b["id"], "name": "B"},
        ]

    async def test_delete_cascades(self, client, auth_headers):
        a = (await create_folder(client, auth_headers, "A")).json()["data"]["folder"]
        b = (await create_folder(client, auth_headers, "B", a["id"])).json()["data"]["folder"]

        resp = await client.delete(f"/api/folders/{a['id']}", headers=auth_headers)
        assert resp.status_code == 200

        listing = await client.get("/api/folders", headers=auth_headers)
        assert listing.json()["data"]["folders"] == []
        assert (await client.get(f"/api/folders/{b['id']}", headers=auth_headers)).status_code == 404
        assert (await client.delete(f"/api/folders/{a['id']}", headers=auth_headers)).status_code == 404


class TestIsolation:

    async def test_other_user_gets_404(self, client, auth_headers):
        folder = (await create_folder(client, auth_headers, "Private")).json()["data"]["folder"]
        other = await register_and_login(client, "mallory@example.com")

        resp = await client.get(f"/api/folders/{folder['id']}", headers=other)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Folder not found"

        listing = await client.get("/api/folders", headers=other)
        assert listing.json()["data"]["folders"] == []


class TestAuthRequired:

    async def test_no_token_returns_401(self, client):
        resp = await client.get("/api/folders")
        assert resp.status_code == 401
        assert resp.json()["success"] is False

    async def test_garbage_token_returns_401(self, client):
        resp = await client.get("/api/folders", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
