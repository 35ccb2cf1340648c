"""Shared fixtures.

Beanie runs on an in-memory mongomock-motor client, so no MongoDB is
needed. File bytes go to :class:`InMemoryBlobStore` instead of MinIO.
The HTTP tests drive the real app through httpx without running its
lifespan; services are swapped in through dependency overrides.
"""
from typing import Dict, List, Tuple

import pytest
from beanie import init_beanie
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from drivehub.configs.settings import Settings
from drivehub.configs.setup import create_app
from drivehub.core.exceptions import StorageError
from drivehub.models import DOCUMENT_MODELS
from drivehub.services.auth_service import AuthService
from drivehub.services.blob_store import BlobRef, BlobStore
from drivehub.services.hierarchy_service import HierarchyService, UploadPolicy
from drivehub.services.hierarchy_store import HierarchyStore
from drivehub.utils.request import get_auth_service, get_hierarchy_service

OWNER = "user-1"
OTHER_OWNER = "user-2"
MB = 1024 * 1024


class InMemoryBlobStore(BlobStore):
    def __init__(self, fail_uploads: int = 0):
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.upload_calls: List[str] = []
        self.url_calls: List[Tuple[str, str, str]] = []
        self.fail_uploads = fail_uploads

    async def upload(self, key: str, data: bytes, content_type: str) -> BlobRef:
        self.upload_calls.append(key)
        if self.fail_uploads:
            self.fail_uploads -= 1
            raise StorageError("Failed to store file content")
        self.objects[key] = (data, content_type)
        return BlobRef(object_id=key, url=f"memory://blobs/{key}")

    async def get_url(self, object_id: str, filename: str, disposition: str) -> str:
        self.url_calls.append((object_id, filename, disposition))
        return f"https://blobs.test/{object_id}?disposition={disposition}"

    async def delete(self, object_id: str) -> None:
        self.objects.pop(object_id, None)


@pytest.fixture()
async def beanie_db():
    client = AsyncMongoMockClient()
    await init_beanie(database=client["drivehub_test"], document_models=DOCUMENT_MODELS)
    yield client["drivehub_test"]


@pytest.fixture()
def store(beanie_db):
    return HierarchyStore(max_depth=32)


@pytest.fixture()
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture()
def policy():
    return UploadPolicy(
        max_file_size=4 * MB,
        allowed_types=("application/pdf", "text/plain", "image/png"),
    )


@pytest.fixture()
def service(store, blob_store, policy):
    return HierarchyService(store, blob_store, policy)


@pytest.fixture()
def auth_service(beanie_db):
    # 4 is the lowest cost bcrypt accepts, keeps the suite fast
    return AuthService(jwt_secret="test-secret", bcrypt_rounds=4)


@pytest.fixture()
def app(service, auth_service):
    application = create_app(Settings(APP_ENV="dev"))
    application.dependency_overrides[get_hierarchy_service] = lambda: service
    application.dependency_overrides[get_auth_service] = lambda: auth_service
    return application


@pytest.fixture()
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def register_and_login(client: AsyncClient, email: str = "alice@example.com") -> Dict[str, str]:
    """Register a user and return an Authorization header for them"""
    await client.post("/api/auth/register", json={"email": email, "password": "Secret123", "name": "Alice"})
    resp = await client.post("/api/auth/login", json={"email": email, "password": "Secret123"})
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


@pytest.fixture()
async def auth_headers(client):
    return await register_and_login(client)
