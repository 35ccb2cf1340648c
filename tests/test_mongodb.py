"""Connection wiring and the live-only unique name indexes."""
import importlib
from unittest.mock import AsyncMock, MagicMock

import pytest

from drivehub.configs.settings import Settings
from drivehub.core.exceptions import DuplicateNameError
from drivehub.databases.mongodb import MongoDB
from drivehub.models import DOCUMENT_MODELS
from drivehub.models.folder import Folder
from tests.conftest import OWNER
from tests.test_hierarchy_store import file_meta

# the package re-exports the ``mongodb`` instance under the module's name
mongodb_module = importlib.import_module("drivehub.databases.mongodb")


class TestConnect:

    async def test_uses_the_settings_it_is_given(self, monkeypatch):
        client = MagicMock()
        client.admin.command = AsyncMock()
        client.__getitem__.return_value = "reports_db"
        make_client = MagicMock(return_value=client)
        init_beanie = AsyncMock()
        monkeypatch.setattr(mongodb_module, "AsyncIOMotorClient", make_client)
        monkeypatch.setattr(mongodb_module, "init_beanie", init_beanie)

        settings = Settings(MONGO_HOST="mongo.internal", MONGO_PORT=27018, MONGO_DB="reports")
        await MongoDB().connect(settings, document_models=DOCUMENT_MODELS)

        assert make_client.call_args.args[0] == "mongodb://mongo.internal:27018"
        client.__getitem__.assert_called_once_with("reports")
        init_beanie.assert_awaited_once_with(database="reports_db", document_models=DOCUMENT_MODELS)


@pytest.fixture()
async def indexed_store(store):
    await MongoDB().ensure_indexes()
    return store


class TestUniqueIndexes:

    async def test_folder_race_ends_in_duplicate_name(self, indexed_store):
        await indexed_store.create_folder(OWNER, None, "Docs")
        # both requests passed the sibling lookup before either inserted
        indexed_store.folders.find_by_name_key = AsyncMock(return_value=None)

        with pytest.raises(DuplicateNameError) as exc_info:
            await indexed_store.create_folder(OWNER, None, "DOCS")

        assert exc_info.value.status_code == 409
        assert await Folder.find({"owner_id": OWNER}).count() == 1

    async def test_rename_race_ends_in_duplicate_name(self, indexed_store):
        await indexed_store.create_folder(OWNER, None, "Taken")
        folder = await indexed_store.create_folder(OWNER, None, "Free")
        indexed_store.folders.find_by_name_key = AsyncMock(return_value=None)

        with pytest.raises(DuplicateNameError):
            await indexed_store.rename_folder(OWNER, folder.id, "taken")

    async def test_deleted_folder_name_is_free_again(self, indexed_store):
        first = await indexed_store.create_folder(OWNER, None, "Docs")
        await indexed_store.delete_folder(OWNER, first.id)
        indexed_store.folders.find_by_name_key = AsyncMock(return_value=None)

        again = await indexed_store.create_folder(OWNER, None, "Docs")

        assert again.id != first.id

    async def test_file_race_ends_in_duplicate_name(self, indexed_store):
        await indexed_store.create_file(OWNER, None, file_meta("a.txt"))
        indexed_store.files.find_by_original_name = AsyncMock(return_value=None)

        with pytest.raises(DuplicateNameError):
            await indexed_store.create_file(OWNER, None, file_meta("a.txt"))

    async def test_same_name_in_another_folder_is_allowed(self, indexed_store):
        folder = await indexed_store.create_folder(OWNER, None, "Docs")
        await indexed_store.create_file(OWNER, None, file_meta("a.txt"))

        inside = await indexed_store.create_file(OWNER, folder.id, file_meta("a.txt"))

        assert inside.folder_id == folder.id
