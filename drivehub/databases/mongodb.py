from typing import List, Optional, Type
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie, Document
from pymongo import ASCENDING
from pymongo.errors import ServerSelectionTimeoutError

from drivehub.configs.settings import MongoSettings
from drivehub.models.file import File
from drivehub.models.folder import Folder
from drivehub.utils.logging import get_logger

logger = get_logger(__name__)

LIVE_ONLY = {"is_deleted": False}


class MongoDB:
    """MongoDB connection manager using Beanie ODM"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database = None

    async def connect(self, settings: MongoSettings, document_models: List[Type[Document]] = None):
        """Connect to the server and database named in ``settings`` and initialize Beanie"""
        try:
            self.client = AsyncIOMotorClient(
                settings.MONGO_URL,
                serverSelectionTimeoutMS=8000,
                connectTimeoutMS=8000,
                socketTimeoutMS=10000,
                maxPoolSize=50,
                minPoolSize=0,
            )

            await self.client.admin.command('ping')

            self.database = self.client[settings.MONGO_DB]

            if document_models:
                await init_beanie(
                    database=self.database,
                    document_models=document_models
                )
                logger.info(
                    f"Beanie initialized with {len(document_models)} document models")

            return True

        except ServerSelectionTimeoutError as e:
            logger.error(
                f"Failed to connect to MongoDB (timeout) at {settings.MONGO_HOST}:{settings.MONGO_PORT}: {e}")
            raise ConnectionError("Cannot connect to MongoDB server")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {str(e)}")
            raise

    async def ensure_indexes(self):
        """Create the sibling lookup indexes and the live-only unique name indexes"""
        folders = Folder.get_motor_collection()
        await folders.create_index(
            [("owner_id", ASCENDING), ("parent_id", ASCENDING), ("is_deleted", ASCENDING)],
            name="folder_scope",
        )
        await folders.create_index(
            [("owner_id", ASCENDING), ("parent_id", ASCENDING), ("name_key", ASCENDING)],
            name="folder_unique_live_name",
            unique=True,
            partialFilterExpression=LIVE_ONLY,
        )

        files = File.get_motor_collection()
        await files.create_index(
            [("owner_id", ASCENDING), ("folder_id", ASCENDING), ("is_deleted", ASCENDING)],
            name="file_scope",
        )
        await files.create_index(
            [("owner_id", ASCENDING), ("folder_id", ASCENDING), ("original_name", ASCENDING)],
            name="file_unique_live_name",
            unique=True,
            partialFilterExpression=LIVE_ONLY,
        )
        logger.info("MongoDB hierarchy indexes ensured")

    async def disconnect(self):
        """Disconnect from MongoDB"""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")


mongodb = MongoDB()
