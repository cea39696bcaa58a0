from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from app.config.setting import settings
import logging

logger = logging.getLogger(__name__)

RECORDS_COLLECTION = "dairy_records"
CUSTOMERS_COLLECTION = "customers"


async def ensure_indexes(db):
    # Customer identity is the exact name
    await db[CUSTOMERS_COLLECTION].create_index([("name", ASCENDING)], unique=True)
    await db[RECORDS_COLLECTION].create_index([("date", DESCENDING), ("created_at", DESCENDING)])


class MongoDB:
    def __init__(self, uri: str, db_name: str):
        self.uri = uri
        self.client = None
        self.db = None
        self.db_name = db_name

    async def init_db(self):
        # Motor connects lazily; the first command opens the pool
        self.client = AsyncIOMotorClient(self.uri)
        self.db = self.client[self.db_name]
        logger.info(f"Using MongoDB database '{self.db_name}'")

    async def ensure_indexes(self):
        if self.db is None:
            raise Exception("MongoDB not connected")
        await ensure_indexes(self.db)

    def close(self):
        if self.client is not None:
            self.client.close()


mongodb = MongoDB(uri=settings.mongo_uri, db_name=settings.mongo_db_name)
