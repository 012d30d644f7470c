"""MongoDB database connection using Motor (async driver)."""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from clock_slayer.config import settings

logger = logging.getLogger(__name__)

# (collection, key, kwargs) created at startup; creation is additive only
INDEXES = [
    ("time_entries", [("start_time", 1)], {}),
    ("time_entries", [("project_id", 1)], {}),
    ("mileage_entries", [("date", 1)], {}),
    ("mileage_entries", [("project_id", 1), ("date", 1)], {}),
]


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def ensure_indexes(self) -> None:
        """Create the indexes the list and report queries rely on."""
        for collection_name, keys, options in INDEXES:
            await self.get_collection(collection_name).create_index(keys, **options)
        logger.info("Database indexes synchronized")

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        if self.db is None:
            raise RuntimeError("Database not connected")
        return self.db[name]


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db
