"""MongoDB connection for the ``users`` and ``logs`` tables."""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from periodlog.config import settings
from periodlog.services.store import TableStore


_client = None


async def db_startup():
    """Connect to MongoDB and make sure the table indexes exist."""
    global _client
    _client = AsyncIOMotorClient(settings.mongodb_url, serverSelectionTimeoutMS=5000)
    await TableStore(get_database()).ensure_indexes()


async def db_shutdown():
    """Close MongoDB connection."""
    global _client
    if _client:
        _client.close()
        _client = None


def get_database() -> AsyncIOMotorDatabase:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(settings.mongodb_url, serverSelectionTimeoutMS=5000)
    return _client[settings.mongodb_db_name]
