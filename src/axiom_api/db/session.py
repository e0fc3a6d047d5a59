"""MongoDB client lifecycle."""

import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from axiom_api.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

_client: AsyncMongoClient | None = None


def create_client() -> AsyncMongoClient:
    """Create a client with the configured pool limits."""
    return AsyncMongoClient(
        settings.mongodb_uri,
        maxPoolSize=settings.mongodb_max_pool_size,
        minPoolSize=settings.mongodb_min_pool_size,
        maxIdleTimeMS=settings.mongodb_max_idle_time_ms,
        tz_aware=True,
    )


async def init_db() -> AsyncDatabase:
    """Connect the shared client and return the application database."""
    global _client
    if _client is None:
        _client = create_client()
        await _client.aconnect()
        logger.info(f"Connected to MongoDB database '{settings.mongodb_db}'")
    return _client[settings.mongodb_db]


async def close_db() -> None:
    """Close the shared client."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None


def get_db() -> AsyncDatabase:
    """Get the application database. ``init_db`` must have run first."""
    if _client is None:
        raise RuntimeError("Database client is not initialized")
    return _client[settings.mongodb_db]
