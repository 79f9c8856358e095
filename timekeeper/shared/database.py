"""
Database Module

This module manages MongoDB database connections, collections and indexes
for the application.

Features:
- Connection management
- Collection access
- Index creation
- Database initialization
- Lifecycle management

Data Model:
- Clients
- Projects
- Time entries
- Timers (per-user running entry pointer)

Security:
- TLS with certifi CA bundle
- Connection pooling
- Retry logic

Dependencies:
- Motor for async MongoDB
- PyMongo for index models
- FastAPI for lifecycle
- certifi for SSL

Author: Timekeeper Development Team
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel
from fastapi import FastAPI
from contextlib import asynccontextmanager
import asyncio
import logging
import certifi

from . import config

logger = logging.getLogger(__name__)

# Collection Names
CLIENTS = "clients"
PROJECTS = "projects"
TIME_ENTRIES = "time_entries"
TIMERS = "timers"

# MongoDB Connection Settings
MONGO_SETTINGS = {
    "serverSelectionTimeoutMS": config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
    "connectTimeoutMS": 20000,
    "maxPoolSize": config.MONGO_MAX_POOL_SIZE,
    "retryWrites": True,
}
if config.MONGO_TLS:
    MONGO_SETTINGS.update({"tls": True, "tlsCAFile": certifi.where()})

async_client = AsyncIOMotorClient(config.MONGODB_URL, **MONGO_SETTINGS)
db = async_client[config.DB_NAME]

# Secondary indexes, keyed by collection
INDEXES = {
    CLIENTS: [
        IndexModel([("user_id", ASCENDING), ("is_active", ASCENDING)], name="user_active"),
    ],
    PROJECTS: [
        IndexModel([("user_id", ASCENDING), ("is_active", ASCENDING)], name="user_active"),
        IndexModel([("user_id", ASCENDING), ("client_id", ASCENDING)], name="user_client"),
    ],
    TIME_ENTRIES: [
        IndexModel([("user_id", ASCENDING), ("date", ASCENDING)], name="user_date"),
        IndexModel(
            [("user_id", ASCENDING), ("client_id", ASCENDING), ("date", ASCENDING)],
            name="user_client_date",
        ),
        IndexModel(
            [("user_id", ASCENDING), ("project_id", ASCENDING), ("date", ASCENDING)],
            name="user_project_date",
        ),
    ],
}


def get_db() -> AsyncIOMotorDatabase:
    """FastAPI dependency returning the application database."""
    return db


async def ensure_indexes(database: AsyncIOMotorDatabase):
    """
    Create the secondary indexes used by queries and reports.

    Args:
        database: Target database

    Notes:
        - Idempotent, safe on every startup
        - Timers are keyed by user id in _id, no extra index needed
    """
    for collection_name, indexes in INDEXES.items():
        await database[collection_name].create_indexes(indexes)
        logger.info(f"Ensured {len(indexes)} index(es) on {collection_name}")


async def init_db():
    """
    Initialize database connection.

    Returns:
        bool: Connection status

    Notes:
        - Retries connection
        - Validates ping
    """
    retry_count = 3
    retry_delay = 5  # seconds

    for attempt in range(retry_count):
        try:
            logger.info(f"Database initialization attempt {attempt + 1}/{retry_count}...")
            await async_client.admin.command("ping")
            logger.info("MongoDB ping successful")
            return True
        except Exception as e:
            logger.warning(f"Database connection attempt {attempt + 1} failed: {e}")
            if attempt < retry_count - 1:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
            else:
                logger.error("All connection attempts failed")
                return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage database lifecycle.

    Args:
        app: FastAPI application

    Yields:
        None
    """
    logger.info("Starting database initialization...")
    success = await init_db()
    if not success:
        raise RuntimeError("Failed to initialize database")
    await ensure_indexes(db)
    logger.info("Database initialization complete")

    yield

    logger.info("Shutting down database connections...")
    async_client.close()
    logger.info("Database connections closed")


__all__ = [
    "async_client",
    "db",
    "get_db",
    "ensure_indexes",
    "init_db",
    "lifespan",
    "CLIENTS",
    "PROJECTS",
    "TIME_ENTRIES",
    "TIMERS",
]
