# =============================================================================
# MongoDB Client & Collection Access
# =============================================================================
#
# The store connection is an explicit client handle, not an import-time
# global:
#   1. app/main.py's lifespan calls `create_mongo_client()` on startup
#   2. The client is kept on `app.state.mongo_client`
#   3. Repositories receive the collection through `get_proposal_collection()`
#   4. The lifespan calls `close_mongo_client()` on shutdown
#
# `AsyncMongoClient` keeps its own connection pool and is safe to share
# across concurrent requests. Construction does not block on the network;
# the first operation (or `ping_mongo()`) opens the connections.
#
# tz_aware=True makes the driver return timezone-aware UTC datetimes, so
# `createdAt` / `updatedAt` serialize with an explicit offset.
# =============================================================================

import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from app.config import DEFAULT_DATABASE, Settings

logger = logging.getLogger(__name__)


def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    """Build the process-wide MongoDB client from settings."""
    return AsyncMongoClient(
        settings.mongodb_uri,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
    )


async def ping_mongo(client: AsyncMongoClient) -> bool:
    """
    Round-trip a `ping` command.

    Returns False instead of raising: an unreachable store at startup is
    logged, and requests fail individually with a 500 until it comes back.
    """
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.error("MongoDB connection error: %s", e)
        return False
    return True


async def close_mongo_client(client: AsyncMongoClient) -> None:
    await client.close()
    logger.info("MongoDB client closed")


def get_proposal_collection(
    client: AsyncMongoClient,
    settings: Settings,
) -> AsyncCollection:
    """
    Resolve the proposals collection.

    The database comes from `mongodb_database` if set, otherwise from the
    path of `mongodb_uri`, otherwise the default database name.
    """
    if settings.mongodb_database:
        database = client[settings.mongodb_database]
    else:
        database = client.get_default_database(DEFAULT_DATABASE)
    return database[settings.mongodb_collection]
