"""
FastAPI dependency injection for the database and request parameters.

Provides injectable dependencies for:
- MongoDB client lifecycle (pymongo async client)
- Repository instances
- Path identifier validation

All dependencies use FastAPI's dependency injection system and can be
swapped through ``app.dependency_overrides`` in tests.
"""

import structlog
from typing import Optional
from bson import ObjectId
from fastapi import Depends, HTTPException, status
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from api.src.config import get_settings
from api.src.repositories.contact_repo import ContactRepository

logger = structlog.get_logger(__name__)

INVALID_ID_MESSAGE = "Invalid ID format"


# ============================================================================
# DATABASE CLIENT
# ============================================================================

_client: Optional[AsyncMongoClient] = None


async def init_mongo_client() -> AsyncMongoClient:
    """
    Initialize the MongoDB client and verify the server is reachable.

    Should be called during application startup.

    Returns:
        pymongo async client
    """
    global _client

    if _client is not None:
        return _client

    settings = get_settings()
    client: AsyncMongoClient = AsyncMongoClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
        maxPoolSize=settings.mongodb_max_pool_size,
    )

    try:
        await client.admin.command("ping")
    except Exception as e:
        logger.error(
            "mongodb_connection_failed",
            error=str(e),
            url=settings.mongodb_url_redacted
        )
        await client.close()
        raise

    _client = client
    logger.info(
        "mongodb_connected",
        url=settings.mongodb_url_redacted,
        database=get_database().name
    )
    return _client


async def close_mongo_client():
    """
    Close the MongoDB client.

    Should be called during application shutdown.
    """
    global _client

    if _client is not None:
        await _client.close()
        logger.info("mongodb_client_closed")
        _client = None


def get_mongo_client() -> AsyncMongoClient:
    """
    Get the MongoDB client.

    Returns:
        pymongo async client

    Raises:
        RuntimeError: If the client is not initialized
    """
    if _client is None:
        logger.error("mongodb_client_not_initialized")
        raise RuntimeError(
            "MongoDB client not initialized. Call init_mongo_client() during startup."
        )
    return _client


def get_database() -> AsyncDatabase:
    """
    Get the contacts database.

    The database named in the connection URL wins; otherwise the
    configured default is used.

    Returns:
        pymongo async database handle
    """
    settings = get_settings()
    return get_mongo_client().get_default_database(default=settings.mongodb_database)


# ============================================================================
# REPOSITORY DEPENDENCIES
# ============================================================================


def get_contact_repository(
    database: AsyncDatabase = Depends(get_database)
) -> ContactRepository:
    """
    Get contact repository instance.

    Args:
        database: MongoDB database handle

    Returns:
        Contact repository
    """
    return ContactRepository(database)


# ============================================================================
# PATH PARAMETER DEPENDENCIES
# ============================================================================


def get_contact_object_id(contact_id: str) -> ObjectId:
    """
    Validate the ``contact_id`` path parameter.

    Runs before the request body is validated and before any database
    access.

    Args:
        contact_id: Raw path segment

    Returns:
        Parsed ObjectId

    Raises:
        HTTPException: 400 if the value is not a 24-character hex ObjectId
    """
    if not ObjectId.is_valid(contact_id):
        logger.warning("invalid_contact_id_format", contact_id=contact_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_ID_MESSAGE
        )
    return ObjectId(contact_id)
