"""
Client Service

Queries and mutations for a user's clients. Clients are soft-deleted through
``is_active`` and never removed.

Author: Timekeeper Development Team
"""

from typing import List
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from timekeeper.shared.database import CLIENTS
from timekeeper.shared.ownership import EntityKind, ensure_owned
from .models import Client, ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


async def list_clients(db: AsyncIOMotorDatabase, user_id: str) -> List[Client]:
    """Active clients of the user, in creation order."""
    cursor = db[CLIENTS].find({"user_id": user_id, "is_active": True}).sort("_id", 1)
    documents = await cursor.to_list(length=None)
    return [Client.from_document(document) for document in documents]


async def create_client(db: AsyncIOMotorDatabase, user_id: str, payload: ClientCreate) -> str:
    result = await db[CLIENTS].insert_one({
        "user_id": user_id,
        "name": payload.name,
        "description": payload.description,
        "is_active": True,
    })
    logger.info(f"Created client {result.inserted_id} for user {user_id}")
    return str(result.inserted_id)


async def update_client(db: AsyncIOMotorDatabase, user_id: str, client_id: str, payload: ClientUpdate):
    """
    Apply a partial update to a client.

    Args:
        db: Database
        user_id: Requesting user
        client_id: Client to update
        payload: Fields to change; unset fields are left alone

    Raises:
        NotFoundError: Unknown client
        ForbiddenError: Client owned by another user
    """
    client = await ensure_owned(db, EntityKind.CLIENT, client_id, user_id)
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field == "description"
    }
    if not changes:
        return
    await db[CLIENTS].update_one({"_id": client["_id"]}, {"$set": changes})
    logger.info(f"Updated client {client_id}: {sorted(changes)}")
