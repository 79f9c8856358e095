"""
Ownership Guard Module

Binds every entity access to the requesting user. Services call
``ensure_owned`` before reading or mutating anything referenced by id,
including transitively referenced entities.

Author: Timekeeper Development Team
"""

from enum import Enum
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from .database import CLIENTS, PROJECTS, TIME_ENTRIES
from .errors import ForbiddenError, NotFoundError


class EntityKind(str, Enum):
    """
    Kinds of user-owned entities.

    Attributes:
        CLIENT: Billable client
        PROJECT: Project under a client
        TIME_ENTRY: Tracked interval
    """
    CLIENT = "client"
    PROJECT = "project"
    TIME_ENTRY = "time entry"

    @property
    def collection(self) -> str:
        return {
            EntityKind.CLIENT: CLIENTS,
            EntityKind.PROJECT: PROJECTS,
            EntityKind.TIME_ENTRY: TIME_ENTRIES,
        }[self]


def to_object_id(entity_id) -> Optional[ObjectId]:
    """Convert an opaque id string to an ObjectId, ``None`` if malformed."""
    if isinstance(entity_id, ObjectId):
        return entity_id
    if not entity_id:
        return None
    try:
        return ObjectId(entity_id)
    except (InvalidId, TypeError):
        return None


async def ensure_owned(db: AsyncIOMotorDatabase, kind: EntityKind, entity_id, user_id: str) -> dict:
    """
    Load an entity and verify it belongs to the user.

    Args:
        db: Database
        kind: Entity kind
        entity_id: Entity id (string or ObjectId)
        user_id: Requesting user

    Returns:
        dict: The stored document

    Raises:
        NotFoundError: Id is malformed or no such entity exists
        ForbiddenError: Entity belongs to another user
    """
    object_id = to_object_id(entity_id)
    document = await db[kind.collection].find_one({"_id": object_id}) if object_id else None
    if document is None:
        raise NotFoundError(f"missing {kind.value}: {entity_id}")
    if document.get("user_id") != user_id:
        raise ForbiddenError(f"{kind.value} {entity_id} does not belong to user")
    return document


class OwnershipCache:
    """
    Per-call memo of ownership checks.

    Reports validate the same client/project for every entry they scan; this
    keeps the lookups to one per distinct id.
    """

    def __init__(self, db: AsyncIOMotorDatabase, user_id: str):
        self.db = db
        self.user_id = user_id
        self._documents = {}

    async def get(self, kind: EntityKind, entity_id) -> dict:
        key = (kind, str(entity_id))
        if key not in self._documents:
            self._documents[key] = await ensure_owned(self.db, kind, entity_id, self.user_id)
        return self._documents[key]
