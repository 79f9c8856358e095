"""
Project Service

Queries and mutations for a user's projects.

Author: Timekeeper Development Team
"""

from typing import List, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from timekeeper.shared.database import PROJECTS
from timekeeper.shared.ownership import EntityKind, ensure_owned
from .models import Project, ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


async def list_projects(
    db: AsyncIOMotorDatabase,
    user_id: str,
    client_id: Optional[str] = None
) -> List[Project]:
    """
    Active projects of the user, optionally limited to one client.

    Raises:
        NotFoundError: Unknown client filter
        ForbiddenError: Client filter owned by another user
    """
    query = {"user_id": user_id, "is_active": True}
    if client_id:
        client = await ensure_owned(db, EntityKind.CLIENT, client_id, user_id)
        query["client_id"] = client["_id"]

    documents = await db[PROJECTS].find(query).sort("_id", 1).to_list(length=None)
    return [Project.from_document(document) for document in documents]


async def create_project(db: AsyncIOMotorDatabase, user_id: str, payload: ProjectCreate) -> str:
    client = await ensure_owned(db, EntityKind.CLIENT, payload.client_id, user_id)
    result = await db[PROJECTS].insert_one({
        "user_id": user_id,
        "client_id": client["_id"],
        "name": payload.name,
        "description": payload.description,
        "is_active": True,
    })
    logger.info(f"Created project {result.inserted_id} under client {client['_id']}")
    return str(result.inserted_id)


async def update_project(db: AsyncIOMotorDatabase, user_id: str, project_id: str, payload: ProjectUpdate):
    """
    Apply a partial update to a project.

    Args:
        db: Database
        user_id: Requesting user
        project_id: Project to update
        payload: Fields to change

    Raises:
        NotFoundError: Unknown project or client
        ForbiddenError: Project or new client owned by another user
    """
    project = await ensure_owned(db, EntityKind.PROJECT, project_id, user_id)

    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True, exclude={"client_id"}).items()
        if value is not None or field == "description"
    }
    if payload.client_id != str(project["client_id"]):
        client = await ensure_owned(db, EntityKind.CLIENT, payload.client_id, user_id)
        changes["client_id"] = client["_id"]

    if not changes:
        return
    await db[PROJECTS].update_one({"_id": project["_id"]}, {"$set": changes})
    logger.info(f"Updated project {project_id}: {sorted(changes)}")
