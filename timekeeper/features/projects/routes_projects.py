"""
Project Routes - API Endpoints for Project Management

API Endpoints:
------------
GET /api/projects?client_id=
- List active projects, optionally for one client

POST /api/projects
- Create a project under an owned client

PATCH /api/projects/{project_id}
- Partially update a project, optionally moving it to another owned client

Author: Timekeeper Development Team
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional
import logging

from timekeeper.shared.auth import get_current_user_id
from timekeeper.shared.database import get_db
from timekeeper.shared.errors import TimekeeperError
from . import service
from .models import Project, ProjectCreate, ProjectUpdate

router = APIRouter(
    prefix="/projects",
    tags=["projects"]
)
logger = logging.getLogger(__name__)


@router.get("", response_model=List[Project])
async def get_projects(
    client_id: Optional[str] = Query(None, description="Only projects of this client"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        return await service.list_projects(db, user_id, client_id)
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error fetching projects: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("")
async def create_project(
    payload: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Create a project.

    Args:
        payload (ProjectCreate): Parent client, name and description

    Returns:
        dict: ``{"id": project_id}``
    """
    try:
        project_id = await service.create_project(db, user_id, payload)
        return {"id": project_id}
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error creating project: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        await service.update_project(db, user_id, project_id, payload)
        return {"status": "success"}
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error updating project {project_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
