"""
Client Routes - API Endpoints for Client Management

This module provides FastAPI routes for managing a user's clients.

API Endpoints:
------------
GET /api/clients
- List the user's active clients

POST /api/clients
- Create a client, returns its id

PATCH /api/clients/{client_id}
- Partially update name, description or is_active
- Setting is_active=false soft-deletes the client

Security:
--------
- Bearer token required
- Every client id is ownership-checked

Dependencies:
-----------
- FastAPI: Web framework
- MongoDB Motor: Database operations
- Shared auth: Identity resolution
- Logging: Operation tracking

Author: Timekeeper Development Team
"""

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List
import logging

from timekeeper.shared.auth import get_current_user_id
from timekeeper.shared.database import get_db
from timekeeper.shared.errors import TimekeeperError
from . import service
from .models import Client, ClientCreate, ClientUpdate

router = APIRouter(
    prefix="/clients",
    tags=["clients"]
)
logger = logging.getLogger(__name__)


@router.get("", response_model=List[Client])
async def get_clients(
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Retrieve the user's active clients.

    Returns:
        List[Client]: Active clients in creation order
    """
    try:
        return await service.list_clients(db, user_id)
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error fetching clients: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("")
async def create_client(
    payload: ClientCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        client_id = await service.create_client(db, user_id, payload)
        return {"id": client_id}
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error creating client: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{client_id}")
async def update_client(
    client_id: str,
    payload: ClientUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Update a client.

    Args:
        client_id (str): Client to update
        payload (ClientUpdate): Fields to change

    Raises:
        NotFoundError: Unknown client (404)
        ForbiddenError: Client of another user (403)
    """
    try:
        await service.update_client(db, user_id, client_id, payload)
        return {"status": "success"}
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error updating client {client_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
