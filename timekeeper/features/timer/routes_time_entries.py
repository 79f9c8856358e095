"""
Time Entry Routes

This module exposes the timer over HTTP.

API Endpoints:
------------
GET /api/time-entries/current
- Running entry with client and project, or null

POST /api/time-entries/start
- Start tracking; any running entry is stopped first

POST /api/time-entries/{entry_id}/stop
- Stop a running entry (409 if already stopped)

PATCH /api/time-entries/{entry_id}
- Change or clear the description

Security:
--------
- Bearer token required
- Every entry, client and project id is ownership-checked

Author: Timekeeper Development Team
"""

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional
import logging

from timekeeper.shared.auth import get_current_user_id
from timekeeper.shared.database import get_db
from timekeeper.shared.errors import TimekeeperError
from .models import CurrentTimeEntry, TimeEntryStart, TimeEntryUpdate
from .timer_service import TimerService

router = APIRouter(
    prefix="/time-entries",
    tags=["time-entries"]
)
logger = logging.getLogger(__name__)


def get_timer_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> TimerService:
    return TimerService(db)


@router.get("/current", response_model=Optional[CurrentTimeEntry])
async def get_current_time_entry(
    user_id: str = Depends(get_current_user_id),
    timer: TimerService = Depends(get_timer_service)
):
    """
    Retrieve the running time entry.

    Returns:
        Optional[CurrentTimeEntry]: Running entry joined with its client and
        project, null when no timer is running
    """
    try:
        return await timer.get_current(user_id)
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error fetching current entry: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/start")
async def start_time_entry(
    payload: TimeEntryStart,
    user_id: str = Depends(get_current_user_id),
    timer: TimerService = Depends(get_timer_service)
):
    """
    Start a new time entry.

    Args:
        payload (TimeEntryStart): Client, project and description

    Returns:
        dict: ``{"id": entry_id}``

    Notes:
        - Never fails because a timer is running; the running entry is
          stopped at the new entry's start time
        - Each call creates a new entry
    """
    try:
        entry_id = await timer.start(user_id, payload.client_id, payload.project_id, payload.description)
        return {"id": entry_id}
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error starting entry: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{entry_id}/stop")
async def stop_time_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    timer: TimerService = Depends(get_timer_service)
):
    try:
        await timer.stop(user_id, entry_id)
        return {"status": "success"}
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error stopping entry {entry_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{entry_id}")
async def update_time_entry(
    entry_id: str,
    payload: TimeEntryUpdate,
    user_id: str = Depends(get_current_user_id),
    timer: TimerService = Depends(get_timer_service)
):
    try:
        await timer.update_description(user_id, entry_id, payload.description)
        return {"status": "success"}
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error updating entry {entry_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
