"""
Report Routes

API Endpoints:
------------
GET /api/reports/daily?date=YYYY-MM-DD
- Client -> project totals for one day (default today, UTC)

GET /api/reports/weekly?date=YYYY-MM-DD
- Client totals for the Sunday-Saturday week containing the date

GET /api/reports/custom?start_date=&end_date=&client_id=&project_id=
- Client -> project -> entries over an explicit range

Notes:
- Only stopped entries count; a running timer contributes nothing
- Durations are milliseconds

Author: Timekeeper Development Team
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional
import logging

from timekeeper.shared.auth import get_current_user_id
from timekeeper.shared.database import get_db
from timekeeper.shared.errors import TimekeeperError
from . import aggregator
from .models import CustomReport, DailyReport, WeeklyReport

router = APIRouter(
    prefix="/reports",
    tags=["reports"]
)
logger = logging.getLogger(__name__)


@router.get("/daily", response_model=DailyReport)
async def get_daily_time_report(
    date: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to today"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        return await aggregator.daily_report(db, user_id, date)
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error building daily report: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/weekly", response_model=WeeklyReport)
async def get_weekly_time_report(
    date: Optional[str] = Query(None, description="Any day of the week, defaults to today"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        return await aggregator.weekly_report(db, user_id, date)
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error building weekly report: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/custom", response_model=CustomReport)
async def get_custom_time_report(
    start_date: str = Query(..., description="First day, inclusive"),
    end_date: str = Query(..., description="Last day, inclusive"),
    client_id: Optional[str] = None,
    project_id: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Build a custom time report.

    Args:
        start_date (str): First day, inclusive
        end_date (str): Last day, inclusive
        client_id (Optional[str]): Restrict to one client
        project_id (Optional[str]): Restrict to one project

    Returns:
        CustomReport: Totals with per-entry detail, entries newest first
    """
    try:
        return await aggregator.custom_report(db, user_id, start_date, end_date, client_id, project_id)
    except TimekeeperError:
        raise
    except Exception as e:
        logger.error(f"Error building custom report: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(status_code=500, detail=str(e))
