"""
Report Aggregator Module

This module builds time reports from a user's closed time entries.

Features:
- Daily client/project totals
- Weekly client totals
- Custom range reports with per-entry detail
- Client and project filters

Aggregation:
- One pass over the matching closed entries, ordered by start time
- A grand total plus per-client and per-project subtotals; every entry
  counts exactly once at each level
- Groups keep first-seen order
- All state is local to the call

Integrity:
- Every client and project referenced by a scanned entry goes through the
  ownership guard; a failure aborts the report instead of dropping the entry

Author: Timekeeper Development Team
"""

from datetime import date
from typing import Callable, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from timekeeper.shared.clock import now_ms, parse_day, utc_day, week_bounds
from timekeeper.shared.database import TIME_ENTRIES
from timekeeper.shared.ownership import EntityKind, OwnershipCache
from timekeeper.features.clients.models import Client
from timekeeper.features.projects.models import Project
from .models import (
    ClientProjectEntries,
    ClientProjectTotals,
    ClientTotal,
    CustomReport,
    DailyReport,
    ProjectEntries,
    ProjectTotal,
    ReportEntry,
    WeeklyReport,
)

logger = logging.getLogger(__name__)


def closed_entries_query(user_id: str, start_date: str, end_date: str, client_id=None, project_id=None) -> dict:
    """MongoDB filter for a user's closed entries within an inclusive day range."""
    query = {
        "user_id": user_id,
        "end_time": {"$ne": None},
        "date": {"$gte": start_date, "$lte": end_date},
    }
    if client_id is not None:
        query["client_id"] = client_id
    if project_id is not None:
        query["project_id"] = project_id
    return query


async def aggregate_entries(
    db: AsyncIOMotorDatabase,
    owners: OwnershipCache,
    query: dict,
    include_entries: bool = False
):
    """
    Scan matching entries once and total them per client and project.

    Args:
        db: Database
        owners: Ownership cache bound to the requesting user
        query: Entry filter (see closed_entries_query)
        include_entries: Keep per-entry detail under each project

    Returns:
        tuple: (total_time, clients) where clients maps client id to
        ``{"client", "total", "projects"}`` and projects maps project id to
        ``{"project", "total", "entries"}``

    Raises:
        NotFoundError, ForbiddenError: Entry references a client or project
        that fails the ownership guard
    """
    total_time = 0
    clients = {}

    async for entry in db[TIME_ENTRIES].find(query).sort("start_time", 1):
        duration = entry.get("duration") or 0
        client = await owners.get(EntityKind.CLIENT, entry["client_id"])
        project = await owners.get(EntityKind.PROJECT, entry["project_id"])

        total_time += duration

        client_key = str(entry["client_id"])
        if client_key not in clients:
            clients[client_key] = {
                "client": Client.from_document(client),
                "total": 0,
                "projects": {},
            }
        client_group = clients[client_key]
        client_group["total"] += duration

        project_key = str(entry["project_id"])
        if project_key not in client_group["projects"]:
            client_group["projects"][project_key] = {
                "project": Project.from_document(project),
                "total": 0,
                "entries": [],
            }
        project_group = client_group["projects"][project_key]
        project_group["total"] += duration

        if include_entries:
            project_group["entries"].append(entry)

    return total_time, clients


def _today(clock: Callable[[], int]) -> str:
    return utc_day(clock())


async def daily_report(
    db: AsyncIOMotorDatabase,
    user_id: str,
    day: Optional[str] = None,
    clock: Callable[[], int] = now_ms
) -> DailyReport:
    """
    Client -> project totals for one day.

    Args:
        db: Database
        user_id: Requesting user
        day: YYYY-MM-DD, defaults to today (UTC)
        clock: Time source for the default day
    """
    target = parse_day(day).isoformat() if day else _today(clock)
    owners = OwnershipCache(db, user_id)

    total_time, clients = await aggregate_entries(
        db, owners, closed_entries_query(user_id, target, target)
    )

    return DailyReport(
        date=target,
        total_time=total_time,
        clients=[
            ClientProjectTotals(
                client=group["client"],
                total=group["total"],
                projects=[
                    ProjectTotal(project=project["project"], total=project["total"])
                    for project in group["projects"].values()
                ],
            )
            for group in clients.values()
        ],
    )


async def weekly_report(
    db: AsyncIOMotorDatabase,
    user_id: str,
    day: Optional[str] = None,
    clock: Callable[[], int] = now_ms
) -> WeeklyReport:
    """
    Per-client totals for the Sunday-to-Saturday week containing ``day``.
    """
    reference = parse_day(day) if day else date.fromisoformat(_today(clock))
    start, end = week_bounds(reference)
    start_date, end_date = start.isoformat(), end.isoformat()
    owners = OwnershipCache(db, user_id)

    total_time, clients = await aggregate_entries(
        db, owners, closed_entries_query(user_id, start_date, end_date)
    )

    return WeeklyReport(
        start_date=start_date,
        end_date=end_date,
        total_time=total_time,
        clients=[
            ClientTotal(client=group["client"], total=group["total"])
            for group in clients.values()
        ],
    )


def _newest_first(entries: list) -> list:
    return sorted(entries, key=lambda entry: (entry["date"], entry["start_time"]), reverse=True)


async def custom_report(
    db: AsyncIOMotorDatabase,
    user_id: str,
    start_date: str,
    end_date: str,
    client_id: Optional[str] = None,
    project_id: Optional[str] = None
) -> CustomReport:
    """
    Client -> project -> entries report over an explicit day range.

    Args:
        db: Database
        user_id: Requesting user
        start_date: First day, inclusive (YYYY-MM-DD)
        end_date: Last day, inclusive (YYYY-MM-DD)
        client_id: Only entries of this client
        project_id: Only entries of this project

    Returns:
        CustomReport: Empty when start_date is after end_date

    Raises:
        BadRequestError: Malformed date
        NotFoundError, ForbiddenError: Filter or referenced entity fails the
        ownership guard
    """
    start_date = parse_day(start_date, "start_date").isoformat()
    end_date = parse_day(end_date, "end_date").isoformat()
    owners = OwnershipCache(db, user_id)

    client_filter = project_filter = None
    if client_id:
        client_filter = (await owners.get(EntityKind.CLIENT, client_id))["_id"]
    if project_id:
        project_filter = (await owners.get(EntityKind.PROJECT, project_id))["_id"]

    total_time, clients = await aggregate_entries(
        db,
        owners,
        closed_entries_query(user_id, start_date, end_date, client_filter, project_filter),
        include_entries=True,
    )
    logger.info(f"Custom report {start_date}..{end_date} for {user_id}: {len(clients)} client(s)")

    return CustomReport(
        start_date=start_date,
        end_date=end_date,
        total_time=total_time,
        clients=[
            ClientProjectEntries(
                client=group["client"],
                total=group["total"],
                projects=[
                    ProjectEntries(
                        project=project["project"],
                        total=project["total"],
                        entries=[
                            ReportEntry(
                                id=str(entry["_id"]),
                                date=entry["date"],
                                duration=entry.get("duration") or 0,
                                description=entry.get("description"),
                            )
                            for entry in _newest_first(project["entries"])
                        ],
                    )
                    for project in group["projects"].values()
                ],
            )
            for group in clients.values()
        ],
    )
