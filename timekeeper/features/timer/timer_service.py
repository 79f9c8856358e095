"""
Timer Service Module

This module implements the per-user timer: starting, stopping and describing
time entries, and reading the running entry.

Features:
- Single running entry per user
- Implicit stop of the running entry on start
- Duration computation
- Ownership checks on every referenced id

Data Model:
- time_entries: one document per tracked interval
- timers: one document per user, ``{_id: user_id, entry_id}``, naming the
  running entry (``entry_id`` is None when idle)

Concurrency:
- Start switches the timer pointer with a compare-and-swap on the user's
  timer document. A concurrent start that wins first shows up as a
  DuplicateKeyError on the upsert; the loser re-reads and retries.
- Closing an entry is a conditional update on ``end_time`` being unset, so
  an entry is closed at most once.
- A start that fails on a store error removes its new entry before the
  error propagates, so the user never holds an open entry the timer does
  not point at.

Dependencies:
- Motor for async MongoDB
- PyMongo for error types

Author: Timekeeper Development Team
"""

from typing import Callable, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from timekeeper.shared import config
from timekeeper.shared.clock import now_ms, utc_day
from timekeeper.shared.database import TIME_ENTRIES, TIMERS
from timekeeper.shared.errors import ConflictError, InvalidStateError
from timekeeper.shared.ownership import EntityKind, ensure_owned
from timekeeper.features.clients.models import Client
from timekeeper.features.projects.models import Project
from .models import CurrentTimeEntry, TimeEntry

logger = logging.getLogger(__name__)


class TimerService:
    """
    Timer state machine for one database.

    Args:
        db: Database holding time entries and timers
        clock: Callable returning epoch milliseconds
        start_attempts: Compare-and-swap attempts before a start gives up
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        clock: Callable[[], int] = now_ms,
        start_attempts: int = config.TIMER_START_ATTEMPTS
    ):
        self.db = db
        self.clock = clock
        self.start_attempts = start_attempts
        self.entries = db[TIME_ENTRIES]
        self.timers = db[TIMERS]

    async def _running_entry_id(self, user_id: str):
        timer = await self.timers.find_one({"_id": user_id})
        return timer.get("entry_id") if timer else None

    async def _close(self, entry: dict, now: int) -> bool:
        """
        Close an open entry.

        Returns:
            bool: False if the entry was already closed
        """
        # Never end before the start, even if app server clocks disagree
        end_time = max(now, entry["start_time"])
        result = await self.entries.update_one(
            {"_id": entry["_id"], "end_time": None},
            {"$set": {"end_time": end_time, "duration": end_time - entry["start_time"]}}
        )
        return result.modified_count == 1

    async def get_current(self, user_id: str) -> Optional[CurrentTimeEntry]:
        """
        Get the user's running entry with its client and project.

        Returns:
            Optional[CurrentTimeEntry]: None when idle
        """
        entry_id = await self._running_entry_id(user_id)
        if entry_id is None:
            return None

        entry = await self.entries.find_one({"_id": entry_id})
        # A concurrent stop closes the entry before clearing the pointer
        if entry is None or entry.get("end_time") is not None:
            return None

        client = await ensure_owned(self.db, EntityKind.CLIENT, entry["client_id"], user_id)
        project = await ensure_owned(self.db, EntityKind.PROJECT, entry["project_id"], user_id)

        return CurrentTimeEntry(
            **TimeEntry.from_document(entry).model_dump(),
            client=Client.from_document(client),
            project=Project.from_document(project),
        )

    async def start(
        self,
        user_id: str,
        client_id: str,
        project_id: str,
        description: Optional[str] = None
    ) -> str:
        """
        Start a new entry, stopping the running one if any.

        Args:
            user_id: Requesting user
            client_id: Client to track
            project_id: Project to track
            description: Optional description

        Returns:
            str: Id of the new running entry

        Raises:
            NotFoundError: Unknown client or project
            ForbiddenError: Client or project owned by another user
            ConflictError: Lost the timer switch to concurrent starts every time
        """
        client = await ensure_owned(self.db, EntityKind.CLIENT, client_id, user_id)
        project = await ensure_owned(self.db, EntityKind.PROJECT, project_id, user_id)

        now = self.clock()
        entry = {
            "user_id": user_id,
            "client_id": client["_id"],
            "project_id": project["_id"],
            "start_time": now,
            "date": utc_day(now),
        }
        if description is not None:
            entry["description"] = description
        result = await self.entries.insert_one(entry)
        entry_id = result.inserted_id

        try:
            for attempt in range(self.start_attempts):
                previous_id = await self._running_entry_id(user_id)
                try:
                    await self.timers.update_one(
                        {"_id": user_id, "entry_id": previous_id},
                        {"$set": {"entry_id": entry_id}},
                        upsert=True
                    )
                except DuplicateKeyError:
                    logger.warning(f"Timer for user {user_id} changed concurrently (attempt {attempt + 1})")
                    continue

                if previous_id is not None:
                    await self._close_displaced(user_id, previous_id, entry_id, now)

                logger.info(f"Started entry {entry_id} for user {user_id}")
                return str(entry_id)
        except Exception:
            logger.exception(f"Error starting entry for user {user_id}, removing entry {entry_id}")
            await self.entries.delete_one({"_id": entry_id})
            raise

        await self.entries.delete_one({"_id": entry_id})
        raise ConflictError("Timer is being changed concurrently, try again")

    async def _close_displaced(self, user_id: str, previous_id, entry_id, now: int):
        """
        Close the entry a start just replaced on the timer.

        The close is retried on store errors. If it never succeeds the timer
        is pointed back at the displaced entry, which stays running, and the
        last error is raised.
        """
        error = None
        for attempt in range(self.start_attempts):
            try:
                previous = await self.entries.find_one({"_id": previous_id})
                if previous is not None and await self._close(previous, now):
                    logger.info(f"Stopped entry {previous_id} while starting {entry_id}")
                return
            except PyMongoError as e:
                logger.warning(f"Error stopping entry {previous_id} (attempt {attempt + 1}): {str(e)}")
                error = e

        await self.timers.update_one(
            {"_id": user_id, "entry_id": entry_id},
            {"$set": {"entry_id": previous_id}}
        )
        raise error

    async def stop(self, user_id: str, entry_id: str):
        """
        Stop a running entry.

        Raises:
            NotFoundError: Unknown entry
            ForbiddenError: Entry owned by another user
            InvalidStateError: Entry already stopped
        """
        entry = await ensure_owned(self.db, EntityKind.TIME_ENTRY, entry_id, user_id)
        if entry.get("end_time") is not None:
            raise InvalidStateError("Time entry is already stopped")

        if not await self._close(entry, self.clock()):
            raise InvalidStateError("Time entry is already stopped")

        await self.timers.update_one(
            {"_id": user_id, "entry_id": entry["_id"]},
            {"$set": {"entry_id": None}}
        )
        logger.info(f"Stopped entry {entry_id} for user {user_id}")

    async def update_description(self, user_id: str, entry_id: str, description: Optional[str] = None):
        entry = await ensure_owned(self.db, EntityKind.TIME_ENTRY, entry_id, user_id)
        if description is None:
            update = {"$unset": {"description": ""}}
        else:
            update = {"$set": {"description": description}}
        await self.entries.update_one({"_id": entry["_id"]}, update)
