"""
Time Entry Data Models Module

This module defines the data models for the timer: tracked time entries,
the running entry joined with its client and project, and request bodies.

Data Models:
- Time entries (running and closed)
- Current entry view
- Start/update requests

Notes:
- Times are epoch milliseconds
- ``date`` is the UTC calendar day of ``start_time``
- ``end_time`` and ``duration`` are both absent while running

Author: Timekeeper Development Team
"""

from pydantic import BaseModel, Field
from typing import Optional

from timekeeper.features.clients.models import Client
from timekeeper.features.projects.models import Project


class TimeEntry(BaseModel):
    """
    Individual time entry model.

    Attributes:
        id (str): Entry identifier
        user_id (str): Owning user
        client_id (str): Client worked for
        project_id (str): Project worked on
        start_time (int): Start, epoch ms
        end_time (Optional[int]): End, epoch ms; None while running
        duration (Optional[int]): end_time - start_time in ms; None while running
        description (Optional[str]): What was done
        date (str): YYYY-MM-DD day of start_time (UTC)
    """
    id: str
    user_id: str
    client_id: str
    project_id: str
    start_time: int
    end_time: Optional[int] = None
    duration: Optional[int] = None
    description: Optional[str] = None
    date: str

    @property
    def is_running(self) -> bool:
        return self.end_time is None

    @classmethod
    def from_document(cls, document: dict) -> "TimeEntry":
        return cls(
            id=str(document["_id"]),
            user_id=document["user_id"],
            client_id=str(document["client_id"]),
            project_id=str(document["project_id"]),
            start_time=document["start_time"],
            end_time=document.get("end_time"),
            duration=document.get("duration"),
            description=document.get("description"),
            date=document["date"],
        )


class CurrentTimeEntry(TimeEntry):
    """Running entry with its client and project attached."""
    client: Client
    project: Project


class TimeEntryStart(BaseModel):
    client_id: str = Field(..., description="Client to track time for")
    project_id: str = Field(..., description="Project to track time for")
    description: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "65a1f0c2e4b0a1b2c3d4e5f6",
                "project_id": "65a1f0d9e4b0a1b2c3d4e5f7",
                "description": "Sprint planning"
            }
        }


class TimeEntryUpdate(BaseModel):
    """Only the description is editable; omitting it clears it."""
    description: Optional[str] = None
