"""
Report Data Models

Response shapes of the daily, weekly and custom time reports. All totals are
integer milliseconds; groups appear in the order their client/project was
first seen while scanning entries by start time.

Author: Timekeeper Development Team
"""

from pydantic import BaseModel
from typing import List, Optional

from timekeeper.features.clients.models import Client
from timekeeper.features.projects.models import Project


class ReportEntry(BaseModel):
    id: str
    date: str
    duration: int
    description: Optional[str] = None


class ProjectTotal(BaseModel):
    project: Project
    total: int = 0


class ProjectEntries(ProjectTotal):
    """Project total with its entries, newest day first."""
    entries: List[ReportEntry] = []


class ClientTotal(BaseModel):
    client: Client
    total: int = 0


class ClientProjectTotals(ClientTotal):
    projects: List[ProjectTotal] = []


class ClientProjectEntries(ClientTotal):
    projects: List[ProjectEntries] = []


class DailyReport(BaseModel):
    """
    Totals for one calendar day.

    Attributes:
        date (str): Reported day
        total_time (int): Sum over all closed entries of the day
        clients (List[ClientProjectTotals]): Client -> project totals
    """
    date: str
    total_time: int = 0
    clients: List[ClientProjectTotals] = []


class WeeklyReport(BaseModel):
    """
    Totals for a Sunday-to-Saturday week.

    Attributes:
        start_date (str): Sunday
        end_date (str): Saturday
        total_time (int): Sum over the week
        clients (List[ClientTotal]): Per-client totals, no project breakdown
    """
    start_date: str
    end_date: str
    total_time: int = 0
    clients: List[ClientTotal] = []


class CustomReport(BaseModel):
    start_date: str
    end_date: str
    total_time: int = 0
    clients: List[ClientProjectEntries] = []
