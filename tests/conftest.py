"""
Pytest Configuration File

This module provides fixtures and configuration for all tests. The database
is an in-memory Motor replacement, so no MongoDB server is needed.
"""

import pytest
import os
import sys
import jwt
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from timekeeper.app import app
from timekeeper.shared import config
from timekeeper.shared.clock import utc_day
from timekeeper.shared.database import CLIENTS, PROJECTS, TIME_ENTRIES, get_db
from timekeeper.features.timer.routes_time_entries import get_timer_service
from timekeeper.features.timer.timer_service import TimerService

# 2024-01-10 09:00:00 UTC, a Wednesday
WEDNESDAY_9AM = 1704877200000
HOUR = 60 * 60 * 1000


class FakeClock:
    """Settable millisecond clock"""

    def __init__(self, now=WEDNESDAY_9AM):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


def day_start_ms(day: str) -> int:
    parsed = datetime.strptime(day, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def make_token(user_id: str) -> str:
    return jwt.encode({"sub": user_id}, "timekeeper-test-signing-secret-0123456789", algorithm="HS256")


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def db():
    """Fixture for an empty in-memory database"""
    return AsyncMongoMockClient()["timekeeper_test"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer(db, clock):
    return TimerService(db, clock=clock)


@pytest.fixture
def test_client(db, clock, monkeypatch):
    """Fixture for FastAPI test client bound to the in-memory database"""
    monkeypatch.setattr(config, "AUTH_JWKS_URL", None)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_timer_service] = lambda: TimerService(db, clock=clock)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seed(db):
    """Fixture inserting owned documents directly"""

    class Seeder:
        async def client(self, user_id, name="Acme", is_active=True):
            result = await db[CLIENTS].insert_one({
                "user_id": user_id, "name": name, "description": None, "is_active": is_active
            })
            return result.inserted_id

        async def project(self, user_id, client_id, name="Website", is_active=True):
            result = await db[PROJECTS].insert_one({
                "user_id": user_id, "client_id": client_id, "name": name,
                "description": None, "is_active": is_active
            })
            return result.inserted_id

        async def entry(self, user_id, client_id, project_id, day, duration,
                        offset=9 * HOUR, description=None):
            start_time = day_start_ms(day) + offset
            document = {
                "user_id": user_id,
                "client_id": client_id,
                "project_id": project_id,
                "start_time": start_time,
                "end_time": start_time + duration,
                "duration": duration,
                "date": utc_day(start_time),
            }
            if description is not None:
                document["description"] = description
            result = await db[TIME_ENTRIES].insert_one(document)
            return result.inserted_id

    return Seeder()
