"""
Test Time Reports

This module tests report aggregation including:
- Daily, weekly and custom report shapes
- Date range boundaries
- Client/project filters
- First-seen group order
- Ownership re-validation
- HTTP endpoints
"""

import pytest
from datetime import date

from timekeeper.shared.clock import week_bounds
from timekeeper.shared.database import CLIENTS
from timekeeper.shared.errors import BadRequestError, ForbiddenError, NotFoundError
from timekeeper.features.reports.aggregator import custom_report, daily_report, weekly_report
from conftest import HOUR, FakeClock, auth_headers


@pytest.mark.asyncio
async def test_custom_report_sums_range(db, seed):
    """Scenario: 2h on 2024-01-10 and 1h on 2024-01-12 for one client"""
    client = await seed.client("user_a", "Acme")
    project = await seed.project("user_a", client, "Website")
    await seed.entry("user_a", client, project, "2024-01-10", 2 * HOUR)
    await seed.entry("user_a", client, project, "2024-01-12", 1 * HOUR)

    report = await custom_report(db, "user_a", "2024-01-01", "2024-01-15")

    assert report.total_time == 3 * HOUR
    assert len(report.clients) == 1
    assert report.clients[0].client.name == "Acme"
    assert report.clients[0].total == 3 * HOUR
    assert report.clients[0].projects[0].total == 3 * HOUR


@pytest.mark.asyncio
async def test_custom_report_entries_newest_first(db, seed):
    client = await seed.client("user_a")
    project = await seed.project("user_a", client)
    first = await seed.entry("user_a", client, project, "2024-01-03", HOUR, description="oldest")
    second = await seed.entry("user_a", client, project, "2024-01-05", HOUR, offset=8 * HOUR)
    third = await seed.entry("user_a", client, project, "2024-01-05", HOUR, offset=14 * HOUR)

    report = await custom_report(db, "user_a", "2024-01-01", "2024-01-31")

    entries = report.clients[0].projects[0].entries
    assert [entry.id for entry in entries] == [str(third), str(second), str(first)]
    assert entries[-1].date == "2024-01-03"
    assert entries[-1].duration == HOUR
    assert entries[-1].description == "oldest"


@pytest.mark.asyncio
async def test_groups_follow_first_seen_order(db, seed):
    zeta = await seed.client("user_a", "Zeta")
    alpha = await seed.client("user_a", "Alpha")
    zeta_project = await seed.project("user_a", zeta, "Z1")
    alpha_late = await seed.project("user_a", alpha, "A-late")
    alpha_early = await seed.project("user_a", alpha, "A-early")
    await seed.entry("user_a", zeta, zeta_project, "2024-01-10", HOUR, offset=8 * HOUR)
    await seed.entry("user_a", alpha, alpha_early, "2024-01-10", 5 * HOUR, offset=9 * HOUR)
    await seed.entry("user_a", alpha, alpha_late, "2024-01-10", HOUR, offset=15 * HOUR)

    report = await daily_report(db, "user_a", "2024-01-10")

    assert [group.client.name for group in report.clients] == ["Zeta", "Alpha"]
    assert [p.project.name for p in report.clients[1].projects] == ["A-early", "A-late"]
    assert report.clients[1].total == 6 * HOUR
    assert report.total_time == 7 * HOUR


@pytest.mark.asyncio
async def test_daily_report_ignores_running_and_other_days(db, seed, timer):
    client = await seed.client("user_a")
    project = await seed.project("user_a", client)
    await seed.entry("user_a", client, project, "2024-01-10", HOUR)
    await seed.entry("user_a", client, project, "2024-01-11", HOUR)
    await timer.start("user_a", str(client), str(project))

    report = await daily_report(db, "user_a", "2024-01-10")

    assert report.date == "2024-01-10"
    assert report.total_time == HOUR
    assert report.clients[0].projects[0].total == HOUR


@pytest.mark.asyncio
async def test_daily_report_defaults_to_today(db, seed, clock):
    client = await seed.client("user_a")
    project = await seed.project("user_a", client)
    await seed.entry("user_a", client, project, "2024-01-10", HOUR)

    report = await daily_report(db, "user_a", clock=clock)

    assert report.date == "2024-01-10"
    assert report.total_time == HOUR


@pytest.mark.asyncio
async def test_daily_report_for_empty_day(db):
    report = await daily_report(db, "user_a", "2024-02-29")
    assert report.total_time == 0
    assert report.clients == []


@pytest.mark.asyncio
async def test_weekly_report_covers_sunday_to_saturday(db, seed):
    """Scenario: 2024-01-10 is a Wednesday"""
    client = await seed.client("user_a", "Acme")
    project = await seed.project("user_a", client)
    for day in ("2024-01-06", "2024-01-07", "2024-01-10", "2024-01-13", "2024-01-14"):
        await seed.entry("user_a", client, project, day, HOUR)

    report = await weekly_report(db, "user_a", "2024-01-10")

    assert report.start_date == "2024-01-07"
    assert report.end_date == "2024-01-13"
    assert report.total_time == 3 * HOUR
    assert report.clients[0].client.name == "Acme"
    assert report.clients[0].total == 3 * HOUR
    assert "projects" not in report.model_dump()["clients"][0]


@pytest.mark.asyncio
async def test_weekly_report_defaults_to_current_week(db):
    report = await weekly_report(db, "user_a", clock=FakeClock())
    assert (report.start_date, report.end_date) == ("2024-01-07", "2024-01-13")


def test_week_bounds():
    assert week_bounds(date(2024, 1, 7)) == (date(2024, 1, 7), date(2024, 1, 13))
    assert week_bounds(date(2024, 1, 13)) == (date(2024, 1, 7), date(2024, 1, 13))
    assert week_bounds(date(2024, 1, 1)) == (date(2023, 12, 31), date(2024, 1, 6))


@pytest.mark.asyncio
async def test_custom_report_filters(db, seed):
    acme = await seed.client("user_a", "Acme")
    globex = await seed.client("user_a", "Globex")
    website = await seed.project("user_a", acme, "Website")
    mobile = await seed.project("user_a", acme, "Mobile")
    audit = await seed.project("user_a", globex, "Audit")
    await seed.entry("user_a", acme, website, "2024-01-10", HOUR)
    await seed.entry("user_a", acme, mobile, "2024-01-10", 2 * HOUR)
    await seed.entry("user_a", globex, audit, "2024-01-10", 4 * HOUR)

    by_client = await custom_report(db, "user_a", "2024-01-01", "2024-01-31", client_id=str(acme))
    assert by_client.total_time == 3 * HOUR
    assert [group.client.name for group in by_client.clients] == ["Acme"]

    by_project = await custom_report(db, "user_a", "2024-01-01", "2024-01-31", project_id=str(mobile))
    assert by_project.total_time == 2 * HOUR
    assert [p.project.name for p in by_project.clients[0].projects] == ["Mobile"]


@pytest.mark.asyncio
async def test_custom_report_rejects_foreign_filter(db, seed):
    foreign = await seed.client("user_b", "Initech")
    with pytest.raises(ForbiddenError):
        await custom_report(db, "user_a", "2024-01-01", "2024-01-31", client_id=str(foreign))


@pytest.mark.asyncio
async def test_report_aborts_on_entry_with_foreign_client(db, seed):
    own = await seed.client("user_a")
    project = await seed.project("user_a", own)
    foreign = await seed.client("user_b")
    await seed.entry("user_a", own, project, "2024-01-10", HOUR)
    await seed.entry("user_a", foreign, project, "2024-01-10", HOUR)

    with pytest.raises(ForbiddenError):
        await daily_report(db, "user_a", "2024-01-10")


@pytest.mark.asyncio
async def test_report_aborts_on_entry_with_missing_project(db, seed):
    from bson import ObjectId

    client = await seed.client("user_a")
    await seed.entry("user_a", client, ObjectId(), "2024-01-10", HOUR)

    with pytest.raises(NotFoundError):
        await custom_report(db, "user_a", "2024-01-01", "2024-01-31")


@pytest.mark.asyncio
async def test_deactivated_client_still_reported(db, seed):
    client = await seed.client("user_a", "Acme")
    project = await seed.project("user_a", client)
    await seed.entry("user_a", client, project, "2024-01-10", HOUR)
    await db[CLIENTS].update_one({"_id": client}, {"$set": {"is_active": False}})

    report = await weekly_report(db, "user_a", "2024-01-10")

    assert report.total_time == HOUR
    assert report.clients[0].client.is_active is False


@pytest.mark.asyncio
async def test_reports_are_scoped_to_user(db, seed):
    client = await seed.client("user_b")
    project = await seed.project("user_b", client)
    await seed.entry("user_b", client, project, "2024-01-10", HOUR)

    report = await custom_report(db, "user_a", "2024-01-01", "2024-01-31")
    assert report.total_time == 0


@pytest.mark.asyncio
async def test_invalid_dates(db):
    with pytest.raises(BadRequestError):
        await daily_report(db, "user_a", "10/01/2024")
    with pytest.raises(BadRequestError):
        await custom_report(db, "user_a", "2024-01-01", "2024-13-01")

    reversed_range = await custom_report(db, "user_a", "2024-01-31", "2024-01-01")
    assert reversed_range.total_time == 0
    assert reversed_range.clients == []


def test_report_endpoints(test_client):
    headers = auth_headers("user_a")
    client_id = test_client.post("/api/clients", json={"name": "Acme"}, headers=headers).json()["id"]
    test_client.post("/api/projects", json={"client_id": client_id, "name": "Website"}, headers=headers)

    response = test_client.get("/api/reports/daily", params={"date": "2024-01-10"}, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"date": "2024-01-10", "total_time": 0, "clients": []}

    response = test_client.get("/api/reports/weekly", params={"date": "2024-01-10"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["start_date"] == "2024-01-07"
    assert response.json()["end_date"] == "2024-01-13"

    response = test_client.get(
        "/api/reports/custom",
        params={"start_date": "2024-01-01", "end_date": "2024-01-31", "client_id": client_id},
        headers=headers
    )
    assert response.status_code == 200
    assert response.json()["total_time"] == 0

    response = test_client.get("/api/reports/daily", params={"date": "yesterday"}, headers=headers)
    assert response.status_code == 400

    response = test_client.get("/api/reports/custom", params={"start_date": "2024-01-01"}, headers=headers)
    assert response.status_code == 422
