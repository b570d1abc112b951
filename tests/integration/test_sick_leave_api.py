"""End-to-end tests for the sick-leave, Poortwachter and statistics endpoints."""

from datetime import date, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from app.models.poortwachter_milestone import PoortwachterMilestone

OWNER = {"X-User-Id": "user-1"}
OTHER = {"X-User-Id": "user-2"}
ADMIN = {"X-User-Id": "admin-1"}

TODAY = date.today()


pytestmark = pytest.mark.usefixtures("admin_user")


def _body(days_ago: int, employee_id: str = "emp-1") -> dict:
    return {
        "employee_id": employee_id,
        "company_id": "co-1",
        "start_date": (TODAY - timedelta(days=days_ago)).isoformat(),
        "reported_by": "Jan de Vries",
        "reported_via": "phone",
    }


async def _milestone_count(db, sick_leave_id: int) -> int:
    result = await db.execute(
        select(func.count(PoortwachterMilestone.id)).where(
            PoortwachterMilestone.sick_leave_id == sick_leave_id
        )
    )
    return result.scalar_one()


@pytest_asyncio.fixture
async def tracked_case(client) -> dict:
    resp = await client.post("/api/v1/sick-leaves", json=_body(60), headers=OWNER)
    assert resp.status_code == 201
    return resp.json()


@pytest_asyncio.fixture
async def young_case(client) -> dict:
    resp = await client.post("/api/v1/sick-leaves", json=_body(10, "emp-2"), headers=OWNER)
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Cases
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_requires_user_header(client):
    resp = await client.post("/api/v1/sick-leaves", json=_body(1))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_create_and_get(client, tracked_case, young_case):
    assert tracked_case["poortwachter_active"] is True
    assert tracked_case["status"] == "active"
    assert tracked_case["reported_via"] == "phone"
    assert young_case["poortwachter_active"] is False

    resp = await client.get(f"/api/v1/sick-leaves/{tracked_case['id']}", headers=OWNER)
    assert resp.status_code == 200
    assert resp.json()["employee_id"] == "emp-1"

    resp = await client.get("/api/v1/sick-leaves", headers=OWNER)
    assert {s["id"] for s in resp.json()} == {tracked_case["id"], young_case["id"]}


@pytest.mark.asyncio
async def test_other_user_cannot_see_case(client, tracked_case):
    resp = await client.get(f"/api/v1/sick-leaves/{tracked_case['id']}", headers=OTHER)
    assert resp.status_code == 403
    resp = await client.get("/api/v1/sick-leaves", headers=OTHER)
    assert resp.json() == []


@pytest.mark.asyncio
async def test_admin_sees_any_case(client, tracked_case):
    resp = await client.get(f"/api/v1/sick-leaves/{tracked_case['id']}", headers=ADMIN)
    assert resp.status_code == 200
    resp = await client.get("/api/v1/sick-leaves?employee_id=emp-1", headers=ADMIN)
    assert [s["id"] for s in resp.json()] == [tracked_case["id"]]


@pytest.mark.asyncio
async def test_unknown_case_returns_404(client):
    resp = await client.get("/api/v1/sick-leaves/999", headers=OWNER)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_patch_records_arbo_advice(client, tracked_case):
    resp = await client.patch(
        f"/api/v1/sick-leaves/{tracked_case['id']}",
        json={"arbo_advice": "Start met halve dagen"},
        headers=OWNER,
    )
    assert resp.status_code == 200
    assert resp.json()["arbo_advice"] == "Start met halve dagen"
    assert resp.json()["notes"] == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["notes", "work_capacity_percentage", "arbo_service_contacted"])
async def test_patch_null_on_required_column_returns_422(client, tracked_case, field):
    url = f"/api/v1/sick-leaves/{tracked_case['id']}"
    resp = await client.patch(url, json={field: None}, headers=OWNER)
    assert resp.status_code == 422

    resp = await client.get(url, headers=OWNER)
    assert resp.json()["notes"] == ""
    assert resp.json()["work_capacity_percentage"] == 0
    assert resp.json()["arbo_service_contacted"] is False


@pytest.mark.asyncio
async def test_patch_null_clears_optional_field(client, tracked_case):
    url = f"/api/v1/sick-leaves/{tracked_case['id']}"
    await client.patch(url, json={"wia_decision": "pending"}, headers=OWNER)
    resp = await client.patch(url, json={"wia_decision": None}, headers=OWNER)
    assert resp.status_code == 200
    assert resp.json()["wia_decision"] is None


@pytest.mark.asyncio
async def test_patch_cannot_close_case(client, tracked_case):
    resp = await client.patch(
        f"/api/v1/sick-leaves/{tracked_case['id']}",
        json={"status": "recovered", "notes": "Beter gemeld"},
        headers=OWNER,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "active"
    assert resp.json()["end_date"] is None
    assert resp.json()["notes"] == "Beter gemeld"


@pytest.mark.asyncio
async def test_recovery(client, young_case):
    resp = await client.post(
        f"/api/v1/sick-leaves/{young_case['id']}/recovery",
        json={"end_date": TODAY.isoformat()},
        headers=OWNER,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "recovered"
    assert data["end_date"] == TODAY.isoformat()
    assert data["work_capacity_percentage"] == 100


@pytest.mark.asyncio
async def test_recovery_before_start_returns_422(client, young_case):
    resp = await client.post(
        f"/api/v1/sick-leaves/{young_case['id']}/recovery",
        json={"end_date": (TODAY - timedelta(days=30)).isoformat()},
        headers=OWNER,
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_delete_is_admin_only(client, db, tracked_case):
    assert await _milestone_count(db, tracked_case["id"]) == 9
    url = f"/api/v1/sick-leaves/{tracked_case['id']}"
    assert (await client.delete(url, headers=OWNER)).status_code == 403

    resp = await client.delete(url, headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert (await client.get(url, headers=ADMIN)).status_code == 404
    assert (await client.delete(url, headers=ADMIN)).status_code == 404
    assert await _milestone_count(db, tracked_case["id"]) == 0


# ---------------------------------------------------------------------------
# Poortwachter
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_overview(client, tracked_case):
    resp = await client.get(
        f"/api/v1/sick-leaves/{tracked_case['id']}/poortwachter", headers=OWNER
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [m["week_offset"] for m in data["milestones"]] == [6, 8, 13, 26, 42, 52, 78, 91, 104]
    assert [m["week_offset"] for m in data["overdue"]] == [6, 8]
    assert data["next_milestone"]["week_offset"] == 13
    assert data["weeks_since_start"] == 8
    assert data["completion_percentage"] == 0
    assert data["should_contact_arbo"] is False


@pytest.mark.asyncio
async def test_overview_upcoming_window(client, tracked_case):
    url = f"/api/v1/sick-leaves/{tracked_case['id']}/poortwachter"
    # Week 13 falls 31 days from today
    resp = await client.get(url, params={"days_ahead": 40}, headers=OWNER)
    assert [m["week_offset"] for m in resp.json()["upcoming"]] == [13]
    resp = await client.get(url, headers=OWNER)
    assert resp.json()["upcoming"] == []


@pytest.mark.asyncio
async def test_complete_milestone_once(client, tracked_case):
    url = f"/api/v1/sick-leaves/{tracked_case['id']}/poortwachter/milestones/6/complete"
    resp = await client.post(url, headers=OWNER)
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    assert resp.json()["completed_date"] is not None

    resp = await client.post(url, headers=OWNER)
    assert resp.status_code == 409

    overview = await client.get(
        f"/api/v1/sick-leaves/{tracked_case['id']}/poortwachter", headers=OWNER
    )
    assert [m["week_offset"] for m in overview.json()["overdue"]] == [8]


@pytest.mark.asyncio
async def test_complete_with_explicit_date(client, tracked_case):
    done_at = f"{(TODAY - timedelta(days=3)).isoformat()}T10:00:00"
    resp = await client.post(
        f"/api/v1/sick-leaves/{tracked_case['id']}/poortwachter/milestones/8/complete",
        json={"completion_date": done_at},
        headers=OWNER,
    )
    assert resp.status_code == 200
    assert resp.json()["completed_date"] == done_at


@pytest.mark.asyncio
async def test_complete_unknown_week_returns_404(client, tracked_case):
    resp = await client.post(
        f"/api/v1/sick-leaves/{tracked_case['id']}/poortwachter/milestones/7/complete",
        headers=OWNER,
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_activate_requires_admin_and_six_weeks(client, young_case):
    url = f"/api/v1/sick-leaves/{young_case['id']}/poortwachter/activate"
    assert (await client.post(url, headers=OWNER)).status_code == 403
    assert (await client.post(url, headers=ADMIN)).status_code == 409


@pytest.mark.asyncio
async def test_activate_tracked_case_is_noop(client, tracked_case):
    url = f"/api/v1/sick-leaves/{tracked_case['id']}/poortwachter/activate"
    resp = await client.post(url, headers=ADMIN)
    assert resp.status_code == 200
    assert len(resp.json()["milestones"]) == 9


# ---------------------------------------------------------------------------
# Statistics / dashboard
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_company_overview(client, tracked_case, young_case):
    url = "/api/v1/companies/co-1/absence-overview"
    assert (await client.get(url, headers=OWNER)).status_code == 403

    resp = await client.get(url, headers=ADMIN)
    assert resp.status_code == 200
    data = resp.json()
    assert data["active_cases"] == 2
    assert data["long_term_cases"] == 1
    assert data["poortwachter_cases"] == 1
    assert data["cases_with_overdue_milestones"] == 1
    assert len(data["sick_leaves"]) == 2


@pytest.mark.asyncio
async def test_statistics_flow(client, tracked_case):
    year = date.fromisoformat(tracked_case["start_date"]).year
    payload = {"employee_id": "emp-1", "company_id": "co-1", "year": year}

    assert (
        await client.post("/api/v1/statistics/absence/calculate", json=payload, headers=OWNER)
    ).status_code == 403

    first = await client.post("/api/v1/statistics/absence/calculate", json=payload, headers=ADMIN)
    second = await client.post("/api/v1/statistics/absence/calculate", json=payload, headers=ADMIN)
    assert first.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["absence_frequency"] == 1

    params = {"employee_id": "emp-1", "year": year}
    resp = await client.get("/api/v1/statistics/absence", params=params, headers=OWNER)
    assert resp.status_code == 200
    assert resp.json()["employee_id"] == "emp-1"

    resp = await client.get("/api/v1/statistics/absence", params=params, headers=OTHER)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_statistics_not_calculated_returns_404(client):
    resp = await client.get(
        "/api/v1/statistics/absence",
        params={"employee_id": "emp-9", "year": 2024},
        headers=ADMIN,
    )
    assert resp.status_code == 404
