"""HTTP routes over the leave workflow, using FastAPI's TestClient."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from leaveflow.api.deps import get_leave_service
from leaveflow.core.constants import HEADER_USER_ID
from leaveflow.main import create_app
from leaveflow.models import UserRole
from leaveflow.services.leave.leave_application_service import LeaveApplicationService
from tests.conftest import TODAY, make_user

PREFIX = "/api/v1/leaves"

ANNUAL_BODY = {
    "leave_type": "annual",
    "start_date": "2026-03-02",
    "working_days": 5,
    "reason": "Family holiday",
}


@pytest.fixture
def client(db):
    app = create_app(initialize_database=False)
    app.dependency_overrides[get_leave_service] = lambda: LeaveApplicationService(db, today=lambda: TODAY)
    with TestClient(app) as test_client:
        yield test_client


def as_user(user):
    return {HEADER_USER_ID: user.id}


def test_missing_actor_header_is_unauthorized(client):
    response = client.post(PREFIX, json=ANNUAL_BODY)
    assert response.status_code == 401


def test_submit_and_approve_through_both_stages(client, staff, director, hr):
    submitted = client.post(PREFIX, json=ANNUAL_BODY, headers=as_user(staff))
    assert submitted.status_code == 201, submitted.text
    body = submitted.json()
    assert body["status"] == "pending_director"
    assert body["end_date"] == "2026-03-06"

    app_id = body["id"]
    first = client.post(f"{PREFIX}/{app_id}/approve", json={"comments": "OK"}, headers=as_user(director))
    assert first.status_code == 200
    assert first.json()["status"] == "pending_hr"

    wrong_stage = client.post(f"{PREFIX}/{app_id}/approve", headers=as_user(director))
    assert wrong_stage.status_code == 403
    assert wrong_stage.json()["detail"]["code"] == "UNAUTHORIZED"

    final = client.post(f"{PREFIX}/{app_id}/approve", headers=as_user(hr))
    assert final.json()["status"] == "approved"

    again = client.post(f"{PREFIX}/{app_id}/approve", headers=as_user(hr))
    assert again.status_code == 409
    assert again.json()["detail"]["code"] == "INVALID_TRANSITION"

    balances = client.get(f"{PREFIX}/balances", headers=as_user(staff)).json()
    annual = next(b for b in balances if b["leave_type"] == "annual")
    assert (annual["used_days"], annual["pending_days"], annual["available_days"]) == (5, 0, 25)


def test_reject_requires_comments(client, staff, director):
    app_id = client.post(PREFIX, json=ANNUAL_BODY, headers=as_user(staff)).json()["id"]

    missing = client.post(f"{PREFIX}/{app_id}/reject", json={}, headers=as_user(director))
    assert missing.status_code == 422

    rejected = client.post(f"{PREFIX}/{app_id}/reject", json={"comments": "Busy period"}, headers=as_user(director))
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["director_comments"] == "Busy period"


def test_failed_validation_returns_breakdown(client, db):
    user = make_user(db)
    response = client.post(PREFIX, json=ANNUAL_BODY, headers=as_user(user))

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "DESIRED_MONTHS_REQUIRED"
    checks = detail["details"]["validation"]["checks"]
    assert checks["desired_months"]["valid"] is False
    assert checks["sufficient_balance"]["code"] == "INSUFFICIENT_BALANCE"


def test_validate_endpoint_is_a_dry_run(client, staff):
    response = client.post(f"{PREFIX}/validate", json=ANNUAL_BODY, headers=as_user(staff))
    assert response.status_code == 200
    assert response.json()["is_valid"] is True
    assert client.get(PREFIX, headers=as_user(staff)).json()["meta"]["total_items"] == 0


def test_desired_months_lock(client, db):
    user = make_user(db)

    created = client.post(f"{PREFIX}/desired-months", json={"months": [7, 3]}, headers=as_user(user))
    assert created.status_code == 201
    assert created.json()["preferred_months"] == [3, 7]

    again = client.post(f"{PREFIX}/desired-months", json={"months": [1, 2]}, headers=as_user(user))
    assert again.status_code == 409

    mine = client.get(f"{PREFIX}/desired-months/me", headers=as_user(user))
    assert mine.json()["preferred_months"] == [3, 7]


def test_invalid_desired_months_selection(client, db):
    user = make_user(db)
    response = client.post(f"{PREFIX}/desired-months", json={"months": [3, 3]}, headers=as_user(user))
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "INVALID_MONTH_SELECTION"


def test_preview(client):
    response = client.get(f"{PREFIX}/preview", params={"start_date": "2026-03-02", "working_days": 5})
    assert response.json() == {
        "start_date": "2026-03-02",
        "working_days": 5,
        "end_date": "2026-03-06",
        "resumption_date": "2026-03-09",
    }


def test_list_filters_and_pagination(client, db, staff):
    director = make_user(db, role=UserRole.DIRECTOR)
    for start in ("2026-03-02", "2026-03-09", "2026-03-16"):
        body = dict(ANNUAL_BODY, start_date=start, working_days=2)
        assert client.post(PREFIX, json=body, headers=as_user(staff)).status_code == 201

    listing = client.get(
        PREFIX,
        params={"status": "pending_director", "page_size": 2, "sort_by": "start_date", "sort_order": "asc"},
        headers=as_user(director),
    ).json()
    assert listing["meta"]["total_items"] == 3
    assert listing["meta"]["has_next"] is True
    assert [item["start_date"] for item in listing["items"]] == ["2026-03-02", "2026-03-09"]

    queue = client.get(f"{PREFIX}/pending", headers=as_user(director)).json()
    assert len(queue) == 3

    empty = client.get(PREFIX, params={"status": "approved"}, headers=as_user(director)).json()
    assert empty["items"] == []


def test_unknown_application_is_not_found(client, staff):
    response = client.get(f"{PREFIX}/does-not-exist", headers=as_user(staff))
    assert response.status_code == 404
