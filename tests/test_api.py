import datetime

import pytest
from rest_framework.test import APIClient

from apps.goals.models import GoalPlan
from apps.goals.workflow import GoalPlanStatus as S
from .factories import MONTH, goal_item

pytestmark = pytest.mark.django_db

BASE = "/api/v1/goal-plans/"


def test_requires_authentication():
    assert APIClient().get(BASE).status_code == 401


def test_login_returns_tokens(employee):
    resp = APIClient().post("/api/v1/auth/login/", {"email": employee.email, "password": "pass12345"}, format="json")
    assert resp.status_code == 200
    assert "access" in resp.data and "refresh" in resp.data


def test_create_then_create_again(employee, client_for):
    client = client_for(employee)
    payload = {"month": "2025-04", "items": [goal_item(100)]}
    first = client.post(BASE, payload, format="json")
    assert first.status_code == 201
    assert first.data["data"]["status"] == "draft"
    assert first.data["data"]["month"] == "2025-04-01"

    second = client.post(BASE, {"month": "2025-04-01", "items": []}, format="json")
    assert second.status_code == 200
    assert second.data["data"]["id"] == first.data["data"]["id"]
    assert GoalPlan.objects.count() == 1


def test_create_rejects_bad_items(employee, client_for):
    resp = client_for(employee).post(BASE, {"month": "2025-04", "items": [goal_item(120)]}, format="json")
    assert resp.status_code == 400
    assert resp.data["success"] is False


def test_create_rejects_bad_month(employee, client_for):
    resp = client_for(employee).post(BASE, {"month": "April"}, format="json")
    assert resp.status_code == 400


def test_my_plans_only_lists_own(employee, outsider, make_plan, client_for):
    mine = make_plan(employee.profile)
    make_plan(outsider.profile)
    resp = client_for(employee).get(BASE)
    assert resp.status_code == 200
    assert [p["id"] for p in resp.data["data"]] == [mine.pk]


def test_my_plans_filter_by_status(employee, make_plan, client_for):
    make_plan(employee.profile)
    approved = make_plan(employee.profile, status=S.APPROVED, month=datetime.date(2025, 5, 1))
    resp = client_for(employee).get(BASE, {"status": "approved"})
    assert [p["id"] for p in resp.data["data"]] == [approved.pk]


def test_month_lookup(employee, make_plan, client_for):
    plan = make_plan(employee.profile)
    client = client_for(employee)
    found = client.get(f"{BASE}month/", {"month": "2025-04-01"})
    assert found.data["data"]["id"] == plan.pk
    missing = client.get(f"{BASE}month/", {"month": "2025-06"})
    assert missing.status_code == 200
    assert missing.data["data"] is None


def test_presentation_fields(employee, make_plan, client_for):
    plan = make_plan(employee.profile)
    data = client_for(employee).get(f"{BASE}{plan.pk}/").data["data"]
    assert data["owner"] == {"profile_id": employee.profile.pk, "full_name": "Eli Employee", "department": "Sales"}
    assert data["status_label"] == "Draft"
    assert data["status_description"]
    assert data["total_weightage"] == 100
    assert data["is_over_limit"] is False
    assert data["is_terminal"] is False
    assert data["editable"] is True
    assert data["available_actions"] == ["save_draft", "submit", "delete"]


def test_completed_plan_is_terminal(employee, make_plan, client_for):
    plan = make_plan(employee.profile, status=S.COMPLETED)
    data = client_for(employee).get(f"{BASE}{plan.pk}/").data["data"]
    assert data["is_terminal"] is True
    assert data["available_actions"] == []


def test_owner_placeholder_falls_back(make_user, manager, make_plan, client_for):
    nameless = make_user("nameless@example.com", manager=manager)
    plan = make_plan(nameless.profile, status=S.PENDING_APPROVAL)
    data = client_for(manager).get(f"{BASE}team-pending/").data["data"]
    assert data[0]["id"] == plan.pk
    assert data[0]["owner"]["full_name"] == "nameless@example.com"
    assert data[0]["owner"]["department"] == "—"
    assert data[0]["available_actions"] == ["approve", "reject"]


def test_team_pending_lists_reports_awaiting_manager(employee, manager, outsider, make_plan, client_for):
    waiting = make_plan(employee.profile, status=S.PENDING_APPROVAL)
    make_plan(employee.profile, status=S.DRAFT, month=datetime.date(2025, 5, 1))
    make_plan(outsider.profile, status=S.PENDING_APPROVAL)
    resp = client_for(manager).get(f"{BASE}team-pending/")
    assert [p["id"] for p in resp.data["data"]] == [waiting.pk]


def test_hr_pending_is_hr_only(employee, hr, make_plan, client_for):
    plan = make_plan(employee.profile, status=S.PENDING_HR_APPROVAL)
    assert client_for(employee).get(f"{BASE}hr-pending/").status_code == 403
    resp = client_for(hr).get(f"{BASE}hr-pending/")
    assert [p["id"] for p in resp.data["data"]] == [plan.pk]


def test_unrelated_user_cannot_see_plan(employee, outsider, make_plan, client_for):
    plan = make_plan(employee.profile)
    assert client_for(outsider).get(f"{BASE}{plan.pk}/").status_code == 404


def test_full_approval_flow(employee, manager, hr, make_plan, client_for):
    plan = make_plan(employee.profile)
    url = f"{BASE}{plan.pk}/"

    resp = client_for(employee).post(f"{url}submit/", {}, format="json")
    assert resp.status_code == 200
    assert resp.data["data"]["status"] == "pending_approval"

    edited = [goal_item(60, id="a", target="15 renewals"), goal_item(40, id="b")]
    resp = client_for(manager).post(f"{url}approve/", {"items": edited, "notes": "ok"}, format="json")
    assert resp.data["data"]["status"] == "pending_hr_approval"
    assert resp.data["data"]["items"][0]["target"] == "15 renewals"

    resp = client_for(hr).post(f"{url}approve/", {}, format="json")
    assert resp.data["data"]["status"] == "approved"

    actuals = [{"id": "a", "actual": "14"}, {"id": "b", "actual": "9"}]
    resp = client_for(employee).post(f"{url}submit-actuals/", {"items": actuals}, format="json")
    assert resp.data["data"]["status"] == "pending_score_approval"

    resp = client_for(manager).post(f"{url}approve/", {}, format="json")
    assert resp.data["data"]["status"] == "completed"
    assert resp.data["data"]["available_actions"] == []


def test_submit_over_limit_returns_total(employee, make_plan, client_for):
    plan = make_plan(employee.profile)
    items = [goal_item(60, id="a"), goal_item(50, id="b")]
    resp = client_for(employee).post(f"{BASE}{plan.pk}/submit/", {"items": items}, format="json")
    assert resp.status_code == 400
    assert resp.data["data"] == {"total_weightage": 110}
    assert "weightage" in resp.data["errors"]
    plan.refresh_from_db()
    assert plan.status == S.DRAFT


def test_invalid_transition_is_400(employee, make_plan, client_for):
    plan = make_plan(employee.profile)
    resp = client_for(employee).post(f"{BASE}{plan.pk}/submit-actuals/", {"items": [{"id": "a", "actual": "1"}]},
                                     format="json")
    assert resp.status_code == 400
    assert resp.data["success"] is False


def test_owner_cannot_approve_is_403(employee, make_plan, client_for):
    plan = make_plan(employee.profile, status=S.PENDING_APPROVAL)
    resp = client_for(employee).post(f"{BASE}{plan.pk}/approve/", {}, format="json")
    assert resp.status_code == 403


def test_stale_revision_is_409(employee, make_plan, client_for):
    plan = make_plan(employee.profile)
    resp = client_for(employee).post(f"{BASE}{plan.pk}/save-draft/", {"expected_revision": 5}, format="json")
    assert resp.status_code == 409
    assert resp.data["data"] == {"revision": 1}


def test_request_edit_needs_items(employee, make_plan, client_for):
    plan = make_plan(employee.profile, status=S.APPROVED)
    resp = client_for(employee).post(f"{BASE}{plan.pk}/request-edit/", {}, format="json")
    assert resp.status_code == 400


def test_reject_with_notes(employee, manager, make_plan, client_for):
    plan = make_plan(employee.profile, status=S.PENDING_APPROVAL)
    resp = client_for(manager).post(f"{BASE}{plan.pk}/reject/", {"notes": "Needs a second bucket"}, format="json")
    assert resp.status_code == 200
    assert resp.data["data"]["status"] == "rejected"
    assert resp.data["data"]["reviewer_notes"] == "Needs a second bucket"
    assert resp.data["data"]["reviewed_by_email"] == manager.email


def test_delete(employee, make_plan, client_for):
    pending = make_plan(employee.profile, status=S.PENDING_APPROVAL)
    client = client_for(employee)
    assert client.delete(f"{BASE}{pending.pk}/").status_code == 400

    draft = make_plan(employee.profile, month=datetime.date(2025, 5, 1))
    resp = client.delete(f"{BASE}{draft.pk}/")
    assert resp.status_code == 200
    assert not GoalPlan.objects.filter(pk=draft.pk).exists()


def test_manager_cannot_delete_report_plan(employee, manager, make_plan, client_for):
    plan = make_plan(employee.profile)
    assert client_for(manager).delete(f"{BASE}{plan.pk}/").status_code == 403


def test_weightage_check(employee, client_for):
    resp = client_for(employee).post(f"{BASE}weightage-check/",
                                     {"items": [{"weightage": 70}, {"weightage": "45"}, {"weightage": ""}]},
                                     format="json")
    assert resp.status_code == 200
    assert resp.data["data"] == {"total_weightage": 115, "remaining_weightage": -15,
                                 "is_over_limit": True, "limit": 100}


def test_month_is_stored_as_first_of_month(employee, client_for):
    client_for(employee).post(BASE, {"month": "2025-04-20"}, format="json")
    assert GoalPlan.objects.get().month == MONTH
