from __future__ import annotations

from datetime import date

import pytest

from src.promotion_system.promotion_system.container import build_services
from src.promotion_system.promotion_system.core.enums import CandidateStatus
from src.promotion_system.promotion_system.main import create_app
from tests.fakes import (
    ASSISTANT_MANAGER,
    MANAGER,
    SALES,
    SALES_TEAM_1,
    STAFF,
    InMemoryState,
    InMemoryUnitOfWork,
    add_candidate,
    add_employee,
    seed_organization,
)


@pytest.fixture()
def state():
    s = seed_organization(InMemoryState())
    add_employee(s, 1, grade_id=ASSISTANT_MANAGER, department_id=SALES_TEAM_1, point=95)
    add_employee(s, 2, grade_id=ASSISTANT_MANAGER, department_id=SALES, point=90)
    add_employee(s, 9, grade_id=MANAGER, department_id=SALES, point=99)
    return s


@pytest.fixture()
def client(state, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=build_services(InMemoryUnitOfWork(state)))
    return app.test_client()


def _plan_body(**overrides):
    body = {
        "planName": "2026 상반기 정기 승진",
        "nominationDeadlineAt": "2030-03-10",
        "appointmentAt": "2030-03-31",
        "planContent": "영업본부 과장 승진",
        "detailPlan": [{"departmentId": SALES, "gradeId": MANAGER, "quotaCount": 1}],
    }
    body.update(overrides)
    return body


def test_register_plan_and_list_candidates(client, state):
    resp = client.post("/api/promotion/plan", json=_plan_body())

    assert resp.status_code == 201
    plan_id = resp.get_json()["data"]["planId"]
    (detail,) = state.details.values()
    assert detail.plan_id == plan_id

    resp = client.get(f"/api/promotion/details/{detail.detail_id}/candidates")
    rows = resp.get_json()["data"]
    assert [r["employeeId"] for r in rows] == [1, 2]
    assert rows[0]["status"] == "WAITING"


def test_register_plan_bad_date_is_400(client):
    resp = client.post("/api/promotion/plan", json=_plan_body(appointmentAt="31/03/2030"))

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_register_plan_floor_grade_is_400_with_code(client):
    resp = client.post(
        "/api/promotion/plan",
        json=_plan_body(detailPlan=[{"departmentId": SALES, "gradeId": STAFF, "quotaCount": 1}]),
    )

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "PR002"


def test_non_json_body_is_400(client):
    resp = client.post("/api/promotion/review", data="candidateId=1")

    assert resp.status_code == 400


def test_nominate_and_cancel(client, state):
    cand = add_candidate(state, employee_id=1, deadline=date(2030, 3, 10), appointment=date(2030, 3, 31))

    resp = client.post(
        "/api/promotion/nominations",
        json={"nominatorId": 9, "candidateId": cand.candidate_id, "nominationReason": "Top seller"},
    )
    assert resp.status_code == 200

    resp = client.delete(f"/api/promotion/nominations/{cand.candidate_id}", json={"requesterId": 2})
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "C009"

    resp = client.delete(f"/api/promotion/nominations/{cand.candidate_id}", json={"requesterId": 9})
    assert resp.status_code == 200
    assert state.candidates[cand.candidate_id].nominator_id is None


def test_self_nomination_is_400(client, state):
    cand = add_candidate(state, employee_id=1, deadline=date(2030, 3, 10), appointment=date(2030, 3, 31))

    resp = client.post(
        "/api/promotion/nominations",
        json={"nominatorId": 1, "candidateId": cand.candidate_id, "nominationReason": "me"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "PR006"


def test_review_then_final_approval(client, state):
    cand = add_candidate(state, employee_id=1, quota=1)

    resp = client.post("/api/promotion/review", json={"candidateId": cand.candidate_id, "isPassed": True})
    assert resp.get_json()["data"]["status"] == "REVIEW_PASSED"

    resp = client.post(
        "/api/promotion/final-approval",
        json={"candidateId": cand.candidate_id, "isPassed": True, "approvedBy": 9},
    )
    assert resp.get_json()["data"]["status"] == "FINAL_APPROVED"
    assert state.employees[1].grade_id == MANAGER

    resp = client.post("/api/promotion/final-approval", json={"candidateId": cand.candidate_id, "isPassed": True})
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "PR008"


def test_review_over_quota_is_409(client, state):
    first = add_candidate(state, employee_id=1, quota=1)
    second = add_candidate(state, employee_id=2, detail_id=first.detail_id)
    client.post("/api/promotion/review", json={"candidateId": first.candidate_id, "isPassed": True})

    resp = client.post("/api/promotion/review", json={"candidateId": second.candidate_id, "isPassed": True})

    assert resp.status_code == 409
    assert resp.get_json()["code"] == "PR009"


def test_unknown_candidate_is_404(client):
    resp = client.post("/api/promotion/review", json={"candidateId": 424242, "isPassed": False})

    assert resp.status_code == 404
    assert resp.get_json()["code"] == "PR003"


def test_direct_promotion(client, state):
    resp = client.post("/api/promotion/direct", json={"employeeId": 2, "targetGradeId": MANAGER, "changedBy": 9})

    assert resp.status_code == 201
    assert state.employees[2].grade_id == MANAGER
    assert resp.get_json()["data"]["historyId"] == state.grade_history[0].history_id


def test_approval_completed_event_finalizes_candidate(client, state):
    cand = add_candidate(state, employee_id=1, status=CandidateStatus.REVIEW_PASSED)

    resp = client.post(
        "/api/approval-events/completed",
        json={
            "docId": 8001,
            "formKey": "personnelappointment",
            "submitterId": 9,
            "title": "인사발령",
            "details": {"promotionType": "REGULAR", "candidateId": cand.candidate_id},
        },
    )

    assert resp.status_code == 200
    assert resp.get_json()["data"]["outcome"] == "FINAL_APPROVED"
    assert state.candidates[cand.candidate_id].status == CandidateStatus.FINAL_APPROVED


def test_approval_rejected_event_with_string_payload(client, state):
    cand = add_candidate(state, employee_id=1, status=CandidateStatus.REVIEW_PASSED)

    resp = client.post(
        "/api/approval-events/rejected",
        json={
            "docId": 8002,
            "formKey": "personnelappointment",
            "details": f'{{"candidateId": {cand.candidate_id}}}',
            "comment": "반려",
        },
    )

    assert resp.status_code == 200
    assert state.candidates[cand.candidate_id].status == CandidateStatus.FINAL_REJECTED


def test_unknown_event_kind_is_404(client):
    resp = client.post("/api/approval-events/archived", json={"docId": 1, "formKey": "x", "details": {}})

    assert resp.status_code == 404


def test_each_event_request_gets_its_own_outcome(client, state):
    passed = add_candidate(state, employee_id=1, status=CandidateStatus.REVIEW_PASSED)
    waiting = add_candidate(state, employee_id=2)

    ok = client.post(
        "/api/approval-events/completed",
        json={"docId": 8101, "formKey": "personnelappointment", "details": {"candidateId": passed.candidate_id}},
    )
    failing = client.post(
        "/api/approval-events/completed",
        json={"docId": 8102, "formKey": "personnelappointment", "details": {"candidateId": waiting.candidate_id}},
    )

    assert ok.status_code == 200
    assert failing.status_code == 409
    assert failing.get_json()["code"] == "PR008"
    assert state.candidates[waiting.candidate_id].status == CandidateStatus.WAITING


@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_review_requires_json_boolean(client, state, value):
    cand = add_candidate(state, employee_id=1, quota=1)

    resp = client.post("/api/promotion/review", json={"candidateId": cand.candidate_id, "isPassed": value})

    assert resp.status_code == 400
    assert state.candidates[cand.candidate_id].status == CandidateStatus.WAITING


def test_final_approval_requires_json_boolean(client, state):
    cand = add_candidate(state, employee_id=1, status=CandidateStatus.REVIEW_PASSED)

    resp = client.post("/api/promotion/final-approval", json={"candidateId": cand.candidate_id, "isPassed": "false"})

    assert resp.status_code == 400
    assert state.candidates[cand.candidate_id].status == CandidateStatus.REVIEW_PASSED
    assert state.grade_history == []
