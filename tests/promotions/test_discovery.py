import pytest

from src.promotion_system.promotion_system.core.enums import CandidateStatus
from src.promotion_system.promotion_system.core.exceptions import InvalidPromotionTargetGradeError
from src.promotion_system.promotion_system.promotions.discovery import CandidateDiscoveryEngine
from src.promotion_system.promotion_system.promotions.model import PromotionDetail
from tests.fakes import (
    ASSISTANT_MANAGER,
    DEV,
    SALES,
    SALES_TEAM_1,
    SENIOR_STAFF,
    STAFF,
    InMemoryDirectory,
    InMemoryPromotions,
    InMemoryState,
    add_employee,
    seed_organization,
)


def _detail(*, target_grade_id, department_id=SALES, quota=2) -> PromotionDetail:
    return PromotionDetail(detail_id=500, plan_id=400, department_id=department_id, target_grade_id=target_grade_id, quota_count=quota)


def _engine(state):
    return CandidateDiscoveryEngine(InMemoryPromotions(state), InMemoryDirectory(state))


def test_discover_registers_eligible_employee_of_subtree():
    state = seed_organization(InMemoryState())
    add_employee(state, 1, grade_id=SENIOR_STAFF, department_id=SALES_TEAM_1, point=85)

    created = _engine(state).discover(_detail(target_grade_id=ASSISTANT_MANAGER))

    assert created == 1
    (cand,) = state.candidates.values()
    assert cand.employee_id == 1
    assert cand.detail_id == 500
    assert cand.evaluation_point == 85
    assert cand.status == CandidateStatus.WAITING


def test_discover_filters_by_point_grade_and_department():
    state = seed_organization(InMemoryState())
    add_employee(state, 1, grade_id=SENIOR_STAFF, department_id=SALES, point=80)
    add_employee(state, 2, grade_id=SENIOR_STAFF, department_id=SALES, point=79)
    add_employee(state, 3, grade_id=STAFF, department_id=SALES, point=99)
    add_employee(state, 4, grade_id=SENIOR_STAFF, department_id=DEV, point=99)
    add_employee(state, 5, grade_id=SENIOR_STAFF, department_id=SALES_TEAM_1, point=None)

    created = _engine(state).discover(_detail(target_grade_id=ASSISTANT_MANAGER))

    assert created == 1
    assert [c.employee_id for c in state.candidates.values()] == [1]


def test_discover_without_matches_creates_nothing():
    state = seed_organization(InMemoryState())

    assert _engine(state).discover(_detail(target_grade_id=ASSISTANT_MANAGER)) == 0
    assert state.candidates == {}


def test_discover_rejects_floor_target_grade():
    state = seed_organization(InMemoryState())
    add_employee(state, 1, grade_id=STAFF, department_id=SALES, point=100)

    with pytest.raises(InvalidPromotionTargetGradeError):
        _engine(state).discover(_detail(target_grade_id=STAFF))

    assert state.candidates == {}
