import threading

import pytest

from src.promotion_system.promotion_system.core.enums import CandidateStatus, ChangeType
from src.promotion_system.promotion_system.core.exceptions import (
    CandidateNotFoundError,
    EmployeeNotFoundError,
    InvalidStateError,
    QuotaExceededError,
)
from src.promotion_system.promotion_system.promotions.service import PromotionService
from tests.fakes import (
    ASSISTANT_MANAGER,
    MANAGER,
    SALES,
    InMemoryState,
    InMemoryUnitOfWork,
    add_candidate,
    add_employee,
    seed_organization,
)


def _service_with_detail(*, quota: int, points: list[int]):
    state = seed_organization(InMemoryState())
    detail_id = None
    candidates = []
    for i, point in enumerate(points, start=1):
        add_employee(state, i, grade_id=ASSISTANT_MANAGER, department_id=SALES, point=point)
        cand = add_candidate(state, employee_id=i, quota=quota, detail_id=detail_id)
        detail_id = cand.detail_id
        candidates.append(cand)
    uow = InMemoryUnitOfWork(state)
    return state, uow, PromotionService(uow), candidates


def test_review_pass_within_quota():
    state, _, service, (cand,) = _service_with_detail(quota=1, points=[90])

    status = service.review_candidate(candidate_id=cand.candidate_id, is_passed=True, comment=" solid ")

    assert status == CandidateStatus.REVIEW_PASSED
    stored = state.candidates[cand.candidate_id]
    assert stored.status == CandidateStatus.REVIEW_PASSED
    assert stored.comment == "solid"
    assert state.locked_details == [cand.detail_id]


def test_review_pass_over_quota_is_rejected():
    state, _, service, (first, second) = _service_with_detail(quota=1, points=[90, 88])
    service.review_candidate(candidate_id=first.candidate_id, is_passed=True)

    with pytest.raises(QuotaExceededError):
        service.review_candidate(candidate_id=second.candidate_id, is_passed=True)

    assert state.candidates[second.candidate_id].status == CandidateStatus.WAITING


def test_review_fail_ignores_quota():
    state, _, service, (first, second) = _service_with_detail(quota=1, points=[90, 88])
    service.review_candidate(candidate_id=first.candidate_id, is_passed=True)

    status = service.review_candidate(candidate_id=second.candidate_id, is_passed=False, comment="not yet")

    assert status == CandidateStatus.REVIEW_REJECTED
    assert state.candidates[second.candidate_id].comment == "not yet"


def test_final_approved_candidates_still_hold_quota():
    _, _, service, (first, second) = _service_with_detail(quota=1, points=[90, 88])
    service.review_candidate(candidate_id=first.candidate_id, is_passed=True)
    service.confirm_final_approval(candidate_id=first.candidate_id, is_passed=True)

    with pytest.raises(QuotaExceededError):
        service.review_candidate(candidate_id=second.candidate_id, is_passed=True)


def test_final_rejection_releases_quota():
    _, _, service, (first, second) = _service_with_detail(quota=1, points=[90, 88])
    service.review_candidate(candidate_id=first.candidate_id, is_passed=True)
    service.confirm_final_approval(candidate_id=first.candidate_id, is_passed=False)

    assert service.review_candidate(candidate_id=second.candidate_id, is_passed=True) == CandidateStatus.REVIEW_PASSED


def test_review_twice_is_invalid_state():
    _, _, service, (cand,) = _service_with_detail(quota=2, points=[90])
    service.review_candidate(candidate_id=cand.candidate_id, is_passed=False)

    with pytest.raises(InvalidStateError):
        service.review_candidate(candidate_id=cand.candidate_id, is_passed=True)


def test_review_unknown_candidate():
    _, _, service, _ = _service_with_detail(quota=1, points=[90])

    with pytest.raises(CandidateNotFoundError):
        service.review_candidate(candidate_id=12345, is_passed=True)


def test_final_approval_changes_grade_and_appends_history():
    state, _, service, (cand,) = _service_with_detail(quota=1, points=[90])
    service.review_candidate(candidate_id=cand.candidate_id, is_passed=True)

    status = service.confirm_final_approval(candidate_id=cand.candidate_id, is_passed=True, approved_by=2)

    assert status == CandidateStatus.FINAL_APPROVED
    assert state.employees[cand.employee_id].grade_id == MANAGER
    (history,) = state.grade_history
    assert history.employee_id == cand.employee_id
    assert history.grade_name == "과장"
    assert history.change_type == ChangeType.PROMOTION
    assert history.changed_by == 2


def test_final_approval_requires_review_pass():
    state, _, service, (cand,) = _service_with_detail(quota=1, points=[90])

    with pytest.raises(InvalidStateError):
        service.confirm_final_approval(candidate_id=cand.candidate_id, is_passed=True)

    assert state.employees[cand.employee_id].grade_id == ASSISTANT_MANAGER


def test_final_approval_twice_promotes_once():
    state, _, service, (cand,) = _service_with_detail(quota=1, points=[90])
    service.review_candidate(candidate_id=cand.candidate_id, is_passed=True)
    service.confirm_final_approval(candidate_id=cand.candidate_id, is_passed=True)

    with pytest.raises(InvalidStateError):
        service.confirm_final_approval(candidate_id=cand.candidate_id, is_passed=True)

    assert len(state.grade_history) == 1


def test_final_rejection_leaves_grade_untouched():
    state, _, service, (cand,) = _service_with_detail(quota=1, points=[90])
    service.review_candidate(candidate_id=cand.candidate_id, is_passed=True)

    status = service.confirm_final_approval(candidate_id=cand.candidate_id, is_passed=False, comment="budget")

    assert status == CandidateStatus.FINAL_REJECTED
    assert state.candidates[cand.candidate_id].comment == "budget"
    assert state.employees[cand.employee_id].grade_id == ASSISTANT_MANAGER
    assert state.grade_history == []


def test_final_approval_rolls_back_when_employee_vanished():
    state, uow, service, (cand,) = _service_with_detail(quota=1, points=[90])
    service.review_candidate(candidate_id=cand.candidate_id, is_passed=True)
    del state.employees[cand.employee_id]

    with pytest.raises(EmployeeNotFoundError):
        service.confirm_final_approval(candidate_id=cand.candidate_id, is_passed=True)

    assert state.candidates[cand.candidate_id].status == CandidateStatus.REVIEW_PASSED
    assert uow.rollbacks == 1


def test_concurrent_reviews_never_exceed_quota():
    state, _, service, candidates = _service_with_detail(quota=2, points=[95, 94, 93, 92, 91, 90])
    outcomes: list[str] = []
    barrier = threading.Barrier(len(candidates))

    def review(candidate_id):
        barrier.wait()
        try:
            service.review_candidate(candidate_id=candidate_id, is_passed=True)
            outcomes.append("passed")
        except QuotaExceededError:
            outcomes.append("quota")

    threads = [threading.Thread(target=review, args=(c.candidate_id,)) for c in candidates]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("passed") == 2
    assert outcomes.count("quota") == 4
    passed = [c for c in state.candidates.values() if c.status == CandidateStatus.REVIEW_PASSED]
    assert len(passed) == 2
