from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import structlog

from ..common.validators import optional_text, require_non_empty, require_positive
from ..core.enums import CandidateStatus
from ..core.exceptions import EmployeeNotFoundError, GradeNotFoundError, ValidationError
from ..database.unit_of_work import TransactionScope, UnitOfWork
from .discovery import CandidateDiscoveryEngine
from .grade_change import GradeChangeExecutor
from .model import NewDetailPlan, PromotionCandidate, PromotionDetail
from .nomination import NominationManager
from .review import ReviewStateMachine

logger = structlog.get_logger(__name__)


def review_machine_for(tx: TransactionScope) -> ReviewStateMachine:
    return ReviewStateMachine(tx.promotions, tx.directory, GradeChangeExecutor(tx.employees))


class PromotionService:
    """Use cases of the promotion lifecycle, one transaction per call."""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    def register_plan(
        self,
        *,
        plan_name: str,
        nomination_deadline: date,
        appointment_date: date,
        plan_content: Optional[str],
        details: Sequence[NewDetailPlan],
    ) -> int:
        plan_name = require_non_empty(plan_name, "Plan name")
        if nomination_deadline > appointment_date:
            raise ValidationError("Nomination deadline must not be after the appointment date")
        if not details:
            raise ValidationError("A promotion plan needs at least one detail")
        for d in details:
            require_positive(d.quota_count, "Quota count")

        with self._uow.transaction() as tx:
            plan_id = tx.promotions.create_plan(
                plan_name=plan_name,
                nomination_deadline=nomination_deadline,
                appointment_date=appointment_date,
                plan_content=optional_text(plan_content),
            )
            engine = CandidateDiscoveryEngine(tx.promotions, tx.directory)
            total = 0
            for d in details:
                detail_id = tx.promotions.create_detail(
                    plan_id=plan_id,
                    department_id=int(d.department_id),
                    target_grade_id=int(d.target_grade_id),
                    quota_count=int(d.quota_count),
                )
                total += engine.discover(
                    PromotionDetail(
                        detail_id=detail_id,
                        plan_id=plan_id,
                        department_id=int(d.department_id),
                        target_grade_id=int(d.target_grade_id),
                        quota_count=int(d.quota_count),
                    )
                )

        logger.info("promotion_plan_registered", plan_id=plan_id, details=len(details), candidates=total)
        return plan_id

    def list_candidates(self, *, detail_id: int) -> Sequence[PromotionCandidate]:
        with self._uow.transaction() as tx:
            return tx.promotions.list_candidates(detail_id=int(detail_id))

    def nominate(self, *, nominator_id: int, candidate_id: int, reason: str, today: Optional[date] = None) -> None:
        with self._uow.transaction() as tx:
            NominationManager(tx.promotions, tx.directory).nominate(
                nominator_id=nominator_id,
                candidate_id=candidate_id,
                reason=reason,
                today=today,
            )

    def cancel_nomination(self, *, candidate_id: int, requester_id: int, today: Optional[date] = None) -> None:
        with self._uow.transaction() as tx:
            NominationManager(tx.promotions, tx.directory).cancel_nomination(
                candidate_id=candidate_id,
                requester_id=requester_id,
                today=today,
            )

    def review_candidate(self, *, candidate_id: int, is_passed: bool, comment: Optional[str] = None) -> CandidateStatus:
        with self._uow.transaction() as tx:
            return review_machine_for(tx).review_candidate(candidate_id=candidate_id, is_passed=is_passed, comment=comment)

    def confirm_final_approval(
        self,
        *,
        candidate_id: int,
        is_passed: bool,
        comment: Optional[str] = None,
        approved_by: Optional[int] = None,
    ) -> CandidateStatus:
        with self._uow.transaction() as tx:
            return review_machine_for(tx).confirm_final_approval(
                candidate_id=candidate_id,
                is_passed=is_passed,
                comment=comment,
                approved_by=approved_by,
            )

    def promote_directly(
        self,
        *,
        employee_id: int,
        target_grade_id: int,
        reason: Optional[str] = None,
        changed_by: Optional[int] = None,
    ) -> int:
        """Off-cycle promotion: no candidate, no review."""
        with self._uow.transaction() as tx:
            return promote_directly_in(
                tx,
                employee_id=employee_id,
                target_grade_id=target_grade_id,
                reason=reason,
                changed_by=changed_by,
            )


def promote_directly_in(
    tx: TransactionScope,
    *,
    employee_id: int,
    target_grade_id: int,
    reason: Optional[str] = None,
    changed_by: Optional[int] = None,
) -> int:
    employee = tx.directory.get_employee(int(employee_id))
    if not employee:
        raise EmployeeNotFoundError(f"Employee {employee_id} does not exist")
    grade = tx.directory.get_grade(int(target_grade_id))
    if not grade:
        raise GradeNotFoundError(f"Grade {target_grade_id} does not exist")

    history_id = GradeChangeExecutor(tx.employees).apply(employee_id=employee.employee_id, grade=grade, changed_by=changed_by)
    logger.info(
        "direct_promotion_applied",
        employee_id=employee.employee_id,
        grade_before=employee.grade_id,
        grade_after=grade.grade_id,
        reason=optional_text(reason),
    )
    return history_id
