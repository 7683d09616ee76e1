from __future__ import annotations

from datetime import date
from typing import Any, Optional

import structlog

from ..common.datetime_utils import today_local
from ..common.payload import get_str, parse_payload
from ..core.constants import MAX_FAILURE_REASON_LENGTH, REGULAR_PROMOTION_LABELS, SPECIAL_PROMOTION_LABELS
from ..core.enums import AppointmentStatus, CandidateStatus
from ..core.exceptions import (
    CandidateNotFoundError,
    DepartmentNotFoundError,
    EmployeeNotFoundError,
    GradeNotFoundError,
    InvalidPayloadError,
    JobTitleNotFoundError,
)
from ..database.unit_of_work import TransactionScope, UnitOfWork
from ..promotions.service import promote_directly_in, review_machine_for
from .model import SweepReport

logger = structlog.get_logger(__name__)


def _changed(before: Optional[str], after: Optional[str]) -> bool:
    return bool(after) and after != before


class AppointmentApplier:
    """Replay one personnel order (department, job title, grade) inside a transaction."""

    def __init__(self, tx: TransactionScope):
        self._tx = tx

    def apply(self, details: dict[str, Any], *, changed_by: Optional[int] = None) -> None:
        employee_number = get_str(details, "employeeNumber")
        if not employee_number:
            raise InvalidPayloadError("employeeNumber is missing")

        employee = self._tx.directory.get_employee_by_number(employee_number)
        if not employee:
            raise EmployeeNotFoundError(f"Employee {employee_number} does not exist")

        department_before = get_str(details, "departmentBefore")
        department_after = get_str(details, "departmentAfter")
        if _changed(department_before, department_after):
            department = self._tx.directory.find_department_by_name(department_after)
            if not department:
                raise DepartmentNotFoundError(f"Department '{department_after}' does not exist")
            self._tx.employees.update_department(employee_id=employee.employee_id, department_id=department.department_id)
            logger.info("appointment_department_changed", employee_number=employee_number, before=department_before, after=department_after)

        job_title_before = get_str(details, "jobTitleBefore")
        job_title_after = get_str(details, "jobTitleAfter")
        if _changed(job_title_before, job_title_after):
            job_title = self._tx.directory.find_job_title_by_name(job_title_after)
            if not job_title:
                raise JobTitleNotFoundError(f"Job title '{job_title_after}' does not exist")
            self._tx.employees.update_job_title(employee_id=employee.employee_id, job_title_id=job_title.job_title_id)
            logger.info("appointment_job_title_changed", employee_number=employee_number, before=job_title_before, after=job_title_after)

        change_type = get_str(details, "changeType")
        if change_type in SPECIAL_PROMOTION_LABELS:
            grade_before = get_str(details, "gradeBefore")
            grade_after = get_str(details, "gradeAfter")
            if _changed(grade_before, grade_after):
                grade = self._tx.directory.find_grade_by_name(grade_after)
                if not grade:
                    raise GradeNotFoundError(f"Grade '{grade_after}' does not exist")
                promote_directly_in(
                    self._tx,
                    employee_id=employee.employee_id,
                    target_grade_id=grade.grade_id,
                    reason=get_str(details, "reason"),
                    changed_by=changed_by,
                )
        elif change_type in REGULAR_PROMOTION_LABELS:
            candidate = self._tx.promotions.find_candidate_by_employee_number(
                employee_number=employee_number,
                status=CandidateStatus.REVIEW_PASSED,
            )
            if not candidate:
                raise CandidateNotFoundError(f"No reviewed candidate is waiting for employee {employee_number}")
            review_machine_for(self._tx).confirm_final_approval(
                candidate_id=candidate.candidate_id,
                is_passed=True,
                approved_by=changed_by,
            )


class AppointmentSweepService:
    """Daily batch: apply every WAITING appointment whose date has come.

    Each appointment runs in its own transaction; a failure is recorded as FAILED and the
    batch moves on.
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    def schedule(self, *, employee_number: str, details: str, appointment_date: date) -> int:
        parse_payload(details)
        with self._uow.transaction() as tx:
            return tx.appointments.create(
                employee_number=employee_number,
                details=details,
                appointment_date=appointment_date,
            )

    def run(self, *, today: Optional[date] = None) -> SweepReport:
        run_date = today or today_local()
        with self._uow.transaction() as tx:
            due = list(tx.appointments.list_due(until=run_date))

        logger.info("appointment_sweep_started", run_date=run_date.isoformat(), due=len(due))

        completed: list[int] = []
        failed: dict[int, str] = {}
        for appointment in due:
            try:
                with self._uow.transaction() as tx:
                    AppointmentApplier(tx).apply(parse_payload(appointment.details))
                    if not tx.appointments.mark(appointment_id=appointment.appointment_id, status=AppointmentStatus.COMPLETE):
                        # Another sweep got there first; roll back what we just applied.
                        raise _AlreadyProcessed()
                completed.append(appointment.appointment_id)
                logger.info(
                    "appointment_completed",
                    appointment_id=appointment.appointment_id,
                    employee_number=appointment.employee_number,
                )
            except _AlreadyProcessed:
                logger.info("appointment_already_processed", appointment_id=appointment.appointment_id)
            except Exception as e:
                reason = (str(e) or type(e).__name__)[:MAX_FAILURE_REASON_LENGTH]
                logger.error(
                    "appointment_failed",
                    appointment_id=appointment.appointment_id,
                    employee_number=appointment.employee_number,
                    reason=reason,
                    exc_info=True,
                )
                failed[appointment.appointment_id] = reason
                try:
                    with self._uow.transaction() as tx:
                        tx.appointments.mark(
                            appointment_id=appointment.appointment_id,
                            status=AppointmentStatus.FAILED,
                            failure_reason=reason,
                        )
                except Exception:
                    # Row stays WAITING and is picked up again by the next sweep.
                    logger.error("appointment_fail_mark_failed", appointment_id=appointment.appointment_id, exc_info=True)

        logger.info("appointment_sweep_finished", run_date=run_date.isoformat(), completed=len(completed), failed=len(failed))
        return SweepReport(run_date=run_date, completed=completed, failed=failed)


class _AlreadyProcessed(Exception):
    pass
