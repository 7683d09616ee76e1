from __future__ import annotations

from typing import Optional

import structlog

from ..core.enums import ChangeType
from ..core.exceptions import EmployeeNotFoundError
from ..organization.model import Grade
from ..organization.repository import EmployeeRepository

logger = structlog.get_logger(__name__)


class GradeChangeExecutor:
    """Set an employee's current grade and append the matching GradeHistory row.

    No precondition checks here: callers guarantee one invocation per approval.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def apply(self, *, employee_id: int, grade: Grade, changed_by: Optional[int] = None) -> int:
        if not self._employees.update_grade(employee_id=int(employee_id), grade_id=grade.grade_id):
            raise EmployeeNotFoundError(f"Employee {employee_id} does not exist")

        history_id = self._employees.append_grade_history(
            employee_id=int(employee_id),
            changed_by=changed_by,
            change_type=ChangeType.PROMOTION,
            grade_name=grade.grade_name,
        )
        logger.info(
            "grade_changed",
            employee_id=employee_id,
            grade_id=grade.grade_id,
            grade_name=grade.grade_name,
            changed_by=changed_by,
            history_id=history_id,
        )
        return history_id
