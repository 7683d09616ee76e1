from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ChangeType
from .model import Department, Employee, Grade, JobTitle


class Directory(Protocol):
    """Read-only port over the employee/department/grade master data.

    Note: the promotion core depends on this interface, never on a concrete DB.
    """

    def list_grades(self) -> Sequence[Grade]:
        """Return the whole grade ladder ordered by rank (lowest first)."""

        raise NotImplementedError

    def get_grade(self, grade_id: int) -> Optional[Grade]:
        raise NotImplementedError

    def find_grade_by_name(self, grade_name: str) -> Optional[Grade]:
        raise NotImplementedError

    def list_child_department_ids(self, department_id: int) -> Sequence[int]:
        raise NotImplementedError

    def find_department_by_name(self, department_name: str) -> Optional[Department]:
        raise NotImplementedError

    def find_job_title_by_name(self, job_title_name: str) -> Optional[JobTitle]:
        raise NotImplementedError

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_employee_by_number(self, employee_number: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_promotion_candidates(
        self,
        *,
        department_ids: Sequence[int],
        grade_id: int,
        min_point: int,
    ) -> Sequence[Employee]:
        """Employees of `grade_id` inside `department_ids` with evaluation_point >= min_point,
        ordered by evaluation point descending."""

        raise NotImplementedError


class EmployeeRepository(Protocol):
    """Write side of the employee aggregate used by this core."""

    def update_grade(self, *, employee_id: int, grade_id: int) -> bool:
        raise NotImplementedError

    def update_department(self, *, employee_id: int, department_id: int) -> bool:
        raise NotImplementedError

    def update_job_title(self, *, employee_id: int, job_title_id: int) -> bool:
        raise NotImplementedError

    def append_grade_history(
        self,
        *,
        employee_id: int,
        changed_by: Optional[int],
        change_type: ChangeType,
        grade_name: str,
    ) -> int:
        raise NotImplementedError
