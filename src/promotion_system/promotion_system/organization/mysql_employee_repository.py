from __future__ import annotations

from typing import Optional

from ..core.enums import ChangeType
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, cur):
        self._cur = cur

    def update_grade(self, *, employee_id: int, grade_id: int) -> bool:
        self._cur.execute(
            "UPDATE employees SET grade_id=%s WHERE employee_id=%s",
            (int(grade_id), int(employee_id)),
        )
        return self._cur.rowcount > 0

    def update_department(self, *, employee_id: int, department_id: int) -> bool:
        self._cur.execute(
            "UPDATE employees SET department_id=%s WHERE employee_id=%s",
            (int(department_id), int(employee_id)),
        )
        return self._cur.rowcount > 0

    def update_job_title(self, *, employee_id: int, job_title_id: int) -> bool:
        self._cur.execute(
            "UPDATE employees SET job_title_id=%s WHERE employee_id=%s",
            (int(job_title_id), int(employee_id)),
        )
        return self._cur.rowcount > 0

    def append_grade_history(
        self,
        *,
        employee_id: int,
        changed_by: Optional[int],
        change_type: ChangeType,
        grade_name: str,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO employee_grade_history(employee_id, changed_by, change_type, grade_name, changed_at)
            VALUES(%s,%s,%s,%s,NOW())
            """,
            (int(employee_id), changed_by, change_type.value, grade_name),
        )
        return int(self._cur.lastrowid)
