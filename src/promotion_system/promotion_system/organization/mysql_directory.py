from __future__ import annotations

from typing import Optional, Sequence

from ..database.mysql_base import fetchall, fetchone, in_placeholders
from .model import Department, Employee, Grade, JobTitle
from .repository import Directory

_EMPLOYEE_COLUMNS = """
    employee_id, employee_number, employee_name, department_id, grade_id, job_title_id, evaluation_point
"""


def _to_grade(r: dict) -> Grade:
    return Grade(
        grade_id=int(r["grade_id"]),
        grade_name=r["grade_name"],
        rank=int(r["grade_rank"]),
        required_point=r.get("required_point"),
    )


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_number=r["employee_number"],
        employee_name=r["employee_name"],
        department_id=r.get("department_id"),
        grade_id=r.get("grade_id"),
        job_title_id=r.get("job_title_id"),
        evaluation_point=r.get("evaluation_point"),
    )


class MySQLDirectory(Directory):
    def __init__(self, cur):
        self._cur = cur

    def list_grades(self) -> Sequence[Grade]:
        self._cur.execute("SELECT grade_id, grade_name, grade_rank, required_point FROM grades ORDER BY grade_rank")
        return [_to_grade(r) for r in fetchall(self._cur)]

    def get_grade(self, grade_id: int) -> Optional[Grade]:
        self._cur.execute(
            "SELECT grade_id, grade_name, grade_rank, required_point FROM grades WHERE grade_id=%s",
            (int(grade_id),),
        )
        r = fetchone(self._cur)
        return _to_grade(r) if r else None

    def find_grade_by_name(self, grade_name: str) -> Optional[Grade]:
        self._cur.execute(
            "SELECT grade_id, grade_name, grade_rank, required_point FROM grades WHERE grade_name=%s",
            (grade_name,),
        )
        r = fetchone(self._cur)
        return _to_grade(r) if r else None

    def list_child_department_ids(self, department_id: int) -> Sequence[int]:
        self._cur.execute(
            "SELECT department_id FROM departments WHERE parent_department_id=%s ORDER BY department_id",
            (int(department_id),),
        )
        return [int(r["department_id"]) for r in fetchall(self._cur)]

    def find_department_by_name(self, department_name: str) -> Optional[Department]:
        self._cur.execute(
            """
            SELECT department_id, department_name, parent_department_id
            FROM departments
            WHERE department_name=%s
            """,
            (department_name,),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Department(
            department_id=int(r["department_id"]),
            department_name=r["department_name"],
            parent_id=r.get("parent_department_id"),
        )

    def find_job_title_by_name(self, job_title_name: str) -> Optional[JobTitle]:
        self._cur.execute(
            "SELECT job_title_id, job_title_name FROM job_titles WHERE job_title_name=%s",
            (job_title_name,),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return JobTitle(job_title_id=int(r["job_title_id"]), job_title_name=r["job_title_name"])

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        self._cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
        r = fetchone(self._cur)
        return _to_employee(r) if r else None

    def get_employee_by_number(self, employee_number: str) -> Optional[Employee]:
        self._cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_number=%s", (employee_number,))
        r = fetchone(self._cur)
        return _to_employee(r) if r else None

    def find_promotion_candidates(
        self,
        *,
        department_ids: Sequence[int],
        grade_id: int,
        min_point: int,
    ) -> Sequence[Employee]:
        if not department_ids:
            return []
        ids = [int(d) for d in department_ids]
        self._cur.execute(
            f"""
            SELECT {_EMPLOYEE_COLUMNS}
            FROM employees
            WHERE department_id IN ({in_placeholders(ids)})
              AND grade_id=%s
              AND evaluation_point >= %s
            ORDER BY evaluation_point DESC, employee_id
            """,
            tuple(ids + [int(grade_id), int(min_point)]),
        )
        return [_to_employee(r) for r in fetchall(self._cur)]
