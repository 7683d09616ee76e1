from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ChangeType


@dataclass(frozen=True)
class Grade:
    """A rung on the grade ladder.

    `rank` is the persisted seniority order; a higher rank is more senior.
    """

    grade_id: int
    grade_name: str
    rank: int
    required_point: Optional[int] = None


@dataclass(frozen=True)
class Department:
    department_id: int
    department_name: str
    parent_id: Optional[int] = None


@dataclass(frozen=True)
class JobTitle:
    job_title_id: int
    job_title_name: str


@dataclass(frozen=True)
class Employee:
    """Read-only snapshot of the employee master record."""

    employee_id: int
    employee_number: str
    employee_name: str
    department_id: Optional[int]
    grade_id: Optional[int]
    job_title_id: Optional[int] = None
    evaluation_point: Optional[int] = None


@dataclass(frozen=True)
class GradeHistory:
    history_id: int
    employee_id: int
    changed_by: Optional[int]
    change_type: ChangeType
    grade_name: str
    changed_at: datetime
