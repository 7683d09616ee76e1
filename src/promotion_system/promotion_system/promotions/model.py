from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import CandidateStatus


@dataclass(frozen=True)
class PromotionPlan:
    plan_id: int
    plan_name: str
    nomination_deadline: date
    appointment_date: date
    plan_content: Optional[str] = None


@dataclass(frozen=True)
class PromotionDetail:
    detail_id: int
    plan_id: int
    department_id: int
    target_grade_id: int
    quota_count: int


@dataclass(frozen=True)
class PromotionCandidate:
    candidate_id: int
    detail_id: int
    employee_id: int
    evaluation_point: int
    status: CandidateStatus
    nominator_id: Optional[int] = None
    nomination_reason: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class NewDetailPlan:
    department_id: int
    target_grade_id: int
    quota_count: int


@dataclass(frozen=True)
class NewCandidate:
    employee_id: int
    evaluation_point: int
