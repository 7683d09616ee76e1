from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import CandidateStatus
from .model import NewCandidate, PromotionCandidate, PromotionDetail, PromotionPlan


class PromotionRepository(Protocol):
    # Plans / details
    def create_plan(
        self,
        *,
        plan_name: str,
        nomination_deadline: date,
        appointment_date: date,
        plan_content: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_plan(self, *, plan_id: int) -> Optional[PromotionPlan]:
        raise NotImplementedError

    def create_detail(self, *, plan_id: int, department_id: int, target_grade_id: int, quota_count: int) -> int:
        raise NotImplementedError

    def get_detail(self, *, detail_id: int) -> Optional[PromotionDetail]:
        raise NotImplementedError

    def lock_detail(self, *, detail_id: int) -> Optional[PromotionDetail]:
        """Read the detail and hold a row lock on it until the transaction ends."""

        raise NotImplementedError

    # Candidates
    def bulk_create_candidates(self, *, detail_id: int, candidates: Sequence[NewCandidate]) -> int:
        """Insert WAITING candidates; return the number of rows written."""

        raise NotImplementedError

    def get_candidate(self, *, candidate_id: int) -> Optional[PromotionCandidate]:
        raise NotImplementedError

    def list_candidates(self, *, detail_id: int) -> Sequence[PromotionCandidate]:
        raise NotImplementedError

    def find_candidate_by_employee_number(
        self,
        *,
        employee_number: str,
        status: CandidateStatus,
    ) -> Optional[PromotionCandidate]:
        raise NotImplementedError

    def count_candidates(self, *, detail_id: int, statuses: Iterable[CandidateStatus]) -> int:
        raise NotImplementedError

    def update_nomination(
        self,
        *,
        candidate_id: int,
        nominator_id: Optional[int],
        nomination_reason: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def transition_status(
        self,
        *,
        candidate_id: int,
        expected: CandidateStatus,
        status: CandidateStatus,
        comment: Optional[str] = None,
    ) -> bool:
        """Compare-and-set: only rows still in `expected` move to `status`."""

        raise NotImplementedError
