from __future__ import annotations

from datetime import date
from typing import Optional

import structlog

from ..common.datetime_utils import today_local
from ..common.validators import require_non_empty
from ..core.exceptions import (
    AccessDeniedError,
    CandidateNotFoundError,
    EmployeeNotFoundError,
    NominationPeriodExpiredError,
    PlanFinishedError,
    PlanNotFoundError,
    SelfNominationNotAllowedError,
)
from ..organization.repository import Directory
from .model import PromotionCandidate, PromotionPlan
from .repository import PromotionRepository

logger = structlog.get_logger(__name__)


class NominationManager:
    def __init__(self, promotions: PromotionRepository, directory: Directory):
        self._promotions = promotions
        self._directory = directory

    def _load(self, candidate_id: int) -> tuple[PromotionCandidate, PromotionPlan]:
        candidate = self._promotions.get_candidate(candidate_id=int(candidate_id))
        if not candidate:
            raise CandidateNotFoundError(f"Candidate {candidate_id} does not exist")

        detail = self._promotions.get_detail(detail_id=candidate.detail_id)
        plan = self._promotions.get_plan(plan_id=detail.plan_id) if detail else None
        if not plan:
            raise PlanNotFoundError(f"No plan owns candidate {candidate_id}")
        return candidate, plan

    @staticmethod
    def _check_period(plan: PromotionPlan, today: date) -> None:
        if today > plan.nomination_deadline:
            raise NominationPeriodExpiredError()
        if today > plan.appointment_date:
            raise PlanFinishedError()

    def nominate(
        self,
        *,
        nominator_id: int,
        candidate_id: int,
        reason: str,
        today: Optional[date] = None,
    ) -> None:
        candidate, plan = self._load(candidate_id)
        self._check_period(plan, today or today_local())

        if int(nominator_id) == candidate.employee_id:
            raise SelfNominationNotAllowedError()

        if not self._directory.get_employee(int(nominator_id)):
            raise EmployeeNotFoundError(f"Nominator {nominator_id} does not exist")

        reason = require_non_empty(reason, "Nomination reason")
        self._promotions.update_nomination(
            candidate_id=candidate.candidate_id,
            nominator_id=int(nominator_id),
            nomination_reason=reason,
        )
        logger.info(
            "candidate_nominated",
            candidate_id=candidate.candidate_id,
            nominator_id=nominator_id,
            replaced_nominator_id=candidate.nominator_id,
        )

    def cancel_nomination(self, *, candidate_id: int, requester_id: int, today: Optional[date] = None) -> None:
        candidate, plan = self._load(candidate_id)
        self._check_period(plan, today or today_local())

        if candidate.nominator_id is None or candidate.nominator_id != int(requester_id):
            raise AccessDeniedError()

        self._promotions.update_nomination(candidate_id=candidate.candidate_id, nominator_id=None, nomination_reason=None)
        logger.info("nomination_cancelled", candidate_id=candidate.candidate_id, requester_id=requester_id)
