from __future__ import annotations

from typing import Optional

import structlog

from ..common.validators import optional_text
from ..core.enums import QUOTA_HOLDING_STATUSES, CandidateStatus
from ..core.exceptions import (
    CandidateNotFoundError,
    DetailNotFoundError,
    GradeNotFoundError,
    InvalidStateError,
    QuotaExceededError,
)
from ..organization.repository import Directory
from .grade_change import GradeChangeExecutor
from .model import PromotionCandidate
from .repository import PromotionRepository

logger = structlog.get_logger(__name__)


class ReviewStateMachine:
    """Two-stage review: WAITING -> REVIEW_PASSED/REJECTED -> FINAL_APPROVED/REJECTED.

    Must run inside a single transaction: the quota count relies on the Detail
    row lock taken by `lock_detail` being held until the status write commits.
    """

    def __init__(self, promotions: PromotionRepository, directory: Directory, grade_changer: GradeChangeExecutor):
        self._promotions = promotions
        self._directory = directory
        self._grade_changer = grade_changer

    def _get_candidate(self, candidate_id: int) -> PromotionCandidate:
        candidate = self._promotions.get_candidate(candidate_id=int(candidate_id))
        if not candidate:
            raise CandidateNotFoundError(f"Candidate {candidate_id} does not exist")
        return candidate

    def _transition(self, candidate: PromotionCandidate, status: CandidateStatus, comment: Optional[str]) -> None:
        moved = self._promotions.transition_status(
            candidate_id=candidate.candidate_id,
            expected=candidate.status,
            status=status,
            comment=comment,
        )
        if not moved:
            # Someone else changed the row between our read and write.
            raise InvalidStateError(f"Candidate {candidate.candidate_id} is no longer {candidate.status.value}")

    def review_candidate(self, *, candidate_id: int, is_passed: bool, comment: Optional[str] = None) -> CandidateStatus:
        candidate = self._get_candidate(candidate_id)
        if candidate.status != CandidateStatus.WAITING:
            raise InvalidStateError(f"Candidate {candidate.candidate_id} has already been reviewed")

        if is_passed:
            detail = self._promotions.lock_detail(detail_id=candidate.detail_id)
            if not detail:
                raise DetailNotFoundError(f"Detail {candidate.detail_id} does not exist")

            passed = self._promotions.count_candidates(detail_id=detail.detail_id, statuses=QUOTA_HOLDING_STATUSES)
            if passed >= detail.quota_count:
                logger.info(
                    "review_quota_exceeded",
                    candidate_id=candidate.candidate_id,
                    detail_id=detail.detail_id,
                    passed=passed,
                    quota=detail.quota_count,
                )
                raise QuotaExceededError(f"Quota {detail.quota_count} already reached for detail {detail.detail_id}")

        status = CandidateStatus.REVIEW_PASSED if is_passed else CandidateStatus.REVIEW_REJECTED
        self._transition(candidate, status, optional_text(comment))
        logger.info("candidate_reviewed", candidate_id=candidate.candidate_id, status=status.value)
        return status

    def confirm_final_approval(
        self,
        *,
        candidate_id: int,
        is_passed: bool,
        comment: Optional[str] = None,
        approved_by: Optional[int] = None,
    ) -> CandidateStatus:
        candidate = self._get_candidate(candidate_id)
        if candidate.status != CandidateStatus.REVIEW_PASSED:
            raise InvalidStateError(f"Candidate {candidate.candidate_id} has not passed review")

        status = CandidateStatus.FINAL_APPROVED if is_passed else CandidateStatus.FINAL_REJECTED
        self._transition(candidate, status, optional_text(comment))

        if is_passed:
            detail = self._promotions.get_detail(detail_id=candidate.detail_id)
            if not detail:
                raise DetailNotFoundError(f"Detail {candidate.detail_id} does not exist")
            grade = self._directory.get_grade(detail.target_grade_id)
            if not grade:
                raise GradeNotFoundError(f"Target grade {detail.target_grade_id} does not exist")
            self._grade_changer.apply(employee_id=candidate.employee_id, grade=grade, changed_by=approved_by)

        logger.info("candidate_finalized", candidate_id=candidate.candidate_id, status=status.value)
        return status
