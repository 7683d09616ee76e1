from __future__ import annotations

import structlog

from ..organization.department_tree import DepartmentTreeWalker
from ..organization.grade_ladder import GradeLadderResolver
from ..organization.repository import Directory
from .model import NewCandidate, PromotionDetail
from .repository import PromotionRepository

logger = structlog.get_logger(__name__)


class CandidateDiscoveryEngine:
    """Register every eligible employee of a Detail's department subtree as a WAITING candidate."""

    def __init__(
        self,
        promotions: PromotionRepository,
        directory: Directory,
        *,
        ladder: GradeLadderResolver | None = None,
        tree: DepartmentTreeWalker | None = None,
    ):
        self._promotions = promotions
        self._directory = directory
        self._ladder = ladder or GradeLadderResolver(directory)
        self._tree = tree or DepartmentTreeWalker(directory)

    def discover(self, detail: PromotionDetail) -> int:
        source = self._ladder.resolve(detail.target_grade_id)
        department_ids = self._tree.expand(detail.department_id)

        employees = self._directory.find_promotion_candidates(
            department_ids=department_ids,
            grade_id=source.candidate_grade.grade_id,
            min_point=source.required_point,
        )

        new_candidates: list[NewCandidate] = []
        for emp in employees:
            if emp.evaluation_point is None:
                logger.warning("candidate_skipped_without_point", detail_id=detail.detail_id, employee_id=emp.employee_id)
                continue
            new_candidates.append(NewCandidate(employee_id=emp.employee_id, evaluation_point=int(emp.evaluation_point)))

        created = 0
        if new_candidates:
            created = self._promotions.bulk_create_candidates(detail_id=detail.detail_id, candidates=new_candidates)

        logger.info(
            "candidates_registered",
            detail_id=detail.detail_id,
            target_grade=source.target_grade.grade_name,
            candidate_grade=source.candidate_grade.grade_name,
            required_point=source.required_point,
            departments=len(department_ids),
            created=created,
        )
        return created
