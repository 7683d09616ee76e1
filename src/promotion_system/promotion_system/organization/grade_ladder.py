from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import MIN_PROMOTION_TARGET_POSITION
from ..core.exceptions import GradeNotFoundError, InvalidPromotionTargetGradeError
from .model import Grade
from .repository import Directory


@dataclass(frozen=True)
class PromotionSource:
    """Which grade feeds a promotion target, and the point bar to clear."""

    target_grade: Grade
    candidate_grade: Grade
    required_point: int


class GradeLadderResolver:
    def __init__(self, directory: Directory):
        self._directory = directory

    def resolve(self, target_grade_id: int) -> PromotionSource:
        ladder = sorted(self._directory.list_grades(), key=lambda g: g.rank)

        position = next((i for i, g in enumerate(ladder) if g.grade_id == int(target_grade_id)), None)
        if position is None:
            raise GradeNotFoundError(f"Target grade {target_grade_id} does not exist")

        target = ladder[position]
        if position < MIN_PROMOTION_TARGET_POSITION:
            raise InvalidPromotionTargetGradeError(f"Grade '{target.grade_name}' cannot be a promotion target")

        return PromotionSource(
            target_grade=target,
            candidate_grade=ladder[position - 1],
            required_point=int(target.required_point or 0),
        )
