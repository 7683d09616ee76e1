from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import CandidateStatus
from ..database.mysql_base import fetchall, fetchone, in_placeholders
from .model import NewCandidate, PromotionCandidate, PromotionDetail, PromotionPlan
from .repository import PromotionRepository

_CANDIDATE_COLUMNS = """
    c.candidate_id, c.detail_id, c.employee_id, c.evaluation_point, c.status,
    c.nominator_id, c.nomination_reason, c.comment
"""


def _to_candidate(r: dict) -> PromotionCandidate:
    return PromotionCandidate(
        candidate_id=int(r["candidate_id"]),
        detail_id=int(r["detail_id"]),
        employee_id=int(r["employee_id"]),
        evaluation_point=int(r["evaluation_point"]),
        status=CandidateStatus(r["status"]),
        nominator_id=r.get("nominator_id"),
        nomination_reason=r.get("nomination_reason"),
        comment=r.get("comment"),
    )


def _to_detail(r: dict) -> PromotionDetail:
    return PromotionDetail(
        detail_id=int(r["detail_id"]),
        plan_id=int(r["plan_id"]),
        department_id=int(r["department_id"]),
        target_grade_id=int(r["target_grade_id"]),
        quota_count=int(r["quota_count"]),
    )


class MySQLPromotionRepository(PromotionRepository):
    """Promotion tables accessed through the cursor of the surrounding unit of work."""

    def __init__(self, cur):
        self._cur = cur

    # -------- Plans / details --------
    def create_plan(
        self,
        *,
        plan_name: str,
        nomination_deadline: date,
        appointment_date: date,
        plan_content: Optional[str],
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO promotion_plans(plan_name, nomination_deadline, appointment_date, plan_content)
            VALUES(%s,%s,%s,%s)
            """,
            (plan_name, nomination_deadline, appointment_date, plan_content),
        )
        return int(self._cur.lastrowid)

    def get_plan(self, *, plan_id: int) -> Optional[PromotionPlan]:
        self._cur.execute(
            """
            SELECT plan_id, plan_name, nomination_deadline, appointment_date, plan_content
            FROM promotion_plans
            WHERE plan_id=%s
            """,
            (int(plan_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return PromotionPlan(
            plan_id=int(r["plan_id"]),
            plan_name=r["plan_name"],
            nomination_deadline=r["nomination_deadline"],
            appointment_date=r["appointment_date"],
            plan_content=r.get("plan_content"),
        )

    def create_detail(self, *, plan_id: int, department_id: int, target_grade_id: int, quota_count: int) -> int:
        self._cur.execute(
            """
            INSERT INTO promotion_details(plan_id, department_id, target_grade_id, quota_count)
            VALUES(%s,%s,%s,%s)
            """,
            (int(plan_id), int(department_id), int(target_grade_id), int(quota_count)),
        )
        return int(self._cur.lastrowid)

    def get_detail(self, *, detail_id: int) -> Optional[PromotionDetail]:
        self._cur.execute(
            """
            SELECT detail_id, plan_id, department_id, target_grade_id, quota_count
            FROM promotion_details
            WHERE detail_id=%s
            """,
            (int(detail_id),),
        )
        r = fetchone(self._cur)
        return _to_detail(r) if r else None

    def lock_detail(self, *, detail_id: int) -> Optional[PromotionDetail]:
        self._cur.execute(
            """
            SELECT detail_id, plan_id, department_id, target_grade_id, quota_count
            FROM promotion_details
            WHERE detail_id=%s
            FOR UPDATE
            """,
            (int(detail_id),),
        )
        r = fetchone(self._cur)
        return _to_detail(r) if r else None

    # -------- Candidates --------
    def bulk_create_candidates(self, *, detail_id: int, candidates: Sequence[NewCandidate]) -> int:
        if not candidates:
            return 0
        self._cur.executemany(
            """
            INSERT INTO promotion_candidates(detail_id, employee_id, evaluation_point, status)
            VALUES(%s,%s,%s,%s)
            """,
            [
                (int(detail_id), int(c.employee_id), int(c.evaluation_point), CandidateStatus.WAITING.value)
                for c in candidates
            ],
        )
        return len(candidates)

    def get_candidate(self, *, candidate_id: int) -> Optional[PromotionCandidate]:
        self._cur.execute(
            f"""
            SELECT {_CANDIDATE_COLUMNS}
            FROM promotion_candidates c
            WHERE c.candidate_id=%s
            """,
            (int(candidate_id),),
        )
        r = fetchone(self._cur)
        return _to_candidate(r) if r else None

    def list_candidates(self, *, detail_id: int) -> Sequence[PromotionCandidate]:
        self._cur.execute(
            f"""
            SELECT {_CANDIDATE_COLUMNS}
            FROM promotion_candidates c
            WHERE c.detail_id=%s
            ORDER BY c.evaluation_point DESC, c.candidate_id
            """,
            (int(detail_id),),
        )
        return [_to_candidate(r) for r in fetchall(self._cur)]

    def find_candidate_by_employee_number(
        self,
        *,
        employee_number: str,
        status: CandidateStatus,
    ) -> Optional[PromotionCandidate]:
        self._cur.execute(
            f"""
            SELECT {_CANDIDATE_COLUMNS}
            FROM promotion_candidates c
            JOIN employees e ON e.employee_id = c.employee_id
            WHERE e.employee_number=%s AND c.status=%s
            ORDER BY c.candidate_id DESC
            LIMIT 1
            """,
            (employee_number, status.value),
        )
        r = fetchone(self._cur)
        return _to_candidate(r) if r else None

    def count_candidates(self, *, detail_id: int, statuses: Iterable[CandidateStatus]) -> int:
        # Locking read: sees rows committed after this transaction's snapshot was taken.
        values = [s.value for s in statuses]
        self._cur.execute(
            f"""
            SELECT COUNT(*) AS cnt
            FROM promotion_candidates
            WHERE detail_id=%s AND status IN ({in_placeholders(values)})
            FOR SHARE
            """,
            tuple([int(detail_id)] + values),
        )
        r = fetchone(self._cur)
        return int(r["cnt"]) if r else 0

    def update_nomination(
        self,
        *,
        candidate_id: int,
        nominator_id: Optional[int],
        nomination_reason: Optional[str],
    ) -> bool:
        self._cur.execute(
            """
            UPDATE promotion_candidates
            SET nominator_id=%s, nomination_reason=%s
            WHERE candidate_id=%s
            """,
            (nominator_id, nomination_reason, int(candidate_id)),
        )
        return self._cur.rowcount > 0

    def transition_status(
        self,
        *,
        candidate_id: int,
        expected: CandidateStatus,
        status: CandidateStatus,
        comment: Optional[str] = None,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE promotion_candidates
            SET status=%s, comment=%s
            WHERE candidate_id=%s AND status=%s
            """,
            (status.value, comment, int(candidate_id), expected.value),
        )
        return self._cur.rowcount > 0
