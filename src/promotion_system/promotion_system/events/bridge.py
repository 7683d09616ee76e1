from __future__ import annotations

from enum import Enum

import structlog

from ..common.payload import get_int, get_str, parse_payload
from ..core.constants import PERSONNEL_APPOINTMENT_FORM_KEY
from ..core.enums import PromotionType
from ..core.exceptions import GradeNotFoundError, InvalidPayloadError
from ..database.unit_of_work import UnitOfWork
from ..promotions.service import PromotionService
from .model import ApprovalCompleted, ApprovalRejected

logger = structlog.get_logger(__name__)


class BridgeOutcome(str, Enum):
    IGNORED = "IGNORED"
    PROMOTED = "PROMOTED"
    FINAL_APPROVED = "FINAL_APPROVED"
    FINAL_REJECTED = "FINAL_REJECTED"
    NO_OP = "NO_OP"


class ExternalEventBridge:
    """Translate approval-document signals into promotion state-machine calls.

    Failures propagate to the caller; there are no retries here. Re-delivered
    signals fail on the REVIEW_PASSED precondition instead of promoting twice.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        promotions: PromotionService,
        *,
        form_key: str = PERSONNEL_APPOINTMENT_FORM_KEY,
    ):
        self._uow = uow
        self._promotions = promotions
        self._form_key = form_key

    @staticmethod
    def _promotion_type(details: dict) -> PromotionType:
        # Only an exact "SPECIAL" marks a special promotion; any other value is regular.
        if get_str(details, "promotionType") == PromotionType.SPECIAL.value:
            return PromotionType.SPECIAL
        return PromotionType.REGULAR

    @staticmethod
    def _candidate_id(details: dict, doc_id: int) -> int:
        candidate_id = get_int(details, "candidateId")
        if candidate_id is None:
            raise InvalidPayloadError(f"candidateId is missing in document {doc_id}")
        return candidate_id

    def _resolve_target_grade_id(self, details: dict) -> int:
        grade_id = get_int(details, "targetGradeId")
        if grade_id is not None:
            return grade_id

        grade_name = get_str(details, "gradeAfter")
        if not grade_name:
            raise InvalidPayloadError("gradeAfter or targetGradeId is required for a special promotion")
        with self._uow.transaction() as tx:
            grade = tx.directory.find_grade_by_name(grade_name)
        if not grade:
            raise GradeNotFoundError(f"Grade '{grade_name}' does not exist")
        return grade.grade_id

    def dispatch(self, event: ApprovalCompleted | ApprovalRejected) -> BridgeOutcome:
        """Run the handler for `event` in the caller's thread; its failure reaches that caller."""
        if isinstance(event, ApprovalCompleted):
            return self.handle_completed(event)
        if isinstance(event, ApprovalRejected):
            return self.handle_rejected(event)
        raise TypeError(f"No handler for {type(event).__name__}")

    def handle_completed(self, event: ApprovalCompleted) -> BridgeOutcome:
        if event.form_key != self._form_key:
            logger.debug("approval_event_ignored", doc_id=event.doc_id, form_key=event.form_key)
            return BridgeOutcome.IGNORED

        log = logger.bind(doc_id=event.doc_id, submitter_id=event.submitter_id)
        log.info("approval_completed_received", title=event.title)
        try:
            details = parse_payload(event.payload_json)
            if self._promotion_type(details) == PromotionType.SPECIAL:
                employee_id = get_int(details, "employeeId")
                if employee_id is None:
                    raise InvalidPayloadError(f"employeeId is missing in document {event.doc_id}")
                target_grade_id = self._resolve_target_grade_id(details)
                self._promotions.promote_directly(
                    employee_id=employee_id,
                    target_grade_id=target_grade_id,
                    reason=get_str(details, "reason"),
                    changed_by=event.submitter_id,
                )
                log.info("special_promotion_applied", employee_id=employee_id, target_grade_id=target_grade_id)
                return BridgeOutcome.PROMOTED

            candidate_id = self._candidate_id(details, event.doc_id)
            self._promotions.confirm_final_approval(
                candidate_id=candidate_id,
                is_passed=True,
                approved_by=event.submitter_id,
            )
            log.info("regular_promotion_applied", candidate_id=candidate_id)
            return BridgeOutcome.FINAL_APPROVED
        except Exception:
            log.error("approval_completed_failed", exc_info=True)
            raise

    def handle_rejected(self, event: ApprovalRejected) -> BridgeOutcome:
        if event.form_key != self._form_key:
            logger.debug("approval_event_ignored", doc_id=event.doc_id, form_key=event.form_key)
            return BridgeOutcome.IGNORED

        log = logger.bind(doc_id=event.doc_id, submitter_id=event.submitter_id)
        log.info("approval_rejected_received")
        try:
            details = parse_payload(event.payload_json)
            if self._promotion_type(details) == PromotionType.SPECIAL:
                # Nothing was persisted for a special promotion before approval.
                log.info("special_promotion_rejected")
                return BridgeOutcome.NO_OP

            candidate_id = self._candidate_id(details, event.doc_id)
            self._promotions.confirm_final_approval(
                candidate_id=candidate_id,
                is_passed=False,
                comment=event.comment,
                approved_by=event.submitter_id,
            )
            log.info("regular_promotion_rejected", candidate_id=candidate_id)
            return BridgeOutcome.FINAL_REJECTED
        except Exception:
            log.error("approval_rejected_failed", exc_info=True)
            raise

