from __future__ import annotations

from enum import Enum


class CandidateStatus(str, Enum):
    """Where a candidate stands in the two-stage review."""

    WAITING = "WAITING"
    REVIEW_PASSED = "REVIEW_PASSED"
    REVIEW_REJECTED = "REVIEW_REJECTED"
    FINAL_APPROVED = "FINAL_APPROVED"
    FINAL_REJECTED = "FINAL_REJECTED"


# Statuses that occupy a quota slot of their Detail.
QUOTA_HOLDING_STATUSES = (CandidateStatus.REVIEW_PASSED, CandidateStatus.FINAL_APPROVED)


class ChangeType(str, Enum):
    PROMOTION = "P"
    TRANSFER = "TR"
    UPDATE = "U"


class PromotionType(str, Enum):
    REGULAR = "REGULAR"
    SPECIAL = "SPECIAL"


class AppointmentStatus(str, Enum):
    WAITING = "WAITING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
