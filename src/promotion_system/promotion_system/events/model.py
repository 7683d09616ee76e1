from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ApprovalCompleted:
    """Published by the approval workflow once the document's final approval is committed."""

    doc_id: int
    form_key: str
    payload_json: str
    submitter_id: Optional[int]
    title: Optional[str] = None


@dataclass(frozen=True)
class ApprovalRejected:
    doc_id: int
    form_key: str
    payload_json: str
    submitter_id: Optional[int]
    comment: Optional[str] = None
